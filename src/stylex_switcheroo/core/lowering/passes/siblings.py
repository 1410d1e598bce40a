"""
Sibling Selector Pass.

- `& + &` -> `<key>AdjacentSibling`, applied when the wrapper receives
  `isAdjacentSibling`.
- `&.active ~ &` -> `<key>SiblingAfterActive`, applied when `isSiblingAfterActive`
  is set.
- `& ~ &` -> with relation markers enabled, a `stylex.when.siblingBefore`
  condition in the base object (no runtime prop); otherwise `<key>SiblingAfter`.

Call sites compute the boolean props from the JSX sibling order.
"""

import re
from typing import Optional

from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass
from stylex_switcheroo.core.lowering.style_info import SiblingSelectorInfo, StyleInfo
from stylex_switcheroo.core.naming import camelize
from stylex_switcheroo.core.styles.values import (
  DEFAULT_KEY,
  StyleObject,
  is_conditional_map,
  is_pseudo_element_key,
  sibling_before_key,
)
from stylex_switcheroo.enums import SiblingRelation

_SIBLING_RE = re.compile(r"^&(?:\.(?P<cls>[\w-]+))?\s*(?P<op>[+~])\s*&$")

SIBLING_MARKER_PSEUDO = ":is(*)"


class SiblingSelectorPass(LoweringPass):
  name = "siblings"

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    match = _SIBLING_RE.match(selector.strip())
    if not match:
      return False
    class_name = match.group("cls")
    relation = SiblingRelation.ADJACENT if match.group("op") == "+" else SiblingRelation.GENERAL

    if relation == SiblingRelation.ADJACENT:
      if class_name:
        context.report(DiagnosticType.SELECTOR_SIBLING, info, selector)
        return True
      self._add_runtime(info, body, relation, "AdjacentSibling", None)
    elif class_name:
      self._add_runtime(info, body, relation, "SiblingAfter" + camelize(class_name), class_name)
    elif context.relation_markers:
      self._add_marker_conditions(info, body, selector, context)
    else:
      self._add_runtime(info, body, relation, "SiblingAfter", None)
    info.has_sibling_pattern = True
    return True

  def _add_runtime(
    self,
    info: StyleInfo,
    body: StyleObject,
    relation: SiblingRelation,
    suffix: str,
    class_name: Optional[str],
  ) -> None:
    key = info.style_key + suffix
    info.add_extra(key, dict(body))
    info.sibling_selectors.append(
      SiblingSelectorInfo(style_key=key, relation=relation, prop_name="is" + suffix, class_name=class_name)
    )

  def _add_marker_conditions(
    self,
    info: StyleInfo,
    body: StyleObject,
    selector: str,
    context: LoweringContext,
  ) -> None:
    condition = sibling_before_key(SIBLING_MARKER_PSEUDO)
    for prop, value in body.items():
      if is_pseudo_element_key(prop) or isinstance(value, dict):
        context.report(DiagnosticType.COMPLEX_SELECTOR, info, selector)
        continue
      existing = info.styles.get(prop)
      if is_conditional_map(existing):
        existing[condition] = value
      else:
        info.styles[prop] = {DEFAULT_KEY: existing, condition: value}
    info.needs_default_marker = True
