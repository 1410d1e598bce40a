"""
Descendant Styled-Component Pass.

`${Icon} { ... }` and `&:hover ${Icon} { ... }` inside `Button` style every
`Icon` rendered inside a `Button`. StyleX has no descendant selectors, so the
body becomes an extra entry `iconInButton` that the call-site rewriter applies
to `Icon` usages nested in `Button` JSX. A pseudo on the parent side is
expressed with `stylex.when.ancestor(...)`, which requires the parent to carry
the default marker.
"""

import re
from typing import Any, Optional

from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass, base_value, strip_self
from stylex_switcheroo.core.lowering.style_info import JSXRewriteRule, RelationOverride, StyleInfo
from stylex_switcheroo.core.naming import style_key, upper_first
from stylex_switcheroo.core.styles.values import (
  DEFAULT_KEY,
  StyleKey,
  StyleObject,
  ancestor_key,
  is_pseudo_element_key,
)
from stylex_switcheroo.enums import JSXRewriteKind

_PSEUDO = r":[\w-]+(?:\([^)]*\))?"
_DESCENDANT_RE = re.compile(
  r"^(?:&(?P<ancestor>" + _PSEUDO + r")\s+)?\$\{(?P<name>[A-Za-z_$][\w$]*)\}(?P<own>" + _PSEUDO + r")?$"
)


def _conditional(default: Any, key: StyleKey, value: Any) -> Any:
  return {DEFAULT_KEY: default, key: value}


class DescendantComponentPass(LoweringPass):
  name = "descendant"

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    match = _DESCENDANT_RE.match(strip_self(selector))
    if not match:
      return False
    target = match.group("name")
    ancestor = match.group("ancestor")
    own = match.group("own")
    child = context.arena.get(target)
    cross_file = child is None and target in context.imported_components
    if child is None and not cross_file:
      return False
    if ancestor and own:
      context.report(DiagnosticType.COMPLEX_SELECTOR, info, selector)
      return True

    child_styles: StyleObject = child.styles if child is not None else {}
    override: StyleObject = {}
    for prop, value in body.items():
      if is_pseudo_element_key(prop) or not (ancestor or own):
        override[prop] = value
        continue
      if isinstance(value, dict):
        context.report(DiagnosticType.COMPLEX_SELECTOR, info, selector)
        continue
      condition: Optional[StyleKey] = ancestor_key(ancestor) if ancestor else own
      override[prop] = _conditional(base_value(child_styles, prop), condition, value)
    if not override:
      return True

    key = style_key(target) + "In" + upper_first(info.name)
    info.add_extra(key, override)
    if ancestor:
      info.needs_default_marker = True
    info.relation_overrides.append(
      RelationOverride(
        parent_style_key=info.style_key,
        child_style_key=child.style_key if child is not None else None,
        override_style_key=key,
        cross_file=cross_file,
        cross_file_component_local_name=target if cross_file else None,
      )
    )
    info.jsx_rewrite_rules.append(
      JSXRewriteRule(kind=JSXRewriteKind.DESCENDANT_STYLED_COMPONENT, style_key=key, target_component=target)
    )
    return True
