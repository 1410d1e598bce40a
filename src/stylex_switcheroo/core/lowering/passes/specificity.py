"""
Specificity Escalation Pass.

`&&`, `&&&` and `.context &&` only raise specificity in styled-components.
StyleX resolves conflicts by order, so the body is merged into the base object
and the component is flagged.
"""

import re

from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass, base_value
from stylex_switcheroo.core.lowering.style_info import StyleInfo
from stylex_switcheroo.core.styles.converter import deep_merge
from stylex_switcheroo.core.styles.values import DEFAULT_KEY, StyleObject, is_conditional_map
from stylex_switcheroo.enums import Severity

_SPECIFICITY_RE = re.compile(r"^(?:\.[\w-]+\s+)?&{2,}(?P<pseudo>:[\w-]+(?:\([^)]*\))?)?$")


class SpecificityPass(LoweringPass):
  name = "specificity"

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    match = _SPECIFICITY_RE.match(selector.strip())
    if not match:
      return False
    pseudo = match.group("pseudo")
    for prop, value in body.items():
      existing = info.styles.get(prop)
      if pseudo and not isinstance(value, dict):
        if is_conditional_map(existing):
          existing[pseudo] = value
        else:
          info.styles[prop] = {DEFAULT_KEY: base_value(info.styles, prop), pseudo: value}
      elif isinstance(value, dict) and isinstance(existing, dict):
        deep_merge(existing, value)
      elif is_conditional_map(existing):
        existing[DEFAULT_KEY] = value
      elif is_conditional_map(value) and value.get(DEFAULT_KEY) is None and existing is not None:
        info.styles[prop] = {**value, DEFAULT_KEY: existing}
      else:
        info.styles[prop] = value
    info.has_specificity_hack = True
    context.diagnostics.report(
      DiagnosticType.SPECIFICITY_HACK,
      severity=Severity.INFO,
      location=info.location,
      component=info.name,
      selector=selector,
    )
    return True
