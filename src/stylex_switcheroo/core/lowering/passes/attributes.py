"""
Attribute Selector Pass.

`&[disabled]`, `&[type="checkbox"]`, `&[href^="https"]`, `&[target="_blank"]::after`
become named extra entries applied by the wrapper when the matching prop
check holds at runtime.
"""

import re
from typing import Optional

from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass
from stylex_switcheroo.core.lowering.style_info import AttributeSelectorInfo, StyleInfo
from stylex_switcheroo.core.naming import camelize
from stylex_switcheroo.core.styles.values import StyleObject
from stylex_switcheroo.enums import AttributeOperator

_ATTRIBUTE_RE = re.compile(
  r"^&\[\s*(?P<attr>[A-Za-z][\w-]*)\s*"
  r"(?:(?P<op>[\^$*]?=)\s*(?P<value>\"[^\"]*\"|'[^']*'|[^\]\s]+)\s*)?\]"
  r"(?P<element>::(?:before|after))?$"
)

# Readable suffixes for the attribute checks that show up most in practice.
_KNOWN_SUFFIXES = {
  ("target", "_blank"): "External",
  ("href", "https"): "Https",
  ("href", ".pdf"): "Pdf",
}


def _unquote(value: Optional[str]) -> Optional[str]:
  if value and value[0] in "\"'" and value[-1] == value[0]:
    return value[1:-1]
  return value


def attribute_suffix(attribute: str, value: Optional[str]) -> str:
  """`type="checkbox"` -> `Checkbox`, `[readonly]` -> `Readonly`."""
  known = _KNOWN_SUFFIXES.get((attribute, value))
  if known:
    return known
  if value:
    return camelize(value) or camelize(attribute)
  return camelize(attribute)


class AttributeSelectorPass(LoweringPass):
  name = "attributes"

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    match = _ATTRIBUTE_RE.match(selector.strip())
    if not match:
      return False
    attribute = match.group("attr")
    value = _unquote(match.group("value"))
    operator = AttributeOperator(match.group("op") or "")
    element = match.group("element")

    key = info.style_key + attribute_suffix(attribute, value)
    info.add_extra(key, {element: dict(body)} if element else dict(body))
    info.attribute_selectors.append(
      AttributeSelectorInfo(
        style_key=key,
        attribute=attribute,
        operator=operator,
        value=value,
        pseudo_element=element,
      )
    )
    return True
