"""
Deterministic Registry Naming.

Every generated style entry name is derived from component and prop names so
repeated runs over the same input produce identical registries.
"""

import re
from typing import Any

from stylex_switcheroo.core.host.expressions import js_string

_NON_WORD = re.compile(r"[^0-9A-Za-z]+")


def lower_first(name: str) -> str:
  return name[:1].lower() + name[1:]


def upper_first(name: str) -> str:
  return name[:1].upper() + name[1:]


def style_key(component: str) -> str:
  """`PrimaryButton` -> `primaryButton`."""
  return lower_first(component.replace("$", ""))


def camelize(text: str) -> str:
  """`external-link` / `_blank` / `data state` -> `ExternalLink` / `Blank` / `DataState`."""
  parts = [p for p in _NON_WORD.split(text) if p]
  return "".join(upper_first(p) for p in parts)


def prop_suffix(prop: str) -> str:
  """
  Capitalized prop name used in variant keys.

  `$isActive` -> `Active`, `disabled` -> `Disabled`, `$size` -> `Size`.
  """
  name = prop.lstrip("$")
  if name.startswith("is") and name[2:3].isupper():
    name = name[2:]
  return upper_first(name)


def literal_suffix(value: Any) -> str:
  """Suffix for a compared literal: `"lg"` -> `Lg`, `2` -> `2`, `true` -> `True`."""
  if isinstance(value, bool):
    return "True" if value else "False"
  if value is None:
    return "Null"
  text = camelize(str(value))
  return text or "Empty"


def js_literal(value: Any) -> str:
  """Renders a Python literal as JS source."""
  if value is None:
    return "null"
  if isinstance(value, bool):
    return "true" if value else "false"
  if isinstance(value, (int, float)):
    return str(int(value)) if isinstance(value, float) and value.is_integer() else str(value)
  return js_string(str(value))
