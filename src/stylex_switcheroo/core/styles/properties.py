"""
Property Name and Value Normalization.

Maps CSS property names to StyleX tokens (camelCase, custom properties kept
verbatim) and converts raw CSS values to the literal form StyleX expects:
numbers for unitless properties, `0` as a number everywhere, quoted
`content` strings.
"""

import re
from typing import Any, Tuple

_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^-?(\d+\.?\d*|\.\d+)$")

UNITLESS_PROPERTIES = frozenset(
  {
    "animationIterationCount",
    "aspectRatio",
    "borderImageOutset",
    "borderImageSlice",
    "borderImageWidth",
    "boxFlex",
    "boxFlexGroup",
    "boxOrdinalGroup",
    "columnCount",
    "columns",
    "fillOpacity",
    "flex",
    "flexGrow",
    "flexNegative",
    "flexOrder",
    "flexPositive",
    "flexShrink",
    "floodOpacity",
    "fontWeight",
    "gridArea",
    "gridColumn",
    "gridColumnEnd",
    "gridColumnSpan",
    "gridColumnStart",
    "gridRow",
    "gridRowEnd",
    "gridRowSpan",
    "gridRowStart",
    "lineClamp",
    "lineHeight",
    "opacity",
    "order",
    "orphans",
    "scale",
    "stopOpacity",
    "strokeDasharray",
    "strokeDashoffset",
    "strokeMiterlimit",
    "strokeOpacity",
    "strokeWidth",
    "tabSize",
    "widows",
    "zIndex",
    "zoom",
  }
)

_CONTENT_KEYWORDS = ("none", "normal", "open-quote", "close-quote", "no-open-quote", "no-close-quote", "inherit")


def to_camel_case(prop: str) -> str:
  """
  Converts a CSS property name to its StyleX token.

  `background-color` -> `backgroundColor`, `-webkit-line-clamp` ->
  `WebkitLineClamp`, `-ms-flex` -> `msFlex`; custom properties are kept.

  Args:
      prop (str): CSS property name.

  Returns:
      str: The canonical token.
  """
  prop = prop.strip()
  if prop.startswith("--"):
    return prop
  prop = prop.lower()
  vendor = prop.startswith("-")
  parts = [p for p in prop.split("-") if p]
  if not parts:
    return prop
  head = parts[0]
  if vendor and head != "ms":
    head = head.capitalize()
  return head + "".join(p.capitalize() for p in parts[1:])


def to_kebab_case(token: str) -> str:
  """Inverse of `to_camel_case` for plain (non-vendor) tokens."""
  if token.startswith("--"):
    return token
  out = re.sub(r"([A-Z])", lambda m: "-" + m.group(1).lower(), token)
  if token[:1].isupper():
    out = "-" + out.lstrip("-")
  if token.startswith("ms") and token[2:3].isupper():
    out = "-" + out
  return out


def strip_important(value: str) -> Tuple[str, bool]:
  """Removes a trailing `!important`; returns `(value, had_important)`."""
  stripped = _IMPORTANT_RE.sub("", value)
  return stripped.strip(), stripped != value


def is_number(text: str) -> bool:
  return bool(_NUMBER_RE.match(text.strip()))


def _as_number(text: str) -> Any:
  value = float(text)
  if value.is_integer() and "." not in text:
    return int(value)
  return value


def quote_content(value: str) -> str:
  """Wraps a `content` value in double quotes unless it is already quoted or a keyword/function."""
  stripped = value.strip()
  if not stripped:
    return '""'
  if stripped[0] in "'\"" and stripped[-1] == stripped[0]:
    return stripped
  if stripped in _CONTENT_KEYWORDS or "(" in stripped:
    return stripped
  return f'"{stripped}"'


def normalize_value(prop: str, raw: str) -> Any:
  """
  Converts a static CSS value to a StyleX literal.

  Args:
      prop (str): Canonical (camelCase) property token.
      raw (str): CSS value text without `!important`.

  Returns:
      Any: `int`, `float` or `str`.
  """
  value = " ".join(raw.split())
  if prop == "content":
    return quote_content(value)
  if is_number(value) and not prop.startswith("--"):
    if prop in UNITLESS_PROPERTIES:
      return _as_number(value)
    if float(value) == 0:
      return 0
  return value
