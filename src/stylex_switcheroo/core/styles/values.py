"""
Canonical Style Object Values.

A canonical style object is an ordered `dict` whose keys are property tokens,
pseudo/at-rule keys, raw selectors awaiting lowering, or `ComputedKey`
instances (`[stylex.when.ancestor(":hover")]`). Leaves are JSON-like
literals or `JsExpr` instances holding verbatim JavaScript.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class JsExpr:
  """A JavaScript expression emitted verbatim."""

  code: str

  def __str__(self) -> str:
    return self.code


@dataclass(frozen=True)
class ComputedKey:
  """An object key emitted as `[code]`."""

  code: str

  def __str__(self) -> str:
    return f"[{self.code}]"


StyleKey = Union[str, ComputedKey]
StyleValue = Any
StyleObject = Dict[StyleKey, StyleValue]

DEFAULT_KEY = "default"


def ancestor_key(pseudo: str) -> ComputedKey:
  return ComputedKey(f"stylex.when.ancestor({json.dumps(pseudo)})")


def sibling_before_key(pseudo: str) -> ComputedKey:
  return ComputedKey(f"stylex.when.siblingBefore({json.dumps(pseudo)})")


def is_pseudo_class_key(key: StyleKey) -> bool:
  return isinstance(key, str) and key.startswith(":") and not key.startswith("::")


def is_pseudo_element_key(key: StyleKey) -> bool:
  return isinstance(key, str) and key.startswith("::")


def is_condition_at_rule(key: StyleKey) -> bool:
  return isinstance(key, str) and key.startswith(("@media", "@supports", "@container"))


def is_condition_key(key: StyleKey) -> bool:
  """Keys that may appear inside a property-level conditional map."""
  return isinstance(key, ComputedKey) or key == DEFAULT_KEY or is_pseudo_class_key(key) or is_condition_at_rule(key)


def is_conditional_map(value: StyleValue) -> bool:
  """True for `{default: ..., <condition>: ...}` leaves."""
  return isinstance(value, dict) and bool(value) and all(is_condition_key(k) for k in value) and DEFAULT_KEY in value


def join_parts(parts: Sequence[Any]) -> Any:
  """
  Concatenates literal text and expressions.

  Returns a plain string when every part is static, a single expression when
  the value is exactly one dynamic part, or a template literal otherwise.

  Args:
      parts (Sequence[Any]): Strings, numbers or `JsExpr`.

  Returns:
      Any: `str`, `JsExpr` or the lone literal.
  """
  parts = [p for p in parts if p != ""]
  if not parts:
    return ""
  if len(parts) == 1:
    return parts[0]
  if all(not isinstance(p, JsExpr) for p in parts):
    return "".join(str(p) for p in parts)
  chunks: List[str] = []
  for part in parts:
    if isinstance(part, JsExpr):
      chunks.append("${" + part.code + "}")
    else:
      chunks.append(str(part).replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${"))
  return JsExpr("`" + "".join(chunks) + "`")


def render_key(key: StyleKey) -> str:
  if isinstance(key, ComputedKey):
    return f"[{key.code}]"
  if _IDENTIFIER_RE.match(key):
    return key
  return json.dumps(key, ensure_ascii=False)


def render_number(value: Union[int, float]) -> str:
  if isinstance(value, float) and value.is_integer():
    return str(int(value))
  return repr(value)


def render_value(value: StyleValue, indent: int = 0) -> str:
  """
  Renders a canonical value as JavaScript source.

  Args:
      value: Literal, `JsExpr`, list or nested dict.
      indent (int): Current indentation depth (2 spaces per level).

  Returns:
      str: JavaScript text.
  """
  if value is None:
    return "null"
  if isinstance(value, bool):
    return "true" if value else "false"
  if isinstance(value, (int, float)):
    return render_number(value)
  if isinstance(value, JsExpr):
    return value.code
  if isinstance(value, str):
    return json.dumps(value, ensure_ascii=False)
  if isinstance(value, dict):
    return render_object(value, indent)
  if isinstance(value, (list, tuple)):
    return "[" + ", ".join(render_value(v, indent) for v in value) + "]"
  raise TypeError(f"Cannot render style value of type {type(value).__name__}")


def render_object(obj: StyleObject, indent: int = 0) -> str:
  if not obj:
    return "{}"
  pad = "  " * (indent + 1)
  lines = ["{"]
  for key, value in obj.items():
    lines.append(f"{pad}{render_key(key)}: {render_value(value, indent + 1)},")
  lines.append("  " * indent + "}")
  return "\n".join(lines)
