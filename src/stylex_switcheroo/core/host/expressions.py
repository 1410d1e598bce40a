"""
Expression Helpers.

Shape queries over tree-sitter expression nodes: unwrapping parentheses,
reading member-access paths, evaluating static literals, and decomposing
arrow functions. These are the building blocks of the interpolation classifier
and of `.attrs()` / `shouldForwardProp` extraction.
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from tree_sitter import Node

from stylex_switcheroo.core.host.parser import node_text

_MISSING = object()


def unwrap(node: Optional[Node]) -> Optional[Node]:
  """Strips parentheses and TS `as`/`satisfies`/non-null wrappers."""
  current = node
  while current is not None:
    if current.type == "parenthesized_expression" and current.named_child_count == 1:
      current = current.named_children[0]
    elif current.type in ("as_expression", "satisfies_expression", "non_null_expression") and current.named_children:
      current = current.named_children[0]
    else:
      break
  return current


def member_path(node: Optional[Node]) -> Optional[List[str]]:
  """
  Reads a static member chain.

  `a.b.c` -> ['a', 'b', 'c']; `a["b"]` -> ['a', 'b']; optional chaining is
  accepted. Computed non-literal keys return None.

  Args:
      node (Node): Expression node.

  Returns:
      Optional[List[str]]: Path segments, or None if the chain is not static.
  """
  node = unwrap(node)
  if node is None:
    return None
  if node.type in ("identifier", "this"):
    return [node_text(node)]
  if node.type == "member_expression":
    obj = member_path(node.child_by_field_name("object"))
    prop = node.child_by_field_name("property")
    if obj is None or prop is None:
      return None
    return obj + [node_text(prop)]
  if node.type == "subscript_expression":
    obj = member_path(node.child_by_field_name("object"))
    index = unwrap(node.child_by_field_name("index"))
    if obj is None or index is None or index.type != "string":
      return None
    return obj + [string_value(index)]
  return None


def string_value(node: Node) -> str:
  """Decodes a JS string literal node."""
  raw = node_text(node)
  if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
    body = raw[1:-1]
  else:
    return raw
  if "\\" not in body:
    return body
  if raw[0] == "'":
    body = body.replace("\\'", "'").replace('"', '\\"')
  try:
    return json.loads(f'"{body}"')
  except ValueError:
    return body


def _number_value(text: str) -> Any:
  cleaned = text.replace("_", "")
  try:
    if cleaned.lower().startswith(("0x", "0o", "0b")):
      return int(cleaned, 0)
    value = float(cleaned)
  except ValueError:
    return _MISSING
  if value.is_integer() and "." not in cleaned and "e" not in cleaned.lower():
    return int(value)
  return value


def literal_value(node: Optional[Node]) -> Tuple[bool, Any]:
  """
  Evaluates a statically known literal.

  Strings, numbers, booleans, `null`/`undefined`, negative numbers, and
  template strings without substitutions are accepted.

  Args:
      node (Node): Expression node.

  Returns:
      Tuple[bool, Any]: `(True, value)` when static, else `(False, None)`.
  """
  node = unwrap(node)
  if node is None:
    return False, None
  kind = node.type
  if kind == "string":
    return True, string_value(node)
  if kind == "number":
    value = _number_value(node_text(node))
    if value is _MISSING:
      return False, None
    return True, value
  if kind == "true":
    return True, True
  if kind == "false":
    return True, False
  if kind in ("null", "undefined"):
    return True, None
  if kind == "identifier" and node_text(node) == "undefined":
    return True, None
  if kind == "unary_expression":
    operator = node.child_by_field_name("operator")
    argument = node.child_by_field_name("argument")
    if operator is not None and node_text(operator) == "-":
      ok, value = literal_value(argument)
      if ok and isinstance(value, (int, float)) and not isinstance(value, bool):
        return True, -value
  if kind == "template_string":
    if any(child.type == "template_substitution" for child in node.children):
      return False, None
    return True, node_text(node)[1:-1]
  return False, None


@dataclass(frozen=True)
class ArrowShape:
  """
  Decomposed single-parameter arrow function.

  Attributes:
      param_name: Name of the props parameter, or None if destructured.
      destructured: Names bound by an object pattern parameter (`({a, b}) => ...`).
      body: The expression body (unwrapped); None for block bodies.
      is_block_body: True for `p => { ... }`.
  """

  param_name: Optional[str]
  destructured: Tuple[str, ...]
  body: Optional[Node]
  is_block_body: bool


def arrow_shape(node: Optional[Node]) -> Optional[ArrowShape]:
  """
  Decomposes an arrow (or function) expression with at most one parameter.

  Args:
      node (Node): Candidate function expression.

  Returns:
      Optional[ArrowShape]: The decomposition, or None if not a one-param function.
  """
  node = unwrap(node)
  if node is None or node.type not in ("arrow_function", "function_expression", "function"):
    return None

  param_name: Optional[str] = None
  destructured: Tuple[str, ...] = ()

  single = node.child_by_field_name("parameter")
  if single is not None:
    param_name = node_text(single)
  else:
    params = node.child_by_field_name("parameters")
    items = [p for p in params.named_children if p.type != "comment"] if params is not None else []
    if len(items) > 1:
      return None
    if items:
      pattern = items[0].child_by_field_name("pattern") if items[0].type.endswith("parameter") else items[0]
      pattern = pattern or items[0]
      if pattern.type == "identifier":
        param_name = node_text(pattern)
      elif pattern.type == "object_pattern":
        destructured = tuple(_pattern_names(pattern))
      else:
        return None

  body = node.child_by_field_name("body")
  if body is None:
    return None
  if body.type == "statement_block":
    return ArrowShape(param_name, destructured, None, True)
  return ArrowShape(param_name, destructured, unwrap(body), False)


def _pattern_names(pattern: Node) -> List[str]:
  names = []
  for child in pattern.named_children:
    if child.type == "shorthand_property_identifier_pattern":
      names.append(node_text(child))
    elif child.type == "object_assignment_pattern":
      left = child.child_by_field_name("left")
      if left is not None:
        names.append(node_text(left))
    elif child.type == "pair_pattern":
      value = child.child_by_field_name("value")
      if value is not None and value.type == "identifier":
        names.append(node_text(value))
  return names


def object_entries(node: Optional[Node]) -> Optional[List[Tuple[str, Node]]]:
  """
  Lists `key: value` pairs of an object literal.

  Shorthand properties map to their identifier node. Spreads and computed keys
  make the object non-static (None).
  """
  node = unwrap(node)
  if node is None or node.type != "object":
    return None
  entries = []
  for child in node.named_children:
    if child.type == "pair":
      key = child.child_by_field_name("key")
      value = child.child_by_field_name("value")
      if key is None or value is None or key.type == "computed_property_name":
        return None
      name = string_value(key) if key.type == "string" else node_text(key)
      entries.append((name, value))
    elif child.type == "shorthand_property_identifier":
      entries.append((node_text(child), child))
    elif child.type == "comment":
      continue
    else:
      return None
  return entries


def call_parts(node: Optional[Node]) -> Optional[Tuple[Node, List[Node]]]:
  """Returns `(callee, arguments)` for a call expression with a plain argument list."""
  node = unwrap(node)
  if node is None or node.type != "call_expression":
    return None
  callee = node.child_by_field_name("function")
  args = node.child_by_field_name("arguments")
  if callee is None or args is None or args.type != "arguments":
    return None
  return callee, [a for a in args.named_children if a.type != "comment"]


def js_string(value: str) -> str:
  """Renders a Python string as a double-quoted JS string literal."""
  return json.dumps(value, ensure_ascii=False)
