"""
JSX Usage Scanner.

Locates every JSX element whose tag is one of the converted components and
records its attributes with byte offsets, so the call-site rewriter can edit
tags and append props without re-printing the element.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set

from tree_sitter import Node

from stylex_switcheroo.core.host.expressions import string_value
from stylex_switcheroo.core.host.parser import HostTree, node_text, walk

ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")
_TAG_TYPES = ("jsx_opening_element", "jsx_closing_element", "jsx_self_closing_element")


@dataclass
class JsxAttribute:
  """
  One attribute of an opening tag.

  Attributes:
      node: The `jsx_attribute` (or spread `jsx_expression`) node.
      name: Attribute name, None for `{...spread}`.
      value: Value node (`string` or `jsx_expression`), None for bare flags.
  """

  node: Node
  name: Optional[str] = None
  value: Optional[Node] = None

  @property
  def is_spread(self) -> bool:
    return self.name is None

  def string(self) -> Optional[str]:
    """The literal value of `name="x"` or `name={"x"}`, else None."""
    if self.value is None:
      return None
    if self.value.type == "string":
      return string_value(self.value)
    inner = [c for c in self.value.named_children if c.type != "comment"]
    if len(inner) == 1 and inner[0].type == "string":
      return string_value(inner[0])
    return None


@dataclass
class JsxUsage:
  """
  A JSX element rendering a component.

  Attributes:
      element: `jsx_element` or `jsx_self_closing_element`.
      opening: The opening tag (the element itself when self-closing).
      closing: The closing tag, if any.
      name: Tag name as written.
      attributes: Attributes in source order.
  """

  element: Node
  opening: Node
  closing: Optional[Node]
  name: str
  attributes: List[JsxAttribute] = field(default_factory=list)

  def attribute(self, name: str) -> Optional[JsxAttribute]:
    for attr in self.attributes:
      if attr.name == name:
        return attr
    return None

  @property
  def has_spread(self) -> bool:
    return any(a.is_spread for a in self.attributes)

  @property
  def name_nodes(self) -> List[Node]:
    nodes = [tag_name_node(self.opening)]
    if self.closing is not None:
      nodes.append(tag_name_node(self.closing))
    return [n for n in nodes if n is not None]

  @property
  def insert_offset(self) -> int:
    """Where new attributes go: after the last attribute or the tag name."""
    if self.attributes:
      return self.attributes[-1].node.end_byte
    type_args = self.opening.child_by_field_name("type_arguments")
    if type_args is not None:
      return type_args.end_byte
    name = tag_name_node(self.opening)
    return name.end_byte if name is not None else self.opening.start_byte + 1


def tag_name_node(tag: Node) -> Optional[Node]:
  return tag.child_by_field_name("name")


def opening_of(element: Node) -> Node:
  if element.type == "jsx_element":
    opening = element.child_by_field_name("open_tag")
    return opening if opening is not None else element.named_children[0]
  return element


def closing_of(element: Node) -> Optional[Node]:
  if element.type != "jsx_element":
    return None
  closing = element.child_by_field_name("close_tag")
  if closing is None and element.named_children and element.named_children[-1].type == "jsx_closing_element":
    closing = element.named_children[-1]
  return closing


def element_name(element: Node) -> str:
  name = tag_name_node(opening_of(element))
  return node_text(name) if name is not None else ""


def attributes_of(opening: Node) -> List[JsxAttribute]:
  attrs: List[JsxAttribute] = []
  for child in opening.named_children:
    if child.type == "jsx_attribute":
      parts = child.named_children
      name = node_text(parts[0]) if parts else ""
      value = parts[1] if len(parts) > 1 else None
      attrs.append(JsxAttribute(node=child, name=name, value=value))
    elif child.type == "jsx_expression" and any(c.type == "spread_element" for c in child.named_children):
      attrs.append(JsxAttribute(node=child))
  return attrs


def usage_of(element: Node) -> JsxUsage:
  opening = opening_of(element)
  return JsxUsage(
    element=element,
    opening=opening,
    closing=closing_of(element),
    name=element_name(element),
    attributes=attributes_of(opening),
  )


def jsx_elements(root: Node) -> Iterator[Node]:
  for node in walk(root):
    if node.type in ELEMENT_TYPES:
      yield node


def child_elements(element: Node) -> List[Node]:
  """Direct JSX element children (text and expression containers skipped)."""
  if element.type != "jsx_element":
    return []
  return [c for c in element.named_children if c.type in ELEMENT_TYPES]


def collect_usages(host: HostTree, names: Iterable[str]) -> Dict[str, List[JsxUsage]]:
  """
  Indexes JSX usages of `names` in source order.

  Args:
      host (HostTree): Parsed module.
      names (Iterable[str]): Component names of interest.

  Returns:
      Dict[str, List[JsxUsage]]: Usages per name (every name present).
  """
  wanted = set(names)
  usages: Dict[str, List[JsxUsage]] = {name: [] for name in wanted}
  for element in jsx_elements(host.root):
    name = element_name(element)
    if name in wanted:
      usages[name].append(usage_of(element))
  return usages


def value_references(host: HostTree, names: Iterable[str], skip: Iterable[Node] = ()) -> Set[str]:
  """
  Names referenced anywhere other than a JSX tag position.

  Args:
      host (HostTree): Parsed module.
      names (Iterable[str]): Component names of interest.
      skip (Iterable[Node]): Subtrees to ignore (the declarations themselves).

  Returns:
      Set[str]: Names used as values (`export { X }`, `styled(X)`, `[X]`, ...).
  """
  wanted = set(names)
  skipped = [(n.start_byte, n.end_byte) for n in skip]
  found: Set[str] = set()
  for node in walk(host.root):
    if node.type != "identifier" or node_text(node) not in wanted:
      continue
    if any(start <= node.start_byte < end for start, end in skipped):
      continue
    parent = node.parent
    if parent is not None and parent.type in _TAG_TYPES and parent.child_by_field_name("name") == node:
      continue
    found.add(node_text(node))
  return found
