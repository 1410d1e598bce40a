"""
Styled Declaration Scanner.

Finds the module-level constructs the migration operates on:

- `const X = styled.tag` templates (with optional `.attrs()` / `.withConfig()`
  and type arguments), `styled("tag")` and `styled(Component)` bases;
- `const k = keyframes` animation templates;
- `const m = css` mixin templates.

Each template literal is split into literal segments and interpolation
expressions using byte offsets, so escape sequences and whitespace are
preserved exactly.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node

from stylex_switcheroo.core.diagnostics import SourceLocation
from stylex_switcheroo.core.host.expressions import string_value, unwrap
from stylex_switcheroo.core.host.parser import HostTree, node_text


@dataclass
class TemplateParts:
  """
  A template literal split at its substitutions.

  `len(segments) == len(expressions) + 1` always holds.
  """

  node: Node
  segments: List[str]
  expressions: List[Node]


@dataclass
class StyledDeclaration:
  """
  One `const Name = styled...` tagged-template declaration.

  Attributes:
      name: Local component name.
      base: Intrinsic tag (`button`) or base component identifier (`Link`).
      base_is_intrinsic: True for `styled.tag` / `styled("tag")`.
      template: The style template.
      statement: Top-level statement to replace (`lexical_declaration` or `export_statement`).
      attrs_node: Argument of `.attrs(...)`, if any.
      config_node: Argument of `.withConfig(...)`, if any.
      type_arguments: Source of the generic props type (`<Props>` without brackets).
      is_exported: True when declared with `export`.
      location: Position of the declarator.
  """

  name: str
  base: str
  base_is_intrinsic: bool
  template: TemplateParts
  statement: Node
  attrs_node: Optional[Node] = None
  config_node: Optional[Node] = None
  type_arguments: Optional[str] = None
  is_exported: bool = False
  location: Optional[SourceLocation] = None


@dataclass
class HelperDeclaration:
  """A `keyframes` or `css` tagged-template declaration."""

  name: str
  kind: str
  template: TemplateParts
  statement: Node
  is_exported: bool = False
  location: Optional[SourceLocation] = None


@dataclass
class ScanResult:
  styled: List[StyledDeclaration] = field(default_factory=list)
  keyframes: List[HelperDeclaration] = field(default_factory=list)
  mixins: List[HelperDeclaration] = field(default_factory=list)

  @property
  def styled_by_name(self) -> Dict[str, StyledDeclaration]:
    return {d.name: d for d in self.styled}

  @property
  def is_empty(self) -> bool:
    return not (self.styled or self.keyframes or self.mixins)


def template_parts(host: HostTree, template: Node) -> TemplateParts:
  """
  Splits a `template_string` node into literal segments and expressions.

  Args:
      host (HostTree): Owning module (byte source).
      template (Node): The template literal.

  Returns:
      TemplateParts: Segments and substitution expressions.
  """
  segments: List[str] = []
  expressions: List[Node] = []
  cursor = template.start_byte + 1
  for child in template.children:
    if child.type != "template_substitution":
      continue
    segments.append(host.slice(cursor, child.start_byte))
    inner = [c for c in child.named_children if c.type != "comment"]
    expressions.append(inner[0] if inner else child)
    cursor = child.end_byte
  segments.append(host.slice(cursor, template.end_byte - 1))
  return TemplateParts(node=template, segments=segments, expressions=expressions)


def _tagged_template(node: Optional[Node]) -> Optional[Tuple[Node, Node, Optional[Node]]]:
  """Returns `(tag, template, type_arguments)` for a tagged template call."""
  node = unwrap(node)
  if node is None or node.type != "call_expression":
    return None
  args = node.child_by_field_name("arguments")
  tag = node.child_by_field_name("function")
  if args is None or tag is None or args.type != "template_string":
    return None
  return tag, args, node.child_by_field_name("type_arguments")


@dataclass
class _Chain:
  base: str
  intrinsic: bool
  attrs: Optional[Node] = None
  config: Optional[Node] = None
  type_args: Optional[Node] = None


def _decompose_styled(tag: Node, styled_local: str) -> Optional[_Chain]:
  """
  Walks `styled.tag.attrs(a).withConfig(c)` back to its base.

  Returns None if the tag is not rooted at the `styled` binding.
  """
  attrs = None
  config = None
  type_args = None
  current = tag
  while True:
    if current.type == "member_expression":
      obj = current.child_by_field_name("object")
      prop = current.child_by_field_name("property")
      if obj is None or prop is None:
        return None
      if obj.type == "identifier" and node_text(obj) == styled_local:
        return _Chain(node_text(prop), True, attrs, config, type_args)
      return None
    if current.type == "call_expression":
      callee = current.child_by_field_name("function")
      args = current.child_by_field_name("arguments")
      if callee is None or args is None or args.type != "arguments":
        return None
      if type_args is None:
        type_args = current.child_by_field_name("type_arguments")
      arg_nodes = [a for a in args.named_children if a.type != "comment"]
      if callee.type == "identifier" and node_text(callee) == styled_local:
        if not arg_nodes:
          return None
        base = unwrap(arg_nodes[0])
        if base.type == "string":
          return _Chain(string_value(base), True, attrs, config, type_args)
        if base.type in ("identifier", "member_expression"):
          return _Chain(node_text(base), False, attrs, config, type_args)
        return None
      if callee.type == "member_expression":
        method = callee.child_by_field_name("property")
        method_name = node_text(method) if method is not None else ""
        if method_name == "attrs" and arg_nodes and attrs is None:
          attrs = arg_nodes[0]
        elif method_name == "withConfig" and arg_nodes and config is None:
          config = arg_nodes[0]
        else:
          return None
        current = callee.child_by_field_name("object")
        continue
      return None
    return None


def _declarators(stmt: Node) -> Tuple[bool, List[Node]]:
  """Returns `(is_exported, variable_declarators)` of a top-level statement."""
  exported = False
  decl = stmt
  if stmt.type == "export_statement":
    exported = True
    inner = stmt.child_by_field_name("declaration")
    if inner is None:
      return False, []
    decl = inner
  if decl.type not in ("lexical_declaration", "variable_declaration"):
    return exported, []
  return exported, [c for c in decl.named_children if c.type == "variable_declarator"]


def scan_module(host: HostTree, sc_locals: Dict[str, str]) -> ScanResult:
  """
  Scans top-level declarations for styled-components constructs.

  Args:
      host (HostTree): Parsed module.
      sc_locals (Dict[str, str]): `styled-components` export -> local name.

  Returns:
      ScanResult: Styled, keyframes and css declarations in source order.
  """
  result = ScanResult()
  styled_local = sc_locals.get("styled")
  keyframes_local = sc_locals.get("keyframes")
  css_local = sc_locals.get("css")

  for stmt in host.root.named_children:
    exported, declarators = _declarators(stmt)
    if len(declarators) != 1:
      continue
    declarator = declarators[0]
    name_node = declarator.child_by_field_name("name")
    if name_node is None or name_node.type != "identifier":
      continue
    tagged = _tagged_template(declarator.child_by_field_name("value"))
    if tagged is None:
      continue
    tag, template, call_type_args = tagged
    name = node_text(name_node)
    parts = template_parts(host, template)
    location = host.location(declarator)

    if tag.type == "identifier" and node_text(tag) in (keyframes_local, css_local):
      kind = "keyframes" if node_text(tag) == keyframes_local else "css"
      helper = HelperDeclaration(name, kind, parts, stmt, exported, location)
      (result.keyframes if kind == "keyframes" else result.mixins).append(helper)
      continue

    if not styled_local:
      continue
    chain = _decompose_styled(tag, styled_local)
    if chain is None:
      continue
    type_args = call_type_args or chain.type_args
    type_text = host.tag_type_arguments.get(template.start_byte)
    if type_text is None and type_args is not None:
      type_text = node_text(type_args).strip()
      if type_text.startswith("<") and type_text.endswith(">"):
        type_text = type_text[1:-1].strip()
    result.styled.append(
      StyledDeclaration(
        name=name,
        base=chain.base,
        base_is_intrinsic=chain.intrinsic,
        template=parts,
        statement=stmt,
        attrs_node=chain.attrs,
        config_node=chain.config,
        type_arguments=type_text,
        is_exported=exported,
        location=location,
      )
    )
  return result


def string_constants(host: HostTree) -> Dict[str, str]:
  """
  Top-level `const NAME = "literal"` bindings.

  Used to substitute constants interpolated into selectors and at-rule
  preludes (`@media ${mobile}`).
  """
  constants: Dict[str, str] = {}
  for stmt in host.root.named_children:
    _, declarators = _declarators(stmt)
    for declarator in declarators:
      name_node = declarator.child_by_field_name("name")
      value = unwrap(declarator.child_by_field_name("value"))
      if name_node is None or name_node.type != "identifier" or value is None:
        continue
      if value.type == "string" or (
        value.type == "template_string" and not any(c.type == "template_substitution" for c in value.children)
      ):
        text = string_value(value) if value.type == "string" else node_text(value)[1:-1]
        constants[node_text(name_node)] = text
  return constants
