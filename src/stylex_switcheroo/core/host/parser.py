"""
Host Source Parser.

Thin wrapper around tree-sitter's TSX grammar. Every host file and every
generated expression snippet is parsed through this module, so the rest of the
pipeline can work with `tree_sitter.Node` objects and byte offsets.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Set

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from stylex_switcheroo.core.diagnostics import SourceLocation
from stylex_switcheroo.core.errors import HostParseError
from stylex_switcheroo.core.host.generics import blank_spans, find_type_argument_spans, type_arguments_by_template

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

STYLED_COMPONENTS_SOURCE = "styled-components"


def _new_parser() -> Parser:
  return Parser(TSX_LANGUAGE)


@dataclass
class HostTree:
  """
  A parsed host file.

  Attributes:
      source: The original text.
      source_bytes: UTF-8 encoding of `source`; all node offsets index into it.
      tree: The tree-sitter parse tree.
      file_path: Path used for diagnostics and import resolution.
      tag_type_arguments: Generic props type of each tagged template, keyed
          by the template start offset (the span is blanked in `tree`).
  """

  source: str
  source_bytes: bytes
  tree: Tree
  file_path: str = "input.tsx"
  tag_type_arguments: Dict[int, str] = field(default_factory=dict)

  @property
  def root(self) -> Node:
    return self.tree.root_node

  @property
  def has_errors(self) -> bool:
    return self.tree.root_node.has_error

  def text(self, node: Node) -> str:
    return self.source_bytes[node.start_byte : node.end_byte].decode("utf8")

  def slice(self, start: int, end: int) -> str:
    return self.source_bytes[start:end].decode("utf8")

  def location(self, node: Node) -> SourceLocation:
    row, column = node.start_point
    return SourceLocation(line=row + 1, column=column + 1)

  @property
  def is_typescript(self) -> bool:
    return self.file_path.endswith((".ts", ".tsx"))


def parse_source(code: str, file_path: str = "input.tsx") -> HostTree:
  """
  Parses a TSX/JSX module.

  tree-sitter is error tolerant, so this never raises; callers inspect
  `HostTree.has_errors`.

  Type arguments of styled-components tagged templates
  (`styled.div<Props>`...``) are not valid TSX expressions for the grammar;
  they are blanked and the module re-parsed, with the type text kept in
  `HostTree.tag_type_arguments`.

  Args:
      code (str): Module source.
      file_path (str): Path of the module, used for diagnostics.

  Returns:
      HostTree: The parsed module.
  """
  data = code.encode("utf8")
  parser = _new_parser()
  tree = parser.parse(data)
  type_arguments: Dict[int, str] = {}
  spans = find_type_argument_spans(data, template_tag_locals(tree.root_node))
  if spans:
    tree = parser.parse(blank_spans(data, spans))
    type_arguments = type_arguments_by_template(data, spans)
  return HostTree(source=code, source_bytes=data, tree=tree, file_path=file_path, tag_type_arguments=type_arguments)


def template_tag_locals(root: Node) -> Set[str]:
  """Local names bound by top-level `styled-components` imports."""
  names: Set[str] = set()
  for stmt in root.named_children:
    source = stmt.child_by_field_name("source") if stmt.type == "import_statement" else None
    if source is None or node_text(source)[1:-1] != STYLED_COMPONENTS_SOURCE:
      continue
    for clause in (c for c in stmt.named_children if c.type == "import_clause"):
      for part in clause.named_children:
        if part.type == "identifier":
          names.add(node_text(part))
        elif part.type == "named_imports":
          for spec in part.named_children:
            local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
            if spec.type == "import_specifier" and local is not None:
              names.add(node_text(local))
  return names


def parse_expression(text: str) -> Node:
  """
  Parses a standalone JS/TS expression.

  The text is wrapped in parentheses so object literals and arrow functions
  parse as expressions.

  Args:
      text (str): Expression source.

  Returns:
      Node: The expression node (parentheses removed).

  Raises:
      HostParseError: If the text is empty or not a single valid expression.
  """
  if not text or not text.strip():
    raise HostParseError("Empty expression")
  wrapped = f"({text}\n);".encode("utf8")
  tree = _new_parser().parse(wrapped)
  root = tree.root_node
  if root.has_error or root.named_child_count != 1:
    raise HostParseError(f"Invalid expression: {text}")
  stmt = root.named_children[0]
  if stmt.type != "expression_statement" or not stmt.named_children:
    raise HostParseError(f"Invalid expression: {text}")
  expr = stmt.named_children[0]
  if expr.type != "parenthesized_expression" or expr.named_child_count != 1:
    raise HostParseError(f"Invalid expression: {text}")
  return expr.named_children[0]


def is_valid_expression(text: str) -> bool:
  try:
    parse_expression(text)
  except HostParseError:
    return False
  return True


def node_text(node: Node) -> str:
  """Decoded text of a node, independent of any HostTree."""
  return node.text.decode("utf8") if node.text is not None else ""


def walk(node: Node) -> Iterator[Node]:
  """Pre-order traversal over all descendants (including `node`)."""
  stack = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(current.children))


def find_ancestor(node: Node, *types: str) -> Optional[Node]:
  current = node.parent
  while current is not None:
    if current.type in types:
      return current
    current = current.parent
  return None
