"""
Tests for the tree-sitter host parser wrapper.
"""

import pytest

from stylex_switcheroo.core.errors import HostParseError
from stylex_switcheroo.core.host.parser import (
  find_ancestor,
  is_valid_expression,
  node_text,
  parse_expression,
  parse_source,
  walk,
)


def test_parse_source_keeps_bytes_and_path():
  host = parse_source('const a = <div title="é" />;\n', "src/App.jsx")
  assert host.source_bytes == 'const a = <div title="é" />;\n'.encode("utf8")
  assert host.file_path == "src/App.jsx"
  assert not host.has_errors
  assert not host.is_typescript
  assert parse_source("x").is_typescript


def test_parse_source_is_error_tolerant():
  host = parse_source("const x = <div")
  assert host.has_errors


def test_location_is_one_based():
  host = parse_source("const a = 1;\n  const b = 2;\n")
  second = host.root.named_children[1]
  location = host.location(second)
  assert (location.line, location.column) == (2, 3)
  assert host.text(second) == "const b = 2;"


def test_parse_expression():
  node = parse_expression("(p) => p.theme.color")
  assert node.type == "arrow_function"
  assert parse_expression('{ a: 1 }').type == "object"
  assert node_text(parse_expression("a ?? b")) == "a ?? b"


@pytest.mark.parametrize("text", ["", "   ", "a b", "a; b", "(("])
def test_parse_expression_rejects_invalid_text(text):
  with pytest.raises(HostParseError):
    parse_expression(text)
  assert not is_valid_expression(text)


def test_walk_is_pre_order():
  host = parse_source("a + b;")
  types = [n.type for n in walk(host.root)]
  assert types[0] == "program"
  assert types.index("binary_expression") < types.index("identifier")


def test_find_ancestor():
  host = parse_source("function f() { return x; }")
  ident = [n for n in walk(host.root) if n.type == "identifier" and node_text(n) == "x"][0]
  assert find_ancestor(ident, "function_declaration").type == "function_declaration"
  assert find_ancestor(ident, "class_declaration") is None
