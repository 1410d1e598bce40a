"""
Tests for generic type arguments on styled-components tags.

The TSX grammar reads `styled.tag<P>` followed by a template as comparisons
(or an error node for inline object types), so the span is blanked before
parsing and recorded separately.
"""

import pytest

from stylex_switcheroo.core.host.generics import blank_spans, find_type_argument_spans, type_arguments_by_template
from stylex_switcheroo.core.host.imports import collect_imports, styled_components_locals
from stylex_switcheroo.core.host.parser import parse_source, template_tag_locals
from stylex_switcheroo.core.host.scanner import scan_module

HEADER = 'import styled, { css as sc } from "styled-components";\n'


def type_texts(code, tags=("styled",)):
  data = code.encode("utf8")
  return list(type_arguments_by_template(data, find_type_argument_spans(data, tags)).values())


@pytest.mark.parametrize(
  "code, expected",
  [
    ("const A = styled.button<Props>`color: red;`;", ["Props"]),
    ("const A = styled.div<{ $on?: boolean }>`x`;", ["{ $on?: boolean }"]),
    ("const A = styled(Link)<LinkProps & { $x: 1 }>`x`;", ["LinkProps & { $x: 1 }"]),
    ("const A = styled.a.attrs({ rel: 'x' })<{ onPick: (v: string) => void }>`x`;", ["{ onPick: (v: string) => void }"]),
    ("const A = styled.div<Record<string, Array<number>>>\n`x`;", ["Record<string, Array<number>>"]),
    ("const A = styled.div`x`;", []),
    ("const A = styled.div.attrs<P>({})`x`;", []),
    ("const A = mystyled.div<P>`x`; const B = x.styled.div<P>`y`;", []),
    ("if (styled.length < limit) { run(`x`); }", []),
  ],
)
def test_find_spans(code, expected):
  assert type_texts(code) == expected


def test_blanking_keeps_offsets():
  code = "const A = styled.div<{\n  $on: boolean;\n}>`x`;\n"
  data = code.encode("utf8")
  spans = find_type_argument_spans(data, ["styled"])
  blanked = blank_spans(data, spans)

  assert len(blanked) == len(data)
  assert blanked.count(b"\n") == data.count(b"\n")
  assert b"$on" not in blanked
  assert blanked.index(b"`") == data.index(b"`")


def test_template_tag_locals():
  host = parse_source(HEADER + 'import { css } from "other";\n')

  assert template_tag_locals(host.root) == {"styled", "sc"}


def test_named_type_generic_parses_as_tagged_template():
  """
  Scenario: `styled.button<Props>` with a named type.
  Expectation: No parse errors; the declaration is scanned with its type text.
  """
  host = parse_source(HEADER + "type Props = { $on?: boolean };\nexport const B = styled.button<Props>`color: red;`;\n")
  result = scan_module(host, styled_components_locals(collect_imports(host)))

  assert not host.has_errors
  assert [d.name for d in result.styled] == ["B"]
  assert result.styled[0].type_arguments == "Props"


def test_inline_type_generic_parses_without_errors():
  host = parse_source(HEADER + "const A = styled(Link)<{ $on?: boolean }>`\n  color: red;\n`;\n")
  result = scan_module(host, styled_components_locals(collect_imports(host)))

  assert not host.has_errors
  decl = result.styled[0]
  assert (decl.base, decl.base_is_intrinsic) == ("Link", False)
  assert decl.type_arguments == "{ $on?: boolean }"
  assert decl.template.segments == ["\n  color: red;\n"]


def test_aliased_css_generic():
  host = parse_source(HEADER + "const m = sc<{ $a: number }>`color: red;`;\n")
  result = scan_module(host, styled_components_locals(collect_imports(host)))

  assert not host.has_errors
  assert [m.name for m in result.mixins] == ["m"]


def test_generics_ignored_without_styled_import():
  host = parse_source("const x = a < b > `c`;\n")

  assert host.tag_type_arguments == {}
