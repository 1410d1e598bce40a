"""
Tests for the structural unsupported-pattern scan.
"""

from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.host.imports import collect_imports, styled_components_locals
from stylex_switcheroo.core.host.parser import parse_source
from stylex_switcheroo.core.host.scanner import scan_module
from stylex_switcheroo.core.unsupported import scan_unsupported


def run(code):
  host = parse_source(code)
  sc_locals = styled_components_locals(collect_imports(host))
  sink = DiagnosticSink()
  findings = scan_unsupported(host, scan_module(host, sc_locals), sc_locals, sink)
  return findings, [d.type for d in sink.items]


def test_clean_module():
  findings, kinds = run('import styled from "styled-components";\nconst A = styled.div`color: red;`;\n')
  assert not findings.found
  assert kinds == []


def test_global_styles_reported_once():
  findings, kinds = run(
    'import { createGlobalStyle as g } from "styled-components";\n'
    "const A = g`body { margin: 0; }`;\n"
    "const B = g`html { margin: 0; }`;\n"
  )
  assert kinds == [DiagnosticType.CREATE_GLOBAL_STYLE]
  assert findings.count == 1
  assert findings.skipped == set()


def test_hoc_factory():
  _, kinds = run('import styled from "styled-components";\nconst make = withTheme(styled);\n')
  assert kinds == [DiagnosticType.HOC_STYLED_FACTORY]


def test_static_properties_skip_component():
  findings, kinds = run(
    'import styled from "styled-components";\n'
    "const Button = styled.button`color: red;`;\n"
    "const Icon = styled.span``;\n"
    "Button.Icon = Icon;\n"
  )
  assert kinds == [DiagnosticType.STATIC_PROPERTIES]
  assert findings.skipped == {"Button"}


def test_specificity_hack_with_component_selector():
  findings, kinds = run(
    'import styled from "styled-components";\n'
    "const Icon = styled.span``;\n"
    "const Button = styled.button`\n  && ${Icon} { color: red; }\n`;\n"
  )
  assert kinds == [DiagnosticType.SPECIFICITY_HACK]
  assert findings.skipped == {"Button"}


def test_plain_specificity_hack_is_not_a_finding():
  findings, _ = run('import styled from "styled-components";\nconst A = styled.div`&& { color: red; }`;\n')
  assert not findings.found
