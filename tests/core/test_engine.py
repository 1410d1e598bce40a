"""
End-to-end tests for the Transform Engine.

Scenarios feed whole modules through `TransformEngine.run` and check the
emitted text and diagnostics rather than intermediate structures.
"""

import pytest

import stylex_switcheroo as sxs
from stylex_switcheroo import ConversionResult, RuntimeConfig, TransformEngine
from stylex_switcheroo.core.decisions.adapter import (
  Adapter,
  ImportName,
  ImportSource,
  ImportSpec,
  ResolveValueResult,
)
from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.engine import mixin_keys
from stylex_switcheroo.core.host.parser import parse_source
from stylex_switcheroo.core.host.scanner import scan_module
from stylex_switcheroo.enums import Severity

IMPORT = 'import styled from "styled-components";\n'


class TokenAdapter(Adapter):
  def resolve_value(self, context):
    if context.kind != "theme":
      return None
    return ResolveValueResult(
      expr="vars." + context.path.replace(".", "_"),
      imports=[ImportSpec(from_=ImportSource(value="./tokens.stylex"), names=[ImportName(imported="vars")])],
    )


@pytest.fixture
def engine():
  return TransformEngine()


def test_inline_component(engine):
  """
  Scenario: A local component used only as a plain element.
  Expectation: Declaration removed, usage becomes the intrinsic element with stylex.props.
  """
  code = IMPORT + "const Box = styled.div`\n  padding-block: 4px;\n`;\n\nexport const App = () => <Box>Hi</Box>;\n"
  res = engine.run(code, "App.tsx")

  assert res.success
  assert res.changed
  assert 'import * as stylex from "@stylexjs/stylex";' in res.code
  assert "<div {...stylex.props(styles.box)}>Hi</div>" in res.code
  assert "const styles = stylex.create({" in res.code
  assert 'paddingBlock: "4px"' in res.code
  assert "styled-components" not in res.code
  assert "const Box" not in res.code
  assert res.converted_components == ["Box"]
  assert res.style_keys == ["box"]


def test_exported_thin_wrapper(engine):
  """
  Scenario: An exported component.
  Expectation: Function component with Omit-ed className/style props and a React import.
  """
  code = IMPORT + "export const Title = styled.h1`\n  font-weight: 700;\n`;\n"
  res = engine.run(code, "Title.tsx")

  assert 'type TitleProps = Omit<React.ComponentProps<"h1">, "className" | "style">;' in res.code
  assert "export function Title(props: TitleProps)" in res.code
  assert 'import * as React from "react";' in res.code
  assert "fontWeight: 700" in res.code


def test_variant_wrapper_destructures_transient_prop(engine):
  code = (
    IMPORT
    + "export const Button = styled.button<{ $primary?: boolean }>`\n"
    + "  color: ${p => (p.$primary ? 'white' : 'black')};\n"
    + "`;\n"
  )
  res = engine.run(code, "Button.tsx")

  assert "const { className, style, $primary, ...rest } = props;" in res.code
  assert "$primary" in res.code


def test_theme_values_resolved_through_adapter():
  """
  Scenario: A theme path interpolation and an adapter that maps it.
  Expectation: The adapter expression is emitted and its import injected.
  """
  code = IMPORT + "export const Link = styled.a`\n  color: ${p => p.theme.colors.primary};\n`;\n"
  res = TransformEngine(adapter=TokenAdapter()).run(code, "Link.tsx")

  assert "vars.colors_primary" in res.code
  assert 'import { vars } from "./tokens.stylex";' in res.code


def test_theme_without_adapter_reports_diagnostic(engine):
  code = IMPORT + "export const Link = styled.a`\n  color: ${p => p.theme.colors.primary};\n`;\n"
  res = engine.run(code, "Link.tsx")

  assert res.dynamic_node_diagnostics()


def test_unresolved_helper_call(engine):
  code = (
    IMPORT
    + 'import { truncate } from "./helpers";\n'
    + "export const Label = styled.span`\n  ${truncate()}\n`;\n"
  )
  res = engine.run(code, "Label.tsx")

  assert res.diagnostics_of(DiagnosticType.UNSUPPORTED_CALL_EXPRESSION)
  assert res.dynamic_node_diagnostics()


def test_parse_error(engine):
  """
  Scenario: Syntactically broken module.
  Expectation: No output and one error diagnostic.
  """
  res = engine.run(IMPORT + "const x = <div\n", "Broken.tsx")

  assert res.success is False
  assert res.code is None
  assert res.has_errors
  errors = res.diagnostics_of(DiagnosticType.FAILED_TO_PARSE_EXPRESSION)
  assert errors and errors[0].severity == Severity.ERROR


def test_module_without_styled_components(engine):
  res = engine.run("export const a = 1;\n", "plain.ts")

  assert res.code is None
  assert res.diagnostics == []
  assert not res.changed


def test_global_style_left_untouched(engine):
  """
  Scenario: Only a createGlobalStyle declaration.
  Expectation: Code returned unchanged with an unsupported-feature diagnostic.
  """
  code = 'import { createGlobalStyle } from "styled-components";\nconst G = createGlobalStyle`body { margin: 0; }`;\n'
  res = engine.run(code, "Global.tsx")

  assert res.code == code
  assert len(res.diagnostics_of(DiagnosticType.CREATE_GLOBAL_STYLE)) == 1


def test_static_properties_skip_component(engine):
  code = (
    IMPORT
    + "export const Button = styled.button`color: red;`;\n"
    + "export const Icon = styled.span`color: blue;`;\n"
    + "Button.Icon = Icon;\n"
  )
  res = engine.run(code, "Button.tsx")

  assert res.diagnostics_of(DiagnosticType.STATIC_PROPERTIES)
  assert "Button" in res.skipped_components
  assert "Button" not in res.converted_components
  assert "Icon" in res.converted_components


def test_strict_mode_leaves_file_untouched():
  code = IMPORT + "export const Button = styled.button`color: red;`;\nButton.Icon = 1;\n"
  res = TransformEngine(config=RuntimeConfig(strict_mode=True)).run(code, "Button.tsx")

  assert res.code is None
  assert res.skipped_components == ["Button"]
  assert res.diagnostics_of(DiagnosticType.STATIC_PROPERTIES)


def test_trace_is_exported(engine):
  code = IMPORT + "export const Title = styled.h1`font-weight: 700;`;\n"
  res = engine.run(code, "Title.tsx")

  phases = [e["description"] for e in res.trace_events if e["type"] == "phase_start"]
  assert phases[0] == "Transform"
  assert "Aggregation" in phases


def test_result_is_pydantic_model(engine):
  res = engine.run(IMPORT + "export const A = styled.div`color: red;`;\n", "A.tsx")

  assert isinstance(res, ConversionResult)
  dumped = res.model_dump()
  assert dumped["converted_components"] == ["A"]


def test_convert_function():
  code = IMPORT + "export const Title = styled.h1`font-weight: 700;`;\n"
  out = sxs.convert(code, file_path="Title.tsx")

  assert out is not None
  assert "stylex.create" in out
  assert sxs.convert("const a = 1;\n") is None


def test_mixin_keys_suffix_on_collision():
  code = (
    'import styled, { css } from "styled-components";\n'
    + "const box = css`color: red;`;\n"
    + "const Box = styled.div`${box}`;\n"
    + "const ellipsis = css`overflow: hidden;`;\n"
  )
  host = parse_source(code, "Box.tsx")
  scan = scan_module(host, {"default": "styled", "styled": "styled", "css": "css"})

  assert mixin_keys(scan) == {"box": "boxMixin", "ellipsis": "ellipsis"}


def test_generic_named_props_type_converts(engine):
  """
  Scenario: `styled.button<Props>` with a props type declared in the module.
  Expectation: The component converts and the wrapper props type includes `Props`.
  """
  code = (
    IMPORT
    + "type Props = { $primary?: boolean };\n"
    + "export const Button = styled.button<Props>`\n"
    + "  color: ${p => (p.$primary ? 'white' : 'black')};\n"
    + "`;\n"
  )
  res = engine.run(code, "Button.tsx")

  assert res.success
  assert res.converted_components == ["Button"]
  assert 'type ButtonProps = React.ComponentProps<"button"> & Props;' in res.code
  assert "$primary, ...rest } = props;" in res.code
  assert "styled.button<Props>" not in res.code


def test_generic_inline_props_type_converts(engine):
  code = IMPORT + "export const Tag = styled.span<{ $tone?: string }>`\n  color: red;\n`;\n"
  res = engine.run(code, "Tag.tsx")

  assert res.success
  assert not res.has_errors
  assert res.converted_components == ["Tag"]
  assert 'React.ComponentProps<"span">, "className" | "style"> & { $tone?: string };' in res.code


def test_transient_props_do_not_reach_host_elements(engine):
  """
  Scenario: `$props` passed only at a usage site, or only declared in the props type.
  Expectation: Both are destructured out of the props forwarded to the element.
  """
  code = (
    IMPORT
    + "export const Box = styled.div`color: red;`;\n"
    + "export const Tag = styled.span<{ $tone?: string }>`color: blue;`;\n"
    + 'export const App = () => <Box $c="red"><Tag $tone="x" /></Box>;\n'
  )
  res = engine.run(code, "App.tsx")

  assert "const { $c, ...rest } = props;" in res.code
  assert "const { $tone, ...rest } = props;" in res.code
  assert "$c?: any;" in res.code


def test_as_is_forwarded_to_polymorphic_local_base(engine):
  """
  Scenario: `styled(A)` rendered with `as`, A being a local styled component.
  Expectation: B renders A and passes `as` through, so A's styles still apply.
  """
  code = (
    IMPORT
    + "const A = styled.div`color: red;`;\n"
    + "const B = styled(A)`background: blue;`;\n"
    + 'export const App = () => <B as="span" />;\n'
  )
  res = engine.run(code, "App.tsx")
  body_a = res.code.split("function A(props: AProps) {", 1)[1].split("\n}", 1)[0]
  body_b = res.code.split("function B(props: BProps) {", 1)[1].split("\n}", 1)[0]

  assert 'as: Component = "div"' in body_a
  assert "<Component" in body_a
  assert "<A" in body_b
  assert "as: Component" not in body_b
  assert "stylex.props(styles.b)" in body_b
  assert "as?: React.ElementType;" not in res.code.split("type BProps", 1)[1].split("\n\n", 1)[0]


def test_no_stylex_import_when_every_value_bails(engine):
  """
  Scenario: The only declaration reads an unresolvable theme value.
  Expectation: A plain passthrough component and no StyleX import.
  """
  code = IMPORT + "export const Link = styled.a`\n  color: ${p => p.theme.colors.primary};\n`;\n"
  res = engine.run(code, "Link.tsx")

  assert "export function Link(props: LinkProps)" in res.code
  assert "<a\n      {...props}\n    />" in res.code
  assert "@stylexjs/stylex" not in res.code
  assert "stylex." not in res.code
