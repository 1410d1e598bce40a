"""
Tests for per-declaration conversion through the ComponentBuilder.
"""

import pytest

from stylex_switcheroo.core.classifier import ClassificationContext
from stylex_switcheroo.core.components import ComponentBuilder, fill_variant_defaults, forward_filter
from stylex_switcheroo.core.decisions.adapter import Adapter, ImportSink
from stylex_switcheroo.core.decisions.engine import DecisionEngine
from stylex_switcheroo.core.decisions.handlers import HandlerEnv
from stylex_switcheroo.core.decisions.types import VariantBranch
from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.engine import mixin_keys
from stylex_switcheroo.core.host.imports import collect_imports, styled_components_locals
from stylex_switcheroo.core.host.parser import parse_expression, parse_source
from stylex_switcheroo.core.host.scanner import scan_module, string_constants
from stylex_switcheroo.core.lowering import InlineStyleProp, StyleInfo

HEADER = 'import styled, { css, keyframes } from "styled-components";\n'


class Module:
  """A parsed module plus a builder wired the way the engine wires it."""

  def __init__(self, code):
    host = parse_source(HEADER + code)
    table = collect_imports(host)
    sc_locals = styled_components_locals(table)
    self.scan = scan_module(host, sc_locals)
    self.diagnostics = DiagnosticSink()
    env = HandlerEnv(
      adapter=Adapter(),
      imports=ImportSink(),
      classification=ClassificationContext(
        known_styled=frozenset(d.name for d in self.scan.styled),
        known_keyframes=frozenset(d.name for d in self.scan.keyframes),
        known_mixins=frozenset(d.name for d in self.scan.mixins),
        imports=table,
        css_local=sc_locals.get("css"),
      ),
      mixin_keys=mixin_keys(self.scan),
    )
    self.builder = ComponentBuilder(DecisionEngine(env), self.diagnostics, constants=string_constants(host))

  def build(self, name):
    return self.builder.build(self.scan.styled_by_name[name])

  @property
  def kinds(self):
    return [d.type for d in self.diagnostics.items]


def test_static_component():
  module = Module("const Box = styled.div`\n  color: red;\n  &:hover { color: blue; }\n`;\n")
  info = module.build("Box")
  assert (info.name, info.style_key, info.base, info.base_is_intrinsic) == ("Box", "box", "div", True)
  assert info.styles == {"color": {"default": "red", ":hover": "blue"}}
  assert module.kinds == []


def test_base_component_and_type_arguments():
  module = Module("export const Title = styled(Link)<{ $size: number }>`font-weight: 700;`;\n")
  info = module.build("Title")
  assert info.base == "Link"
  assert not info.base_is_intrinsic
  assert info.is_exported
  assert info.type_arguments == "{ $size: number }"
  assert info.transient_props == ["$size"]


def test_ternary_records_variants():
  module = Module('const Button = styled.button`\n  color: ${(p) => (p.$primary ? "white" : "black")};\n`;\n')
  info = module.build("Button")
  assert [(v.name, v.guard) for v in info.variants] == [
    ("buttonPrimary", "$primary"),
    ("buttonNotPrimary", "!$primary"),
  ]
  assert info.prop_dependencies == ["$primary"]


def test_prop_access_records_style_function():
  module = Module("const Bar = styled.div`\n  width: ${(p) => p.$size};\n  height: 4px;\n`;\n")
  info = module.build("Bar")
  assert info.styles == {"height": "4px"}
  entry = info.dynamic_fns[0]
  assert (entry.key, entry.css_property, entry.prop_name) == ("barSize", "width", "$size")
  assert info.prop_dependencies == ["$size"]


def test_logical_falls_back_to_inline_style():
  module = Module('const Text = styled.p`\n  color: ${(p) => p.color || "red"};\n`;\n')
  info = module.build("Text")
  assert info.inline_styles == [InlineStyleProp("color", 'color || "red"', ("color",))]
  assert DiagnosticType.ARROW_LOGICAL in module.kinds


def test_mixin_reference():
  module = Module(
    "const ellipsis = css`\n  overflow: hidden;\n`;\n"
    "const Label = styled.span`\n  ${ellipsis};\n  color: gray;\n`;\n"
  )
  info = module.build("Label")
  assert info.mixin_refs == ["styles.ellipsis"]
  assert info.styles == {"color": "gray"}
  assert module.builder.build_mixin(module.scan.mixins[0]) == {"overflow": "hidden"}


def test_dynamic_mixin_is_rejected():
  module = Module("const dyn = css`\n  color: ${(p) => p.color};\n`;\n")
  assert module.builder.build_mixin(module.scan.mixins[0]) is None
  assert DiagnosticType.MIXIN_NOT_PLAIN_OBJECT in module.kinds


def test_keyframes():
  module = Module("const pulse = keyframes`\n  0%, 100% { opacity: 0; }\n  50% { opacity: 1; }\n`;\n")
  frames = module.builder.build_keyframes(module.scan.keyframes[0])
  assert frames == {"0%": {"opacity": 0}, "100%": {"opacity": 0}, "50%": {"opacity": 1}}


def test_malformed_template_is_left_alone():
  module = Module("const Broken = styled.div`\n  color: red; }\n`;\n")
  assert module.build("Broken") is None
  assert module.kinds == [DiagnosticType.FAILED_TO_PARSE_EXPRESSION]


def test_component_selector_keeps_reference_for_lowering():
  module = Module(
    "const Icon = styled.svg`width: 16px;`;\n"
    "const Button = styled.button`\n  ${Icon} { width: 20px; }\n`;\n"
  )
  info = module.build("Button")
  assert info.styles == {"${Icon}": {"width": "20px"}}


def test_selector_constant_is_inlined():
  module = Module(
    'const mobile = "@media (max-width: 600px)";\n'
    "const Box = styled.div`\n  color: red;\n  ${mobile} { color: blue; }\n`;\n"
  )
  info = module.build("Box")
  assert info.styles == {"color": {"default": "red", "@media (max-width: 600px)": "blue"}}


def test_static_attrs():
  module = Module('const Input = styled.input.attrs({ type: "text" })`\n  border: none;\n`;\n')
  info = module.build("Input")
  assert info.static_attrs == {"type": '"text"'}


def test_prop_dependent_attrs_are_reported():
  module = Module("const Input = styled.input.attrs((p) => ({ size: p.small ? 5 : 10 }))`\n  border: none;\n`;\n")
  info = module.build("Input")
  assert info.static_attrs == {}
  assert module.kinds == [DiagnosticType.UNSUPPORTED_ARROW]


def test_should_forward_prop_config():
  module = Module(
    "const Box = styled.div.withConfig({\n"
    '  shouldForwardProp: (prop) => !["color", "size"].includes(prop),\n'
    "})`\n  display: flex;\n`;\n"
  )
  info = module.build("Box")
  assert info.has_should_forward_prop
  assert info.forward_filter == ["color", "size"]


@pytest.mark.parametrize(
  "source, expected",
  [
    ('(prop) => !["a", "b"].includes(prop)', ("a", "b")),
    ('prop => prop !== "size"', ("size",)),
    ("(prop) => isPropValid(prop)", ()),
    ('(prop) => !prop.startsWith("$")', ()),
    ("(prop) => true", None),
    ("() => false", None),
  ],
)
def test_forward_filter(source, expected):
  assert forward_filter(parse_expression(source)) == expected


def test_fill_variant_defaults():
  info = StyleInfo(name="Button", style_key="button", base="button", styles={"color": {"default": "red", ":hover": "pink"}})
  info.variants.append(VariantBranch("buttonActive", "active", {"color": {"default": None, ":focus": "blue"}}))
  info.variants.append(VariantBranch("buttonOther", "other", {"margin": {"default": None, ":focus": 0}}))
  fill_variant_defaults(info)
  assert info.variants[0].styles["color"] == {"default": "red", ":focus": "blue"}
  assert info.variants[1].styles["margin"] == {"default": None, ":focus": 0}


def test_transient_props_collected_from_template_type_and_attrs():
  module = Module(
    'const A = styled.div.attrs((p) => ({ "aria-busy": p.$busy }))<{ $tone?: string }>`\n'
    '  color: ${(p) => (p.$on ? "red" : "blue")};\n'
    "`;\n"
  )
  info = module.build("A")
  assert info.transient_props == ["$on", "$tone", "$busy"]
