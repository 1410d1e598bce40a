"""
Tests for the Style Model Converter.

Verifies:
1. Static declarations, shorthands and nested pseudo/at-rule blocks.
2. Folding into property-level conditionals.
3. Slot resolution callbacks (values, omission, splicing, block slots).
4. Raw selectors are kept for the lowering passes.
"""

from stylex_switcheroo.core.css.parser import parse_css_text
from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.styles import (
  ConversionContext,
  JsExpr,
  SlotResolution,
  StyleModelConverter,
  to_property_level_conditionals,
)
from stylex_switcheroo.core.styles.converter import nested_rule_paths, pseudo_path


def convert(css, **context):
  return StyleModelConverter(ConversionContext(**context)).convert(parse_css_text(css))


def test_static_declarations_and_shorthands():
  assert convert("color: red; padding: 4px 8px; z-index: 2;") == {
    "color": "red",
    "paddingBlock": "4px",
    "paddingInline": "8px",
    "zIndex": 2,
  }


def test_hover_folds_into_conditional():
  assert convert("color: red; &:hover { color: blue; }") == {"color": {"default": "red", ":hover": "blue"}}


def test_condition_without_base_gets_null_default():
  assert convert("@media (max-width: 600px) { padding: 0; }") == {
    "padding": {"default": None, "@media (max-width: 600px)": 0}
  }


def test_pseudo_element_object():
  assert convert("&::before { content: ''; }") == {"::before": {"content": "''"}}


def test_raw_selector_is_kept():
  assert convert("& > span { color: red; }") == {"& > span": {"color": "red"}}


def test_grouped_pseudo_selectors():
  result = convert("&:hover, &:focus { color: blue; }")
  assert result == {"color": {"default": None, ":hover": "blue", ":focus": "blue"}}


def test_important_is_recorded():
  ctx = ConversionContext()
  StyleModelConverter(ctx).convert(parse_css_text("color: red !important;"))
  assert ctx.important_properties == ["color"]


def test_unsupported_at_rule_is_dropped():
  assert convert("color: red; @font-face { font-family: x; }") == {"color": "red"}


def test_full_value_slot():
  def resolve(request):
    assert request.css_property == "color"
    assert request.is_full_value
    return SlotResolution(value=JsExpr("vars.primary"))

  text = "color: __INTERPOLATION_0__;"
  assert convert(text, resolve_slot=resolve) == {"color": JsExpr("vars.primary")}


def test_omitted_slot_drops_property():
  result = convert("color: __INTERPOLATION_0__; margin: 0;", resolve_slot=lambda r: SlotResolution.omit())
  assert result == {"margin": 0}


def test_spliced_slot_in_shorthand_token():
  """
  Scenario: `margin: ${n}px 0` with the slot resolving to a number.
  Expectation: The longhand receives the spliced static string.
  """
  result = convert("margin: __INTERPOLATION_0__px 0;", resolve_slot=lambda r: SlotResolution(value=4))
  assert result == {"marginBlock": "4px", "marginInline": 0}


def test_border_slot_targets_color_longhand():
  seen = []

  def resolve(request):
    seen.append(request.css_property)
    return SlotResolution(value=JsExpr("c"))

  result = convert("border: 1px solid __INTERPOLATION_0__;", resolve_slot=resolve)
  assert seen == ["borderColor"]
  assert result["borderColor"] == JsExpr("c")
  assert result["borderWidth"] == "1px"


def test_embedded_slot_becomes_template_literal():
  result = convert("width: calc(100% - __INTERPOLATION_0__);", resolve_slot=lambda r: SlotResolution(value=JsExpr("w")))
  assert result == {"width": JsExpr("`calc(100% - ${w})`")}


def test_block_slot_merges_styles():
  def resolve(request):
    assert request.css_property == ""
    return SlotResolution(styles={"overflow": "hidden"})

  assert convert("__INTERPOLATION_0__; color: red;", resolve_slot=resolve) == {"overflow": "hidden", "color": "red"}


def test_slot_conditions_are_passed():
  seen = []

  def resolve(request):
    seen.append(request.conditions)
    return SlotResolution(value="blue")

  convert("&:hover { color: __INTERPOLATION_0__; }", resolve_slot=resolve)
  assert seen == [(":hover",)]


def test_interpolated_property_name_is_reported():
  sink = DiagnosticSink()
  convert("__INTERPOLATION_0__: red;", diagnostics=sink)
  assert [d.type for d in sink.items] == [DiagnosticType.UNSUPPORTED_PROPERTY]


def test_selector_placeholder_is_substituted():
  result = convert(
    "@media __INTERPOLATION_0__ { color: red; }",
    resolve_selector=lambda i: "(max-width: 600px)",
  )
  assert result == {"color": {"default": None, "@media (max-width: 600px)": "red"}}


def test_unresolved_selector_drops_block():
  assert convert("color: red; &:hover __INTERPOLATION_0__ { color: blue; }") == {"color": "red"}


def test_nested_condition_inside_condition_is_reported():
  sink = DiagnosticSink()
  obj = {":hover": {"@media (x)": {"color": "red"}}}
  assert to_property_level_conditionals(obj, sink) == {}
  assert [d.type for d in sink.items] == [DiagnosticType.COMPLEX_SELECTOR]


def test_pseudo_path():
  assert pseudo_path("&:hover") == (":hover",)
  assert pseudo_path(":focus-visible") == (":focus-visible",)
  assert pseudo_path("&:hover::before") == ("::before", ":hover")
  assert pseudo_path("&:not(:disabled)") == (":not(:disabled)",)
  assert pseudo_path("& > span") is None


def test_nested_rule_paths():
  assert nested_rule_paths("@media (x)") == [("@media (x)",)]
  assert nested_rule_paths("@font-face") is None
  assert nested_rule_paths("&:hover, & span") is None
