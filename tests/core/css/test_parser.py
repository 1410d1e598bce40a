"""
Tests for the Style Template Parser.

Verifies:
1. Nested rules, at-rules and selector normalization.
2. Placeholder substitution and the slot -> context map.
3. Comment stripping and quote/parenthesis aware splitting.
4. Malformed templates yield None instead of raising.
"""

import pytest

from stylex_switcheroo.core.css import nodes
from stylex_switcheroo.core.css.parser import (
  build_template_text,
  normalize_selector,
  parse_css_text,
  parse_style_template,
  split_top_level,
)
from stylex_switcheroo.core.css.tokens import CssLexer, TokenType
from stylex_switcheroo.core.errors import CssSyntaxError


def test_flat_declarations():
  root = parse_css_text("color: red; padding: 4px 8px;")
  assert root.selector == "&"
  assert [(d.property, d.value) for d in root.declarations] == [("color", "red"), ("padding", "4px 8px")]


def test_nested_rules_and_at_rules():
  """
  Scenario: A pseudo block and a media block with a nested pseudo.
  Expectation: Tree mirrors the nesting; at-rule stack is inherited.
  """
  root = parse_css_text(
    """
    color: red;
    &:hover { color: blue; }
    @media (max-width: 600px) {
      padding: 0;
      &:focus { outline: none; }
    }
    """
  )
  assert [r.selector for r in root.nested_rules] == ["&:hover", "@media (max-width: 600px)"]
  media = root.nested_rules[1]
  assert media.is_at_rule
  assert media.at_rule_stack == ["@media (max-width: 600px)"]
  focus = media.nested_rules[0]
  assert focus.selector == "&:focus"
  assert focus.at_rule_stack == ["@media (max-width: 600px)"]
  assert [r.selector for r in root.walk()] == ["&", "&:hover", "@media (max-width: 600px)", "&:focus"]


def test_property_names_are_lowercased_except_custom_properties():
  root = parse_css_text("COLOR: red; --Brand-Color: blue;")
  assert [d.property for d in root.declarations] == ["color", "--Brand-Color"]


def test_comments_are_dropped():
  root = parse_css_text("/* heading */ color: red; // trailing\n margin: 0;")
  assert [d.property for d in root.declarations] == ["color", "margin"]


def test_semicolons_inside_url_are_kept():
  root = parse_css_text("background-image: url(data:image/png;base64,AAA);")
  assert len(root.declarations) == 1
  assert root.declarations[0].value == "url(data:image/png;base64,AAA)"


def test_braces_inside_strings_are_kept():
  root = parse_css_text('content: "{";')
  assert root.declarations[0].value == '"{"'


@pytest.mark.parametrize(
  "raw, expected",
  [
    ("&>span", "& > span"),
    ("&  +  &", "& + &"),
    ("& ~ &", "& ~ &"),
    ("&:hover,&:focus", "&:hover, &:focus"),
    ('&[href^="https"]', '&[href^="https"]'),
    ("&:not(> a)", "&:not(> a)"),
  ],
)
def test_normalize_selector(raw, expected):
  assert normalize_selector(raw) == expected


def test_split_top_level_respects_parentheses_and_quotes():
  assert split_top_level("a, rgb(1, 2, 3), 'x, y'", ",") == ["a", "rgb(1, 2, 3)", "'x, y'"]
  assert split_top_level(" , a ,", ",") == ["a"]


def test_build_template_text_inserts_placeholders():
  assert build_template_text(["color: ", "; margin: ", ";"]) == (
    "color: __INTERPOLATION_0__; margin: __INTERPOLATION_1__;"
  )


def test_placeholder_helpers():
  assert nodes.make_placeholder(3) == "__INTERPOLATION_3__"
  assert nodes.find_placeholders("a __INTERPOLATION_2__ b __INTERPOLATION_0__") == [2, 0]
  assert nodes.is_only_placeholder("  __INTERPOLATION_1__ ")
  assert not nodes.is_only_placeholder("1px __INTERPOLATION_1__")


def test_value_slot_context():
  """
  Scenario: One interpolation as a full value, one embedded in a value.
  Expectation: Contexts record the property and the full-value flag.
  """
  parsed = parse_style_template(["color: ", "; border: 1px solid ", ";"], ["e0", "e1"])
  assert parsed is not None
  first = parsed.location(0).context
  assert first.property == "color"
  assert first.is_full_value
  assert first.selector == "&"
  second = parsed.location(1).context
  assert second.property == "border"
  assert not second.is_full_value
  assert parsed.location(1).expression == "e1"


def test_block_slot_becomes_bare_declaration():
  parsed = parse_style_template(["\n  ", ";\n  color: blue;\n"], ["mixin"])
  decls = parsed.root.declarations
  assert decls[0].is_block_slot
  assert decls[0].value == "__INTERPOLATION_0__"
  assert decls[1].property == "color"
  assert parsed.location(0).context.property is None


def test_slot_glued_before_declaration_without_semicolon():
  """
  Scenario: `${truncate}\n color: blue;` (no semicolon after the mixin).
  Expectation: The slot is split off as its own block declaration.
  """
  parsed = parse_style_template(["\n  ", "\n  color: blue;\n"], ["mixin"])
  decls = parsed.root.declarations
  assert decls[0].is_block_slot
  assert (decls[1].property, decls[1].value) == ("color", "blue")


def test_selector_slot_context():
  parsed = parse_style_template(["\n  &:hover ", " { color: red; }\n"], ["Icon"])
  ctx = parsed.location(0).context
  assert ctx.is_in_selector
  assert ctx.selector == "&:hover __INTERPOLATION_0__"


def test_slot_inside_media_query():
  parsed = parse_style_template(["@media (max-width: 600px) { color: ", "; }"], ["e0"])
  ctx = parsed.location(0).context
  assert ctx.selector == "&"
  assert ctx.at_rule_stack == ("@media (max-width: 600px)",)


def test_property_name_slot_context():
  parsed = parse_style_template(["", ": red;"], ["prop"])
  ctx = parsed.location(0).context
  assert ctx.is_in_property_name


def test_slot_in_comment_is_unplaced():
  parsed = parse_style_template(["color: red; /* ", " */"], ["e0"])
  assert parsed is not None
  assert parsed.unplaced(1) == [0]


@pytest.mark.parametrize(
  "segments",
  [
    ["color: red; }"],
    ["&:hover { color: red;"],
    ["{ color: red; }"],
    ["content: 'open;"],
  ],
)
def test_malformed_templates_return_none(segments):
  assert parse_style_template(segments, []) is None


def test_parse_css_text_raises_on_malformed_input():
  with pytest.raises(CssSyntaxError):
    parse_css_text("a { b: c;")


def test_lexer_token_stream():
  kinds = [t.kind for t in CssLexer().tokenize("a { b: c; }")]
  assert kinds == [TokenType.TEXT, TokenType.LBRACE, TokenType.TEXT, TokenType.SEMICOLON, TokenType.RBRACE]
