"""
Tests for shorthand expansion.

Verifies:
1. Border family splits into width/style/color.
2. Box shorthands map to logical longhands where possible.
3. Animation and background expand only in the unambiguous cases.
4. Interpolated border tokens are attributed to the free slot.
"""

import pytest

from stylex_switcheroo.core.styles.shorthand import (
  border_target,
  expand_shorthand,
  infer_border_slot,
  split_tokens,
)


def test_split_tokens_respects_functions():
  assert split_tokens("1px  rgb(0, 0, 0)") == ["1px", "rgb(0, 0, 0)"]
  assert split_tokens("'a b' c") == ["'a b'", "c"]


def test_border_expansion():
  assert expand_shorthand("border", "1px solid red") == [
    ("borderWidth", "1px"),
    ("borderStyle", "solid"),
    ("borderColor", "red"),
  ]


def test_border_side_expansion():
  assert expand_shorthand("borderTop", "2px dashed") == [("borderTopWidth", "2px"), ("borderTopStyle", "dashed")]


def test_single_token_border_is_kept():
  assert expand_shorthand("border", "none") is None


def test_ambiguous_border_is_kept():
  assert expand_shorthand("border", "solid dashed") is None


@pytest.mark.parametrize(
  "prop, value, expected",
  [
    ("margin", "0 auto", [("marginBlock", "0"), ("marginInline", "auto")]),
    ("padding", "1px 2px 3px", [("paddingTop", "1px"), ("paddingInline", "2px"), ("paddingBottom", "3px")]),
    (
      "padding",
      "1px 2px 3px 4px",
      [("paddingTop", "1px"), ("paddingRight", "2px"), ("paddingBottom", "3px"), ("paddingLeft", "4px")],
    ),
    ("margin", "4px", None),
  ],
)
def test_box_expansion(prop, value, expected):
  assert expand_shorthand(prop, value) == expected


def test_animation_expansion():
  assert expand_shorthand("animation", "spin 1s linear infinite") == [
    ("animationName", "spin"),
    ("animationDuration", "1s"),
    ("animationTimingFunction", "linear"),
    ("animationIterationCount", "infinite"),
  ]


def test_multiple_animations_are_kept():
  assert expand_shorthand("animation", "a 1s, b 2s") is None


@pytest.mark.parametrize(
  "value, expected",
  [
    ("red", [("backgroundColor", "red")]),
    ("#fff", [("backgroundColor", "#fff")]),
    ("rgba(0, 0, 0, 0.5)", [("backgroundColor", "rgba(0, 0, 0, 0.5)")]),
    ("none", None),
    ("url(x.png)", None),
    ("__INTERPOLATION_0__", None),
  ],
)
def test_background_expansion(value, expected):
  assert expand_shorthand("background", value) == expected


def test_other_properties_are_not_expanded():
  assert expand_shorthand("transition", "all 0.2s ease") is None


def test_infer_border_slot_uses_remaining_slot():
  tokens = ["1px", "__INTERPOLATION_0__", "red"]
  assert infer_border_slot(tokens, 1) == "style"


def test_infer_border_slot_uses_position():
  tokens = ["__INTERPOLATION_0__", "__INTERPOLATION_1__", "__INTERPOLATION_2__"]
  assert infer_border_slot(tokens, 0) == "width"
  assert infer_border_slot(tokens, 1) == "style"
  assert infer_border_slot(tokens, 2) == "color"


def test_border_target():
  tokens = ["1px", "solid", "__INTERPOLATION_0__"]
  assert border_target("border", tokens, 2) == "borderColor"
  assert border_target("color", ["__INTERPOLATION_0__"], 0) == "color"
