"""
Tests for property token and value normalization.
"""

import pytest

from stylex_switcheroo.core.styles.properties import (
  normalize_value,
  quote_content,
  strip_important,
  to_camel_case,
  to_kebab_case,
)


@pytest.mark.parametrize(
  "css, token",
  [
    ("background-color", "backgroundColor"),
    ("COLOR", "color"),
    ("-webkit-line-clamp", "WebkitLineClamp"),
    ("-moz-appearance", "MozAppearance"),
    ("-ms-flex", "msFlex"),
    ("--brand-color", "--brand-color"),
  ],
)
def test_to_camel_case(css, token):
  assert to_camel_case(css) == token


@pytest.mark.parametrize(
  "token, css",
  [
    ("backgroundColor", "background-color"),
    ("WebkitLineClamp", "-webkit-line-clamp"),
    ("msFlex", "-ms-flex"),
    ("--x", "--x"),
  ],
)
def test_to_kebab_case(token, css):
  assert to_kebab_case(token) == css


def test_strip_important():
  assert strip_important("red !important") == ("red", True)
  assert strip_important("red ! IMPORTANT") == ("red", True)
  assert strip_important("red") == ("red", False)


@pytest.mark.parametrize(
  "prop, raw, expected",
  [
    ("opacity", "0.5", 0.5),
    ("zIndex", "10", 10),
    ("lineHeight", "1.5", 1.5),
    ("fontWeight", "700", 700),
    ("width", "0", 0),
    ("margin", "0", 0),
    ("width", "0px", "0px"),
    ("width", "10", "10"),
    ("--gap", "0", "0"),
    ("fontFamily", "Inter,   sans-serif", "Inter, sans-serif"),
  ],
)
def test_normalize_value(prop, raw, expected):
  result = normalize_value(prop, raw)
  assert result == expected
  assert type(result) is type(expected)


@pytest.mark.parametrize(
  "raw, expected",
  [
    ("hello", '"hello"'),
    ('"x"', '"x"'),
    ("''", "''"),
    ("none", "none"),
    ("attr(data-label)", "attr(data-label)"),
    ("", '""'),
  ],
)
def test_quote_content(raw, expected):
  assert quote_content(raw) == expected
  assert normalize_value("content", raw) == expected
