"""
Tests for deterministic registry naming.
"""

import pytest

from stylex_switcheroo.core.naming import camelize, js_literal, literal_suffix, prop_suffix, style_key


@pytest.mark.parametrize(
  "component, key",
  [("Button", "button"), ("PrimaryButton", "primaryButton"), ("$Wrapper", "wrapper"), ("A", "a")],
)
def test_style_key(component, key):
  assert style_key(component) == key


@pytest.mark.parametrize(
  "prop, suffix",
  [("$isActive", "Active"), ("disabled", "Disabled"), ("$size", "Size"), ("island", "Island"), ("is", "Is")],
)
def test_prop_suffix(prop, suffix):
  assert prop_suffix(prop) == suffix


@pytest.mark.parametrize(
  "value, suffix",
  [("lg", "Lg"), ("x-large", "XLarge"), (2, "2"), (True, "True"), (False, "False"), (None, "Null"), ("", "Empty")],
)
def test_literal_suffix(value, suffix):
  assert literal_suffix(value) == suffix


def test_camelize():
  assert camelize("external-link") == "ExternalLink"
  assert camelize("_blank") == "Blank"
  assert camelize("data state") == "DataState"


def test_js_literal():
  assert js_literal(None) == "null"
  assert js_literal(True) == "true"
  assert js_literal(4.0) == "4"
  assert js_literal(0.5) == "0.5"
  assert js_literal("red") == '"red"'
