"""
Tests for the Interpolation Classifier.

Verifies that every expression shape maps to exactly one tag, that the
first matching rule wins, and that unknown shapes fall back to `raw`.
"""

import pytest

from stylex_switcheroo.core.classifier import ClassificationContext, CssBlock, classify_source
from stylex_switcheroo.core.host.imports import collect_imports
from stylex_switcheroo.core.host.parser import parse_source
from stylex_switcheroo.enums import InterpolationTag


@pytest.fixture
def context():
  host = parse_source('import { truncate, theme } from "./helpers";\nimport * as mixins from "./mixins";\n')
  return ClassificationContext(
    known_styled=frozenset({"Icon"}),
    known_keyframes=frozenset({"spin"}),
    known_mixins=frozenset({"ellipsis"}),
    imports=collect_imports(host),
    css_local="css",
  )


def test_theme_access(context):
  result = classify_source("p => p.theme.colors.primary", context)
  assert result.tag == InterpolationTag.THEME_ACCESS
  assert result.path == ("colors", "primary")
  assert result.param_name == "p"
  assert result.prop_name is None


def test_theme_access_with_destructuring(context):
  result = classify_source("({ theme }) => theme.space.md", context)
  assert result.tag == InterpolationTag.THEME_ACCESS
  assert result.path == ("space", "md")


def test_prop_access(context):
  result = classify_source("(props) => props.$size", context)
  assert result.tag == InterpolationTag.PROP_ACCESS
  assert result.prop_name == "$size"


def test_ternary_conditional(context):
  result = classify_source('p => (p.$primary ? "white" : "black")', context)
  assert result.tag == InterpolationTag.CONDITIONAL
  assert result.path == ("$primary",)
  assert (result.truthy, result.falsy) == ("white", "black")
  assert result.has_falsy_branch
  assert result.comparison is None


def test_comparison_conditional(context):
  result = classify_source('p => p.size === "lg" ? 20 : 14', context)
  assert result.tag == InterpolationTag.CONDITIONAL
  assert result.comparison == ("===", "lg")
  assert (result.truthy, result.falsy) == (20, 14)


def test_negated_conditional(context):
  result = classify_source('p => !p.disabled ? "pointer" : "default"', context)
  assert result.tag == InterpolationTag.CONDITIONAL
  assert result.negated


def test_logical_and_conditional(context):
  result = classify_source('p => p.$active && "bold"', context)
  assert result.tag == InterpolationTag.CONDITIONAL
  assert result.truthy == "bold"
  assert not result.has_falsy_branch


def test_css_block_branch(context):
  result = classify_source("p => p.$active && css`color: red;`", context)
  assert result.tag == InterpolationTag.CONDITIONAL
  assert result.truthy == CssBlock("color: red;")


def test_css_block_with_substitutions_is_raw(context):
  result = classify_source("p => p.$active && css`color: ${p.c};`", context)
  assert result.tag == InterpolationTag.RAW


@pytest.mark.parametrize("op", ["||", "??"])
def test_logical_fallback(context, op):
  result = classify_source(f'p => p.color {op} "red"', context)
  assert result.tag == InterpolationTag.LOGICAL
  assert result.fallback == "red"
  assert result.operator == op


def test_helper_call(context):
  result = classify_source("truncate(2)", context)
  assert result.tag == InterpolationTag.HELPER_CALL
  assert result.import_source == "./helpers"
  assert result.imported_name == "truncate"
  assert result.args == ("2",)


def test_namespaced_helper_call(context):
  result = classify_source("mixins.ellipsis()", context)
  assert result.tag == InterpolationTag.HELPER_CALL
  assert result.helper_name == "mixins.ellipsis"
  assert result.imported_name == "*.ellipsis"


def test_local_call_is_raw(context):
  assert classify_source("localFn()", context).tag == InterpolationTag.RAW


def test_keyframes_reference(context):
  result = classify_source("spin", context)
  assert result.tag == InterpolationTag.KEYFRAMES_REF
  assert result.keyframes_name == "spin"


def test_mixin_reference(context):
  result = classify_source("ellipsis", context)
  assert result.tag == InterpolationTag.HELPER_CALL
  assert result.mixin_name == "ellipsis"


@pytest.mark.parametrize(
  "source",
  [
    "Icon",
    "p => { return p.x; }",
    "(a, b) => a",
    "p => p.a.b",
    "p => p.x ? p.y : 0",
    "p => p.x || p.y",
    "`${x}`",
    "not valid (",
  ],
)
def test_unmatched_shapes_are_raw(context, source):
  assert classify_source(source, context).tag == InterpolationTag.RAW


def test_classification_is_stable_on_reclassification(context):
  first = classify_source('p => p.$on ? "a" : "b"', context, index=3)
  second = classify_source(first.source, context, index=3)
  assert first == second


def test_refinement_keeps_base_fields(context):
  result = classify_source("(props) => props.$size", context, index=2)
  assert result.index == 2
  assert result.param_name == "props"
  assert result.source == "(props) => props.$size"
  assert result.path == ("$size",)
