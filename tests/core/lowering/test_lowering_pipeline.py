"""
Tests for the lowering pipeline: pass ordering, leftover reporting and tracing.
"""

import pytest

from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.lowering import ComponentArena, StyleInfo, lower_components
from stylex_switcheroo.core.lowering.passes import DEFAULT_PASSES, LoweringContext, SpecificityPass
from stylex_switcheroo.core.lowering.pipeline import leftover_reason
from stylex_switcheroo.core.tracer import TraceEventType, get_tracer


@pytest.fixture
def arena():
  arena = ComponentArena()
  arena.add(StyleInfo(name="Icon", style_key="icon", base="svg", styles={"width": 16}))
  return arena


@pytest.mark.parametrize(
  "selector, expected",
  [
    ("${Icon} span", DiagnosticType.COMPONENT_SELECTOR),
    ("${Ghost} span", DiagnosticType.SELECTOR_UNKNOWN_COMPONENT),
    ("& span, & a", DiagnosticType.SELECTOR_COMMA),
    ("& > * > span", DiagnosticType.UNIVERSAL_SELECTOR),
    ("& ~ span", DiagnosticType.SELECTOR_SIBLING),
    ("& :hover", DiagnosticType.SELECTOR_DESCENDANT_PSEUDO),
    ("& > span", DiagnosticType.SELECTOR_COMBINATOR),
    ("&.active", DiagnosticType.SELECTOR_CLASS),
    ("&#main", DiagnosticType.COMPLEX_SELECTOR),
  ],
)
def test_leftover_reason(arena, selector, expected):
  assert leftover_reason(selector, LoweringContext(arena=arena)) == expected


def test_imported_component_counts_as_known(arena):
  context = LoweringContext(arena=arena, imported_components={"Avatar"})
  assert leftover_reason("${Avatar} + span", context) == DiagnosticType.COMPONENT_SELECTOR


def test_leftovers_are_reported_and_dropped(arena):
  sink = DiagnosticSink()
  button = StyleInfo(
    name="Button",
    style_key="button",
    base="button",
    styles={"color": "red", "& > span": {"color": "blue"}, "&.active": {"color": "green"}},
  )
  arena.add(button)
  lower_components(arena, sink)
  assert button.styles == {"color": "red"}
  assert [(d.type, d.context["component"]) for d in sink.items] == [
    (DiagnosticType.SELECTOR_COMBINATOR, "Button"),
    (DiagnosticType.SELECTOR_CLASS, "Button"),
  ]


def test_passes_run_in_order(arena):
  """
  Scenario: a selector handled by the first pass and another by the fifth.
  Expectation: lowering events appear in pass order with the pass name attached.
  """
  info = StyleInfo(
    name="List",
    style_key="list",
    base="ul",
    styles={"&&": {"margin": 0}, "& > *": {"padding": 0}},
  )
  arena.add(info)
  lower_components(arena)

  events = [e for e in get_tracer().export() if e["type"] == TraceEventType.LOWERING]
  assert [e["metadata"]["pass"] for e in events] == ["universal", "specificity"]
  assert [e["metadata"]["selector"] for e in events] == ["& > *", "&&"]

  phases = [e["description"] for e in get_tracer().export() if e["type"] == TraceEventType.PHASE_START]
  assert phases == [f"lower:{p.name}" for p in DEFAULT_PASSES]


def test_custom_pass_list(arena):
  info = StyleInfo(name="List", style_key="list", base="ul", styles={"& > *": {"padding": 0}, "&&": {"margin": 0}})
  arena.add(info)
  sink = DiagnosticSink()
  lower_components(arena, sink, passes=[SpecificityPass])
  assert info.styles == {"margin": 0}
  assert not info.extra_styles
  assert [d.type for d in sink.items] == [DiagnosticType.SPECIFICITY_HACK, DiagnosticType.UNIVERSAL_SELECTOR]


def test_returns_context(arena):
  context = lower_components(arena, relation_markers=False, imported_components={"Avatar"})
  assert context.relation_markers is False
  assert context.imported_components == {"Avatar"}
  assert context.arena is arena
