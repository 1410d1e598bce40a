"""
Selector Lowering Pipeline.

Runs the lowering passes in their required order over every component of a
file, then reports and drops the raw selectors no pass could express.
"""

from typing import Iterable, Optional, Set, Type

from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.lowering.passes import DEFAULT_PASSES, LoweringContext, LoweringPass
from stylex_switcheroo.core.lowering.passes.base import COMPONENT_REF_RE, raw_selectors
from stylex_switcheroo.core.lowering.style_info import ComponentArena
from stylex_switcheroo.core.tracer import get_tracer


def leftover_reason(selector: str, context: LoweringContext) -> DiagnosticType:
  """
  Picks the diagnostic for a selector that survived every pass.

  Args:
      selector (str): The raw selector key.
      context (LoweringContext): Gives access to known component names.

  Returns:
      DiagnosticType: The most specific unsupported-selector kind.
  """
  refs = COMPONENT_REF_RE.findall(selector)
  if refs:
    known = all(ref in context.arena or ref in context.imported_components for ref in refs)
    return DiagnosticType.COMPONENT_SELECTOR if known else DiagnosticType.SELECTOR_UNKNOWN_COMPONENT
  if "," in selector:
    return DiagnosticType.SELECTOR_COMMA
  if "*" in selector:
    return DiagnosticType.UNIVERSAL_SELECTOR
  if "+" in selector or "~" in selector:
    return DiagnosticType.SELECTOR_SIBLING
  if " :" in selector:
    return DiagnosticType.SELECTOR_DESCENDANT_PSEUDO
  if ">" in selector or " " in selector.strip():
    return DiagnosticType.SELECTOR_COMBINATOR
  if "." in selector:
    return DiagnosticType.SELECTOR_CLASS
  return DiagnosticType.COMPLEX_SELECTOR


def report_leftovers(context: LoweringContext) -> None:
  for info in context.arena:
    for selector, _ in raw_selectors(info.styles):
      context.report(leftover_reason(selector, context), info, selector)
      info.styles.pop(selector, None)


def lower_components(
  arena: ComponentArena,
  diagnostics: Optional[DiagnosticSink] = None,
  relation_markers: bool = True,
  imported_components: Optional[Set[str]] = None,
  passes: Iterable[Type[LoweringPass]] = DEFAULT_PASSES,
) -> LoweringContext:
  """
  Lowers every raw selector of every component in `arena`.

  Args:
      arena (ComponentArena): Components of one file, mutated in place.
      diagnostics (Optional[DiagnosticSink]): Sink for unsupported selectors.
      relation_markers (bool): Allow `stylex.when.*` relation conditions.
      imported_components (Optional[Set[str]]): Component names imported from
          other modules (valid descendant targets).
      passes: Pass classes in execution order.

  Returns:
      LoweringContext: The context the passes ran with.
  """
  context = LoweringContext(
    arena=arena,
    diagnostics=diagnostics if diagnostics is not None else DiagnosticSink(),
    relation_markers=relation_markers,
    imported_components=set(imported_components or ()),
  )
  tracer = get_tracer()
  for pass_cls in passes:
    lowering_pass = pass_cls()
    tracer.start_phase(f"lower:{lowering_pass.name}", f"Selector lowering pass '{lowering_pass.name}'")
    try:
      lowering_pass.run(context)
    finally:
      tracer.end_phase()
  report_leftovers(context)
  return context
