"""
Lowering Pass Protocol.

A pass owns a family of raw selector keys. For each component it snapshots
the raw keys of the base object, lowers the ones it recognises, and deletes
them only after the snapshot has been fully processed.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Set, Tuple

from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.lowering.style_info import ComponentArena, StyleInfo
from stylex_switcheroo.core.styles.values import (
  StyleKey,
  StyleObject,
  is_condition_key,
  is_conditional_map,
  is_pseudo_element_key,
)
from stylex_switcheroo.core.tracer import get_tracer

COMPONENT_REF_RE = re.compile(r"\$\{([A-Za-z_$][\w$]*)\}")


@dataclass
class LoweringContext:
  """
  Shared state of one lowering run.

  Attributes:
      arena: All components of the file.
      diagnostics: Diagnostic sink.
      relation_markers: Encode relations with StyleX markers when possible.
      imported_components: Local names of components imported from other modules.
  """

  arena: ComponentArena
  diagnostics: DiagnosticSink = field(default_factory=DiagnosticSink)
  relation_markers: bool = True
  imported_components: Set[str] = field(default_factory=set)

  def report(self, kind: DiagnosticType, info: StyleInfo, selector: str) -> None:
    self.diagnostics.report(kind, location=info.location, component=info.name, selector=selector)


def is_raw_selector_key(key: StyleKey, value: Any) -> bool:
  """Raw selector keys hold a style body and are neither properties nor conditions."""
  if not isinstance(key, str) or not isinstance(value, dict) or is_conditional_map(value):
    return False
  return not is_condition_key(key) and not is_pseudo_element_key(key)


def raw_selectors(obj: StyleObject) -> List[Tuple[str, StyleObject]]:
  return [(k, v) for k, v in obj.items() if is_raw_selector_key(k, v)]


def strip_self(selector: str) -> str:
  """`& > *` -> `> *`; leaves other selectors untouched."""
  text = selector.strip()
  if text.startswith("& ") and not text.startswith("& &"):
    return text[2:].strip()
  return text


def base_value(obj: StyleObject, prop: Any) -> Any:
  """Non-conditional value of `prop` in `obj` (the `default` of a conditional map)."""
  value = obj.get(prop)
  if is_conditional_map(value):
    return value.get("default")
  return value


class LoweringPass:
  """
  Base class for selector lowering passes.
  """

  name = "pass"

  def run(self, context: LoweringContext) -> None:
    for info in context.arena:
      consumed: List[str] = []
      for selector, body in raw_selectors(info.styles):
        if self.lower(selector, body, info, context):
          get_tracer().log_lowering(self.name, info.name, selector)
          consumed.append(selector)
      for selector in consumed:
        info.styles.pop(selector, None)
    self.finish(context)

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    """Lowers one raw selector; returns True if the key was consumed."""
    raise NotImplementedError

  def finish(self, context: LoweringContext) -> None:
    """Hook run after every component was visited."""
