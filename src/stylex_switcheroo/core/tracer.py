"""
Compilation Trace Logger.

Records the step-by-step execution of one file's migration:
1. Lifecycle phases (scanning, parsing, lowering, emission).
2. Decisions taken for each interpolation slot.
3. Selector lowering actions.
4. Import additions and removals.

The output is a list of plain dictionaries suitable for JSON serialization.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  DECISION = "decision"
  LOWERING = "lowering"
  DIAGNOSTIC = "diagnostic"
  IMPORT_ACTION = "import_action"
  INSPECTION = "inspection"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Collects trace events for one engine run.
  """

  def __init__(self) -> None:
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase and returns its id."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    if not self._active_phases:
      return
    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_decision(self, component: str, index: int, tag: str, action: str) -> None:
    self._log_simple(
      TraceEventType.DECISION,
      f"{component}[{index}] {tag} -> {action}",
      {"component": component, "index": index, "tag": tag, "action": action},
    )

  def log_lowering(self, pass_name: str, component: str, selector: str) -> None:
    self._log_simple(
      TraceEventType.LOWERING,
      f"{pass_name}: {component} '{selector}'",
      {"pass": pass_name, "component": component, "selector": selector},
    )

  def log_diagnostic(self, message: str, severity: str) -> None:
    self._log_simple(TraceEventType.DIAGNOSTIC, message, {"level": severity})

  def log_import(self, action: str, source: str, names: List[str]) -> None:
    self._log_simple(
      TraceEventType.IMPORT_ACTION,
      f"{action} {', '.join(names) or '*'} from '{source}'",
      {"action": action, "source": source, "names": names},
    )

  def log_inspection(self, subject: str, outcome: str, detail: str = "") -> None:
    """Logs a decision point where no change occurred."""
    self._log_simple(TraceEventType.INSPECTION, f"Inspecting '{subject}'", {"outcome": outcome, "detail": detail})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns the events as dictionaries."""
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer() -> TraceLogger:
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
  return _GLOBAL_TRACER
