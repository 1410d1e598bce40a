"""
Data structures representing the output of the migration pipeline.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the rewritten source, the diagnostics collected for the file, and the
execution trace.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from stylex_switcheroo.core.diagnostics import Diagnostic, DiagnosticType
from stylex_switcheroo.enums import DiagnosticCategory, Severity


class ConversionResult(BaseModel):
  """
  Container for the results of one file migration.

  `code` is `None` when the file contained nothing to migrate, in which case
  `diagnostics` is empty as well.
  """

  code: Optional[str] = Field(default=None, description="The rewritten source, or None if nothing applied.")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Ordered diagnostics for the file.")
  success: bool = Field(default=True, description="False if the file could not be processed at all.")
  converted_components: List[str] = Field(default_factory=list, description="Styled declarations that were migrated.")
  skipped_components: List[str] = Field(default_factory=list, description="Styled declarations left untouched.")
  style_keys: List[str] = Field(default_factory=list, description="Keys of the emitted stylex.create registry.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def changed(self) -> bool:
    return self.code is not None

  @property
  def has_errors(self) -> bool:
    """
    Check if any error-severity diagnostic was recorded.

    Returns:
        True if one or more errors are present.
    """
    return any(d.severity == Severity.ERROR for d in self.diagnostics)

  def diagnostics_of(self, kind: DiagnosticType) -> List[Diagnostic]:
    return [d for d in self.diagnostics if d.type == kind]

  def dynamic_node_diagnostics(self) -> List[Diagnostic]:
    return [d for d in self.diagnostics if d.category == DiagnosticCategory.DYNAMIC_NODE]
