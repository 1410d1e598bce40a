"""
Unsupported Pattern Scan.

Runs before any conversion and reports structural styled-components features
that have no StyleX counterpart. Each finding is reported once per file so
the diagnostic set of a module is stable regardless of how many times a
pattern repeats.

Findings:

- `createGlobalStyle` declarations (left untouched);
- higher-order styled factories such as `hoc(styled)` (left untouched);
- static properties assigned to a styled component (`Button.Icon = Icon`),
  whose component is skipped;
- specificity hacks combined with component selectors (`&& ${Child}`), whose
  component is skipped.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Set

from tree_sitter import Node

from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.host.parser import HostTree, node_text, walk
from stylex_switcheroo.core.host.scanner import ScanResult

_HACK_WITH_COMPONENT_RE = re.compile(r"&{2,}[^{};]*\$\{|\$\{[^}]*\}\s*&{2,}")


@dataclass
class UnsupportedFindings:
  """
  Result of the scan.

  Attributes:
      skipped: Styled declarations that must stay untouched.
      count: Number of distinct findings.
  """

  skipped: Set[str] = field(default_factory=set)
  count: int = 0

  @property
  def found(self) -> bool:
    return self.count > 0


class UnsupportedPatternScanner:
  """
  Scans one module for structural unsupported features.
  """

  def __init__(self, host: HostTree, scan: ScanResult, sc_locals: Dict[str, str], diagnostics: DiagnosticSink) -> None:
    self.host = host
    self.scan = scan
    self.sc_locals = sc_locals
    self.diagnostics = diagnostics
    self.findings = UnsupportedFindings()

  def _report(self, kind: DiagnosticType, node: Node, key: str = "", **context: str) -> None:
    if self.diagnostics.report_once(kind, key, location=self.host.location(node), **context) is not None:
      self.findings.count += 1

  def run(self) -> UnsupportedFindings:
    self.check_global_styles()
    self.check_hoc_factories()
    self.check_static_properties()
    self.check_specificity_selectors()
    return self.findings

  def check_global_styles(self) -> None:
    local = self.sc_locals.get("createGlobalStyle")
    if not local:
      return
    for node in walk(self.host.root):
      if node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "identifier" and node_text(callee) == local:
          self._report(DiagnosticType.CREATE_GLOBAL_STYLE, node)
          return

  def check_hoc_factories(self) -> None:
    """`hoc(styled)`: the `styled` binding passed as an argument."""
    styled = self.sc_locals.get("styled")
    if not styled:
      return
    for node in walk(self.host.root):
      if node.type != "call_expression":
        continue
      callee = node.child_by_field_name("function")
      args = node.child_by_field_name("arguments")
      if callee is None or args is None or args.type != "arguments":
        continue
      if callee.type == "identifier" and node_text(callee) == styled:
        continue
      if any(a.type == "identifier" and node_text(a) == styled for a in args.named_children):
        self._report(DiagnosticType.HOC_STYLED_FACTORY, node)
        return

  def check_static_properties(self) -> None:
    """`Styled.prop = value` assignments at any depth."""
    names = {d.name for d in self.scan.styled}
    for node in walk(self.host.root):
      if node.type != "assignment_expression":
        continue
      left = node.child_by_field_name("left")
      if left is None or left.type != "member_expression":
        continue
      obj = left.child_by_field_name("object")
      if obj is not None and obj.type == "identifier" and node_text(obj) in names:
        name = node_text(obj)
        self._report(DiagnosticType.STATIC_PROPERTIES, node, component=name)
        self.findings.skipped.add(name)

  def check_specificity_selectors(self) -> None:
    for decl in self.scan.styled:
      text = "${}".join(decl.template.segments)
      if _HACK_WITH_COMPONENT_RE.search(text):
        self._report(DiagnosticType.SPECIFICITY_HACK, decl.statement, component=decl.name)
        self.findings.skipped.add(decl.name)


def scan_unsupported(
  host: HostTree,
  scan: ScanResult,
  sc_locals: Dict[str, str],
  diagnostics: DiagnosticSink,
) -> UnsupportedFindings:
  """
  Runs every structural check over a module.

  Args:
      host (HostTree): Parsed module.
      scan (ScanResult): Styled declarations found in it.
      sc_locals (Dict[str, str]): `styled-components` export -> local name.
      diagnostics (DiagnosticSink): Sink for the findings.

  Returns:
      UnsupportedFindings: Components to skip and the finding count.
  """
  return UnsupportedPatternScanner(host, scan, sc_locals, diagnostics).run()
