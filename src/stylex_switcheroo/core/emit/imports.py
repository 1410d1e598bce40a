"""
Import Rewriting.

Updates the host module's import block after conversion:

1. **Pruning**: drops `styled-components` bindings nothing references any
   more (the whole statement when none remain).
2. **Injection**: adds the StyleX namespace import, `React` (for wrapper prop
   types), the style merger helper and every adapter-requested import,
   skipping bindings the module already has.
"""

from typing import Dict, Iterable, List, Optional, Set

from stylex_switcheroo.core.decisions.adapter import ImportName, ImportSource, ImportSpec, module_specifier
from stylex_switcheroo.core.host.edits import TextEdit, delete, insert, replace, statement_range
from stylex_switcheroo.core.host.expressions import js_string
from stylex_switcheroo.core.host.imports import STYLED_COMPONENTS_SOURCE, ImportBinding, ImportStatement, ImportTable
from stylex_switcheroo.core.host.parser import HostTree
from stylex_switcheroo.core.tracer import get_tracer


def render_import(source: str, bindings: List[ImportBinding]) -> str:
  """
  Renders an import statement for `bindings` (all from `source`).

  Args:
      source (str): Module specifier.
      bindings (List[ImportBinding]): Default, namespace and named bindings.

  Returns:
      str: `import a, { b as c, type D } from "source";`
  """
  default = [b for b in bindings if b.imported == "default"]
  namespace = [b for b in bindings if b.imported == "*"]
  named = [b for b in bindings if b.imported not in ("default", "*")]
  type_only = bool(bindings) and all(b.is_type_only for b in bindings)

  clause: List[str] = []
  if default:
    clause.append(default[0].local)
  if namespace:
    clause.append(f"* as {namespace[0].local}")
  if named:
    parts = []
    for b in named:
      text = b.imported if b.imported == b.local else f"{b.imported} as {b.local}"
      if b.is_type_only and not type_only:
        text = f"type {text}"
      parts.append(text)
    clause.append("{ " + ", ".join(parts) + " }")
  keyword = "import type" if type_only else "import"
  return f"{keyword} {', '.join(clause)} from {js_string(source)};"


def spec_bindings(spec: ImportSpec, file_path: str) -> List[ImportBinding]:
  source = module_specifier(spec.from_, file_path)
  bindings = []
  if spec.namespace:
    bindings.append(ImportBinding(spec.namespace, "*", source))
  for name in spec.names:
    bindings.append(ImportBinding(name.binding, name.imported, source))
  return bindings


class ImportRewriter:
  """
  Computes import edits for one host module.
  """

  def __init__(self, host: HostTree, table: ImportTable, file_path: str = "") -> None:
    self.host = host
    self.table = table
    self.file_path = file_path or host.file_path
    self._added: List[ImportSpec] = []

  def require(self, spec: ImportSpec) -> None:
    self._added.append(spec)

  def require_namespace(self, source: str, local: str) -> None:
    self.require(ImportSpec(from_=ImportSource(value=source), namespace=local))

  def require_named(self, source: str, imported: str, local: Optional[str] = None) -> None:
    self.require(ImportSpec(from_=ImportSource(value=source), names=[ImportName(imported=imported, local=local)]))

  def require_all(self, specs: Iterable[ImportSpec]) -> None:
    for spec in specs:
      self.require(spec)

  # --- Pruning ---

  def prune_styled_components(self, keep: Set[str]) -> List[TextEdit]:
    """
    Removes `styled-components` bindings whose local name is not in `keep`.

    Args:
        keep (Set[str]): Local names still referenced after conversion.

    Returns:
        List[TextEdit]: Deletions or rewrites of the import statements.
    """
    edits: List[TextEdit] = []
    for stmt in self.table.statements:
      if stmt.source != STYLED_COMPONENTS_SOURCE:
        continue
      kept = [b for b in stmt.bindings if b.local in keep]
      if len(kept) == len(stmt.bindings) and stmt.bindings:
        continue
      removed = [b.local for b in stmt.bindings if b.local not in keep]
      get_tracer().log_import("remove", stmt.source, removed)
      if kept:
        edits.append(replace(stmt.node.start_byte, stmt.node.end_byte, render_import(stmt.source, kept)))
      else:
        start, end = statement_range(self.host.source_bytes, stmt.node.start_byte, stmt.node.end_byte)
        edits.append(delete(start, end))
    return edits

  # --- Injection ---

  def _missing(self, bindings: List[ImportBinding]) -> List[ImportBinding]:
    missing = []
    seen: Set[str] = set()
    for binding in bindings:
      existing = self.table.lookup(binding.local)
      if existing is not None and existing.source == binding.source and existing.imported == binding.imported:
        continue
      if binding.local in seen:
        continue
      seen.add(binding.local)
      missing.append(binding)
    return missing

  def _insertion_point(self, removed: Set[int]) -> int:
    """After the last import that survives, else after leading directives."""
    survivors: List[ImportStatement] = [s for s in self.table.statements if s.node.start_byte not in removed]
    if survivors:
      return survivors[-1].node.end_byte
    offset = 0
    for stmt in self.host.root.named_children:
      if stmt.type == "expression_statement" and stmt.named_children and stmt.named_children[0].type == "string":
        offset = stmt.end_byte
        continue
      break
    return offset

  def edits(self, keep_styled_locals: Set[str]) -> List[TextEdit]:
    """
    All import edits: pruning plus one inserted line per requested source.

    Args:
        keep_styled_locals (Set[str]): `styled-components` locals still in use.

    Returns:
        List[TextEdit]: Edits over the host source.
    """
    edits = self.prune_styled_components(keep_styled_locals)
    removed = {
      s.node.start_byte
      for s in self.table.statements
      if s.source == STYLED_COMPONENTS_SOURCE and not any(b.local in keep_styled_locals for b in s.bindings)
    }

    grouped: Dict[str, List[ImportBinding]] = {}
    for spec in self._added:
      for binding in spec_bindings(spec, self.file_path):
        grouped.setdefault(binding.source, []).append(binding)

    lines: List[str] = []
    for source, bindings in grouped.items():
      missing = self._missing(bindings)
      if not missing:
        continue
      namespaces = [b for b in missing if b.imported == "*"]
      others = [b for b in missing if b.imported != "*"]
      # A namespace import cannot share a statement with named bindings.
      for ns in namespaces:
        lines.append(render_import(source, [ns]))
      if others:
        lines.append(render_import(source, others))
      get_tracer().log_import("add", source, [b.local for b in missing])

    if lines:
      at = self._insertion_point(removed)
      text = "\n".join(lines)
      if at == 0:
        edits.append(insert(0, text + "\n", priority=-1))
      else:
        edits.append(insert(at, "\n" + text, priority=1))
    return edits
