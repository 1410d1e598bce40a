"""
Import Bindings.

Collects the module-level import table of a host file so later stages can
answer "where does this identifier come from?" (helper calls, adapter
resolution, `styled-components` detection).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tree_sitter import Node

from stylex_switcheroo.core.host.expressions import string_value
from stylex_switcheroo.core.host.parser import STYLED_COMPONENTS_SOURCE, HostTree, node_text


@dataclass(frozen=True)
class ImportBinding:
  """
  One local name introduced by an import declaration.

  Attributes:
      local: Local binding name.
      imported: Exported name (`default` for default imports, `*` for namespaces).
      source: Module specifier.
      is_type_only: True for `import type` bindings.
  """

  local: str
  imported: str
  source: str
  is_type_only: bool = False


@dataclass
class ImportStatement:
  """A parsed import declaration and its bindings."""

  node: Node
  source: str
  bindings: List[ImportBinding] = field(default_factory=list)


@dataclass
class ImportTable:
  """
  All imports of a module, indexed by local name.
  """

  statements: List[ImportStatement] = field(default_factory=list)
  by_local: Dict[str, ImportBinding] = field(default_factory=dict)

  def lookup(self, local: str) -> Optional[ImportBinding]:
    return self.by_local.get(local)

  def local_for(self, source: str, imported: str) -> Optional[str]:
    """Finds the local alias of `imported` from `source`, if imported."""
    for binding in self.by_local.values():
      if binding.source == source and binding.imported == imported:
        return binding.local
    return None

  def from_source(self, source: str) -> List[ImportBinding]:
    return [b for b in self.by_local.values() if b.source == source]

  @property
  def last_statement(self) -> Optional[ImportStatement]:
    return self.statements[-1] if self.statements else None


def collect_imports(host: HostTree) -> ImportTable:
  """
  Builds the import table from top-level `import` statements.

  Args:
      host (HostTree): Parsed module.

  Returns:
      ImportTable: Bindings in declaration order.
  """
  table = ImportTable()
  for stmt in host.root.named_children:
    if stmt.type != "import_statement":
      continue
    source_node = stmt.child_by_field_name("source")
    if source_node is None:
      continue
    source = string_value(source_node)
    type_only = any(child.type == "type" for child in stmt.children)
    record = ImportStatement(node=stmt, source=source)

    for clause in (c for c in stmt.named_children if c.type == "import_clause"):
      for part in clause.named_children:
        if part.type == "identifier":
          record.bindings.append(ImportBinding(node_text(part), "default", source, type_only))
        elif part.type == "namespace_import":
          ids = [c for c in part.named_children if c.type == "identifier"]
          if ids:
            record.bindings.append(ImportBinding(node_text(ids[0]), "*", source, type_only))
        elif part.type == "named_imports":
          for spec in part.named_children:
            if spec.type != "import_specifier":
              continue
            name = spec.child_by_field_name("name")
            alias = spec.child_by_field_name("alias")
            if name is None:
              continue
            imported = string_value(name) if name.type == "string" else node_text(name)
            local = node_text(alias) if alias is not None else imported
            spec_type_only = type_only or any(c.type == "type" for c in spec.children)
            record.bindings.append(ImportBinding(local, imported, source, spec_type_only))

    table.statements.append(record)
    for binding in record.bindings:
      table.by_local[binding.local] = binding
  return table


def styled_components_locals(table: ImportTable) -> Dict[str, str]:
  """
  Maps `styled-components` exports to their local names.

  Returns:
      Dict[str, str]: e.g. {'styled': 'styled', 'css': 'css', 'keyframes': 'kf'}.
  """
  result: Dict[str, str] = {}
  for binding in table.from_source(STYLED_COMPONENTS_SOURCE):
    if binding.imported == "default":
      result["styled"] = binding.local
    else:
      result[binding.imported] = binding.local
  return result
