"""
Scan Command Handler.

Runs the migration in memory and reports every diagnostic in a table,
without writing any file.
"""

from pathlib import Path
from typing import Optional

from rich.table import Table

from stylex_switcheroo.cli.handlers import discover_sources
from stylex_switcheroo.config import RuntimeConfig
from stylex_switcheroo.core.engine import TransformEngine
from stylex_switcheroo.core.errors import SwitcherooError
from stylex_switcheroo.utils.console import console, log_error, log_info, log_success


def handle_scan(path: Path, adapter_path: Optional[Path] = None) -> int:
  """
  Reports what a migration of `path` would flag.

  Args:
      path: Input source file or directory.
      adapter_path: Override for the adapter module.

  Returns:
      int: 0 when no diagnostics were found, 1 otherwise.
  """
  if not path.exists():
    log_error(f"Path not found: {path}")
    return 1

  config = RuntimeConfig.load(adapter_path=adapter_path, search_path=path if path.is_dir() else path.parent)
  try:
    engine = TransformEngine(config=config)
  except SwitcherooError as e:
    log_error(f"Failed to initialize engine: {e}")
    return 1

  files = discover_sources(path)
  log_info(f"Scanning {len(files)} files...")

  table = Table(title="Migration Diagnostics")
  table.add_column("Location", style="cyan")
  table.add_column("Severity", justify="center")
  table.add_column("Category", style="magenta")
  table.add_column("Message")

  count = 0
  for file in files:
    try:
      code = file.read_text(encoding="utf-8")
    except OSError as e:
      log_error(f"Failed to read {file}: {e}")
      continue
    result = engine.run(code, str(file))
    for diag in result.diagnostics:
      where = str(file)
      if diag.location:
        where = f"{file}:{diag.location.line}:{diag.location.column}"
      table.add_row(where, diag.severity.value, diag.category.value, diag.message)
      count += 1

  if count == 0:
    log_success(f"No diagnostics in {len(files)} files.")
    return 0

  console.print(table)
  console.print(f"\n[bold]Total:[/bold] {count} diagnostics.")
  return 1
