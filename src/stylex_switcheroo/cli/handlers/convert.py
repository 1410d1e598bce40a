"""
Convert Command Handler.

This module implements the logic for the `stylex-switcheroo convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. Engine initialization (adapter and prepass loading).
3. Migration of every source file via the Engine.
4. Output writing, diagnostics reporting and trace logging.
"""

import json
from pathlib import Path
from typing import Dict, Optional

from rich.table import Table

from stylex_switcheroo.cli.handlers import discover_sources
from stylex_switcheroo.config import RuntimeConfig
from stylex_switcheroo.core.conversion_result import ConversionResult
from stylex_switcheroo.core.engine import TransformEngine
from stylex_switcheroo.core.errors import SwitcherooError
from stylex_switcheroo.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
)


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  adapter_path: Optional[Path] = None,
  prepass_path: Optional[Path] = None,
  fallback: Optional[str] = None,
  strict: Optional[bool] = None,
  dry_run: bool = False,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'convert' command execution.

  Files are rewritten in place unless `output_path` is given. A directory
  input with an output path mirrors its layout under the output directory.

  Args:
      input_path: Path to the source file or directory to convert.
      output_path: Where rewritten code should be saved.
      adapter_path: Override for the adapter module.
      prepass_path: Override for the prepass JSON.
      fallback: Override for the fallback behavior ('bail' or 'drop').
      strict: If True, files with unsupported features are left untouched.
      dry_run: If True, print rewritten code instead of writing it.
      json_trace_path: Optional path to dump execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = RuntimeConfig.load(
    adapter_path=adapter_path,
    prepass_path=prepass_path,
    fallback_behavior=fallback,
    strict_mode=strict,
    search_path=input_path if input_path.is_dir() else input_path.parent,
  )
  try:
    engine = TransformEngine(config=config)
  except SwitcherooError as e:
    log_error(f"Failed to initialize engine: {e}")
    return 1

  batch_results: Dict[str, ConversionResult] = {}

  if input_path.is_file():
    result = _convert_single_file(input_path, output_path, engine, dry_run, json_trace_path)
    batch_results[input_path.name] = result
    _print_batch_summary(batch_results)
    return 0 if result.success else 1

  sources = discover_sources(input_path)
  if not sources:
    log_warning(f"No source files found in {input_path}")
    return 0

  log_info(f"Processing {len(sources)} files from {input_path}...")
  for src_file in sources:
    rel_path = src_file.relative_to(input_path)
    dest_file = (output_path / rel_path) if output_path else None

    batch_trace = None
    if json_trace_path:
      # One trace per file, written next to the requested trace path.
      batch_trace = json_trace_path.parent / f"{str(rel_path).replace('/', '_')}.trace.json"

    batch_results[str(rel_path)] = _convert_single_file(src_file, dest_file, engine, dry_run, batch_trace)

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _convert_single_file(
  input_path: Path,
  output_path: Optional[Path],
  engine: TransformEngine,
  dry_run: bool,
  json_trace_path: Optional[Path] = None,
) -> ConversionResult:
  """
  Helper to execute the migration on a single file.

  Args:
      input_path: Source file path.
      output_path: Destination file path (None rewrites in place).
      engine: Configured engine.
      dry_run: Print instead of writing.
      json_trace_path: Path to save trace event logs.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except OSError as e:
    log_error(f"Failed to read {input_path}: {e}")
    return ConversionResult(success=False)

  result = engine.run(code, str(input_path))

  if json_trace_path and result.trace_events:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      json_trace_path.write_text(json.dumps(result.trace_events, indent=2), encoding="utf-8")
      log_info(f"Trace saved to [path]{json_trace_path}[/path]")
    except OSError as e:
      log_error(f"Failed to write trace: {e}")

  for diag in result.diagnostics:
    console.print(f"  {diag.format(str(input_path))}", style=diag.severity.value, markup=False)

  if not result.success or result.code is None:
    return result

  if dry_run:
    log_info(f"Dry run: [path]{input_path}[/path]")
    print(result.code)
    return result

  destination = output_path or input_path
  destination.parent.mkdir(parents=True, exist_ok=True)
  destination.write_text(result.code, encoding="utf-8")
  log_success(f"Migrated: [path]{input_path}[/path] -> [path]{destination}[/path]")
  return result


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of conversion results to the console.

  Args:
      results: Dictionary mapping filenames to conversion results.
  """
  total = len(results)
  changed = sum(1 for r in results.values() if r.changed)
  clean = [name for name, r in results.items() if r.success and not r.diagnostics]

  if len(clean) == total:
    log_success(f"Batch Complete: {changed}/{total} files migrated without diagnostics.")
    return

  table = Table(title="Migration Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Skipped", style="yellow")
  table.add_column("Diagnostics", justify="right", style="red")

  for filename, res in results.items():
    if res.success and not res.diagnostics:
      continue
    if not res.success:
      status = "Failed"
    elif res.changed:
      status = "Partial"
    else:
      status = "Untouched"
    table.add_row(filename, status, ", ".join(res.skipped_components), str(len(res.diagnostics)))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {changed} of {total} files migrated, {total - len(clean)} with issues.")
