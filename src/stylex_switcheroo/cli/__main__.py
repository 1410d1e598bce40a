"""
Main Entry Point for stylex-switcheroo CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `stylex_switcheroo.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from stylex_switcheroo import __version__
from stylex_switcheroo.cli.handlers.convert import handle_convert
from stylex_switcheroo.cli.handlers.scan import handle_scan
from stylex_switcheroo.enums import FallbackBehavior


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="stylex-switcheroo: styled-components to StyleX migration")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Migrate a TSX/JSX file or directory")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory")
  cmd_conv.add_argument("--out", type=Path, help="Output destination (file or dir). Defaults to in-place.")
  cmd_conv.add_argument("--adapter", type=Path, default=None, help="Python file exposing an `adapter` object")
  cmd_conv.add_argument("--prepass", type=Path, default=None, help="JSON usage summary from a cross-file prepass")
  cmd_conv.add_argument(
    "--fallback",
    choices=[b.value for b in FallbackBehavior],
    default=None,
    help="Behavior for interpolations no handler claims (Overrides config)",
  )
  cmd_conv.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Leave files with unsupported features untouched (Overrides config)",
  )
  cmd_conv.add_argument("--dry-run", action="store_true", help="Print results without writing to disk")
  cmd_conv.add_argument(
    "--json-trace", type=Path, default=None, help="Dump full execution trace (phases, decisions) to a JSON file."
  )

  # --- Command: SCAN ---
  cmd_scan = subparsers.add_parser("scan", help="Report diagnostics without writing anything")
  cmd_scan.add_argument("path", type=Path, help="Input source file or directory")
  cmd_scan.add_argument("--adapter", type=Path, default=None, help="Python file exposing an `adapter` object")

  args = parser.parse_args(argv)

  if args.command == "convert":
    return handle_convert(
      args.path,
      args.out,
      adapter_path=args.adapter,
      prepass_path=args.prepass,
      fallback=args.fallback,
      strict=args.strict,
      dry_run=args.dry_run,
      json_trace_path=args.json_trace,
    )

  elif args.command == "scan":
    return handle_scan(args.path, adapter_path=args.adapter)

  return 0


if __name__ == "__main__":
  sys.exit(main())
