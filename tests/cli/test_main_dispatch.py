"""
Tests for CLI argument handling.

Verifies that:
1.  `convert` forwards paths and overrides to the convert handler.
2.  `scan` forwards the adapter override to the scan handler.
3.  A missing subcommand is an argparse error.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from stylex_switcheroo.cli.__main__ import main


@patch("stylex_switcheroo.cli.__main__.handle_convert")
def test_convert_defaults(mock_handle):
  """
  Scenario: User runs `stylex-switcheroo convert src/`.
  Expectation: In-place conversion with no overrides.
  """
  mock_handle.return_value = 0

  assert main(["convert", "src/"]) == 0

  args, kwargs = mock_handle.call_args
  assert args == (Path("src/"), None)
  assert kwargs["adapter_path"] is None
  assert kwargs["fallback"] is None
  assert kwargs["strict"] is None
  assert kwargs["dry_run"] is False


@patch("stylex_switcheroo.cli.__main__.handle_convert")
def test_convert_overrides(mock_handle):
  mock_handle.return_value = 1

  code = main(
    [
      "convert",
      "App.tsx",
      "--out",
      "out.tsx",
      "--adapter",
      "adapter.py",
      "--fallback",
      "drop",
      "--strict",
      "--dry-run",
      "--json-trace",
      "trace.json",
    ]
  )

  assert code == 1
  args, kwargs = mock_handle.call_args
  assert args == (Path("App.tsx"), Path("out.tsx"))
  assert kwargs["adapter_path"] == Path("adapter.py")
  assert kwargs["fallback"] == "drop"
  assert kwargs["strict"] is True
  assert kwargs["dry_run"] is True
  assert kwargs["json_trace_path"] == Path("trace.json")


@patch("stylex_switcheroo.cli.__main__.handle_scan")
def test_scan_dispatch(mock_handle):
  mock_handle.return_value = 0

  main(["scan", "src", "--adapter", "a.py"])

  mock_handle.assert_called_once_with(Path("src"), adapter_path=Path("a.py"))


def test_unknown_fallback_rejected():
  with pytest.raises(SystemExit):
    main(["convert", "src", "--fallback", "guess"])


def test_command_required():
  with pytest.raises(SystemExit):
    main([])
