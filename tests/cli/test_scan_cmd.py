"""
Tests for the `scan` command handler.
"""

import pytest
from rich.console import Console

from stylex_switcheroo.cli.handlers.scan import handle_scan
from stylex_switcheroo.utils.console import set_console


@pytest.fixture
def recorded():
  capture = Console(record=True, width=400)
  set_console(capture)
  return capture


def test_clean_directory(tmp_path, recorded):
  (tmp_path / "Title.tsx").write_text(
    'import styled from "styled-components";\nexport const Title = styled.h1`font-weight: 700;`;\n',
    encoding="utf-8",
  )

  assert handle_scan(tmp_path) == 0
  assert "No diagnostics in 1 files" in recorded.export_text()


def test_reports_diagnostics(tmp_path, recorded):
  """
  Scenario: A module with a createGlobalStyle declaration.
  Expectation: Exit code 1, table row with location and category; nothing written.
  """
  code = 'import { createGlobalStyle } from "styled-components";\nconst G = createGlobalStyle`body { margin: 0; }`;\n'
  path = tmp_path / "Global.tsx"
  path.write_text(code, encoding="utf-8")

  assert handle_scan(path) == 1

  report = recorded.export_text()
  assert "Migration Diagnostics" in report
  assert "Global.tsx:2:" in report
  assert "unsupported-feature" in report
  assert "Total:" in report
  assert path.read_text(encoding="utf-8") == code


def test_missing_path(tmp_path, recorded):
  assert handle_scan(tmp_path / "missing") == 1
  assert "Path not found" in recorded.export_text()
