"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Tracer and console isolation between tests.
- Small helpers for parsing host snippets and building adapters.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'stylex_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from stylex_switcheroo.core.tracer import reset_tracer  # noqa: E402
from stylex_switcheroo.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_global_state():
  """
  Resets the global tracer and console proxy around every test so output
  captured by one test never leaks into the next.
  """
  reset_tracer()
  yield
  reset_tracer()
  reset_console()
