"""
Entry point for module execution (``python -m stylex_switcheroo``).

This module delegates execution to the CLI handler in ``stylex_switcheroo.cli.__main__``.
"""

import sys
from stylex_switcheroo.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
