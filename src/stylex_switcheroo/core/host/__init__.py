"""
Host Layer.

Everything that touches the surrounding TSX module: tree-sitter parsing,
expression shape helpers, import tables, styled declaration scanning and
byte-range text edits.
"""

from stylex_switcheroo.core.host.parser import HostTree, parse_expression, parse_source
from stylex_switcheroo.core.host.edits import TextEdit, apply_edits

__all__ = ["HostTree", "parse_expression", "parse_source", "TextEdit", "apply_edits"]
