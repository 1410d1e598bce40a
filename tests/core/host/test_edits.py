"""
Tests for byte-range text edits.
"""

import pytest

from stylex_switcheroo.core.host.edits import apply_edits, delete, insert, line_start, replace, statement_range


def test_apply_edits_in_any_order():
  source = b"const a = 1;"
  edits = [replace(10, 11, "2"), insert(0, "// x\n"), delete(6, 7)]
  assert apply_edits(source, edits) == "// x\nconst  = 2;"


def test_insertions_at_same_offset_use_priority():
  edits = [insert(0, "b", priority=1), insert(0, "a", priority=-1)]
  assert apply_edits(b"c", edits) == "abc"


def test_multibyte_offsets():
  source = "é = 1;".encode("utf8")
  assert apply_edits(source, [replace(5, 6, "2")]) == "é = 2;"


def test_overlapping_edits_raise():
  with pytest.raises(ValueError):
    apply_edits(b"abcdef", [replace(0, 3, "x"), replace(2, 4, "y")])


def test_no_edits():
  assert apply_edits(b"same", []) == "same"


def test_line_start():
  source = b"a\nbc\n"
  assert line_start(source, 3) == 2
  assert line_start(source, 0) == 0


def test_statement_range_owns_whole_lines():
  source = b"a;\n  const x = 1;\nb;\n"
  start = source.index(b"const")
  end = source.index(b";\nb") + 1
  assert statement_range(source, start, end) == (3, source.index(b"b;"))


def test_statement_range_eats_one_blank_line_after_a_blank_line():
  source = b"a;\n\nconst x = 1;\n\nb;\n"
  start = source.index(b"const")
  end = start + len(b"const x = 1;")
  assert statement_range(source, start, end) == (start, source.index(b"b;"))


def test_statement_range_shared_line():
  source = b"a; const x = 1;\n"
  start = source.index(b"const")
  assert statement_range(source, start, len(source) - 1) == (start, len(source) - 1)
