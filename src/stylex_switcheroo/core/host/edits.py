"""
Byte-range Text Edits.

The host file is never re-printed from a tree. Instead every transformation is
expressed as a `TextEdit` over the original UTF-8 bytes and applied in one
pass, which keeps untouched code byte-identical.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class TextEdit:
  """
  Replace `source_bytes[start:end]` with `text`.

  Insertions use `start == end`. `priority` orders insertions at the same
  offset (lower first).
  """

  start: int
  end: int
  text: str
  priority: int = 0


def insert(at: int, text: str, priority: int = 0) -> TextEdit:
  return TextEdit(at, at, text, priority)


def replace(start: int, end: int, text: str) -> TextEdit:
  return TextEdit(start, end, text)


def delete(start: int, end: int) -> TextEdit:
  return TextEdit(start, end, "")


def apply_edits(source: bytes, edits: Iterable[TextEdit]) -> str:
  """
  Applies non-overlapping edits to `source`.

  Args:
      source (bytes): Original UTF-8 text.
      edits (Iterable[TextEdit]): Edits in any order.

  Returns:
      str: The edited text.

  Raises:
      ValueError: If two replacements overlap.
  """
  ordered: List[TextEdit] = sorted(edits, key=lambda e: (e.start, e.end, e.priority))
  out: List[bytes] = []
  cursor = 0
  for edit in ordered:
    if edit.start < cursor:
      raise ValueError(f"Overlapping edit at byte {edit.start} (cursor {cursor})")
    out.append(source[cursor : edit.start])
    out.append(edit.text.encode("utf8"))
    cursor = edit.end
  out.append(source[cursor:])
  return b"".join(out).decode("utf8")


def line_start(source: bytes, offset: int) -> int:
  """Offset of the first byte of the line containing `offset`."""
  return source.rfind(b"\n", 0, offset) + 1


def statement_range(source: bytes, start: int, end: int) -> Tuple[int, int]:
  """
  Expands a statement range to whole lines when the statement owns them.

  Used when deleting declarations, so no blank indentation is left behind.
  """
  ls = line_start(source, start)
  if source[ls:start].strip():
    return start, end
  stop = end
  while stop < len(source) and source[stop : stop + 1] in (b" ", b"\t"):
    stop += 1
  if source[stop : stop + 1] == b"\n":
    stop += 1
    if source[stop : stop + 1] == b"\n" and (ls == 0 or source[ls - 2 : ls] == b"\n\n"):
      stop += 1
    return ls, stop
  return start, end
