"""
Tag Type Arguments.

The TSX grammar cannot read a generic tagged template such as
``styled.button<Props>`...` ``: a named type parses as two comparisons and an
inline object type produces an error node. Before parsing, the `<...>` span
that sits between a styled-components tag chain and its template literal is
located lexically and overwritten with spaces. Byte offsets are unchanged, so
the resulting tree still indexes into the original source.
"""

import re
from typing import Dict, Iterable, List, NamedTuple, Optional

_IDENT_RE = re.compile(rb"[A-Za-z_$][\w$]*")
_OPEN = {ord("("): ord(")"), ord("["): ord("]"), ord("{"): ord("}")}
_CLOSE = {ord(")"), ord("]"), ord("}")}
_QUOTES = {ord("'"), ord('"'), ord("`")}
_BACKSLASH = ord("\\")
_BACKTICK = ord("`")
_WHITESPACE = b" \t\r\n"


class TypeArgumentSpan(NamedTuple):
  """`<...>` between a tag and its template (`end` is exclusive)."""

  start: int
  end: int
  template_start: int


def _skip_ws(data: bytes, i: int) -> int:
  while i < len(data) and data[i] in _WHITESPACE:
    i += 1
  return i


def _skip_comment(data: bytes, i: int) -> int:
  if data.startswith(b"//", i):
    end = data.find(b"\n", i)
    return len(data) if end < 0 else end
  end = data.find(b"*/", i + 2)
  return len(data) if end < 0 else end + 2


def _skip_string(data: bytes, i: int) -> int:
  """Index after the string or template literal opening at `i`."""
  quote = data[i]
  i += 1
  while i < len(data):
    c = data[i]
    if c == _BACKSLASH:
      i += 2
    elif c == quote:
      return i + 1
    elif quote == _BACKTICK and data.startswith(b"${", i):
      i = _skip_group(data, i + 1)
      if i < 0:
        return len(data)
    else:
      i += 1
  return len(data)


def _skip_group(data: bytes, i: int) -> int:
  """Index after the bracket group opening at `i`, or -1 when unbalanced."""
  stack: List[int] = []
  while i < len(data):
    c = data[i]
    if c in _OPEN:
      stack.append(_OPEN[c])
      i += 1
    elif c in _CLOSE:
      if not stack or stack.pop() != c:
        return -1
      i += 1
      if not stack:
        return i
    elif c in _QUOTES:
      i = _skip_string(data, i)
    elif data.startswith(b"//", i) or data.startswith(b"/*", i):
      i = _skip_comment(data, i)
    else:
      i += 1
  return -1


def _skip_angle(data: bytes, i: int) -> int:
  """Index after the `<...>` type argument list opening at `i`, or -1."""
  depth = 0
  while i < len(data):
    c = data[i]
    if c == ord("<"):
      depth += 1
      i += 1
    elif c == ord(">"):
      i += 1
      # `=>` inside a function type
      if data[i - 2] == ord("="):
        continue
      depth -= 1
      if depth == 0:
        return i
    elif c in _OPEN:
      i = _skip_group(data, i)
      if i < 0:
        return -1
    elif c in _QUOTES and c != _BACKTICK:
      i = _skip_string(data, i)
    elif c in _CLOSE or c in (ord(";"), _BACKTICK):
      return -1
    else:
      i += 1
  return -1


def _span_after_chain(data: bytes, i: int) -> Optional[TypeArgumentSpan]:
  """Follows `.member` / `(...)` links after a tag identifier."""
  while True:
    i = _skip_ws(data, i)
    if i >= len(data):
      return None
    c = data[i]
    if c == ord("."):
      match = _IDENT_RE.match(data, _skip_ws(data, i + 1))
      if match is None:
        return None
      i = match.end()
    elif c == ord("("):
      i = _skip_group(data, i)
      if i < 0:
        return None
    elif c == ord("<"):
      end = _skip_angle(data, i)
      if end < 0:
        return None
      after = _skip_ws(data, end)
      if after < len(data) and data[after] == _BACKTICK:
        return TypeArgumentSpan(i, end, after)
      # generic call such as `.attrs<P>(...)`
      i = end
    else:
      return None


def find_type_argument_spans(data: bytes, tags: Iterable[str]) -> List[TypeArgumentSpan]:
  """
  Locates `<...>` spans between tag chains rooted at `tags` and a template.

  Args:
      data (bytes): UTF-8 module source.
      tags (Iterable[str]): Local names of template tags (`styled`, `css`, ...).

  Returns:
      List[TypeArgumentSpan]: Spans in source order.
  """
  names = sorted({t for t in tags if t})
  if not names:
    return []
  pattern = re.compile(rb"(?<![\w$.])(?:" + b"|".join(re.escape(n.encode("utf8")) for n in names) + rb")(?![\w$])")
  spans: List[TypeArgumentSpan] = []
  for match in pattern.finditer(data):
    span = _span_after_chain(data, match.end())
    if span is not None:
      spans.append(span)
  return spans


def blank_spans(data: bytes, spans: Iterable[TypeArgumentSpan]) -> bytes:
  """Overwrites each span with spaces, keeping line breaks."""
  buffer = bytearray(data)
  for span in spans:
    for k in range(span.start, span.end):
      if buffer[k] not in (ord("\n"), ord("\r")):
        buffer[k] = ord(" ")
  return bytes(buffer)


def type_arguments_by_template(data: bytes, spans: Iterable[TypeArgumentSpan]) -> Dict[int, str]:
  """Maps template start offsets to the type text without brackets."""
  return {s.template_start: data[s.start + 1 : s.end - 1].decode("utf8").strip() for s in spans}
