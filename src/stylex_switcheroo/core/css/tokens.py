"""
Style Template Tokenizer.

Provides `CssLexer`, which decomposes placeholder-substituted CSS text into a
stream of typed `Token` objects. Only block structure is tokenized: braces,
semicolons and text runs. Text runs keep quoted strings and parenthesised
groups intact, so `url(data:image/png;base64,...)` or `content: "{"` never
split a declaration. Comments are recognised and dropped by the parser.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generator

from stylex_switcheroo.core.errors import CssSyntaxError


class TokenType(Enum):
  """Enumeration of style template token types."""

  LBRACE = auto()  # {
  RBRACE = auto()  # }
  SEMICOLON = auto()  # ;
  COMMENT = auto()  # /* ... */ or // ...
  TEXT = auto()  # selector, prelude or declaration text


@dataclass
class Token:
  """
  Represents a lexical unit.

  Attributes:
      kind: The token type.
      value: The raw text.
      offset: Byte offset in the substituted template.
  """

  kind: TokenType
  value: str
  offset: int


class CssLexer:
  """
  Lexer for nested (stylis-flavoured) CSS.
  """

  # Order matters: comments before punctuation, TEXT is scanned by hand.
  PATTERNS = [
    (TokenType.COMMENT, r"/\*[\s\S]*?\*/"),
    (TokenType.COMMENT, r"//[^\n]*"),
    (TokenType.LBRACE, r"\{"),
    (TokenType.RBRACE, r"\}"),
    (TokenType.SEMICOLON, r";"),
  ]

  def __init__(self) -> None:
    self.regex_pairs = [(kind, re.compile(pattern)) for kind, pattern in self.PATTERNS]
    self._ws = re.compile(r"\s+")

  def tokenize(self, text: str) -> Generator[Token, None, None]:
    """
    Tokenizes the input string.

    Args:
        text: Placeholder-substituted template text.

    Yields:
        Token objects (whitespace between tokens is skipped).

    Raises:
        CssSyntaxError: On an unterminated string, comment or parenthesis.
    """
    pos = 0
    length = len(text)
    while pos < length:
      ws = self._ws.match(text, pos)
      if ws:
        pos = ws.end()
        continue

      if text.startswith("/*", pos) and "*/" not in text[pos + 2 :]:
        raise CssSyntaxError("Unterminated comment", pos)

      matched = False
      for kind, regex in self.regex_pairs:
        match = regex.match(text, pos)
        if match:
          yield Token(kind, match.group(0), pos)
          pos = match.end()
          matched = True
          break
      if matched:
        continue

      end = self._scan_text(text, pos)
      yield Token(TokenType.TEXT, text[pos:end].strip(), pos)
      pos = end

  def _scan_text(self, text: str, pos: int) -> int:
    """Returns the end offset of the text run starting at `pos`."""
    depth = 0
    quote = ""
    i = pos
    length = len(text)
    while i < length:
      ch = text[i]
      if quote:
        if ch == "\\":
          i += 2
          continue
        if ch == quote:
          quote = ""
        i += 1
        continue
      if ch in "\"'":
        quote = ch
      elif ch == "(":
        depth += 1
      elif ch == ")":
        depth = max(depth - 1, 0)
      elif depth == 0:
        if ch in "{};":
          return i
        if text.startswith("/*", i):
          return i
        if text.startswith("//", i) and (i == pos or text[i - 1].isspace()):
          return i
      i += 1
    if quote:
      raise CssSyntaxError("Unterminated string", pos)
    if depth:
      raise CssSyntaxError("Unbalanced parenthesis", pos)
    return length
