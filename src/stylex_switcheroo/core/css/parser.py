"""
Style Template Parser.

This module provides `StyleTemplateParser`, a recursive descent parser that
converts the token stream of `CssLexer` into a `RuleNode` tree, and
`parse_style_template`, which runs the whole algorithm for one styled
template:

1. Substitute every interpolation with `__INTERPOLATION_<n>__`.
2. Parse the substituted text (selectors, declarations, at-rules, nesting).
3. Re-walk the tree and record, for every placeholder, its enclosing
   selector, at-rule stack, property name, raw value and whether it is the
   entire value.

Malformed CSS raises `CssSyntaxError` inside the parser; `parse_style_template`
turns that into `None` so only the affected template is dropped.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

from stylex_switcheroo.core.css.nodes import (
  PLACEHOLDER_RE,
  Declaration,
  InterpolationContext,
  InterpolationLocation,
  ParsedTemplate,
  RuleNode,
  find_placeholders,
  make_placeholder,
)
from stylex_switcheroo.core.css.tokens import CssLexer, Token, TokenType
from stylex_switcheroo.core.errors import CssSyntaxError

_LEADING_SLOT = re.compile(r"^(__INTERPOLATION_\d+__)\s+(\S[\s\S]*)$")
_SLOT_BEFORE_RULE = re.compile(r"^(__INTERPOLATION_\d+__)[ \t]*;?[ \t]*\n\s*(\S[\s\S]*)$")
_WS = re.compile(r"\s+")


def normalize_selector(text: str) -> str:
  """Collapses whitespace and tightens `>`/`+`/`~` combinator spacing."""
  collapsed = _WS.sub(" ", text.strip())
  collapsed = re.sub(r"\s*([>+~])(?!=)\s*(?![^(]*\))", r" \1 ", collapsed)
  collapsed = re.sub(r"\s*,\s*", ", ", collapsed)
  return collapsed.strip()


def split_top_level(text: str, separator: str) -> List[str]:
  """
  Splits on `separator` outside quotes and parentheses.

  Args:
      text (str): Input text.
      separator (str): Single character separator.

  Returns:
      List[str]: Stripped parts (empty parts dropped).
  """
  parts = []
  depth = 0
  quote = ""
  current = []
  for ch in text:
    if quote:
      current.append(ch)
      if ch == quote:
        quote = ""
      continue
    if ch in "\"'":
      quote = ch
    elif ch == "(":
      depth += 1
    elif ch == ")":
      depth = max(depth - 1, 0)
    elif ch == separator and depth == 0:
      parts.append("".join(current).strip())
      current = []
      continue
    current.append(ch)
  parts.append("".join(current).strip())
  return [p for p in parts if p]


def _find_colon(text: str) -> int:
  depth = 0
  quote = ""
  for i, ch in enumerate(text):
    if quote:
      if ch == quote:
        quote = ""
      continue
    if ch in "\"'":
      quote = ch
    elif ch == "(":
      depth += 1
    elif ch == ")":
      depth -= 1
    elif ch == ":" and depth == 0:
      return i
  return -1


class StyleTemplateParser:
  """
  Recursive descent parser for nested CSS.
  """

  def __init__(self, code: str):
    """
    Initialize the parser.

    Args:
        code: Placeholder-substituted CSS text.
    """
    self.lexer = CssLexer()
    self.tokens = [t for t in self.lexer.tokenize(code) if t.kind != TokenType.COMMENT]
    self.pos = 0

  def parse(self) -> RuleNode:
    """
    Parses the template body.

    Returns:
        RuleNode: The root rule (selector `&`).

    Raises:
        CssSyntaxError: On unbalanced braces or a block without a selector.
    """
    root = RuleNode(selector="&")
    self._parse_block(root, top_level=True)
    return root

  # --- Recursive Descent Implementation ---

  def _peek(self) -> Optional[Token]:
    if self.pos < len(self.tokens):
      return self.tokens[self.pos]
    return None

  def _consume(self, kind: Optional[TokenType] = None) -> Token:
    token = self._peek()
    if token is None:
      raise CssSyntaxError("Unexpected end of template")
    if kind and token.kind != kind:
      raise CssSyntaxError(f"Expected {kind.name}, got {token.kind.name} ('{token.value}')", token.offset)
    self.pos += 1
    return token

  def _is_eof(self) -> bool:
    return self.pos >= len(self.tokens)

  def _match(self, kind: TokenType) -> bool:
    token = self._peek()
    return token is not None and token.kind == kind

  def _parse_block(self, rule: RuleNode, top_level: bool) -> None:
    while not self._is_eof():
      token = self._peek()
      if token.kind == TokenType.RBRACE:
        if top_level:
          raise CssSyntaxError("Unexpected '}'", token.offset)
        return
      if token.kind == TokenType.SEMICOLON:
        self._consume()
        continue
      if token.kind == TokenType.LBRACE:
        raise CssSyntaxError("Block without selector", token.offset)

      text = self._read_text()
      if self._match(TokenType.LBRACE):
        self._consume(TokenType.LBRACE)
        # a slot on its own line before a nested rule is a mixin, not part of the selector
        while True:
          glued = _SLOT_BEFORE_RULE.match(text)
          if not glued:
            break
          rule.declarations.append(Declaration(property="", value=glued.group(1)))
          text = glued.group(2)
        selector = normalize_selector(text)
        stack = list(rule.at_rule_stack)
        if selector.startswith("@"):
          stack.append(selector)
        child = RuleNode(selector=selector, at_rule_stack=stack)
        self._parse_block(child, top_level=False)
        if self._is_eof():
          raise CssSyntaxError(f"Unclosed block '{selector}'")
        self._consume(TokenType.RBRACE)
        rule.nested_rules.append(child)
        continue

      if self._match(TokenType.SEMICOLON):
        self._consume()
      self._add_declarations(rule, text)

  def _read_text(self) -> str:
    parts = []
    while self._match(TokenType.TEXT):
      parts.append(self._consume().value)
    return " ".join(parts)

  def _add_declarations(self, rule: RuleNode, text: str) -> None:
    text = text.strip()
    while True:
      match = _LEADING_SLOT.match(text)
      if not match:
        break
      rest = match.group(2)
      if _find_colon(rest) < 0 and not PLACEHOLDER_RE.match(rest):
        break
      rule.declarations.append(Declaration(property="", value=match.group(1)))
      text = rest.strip()

    colon = _find_colon(text)
    if colon < 0:
      rule.declarations.append(Declaration(property="", value=text))
      return
    prop = text[:colon].strip()
    value = text[colon + 1 :].strip()
    if not prop.startswith("--") and "__INTERPOLATION_" not in prop:
      prop = prop.lower()
    rule.declarations.append(Declaration(property=prop, value=value))


def build_template_text(segments: Sequence[str]) -> str:
  """Joins literal segments with placeholders in the slot positions."""
  out = []
  for i, seg in enumerate(segments):
    out.append(seg)
    if i < len(segments) - 1:
      out.append(make_placeholder(i))
  return "".join(out)


def parse_css_text(text: str) -> RuleNode:
  """
  Parses CSS text without interpolations.

  Raises:
      CssSyntaxError: If the text is malformed.
  """
  return StyleTemplateParser(text).parse()


def collect_interpolations(root: RuleNode, expressions: Sequence[Any]) -> Dict[int, InterpolationLocation]:
  """
  Records the structural context of every placeholder in `root`.

  Args:
      root (RuleNode): Parsed tree.
      expressions (Sequence[Any]): Host expression per slot index.

  Returns:
      Dict[int, InterpolationLocation]: First occurrence of each slot.
  """
  found: Dict[int, InterpolationLocation] = {}

  def record(index: int, ctx: InterpolationContext) -> None:
    if index in found or index >= len(expressions):
      return
    found[index] = InterpolationLocation(index=index, expression=expressions[index], context=ctx)

  def visit(rule: RuleNode, selector: str, stack: List[str]) -> None:
    for index in find_placeholders(rule.selector):
      record(
        index,
        InterpolationContext(selector=rule.selector, at_rule_stack=tuple(stack), is_in_selector=True),
      )
    for decl in rule.declarations:
      for index in find_placeholders(decl.property):
        record(
          index,
          InterpolationContext(
            selector=selector,
            at_rule_stack=tuple(stack),
            property=decl.property,
            value=decl.value,
            is_in_property_name=True,
          ),
        )
      for index in find_placeholders(decl.value):
        record(
          index,
          InterpolationContext(
            selector=selector,
            at_rule_stack=tuple(stack),
            property=decl.property or None,
            value=decl.value,
            is_full_value=decl.value.strip() == make_placeholder(index),
          ),
        )
    for child in rule.nested_rules:
      if child.is_at_rule:
        visit(child, selector, child.at_rule_stack)
      else:
        visit(child, child.selector, child.at_rule_stack)

  visit(root, root.selector, list(root.at_rule_stack))
  return found


def parse_style_template(segments: Sequence[str], expressions: Sequence[Any]) -> Optional[ParsedTemplate]:
  """
  Parses one styled template.

  Args:
      segments (Sequence[str]): Literal text between interpolations.
      expressions (Sequence[Any]): Opaque host expressions, one per slot.

  Returns:
      Optional[ParsedTemplate]: The rule tree and slot map, or None if the
      substituted text is not well-formed CSS.
  """
  text = build_template_text(segments)
  try:
    root = StyleTemplateParser(text).parse()
  except CssSyntaxError:
    return None
  return ParsedTemplate(root=root, interpolations=collect_interpolations(root, expressions))
