"""
Shorthand Expansion.

StyleX discourages multi-value shorthands, so the converter expands them into
longhands when more than one independent value is present:

- `border`, `border-<side>`: width / style / color.
- `margin`, `padding`: 2-4 values to logical or physical longhands.
- `animation`: a single animation split into its longhands.
- `background`: a lone plain color becomes `backgroundColor`.

Single-value shorthands are returned unchanged (None).
"""

import re
from typing import List, Optional, Sequence, Tuple

from stylex_switcheroo.core.css.nodes import PLACEHOLDER_RE
from stylex_switcheroo.core.css.parser import split_top_level

BORDER_STYLES = frozenset({"none", "hidden", "dotted", "dashed", "solid", "double", "groove", "ridge", "inset", "outset"})
BORDER_WIDTH_KEYWORDS = frozenset({"thin", "medium", "thick"})

BORDER_SHORTHANDS = {
  "border": "border",
  "borderTop": "borderTop",
  "borderRight": "borderRight",
  "borderBottom": "borderBottom",
  "borderLeft": "borderLeft",
  "borderBlock": "borderBlock",
  "borderInline": "borderInline",
  "outline": "outline",
}

_TIME_RE = re.compile(r"^-?(\d+\.?\d*|\.\d+)m?s$")
_TIMING_KEYWORDS = frozenset({"ease", "ease-in", "ease-out", "ease-in-out", "linear", "step-start", "step-end"})
_DIRECTIONS = frozenset({"normal", "reverse", "alternate", "alternate-reverse"})
_FILL_MODES = frozenset({"none", "forwards", "backwards", "both"})
_PLAY_STATES = frozenset({"running", "paused"})
_COLOR_FN_RE = re.compile(r"^(rgb|rgba|hsl|hsla|hwb|lab|lch|oklab|oklch|color)\(", re.IGNORECASE)
_HEX_RE = re.compile(r"^#[0-9a-fA-F]{3,8}$")
_NOT_A_COLOR = frozenset({"none", "inherit", "initial", "unset", "revert"})

Expansion = List[Tuple[str, str]]


def split_tokens(value: str) -> List[str]:
  """Splits a value on top-level whitespace (quotes and parentheses respected)."""
  tokens: List[str] = []
  depth = 0
  quote = ""
  current: List[str] = []
  for ch in value.strip():
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
    elif ch.isspace() and depth == 0:
      if current:
        tokens.append("".join(current))
        current = []
      continue
    current.append(ch)
  if current:
    tokens.append("".join(current))
  return tokens


def has_placeholder(token: str) -> bool:
  return PLACEHOLDER_RE.search(token) is not None


def is_color_token(token: str) -> bool:
  lowered = token.lower()
  if _HEX_RE.match(token) or _COLOR_FN_RE.match(token):
    return True
  if lowered.startswith("var("):
    return True
  return token.isalpha() and lowered not in BORDER_STYLES and lowered not in BORDER_WIDTH_KEYWORDS


def classify_border_token(token: str) -> str:
  """Returns `width`, `style` or `color` for a static border token."""
  lowered = token.lower()
  if lowered in BORDER_STYLES:
    return "style"
  if lowered in BORDER_WIDTH_KEYWORDS or token[:1].isdigit() or token[:1] == "." or lowered.startswith("calc("):
    return "width"
  return "color"


def infer_border_slot(tokens: Sequence[str], index: int) -> str:
  """
  Guesses which border sub-value an interpolated token stands for.

  Slots already taken by static tokens are excluded. If exactly one slot is
  left, it wins. Otherwise position decides: first token is the width, a
  middle token the style, the last token the color.

  Args:
      tokens (Sequence[str]): Whitespace-split value.
      index (int): Position of the interpolated token.

  Returns:
      str: `width`, `style` or `color`.
  """
  taken = {classify_border_token(t) for i, t in enumerate(tokens) if i != index and not has_placeholder(t)}
  remaining = [slot for slot in ("width", "style", "color") if slot not in taken]
  if len(remaining) == 1:
    return remaining[0]
  if len(tokens) > 1:
    if index == len(tokens) - 1 and "color" in remaining:
      return "color"
    if index == 0 and "width" in remaining:
      return "width"
    if 0 < index < len(tokens) - 1 and "style" in remaining:
      return "style"
  return "color"


def border_longhand(prop: str, slot: str) -> str:
  """`border` + `color` -> `borderColor`; `borderTop` + `width` -> `borderTopWidth`."""
  return BORDER_SHORTHANDS[prop] + slot.capitalize()


def border_target(prop: str, tokens: Sequence[str], index: int) -> str:
  """Longhand property an interpolated border token resolves to (the property itself if not a border shorthand)."""
  if prop not in BORDER_SHORTHANDS or len(tokens) < 2:
    return prop
  return border_longhand(prop, infer_border_slot(tokens, index))


def _expand_border(prop: str, tokens: Sequence[str]) -> Optional[Expansion]:
  if len(tokens) < 2:
    return None
  out: Expansion = []
  used = set()
  for index, token in enumerate(tokens):
    slot = infer_border_slot(tokens, index) if has_placeholder(token) else classify_border_token(token)
    if slot in used:
      return None
    used.add(slot)
    out.append((border_longhand(prop, slot), token))
  return out


def _expand_box(prop: str, tokens: Sequence[str]) -> Optional[Expansion]:
  if len(tokens) == 2:
    return [(f"{prop}Block", tokens[0]), (f"{prop}Inline", tokens[1])]
  if len(tokens) == 3:
    return [(f"{prop}Top", tokens[0]), (f"{prop}Inline", tokens[1]), (f"{prop}Bottom", tokens[2])]
  if len(tokens) == 4:
    return [
      (f"{prop}Top", tokens[0]),
      (f"{prop}Right", tokens[1]),
      (f"{prop}Bottom", tokens[2]),
      (f"{prop}Left", tokens[3]),
    ]
  return None


def _expand_animation(value: str, tokens: Sequence[str]) -> Optional[Expansion]:
  if len(tokens) < 2 or len(split_top_level(value, ",")) > 1:
    return None
  out: Expansion = []
  seen = set()
  times = 0
  for token in tokens:
    lowered = token.lower()
    if _TIME_RE.match(lowered) and times < 2:
      prop = "animationDuration" if times == 0 else "animationDelay"
      times += 1
    elif lowered in _TIMING_KEYWORDS or lowered.startswith(("cubic-bezier(", "steps(")):
      prop = "animationTimingFunction"
    elif lowered == "infinite" or (lowered.replace(".", "", 1).isdigit()):
      prop = "animationIterationCount"
    elif lowered in _DIRECTIONS and "animationDirection" not in seen:
      prop = "animationDirection"
    elif lowered in _FILL_MODES and "animationFillMode" not in seen:
      prop = "animationFillMode"
    elif lowered in _PLAY_STATES:
      prop = "animationPlayState"
    else:
      prop = "animationName"
    if prop in seen:
      return None
    seen.add(prop)
    out.append((prop, token))
  return out


def _expand_background(tokens: Sequence[str]) -> Optional[Expansion]:
  if len(tokens) != 1 or has_placeholder(tokens[0]):
    return None
  token = tokens[0]
  if token.lower() in _NOT_A_COLOR or not is_color_token(token):
    return None
  return [("backgroundColor", token)]


def expand_shorthand(prop: str, value: str) -> Optional[Expansion]:
  """
  Expands a shorthand declaration into longhands.

  Args:
      prop (str): Canonical property token (`border`, `margin`, ...).
      value (str): Raw value, placeholders included.

  Returns:
      Optional[Expansion]: `(longhand, token)` pairs, or None to keep the
      declaration as written.
  """
  tokens = split_tokens(value)
  if prop in BORDER_SHORTHANDS:
    return _expand_border(prop, tokens)
  if prop in ("margin", "padding"):
    return _expand_box(prop, tokens)
  if prop == "animation":
    return _expand_animation(value, tokens)
  if prop == "background":
    return _expand_background(tokens)
  return None
