"""
Style-Template Parser package.

Turns a styled-components template (literal segments interleaved with
interpolation slots) into a rule tree plus a slot location map.
"""

from stylex_switcheroo.core.css.nodes import (
  Declaration,
  InterpolationContext,
  InterpolationLocation,
  ParsedTemplate,
  RuleNode,
)
from stylex_switcheroo.core.css.parser import StyleTemplateParser, parse_css_text, parse_style_template

__all__ = [
  "Declaration",
  "InterpolationContext",
  "InterpolationLocation",
  "ParsedTemplate",
  "RuleNode",
  "StyleTemplateParser",
  "parse_css_text",
  "parse_style_template",
]
