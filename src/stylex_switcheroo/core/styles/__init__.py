"""
Style-Model Conversion.

Canonical StyleX objects: value types and rendering (`values`), property
normalization (`properties`), shorthand expansion (`shorthand`) and the
rule-tree converter (`converter`).
"""

from stylex_switcheroo.core.styles.converter import (
  ConversionContext,
  SlotRequest,
  SlotResolution,
  StyleModelConverter,
  to_property_level_conditionals,
)
from stylex_switcheroo.core.styles.values import ComputedKey, JsExpr, StyleObject, render_object, render_value

__all__ = [
  "ComputedKey",
  "ConversionContext",
  "JsExpr",
  "SlotRequest",
  "SlotResolution",
  "StyleModelConverter",
  "StyleObject",
  "render_object",
  "render_value",
  "to_property_level_conditionals",
]
