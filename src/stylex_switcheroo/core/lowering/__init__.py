"""
Selector Lowering.

- `style_info`: per-component state and the name-indexed arena.
- `passes`: the six ordered lowering passes.
- `pipeline`: runs the passes and reports leftover selectors.
"""

from stylex_switcheroo.core.lowering.pipeline import lower_components
from stylex_switcheroo.core.lowering.style_info import (
  AttributeSelectorInfo,
  ComponentArena,
  CSSVarInjection,
  DynamicFnEntry,
  InlineStyleProp,
  JSXRewriteRule,
  RelationOverride,
  SiblingSelectorInfo,
  StyleInfo,
)

__all__ = [
  "AttributeSelectorInfo",
  "CSSVarInjection",
  "ComponentArena",
  "DynamicFnEntry",
  "InlineStyleProp",
  "JSXRewriteRule",
  "RelationOverride",
  "SiblingSelectorInfo",
  "StyleInfo",
  "lower_components",
]
