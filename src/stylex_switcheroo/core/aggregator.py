"""
Style Aggregator.

Concatenates every style entry of a file into one ordered registry. Nothing
is decided here; key order is the only cascade signal StyleX has, so the
order below is part of the output contract:

1. css`` mixin entries;
2. per component, in declaration order:
   base, extras (extras first for sibling-pattern components), variants,
   then style functions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from stylex_switcheroo.core.lowering.style_info import ComponentArena, DynamicFnEntry, StyleInfo
from stylex_switcheroo.core.naming import js_literal
from stylex_switcheroo.core.styles.converter import deep_merge
from stylex_switcheroo.core.styles.values import DEFAULT_KEY, JsExpr, StyleObject


@dataclass
class StyleFunction:
  """A registry entry `(param) => ({...})`."""

  param_name: str
  param_type: str
  body: StyleObject = field(default_factory=dict)


RegistryEntry = Union[StyleObject, StyleFunction]


@dataclass
class StyleRegistry:
  """
  Ordered registry of one file.

  Attributes:
      entries: `stylex.create` keys in emission order.
      keyframes: Keyframes declarations by local name.
  """

  entries: Dict[str, RegistryEntry] = field(default_factory=dict)
  keyframes: Dict[str, StyleObject] = field(default_factory=dict)

  def add(self, key: str, entry: RegistryEntry) -> None:
    existing = self.entries.get(key)
    if isinstance(existing, dict) and isinstance(entry, dict):
      deep_merge(existing, entry)
    else:
      self.entries[key] = entry

  def __contains__(self, key: object) -> bool:
    return key in self.entries

  @property
  def is_empty(self) -> bool:
    return not self.entries and not self.keyframes


def function_value(entry: DynamicFnEntry) -> Union[JsExpr, StyleObject]:
  """The value a style function assigns, wrapped in its enclosing condition."""
  expression = entry.value_expression
  if entry.fallback_value is not None:
    expression = f"{expression} ?? {js_literal(entry.fallback_value)}"
  value: Union[JsExpr, StyleObject] = JsExpr(expression)
  if entry.conditions:
    value = {DEFAULT_KEY: None, entry.conditions[-1]: value}
  return value


def style_functions(info: StyleInfo) -> Dict[str, StyleFunction]:
  """Groups a component's dynamic entries by registry key."""
  functions: Dict[str, StyleFunction] = {}
  for entry in info.dynamic_fns:
    function = functions.setdefault(entry.key, StyleFunction(entry.param_name, entry.param_type))
    target = function.body
    if entry.pseudo_element:
      target = target.setdefault(entry.pseudo_element, {})
    target[entry.css_property] = function_value(entry)
  return functions


def has_base_entry(info: StyleInfo) -> bool:
  return bool(info.styles)


def aggregate(
  arena: ComponentArena,
  mixins: Optional[Dict[str, StyleObject]] = None,
  keyframes: Optional[Dict[str, StyleObject]] = None,
) -> StyleRegistry:
  """
  Builds the registry.

  Args:
      arena (ComponentArena): Lowered components.
      mixins (Optional[Dict[str, StyleObject]]): css`` entries by registry key.
      keyframes (Optional[Dict[str, StyleObject]]): Keyframes by local name.

  Returns:
      StyleRegistry: Entries in emission order.
  """
  registry = StyleRegistry(keyframes=dict(keyframes or {}))
  for key, styles in (mixins or {}).items():
    registry.add(key, styles)

  for info in arena:
    extras: List[tuple] = list(info.extra_styles.items())
    if info.has_sibling_pattern:
      for key, styles in extras:
        registry.add(key, styles)
      if has_base_entry(info):
        registry.add(info.style_key, info.styles)
    else:
      if has_base_entry(info):
        registry.add(info.style_key, info.styles)
      for key, styles in extras:
        registry.add(key, styles)
    for variant in info.variants:
      if variant.styles:
        registry.add(variant.name, variant.styles)
    for key, function in style_functions(info).items():
      registry.add(key, function)
  return registry
