"""
Per-Component Style State.

`StyleInfo` is created for every styled declaration, filled in by the
conversion stage, mutated by the lowering passes and finally read by the
aggregator and the wrapper planner. Components never hold references to each
other; cross-component effects go through the `ComponentArena` by name.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from stylex_switcheroo.core.decisions.types import VariantBranch
from stylex_switcheroo.core.diagnostics import SourceLocation
from stylex_switcheroo.core.styles.values import StyleObject
from stylex_switcheroo.enums import AttributeOperator, JSXRewriteKind, SiblingRelation


@dataclass(frozen=True)
class JSXRewriteRule:
  """
  Structural instruction for the call-site rewriter.

  Attributes:
      kind: Which elements receive `style_key`.
      style_key: Registry entry to attach.
      target_component: Component whose usages receive the style
          (descendant-styled-component only).
  """

  kind: JSXRewriteKind
  style_key: str
  target_component: Optional[str] = None


@dataclass(frozen=True)
class CSSVarInjection:
  """
  A custom property another component's base style must define.

  `target_component` receives `var_name: {default: null, <pseudo>: value}`.
  """

  target_component: str
  var_name: str
  pseudo: str
  value: Any
  source_component: str = ""


@dataclass(frozen=True)
class RelationOverride:
  """
  A parent/child style pair applied together at JSX usage sites.

  Attributes:
      parent_style_key: Style entry of the ancestor component.
      child_style_key: Base entry of the descendant (None when it is imported).
      override_style_key: Entry applied to the descendant inside the parent.
      cross_file: True when the descendant is imported from another module.
      cross_file_component_local_name: Local name of the imported descendant.
  """

  parent_style_key: str
  child_style_key: Optional[str]
  override_style_key: str
  cross_file: bool = False
  cross_file_component_local_name: Optional[str] = None


@dataclass(frozen=True)
class AttributeSelectorInfo:
  """`&[attr op "value"]` lowered to a runtime prop check."""

  style_key: str
  attribute: str
  operator: AttributeOperator = AttributeOperator.PRESENT
  value: Optional[str] = None
  pseudo_element: Optional[str] = None


@dataclass(frozen=True)
class SiblingSelectorInfo:
  """A sibling selector lowered to a boolean prop computed at call sites."""

  style_key: str
  relation: SiblingRelation
  prop_name: str
  class_name: Optional[str] = None


@dataclass(frozen=True)
class DynamicFnEntry:
  """
  A parameterised registry entry: `key: (param) => ({prop: value})`.
  """

  key: str
  param_name: str
  param_type: str
  css_property: str
  value_expression: str
  prop_name: str
  conditions: Tuple[str, ...] = ()
  pseudo_element: Optional[str] = None
  fallback_value: Any = None


@dataclass(frozen=True)
class InlineStyleProp:
  """A bailed value re-applied through the `style` prop."""

  css_property: str
  expression: str
  props: Tuple[str, ...] = ()


@dataclass
class StyleInfo:
  """
  Everything known about one styled declaration.
  """

  name: str
  style_key: str
  base: str
  base_is_intrinsic: bool = True
  location: Optional[SourceLocation] = None
  is_exported: bool = False
  styles: StyleObject = field(default_factory=dict)
  extra_styles: Dict[str, StyleObject] = field(default_factory=dict)
  variants: List[VariantBranch] = field(default_factory=list)
  dynamic_fns: List[DynamicFnEntry] = field(default_factory=list)
  attribute_selectors: List[AttributeSelectorInfo] = field(default_factory=list)
  sibling_selectors: List[SiblingSelectorInfo] = field(default_factory=list)
  jsx_rewrite_rules: List[JSXRewriteRule] = field(default_factory=list)
  css_var_injections: List[CSSVarInjection] = field(default_factory=list)
  relation_overrides: List[RelationOverride] = field(default_factory=list)
  inline_styles: List[InlineStyleProp] = field(default_factory=list)
  mixin_refs: List[str] = field(default_factory=list)
  static_attrs: Dict[str, str] = field(default_factory=dict)
  forward_filter: List[str] = field(default_factory=list)
  prop_dependencies: List[str] = field(default_factory=list)
  transient_props: List[str] = field(default_factory=list)
  important_properties: List[str] = field(default_factory=list)
  type_arguments: Optional[str] = None
  needs_wrapper: bool = False
  supports_as: bool = False
  has_should_forward_prop: bool = False
  has_specificity_hack: bool = False
  needs_default_marker: bool = False
  has_sibling_pattern: bool = False

  def add_prop_dependency(self, *props: str) -> None:
    for prop in props:
      if prop and prop not in self.prop_dependencies:
        self.prop_dependencies.append(prop)

  def add_extra(self, key: str, styles: StyleObject) -> None:
    """Adds or merges an extra entry (later keys win)."""
    if key in self.extra_styles:
      self.extra_styles[key].update(styles)
    else:
      self.extra_styles[key] = styles

  @property
  def variant_guards(self) -> Dict[str, str]:
    return {v.name: v.guard for v in self.variants}

  @property
  def has_dynamic_styles(self) -> bool:
    return bool(self.dynamic_fns)


class ComponentArena:
  """
  Name-indexed registry of `StyleInfo` objects for one file.

  Insertion order is declaration order.
  """

  def __init__(self) -> None:
    self._items: Dict[str, StyleInfo] = {}

  def add(self, info: StyleInfo) -> StyleInfo:
    self._items[info.name] = info
    return info

  def get(self, name: str) -> Optional[StyleInfo]:
    return self._items.get(name)

  def remove(self, name: str) -> None:
    self._items.pop(name, None)

  def __contains__(self, name: object) -> bool:
    return name in self._items

  def __iter__(self) -> Iterator[StyleInfo]:
    return iter(list(self._items.values()))

  def __len__(self) -> int:
    return len(self._items)

  @property
  def names(self) -> List[str]:
    return list(self._items)
