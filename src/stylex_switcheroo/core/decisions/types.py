"""
Decision Types.

The Decision Engine answers every interpolation slot with exactly one of five
decisions, modelled as a tagged union of frozen dataclasses sharing an
`action` discriminator.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

from stylex_switcheroo.core.diagnostics import DiagnosticType, SourceLocation
from stylex_switcheroo.enums import DecisionAction


@dataclass(frozen=True)
class ConvertDecision:
  """Replace the slot with a static literal or a `JsExpr`."""

  value: Any

  @property
  def action(self) -> DecisionAction:
    return DecisionAction.CONVERT


@dataclass(frozen=True)
class RewriteDecision:
  """
  Replace a block-level slot with a reference to another style entry.

  `code` is a style expression passed to `stylex.props` (e.g. `styles.truncate`).
  """

  code: str

  @property
  def action(self) -> DecisionAction:
    return DecisionAction.REWRITE


@dataclass(frozen=True)
class BailDecision:
  """
  The slot cannot be compiled statically.

  Attributes:
      reason: The diagnostic kind recorded for the bail.
      prop_dependencies: Props the original expression reads (best effort).
      inline_expression: Expression usable as an inline style value, when one
          could be recovered from the source.
  """

  reason: DiagnosticType
  prop_dependencies: Tuple[str, ...] = ()
  inline_expression: Optional[str] = None

  @property
  def action(self) -> DecisionAction:
    return DecisionAction.BAIL


@dataclass(frozen=True)
class VariantBranch:
  """
  One conditional style entry.

  Attributes:
      name: Registry key (`buttonDisabled`).
      guard: JS condition over destructured props (`disabled`, `size === "lg"`).
      styles: Canonical style object applied when `guard` holds.
  """

  name: str
  guard: str
  styles: Any = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class VariantDecision:
  """
  The slot selects between static values based on one prop.

  `base_value` is the value kept in the base style (None when every branch
  lives in a variant entry).
  """

  prop_name: str
  comparison_value: Any = None
  base_value: Any = None
  variants: Tuple[VariantBranch, ...] = ()

  @property
  def action(self) -> DecisionAction:
    return DecisionAction.VARIANT


@dataclass(frozen=True)
class DynamicFnDecision:
  """
  The slot becomes a parameterised style function.

  Attributes:
      param_name: Function parameter (and registry key suffix).
      param_type: TS type of the parameter.
      value_expression: JS expression of the property value in terms of `param_name`.
      fallback_value: Value used when the prop is undefined.
      original_prop_name: Prop passed at the call site, when it differs from `param_name`.
      css_property: Property the function sets (after border remapping).
  """

  param_name: str
  param_type: str = "string"
  value_expression: str = ""
  fallback_value: Any = None
  original_prop_name: Optional[str] = None
  css_property: str = ""

  @property
  def action(self) -> DecisionAction:
    return DecisionAction.DYNAMIC_FN


Decision = Union[ConvertDecision, RewriteDecision, BailDecision, VariantDecision, DynamicFnDecision]


@dataclass(frozen=True)
class DynamicNodeContext:
  """
  Where a slot sits, as seen by decision handlers.

  Attributes:
      component: Local name of the owning declaration.
      index: Interpolation slot index.
      style_key: Registry key of the owning declaration.
      css_property: Target property (`""` for block-level slots).
      value: Full raw value containing the placeholder.
      token: Whitespace token containing the placeholder.
      tokens: All tokens of `value`.
      token_index: Position of `token`.
      is_full_value: True when the placeholder is the entire value.
      conditions: Enclosing pseudo-class and at-rule keys.
      pseudo_element: Enclosing pseudo-element key, if any.
      selector: Enclosing raw selector.
      file_path: Host file.
      location: Position of the declaration.
  """

  component: str
  style_key: str
  index: int = -1
  css_property: str = ""
  value: str = ""
  token: str = ""
  tokens: Tuple[str, ...] = ()
  token_index: int = 0
  is_full_value: bool = True
  conditions: Tuple[str, ...] = ()
  pseudo_element: Optional[str] = None
  selector: str = "&"
  file_path: str = ""
  location: Optional[SourceLocation] = None

  @property
  def is_block(self) -> bool:
    return not self.css_property

  @property
  def is_nested(self) -> bool:
    return bool(self.conditions) or self.pseudo_element is not None or self.selector != "&"
