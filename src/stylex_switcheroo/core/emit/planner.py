"""
Wrapper Planner.

Decides, per converted component, how it is materialised:

- `RenderMode.INLINE`: the declaration disappears and every usage becomes the
  underlying element with `{...stylex.props(...)}`;
- `RenderMode.COMPONENT`: the declaration is replaced by a function component
  (a full wrapper when runtime props drive styles, a thin component when the
  name must stay a value, e.g. because it is exported).

A plan also fixes the ordered `stylex.props` arguments (inherited base, own
base, then guarded attribute/sibling/variant/dynamic entries) and the props a
wrapper destructures before forwarding the rest.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from stylex_switcheroo.core.aggregator import has_base_entry
from stylex_switcheroo.core.errors import HostParseError
from stylex_switcheroo.core.host.expressions import js_string, literal_value
from stylex_switcheroo.core.host.jsx import JsxUsage
from stylex_switcheroo.core.host.parser import parse_expression
from stylex_switcheroo.core.lowering.style_info import (
  AttributeSelectorInfo,
  ComponentArena,
  InlineStyleProp,
  JSXRewriteRule,
  StyleInfo,
)
from stylex_switcheroo.core.prepass import UsageProvider, UsageSummary
from stylex_switcheroo.core.tracer import get_tracer
from stylex_switcheroo.enums import AttributeOperator, RenderMode

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class StyleArg:
  """One `stylex.props` argument, optionally behind a `guard &&`."""

  expression: str
  guard: Optional[str] = None

  def render(self) -> str:
    if self.guard:
      return f"{self.guard} && {self.expression}"
    return self.expression


@dataclass
class UsageFacts:
  """
  What the host module itself reveals about each component's usages.

  Attributes:
      as_used: Components rendered with `as=` / `forwardedAs=`.
      external_styling: Components given `className`, `style` or a spread.
      value_refs: Components referenced outside a JSX tag position.
      style_receivers: Components handed extra styles by another component's rules.
      transient_props: `$`-prefixed attributes passed at each component's usages.
  """

  as_used: Set[str] = field(default_factory=set)
  external_styling: Set[str] = field(default_factory=set)
  value_refs: Set[str] = field(default_factory=set)
  style_receivers: Set[str] = field(default_factory=set)
  transient_props: Dict[str, List[str]] = field(default_factory=dict)

  @classmethod
  def from_usages(cls, usages: Dict[str, List[JsxUsage]], value_refs: Iterable[str] = ()) -> "UsageFacts":
    facts = cls(value_refs=set(value_refs))
    for name, items in usages.items():
      for usage in items:
        if usage.attribute("as") or usage.attribute("forwardedAs"):
          facts.as_used.add(name)
        if usage.has_spread or usage.attribute("className") or usage.attribute("style"):
          facts.external_styling.add(name)
        for attr in usage.attributes:
          if attr.name and attr.name.startswith("$"):
            seen = facts.transient_props.setdefault(name, [])
            if attr.name not in seen:
              seen.append(attr.name)
    return facts


@dataclass
class ComponentPlan:
  """
  Materialisation plan of one component.

  Attributes:
      info: The lowered component.
      render_mode: Inline tag substitution or a function component.
      element: Rendered tag (`button`) or component (`Link`).
      element_is_intrinsic: True when `element` is a host tag.
      style_args: Ordered `stylex.props` arguments.
      destructure: Props removed before forwarding (`className`, guards, ...).
      inline_styles: Values re-applied through `style`.
      static_attrs: `.attrs()` entries (inherited ones first).
      jsx_rules: Child rewrite rules applied at usage sites.
      accepts_external_styles: The component merges an incoming className/style.
      forwards_as: `as` is passed on to a local polymorphic base wrapper
          instead of replacing the rendered element.
  """

  info: StyleInfo
  render_mode: RenderMode
  element: str
  element_is_intrinsic: bool
  style_args: List[StyleArg] = field(default_factory=list)
  destructure: List[str] = field(default_factory=list)
  inline_styles: List[InlineStyleProp] = field(default_factory=list)
  static_attrs: Dict[str, str] = field(default_factory=dict)
  jsx_rules: List[JSXRewriteRule] = field(default_factory=list)
  accepts_external_styles: bool = True
  forwards_as: bool = False

  @property
  def name(self) -> str:
    return self.info.name

  @property
  def needs_wrapper(self) -> bool:
    return self.info.needs_wrapper

  @property
  def supports_as(self) -> bool:
    return self.info.supports_as

  @property
  def polymorphic(self) -> bool:
    """True when the wrapper itself renders the `as` element."""
    return self.supports_as and not self.forwards_as

  @property
  def is_inline(self) -> bool:
    return self.render_mode == RenderMode.INLINE

  @property
  def unconditional_args(self) -> List[str]:
    return [a.expression for a in self.style_args if a.guard is None]


def requires_wrapper(info: StyleInfo) -> bool:
  """
  True when styles depend on runtime props, so a function component must
  compute the `stylex.props` arguments.
  """
  return bool(
    info.attribute_selectors
    or info.sibling_selectors
    or info.forward_filter
    or info.has_specificity_hack
    or info.supports_as
    or info.dynamic_fns
    or info.inline_styles
    or info.variants
  )


def propagate_as(arena: ComponentArena, seeds: Iterable[str]) -> Set[str]:
  """
  Spreads `as` support along local base chains.

  A component that forwards `as` needs its local base to accept it, and a
  component based on a polymorphic one inherits the capability.

  Args:
      arena (ComponentArena): Components of the file.
      seeds (Iterable[str]): Components that support `as` directly.

  Returns:
      Set[str]: Every component that must support `as`.
  """
  derived: Dict[str, List[str]] = {}
  for info in arena:
    if not info.base_is_intrinsic and info.base in arena:
      derived.setdefault(info.base, []).append(info.name)

  supported = {s for s in seeds if s in arena}
  work = list(supported)
  while work:
    name = work.pop()
    info = arena.get(name)
    neighbours = list(derived.get(name, []))
    if info is not None and not info.base_is_intrinsic and info.base in arena:
      neighbours.append(info.base)
    for neighbour in neighbours:
      if neighbour not in supported:
        supported.add(neighbour)
        work.append(neighbour)
  return supported


def prop_access(prop: str, owner: str = "props") -> str:
  if _IDENTIFIER_RE.match(prop):
    return f"{owner}.{prop}"
  return f"{owner}[{js_string(prop)}]"


def static_attribute_value(text: str) -> Tuple[bool, Optional[str]]:
  """Evaluates an `.attrs()` value when it is a string literal."""
  try:
    ok, value = literal_value(parse_expression(text))
  except HostParseError:
    return False, None
  if ok and isinstance(value, str):
    return True, value
  return False, None


def attribute_matches(selector: AttributeSelectorInfo, value: str) -> bool:
  expected = selector.value or ""
  if selector.operator == AttributeOperator.EQUALS:
    return value == expected
  if selector.operator == AttributeOperator.STARTS_WITH:
    return value.startswith(expected)
  if selector.operator == AttributeOperator.ENDS_WITH:
    return value.endswith(expected)
  if selector.operator == AttributeOperator.CONTAINS:
    return expected in value
  return True


def attribute_guard(selector: AttributeSelectorInfo) -> str:
  """Runtime test equivalent to `[attr op "value"]` over the wrapper's props."""
  access = prop_access(selector.attribute)
  value = js_string(selector.value or "")
  if selector.operator == AttributeOperator.EQUALS:
    return f"{access} === {value}"
  if selector.operator == AttributeOperator.STARTS_WITH:
    return f"{access}?.startsWith({value})"
  if selector.operator == AttributeOperator.ENDS_WITH:
    return f"{access}?.endsWith({value})"
  if selector.operator == AttributeOperator.CONTAINS:
    return f"{access}?.includes({value})"
  return f"{access} != null && {access} !== false"


class WrapperPlanner:
  """
  Builds a `ComponentPlan` for every component of a file.
  """

  def __init__(
    self,
    arena: ComponentArena,
    facts: Optional[UsageFacts] = None,
    usage_provider: Optional[UsageProvider] = None,
    file_path: str = "",
    styles_identifier: str = "styles",
    stylex_namespace: str = "stylex",
  ) -> None:
    self.arena = arena
    self.facts = facts or UsageFacts()
    self.usage_provider = usage_provider
    self.file_path = file_path
    self.styles_identifier = styles_identifier
    self.stylex_namespace = stylex_namespace

  def summary(self, name: str) -> Optional[UsageSummary]:
    if self.usage_provider is None:
      return None
    return self.usage_provider.lookup(self.file_path, name)

  def plan(self) -> Dict[str, ComponentPlan]:
    """
    Plans every component.

    Sets `supports_as` and `needs_wrapper` on each `StyleInfo` first, since
    base flattening depends on the final flags of the whole chain.

    Returns:
        Dict[str, ComponentPlan]: Plans in declaration order.
    """
    seeds = []
    for info in self.arena:
      summary = self.summary(info.name)
      if info.name in self.facts.as_used or (summary is not None and summary.as_):
        seeds.append(info.name)
    supported = propagate_as(self.arena, seeds)
    for info in self.arena:
      info.supports_as = info.name in supported
      info.needs_wrapper = requires_wrapper(info)

    plans: Dict[str, ComponentPlan] = {}
    tracer = get_tracer()
    for info in self.arena:
      plan = self.plan_component(info)
      plans[info.name] = plan
      outcome = "wrapper" if plan.needs_wrapper else plan.render_mode.value
      tracer.log_inspection(info.name, outcome, f"<{plan.element}>")
    return plans

  def render_mode(self, info: StyleInfo) -> RenderMode:
    if info.needs_wrapper or info.is_exported:
      return RenderMode.COMPONENT
    summary = self.summary(info.name)
    if summary is not None and (summary.styles or summary.as_):
      return RenderMode.COMPONENT
    if info.name in self.facts.external_styling or info.name in self.facts.value_refs:
      return RenderMode.COMPONENT
    return RenderMode.INLINE

  def accepts_external_styles(self, info: StyleInfo) -> bool:
    if info.needs_wrapper or info.name in self.facts.external_styling or info.name in self.facts.style_receivers:
      return True
    summary = self.summary(info.name)
    return summary is not None and summary.styles

  def own_args(self, info: StyleInfo) -> List[StyleArg]:
    """Unconditional arguments contributed by the component itself."""
    args = [StyleArg(ref) for ref in info.mixin_refs]
    if has_base_entry(info):
      args.append(StyleArg(f"{self.styles_identifier}.{info.style_key}"))
    if info.needs_default_marker:
      args.append(StyleArg(f"{self.stylex_namespace}.defaultMarker()"))
    return args

  def resolve_element(self, info: StyleInfo) -> Tuple[str, bool, List[StyleArg], Dict[str, str], List[JSXRewriteRule]]:
    """
    Follows local styled bases that need no wrapper of their own.

    Returns:
        Tuple: `(element, is_intrinsic, inherited_args, static_attrs, jsx_rules)`.
    """
    inherited: List[StyleArg] = []
    attrs = dict(info.static_attrs)
    rules = list(info.jsx_rewrite_rules)
    current = info
    seen = {info.name}
    while not current.base_is_intrinsic:
      base = self.arena.get(current.base)
      if base is None or base.name in seen or base.needs_wrapper:
        break
      seen.add(base.name)
      inherited = self.own_args(base) + inherited
      attrs = {**base.static_attrs, **attrs}
      rules = list(base.jsx_rewrite_rules) + rules
      current = base

    element, intrinsic = current.base, current.base_is_intrinsic
    if "as" in attrs:
      ok, tag = static_attribute_value(attrs["as"])
      if ok and tag:
        element, intrinsic = tag, tag[:1].islower()
        del attrs["as"]
    return element, intrinsic, inherited, attrs, rules

  def transient_props(self, info: StyleInfo) -> List[str]:
    """
    `$props` the component or its local bases read, plus those passed at its
    usages. They must not reach a host element.
    """
    props = list(self.facts.transient_props.get(info.name, []))
    current: Optional[StyleInfo] = info
    seen: Set[str] = set()
    while current is not None and current.name not in seen:
      seen.add(current.name)
      props.extend(current.transient_props)
      current = None if current.base_is_intrinsic else self.arena.get(current.base)
    return list(dict.fromkeys(props))

  def plan_component(self, info: StyleInfo) -> ComponentPlan:
    element, intrinsic, inherited, attrs, rules = self.resolve_element(info)
    styles = self.styles_identifier
    args = inherited + self.own_args(info)
    destructure: List[str] = []

    def keep(*names: str) -> None:
      for name in names:
        if name and name not in destructure:
          destructure.append(name)

    for selector in info.attribute_selectors:
      entry = f"{styles}.{selector.style_key}"
      if selector.attribute in attrs:
        ok, value = static_attribute_value(attrs[selector.attribute])
        if ok:
          if attribute_matches(selector, value or ""):
            args.append(StyleArg(entry))
          continue
      args.append(StyleArg(entry, attribute_guard(selector)))

    for sibling in info.sibling_selectors:
      args.append(StyleArg(f"{styles}.{sibling.style_key}", sibling.prop_name))
      keep(sibling.prop_name)

    for variant in info.variants:
      if variant.styles:
        args.append(StyleArg(f"{styles}.{variant.name}", variant.guard))

    seen_keys: Set[str] = set()
    for entry in info.dynamic_fns:
      if entry.key in seen_keys:
        continue
      seen_keys.add(entry.key)
      call = f"{styles}.{entry.key}({entry.prop_name})"
      guard = None if entry.fallback_value is not None else f"{entry.prop_name} != null"
      args.append(StyleArg(call, guard))

    keep(*info.prop_dependencies)
    keep(*info.forward_filter)
    if intrinsic:
      keep(*self.transient_props(info))

    base = None if intrinsic else self.arena.get(element)
    forwards_as = info.supports_as and base is not None and base.supports_as

    mode = self.render_mode(info)
    accepts = self.accepts_external_styles(info)
    return ComponentPlan(
      info=info,
      render_mode=mode,
      element=element,
      element_is_intrinsic=intrinsic,
      style_args=args,
      destructure=destructure,
      inline_styles=list(info.inline_styles),
      static_attrs=attrs,
      jsx_rules=rules,
      accepts_external_styles=accepts,
      forwards_as=forwards_as,
    )
