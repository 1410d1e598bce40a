"""
Call-Site Rewriter.

Edits the JSX usages of converted components:

- inline components: tag substitution, `.attrs()` values, removal of
  transient `$props` on host elements, and `{...stylex.props(...)}`;
- child rules from `& > *`-style selectors attach entries to the direct
  children of each usage;
- descendant overrides from `${Child}` selectors attach entries to matching
  elements nested inside each usage of the parent;
- sibling selectors become boolean props computed from JSX sibling order.

All changes to one element are collected first and emitted as a single set
of non-overlapping text edits.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from tree_sitter import Node

from stylex_switcheroo.core.emit.planner import ComponentPlan
from stylex_switcheroo.core.host.edits import TextEdit, delete, insert, replace
from stylex_switcheroo.core.host.jsx import JsxUsage, child_elements, jsx_elements, usage_of
from stylex_switcheroo.core.lowering.style_info import ComponentArena, JSXRewriteRule
from stylex_switcheroo.enums import JSXRewriteKind, SiblingRelation

_CHILD_SELECTION = {
  JSXRewriteKind.DIRECT_CHILDREN: lambda items: items,
  JSXRewriteKind.DIRECT_CHILDREN_EXCEPT_FIRST: lambda items: items[1:],
  JSXRewriteKind.DIRECT_CHILDREN_EXCEPT_LAST: lambda items: items[:-1],
  JSXRewriteKind.DIRECT_CHILDREN_FIRST: lambda items: items[:1],
}


@dataclass
class _ElementChange:
  usage: JsxUsage
  args: List[str] = field(default_factory=list)
  flags: List[str] = field(default_factory=list)

  def add_arg(self, expression: str) -> None:
    if expression not in self.args:
      self.args.append(expression)

  def add_flag(self, name: str) -> None:
    if name not in self.flags and self.usage.attribute(name) is None:
      self.flags.append(name)


def rule_targets(rule: JSXRewriteRule, usage: JsxUsage) -> List[Node]:
  """Elements of `usage` that a rewrite rule applies to."""
  if rule.kind == JSXRewriteKind.DESCENDANT_STYLED_COMPONENT:
    found = []
    for element in jsx_elements(usage.element):
      if element.id != usage.element.id and usage_of(element).name == rule.target_component:
        found.append(element)
    return found
  select = _CHILD_SELECTION.get(rule.kind)
  if select is None:
    return []
  return select(child_elements(usage.element))


def style_receivers(arena: ComponentArena, usages: Dict[str, List[JsxUsage]]) -> Set[str]:
  """
  Components whose usages will be handed extra styles by another component's
  rules; they must accept and merge an incoming `className` / `style`.
  """
  receivers: Set[str] = set()
  for info in arena:
    for rule in info.jsx_rewrite_rules:
      if rule.kind == JSXRewriteKind.DESCENDANT_STYLED_COMPONENT and rule.target_component:
        receivers.add(rule.target_component)
        continue
      for usage in usages.get(info.name, []):
        for element in rule_targets(rule, usage):
          receivers.add(usage_of(element).name)
  return receivers


class CallSiteRewriter:
  """
  Produces the JSX edits of one file.
  """

  def __init__(
    self,
    plans: Dict[str, ComponentPlan],
    usages: Dict[str, List[JsxUsage]],
    stylex_namespace: str = "stylex",
    styles_identifier: str = "styles",
  ) -> None:
    """
    Args:
        plans (Dict[str, ComponentPlan]): Plans of the converted components.
        usages (Dict[str, List[JsxUsage]]): JSX usages per component name.
        stylex_namespace (str): Local name of the StyleX import.
        styles_identifier (str): Name of the `stylex.create` registry.
    """
    self.plans = plans
    self.usages = usages
    self.stylex_namespace = stylex_namespace
    self.styles_identifier = styles_identifier
    self.uses_stylex = False
    self._changes: Dict[int, _ElementChange] = {}

  def change_for(self, element: Node) -> _ElementChange:
    change = self._changes.get(element.start_byte)
    if change is None:
      change = _ElementChange(usage=usage_of(element))
      self._changes[element.start_byte] = change
    return change

  def usages_of(self, name: str) -> List[JsxUsage]:
    return self.usages.get(name, [])

  # --- Collection ---

  def collect_rules(self) -> None:
    for plan in self.plans.values():
      for rule in plan.jsx_rules:
        expression = f"{self.styles_identifier}.{rule.style_key}"
        for usage in self.usages_of(plan.name):
          for element in rule_targets(rule, usage):
            self.change_for(element).add_arg(expression)

  def collect_siblings(self) -> None:
    for plan in self.plans.values():
      selectors = plan.info.sibling_selectors
      if not selectors:
        continue
      parents: Dict[int, Node] = {}
      for usage in self.usages_of(plan.name):
        parent = usage.element.parent
        if parent is not None:
          parents.setdefault(parent.id, parent)
      for parent in parents.values():
        self._flag_siblings(plan, parent)

  def _flag_siblings(self, plan: ComponentPlan, parent: Node) -> None:
    previous: List[JsxUsage] = []
    last_element: Optional[JsxUsage] = None
    for element in child_elements(parent):
      usage = usage_of(element)
      if usage.name == plan.name:
        for selector in plan.info.sibling_selectors:
          if selector.relation == SiblingRelation.ADJACENT:
            matched = last_element is not None and last_element.name == plan.name
          elif selector.class_name:
            matched = any(_has_class(p, selector.class_name) for p in previous)
          else:
            matched = bool(previous)
          if matched:
            self.change_for(element).add_flag(selector.prop_name)
        previous.append(usage)
      last_element = usage

  def collect_inline(self) -> None:
    for plan in self.plans.values():
      if not plan.is_inline:
        continue
      for usage in self.usages_of(plan.name):
        change = self.change_for(usage.element)
        for expression in plan.unconditional_args:
          change.add_arg(expression)

  # --- Emission ---

  def edits_for(self, change: _ElementChange) -> List[TextEdit]:
    usage = change.usage
    plan = self.plans.get(usage.name)
    edits: List[TextEdit] = []
    extra: List[str] = list(change.flags)

    if plan is not None and plan.is_inline:
      if plan.element != usage.name:
        for name_node in usage.name_nodes:
          edits.append(replace(name_node.start_byte, name_node.end_byte, plan.element))
      for attr in usage.attributes:
        drop = attr.name is not None and (
          attr.name in plan.static_attrs or (plan.element_is_intrinsic and attr.name.startswith("$"))
        )
        if drop:
          start = attr.node.prev_sibling.end_byte if attr.node.prev_sibling is not None else attr.node.start_byte
          edits.append(delete(start, attr.node.end_byte))
      extra.extend(f"{key}={{{value}}}" for key, value in plan.static_attrs.items())

    if change.args:
      self.uses_stylex = True
      extra.append(f"{{...{self.stylex_namespace}.props({', '.join(change.args)})}}")
    if extra:
      edits.append(insert(usage.insert_offset, "".join(" " + item for item in extra)))
    return edits

  def rewrite(self) -> List[TextEdit]:
    """
    Collects and renders every call-site change.

    Returns:
        List[TextEdit]: Edits over the host source.
    """
    self._changes = {}
    self.collect_inline()
    self.collect_rules()
    self.collect_siblings()
    edits: List[TextEdit] = []
    for change in self._changes.values():
      edits.extend(self.edits_for(change))
    return edits


def _has_class(usage: JsxUsage, class_name: str) -> bool:
  attr = usage.attribute("className")
  if attr is None:
    return False
  value = attr.string()
  return value is not None and class_name in value.split()

