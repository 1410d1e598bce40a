"""
Ancestor Pseudo Pass.

`${Card}:hover & { color: red; }` inside `Title` restyles a `Title` while an
enclosing `Card` is hovered. The property is routed through a custom property:

    title:  color: "var(--title-color-on-card-hover, black)"
    card:   "--title-color-on-card-hover": {default: null, ":hover": "red"}

The injection into the parent happens in `finish`, once every component has
been visited.
"""

import re
from typing import Any

from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass
from stylex_switcheroo.core.lowering.style_info import CSSVarInjection, StyleInfo
from stylex_switcheroo.core.styles.properties import to_kebab_case
from stylex_switcheroo.core.styles.values import (
  DEFAULT_KEY,
  JsExpr,
  StyleObject,
  is_conditional_map,
  render_number,
)
from stylex_switcheroo.core.tracer import get_tracer

_ANCESTOR_RE = re.compile(r"^\$\{(?P<name>[A-Za-z_$][\w$]*)\}(?P<pseudo>:[\w-]+(?:\([^)]*\))?)\s+&$")


def bridge_variable(child: StyleInfo, prop: str, parent: StyleInfo, pseudo: str) -> str:
  slug = re.sub(r"[^\w-]+", "-", pseudo).strip("-")
  return "--{}-{}-on-{}-{}".format(
    to_kebab_case(child.style_key),
    to_kebab_case(prop.lstrip("-")),
    to_kebab_case(parent.style_key),
    slug,
  )


def var_reference(var_name: str, fallback: Any) -> Any:
  """`var(--x, <fallback>)` as a literal or template expression."""
  if fallback is None:
    return f"var({var_name})"
  if isinstance(fallback, JsExpr):
    return JsExpr(f"`var({var_name}, ${{{fallback.code}}})`")
  if isinstance(fallback, (int, float)) and not isinstance(fallback, bool):
    fallback = render_number(fallback)
  return f"var({var_name}, {fallback})"


class AncestorPseudoPass(LoweringPass):
  name = "ancestor"

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    match = _ANCESTOR_RE.match(selector.strip())
    if not match:
      return False
    parent = context.arena.get(match.group("name"))
    if parent is None or parent.name == info.name:
      return False
    pseudo = match.group("pseudo")

    for prop, value in body.items():
      if not isinstance(prop, str) or isinstance(value, dict):
        context.report(DiagnosticType.COMPLEX_SELECTOR, info, selector)
        continue
      var_name = bridge_variable(info, prop, parent, pseudo)
      existing = info.styles.get(prop)
      if is_conditional_map(existing):
        existing[DEFAULT_KEY] = var_reference(var_name, existing.get(DEFAULT_KEY))
      else:
        info.styles[prop] = var_reference(var_name, existing)
      info.css_var_injections.append(
        CSSVarInjection(
          target_component=parent.name,
          var_name=var_name,
          pseudo=pseudo,
          value=value,
          source_component=info.name,
        )
      )
    return True

  def finish(self, context: LoweringContext) -> None:
    for info in context.arena:
      for injection in info.css_var_injections:
        parent = context.arena.get(injection.target_component)
        if parent is None:
          continue
        entry = parent.styles.setdefault(injection.var_name, {DEFAULT_KEY: None})
        entry[injection.pseudo] = injection.value
        get_tracer().log_inspection(injection.var_name, "injected", f"{info.name} -> {parent.name}")
