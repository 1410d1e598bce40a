"""
Style-Model Converter.

Turns one parsed `RuleNode` into a canonical StyleX object:

1. Declarations: `!important` stripped (and recorded), property names
   camel-cased, shorthands expanded when several values are present, numbers
   normalized, placeholders resolved through the context's slot resolver.
2. Nested rules: pseudo-classes and `@media`/`@supports`/`@container` blocks
   become condition blocks, pseudo-elements nested objects, anything else a raw
   selector key kept for the lowering passes.
3. `to_property_level_conditionals` folds condition blocks into per-property
   `{default, <condition>: v}` maps so no leaf nests two conditions deep.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from stylex_switcheroo.core.css.nodes import (
  PLACEHOLDER_RE,
  Declaration,
  RuleNode,
  find_placeholders,
  is_only_placeholder,
)
from stylex_switcheroo.core.css.parser import split_top_level
from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType, SourceLocation
from stylex_switcheroo.core.styles.properties import normalize_value, strip_important, to_camel_case
from stylex_switcheroo.core.styles.shorthand import expand_shorthand, has_placeholder, split_tokens
from stylex_switcheroo.core.styles.values import (
  DEFAULT_KEY,
  JsExpr,
  StyleObject,
  is_condition_at_rule,
  is_condition_key,
  is_conditional_map,
  is_pseudo_element_key,
  join_parts,
  render_number,
)
from stylex_switcheroo.core.tracer import get_tracer

_PSEUDO_SELECTOR_RE = re.compile(r"^&((?::(?!:)[a-zA-Z-]+(?:\([^()]*(?:\([^()]*\)[^()]*)*\))?)*)(::[a-zA-Z-]+)?$")


@dataclass(frozen=True)
class SlotRequest:
  """
  One placeholder the converter needs a value for.

  Attributes:
      index: Interpolation slot index.
      css_property: Target property token (`""` for block-level slots).
      value: Raw text of the value for `css_property` (the whole declaration
          value, or one token after shorthand expansion).
      token: The whitespace token holding the placeholder.
      tokens: All tokens of `value`.
      token_index: Position of `token` in `tokens`.
      is_full_value: True when the placeholder is the whole value.
      conditions: Enclosing pseudo-class / at-rule keys, outermost first.
      pseudo_element: Enclosing `::before`-style key, if any.
      selector: Enclosing raw selector (`&` at the component root).
  """

  index: int
  css_property: str
  value: str
  token: str = ""
  tokens: Tuple[str, ...] = ()
  token_index: int = 0
  is_full_value: bool = False
  conditions: Tuple[str, ...] = ()
  pseudo_element: Optional[str] = None
  selector: str = "&"


@dataclass
class SlotResolution:
  """
  Answer for one `SlotRequest`.

  `omitted` drops the property (its value lives elsewhere, e.g. in a variant
  or a dynamic style function, or it bailed). `styles` is merged in place of a
  block-level slot.
  """

  value: Any = None
  omitted: bool = False
  property: Optional[str] = None
  styles: Optional[StyleObject] = None

  @classmethod
  def omit(cls) -> "SlotResolution":
    return cls(omitted=True)


def _no_slots(request: SlotRequest) -> SlotResolution:
  return SlotResolution.omit()


def _no_selectors(index: int) -> Optional[str]:
  return None


@dataclass
class ConversionContext:
  """
  Collaborators the converter calls back into.

  Attributes:
      resolve_slot: Resolves a value or block placeholder (bound to the decision engine).
      resolve_selector: Text to substitute for a placeholder in a selector or
          at-rule prelude (`${Icon}`, a media query constant); None drops the block.
      diagnostics: Sink for conversion diagnostics.
      location: Position of the owning declaration.
      important_properties: Properties whose `!important` was stripped.
  """

  resolve_slot: Callable[[SlotRequest], SlotResolution] = _no_slots
  resolve_selector: Callable[[int], Optional[str]] = _no_selectors
  diagnostics: DiagnosticSink = field(default_factory=DiagnosticSink)
  location: Optional[SourceLocation] = None
  important_properties: List[str] = field(default_factory=list)


_OMIT = object()


def deep_merge(target: Dict[Any, Any], source: Dict[Any, Any]) -> Dict[Any, Any]:
  """Merges `source` into `target` (nested dicts merged, leaves overwritten)."""
  for key, value in source.items():
    if isinstance(value, dict) and isinstance(target.get(key), dict) and not is_conditional_map(value):
      deep_merge(target[key], value)
    else:
      target[key] = value
  return target


def pseudo_path(selector: str) -> Optional[Tuple[str, ...]]:
  """
  Reads a simple pseudo selector as a key path.

  `&:hover` -> (':hover',), `&::before` -> ('::before',),
  `&:hover::before` -> ('::before', ':hover'), `&` -> ().
  Returns None for any other selector.
  """
  text = selector.strip()
  if text.startswith(":"):
    text = "&" + text
  match = _PSEUDO_SELECTOR_RE.match(text)
  if not match:
    return None
  pseudo_class, pseudo_element = match.group(1), match.group(2)
  path: Tuple[str, ...] = ()
  if pseudo_element:
    path += (pseudo_element,)
  if pseudo_class:
    path += (pseudo_class,)
  return path


def nested_rule_paths(selector: str) -> Optional[List[Tuple[str, ...]]]:
  """
  Key paths for a nested rule, or None when it must be kept as a raw selector.

  Comma-separated groups expand only when every member is a simple pseudo.
  """
  if selector.startswith("@"):
    if is_condition_at_rule(selector):
      return [(selector,)]
    return None
  paths = []
  for part in split_top_level(selector, ","):
    path = pseudo_path(part)
    if path is None:
      return None
    paths.append(path)
  return paths or None


class StyleModelConverter:
  """
  Converts rule trees into canonical StyleX objects.
  """

  def __init__(self, context: Optional[ConversionContext] = None) -> None:
    self.context = context or ConversionContext()

  def convert(self, rule: RuleNode) -> StyleObject:
    """
    Converts a rule tree and flattens it to property-level conditionals.

    Args:
        rule (RuleNode): The component's root rule.

    Returns:
        StyleObject: The canonical object.
    """
    raw = self.convert_rule(rule)
    return to_property_level_conditionals(raw, self.context.diagnostics, self.context.location)

  def convert_rule(
    self,
    rule: RuleNode,
    conditions: Tuple[str, ...] = (),
    pseudo_element: Optional[str] = None,
    selector: str = "&",
  ) -> StyleObject:
    """Converts one rule without flattening (condition blocks stay nested)."""
    obj: StyleObject = {}
    for decl in rule.declarations:
      self._convert_declaration(decl, obj, conditions, pseudo_element, selector)
    for child in rule.nested_rules:
      self._convert_nested(child, obj, conditions, pseudo_element, selector)
    return obj

  # --- Nested rules ---

  def _substitute_selector(self, selector: str) -> Optional[str]:
    for index in find_placeholders(selector):
      replacement = self.context.resolve_selector(index)
      if replacement is None:
        return None
      selector = selector.replace(f"__INTERPOLATION_{index}__", replacement)
    return selector

  def _convert_nested(
    self,
    child: RuleNode,
    obj: StyleObject,
    conditions: Tuple[str, ...],
    pseudo_element: Optional[str],
    selector: str,
  ) -> None:
    resolved = self._substitute_selector(child.selector)
    if resolved is None:
      return
    paths = nested_rule_paths(resolved)
    if paths is None:
      if resolved.startswith("@"):
        get_tracer().log_inspection(resolved, "dropped", "at-rule without a StyleX equivalent")
        return
      body = self.convert_rule(child, (), None, resolved)
      deep_merge(obj.setdefault(resolved, {}), body)
      return

    for path in paths:
      element = pseudo_element
      inner_conditions = conditions
      for key in path:
        if is_pseudo_element_key(key):
          element = key
        else:
          inner_conditions = inner_conditions + (key,)
      body = self.convert_rule(child, inner_conditions, element, selector)
      target = obj
      for key in path:
        target = target.setdefault(key, {})
      deep_merge(target, body)

  # --- Declarations ---

  def _convert_declaration(
    self,
    decl: Declaration,
    obj: StyleObject,
    conditions: Tuple[str, ...],
    pseudo_element: Optional[str],
    selector: str,
  ) -> None:
    if not decl.property:
      if decl.is_block_slot:
        index = find_placeholders(decl.value)[0]
        resolution = self.context.resolve_slot(
          SlotRequest(
            index=index,
            css_property="",
            value=decl.value,
            token=decl.value,
            tokens=(decl.value,),
            is_full_value=True,
            conditions=conditions,
            pseudo_element=pseudo_element,
            selector=selector,
          )
        )
        if resolution.styles:
          deep_merge(obj, resolution.styles)
      return

    if find_placeholders(decl.property):
      self.context.diagnostics.report(
        DiagnosticType.UNSUPPORTED_PROPERTY, location=self.context.location, property=decl.property
      )
      return

    value, important = strip_important(decl.value)
    prop = to_camel_case(decl.property)
    if important:
      self.context.important_properties.append(prop)

    if not find_placeholders(value):
      expansion = expand_shorthand(prop, value)
      if expansion:
        for longhand, token in expansion:
          obj[longhand] = normalize_value(longhand, token)
      else:
        obj[prop] = normalize_value(prop, value)
      return

    base = SlotRequest(
      index=-1,
      css_property=prop,
      value=value,
      conditions=conditions,
      pseudo_element=pseudo_element,
      selector=selector,
    )

    if is_only_placeholder(value):
      index = find_placeholders(value)[0]
      resolution = self.context.resolve_slot(
        _with(base, index=index, token=value, tokens=(value,), token_index=0, is_full_value=True)
      )
      if not resolution.omitted:
        obj[resolution.property or prop] = resolution.value
      return

    tokens = tuple(split_tokens(value))
    expansion = expand_shorthand(prop, value)
    if expansion:
      for token_index, (longhand, token) in enumerate(expansion):
        if not has_placeholder(token):
          obj[longhand] = normalize_value(longhand, token)
          continue
        spliced = self._splice(
          token, _with(base, css_property=longhand, value=token, tokens=tokens, token_index=token_index)
        )
        if spliced is not _OMIT:
          obj[longhand] = spliced
      return

    spliced = self._splice(value, _with(base, tokens=tokens))
    if spliced is not _OMIT:
      obj[prop] = spliced

  def _splice(self, text: str, base: SlotRequest) -> Any:
    """
    Resolves every placeholder in `text` and joins the pieces.

    Returns `_OMIT` when any slot is omitted.
    """
    parts: List[Any] = []
    cursor = 0
    for match in PLACEHOLDER_RE.finditer(text):
      parts.append(text[cursor : match.start()])
      token_index = base.token_index
      if base.tokens and not base.token:
        token_index = _token_index_of(base.tokens, match.group(0))
      token = base.tokens[token_index] if base.tokens else text
      resolution = self.context.resolve_slot(
        _with(base, index=int(match.group(1)), token=token, token_index=token_index)
      )
      if resolution.omitted:
        return _OMIT
      parts.append(_as_part(resolution.value))
      cursor = match.end()
    parts.append(text[cursor:])
    joined = join_parts(parts)
    if isinstance(joined, str):
      return normalize_value(base.css_property, joined)
    return joined


def _with(request: SlotRequest, **changes: Any) -> SlotRequest:
  values = dict(request.__dict__)
  values.update(changes)
  return SlotRequest(**values)


def _token_index_of(tokens: Tuple[str, ...], placeholder: str) -> int:
  for i, token in enumerate(tokens):
    if placeholder in token:
      return i
  return 0


def _as_part(value: Any) -> Any:
  if isinstance(value, JsExpr):
    return value
  if value is None:
    return ""
  if isinstance(value, bool):
    return "true" if value else "false"
  if isinstance(value, (int, float)):
    return render_number(value)
  return str(value)


def _is_condition_block(key: Any, value: Any) -> bool:
  return key != DEFAULT_KEY and is_condition_key(key) and isinstance(value, dict) and not is_conditional_map(value)


def _set_condition(result: StyleObject, prop: Any, condition: Any, value: Any) -> None:
  existing = result.get(prop, _OMIT)
  if is_conditional_map(existing):
    existing[condition] = value
  else:
    result[prop] = {DEFAULT_KEY: None if existing is _OMIT else existing, condition: value}


def to_property_level_conditionals(
  obj: StyleObject,
  diagnostics: Optional[DiagnosticSink] = None,
  location: Optional[SourceLocation] = None,
) -> StyleObject:
  """
  Folds condition blocks into per-property conditional maps.

  `{color: 'red', ':hover': {color: 'blue'}}` becomes
  `{color: {default: 'red', ':hover': 'blue'}}`. Pseudo-element objects and
  raw selector bodies are flattened recursively. A condition nested inside
  another condition is dropped with a complex-selector diagnostic.

  Args:
      obj (StyleObject): Object with nested condition blocks.
      diagnostics (Optional[DiagnosticSink]): Where to report dropped conditions.
      location (Optional[SourceLocation]): Position for diagnostics.

  Returns:
      StyleObject: A new object satisfying the one-level invariant.
  """
  result: StyleObject = {}
  for key, value in obj.items():
    if _is_condition_block(key, value):
      for prop, inner in value.items():
        if isinstance(inner, dict):
          if diagnostics is not None:
            diagnostics.report(DiagnosticType.COMPLEX_SELECTOR, location=location, selector=f"{key} {prop}")
          continue
        _set_condition(result, prop, key, inner)
    elif isinstance(value, dict) and not is_conditional_map(value):
      flattened = to_property_level_conditionals(value, diagnostics, location)
      if isinstance(result.get(key), dict):
        deep_merge(result[key], flattened)
      else:
        result[key] = flattened
    elif is_conditional_map(value):
      existing = result.get(key, _OMIT)
      merged = dict(value)
      if existing is not _OMIT and not is_conditional_map(existing):
        merged[DEFAULT_KEY] = existing if value.get(DEFAULT_KEY) is None else value[DEFAULT_KEY]
      result[key] = merged
    else:
      existing = result.get(key)
      if is_conditional_map(existing):
        existing[DEFAULT_KEY] = value
      else:
        result[key] = value
  return result


def has_nested_conditionals(obj: StyleObject) -> bool:
  """True if any leaf is a conditional map whose values are themselves conditional."""
  for value in obj.values():
    if is_conditional_map(value):
      if any(isinstance(v, dict) for v in value.values()):
        return True
    elif isinstance(value, dict) and has_nested_conditionals(value):
      return True
  return False
