"""
Built-in Decision Handlers.

Handlers are plain functions `(classified, ctx, env) -> Optional[Decision]`
registered per `InterpolationTag` with the `builtin_handler` decorator.
Adapter-supplied handlers share the same signature and run first.

`raw` slots are only claimed when they are plain identifiers or member
chains (module constants, imported values). Everything else reaches the
engine's fallback, which calls `raw_bail` to pick the most specific bail
reason and scrape prop dependencies from the source text.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from stylex_switcheroo.core.classifier import ClassificationContext, ClassifiedInterpolation, CssBlock
from stylex_switcheroo.core.css.nodes import find_placeholders, make_placeholder
from stylex_switcheroo.core.css.parser import parse_css_text
from stylex_switcheroo.core.decisions.adapter import (
  Adapter,
  CallResolveContext,
  CallResolveResult,
  ImportSink,
  ResolveValueContext,
  ResolveValueResult,
  coerce_call_result,
  coerce_value_result,
)
from stylex_switcheroo.core.decisions.types import (
  BailDecision,
  ConvertDecision,
  Decision,
  DynamicFnDecision,
  DynamicNodeContext,
  RewriteDecision,
  VariantBranch,
  VariantDecision,
)
from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.errors import AdapterContractError, CssSyntaxError
from stylex_switcheroo.core.host.expressions import arrow_shape, call_parts, member_path, unwrap
from stylex_switcheroo.core.host.parser import is_valid_expression, node_text
from stylex_switcheroo.core.naming import js_literal, literal_suffix, prop_suffix
from stylex_switcheroo.core.styles.converter import ConversionContext, StyleModelConverter
from stylex_switcheroo.core.styles.properties import UNITLESS_PROPERTIES, normalize_value
from stylex_switcheroo.core.styles.shorthand import border_target
from stylex_switcheroo.core.styles.values import DEFAULT_KEY, JsExpr, StyleObject, is_conditional_map, render_number
from stylex_switcheroo.enums import InterpolationTag

Handler = Callable[[ClassifiedInterpolation, DynamicNodeContext, "HandlerEnv"], Optional[Decision]]

_BUILTIN_HANDLERS: Dict[InterpolationTag, List[Handler]] = {}

_UNIT_SUFFIX_RE = re.compile(r"^-?__INTERPOLATION_\d+__(px|r?em|%|vh|vw|vmin|vmax|ms|s|deg|ch|ex|fr)?$")


def builtin_handler(*tags: InterpolationTag) -> Callable[[Handler], Handler]:
  """
  Decorator registering a function as the built-in handler for `tags`.

  Args:
      *tags: Interpolation tags the handler claims.

  Returns:
      The decorator.
  """

  def decorator(func: Handler) -> Handler:
    for tag in tags:
      _BUILTIN_HANDLERS.setdefault(tag, []).append(func)
    return func

  return decorator


def builtin_handlers_for(tag: InterpolationTag) -> List[Handler]:
  return list(_BUILTIN_HANDLERS.get(tag, []))


@dataclass
class HandlerEnv:
  """
  Shared services for handlers within one run.

  Attributes:
      adapter: The project adapter.
      imports: Append-only import sink.
      classification: Module knowledge (imports, known declarations).
      styles_identifier: Name of the `stylex.create` registry.
      mixin_keys: Local css`` mixin name -> registry key.
      file_path: Host file.
  """

  adapter: Adapter = field(default_factory=Adapter)
  imports: ImportSink = field(default_factory=ImportSink)
  classification: ClassificationContext = field(default_factory=ClassificationContext)
  styles_identifier: str = "styles"
  mixin_keys: Dict[str, str] = field(default_factory=dict)
  file_path: str = ""

  def resolve_value(self, context: ResolveValueContext) -> Optional[ResolveValueResult]:
    """Calls the adapter's value hook; contract violations propagate as `AdapterContractError`."""
    return coerce_value_result(self.adapter.resolve_value(context))

  def resolve_call(self, context: CallResolveContext) -> Optional[CallResolveResult]:
    return coerce_call_result(self.adapter.resolve_call(context))


# --- Shared helpers ---


def scope_styles(styles: StyleObject, ctx: DynamicNodeContext) -> Optional[StyleObject]:
  """
  Re-applies the slot's enclosing pseudo/at-rule context to `styles`.

  Returns None when the combination would need two nested conditions.
  """
  if len(ctx.conditions) > 1:
    return None
  out: StyleObject = {}
  for prop, value in styles.items():
    if ctx.conditions:
      if isinstance(value, dict):
        return None
      out[prop] = {DEFAULT_KEY: None, ctx.conditions[0]: value}
    else:
      out[prop] = value
  if ctx.pseudo_element:
    return {ctx.pseudo_element: out}
  return out


def substitute_slot(text: str, index: int, replacement: str) -> str:
  return text.replace(make_placeholder(index), replacement)


def _other_slots(text: str, index: int) -> bool:
  return any(i != index for i in find_placeholders(text))


def _props_dependencies(source: str, param: Optional[str], destructured: Tuple[str, ...] = ()) -> Tuple[str, ...]:
  """Best-effort scan of the props a source text reads."""
  found: List[str] = []
  names = [param] if param else []
  if not names and not destructured:
    names = ["props", "p"]
  for name in names:
    for match in re.finditer(rf"(?<![\w$.]){re.escape(name)}\??\.(\$?[A-Za-z_][\w$]*)", source):
      found.append(match.group(1))
  for name in destructured:
    if re.search(rf"(?<![\w$.]){re.escape(name)}(?![\w$])", source.split("=>", 1)[-1]):
      found.append(name)
  out = []
  for name in found:
    if name != "theme" and name not in out:
      out.append(name)
  return tuple(out)


def inline_expression(classified: ClassifiedInterpolation) -> Optional[str]:
  """
  Rewrites an arrow body over destructured props, for an inline-style escape hatch.

  `p => p.size * 2 + "px"` -> `size * 2 + "px"`. Returns None for block
  bodies and theme access.
  """
  shape = arrow_shape(classified.node) if classified.node is not None else None
  if shape is None or shape.body is None:
    return None
  body = node_text(shape.body)
  if re.search(r"\btheme\b", body):
    return None
  if shape.param_name:
    body = re.sub(rf"(?<![\w$.]){re.escape(shape.param_name)}\??\.", "", body)
    if re.search(rf"(?<![\w$.]){re.escape(shape.param_name)}(?![\w$])", body):
      return None
  return body


def _variant_names(classified: ClassifiedInterpolation, ctx: DynamicNodeContext) -> Tuple[Tuple[str, str], Tuple[str, str]]:
  """Returns `((truthy_name, truthy_guard), (falsy_name, falsy_guard))`."""
  prop = classified.path[0]
  suffix = prop_suffix(prop)
  if classified.comparison is not None:
    op, value = classified.comparison
    positive = f"{suffix}{literal_suffix(value)}"
    negative = f"{suffix}Not{literal_suffix(value)}"
    eq_guard = f"{prop} === {js_literal(value)}"
    ne_guard = f"{prop} !== {js_literal(value)}"
    if op in ("===", "=="):
      return (ctx.style_key + positive, eq_guard), (ctx.style_key + negative, ne_guard)
    return (ctx.style_key + negative, ne_guard), (ctx.style_key + positive, eq_guard)
  positive = (ctx.style_key + suffix, prop)
  negative = (ctx.style_key + "Not" + suffix, f"!{prop}")
  if classified.negated:
    return negative, positive
  return positive, negative


def _is_empty_branch(value: Any) -> bool:
  return value is None or value is False or value == ""


def _css_block_styles(block: CssBlock) -> Tuple[Optional[StyleObject], Optional[DiagnosticType]]:
  """Converts a static css`` branch into a style object."""
  try:
    rule = parse_css_text(block.text)
  except CssSyntaxError:
    return None, DiagnosticType.CSS_BLOCK_PARSE
  if any(child.is_at_rule for child in rule.walk()):
    return None, DiagnosticType.CSS_BLOCK_AT_RULE
  context = ConversionContext()
  styles = StyleModelConverter(context).convert(rule)
  if context.important_properties:
    return None, DiagnosticType.CSS_BLOCK_IMPORTANT
  if len(context.diagnostics):
    return None, DiagnosticType.CSS_BLOCK_SELECTOR
  for key, value in styles.items():
    if isinstance(value, dict) and not is_conditional_map(value):
      return None, DiagnosticType.CSS_BLOCK_SELECTOR
  return styles, None


def _branch_styles(value: Any, ctx: DynamicNodeContext) -> Tuple[Optional[StyleObject], Optional[DiagnosticType]]:
  """Style object applied when one conditional branch is taken."""
  if _is_empty_branch(value):
    return {}, None
  if ctx.is_block:
    if not isinstance(value, CssBlock):
      return None, DiagnosticType.CSS_BLOCK_MISSING_PROPERTY
    styles, problem = _css_block_styles(value)
    if styles is None:
      return None, problem
  else:
    if isinstance(value, CssBlock):
      return None, DiagnosticType.ARROW_CONDITIONAL_BRANCHES
    literal = render_number(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else str(value)
    text = literal if ctx.is_full_value else substitute_slot(ctx.value, ctx.index, literal)
    styles = {ctx.css_property: normalize_value(ctx.css_property, text)}
  scoped = scope_styles(styles, ctx)
  if scoped is None:
    return None, DiagnosticType.CSS_BLOCK_SELECTOR
  return scoped, None


# --- Built-in handlers ---


@builtin_handler(InterpolationTag.THEME_ACCESS)
def handle_theme_access(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Decision:
  """theme-access -> convert via `resolve_value`, else bail."""
  path = ".".join(classified.path)
  try:
    result = env.resolve_value(
      ResolveValueContext(kind="theme", path=path, css_property=ctx.css_property or None, file_path=env.file_path)
    )
  except AdapterContractError:
    return BailDecision(DiagnosticType.ADAPTER_VALUE_UNPARSEABLE)
  if result is None:
    return BailDecision(DiagnosticType.ARROW_THEME_PATH)
  if not is_valid_expression(result.expr):
    return BailDecision(DiagnosticType.ADAPTER_VALUE_UNPARSEABLE)
  env.imports.extend(result.imports)
  return ConvertDecision(JsExpr(result.expr))


@builtin_handler(InterpolationTag.PROP_ACCESS)
def handle_prop_access(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Decision:
  """prop-access -> a style function keyed by the prop."""
  prop = classified.path[0]
  if ctx.is_block:
    return BailDecision(DiagnosticType.ARROW_UNRECOGNIZED_BODY, (prop,))
  if ctx.pseudo_element:
    return BailDecision(DiagnosticType.PSEUDO_ELEMENT_DYNAMIC, (prop,))

  index = ctx.index
  css_property = border_target(ctx.css_property, ctx.tokens, ctx.token_index)
  text = ctx.token if css_property != ctx.css_property else ctx.value
  if _other_slots(text, index):
    return BailDecision(DiagnosticType.CSS_BLOCK_MULTIPLE_SLOTS, (prop,))

  param = prop.lstrip("$") or prop
  if text.strip() == make_placeholder(index):
    value_expression = param
    param_type = "number" if css_property in UNITLESS_PROPERTIES else "string"
  else:
    escaped = text.strip().replace("\\", "\\\\").replace("`", "\\`")
    value_expression = "`" + substitute_slot(escaped, index, "${" + param + "}") + "`"
    param_type = "number" if _UNIT_SUFFIX_RE.match(text.strip()) else "string"
  return DynamicFnDecision(
    param_name=param,
    param_type=param_type,
    value_expression=value_expression,
    original_prop_name=prop if prop != param else None,
    css_property=css_property,
  )


@builtin_handler(InterpolationTag.CONDITIONAL)
def handle_conditional(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Decision:
  """conditional -> a variant per branch, guarded by the tested prop."""
  deps = tuple(p for p in classified.path[:1] if p != "theme")
  if classified.is_theme_path:
    reason = DiagnosticType.THEME_BLOCK_CONDITIONAL if ctx.is_block else DiagnosticType.ARROW_CONDITIONAL_BRANCHES
    return BailDecision(reason)
  if ctx.pseudo_element:
    return BailDecision(DiagnosticType.PSEUDO_ELEMENT_DYNAMIC, deps)
  if not ctx.is_block and _other_slots(ctx.value, ctx.index):
    return BailDecision(DiagnosticType.CSS_BLOCK_MULTIPLE_SLOTS, deps)

  (true_name, true_guard), (false_name, false_guard) = _variant_names(classified, ctx)
  branches = [(true_name, true_guard, classified.truthy)]
  if classified.has_falsy_branch:
    branches.append((false_name, false_guard, classified.falsy))

  variants = []
  for name, guard, value in branches:
    styles, problem = _branch_styles(value, ctx)
    if styles is None:
      return BailDecision(problem or DiagnosticType.ARROW_CONDITIONAL_BRANCHES, deps)
    if styles:
      variants.append(VariantBranch(name=name, guard=guard, styles=styles))

  comparison = classified.comparison[1] if classified.comparison else None
  return VariantDecision(prop_name=classified.path[0], comparison_value=comparison, base_value=None, variants=tuple(variants))


@builtin_handler(InterpolationTag.LOGICAL)
def handle_logical(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Decision:
  """logical -> convert when the primary operand is a resolvable theme path, else bail."""
  if classified.is_theme_path and len(classified.path) > 1 and not ctx.is_block:
    try:
      result = env.resolve_value(
        ResolveValueContext(
          kind="theme",
          path=".".join(classified.path[1:]),
          css_property=ctx.css_property or None,
          default_value=None if classified.fallback is None else str(classified.fallback),
          file_path=env.file_path,
        )
      )
    except AdapterContractError:
      result = None
    if result is not None and is_valid_expression(result.expr):
      env.imports.extend(result.imports)
      return ConvertDecision(JsExpr(result.expr))
    return BailDecision(DiagnosticType.ARROW_LOGICAL)
  deps = tuple(p for p in classified.path[:1] if p != "theme")
  return BailDecision(DiagnosticType.ARROW_LOGICAL, deps, inline_expression(classified))


@builtin_handler(InterpolationTag.KEYFRAMES_REF)
def handle_keyframes_ref(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Decision:
  if ctx.is_block:
    return BailDecision(DiagnosticType.UNSUPPORTED_IDENTIFIER)
  return ConvertDecision(JsExpr(classified.keyframes_name))


@builtin_handler(InterpolationTag.HELPER_CALL)
def handle_helper_call(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Decision:
  """
  Mixin spreads become references to the mixin entry; imported helper calls
  are delegated to `resolve_call`.
  """
  if classified.mixin_name:
    if not ctx.is_block:
      return BailDecision(DiagnosticType.UNSUPPORTED_IDENTIFIER)
    if ctx.is_nested:
      return BailDecision(DiagnosticType.IMPORTED_MIXIN_PSEUDO)
    key = env.mixin_keys.get(classified.mixin_name, classified.mixin_name)
    return RewriteDecision(f"{env.styles_identifier}.{key}")

  if not classified.import_source:
    return BailDecision(DiagnosticType.HELPER_IMPORT_SOURCE)
  try:
    result = env.resolve_call(
      CallResolveContext(
        callee_imported_name=classified.imported_name or classified.helper_name or "",
        callee_source=classified.import_source,
        args=list(classified.args),
        css_property=ctx.css_property or None,
        file_path=env.file_path,
      )
    )
  except AdapterContractError:
    return BailDecision(DiagnosticType.ADAPTER_CALL_CONTRACT)
  if result is None:
    return BailDecision(DiagnosticType.UNSUPPORTED_CALL_EXPRESSION)

  if ctx.is_block:
    if result.usage != "props":
      return BailDecision(DiagnosticType.ADAPTER_CALL_CONTRACT)
    if ctx.is_nested:
      if ctx.pseudo_element or not ctx.conditions or ctx.selector != "&":
        return BailDecision(DiagnosticType.ADAPTER_STYLES_UNDER_SELECTOR)
      if not result.css_text:
        return BailDecision(DiagnosticType.ADAPTER_STYLES_PSEUDO_NO_CSS_TEXT)
      styles, problem = _css_block_styles(CssBlock(result.css_text))
      scoped = scope_styles(styles, ctx) if styles is not None else None
      if scoped is None:
        return BailDecision(problem or DiagnosticType.ADAPTER_STYLES_UNDER_SELECTOR)
      env.imports.extend(result.imports)
      return ConvertDecision(scoped)
    if not is_valid_expression(result.expr):
      return BailDecision(DiagnosticType.ADAPTER_CALL_UNPARSEABLE_STYLES)
    env.imports.extend(result.imports)
    return RewriteDecision(result.expr)

  if result.usage != "create":
    return BailDecision(DiagnosticType.ADAPTER_CALL_CONTRACT)
  if not is_valid_expression(result.expr):
    return BailDecision(DiagnosticType.ADAPTER_CALL_UNPARSEABLE_VALUE)
  if ctx.css_property.startswith("border") and not ctx.is_full_value and len(ctx.tokens) < 2:
    return BailDecision(DiagnosticType.ADAPTER_BORDER_HELPER)
  env.imports.extend(result.imports)
  return ConvertDecision(JsExpr(result.expr))


# --- Unclaimed slots ---


@builtin_handler(InterpolationTag.RAW)
def resolve_identifier(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv) -> Optional[Decision]:
  """
  Plain identifiers and member chains that are not props functions.

  Imported values go through `resolve_value(kind="importedValue")`; module
  constants are referenced directly.
  """
  node = unwrap(classified.node)
  if node is None or ctx.is_block:
    return None
  path = member_path(node)
  if not path:
    return None
  name = path[0]
  if name in env.classification.known_styled:
    return BailDecision(DiagnosticType.COMPONENT_AS_MIXIN)
  binding = env.classification.imports.lookup(name)
  if binding is None:
    if len(path) == 1:
      return ConvertDecision(JsExpr(name))
    return BailDecision(DiagnosticType.UNSUPPORTED_MEMBER)
  export = binding.imported if binding.imported not in ("default", "*") else name
  try:
    result = env.resolve_value(
      ResolveValueContext(
        kind="importedValue",
        path=".".join([export] + path[1:]),
        css_property=ctx.css_property or None,
        import_source=binding.source,
        file_path=env.file_path,
      )
    )
  except AdapterContractError:
    return BailDecision(DiagnosticType.ADAPTER_VALUE_UNPARSEABLE)
  if result is None:
    return BailDecision(DiagnosticType.ADAPTER_VALUE_UNDEFINED_IMPORT)
  if not is_valid_expression(result.expr):
    return BailDecision(DiagnosticType.ADAPTER_VALUE_UNPARSEABLE)
  env.imports.extend(result.imports)
  return ConvertDecision(JsExpr(result.expr))


def _raw_reason(classified: ClassifiedInterpolation) -> DiagnosticType:
  node = unwrap(classified.node)
  if node is None:
    return DiagnosticType.UNCLASSIFIED_INTERPOLATION
  shape = arrow_shape(node)
  if shape is not None:
    body = shape.body
    if body is None:
      return DiagnosticType.ARROW_UNRECOGNIZED_BODY
    if body.type == "ternary_expression":
      return DiagnosticType.ARROW_CONDITIONAL_BRANCHES
    if body.type == "call_expression":
      return DiagnosticType.ARROW_HELPER_CALL_BODY
    operator = body.child_by_field_name("operator")
    if body.type == "binary_expression" and operator is not None and node_text(operator) in ("&&", "||", "??"):
      return DiagnosticType.ARROW_LOGICAL
    if body.type == "subscript_expression" and re.search(r"\btheme\b", node_text(body)):
      return DiagnosticType.ARROW_INDEXED_THEME
    if body.type == "member_expression":
      return DiagnosticType.ARROW_THEME_PATH if re.search(r"\btheme\b", node_text(body)) else DiagnosticType.UNSUPPORTED_MEMBER
    return DiagnosticType.ARROW_UNRECOGNIZED_BODY
  parts = call_parts(node)
  if parts is not None:
    callee = unwrap(parts[0])
    if callee is None or callee.type not in ("identifier", "member_expression", "call_expression"):
      return DiagnosticType.UNSUPPORTED_CALLEE
    return DiagnosticType.UNSUPPORTED_CALL
  if node.type == "identifier":
    return DiagnosticType.UNSUPPORTED_IDENTIFIER
  if node.type in ("member_expression", "subscript_expression"):
    return DiagnosticType.UNSUPPORTED_MEMBER
  if node.type in ("function_expression", "function"):
    return DiagnosticType.UNSUPPORTED_ARROW
  if node.type == "call_expression":
    return DiagnosticType.UNSUPPORTED_CALL_EXPRESSION
  return DiagnosticType.UNSUPPORTED_UNKNOWN


def raw_bail(classified: ClassifiedInterpolation, ctx: DynamicNodeContext, env: HandlerEnv, infer_props: bool = True) -> BailDecision:
  """
  Bail for an unclaimed slot.

  With `infer_props`, the prop names read by the source text are scraped by
  regex so the wrapper can still apply the value as an inline style.
  """
  reason = _raw_reason(classified)
  if not infer_props:
    return BailDecision(reason)
  shape = arrow_shape(classified.node) if classified.node is not None else None
  deps = _props_dependencies(
    classified.source,
    shape.param_name if shape else None,
    shape.destructured if shape else (),
  )
  return BailDecision(reason, deps, inline_expression(classified) if deps else None)
