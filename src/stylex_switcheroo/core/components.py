"""
Component Builder.

Runs the per-declaration half of the pipeline: parse the style template,
convert it to a canonical object while resolving every interpolation slot
through the classifier and the Decision Engine, then record what each
decision implies on the component's `StyleInfo` (variants, style functions,
mixin references, inline-style escape hatches).

Keyframes and css`` mixins go through the same machinery but must resolve to
plain objects.
"""

import re
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node

from stylex_switcheroo.core.classifier import ClassificationContext, ClassifiedInterpolation, classify
from stylex_switcheroo.core.css.nodes import ParsedTemplate, find_placeholders, make_placeholder
from stylex_switcheroo.core.css.parser import parse_style_template, split_top_level
from stylex_switcheroo.core.decisions.adapter import ResolveValueContext
from stylex_switcheroo.core.decisions.engine import DecisionEngine
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
from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.errors import AdapterContractError, HostParseError
from stylex_switcheroo.core.host.expressions import arrow_shape, literal_value, object_entries, unwrap
from stylex_switcheroo.core.host.parser import node_text, parse_expression
from stylex_switcheroo.core.host.scanner import HelperDeclaration, StyledDeclaration, TemplateParts
from stylex_switcheroo.core.lowering.passes.base import raw_selectors
from stylex_switcheroo.core.lowering.style_info import DynamicFnEntry, InlineStyleProp, StyleInfo
from stylex_switcheroo.core.naming import style_key, upper_first
from stylex_switcheroo.core.styles.converter import (
  ConversionContext,
  SlotRequest,
  SlotResolution,
  StyleModelConverter,
  deep_merge,
)
from stylex_switcheroo.core.styles.values import DEFAULT_KEY, StyleObject, is_conditional_map
from stylex_switcheroo.core.tracer import get_tracer

_INCLUDES_RE = r"!\s*\[(?P<items>[^\]]*)\]\s*\.includes\(\s*{param}\s*\)"
_NOT_EQUAL_RE = r"{param}\s*!==?\s*(?P<q>['\"])(?P<name>[^'\"]+)(?P=q)"
_STRING_RE = re.compile(r"(['\"])([^'\"]+)\1")
_DEFAULT_FORWARDING_RE = re.compile(r"isPropValid|defaultValidatorFn|startsWith\(\s*['\"]\$['\"]\s*\)")
_TRANSIENT_PROP_RE = re.compile(r"(?<![\w$])\$[A-Za-z_][\w$]*")


def fill_variant_defaults(info: StyleInfo) -> None:
  """
  Gives conditional variant values the component's base value as default.

  A variant applied after the base would otherwise reset the property to
  `null` outside its condition.
  """
  for variant in info.variants:
    _fill_defaults(variant.styles, info.styles)


def _fill_defaults(styles: StyleObject, base: StyleObject) -> None:
  for prop, value in styles.items():
    if not is_conditional_map(value) or value.get(DEFAULT_KEY) is not None:
      continue
    base_entry = base.get(prop)
    if is_conditional_map(base_entry):
      base_entry = base_entry.get(DEFAULT_KEY)
    if base_entry is not None and not isinstance(base_entry, dict):
      value[DEFAULT_KEY] = base_entry


def forward_filter(node: Node) -> Optional[Tuple[str, ...]]:
  """
  Reads the prop names a `shouldForwardProp` function filters out.

  Recognises `!["a", "b"].includes(prop)` and `prop !== "a"` tests, plus
  the default-validator idioms (which filter no concrete names).

  Returns:
      Optional[Tuple[str, ...]]: The names, or None for an unrecognised test.
  """
  shape = arrow_shape(node)
  if shape is None or shape.body is None or not shape.param_name:
    return None
  body = node_text(shape.body)
  param = re.escape(shape.param_name)
  names: List[str] = []
  for match in re.finditer(_INCLUDES_RE.format(param=param), body):
    names.extend(m.group(2) for m in _STRING_RE.finditer(match.group("items")))
  for match in re.finditer(_NOT_EQUAL_RE.format(param=param), body):
    names.append(match.group("name"))
  if not names and not _DEFAULT_FORWARDING_RE.search(body):
    return None
  return tuple(dict.fromkeys(names))


def transient_props(decl: StyledDeclaration) -> List[str]:
  """`$props` named in the interpolations, the props type or `.attrs()`."""
  texts = [node_text(e) for e in decl.template.expressions]
  if decl.type_arguments:
    texts.append(decl.type_arguments)
  if decl.attrs_node is not None:
    texts.append(node_text(decl.attrs_node))
  return list(dict.fromkeys(m.group(0) for text in texts for m in _TRANSIENT_PROP_RE.finditer(text)))


class ComponentBuilder:
  """
  Builds `StyleInfo` objects (and helper style objects) for one file.
  """

  def __init__(
    self,
    engine: DecisionEngine,
    diagnostics: DiagnosticSink,
    constants: Optional[Dict[str, str]] = None,
    file_path: str = "",
  ) -> None:
    """
    Args:
        engine (DecisionEngine): Decides every interpolation slot.
        diagnostics (DiagnosticSink): Sink for this file.
        constants (Optional[Dict[str, str]]): Module-level string constants.
        file_path (str): Host file.
    """
    self.engine = engine
    self.diagnostics = diagnostics
    self.constants = constants or {}
    self.file_path = file_path

  @property
  def classification(self) -> ClassificationContext:
    return self.engine.env.classification

  # --- Styled components ---

  def build(self, decl: StyledDeclaration) -> Optional[StyleInfo]:
    """
    Converts one styled declaration.

    Args:
        decl (StyledDeclaration): The scanned declaration.

    Returns:
        Optional[StyleInfo]: None when the template is not well-formed CSS;
        the declaration is then left untouched.
    """
    info = StyleInfo(
      name=decl.name,
      style_key=style_key(decl.name),
      base=decl.base,
      base_is_intrinsic=decl.base_is_intrinsic,
      location=decl.location,
      is_exported=decl.is_exported,
      type_arguments=decl.type_arguments,
    )
    styles = self._convert_template(info, decl.template)
    if styles is None:
      return None
    info.styles = styles
    fill_variant_defaults(info)
    if decl.attrs_node is not None:
      self._read_attrs(info, decl.attrs_node)
    if decl.config_node is not None:
      self._read_config(info, decl.config_node)
    info.transient_props = transient_props(decl)
    return info

  def _convert_template(self, info: StyleInfo, template: TemplateParts) -> Optional[StyleObject]:
    parsed = parse_style_template(template.segments, template.expressions)
    if parsed is None:
      self.diagnostics.report(
        DiagnosticType.FAILED_TO_PARSE_EXPRESSION, location=info.location, component=info.name
      )
      return None
    for index in parsed.unplaced(len(template.expressions)):
      self.diagnostics.report(
        DiagnosticType.UNCLASSIFIED_INTERPOLATION,
        location=info.location,
        component=info.name,
        expression=node_text(template.expressions[index]),
      )
    context = ConversionContext(
      resolve_slot=lambda request: self.resolve_slot(info, parsed, request),
      resolve_selector=lambda index: self.resolve_selector(info, parsed, index),
      diagnostics=self.diagnostics,
      location=info.location,
    )
    styles = StyleModelConverter(context).convert(parsed.root)
    info.important_properties.extend(context.important_properties)
    for prop in context.important_properties:
      get_tracer().log_inspection(f"{info.name}.{prop}", "stripped", "!important")
    return styles

  # --- Slot resolution ---

  def resolve_slot(self, info: StyleInfo, parsed: ParsedTemplate, request: SlotRequest) -> SlotResolution:
    location = parsed.location(request.index)
    if location is None:
      return SlotResolution.omit()
    classified = classify(location, self.classification)
    ctx = DynamicNodeContext(
      component=info.name,
      style_key=info.style_key,
      index=request.index,
      css_property=request.css_property,
      value=request.value,
      token=request.token,
      tokens=request.tokens,
      token_index=request.token_index,
      is_full_value=request.is_full_value,
      conditions=request.conditions,
      pseudo_element=request.pseudo_element,
      selector=request.selector,
      file_path=self.file_path,
      location=info.location,
    )
    decision = self.engine.decide(classified, ctx)
    return self.apply_decision(decision, classified, ctx, info)

  def apply_decision(
    self,
    decision: Decision,
    classified: ClassifiedInterpolation,
    ctx: DynamicNodeContext,
    info: StyleInfo,
  ) -> SlotResolution:
    """
    Records a decision on `info` and tells the converter what to splice.

    Args:
        decision (Decision): The engine's answer.
        classified (ClassifiedInterpolation): The slot's classification.
        ctx (DynamicNodeContext): Where the slot sits.
        info (StyleInfo): The owning component.

    Returns:
        SlotResolution: Value, block styles, or omission.
    """
    if isinstance(decision, ConvertDecision):
      if ctx.is_block:
        if isinstance(decision.value, dict):
          return SlotResolution(styles=decision.value)
        self._report(DiagnosticType.CSS_BLOCK_MISSING_PROPERTY, info, ctx, classified)
        return SlotResolution.omit()
      return SlotResolution(value=decision.value)

    if isinstance(decision, RewriteDecision):
      if decision.code not in info.mixin_refs:
        info.mixin_refs.append(decision.code)
      return SlotResolution.omit()

    if isinstance(decision, VariantDecision):
      for branch in decision.variants:
        self._add_variant(info, branch)
      info.add_prop_dependency(decision.prop_name)
      if decision.base_value is not None:
        return SlotResolution(value=decision.base_value)
      return SlotResolution.omit()

    if isinstance(decision, DynamicFnDecision):
      prop_name = decision.original_prop_name or decision.param_name
      info.dynamic_fns.append(
        DynamicFnEntry(
          key=info.style_key + upper_first(decision.param_name),
          param_name=decision.param_name,
          param_type=decision.param_type,
          css_property=decision.css_property or ctx.css_property,
          value_expression=decision.value_expression,
          prop_name=prop_name,
          conditions=ctx.conditions,
          pseudo_element=ctx.pseudo_element,
          fallback_value=decision.fallback_value,
        )
      )
      info.add_prop_dependency(prop_name)
      return SlotResolution.omit()

    self._apply_bail(decision, classified, ctx, info)
    return SlotResolution.omit()

  def _add_variant(self, info: StyleInfo, branch: VariantBranch) -> None:
    for existing in info.variants:
      if existing.name == branch.name:
        deep_merge(existing.styles, branch.styles)
        return
    info.variants.append(VariantBranch(name=branch.name, guard=branch.guard, styles=dict(branch.styles)))

  def _apply_bail(
    self,
    decision: BailDecision,
    classified: ClassifiedInterpolation,
    ctx: DynamicNodeContext,
    info: StyleInfo,
  ) -> None:
    self._report(decision.reason, info, ctx, classified)
    deps = decision.prop_dependencies
    if not deps or ctx.is_block or ctx.is_nested:
      return
    expression = decision.inline_expression
    if expression is None:
      kind = DiagnosticType.INLINE_STYLE_THEME if "theme" in classified.source else DiagnosticType.INLINE_STYLE_UNSAFE
      self._report(kind, info, ctx, classified)
      return
    if not ctx.is_full_value:
      text = ctx.value.strip()
      if any(i != ctx.index for i in find_placeholders(text)):
        self._report(DiagnosticType.INLINE_STYLE_UNSAFE, info, ctx, classified)
        return
      escaped = text.replace("\\", "\\\\").replace("`", "\\`")
      expression = "`" + escaped.replace(make_placeholder(ctx.index), "${" + expression + "}") + "`"
    info.inline_styles.append(InlineStyleProp(css_property=ctx.css_property, expression=expression, props=deps))
    info.add_prop_dependency(*deps)

  def _report(
    self,
    kind: DiagnosticType,
    info: StyleInfo,
    ctx: DynamicNodeContext,
    classified: ClassifiedInterpolation,
  ) -> None:
    self.diagnostics.report(
      kind,
      location=info.location,
      component=info.name,
      property=ctx.css_property or None,
      expression=classified.source,
    )

  # --- Selector placeholders ---

  def resolve_selector(self, info: StyleInfo, parsed: ParsedTemplate, index: int) -> Optional[str]:
    """
    Text substituted for a placeholder inside a selector or at-rule prelude.

    Component references become `${Name}` for the lowering passes; string
    constants and adapter-resolved imported strings are inlined. Anything
    else drops the enclosing block with a diagnostic.
    """
    location = parsed.location(index)
    if location is None:
      return None
    node = unwrap(location.expression)
    name = node_text(node) if node is not None and node.type == "identifier" else None
    binding = self.classification.imports.lookup(name) if name else None
    in_at_rule = location.context.selector.lstrip().startswith("@")

    if name and not in_at_rule:
      if name in self.classification.known_styled or (binding is not None and name[:1].isupper()):
        return "${" + name + "}"

    ok, value = literal_value(node)
    if ok and isinstance(value, str):
      return value
    if name and name in self.constants:
      return self.constants[name]
    if binding is not None:
      resolved = self._imported_string(binding.imported if binding.imported not in ("default", "*") else name, binding.source)
      if resolved is not None:
        return resolved
      self._report_selector(DiagnosticType.SELECTOR_IMPORTED_VALUE, info, location.context.selector)
      return None
    self._report_selector(DiagnosticType.SELECTOR_INTERPOLATED_PSEUDO, info, location.context.selector)
    return None

  def _imported_string(self, export: str, source: str) -> Optional[str]:
    env = self.engine.env
    try:
      result = env.resolve_value(
        ResolveValueContext(kind="importedValue", path=export, import_source=source, file_path=self.file_path)
      )
    except AdapterContractError:
      return None
    if result is None:
      return None
    try:
      node = parse_expression(result.expr)
    except HostParseError:
      return None
    ok, value = literal_value(node)
    return value if ok and isinstance(value, str) else None

  def _report_selector(self, kind: DiagnosticType, info: StyleInfo, selector: str) -> None:
    self.diagnostics.report(kind, location=info.location, component=info.name, selector=selector)

  # --- attrs / withConfig ---

  def _read_attrs(self, info: StyleInfo, node: Node) -> None:
    target = unwrap(node)
    shape = arrow_shape(target)
    body = shape.body if shape is not None else target
    entries = object_entries(body)
    if entries is None:
      self.diagnostics.report(
        DiagnosticType.UNSUPPORTED_ARROW if shape else DiagnosticType.UNSUPPORTED_UNKNOWN,
        location=info.location,
        component=info.name,
        expression=node_text(target),
      )
      return
    param = shape.param_name if shape is not None else None
    for key, value in entries:
      text = node_text(value)
      if param and re.search(rf"(?<![\w$.]){re.escape(param)}(?![\w$])", text):
        self.diagnostics.report(
          DiagnosticType.UNSUPPORTED_ARROW, location=info.location, component=info.name, expression=text
        )
        continue
      info.static_attrs[key] = text

  def _read_config(self, info: StyleInfo, node: Node) -> None:
    entries = dict(object_entries(node) or [])
    predicate = entries.get("shouldForwardProp")
    if predicate is None:
      return
    info.has_should_forward_prop = True
    names = forward_filter(predicate)
    if names is None:
      self.diagnostics.report(
        DiagnosticType.SHOULD_FORWARD_PROP_TEST,
        location=info.location,
        component=info.name,
        expression=node_text(predicate),
      )
      return
    info.forward_filter = list(names)

  # --- Helpers (keyframes and css mixins) ---

  def _scratch(self, decl: HelperDeclaration) -> StyleInfo:
    return StyleInfo(name=decl.name, style_key=style_key(decl.name), base="", location=decl.location)

  def build_keyframes(self, decl: HelperDeclaration) -> Optional[StyleObject]:
    """
    Converts a `keyframes` template to `{"from": {...}, "50%": {...}}`.
    """
    scratch = self._scratch(decl)
    parsed = parse_style_template(decl.template.segments, decl.template.expressions)
    if parsed is None:
      self.diagnostics.report(DiagnosticType.FAILED_TO_PARSE_EXPRESSION, location=decl.location, component=decl.name)
      return None
    frames: StyleObject = {}
    for rule in parsed.root.nested_rules:
      context = ConversionContext(
        resolve_slot=lambda request: self.resolve_slot(scratch, parsed, request),
        diagnostics=self.diagnostics,
        location=decl.location,
      )
      body = StyleModelConverter(context).convert(rule)
      for offset in split_top_level(rule.selector, ","):
        deep_merge(frames.setdefault(offset.strip(), {}), dict(body))
    if not self._is_plain(scratch, decl):
      return None
    return frames

  def build_mixin(self, decl: HelperDeclaration) -> Optional[StyleObject]:
    """
    Converts a css`` mixin to a registry entry.

    Mixins with dynamic parts or selectors other than pseudo-classes and
    media queries cannot become a static entry.
    """
    scratch = self._scratch(decl)
    styles = self._convert_template(scratch, decl.template)
    if styles is None:
      return None
    for selector, _ in raw_selectors(styles):
      self.diagnostics.report(
        DiagnosticType.COMPLEX_SELECTOR, location=decl.location, component=decl.name, selector=selector
      )
      styles.pop(selector, None)
    if not self._is_plain(scratch, decl):
      return None
    return styles

  def _is_plain(self, scratch: StyleInfo, decl: HelperDeclaration) -> bool:
    if scratch.variants or scratch.dynamic_fns or scratch.mixin_refs or scratch.inline_styles:
      self.diagnostics.report(DiagnosticType.MIXIN_NOT_PLAIN_OBJECT, location=decl.location, component=decl.name)
      return False
    return True

