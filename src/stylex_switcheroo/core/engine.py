"""
Orchestration Engine.

`TransformEngine.run` migrates one module and is the only public entry point
of the core. The pipeline:

1.  **Ingestion**: parse the TSX source with tree-sitter, read the import
    table and find the `styled-components` bindings. Modules without them
    short-circuit with `code=None`.
2.  **Scan**: collect styled, keyframes and css`` declarations, then run the
    structural unsupported-pattern checks (once per file).
3.  **Conversion**: keyframes and mixins first (components may reference
    them), then every styled declaration through the parser, converter,
    classifier and Decision Engine.
4.  **Lowering**: the six selector passes over the component arena.
5.  **Aggregation**: one ordered `stylex.create` registry.
6.  **Emission**: wrapper planning, declaration replacement, call-site
    rewrites, import updates; all as byte-range edits over the original text.

Errors are contained at the narrowest scope (template, component, adapter
call); nothing escapes `run`.
"""

from pathlib import Path
from typing import Dict, List, Optional, Set

from tree_sitter import Node

from stylex_switcheroo.config import RuntimeConfig, StyleMergerConfig
from stylex_switcheroo.core.aggregator import StyleRegistry, aggregate
from stylex_switcheroo.core.classifier import ClassificationContext
from stylex_switcheroo.core.components import ComponentBuilder
from stylex_switcheroo.core.conversion_result import ConversionResult
from stylex_switcheroo.core.decisions.adapter import Adapter, ImportSink, load_adapter
from stylex_switcheroo.core.decisions.engine import DecisionEngine
from stylex_switcheroo.core.decisions.handlers import HandlerEnv
from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.emit import (
  CallSiteRewriter,
  ComponentPlan,
  ImportRewriter,
  RegistryEmitter,
  UsageFacts,
  WrapperEmitter,
  WrapperPlanner,
  style_receivers,
)
from stylex_switcheroo.core.errors import EditConflictError, SwitcherooError, WrapperSynthesisError
from stylex_switcheroo.core.host.edits import TextEdit, apply_edits, delete, insert, replace, statement_range
from stylex_switcheroo.core.host.imports import (
  STYLED_COMPONENTS_SOURCE,
  ImportTable,
  collect_imports,
  styled_components_locals,
)
from stylex_switcheroo.core.host.jsx import collect_usages, value_references
from stylex_switcheroo.core.host.parser import HostTree, parse_source
from stylex_switcheroo.core.host.scanner import ScanResult, scan_module, string_constants
from stylex_switcheroo.core.lowering import ComponentArena, lower_components
from stylex_switcheroo.core.naming import style_key
from stylex_switcheroo.core.prepass import JsonUsageProvider, UsageProvider
from stylex_switcheroo.core.styles.values import StyleObject
from stylex_switcheroo.core.tracer import get_tracer, reset_tracer
from stylex_switcheroo.core.unsupported import scan_unsupported
from stylex_switcheroo.enums import RenderMode, Severity
from stylex_switcheroo.utils.console import get_logger

log = get_logger("engine")

STYLEX_NAMESPACE = "stylex"


class TransformEngine:
  """
  Migrates single modules from styled-components to StyleX.
  """

  def __init__(
    self,
    config: Optional[RuntimeConfig] = None,
    adapter: Optional[Adapter] = None,
    usage_provider: Optional[UsageProvider] = None,
  ) -> None:
    """
    Initializes the engine.

    The adapter and the usage provider are loaded from the paths in `config`
    when not given directly.

    Args:
        config (Optional[RuntimeConfig]): Settings; defaults are used if None.
        adapter (Optional[Adapter]): Project adapter.
        usage_provider (Optional[UsageProvider]): Cross-file usage summaries.

    Raises:
        AdapterContractError: If `config.adapter_path` cannot be loaded.
        PrepassLoadError: If `config.prepass_path` cannot be read.
    """
    self.config = config or RuntimeConfig()
    if adapter is None and self.config.adapter_path:
      adapter = load_adapter(self.config.adapter_path)
    self.adapter = adapter or Adapter()
    if usage_provider is None and self.config.prepass_path:
      usage_provider = JsonUsageProvider.load(self.config.prepass_path)
    self.usage_provider = usage_provider

  @property
  def style_merger(self) -> Optional[StyleMergerConfig]:
    return self.config.style_merger or getattr(self.adapter, "style_merger", None)

  def run(self, code: str, file_path: str = "input.tsx") -> ConversionResult:
    """
    Executes the full pipeline for one module.

    Args:
        code (str): Module source.
        file_path (str): Module path (diagnostics, import resolution, prepass keys).

    Returns:
        ConversionResult: Rewritten code (or None when nothing applied) and diagnostics.
    """
    tracer = reset_tracer()
    diagnostics = DiagnosticSink()
    tracer.start_phase("Transform", file_path)
    try:
      result = self._run(code, file_path, diagnostics)
    except SwitcherooError as e:
      log.error("Conversion of %s aborted: %s", file_path, e)
      diagnostics.report(DiagnosticType.FAILED_TO_PARSE_EXPRESSION, severity=Severity.ERROR, detail=str(e))
      result = ConversionResult(code=None, success=False)
    tracer.end_phase()
    result.diagnostics = diagnostics.items
    result.trace_events = tracer.export()
    return result

  # --- Pipeline ---

  def _run(self, code: str, file_path: str, diagnostics: DiagnosticSink) -> ConversionResult:
    tracer = get_tracer()
    host = parse_source(code, file_path)
    if host.has_errors:
      diagnostics.report(DiagnosticType.FAILED_TO_PARSE_EXPRESSION, severity=Severity.ERROR, file=file_path)
      return ConversionResult(code=None, success=False)

    table = collect_imports(host)
    sc_locals = styled_components_locals(table)
    if not sc_locals:
      return ConversionResult(code=None)

    scan = scan_module(host, sc_locals)
    findings = scan_unsupported(host, scan, sc_locals, diagnostics)
    if scan.is_empty:
      return ConversionResult(code=code if findings.found else None)
    if self.config.strict_mode and findings.found:
      log.info("Strict mode: leaving %s untouched", file_path)
      return ConversionResult(code=None, skipped_components=[d.name for d in scan.styled])

    classification = ClassificationContext(
      known_styled=frozenset(d.name for d in scan.styled),
      known_keyframes=frozenset(d.name for d in scan.keyframes),
      known_mixins=frozenset(d.name for d in scan.mixins),
      imports=table,
      css_local=sc_locals.get("css"),
    )
    env = HandlerEnv(
      adapter=self.adapter,
      imports=ImportSink(),
      classification=classification,
      styles_identifier=self.config.styles_identifier,
      mixin_keys=mixin_keys(scan),
      file_path=file_path,
    )
    builder = ComponentBuilder(
      DecisionEngine(env, fallback=self.config.fallback_behavior),
      diagnostics,
      constants=string_constants(host),
      file_path=file_path,
    )

    tracer.start_phase("Helpers", "keyframes and css mixins")
    keyframes: Dict[str, StyleObject] = {}
    for decl in scan.keyframes:
      frames = builder.build_keyframes(decl)
      if frames is not None:
        keyframes[decl.name] = frames
    mixins: Dict[str, StyleObject] = {}
    for decl in scan.mixins:
      styles = builder.build_mixin(decl)
      if styles is None:
        env.mixin_keys.pop(decl.name, None)
      else:
        mixins[env.mixin_keys[decl.name]] = styles
    tracer.end_phase()

    tracer.start_phase("Conversion", "styled declarations")
    arena = ComponentArena()
    skipped: List[str] = []
    for decl in scan.styled:
      if decl.name in findings.skipped:
        skipped.append(decl.name)
        continue
      info = builder.build(decl)
      if info is None:
        skipped.append(decl.name)
        continue
      arena.add(info)
    tracer.end_phase()

    imported_components = {
      b.local
      for b in table.by_local.values()
      if b.source != STYLED_COMPONENTS_SOURCE and b.local[:1].isupper() and not b.is_type_only
    }
    lower_components(arena, diagnostics, self.config.relation_markers, imported_components)

    tracer.start_phase("Aggregation", "stylex.create registry")
    registry = aggregate(arena, mixins, keyframes)
    tracer.end_phase()

    emitter = _Emission(self, host, table, scan, sc_locals, arena, env, file_path, diagnostics)
    output = emitter.emit(registry, keyframes)
    skipped.extend(emitter.failed)
    converted = [name for name in arena.names if name not in emitter.failed]
    return ConversionResult(
      code=output,
      converted_components=converted,
      skipped_components=skipped,
      style_keys=list(registry.entries),
    )


def mixin_keys(scan: ScanResult) -> Dict[str, str]:
  """
  Registry keys of css`` mixins, suffixed with `Mixin` when a component
  already owns the plain key.
  """
  taken = {style_key(d.name) for d in scan.styled}
  keys: Dict[str, str] = {}
  for decl in scan.mixins:
    key = style_key(decl.name)
    if key in taken:
      key += "Mixin"
    keys[decl.name] = key
  return keys


def declared_type_names(host: HostTree) -> Set[str]:
  names: Set[str] = set()
  for stmt in host.root.named_children:
    node = stmt.child_by_field_name("declaration") if stmt.type == "export_statement" else stmt
    if node is not None and node.type in ("type_alias_declaration", "interface_declaration"):
      name = node.child_by_field_name("name")
      if name is not None:
        names.add(host.text(name))
  return names


class _Emission:
  """
  Output stage of one run: turns plans and the registry into text edits.
  """

  def __init__(
    self,
    engine: TransformEngine,
    host: HostTree,
    table: ImportTable,
    scan: ScanResult,
    sc_locals: Dict[str, str],
    arena: ComponentArena,
    env: HandlerEnv,
    file_path: str,
    diagnostics: DiagnosticSink,
  ) -> None:
    self.engine = engine
    self.config = engine.config
    self.host = host
    self.table = table
    self.scan = scan
    self.sc_locals = sc_locals
    self.arena = arena
    self.env = env
    self.file_path = file_path
    self.diagnostics = diagnostics
    self.failed: List[str] = []
    self.edits: List[TextEdit] = []
    self.removed: List[Node] = []

  def remove_statement(self, statement: Node) -> None:
    start, end = statement_range(self.host.source_bytes, statement.start_byte, statement.end_byte)
    self.edits.append(delete(start, end))
    self.removed.append(statement)

  def replace_statement(self, statement: Node, text: str) -> None:
    self.edits.append(replace(statement.start_byte, statement.end_byte, text))
    self.removed.append(statement)

  def plan(self) -> Dict[str, ComponentPlan]:
    statements = [d.statement for d in self.scan.styled if d.name in self.arena]
    usages = collect_usages(self.host, self.arena.names)
    facts = UsageFacts.from_usages(usages, value_references(self.host, self.arena.names, skip=statements))
    facts.style_receivers = style_receivers(self.arena, usages)
    planner = WrapperPlanner(
      self.arena,
      facts,
      usage_provider=self.engine.usage_provider,
      file_path=self.file_path,
      styles_identifier=self.config.styles_identifier,
      stylex_namespace=STYLEX_NAMESPACE,
    )
    self.usages = usages
    return planner.plan()

  def emit_components(self, plans: Dict[str, ComponentPlan], wrappers: WrapperEmitter) -> Dict[str, ComponentPlan]:
    tracer = get_tracer()
    tracer.start_phase("Wrappers", "declaration replacement")
    declarations = self.scan.styled_by_name
    emitted: Dict[str, ComponentPlan] = {}
    for name, plan in plans.items():
      statement = declarations[name].statement
      if plan.render_mode == RenderMode.INLINE:
        self.remove_statement(statement)
        emitted[name] = plan
        continue
      try:
        text = wrappers.emit(plan)
      except WrapperSynthesisError as e:
        log.warning("%s", e)
        self.diagnostics.report(
          DiagnosticType.FAILED_TO_PARSE_EXPRESSION, location=plan.info.location, component=name
        )
        self.failed.append(name)
        continue
      self.replace_statement(statement, text)
      emitted[name] = plan
    tracer.end_phase()
    return emitted

  def emit_helpers(self, keyframes: Dict[str, StyleObject], registry_emitter: RegistryEmitter) -> None:
    for decl in self.scan.keyframes:
      if decl.name not in keyframes:
        continue
      text = registry_emitter.emit_keyframes(decl.name, keyframes[decl.name])
      self.replace_statement(decl.statement, ("export " if decl.is_exported else "") + text)
    for decl in self.scan.mixins:
      if decl.name in self.env.mixin_keys and not decl.is_exported:
        self.remove_statement(decl.statement)

  def emit(self, registry: StyleRegistry, keyframes: Dict[str, StyleObject]) -> str:
    registry_emitter = RegistryEmitter(STYLEX_NAMESPACE, self.config.styles_identifier, self.host.is_typescript)
    wrappers = WrapperEmitter(
      stylex_namespace=STYLEX_NAMESPACE,
      typescript=self.host.is_typescript,
      style_merger=self.engine.style_merger,
      reserved_names=declared_type_names(self.host),
    )

    plans = self.emit_components(self.plan(), wrappers)
    self.emit_helpers(keyframes, registry_emitter)

    get_tracer().start_phase("Call sites", "JSX rewrites")
    rewriter = CallSiteRewriter(plans, self.usages, STYLEX_NAMESPACE, self.config.styles_identifier)
    self.edits.extend(rewriter.rewrite())
    get_tracer().end_phase()

    registry_text = registry_emitter.emit(registry)
    if registry_text:
      source = self.host.source
      lead = "\n" if source.endswith("\n") else "\n\n"
      self.edits.append(insert(len(self.host.source_bytes), lead + registry_text + "\n", priority=10))

    needs_stylex = bool(registry_text or keyframes or wrappers.uses_stylex or rewriter.uses_stylex)
    self.edits.extend(self.import_edits(needs_stylex, wrappers))
    try:
      return apply_edits(self.host.source_bytes, self.edits)
    except ValueError as e:
      raise EditConflictError(str(e)) from e

  def import_edits(self, needs_stylex: bool, wrappers: WrapperEmitter) -> List[TextEdit]:
    imports = ImportRewriter(self.host, self.table, self.file_path)
    if needs_stylex:
      imports.require_namespace(self.config.stylex_import, STYLEX_NAMESPACE)
    if wrappers.uses_react_types and self.table.lookup("React") is None:
      imports.require_namespace("react", "React")
    merger = self.engine.style_merger
    if merger is not None and wrappers.uses_style_merger:
      imports.require_named(merger.import_source, merger.function_name)
    imports.require_all(self.env.imports.specs())

    skip = list(self.removed) + [s.node for s in self.table.statements]
    keep = value_references(self.host, self.sc_locals.values(), skip=skip)
    return imports.edits(keep)


def convert_file(path: Path, engine: Optional[TransformEngine] = None) -> ConversionResult:
  """Reads and converts one file (the file itself is not written)."""
  engine = engine or TransformEngine()
  return engine.run(Path(path).read_text(encoding="utf-8"), str(path))
