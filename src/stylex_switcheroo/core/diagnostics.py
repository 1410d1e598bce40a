"""
Diagnostics Model and Sink.

Every problem the pipeline encounters is reported as a `Diagnostic` whose
`type` is drawn from the closed `DiagnosticType` enumeration. The enum values
are the exact human-readable messages, so fixtures can assert on them verbatim.

The `DiagnosticSink` is an ordered, append-only collection scoped to one file.
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from stylex_switcheroo.enums import DiagnosticCategory, Severity


class DiagnosticType(str, Enum):
  """
  Closed set of diagnostic kinds.
  """

  # --- Adapter contract ---
  ADAPTER_CALL_UNPARSEABLE_STYLES = "Adapter resolveCall returned an unparseable styles expression"
  ADAPTER_CALL_UNPARSEABLE_VALUE = "Adapter resolveCall returned an unparseable value expression"
  ADAPTER_VALUE_UNPARSEABLE = "Adapter resolveValue returned an unparseable value expression"
  ADAPTER_VALUE_UNDEFINED_IMPORT = "Adapter resolveValue returned undefined for imported value"
  ADAPTER_STYLES_UNDER_SELECTOR = "Adapter resolved StyleX styles cannot be applied under nested selectors/at-rules"
  ADAPTER_STYLES_PSEUDO_NO_CSS_TEXT = (
    "Adapter resolved StyleX styles inside pseudo selector but did not provide cssText for property expansion"
    " — add cssText to resolveCall result to enable pseudo-wrapping"
  )
  ADAPTER_CALL_CONTRACT = "Adapter.resolveCall must return { usage: 'props' | 'create', expr, imports }"
  ADAPTER_BORDER_HELPER = "Adapter helper call in border interpolation did not resolve to a single CSS value"

  # --- Arrow function interpolations ---
  ARROW_UNRECOGNIZED_BODY = (
    "Arrow function: body is not a recognized pattern (expected ternary, logical, call, or member expression)"
  )
  ARROW_CONDITIONAL_BRANCHES = "Arrow function: conditional branches could not be resolved to static or theme values"
  ARROW_HELPER_CALL_BODY = "Arrow function: helper call body is not supported"
  ARROW_INDEXED_THEME = "Arrow function: indexed theme lookup pattern not matched"
  ARROW_LOGICAL = "Arrow function: logical expression pattern not supported"
  ARROW_THEME_PATH = "Arrow function: theme access path could not be resolved"

  # --- Selectors ---
  COMPLEX_SELECTOR = (
    "Complex selectors (grouped selectors, descendant element selectors, class-conditioned selectors, "
    "or :not() chains) are not currently supported"
  )
  COMPONENT_SELECTOR = (
    "Component selectors like `${OtherComponent}:hover &` are not directly representable in StyleX. "
    "Manual refactor is required"
  )
  SPECIFICITY_HACK = "Styled-components specificity hacks like `&&` / `&&&` are not representable in StyleX"
  UNIVERSAL_SELECTOR = "Universal selectors (`*`) are currently unsupported"
  SELECTOR_IMPORTED_VALUE = "Unsupported selector interpolation: imported value in selector position"
  SELECTOR_ATTRIBUTE_ELEMENT = "Unsupported selector: attribute selector on unsupported element"
  SELECTOR_CLASS = "Unsupported selector: class selector"
  SELECTOR_COMMA = "Unsupported selector: comma-separated selectors must all be simple pseudos"
  SELECTOR_DESCENDANT_PSEUDO = "Unsupported selector: descendant pseudo selector (space before pseudo)"
  SELECTOR_COMBINATOR = "Unsupported selector: descendant/child/sibling selector"
  SELECTOR_INTERPOLATED_PSEUDO = "Unsupported selector: interpolated pseudo selector"
  SELECTOR_SIBLING = "Unsupported selector: sibling combinator"
  SELECTOR_UNKNOWN_COMPONENT = "Unsupported selector: unknown component selector"

  # --- Conditional css blocks ---
  CSS_BLOCK_IMPORTANT = "Conditional `css` block: !important is not supported in StyleX"
  CSS_BLOCK_AT_RULE = "Conditional `css` block: @-rules (e.g., @media, @supports) are not supported"
  CSS_BLOCK_PARSE = "Conditional `css` block: failed to parse expression"
  CSS_BLOCK_MISSING_PROPERTY = "Conditional `css` block: missing CSS property name"
  CSS_BLOCK_MISSING_EXPRESSION = "Conditional `css` block: missing interpolation expression"
  CSS_BLOCK_MIXED_VALUES = (
    "Conditional `css` block: mixed static/dynamic values with non-theme expressions cannot be safely transformed"
  )
  CSS_BLOCK_MULTIPLE_SLOTS = "Conditional `css` block: multiple interpolation slots in a single property value"
  CSS_BLOCK_SELECTOR = "Conditional `css` block: unsupported selector"
  CSS_HELPER_SWITCH = "`css` helper function switch must return css templates in all branches"

  # --- Mixins and helpers ---
  HELPER_IMPORT_SOURCE = "Could not resolve import source for helper call"
  DIRECTIONAL_BORDER_HELPER = "Directional border helper styles are not supported"
  IMPORTED_MIXIN_PSEUDO = (
    "Imported CSS helper mixins: cannot determine inherited properties for correct pseudo selector handling"
  )
  MIXIN_NOT_PLAIN_OBJECT = "Unsupported css`` mixin: after-base mixin style is not a plain object"
  MIXIN_NON_LITERAL_BASE = (
    "Unsupported css`` mixin: cannot infer base default for after-base contextual override (base value is non-literal)"
  )
  MIXIN_NESTED_CONDITIONS = "Unsupported css`` mixin: nested contextual conditions in after-base mixin"
  COMPONENT_AS_MIXIN = (
    "Using styled-components components as mixins is not supported; use css`` mixins or strings instead"
  )

  # --- Interpolations ---
  UNCLASSIFIED_INTERPOLATION = (
    "Dynamic interpolation could not be classified (e.g., comment or unsupported position) "
    "and requires manual handling."
  )
  PSEUDO_ELEMENT_DYNAMIC = (
    "Dynamic styles inside pseudo elements (::before/::after) are not supported by StyleX. "
    "See https://github.com/facebook/stylex/issues/1396"
  )
  FAILED_TO_PARSE_EXPRESSION = "Failed to parse expression"
  FAILED_TO_PARSE_THEME = "Failed to parse theme expressions"
  HETEROGENEOUS_BACKGROUND = "Heterogeneous background values (mix of gradients and colors) not currently supported"
  THEME_BLOCK_CONDITIONAL = (
    "Theme-dependent block-level conditional could not be fully resolved (branches may contain dynamic interpolations)"
  )
  UNSUPPORTED_CALL = "Unsupported call expression (expected imported helper(...) or imported helper(...)(...))"
  UNSUPPORTED_CALLEE = "Unsupported call expression callee (expected identifier)"
  UNSUPPORTED_ARROW = "Unsupported interpolation: arrow function"
  UNSUPPORTED_CALL_EXPRESSION = "Unsupported interpolation: call expression"
  UNSUPPORTED_IDENTIFIER = "Unsupported interpolation: identifier"
  UNSUPPORTED_MEMBER = "Unsupported interpolation: member expression"
  UNSUPPORTED_PROPERTY = "Unsupported interpolation: property"
  UNSUPPORTED_UNKNOWN = "Unsupported interpolation: unknown"
  INLINE_STYLE_UNSAFE = "Unsupported prop-based inline style expression cannot be safely inlined"
  INLINE_STYLE_THEME = "Unsupported prop-based inline style props.theme access is not supported"

  # --- Structural features ---
  CREATE_GLOBAL_STYLE = (
    "createGlobalStyle is not supported in StyleX. Global styles should be handled separately "
    "(e.g., in a CSS file or using CSS reset libraries)"
  )
  HOC_STYLED_FACTORY = "Higher-order styled factory wrappers (e.g. hoc(styled)) are not supported"
  STATIC_PROPERTIES = "Static properties on styled components (e.g. Styled.Component) are not supported"
  SHOULD_FORWARD_PROP_TEST = "Unsupported conditional test in shouldForwardProp"


_DYNAMIC_NODE_TYPES: Set[DiagnosticType] = {
  DiagnosticType.ADAPTER_CALL_UNPARSEABLE_STYLES,
  DiagnosticType.ADAPTER_CALL_UNPARSEABLE_VALUE,
  DiagnosticType.ADAPTER_VALUE_UNPARSEABLE,
  DiagnosticType.ADAPTER_VALUE_UNDEFINED_IMPORT,
  DiagnosticType.ADAPTER_CALL_CONTRACT,
  DiagnosticType.ADAPTER_BORDER_HELPER,
  DiagnosticType.ARROW_UNRECOGNIZED_BODY,
  DiagnosticType.ARROW_CONDITIONAL_BRANCHES,
  DiagnosticType.ARROW_HELPER_CALL_BODY,
  DiagnosticType.ARROW_INDEXED_THEME,
  DiagnosticType.ARROW_LOGICAL,
  DiagnosticType.ARROW_THEME_PATH,
  DiagnosticType.UNCLASSIFIED_INTERPOLATION,
  DiagnosticType.FAILED_TO_PARSE_EXPRESSION,
  DiagnosticType.FAILED_TO_PARSE_THEME,
  DiagnosticType.HELPER_IMPORT_SOURCE,
  DiagnosticType.UNSUPPORTED_CALL,
  DiagnosticType.UNSUPPORTED_CALLEE,
  DiagnosticType.UNSUPPORTED_ARROW,
  DiagnosticType.UNSUPPORTED_CALL_EXPRESSION,
  DiagnosticType.UNSUPPORTED_IDENTIFIER,
  DiagnosticType.UNSUPPORTED_MEMBER,
  DiagnosticType.UNSUPPORTED_PROPERTY,
  DiagnosticType.UNSUPPORTED_UNKNOWN,
  DiagnosticType.INLINE_STYLE_UNSAFE,
  DiagnosticType.INLINE_STYLE_THEME,
}


def category_of(kind: DiagnosticType) -> DiagnosticCategory:
  """
  Maps a diagnostic kind to its category.

  Args:
      kind (DiagnosticType): The diagnostic kind.

  Returns:
      DiagnosticCategory: `DYNAMIC_NODE` for per-interpolation bails, otherwise `UNSUPPORTED_FEATURE`.
  """
  if kind in _DYNAMIC_NODE_TYPES:
    return DiagnosticCategory.DYNAMIC_NODE
  return DiagnosticCategory.UNSUPPORTED_FEATURE


class SourceLocation(BaseModel):
  """1-based line and column in the host file."""

  line: int
  column: int


class Diagnostic(BaseModel):
  """
  One reported problem.
  """

  severity: Severity = Field(Severity.WARNING, description="How serious the problem is.")
  type: DiagnosticType = Field(..., description="The closed diagnostic kind; its value is the message.")
  category: DiagnosticCategory = Field(..., description="unsupported-feature or dynamic-node.")
  location: Optional[SourceLocation] = Field(None, description="Where in the host file the problem was found.")
  context: Dict[str, Any] = Field(default_factory=dict, description="Free-form detail (component, selector, ...).")

  @property
  def message(self) -> str:
    return self.type.value

  def format(self, file_path: str = "") -> str:
    """Renders `path:line:col severity message`."""
    where = file_path
    if self.location:
      where = f"{file_path}:{self.location.line}:{self.location.column}"
    return f"{where} {self.severity.value} {self.message}".strip()


class DiagnosticSink:
  """
  Ordered, append-only diagnostic collection for one file.

  `report_once` deduplicates on `(type, key)` so pattern scans emit each
  structural problem a single time per file.
  """

  def __init__(self) -> None:
    self._items: List[Diagnostic] = []
    self._seen: Set[Tuple[DiagnosticType, str]] = set()

  def report(
    self,
    kind: DiagnosticType,
    severity: Severity = Severity.WARNING,
    location: Optional[SourceLocation] = None,
    **context: Any,
  ) -> Diagnostic:
    """
    Appends a diagnostic.

    Args:
        kind (DiagnosticType): Diagnostic kind.
        severity (Severity): Defaults to warning.
        location (Optional[SourceLocation]): Host position.
        **context: Additional detail stored on the diagnostic.

    Returns:
        Diagnostic: The recorded diagnostic.
    """
    diag = Diagnostic(
      severity=severity,
      type=kind,
      category=category_of(kind),
      location=location,
      context={k: v for k, v in context.items() if v is not None},
    )
    self._items.append(diag)
    return diag

  def report_once(
    self,
    kind: DiagnosticType,
    key: str = "",
    severity: Severity = Severity.WARNING,
    location: Optional[SourceLocation] = None,
    **context: Any,
  ) -> Optional[Diagnostic]:
    marker = (kind, key)
    if marker in self._seen:
      return None
    self._seen.add(marker)
    return self.report(kind, severity=severity, location=location, **context)

  def extend(self, diagnostics: List[Diagnostic]) -> None:
    self._items.extend(diagnostics)

  def by_category(self, category: DiagnosticCategory) -> List[Diagnostic]:
    return [d for d in self._items if d.category == category]

  @property
  def items(self) -> List[Diagnostic]:
    return list(self._items)

  @property
  def has_errors(self) -> bool:
    return any(d.severity == Severity.ERROR for d in self._items)

  def __len__(self) -> int:
    return len(self._items)

  def __iter__(self) -> Iterator[Diagnostic]:
    return iter(list(self._items))
