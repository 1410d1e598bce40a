"""
Interpolation Classifier.

Assigns every interpolation slot exactly one `InterpolationTag` by looking at
the shape of its expression. The table is closed and ordered; the first match
wins and anything unmatched is `raw`:

1. identifier naming a local `keyframes` -> keyframes-ref
2. identifier naming a local `css` mixin -> helper-call (mixin spread)
3. `p => p.theme.a.b` -> theme-access
4. `p => p.x` -> prop-access
5. `p => p.x ? lit : lit` (or `p.x && lit`) -> conditional
6. `p => p.x || lit` / `p.x ?? lit` -> logical
7. call on an imported identifier -> helper-call
8. anything else -> raw

Classification is a pure function of the expression text and the context, so
reclassifying `ClassifiedInterpolation.source` yields the same tag.
"""

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Optional, Tuple

from tree_sitter import Node

from stylex_switcheroo.core.css.nodes import InterpolationLocation
from stylex_switcheroo.core.errors import HostParseError
from stylex_switcheroo.core.host.expressions import ArrowShape, arrow_shape, call_parts, literal_value, member_path, unwrap
from stylex_switcheroo.core.host.imports import ImportTable
from stylex_switcheroo.core.host.parser import node_text, parse_expression
from stylex_switcheroo.enums import InterpolationTag

_COMPARISON_OPERATORS = ("===", "!==", "==", "!=")


@dataclass(frozen=True)
class CssBlock:
  """A static css`...` template used as a conditional branch."""

  text: str


@dataclass(frozen=True)
class ClassificationContext:
  """
  What the classifier knows about the surrounding module.

  Attributes:
      known_styled: Local styled component names.
      known_keyframes: Local `keyframes` declaration names.
      known_mixins: Local css`` mixin names.
      imports: Module import table (for helper-call sources).
      css_local: Local name of the `css` helper, if imported.
  """

  known_styled: FrozenSet[str] = frozenset()
  known_keyframes: FrozenSet[str] = frozenset()
  known_mixins: FrozenSet[str] = frozenset()
  imports: ImportTable = field(default_factory=ImportTable)
  css_local: Optional[str] = None


@dataclass(frozen=True)
class ClassifiedInterpolation:
  """
  The tagged classification of one slot.

  Only the fields relevant to `tag` are populated.
  """

  tag: InterpolationTag
  source: str
  index: int = -1
  param_name: Optional[str] = None
  path: Tuple[str, ...] = ()
  comparison: Optional[Tuple[str, Any]] = None
  negated: bool = False
  truthy: Any = None
  falsy: Any = None
  has_falsy_branch: bool = True
  fallback: Any = None
  operator: Optional[str] = None
  helper_name: Optional[str] = None
  imported_name: Optional[str] = None
  import_source: Optional[str] = None
  args: Tuple[str, ...] = ()
  keyframes_name: Optional[str] = None
  mixin_name: Optional[str] = None
  node: Any = field(default=None, compare=False, repr=False)

  @property
  def prop_name(self) -> Optional[str]:
    """The tested/accessed prop (None for theme paths)."""
    if self.tag == InterpolationTag.THEME_ACCESS or not self.path or self.path[0] == "theme":
      return None
    return self.path[0]

  @property
  def is_theme_path(self) -> bool:
    return bool(self.path) and self.path[0] == "theme"


def _props_path(expr: Optional[Node], shape: ArrowShape) -> Optional[Tuple[str, ...]]:
  """Reads `p.a.b` (or `a.b` for a destructured `a`) as a path relative to props."""
  path = member_path(expr)
  if not path:
    return None
  if shape.param_name and path[0] == shape.param_name:
    return tuple(path[1:]) if len(path) > 1 else None
  if shape.destructured and path[0] in shape.destructured:
    return tuple(path)
  return None


def _branch_value(node: Optional[Node], context: ClassificationContext) -> Tuple[bool, Any]:
  ok, value = literal_value(node)
  if ok:
    return True, value
  node = unwrap(node)
  if node is not None and node.type == "call_expression" and context.css_local:
    tag = node.child_by_field_name("function")
    template = node.child_by_field_name("arguments")
    if (
      tag is not None
      and template is not None
      and template.type == "template_string"
      and node_text(tag) == context.css_local
      and not any(c.type == "template_substitution" for c in template.children)
    ):
      return True, CssBlock(node_text(template)[1:-1])
  return False, None


@dataclass(frozen=True)
class _Test:
  path: Tuple[str, ...]
  comparison: Optional[Tuple[str, Any]] = None
  negated: bool = False


def _read_test(node: Optional[Node], shape: ArrowShape) -> Optional[_Test]:
  node = unwrap(node)
  if node is None:
    return None
  if node.type == "unary_expression":
    operator = node.child_by_field_name("operator")
    if operator is not None and node_text(operator) == "!":
      inner = _read_test(node.child_by_field_name("argument"), shape)
      if inner is None or inner.comparison is not None:
        return None
      return _Test(inner.path, None, not inner.negated)
    return None
  if node.type == "binary_expression":
    operator = node.child_by_field_name("operator")
    op = node_text(operator) if operator is not None else ""
    if op not in _COMPARISON_OPERATORS:
      return None
    left = _props_path(node.child_by_field_name("left"), shape)
    ok, value = literal_value(node.child_by_field_name("right"))
    if left is None or not ok:
      return None
    return _Test(left, (op, value))
  path = _props_path(node, shape)
  if path is None:
    return None
  return _Test(path)


def _classify_arrow(
  shape: ArrowShape, base: ClassifiedInterpolation, context: ClassificationContext
) -> Optional[ClassifiedInterpolation]:
  body = shape.body
  if body is None:
    return None

  path = _props_path(body, shape)
  if path is not None:
    if path[0] == "theme" and len(path) > 1:
      return replace(base, tag=InterpolationTag.THEME_ACCESS, path=path[1:])
    if len(path) == 1:
      return replace(base, tag=InterpolationTag.PROP_ACCESS, path=path)
    return None

  if body.type == "ternary_expression":
    test = _read_test(body.child_by_field_name("condition"), shape)
    ok_true, truthy = _branch_value(body.child_by_field_name("consequence"), context)
    ok_false, falsy = _branch_value(body.child_by_field_name("alternative"), context)
    if test is not None and ok_true and ok_false:
      return replace(
        base,
        tag=InterpolationTag.CONDITIONAL,
        path=test.path,
        comparison=test.comparison,
        negated=test.negated,
        truthy=truthy,
        falsy=falsy,
      )
    return None

  if body.type == "binary_expression":
    operator = body.child_by_field_name("operator")
    op = node_text(operator) if operator is not None else ""
    left = body.child_by_field_name("left")
    right = body.child_by_field_name("right")
    if op == "&&":
      test = _read_test(left, shape)
      ok, value = _branch_value(right, context)
      if test is not None and ok:
        return replace(
          base,
          tag=InterpolationTag.CONDITIONAL,
          path=test.path,
          comparison=test.comparison,
          negated=test.negated,
          truthy=value,
          falsy=None,
          has_falsy_branch=False,
        )
      return None
    if op in ("||", "??"):
      primary = _props_path(left, shape)
      ok, fallback = literal_value(right)
      if primary is not None and ok:
        return replace(base, tag=InterpolationTag.LOGICAL, path=primary, fallback=fallback, operator=op)
  return None


def _classify_call(node: Node, base: ClassifiedInterpolation, context: ClassificationContext) -> Optional[ClassifiedInterpolation]:
  parts = call_parts(node)
  if parts is None:
    return None
  callee, args = parts
  callee = unwrap(callee)
  if callee is None:
    return None
  callee_path = member_path(callee)
  if not callee_path:
    return None
  binding = context.imports.lookup(callee_path[0])
  if binding is None:
    return None
  imported = binding.imported if len(callee_path) == 1 else ".".join([binding.imported] + callee_path[1:])
  return replace(
    base,
    tag=InterpolationTag.HELPER_CALL,
    helper_name=".".join(callee_path),
    imported_name=imported,
    import_source=binding.source,
    args=tuple(node_text(a) for a in args),
  )


def classify_expression(node: Node, context: ClassificationContext, index: int = -1) -> ClassifiedInterpolation:
  """
  Classifies one host expression.

  Args:
      node (Node): The interpolation expression.
      context (ClassificationContext): Module knowledge.
      index (int): Slot index carried into the result.

  Returns:
      ClassifiedInterpolation: Never fails; unmatched shapes are `raw`.
  """
  source = node_text(node)
  expr = unwrap(node)
  base = ClassifiedInterpolation(tag=InterpolationTag.RAW, source=source, index=index, node=node)
  if expr is None:
    return base

  if expr.type == "identifier":
    name = node_text(expr)
    if name in context.known_keyframes:
      return replace(base, tag=InterpolationTag.KEYFRAMES_REF, keyframes_name=name)
    if name in context.known_mixins:
      return replace(base, tag=InterpolationTag.HELPER_CALL, mixin_name=name, helper_name=name)
    return base

  shape = arrow_shape(expr)
  if shape is not None:
    base = replace(base, param_name=shape.param_name)
    return _classify_arrow(shape, base, context) or base

  return _classify_call(expr, base, context) or base


def classify(location: InterpolationLocation, context: ClassificationContext) -> ClassifiedInterpolation:
  """Classifies the expression of an `InterpolationLocation`."""
  return classify_expression(location.expression, context, location.index)


def classify_source(source: str, context: ClassificationContext, index: int = -1) -> ClassifiedInterpolation:
  """
  Classifies expression text.

  Unparseable text is `raw`.
  """
  try:
    node = parse_expression(source)
  except HostParseError:
    return ClassifiedInterpolation(tag=InterpolationTag.RAW, source=source, index=index)
  return classify_expression(node, context, index)
