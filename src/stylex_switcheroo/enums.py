"""
Enumerations for stylex-switcheroo.

This module defines the closed vocabularies shared across the pipeline:
diagnostic severities, interpolation classification tags, decision actions,
and the structural rewrite kinds produced by selector lowering.
"""

from enum import Enum


class Severity(str, Enum):
  """
  Severity attached to every diagnostic.
  """

  INFO = "info"
  WARNING = "warning"
  ERROR = "error"


class DiagnosticCategory(str, Enum):
  """
  Coarse grouping of diagnostics.

  `UNSUPPORTED_FEATURE` covers structural constructs detected by pattern scans
  and selector lowering. `DYNAMIC_NODE` covers per-interpolation bails.
  """

  UNSUPPORTED_FEATURE = "unsupported-feature"
  DYNAMIC_NODE = "dynamic-node"


class InterpolationTag(str, Enum):
  """
  Semantic shape of one interpolation slot.
  """

  THEME_ACCESS = "theme-access"
  PROP_ACCESS = "prop-access"
  CONDITIONAL = "conditional"
  LOGICAL = "logical"
  HELPER_CALL = "helper-call"
  KEYFRAMES_REF = "keyframes-ref"
  RAW = "raw"


class DecisionAction(str, Enum):
  """
  Discriminator of the Decision tagged union.
  """

  CONVERT = "convert"
  REWRITE = "rewrite"
  BAIL = "bail"
  VARIANT = "variant"
  DYNAMIC_FN = "dynamic-fn"


class FallbackBehavior(str, Enum):
  """
  What the Decision Engine does when no handler claims an interpolation.

  Both modes produce a bail. `BAIL` additionally infers prop dependencies so an
  inline-style escape hatch can be synthesized; `DROP` discards the construct.
  """

  BAIL = "bail"
  DROP = "drop"


class JSXRewriteKind(str, Enum):
  """
  Structural instruction emitted by selector lowering for the JSX rewriter.
  """

  DIRECT_CHILDREN = "direct-children"
  DIRECT_CHILDREN_EXCEPT_FIRST = "direct-children-except-first"
  DIRECT_CHILDREN_EXCEPT_LAST = "direct-children-except-last"
  DIRECT_CHILDREN_FIRST = "direct-children-first"
  DESCENDANT_STYLED_COMPONENT = "descendant-styled-component"


class AttributeOperator(str, Enum):
  """
  Comparison operators supported in attribute selectors.
  """

  PRESENT = ""
  EQUALS = "="
  STARTS_WITH = "^="
  ENDS_WITH = "$="
  CONTAINS = "*="


class SiblingRelation(str, Enum):
  """
  Sibling combinators recognised by the sibling lowering pass.
  """

  ADJACENT = "adjacent"  # & + &
  GENERAL = "general"  # & ~ &, &.cls ~ &


class RenderMode(str, Enum):
  """
  How a converted component is materialised in the output.

  `INLINE` replaces every usage with the intrinsic element (tag substitution).
  `COMPONENT` emits a function component in place of the styled declaration.
  """

  INLINE = "inline"
  COMPONENT = "component"
