"""
Style Template Node Definitions.

Data structures produced by the style-template parser:

- `RuleNode`: a selector (or at-rule) block with flat declarations and nested rules.
- `Declaration`: a `property: value` pair whose value may carry placeholders.
- `InterpolationLocation`: where one interpolation slot ended up in the tree.
- `ParsedTemplate`: the root rule plus the location map keyed by slot index.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

PLACEHOLDER_PREFIX = "__INTERPOLATION_"
PLACEHOLDER_RE = re.compile(r"__INTERPOLATION_(\d+)__")


def make_placeholder(index: int) -> str:
  return f"{PLACEHOLDER_PREFIX}{index}__"


def find_placeholders(text: str) -> List[int]:
  """Slot indices referenced in `text`, in order of appearance."""
  return [int(m.group(1)) for m in PLACEHOLDER_RE.finditer(text or "")]


def is_only_placeholder(text: str) -> bool:
  return PLACEHOLDER_RE.fullmatch(text.strip()) is not None


@dataclass
class Declaration:
  """
  A single CSS declaration.

  An empty `property` marks a bare placeholder in block position (a mixin
  spread such as `${truncate};`).
  """

  property: str
  value: str

  @property
  def placeholders(self) -> List[int]:
    return find_placeholders(self.property) + find_placeholders(self.value)

  @property
  def is_block_slot(self) -> bool:
    return not self.property and is_only_placeholder(self.value)

  def __str__(self) -> str:
    if not self.property:
      return f"{self.value};"
    return f"{self.property}: {self.value};"


@dataclass
class RuleNode:
  """
  A block of declarations.

  Attributes:
      selector: `&` for the component root, the nested selector (`&:hover`,
          `> *`) or an at-rule prelude (`@media (max-width: 600px)`).
      declarations: Flat declaration list.
      nested_rules: Child blocks, in source order.
      at_rule_stack: Enclosing at-rule preludes, outermost first (including
          this node's own prelude when it is an at-rule).
  """

  selector: str = "&"
  declarations: List[Declaration] = field(default_factory=list)
  nested_rules: List["RuleNode"] = field(default_factory=list)
  at_rule_stack: List[str] = field(default_factory=list)

  @property
  def is_at_rule(self) -> bool:
    return self.selector.startswith("@")

  def walk(self):
    """Yields this rule and all nested rules depth-first."""
    yield self
    for child in self.nested_rules:
      yield from child.walk()


@dataclass(frozen=True)
class InterpolationContext:
  """
  Structural context of one placeholder occurrence.
  """

  selector: str
  at_rule_stack: Tuple[str, ...] = ()
  property: Optional[str] = None
  value: str = ""
  is_in_selector: bool = False
  is_in_property_name: bool = False
  is_full_value: bool = False


@dataclass(frozen=True)
class InterpolationLocation:
  """
  An interpolation slot joined with its structural context.

  `index` is the stable join key used by every later stage. `expression` is
  the opaque host node.
  """

  index: int
  expression: Any = field(compare=False, repr=False)
  context: InterpolationContext = field(default_factory=lambda: InterpolationContext(selector="&"))


@dataclass
class ParsedTemplate:
  """
  Output of the style-template parser.
  """

  root: RuleNode
  interpolations: Dict[int, InterpolationLocation] = field(default_factory=dict)

  def location(self, index: int) -> Optional[InterpolationLocation]:
    return self.interpolations.get(index)

  def unplaced(self, count: int) -> List[int]:
    """Slot indices that never reached the rule tree (e.g. inside comments)."""
    return [i for i in range(count) if i not in self.interpolations]
