"""
Selector Lowering Passes.

Each pass owns one family of raw selector keys. `DEFAULT_PASSES` is the
required execution order: later passes only see keys earlier ones left behind.
"""

from stylex_switcheroo.core.lowering.passes.ancestor import AncestorPseudoPass
from stylex_switcheroo.core.lowering.passes.attributes import AttributeSelectorPass
from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass
from stylex_switcheroo.core.lowering.passes.descendant import DescendantComponentPass
from stylex_switcheroo.core.lowering.passes.siblings import SiblingSelectorPass
from stylex_switcheroo.core.lowering.passes.specificity import SpecificityPass
from stylex_switcheroo.core.lowering.passes.universal import UniversalSelectorPass

DEFAULT_PASSES = (
  UniversalSelectorPass,
  DescendantComponentPass,
  AttributeSelectorPass,
  SiblingSelectorPass,
  SpecificityPass,
  AncestorPseudoPass,
)

__all__ = [
  "AncestorPseudoPass",
  "AttributeSelectorPass",
  "DEFAULT_PASSES",
  "DescendantComponentPass",
  "LoweringContext",
  "LoweringPass",
  "SiblingSelectorPass",
  "SpecificityPass",
  "UniversalSelectorPass",
]
