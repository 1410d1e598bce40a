"""
Decision Engine Package.

- `types`: the Decision tagged union and the per-slot context.
- `adapter`: the project adapter contract, result models and loader.
- `handlers`: built-in handlers per interpolation tag.
- `engine`: the ordered handler chain with fallback.
"""

from stylex_switcheroo.core.decisions.adapter import Adapter, ImportSink, load_adapter
from stylex_switcheroo.core.decisions.engine import DecisionEngine
from stylex_switcheroo.core.decisions.handlers import HandlerEnv, builtin_handler
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

__all__ = [
  "Adapter",
  "BailDecision",
  "ConvertDecision",
  "Decision",
  "DecisionEngine",
  "DynamicFnDecision",
  "DynamicNodeContext",
  "HandlerEnv",
  "ImportSink",
  "RewriteDecision",
  "VariantBranch",
  "VariantDecision",
  "builtin_handler",
  "load_adapter",
]
