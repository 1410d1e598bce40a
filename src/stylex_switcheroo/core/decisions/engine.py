"""
Decision Engine.

Dispatches a classified interpolation through an ordered handler chain:
adapter-supplied handlers first, then the built-ins registered for its tag.
The first non-None decision wins. When nothing claims the slot, the fallback
behavior produces a bail (or, if the adapter supplies a callable fallback,
whatever that callable returns).
"""

from typing import Any, Callable, List, Optional, Union

from stylex_switcheroo.core.classifier import ClassifiedInterpolation
from stylex_switcheroo.core.decisions.handlers import Handler, HandlerEnv, builtin_handlers_for, raw_bail
from stylex_switcheroo.core.decisions.types import (
  BailDecision,
  ConvertDecision,
  Decision,
  DynamicFnDecision,
  DynamicNodeContext,
  RewriteDecision,
  VariantDecision,
)
from stylex_switcheroo.core.diagnostics import DiagnosticType
from stylex_switcheroo.core.errors import AdapterContractError
from stylex_switcheroo.core.tracer import get_tracer
from stylex_switcheroo.enums import FallbackBehavior

_DECISION_TYPES = (ConvertDecision, RewriteDecision, BailDecision, VariantDecision, DynamicFnDecision)

Fallback = Union[FallbackBehavior, Callable[[ClassifiedInterpolation, DynamicNodeContext], Any]]


class DecisionEngine:
  """
  Produces exactly one Decision per interpolation slot.
  """

  def __init__(self, env: HandlerEnv, fallback: Optional[Fallback] = None) -> None:
    """
    Args:
        env (HandlerEnv): Adapter, import sink and module knowledge.
        fallback (Optional[Fallback]): Caller override; the adapter's
            `fallback_behavior` wins over it, `bail` is the default.
    """
    self.env = env
    adapter_fallback = getattr(env.adapter, "fallback_behavior", None)
    self.fallback: Fallback = adapter_fallback or fallback or FallbackBehavior.BAIL

  def handlers_for(self, classified: ClassifiedInterpolation) -> List[Handler]:
    adapter_handlers = list(getattr(self.env.adapter, "handlers", None) or [])
    return adapter_handlers + builtin_handlers_for(classified.tag)

  def decide(self, classified: ClassifiedInterpolation, ctx: DynamicNodeContext) -> Decision:
    """
    Runs the handler chain.

    Args:
        classified (ClassifiedInterpolation): The slot's classification.
        ctx (DynamicNodeContext): Where the slot sits.

    Returns:
        Decision: Never None.
    """
    for handler in self.handlers_for(classified):
      try:
        decision = handler(classified, ctx, self.env)
      except AdapterContractError:
        decision = BailDecision(DiagnosticType.ADAPTER_CALL_CONTRACT)
      if decision is not None:
        self._trace(classified, ctx, decision)
        return decision
    decision = self.apply_fallback(classified, ctx)
    self._trace(classified, ctx, decision)
    return decision

  def apply_fallback(self, classified: ClassifiedInterpolation, ctx: DynamicNodeContext) -> Decision:
    if isinstance(self.fallback, FallbackBehavior):
      return raw_bail(classified, ctx, self.env, infer_props=self.fallback == FallbackBehavior.BAIL)
    result = self.fallback(classified, ctx)
    if isinstance(result, _DECISION_TYPES):
      return result
    return raw_bail(classified, ctx, self.env)

  def _trace(self, classified: ClassifiedInterpolation, ctx: DynamicNodeContext, decision: Decision) -> None:
    get_tracer().log_decision(ctx.component, classified.index, classified.tag.value, decision.action.value)
