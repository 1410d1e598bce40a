"""
Output Generation.

- `registry`: renders `stylex.create` / `stylex.keyframes` declarations.
- `planner`: decides inline substitution versus function components.
- `wrappers`: renders function components.
- `call_sites`: rewrites JSX usages.
- `imports`: prunes and injects imports.
"""

from stylex_switcheroo.core.emit.call_sites import CallSiteRewriter, style_receivers
from stylex_switcheroo.core.emit.imports import ImportRewriter
from stylex_switcheroo.core.emit.planner import ComponentPlan, StyleArg, UsageFacts, WrapperPlanner
from stylex_switcheroo.core.emit.registry import RegistryEmitter
from stylex_switcheroo.core.emit.wrappers import WrapperEmitter

__all__ = [
  "CallSiteRewriter",
  "ComponentPlan",
  "ImportRewriter",
  "RegistryEmitter",
  "StyleArg",
  "UsageFacts",
  "WrapperEmitter",
  "WrapperPlanner",
  "style_receivers",
]
