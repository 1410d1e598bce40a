"""
Registry Emitter.

Renders the aggregated registry as JavaScript:

    const fadeIn = stylex.keyframes({ from: {...}, to: {...} });
    const styles = stylex.create({ button: {...}, buttonSize: (size) => ({...}) });
"""

from stylex_switcheroo.core.aggregator import StyleFunction, StyleRegistry
from stylex_switcheroo.core.styles.values import StyleObject, render_key, render_object


class RegistryEmitter:
  """
  Converts a `StyleRegistry` into declaration text.
  """

  def __init__(self, stylex_namespace: str = "stylex", styles_identifier: str = "styles", typescript: bool = True):
    self.stylex_namespace = stylex_namespace
    self.styles_identifier = styles_identifier
    self.typescript = typescript

  def emit_keyframes(self, name: str, frames: StyleObject) -> str:
    return f"const {name} = {self.stylex_namespace}.keyframes({render_object(frames)});"

  def emit_function(self, function: StyleFunction, indent: int) -> str:
    param = function.param_name
    if self.typescript:
      param = f"{param}: {function.param_type}"
    return f"({param}) => ({render_object(function.body, indent)})"

  def emit(self, registry: StyleRegistry) -> str:
    """
    Renders the `stylex.create` declaration.

    Args:
        registry (StyleRegistry): Aggregated entries.

    Returns:
        str: The declaration, or an empty string when there are no entries.
    """
    if not registry.entries:
      return ""
    lines = [f"const {self.styles_identifier} = {self.stylex_namespace}.create({{"]
    for key, entry in registry.entries.items():
      if isinstance(entry, StyleFunction):
        rendered = self.emit_function(entry, 1)
      else:
        rendered = render_object(entry, 1)
      lines.append(f"  {render_key(key)}: {rendered},")
    lines.append("});")
    return "\n".join(lines)
