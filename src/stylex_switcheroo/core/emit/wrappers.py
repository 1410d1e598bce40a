"""
Wrapper Synthesis.

Renders the function component that replaces a styled declaration planned as
`RenderMode.COMPONENT`. Own styles come first; an incoming `className` /
`style` is merged last so callers can still override. When a style merger
helper is configured, merging is delegated to it.
"""

from typing import List, Optional, Set

from stylex_switcheroo.config import StyleMergerConfig
from stylex_switcheroo.core.emit.planner import ComponentPlan
from stylex_switcheroo.core.errors import WrapperSynthesisError
from stylex_switcheroo.core.host.parser import parse_source
from stylex_switcheroo.core.styles.values import render_key

POLYMORPHIC_LOCAL = "Component"


class WrapperEmitter:
  """
  Produces wrapper source text for component plans.

  Attributes:
      uses_react_types: Set once any emitted wrapper references `React.*`.
      uses_style_merger: Set once any emitted wrapper calls the merger.
      uses_stylex: Set once any emitted wrapper calls `stylex.props`.
  """

  def __init__(
    self,
    stylex_namespace: str = "stylex",
    typescript: bool = True,
    style_merger: Optional[StyleMergerConfig] = None,
    reserved_names: Optional[Set[str]] = None,
  ) -> None:
    self.stylex_namespace = stylex_namespace
    self.typescript = typescript
    self.style_merger = style_merger
    self.reserved_names = set(reserved_names or ())
    self.uses_react_types = False
    self.uses_style_merger = False
    self.uses_stylex = False

  def props_type_name(self, plan: ComponentPlan) -> str:
    name = f"{plan.name}Props"
    if name in self.reserved_names:
      name = f"Styled{plan.name}Props"
    return name

  # --- Types ---

  def element_props_type(self, plan: ComponentPlan) -> str:
    if plan.element_is_intrinsic:
      return f'React.ComponentProps<"{plan.element}">'
    return f"React.ComponentProps<typeof {plan.element}>"

  def props_type(self, plan: ComponentPlan) -> str:
    base = self.element_props_type(plan)
    if not plan.accepts_external_styles:
      base = f'Omit<{base}, "className" | "style">'
    parts = [base]
    if plan.info.type_arguments:
      parts.append(plan.info.type_arguments)

    extra: List[str] = []
    if plan.polymorphic:
      extra.append("as?: React.ElementType;")
    for sibling in plan.info.sibling_selectors:
      extra.append(f"{sibling.prop_name}?: boolean;")
    if not plan.info.type_arguments:
      declared = {s.prop_name for s in plan.info.sibling_selectors}
      for prop in plan.destructure:
        if prop not in declared:
          extra.append(f"{render_key(prop)}?: any;")
    if extra:
      parts.append("{\n" + "".join(f"  {line}\n" for line in dict.fromkeys(extra)) + "}")
    return " & ".join(parts)

  # --- Body ---

  def merge_attributes(self, plan: ComponentPlan, args: str) -> List[str]:
    """JSX attributes applying the styles (and merging external ones)."""
    inline = ", ".join(f"{render_key(s.css_property)}: {s.expression}" for s in plan.inline_styles)
    if not plan.accepts_external_styles:
      attrs = [f"{{...{self.stylex_namespace}.props({args})}}"]
      if inline:
        attrs.append(f"style={{{{ {inline} }}}}")
      return attrs

    if self.style_merger is not None:
      self.uses_style_merger = True
      style = f"{{ {inline}, ...style }}" if inline else "style"
      return [f"{{...{self.style_merger.function_name}([{args}], className, {style})}}"]

    style_parts = ["...sx.style"]
    if inline:
      style_parts.append(inline)
    style_parts.append("...style")
    return [
      'className={[sx.className, className].filter(Boolean).join(" ")}',
      "style={{ " + ", ".join(style_parts) + " }}",
    ]

  def emit(self, plan: ComponentPlan) -> str:
    """
    Renders the replacement for a styled declaration.

    Args:
        plan (ComponentPlan): A component planned as `RenderMode.COMPONENT`.

    Returns:
        str: Optional props type followed by the function declaration.

    Raises:
        WrapperSynthesisError: If the generated source does not parse.
    """
    name = plan.name
    tag = plan.element
    if plan.polymorphic:
      tag = POLYMORPHIC_LOCAL

    args = ", ".join(a.render() for a in plan.style_args)
    # nothing left to apply: forward every prop untouched
    passthrough = not plan.style_args and not plan.inline_styles
    merges = plan.accepts_external_styles and not passthrough
    verbose_merge = merges and self.style_merger is None

    destructure: List[str] = []
    if plan.polymorphic:
      default = f'"{plan.element}"' if plan.element_is_intrinsic else plan.element
      destructure.append(f"as: {POLYMORPHIC_LOCAL} = {default}")
    if merges:
      destructure.extend(["className", "style"])
    destructure.extend(p for p in plan.destructure if p not in ("className", "style", "as"))

    lines: List[str] = []
    if self.typescript:
      self.uses_react_types = True
      type_name = self.props_type_name(plan)
      lines.append(f"type {type_name} = {self.props_type(plan)};")
      lines.append("")
      signature = f"function {name}(props: {type_name}) {{"
    else:
      signature = f"function {name}(props) {{"
    if plan.info.is_exported:
      signature = "export " + signature
    lines.append(signature)

    spread = "props"
    if destructure:
      lines.append(f"  const {{ {', '.join(destructure)}, ...rest }} = props;")
      spread = "rest"
    if verbose_merge:
      lines.append(f"  const sx = {self.stylex_namespace}.props({args});")

    attributes = [f"{{...{spread}}}"]
    attributes.extend(f"{key}={{{value}}}" for key, value in plan.static_attrs.items())
    if not passthrough:
      attributes.extend(self.merge_attributes(plan, args))

    lines.append("  return (")
    lines.append(f"    <{tag}")
    lines.extend(f"      {attr}" for attr in attributes)
    lines.append("    />")
    lines.append("  );")
    lines.append("}")
    text = "\n".join(lines)

    checked = parse_source(text, "wrapper.tsx" if self.typescript else "wrapper.jsx")
    if checked.has_errors:
      raise WrapperSynthesisError(f"Generated wrapper for {name} does not parse")
    if f"{self.stylex_namespace}." in text:
      self.uses_stylex = True
    return text
