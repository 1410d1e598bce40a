"""
Universal / Child Selector Pass.

`> *` (and `& *`) style every direct child element. The body becomes an
extra entry and a `JSXRewriteRule` tells the call-site rewriter which
children receive it:

| selector                  | entry              | rule                         |
|---------------------------|--------------------|------------------------------|
| `> *`                     | `<key>Child`         | direct-children              |
| `> *:not(:first-child)`   | `<key>ChildNotFirst` | direct-children-except-first |
| `> *:not(:last-child)`    | `<key>ChildNotLast`  | direct-children-except-last  |
| `> *:first-child`         | `<key>ChildFirst`    | direct-children-first        |
"""

import re

from stylex_switcheroo.core.lowering.passes.base import LoweringContext, LoweringPass, strip_self
from stylex_switcheroo.core.lowering.style_info import JSXRewriteRule, StyleInfo
from stylex_switcheroo.core.styles.values import StyleObject
from stylex_switcheroo.enums import JSXRewriteKind

_CHILD_RE = re.compile(r"^(?:>\s*)?\*(?P<refine>:not\(:first-child\)|:not\(:last-child\)|:first-child)?$")

_REFINEMENTS = {
  None: (JSXRewriteKind.DIRECT_CHILDREN, "Child"),
  ":not(:first-child)": (JSXRewriteKind.DIRECT_CHILDREN_EXCEPT_FIRST, "ChildNotFirst"),
  ":not(:last-child)": (JSXRewriteKind.DIRECT_CHILDREN_EXCEPT_LAST, "ChildNotLast"),
  ":first-child": (JSXRewriteKind.DIRECT_CHILDREN_FIRST, "ChildFirst"),
}


class UniversalSelectorPass(LoweringPass):
  name = "universal"

  def lower(self, selector: str, body: StyleObject, info: StyleInfo, context: LoweringContext) -> bool:
    match = _CHILD_RE.match(strip_self(selector))
    if not match:
      return False
    kind, suffix = _REFINEMENTS[match.group("refine")]
    key = info.style_key + suffix
    info.add_extra(key, dict(body))
    info.jsx_rewrite_rules.append(JSXRewriteRule(kind=kind, style_key=key))
    return True
