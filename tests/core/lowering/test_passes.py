"""
Tests for the individual selector lowering passes.

Each scenario builds `StyleInfo` objects by hand (the shape the converter
produces) and runs the full pass order, so later passes only see what
earlier ones left behind.
"""

from stylex_switcheroo.core.diagnostics import DiagnosticSink, DiagnosticType
from stylex_switcheroo.core.lowering import ComponentArena, StyleInfo, lower_components
from stylex_switcheroo.core.lowering.passes.attributes import attribute_suffix
from stylex_switcheroo.core.lowering.passes.base import strip_self
from stylex_switcheroo.core.styles.values import ancestor_key, sibling_before_key
from stylex_switcheroo.enums import AttributeOperator, JSXRewriteKind, Severity, SiblingRelation


def arena_of(*infos):
  arena = ComponentArena()
  for info in infos:
    arena.add(info)
  return arena


def component(name, styles, base="div"):
  return StyleInfo(name=name, style_key=name[:1].lower() + name[1:], base=base, styles=styles)


def test_strip_self():
  assert strip_self("& > *") == "> *"
  assert strip_self("& & span") == "& & span"
  assert strip_self("&:hover") == "&:hover"


# --- universal ---


def test_direct_children():
  info = component("List", {"display": "flex", "& > *": {"flex": 1}})
  lower_components(arena_of(info))
  assert "& > *" not in info.styles
  assert info.extra_styles == {"listChild": {"flex": 1}}
  assert [(r.kind, r.style_key) for r in info.jsx_rewrite_rules] == [(JSXRewriteKind.DIRECT_CHILDREN, "listChild")]


def test_child_refinements():
  info = component(
    "List",
    {
      "& > *:not(:first-child)": {"marginTop": "4px"},
      "& > *:not(:last-child)": {"marginBottom": "4px"},
      "& > *:first-child": {"fontWeight": 700},
      "& *": {"color": "red"},
    },
  )
  lower_components(arena_of(info))
  assert list(info.extra_styles) == ["listChildNotFirst", "listChildNotLast", "listChildFirst", "listChild"]
  assert [r.kind for r in info.jsx_rewrite_rules] == [
    JSXRewriteKind.DIRECT_CHILDREN_EXCEPT_FIRST,
    JSXRewriteKind.DIRECT_CHILDREN_EXCEPT_LAST,
    JSXRewriteKind.DIRECT_CHILDREN_FIRST,
    JSXRewriteKind.DIRECT_CHILDREN,
  ]


# --- descendant ---


def test_descendant_component():
  icon = component("Icon", {"width": 16}, base="svg")
  button = component("Button", {"color": "red", "${Icon}": {"width": 20}}, base="button")
  lower_components(arena_of(icon, button))
  assert button.extra_styles == {"iconInButton": {"width": 20}}
  override = button.relation_overrides[0]
  assert (override.parent_style_key, override.child_style_key, override.override_style_key) == (
    "button",
    "icon",
    "iconInButton",
  )
  rule = button.jsx_rewrite_rules[0]
  assert (rule.kind, rule.style_key, rule.target_component) == (
    JSXRewriteKind.DESCENDANT_STYLED_COMPONENT,
    "iconInButton",
    "Icon",
  )
  assert not button.needs_default_marker


def test_descendant_under_parent_hover_uses_ancestor_marker():
  icon = component("Icon", {"opacity": 0.5}, base="svg")
  button = component("Button", {"&:hover ${Icon}": {"opacity": 1}}, base="button")
  lower_components(arena_of(icon, button))
  assert button.extra_styles["iconInButton"] == {"opacity": {"default": 0.5, ancestor_key(":hover"): 1}}
  assert button.needs_default_marker


def test_descendant_own_pseudo():
  icon = component("Icon", {"opacity": 0.5}, base="svg")
  button = component("Button", {"${Icon}:hover": {"opacity": 1}}, base="button")
  lower_components(arena_of(icon, button))
  assert button.extra_styles["iconInButton"] == {"opacity": {"default": 0.5, ":hover": 1}}


def test_descendant_imported_component():
  card = component("Card", {"& ${Avatar}": {"borderRadius": "50%"}})
  lower_components(arena_of(card), imported_components={"Avatar"})
  override = card.relation_overrides[0]
  assert override.cross_file
  assert override.child_style_key is None
  assert override.cross_file_component_local_name == "Avatar"
  assert "avatarInCard" in card.extra_styles


def test_descendant_unknown_component_is_reported():
  sink = DiagnosticSink()
  card = component("Card", {"color": "red", "${Mystery}": {"color": "blue"}})
  lower_components(arena_of(card), sink)
  assert card.styles == {"color": "red"}
  assert [d.type for d in sink.items] == [DiagnosticType.SELECTOR_UNKNOWN_COMPONENT]


# --- attributes ---


def test_attribute_presence():
  info = component("Input", {"&[disabled]": {"opacity": 0.5}}, base="input")
  lower_components(arena_of(info))
  assert info.extra_styles == {"inputDisabled": {"opacity": 0.5}}
  selector = info.attribute_selectors[0]
  assert (selector.attribute, selector.operator, selector.value) == ("disabled", AttributeOperator.PRESENT, None)


def test_attribute_value_operators():
  info = component(
    "Link",
    {
      '&[target="_blank"]::after': {"content": '"↗"'},
      '&[href^="https"]': {"color": "green"},
      "&[type='checkbox']": {"margin": 0},
    },
    base="a",
  )
  lower_components(arena_of(info))
  assert list(info.extra_styles) == ["linkExternal", "linkHttps", "linkCheckbox"]
  assert info.extra_styles["linkExternal"] == {"::after": {"content": '"↗"'}}
  operators = [s.operator for s in info.attribute_selectors]
  assert operators == [AttributeOperator.EQUALS, AttributeOperator.STARTS_WITH, AttributeOperator.EQUALS]
  assert info.attribute_selectors[0].pseudo_element == "::after"


def test_attribute_suffix():
  assert attribute_suffix("data-state", "open") == "Open"
  assert attribute_suffix("aria-expanded", None) == "AriaExpanded"
  assert attribute_suffix("href", ".pdf") == "Pdf"


# --- siblings ---


def test_adjacent_sibling():
  info = component("Item", {"& + &": {"marginTop": "8px"}})
  lower_components(arena_of(info))
  assert info.extra_styles == {"itemAdjacentSibling": {"marginTop": "8px"}}
  sibling = info.sibling_selectors[0]
  assert (sibling.relation, sibling.prop_name) == (SiblingRelation.ADJACENT, "isAdjacentSibling")
  assert info.has_sibling_pattern


def test_general_sibling_after_class():
  info = component("Item", {"&.active ~ &": {"opacity": 0.5}})
  lower_components(arena_of(info))
  assert list(info.extra_styles) == ["itemSiblingAfterActive"]
  assert info.sibling_selectors[0].class_name == "active"
  assert info.sibling_selectors[0].prop_name == "isSiblingAfterActive"


def test_general_sibling_with_markers():
  info = component("Item", {"color": "red", "& ~ &": {"color": "blue"}})
  lower_components(arena_of(info))
  assert info.styles == {"color": {"default": "red", sibling_before_key(":is(*)"): "blue"}}
  assert info.needs_default_marker
  assert not info.sibling_selectors


def test_general_sibling_without_markers():
  info = component("Item", {"& ~ &": {"color": "blue"}})
  lower_components(arena_of(info), relation_markers=False)
  assert info.extra_styles == {"itemSiblingAfter": {"color": "blue"}}
  assert info.sibling_selectors[0].relation == SiblingRelation.GENERAL


def test_adjacent_sibling_with_class_is_reported():
  sink = DiagnosticSink()
  info = component("Item", {"&.active + &": {"color": "blue"}})
  lower_components(arena_of(info), sink)
  assert [d.type for d in sink.items] == [DiagnosticType.SELECTOR_SIBLING]
  assert info.styles == {}


# --- specificity ---


def test_specificity_hack_merges_into_base():
  sink = DiagnosticSink()
  info = component("Button", {"color": "red", "&&": {"color": "blue", "padding": 0}})
  lower_components(arena_of(info), sink)
  assert info.styles == {"color": "blue", "padding": 0}
  assert info.has_specificity_hack
  assert [(d.type, d.severity) for d in sink.items] == [(DiagnosticType.SPECIFICITY_HACK, Severity.INFO)]


def test_specificity_hack_with_pseudo():
  info = component("Button", {"color": "red", "&&:hover": {"color": "blue"}})
  lower_components(arena_of(info))
  assert info.styles == {"color": {"default": "red", ":hover": "blue"}}


def test_context_class_specificity_hack():
  info = component("Button", {".dark &&": {"color": "white"}})
  lower_components(arena_of(info))
  assert info.styles == {"color": "white"}


# --- ancestor pseudo ---


def test_ancestor_pseudo_bridges_through_custom_property():
  card = component("Card", {"padding": 0})
  title = component("Title", {"color": "black", "${Card}:hover &": {"color": "red"}}, base="h2")
  lower_components(arena_of(card, title))
  assert title.styles == {"color": "var(--title-color-on-card-hover, black)"}
  assert card.styles["--title-color-on-card-hover"] == {"default": None, ":hover": "red"}
  injection = title.css_var_injections[0]
  assert (injection.target_component, injection.source_component) == ("Card", "Title")


def test_ancestor_pseudo_without_base_value():
  card = component("Card", {})
  title = component("Title", {"${Card}:focus-within &": {"opacity": 1}})
  lower_components(arena_of(card, title))
  assert title.styles == {"opacity": "var(--title-opacity-on-card-focus-within)"}
