"""
Shared fixtures for Decision Engine tests.

Factories are exposed as fixtures so test modules never import from
conftest directly.
"""

import pytest

from stylex_switcheroo.core.classifier import ClassificationContext, classify_source
from stylex_switcheroo.core.decisions.adapter import Adapter, ImportName, ImportSource, ImportSpec, ResolveValueResult
from stylex_switcheroo.core.decisions.handlers import HandlerEnv
from stylex_switcheroo.core.decisions.types import DynamicNodeContext
from stylex_switcheroo.core.host.imports import collect_imports
from stylex_switcheroo.core.host.parser import parse_source

HEADER = 'import { truncate } from "./helpers";\nimport { GAP } from "./constants";\n'


class ThemeAdapter(Adapter):
  """Resolves every theme path to a `vars` member."""

  def resolve_value(self, context):
    if context.kind == "theme":
      return ResolveValueResult(
        expr="vars." + context.path.replace(".", "_"),
        imports=[ImportSpec(from_=ImportSource(value="./tokens.stylex"), names=[ImportName(imported="vars")])],
      )
    return None


@pytest.fixture
def make_env():
  def factory(adapter=None, **overrides):
    classification = ClassificationContext(
      known_styled=frozenset({"Icon"}),
      known_keyframes=frozenset({"spin"}),
      known_mixins=frozenset({"ellipsis"}),
      imports=collect_imports(parse_source(HEADER)),
      css_local="css",
    )
    values = dict(adapter=adapter or Adapter(), classification=classification, mixin_keys={"ellipsis": "ellipsis"})
    values.update(overrides)
    return HandlerEnv(**values)

  return factory


@pytest.fixture
def make_ctx():
  def factory(css_property="color", value="__INTERPOLATION_0__", **overrides):
    values = dict(
      component="Button",
      style_key="button",
      index=0,
      css_property=css_property,
      value=value,
      token=value,
      tokens=(value,),
      is_full_value=value.strip() == "__INTERPOLATION_0__",
    )
    values.update(overrides)
    return DynamicNodeContext(**values)

  return factory


@pytest.fixture
def classify():
  def factory(source, env):
    return classify_source(source, env.classification, index=0)

  return factory


@pytest.fixture
def env(make_env):
  return make_env()


@pytest.fixture
def theme_env(make_env):
  return make_env(ThemeAdapter())
