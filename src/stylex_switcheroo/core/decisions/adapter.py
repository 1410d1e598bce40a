"""
Adapter Contract and Loader.

An adapter is a project-supplied Python object that teaches the engine how to
map theme paths, CSS variables, imported values and helper calls onto StyleX
values. Hooks return `None` to decline, which always ends in a bail.

Adapters are loaded from a `.py` file exposing a module-level `adapter`
attribute:

```python
from stylex_switcheroo.core.decisions.adapter import Adapter, ResolveValueResult

class ProjectAdapter(Adapter):
  def resolve_value(self, ctx):
    if ctx.kind == "theme":
      return ResolveValueResult(expr=f"tokens.{ctx.path.replace('.', '_')}", imports=[...])
    return None

adapter = ProjectAdapter()
```
"""

import importlib.util
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stylex_switcheroo.config import StyleMergerConfig
from stylex_switcheroo.core.errors import AdapterContractError
from stylex_switcheroo.enums import FallbackBehavior


class ImportSource(BaseModel):
  """Where an import comes from: an absolute file path or a package specifier."""

  kind: Literal["absolutePath", "specifier"] = "specifier"
  value: str


class ImportName(BaseModel):
  """One named import (`local` defaults to `imported`)."""

  imported: str
  local: Optional[str] = None

  @property
  def binding(self) -> str:
    return self.local or self.imported


class ImportSpec(BaseModel):
  """An import statement requested by an adapter or a handler."""

  model_config = ConfigDict(populate_by_name=True)

  from_: ImportSource = Field(..., alias="from", description="Module the names are imported from.")
  names: List[ImportName] = Field(default_factory=list, description="Named imports.")
  namespace: Optional[str] = Field(None, description="Local name for `import * as ns` imports.")


class ResolveValueContext(BaseModel):
  """Input to `Adapter.resolve_value`."""

  kind: Literal["theme", "cssVariable", "importedValue"]
  path: str = Field(..., description="Dot path (theme), variable name (cssVariable) or export name (importedValue).")
  css_property: Optional[str] = None
  import_source: Optional[str] = None
  default_value: Optional[str] = None
  file_path: str = ""


class ResolveValueResult(BaseModel):
  """Output of `Adapter.resolve_value`."""

  expr: str
  imports: List[ImportSpec] = Field(default_factory=list)
  drop_definition: bool = False


class CallResolveContext(BaseModel):
  """Input to `Adapter.resolve_call`."""

  callee_imported_name: str
  callee_source: str
  args: List[str] = Field(default_factory=list, description="Verbatim argument source texts.")
  css_property: Optional[str] = None
  file_path: str = ""


class CallResolveResult(BaseModel):
  """
  Output of `Adapter.resolve_call`.

  `usage="create"` means `expr` is a value for the enclosing property;
  `usage="props"` means `expr` is a StyleX style reference spread into
  `stylex.props` in place of a whole block.
  """

  usage: Literal["props", "create"]
  expr: str
  imports: List[ImportSpec] = Field(default_factory=list)
  css_text: Optional[str] = None


HandlerFn = Callable[..., Any]


class Adapter:
  """
  Default adapter: resolves nothing.

  Subclasses override `resolve_value` and `resolve_call`, and may set
  `handlers` (tried before the built-ins), `fallback_behavior` and
  `style_merger`.
  """

  handlers: List[HandlerFn] = []
  fallback_behavior: Optional[Union[FallbackBehavior, Callable[..., Any]]] = None
  style_merger: Optional[StyleMergerConfig] = None

  def resolve_value(self, context: ResolveValueContext) -> Optional[Any]:
    return None

  def resolve_call(self, context: CallResolveContext) -> Optional[Any]:
    return None


def coerce_value_result(raw: Any) -> Optional[ResolveValueResult]:
  """
  Validates a `resolve_value` return value.

  Raises:
      AdapterContractError: If the value is not None and not a valid result.
  """
  if raw is None or isinstance(raw, ResolveValueResult):
    return raw
  try:
    return ResolveValueResult.model_validate(raw)
  except ValidationError as e:
    raise AdapterContractError(f"Invalid resolveValue result: {e}") from e


def coerce_call_result(raw: Any) -> Optional[CallResolveResult]:
  """
  Validates a `resolve_call` return value.

  Raises:
      AdapterContractError: If the value is not None and not a valid result.
  """
  if raw is None or isinstance(raw, CallResolveResult):
    return raw
  try:
    return CallResolveResult.model_validate(raw)
  except ValidationError as e:
    raise AdapterContractError(f"Invalid resolveCall result: {e}") from e


class ImportSink:
  """
  Append-only collection of imports requested during one run.

  Duplicate names from the same source are merged.
  """

  def __init__(self) -> None:
    self._named: Dict[Tuple[str, str], Dict[str, ImportName]] = {}
    self._namespaces: Dict[Tuple[str, str], str] = {}

  def add(self, spec: ImportSpec) -> None:
    key = (spec.from_.kind, spec.from_.value)
    if spec.namespace:
      self._namespaces.setdefault(key, spec.namespace)
    bucket = self._named.setdefault(key, {})
    for name in spec.names:
      bucket.setdefault(name.binding, name)

  def extend(self, specs: List[ImportSpec]) -> None:
    for spec in specs:
      self.add(spec)

  def specs(self) -> List[ImportSpec]:
    """Requested imports in first-request order."""
    out = []
    keys = list(self._named)
    keys.extend(k for k in self._namespaces if k not in self._named)
    for kind, value in keys:
      names = list(self._named.get((kind, value), {}).values())
      namespace = self._namespaces.get((kind, value))
      out.append(ImportSpec(from_=ImportSource(kind=kind, value=value), names=names, namespace=namespace))
    return out

  def __len__(self) -> int:
    return len(self._named) + len([k for k in self._namespaces if k not in self._named])


def module_specifier(source: ImportSource, file_path: str) -> str:
  """
  Renders an import source as a module specifier relative to `file_path`.

  Absolute paths become `./`-prefixed relative paths without a `.ts`/`.tsx`/
  `.js` extension.
  """
  if source.kind == "specifier":
    return source.value
  target = Path(source.value)
  base = Path(file_path).resolve().parent if file_path else Path.cwd()
  rel = os.path.relpath(str(target.with_suffix("") if target.suffix in (".ts", ".tsx", ".js", ".jsx") else target), base)
  rel = rel.replace(os.sep, "/")
  if not rel.startswith("."):
    rel = "./" + rel
  return rel


def load_adapter(path: Path) -> Adapter:
  """
  Imports an adapter module from a file path.

  Args:
      path (Path): Python file exposing `adapter`.

  Returns:
      Adapter: The module's `adapter` object.

  Raises:
      AdapterContractError: If the file cannot be imported or has no `adapter`.
  """
  path = Path(path)
  if not path.exists() or path.suffix != ".py":
    raise AdapterContractError(f"Adapter file not found: {path}")
  unique_name = f"stylex_switcheroo_adapter_{path.stem}_{path.stat().st_ino}"
  spec = importlib.util.spec_from_file_location(unique_name, path)
  if spec is None or spec.loader is None:
    raise AdapterContractError(f"Cannot import adapter: {path}")
  mod = importlib.util.module_from_spec(spec)
  sys.modules[unique_name] = mod
  try:
    spec.loader.exec_module(mod)
  except Exception as e:
    sys.modules.pop(unique_name, None)
    raise AdapterContractError(f"Failed to load adapter {path.name}: {e}") from e
  adapter = getattr(mod, "adapter", None)
  if adapter is None:
    raise AdapterContractError(f"Adapter module {path.name} does not define `adapter`")
  if not (hasattr(adapter, "resolve_value") and hasattr(adapter, "resolve_call")):
    raise AdapterContractError(f"`adapter` in {path.name} must define resolve_value and resolve_call")
  return adapter
