"""
Cross-File Usage Provider.

A project-wide prepass (run outside this tool) records how each exported
styled component is consumed in other modules. The planner only needs two
facts per component: whether consumers pass styling props (`className` /
`style`) and whether they pass `as`.

The JSON form is::

    {
      "src/Button.tsx": {
        "Button": {"styles": true, "as": false}
      }
    }
"""

import json
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stylex_switcheroo.core.errors import SwitcherooError
from stylex_switcheroo.utils.console import get_logger

log = get_logger("prepass")


class PrepassLoadError(SwitcherooError):
  """Raised when a prepass summary file cannot be read."""


class UsageSummary(BaseModel):
  """External consumption facts of one component."""

  model_config = ConfigDict(populate_by_name=True)

  styles: bool = Field(False, description="Consumers pass className/style.")
  as_: bool = Field(False, alias="as", description="Consumers pass the polymorphic `as` prop.")


class UsageProvider(Protocol):
  def lookup(self, file_path: str, component: str) -> Optional[UsageSummary]: ...


class NullUsageProvider:
  """Provider used when no prepass data is configured."""

  def lookup(self, file_path: str, component: str) -> Optional[UsageSummary]:
    return None


def _normalize(file_path: Union[str, Path]) -> str:
  if not file_path:
    return ""
  text = Path(file_path).as_posix()
  return text[2:] if text.startswith("./") else text


class JsonUsageProvider:
  """
  Usage summaries keyed by `(file_path, component)`.

  File paths match exactly, after normalisation, or when one path ends with
  the other (summaries are usually written relative to the project root).
  """

  def __init__(self, data: Optional[Dict[str, Dict[str, UsageSummary]]] = None) -> None:
    self._data: Dict[str, Dict[str, UsageSummary]] = {}
    for path, components in (data or {}).items():
      self._data[_normalize(path)] = dict(components)

  @classmethod
  def from_dict(cls, raw: Dict[str, Dict[str, dict]]) -> "JsonUsageProvider":
    """
    Validates a raw mapping.

    Raises:
        PrepassLoadError: If an entry is not a valid summary.
    """
    data: Dict[str, Dict[str, UsageSummary]] = {}
    try:
      for path, components in raw.items():
        data[path] = {name: UsageSummary.model_validate(value) for name, value in components.items()}
    except (AttributeError, ValidationError) as e:
      raise PrepassLoadError(f"Invalid prepass summary: {e}") from e
    return cls(data)

  @classmethod
  def load(cls, path: Path) -> "JsonUsageProvider":
    """
    Reads a summary file.

    Args:
        path (Path): JSON file written by the prepass.

    Returns:
        JsonUsageProvider: The loaded provider.

    Raises:
        PrepassLoadError: If the file is missing or malformed.
    """
    try:
      raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
      raise PrepassLoadError(f"Cannot read prepass file {path}: {e}") from e
    if not isinstance(raw, dict):
      raise PrepassLoadError(f"Prepass file {path} must contain a JSON object")
    provider = cls.from_dict(raw)
    log.debug("Loaded prepass summaries for %d files", len(provider._data))
    return provider

  def lookup(self, file_path: str, component: str) -> Optional[UsageSummary]:
    key = _normalize(file_path)
    components = self._data.get(key)
    if components is None:
      for known, entries in self._data.items():
        if known and key and (key.endswith("/" + known) or known.endswith("/" + key)):
          components = entries
          break
    if components is None:
      return None
    return components.get(component)
