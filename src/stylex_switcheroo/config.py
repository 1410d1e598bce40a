"""
Runtime Configuration Store.

Settings are read from the `[tool.stylex_switcheroo]` table of the nearest
`pyproject.toml` and may be overridden by CLI arguments or programmatic callers.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from stylex_switcheroo.enums import FallbackBehavior

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib


class StyleMergerConfig(BaseModel):
  """
  A project-provided helper that merges StyleX styles with external className/style.

  When configured, wrappers emit `{...fn([styles.a, styles.b], className, style)}`
  instead of the verbose `sx.className` join.
  """

  function_name: str = Field(..., description="Local name of the merger function (e.g. 'mergedSx').")
  import_source: str = Field(..., description="Module specifier the merger is imported from.")


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the migration engine.
  """

  adapter_path: Optional[Path] = Field(None, description="Python file exposing an `adapter` object.")
  prepass_path: Optional[Path] = Field(None, description="JSON usage summary produced by a cross-file prepass.")
  fallback_behavior: FallbackBehavior = Field(
    FallbackBehavior.BAIL, description="What to do with interpolations no handler claims."
  )
  style_merger: Optional[StyleMergerConfig] = Field(None, description="Optional className/style merge helper.")
  relation_markers: bool = Field(
    True, description="Encode general-sibling relations declaratively instead of runtime boolean props."
  )
  styles_identifier: str = Field("styles", description="Name of the emitted stylex.create registry.")
  stylex_import: str = Field("@stylexjs/stylex", description="Module specifier of the StyleX runtime.")
  strict_mode: bool = Field(False, description="If True, leave a file untouched when any unsupported feature is found.")

  @field_validator("styles_identifier")
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    """
    Ensures the registry name is a valid JS identifier.

    Args:
        v (str): Candidate identifier.

    Returns:
        str: The stripped identifier.

    Raises:
        ValueError: If the name cannot be used as a JS binding.
    """
    v_clean = v.strip()
    if not v_clean or not (v_clean[0].isalpha() or v_clean[0] in "_$") or not all(
      c.isalnum() or c in "_$" for c in v_clean
    ):
      raise ValueError(f"Invalid styles identifier: '{v}'")
    return v_clean

  @classmethod
  def load(
    cls,
    adapter_path: Optional[Path] = None,
    prepass_path: Optional[Path] = None,
    fallback_behavior: Optional[str] = None,
    strict_mode: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Relative paths in the TOML table are resolved against the directory that
    holds the `pyproject.toml`.

    Args:
        adapter_path (Optional[Path]): Override for the adapter module path.
        prepass_path (Optional[Path]): Override for the prepass JSON path.
        fallback_behavior (Optional[str]): Override for the fallback behavior.
        strict_mode (Optional[bool]): Override for strict mode.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    def _resolve(raw: Optional[str]) -> Optional[Path]:
      if not raw:
        return None
      path = Path(raw)
      if toml_dir and not path.is_absolute():
        return (toml_dir / path).resolve()
      return path.resolve()

    final_adapter = adapter_path or _resolve(toml_config.get("adapter_path"))
    final_prepass = prepass_path or _resolve(toml_config.get("prepass_path"))
    final_fallback = fallback_behavior or toml_config.get("fallback_behavior", FallbackBehavior.BAIL.value)
    if strict_mode is not None:
      final_strict = strict_mode
    else:
      final_strict = toml_config.get("strict_mode", False)

    merger = None
    raw_merger = toml_config.get("style_merger")
    if raw_merger:
      merger = StyleMergerConfig.model_validate(raw_merger)

    return cls(
      adapter_path=final_adapter,
      prepass_path=final_prepass,
      fallback_behavior=FallbackBehavior(final_fallback),
      style_merger=merger,
      relation_markers=toml_config.get("relation_markers", True),
      styles_identifier=toml_config.get("styles_identifier", "styles"),
      stylex_import=toml_config.get("stylex_import", "@stylexjs/stylex"),
      strict_mode=final_strict,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts the tool table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()
  if current.is_file():
    current = current.parent

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None
      return data.get("tool", {}).get("stylex_switcheroo", {}), parent

  return {}, None
