"""
Command handler implementations.
"""

from pathlib import Path
from typing import List

SOURCE_SUFFIXES = (".tsx", ".ts", ".jsx", ".js")


def discover_sources(path: Path) -> List[Path]:
  """
  Lists the migratable source files under `path`.

  Declaration files (`.d.ts`) and anything inside `node_modules` are ignored.

  Args:
      path (Path): A file or a directory.

  Returns:
      List[Path]: Sorted source files.
  """
  if path.is_file():
    return [path]
  found = []
  for candidate in path.rglob("*"):
    if not candidate.is_file() or candidate.suffix not in SOURCE_SUFFIXES:
      continue
    if candidate.name.endswith(".d.ts") or "node_modules" in candidate.parts:
      continue
    found.append(candidate)
  return sorted(found)
