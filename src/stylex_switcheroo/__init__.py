"""
stylex-switcheroo Package.

A deterministic source-to-source migration tool that rewrites
styled-components declarations into StyleX style registries, function
components and rewritten JSX call sites.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import stylex_switcheroo as sxs
    code = 'import styled from "styled-components";\\nconst Box = styled.div`color: red;`;\\n'
    print(sxs.convert(code, file_path="Box.tsx"))

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from stylex_switcheroo import RuntimeConfig, TransformEngine

    engine = TransformEngine(config=RuntimeConfig(strict_mode=True))
    res = engine.run(source, "src/Button.tsx")

    for diag in res.diagnostics:
        print(diag.format("src/Button.tsx"))
"""

from typing import Optional

from stylex_switcheroo.config import RuntimeConfig
from stylex_switcheroo.core.conversion_result import ConversionResult
from stylex_switcheroo.core.decisions.adapter import Adapter
from stylex_switcheroo.core.engine import TransformEngine

__version__ = "0.0.1"


def convert(
  code: str,
  file_path: str = "input.tsx",
  config: Optional[RuntimeConfig] = None,
  adapter: Optional[Adapter] = None,
) -> Optional[str]:
  """
  Migrates one module from styled-components to StyleX.

  Args:
      code (str): The module source.
      file_path (str): Path of the module, used for diagnostics and import resolution.
      config (Optional[RuntimeConfig]): Engine settings. Defaults are used if None.
      adapter (Optional[Adapter]): Project adapter resolving theme values and helpers.

  Returns:
      Optional[str]: The rewritten source, or None if the module has no
      styled-components usage.
  """
  engine = TransformEngine(config=config, adapter=adapter)
  return engine.run(code, file_path).code


__all__ = [
  "Adapter",
  "ConversionResult",
  "RuntimeConfig",
  "TransformEngine",
  "convert",
  "__version__",
]
