"""
Console and Logging Utilities.

All user-facing output of stylex-switcheroo flows through the standard
`logging` module, rendered by `rich`. The console itself sits behind a proxy so
tests (and embedding tools) can capture output by swapping the backend with
`set_console`.

Attributes:
    console (_ConsoleProxy): Stable module-level handle to the active Rich Console.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

LOGGER_NAME = "stylex_switcheroo"

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  Forwards printing to a swappable `rich.console.Console`.

  Swapping the backend also re-binds the package logger's `RichHandler`, so
  `logging` output follows the console.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME, stderr=True)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Replaces the active console and re-binds logging to it.

    The package theme is pushed onto the new console so named styles
    (`warning`, `path`, ...) keep resolving.

    Args:
        new_console (Console): The console that should receive output.
    """
    new_console.push_theme(_THEME)
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Restores a fresh stderr console."""
    self._backend = Console(theme=_THEME, stderr=True)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    handler = RichHandler(
      console=self._backend,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def get_logger(name: Optional[str] = None) -> logging.Logger:
  """
  Returns the package logger, or a child of it.

  Args:
      name (Optional[str]): Dotted suffix appended to the package logger name.

  Returns:
      logging.Logger: The configured logger.
  """
  if name:
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
  return logging.getLogger(LOGGER_NAME)


def set_console(new_console: Console) -> None:
  """
  Redirects console and logging output to `new_console`.

  Args:
      new_console (Console): e.g. `Console(record=True)` to capture output.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  console.reset()


def log_info(msg: str) -> None:
  get_logger().info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  get_logger().log(SUCCESS_LEVEL_NUM, f"[success]{msg}[/success]", extra={"markup": True})


def log_warning(msg: str) -> None:
  get_logger().warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  get_logger().error(msg, extra={"markup": True})
