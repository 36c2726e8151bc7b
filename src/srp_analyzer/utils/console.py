"""
Logging and Console Utilities.

Every message the analyzer prints goes through the standard `logging` library,
rendered by `rich`. The rich console sits behind a proxy so a host tool (for
instance the code generator capturing diagnostics into its own report) can
redirect output with `set_console` without re-importing anything.

Attributes:
    console (_ConsoleProxy): Stable reference to the active Rich Console.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# between INFO and WARNING
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

logger = logging.getLogger("srp_analyzer")

_THEME = Theme({"logging.level.success": "green"})


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  Holds the swappable backend the package logger renders to. Swapping the
  backend re-attaches the logger's `RichHandler` to it.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Goes back to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._configure_logging()

  def _configure_logging(self) -> None:
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    logger.setLevel(logging.INFO)
    logger.addHandler(rich_handler)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects console and log output to `new_console`.

  Args:
      new_console (Console): The configured Rich console to use.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Resets logging and console to standard output."""
  console.reset()


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  """
  Logs a success message at the SUCCESS level.

  Args:
      msg (str): The message content.
  """
  logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  """
  Logs a warning message.

  Args:
      msg (str): The message content.
  """
  logger.warning(f"⚠️  {msg}", extra={"markup": True})
