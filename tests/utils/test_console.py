"""
Tests for console redirection and the package log helpers.
"""

import io

from rich.console import Console
from rich.logging import RichHandler

from srp_analyzer.utils.console import log_success, log_warning, logger, set_console


def _recording_console() -> Console:
  return Console(file=io.StringIO(), record=True, width=200)


def test_set_console_redirects_log_output(captured_console):
  """
  Scenario: A host tool swaps in its own console mid-run.
  Expect: Later messages land only in the new console, at the SUCCESS level too.
  """
  log_warning("before swap")
  host = _recording_console()
  set_console(host)

  log_success("after swap")

  assert "before swap" in captured_console.export_text()
  assert "after swap" not in captured_console.export_text()
  output = host.export_text()
  assert "after swap" in output
  assert "SUCCESS" in output


def test_swapping_keeps_a_single_rich_handler():
  for _ in range(3):
    set_console(_recording_console())

  assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
