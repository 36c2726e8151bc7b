"""
Analyzer Configuration.

Options are read from the ``[tool.srp_analyzer]`` table of the nearest
``pyproject.toml`` (searching the start directory and its parents) and can be
overridden by keyword arguments:

.. code-block:: toml

    [tool.srp_analyzer]
    optimize_priorities = true
    trace = true
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "srp_analyzer"


class AnalyzerConfig(BaseModel):
  """
  Options of one analysis run.
  """

  model_config = ConfigDict(frozen=True, extra="forbid")

  optimize_priorities: bool = Field(False, description="Renumber task priorities per core so they have no gaps.")
  check_preconditions: bool = Field(
    __debug__, description="Re-check the validator's guarantees on the input graph before analysing it."
  )
  trace: bool = Field(False, description="Record trace events into the result.")

  @classmethod
  def load(cls, search_path: Optional[Path] = None, **overrides: Any) -> "AnalyzerConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Overrides set to None are ignored, so optional CLI-style arguments can be
    passed through unchanged.

    Args:
        search_path (Optional[Path]): Directory to start searching for TOML config.
        **overrides: Field values that win over the TOML file.

    Returns:
        AnalyzerConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config = _load_toml_settings(start_dir)

    explicit = {key: value for key, value in overrides.items() if value is not None}
    return cls.model_validate({**toml_config, **explicit})


def _load_toml_settings(start_path: Path) -> Dict[str, Any]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts the tool table.

  The first ``pyproject.toml`` found wins, even if it has no
  ``[tool.srp_analyzer]`` table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Dict[str, Any]: The ``[tool.srp_analyzer]`` table, empty if none was found.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        log_warning(f"Ignoring unreadable {toml_path}: {e}")
        return {}

      return data.get("tool", {}).get(TOOL_SECTION, {})

  return {}
