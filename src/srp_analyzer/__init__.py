"""
srp-analyzer Package.

Static analysis of a priority-preemptive, multi-core embedded application.
Given the validated graph of init/idle routines, hardware tasks, software
tasks and shared resources, it derives what a code generator needs under the
Stack Resource Policy: lock ceilings, message queue sizing, the timer queue,
the types that must be transfer-safe or concurrent-read-safe and the
late-resource partition across cores.

Usage
-----

.. code-block:: python

    import srp_analyzer as srp

    app = srp.App.model_validate(
      {
        "resources": {"x": {"ty": "u32", "init": "0"}},
        "hardware_tasks": {
          "uart": {"binds": "UART0", "priority": 2, "resources": {"x": "exclusive"}},
        },
        "idles": [{"resources": {"x": "exclusive"}}],
      }
    )
    analysis = srp.analyze(app)
    analysis.needs_lock("x", 0)  # True, idle must raise to ceiling 2
"""

from pathlib import Path
from typing import Any, Optional

from srp_analyzer.analysis.preconditions import ContractViolation
from srp_analyzer.config import AnalyzerConfig
from srp_analyzer.core.engine import AnalysisEngine
from srp_analyzer.core.result import Analysis
from srp_analyzer.graph.schema import App

__version__ = "0.1.0"


def analyze(app: App, search_path: Optional[Path] = None, **overrides: Any) -> Analysis:
  """
  Analyses one application.

  Convenience wrapper around `AnalysisEngine`. Options come from the nearest
  ``[tool.srp_analyzer]`` table, overridden by keyword arguments.

  Args:
      app (App): The validated input graph.
      search_path (Path, optional): Directory to start searching for pyproject.toml.
      **overrides: `AnalyzerConfig` fields, e.g. ``trace=True``.

  Returns:
      Analysis: The frozen result.

  Raises:
      ContractViolation: If precondition checks are enabled and fail.
  """
  config = AnalyzerConfig.load(search_path=search_path, **overrides)
  return AnalysisEngine(config=config).run(app)


__all__ = [
  "Analysis",
  "AnalysisEngine",
  "AnalyzerConfig",
  "App",
  "ContractViolation",
  "analyze",
  "__version__",
]
