"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console capture so analysis logs do not clutter the test output.
- Small builders for input graphs and pass accumulators.
"""

import io
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Add src to path so we can import 'srp_analyzer' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from rich.console import Console  # noqa: E402

from srp_analyzer.analysis.obligations import SafetyObligations  # noqa: E402
from srp_analyzer.config import AnalyzerConfig  # noqa: E402
from srp_analyzer.core.engine import AnalysisEngine  # noqa: E402
from srp_analyzer.core.result import Analysis  # noqa: E402
from srp_analyzer.core.tracer import TraceLogger  # noqa: E402
from srp_analyzer.graph.schema import App  # noqa: E402
from srp_analyzer.utils.console import reset_console, set_console  # noqa: E402


@pytest.fixture(autouse=True)
def captured_console():
  """Routes console and log output into an in-memory buffer."""
  backend = Console(file=io.StringIO(), record=True, width=200)
  set_console(backend)
  yield backend
  reset_console()


@pytest.fixture
def make_app() -> Callable[..., App]:
  """
  Builds a validated App from keyword arguments.

  Usage: ``make_app(resources={...}, software_tasks={...})``.
  """

  def _make(**fields: Any) -> App:
    return App.model_validate(fields)

  return _make


@pytest.fixture
def safety() -> SafetyObligations:
  return SafetyObligations(TraceLogger(enabled=False))


@pytest.fixture
def run_analysis() -> Callable[..., Analysis]:
  """
  Runs the full engine with precondition checks on.

  Usage: ``run_analysis(app, trace=True)``.
  """

  def _run(app: App, **options: Any) -> Analysis:
    config = AnalyzerConfig(**{"check_preconditions": True, **options})
    return AnalysisEngine(config=config).run(app)

  return _run
