"""
Orchestration Engine for the Resource Analysis.

This module provides the `AnalysisEngine`, the driver that turns a validated
application graph into the metadata the code generator needs.

The pipeline is a fixed sequence of passes, each run inside a trace phase:

1.  **Preconditions** (optional): re-checks the validator's guarantees and
    raises `ContractViolation` on a malformed graph.
2.  **Priority Compression** (optional): renumbers task priorities per core
    so they have no gaps.
3.  **Late Partition**: assigns late resources to the ``init`` of a core.
4.  **Ownership & Locations**: one walk over every resource access computes
    ceilings, resource locations and initialization barriers.
5.  **Resource Safety**: classifies late and init-shared resources.
6.  **Timer Queue**: folds ``schedule`` edges into the timer queue.
7.  **Channels**: folds ``spawn`` then ``schedule`` edges into channels and
    free queues. Must run after the timer queue, whose dispatch priority
    contends for the channels of scheduled tasks.

Every pass only reads the graph and the outputs of earlier passes; the
accumulators and the tracer are created per run.
"""

from typing import Dict, List, Optional

from srp_analyzer.analysis.channels import plan_channels
from srp_analyzer.analysis.late_resources import partition_late_resources
from srp_analyzer.analysis.locations import Location, fold_locations
from srp_analyzer.analysis.obligations import SafetyObligations
from srp_analyzer.analysis.ownership import Contended, fold_ownerships
from srp_analyzer.analysis.preconditions import check_preconditions
from srp_analyzer.analysis.priorities import compress_priorities, effective_priorities
from srp_analyzer.analysis.safety import classify_init_resources, classify_late_resources
from srp_analyzer.analysis.timer_queue import build_timer_queue
from srp_analyzer.config import AnalyzerConfig
from srp_analyzer.core.result import Analysis
from srp_analyzer.core.tracer import TraceLogger
from srp_analyzer.graph.contexts import resource_accesses, schedule_calls, spawn_calls, used_cores
from srp_analyzer.graph.schema import App
from srp_analyzer.utils.console import log_info, log_success, log_warning


class AnalysisEngine:
  """
  Runs every analysis pass over one application.

  An engine holds only its configuration and can be reused for any number of
  applications.
  """

  def __init__(self, config: Optional[AnalyzerConfig] = None):
    """
    Initializes the Engine.

    Args:
        config (AnalyzerConfig, optional): Options of the run. Loaded from the
            nearest pyproject.toml if None.
    """
    self.config = config or AnalyzerConfig.load()

  def run(self, app: App) -> Analysis:
    """
    Executes the pipeline.

    Args:
        app (App): The validated input graph. Never modified.

    Returns:
        Analysis: The frozen result.

    Raises:
        ContractViolation: If precondition checks are enabled and the graph
            breaks one of them.
    """
    tracer = TraceLogger(enabled=self.config.trace)
    safety = SafetyObligations(tracer)

    if self.config.check_preconditions:
      tracer.start_phase("Preconditions", "Checking validator guarantees")
      check_preconditions(app)
      tracer.end_phase()

    if self.config.optimize_priorities:
      tracer.start_phase("Priority Compression", "Removing gaps between task priorities")
      app = compress_priorities(app)
      tracer.end_phase()

    tracer.start_phase("Late Partition", "Assigning late resources to init routines")
    partition = partition_late_resources(app)
    tracer.end_phase()

    tracer.start_phase("Ownership", "Computing ceilings and locations")
    accesses = list(resource_accesses(app))
    ownerships = fold_ownerships(accesses, app, safety, tracer)
    locations, init_barriers = fold_locations(accesses, partition)
    tracer.end_phase()

    tracer.start_phase("Resource Safety", "Classifying late and init-shared resources")
    classify_late_resources(app, ownerships, locations, safety)
    classify_init_resources(app, ownerships, safety)
    tracer.end_phase()

    tracer.start_phase("Timer Queue", "Folding schedule edges")
    schedules = list(schedule_calls(app))
    timer_queue = build_timer_queue(app, schedules, safety, tracer)
    tracer.end_phase()

    tracer.start_phase("Channels", "Folding spawn and schedule edges")
    plan = plan_channels(app, spawn_calls(app), schedules, timer_queue, safety, tracer)
    tracer.end_phase()

    for warning in self._diagnostics(app, locations, plan.free_queues):
      tracer.log_warning(warning)
      log_warning(warning)

    transfer_safe, concurrent_read_safe = safety.frozen()
    result = Analysis(
      used_cores=used_cores(app),
      late_resources=partition,
      ownerships=ownerships,
      locations=locations,
      channels=plan.channels,
      free_queues=plan.free_queues,
      timer_queue=timer_queue,
      transfer_safe=transfer_safe,
      concurrent_read_safe=concurrent_read_safe,
      initialization_barriers=init_barriers,
      spawn_barriers=plan.spawn_barriers,
      task_priorities=effective_priorities(app),
      trace_events=tracer.export(),
    )

    log_info(
      f"Analysed {len(app.hardware_tasks)} hardware and {len(app.software_tasks)} software task(s) "
      f"on {len(result.used_cores)} core(s)"
    )
    log_success(
      f"{sum(isinstance(o, Contended) for o in ownerships.values())} contended resource(s), "
      f"{len(plan.channels)} channel(s), timer queue {'used' if timer_queue.is_used else 'unused'}"
    )
    return result

  @staticmethod
  def _diagnostics(app: App, locations: Dict[str, Location], free_queues: Dict[str, Optional[int]]) -> List[str]:
    warnings = []
    for name in app.resources:
      if name not in locations:
        warnings.append(f"resource '{name}' is never accessed")
    for name in app.software_tasks:
      if name not in free_queues:
        warnings.append(f"software task '{name}' is never spawned nor scheduled")
    return warnings
