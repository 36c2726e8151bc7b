"""
Timer Queue Construction.

Aggregates every deferred ``schedule`` edge into the single timer queue of the
application. The queue releases scheduled messages from a handler that runs
at the queue's dispatch priority; every scheduler writes into the queue and
therefore contends for it.

- **priority**: at least the priority of the most urgent task the queue may
  release.
- **ceiling**: at least the priority of every scheduler, and never below the
  handler's own priority.
- **capacity**: the sum of the capacities of the schedulable tasks.

An unused queue reports ``priority = ceiling = 1`` (the lowest task priority)
and capacity 0; it is never materialized, but it must not report a ceiling
of 0.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.analysis.obligations import SafetyObligations
from srp_analyzer.analysis.safety import classify_message
from srp_analyzer.core.tracer import TraceLogger
from srp_analyzer.graph.contexts import MessageEdge
from srp_analyzer.graph.schema import App

TIMER_QUEUE = "timer_queue"


class TimerQueue(BaseModel):
  """
  Descriptor of the deferred-dispatch queue.
  """

  model_config = ConfigDict(frozen=True)

  priority: int = Field(1, ge=1, description="Priority of the handler that releases scheduled tasks.")
  ceiling: int = Field(1, ge=1, description="Priority ceiling of the queue.")
  capacity: int = Field(0, ge=0, description="Maximum number of pending scheduled messages.")
  tasks: FrozenSet[str] = Field(default_factory=frozenset, description="Tasks that can be scheduled.")

  @property
  def is_used(self) -> bool:
    return bool(self.tasks)


@dataclass
class _TimerQueueState:
  """Mutable accumulator used while folding schedule edges."""

  priority: int = 1
  ceiling: int = 1
  tasks: Set[str] = field(default_factory=set)


def build_timer_queue(
  app: App,
  edges: Iterable[MessageEdge],
  safety: SafetyObligations,
  tracer: Optional[TraceLogger] = None,
) -> TimerQueue:
  """
  Folds every schedule edge into the timer queue.

  Schedulers running in ``init`` do not contend for the queue (it is never
  preempted) but their payloads still need to be transfer-safe.

  Args:
      app: The input graph.
      edges: Every ``schedule`` edge.
      safety: Accumulator receiving transfer-safety obligations.
      tracer: Optional trace logger.

  Returns:
      TimerQueue: The frozen queue descriptor.
  """
  tracer = tracer or TraceLogger(enabled=False)
  state = _TimerQueueState()

  for edge in edges:
    schedulee = app.software_tasks[edge.receiver]
    state.tasks.add(edge.receiver)

    if schedulee.priority > state.priority:
      state.priority = schedulee.priority
      tracer.log_queue(TIMER_QUEUE, "priority", state.priority)

    scheduler_priority = edge.sender.priority
    if scheduler_priority is not None and scheduler_priority > state.ceiling:
      state.ceiling = scheduler_priority
      tracer.log_queue(TIMER_QUEUE, "ceiling", state.ceiling)

    classify_message(app, edge, safety, "schedule")

  # the handler itself takes the queue to release messages
  ceiling = max(state.ceiling, state.priority)
  capacity = sum(app.software_tasks[name].capacity for name in state.tasks)

  return TimerQueue(priority=state.priority, ceiling=ceiling, capacity=capacity, tasks=frozenset(state.tasks))
