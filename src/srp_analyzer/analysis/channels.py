"""
Channel & Free-Queue Capacity Planning.

Software tasks receive messages through *channels*: one ready queue per
dispatch priority, drained by the dispatcher running at that priority. Each
task also owns a *free queue* that hands consumed message slots back to the
senders.

For every message edge (sender -> task):

1.  The task joins the channel keyed by its own static priority.
2.  A prioritized sender contends for that channel and for the task's free
    queue, raising both ceilings to its priority. ``init`` senders are left
    out of both ceilings: ``init`` is never preempted.
3.  The payload is classified for transfer safety.

Scheduled messages reach their task through the same channel, but they are
written by the timer queue handler, so that handler (at the timer-queue
priority) is the contender for the channel, while the scheduler contends for
the free queue.

Finally each channel's capacity is the sum of the capacities of its tasks,
enough to hold every message that may be pending at once.

Edges that cross cores additionally record a *spawn barrier*: the receiving
core must not dispatch before the sending core is able to send.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.analysis.obligations import SafetyObligations
from srp_analyzer.analysis.safety import classify_message
from srp_analyzer.analysis.timer_queue import TimerQueue
from srp_analyzer.core.tracer import TraceLogger
from srp_analyzer.graph.contexts import MessageEdge
from srp_analyzer.graph.schema import App

Ceiling = Optional[int]
FreeQueues = Dict[str, Ceiling]
SpawnBarriers = Dict[int, Dict[int, bool]]


class Channel(BaseModel):
  """
  Ready queue drained by the dispatcher of one priority level.
  """

  model_config = ConfigDict(frozen=True)

  ceiling: Ceiling = Field(None, description="Highest sender priority. None if only init sends.")
  capacity: int = Field(0, ge=0, description="Sum of the capacities of the member tasks.")
  tasks: FrozenSet[str] = Field(default_factory=frozenset, description="Tasks dispatched from this channel.")


@dataclass
class _ChannelState:
  ceiling: Ceiling = None
  tasks: Set[str] = field(default_factory=set)


@dataclass
class ChannelPlan:
  """Output of `plan_channels`."""

  channels: Dict[int, Channel]
  free_queues: FreeQueues
  spawn_barriers: SpawnBarriers


def _raise(ceiling: Ceiling, priority: int) -> int:
  return priority if ceiling is None else max(ceiling, priority)


class ChannelPlanner:
  """
  Folds spawn and schedule edges into channels and free queues.

  The planner keeps the accumulators for one analysis run; call `add_spawn`
  and `add_schedule` for each edge, then `finish`.
  """

  def __init__(self, app: App, safety: SafetyObligations, tracer: Optional[TraceLogger] = None):
    self.app = app
    self.safety = safety
    self.tracer = tracer or TraceLogger(enabled=False)
    self._channels: Dict[int, _ChannelState] = {}
    self._free_queues: FreeQueues = {}
    self._barriers: SpawnBarriers = {}

  def add_spawn(self, edge: MessageEdge) -> None:
    """
    Registers an immediate ``spawn`` edge.

    Args:
        edge: The spawn edge.
    """
    task = self.app.software_tasks[edge.receiver]
    sender = edge.sender

    if sender.core != task.core:
      self._barriers.setdefault(task.core, {})[sender.core] = sender.is_init

    self._join(edge.receiver, task.priority)

    if sender.priority is not None:
      self._raise_channel(task.priority, sender.priority)
      self._raise_free_queue(edge.receiver, sender.priority)

    classify_message(self.app, edge, self.safety, "spawn")

  def add_schedule(self, edge: MessageEdge, timer_queue: TimerQueue) -> None:
    """
    Registers a deferred ``schedule`` edge.

    Transfer safety of scheduled payloads is classified by the timer queue
    builder.

    Args:
        edge: The schedule edge.
        timer_queue: The finished timer queue; its handler writes the channel.
    """
    task = self.app.software_tasks[edge.receiver]
    sender = edge.sender

    if sender.core != task.core:
      # scheduled messages leave from the timer queue handler, never during init
      self._barriers.setdefault(task.core, {}).setdefault(sender.core, False)

    self._join(edge.receiver, task.priority)
    self._raise_channel(task.priority, timer_queue.priority)

    if sender.priority is not None:
      self._raise_free_queue(edge.receiver, sender.priority)

  def finish(self) -> ChannelPlan:
    """
    Computes capacities and freezes the plan.

    Returns:
        ChannelPlan: Channels keyed by dispatch priority, free-queue ceilings
        and spawn barriers.
    """
    channels: Dict[int, Channel] = {}
    for priority, state in sorted(self._channels.items()):
      assert state.tasks, f"channel at priority {priority} has no tasks"
      capacity = sum(self.app.software_tasks[name].capacity for name in state.tasks)
      channels[priority] = Channel(ceiling=state.ceiling, capacity=capacity, tasks=frozenset(state.tasks))

    barriers = {core: dict(sorted(senders.items())) for core, senders in sorted(self._barriers.items())}
    return ChannelPlan(channels=channels, free_queues=dict(self._free_queues), spawn_barriers=barriers)

  def _join(self, task: str, priority: int) -> None:
    self._channels.setdefault(priority, _ChannelState()).tasks.add(task)
    self._free_queues.setdefault(task, None)

  def _raise_channel(self, key: int, priority: int) -> None:
    channel = self._channels[key]
    ceiling = _raise(channel.ceiling, priority)
    if ceiling != channel.ceiling:
      channel.ceiling = ceiling
      self.tracer.log_queue(f"channel[{key}]", "ceiling", ceiling)

  def _raise_free_queue(self, task: str, priority: int) -> None:
    current = self._free_queues.get(task)
    ceiling = _raise(current, priority)
    if ceiling != current:
      self._free_queues[task] = ceiling
      self.tracer.log_queue(f"free_queue[{task}]", "ceiling", ceiling)


def plan_channels(
  app: App,
  spawns: Iterable[MessageEdge],
  schedules: Iterable[MessageEdge],
  timer_queue: TimerQueue,
  safety: SafetyObligations,
  tracer: Optional[TraceLogger] = None,
) -> ChannelPlan:
  """
  Runs the planner over every spawn edge, then every schedule edge.

  Args:
      app: The input graph.
      spawns: Every ``spawn`` edge.
      schedules: Every ``schedule`` edge.
      timer_queue: The finished timer queue.
      safety: Accumulator receiving transfer-safety obligations.
      tracer: Optional trace logger.

  Returns:
      ChannelPlan: The frozen plan.
  """
  planner = ChannelPlanner(app, safety, tracer)
  for edge in spawns:
    planner.add_spawn(edge)
  for edge in schedules:
    planner.add_schedule(edge, timer_queue)
  return planner.finish()
