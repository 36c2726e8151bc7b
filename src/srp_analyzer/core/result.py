"""
Data structures representing the output of the analysis.

This module defines the `Analysis` Pydantic model, the read-only metadata the
code generator consumes, together with the execution trace of the run.
Mappings in the result are read-only views and sequences are tuples.
"""

from typing import Any, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.analysis.channels import Channel
from srp_analyzer.analysis.locations import Location
from srp_analyzer.analysis.ownership import Ownership
from srp_analyzer.analysis.timer_queue import TimerQueue
from srp_analyzer.utils.frozen import FrozenMap


class Analysis(BaseModel):
  """
  Container for the results of one analysis run.
  """

  model_config = ConfigDict(frozen=True, validate_default=True)

  used_cores: Tuple[int, ...] = Field(default=(), description="Cores with at least one context.")
  late_resources: FrozenMap[int, FrozenSet[str]] = Field(
    default_factory=dict, description="Core to the late resources its init produces."
  )
  ownerships: FrozenMap[str, Ownership] = Field(default_factory=dict, description="Ownership of each accessed resource.")
  locations: FrozenMap[str, Location] = Field(default_factory=dict, description="Location of each accessed resource.")
  channels: FrozenMap[int, Channel] = Field(default_factory=dict, description="Dispatch priority to ready queue.")
  free_queues: FrozenMap[str, Optional[int]] = Field(
    default_factory=dict, description="Software task to the ceiling of its free queue."
  )
  timer_queue: TimerQueue = Field(default_factory=TimerQueue, description="The deferred-dispatch queue.")
  transfer_safe: FrozenSet[str] = Field(default_factory=frozenset, description="Types that must be transfer-safe.")
  concurrent_read_safe: FrozenSet[str] = Field(
    default_factory=frozenset, description="Types that must be concurrent-read-safe."
  )
  initialization_barriers: FrozenMap[int, FrozenSet[int]] = Field(
    default_factory=dict, description="Core to the cores whose init it must wait for."
  )
  spawn_barriers: FrozenMap[int, FrozenMap[int, bool]] = Field(
    default_factory=dict, description="Receiving core to {sending core: sent from init}."
  )
  task_priorities: FrozenMap[str, int] = Field(
    default_factory=dict, description="Effective priority of every hardware and software task."
  )
  trace_events: Tuple[FrozenMap[str, Any], ...] = Field((), description="Execution trace log data.")

  def needs_lock(self, resource: str, priority: int) -> bool:
    """
    Check if an access to `resource` at `priority` must take a lock.

    Args:
        resource: Resource name.
        priority: Static priority of the accessing context.

    Returns:
        True if the resource is contended above `priority`. Resources without
        an ownership (dead, or only touched by init) never need one.
    """
    ownership = self.ownerships.get(resource)
    if ownership is None:
      return False
    return ownership.needs_lock(priority)

