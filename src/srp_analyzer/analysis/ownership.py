"""
Ownership & Ceiling Analysis.

Classifies every accessed resource by the set of priorities that touch it and
derives the priority ceiling used by the Stack Resource Policy:

- ``Owned{priority}``: a single context (so far) accesses the resource.
- ``CoOwned{priority}``: several contexts access it, all at one priority.
- ``Contended{ceiling}``: contexts at two or more priorities access it; the
  ceiling is the highest of them.

Only ``Contended`` resources need a lock, and only below their ceiling. The
analysis is a fold over the stream of resource accesses: `next_ownership` is
the pure transition applied to each access and `fold_ownerships` threads the
accumulated map (plus the safety obligations) through the stream. ``init``
accesses carry no priority and are skipped: ``init`` runs before preemption is
enabled and never contends for a ceiling.
"""

from typing import Annotated, Dict, Iterable, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.analysis.obligations import SafetyObligations
from srp_analyzer.core.tracer import TraceLogger
from srp_analyzer.graph.contexts import ResourceAccess
from srp_analyzer.graph.schema import App


class _OwnershipBase(BaseModel):
  model_config = ConfigDict(frozen=True)

  def needs_lock(self, priority: int) -> bool:
    """
    Whether an access at `priority` must raise the running priority first.

    Args:
        priority: Static priority of the accessing context.

    Returns:
        bool: False for Owned and CoOwned resources.
    """
    return False

  def is_owned(self) -> bool:
    return False


class Owned(_OwnershipBase):
  """Owned by a single context."""

  kind: Literal["owned"] = "owned"
  priority: int = Field(..., ge=0, description="Priority of the owning context.")

  def is_owned(self) -> bool:
    return True

  def __str__(self) -> str:
    return f"Owned{{{self.priority}}}"


class CoOwned(_OwnershipBase):
  """Shared by several contexts that all run at the same priority."""

  kind: Literal["co_owned"] = "co_owned"
  priority: int = Field(..., ge=0, description="Priority shared by all co-owners.")

  def __str__(self) -> str:
    return f"CoOwned{{{self.priority}}}"


class Contended(_OwnershipBase):
  """Shared by contexts running at different priorities."""

  kind: Literal["contended"] = "contended"
  ceiling: int = Field(..., ge=0, description="Highest priority among the accessing contexts.")

  def needs_lock(self, priority: int) -> bool:
    assert self.ceiling >= priority, f"priority {priority} is above the ceiling {self.ceiling}"
    return priority < self.ceiling

  def __str__(self) -> str:
    return f"Contended{{{self.ceiling}}}"


Ownership = Annotated[Union[Owned, CoOwned, Contended], Field(discriminator="kind")]


def _level(ownership: Union[Owned, CoOwned, Contended]) -> int:
  if isinstance(ownership, Contended):
    return ownership.ceiling
  return ownership.priority


def next_ownership(current: Optional[Ownership], priority: int) -> Tuple[Ownership, bool]:
  """
  Folds one access at `priority` into the ownership of a resource.

  Args:
      current: Ownership recorded so far, None if the resource has not been
          seen yet.
      priority: Priority of the accessing context.

  Returns:
      Tuple of (new ownership, whether this access met a priority other than
      the recorded one).
  """
  if current is None:
    return Owned(priority=priority), False

  level = _level(current)
  if priority != level:
    return Contended(ceiling=max(level, priority)), True

  if isinstance(current, Owned):
    return CoOwned(priority=priority), False

  return current, False


def fold_ownerships(
  accesses: Iterable[ResourceAccess],
  app: App,
  safety: SafetyObligations,
  tracer: Optional[TraceLogger] = None,
) -> Dict[str, Ownership]:
  """
  Computes the ownership of every resource accessed by a prioritized context.

  A Shared access that meets a different priority than the one recorded so
  far makes the resource type concurrent-read-safe.

  Args:
      accesses: Stream of ``(core, priority, name, access)`` tuples.
      app: The input graph (for resource types).
      safety: Accumulator receiving concurrent-read obligations.
      tracer: Optional trace logger.

  Returns:
      Dict[str, Ownership]: Resource name to ownership, in first-access order.
  """
  ownerships: Dict[str, Ownership] = {}

  for _core, priority, name, access in accesses:
    if priority is None:
      continue

    current = ownerships.get(name)
    updated, contended = next_ownership(current, priority)

    if contended and access.is_shared():
      res = app.resource(name)
      if res is not None:
        safety.require_concurrent_read(res.ty, f"'{name}' is read at priorities {_level(current)} and {priority}")

    if updated != current:
      ownerships[name] = updated
      if tracer is not None:
        tracer.log_ownership(name, str(current) if current is not None else None, str(updated))

  return ownerships
