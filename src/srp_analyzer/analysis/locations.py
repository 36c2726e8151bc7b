"""
Resource Location Analysis.

Decides on which core each accessed resource lives, and which cores must wait
for another core's ``init`` before touching late resources.

- A resource accessed from one core is located on that core
  (`OwnedLocation`). It is *cross-initialized* when it is a late resource
  whose value is produced by another core's ``init``.
- A resource accessed from several cores lives in memory visible to all of
  them (`SharedLocation`).
- A resource never accessed has no location: it is dead and the code
  generator does not emit it.

Cross-core access arbitration (locking across cores) is not modelled.
"""

from typing import Annotated, Dict, FrozenSet, Iterable, Literal, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.analysis.late_resources import LatePartition, initializer_of
from srp_analyzer.graph.contexts import ResourceAccess

InitializationBarriers = Dict[int, FrozenSet[int]]


class OwnedLocation(BaseModel):
  """Resource that resides in the memory of a single core."""

  model_config = ConfigDict(frozen=True)

  kind: Literal["owned"] = "owned"
  core: int = Field(..., ge=0)
  cross_initialized: bool = Field(False, description="True if another core's init produces its value.")

  def owner(self) -> Optional[int]:
    return self.core


class SharedLocation(BaseModel):
  """Resource accessed from several cores."""

  model_config = ConfigDict(frozen=True)

  kind: Literal["shared"] = "shared"
  cores: FrozenSet[int] = Field(default_factory=frozenset)

  def owner(self) -> Optional[int]:
    return None


Location = Annotated[Union[OwnedLocation, SharedLocation], Field(discriminator="kind")]


def fold_locations(
  accesses: Iterable[ResourceAccess], partition: LatePartition
) -> Tuple[Dict[str, Location], InitializationBarriers]:
  """
  Computes resource locations and cross-core initialization barriers.

  Args:
      accesses: Stream of ``(core, priority, name, access)`` tuples, init included.
      partition: Late-resource partition (core to initialized names).

  Returns:
      Tuple of (resource name to location in first-access order, user core to
      the set of cores whose init it must wait for).
  """
  locations: Dict[str, Location] = {}
  barriers: Dict[int, Set[int]] = {}

  for core, _priority, name, _access in accesses:
    loc = locations.get(name)
    if loc is None:
      locations[name] = OwnedLocation(core=core)
    elif isinstance(loc, OwnedLocation):
      if loc.core != core:
        locations[name] = SharedLocation(cores=frozenset({loc.core, core}))
    elif core not in loc.cores:
      locations[name] = SharedLocation(cores=loc.cores | {core})

    # the initializer core acts as a sender, the accessing core as a receiver
    initializer = initializer_of(partition, name)
    if initializer is not None and initializer != core:
      barriers.setdefault(core, set()).add(initializer)

  for name, loc in list(locations.items()):
    if isinstance(loc, OwnedLocation):
      initializer = initializer_of(partition, name)
      if initializer is not None and initializer != loc.core:
        locations[name] = OwnedLocation(core=loc.core, cross_initialized=True)

  return locations, {user: frozenset(senders) for user, senders in sorted(barriers.items())}

