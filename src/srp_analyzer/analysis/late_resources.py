"""
Late-Resource Partitioning.

Assigns every late (runtime initialized) resource to the core whose ``init``
routine produces its value.

An ``init`` routine either lists the late resources it claims explicitly, or
lists none, in which case it takes "the rest": every late resource no other
core claimed. At most one core may take the rest; the structural validator
guarantees that, and that no name is claimed twice.
"""

from typing import Dict, FrozenSet, Optional, Set

from srp_analyzer.graph.schema import App

LatePartition = Dict[int, FrozenSet[str]]


def partition_late_resources(app: App) -> LatePartition:
  """
  Partitions the late resources of `app` among the cores.

  Args:
      app: The input graph.

  Returns:
      LatePartition: Core to the set of late resources it initializes. Empty
      when there are no late resources.
  """
  if not app.late_resources:
    return {}

  unclaimed: Set[str] = set(app.late_resources)
  claims: Dict[int, Set[str]] = {}
  rest: Optional[int] = None

  for init in sorted(app.inits, key=lambda i: i.core):
    if not init.late:
      assert rest is None, "more than one init routine takes the remaining late resources"
      rest = init.core
      continue

    claimed = claims.setdefault(init.core, set())
    for name in init.late:
      claimed.add(name)
      unclaimed.discard(name)

  if rest is not None:
    claims[rest] = unclaimed

  return {core: frozenset(names) for core, names in sorted(claims.items())}


def initializer_of(partition: LatePartition, name: str) -> Optional[int]:
  """
  Returns the core that initializes late resource `name`, if any.

  Args:
      partition: Result of `partition_late_resources`.
      name: Resource name.

  Returns:
      The initializing core, or None for early or unclaimed resources.
  """
  for core, names in partition.items():
    if name in names:
      return core
  return None
