"""
Cross-Context Safety Classification.

Determines which resource and message payload types must be safe to move
between execution contexts (*transfer-safe*) or safe to read from several
contexts at once (*concurrent-read-safe*).

The obligations are accumulated in a
`srp_analyzer.analysis.obligations.SafetyObligations` object that the other
passes receive explicitly:

1.  **Ownership fold**: a `Contended` resource accessed in Shared mode must be
    concurrent-read-safe (recorded by `srp_analyzer.analysis.ownership`).
2.  **Late resources**: a late resource is produced by ``init`` and consumed
    elsewhere; unless idle owns it alone on its own core it must be
    transfer-safe.
3.  **Resources shared with init**: same reasoning for early resources that
    ``init`` touches before handing them to the tasks.
4.  **Messages**: a payload sent by ``init``, across priorities or across
    cores must be transfer-safe.
"""

from typing import Dict, Iterable

from srp_analyzer.analysis.locations import Location, OwnedLocation
from srp_analyzer.analysis.obligations import SafetyObligations
from srp_analyzer.analysis.ownership import Owned, Ownership
from srp_analyzer.graph.contexts import MessageEdge
from srp_analyzer.graph.schema import App

OWNED_BY_IDLE = Owned(priority=0)


def classify_late_resources(
  app: App,
  ownerships: Dict[str, Ownership],
  locations: Dict[str, Location],
  safety: SafetyObligations,
) -> None:
  """
  Marks late resources that leave the context that produced them.

  A late resource is exempt only if it is not cross-initialized and is either
  never accessed or owned by idle alone. A cross-initialized resource is never
  exempt, even when idle is its only user: its value still moves from the
  producing core to the one that owns it.

  Args:
      app: The input graph.
      ownerships: Result of the ownership fold.
      locations: Result of the location fold.
      safety: Accumulator receiving the obligations.
  """
  for name, res in app.late_resources.items():
    loc = locations.get(name)
    cross_initialized = isinstance(loc, OwnedLocation) and loc.cross_initialized
    ownership = ownerships.get(name)

    if cross_initialized:
      safety.require_transfer(res.ty, f"late resource '{name}' is initialized on another core")
    elif ownership is not None and ownership != OWNED_BY_IDLE:
      safety.require_transfer(res.ty, f"late resource '{name}' is used outside idle ({ownership})")


def classify_init_resources(app: App, ownerships: Dict[str, Ownership], safety: SafetyObligations) -> None:
  """
  Marks resources that ``init`` shares with the rest of the application.

  The ownership considered is the one computed without ``init``; resources
  only ``init`` touches have none and need nothing.

  Args:
      app: The input graph.
      ownerships: Result of the ownership fold.
      safety: Accumulator receiving the obligations.
  """
  for init in app.inits:
    for name in init.resources:
      ownership = ownerships.get(name)
      if ownership is None or ownership == OWNED_BY_IDLE:
        continue
      res = app.resource(name)
      if res is not None:
        safety.require_transfer(res.ty, f"resource '{name}' is shared with init ({ownership})")


def message_must_transfer(edge: MessageEdge, receiver_core: int, receiver_priority: int) -> bool:
  """
  Decides whether the payload of a message edge crosses a context boundary.

  Args:
      edge: The spawn/schedule edge.
      receiver_core: Core of the receiving task.
      receiver_priority: Static priority of the receiving task.

  Returns:
      bool: True when the sender is init, runs at another priority, or runs on
      another core.
  """
  sender = edge.sender
  if sender.core != receiver_core:
    return True
  if sender.priority is None:
    return True
  return sender.priority != receiver_priority


def classify_message(app: App, edge: MessageEdge, safety: SafetyObligations, verb: str) -> None:
  """
  Applies the message rule to one spawn or schedule edge.

  Args:
      app: The input graph.
      edge: The edge to classify.
      safety: Accumulator receiving the obligations.
      verb: ``spawn`` or ``schedule``, used in the recorded reason.
  """
  task = app.software_tasks[edge.receiver]
  if not message_must_transfer(edge, task.core, task.priority):
    return
  _require_all(safety, task.inputs, f"{edge.sender.name} may {verb} '{edge.receiver}'")


def _require_all(safety: SafetyObligations, types: Iterable[str], reason: str) -> None:
  for ty in types:
    safety.require_transfer(ty, reason)
