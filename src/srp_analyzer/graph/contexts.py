"""
Uniform Iteration over Execution Contexts.

Every pass of the analysis needs to walk "all contexts" of an application:
``init`` and ``idle`` of every core, hardware tasks and software tasks. This
module flattens the four kinds into a single tagged record, `Context`, whose
accessors (core, priority-or-none, resource accesses, messaging targets) are
identical for all kinds. Passes then iterate contexts without branching on
their kind.

It also provides the three streams the passes fold over:

- `resource_accesses`: ``(core, priority, resource, access)`` tuples.
- `spawn_calls`: immediate dispatch edges.
- `schedule_calls`: deferred dispatch edges.
"""

from dataclasses import dataclass, field
from typing import Iterator, Mapping, NamedTuple, Optional, Tuple

from srp_analyzer.enums import Access, ContextKind
from srp_analyzer.graph.schema import App

IDLE_PRIORITY = 0


@dataclass(frozen=True)
class Context:
  """
  A single execution context of the application.

  Attributes:
      kind: Which of the four context kinds this is.
      name: Task name, or ``init``/``idle`` for the per-core routines.
      core: Core the context runs on.
      priority: Static priority. None for ``init``, which runs before
          preemption is enabled and never contends for ceilings.
      resources: Declared resource accesses.
      spawn: Names of software tasks this context spawns.
      schedule: Names of software tasks this context schedules.
  """

  kind: ContextKind
  name: str
  core: int
  priority: Optional[int]
  resources: Mapping[str, Access] = field(default_factory=dict, compare=False)
  spawn: Tuple[str, ...] = ()
  schedule: Tuple[str, ...] = ()

  @property
  def is_init(self) -> bool:
    return self.kind is ContextKind.INIT


class ResourceAccess(NamedTuple):
  """One declared access of a context to a resource."""

  core: int
  priority: Optional[int]
  name: str
  access: Access


class MessageEdge(NamedTuple):
  """A spawn or schedule edge from a sending context to a software task."""

  sender: Context
  receiver: str


def iter_contexts(app: App) -> Iterator[Context]:
  """
  Yields every context of the application.

  Order: ``init`` routines and ``idle`` routines sorted by core, then hardware
  and software tasks in declaration order.

  Args:
      app: The input graph.

  Yields:
      Context: One record per context.
  """
  for init in sorted(app.inits, key=lambda i: i.core):
    yield Context(
      kind=ContextKind.INIT,
      name="init",
      core=init.core,
      priority=None,
      resources=init.resources,
      spawn=init.spawn,
      schedule=init.schedule,
    )

  for idle in sorted(app.idles, key=lambda i: i.core):
    yield Context(
      kind=ContextKind.IDLE,
      name="idle",
      core=idle.core,
      priority=IDLE_PRIORITY,
      resources=idle.resources,
      spawn=idle.spawn,
      schedule=idle.schedule,
    )

  for name, hw_task in app.hardware_tasks.items():
    yield Context(
      kind=ContextKind.HARDWARE_TASK,
      name=name,
      core=hw_task.core,
      priority=hw_task.priority,
      resources=hw_task.resources,
      spawn=hw_task.spawn,
      schedule=hw_task.schedule,
    )

  for name, sw_task in app.software_tasks.items():
    yield Context(
      kind=ContextKind.SOFTWARE_TASK,
      name=name,
      core=sw_task.core,
      priority=sw_task.priority,
      resources=sw_task.resources,
      spawn=sw_task.spawn,
      schedule=sw_task.schedule,
    )


def resource_accesses(app: App) -> Iterator[ResourceAccess]:
  """
  Yields every declared resource access, ``init`` included.

  Args:
      app: The input graph.

  Yields:
      ResourceAccess: ``(core, priority, name, access)``; priority is None for init.
  """
  for ctx in iter_contexts(app):
    for name, access in ctx.resources.items():
      yield ResourceAccess(ctx.core, ctx.priority, name, access)


def spawn_calls(app: App) -> Iterator[MessageEdge]:
  """Yields every immediate ``spawn`` edge."""
  for ctx in iter_contexts(app):
    for receiver in ctx.spawn:
      yield MessageEdge(ctx, receiver)


def schedule_calls(app: App) -> Iterator[MessageEdge]:
  """Yields every deferred ``schedule`` edge."""
  for ctx in iter_contexts(app):
    for receiver in ctx.schedule:
      yield MessageEdge(ctx, receiver)


def used_cores(app: App) -> Tuple[int, ...]:
  """
  Cores that have been assigned at least one context.

  Args:
      app: The input graph.

  Returns:
      Sorted tuple of core identifiers.
  """
  return tuple(sorted({ctx.core for ctx in iter_contexts(app)}))
