"""
Pydantic Schemas for the Input Graph.

This module defines the validated description of an application that the
analysis consumes: per-core ``init`` and ``idle`` routines, interrupt-bound
hardware tasks, message-driven software tasks and the resources they share.

The graph is produced by the surface-syntax parser and the structural
validator. Both live outside this package; the models here only describe the
shape of their output. Every model is frozen, sequences are tuples and
mappings are read-only views, so an `App` cannot be changed once built and
can be safely shared between passes.

Example
-------

.. code-block:: python

    app = App.model_validate(
      {
        "resources": {"x": {"ty": "u32", "init": "0"}},
        "software_tasks": {
          "foo": {"priority": 1, "resources": {"x": "exclusive"}},
          "bar": {"priority": 2, "resources": {"x": "exclusive"}},
        },
      }
    )
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from srp_analyzer.enums import Access
from srp_analyzer.utils.frozen import FrozenMap


class _GraphModel(BaseModel):
  """Common configuration for every input graph node."""

  model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)


class Resource(_GraphModel):
  """
  A resource declaration.

  A resource with an initial value is *early* (initialized at compile time).
  A resource without one is *late*: its value is produced at runtime by the
  ``init`` routine that claims it.
  """

  ty: str = Field(..., description="Type of the resource as written in the source.")
  init: Optional[str] = Field(None, description="Initial value expression. None for late resources.")

  @property
  def is_late(self) -> bool:
    """
    Returns True if the resource is initialized at runtime.

    Returns:
        bool: True when no initial value was declared.
    """
    return self.init is None


class _MessagingContext(_GraphModel):
  """Fields shared by every context that can access resources and send messages."""

  core: int = Field(0, ge=0, description="Core this context runs on.")
  resources: FrozenMap[str, Access] = Field(default_factory=dict, description="Resource accesses of this context.")
  spawn: Tuple[str, ...] = Field((), description="Software tasks this context may spawn.")
  schedule: Tuple[str, ...] = Field((), description="Software tasks this context may schedule.")


class Init(_MessagingContext):
  """
  The initialization routine of one core.

  Runs before interrupts are enabled and therefore has no priority.
  """

  late: Tuple[str, ...] = Field(
    (),
    description="Late resources this routine initializes. Empty means 'every late resource nobody else claims'.",
  )


class Idle(_MessagingContext):
  """The background loop of one core. Runs at priority 0."""


class HardwareTask(_MessagingContext):
  """A task bound to an interrupt or exception."""

  binds: str = Field(..., description="Interrupt or exception this task is bound to.")
  priority: int = Field(1, ge=1, description="Static priority of the task.")


class SoftwareTask(_MessagingContext):
  """A message-driven task dispatched from a software queue."""

  priority: int = Field(1, ge=1, description="Static (dispatch) priority of the task.")
  capacity: int = Field(1, ge=1, description="Maximum number of messages outstanding at once.")
  inputs: Tuple[str, ...] = Field((), description="Types of the message payload.")


class App(_GraphModel):
  """
  The whole application, as handed over by the validator.
  """

  cores: int = Field(1, ge=1, description="Number of cores of the target device.")
  inits: Tuple[Init, ...] = Field(())
  idles: Tuple[Idle, ...] = Field(())
  resources: FrozenMap[str, Resource] = Field(default_factory=dict)
  hardware_tasks: FrozenMap[str, HardwareTask] = Field(default_factory=dict)
  software_tasks: FrozenMap[str, SoftwareTask] = Field(default_factory=dict)

  @property
  def late_resources(self) -> Dict[str, Resource]:
    """
    Late (runtime initialized) resources in declaration order.

    Returns:
        Dict[str, Resource]: Name to declaration.
    """
    return {name: res for name, res in self.resources.items() if res.is_late}

  def resource(self, name: str) -> Optional[Resource]:
    """
    Looks up a resource declaration.

    Args:
        name: The resource name.

    Returns:
        The declaration, or None if it does not exist.
    """
    return self.resources.get(name)
