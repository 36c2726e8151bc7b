"""
Input Graph Package.

The validated, immutable description of an application that every analysis
pass reads.

Modules:
    - ``schema``: Pydantic models for resources, contexts and the application.
    - ``contexts``: Tagged context records and the access/edge streams.
"""

from srp_analyzer.graph.contexts import (
  Context,
  MessageEdge,
  ResourceAccess,
  iter_contexts,
  resource_accesses,
  schedule_calls,
  spawn_calls,
  used_cores,
)
from srp_analyzer.graph.schema import App, HardwareTask, Idle, Init, Resource, SoftwareTask

__all__ = [
  "App",
  "Context",
  "HardwareTask",
  "Idle",
  "Init",
  "MessageEdge",
  "Resource",
  "ResourceAccess",
  "SoftwareTask",
  "iter_contexts",
  "resource_accesses",
  "schedule_calls",
  "spawn_calls",
  "used_cores",
]
