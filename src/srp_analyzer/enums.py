"""
Enumerations for srp-analyzer.

This module defines the standard enumerations used across the codebase to
describe how contexts touch resources and which kind of execution context
an entry in the input graph is.
"""

from enum import Enum


class Access(str, Enum):
  """
  Resource access mode declared by a context.
  """

  EXCLUSIVE = "exclusive"
  SHARED = "shared"

  def is_exclusive(self) -> bool:
    return self is Access.EXCLUSIVE

  def is_shared(self) -> bool:
    return self is Access.SHARED


class ContextKind(str, Enum):
  """
  The four execution context kinds of an application.

  Used as the tag of `srp_analyzer.graph.contexts.Context` so every pass can
  iterate contexts polymorphically.
  """

  INIT = "init"
  IDLE = "idle"
  HARDWARE_TASK = "hardware_task"
  SOFTWARE_TASK = "software_task"
