"""
Analysis Trace Logger.

This module provides the infrastructure to record the step-by-step execution
of the analysis. It captures:
1. Lifecycle Phases (Partitioning, Ownership, Channels, Timer Queue).
2. Ownership transitions (``x``: Owned{1} -> Contended{2}).
3. Safety obligations (type ``X`` must be transfer-safe, and why).
4. Queue updates (channel / free queue / timer queue ceilings).

The output is a structured list of Event Log dictionaries suitable for JSON serialization.
A logger is created per analysis run and handed to the passes explicitly.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  OWNERSHIP_CHANGE = "ownership_change"
  SAFETY_OBLIGATION = "safety_obligation"
  QUEUE_UPDATE = "queue_update"
  ANALYSIS_WARNING = "analysis_warning"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records analysis events.

  A disabled logger keeps the same interface but stores nothing, so passes
  never need to check whether tracing is on.
  """

  def __init__(self, enabled: bool = True):
    self.enabled = enabled
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []  # Stack of phase IDs

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g., 'Ownership'). Returns Phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None

    if self.enabled:
      self._events.append(
        TraceEvent(
          id=phase_id,
          type=TraceEventType.PHASE_START,
          timestamp=time.time(),
          description=name,
          parent_id=parent,
          metadata={"detail": description},
        )
      )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    """Ends the current active phase."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    if self.enabled:
      self._events.append(
        TraceEvent(
          id=str(uuid.uuid4()),
          type=TraceEventType.PHASE_END,
          timestamp=time.time(),
          description="End Phase",
          parent_id=phase_id,
        )
      )

  def log_ownership(self, resource: str, before: Optional[str], after: str) -> None:
    """Logs an ownership transition of a resource."""
    self._log_simple(
      TraceEventType.OWNERSHIP_CHANGE,
      f"{resource}: {before or '-'} -> {after}",
      {"resource": resource, "before": before, "after": after},
    )

  def log_obligation(self, ty: str, obligation: str, reason: str) -> None:
    """Logs a new safety obligation on a type."""
    self._log_simple(
      TraceEventType.SAFETY_OBLIGATION,
      f"{ty} must be {obligation}",
      {"type": ty, "obligation": obligation, "reason": reason},
    )

  def log_queue(self, queue: str, field_name: str, value: Any) -> None:
    """Logs an update to a channel, free queue or the timer queue."""
    self._log_simple(
      TraceEventType.QUEUE_UPDATE,
      f"{queue}.{field_name} = {value}",
      {"queue": queue, "field": field_name, "value": value},
    )

  def log_warning(self, message: str) -> None:
    self._log_simple(TraceEventType.ANALYSIS_WARNING, message, {"level": "warning"})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    if not self.enabled:
      return
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
