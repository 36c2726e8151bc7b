"""
Safety Obligation Accumulator.

Holds the two safety sets the passes add to while they run: types that must
be transfer-safe and types that must be concurrent-read-safe.
"""

from typing import FrozenSet, Set, Tuple

from srp_analyzer.core.tracer import TraceLogger

TRANSFER_SAFE = "transfer-safe"
CONCURRENT_READ_SAFE = "concurrent-read-safe"


class SafetyObligations:
  """
  Accumulator of the two safety sets.

  Attributes:
      transfer (Set[str]): Types that must be transfer-safe.
      concurrent_read (Set[str]): Types that must be concurrent-read-safe.
  """

  def __init__(self, tracer: TraceLogger):
    self.transfer: Set[str] = set()
    self.concurrent_read: Set[str] = set()
    self._tracer = tracer

  def require_transfer(self, ty: str, reason: str) -> None:
    if ty not in self.transfer:
      self.transfer.add(ty)
      self._tracer.log_obligation(ty, TRANSFER_SAFE, reason)

  def require_concurrent_read(self, ty: str, reason: str) -> None:
    if ty not in self.concurrent_read:
      self.concurrent_read.add(ty)
      self._tracer.log_obligation(ty, CONCURRENT_READ_SAFE, reason)

  def frozen(self) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """
    Snapshot of both sets.

    Returns:
        Tuple of (transfer-safe, concurrent-read-safe) frozensets.
    """
    return frozenset(self.transfer), frozenset(self.concurrent_read)
