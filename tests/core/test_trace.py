"""
Tests for the Tracing System.
"""

from srp_analyzer.core.tracer import TraceEventType, TraceLogger


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END
  assert events[3]["parent_id"] == p1


def test_unbalanced_end_phase_is_ignored():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_ownership_event_metadata():
  logger = TraceLogger()
  phase = logger.start_phase("Ownership")
  logger.log_ownership("x", "Owned{1}", "Contended{2}")

  event = logger.export()[-1]
  assert event["type"] == TraceEventType.OWNERSHIP_CHANGE
  assert event["parent_id"] == phase
  assert event["description"] == "x: Owned{1} -> Contended{2}"
  assert event["metadata"] == {"resource": "x", "before": "Owned{1}", "after": "Contended{2}"}


def test_obligation_and_queue_events():
  logger = TraceLogger()
  logger.log_obligation("Serial", "transfer-safe", "late resource 'serial' is used outside idle")
  logger.log_queue("timer_queue", "ceiling", 3)
  logger.log_warning("resource 'x' is never accessed")

  events = logger.export()
  assert [e["type"] for e in events] == [
    TraceEventType.SAFETY_OBLIGATION,
    TraceEventType.QUEUE_UPDATE,
    TraceEventType.ANALYSIS_WARNING,
  ]
  assert events[0]["description"] == "Serial must be transfer-safe"
  assert events[1]["description"] == "timer_queue.ceiling = 3"


def test_disabled_logger_records_nothing():
  logger = TraceLogger(enabled=False)

  phase = logger.start_phase("Ownership")
  logger.log_ownership("x", None, "Owned{0}")
  logger.end_phase()

  assert isinstance(phase, str)
  assert logger.export() == []
