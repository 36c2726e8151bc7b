"""
Tests for the Analysis Engine pipeline.
"""

import logging

import pytest
from pydantic import ValidationError

from srp_analyzer.analysis.locations import OwnedLocation
from srp_analyzer.analysis.ownership import CoOwned, Contended, Owned
from srp_analyzer.analysis.preconditions import ContractViolation
from srp_analyzer.config import AnalyzerConfig
from srp_analyzer.core.engine import AnalysisEngine
from srp_analyzer.core.tracer import TraceEventType


@pytest.fixture
def blinky(make_app):
  """A single-core application using every kind of context."""
  return make_app(
    resources={
      "counter": {"ty": "u32", "init": "0"},
      "led": {"ty": "Led"},
      "unused": {"ty": "u8", "init": "0"},
    },
    inits=[{"resources": {"counter": "exclusive"}, "spawn": ["blink"]}],
    idles=[{"resources": {"counter": "exclusive"}}],
    hardware_tasks={
      "tick": {"binds": "SysTick", "priority": 3, "resources": {"counter": "exclusive"}, "schedule": ["blink"]},
    },
    software_tasks={
      "blink": {"priority": 2, "capacity": 2, "inputs": ["bool"], "resources": {"led": "exclusive"}},
      "report": {"priority": 1, "resources": {"led": "exclusive"}},
    },
  )


def test_full_pipeline(blinky, run_analysis):
  analysis = run_analysis(blinky)

  assert analysis.used_cores == (0,)
  assert analysis.late_resources == {0: frozenset({"led"})}
  assert analysis.ownerships == {"counter": Contended(ceiling=3), "led": Contended(ceiling=2)}
  assert analysis.locations == {"counter": OwnedLocation(core=0), "led": OwnedLocation(core=0)}

  assert analysis.timer_queue.priority == 2
  assert analysis.timer_queue.ceiling == 3
  assert analysis.timer_queue.capacity == 2

  channel = analysis.channels[2]
  assert channel.tasks == frozenset({"blink"})
  assert channel.ceiling == 2
  assert channel.capacity == 2
  assert analysis.free_queues == {"blink": 3}

  assert analysis.transfer_safe == frozenset({"u32", "Led", "bool"})
  assert analysis.concurrent_read_safe == frozenset()
  assert analysis.initialization_barriers == {}
  assert analysis.spawn_barriers == {}
  assert analysis.task_priorities == {"tick": 3, "blink": 2, "report": 1}


def test_needs_lock(blinky, run_analysis):
  analysis = run_analysis(blinky)

  assert analysis.needs_lock("counter", 0)
  assert analysis.needs_lock("counter", 2)
  assert not analysis.needs_lock("counter", 3)
  assert not analysis.needs_lock("unused", 0)
  assert not analysis.needs_lock("missing", 1)


def test_no_lock_for_owned_resources(make_app, run_analysis):
  app = make_app(
    resources={"a": {"ty": "u8", "init": "0"}, "b": {"ty": "u8", "init": "0"}},
    software_tasks={
      "foo": {"priority": 2, "resources": {"a": "exclusive", "b": "exclusive"}},
      "bar": {"priority": 2, "resources": {"b": "exclusive"}},
    },
  )

  analysis = run_analysis(app)

  assert analysis.ownerships == {"a": Owned(priority=2), "b": CoOwned(priority=2)}
  assert not analysis.needs_lock("a", 2)
  assert not analysis.needs_lock("b", 2)


def test_empty_application(make_app, run_analysis):
  analysis = run_analysis(make_app())

  assert analysis.used_cores == ()
  assert analysis.channels == {}
  assert not analysis.timer_queue.is_used
  assert analysis.transfer_safe == frozenset()


def test_trace_disabled_by_default(blinky, run_analysis):
  assert run_analysis(blinky).trace_events == ()


def test_trace_records_every_phase(blinky, run_analysis):
  events = run_analysis(blinky, trace=True).trace_events

  phases = [e["description"] for e in events if e["type"] == TraceEventType.PHASE_START]
  assert phases == ["Preconditions", "Late Partition", "Ownership", "Resource Safety", "Timer Queue", "Channels"]

  obligations = {e["metadata"]["type"] for e in events if e["type"] == TraceEventType.SAFETY_OBLIGATION}
  assert obligations == {"u32", "Led", "bool"}


def test_dead_resources_and_tasks_are_reported(blinky, run_analysis, caplog):
  with caplog.at_level(logging.WARNING, logger="srp_analyzer"):
    events = run_analysis(blinky, trace=True).trace_events

  messages = [record.getMessage() for record in caplog.records]
  assert any("resource 'unused' is never accessed" in m for m in messages)
  assert any("software task 'report' is never spawned nor scheduled" in m for m in messages)

  warnings = [e["description"] for e in events if e["type"] == TraceEventType.ANALYSIS_WARNING]
  assert len(warnings) == 2


def test_summary_is_printed(blinky, run_analysis, captured_console):
  run_analysis(blinky)
  output = captured_console.export_text()
  assert "Analysed 1 hardware and 2 software task(s) on 1 core(s)" in output


def test_precondition_violation_stops_the_run(make_app, run_analysis):
  app = make_app(idles=[{"resources": {"ghost": "exclusive"}}])
  with pytest.raises(ContractViolation):
    run_analysis(app)


def test_preconditions_can_be_skipped(make_app):
  app = make_app(idles=[{"resources": {"ghost": "exclusive"}}])
  engine = AnalysisEngine(config=AnalyzerConfig(check_preconditions=False))

  analysis = engine.run(app)

  assert analysis.ownerships == {"ghost": Owned(priority=0)}


def test_engine_is_reusable(blinky, make_app, run_analysis):
  engine = AnalysisEngine(config=AnalyzerConfig(check_preconditions=True, trace=True))

  first = engine.run(blinky)
  engine.run(make_app())
  again = engine.run(blinky)

  assert first.transfer_safe == again.transfer_safe
  assert len(first.trace_events) == len(again.trace_events)


def test_result_is_read_only(blinky, run_analysis):
  analysis = run_analysis(blinky)
  with pytest.raises(ValidationError):
    analysis.transfer_safe = frozenset()


def test_result_dumps_to_plain_data(blinky, run_analysis):
  dumped = run_analysis(blinky).model_dump()

  assert dumped["ownerships"]["counter"] == {"kind": "contended", "ceiling": 3}
  assert dumped["timer_queue"]["priority"] == 2
  assert dumped["channels"][2]["capacity"] == 2


def test_result_containers_are_read_only(make_app, run_analysis):
  app = make_app(
    cores=2,
    inits=[{"core": 0, "spawn": ["foo"]}],
    software_tasks={"foo": {"core": 1, "priority": 1}},
  )
  analysis = run_analysis(app, trace=True)

  with pytest.raises(TypeError):
    analysis.ownerships["x"] = Owned(priority=9)
  with pytest.raises(TypeError):
    analysis.spawn_barriers[1][0] = False
  with pytest.raises(TypeError):
    analysis.trace_events[0]["type"] = None
  assert analysis.spawn_barriers == {1: {0: True}}
