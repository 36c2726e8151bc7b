"""
Tests for Priority Compression.
"""

import pytest

from srp_analyzer.analysis.ownership import Contended
from srp_analyzer.analysis.priorities import compress_priorities, effective_priorities, priority_map


def _app(make_app):
  return make_app(
    cores=2,
    hardware_tasks={
      "uart": {"binds": "UART0", "core": 0, "priority": 6},
      "timer": {"binds": "TIM2", "core": 1, "priority": 9},
    },
    software_tasks={
      "foo": {"core": 0, "priority": 3},
      "bar": {"core": 0, "priority": 3},
      "baz": {"core": 1, "priority": 4},
    },
  )


def test_priority_map_is_per_core(make_app):
  app = _app(make_app)
  assert priority_map(app, 0) == {3: 1, 6: 2}
  assert priority_map(app, 1) == {4: 1, 9: 2}


def test_compression_removes_gaps(make_app):
  app = _app(make_app)

  compressed = compress_priorities(app)

  assert effective_priorities(compressed) == {"uart": 2, "timer": 2, "foo": 1, "bar": 1, "baz": 1}


def test_compression_returns_a_new_graph(make_app):
  app = _app(make_app)

  compressed = compress_priorities(app)

  assert compressed is not app
  assert effective_priorities(app) == {"uart": 6, "timer": 9, "foo": 3, "bar": 3, "baz": 4}
  assert compressed.hardware_tasks["uart"].binds == "UART0"


def test_gapless_priorities_are_unchanged(make_app):
  app = make_app(software_tasks={"a": {"priority": 1}, "b": {"priority": 2}})
  assert effective_priorities(compress_priorities(app)) == {"a": 1, "b": 2}


def test_engine_compresses_on_request(make_app, run_analysis):
  app = make_app(
    resources={"x": {"ty": "u32", "init": "0"}},
    idles=[{"resources": {"x": "exclusive"}}],
    hardware_tasks={"uart": {"binds": "UART0", "priority": 7, "resources": {"x": "exclusive"}}},
  )

  plain = run_analysis(app)
  compressed = run_analysis(app, optimize_priorities=True)

  assert plain.ownerships["x"] == Contended(ceiling=7)
  assert compressed.ownerships["x"] == Contended(ceiling=1)
  assert compressed.task_priorities == {"uart": 1}


def test_compressed_graph_stays_read_only(make_app):
  compressed = compress_priorities(_app(make_app))

  with pytest.raises(TypeError):
    compressed.software_tasks["qux"] = compressed.software_tasks["foo"]
