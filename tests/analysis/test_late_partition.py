"""
Tests for Late-Resource Partitioning.
"""

import pytest

from srp_analyzer.analysis.late_resources import initializer_of, partition_late_resources


def test_no_late_resources(make_app):
  app = make_app(resources={"x": {"ty": "u32", "init": "0"}}, inits=[{}])
  assert partition_late_resources(app) == {}


def test_single_init_takes_everything(make_app):
  app = make_app(resources={"a": {"ty": "A"}, "b": {"ty": "B"}, "x": {"ty": "u8", "init": "0"}}, inits=[{}])
  assert partition_late_resources(app) == {0: frozenset({"a", "b"})}


def test_late_split_across_two_cores(make_app):
  """
  Scenario: Core 0 claims [A] explicitly, core 1 claims nothing.
  Expect: Core 0 initializes {A}, core 1 takes the rest {B}.
  """
  app = make_app(
    cores=2,
    resources={"A": {"ty": "i32"}, "B": {"ty": "i32"}},
    inits=[{"core": 0, "late": ["A"]}, {"core": 1}],
  )

  partition = partition_late_resources(app)

  assert partition == {0: frozenset({"A"}), 1: frozenset({"B"})}
  assert initializer_of(partition, "A") == 0
  assert initializer_of(partition, "B") == 1


def test_explicit_claims_only(make_app):
  app = make_app(
    cores=2,
    resources={"A": {"ty": "i32"}, "B": {"ty": "i32"}},
    inits=[{"core": 1, "late": ["A"]}, {"core": 0, "late": ["B"]}],
  )
  assert partition_late_resources(app) == {0: frozenset({"B"}), 1: frozenset({"A"})}


def test_rest_core_may_end_up_empty(make_app):
  app = make_app(
    cores=2,
    resources={"A": {"ty": "i32"}},
    inits=[{"core": 0, "late": ["A"]}, {"core": 1}],
  )
  assert partition_late_resources(app) == {0: frozenset({"A"}), 1: frozenset()}


def test_early_resource_has_no_initializer(make_app):
  app = make_app(resources={"A": {"ty": "i32"}, "x": {"ty": "u8", "init": "0"}}, inits=[{}])
  partition = partition_late_resources(app)
  assert initializer_of(partition, "x") is None
  assert initializer_of(partition, "missing") is None


def test_two_rest_inits_break_the_contract(make_app):
  app = make_app(cores=2, resources={"A": {"ty": "i32"}}, inits=[{"core": 0}, {"core": 1}])
  with pytest.raises(AssertionError):
    partition_late_resources(app)
