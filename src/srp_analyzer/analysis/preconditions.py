"""
Input Graph Preconditions.

The analysis assumes the structural validator already rejected malformed
applications; on a graph that breaks those guarantees its result is
undefined. This module re-checks the guarantees so that a broken upstream
shows up as a clear contract violation instead of nonsensical metadata.

The check is meant for development runs only. The engine calls it when
`AnalyzerConfig.check_preconditions` is enabled, which defaults to
``__debug__`` (off under ``python -O``).

Checked guarantees:
1.  Every accessed resource is declared.
2.  No resource is exclusively accessed from more than one core.
3.  No resource is accessed both exclusively and shared.
4.  Late resources are never accessed from ``init``.
5.  Late-resource claims: only late names, no double claims, at most one
    ``init`` takes the rest, and nothing is left unclaimed.
6.  Every spawn/schedule target is a declared software task.
7.  No interrupt is bound twice on one core.
8.  Every context runs on a core in ``[0, cores)``.
"""

from collections import defaultdict
from typing import Dict, List, Set, Tuple

from srp_analyzer.enums import Access
from srp_analyzer.graph.contexts import iter_contexts
from srp_analyzer.graph.schema import App


class ContractViolation(AssertionError):
  """
  Raised when the input graph breaks a guarantee of the validator.

  Attributes:
      problems (List[str]): Every violated guarantee, one message each.
  """

  def __init__(self, problems: List[str]):
    self.problems = problems
    super().__init__("Input graph violates analysis preconditions:\n" + "\n".join(f"- {p}" for p in problems))


def collect_violations(app: App) -> List[str]:
  """
  Lists every precondition the input graph breaks.

  Args:
      app: The input graph.

  Returns:
      List[str]: Human readable problems; empty when the graph is valid.
  """
  problems: List[str] = []
  late = app.late_resources

  exclusive_cores: Dict[str, Set[int]] = defaultdict(set)
  modes: Dict[str, Set[Access]] = defaultdict(set)

  for ctx in iter_contexts(app):
    if not 0 <= ctx.core < app.cores:
      problems.append(f"{ctx.kind.value} '{ctx.name}' runs on core {ctx.core}, but there are {app.cores} core(s)")

    for name, access in ctx.resources.items():
      if name not in app.resources:
        problems.append(f"{ctx.name} accesses undeclared resource '{name}'")
        continue
      modes[name].add(access)
      if access.is_exclusive():
        exclusive_cores[name].add(ctx.core)
      if ctx.is_init and name in late:
        problems.append(f"late resource '{name}' is accessed from init on core {ctx.core}")

    for target in ctx.spawn + ctx.schedule:
      if target not in app.software_tasks:
        problems.append(f"{ctx.name} sends messages to undeclared software task '{target}'")

  for name, cores in exclusive_cores.items():
    if len(cores) > 1:
      problems.append(f"resource '{name}' is exclusively accessed from cores {sorted(cores)}")

  for name, seen in modes.items():
    if len(seen) > 1:
      problems.append(f"resource '{name}' is accessed both exclusively and shared")

  problems.extend(_claim_violations(app))
  problems.extend(_binding_violations(app))
  return problems


def _claim_violations(app: App) -> List[str]:
  problems: List[str] = []
  late = app.late_resources
  claimed_by: Dict[str, int] = {}
  rest_cores: List[int] = []

  for init in sorted(app.inits, key=lambda i: i.core):
    if not init.late:
      rest_cores.append(init.core)
      continue
    for name in init.late:
      if name not in late:
        problems.append(f"init on core {init.core} claims '{name}', which is not a late resource")
      elif name in claimed_by:
        problems.append(f"late resource '{name}' is claimed by cores {claimed_by[name]} and {init.core}")
      else:
        claimed_by[name] = init.core

  if late and len(rest_cores) > 1:
    problems.append(f"init routines on cores {rest_cores} all take the remaining late resources")

  if not rest_cores:
    unclaimed = sorted(set(late) - set(claimed_by))
    if unclaimed:
      problems.append(f"late resources {unclaimed} are never initialized")

  return problems


def _binding_violations(app: App) -> List[str]:
  problems: List[str] = []
  seen: Dict[Tuple[int, str], str] = {}
  for name, task in app.hardware_tasks.items():
    key = (task.core, task.binds)
    if key in seen:
      problems.append(f"'{task.binds}' on core {task.core} is bound by both '{seen[key]}' and '{name}'")
    else:
      seen[key] = name
  return problems


def check_preconditions(app: App) -> None:
  """
  Raises if the input graph breaks any precondition.

  Args:
      app: The input graph.

  Raises:
      ContractViolation: Listing every problem found.
  """
  problems = collect_violations(app)
  if problems:
    raise ContractViolation(problems)
