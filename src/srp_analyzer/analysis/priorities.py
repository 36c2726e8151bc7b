"""
Priority Compression.

Optional pre-pass that removes gaps between task priorities. If the user
declared task priorities ``1, 3, 6`` on a core they are renumbered ``1, 2, 3``,
preserving their order. The renumbering is done per core: the priorities of
one core have no effect on the scheduling of another.

``idle`` keeps priority 0 and ``init`` stays unprioritized.
"""

from typing import Dict, Set

from srp_analyzer.graph.schema import App


def priority_map(app: App, core: int) -> Dict[int, int]:
  """
  Builds the compression map of one core.

  Args:
      app: The input graph.
      core: Core whose task priorities are compressed.

  Returns:
      Dict[int, int]: Declared priority to compressed priority. Empty if the
      core runs no tasks.
  """
  priorities: Set[int] = {task.priority for task in app.hardware_tasks.values() if task.core == core}
  priorities |= {task.priority for task in app.software_tasks.values() if task.core == core}
  return {declared: index for index, declared in enumerate(sorted(priorities), start=1)}


def compress_priorities(app: App) -> App:
  """
  Returns a copy of `app` whose task priorities have no gaps on any core.

  Args:
      app: The input graph. Not modified.

  Returns:
      App: A new, equally immutable graph.
  """
  maps = {core: priority_map(app, core) for core in range(app.cores)}

  hardware_tasks = {
    name: task.model_copy(update={"priority": maps[task.core][task.priority]})
    for name, task in app.hardware_tasks.items()
  }
  software_tasks = {
    name: task.model_copy(update={"priority": maps[task.core][task.priority]})
    for name, task in app.software_tasks.items()
  }
  # model_copy skips validation, which would leave plain dicts in the new graph.
  return App.model_validate({**dict(app), "hardware_tasks": hardware_tasks, "software_tasks": software_tasks})


def effective_priorities(app: App) -> Dict[str, int]:
  """
  Static priority of every hardware and software task.

  Args:
      app: The input graph.

  Returns:
      Dict[str, int]: Task name to priority.
  """
  priorities = {name: task.priority for name, task in app.hardware_tasks.items()}
  priorities.update({name: task.priority for name, task in app.software_tasks.items()})
  return priorities
