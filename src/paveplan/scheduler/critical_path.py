"""Critical-path analysis via forward and backward passes."""

from collections.abc import Sequence
from datetime import date

from paveplan.logger import checks_enabled, get_logger
from paveplan.models import Task, TaskId

from .core import CriticalPathResult, TaskTiming
from .dates import days_between, shift
from .graph import DependencyGraph

logger = get_logger()


class CriticalPathAnalyzer:
    """Computes earliest/latest dates, slack and the critical path.

    1. Topological sort (cycles are rejected)
    2. Forward pass: a task starts at its declared start or when its last
       dependency reaches its earliest finish, whichever is later
    3. Backward pass from the project finish, tightening each dependency's
       latest finish to its dependents' latest start
    4. Tasks with exactly zero slack form the critical path
    """

    def analyze(self, tasks: Sequence[Task]) -> CriticalPathResult:
        """Run the analysis over a task collection.

        Args:
            tasks: Tasks in display order; dependencies must reference tasks
                   in the same collection

        Returns:
            CriticalPathResult with per-task timings and the critical set

        Raises:
            CircularDependencyError: If the dependencies contain a cycle
            MissingReferenceError: If a dependency names an unknown task
            SelfDependencyError: If a task depends on itself
        """
        if not tasks:
            return CriticalPathResult()

        graph = DependencyGraph(tasks)
        graph.check_references()
        topo_order = graph.topological_order()

        task_dict = {task.id: task for task in tasks}
        durations = {task.id: task.duration_days for task in tasks}

        earliest_start, earliest_finish = self._forward_pass(
            task_dict, graph, topo_order, durations
        )
        project_finish = max(earliest_finish.values())
        latest_finish = self._backward_pass(graph, topo_order, durations, project_finish)

        timings: dict[TaskId, TaskTiming] = {}
        for task in tasks:
            duration = durations[task.id]
            slack = days_between(shift(earliest_start[task.id], duration), latest_finish[task.id])
            timings[task.id] = TaskTiming(
                task_id=task.id,
                duration_days=duration,
                earliest_start=earliest_start[task.id],
                earliest_finish=earliest_finish[task.id],
                latest_start=shift(latest_finish[task.id], -duration),
                latest_finish=latest_finish[task.id],
                slack_days=slack,
            )
            if checks_enabled():
                logger.checks(
                    f"  {task.id}: ES={earliest_start[task.id]} EF={earliest_finish[task.id]} "
                    f"LF={latest_finish[task.id]} slack={slack}d"
                )

        critical_ids = frozenset(t.task_id for t in timings.values() if t.is_critical)
        logger.debug(
            f"Critical path: {len(critical_ids)} of {len(tasks)} tasks, "
            f"project finish {project_finish}"
        )

        return CriticalPathResult(
            timings=timings,
            critical_ids=critical_ids,
            project_finish=project_finish,
        )

    def _forward_pass(
        self,
        tasks: dict[TaskId, Task],
        graph: DependencyGraph,
        topo_order: list[TaskId],
        durations: dict[TaskId, int],
    ) -> tuple[dict[TaskId, date], dict[TaskId, date]]:
        """Compute earliest start and finish for each task."""
        earliest_start: dict[TaskId, date] = {}
        earliest_finish: dict[TaskId, date] = {}

        for task_id in topo_order:
            start = tasks[task_id].start
            for dep_id in graph.requires[task_id]:
                start = max(start, earliest_finish[dep_id])
            earliest_start[task_id] = start
            earliest_finish[task_id] = shift(start, durations[task_id])

        return (earliest_start, earliest_finish)

    def _backward_pass(
        self,
        graph: DependencyGraph,
        topo_order: list[TaskId],
        durations: dict[TaskId, int],
        project_finish: date,
    ) -> dict[TaskId, date]:
        """Compute latest finish for each task.

        Walking the topological order in reverse guarantees a dependent's
        latest finish is final before it constrains its dependencies.
        """
        latest_finish = dict.fromkeys(topo_order, project_finish)

        for task_id in reversed(topo_order):
            latest_start = shift(latest_finish[task_id], -durations[task_id])
            for dep_id in graph.requires[task_id]:
                latest_finish[dep_id] = min(latest_finish[dep_id], latest_start)

        return latest_finish


def compute_critical_path(tasks: Sequence[Task]) -> CriticalPathResult:
    """Analyze a task collection with a default analyzer."""
    return CriticalPathAnalyzer().analyze(tasks)
