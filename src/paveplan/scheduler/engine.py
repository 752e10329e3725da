"""Schedule engine: memoised analysis and layout plus validated mutations."""

from collections.abc import Callable, Iterable
from datetime import date

from paveplan.exceptions import MissingReferenceError, SelfDependencyError
from paveplan.logger import get_logger
from paveplan.models import ProjectSchedule, TaskId, TaskStatus

from .config import LayoutConfig
from .core import CriticalPathResult, ScheduleLayout, TaskTiming
from .critical_path import CriticalPathAnalyzer
from .dates import shift_interval, validate_interval
from .graph import DependencyGraph
from .layout import TimelineLayout

logger = get_logger()

RescheduleListener = Callable[[TaskId, date, date], None]
DependenciesListener = Callable[[TaskId, list[TaskId]], None]
StatusListener = Callable[[TaskId, TaskStatus], None]


class ScheduleEngine:
    """Owns the derived state for one project's task collection.

    The ``ProjectSchedule`` itself belongs to the caller. The engine only
    memoises the critical-path analysis and the layout, and drops both
    whenever a mutation goes through it or ``invalidate()`` is called after
    an external refresh.

    Mutations are validated before anything changes. Once applied locally,
    registered listeners are told about the change (typically to write it
    through to storage); recomputation never waits for them.
    """

    def __init__(
        self,
        project: ProjectSchedule,
        layout_config: LayoutConfig | None = None,
        *,
        today: date | None = None,
    ):
        """Initialize the engine.

        Args:
            project: Task and milestone collection to work on
            layout_config: Chart dimensions (defaults when omitted)
            today: Anchor date for laying out an empty project
        """
        self.project = project
        self.today = today
        self.timeline = TimelineLayout(layout_config)
        self.analyzer = CriticalPathAnalyzer()
        self._reschedule_listeners: list[RescheduleListener] = []
        self._dependency_listeners: list[DependenciesListener] = []
        self._status_listeners: list[StatusListener] = []
        self._analysis: CriticalPathResult | None = None
        self._layout: ScheduleLayout | None = None

    # Listeners

    def add_reschedule_listener(self, listener: RescheduleListener) -> None:
        """Call ``listener(task_id, new_start, new_end)`` after each reschedule."""
        self._reschedule_listeners.append(listener)

    def add_dependencies_listener(self, listener: DependenciesListener) -> None:
        """Call ``listener(task_id, dependency_ids)`` after each dependency edit."""
        self._dependency_listeners.append(listener)

    def add_status_listener(self, listener: StatusListener) -> None:
        """Call ``listener(task_id, status)`` after each status change."""
        self._status_listeners.append(listener)

    # Derived state

    @property
    def is_stale(self) -> bool:
        """True when the next read will recompute."""
        return self._analysis is None or self._layout is None

    def invalidate(self) -> None:
        """Drop memoised results (call after changing the project externally)."""
        self._analysis = None
        self._layout = None

    def refresh(self, project: ProjectSchedule) -> None:
        """Swap in a freshly loaded project and invalidate."""
        self.project = project
        self.invalidate()

    def analysis(self) -> CriticalPathResult:
        """Critical-path analysis of the current snapshot."""
        if self._analysis is None:
            self._analysis = self.analyzer.analyze(self.project.tasks)
        return self._analysis

    def critical_path(self) -> frozenset[TaskId]:
        """IDs of the zero-slack tasks."""
        return self.analysis().critical_ids

    def timing(self, task_id: TaskId) -> TaskTiming:
        """Earliest/latest values for one task."""
        timings = self.analysis().timings
        if task_id not in timings:
            raise MissingReferenceError(f"Unknown task: {task_id!r}")
        return timings[task_id]

    def layout(self) -> ScheduleLayout:
        """Timeline layout of the current snapshot."""
        if self._layout is None:
            self._layout = self.timeline.compute(
                self.project.tasks, self.project.milestones, today=self.today
            )
        return self._layout

    # Mutations

    def reschedule(self, task_id: TaskId, new_start: date, new_end: date) -> None:
        """Replace a task's declared dates.

        Dependents keep their own declared dates; only their computed
        earliest/latest values move on the next read.

        Raises:
            MissingReferenceError: If the task does not exist
            InvalidIntervalError: If ``new_end`` is before ``new_start``
        """
        task = self.project.require_task(task_id)
        validate_interval(new_start, new_end, what=f"Task {task_id!r}")

        if (task.start, task.end) == (new_start, new_end):
            logger.debug(f"Reschedule of {task_id!r} is a no-op")
            return

        logger.changes(
            f"Rescheduled {task_id!r}: {task.start}..{task.end} -> {new_start}..{new_end}"
        )
        task.start = new_start
        task.end = new_end
        self.invalidate()

        for listener in self._reschedule_listeners:
            listener(task_id, new_start, new_end)

    def shift_task(self, task_id: TaskId, days: int) -> None:
        """Move a task by whole days, keeping its duration."""
        task = self.project.require_task(task_id)
        new_start, new_end = shift_interval(task.start, task.end, days)
        self.reschedule(task_id, new_start, new_end)

    def set_dependencies(self, task_id: TaskId, dependency_ids: Iterable[TaskId]) -> None:
        """Replace a task's dependency set.

        Duplicates are dropped, first occurrence wins.

        Raises:
            MissingReferenceError: If the task or any dependency does not exist
            SelfDependencyError: If the task is listed as its own dependency
            CircularDependencyError: If the new set would close a cycle
        """
        task = self.project.require_task(task_id)
        new_deps = list(dict.fromkeys(dependency_ids))

        known_ids = self.project.get_all_ids()
        for dep_id in new_deps:
            if dep_id == task_id:
                raise SelfDependencyError(f"Task {task_id!r} cannot depend on itself")
            if dep_id not in known_ids:
                raise MissingReferenceError(
                    f"Task {task_id!r} cannot depend on unknown task: {dep_id!r}"
                )

        DependencyGraph(self.project.tasks).with_dependencies(
            task_id, new_deps
        ).topological_order()

        if task.dependencies == new_deps:
            logger.debug(f"Dependency edit of {task_id!r} is a no-op")
            return

        logger.changes(f"Dependencies of {task_id!r}: {task.dependencies} -> {new_deps}")
        task.dependencies = new_deps
        self.invalidate()

        for listener in self._dependency_listeners:
            listener(task_id, list(new_deps))

    def add_dependency(self, task_id: TaskId, dependency_id: TaskId) -> None:
        """Append one dependency (no-op when already present)."""
        task = self.project.require_task(task_id)
        self.set_dependencies(task_id, [*task.dependencies, dependency_id])

    def set_status(self, task_id: TaskId, status: str | TaskStatus) -> None:
        """Move a task to another board column.

        Status does not take part in the analysis or the layout, so the
        memoised results are kept.

        Raises:
            MissingReferenceError: If the task does not exist
            ValidationError: If ``status`` is not a known column
        """
        task = self.project.require_task(task_id)
        new_status = TaskStatus.parse(status)

        if task.status == new_status:
            logger.debug(f"Status of {task_id!r} is already {new_status.value}")
            return

        logger.changes(f"Status of {task_id!r}: {task.status.value} -> {new_status.value}")
        task.status = new_status

        for listener in self._status_listeners:
            listener(task_id, new_status)
