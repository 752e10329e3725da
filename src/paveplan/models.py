"""Data models for paveplan."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Union

from .exceptions import MissingReferenceError, ValidationError

# Tasks keep whatever identifier the backing store handed out (row ids are ints)
TaskId = Union[int, str]


class TaskStatus(str, Enum):
    """Board column a task sits in."""

    TO_DO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def parse(cls, value: str | TaskStatus) -> TaskStatus:
        """Parse a status label.

        Accepts the board labels ("In Progress") as well as enum-style names
        ("in_progress"), case-insensitively. Anything else is rejected.
        """
        if isinstance(value, TaskStatus):
            return value
        normalized = str(value).strip().replace("_", " ").lower()
        for status in cls:
            if normalized == status.value.lower():
                return status
        valid = ", ".join(repr(s.value) for s in cls)
        raise ValidationError(f"Unknown task status {value!r}. Valid statuses are: {valid}")

    @property
    def percent_complete(self) -> int:
        """Progress shown for a task in this status."""
        return _PERCENT_COMPLETE[self]


_PERCENT_COMPLETE = {
    TaskStatus.TO_DO: 0,
    TaskStatus.IN_PROGRESS: 50,
    TaskStatus.DONE: 100,
}


def _default_id_list() -> list[TaskId]:
    return []


@dataclass
class Task:
    """A schedulable unit of work with declared dates.

    The declared ``start``/``end`` are authoritative. Earliest/latest dates
    are derived by the critical-path pass and never written back here.
    """

    id: TaskId
    name: str
    start: date
    end: date
    dependencies: list[TaskId] = field(default_factory=_default_id_list)
    status: TaskStatus = TaskStatus.TO_DO
    milestone_id: TaskId | None = None
    assigned_to: str | None = None
    deadline: date | None = None

    @property
    def duration_days(self) -> int:
        """Whole days between declared start and end."""
        return (self.end - self.start).days

    @property
    def percent_complete(self) -> int:
        """Progress derived from the status column."""
        return self.status.percent_complete

    def is_overdue(self, today: date) -> bool:
        """True when the deadline has passed and the task is not done."""
        return (
            self.deadline is not None and self.deadline < today and self.status != TaskStatus.DONE
        )


@dataclass
class Milestone:
    """A zero-duration calendar marker.

    ``linked_tasks`` is informational; milestones never take part in the
    critical-path computation.
    """

    id: TaskId
    name: str
    date: date
    linked_tasks: list[TaskId] = field(default_factory=_default_id_list)


def _default_task_list() -> list[Task]:
    return []


def _default_milestone_list() -> list[Milestone]:
    return []


@dataclass
class ProjectSchedule:
    """All tasks and milestones of one project, in display order.

    The collection is owned by the caller. The engine reads it and applies
    its mutations in place; it never adds or removes tasks.
    """

    name: str = ""
    id: TaskId | None = None
    tasks: list[Task] = field(default_factory=_default_task_list)
    milestones: list[Milestone] = field(default_factory=_default_milestone_list)

    def get_all_ids(self) -> set[TaskId]:
        """Get all task IDs in the project."""
        return {task.id for task in self.tasks}

    def get_task_by_id(self, task_id: TaskId) -> Task | None:
        """Get a task by its ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def require_task(self, task_id: TaskId) -> Task:
        """Get a task by its ID, raising if it does not exist."""
        task = self.get_task_by_id(task_id)
        if task is None:
            raise MissingReferenceError(f"Unknown task: {task_id!r}")
        return task

    def get_milestone_by_id(self, milestone_id: TaskId) -> Milestone | None:
        """Get a milestone by its ID."""
        for milestone in self.milestones:
            if milestone.id == milestone_id:
                return milestone
        return None

    def row_of(self, task_id: TaskId) -> int:
        """Row index of a task (its position in display order)."""
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        raise MissingReferenceError(f"Unknown task: {task_id!r}")

    def get_dependents(self, task_id: TaskId) -> set[TaskId]:
        """Get IDs of all tasks that directly depend on the given task."""
        return {task.id for task in self.tasks if task_id in task.dependencies}

    def tasks_by_status(self) -> dict[TaskStatus, list[Task]]:
        """Group tasks into board columns, in column order."""
        columns: dict[TaskStatus, list[Task]] = {status: [] for status in TaskStatus}
        for task in self.tasks:
            columns[task.status].append(task)
        return columns

    def overdue_tasks(self, today: date) -> list[Task]:
        """Tasks past their deadline that are not done."""
        return [task for task in self.tasks if task.is_overdue(today)]
