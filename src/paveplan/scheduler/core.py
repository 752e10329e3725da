"""Core dataclasses for schedule analysis and layout."""

from dataclasses import dataclass, field
from datetime import date

from paveplan.models import TaskId


@dataclass(slots=True, frozen=True)
class TaskTiming:
    """Forward/backward pass values for one task.

    These are advisory. The task's declared dates stay as they are even
    when ``earliest_start`` falls later than the declared start.
    """

    task_id: TaskId
    duration_days: int
    earliest_start: date
    earliest_finish: date
    latest_start: date
    latest_finish: date
    slack_days: int

    @property
    def is_critical(self) -> bool:
        """Zero slack (exact, no tolerance band)."""
        return self.slack_days == 0


@dataclass(slots=True, frozen=True)
class CriticalPathResult:
    """Outcome of a critical-path analysis."""

    timings: dict[TaskId, TaskTiming] = field(default_factory=dict[TaskId, TaskTiming])
    critical_ids: frozenset[TaskId] = frozenset()
    project_finish: date | None = None

    def is_critical(self, task_id: TaskId) -> bool:
        """True when the task has zero slack."""
        return task_id in self.critical_ids


@dataclass(slots=True, frozen=True)
class TaskBox:
    """Placement of one task bar in chart units."""

    task_id: TaskId
    row: int
    x: float
    y: float
    width: float
    height: float

    @property
    def center_y(self) -> float:
        """Vertical middle of the bar (where connectors attach)."""
        return self.y + self.height / 2

    @property
    def trailing_x(self) -> float:
        """Right edge of the bar."""
        return self.x + self.width


@dataclass(slots=True, frozen=True)
class MilestoneMarker:
    """Horizontal position of a milestone line."""

    milestone_id: TaskId
    name: str
    x: float


@dataclass(slots=True, frozen=True)
class DependencyLink:
    """Connector from the end of a dependency to the start of its dependent."""

    from_id: TaskId
    to_id: TaskId
    start: tuple[float, float]
    end: tuple[float, float]


@dataclass(slots=True, frozen=True)
class ScheduleLayout:
    """Complete timeline layout for one project."""

    origin: date
    pixels_per_day: float
    chart_width: float
    chart_height: float
    label_width: float  # Name column drawn left of x = 0
    boxes: list[TaskBox] = field(default_factory=list[TaskBox])
    milestones: list[MilestoneMarker] = field(default_factory=list[MilestoneMarker])
    links: list[DependencyLink] = field(default_factory=list[DependencyLink])

    @property
    def total_width(self) -> float:
        """Chart width plus the name column."""
        return self.label_width + self.chart_width

    def box_for(self, task_id: TaskId) -> TaskBox | None:
        """Bar for a task, or None if the task is not laid out."""
        for box in self.boxes:
            if box.task_id == task_id:
                return box
        return None
