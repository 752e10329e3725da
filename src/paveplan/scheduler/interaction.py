"""Two-phase pointer gestures on the timeline.

Each gesture only accumulates pointer state while it is in progress. The
engine sees a single validated mutation when the pointer is released, so no
half-finished drag is ever applied or persisted.
"""

from datetime import date

from paveplan.logger import get_logger
from paveplan.models import TaskId

from .dates import pixels_to_days, shift_interval
from .engine import ScheduleEngine

logger = get_logger()


class DragReschedule:
    """Drag a task bar sideways to move it by whole days."""

    def __init__(self, engine: ScheduleEngine):
        self.engine = engine
        self.task_id: TaskId | None = None
        self.delta_x = 0.0
        self._press_x = 0.0
        self._pixels_per_day = 1.0

    @property
    def active(self) -> bool:
        """True between begin() and commit()/cancel()."""
        return self.task_id is not None

    def begin(self, task_id: TaskId, pointer_x: float = 0.0) -> None:
        """Start dragging a task; the scale is frozen for the whole gesture."""
        if self.active:
            raise ValueError(f"A drag of task {self.task_id!r} is already in progress")
        self.engine.project.require_task(task_id)

        self.task_id = task_id
        self._press_x = pointer_x
        self._pixels_per_day = self.engine.layout().pixels_per_day
        self.delta_x = 0.0

    def move(self, pointer_x: float) -> int:
        """Record the pointer position; returns the pending shift in days."""
        self._require_active()
        self.delta_x = pointer_x - self._press_x
        return self.pending_days

    @property
    def pending_days(self) -> int:
        """Whole-day shift implied by the current displacement."""
        if not self.active:
            return 0
        return pixels_to_days(self.delta_x, self._pixels_per_day)

    def preview(self) -> tuple[date, date]:
        """Dates the task would get if released now (nothing is changed)."""
        task_id = self._require_active()
        task = self.engine.project.require_task(task_id)
        return shift_interval(task.start, task.end, self.pending_days)

    def commit(self) -> tuple[date, date] | None:
        """Apply the drag; returns the new dates, or None when it rounds to zero days."""
        task_id = self._require_active()
        days = self.pending_days
        new_dates = self.preview()
        self._reset()

        if days == 0:
            logger.debug(f"Drag of {task_id!r} released without moving a full day")
            return None

        self.engine.reschedule(task_id, *new_dates)
        return new_dates

    def cancel(self) -> None:
        """Abandon the drag without touching the task."""
        self._reset()

    def _require_active(self) -> TaskId:
        if self.task_id is None:
            raise ValueError("No drag in progress")
        return self.task_id

    def _reset(self) -> None:
        self.task_id = None
        self.delta_x = 0.0
        self._press_x = 0.0


class LinkDrag:
    """Drag from one bar's trailing edge onto another bar to add a dependency.

    On release over a different task, the task the drag started from gains
    the released-on task as a dependency.
    """

    def __init__(self, engine: ScheduleEngine):
        self.engine = engine
        self.source_id: TaskId | None = None
        self.anchor: tuple[float, float] | None = None
        self.pointer: tuple[float, float] | None = None

    @property
    def active(self) -> bool:
        """True between begin() and release()/cancel()."""
        return self.source_id is not None

    @property
    def rubber_band(self) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """Line from the anchor to the pointer while linking, for drawing."""
        if self.anchor is None or self.pointer is None:
            return None
        return (self.anchor, self.pointer)

    def begin(self, source_id: TaskId) -> None:
        """Press on a bar's trailing edge."""
        if self.active:
            raise ValueError(f"A link from task {self.source_id!r} is already in progress")
        box = self.engine.layout().box_for(source_id)
        if box is None:
            self.engine.project.require_task(source_id)
            raise ValueError(f"Task {source_id!r} has no bar to link from")

        self.source_id = source_id
        self.anchor = (box.trailing_x, box.center_y)
        self.pointer = self.anchor

    def move(self, x: float, y: float) -> None:
        """Track the pointer."""
        if not self.active:
            raise ValueError("No link in progress")
        self.pointer = (x, y)

    def release(self, target_id: TaskId | None) -> bool:
        """Finish the gesture over ``target_id`` (None for empty space).

        Returns:
            True if a dependency was added
        """
        if not self.active:
            raise ValueError("No link in progress")
        source_id = self.source_id
        self.cancel()

        if target_id is None or target_id == source_id:
            return False

        source = self.engine.project.require_task(source_id)
        if target_id in source.dependencies:
            logger.debug(f"{source_id!r} already depends on {target_id!r}")
            return False

        self.engine.add_dependency(source_id, target_id)
        return True

    def cancel(self) -> None:
        """Abandon the link without touching any task."""
        self.source_id = None
        self.anchor = None
        self.pointer = None
