"""Time-to-pixel layout for the timeline chart."""

from collections.abc import Sequence
from datetime import date

from paveplan.models import Milestone, Task

from .config import LayoutConfig
from .core import DependencyLink, MilestoneMarker, ScheduleLayout, TaskBox
from .dates import days_between


class TimelineLayout:
    """Maps task and milestone dates onto a fixed-width chart.

    All tasks share one origin (the earliest declared start) and one scale
    (``chart_width`` spread over the earliest-start to latest-end span).
    Rows follow the input order.
    """

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()

    def row_pitch(self) -> float:
        """Vertical distance between consecutive rows."""
        return self.config.task_height + self.config.task_spacing

    def chart_height(self, rows: int) -> float:
        """Total chart height for a number of rows."""
        return rows * self.row_pitch() + self.config.header_margin

    def compute_scale(
        self, tasks: Sequence[Task], today: date | None = None
    ) -> tuple[date, float]:
        """Return ``(origin, pixels_per_day)`` for a task collection.

        An empty collection anchors at ``today`` (the system date when not
        given). A zero-day span uses the whole chart width per day so that
        every bar collapses onto a single column instead of dividing by zero.
        """
        if not tasks:
            return (today or date.today(), self.config.chart_width)  # noqa: DTZ011

        origin = min(task.start for task in tasks)
        latest = max(task.end for task in tasks)
        total_days = days_between(origin, latest)
        if total_days == 0:
            return (origin, self.config.chart_width)
        return (origin, self.config.chart_width / total_days)

    def compute(
        self,
        tasks: Sequence[Task],
        milestones: Sequence[Milestone] = (),
        today: date | None = None,
    ) -> ScheduleLayout:
        """Lay out bars, milestone lines and dependency connectors."""
        origin, pixels_per_day = self.compute_scale(tasks, today)

        boxes: list[TaskBox] = []
        for row, task in enumerate(tasks):
            boxes.append(
                TaskBox(
                    task_id=task.id,
                    row=row,
                    x=days_between(origin, task.start) * pixels_per_day,
                    y=row * self.row_pitch() + self.config.header_margin,
                    width=task.duration_days * pixels_per_day,
                    height=self.config.task_height,
                )
            )

        markers = [
            MilestoneMarker(
                milestone_id=milestone.id,
                name=milestone.name,
                x=days_between(origin, milestone.date) * pixels_per_day,
            )
            for milestone in milestones
        ]

        return ScheduleLayout(
            origin=origin,
            pixels_per_day=pixels_per_day,
            chart_width=self.config.chart_width,
            chart_height=self.chart_height(len(tasks)),
            label_width=self.config.label_width,
            boxes=boxes,
            milestones=markers,
            links=self._connectors(tasks, boxes),
        )

    def _connectors(self, tasks: Sequence[Task], boxes: list[TaskBox]) -> list[DependencyLink]:
        """One connector per dependency edge; edges to unknown tasks are skipped."""
        box_by_id = {box.task_id: box for box in boxes}
        links: list[DependencyLink] = []

        for task in tasks:
            target = box_by_id[task.id]
            for dep_id in dict.fromkeys(task.dependencies):
                source = box_by_id.get(dep_id)
                if source is None:
                    continue
                links.append(
                    DependencyLink(
                        from_id=dep_id,
                        to_id=task.id,
                        start=(source.trailing_x, source.center_y),
                        end=(target.x, target.center_y),
                    )
                )

        return links
