"""Mermaid Gantt chart rendering for a project schedule."""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

from .config import GanttConfig
from .models import Task, TaskStatus

if TYPE_CHECKING:
    from .models import Milestone, TaskId
    from .scheduler.engine import ScheduleEngine


class GanttRenderer:
    """Render tasks and milestones as a Mermaid ``gantt`` block.

    Bars use declared dates. Tags come from the board status (``done``,
    ``active``) and from the critical-path analysis (``crit``).
    """

    def __init__(self, engine: ScheduleEngine, config: GanttConfig | None = None):
        self.engine = engine
        self.config = config or GanttConfig()

    def generate_mermaid(self, *, title: str | None = None, today: date | None = None) -> str:
        """Generate the chart.

        Args:
            title: Chart title (config title when omitted)
            today: Date for the today marker; no marker when None or disabled

        Returns:
            Mermaid gantt chart syntax as a string
        """
        project = self.engine.project
        critical = self.engine.critical_path()

        lines = self._build_header(title or self.config.title, today)
        lines.append("")

        for task in project.tasks:
            self._add_task(lines, task, task.id in critical)

        if project.milestones:
            lines.append("")
            for milestone in project.milestones:
                self._add_milestone(lines, milestone)

        return "\n".join(lines)

    def _build_header(self, title: str, today: date | None) -> list[str]:
        lines = [
            "gantt",
            f"    title {title}",
            "    dateFormat YYYY-MM-DD",
        ]
        if self.config.tick_interval:
            lines.append(f"    tickInterval {self.config.tick_interval}")
        if self.config.axis_format:
            lines.append(f"    axisFormat {self.config.axis_format}")
        if self.config.show_today_marker and today is not None:
            lines.append(f"    todayMarker {today.isoformat()}")
        return lines

    def _add_task(self, lines: list[str], task: Task, is_critical: bool) -> None:
        mermaid_id = _mermaid_id("task", task.id)
        label = self._task_label(task)
        start_str = task.start.isoformat()

        if task.deadline is not None and task.end > task.deadline:
            lines.append(
                f"    {_escape_label(task.name)} Deadline :milestone, crit, "
                f"{mermaid_id}_deadline, {task.deadline.isoformat()}, 0d"
            )

        if task.duration_days == 0:
            crit = "crit, " if is_critical else ""
            lines.append(f"    {label} :{crit}milestone, {mermaid_id}, {start_str}, 0d")
            return

        tags = self._task_tags(task, is_critical)
        tags_str = ", ".join(tags) + ", " if tags else ""
        lines.append(f"    {label} :{tags_str}{mermaid_id}, {start_str}, {task.duration_days}d")

    def _add_milestone(self, lines: list[str], milestone: Milestone) -> None:
        mermaid_id = _mermaid_id("milestone", milestone.id)
        lines.append(
            f"    {_escape_label(milestone.name)} :milestone, {mermaid_id}, "
            f"{milestone.date.isoformat()}, 0d"
        )

    def _task_label(self, task: Task) -> str:
        label = _escape_label(task.name)
        if task.assigned_to:
            label += f" ({_escape_label(task.assigned_to)})"
        return label

    def _task_tags(self, task: Task, is_critical: bool) -> list[str]:
        tags: list[str] = []
        if is_critical:
            tags.append("crit")
        if task.status == TaskStatus.DONE:
            tags.append("done")
        elif task.status == TaskStatus.IN_PROGRESS:
            tags.append("active")
        return tags


def _mermaid_id(prefix: str, record_id: TaskId) -> str:
    """Mermaid task IDs must be plain identifiers."""
    return f"{prefix}_{re.sub(r'[^A-Za-z0-9_]', '_', str(record_id))}"


def _escape_label(label: str) -> str:
    """Colons and hashes end a Mermaid task label; drop them."""
    return label.replace(":", "").replace("#", "").strip()


def wrap_markdown(chart: str) -> str:
    """Fence a chart for embedding in a markdown file."""
    return f"```mermaid\n{chart}\n```\n"
