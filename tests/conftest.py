"""Pytest configuration and fixtures for paveplan tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, timedelta
from pathlib import Path

import pytest

from paveplan import context
from paveplan.logger import reset_logger
from paveplan.models import Milestone, ProjectSchedule, Task, TaskId, TaskStatus

DAY0 = date(2025, 5, 1)


def day(n: int) -> date:
    """Date ``n`` days after DAY0; lets tests speak in "Day 0", "Day 5"."""
    return DAY0 + timedelta(days=n)


def make_task(
    task_id: TaskId,
    start: int,
    end: int,
    *dependencies: TaskId,
    status: TaskStatus = TaskStatus.TO_DO,
    name: str | None = None,
) -> Task:
    """Create a task spanning Day ``start`` to Day ``end``.

    Example:
        make_task("c", 0, 1, "a", "b")  # c depends on a and b
    """
    return Task(
        id=task_id,
        name=name or f"Task {task_id}",
        start=day(start),
        end=day(end),
        dependencies=list(dependencies),
        status=status,
    )


@pytest.fixture(autouse=True)
def clean_state() -> Iterator[None]:
    """Reset the logger and CLI context between tests."""
    reset_logger()
    context.set_config_path(None)
    context.set_as_of(None)
    yield
    reset_logger()
    context.set_config_path(None)
    context.set_as_of(None)


@pytest.fixture
def fan_in_project() -> ProjectSchedule:
    """A (0-2) and B (0-5) both feed C (duration 1), plus a milestone."""
    return ProjectSchedule(
        name="Fan In",
        tasks=[
            make_task("a", 0, 2),
            make_task("b", 0, 5),
            make_task("c", 0, 1, "a", "b"),
        ],
        milestones=[Milestone(id="m1", name="Inspection", date=day(5), linked_tasks=["c"])],
    )


PROJECT_YAML = """\
# Oak Street resurfacing
project:
  id: 12
  name: Oak Street Resurface
milestones:
  - id: 1
    name: Base inspected
    date: 2025-05-06
    linked_tasks: []
tasks:
  - id: 1
    name: Mill surface
    start: 2025-05-01
    end: 2025-05-03
    status: Done
    dependencies: []
  - id: 2
    name: Repair base
    start: 2025-05-01
    end: 2025-05-05
    status: In Progress
    dependencies: [1]  # base after milling
    milestone_id: 1
    assigned_to: Crew A
  - id: 3
    name: Pave
    start: 2025-05-07
    end: 2025-05-09
    dependencies: [2]
    deadline: 2025-05-08
  - id: 4
    name: Stripe
    start: 2025-05-01
    end: 2025-05-02
"""


@pytest.fixture
def project_file(tmp_path: Path) -> Path:
    """A valid project file on disk."""
    path = tmp_path / "project.yaml"
    path.write_text(PROJECT_YAML, encoding="utf-8")
    return path
