"""Project loading with the full validation pipeline."""

from __future__ import annotations

from pathlib import Path

from .exceptions import MissingReferenceError, ValidationError
from .logger import get_logger
from .models import ProjectSchedule
from .parser import ProjectParser, link_milestones
from .scheduler.dates import validate_interval
from .scheduler.graph import DependencyGraph

logger = get_logger()


def load_project(path: Path | str) -> ProjectSchedule:
    """Load and validate a project file.

    Steps:
    1. YAML parsing and schema validation
    2. Milestone link resolution (task -> milestone becomes bidirectional)
    3. Validation (unique IDs, intervals, references, cycles)

    Args:
        path: Path to the project YAML file

    Returns:
        Fully validated ProjectSchedule
    """
    path = Path(path)

    project = ProjectParser().parse_file(path)
    link_milestones(project)
    validate_project(project)

    logger.debug(
        f"Loaded {path}: {len(project.tasks)} tasks, {len(project.milestones)} milestones"
    )
    return project


def validate_project(project: ProjectSchedule) -> None:
    """Validate a project for ID uniqueness, intervals, references and cycles."""
    _check_unique_ids(project)

    for task in project.tasks:
        validate_interval(task.start, task.end, what=f"Task {task.id!r}")

    milestone_ids = {milestone.id for milestone in project.milestones}
    task_ids = project.get_all_ids()

    for task in project.tasks:
        if task.milestone_id is not None and task.milestone_id not in milestone_ids:
            raise MissingReferenceError(
                f"Task {task.id!r} is linked to unknown milestone: {task.milestone_id!r}"
            )

    for milestone in project.milestones:
        for linked_id in milestone.linked_tasks:
            if linked_id not in task_ids:
                raise MissingReferenceError(
                    f"Milestone {milestone.id!r} links unknown task: {linked_id!r}"
                )

    graph = DependencyGraph(project.tasks)
    graph.check_references()
    graph.topological_order()


def _check_unique_ids(project: ProjectSchedule) -> None:
    """Reject repeated task or milestone IDs."""
    seen: set[object] = set()
    for task in project.tasks:
        if task.id in seen:
            raise ValidationError(f"Duplicate task ID: {task.id!r}")
        seen.add(task.id)

    seen.clear()
    for milestone in project.milestones:
        if milestone.id in seen:
            raise ValidationError(f"Duplicate milestone ID: {milestone.id!r}")
        seen.add(milestone.id)
