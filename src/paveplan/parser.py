"""YAML parser for project files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Milestone, ProjectSchedule, Task, TaskStatus
from .schemas import ProjectFileSchema


def link_milestones(project: ProjectSchedule) -> None:
    """Make milestone links bidirectional.

    A task naming a milestone in ``milestone_id`` is added to that
    milestone's ``linked_tasks`` if it is not already listed. Unknown
    milestone IDs are left for validation to report.
    """
    milestones = {milestone.id: milestone for milestone in project.milestones}
    for task in project.tasks:
        if task.milestone_id is None:
            continue
        milestone = milestones.get(task.milestone_id)
        if milestone is not None and task.id not in milestone.linked_tasks:
            milestone.linked_tasks.append(task.id)


class ProjectParser:
    """Parser for project YAML files.

    Only handles YAML parsing and record conversion. For loading with
    validation, use load_project() from paveplan.loader.
    """

    def parse_file(self, file_path: Path | str) -> ProjectSchedule:
        """Parse a YAML file into a ProjectSchedule."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> ProjectSchedule:
        """Convert already-loaded YAML data into a ProjectSchedule."""
        try:
            schema = ProjectFileSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project structure: {e}") from e

        tasks = [
            Task(
                id=task_data.id,
                name=task_data.name,
                start=task_data.start,
                end=task_data.end,
                dependencies=list(dict.fromkeys(task_data.dependencies)),
                status=TaskStatus.parse(task_data.status),
                milestone_id=task_data.milestone_id,
                assigned_to=task_data.assigned_to,
                deadline=task_data.deadline,
            )
            for task_data in schema.tasks
        ]

        milestones = [
            Milestone(
                id=milestone_data.id,
                name=milestone_data.name,
                date=milestone_data.date,
                linked_tasks=list(dict.fromkeys(milestone_data.linked_tasks)),
            )
            for milestone_data in schema.milestones
        ]

        return ProjectSchedule(
            name=schema.project.name,
            id=schema.project.id,
            tasks=tasks,
            milestones=milestones,
        )
