"""Pydantic schemas for project YAML data."""

# No postponed annotations here: MilestoneSchema has a field named ``date``
# and must see the datetime type while the class body is evaluated.

from datetime import date
from typing import Any, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

RecordId = Union[int, str]


def _as_id_list(v: Any) -> list[Any]:
    if v is None:
        return []
    if isinstance(v, (list, tuple, set)):
        return list(v)  # type: ignore[arg-type]
    return [v]


class TaskSchema(BaseModel):
    """Schema for one task record.

    The backing store names some columns differently (``task``,
    ``start_date``, ``end_date``); both spellings are accepted.
    """

    id: RecordId
    name: str = Field(validation_alias=AliasChoices("name", "task"))
    start: date = Field(validation_alias=AliasChoices("start", "start_date"))
    end: date = Field(validation_alias=AliasChoices("end", "end_date"))
    dependencies: list[RecordId] = Field(default_factory=list)
    status: str = "To Do"
    milestone_id: RecordId | None = None
    assigned_to: str | None = None
    deadline: date | None = None

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[Any]:
        """Accept a single ID or null where a list is expected."""
        return _as_id_list(v)

    @field_validator("milestone_id", mode="before")
    @classmethod
    def zero_means_none(cls, v: Any) -> Any:
        """The board stores 0 for "no milestone"."""
        if v == 0:
            return None
        return v


class MilestoneSchema(BaseModel):
    """Schema for one milestone record."""

    id: RecordId
    name: str
    date: date
    linked_tasks: list[RecordId] = Field(default_factory=list)

    @field_validator("linked_tasks", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[Any]:
        """Accept a single ID or null where a list is expected."""
        return _as_id_list(v)


class ProjectInfoSchema(BaseModel):
    """Schema for the project header."""

    id: RecordId | None = None
    name: str = ""


class ProjectFileSchema(BaseModel):
    """Schema for an entire project file."""

    project: ProjectInfoSchema = Field(default_factory=ProjectInfoSchema)
    tasks: list[TaskSchema] = Field(default_factory=list)
    milestones: list[MilestoneSchema] = Field(default_factory=list)

    @field_validator("tasks", "milestones", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        """An empty YAML section parses as null."""
        return [] if v is None else v
