"""Write-through persistence of schedule edits to the project file."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ruamel.yaml import YAML

from .exceptions import MissingReferenceError, ParseError
from .logger import get_logger

if TYPE_CHECKING:
    from .models import TaskId, TaskStatus
    from .scheduler.engine import ScheduleEngine

logger = get_logger()

# Canonical key first; the alternates are accepted on read (see schemas.TaskSchema)
_TASK_KEYS: dict[str, tuple[str, ...]] = {
    "start": ("start", "start_date"),
    "end": ("end", "end_date"),
    "dependencies": ("dependencies",),
    "status": ("status",),
}


class YamlProjectStore:
    """Applies engine mutations to a project YAML file.

    Uses ruamel.yaml round-tripping so comments, key order and the file's
    own column spellings survive each write. Only the changed fields of the
    changed task are touched.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def attach(self, engine: ScheduleEngine) -> None:
        """Register this store as the engine's persistence listener."""
        engine.add_reschedule_listener(self.save_task_dates)
        engine.add_dependencies_listener(self.save_dependencies)
        engine.add_status_listener(self.save_status)

    def save_task_dates(self, task_id: TaskId, start: date, end: date) -> None:
        """Persist a reschedule."""
        self._update_task(task_id, {"start": start, "end": end})

    def save_dependencies(self, task_id: TaskId, dependency_ids: list[TaskId]) -> None:
        """Persist a dependency edit."""
        self._update_task(task_id, {"dependencies": list(dependency_ids)})

    def save_status(self, task_id: TaskId, status: TaskStatus) -> None:
        """Persist a board column change (stored as its label)."""
        self._update_task(task_id, {"status": status.value})

    def _update_task(self, task_id: TaskId, fields: dict[str, Any]) -> None:
        yaml_rt = YAML()
        yaml_rt.preserve_quotes = True  # type: ignore[assignment]

        with self.path.open(encoding="utf-8") as f:
            data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

        records = data.get("tasks") if isinstance(data, dict) else None
        if not records:
            raise ParseError(f"No 'tasks' section found in {self.path}")

        record = next((r for r in records if r.get("id") == task_id), None)
        if record is None:
            raise MissingReferenceError(f"Task {task_id!r} not found in {self.path}")

        for field_name, value in fields.items():
            key = self._resolve_key(record, field_name)
            existing = record.get(key)
            if isinstance(value, list) and isinstance(existing, list):
                # Keep the sequence object so flow/block style is preserved
                existing.clear()
                existing.extend(value)
            else:
                record[key] = value

        with self.path.open("w", encoding="utf-8") as f:
            yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]

        logger.debug(f"Wrote {', '.join(fields)} of task {task_id!r} to {self.path}")

    @staticmethod
    def _resolve_key(record: dict[str, Any], field_name: str) -> str:
        """Pick the key the file already uses for a field."""
        candidates = _TASK_KEYS[field_name]
        for key in candidates:
            if key in record:
                return key
        return candidates[0]
