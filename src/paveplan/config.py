"""Configuration file loading (paveplan_config.yaml)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from . import context
from .exceptions import ParseError, ValidationError
from .scheduler.config import LayoutConfig

CONFIG_FILENAME = "paveplan_config.yaml"


class GanttConfig(BaseModel):
    """Configuration for Mermaid Gantt output."""

    title: str = "Project Schedule"
    show_today_marker: bool = True
    axis_format: str | None = None  # Mermaid axisFormat, e.g. "%b %d"
    tick_interval: str | None = None  # Mermaid tickInterval, e.g. "1week"


class PaveplanConfig(BaseModel):
    """All settings from one config file; every section is optional."""

    layout: LayoutConfig = LayoutConfig()
    gantt: GanttConfig = GanttConfig()


def load_config(config_path: Path | str) -> PaveplanConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the config file

    Returns:
        Validated PaveplanConfig

    Raises:
        ParseError: If the config file is missing or is not valid YAML
        ValidationError: If the file is not a mapping or fails validation
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ParseError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse config {config_path}: {e}") from e

    if data is None:
        return PaveplanConfig()
    if not isinstance(data, dict):
        raise ValidationError(f"Config file {config_path} must contain a mapping")

    unknown = set(data) - set(PaveplanConfig.model_fields)
    if unknown:
        raise ValidationError(f"Unknown config sections: {', '.join(sorted(unknown))}")

    try:
        return PaveplanConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid config {config_path}: {e}") from e


def discover_config(
    project_path: Path | str | None = None,
    config_path: Path | None = None,
) -> PaveplanConfig:
    """Find and load the config, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. project file directory / paveplan_config.yaml
    4. Current directory / paveplan_config.yaml
    """
    if config_path is not None:
        return load_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config is not None:
        return load_config(ctx_config)

    candidates: list[Path] = []
    if project_path is not None:
        candidates.append(Path(project_path).parent / CONFIG_FILENAME)
    candidates.append(Path(CONFIG_FILENAME))

    for candidate in candidates:
        if candidate.exists():
            return load_config(candidate)

    return PaveplanConfig()
