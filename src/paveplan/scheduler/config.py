"""Configuration classes for the schedule engine."""

from pydantic import BaseModel, Field


class LayoutConfig(BaseModel):
    """Dimensions of the timeline chart, in abstract chart units."""

    chart_width: float = Field(default=1000.0, gt=0)  # Pixel budget for the full date span
    task_height: float = Field(default=30.0, gt=0)
    task_spacing: float = Field(default=10.0, ge=0)  # Gap between rows
    header_margin: float = Field(default=50.0, ge=0)  # Space above the first row
    label_width: float = Field(default=150.0, ge=0)  # Name column left of the bars
