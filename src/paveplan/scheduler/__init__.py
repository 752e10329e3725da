"""Scheduler package - critical path, timeline layout and interactive edits.

Leaves first:
- dates: whole-day interval arithmetic
- graph: dependency graph, topological order, cycle detection
- critical_path: forward/backward pass and slack
- layout: time-to-pixel mapping
- engine: memoised derived state plus reschedule/dependency mutations
- interaction: two-phase drag and link gestures over the engine

Main entry points:
- ScheduleEngine: holds a ProjectSchedule and serves analysis and layout
- CriticalPathAnalyzer: pure analysis over a task list
- TimelineLayout: pure layout over a task list
"""

from .config import LayoutConfig
from .core import (
    CriticalPathResult,
    DependencyLink,
    MilestoneMarker,
    ScheduleLayout,
    TaskBox,
    TaskTiming,
)
from .critical_path import CriticalPathAnalyzer, compute_critical_path
from .engine import ScheduleEngine
from .graph import DependencyGraph
from .interaction import DragReschedule, LinkDrag
from .layout import TimelineLayout

__all__ = [
    # Core dataclasses
    "TaskTiming",
    "CriticalPathResult",
    "TaskBox",
    "MilestoneMarker",
    "DependencyLink",
    "ScheduleLayout",
    # Configuration
    "LayoutConfig",
    # Computation
    "DependencyGraph",
    "CriticalPathAnalyzer",
    "compute_critical_path",
    "TimelineLayout",
    # Engine and gestures
    "ScheduleEngine",
    "DragReschedule",
    "LinkDrag",
]
