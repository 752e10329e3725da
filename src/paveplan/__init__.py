"""Schedule engine for paving project boards: Gantt layout and critical path."""

__version__ = "0.3.0"
