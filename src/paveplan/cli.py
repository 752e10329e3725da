"""Command-line interface for paveplan."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .config import PaveplanConfig, discover_config
from .exceptions import PaveplanError
from .gantt import GanttRenderer, wrap_markdown
from .loader import load_project
from .logger import setup_logger
from .models import ProjectSchedule, TaskId
from .scheduler import LinkDrag, ScheduleEngine
from .scheduler.dates import parse_date
from .storage import YamlProjectStore

app = typer.Typer(
    name="paveplan",
    help="Critical path and timeline layout for paving project schedules",
    add_completion=False,
)

ProjectFile = Annotated[Path, typer.Argument(help="Path to the project YAML file")]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: paveplan_config.yaml)",
        ),
    ] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="As-of date (YYYY-MM-DD) for overdue checks and markers"),
    ] = None,
) -> None:
    """Global options for paveplan commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_as_of(_parse_date_option(today, "today"))


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn paveplan errors into a one-line message and exit code 1."""
    try:
        yield
    except PaveplanError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    """Parse a YYYY-MM-DD option value, exiting on bad input."""
    if date_str is None:
        return None

    parsed = parse_date(date_str)
    if parsed is None:
        typer.echo(
            f"Error: Invalid date format '{date_str}' for --{option_name}. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1)
    return parsed


def _resolve_task_id(project: ProjectSchedule, raw: str) -> TaskId:
    """Match a command-line ID against the IDs the project file uses.

    "7" finds a task stored as 7 or as "7". Unmatched values that look like
    ints come back as ints, so the error names the ID as typed.
    """
    try:
        as_int = int(raw)
    except ValueError:
        return raw
    if as_int not in project.get_all_ids() and raw in project.get_all_ids():
        return raw
    return as_int


def _open_engine(file: Path) -> tuple[ScheduleEngine, PaveplanConfig]:
    """Load a project and wrap it in an engine writing edits back to the file."""
    project = load_project(file)
    config = discover_config(file)
    engine = ScheduleEngine(project, config.layout, today=context.get_as_of())
    YamlProjectStore(file).attach(engine)
    return engine, config


@app.command()
def analyze(file: ProjectFile = Path("project.yaml")) -> None:
    """Show earliest/latest dates, slack and the critical path."""
    with _reported_errors():
        engine, _ = _open_engine(file)
        result = engine.analysis()

    project = engine.project
    typer.echo(f"Critical Path Analysis{f': {project.name}' if project.name else ''}")
    typer.echo("=" * 80)
    typer.echo(
        f"{'ID':<6} {'Task':<28} {'ES':<10} {'EF':<10} {'LS':<10} {'LF':<10} {'Slack':>5}"
    )

    for task in project.tasks:
        timing = result.timings[task.id]
        marker = " *" if timing.is_critical else ""
        typer.echo(
            f"{task.id!s:<6} {task.name[:28]:<28} {timing.earliest_start!s:<10} "
            f"{timing.earliest_finish!s:<10} {timing.latest_start!s:<10} "
            f"{timing.latest_finish!s:<10} {timing.slack_days:>5}{marker}"
        )

    typer.echo("")
    if result.project_finish is not None:
        typer.echo(f"Project finish: {result.project_finish}")
    critical_names = [task.name for task in project.tasks if result.is_critical(task.id)]
    typer.echo(f"Critical path: {', '.join(critical_names) if critical_names else '(none)'}")

    _warn_overdue(project, context.get_as_of())


def _warn_overdue(project: ProjectSchedule, today: date) -> None:
    overdue = project.overdue_tasks(today)
    if not overdue:
        return
    typer.echo("\nWarnings:", err=True)
    for task in overdue:
        typer.echo(
            f"  - Task '{task.name}' ({task.id}) is past its deadline {task.deadline} "
            f"and is {task.status.value} ({task.percent_complete}%)",
            err=True,
        )


@app.command()
def layout(file: ProjectFile = Path("project.yaml")) -> None:
    """Show bar positions and milestone lines in chart units."""
    with _reported_errors():
        engine, _ = _open_engine(file)
        chart = engine.layout()
        critical = engine.critical_path()

    typer.echo(
        f"Origin {chart.origin}, {chart.pixels_per_day:.2f} units/day, "
        f"chart {chart.chart_width:g} x {chart.chart_height:g}, "
        f"label column {chart.label_width:g} (total width {chart.total_width:g})"
    )
    for box in chart.boxes:
        marker = " critical" if box.task_id in critical else ""
        typer.echo(
            f"  row {box.row}: {box.task_id} x={box.x:.1f} y={box.y:.1f} "
            f"w={box.width:.1f} h={box.height:.1f}{marker}"
        )
    for milestone in chart.milestones:
        typer.echo(f"  milestone {milestone.milestone_id} '{milestone.name}' x={milestone.x:.1f}")


@app.command()
def gantt(
    file: ProjectFile = Path("project.yaml"),
    *,
    title: Annotated[str | None, typer.Option("--title", "-t", help="Chart title")] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output", "-o", help="Output file path (markdown files get a code fence)"
        ),
    ] = None,
) -> None:
    """Generate a Mermaid Gantt chart with critical tasks highlighted."""
    with _reported_errors():
        engine, config = _open_engine(file)
        chart = GanttRenderer(engine, config.gantt).generate_mermaid(
            title=title, today=context.get_as_of()
        )

    if output:
        if output.suffix.lower() in {".md", ".markdown"}:
            output.write_text(wrap_markdown(chart), encoding="utf-8")
        else:
            output.write_text(chart + "\n", encoding="utf-8")
        typer.echo(f"Gantt chart written to {output}")
    else:
        typer.echo(chart)


@app.command()
def reschedule(
    file: ProjectFile,
    task_id: Annotated[str, typer.Argument(help="ID of the task to move")],
    *,
    start: Annotated[str | None, typer.Option("--start", help="New start (YYYY-MM-DD)")] = None,
    end: Annotated[str | None, typer.Option("--end", help="New end (YYYY-MM-DD)")] = None,
    shift_days: Annotated[
        int | None,
        typer.Option("--shift-days", help="Move start and end by this many days"),
    ] = None,
) -> None:
    """Change a task's dates and write them back to the project file."""
    new_start = _parse_date_option(start, "start")
    new_end = _parse_date_option(end, "end")

    if shift_days is not None and (new_start or new_end):
        typer.echo("Error: Use either --shift-days or --start/--end, not both", err=True)
        raise typer.Exit(1)
    if shift_days is None and not (new_start and new_end):
        typer.echo("Error: Give both --start and --end, or --shift-days", err=True)
        raise typer.Exit(1)

    with _reported_errors():
        engine, _ = _open_engine(file)
        parsed_id = _resolve_task_id(engine.project, task_id)
        if shift_days is not None:
            engine.shift_task(parsed_id, shift_days)
        else:
            assert new_start is not None and new_end is not None
            engine.reschedule(parsed_id, new_start, new_end)
        task = engine.project.require_task(parsed_id)
        timing = engine.timing(parsed_id)

    typer.echo(f"Task {parsed_id}: {task.start} .. {task.end}")
    typer.echo(f"  Earliest start {timing.earliest_start}, slack {timing.slack_days}d")


@app.command(name="set-deps")
def set_deps(
    file: ProjectFile,
    task_id: Annotated[str, typer.Argument(help="ID of the task to edit")],
    dependency_ids: Annotated[
        list[str] | None, typer.Argument(help="IDs the task depends on (none clears)")
    ] = None,
) -> None:
    """Replace a task's dependencies and write them back to the project file."""
    with _reported_errors():
        engine, _ = _open_engine(file)
        parsed_id = _resolve_task_id(engine.project, task_id)
        parsed_deps = [_resolve_task_id(engine.project, dep) for dep in dependency_ids or []]
        engine.set_dependencies(parsed_id, parsed_deps)

    deps_str = ", ".join(str(dep) for dep in parsed_deps) or "(none)"
    typer.echo(f"Task {parsed_id} now depends on: {deps_str}")


@app.command()
def link(
    file: ProjectFile,
    source_id: Annotated[str, typer.Argument(help="Task that gains the dependency")],
    target_id: Annotated[str, typer.Argument(help="Task it will depend on")],
) -> None:
    """Make one task depend on another (same as dragging a link between bars)."""
    with _reported_errors():
        engine, _ = _open_engine(file)
        source = _resolve_task_id(engine.project, source_id)
        target = _resolve_task_id(engine.project, target_id)
        gesture = LinkDrag(engine)
        gesture.begin(source)
        added = gesture.release(target)
        deps = engine.project.require_task(source).dependencies

    if not added:
        typer.echo(f"Task {source} unchanged")
        return
    typer.echo(f"Task {source} now depends on: {', '.join(str(dep) for dep in deps)}")


@app.command()
def status(
    file: ProjectFile,
    task_id: Annotated[str, typer.Argument(help="ID of the task to move")],
    new_status: Annotated[
        str, typer.Argument(metavar="STATUS", help="To Do, In Progress or Done")
    ],
) -> None:
    """Move a task to another board column and write it back to the project file."""
    with _reported_errors():
        engine, _ = _open_engine(file)
        parsed_id = _resolve_task_id(engine.project, task_id)
        engine.set_status(parsed_id, new_status)
        task = engine.project.require_task(parsed_id)

    typer.echo(f"Task {parsed_id} is {task.status.value} ({task.percent_complete}%)")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
