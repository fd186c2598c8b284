"""CLI for the phase scheduler.

Developer CLI to preview phase timelines without a UI: auto-allocate phases
inside a project window, materialize a course preset, or list presets.
"""

import json
from collections.abc import Sequence
from datetime import datetime

import typer
from rich.console import Console
from rich.table import Table

from phase_scheduler.config.settings import settings
from phase_scheduler.core.logger import setup_logger
from phase_scheduler.timeline.allocator import allocate_phases, preview_allocation
from phase_scheduler.timeline.durations import format_instant, parse_instant
from phase_scheduler.timeline.errors import PresetNotFoundError, SchedulingError
from phase_scheduler.timeline.presets.applier import apply_preset_template
from phase_scheduler.timeline.presets.catalog import find_preset, get_course_presets, load_preset_catalog
from phase_scheduler.timeline.types import BufferPolicy, Phase, ProjectWindow, SpacingPolicy

# Initialize Rich console for output
console = Console()

app = typer.Typer(
    name="phase-scheduler",
    help="Phase Scheduler CLI - preview multi-phase project timelines",
    add_completion=False,
)


def _setup_logging(debug: bool = False, quiet: bool = False) -> None:
    if debug:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = settings.log_level
    setup_logger(level=level, log_file=settings.log_file, serialize=settings.log_json)


def _parse_option(value: str, name: str) -> datetime:
    try:
        return parse_instant(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=name) from e


def _buffer_policy(evaluation_days: int | None, breathe_days: int | None) -> BufferPolicy:
    return BufferPolicy(
        evaluation_days=settings.default_evaluation_days if evaluation_days is None else evaluation_days,
        breathe_days=settings.default_breathe_days if breathe_days is None else breathe_days,
    )


def _render_window(start: datetime, end: datetime) -> str:
    if end < start:
        return "-"
    return f"{format_instant(start)} → {format_instant(end)}"


def _render_phases(phases: Sequence[Phase], title: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([p.to_record() for p in phases], indent=2))
        return

    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Phase")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Evaluation")
    table.add_column("Breathe")
    for phase in phases:
        table.add_row(
            str(phase.index + 1),
            phase.name,
            format_instant(phase.start),
            format_instant(phase.end),
            _render_window(phase.evaluation_window.start, phase.evaluation_window.end),
            _render_window(phase.breathe_window.start, phase.breathe_window.end),
        )
    console.print(table)


def _fail(errors: Sequence[SchedulingError]) -> None:
    for error in errors:
        console.print(f"[red]{error.code}[/red] {error.message}")
    raise typer.Exit(code=1)


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    """Phase Scheduler CLI."""
    _setup_logging(debug=debug)


@app.command()
def auto(
    start: str = typer.Option(..., "--start", help="Project start (YYYY-MM-DDTHH:MM)"),
    due: str = typer.Option(..., "--due", help="Project due date (YYYY-MM-DDTHH:MM)"),
    phases: int = typer.Option(settings.default_number_of_phases, "--phases", min=1, help="Number of phases"),
    duration: int = typer.Option(
        settings.default_phase_duration_days,
        "--duration",
        min=1,
        help="Days per phase when not auto-spacing",
    ),
    auto_space: bool = typer.Option(
        settings.default_auto_space_phases,
        "--auto-space/--fixed",
        help="Divide available days equally, or use --duration",
    ),
    evaluation_days: int | None = typer.Option(None, "--evaluation-days", min=0),
    breathe_days: int | None = typer.Option(None, "--breathe-days", min=0),
    as_json: bool = typer.Option(False, "--json", help="Print persistence records as JSON"),
) -> None:
    """Auto-allocate phases inside a project window."""
    if as_json:
        _setup_logging(quiet=True)

    window = ProjectWindow(start=_parse_option(start, "--start"), due=_parse_option(due, "--due"))
    buffer_policy = _buffer_policy(evaluation_days, breathe_days)
    spacing_policy = SpacingPolicy(
        number_of_phases=phases,
        phase_duration_days=duration,
        auto_space_phases=auto_space,
    )

    result = allocate_phases(window, buffer_policy, spacing_policy)
    if not result.ok:
        _fail(result.errors)

    if not as_json:
        preview = preview_allocation(window, buffer_policy, spacing_policy)
        console.print(
            f"Creating {phases} phases ({preview.effective_phase_duration} days each) + "
            f"{preview.buffer_days_per_phase} days after each"
        )
    _render_phases(result.unwrap(), "Project timeline", as_json)


@app.command()
def preset(
    course: str = typer.Option(..., "--course", help="Course code (e.g. FOPR111)"),
    title: str = typer.Option(..., "--title", help="Preset title"),
    start: str = typer.Option(..., "--start", help="Project start (YYYY-MM-DDTHH:MM)"),
    duration: int = typer.Option(
        settings.default_preset_phase_duration_days,
        "--duration",
        min=1,
        help="Days per phase",
    ),
    evaluation_days: int | None = typer.Option(None, "--evaluation-days", min=0),
    breathe_days: int | None = typer.Option(None, "--breathe-days", min=0),
    as_json: bool = typer.Option(False, "--json", help="Print persistence records as JSON"),
) -> None:
    """Materialize a course preset into a phase list."""
    if as_json:
        _setup_logging(quiet=True)

    catalog = load_preset_catalog(settings.preset_catalog_path)
    try:
        template = find_preset(course, title, catalog)
    except PresetNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    result = apply_preset_template(
        template,
        duration,
        _parse_option(start, "--start"),
        _buffer_policy(evaluation_days, breathe_days),
    )
    if not result.ok:
        _fail(result.errors)

    application = result.unwrap()
    if not as_json:
        console.print(f"{template.title}: due {format_instant(application.due)}")
    _render_phases(application.phases, template.title, as_json)


@app.command("presets")
def list_presets(course: str = typer.Option(..., "--course", help="Course code (e.g. FOPR111)")) -> None:
    """List preset templates offered for a course."""
    presets = get_course_presets(course, load_preset_catalog(settings.preset_catalog_path))
    if not presets:
        console.print(f"No presets for course {course}")
        raise typer.Exit(code=1)
    for template in presets:
        console.print(f"[bold]{template.title}[/bold]: {' → '.join(template.phases)}")


if __name__ == "__main__":
    app()
