from __future__ import annotations

import json
from collections import Counter
from typing import Any, NoReturn, Optional

import typer

from task_frontier.core.engine import evaluate
from task_frontier.core.errors import GraphError, GraphLoadError, GraphValidationError
from task_frontier.core.io.load_graph import load_graph
from task_frontier.core.lint.lint_graph import lint_graph
from task_frontier.core.model import FocusResult, Metric, TaskGraph, TimeMetric
from task_frontier.core.units.durations import format_metric
from task_frontier.core.units.unit_config import UNITS_FILE_ENV, UnitConfigError, load_and_merge
from task_frontier.core.validate.validate_graph import summarize_graph, validate_graph

app = typer.Typer(add_completion=False, no_args_is_help=True)

FORMATS = ("text", "json")


@app.callback()
def _callback() -> None:
    """Task frontier CLI."""
    return


@app.command("validate")
def validate(
    path: str = typer.Argument(..., help="Path to a graph file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Validate a task graph snapshot."""
    _check_format("validate", format)

    try:
        raw = load_graph(path)
    except GraphLoadError as e:
        _fail("validate", format, [e], exit_code=1)

    graph, errors = validate_graph(raw)
    if errors or graph is None:
        _fail("validate", format, list(errors), exit_code=2)

    if format == "text":
        typer.echo(summarize_graph(graph))
        return

    counts = Counter([n.status for n in graph.nodes_by_id.values()])
    _emit_json(
        "validate",
        ok=True,
        errors=[],
        extra={
            "schema_version": graph.schema_version,
            "summary": {
                "task_count": len(graph.nodes_by_id),
                "edge_count": len(graph.edges),
                "status_counts": {k: int(v) for k, v in counts.items()},
            },
        },
    )


@app.command("lint")
def lint(
    path: str = typer.Argument(..., help="Path to a graph file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Lint a task graph (cycles, dangling edges, missing estimates)."""
    _check_format("lint", format)

    try:
        raw = load_graph(path)
    except GraphLoadError as e:
        _fail("lint", format, [e], exit_code=1)

    lint_errors = lint_graph(raw)
    _, validation_errors = validate_graph(raw)
    errors: list[GraphError] = [*lint_errors, *validation_errors]

    if errors:
        _fail("lint", format, errors, exit_code=2)

    if format == "text":
        typer.echo("OK: lint passed")
        return
    _emit_json("lint", ok=True, errors=[])


@app.command("frontier")
def frontier(
    path: str = typer.Argument(..., help="Path to a graph file (.yaml/.yml/.json)"),
    focus: str = typer.Option(..., "--focus", help="Focal task id"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """List the tasks that can be started now in service of the focal task."""
    _check_format("frontier", format)
    graph = _load_focus_graph("frontier", path, focus, format)
    result = evaluate(focus, graph)

    if format == "json":
        _emit_json("frontier", ok=True, errors=[], extra=_frontier_payload(result, graph))

    typer.echo(f"Frontier for {focus}:")
    _echo_frontier(result, graph)


@app.command("times")
def times(
    path: str = typer.Argument(..., help="Path to a graph file (.yaml/.yml/.json)"),
    focus: str = typer.Option(..., "--focus", help="Focal task id"),
    units_file: Optional[str] = typer.Option(
        None,
        "--units-file",
        envvar=UNITS_FILE_ENV,
        help="Optional YAML file overriding days per week/month",
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Show serial-sum and critical-path times up to the focal task."""
    _check_format("times", format)
    units = _load_units("times", units_file, format)
    graph = _load_focus_graph("times", path, focus, format)
    result = evaluate(focus, graph, units)

    if format == "json":
        _emit_json("times", ok=True, errors=[], extra=_times_payload(result, units))

    typer.echo(f"Times for {focus}:")
    _echo_times(result, units)


@app.command("focus")
def focus_cmd(
    path: str = typer.Argument(..., help="Path to a graph file (.yaml/.yml/.json)"),
    focus: str = typer.Option(..., "--focus", help="Focal task id"),
    units_file: Optional[str] = typer.Option(
        None,
        "--units-file",
        envvar=UNITS_FILE_ENV,
        help="Optional YAML file overriding days per week/month",
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Frontier and times for the focal task in one report."""
    _check_format("focus", format)
    units = _load_units("focus", units_file, format)
    graph = _load_focus_graph("focus", path, focus, format)
    result = evaluate(focus, graph, units)

    if format == "json":
        extra = _frontier_payload(result, graph)
        extra.update(_times_payload(result, units))
        _emit_json("focus", ok=True, errors=[], extra=extra)

    typer.echo(f"Focus: {focus}")
    typer.echo("Frontier:")
    _echo_frontier(result, graph)
    typer.echo("Times:")
    _echo_times(result, units)


@app.command("units")
def units_cmd(
    units_file: Optional[str] = typer.Option(
        None,
        "--units-file",
        envvar=UNITS_FILE_ENV,
        help="Optional YAML file overriding days per week/month",
    ),
) -> None:
    """List duration units and their length in days."""
    units = _load_units("units", units_file, "text")
    typer.echo("Units:")
    for name, days in sorted(units.items(), key=lambda kv: kv[1]):
        typer.echo(f"- {name}: {days:g} {'day' if days == 1 else 'days'}")


def _load_focus_graph(command: str, path: str, focus: str, format: str) -> TaskGraph:
    try:
        raw = load_graph(path)
    except GraphLoadError as e:
        _fail(command, format, [e], exit_code=1)

    graph, errors = validate_graph(raw)
    if errors or graph is None:
        _fail(command, format, list(errors), exit_code=2)

    if focus not in graph.nodes_by_id:
        _fail(
            command,
            format,
            [
                GraphValidationError(
                    code="E_FOCUS_UNKNOWN_ID",
                    message=f"--focus references unknown id: {focus}",
                    file=raw.get("__file__"),
                    path="focus",
                )
            ],
            exit_code=2,
        )
    return graph


def _load_units(command: str, units_file: Optional[str], format: str) -> dict[str, float]:
    try:
        return load_and_merge(units_file)
    except FileNotFoundError:
        _fail(
            command,
            format,
            [
                GraphLoadError(
                    code="E_UNITS_FILE_NOT_FOUND",
                    message=f"units file not found: {units_file}",
                    file=None,
                    path="units_file",
                )
            ],
            exit_code=1,
        )
    except UnitConfigError as e:
        _fail(
            command,
            format,
            [
                GraphValidationError(
                    code="E_UNITS_FILE_INVALID",
                    message=str(e),
                    file=units_file,
                    path="units_file",
                )
            ],
            exit_code=2,
        )


def _frontier_payload(result: FocusResult, graph: TaskGraph) -> dict[str, Any]:
    return {
        "focus": result.focal_id,
        "frontier": [
            {"id": nid, "title": graph.nodes_by_id[nid].title, "status": graph.nodes_by_id[nid].status}
            for nid in sorted(result.frontier_ids)
        ],
    }


def _times_payload(result: FocusResult, units: dict[str, float]) -> dict[str, Any]:
    return {
        "focus": result.focal_id,
        "times": {nid: _metric_item(m, units) for nid, m in result.times.items()},
    }


def _metric_item(metric: Metric, units: dict[str, float]) -> dict[str, Any]:
    if not isinstance(metric, TimeMetric):
        return {"known": False, "serial_sum_days": None, "critical_min_days": None}
    formatted = format_metric(metric, units)
    return {
        "known": True,
        "serial_sum_days": metric.serial_sum,
        "critical_min_days": metric.critical_min,
        "serial_sum": formatted["serial_sum"],
        "critical_min": formatted["critical_min"],
    }


def _echo_frontier(result: FocusResult, graph: TaskGraph) -> None:
    if not result.frontier_ids:
        typer.echo("  (none)")
        return
    for nid in sorted(result.frontier_ids):
        title = graph.nodes_by_id[nid].title
        typer.echo(f"- {nid}" + (f": {title}" if title else ""))


def _echo_times(result: FocusResult, units: dict[str, float]) -> None:
    if not result.times:
        typer.echo("  (nothing remaining)")
        return
    for nid, metric in result.times.items():
        f = format_metric(metric, units)
        if f["serial_sum"] == f["critical_min"]:
            typer.echo(f"- {nid}: {f['serial_sum']}")
        else:
            typer.echo(f"- {nid}: sum {f['serial_sum']}, min {f['critical_min']}")


def _check_format(command: str, format: str) -> None:
    if format not in FORMATS:
        err = GraphValidationError(
            code=f"E_{command.upper()}_UNKNOWN_FORMAT",
            message=f"unknown format: {format} (choose one of: {', '.join(FORMATS)})",
            file=None,
            path="format",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


def _emit_json(
    command: str,
    *,
    ok: bool,
    errors: list[GraphError],
    extra: dict[str, Any] | None = None,
    exit_code: int = 0,
) -> NoReturn:
    payload: dict[str, Any] = {
        "tool": "frontier",
        "command": command,
        "ok": ok,
        "error_count": len(errors),
        "errors": [e.to_item() for e in _sorted(errors)],
    }
    if extra:
        payload.update(extra)
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    raise typer.Exit(code=exit_code)


def _fail(command: str, format: str, errors: list[GraphError], *, exit_code: int) -> NoReturn:
    if format == "json":
        _emit_json(command, ok=False, errors=errors, exit_code=exit_code)
    _print_errors(errors)
    raise typer.Exit(code=exit_code)


def _sorted(errors: list[GraphError]) -> list[GraphError]:
    return sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))


def _print_errors(errors: list[GraphError]) -> None:
    for e in _sorted(errors):
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="frontier")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
