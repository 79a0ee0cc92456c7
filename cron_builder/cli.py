from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cron_builder.core.build.cron_builder import CronBuilder
from cron_builder.core.config.build_options import BuildOptions, OptionsConfigError, load_and_merge
from cron_builder.core.errors import CronError, CronLoadError, CronValidationError
from cron_builder.core.io.load_expression import load_expression
from cron_builder.core.model import FIELD_BOUNDS, FIELDS
from cron_builder.core.validate.validate_cron import check_string

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Cron expression builder CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("validate")
def validate(
    expression: str = typer.Argument(..., help='Cron expression, e.g. "0,30 9-17 * * 1-5"'),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Validate a cron expression and report every illegal value."""
    _check_format(format, ("text", "json"))

    errors = check_string(expression)

    if format == "json":
        payload = {
            "tool": "cronbuilder",
            "command": "validate",
            "expression": expression,
            "ok": not errors,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=2 if errors else 0)

    if errors:
        _print_errors(errors)
        raise typer.Exit(code=2)
    typer.echo(f"OK: {expression}")


@app.command("build")
def build(
    expression: str = typer.Argument(..., help="Cron expression to normalize"),
    compact: Optional[bool] = typer.Option(
        None, "--compact/--plain", help="Compact into ranges and steps (default: plain)"
    ),
    weekday_names: Optional[bool] = typer.Option(
        None, "--weekday-names/--no-weekday-names", help="Use MON-SUN names (compact only)"
    ),
    month_names: Optional[bool] = typer.Option(
        None, "--month-names/--no-month-names", help="Use JAN-DEC names (compact only)"
    ),
    hashes: Optional[bool] = typer.Option(
        None, "--hashes/--no-hashes", help="Replace * with H (compact only)"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="YAML file with build options"),
) -> None:
    """Build a cron string, optionally compacted."""
    options = _resolve_options(config, compact, weekday_names, month_names, hashes)
    builder = _builder_or_exit(expression)
    typer.echo(_build_or_exit(builder, options))


@app.command("expand")
def expand(
    expression: str = typer.Argument(..., help="Cron expression to expand"),
    format: str = typer.Option("text", "--format", help="Output format: text|json|table"),
) -> None:
    """Print the concrete values each field matches."""
    _check_format(format, ("text", "json", "table"))

    builder = _builder_or_exit(expression)
    try:
        expanded = builder.get_all(expand=True)
    except ValueError as e:
        _print_errors([CronValidationError(code="E_CONVERT_FAILED", message=str(e), value=expression)])
        raise typer.Exit(code=2)

    if format == "json":
        typer.echo(json.dumps(expanded, indent=2))
        return

    if format == "table":
        tokens = builder.get_all()
        table = Table(title=builder.build())
        table.add_column("Field")
        table.add_column("Values")
        table.add_column("Count", justify="right")
        table.add_column("Expanded")
        for name in FIELDS:
            table.add_row(
                name,
                ",".join(tokens[name]),
                str(len(expanded[name])),
                ",".join(str(v) for v in expanded[name]),
            )
        console.print(table)
        return

    for name in FIELDS:
        typer.echo(f"{name}: {','.join(str(v) for v in expanded[name])}")


@app.command("render")
def render(
    path: str = typer.Argument(..., help="Path to an expression file (.yaml/.yml/.json)"),
    compact: Optional[bool] = typer.Option(
        None, "--compact/--plain", help="Compact into ranges and steps (default: plain)"
    ),
    weekday_names: Optional[bool] = typer.Option(None, "--weekday-names/--no-weekday-names"),
    month_names: Optional[bool] = typer.Option(None, "--month-names/--no-month-names"),
    hashes: Optional[bool] = typer.Option(None, "--hashes/--no-hashes"),
    config: Optional[str] = typer.Option(None, "--config", help="YAML file with build options"),
) -> None:
    """Render a structured expression file (field -> values) to a cron string."""
    options = _resolve_options(config, compact, weekday_names, month_names, hashes)

    try:
        expression = load_expression(path)
    except CronLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    builder = CronBuilder()
    try:
        builder.set_all(expression)
    except CronValidationError as e:
        _print_errors([replace(e, file=path)])
        raise typer.Exit(code=2)

    typer.echo(_build_or_exit(builder, options))


@app.command("fields")
def fields_cmd() -> None:
    """List field names in expression order with their bounds."""
    for position, name in enumerate(FIELDS):
        bounds = FIELD_BOUNDS[name]
        typer.echo(f"{position} {name}: {bounds.min}-{bounds.max}")


def _check_format(format: str, allowed: tuple[str, ...]) -> None:
    if format not in allowed:
        err = CronValidationError(
            code="E_UNKNOWN_FORMAT",
            message=f"unknown format: {format} (choose one of: {', '.join(allowed)})",
            field="format",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


def _resolve_options(
    config: Optional[str],
    compact: Optional[bool],
    weekday_names: Optional[bool],
    month_names: Optional[bool],
    hashes: Optional[bool],
) -> BuildOptions:
    try:
        options = load_and_merge(config)
    except FileNotFoundError:
        _print_errors(
            [
                CronLoadError(
                    code="E_CONFIG_FILE_NOT_FOUND",
                    message=f"config file not found: {config}",
                    field="config",
                )
            ]
        )
        raise typer.Exit(code=1)
    except OptionsConfigError as e:
        _print_errors(
            [CronValidationError(code="E_CONFIG_FILE_INVALID", message=str(e), file=config)]
        )
        raise typer.Exit(code=2)

    overrides = {
        "plain": None if compact is None else not compact,
        "output_weekday_names": weekday_names,
        "output_month_names": month_names,
        "output_hashes": hashes,
    }
    return replace(options, **{k: v for k, v in overrides.items() if v is not None})


def _builder_or_exit(expression: str) -> CronBuilder:
    errors = check_string(expression)
    if errors:
        _print_errors(errors)
        raise typer.Exit(code=2)
    return CronBuilder(expression)


def _build_or_exit(builder: CronBuilder, options: BuildOptions) -> str:
    try:
        return builder.build_with(options)
    except ValueError as e:
        _print_errors([CronValidationError(code="E_CONVERT_FAILED", message=str(e), value=builder.build())])
        raise typer.Exit(code=2)


def _to_item(e: CronError) -> dict:
    return {
        "code": e.code,
        "message": e.message,
        "field": e.field,
        "value": e.value,
        "severity": "error",
    }


def _print_errors(errors: list[CronError]) -> None:
    for e in errors:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="cronbuilder")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
