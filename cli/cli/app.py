"""sqlshift CLI application -- Typer-based developer interface.

Provides commands for dialect translation, lineage extraction, dbt and
Dataform model export, and token highlighting.  Human-readable output
goes to *stderr* via Rich; machine-readable artefacts (JSON results,
metrics) go to stdout or to files on disk so that pipelines can compose
cleanly.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from cli.display import (
    display_export_result,
    display_highlighted,
    display_schema_graph,
    display_syntax_check,
    display_translation,
)
from dialect_engine.config import Settings, load_settings
from dialect_engine.export import export_model
from dialect_engine.graph import extract_schema
from dialect_engine.migration import translate as translate_sql
from dialect_engine.models import ModelFormat, Severity
from dialect_engine.sql_toolkit import Platform, TokenKind, check_syntax, tokenize
from dialect_engine.telemetry import configure_logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="sqlshift",
    help="sqlshift - translate SQL between BigQuery, Snowflake and Databricks",
    no_args_is_help=True,
)
console = Console(stderr=True)

# Mutable global options populated by the Typer callback.
_json_output: bool = False
_metrics_file: Path | None = None
_settings: Settings | None = None


# ---------------------------------------------------------------------------
# Callback -- global options
# ---------------------------------------------------------------------------


@app.callback()
def _global_options(
    json_mode: bool = typer.Option(
        False,
        "--json/--no-json",
        help="Emit structured JSON to stdout instead of human-readable output.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output (including operation timings) to stderr.",
    ),
    metrics_file: Path | None = typer.Option(
        None,
        "--metrics-file",
        help="Write metrics events to this file (JSONL).",
        envvar="SQLSHIFT_METRICS_FILE",
    ),
) -> None:
    """Global options applied to every command."""
    global _json_output, _metrics_file, _settings  # noqa: PLW0603
    _json_output = json_mode
    _metrics_file = metrics_file

    try:
        _settings = load_settings()
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        raise typer.Exit(code=3) from exc

    level = "DEBUG" if verbose or _settings.debug else _settings.log_level
    configure_logging(level, structured=_settings.structured_logging)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_settings() -> Settings:
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def _emit_metrics(event: str, data: dict[str, Any]) -> None:
    """Append a timestamped metrics event to the metrics file, if configured.

    Write failures are logged and otherwise ignored so the command result
    is unaffected.
    """
    if _metrics_file is None:
        return
    record = {
        "event": event,
        "timestamp": datetime.now(UTC).isoformat(),
        "data": data,
    }
    try:
        with _metrics_file.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, sort_keys=True, default=str) + "\n")
    except OSError as exc:
        logger.warning("Could not write metrics to %s: %s", _metrics_file, exc)


def _read_sql(file: str) -> str:
    """Read SQL from *file*, or from stdin when *file* is ``-``."""
    if file == "-":
        return sys.stdin.read()
    path = Path(file)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Cannot read {file}: {exc}[/red]")
        raise typer.Exit(code=3) from exc


def _write_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, default=str) + "\n")


# ---------------------------------------------------------------------------
# translate
# ---------------------------------------------------------------------------


@app.command()
def translate(
    file: str = typer.Argument(..., help="SQL file to translate, or '-' for stdin."),
    source: Platform | None = typer.Option(
        None,
        "--source",
        "-s",
        help="Dialect the query is written in (default: SQLSHIFT_DEFAULT_SOURCE).",
    ),
    target: Platform | None = typer.Option(
        None,
        "--target",
        "-t",
        help="Dialect to translate to (default: SQLSHIFT_DEFAULT_TARGET).",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the converted query to this file.",
    ),
    validate: bool = typer.Option(
        False,
        "--validate",
        help="Parse the converted query in the target dialect and fail on syntax errors.",
    ),
    fail_on_error: bool = typer.Option(
        False,
        "--fail-on-error",
        help="Exit with code 1 when any error-severity issue is reported.",
    ),
) -> None:
    """Translate a query from one platform's dialect to another's."""
    settings = _get_settings()
    source = source or settings.default_source
    target = target or settings.default_target
    sql = _read_sql(file)

    result = translate_sql(sql, source, target, weights=settings.score_weights())
    check = check_syntax(result.converted_query, target) if validate else None

    if output is not None:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(result.converted_query, encoding="utf-8")
        except OSError as exc:
            console.print(f"[red]Cannot write {output}: {exc}[/red]")
            raise typer.Exit(code=3) from exc

    if _json_output:
        payload = result.model_dump(mode="json")
        if check is not None:
            payload["syntax"] = {"valid": check.valid, "errors": list(check.errors)}
        _write_json(payload)
    else:
        display_translation(console, result)
        if check is not None:
            display_syntax_check(console, check)
        if output is not None:
            console.print(f"[green]Wrote[/green] {output}")

    _emit_metrics(
        "translate",
        {
            "source": source.value,
            "target": target.value,
            "score": result.compatibility_score,
            "issues": len(result.issues),
            "errors": result.count(Severity.ERROR),
        },
    )

    if check is not None and not check.valid:
        raise typer.Exit(code=1)
    if fail_on_error and result.has_errors:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# lineage
# ---------------------------------------------------------------------------


@app.command()
def lineage(
    file: str = typer.Argument(..., help="SQL file to analyze, or '-' for stdin."),
    platform: Platform | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Dialect the query is written in (default: SQLSHIFT_DEFAULT_SOURCE).",
    ),
) -> None:
    """Display the tables, columns and join relationships a query uses."""
    platform = platform or _get_settings().default_source
    sql = _read_sql(file)
    graph = extract_schema(sql, platform)

    if _json_output:
        _write_json(graph.to_dict())
    else:
        display_schema_graph(console, graph)

    _emit_metrics(
        "lineage",
        {
            "platform": platform.value,
            "tables": len(graph.tables),
            "relationships": len(graph.relationships),
        },
    )


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@app.command("export")
def export(
    file: str = typer.Argument(..., help="SQL file to export, or '-' for stdin."),
    platform: Platform | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Dialect the query is written in (default: SQLSHIFT_DEFAULT_SOURCE).",
    ),
    model_format: ModelFormat = typer.Option(
        ModelFormat.DBT,
        "--format",
        "-f",
        help="Workflow tool to generate a model for.",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-d",
        help="Write the model, documentation and config files into this directory.",
    ),
) -> None:
    """Export a query as a dbt or Dataform model."""
    platform = platform or _get_settings().default_source
    sql = _read_sql(file)
    result = export_model(sql, platform, model_format)

    if not result.success:
        if _json_output:
            _write_json(result.model_dump(mode="json"))
        console.print(f"[red]Export failed: {result.error}[/red]")
        _emit_metrics("export", {"format": model_format.value, "success": False, "error": result.error})
        raise typer.Exit(code=3)

    written: list[str] = []
    if output_dir is not None:
        files = {
            f"{result.model_name}{model_format.model_extension}": result.model,
            f"{result.model_name}{model_format.documentation_extension}": result.documentation,
            f"{result.model_name}.json": result.config,
        }
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            for name, content in files.items():
                (output_dir / name).write_text(content, encoding="utf-8")
                written.append(str(output_dir / name))
        except OSError as exc:
            console.print(f"[red]Cannot write to {output_dir}: {exc}[/red]")
            raise typer.Exit(code=3) from exc

    if _json_output:
        payload = result.model_dump(mode="json")
        payload["files"] = written
        _write_json(payload)
    else:
        display_export_result(console, result, written)

    _emit_metrics(
        "export",
        {
            "format": model_format.value,
            "success": True,
            "model_name": result.model_name,
            "files": len(written),
        },
    )


# ---------------------------------------------------------------------------
# highlight
# ---------------------------------------------------------------------------


@app.command()
def highlight(
    file: str = typer.Argument(..., help="SQL file to highlight, or '-' for stdin."),
    platform: Platform | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Dialect used to classify keywords and functions.",
    ),
) -> None:
    """Print a query with keywords, functions and literals colour-coded."""
    platform = platform or _get_settings().default_source
    tokens = tokenize(_read_sql(file), platform)

    if _json_output:
        _write_json(
            {
                "platform": platform.value,
                "tokens": [
                    {"text": tok.text, "kind": tok.kind.value, "line": tok.line, "column": tok.column}
                    for tok in tokens
                    if tok.kind is not TokenKind.WHITESPACE
                ],
            }
        )
        return

    # Highlighted SQL is the command's output, so it goes to stdout.
    display_highlighted(Console(), tokens)
