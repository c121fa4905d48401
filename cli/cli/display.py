"""Rich output formatting for the sqlshift CLI.

All functions write to a :class:`rich.console.Console` instance (typically
bound to *stderr*) so that machine-readable output on *stdout* is never
polluted with human-readable decoration.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from dialect_engine.sql_toolkit import TokenKind

if TYPE_CHECKING:
    from dialect_engine.models import MigrationResult, ModelExportResult, SchemaGraph
    from dialect_engine.sql_toolkit import SyntaxCheckResult, Token


# ---------------------------------------------------------------------------
# Colour mappings
# ---------------------------------------------------------------------------

_SEVERITY_COLOURS: dict[str, str] = {
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
}

_TOKEN_STYLES: dict[TokenKind, str] = {
    TokenKind.KEYWORD: "bold blue",
    TokenKind.PLATFORM_KEYWORD: "bold magenta",
    TokenKind.FUNCTION: "green",
    TokenKind.PLATFORM_FUNCTION: "bold green",
    TokenKind.OPERATOR: "yellow",
    TokenKind.LITERAL: "cyan",
    TokenKind.STRING: "red",
    TokenKind.NUMERIC: "bright_cyan",
    TokenKind.COMMENT: "dim italic",
}


def _coloured_severity(severity: str) -> str:
    """Return a Rich markup string with the severity colour-coded."""
    colour = _SEVERITY_COLOURS.get(severity, "white")
    return f"[{colour}]{severity}[/{colour}]"


def _score_colour(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


# ---------------------------------------------------------------------------
# Translation report
# ---------------------------------------------------------------------------


def display_translation(console: Console, result: MigrationResult) -> None:
    """Render the converted query, its issues and the compatibility score.

    Parameters
    ----------
    console:
        Rich console to write to (typically stderr).
    result:
        The translation to display.
    """
    colour = _score_colour(result.compatibility_score)
    header = (
        f"[bold]{result.source_platform.label}[/bold] -> [bold]{result.target_platform.label}[/bold]"
        f"    score: [{colour}]{result.compatibility_score}/100[/{colour}]"
    )
    console.print(Panel(result.converted_query or "[dim](empty)[/dim]", title=header, border_style=colour))

    if not result.issues:
        console.print("[green]No compatibility issues.[/green]")
        return

    table = Table(
        title=f"Issues ({len(result.issues)})",
        show_lines=False,
        pad_edge=True,
        expand=False,
    )
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Rule", style="dim")
    table.add_column("Message")
    table.add_column("Suggestion", style="dim")

    for issue in result.issues:
        table.add_row(
            str(issue.line) if issue.line is not None else "-",
            _coloured_severity(issue.severity.value),
            issue.rule_id or "-",
            issue.message,
            issue.suggestion or "-",
        )

    console.print(table)


def display_syntax_check(console: Console, check: SyntaxCheckResult) -> None:
    """Report whether the converted query parses in the target dialect."""
    if check.valid:
        console.print(f"[green]Valid {check.platform.label} syntax.[/green]")
        return
    console.print(f"[red]Invalid {check.platform.label} syntax:[/red]")
    for error in check.errors:
        console.print(f"  [red]- {error}[/red]")


# ---------------------------------------------------------------------------
# Lineage
# ---------------------------------------------------------------------------


def display_schema_graph(console: Console, graph: SchemaGraph) -> None:
    """Render tables and columns as a tree followed by a relationship table.

    Parameters
    ----------
    console:
        Rich console to write to.
    graph:
        The lineage graph extracted from a query.
    """
    if graph.is_empty:
        console.print("[dim]No tables found in query.[/dim]")
        return

    tree = Tree("[bold yellow]tables[/bold yellow]", guide_style="dim")
    for table in graph.tables:
        label = f"[bold blue]{table.id}[/bold blue]"
        if table.alias and table.alias != table.id:
            label += f" [dim](alias {table.alias})[/dim]"
        if table.name != table.id:
            label += f" [dim]{table.name}[/dim]"
        branch = tree.add(label)
        if not table.columns:
            branch.add("[dim]no columns referenced[/dim]")
        for col in table.columns:
            links = [f"-> {ref}" for ref in col.references]
            suffix = f" [green]{', '.join(links)}[/green]" if links else ""
            branch.add(f"{col.name}{suffix}")

    console.print(Panel(tree, title="Lineage", border_style="yellow"))

    if graph.relationships:
        rel_table = Table(title="Relationships", show_lines=False, pad_edge=True, expand=False)
        rel_table.add_column("Source", style="bold")
        rel_table.add_column("Target", style="bold")
        rel_table.add_column("Type")
        for rel in graph.relationships:
            source = f"{rel.source}.{rel.source_column}" if rel.source_column else rel.source
            target = f"{rel.target}.{rel.target_column}" if rel.target_column else rel.target
            rel_table.add_row(source, target, rel.type)
        console.print(rel_table)

    column_count = sum(len(table.columns) for table in graph.tables)
    console.print(
        f"[bold]{len(graph.tables)}[/bold] table(s), [bold]{column_count}[/bold] column(s), "
        f"[bold]{len(graph.relationships)}[/bold] relationship(s)"
    )


# ---------------------------------------------------------------------------
# Model export
# ---------------------------------------------------------------------------


def display_export_result(console: Console, result: ModelExportResult, written: Sequence[str] = ()) -> None:
    """Summarize an exported model and the files written for it."""
    if not result.success:
        console.print(f"[red]Export failed: {result.error}[/red]")
        return

    base = result.base_platform.label if result.base_platform is not None else "-"
    console.print(
        Panel(
            result.model,
            title=f"[bold]{result.model_name}[/bold] ({result.model_format.value}, base {base})",
            border_style="green",
        )
    )
    for path in written:
        console.print(f"  [green]wrote[/green] {path}")
    errors = [issue for issue in result.issues if issue.severity.value == "error"]
    if result.issues:
        console.print(
            f"[yellow]{len(result.issues)} translation issue(s)[/yellow]"
            + (f", [red]{len(errors)} error(s)[/red]" if errors else "")
        )


# ---------------------------------------------------------------------------
# Highlighting
# ---------------------------------------------------------------------------


def highlight_tokens(tokens: Sequence[Token]) -> Text:
    """Build a colour-coded :class:`rich.text.Text` from a token stream."""
    text = Text()
    for tok in tokens:
        text.append(tok.text, style=_TOKEN_STYLES.get(tok.kind, ""))
    return text


def display_highlighted(console: Console, tokens: Sequence[Token]) -> None:
    console.print(highlight_tokens(tokens))
