"""Typer-based CLI for checking, exploring and exporting concept maps."""

from __future__ import annotations

import difflib
import logging
import random
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__, config
from .concept_map import INFINITE_DISTANCE, ConceptMap, select_random_node
from .config_manager import load_log_level, load_view_config, save_view_config
from .graph_export import ascii_view, export_dot, export_json
from .models import Node, ParsedDeclarations
from .parser import parse_dsl
from .samples import SAMPLE_DSL

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="🗺️  Cartograph: parse concept map DSL files and explore their neighbourhoods.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration: view defaults and logging.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Cartograph v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """Cartograph: concept map DSL tooling."""
    level = "DEBUG" if verbose else load_log_level()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _read_declarations(dsl_file: Path) -> ParsedDeclarations:
    """Read and parse *dsl_file*, exiting with code 1 on read or parse errors."""
    try:
        text = dsl_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"❌ {dsl_file}: cannot read file: {exc}", err=True)
        raise typer.Exit(code=1)

    parsed = parse_dsl(text)
    if parsed.errors:
        for error in parsed.errors:
            typer.echo(f"❌ {dsl_file}:{error.line}:{error.column}: {error.message}", err=True)
        raise typer.Exit(code=1)
    return parsed


def _load_map(dsl_file: Path) -> ConceptMap:
    parsed = _read_declarations(dsl_file)
    return ConceptMap.from_parsed_declarations(dsl_file.stem, parsed)


def _not_found(kind: str, name: str, choices: List[str]) -> typer.BadParameter:
    message = f"{kind} '{name}' not found."
    matches = difflib.get_close_matches(name, choices, n=3)
    if matches:
        message += " Did you mean: " + ", ".join(matches) + "?"
    return typer.BadParameter(message)


def _resolve_concept(concept_map: ConceptMap, concept: str) -> Node:
    node = concept_map.get_node(concept)
    if node is not None:
        return node
    raise _not_found("Concept", concept, [n.id for n in concept_map.get_all_nodes()])


def _apply_view(
    concept_map: ConceptMap,
    active: Optional[str],
    select: Optional[List[str]],
    distance: Optional[int],
    bidirectional: Optional[bool],
    relationship: Optional[str],
) -> None:
    concept_map.apply_view_config(load_view_config())
    if distance is not None:
        concept_map.set_max_distance(distance)
    if bidirectional is not None:
        concept_map.set_bidirectional(bidirectional)
    if relationship:
        known = concept_map.get_relationships()
        if relationship not in known:
            raise _not_found("Relationship", relationship, known)
        concept_map.set_active_relationship(relationship)
    if active is not None:
        concept_map.set_active_node(_resolve_concept(concept_map, active))
    for concept in select or []:
        concept_map.add_selected_node(_resolve_concept(concept_map, concept))


def _format_distance(distance: float) -> str:
    return "∞" if distance == INFINITE_DISTANCE else str(int(distance))


def _summary_line(text: Optional[str], width: int = 60) -> str:
    if not text:
        return ""
    first = text.strip().splitlines()[0]
    return first if len(first) <= width else first[: width - 1] + "…"


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

@app.command("check")
def check(
    dsl_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Concept map DSL file."),
):
    """Validate a DSL file and report warnings."""
    parsed = _read_declarations(dsl_file)

    typer.echo(f"Parsed {len(parsed.predicates)} predicates and {len(parsed.definitions)} definitions.")
    if not parsed.warnings:
        typer.echo("No warnings.")
        return

    table = Table(title=f"Warnings ({len(parsed.warnings)})")
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Kind", style="yellow", no_wrap=True)
    table.add_column("Message")
    for warning in parsed.warnings:
        table.add_row(str(warning.line), warning.kind, escape(warning.message))
    console.print(table)


@app.command("show")
def show(
    dsl_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Concept map DSL file."),
    active: Optional[str] = typer.Option(None, "--active", "-a", help="Active concept (random when omitted)."),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Concepts forced visible with their neighbours."),
    distance: Optional[int] = typer.Option(None, "--distance", "-d", min=0, help="Maximum distance from the active concept."),
    bidirectional: Optional[bool] = typer.Option(
        None, "--bidirectional/--one-way", help="Ignore edge direction when measuring distance.",
    ),
    relationship: Optional[str] = typer.Option(None, "--relationship", "-r", help="Only show this relationship."),
    seed: Optional[int] = typer.Option(None, help="Seed for picking the random active concept."),
    tree: bool = typer.Option(False, "--tree", help="Also print an ASCII neighbourhood sketch."),
):
    """Show the concepts visible around the active concept."""
    concept_map = _load_map(dsl_file)
    _apply_view(concept_map, active, select, distance, bidirectional, relationship)

    if concept_map.get_active_node() is None and not concept_map.get_selected_nodes():
        node = select_random_node(concept_map, random.Random(seed) if seed is not None else None)
        if node is None:
            typer.echo("Concept map is empty.")
            raise typer.Exit(code=0)
        logger.info("Picked random active concept '%s'", node.id)
        concept_map.set_active_node(node)

    active_node = concept_map.get_active_node()
    selected = {node.id for node in concept_map.get_selected_nodes()}
    visible_nodes = concept_map.get_visible_nodes()
    visible_edges = concept_map.get_visible_edges()

    typer.echo(f"Concept map: {concept_map.name}")
    typer.echo(f"Active: {active_node.id if active_node else '-'}")
    typer.echo(
        f"Max distance: {concept_map.get_max_distance()} | "
        f"Bidirectional: {'yes' if concept_map.is_bidirectional() else 'no'}"
    )
    typer.echo(
        f"Total nodes: {len(concept_map.get_all_nodes())} | Visible: {len(visible_nodes)}"
    )
    typer.echo(
        f"Total edges: {len(concept_map.get_all_edges())} | Visible: {len(visible_edges)}"
    )

    nodes_table = Table(title="Concepts")
    nodes_table.add_column("Concept", style="cyan")
    nodes_table.add_column("Distance", justify="right")
    nodes_table.add_column("Status")
    nodes_table.add_column("Definition")
    ordered = sorted(visible_nodes, key=lambda n: (concept_map.get_distance_from_active(n), n.id))
    for node in ordered:
        if active_node is not None and node.id == active_node.id:
            status = "[bold red]active[/bold red]"
        elif node.id in selected:
            status = "[green]selected[/green]"
        else:
            status = ""
        nodes_table.add_row(
            escape(node.id),
            _format_distance(concept_map.get_distance_from_active(node)),
            status,
            escape(_summary_line(node.definition)),
        )
    console.print(nodes_table)

    if visible_edges:
        edges_table = Table(title="Relationships")
        edges_table.add_column("Source", style="cyan")
        edges_table.add_column("Relationship", style="magenta")
        edges_table.add_column("Target", style="cyan")
        for edge in visible_edges:
            edges_table.add_row(escape(edge.source.id), escape(edge.relationship), escape(edge.target.id))
        console.print(edges_table)

    if tree:
        typer.echo("\nASCII graph:")
        typer.echo(ascii_view(concept_map))


@app.command("export")
def export(
    dsl_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Concept map DSL file."),
    fmt: str = typer.Option("dsl", "--format", "-f", help="Export format: dsl, json or dot."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path (stdout when omitted)."),
    active: Optional[str] = typer.Option(None, "--active", "-a", help="Active concept for the exported view."),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Selected concepts for the exported view."),
    distance: Optional[int] = typer.Option(None, "--distance", "-d", min=0, help="Maximum distance from the active concept."),
    bidirectional: Optional[bool] = typer.Option(
        None, "--bidirectional/--one-way", help="Ignore edge direction when measuring distance.",
    ),
    relationship: Optional[str] = typer.Option(None, "--relationship", "-r", help="Only export this relationship."),
):
    """Export a concept map as normalized DSL, JSON graph data or Graphviz DOT.

    ``dsl`` always covers the whole map; ``json`` and ``dot`` cover the view
    given by the view options, or the whole map when none is given.
    """
    fmt = fmt.lower()
    if fmt not in {"dsl", "json", "dot"}:
        raise typer.BadParameter("Format must be one of: dsl, json, dot")

    concept_map = _load_map(dsl_file)
    _apply_view(concept_map, active, select, distance, bidirectional, relationship)

    if fmt == "dsl":
        doc = concept_map.to_dsl()
        if output is not None:
            output.write_text(doc + "\n", encoding="utf-8")
    elif fmt == "json":
        doc = export_json(concept_map, output)
    else:
        doc = export_dot(concept_map, output)

    if output is None:
        typer.echo(doc)
    else:
        typer.echo(f"Exported {fmt} to {output}")


@app.command("sample")
def sample():
    """Print a sample concept map DSL document."""
    typer.echo(SAMPLE_DSL.rstrip())


# ------------------------------------------------------------------
# Configuration commands
# ------------------------------------------------------------------

@config_app.command("show")
def config_show():
    """Show the effective configuration."""
    view = load_view_config()
    typer.echo(f"Config file: {config.CONFIG_FILE}")
    typer.echo(f"Max distance: {view['max_distance']}")
    typer.echo(f"Bidirectional: {'yes' if view['bidirectional'] else 'no'}")
    typer.echo(f"Log level: {load_log_level()}")


@config_app.command("set-view")
def config_set_view(
    distance: Optional[int] = typer.Option(None, "--distance", "-d", min=0, help="Default maximum distance."),
    bidirectional: Optional[bool] = typer.Option(
        None, "--bidirectional/--one-way", help="Default traversal mode.",
    ),
):
    """Save default view settings."""
    view = load_view_config()
    if distance is not None:
        view["max_distance"] = distance
    if bidirectional is not None:
        view["bidirectional"] = bidirectional
    save_view_config(view["max_distance"], view["bidirectional"])
    typer.echo(
        f"Saved view defaults: max distance {view['max_distance']}, "
        f"bidirectional {'yes' if view['bidirectional'] else 'no'}."
    )


if __name__ == "__main__":
    app()
