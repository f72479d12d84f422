#!/usr/bin/env python3
"""
Command-line interface for graf.

Provides commands to create the graph database, submit operations and
inspect the stored graph.
"""

import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from .api import Dispatcher, LEGACY_ALIASES, SUPPORTED_OPERATIONS
from .config import ConfigError, GrafConfig, load_config
from .console_styles import (
    create_edges_table,
    create_header_panel,
    create_nodes_table,
    create_summary_table,
    format_count,
    format_status,
)
from .graph import GraphStore

console = Console()
err_console = Console(stderr=True)


def _open_existing_store(config: GrafConfig) -> GraphStore:
    """Open the configured database read-only, exiting if it is missing."""
    if not config.db_path.exists():
        err_console.print(
            "[red]Error:[/red] Database not found. Run 'init' command first."
        )
        err_console.print(f"[dim]Expected location: {config.db_path}[/dim]")
        sys.exit(1)

    try:
        return GraphStore(db_path=config.db_path, read_only=True)
    except RuntimeError as e:
        err_console.print(f"[red]Error:[/red] Failed to open database: {e}")
        sys.exit(1)


def parse_fields(fields: tuple[str, ...]) -> dict[str, str]:
    """Turn FIELD=VALUE arguments into a request mapping."""
    request = {}
    for item in fields:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"expected FIELD=VALUE, got '{item}'", param_hint="FIELDS"
            )
        request[key] = value
    return request


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to YAML configuration (default: ./graf.yaml if present)",
)
@click.option(
    "--db-path",
    type=click.Path(),
    default=None,
    help="Path to KuzuDB database (overrides the configuration)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[str],
    db_path: Optional[str],
    verbose: bool,
) -> None:
    """graf - write/read API for a graph of people and their links.

    Every operation takes string fields and answers with a JSON response
    holding a status code (0 on success).

    Examples:
        graf init
        graf call create_node name=Ada x=10 y=20 year=1990 sex=F
        graf call create_edge a=100 b=101
        graf call fetch_graph
        graf show
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        sys.exit(2)

    if db_path is not None:
        config = dataclasses.replace(config, db_path=Path(db_path))

    ctx.obj = config


@cli.command()
@click.pass_obj
def init(config: GrafConfig) -> None:
    """Create the database and its schema.

    Running it on an existing database leaves the data untouched.
    """
    try:
        store = GraphStore(db_path=config.db_path)
    except RuntimeError as e:
        err_console.print(f"[red]Error:[/red] Failed to initialize database: {e}")
        sys.exit(1)
    store.close()

    console.print(f"[green]✓[/green] Graph database ready at: {config.db_path}")
    console.print(
        f"[dim]Node ids allocated from [{config.min_node_id}, {config.max_node_id})[/dim]"
    )


@cli.command()
@click.argument("action")
@click.argument("fields", nargs=-1)
@click.option("--pretty", is_flag=True, help="Pretty-print the JSON response")
@click.pass_obj
def call(config: GrafConfig, action: str, fields: tuple[str, ...], pretty: bool) -> None:
    """Submit one operation and print its JSON response.

    ACTION: One of create_node, create_edge, edit_node, move_node,
    delete_node, delete_edge, fetch_graph (legacy names are accepted too)

    FIELDS: Request fields as FIELD=VALUE

    Exits with code 1 when the response status is not 0.

    Examples:
        graf call create_node name=Ada x=10 y=20 year=1990 sex=F
        graf call edit_node id=100 year=1991
        graf call delete_edge a=100 b=101
    """
    request = parse_fields(fields)
    request["action"] = action

    try:
        store = GraphStore(db_path=config.db_path)
    except RuntimeError as e:
        err_console.print(f"[red]Error:[/red] Failed to open database: {e}")
        sys.exit(1)

    with store:
        response = Dispatcher(store, config).dispatch(request)

    if pretty:
        console.print_json(json.dumps(response))
        err_console.print(format_status(response["status"]))
    else:
        click.echo(json.dumps(response))

    if response["status"] != 0:
        sys.exit(1)


@cli.command()
def operations() -> None:
    """List supported operations and their legacy names."""
    legacy = {}
    for alias, operation in LEGACY_ALIASES.items():
        legacy.setdefault(operation, []).append(alias)

    for operation in SUPPORTED_OPERATIONS:
        aliases = ", ".join(legacy.get(operation, []))
        suffix = f" [dim](also: {aliases})[/dim]" if aliases else ""
        console.print(f"[cyan]{operation}[/cyan]{suffix}")


@cli.command()
@click.pass_obj
def show(config: GrafConfig) -> None:
    """Show every node and edge of the graph."""
    store = _open_existing_store(config)

    with store, store.session() as session:
        nodes = session.queries.get_all_nodes()
        edges = session.queries.get_all_edges()

    console.print()
    console.print(create_nodes_table(nodes))
    console.print()
    console.print(create_edges_table(edges))


@cli.command()
@click.pass_obj
def stats(config: GrafConfig) -> None:
    """Show statistics about the stored graph."""
    store = _open_existing_store(config)

    with store, store.session() as session:
        stats_data = session.queries.get_statistics()

    console.print()
    console.print(create_header_panel("Graph Statistics", str(config.db_path)))
    console.print()

    overview_table = create_summary_table("Overview")
    overview_table.add_row("Total nodes", format_count(stats_data["total_nodes"]))
    overview_table.add_row("Total edges", format_count(stats_data["total_edges"]))
    overview_table.add_row("Total votes", format_count(stats_data["total_votes"]))
    overview_table.add_row("Nodes without edges", format_count(stats_data["isolated_nodes"]))
    console.print(overview_table)


@cli.command()
@click.argument("output_dir", type=click.Path(file_okay=False))
@click.pass_obj
def export(config: GrafConfig, output_dir: str) -> None:
    """Export nodes and edges to Parquet files.

    Writes OUTPUT_DIR/nodes.parquet and OUTPUT_DIR/edges.parquet.
    """
    store = _open_existing_store(config)
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    with store, store.session() as session:
        nodes_df = session.queries.nodes_as_df()
        edges_df = session.queries.edges_as_df()

    nodes_df.to_parquet(target / "nodes.parquet", index=False, compression="snappy")
    edges_df.to_parquet(target / "edges.parquet", index=False, compression="snappy")

    console.print(
        f"[green]✓[/green] Exported {format_count(len(nodes_df))} nodes and "
        f"{format_count(len(edges_df))} edges to: [yellow]{target}[/yellow]"
    )


if __name__ == "__main__":
    cli()
