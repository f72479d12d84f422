"""Console styling utilities for consistent Rich output formatting.

Table builders and status helpers shared by the CLI commands.

Example:
    >>> from graf.console_styles import create_summary_table, format_count
    >>> table = create_summary_table("Graph Statistics")
    >>> table.add_row("Nodes", format_count(150))
    >>> console.print(table)
"""

from typing import Iterable, Tuple

from rich.box import ROUNDED
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from graf.api.errors import Status
from graf.graph.models import SEXES, Edge, Node


def get_status_icon(success: bool) -> str:
    """Get colored status icon.

    Args:
        success: Whether operation was successful

    Returns:
        str: Colored status icon (✓ or ✗)
    """
    return "[green]✓[/green]" if success else "[red]✗[/red]"


def format_status(status: int) -> str:
    """Format a response status as icon, code and name.

    Args:
        status: Status code from a response

    Returns:
        str: e.g. "✗ 7 NOT_FOUND"
    """
    try:
        name = Status(status).name
    except ValueError:
        name = "UNKNOWN"
    return f"{get_status_icon(status == Status.SUCCESS)} {status} {name}"


def format_count(count: int) -> str:
    """Format a count with thousands separator.

    Args:
        count: Number to format

    Returns:
        str: Formatted count string
    """
    return f"{count:,}"


def create_summary_table(title: str, header_style: str = "bold cyan") -> Table:
    """Create a styled summary table.

    Args:
        title: Table title
        header_style: Rich style for header (default: "bold cyan")

    Returns:
        Table: Configured Rich Table
    """
    table = Table(
        title=title,
        show_header=True,
        header_style=header_style,
        box=ROUNDED,
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")
    return table


def create_data_table(title: str, columns: list[Tuple[str, str, str]]) -> Table:
    """Create a configurable data display table.

    Args:
        title: Table title
        columns: List of (column_name, justify, style) tuples

    Returns:
        Table: Configured Rich Table
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        box=ROUNDED,
    )

    for col_name, justify, style in columns:
        table.add_column(col_name, justify=justify, style=style)

    return table


def create_nodes_table(nodes: Iterable[Node]) -> Table:
    """Create a table listing nodes."""
    table = create_data_table(
        "Nodes",
        [
            ("ID", "right", "cyan"),
            ("Name", "left", "white"),
            ("X", "right", "yellow"),
            ("Y", "right", "yellow"),
            ("Year", "right", "green"),
            ("Sex", "left", "magenta"),
        ],
    )
    for node in nodes:
        table.add_row(
            str(node.id),
            escape(node.name),
            str(node.x),
            str(node.y),
            str(node.year),
            SEXES.get(node.sex, node.sex),
        )
    return table


def create_edges_table(edges: Iterable[Edge]) -> Table:
    """Create a table listing edges."""
    table = create_data_table(
        "Edges",
        [
            ("ID", "right", "cyan"),
            ("Key", "left", "white"),
            ("A", "right", "yellow"),
            ("B", "right", "yellow"),
            ("Votes", "right", "green"),
        ],
    )
    for edge in edges:
        table.add_row(str(edge.id), edge.key, str(edge.a), str(edge.b), format_count(edge.votes))
    return table


def create_header_panel(
    title: str,
    subtitle: str = "",
    border_style: str = "cyan"
) -> Panel:
    """Create a styled header panel.

    Args:
        title: Panel title
        subtitle: Optional subtitle
        border_style: Rich style for border

    Returns:
        Panel: Configured Rich Panel
    """
    if subtitle:
        content = f"[bold cyan]{title}[/bold cyan]\n{subtitle}"
    else:
        content = f"[bold cyan]{title}[/bold cyan]"

    return Panel.fit(
        content,
        border_style=border_style,
        padding=(0, 1),
    )
