"""List applications, services and databases grouped by project."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coolify_lens_cli.utils import ctx_obj, env_color, handle_error, load_snapshot, type_color

console = Console()


def resources(
    ctx: typer.Context,
    filter_: Annotated[
        list[str] | None,
        typer.Option(
            "--filter",
            "-f",
            help="Selector: all, project:<id>, env:<name>, type:<application|service|database>, status:active. "
            "Repeat to combine.",
        ),
    ] = None,
    search: Annotated[str, typer.Option("--search", "-s", help="Case-insensitive text search")] = "",
    from_file: Annotated[
        Path | None, typer.Option("--from-file", help="Read collections from a JSON/YAML snapshot instead of the API")
    ] = None,
    links: Annotated[bool, typer.Option("--links", help="Show Coolify URLs")] = False,
) -> None:
    """Search resources across every project and environment."""
    try:
        from coolify_lens.views import build_resource_view

        selectors = filter_ or ["all"]
        selector = selectors[0] if len(selectors) == 1 else selectors

        with console.status("Loading resources..."):
            snapshot, instance_url = load_snapshot(ctx, from_file)
        view = build_resource_view(snapshot, selector, search, instance_url=instance_url)

        if ctx_obj(ctx).get("json"):
            print(json.dumps(view.to_dict(), indent=2))
            return

        if not view.groups:
            console.print("[yellow]No resources found.[/yellow]")
            return

        for group in view.groups:
            table = Table(title=f"[bold]{escape(group.project_name)}[/bold]", title_justify="left", show_header=True)
            table.add_column("Name", style="cyan")
            table.add_column("Type")
            table.add_column("Environment")
            table.add_column("Kind / Subtitle", style="dim")
            table.add_column("Status")
            if links:
                table.add_column("Coolify URL", overflow="fold")
            for row in group.rows:
                cells = [
                    escape(row.name),
                    f"[{type_color(row.type)}]{row.type.capitalize()}[/{type_color(row.type)}]",
                    f"[{env_color(row.env_name)}]{escape(row.env_name)}[/{env_color(row.env_name)}]",
                    escape(row.kind or row.subtitle or ""),
                    row.status or "",
                ]
                if links:
                    cells.append(row.resource_url or row.environment_url)
                table.add_row(*cells)
            console.print(table)

        console.print(f"[dim]{view.matched} of {view.total} resources[/dim]")

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
