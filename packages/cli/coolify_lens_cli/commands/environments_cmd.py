"""Environments of every project."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coolify_lens_cli.utils import ctx_obj, env_color, handle_error, load_snapshot

console = Console()


def environments(
    ctx: typer.Context,
    filter_: Annotated[str, typer.Option("--filter", "-f", help="Selector: all or project:<id>")] = "all",
    search: Annotated[str, typer.Option("--search", "-s", help="Match name, project, id or uuid")] = "",
    from_file: Annotated[
        Path | None, typer.Option("--from-file", help="Read collections from a JSON/YAML snapshot instead of the API")
    ] = None,
) -> None:
    """List environments with their project and resource count."""
    try:
        from coolify_lens.views import build_environment_view

        with console.status("Loading environments..."):
            snapshot, instance_url = load_snapshot(ctx, from_file)
        view = build_environment_view(snapshot, filter_, search, instance_url=instance_url)

        if ctx_obj(ctx).get("json"):
            print(json.dumps(view.to_dict(), indent=2))
            return

        if not view.rows:
            console.print("[yellow]No environments found.[/yellow]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Environment")
        table.add_column("Project", style="cyan")
        table.add_column("Resources", justify="right")
        table.add_column("URL", overflow="fold", style="dim")
        for row in view.rows:
            color = env_color(row.name)
            table.add_row(
                f"[{color}]{escape(row.name)}[/{color}]",
                escape(row.project_name),
                str(row.resource_count),
                row.environment_url,
            )
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
