"""Recent deployments, newest first."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coolify_lens_cli.utils import ctx_obj, handle_error, load_snapshot, status_color

console = Console()


def deployments(
    ctx: typer.Context,
    filter_: Annotated[
        str,
        typer.Option("--filter", "-f", help="Selector: all, status:active, project:<id>, env:<name>"),
    ] = "all",
    search: Annotated[str, typer.Option("--search", "-s", help="Match application, commit or status")] = "",
    from_file: Annotated[
        Path | None, typer.Option("--from-file", help="Read collections from a JSON/YAML snapshot instead of the API")
    ] = None,
    take: Annotated[int, typer.Option("--take", help="Deployments fetched per application")] = 5,
    limit: Annotated[int | None, typer.Option("--limit", "-n", help="Show at most N deployments")] = None,
) -> None:
    """List deployments across applications, with their project and environment."""
    try:
        from coolify_lens.views import build_deployment_view

        with console.status("Loading deployments..."):
            snapshot, instance_url = load_snapshot(
                ctx, from_file, selector=filter_, include_deployments=True, take=take
            )
        view = build_deployment_view(snapshot, filter_, search, instance_url=instance_url)
        if limit is not None:
            view.rows = view.rows[:limit]

        if ctx_obj(ctx).get("json"):
            print(json.dumps(view.to_dict(), indent=2))
            return

        if not view.rows:
            console.print("[yellow]No deployments found.[/yellow]")
            return

        table = Table(title=f"Deployments ({filter_})", show_header=True, header_style="bold")
        table.add_column("Application", style="cyan")
        table.add_column("Status")
        table.add_column("Project")
        table.add_column("Environment")
        table.add_column("Branch", style="dim")
        table.add_column("Commit", style="dim")
        table.add_column("Created")

        for row in view.rows:
            color = status_color(row.status)
            commit = (row.commit or "")[:7]
            if row.commit_message:
                commit = f"{commit} {row.commit_message.splitlines()[0]}".strip()
            table.add_row(
                escape(row.application_name or "-"),
                f"[{color}]{row.status_label}[/{color}]",
                escape(row.project_name),
                escape(row.env_name),
                escape(row.branch or ""),
                escape(commit),
                row.created_at or "",
            )

        console.print(table)
        active = sum(1 for r in view.rows if r.can_cancel)
        if active:
            console.print(f"[blue]{active} deployment(s) in progress[/blue]")

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
