"""Show the selector values accepted by --filter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coolify_lens_cli.utils import ctx_obj, handle_error, load_snapshot

console = Console()


def filters(
    ctx: typer.Context,
    for_deployments: Annotated[
        bool, typer.Option("--deployments", help="Selectors for the deployments command instead of resources")
    ] = False,
    from_file: Annotated[
        Path | None, typer.Option("--from-file", help="Read collections from a JSON/YAML snapshot instead of the API")
    ] = None,
) -> None:
    """List every selector value for the current projects and environments."""
    try:
        from coolify_lens.filters import filter_options
        from coolify_lens.relations import EnvironmentIndex

        with console.status("Loading projects..."):
            snapshot, _ = load_snapshot(ctx, from_file)
        index = EnvironmentIndex.build(snapshot.project_environments())
        options = filter_options(
            snapshot.projects,
            index,
            include_types=not for_deployments,
            include_status=for_deployments,
            all_title="All Deployments" if for_deployments else "All Resources",
        )

        if ctx_obj(ctx).get("json"):
            print(json.dumps({"options": [o.__dict__ for o in options]}, indent=2))
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Section", style="dim")
        table.add_column("Title")
        table.add_column("Value", style="cyan")
        for option in options:
            table.add_row(option.section, escape(option.title), escape(option.value))
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
