"""Instance health and version."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from coolify_lens_cli.utils import ctx_obj, handle_error, resolve_config

console = Console()


def status(ctx: typer.Context) -> None:
    """Show the health and version of the configured Coolify instance."""
    try:
        from coolify_lens.client import CoolifyClient

        config = resolve_config(ctx)
        client = CoolifyClient(config.base_url, config.api_token, timeout=config.timeout)
        with console.status("Checking instance..."):
            health = client.fetch_health()
            version = client.fetch_version()

        if ctx_obj(ctx).get("json"):
            print(json.dumps({"instance": config.instance_url, "health": health, "version": version}))
            return

        color = "green" if health.lower() in ("ok", "healthy", "up") else "yellow"
        console.print(
            Panel(
                f"Health: [{color}]{escape(health)}[/{color}]\nVersion: {escape(version)}",
                title=f"[dim]{config.instance_url}[/dim]",
            )
        )

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
