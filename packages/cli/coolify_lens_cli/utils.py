from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from coolify_lens.config import LensConfig
    from coolify_lens.snapshot import Snapshot

_err_console = Console(stderr=True)


def ctx_obj(ctx: typer.Context) -> dict[str, Any]:
    return ctx.obj if ctx.obj else {}


def configure_logging(verbose: bool) -> None:
    """Route coolify_lens logging through rich when --verbose is set."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def handle_error(ctx: typer.Context, e: Exception) -> None:
    """Print a clean error message and exit 1."""
    import urllib.error

    import yaml
    from coolify_lens.client import CoolifyAPIError

    verbose = ctx_obj(ctx).get("verbose", False)
    json_mode = ctx_obj(ctx).get("json", False)

    if isinstance(e, CoolifyAPIError):
        msg = str(e)
        if e.status in (401, 403):
            msg = f"{msg}. Check the API token and its permissions."
    elif isinstance(e, urllib.error.URLError):
        msg = f"Cannot reach the Coolify API: {e.reason}"
    elif isinstance(e, FileNotFoundError):
        msg = f"File not found: {e}"
    elif isinstance(e, yaml.YAMLError):
        msg = f"Invalid YAML: {e}"
    elif "validation" in type(e).__name__.lower():
        msg = f"Invalid data: {e}"
    elif isinstance(e, ValueError):
        msg = str(e)
    else:
        msg = f"Error: {e}"

    if json_mode:
        print(json.dumps({"error": msg}))
    else:
        _err_console.print(f"[red]Error:[/red] {msg}")

    if verbose:
        _err_console.print_exception()

    raise typer.Exit(1)


def resolve_config(ctx: typer.Context) -> LensConfig:
    from coolify_lens.config import load_config

    obj = ctx_obj(ctx)
    return load_config(obj.get("config"), api_url=obj.get("api_url"), api_token=obj.get("token"))


def load_snapshot(
    ctx: typer.Context,
    from_file: Path | None,
    selector: str = "all",
    include_deployments: bool = False,
    take: int = 5,
) -> tuple[Snapshot, str]:
    """Snapshot and instance URL, from a saved file or from the live API."""
    from coolify_lens.snapshot import Snapshot

    config = resolve_config(ctx)
    if from_file is not None:
        return Snapshot.from_file(from_file), config.instance_url

    from coolify_lens.client import CoolifyClient

    if not config.api_token:
        raise ValueError(
            "No API token configured. Pass --token, set COOLIFY_API_TOKEN, or add api_token to the config file."
        )
    client = CoolifyClient(config.base_url, config.api_token, timeout=config.timeout)
    snapshot = client.fetch_snapshot(selector=selector, include_deployments=include_deployments, take=take)
    return snapshot, config.instance_url


def env_color(name: str) -> str:
    value = name.lower()
    if "prod" in value:
        return "green"
    if "preview" in value:
        return "yellow"
    if "stag" in value:
        return "dark_orange"
    if "dev" in value:
        return "blue"
    return "bright_black"


def type_color(resource_type: str) -> str:
    return {"application": "blue", "service": "dark_orange", "database": "green"}.get(resource_type, "bright_black")


def status_color(status: str | None) -> str:
    from coolify_lens.deployments import normalize_status

    value = normalize_status(status)
    if value in ("running", "finished", "success"):
        return "green"
    if value in ("in_progress", "deploying", "building"):
        return "blue"
    if value in ("queued", "pending"):
        return "yellow"
    if value == "failed":
        return "red"
    return "bright_black"
