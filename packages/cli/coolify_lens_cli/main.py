import typer

from coolify_lens_cli import __version__
from coolify_lens_cli.commands.deployments_cmd import deployments
from coolify_lens_cli.commands.environments_cmd import environments
from coolify_lens_cli.commands.filters_cmd import filters
from coolify_lens_cli.commands.resources_cmd import resources
from coolify_lens_cli.commands.status_cmd import status
from coolify_lens_cli.utils import configure_logging


def _version_callback(value: bool) -> None:
    if value:
        print(f"coolify-lens {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="coolify-lens",
    help="Search, filter and link the resources of a Coolify instance",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    api_url: str | None = typer.Option(None, "--api-url", help="Coolify instance or API URL"),
    token: str | None = typer.Option(None, "--token", help="Coolify API token"),
    config: str | None = typer.Option(None, "--config", help="Path to a coolify-lens YAML config file"),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    ctx.obj["api_url"] = api_url
    ctx.obj["token"] = token
    ctx.obj["config"] = config
    configure_logging(verbose)


app.command()(resources)
app.command()(deployments)
app.command()(environments)
app.command()(filters)
app.command()(status)
