"""Main CLI implementation using Typer."""

from pathlib import Path
from typing import Optional, Callable, Any

import typer
from pydantic import ValidationError
from rich.console import Console

from cortex.cli.commands import configure_cluster, show_defaults, validate_config
from cortex.errors import ConfigErrors, CortexError
from cortex.models.settings import CliSettings
from cortex.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="cortex-cluster",
    help="Resolve and validate cortex cluster configuration",
    add_completion=False,
)

# Console for rich output
console = Console()


def _run_cli_command(handler: Callable[..., Any], **kwargs: Any):
    """Helper to run a CLI command with error handling."""
    try:
        handler(**kwargs)
    except ConfigErrors as e:
        for error in e.errors:
            console.print(f"[red]Error:[/red] {error}")
        raise typer.Exit(1) from e
    except CortexError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _settings(ctx: typer.Context) -> CliSettings:
    if isinstance(ctx.obj, CliSettings):
        return ctx.obj
    return CliSettings()


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l", envvar="CORTEX_LOG_LEVEL", help="Log level"
    ),
    max_prompt_attempts: int = typer.Option(
        3, "--max-prompt-attempts", help="Attempts per prompt before giving up"
    ),
):
    """Resolve and validate cortex cluster configuration."""
    try:
        settings = CliSettings(log_level=log_level, max_prompt_attempts=max_prompt_attempts)
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e
    setup_logging(settings.log_level)
    ctx.obj = settings


@app.command("configure")
def configure_command(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Argument(
        None, envvar="CORTEX_CLUSTER_CONFIG", help="Cluster config file"
    ),
    skip_populated: bool = typer.Option(
        True, "--skip-populated/--prompt-all", help="Skip prompts for fields set in the file"
    ),
    prompt_instance_type: bool = typer.Option(
        True, "--prompt-instance-type/--no-prompt-instance-type", help="Prompt for the instance type"
    ),
    operator_in_cluster: bool = typer.Option(
        False, "--operator-in-cluster", help="The operator runs inside the cluster"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Resolve a cluster configuration interactively."""
    settings = _settings(ctx)
    _run_cli_command(
        configure_cluster,
        config_path=config_path,
        skip_populated_fields=skip_populated,
        prompt_instance_type=prompt_instance_type,
        operator_in_cluster=operator_in_cluster,
        assume_yes=yes,
        max_prompt_attempts=settings.max_prompt_attempts,
    )


# Config subcommands
config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")


@config_app.command("defaults")
def config_defaults_command():
    """Show file defaults."""
    _run_cli_command(show_defaults)


@config_app.command("validate")
def config_validate_command(
    config_path: Optional[Path] = typer.Argument(
        None, envvar="CORTEX_CLUSTER_CONFIG", help="Cluster config file"
    ),
):
    """Validate a cluster configuration file."""
    _run_cli_command(validate_config, config_path=config_path)


def main():
    """Main entry point for CLI."""
    app()
