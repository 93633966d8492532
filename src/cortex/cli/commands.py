"""Command implementations for CLI."""

import uuid
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from cortex.configreader import Prompter, read_prompts
from cortex.configreader.loader import dump_document, read_cluster_config_file
from cortex.errors import FieldError
from cortex.models.cluster import (
    AccountIDLookup,
    ClusterConfig,
    InternalClusterConfig,
    get_file_defaults,
    prompt_validation,
)
from cortex.models.credentials import resolve_credentials


console = Console()


def typer_prompter(label: str, default: Optional[str]) -> Any:
    """Ask the operator on the terminal."""
    if default is None:
        return typer.prompt(label)
    return typer.prompt(label, default=default)


def show_defaults():
    """Print the file defaults as YAML."""
    config = get_file_defaults()
    console.print(dump_document(config.model_dump()), markup=False, highlight=False, end="")


def validate_config(config_path: Optional[Path]):
    """Validate a cluster config file, reporting every field error."""
    document = read_cluster_config_file(config_path)
    ClusterConfig.from_document(document)
    console.print("[green]✓[/green] Cluster configuration is valid")


def _print_rejected(error: FieldError):
    console.print(f"[red]Error:[/red] {error}")


def configure_cluster(
    config_path: Optional[Path],
    skip_populated_fields: bool = True,
    prompt_instance_type: bool = True,
    operator_in_cluster: bool = False,
    assume_yes: bool = False,
    max_prompt_attempts: int = 3,
    prompter: Prompter = typer_prompter,
    lookup: Optional[AccountIDLookup] = None,
) -> InternalClusterConfig:
    """Resolve a cluster config: validate, prompt, derive the bucket, confirm."""
    document = read_cluster_config_file(config_path)
    config = ClusterConfig.from_document(document)
    
    validation = prompt_validation(skip_populated_fields, prompt_instance_type, defaults=config)
    read_prompts(
        config,
        validation,
        prompter,
        max_attempts=max_prompt_attempts,
        on_rejected=_print_rejected,
    )
    
    if config.bucket == "":
        credentials = resolve_credentials(document)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Looking up AWS account...", total=None)
            
            config.set_bucket(
                credentials.aws_access_key_id,
                credentials.aws_secret_access_key,
                lookup=lookup,
            )
            
            progress.update(task, completed=True)
            
    internal_config = InternalClusterConfig(
        cluster_config=config,
        id=uuid.uuid4().hex,
        operator_in_cluster=operator_in_cluster,
    )
    
    console.print()
    console.print(str(internal_config), markup=False, highlight=False)
    console.print()
    
    if not assume_yes:
        typer.confirm("Is the configuration above correct?", abort=True)
        
    console.print(dump_document(internal_config.to_document()), markup=False, highlight=False, end="")
    return internal_config
