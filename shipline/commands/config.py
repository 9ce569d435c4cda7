import click
import json
import os

from ..config import load_config, get_config_path, mask_secrets
from ..cli_utils import standard_command, add_common_options


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@add_common_options('root')
@standard_command
def show_config(pretty, path, root):
    """Show the current configuration with all merges applied.

    Secret values are masked. By default, outputs single-line JSON.
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    root_dir = root or os.getcwd()

    if path:
        config_path = get_config_path(root_dir)
        click.echo(json.dumps({"config_path": str(config_path) if config_path else None}))
        return

    config = mask_secrets(load_config(root_dir))

    if pretty:
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        click.echo(json.dumps(config, ensure_ascii=False))
