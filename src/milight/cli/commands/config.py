"""Configuration commands."""

import click

from ..context import CliSettings


@click.group(name="config")
def config():
    """Show or create the configuration file."""
    pass


@config.command(name="show")
@click.pass_obj
def show_config(settings: CliSettings):
    """Print the effective configuration (file plus command line overrides)."""
    exists = settings.config_path.exists()
    click.echo(f"# {settings.config_path}{'' if exists else ' (not found, defaults)'}")
    click.echo(settings.config.model_dump_json(indent=2))


@config.command(name="init")
@click.option('--force', is_flag=True, help='Overwrite an existing config file')
@click.pass_obj
def init_config(settings: CliSettings, force: bool):
    """
    Write the effective configuration to the config file.

    \b
    Example:
      milight --host 192.168.1.42 config init
    """
    path = settings.config_path
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")
    settings.config.save(path)
    click.echo(f"Wrote {path}")
