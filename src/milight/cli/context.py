"""Shared state and helpers for CLI commands."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import click

from milight.core import Lights, WiFiBox
from milight.exceptions import format_error_for_display
from milight.models import MilightColor, MilightConfig
from milight.protocol import GROUPS

logger = logging.getLogger(__name__)


@dataclass
class CliSettings:
    """Effective configuration after applying command line overrides."""

    config: MilightConfig
    config_path: Path


def report_error(error: Exception) -> None:
    """Print an error without a traceback."""
    user_message, recovery_hint = format_error_for_display(error)
    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(recovery_hint, err=True)


@contextmanager
def box_session(ctx: click.Context) -> Iterator[WiFiBox]:
    """
    Open the box for one command.

    Background sequences are flushed before the command returns. Errors
    are reported and turned into exit code 1.
    """
    settings: CliSettings = ctx.obj
    try:
        with WiFiBox.from_config(settings.config) as box:
            yield box
            box.wait_idle()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        click.echo("\nInterrupted", err=True)
    except (click.ClickException, click.exceptions.Exit):
        raise
    except Exception as e:
        logger.exception("Command failed")
        report_error(e)
        sys.exit(1)


@contextmanager
def lights_session(ctx: click.Context, group: int) -> Iterator[Lights]:
    with box_session(ctx) as box:
        yield box.get_lights(group)


group_option = click.option(
    '--group',
    '-g',
    type=click.IntRange(min(GROUPS), max(GROUPS)),
    default=1,
    show_default=True,
    help='Group of lights to control'
)

all_option = click.option(
    '--all',
    'all_groups',
    is_flag=True,
    help='Address every group at once'
)


class ColorParamType(click.ParamType):
    """Color given as a name (red, blue, ...) or as #RRGGBB."""

    name = "color"

    def convert(self, value, param, ctx):
        if isinstance(value, MilightColor):
            return value
        try:
            return MilightColor.parse(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


COLOR = ColorParamType()
