"""Timed transitions: color fades and the sleep timer."""

import logging
from typing import Optional

import click

from milight.core import Timer
from milight.models import MilightColor
from milight.protocol import MAX_BRIGHTNESS, MIN_BRIGHTNESS

from ..context import COLOR, group_option, lights_session

logger = logging.getLogger(__name__)


def _run_timer(timer: Timer) -> None:
    """Run timer in the foreground; Ctrl+C stops it."""
    timer.start()
    try:
        while not timer.join(timeout=0.5):
            pass
    except KeyboardInterrupt:
        click.echo("\nStopping timer...", err=True)
        timer.stop()
        timer.join()
        return
    click.echo(f"Done after {timer.duration:g}s")


@click.command()
@click.argument('start', type=COLOR)
@click.argument('goal', type=COLOR)
@group_option
@click.option('--duration', '-d', type=click.FloatRange(min=0, min_open=True), required=True,
              help='Length of the fade in seconds')
@click.option('--cadence', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Seconds between two steps (default: from config)')
@click.option('--switch-off/--no-switch-off', default=False, show_default=True,
              help='Switch the lights off at the end')
@click.pass_context
def fade(
    ctx,
    start: MilightColor,
    goal: MilightColor,
    group: int,
    duration: float,
    cadence: Optional[float],
    switch_off: bool,
):
    """
    Fade from START to GOAL color.

    \b
    Example:
      milight fade blue black --duration 60 --switch-off
    """
    with lights_session(ctx, group) as lights:
        timer = Timer(lights, duration, start, goal, switch_off=switch_off, cadence=cadence)
        click.echo(f"Fading group {group} from {start.to_hex()} to {goal.to_hex()} over {duration:g}s")
        _run_timer(timer)


@click.command()
@group_option
@click.option('--duration', '-d', type=click.FloatRange(min=0, min_open=True), default=600.0,
              show_default=True, help='Length of the fade in seconds')
@click.option('--from-level', type=click.IntRange(MIN_BRIGHTNESS, MAX_BRIGHTNESS),
              default=MAX_BRIGHTNESS, show_default=True, help='Starting brightness level')
@click.pass_context
def sleep(ctx, group: int, duration: float, from_level: int):
    """Dim white light down to the lowest level, then switch off."""
    with lights_session(ctx, group) as lights:
        timer = Timer.brightness_fade(lights, duration, start_level=from_level)
        click.echo(f"Sleep timer: group {group} off in {duration:g}s")
        _run_timer(timer)
