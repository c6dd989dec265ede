"""Direct light commands: switching, color, brightness, disco and blink."""

import logging

import click

from milight.models import MilightColor
from milight.protocol import MAX_BRIGHTNESS, MIN_BRIGHTNESS

from ..context import COLOR, all_option, box_session, group_option, lights_session

logger = logging.getLogger(__name__)


@click.command()
@group_option
@all_option
@click.pass_context
def on(ctx, group: int, all_groups: bool):
    """Switch lights on."""
    with box_session(ctx) as box:
        if all_groups:
            box.all_on()
        else:
            box.get_lights(group).on()


@click.command()
@group_option
@all_option
@click.pass_context
def off(ctx, group: int, all_groups: bool):
    """Switch lights off."""
    with box_session(ctx) as box:
        if all_groups:
            box.all_off()
        else:
            box.get_lights(group).off()


@click.command()
@group_option
@all_option
@click.pass_context
def white(ctx, group: int, all_groups: bool):
    """Switch lights to white mode."""
    with box_session(ctx) as box:
        if all_groups:
            box.all_white()
        else:
            box.get_lights(group).white()


@click.command()
@click.argument('level', type=click.IntRange(MIN_BRIGHTNESS, MAX_BRIGHTNESS))
@group_option
@click.pass_context
def brightness(ctx, level: int, group: int):
    """
    Set the brightness LEVEL (2-27).

    The level is sent as is; 2 is the dimmest and 27 the brightest setting.
    """
    with lights_session(ctx, group) as lights:
        lights.set_brightness(level)


@click.command()
@click.argument('value', type=COLOR)
@group_option
@click.option(
    '--force-colored',
    is_flag=True,
    help='Send the hue even for pale colors that would be shown in white mode'
)
@click.option(
    '--with-brightness',
    is_flag=True,
    help="Also set the brightness from the color's value component"
)
@click.pass_context
def color(ctx, value: MilightColor, group: int, force_colored: bool, with_brightness: bool):
    """
    Show a color: a name (red, blue, ...) or #RRGGBB.

    \b
    Examples:
      milight color red
      milight color '#FF8800' -g 3 --with-brightness
    """
    with lights_session(ctx, group) as lights:
        if with_brightness:
            lights.set_color_and_brightness(value, force_colored_mode=force_colored)
        else:
            lights.set_color(value, force_colored_mode=force_colored)


@click.command()
@click.argument(
    'action',
    type=click.Choice(['start', 'faster', 'slower'], case_sensitive=False),
    default='start'
)
@group_option
@click.pass_context
def disco(ctx, action: str, group: int):
    """
    Run the built-in disco program.

    faster and slower act on whichever group runs the program.
    """
    with lights_session(ctx, group) as lights:
        match action.lower():
            case 'faster':
                lights.disco_faster()
            case 'slower':
                lights.disco_slower()
            case _:
                lights.disco_mode()


@click.command()
@click.argument('value', type=COLOR)
@group_option
@click.option('--times', '-n', type=click.IntRange(min=1), default=3, show_default=True,
              help='Number of blinks')
@click.option('--color-time', type=float, default=1.0, show_default=True,
              help='Seconds the color stays on')
@click.option('--restore-time', type=float, default=1.0, show_default=True,
              help='Seconds between blinks')
@click.pass_context
def blink(ctx, value: MilightColor, group: int, times: int, color_time: float, restore_time: float):
    """Blink a color, returning to white in between."""
    with lights_session(ctx, group) as lights:
        # A fresh process knows nothing about the lights: show white first
        lights.white()
        lights.box.wait_idle()
        thread = lights.blink(value, times=times, color_time=color_time, restore_time=restore_time)
        click.echo(f"Blinking {value.to_hex()} {times} time(s) on group {group}")
        thread.join()
