"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from milight import __version__
from milight.exceptions import ConfigurationError
from milight.models import DEFAULT_CONFIG_PATH, MilightConfig

from .commands import (
    blink,
    brightness,
    color,
    config,
    disco,
    fade,
    off,
    on,
    sleep,
    white,
)
from .context import CliSettings, report_error

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".milight" / "logs"


_VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}

# Handlers installed by the last setup_logging call
_installed_handlers: list[logging.Handler] = []


def _log_path(debug: bool, log_file: Optional[Path]) -> Path:
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "milight-debug.log"
    DEFAULT_LOG_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_LOG_DIR / "milight.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure the root logger for one CLI invocation.

    Records always go to a rotating log file; ``-v`` also prints them on
    stderr. Calling it again replaces the handlers of the previous call.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: DEBUG level, written to ./milight-debug.log unless log_file is set
        log_file: Custom log file path; log_level then sets the level
        log_level: DEBUG/INFO/WARNING/ERROR, used together with log_file
    """
    if log_file:
        level = logging.getLevelName(log_level.upper())
    elif debug:
        level = logging.DEBUG
    else:
        level = _VERBOSITY_LEVELS.get(verbose, logging.DEBUG)
    log_path = _log_path(debug, log_file)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=10 * 1024 * 1024, backupCount=5
    )
    file_handler.setFormatter(
        logging.Formatter(
            '%(asctime)s %(threadName)s %(name)s %(levelname)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )
    )
    handlers: list[logging.Handler] = [file_handler]
    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = handlers
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        root_logger.addHandler(handler)

    logger.info(f"Logging to {log_path} at {logging.getLevelName(level)}")


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="milight")
@click.option(
    '--host',
    '-H',
    type=str,
    default=None,
    help='IP address or host name of the WiFi box (overrides config)'
)
@click.option(
    '--port',
    '-p',
    type=click.IntRange(1, 65535),
    default=None,
    help='UDP port of the WiFi box (overrides config, default: 8899)'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f'Config file (default: {DEFAULT_CONFIG_PATH})'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./milight-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    host: Optional[str],
    port: Optional[int],
    config_path: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    Control Milight / LimitlessLED bulbs through a WiFi box.

    \b
    Examples:
      # Switch group 1 on
      milight --host 192.168.1.100 on

      # Show red on group 2
      milight color red -g 2

      # Blink blue three times
      milight blink '#0000FF' --times 3

      # Dim group 1 to off over ten minutes
      milight sleep --duration 600

      # Write a config file with your box address
      milight --host 192.168.1.42 config init
    """
    setup_logging(verbose, debug, log_file, log_level)

    path = config_path or DEFAULT_CONFIG_PATH
    try:
        config_obj = MilightConfig.load_or_default(path)
    except ConfigurationError as e:
        logger.error(f"Could not load config: {e.technical_message}")
        report_error(e)
        sys.exit(1)

    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if overrides:
        config_obj = config_obj.model_copy(update=overrides)

    ctx.obj = CliSettings(config=config_obj, config_path=path)


cli.add_command(on)
cli.add_command(off)
cli.add_command(white)
cli.add_command(brightness)
cli.add_command(color)
cli.add_command(disco)
cli.add_command(blink)
cli.add_command(fade)
cli.add_command(sleep)
cli.add_command(config)

if __name__ == "__main__":
    cli()
