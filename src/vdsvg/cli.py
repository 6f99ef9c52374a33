"""Command line frontend: convert a JSON layer file to SVG."""

from __future__ import annotations

import argparse
import datetime
import gettext
import logging
import pathlib
import sys
from typing import TYPE_CHECKING, Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from . import layers, svgexport

if TYPE_CHECKING:
    import os
    from collections.abc import Sequence

_ = gettext.gettext
logger = logging.getLogger(__name__)

# Name of the TOML table that holds option defaults
CONFIG_TABLE = 'vdsvg'

# TOML key -> (option dest, type)
_CONFIG_KEYS: dict[str, tuple[str, type]] = {
    'width': ('width', float),
    'height': ('height', float),
    'x': ('x', float),
    'y': ('y', float),
    'with-ids': ('with_ids', bool),
    'indent': ('indent', int),
    'multi-attribute-indent': ('multi_attribute_indent', int),
}

_DEFAULTS: dict[str, Any] = {
    'width': None,
    'height': None,
    'x': None,
    'y': None,
    'with_ids': True,
    'indent': 4,
    'multi_attribute_indent': 4,
}


class ConfigError(Exception):
    """Malformed configuration file."""


def errormsg(
    *args: Any,  # noqa: ANN401
    exit_status: int | None = None,
    **kwargs: Any,  # noqa: ANN401
) -> None:
    """Write an error msg to stderr and optionally exit."""
    print(*args, file=sys.stderr, **kwargs)  # noqa: T201
    if exit_status is not None:
        sys.exit(exit_status)


def main(argv: Sequence[str] | None = None) -> None:
    """Convert a JSON layer file to an SVG document."""
    options = parse_options(argv)

    if options.log_create:
        create_log(options.log_filename, options.log_level)
        logger.info('Invocation: %s', ' '.join(argv or sys.argv))

    try:
        if options.config:
            apply_config(options, load_config(options.config))
        else:
            apply_config(options, {})
        if options.input_file:
            with options.input_file.open(encoding='utf8') as f:
                vector_layer = layers.load_layers(f)
        else:
            vector_layer = layers.load_layers(sys.stdin)
    except (ConfigError, layers.LayerModelError) as e:
        errormsg(str(e), exit_status=1)
    except (OSError, UnicodeDecodeError) as e:
        errormsg(f'Unable to read input: {e}', exit_status=1)

    document = svgexport.to_svg_string(
        vector_layer,
        width=options.width,
        height=options.height,
        x=options.x,
        y=options.y,
        with_ids_and_ns=options.with_ids,
        indent=options.indent,
        multi_attribute_indent=options.multi_attribute_indent,
    )
    logger.info('Converted %s', options.input_file or '<stdin>')

    try:
        if options.output_file:
            with options.output_file.open('w', encoding='utf8') as f:
                f.write(document)
                f.write('\n')
        else:
            sys.stdout.write(document)
            sys.stdout.write('\n')
    except OSError as e:
        errormsg(f'Unable to write SVG output: {e}', exit_status=1)


def parse_options(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Set up option spec and parse command line options.

    Options that are not given on the command line are left as None
    so that they can be filled in from a configuration file.
    """
    parser = argparse.ArgumentParser(
        prog='vdsvg', description=_('Convert a vector drawable to SVG.')
    )
    parser.add_argument(
        '--width', type=float, help=_('Root element width (px)')
    )
    parser.add_argument(
        '--height', type=float, help=_('Root element height (px)')
    )
    parser.add_argument('--x', type=float, help=_('Root element x (px)'))
    parser.add_argument('--y', type=float, help=_('Root element y (px)'))
    parser.add_argument(
        '--no-ids',
        dest='with_ids',
        action='store_false',
        default=None,
        help=_('Omit element ids and the SVG namespace declaration'),
    )
    parser.add_argument(
        '--indent', type=int, help=_('Spaces per indentation level')
    )
    parser.add_argument(
        '--multi-attribute-indent',
        type=int,
        help=_('Attribute indentation when an element has several'),
    )
    parser.add_argument(
        '--output-file', '-o', type=pathlib.Path, help=_('Output file.')
    )
    parser.add_argument(
        '--config', type=pathlib.Path, help=_('TOML configuration file')
    )
    parser.add_argument(
        '--log-create', action='store_true', help=_('Create log file')
    )
    parser.add_argument('--log-level', default='DEBUG', help=_('Log level'))
    parser.add_argument(
        '--log-filename',
        default=None,
        help=_('Full pathname of log file'),
    )
    parser.add_argument(
        'input_file',
        nargs='?',
        type=pathlib.Path,
        help=_('JSON layer file (default is stdin)'),
    )
    return parser.parse_args(argv)


def load_config(path: str | os.PathLike) -> dict[str, Any]:
    """Read option defaults from the `[vdsvg]` table of a TOML file.

    Returns:
        A dictionary of option dest names to values.

    Raises:
        ConfigError: If the file can't be read or has bad values.
    """
    try:
        with pathlib.Path(path).open('rb') as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f'Unable to read config file {path}: {e}') from e

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f'[{CONFIG_TABLE}] must be a table')

    config: dict[str, Any] = {}
    for key, value in table.items():
        if key not in _CONFIG_KEYS:
            raise ConfigError(f'Unknown config option: {key}')
        dest, value_type = _CONFIG_KEYS[key]
        if value_type is bool:
            if not isinstance(value, bool):
                raise ConfigError(f'{key} must be true or false')
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f'{key} must be a number')
        config[dest] = value_type(value)
    return config


def apply_config(options: argparse.Namespace, config: dict[str, Any]) -> None:
    """Fill unset options from the configuration, then from defaults."""
    for dest, default in _DEFAULTS.items():
        if getattr(options, dest) is None:
            setattr(options, dest, config.get(dest, default))


def create_log(
    log_path: str | os.PathLike | None, log_level: str | None
) -> None:
    """Create a log file for debug output.

    Args:
        log_path: Path to log file. If None or empty the log path
            name will be the command line invocation name (argv[0])
            with a '.log' suffix in the current directory.
        log_level: Log level:
            'DEBUG', 'INFO', 'WARNING', 'ERROR', or 'CRITICAL'.
            Default is 'INFO'.
    """
    if not log_path:
        log_path = f'{pathlib.Path(sys.argv[0]).stem or "vdsvg"}.log'
    if not log_level:
        log_level = 'INFO'
    logging.basicConfig(
        filename=log_path,
        filemode='w',
        level=log_level.upper(),
    )
    logger.info(
        'Log started %s, level=%s',
        datetime.datetime.now(tz=datetime.timezone.utc),
        logging.getLevelName(logger.getEffectiveLevel()),
    )
    logger.info('Python version: %s', sys.version)
