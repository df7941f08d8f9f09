"""
Entry point for duopane.
"""
import argparse
import curses
import locale
import logging
import os
import sys

from .core.app import APP_VERSION, DuoPaneApp
from .core.config import load_config

LOGGER = logging.getLogger(__name__)


def configure_logging(environ=None):
    """Log to a file (never the terminal) when DUOPANE_DEBUG is set."""
    environ = os.environ if environ is None else environ
    if not environ.get('DUOPANE_DEBUG'):
        return False
    logging.basicConfig(
        level=logging.DEBUG,
        filename=environ.get('DUOPANE_LOG') or 'duopane.log',
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    return True


def build_parser():
    parser = argparse.ArgumentParser(
        prog='duopane',
        description='Dual-pane terminal file manager.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {APP_VERSION}')
    parser.add_argument('--config', metavar='PATH', help='configuration file to load')
    return parser


def run(argv=None):
    """Run duopane and return process exit code."""
    args = build_parser().parse_args(argv)

    try:
        locale.setlocale(locale.LC_ALL, '')
    except locale.Error:
        pass
    configure_logging()

    try:
        start_path = os.getcwd()
    except OSError as e:
        print(f'Error: cannot determine working directory: {e}', file=sys.stderr)
        return 1

    config = load_config(args.config)
    LOGGER.debug('Starting duopane %s in %s (theme=%s)', APP_VERSION, start_path, config.theme)

    def main(stdscr):
        DuoPaneApp(stdscr, config=config, start_path=start_path).run()

    try:
        curses.wrapper(main)
        return 0
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        # Top-level crash guard restores the terminal before reporting.
        try:
            curses.endwin()
        except curses.error:
            pass
        LOGGER.exception('duopane crashed')
        print(f'\nError: {e}', file=sys.stderr)
        return 1


def main_cli():
    """Console script entrypoint."""
    return run()


if __name__ == '__main__':
    raise SystemExit(main_cli())
