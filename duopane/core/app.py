"""
Main duopane application class.
"""
import logging
import os

from ..theme import get_theme
from ..utils import check_unicode_support, init_colors
from .bootstrap import configure_terminal
from .config import load_config
from .controller import InteractionController
from .event_loop import run_app_loop
from .tasks import TaskRunner

LOGGER = logging.getLogger(__name__)

APP_VERSION = '0.3.0'


class DuoPaneApp:
    """Wires the terminal, the task runner and the controller together."""

    def __init__(self, stdscr, config=None, start_path=None):
        self.stdscr = stdscr
        self.config = config if config is not None else load_config()
        self.theme = get_theme(self.config.theme)
        self.use_unicode = check_unicode_support()

        configure_terminal(stdscr)
        init_colors(self.theme)

        self.tasks = TaskRunner(self.config)
        self.controller = InteractionController(
            self.tasks, self.config, start_path=start_path or os.getcwd()
        )
        h, w = stdscr.getmaxyx()
        self.controller.resize(w, h)
        self.controller.start()

    @property
    def running(self):
        return self.controller.running

    def cleanup(self):
        """Log unfinished work; daemon workers are left to the interpreter."""
        controller = self.controller
        if controller.operation_busy:
            LOGGER.warning(
                'Exiting with operation %s still running (%d queued).',
                controller.active_operation_id,
                len(controller.pending_requests),
            )

    def run(self):
        """Main event loop."""
        return run_app_loop(self)
