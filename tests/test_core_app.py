import types
import unittest
from unittest import mock

from _support import RecordingExecutor, import_fresh, install_fake_curses, restore_curses


class CoreAppTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.fake_curses, cls._prev_curses = install_fake_curses()
        cls.config_mod = import_fresh("duopane.core.config")
        cls.app_mod = import_fresh("duopane.core.app")

    @classmethod
    def tearDownClass(cls):
        restore_curses(cls._prev_curses)

    def _stdscr(self):
        return types.SimpleNamespace(
            getmaxyx=mock.Mock(return_value=(30, 100)),
            keypad=mock.Mock(),
            nodelay=mock.Mock(),
            timeout=mock.Mock(),
        )

    def _make_app(self, config=None):
        self.executor = RecordingExecutor()
        config = config or self.config_mod.AppConfig(theme="midnight")
        with (
            mock.patch.object(self.app_mod, "TaskRunner", return_value=self.executor) as runner,
            mock.patch.object(self.app_mod, "check_unicode_support", return_value=False),
        ):
            app = self.app_mod.DuoPaneApp(self._stdscr(), config=config, start_path="/start")
        runner.assert_called_once_with(config)
        return app

    def test_init_wires_theme_controller_and_first_listing(self):
        app = self._make_app()

        self.assertEqual(app.theme.key, "midnight")
        self.assertFalse(app.use_unicode)
        self.assertIs(app.tasks, self.executor)
        self.assertEqual((app.controller.width, app.controller.height), (100, 30))
        self.assertEqual(app.controller.left.path, "/start")
        self.assertEqual(
            self.executor.of("load_directory"),
            [(0, "/start", None), (1, "/start", None)],
        )
        app.stdscr.keypad.assert_called_once_with(True)
        self.assertTrue(app.running)

    def test_running_follows_controller(self):
        app = self._make_app()
        app.controller.handle_key("f10")
        self.assertFalse(app.running)

    def test_init_uses_cwd_without_start_path(self):
        self.executor = RecordingExecutor()
        with (
            mock.patch.object(self.app_mod, "TaskRunner", return_value=self.executor),
            mock.patch.object(self.app_mod.os, "getcwd", return_value="/cwd"),
        ):
            app = self.app_mod.DuoPaneApp(self._stdscr(), config=self.config_mod.AppConfig())
        self.assertEqual(app.controller.right.path, "/cwd")

    def test_cleanup_warns_about_running_operation(self):
        app = self._make_app()
        app.controller.active_operation_id = 4
        with self.assertLogs("duopane.core.app", level="WARNING") as logs:
            app.cleanup()
        self.assertIn("operation 4", logs.output[0])

    def test_cleanup_is_quiet_when_idle(self):
        app = self._make_app()
        with mock.patch.object(self.app_mod.LOGGER, "warning") as warning:
            app.cleanup()
        warning.assert_not_called()

    def test_run_delegates_to_loop(self):
        app = self._make_app()
        with mock.patch.object(self.app_mod, "run_app_loop") as loop:
            app.run()
        loop.assert_called_once_with(app)


if __name__ == "__main__":
    unittest.main()
