import unittest
from pathlib import Path
from unittest import mock

from _support import import_fresh, install_fake_curses, make_repo_tmpdir, restore_curses


class ThemeAndConfigTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.fake_curses, cls._prev_curses = install_fake_curses()
        cls.theme = import_fresh("duopane.theme")
        cls.config = import_fresh("duopane.core.config")

    @classmethod
    def tearDownClass(cls):
        restore_curses(cls._prev_curses)

    def test_theme_table_and_get_theme_fallback(self):
        self.assertEqual(sorted(self.theme.THEMES), ["classic", "hacker", "midnight"])
        self.assertEqual(self.theme.get_theme(None).key, "classic")
        self.assertEqual(self.theme.get_theme("unknown").key, "classic")
        self.assertEqual(self.theme.get_theme("hacker").key, "hacker")

    def test_every_theme_defines_every_role(self):
        roles = set(self.theme.ROLE_TO_PAIR_ID)
        for theme in self.theme.THEMES.values():
            self.assertEqual(set(theme.pairs), roles, theme.key)

    def test_theme_attr_uses_role_pair(self):
        theme = self.theme.get_theme("classic")
        pair_id = self.theme.ROLE_TO_PAIR_ID["cursor"]
        self.assertEqual(theme.attr("cursor"), pair_id * 10)

    def test_default_config_path_uses_home(self):
        fake_home = Path("/tmp/fakehome")
        with mock.patch.object(self.config.Path, "home", return_value=fake_home):
            cfg_path = self.config.default_config_path()
        self.assertEqual(cfg_path, fake_home / ".config" / "duopane" / "config.toml")

    def test_coerce_and_parse_scalar_helpers(self):
        self.assertTrue(self.config._coerce_bool(True))
        self.assertTrue(self.config._coerce_bool("on"))
        self.assertFalse(self.config._coerce_bool("off", default=True))
        self.assertTrue(self.config._coerce_bool("garbage", default=True))
        self.assertEqual(self.config._coerce_positive_int("12", 5), 12)
        self.assertEqual(self.config._coerce_positive_int(0, 5), 5)
        self.assertEqual(self.config._coerce_positive_int(True, 5), 5)
        self.assertEqual(self.config._coerce_positive_int(None, 5), 5)
        self.assertEqual(self.config._parse_scalar(""), "")
        self.assertEqual(self.config._parse_scalar('"abc"'), "abc")
        self.assertTrue(self.config._parse_scalar("true"))
        self.assertEqual(self.config._parse_scalar("262_144"), 262144)
        self.assertEqual(self.config._parse_scalar("x"), "x")

    def test_fallback_parser_reads_sections(self):
        parsed = self.config._fallback_parse_toml(
            """
            # comment
            top = 1
            [ui]
            theme = "midnight"  # trailing
            not a pair
            [operations]
            move_fallback = false
            """
        )
        self.assertEqual(parsed["top"], 1)
        self.assertEqual(parsed["ui"], {"theme": "midnight"})
        self.assertEqual(parsed["operations"], {"move_fallback": False})

    def test_invalid_toml_falls_back_to_simple_parser(self):
        # Duplicate keys are rejected by tomllib but accepted line by line.
        parsed = self.config._parse_toml('[ui]\ntheme = "classic"\ntheme = "hacker"\n')
        self.assertEqual(parsed, {"ui": {"theme": "hacker"}})

    def test_load_config_defaults_when_missing(self):
        tmp = make_repo_tmpdir()
        self.addCleanup(tmp.cleanup)
        cfg = self.config.load_config(Path(tmp.name) / "missing.toml")
        self.assertEqual(cfg, self.config.AppConfig())

    def test_load_config_normalizes_values(self):
        tmp = make_repo_tmpdir()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "config.toml"
        path.write_text(
            "[ui]\n"
            'theme = "NOPE"\n'
            "preview_max_bytes = -3\n"
            "[operations]\n"
            "progress_granularity = 4096\n"
            'move_fallback = "no"\n',
            encoding="utf-8",
        )
        cfg = self.config.load_config(path)
        self.assertEqual(cfg.theme, "classic")
        self.assertEqual(cfg.preview_max_bytes, self.config.PREVIEW_MAX_BYTES)
        self.assertEqual(cfg.progress_granularity, 4096)
        self.assertFalse(cfg.move_fallback)

    def test_non_table_sections_are_ignored(self):
        cfg = self.config._normalize_config({"ui": "hacker", "operations": 3})
        self.assertEqual(cfg, self.config.AppConfig())


if __name__ == "__main__":
    unittest.main()
