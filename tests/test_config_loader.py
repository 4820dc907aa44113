from pathlib import Path
import tempfile
import unittest

from gitfluff.config.loader import find_config, load_config, read_config
from gitfluff.errors import ConfigError


class ConfigLoaderTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self):
        self._tmp.cleanup()

    def test_no_config_found(self):
        self.assertIsNone(load_config(start_dir=self.root))

    def test_discovers_config_in_parent_directory(self):
        config_path = self.root / ".gitfluff.toml"
        config_path.write_text('preset = "simple"\n\n[rules]\nno_emojis = true\n', encoding="utf-8")
        nested = self.root / "a" / "b"
        nested.mkdir(parents=True)

        path, data = load_config(start_dir=nested)
        self.assertEqual(path, config_path)
        self.assertEqual(data, {"preset": "simple", "rules": {"no_emojis": True}})

    def test_gitfluff_toml_wins_over_legacy_name(self):
        (self.root / ".fluff.toml").write_text('preset = "simple"\n', encoding="utf-8")
        self.assertEqual(find_config(self.root), self.root / ".fluff.toml")

        (self.root / ".gitfluff.toml").write_text('preset = "no-ai"\n', encoding="utf-8")
        self.assertEqual(find_config(self.root), self.root / ".gitfluff.toml")

    def test_explicit_path(self):
        config_path = self.root / "custom.toml"
        config_path.write_text(
            '[[rules.excludes]]\npattern = "(?i)wip"\nmessage = "no WIP"\n',
            encoding="utf-8",
        )
        path, data = load_config(explicit_path=config_path)
        self.assertEqual(path, config_path)
        self.assertEqual(data["rules"]["excludes"], [{"pattern": "(?i)wip", "message": "no WIP"}])

    def test_missing_explicit_path_is_config_error(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(explicit_path=self.root / "missing.toml")
        self.assertIn("failed to read config file", str(ctx.exception))

    def test_invalid_toml_is_config_error(self):
        config_path = self.root / ".gitfluff.toml"
        config_path.write_text("preset = \n", encoding="utf-8")
        with self.assertRaises(ConfigError) as ctx:
            read_config(config_path)
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_non_utf8_config_is_config_error(self):
        config_path = self.root / ".gitfluff.toml"
        config_path.write_bytes(b'preset = "caf\xe9"\n')
        with self.assertRaises(ConfigError) as ctx:
            read_config(config_path)
        self.assertIn("failed to read config file", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, UnicodeDecodeError)


if __name__ == "__main__":
    unittest.main()
