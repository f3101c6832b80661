import json
import tempfile
import unittest
from pathlib import Path

from lumina.config import (
    LauncherConfig,
    Settings,
    load_config,
    resolve_service,
    save_config,
)
from lumina.exceptions import ConfigurationError
from lumina.utils import PathManager


class TestLauncherConfigFile(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "lumina" / "config.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_gives_defaults(self):
        config = load_config(self.path)

        self.assertEqual(config.ai_service, "openrouter")
        self.assertIsNone(config.openrouter_api_key)
        self.assertEqual(config.default_model, "anthropic/claude-3.5-sonnet")

    def test_save_then_load(self):
        saved = LauncherConfig(
            ai_service="openai",
            openai_api_key="sk-test",
            default_model="gpt-4o-mini",
            search_directories=["/srv/docs"],
        )

        written = save_config(saved, self.path)

        self.assertEqual(written, self.path)
        self.assertEqual(json.loads(self.path.read_text())["ai_service"], "openai")
        self.assertEqual(load_config(self.path), saved)

    def test_partial_file_fills_defaults(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text('{"openrouter_api_key": "sk-or"}')

        config = load_config(self.path)

        self.assertEqual(config.openrouter_api_key, "sk-or")
        self.assertEqual(config.ai_service, "openrouter")

    def test_invalid_file_falls_back_to_defaults(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{ this is not json")

        with self.assertLogs("lumina.config", level="WARNING"):
            config = load_config(self.path)

        self.assertEqual(config, LauncherConfig())


class TestResolveService(unittest.TestCase):

    def test_openrouter(self):
        endpoint = resolve_service(LauncherConfig(openrouter_api_key="sk-or-1234567890"))

        self.assertEqual(endpoint.url, "https://openrouter.ai/api/v1/chat/completions")
        self.assertEqual(endpoint.api_key, "sk-or-1234567890")
        self.assertNotIn("1234567890", repr(endpoint))

    def test_openai(self):
        endpoint = resolve_service(
            LauncherConfig(ai_service="openai", openai_api_key="sk-1", default_model="gpt-4o")
        )

        self.assertEqual(endpoint.url, "https://api.openai.com/v1/chat/completions")
        self.assertEqual(endpoint.model, "gpt-4o")

    def test_key_for_other_service_does_not_count(self):
        with self.assertRaises(ConfigurationError) as ctx:
            resolve_service(LauncherConfig(ai_service="openai", openrouter_api_key="sk-or"))

        self.assertIn("openai", str(ctx.exception))

    def test_blank_key_is_missing(self):
        with self.assertRaises(ConfigurationError):
            resolve_service(LauncherConfig(openrouter_api_key="   "))

    def test_unsupported_service(self):
        with self.assertRaises(ConfigurationError) as ctx:
            resolve_service(LauncherConfig(ai_service="ollama", openrouter_api_key="k"))

        self.assertIn("Unsupported", str(ctx.exception))


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        s = Settings(_env_file=None)

        self.assertEqual(s.result_limit, 10)
        self.assertEqual(s.focus_hide_delay, 0.150)
        self.assertEqual(s.compact_window_height, 110)


class TestPathManager(unittest.TestCase):

    def test_explicit_override(self):
        manager = PathManager(env={}, config_dir="/opt/lumina-portable")

        self.assertEqual(manager.get_config_file(), Path("/opt/lumina-portable/config.json"))

    def test_environment_override(self):
        manager = PathManager(env={"LUMINA_CONFIG_DIR": "/tmp/lumina-env"})

        self.assertEqual(manager.get_config_dir(), Path("/tmp/lumina-env"))

    def test_ensure_config_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            manager = PathManager(env={}, config_dir=str(Path(tmp) / "nested" / "lumina"))

            created = manager.ensure_config_dir()

            self.assertTrue(created.is_dir())


if __name__ == "__main__":
    unittest.main()
