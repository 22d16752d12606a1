"""
Configuration Tests
-------------------
Defaults, YAML overrides and MONAD_* environment overrides.
"""

from infra.config import DEFAULTS, ConfigManager


class TestConfigManager:

    def test_defaults_without_file(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing.yaml"))

        assert config.get("server.port") == 4000
        assert config.get("twitter.base_url") == "https://api.memory.lol"
        assert config.get("commands.registry_path") is None

    def test_no_path(self):
        config = ConfigManager(None)
        assert config.get("executors.dry_run") is False

    def test_file_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 5000\n", encoding="utf-8")

        config = ConfigManager(str(path))

        assert config.get("server.port") == 5000
        assert config.get("server.host") == "127.0.0.1"  # merged, not replaced

    def test_env_overrides_with_coercion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MONAD_SERVER_PORT", "4100")
        monkeypatch.setenv("MONAD_EXECUTORS_DRY_RUN", "yes")
        monkeypatch.setenv("MONAD_EXECUTORS_TIMEOUT_SECONDS", "2.5")

        config = ConfigManager(str(tmp_path / "missing.yaml"))

        assert config.get("server.port") == 4100
        assert config.get("executors.dry_run") is True
        assert config.get("executors.timeout_seconds") == 2.5

    def test_get_section_applies_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MONAD_TWITTER_REPORT_DIR", "/tmp/reports")
        section = ConfigManager(str(tmp_path / "missing.yaml")).get_section("twitter")

        assert section["report_dir"] == "/tmp/reports"
        assert set(section) == set(DEFAULTS["twitter"])

    def test_unknown_key_default(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing.yaml"))
        assert config.get("server.missing", "fallback") == "fallback"

    def test_set_and_reload(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing.yaml"))
        config.set("server.port", 9999)
        assert config.get("server.port") == 9999

        config.reload()
        assert config.get("server.port") == 4000

    def test_defaults_not_mutated(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing.yaml"))
        config.set("logging.level", "DEBUG")
        assert DEFAULTS["logging"]["level"] == "INFO"

    def test_bundled_config_file(self, project_root):
        config = ConfigManager(str(project_root / "config.yaml"))
        assert config.get("server.port") == 4000
        assert config.get("llm.api_key_env") == "ANTHROPIC_API_KEY"
