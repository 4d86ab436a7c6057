"""Test configuration loading"""

from pathlib import Path

import pytest

from mvfinder.core.config import (
    DEFAULT_ENRICHMENT_DELAY,
    DEFAULT_TIMEOUT,
    YOUTUBE_API_KEY_ENV,
    load_config,
)
from mvfinder.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, temp_dir):
    """Run every test in an empty directory without the API key variable"""
    monkeypatch.chdir(temp_dir)
    monkeypatch.delenv(YOUTUBE_API_KEY_ENV, raising=False)


def _write(temp_dir, text):
    path = temp_dir / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test load_config"""

    def test_defaults_without_file(self):
        config = load_config()
        assert config.network.timeout == DEFAULT_TIMEOUT
        assert config.enrichment.delay == DEFAULT_ENRICHMENT_DELAY
        assert config.youtube.api_key is None
        assert config.storage.path == (Path.home() / ".mvfinder" / "collection.db").resolve()
        assert config.output.export_directory == config.output.directory / "exports"

    def test_explicit_missing_file(self, temp_dir):
        with pytest.raises(ConfigError):
            load_config(temp_dir / "missing.yaml")

    def test_values_from_file(self, temp_dir):
        _write(temp_dir, (
            "storage:\n"
            f"  path: {temp_dir / 'db' / 'c.db'}\n"
            "output:\n"
            f"  directory: {temp_dir / 'out'}\n"
            f"  export_directory: {temp_dir / 'exports'}\n"
            "network:\n"
            "  timeout: 5\n"
            "  user_agent: tests/1.0\n"
            "enrichment:\n"
            "  delay: 0\n"
            "youtube:\n"
            "  api_key: abc\n"
        ))

        config = load_config()

        assert config.storage.path == (temp_dir / "db" / "c.db").resolve()
        assert config.output.directory == (temp_dir / "out").resolve()
        assert config.output.export_directory == (temp_dir / "exports").resolve()
        assert config.network.timeout == 5.0
        assert config.network.user_agent == "tests/1.0"
        assert config.enrichment.delay == 0.0
        assert config.youtube.api_key == "abc"

    def test_environment_overrides_api_key(self, temp_dir, monkeypatch):
        _write(temp_dir, "youtube:\n  api_key: from-file\n")
        monkeypatch.setenv(YOUTUBE_API_KEY_ENV, "from-env")
        assert load_config().youtube.api_key == "from-env"

    def test_empty_file(self, temp_dir):
        _write(temp_dir, "")
        assert load_config().network.timeout == DEFAULT_TIMEOUT

    @pytest.mark.parametrize("text", [
        "network: [1, 2]\n",
        "network:\n  timeout: -1\n",
        "network:\n  timeout: fast\n",
        "network:\n  user_agent: ''\n",
        "enrichment:\n  delay: -0.5\n",
        "storage:\n  path: 42\n",
        "youtube:\n  api_key: 123\n",
        "- just\n- a list\n",
        "key: [unclosed\n",
    ])
    def test_invalid_values(self, temp_dir, text):
        _write(temp_dir, text)
        with pytest.raises(ConfigError):
            load_config()
