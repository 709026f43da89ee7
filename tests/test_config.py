"""Summary: Tests for configuration loading.

Importance: Ensures defaults, .env, and environment overrides behave correctly.
Alternatives: Validate configuration manually during runtime.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from supporttriage.config import AppConfig, load_defaults, load_dotenv, parse_bool

_ENV_KEYS = (
    "SUPPORTTRIAGE_DB_PATH",
    "SUPPORTTRIAGE_AI_PROVIDER",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "GROQ_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "OLLAMA_URL",
    "OLLAMA_MODEL",
    "SUPPORTTRIAGE_TEMPERATURE",
    "SUPPORTTRIAGE_REQUEST_TIMEOUT_SECONDS",
    "SUPPORTTRIAGE_STRICT_CATEGORIES",
    "SUPPORTTRIAGE_API_HOST",
    "SUPPORTTRIAGE_API_PORT",
    "SUPPORTTRIAGE_API_KEY",
)

DEFAULTS = {
    "db_path": "test.db",
    "ai_provider": "groq",
    "groq_api_key": "",
    "groq_model": "llama-3.3-70b-versatile",
    "groq_base_url": "https://api.groq.com/openai/v1",
    "openai_api_key": "",
    "openai_model": "gpt-4o-mini",
    "openai_base_url": "https://api.openai.com/v1",
    "ollama_url": "http://localhost:11434",
    "ollama_model": "llama3",
    "temperature": "0.3",
    "request_timeout_seconds": "60",
    "strict_categories": "false",
    "api_host": "127.0.0.1",
    "api_port": "8000",
    "api_key": "",
}


def _write_defaults(root: Path) -> None:
    (root / "config").mkdir()
    (root / "config" / "defaults.json").write_text(json.dumps(DEFAULTS), encoding="utf-8")


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_defaults_reads_json(tmp_path: Path) -> None:
    """Summary: Verify defaults are parsed from JSON.

    Importance: Confirms config file is the source of truth for variables.
    Alternatives: Hardcode defaults in the test.
    """

    defaults_path = tmp_path / "defaults.json"
    defaults_path.write_text("{\"db_path\": \"test.db\"}", encoding="utf-8")
    defaults = load_defaults(defaults_path)
    assert defaults["db_path"] == "test.db"


def test_load_defaults_requires_file(tmp_path: Path) -> None:
    """Summary: A missing defaults file is an error.

    Importance: Misconfigured deployments fail loudly.
    Alternatives: Fall back to hardcoded defaults.
    """

    with pytest.raises(FileNotFoundError):
        load_defaults(tmp_path / "missing.json")


def test_load_dotenv_sets_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Ensure .env values populate environment variables.

    Importance: Validates local secret loading without external tools.
    Alternatives: Assume OS environment is always set.
    """

    env_path = tmp_path / ".env"
    env_path.write_text("# comment\nSUPPORTTRIAGE_AI_PROVIDER=ollama\n", encoding="utf-8")
    # setenv first so teardown removes the value load_dotenv writes
    monkeypatch.setenv("SUPPORTTRIAGE_AI_PROVIDER", "unset")
    monkeypatch.delenv("SUPPORTTRIAGE_AI_PROVIDER")
    load_dotenv(env_path)
    assert os.getenv("SUPPORTTRIAGE_AI_PROVIDER") == "ollama"


def test_app_config_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Verify AppConfig honors defaults when env is absent.

    Importance: Confirms config file remains the baseline for variables.
    Alternatives: Inline defaults directly in the AppConfig class.
    """

    _clear_env(monkeypatch)
    _write_defaults(tmp_path)
    monkeypatch.chdir(tmp_path)
    config = AppConfig.from_env()
    assert config.db_path == "test.db"
    assert config.ai_provider == "groq"
    assert config.groq_api_key is None
    assert config.model_name == "llama-3.3-70b-versatile"
    assert config.temperature == 0.3
    assert config.request_timeout_seconds == 60.0
    assert config.strict_categories is False
    assert config.api_port == 8000


def test_app_config_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Environment variables override defaults.

    Importance: Deployments set keys and flags without editing files.
    Alternatives: Require editing the defaults file.
    """

    _clear_env(monkeypatch)
    _write_defaults(tmp_path)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SUPPORTTRIAGE_AI_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("SUPPORTTRIAGE_STRICT_CATEGORIES", "yes")
    monkeypatch.setenv("SUPPORTTRIAGE_TEMPERATURE", "0.1")
    config = AppConfig.from_env()
    assert config.openai_api_key == "sk-test"
    assert config.model_name == "gpt-4o-mini"
    assert config.strict_categories is True
    assert config.temperature == 0.1


@pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("off", False), ("", False), (True, True)])
def test_parse_bool(value: str | bool, expected: bool) -> None:
    """Summary: Boolean flags accept common spellings.

    Importance: Keeps environment flags forgiving.
    Alternatives: Accept only "true" and "false".
    """

    assert parse_bool(value) is expected
