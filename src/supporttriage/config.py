"""Summary: Application configuration for SupportTriage.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for providers, storage, and the API.

    Importance: Passed explicitly into services so nothing reads ambient state.
    Alternatives: Store settings in module-level globals read at import time.
    """

    db_path: str
    ai_provider: str
    groq_api_key: str | None
    groq_model: str
    groq_base_url: str
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str
    ollama_url: str
    ollama_model: str
    temperature: float
    request_timeout_seconds: float
    strict_categories: bool
    api_host: str
    api_port: int
    api_key: str

    @property
    def model_name(self) -> str:
        """Summary: Resolve the model identifier for the selected provider.

        Importance: Keeps audit records tied to the model actually called.
        Alternatives: Store a separate model field per provider in every record.
        """

        if self.ai_provider == "groq":
            return self.groq_model
        if self.ai_provider == "openai":
            return self.openai_model
        if self.ai_provider == "ollama":
            return self.ollama_model
        return self.ai_provider

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("SUPPORTTRIAGE_DB_PATH", defaults["db_path"]),
            ai_provider=os.getenv("SUPPORTTRIAGE_AI_PROVIDER", defaults["ai_provider"]),
            groq_api_key=os.getenv("GROQ_API_KEY") or defaults["groq_api_key"] or None,
            groq_model=os.getenv("GROQ_MODEL", defaults["groq_model"]),
            groq_base_url=os.getenv("GROQ_BASE_URL", defaults["groq_base_url"]),
            openai_api_key=os.getenv("OPENAI_API_KEY") or defaults["openai_api_key"] or None,
            openai_model=os.getenv("OPENAI_MODEL", defaults["openai_model"]),
            openai_base_url=os.getenv("OPENAI_BASE_URL", defaults["openai_base_url"]),
            ollama_url=os.getenv("OLLAMA_URL", defaults["ollama_url"]),
            ollama_model=os.getenv("OLLAMA_MODEL", defaults["ollama_model"]),
            temperature=float(os.getenv("SUPPORTTRIAGE_TEMPERATURE", defaults["temperature"])),
            request_timeout_seconds=float(
                os.getenv(
                    "SUPPORTTRIAGE_REQUEST_TIMEOUT_SECONDS", defaults["request_timeout_seconds"]
                )
            ),
            strict_categories=parse_bool(
                os.getenv("SUPPORTTRIAGE_STRICT_CATEGORIES", defaults["strict_categories"])
            ),
            api_host=os.getenv("SUPPORTTRIAGE_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("SUPPORTTRIAGE_API_PORT", defaults["api_port"])),
            api_key=os.getenv("SUPPORTTRIAGE_API_KEY", defaults["api_key"]),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps API keys out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def parse_bool(value: str | bool) -> bool:
    """Parse a boolean flag from a defaults value or environment string."""

    if isinstance(value, bool):
        return value
    return value.strip().lower() in {"1", "true", "yes", "on"}
