"""User settings stored as JSON in the XDG config directory.

Layout of ``settings.json``::

    {
      "default_language": "en",
      "llm": {
        "provider": "openai",
        "fast_model": "gpt-4o-mini",
        "quality_model": "gpt-4o",
        "openai_api_key": "...",
        "anthropic_api_key": "...",
        "use_web_auth": true
      }
    }

Every key is optional. Missing models fall back to the provider's defaults
and missing API keys fall back to the environment.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from bookwright.config.paths import get_paths

logger = logging.getLogger(__name__)

PROVIDERS = ("openai", "anthropic")
DEFAULT_PROVIDER = "openai"
DEFAULT_LANGUAGE = "en"

# (fast, quality) model per provider
DEFAULT_MODELS: dict[str, tuple[str, str]] = {
    "openai": ("gpt-4o-mini", "gpt-4o"),
    "anthropic": ("claude-haiku-4-5", "claude-sonnet-4-5"),
}

_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def get_settings_path() -> Path:
    return get_paths().global_settings


class Settings:
    """How Bookwright reaches the model, persisted between runs.

    Per-book choices (subject, tier, lengths) are not settings; they live in
    :class:`~bookwright.models.WorkflowParams` for a single run. Every setter
    writes the file immediately.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        path = get_settings_path()
        if not path.exists():
            return
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", path, e)
            return
        if isinstance(loaded, dict):
            self._data = loaded
        else:
            logger.warning("Ignoring settings file %s: not a JSON object", path)

    def _save(self) -> None:
        path = get_settings_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("Could not write settings to %s: %s", path, e)
            return
        logger.info("Saved settings to %s", path)

    # ─── llm section ─────────────────────────────────────────────────────

    def _llm_value(self, key: str) -> Any:
        section = self._data.get("llm")
        return section.get(key) if isinstance(section, dict) else None

    def _store_llm_value(self, key: str, value: Any) -> None:
        """Store ``value`` under ``llm``; None removes the key."""
        section = self._data.get("llm")
        if not isinstance(section, dict):
            section = {}
        if value is None:
            section.pop(key, None)
        else:
            section[key] = value
        self._data["llm"] = section
        self._save()

    def _model_for(self, tier_index: int, key: str) -> str:
        configured = self._llm_value(key)
        if configured:
            return str(configured)
        return DEFAULT_MODELS[self.llm_provider][tier_index]

    def _api_key_for(self, provider: str) -> str | None:
        stored = self._llm_value(f"{provider}_api_key")
        if stored:
            return str(stored)
        return os.environ.get(_KEY_ENV_VARS[provider])

    # ─── properties ──────────────────────────────────────────────────────

    @property
    def default_language(self) -> str:
        """Language code preselected on the input form."""
        return str(self._data.get("default_language") or DEFAULT_LANGUAGE)

    @default_language.setter
    def default_language(self, value: str) -> None:
        self._data["default_language"] = value
        self._save()

    @property
    def llm_provider(self) -> str:
        provider = self._llm_value("provider") or DEFAULT_PROVIDER
        if provider not in PROVIDERS:
            logger.warning("Unknown provider %r in settings, using openai", provider)
            return DEFAULT_PROVIDER
        return str(provider)

    @llm_provider.setter
    def llm_provider(self, value: str) -> None:
        if value not in PROVIDERS:
            raise ValueError(f"Unknown LLM provider: {value}")
        self._store_llm_value("provider", value)

    @property
    def fast_model(self) -> str:
        return self._model_for(0, "fast_model")

    @fast_model.setter
    def fast_model(self, value: str | None) -> None:
        self._store_llm_value("fast_model", value or None)

    @property
    def quality_model(self) -> str:
        return self._model_for(1, "quality_model")

    @quality_model.setter
    def quality_model(self, value: str | None) -> None:
        self._store_llm_value("quality_model", value or None)

    @property
    def openai_api_key(self) -> str | None:
        """Stored key, else ``OPENAI_API_KEY``."""
        return self._api_key_for("openai")

    @openai_api_key.setter
    def openai_api_key(self, value: str | None) -> None:
        self._store_llm_value("openai_api_key", value or None)

    @property
    def anthropic_api_key(self) -> str | None:
        """Stored key, else ``ANTHROPIC_API_KEY``."""
        return self._api_key_for("anthropic")

    @anthropic_api_key.setter
    def anthropic_api_key(self, value: str | None) -> None:
        self._store_llm_value("anthropic_api_key", value or None)

    @property
    def use_web_auth(self) -> bool:
        """Sign in to Anthropic through Claude web auth instead of a key."""
        stored = self._llm_value("use_web_auth")
        return True if stored is None else bool(stored)

    @use_web_auth.setter
    def use_web_auth(self, value: bool) -> None:
        self._store_llm_value("use_web_auth", bool(value))


settings = Settings()
