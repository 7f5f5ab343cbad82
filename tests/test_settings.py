"""Tests for persisted settings and XDG paths."""

import json
from pathlib import Path

import pytest

from bookwright.config.paths import get_paths
from bookwright.config.settings import Settings, settings


def test_defaults() -> None:
    assert settings.default_language == "en"
    assert settings.llm_provider == "openai"
    assert settings.fast_model == "gpt-4o-mini"
    assert settings.quality_model == "gpt-4o"
    assert settings.use_web_auth is True
    assert settings.openai_api_key is None


def test_provider_changes_default_models() -> None:
    settings.llm_provider = "anthropic"
    assert settings.fast_model == "claude-haiku-4-5"
    assert settings.quality_model == "claude-sonnet-4-5"


def test_unknown_provider_rejected() -> None:
    with pytest.raises(ValueError):
        settings.llm_provider = "gemini"


def test_unknown_stored_provider_falls_back() -> None:
    settings._data = {"llm": {"provider": "gemini"}}
    assert settings.llm_provider == "openai"


def test_api_key_env_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    assert settings.openai_api_key == "sk-env"
    settings.openai_api_key = "sk-stored"
    assert settings.openai_api_key == "sk-stored"


def test_clearing_model_restores_default() -> None:
    settings.fast_model = "custom"
    assert settings.fast_model == "custom"
    settings.fast_model = None
    assert settings.fast_model == "gpt-4o-mini"


@pytest.mark.usefixtures("isolated_paths")
class TestSettingsFile:
    """Settings round-trip through the XDG config file."""

    def test_paths_follow_xdg(self, tmp_path: Path) -> None:
        paths = get_paths()
        assert paths.global_settings == tmp_path / "config/bookwright/settings.json"
        assert paths.debug_log == tmp_path / "state/bookwright/debug.log"
        assert paths.book_file("tea.md") == Path.cwd() / "books/tea.md"

    def test_book_file_never_overwrites(self) -> None:
        paths = get_paths()
        paths.output_dir.mkdir()
        (paths.output_dir / "tea.md").write_text("old", encoding="utf-8")
        (paths.output_dir / "tea-2.md").write_text("older", encoding="utf-8")
        assert paths.book_file("tea.md") == paths.output_dir / "tea-3.md"

    def test_load_from_disk(self) -> None:
        path = get_paths().global_settings
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"default_language": "ja"}), encoding="utf-8")
        assert Settings().default_language == "ja"

    def test_unreadable_file_ignored(self) -> None:
        path = get_paths().global_settings
        path.parent.mkdir(parents=True)
        path.write_text("{broken", encoding="utf-8")
        assert Settings().default_language == "en"

    def test_save_writes_json(self) -> None:
        fresh = Settings()
        fresh.llm_provider = "anthropic"
        data = json.loads(get_paths().global_settings.read_text(encoding="utf-8"))
        assert data["llm"]["provider"] == "anthropic"

    def test_non_object_file_ignored(self) -> None:
        path = get_paths().global_settings
        path.parent.mkdir(parents=True)
        path.write_text("[1, 2]", encoding="utf-8")
        assert Settings().llm_provider == "openai"


def test_malformed_llm_section_is_replaced() -> None:
    settings._data = {"llm": "openai"}
    assert settings.use_web_auth is True
    settings.quality_model = "gpt-4.1"
    assert settings._data["llm"] == {"quality_model": "gpt-4.1"}
