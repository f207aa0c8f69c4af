import os

import pytest

from config.settings import load_settings

ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_VISION_MODEL",
    "OPENAI_CHAT_MODEL",
    "OPENAI_MAX_TOKENS",
    "REQUEST_TIMEOUT",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "AI_PROVIDER",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # .env recherché dans le répertoire courant
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # les variables injectées depuis .env ne passent pas par monkeypatch
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults_with_openai_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "  sk-test  ")
    settings = load_settings()

    assert settings.openai_api_key == "sk-test"
    assert settings.openai_vision_model == "gpt-4o"
    assert settings.openai_chat_model == "gpt-4"
    assert settings.max_tokens == 300
    assert settings.request_timeout == 30.0
    assert settings.gemini_api_key is None
    assert settings.preferred_provider == "openai"


def test_missing_keys_raise():
    with pytest.raises(RuntimeError):
        load_settings()


def test_gemini_only_selects_gemini(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    settings = load_settings()
    assert settings.preferred_provider == "gemini"
    assert settings.openai_api_key is None


def test_overrides_and_empty_model_fallback(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_VISION_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("OPENAI_CHAT_MODEL", "   ")
    monkeypatch.setenv("OPENAI_MAX_TOKENS", "500")
    monkeypatch.setenv("REQUEST_TIMEOUT", "7.5")
    settings = load_settings()

    assert settings.openai_vision_model == "gpt-4o-mini"
    assert settings.openai_chat_model == "gpt-4"
    assert settings.max_tokens == 500
    assert settings.request_timeout == 7.5


@pytest.mark.parametrize("name,value", [("OPENAI_MAX_TOKENS", "abc"), ("REQUEST_TIMEOUT", "-1")])
def test_invalid_numbers_raise(monkeypatch, name, value):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        load_settings()


def test_unknown_provider_falls_back(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("AI_PROVIDER", "mistral")
    assert load_settings().preferred_provider == "openai"


def test_dotenv_is_loaded_without_overriding(monkeypatch, clean_env):
    (clean_env / ".env").write_text(
        "# commentaire\n"
        "OPENAI_API_KEY=\"sk-from-file\"\n"
        "OPENAI_CHAT_MODEL=gpt-4-turbo\n"
        "GEMINI_MODEL=gemini-from-file\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GEMINI_MODEL", "gemini-from-env")

    settings = load_settings()

    assert settings.openai_api_key == "sk-from-file"
    assert settings.openai_chat_model == "gpt-4-turbo"
    assert settings.gemini_model == "gemini-from-env"
