import pytest

from scripts.configure_api_keys import apply_provider_config, load_env_file, write_env_file


def test_openai_config_keeps_other_variables(tmp_path):
    env_path = tmp_path / ".env"
    env_path.write_text("GEMINI_API_KEY=g-key\n# note\nGEMINI_MODEL=gemini-2.5-flash\n", encoding="utf-8")

    env_data = apply_provider_config(
        load_env_file(env_path),
        "openai",
        " sk-new ",
        {"OPENAI_VISION_MODEL": "gpt-4o-mini"},
    )
    write_env_file(env_path, env_data)

    reloaded = load_env_file(env_path)
    assert reloaded["GEMINI_API_KEY"] == "g-key"
    assert reloaded["OPENAI_API_KEY"] == "sk-new"
    assert reloaded["OPENAI_VISION_MODEL"] == "gpt-4o-mini"
    assert reloaded["OPENAI_CHAT_MODEL"] == "gpt-4"
    assert reloaded["AI_PROVIDER"] == "openai"


def test_missing_env_file_gives_empty_mapping(tmp_path):
    assert load_env_file(tmp_path / ".env") == {}


@pytest.mark.parametrize("provider,key", [("mistral", "k"), ("openai", "   ")])
def test_invalid_input_rejected(provider, key):
    with pytest.raises(ValueError):
        apply_provider_config({}, provider, key, {})
