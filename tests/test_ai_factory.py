from unittest import mock

import pytest

from config.settings import Settings
from domain.ai_provider import AIProviderName
from infrastructure.ai_factory import build_providers, select_default_provider
from infrastructure.openai_client import OpenAICompletionClient


def test_only_configured_providers_are_built():
    providers = build_providers(Settings(openai_api_key="sk-test"))
    assert list(providers) == [AIProviderName.OPENAI]
    assert isinstance(providers[AIProviderName.OPENAI], OpenAICompletionClient)


def test_both_providers_built():
    with mock.patch("infrastructure.gemini_client.genai"):
        providers = build_providers(Settings(openai_api_key="sk", gemini_api_key="g"))
    assert set(providers) == {AIProviderName.OPENAI, AIProviderName.GEMINI}


def test_no_key_gives_empty_mapping():
    assert build_providers(Settings()) == {}


def test_failing_provider_is_skipped():
    with mock.patch("infrastructure.ai_factory.GeminiCompletionClient", side_effect=RuntimeError("sdk")):
        providers = build_providers(Settings(openai_api_key="sk", gemini_api_key="g"))
    assert list(providers) == [AIProviderName.OPENAI]


def test_select_default_provider():
    providers = {AIProviderName.OPENAI: object(), AIProviderName.GEMINI: object()}
    assert select_default_provider(providers, Settings(preferred_provider="gemini")) is AIProviderName.GEMINI

    only_openai = {AIProviderName.OPENAI: object()}
    assert select_default_provider(only_openai, Settings(preferred_provider="gemini")) is AIProviderName.OPENAI

    with pytest.raises(RuntimeError):
        select_default_provider({}, Settings())
