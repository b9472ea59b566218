import httpx
import openai
import anthropic
import pytest

from visadocs.core.errors import LLMProviderError
from visadocs.services.llm_client import (
    AnthropicProvider,
    CompletionProvider,
    Completion,
    OpenAIProvider,
    _classify_error,
    create_provider,
)

REQUEST = httpx.Request("POST", "https://api.example.com/v1/chat")


def _response(status: int) -> httpx.Response:
    return httpx.Response(status, request=REQUEST)


def test_missing_openai_key_is_authentication_error():
    with pytest.raises(LLMProviderError) as exc_info:
        OpenAIProvider("", "gpt-4o")
    assert exc_info.value.category == "authentication"


def test_missing_anthropic_key_is_authentication_error():
    with pytest.raises(LLMProviderError) as exc_info:
        AnthropicProvider("", "claude")
    assert exc_info.value.category == "authentication"


def test_unknown_provider_name():
    with pytest.raises(ValueError):
        create_provider("mystery")


def test_providers_build_with_keys():
    assert OpenAIProvider("sk-test", "gpt-4o").model == "gpt-4o"
    assert AnthropicProvider("sk-ant-test", "claude").name == "anthropic"


@pytest.mark.parametrize("sdk", [openai, anthropic])
def test_error_categories(sdk):
    cases = [
        (sdk.AuthenticationError("bad key", response=_response(401), body=None), "authentication"),
        (sdk.PermissionDeniedError("denied", response=_response(403), body=None), "authentication"),
        (sdk.RateLimitError("slow down", response=_response(429), body=None), "rate_limit"),
        (sdk.APITimeoutError(request=REQUEST), "timeout"),
        (sdk.APIConnectionError(request=REQUEST), "network"),
        (sdk.InternalServerError("boom", response=_response(500), body=None), "upstream"),
    ]
    for error, category in cases:
        classified = _classify_error(sdk, error)
        assert isinstance(classified, LLMProviderError)
        assert classified.category == category
        assert classified.status_code == 502


class _EchoProvider(CompletionProvider):
    def __init__(self, reply=None, error=None):
        super().__init__("echo")
        self.reply = reply
        self.error = error

    def complete(self, system, user, temperature=0.1, json_mode=True):
        if self.error:
            raise self.error
        return Completion(text=self.reply, tokens_used=1, model=self.model)


def test_connection_check():
    assert _EchoProvider(reply="OK").test_connection()
    assert not _EchoProvider(reply="nope").test_connection()
    assert not _EchoProvider(error=LLMProviderError("down", category="network")).test_connection()
