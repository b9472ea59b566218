"""
LLM Client Adapter

One text-completion interface, two vendors:
- OpenAIProvider: chat completions, JSON mode via response_format
- AnthropicProvider: messages API

Both SDK clients are built with an explicit timeout and max_retries, so
transient failures (connection errors, 408/409/429/5xx) are retried by the
SDK with exponential backoff before anything reaches us. Whatever still
fails is re-raised as LLMProviderError with a category:
authentication | rate_limit | timeout | network | upstream.

The vendor is picked by settings.llm_provider; callers only ever see
CompletionProvider.
"""

import logging
from typing import NamedTuple

import anthropic
import openai

from visadocs.core.config import get_settings
from visadocs.core.errors import LLMProviderError

logger = logging.getLogger(__name__)

settings = get_settings()


class Completion(NamedTuple):
    text: str
    tokens_used: int
    model: str


def _classify_error(sdk, error: Exception) -> LLMProviderError:
    """Map an openai/anthropic SDK exception onto LLMProviderError."""
    # Both SDKs expose the same exception hierarchy names
    if isinstance(error, (sdk.AuthenticationError, sdk.PermissionDeniedError)):
        category, message = "authentication", "The analysis service rejected our credentials"
    elif isinstance(error, sdk.RateLimitError):
        category, message = "rate_limit", "The analysis service is busy. Please try again shortly."
    elif isinstance(error, sdk.APITimeoutError):
        category, message = "timeout", "The analysis service timed out"
    elif isinstance(error, sdk.APIConnectionError):
        category, message = "network", "Could not reach the analysis service"
    else:
        category, message = "upstream", "The analysis service returned an error"
    return LLMProviderError(message, category=category)


class CompletionProvider:
    """Base class: send a system + user prompt, get text back."""

    name = "base"

    def __init__(self, model: str):
        self.model = model

    def complete(self, system: str, user: str, temperature: float = 0.1, json_mode: bool = True) -> Completion:
        raise NotImplementedError

    def test_connection(self) -> bool:
        """Test if the provider is reachable"""
        try:
            completion = self.complete(
                "You are a test assistant.", "Reply with exactly: OK", temperature=0, json_mode=False
            )
            return "OK" in completion.text.upper()
        except LLMProviderError as e:
            logger.error("%s connection failed: %s (%s)", self.name, e.message, e.category)
            return False


class OpenAIProvider(CompletionProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str):
        super().__init__(model)
        if not api_key:
            raise LLMProviderError("OpenAI API key is not configured", category="authentication")
        self.client = openai.OpenAI(
            api_key=api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    def complete(self, system: str, user: str, temperature: float = 0.1, json_mode: bool = True) -> Completion:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user}
                ],
                max_tokens=settings.llm_max_tokens,
                temperature=temperature,
                **kwargs
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise _classify_error(openai, e) from e

        text = response.choices[0].message.content or ""
        tokens = response.usage.total_tokens if response.usage else 0
        return Completion(text=text, tokens_used=tokens, model=response.model or self.model)


class AnthropicProvider(CompletionProvider):
    name = "anthropic"

    def __init__(self, api_key: str, model: str):
        super().__init__(model)
        if not api_key:
            raise LLMProviderError("Anthropic API key is not configured", category="authentication")
        self.client = anthropic.Anthropic(
            api_key=api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    def complete(self, system: str, user: str, temperature: float = 0.1, json_mode: bool = True) -> Completion:
        # No JSON mode on this API; the response parser isolates the object
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=settings.llm_max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.AnthropicError as e:
            logger.error("Anthropic request failed: %s", e)
            raise _classify_error(anthropic, e) from e

        text = "".join(block.text for block in response.content if block.type == "text")
        tokens = response.usage.input_tokens + response.usage.output_tokens
        return Completion(text=text, tokens_used=tokens, model=response.model or self.model)


def create_provider(provider_name: str = None) -> CompletionProvider:
    """Build the provider named in settings (or ``provider_name``)."""
    name = (provider_name or settings.llm_provider).lower()
    if name == "openai":
        return OpenAIProvider(settings.openai_api_key, settings.openai_model)
    if name == "anthropic":
        return AnthropicProvider(settings.anthropic_api_key, settings.anthropic_model)
    raise ValueError(f"Unknown LLM provider '{name}'. Use 'openai' or 'anthropic'.")


# Singleton instance
_provider: CompletionProvider = None


def get_llm_provider() -> CompletionProvider:
    """Get or create the configured provider (singleton pattern)"""
    global _provider
    if _provider is None:
        _provider = create_provider()
    return _provider
