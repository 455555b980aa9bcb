"""LiteLLM adapters: the embedding and generation callables the pipeline uses.

The retrieval core only sees ``text -> vector`` and ``messages -> text``
callables. Both adapters here hand retries for transient provider errors
to LiteLLM (``num_retries``); nothing above this layer retries.
"""

from __future__ import annotations

import logging
import os

import litellm

litellm.suppress_debug_info = True

logger = logging.getLogger(__name__)

# Served locally; no credentials.
_LOCAL_PROVIDERS = frozenset({"ollama", "ollama_chat"})

# Providers whose key variable is not <PROVIDER>_API_KEY.
_KEY_ENV_OVERRIDES: dict[str, str] = {
    "together_ai": "TOGETHERAI_API_KEY",
    "vertex_ai": "GOOGLE_APPLICATION_CREDENTIALS",
}


def provider_of(model: str) -> str:
    """Return the LiteLLM provider prefix of *model*; bare names are OpenAI models."""
    return model.split("/", 1)[0].lower() if "/" in model else "openai"


def api_key_env(provider: str) -> str | None:
    """Environment variable holding *provider*'s key, or None for local providers."""
    if provider in _LOCAL_PROVIDERS:
        return None
    return _KEY_ENV_OVERRIDES.get(provider, f"{provider.upper()}_API_KEY")


def validate_api_key(model: str) -> None:
    """Fail fast when *model* needs an API key that is not in the environment.

    Raises:
        EnvironmentError: The provider's key variable is unset or empty.
    """
    env_var = api_key_env(provider_of(model))
    if env_var and not os.getenv(env_var):
        raise EnvironmentError(f"Model '{model}' needs {env_var} to be set.")


class LiteLLMEmbedder:
    """Embedding function ``text -> vector`` backed by ``litellm.embedding``."""

    def __init__(self, model: str, num_retries: int = 3) -> None:
        self.model = model
        self.num_retries = num_retries

    def __call__(self, text: str) -> list[float]:
        response = litellm.embedding(model=self.model, input=[text], num_retries=self.num_retries)
        vector = response.data[0]["embedding"]
        logger.debug("Embedded %d chars with %s (%d dims)", len(text), self.model, len(vector))
        return vector


class LiteLLMGenerator:
    """Generation function ``messages -> text`` backed by ``litellm.completion``.

    Temperature is fixed at 0 so answers for the same context stay stable.
    """

    def __init__(self, model: str, num_retries: int = 3, max_tokens: int = 1024) -> None:
        self.model = model
        self.num_retries = num_retries
        self.max_tokens = max_tokens

    def __call__(self, messages: list[dict]) -> str:
        logger.debug("Calling %s with %d messages", self.model, len(messages))
        response = litellm.completion(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=0.0,
            num_retries=self.num_retries,
        )
        return response.choices[0].message.content or ""
