"""Embedding provider definitions and API key rules.

These helpers are a syntactic gate only: they never contact a provider.
See ``providers_validate`` for the optional live probe.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ApiProvider(str, Enum):
    VOYAGE = "voyage"
    OPENAI = "openai"
    CUSTOM = "custom"

    @property
    def env_var_name(self) -> str:
        return _ENV_VARS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_ENV_VARS = {
    ApiProvider.VOYAGE: "VOYAGE_API_KEY",
    ApiProvider.OPENAI: "OPENAI_API_KEY",
    ApiProvider.CUSTOM: "EMBEDDING_API_KEY",
}

_DISPLAY_NAMES = {
    ApiProvider.VOYAGE: "Voyage AI",
    ApiProvider.OPENAI: "OpenAI",
    ApiProvider.CUSTOM: "Custom Endpoint",
}

# Required key prefix per provider; None means any non-empty key
_KEY_PREFIXES = {
    ApiProvider.VOYAGE: "pa-",
    ApiProvider.OPENAI: "sk-",
    ApiProvider.CUSTOM: None,
}

_MIN_PREFIXED_KEY_LENGTH = 11


def parse_provider(token: str) -> Optional[ApiProvider]:
    """Map a menu answer to a provider.

    Accepts the provider name in any case or its 1-based position in the
    menu. Returns None for anything else and leaves the decision to the caller.
    """
    value = token.strip().lower()
    for position, provider in enumerate(ApiProvider, 1):
        if value in (provider.value, str(position)):
            return provider
    return None


def sanitize_api_key(raw: str) -> str:
    """Strip whitespace, then any run of leading/trailing double quotes, then single quotes."""
    return raw.strip().strip('"').strip("'")


def validate_key_format(key: str, provider: ApiProvider) -> bool:
    prefix = _KEY_PREFIXES[provider]
    if prefix is None:
        return bool(key)
    return key.startswith(prefix) and len(key) >= _MIN_PREFIXED_KEY_LENGTH


def env_var_name(provider: ApiProvider) -> str:
    return provider.env_var_name


def mask_key(key: str) -> str:
    """Render a key for logs: its prefix and last four characters."""
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:3]}…{key[-4:]}"


__all__ = [
    "ApiProvider",
    "parse_provider",
    "sanitize_api_key",
    "validate_key_format",
    "env_var_name",
    "mask_key",
]
