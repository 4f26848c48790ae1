"""Live API key probe.

Non-raising helpers that send one lightweight authenticated request to the
provider. Each call returns a ValidationResult with ok/reason/details.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .providers import ApiProvider, mask_key
from .settings import AppSettings

logger = logging.getLogger(__name__)

VOYAGE_PROBE_MODEL = "voyage-code-2"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str = ""
    details: Optional[str] = None


def _classify(response: httpx.Response) -> ValidationResult:
    if response.status_code in (401, 403):
        return ValidationResult(False, "auth_failed", f"HTTP {response.status_code}")
    if response.status_code >= 500:
        return ValidationResult(False, "provider_unavailable", f"HTTP {response.status_code}")
    if response.status_code >= 400:
        return ValidationResult(False, "protocol_error", f"HTTP {response.status_code}")
    return ValidationResult(True, "ok")


def validate_api_key(
    key: str,
    provider: ApiProvider,
    settings: Optional[AppSettings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> ValidationResult:
    """Check that the provider accepts ``key``.

    - Never raises; returns ValidationResult
    - OpenAI and custom endpoints: GET {base}/models
    - Voyage: POST {base}/embeddings with a one-word input
    - Custom without a configured base URL is skipped (reported as ok)
    """
    settings = settings or AppSettings()
    headers = {"Authorization": f"Bearer {key}", "Accept": "application/json"}

    if provider == ApiProvider.CUSTOM and not settings.custom_api_base:
        return ValidationResult(True, "skipped", "No custom endpoint configured")

    logger.info("Probing %s with key %s", provider.display_name, mask_key(key))
    try:
        with httpx.Client(timeout=settings.verify_timeout, transport=transport) as client:
            if provider == ApiProvider.VOYAGE:
                url = f"{settings.voyage_api_base.rstrip('/')}/embeddings"
                r = client.post(url, headers=headers, json={"input": ["ping"], "model": VOYAGE_PROBE_MODEL})
            elif provider == ApiProvider.OPENAI:
                r = client.get(f"{settings.openai_api_base.rstrip('/')}/models", headers=headers)
            else:
                r = client.get(f"{settings.custom_api_base.rstrip('/')}/models", headers=headers)
    except (httpx.ConnectError, httpx.TimeoutException):
        return ValidationResult(False, "network_error", "Could not reach provider endpoint")
    except httpx.HTTPError as e:
        return ValidationResult(False, "unexpected_error", str(e))

    result = _classify(r)
    logger.info("Probe result for %s: %s", provider.display_name, result.reason)
    return result


__all__ = ["ValidationResult", "validate_api_key"]
