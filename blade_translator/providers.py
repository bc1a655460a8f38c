"""
Machine-translation clients.

Two REST backends are supported, both called one string at a time:

  - Google Cloud Translation (v2, API-key auth)
  - DeepL (v2, free and pro plans)

Laravel replacement parameters (`:name`, `:count`) are swapped for inert
markers before a string is sent and restored in the result, so translated
strings keep working with `__('...', ['name' => ...])`.
"""

from __future__ import annotations

import re
import time
from typing import Any, Callable

import requests

from .errors import ConfigError, RateLimitError, TranslationError

GOOGLE_API_URL = "https://translation.googleapis.com/language/translate/v2"
DEEPL_FREE_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_PRO_URL = "https://api.deepl.com/v2/translate"

REQUEST_TIMEOUT = 30  # seconds

DEFAULT_RETRIES = 3
DEFAULT_BACKOFF = 1.0  # seconds, multiplied by the attempt number

# ── Placeholder protection ─────────────────────────────────────────────────────

PLACEHOLDER_RE = re.compile(r"(?<![\w:]):[A-Za-z_]\w*")


def protect_placeholders(text: str) -> tuple[str, list[str]]:
    """Replace :placeholder tokens with safe ASCII markers before translation."""
    tokens: list[str] = []

    def sub(m: re.Match) -> str:
        idx = len(tokens)
        tokens.append(m.group(0))
        return f"XPHX{idx}XPHX"

    return PLACEHOLDER_RE.sub(sub, text), tokens


def restore_placeholders(text: str, tokens: list[str]) -> str:
    for i, token in enumerate(tokens):
        text = text.replace(f"XPHX{i}XPHX", token)
    return text


# ── Providers ──────────────────────────────────────────────────────────────────

class TranslationProvider:
    """Base client: subclasses implement `_request` for one protected string."""

    name = "base"
    label = "Translation"

    def __init__(self, api_key: str, timeout: float = REQUEST_TIMEOUT) -> None:
        self.api_key = api_key
        self.timeout = timeout

    def translate(self, text: str, target: str) -> str:
        protected, tokens = protect_placeholders(text)
        return restore_placeholders(self._request(protected, target), tokens)

    def _request(self, text: str, target: str) -> str:
        raise NotImplementedError

    def _post(self, url: str, **kwargs: Any) -> Any:
        try:
            resp = requests.post(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TranslationError(f"{self.label} API request failed: {exc}") from exc
        if resp.status_code == 429:
            raise RateLimitError("Too many requests")
        if resp.status_code >= 400:
            raise TranslationError(f"{self.label} API error: {resp.status_code} {resp.reason}")
        try:
            return resp.json()
        except ValueError as exc:
            raise TranslationError(f"{self.label} API returned invalid JSON") from exc


class GoogleTranslateProvider(TranslationProvider):
    name = "google"
    label = "Google"

    def _request(self, text: str, target: str) -> str:
        data = self._post(
            GOOGLE_API_URL,
            params={"key": self.api_key},
            json={"q": text, "target": target, "format": "text"},
        )
        try:
            return data["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError) as exc:
            raise TranslationError("Google API returned an unexpected response") from exc


class DeepLProvider(TranslationProvider):
    name = "deepl"
    label = "DeepL"

    @property
    def url(self) -> str:
        # Free-plan keys carry a ":fx" suffix and only work on the free host.
        return DEEPL_FREE_URL if self.api_key.endswith(":fx") else DEEPL_PRO_URL

    def _request(self, text: str, target: str) -> str:
        data = self._post(
            self.url,
            headers={"Authorization": f"DeepL-Auth-Key {self.api_key}"},
            data={"text": text, "target_lang": target.upper()},
        )
        try:
            return data["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise TranslationError("DeepL API returned an unexpected response") from exc


PROVIDERS: dict[str, type[TranslationProvider]] = {
    GoogleTranslateProvider.name: GoogleTranslateProvider,
    DeepLProvider.name: DeepLProvider,
}


def create_provider(name: str | None, api_key: str | None) -> TranslationProvider:
    if not api_key:
        raise ConfigError(
            "No API key found. Pass --api-key or set BLADE_TRANSLATOR_API_KEY."
        )
    key = (name or "").strip().lower()
    if key not in PROVIDERS:
        choices = ", ".join(sorted(PROVIDERS))
        raise ConfigError(f"Unknown translation provider '{name}' (choose from: {choices}).")
    return PROVIDERS[key](api_key)


# ── Retry ──────────────────────────────────────────────────────────────────────

def translate_with_retry(
    provider: TranslationProvider,
    text: str,
    target: str,
    retries: int = DEFAULT_RETRIES,
    backoff: float = DEFAULT_BACKOFF,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Translate one string, backing off linearly on rate limits.

    Only HTTP 429 is retried; every other failure is raised immediately.
    """
    attempts = max(1, retries)
    attempt = 1
    while True:
        try:
            return provider.translate(text, target)
        except RateLimitError as exc:
            if attempt >= attempts:
                raise TranslationError(f"Translation error for {text} to {target}: {exc}") from exc
            sleep(backoff * attempt)
            attempt += 1
        except TranslationError as exc:
            raise TranslationError(f"Translation error for {text} to {target}: {exc}") from exc
