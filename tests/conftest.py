"""Shared fixtures: a small Laravel project tree and an offline provider."""

from __future__ import annotations

from pathlib import Path

import pytest

from blade_translator.errors import TranslationError
from blade_translator.providers import TranslationProvider

WELCOME_TEMPLATE = (
    "<h1>{{ __('Welcome') }}</h1>\n"
    "<p>{{ __('Hello, :name', ['name' => $user->name]) }}</p>\n"
)
ORDER_TEMPLATE = "@lang('Log out')\n{{ __('Welcome') }}\n"


class FakeProvider(TranslationProvider):
    """Prefixes text with the target language; fails for selected strings."""

    name = "fake"
    label = "Fake"

    def __init__(self) -> None:
        super().__init__("test-key")
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()

    def _request(self, text: str, target: str) -> str:
        self.calls.append((text, target))
        if text in self.fail_on:
            raise TranslationError("Fake API error: 500 Internal Server Error")
        return f"{target}:{text}"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A Laravel-like project with two templates and a vendored one."""
    views = tmp_path / "resources" / "views"
    (views / "mail").mkdir(parents=True)
    (views / "welcome.blade.php").write_text(WELCOME_TEMPLATE, encoding="utf-8")
    (views / "mail" / "order.blade.php").write_text(ORDER_TEMPLATE, encoding="utf-8")
    (views / "mail" / "notes.txt").write_text("__('Not a template')", encoding="utf-8")

    vendor = tmp_path / "vendor" / "acme" / "views"
    vendor.mkdir(parents=True)
    (vendor / "panel.blade.php").write_text("{{ __('Vendor string') }}", encoding="utf-8")
    return tmp_path


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def sleeps() -> list[float]:
    return []
