from __future__ import annotations

import asyncio

import pytest

from translatehub.errors import TranslationServiceError


class StubTranslator:
    """Records every call and answers from a fixed dictionary."""

    def __init__(self, translations=None, fail_on=(), delay: float = 0.0):
        self.translations = dict(translations or {})
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.cancelled: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def translate(self, text: str, target_language: str) -> str:
        self.calls.append((text, target_language))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.append(text)
            raise
        finally:
            self.in_flight -= 1
        if text in self.fail_on:
            raise TranslationServiceError(f"backend down for {text!r}", text)
        return self.translations.get(text, f"[{target_language}] {text}")


@pytest.fixture
def stub_translator():
    return StubTranslator({"Hello": "Bonjour", "Goodbye": "Au revoir"})


@pytest.fixture
def locale_file(tmp_path, monkeypatch):
    path = tmp_path / "locale.json"
    monkeypatch.setattr("translatehub.locale_store.LOCALE_FILE", path)
    return path


@pytest.fixture
def make_translator():
    return StubTranslator
