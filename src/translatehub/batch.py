"""Concurrent, all-or-nothing translation of a batch of strings."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from .errors import BatchTranslationError, TranslationServiceError
from .translator import Translator


async def translate_all(
    texts: Sequence[str],
    target_language: str,
    translator: Translator,
) -> list[str]:
    """
    Translate every text concurrently, one backend call per text.

    Either every translation succeeds and the results come back in the
    same order as `texts`, or the whole batch fails. On the first failure
    the remaining in-flight calls are cancelled.

    Args:
        texts: Distinct strings to translate
        target_language: Target language code, passed through to the translator
        translator: Backend implementing `translate(text, target_language)`

    Returns:
        Translations aligned by index with `texts`

    Raises:
        BatchTranslationError: If any single translation failed
    """
    if not texts:
        return []

    tasks = [
        asyncio.ensure_future(translator.translate(text, target_language))
        for text in texts
    ]

    try:
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    failures = []
    for text, task in zip(texts, tasks):
        if task.cancelled():
            continue
        error = task.exception()
        if error is None:
            continue
        if not isinstance(error, TranslationServiceError):
            wrapped = TranslationServiceError(str(error) or type(error).__name__, text)
            wrapped.__cause__ = error
            error = wrapped
        failures.append((text, error))

    if failures:
        raise BatchTranslationError(failures) from failures[0][1]

    return [task.result() for task in tasks]
