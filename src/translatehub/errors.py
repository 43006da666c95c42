"""Exceptions raised by translatehub."""

from __future__ import annotations


class TranslateHubError(Exception):
    """Base class for all translatehub errors."""


class TranslationServiceError(TranslateHubError):
    """A single call to the translation backend failed."""

    def __init__(self, message: str, text: str | None = None):
        super().__init__(message)
        self.text = text


class BatchTranslationError(TranslateHubError):
    """
    One or more translations in a batch failed.

    Nothing from the batch is applied when this is raised.

    Attributes:
        failures: List of (source_text, exception) pairs, in input order
    """

    def __init__(self, failures: list[tuple[str, BaseException]]):
        self.failures = failures
        shown = ", ".join(repr(text) for text, _ in failures[:5])
        if len(failures) > 5:
            shown += f", ... ({len(failures) - 5} more)"
        super().__init__(f"Failed to translate {len(failures)} string(s): {shown}")

    @property
    def failed_texts(self) -> list[str]:
        return [text for text, _ in self.failures]


class MalformedInputError(TranslateHubError, ValueError):
    """The input is not an acyclic JSON-like tree."""


class DocumentFetchError(TranslateHubError):
    """A remote JSON document could not be fetched or decoded."""
