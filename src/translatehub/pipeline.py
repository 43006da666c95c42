"""Translation of whole JSON documents."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from .batch import translate_all
from .errors import DocumentFetchError
from .locale_store import LocaleStore
from .table import StringTable
from .translator import REQUEST_TIMEOUT, Translator
from .tree import JsonValue, collect, rebuild


@dataclass(frozen=True)
class TranslatedDocumentPair:
    """Translated back-end and front-end payloads."""

    backend_data: JsonValue
    frontend_data: JsonValue

    def as_dict(self) -> dict[str, JsonValue]:
        return {"backendData": self.backend_data, "frontendData": self.frontend_data}


def collect_strings(documents: Mapping[str, JsonValue]) -> StringTable:
    """Build one table holding every distinct string across all documents."""
    table = StringTable()
    for tree in documents.values():
        collect(tree, table)
    return table


async def translate_documents(
    documents: Mapping[str, JsonValue],
    target_language: str,
    translator: Translator,
) -> dict[str, JsonValue]:
    """
    Translate every string leaf of a set of named documents.

    Strings are deduplicated across all documents, so a string that appears
    in several places (or in several documents) is translated once and gets
    the same translation everywhere.

    Args:
        documents: Mapping of document name to JSON-like tree
        target_language: Target language code, passed through to the translator
        translator: Backend implementing `translate(text, target_language)`

    Returns:
        Mapping with the same names, each holding a translated copy of its tree

    Raises:
        BatchTranslationError: If any string failed to translate; no document is returned
        MalformedInputError: If a document is cyclic or holds non-JSON values
    """
    table = collect_strings(documents)

    texts = table.keys()
    translations = await translate_all(texts, target_language, translator)
    table.apply_results(translations)

    return {name: rebuild(tree, table) for name, tree in documents.items()}


async def translate_json(
    frontend_data: JsonValue,
    target_language: str,
    backend_data: JsonValue,
    translator: Translator,
) -> TranslatedDocumentPair:
    """Translate a front-end payload and a back-end payload together."""
    translated = await translate_documents(
        {"backendData": backend_data, "frontendData": frontend_data},
        target_language,
        translator,
    )
    return TranslatedDocumentPair(
        backend_data=translated["backendData"],
        frontend_data=translated["frontendData"],
    )


async def load_data(
    url: str,
    target_language: str,
    backend_data: JsonValue,
    translator: Translator,
    *,
    locale_store: LocaleStore | None = None,
    client: httpx.AsyncClient | None = None,
) -> TranslatedDocumentPair:
    """
    Fetch front-end JSON from `url` and translate it with `backend_data`.

    The selected language is remembered in `locale_store` first.

    Raises:
        DocumentFetchError: If the document cannot be fetched or is not JSON
        BatchTranslationError: If any string failed to translate
    """
    (locale_store or LocaleStore()).set_locale_language(target_language)

    frontend_data = await _fetch_json(url, client)
    return await translate_json(frontend_data, target_language, backend_data, translator)


async def _fetch_json(url: str, client: httpx.AsyncClient | None) -> JsonValue:
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPError as e:
        raise DocumentFetchError(f"Could not fetch {url}: {e}") from e
    except ValueError as e:
        raise DocumentFetchError(f"Document at {url} is not valid JSON: {e}") from e
    finally:
        if owns_client:
            await client.aclose()
