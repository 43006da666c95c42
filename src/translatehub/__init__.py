"""translatehub: Translate every string in nested JSON documents."""

__version__ = "0.1.0"

from .batch import translate_all
from .errors import (
    BatchTranslationError,
    DocumentFetchError,
    MalformedInputError,
    TranslateHubError,
    TranslationServiceError,
)
from .locale_store import LocaleStore
from .pipeline import TranslatedDocumentPair, load_data, translate_documents, translate_json
from .table import StringTable
from .translator import LibreTranslateTranslator, OpenAITranslator, Translator, create_translator
from .tree import JsonValue, collect, rebuild

__all__ = [
    "__version__",
    "translate_all",
    "translate_documents",
    "translate_json",
    "load_data",
    "TranslatedDocumentPair",
    "StringTable",
    "JsonValue",
    "collect",
    "rebuild",
    "Translator",
    "LibreTranslateTranslator",
    "OpenAITranslator",
    "create_translator",
    "LocaleStore",
    "TranslateHubError",
    "TranslationServiceError",
    "BatchTranslationError",
    "MalformedInputError",
    "DocumentFetchError",
]
