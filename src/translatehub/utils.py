"""Utility functions for translatehub."""

from __future__ import annotations

import json
from pathlib import Path

import pycountry


def get_language_name(code: str) -> str:
    """
    Get the full language name from an ISO 639-1 language code.

    Args:
        code: Two-letter ISO 639-1 language code (e.g., 'de', 'fr', 'es')

    Returns:
        Full language name (e.g., 'German', 'French', 'Spanish')

    Raises:
        ValueError: If the language code is not recognized
    """
    special_cases = {
        "zh": "Chinese",
        "zh-cn": "Chinese (Simplified)",
        "zh-tw": "Chinese (Traditional)",
        "zh-hans": "Chinese (Simplified)",
        "zh-hant": "Chinese (Traditional)",
    }

    code_lower = code.lower().replace("_", "-")
    if code_lower in special_cases:
        return special_cases[code_lower]

    language = pycountry.languages.get(alpha_2=code_lower)
    if language:
        return language.name

    # Try alpha_3 code as fallback
    language = pycountry.languages.get(alpha_3=code_lower)
    if language:
        return language.name

    raise ValueError(f"Unknown language code: {code}")


def load_context(path: Path | None) -> str:
    """
    Load translation context from a JSON file.

    The context file can have the following structure:
    {
        "instructions": "General instructions for the translator...",
        "glossary": {
            "term": "definition",
            ...
        }
    }

    Args:
        path: Path to the context JSON file, or None for no context

    Returns:
        Formatted context string for the translation prompt
    """
    if path is None:
        return ""

    if not path.exists():
        raise FileNotFoundError(f"Context file not found: {path}")

    data = load_json_file(path)

    parts = []

    if "instructions" in data:
        parts.append("**Contextual Information**:")
        parts.append(data["instructions"])

    if "glossary" in data and isinstance(data["glossary"], dict):
        parts.append("\n**Glossary**:")
        for term, definition in data["glossary"].items():
            parts.append(f'- "{term}" refers to {definition}')

    return "\n".join(parts)


def load_json_file(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json_file(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.write("\n")
