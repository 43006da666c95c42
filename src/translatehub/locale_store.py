"""Persistence of the user's chosen target language."""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .utils import load_json_file, write_json_file

load_dotenv(find_dotenv(usecwd=True))

LOCALE_FILE = Path(
    os.environ.get("TRANSLATEHUB_LOCALE_FILE", Path.home() / ".translatehub" / "locale.json")
)

DEFAULT_LANGUAGE = "en"


def _system_language() -> str | None:
    """Language part of the POSIX locale, e.g. 'fr' for 'fr_CA.UTF-8'."""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var, "")
        code = value.split(".")[0].split("@")[0].replace("_", "-").split("-")[0]
        if code and code not in ("C", "POSIX"):
            return code.lower()
    return None


class LocaleStore:
    """Stores the selected language as {"lang": code} in a JSON file."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else LOCALE_FILE

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = load_json_file(self.path)
        except (json.JSONDecodeError, UnicodeDecodeError):
            print(f"Ignoring unreadable locale file: {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_locale_language(self, persist: bool = True) -> str:
        """
        Return the stored language code.

        When nothing is stored yet, the system language is detected and,
        unless `persist` is False, stored for next time. Falls back to 'en'.
        """
        stored = self._read().get("lang")
        if isinstance(stored, str) and stored:
            return stored

        detected = _system_language()
        if detected:
            if persist:
                self.set_locale_language(detected)
            return detected

        return DEFAULT_LANGUAGE

    def set_locale_language(self, language: str) -> None:
        data = self._read()
        data["lang"] = language
        write_json_file(self.path, data)

    @staticmethod
    def get_locale_date() -> str:
        """Today's date in the current locale's format."""
        return date.today().strftime("%x")
