"""Deduplicated lookup of source strings to their translations."""

from __future__ import annotations

from collections.abc import Iterable


class StringTable:
    """
    Maps each distinct source string to its current value.

    Values start out equal to their key and are overwritten once the batch
    of translations comes back. Keys keep first-insertion order so that
    results from `keys()` can be zipped back with `apply_results()`.
    """

    def __init__(self, strings: Iterable[str] | None = None):
        self._values: dict[str, str] = {}
        if strings is not None:
            self.add_all(strings)

    def add(self, text: str) -> None:
        if text not in self._values:
            self._values[text] = text

    def add_all(self, strings: Iterable[str]) -> None:
        for text in strings:
            self.add(text)

    def keys(self) -> list[str]:
        return list(self._values)

    def apply_results(self, results: list[str]) -> None:
        """
        Overwrite every value with its translation.

        Args:
            results: Translations positionally aligned with `keys()`

        Raises:
            ValueError: If the number of results does not match the number of keys
        """
        keys = self.keys()
        if len(results) != len(keys):
            raise ValueError(
                f"Got {len(results)} results for {len(keys)} strings; "
                "results must be aligned with keys()"
            )
        for key, result in zip(keys, results):
            self._values[key] = result

    def get(self, text: str, default: str | None = None) -> str | None:
        return self._values.get(text, default)

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, text: object) -> bool:
        return text in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"StringTable({len(self)} strings)"
