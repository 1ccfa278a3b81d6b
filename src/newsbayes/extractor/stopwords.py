"""Stopword list loading and lookup."""

from __future__ import annotations

import logging
import threading
from bisect import bisect_left
from collections.abc import Iterable
from importlib import resources
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_STOPWORDS_RESOURCE = "stopwords.txt"


class StopwordError(ValueError):
    """Raised when the stopword list is missing or empty."""


class StopwordList:
    """Sorted, immutable stopword table queried by binary search."""

    def __init__(self, words: Iterable[str]) -> None:
        self._words: tuple[str, ...] = tuple(sorted({word for word in words if word}))
        if not self._words:
            raise StopwordError("Stopword list is empty.")

    @classmethod
    def from_file(cls, path: Path | str) -> StopwordList:
        """Read one stopword per line from ``path``."""

        source = Path(path).expanduser()
        if not source.is_file():
            raise StopwordError(f"Stopword file not found: {source}")
        with source.open("r", encoding="utf-8") as handle:
            words = [line.strip() for line in handle]
        try:
            stopwords = cls(words)
        except StopwordError as exc:
            raise StopwordError(f"Stopword file is empty: {source}") from exc
        LOGGER.debug("Loaded %d stopwords from %s", len(stopwords), source)
        return stopwords

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        index = bisect_left(self._words, word)
        return index < len(self._words) and self._words[index] == word

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self):
        return iter(self._words)


_CACHE: dict[Path, StopwordList] = {}
_CACHE_LOCK = threading.Lock()


def default_stopwords_path() -> Path:
    """Return the location of the stopword list bundled with the package."""

    return Path(str(resources.files("newsbayes") / "data" / DEFAULT_STOPWORDS_RESOURCE))


def load_stopwords(path: Path | str | None = None) -> StopwordList:
    """Return a shared read-only stopword table for ``path``.

    The file is read at most once per resolved path, even when several
    normalizers are created from different threads.
    """

    source = Path(path).expanduser() if path else default_stopwords_path()
    key = source.resolve()
    with _CACHE_LOCK:
        cached = _CACHE.get(key)
        if cached is None:
            cached = StopwordList.from_file(source)
            _CACHE[key] = cached
        return cached


def clear_cache() -> None:
    """Forget every cached stopword table."""

    with _CACHE_LOCK:
        _CACHE.clear()


__all__ = [
    "StopwordError",
    "StopwordList",
    "clear_cache",
    "default_stopwords_path",
    "load_stopwords",
]
