"""Core data structures shared across newsbayes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

Sample = dict[str, int]
"""Bag-of-words vector: normalized term to occurrence count."""

# Only these six characters separate tokens. Any other character, including
# Unicode spaces and the ASCII record separators, may be part of a term.
WHITESPACE_RE = re.compile(r"[ \t\n\r\v\f]+")


def split_fields(line: str) -> list[str]:
    """Split ``line`` on ASCII whitespace, dropping empty spans."""

    return [field for field in WHITESPACE_RE.split(line) if field]


def split_lines(text: str) -> list[str]:
    """Split ``text`` into lines on ``\\n`` alone.

    ``str.splitlines`` also breaks on ``\\x1c`` to ``\\x1e`` and ``\\x85``, which can
    occur inside terms.
    """

    return text.split("\n")


class InvalidArgumentError(ValueError):
    """Raised when a caller violates an operation's input contract."""


class DocClass(str, Enum):
    """Reuters topic categories used as classification targets.

    Declaration order is significant: it is the ordinal used to index
    per-class arrays and to break ties.
    """

    EARN = "earn"
    ACQ = "acq"
    MONEY_FX = "money-fx"
    GRAIN = "grain"
    CRUDE = "crude"
    OTHER = "other"

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]

    @classmethod
    def from_topic(cls, topic: str) -> DocClass:
        """Map a corpus topic keyword to its class, falling back to OTHER."""

        try:
            return cls(topic.strip().lower())
        except ValueError:
            return cls.OTHER

    @classmethod
    def parse(cls, value: str) -> DocClass:
        """Strictly parse a persisted class name."""

        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unknown document class: {value!r}") from exc

    def __str__(self) -> str:
        return self.value


_ORDINALS: dict[DocClass, int] = {cls: idx for idx, cls in enumerate(DocClass)}

TARGET_CLASSES: tuple[DocClass, ...] = tuple(cls for cls in DocClass if cls is not DocClass.OTHER)


class DocType(str, Enum):
    """Corpus split a document belongs to."""

    TRAIN = "train"
    TEST = "test"
    OTHER = "other"

    @classmethod
    def from_split(cls, value: str | None) -> DocType:
        normalized = (value or "").strip().upper()
        if normalized == "TRAIN":
            return cls.TRAIN
        if normalized == "TEST":
            return cls.TEST
        return cls.OTHER


@dataclass(frozen=True)
class RawDocument:
    """A parsed corpus document before tokenization."""

    doc_id: int
    doc_type: DocType
    classes: tuple[DocClass, ...]
    text: str


__all__ = [
    "DocClass",
    "DocType",
    "InvalidArgumentError",
    "RawDocument",
    "Sample",
    "TARGET_CLASSES",
    "WHITESPACE_RE",
    "split_fields",
    "split_lines",
]
