"""Parsing of Reuters-21578 SGML corpus files."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..types import DocClass, DocType, RawDocument

LOGGER = logging.getLogger(__name__)

CORPUS_ENCODING = "latin-1"


class CorpusError(ValueError):
    """Raised when a corpus document cannot be interpreted."""


def parse_sgml(markup: str | bytes) -> list[RawDocument]:
    """Return every ``<REUTERS>`` document found in ``markup``."""

    soup = BeautifulSoup(markup, "html.parser")
    return [_parse_document(node) for node in _iter_documents(soup)]


def parse_file(path: Path) -> list[RawDocument]:
    """Parse a single ``.sgm`` corpus file."""

    markup = Path(path).read_bytes().decode(CORPUS_ENCODING)
    documents = parse_sgml(markup)
    LOGGER.debug("Parsed %d document(s) from %s", len(documents), path)
    return documents


def _iter_documents(soup: BeautifulSoup) -> Iterator[Tag]:
    for node in soup.find_all("reuters"):
        if isinstance(node, Tag):
            yield node


def _parse_document(node: Tag) -> RawDocument:
    doc_id = _doc_id(node)
    doc_type = DocType.from_split(_attribute(node, "lewissplit"))
    text_node = node.find("text")
    title = _child_text(text_node, "title")
    body = _child_text(text_node, "body")
    return RawDocument(
        doc_id=doc_id,
        doc_type=doc_type,
        classes=_topics(node),
        text=f"{title}\n{body}",
    )


def _doc_id(node: Tag) -> int:
    raw = _attribute(node, "newid")
    if raw is None:
        raise CorpusError("Reuters document is missing its NEWID attribute.")
    try:
        return int(raw)
    except ValueError as exc:
        raise CorpusError(f"Invalid NEWID attribute: {raw!r}") from exc


def _attribute(node: Tag, name: str) -> str | None:
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        value = " ".join(value)
    return str(value)


def _topics(node: Tag) -> tuple[DocClass, ...]:
    topics = node.find("topics")
    if not isinstance(topics, Tag):
        return ()
    return tuple(
        DocClass.from_topic(entry.get_text())
        for entry in topics.find_all("d")
        if entry.get_text().strip()
    )


def _child_text(parent: Tag | None, name: str) -> str:
    if not isinstance(parent, Tag):
        return ""
    child = parent.find(name)
    if not isinstance(child, Tag):
        return ""
    return child.get_text()


__all__ = ["CORPUS_ENCODING", "CorpusError", "parse_file", "parse_sgml"]
