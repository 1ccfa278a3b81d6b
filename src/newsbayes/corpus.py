"""Selection of single-label training and test documents."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .types import TARGET_CLASSES, DocClass, DocType, RawDocument

LOGGER = logging.getLogger(__name__)


@dataclass
class CorpusSplit:
    """Documents kept for each side of the split, in corpus order."""

    train: list[RawDocument] = field(default_factory=list)
    test: list[RawDocument] = field(default_factory=list)
    skipped: int = 0


def single_label(classes: Sequence[DocClass]) -> DocClass | None:
    """Return the only target class of a document, or None.

    ``other`` topics are ignored. Any other count of target topics, a repeated
    topic included, makes the document ambiguous and yields None.
    """

    targets = [DocClass(cls) for cls in classes if DocClass(cls) in TARGET_CLASSES]
    if len(targets) != 1:
        return None
    return targets[0]


def split_corpus(documents: Iterable[RawDocument]) -> CorpusSplit:
    """Keep single-label documents from the train and test splits."""

    split = CorpusSplit()
    for document in documents:
        if document.doc_type is DocType.OTHER or single_label(document.classes) is None:
            split.skipped += 1
            continue
        if document.doc_type is DocType.TRAIN:
            split.train.append(document)
        else:
            split.test.append(document)
    LOGGER.info(
        "Corpus split: %d train, %d test, %d skipped",
        len(split.train),
        len(split.test),
        split.skipped,
    )
    return split


__all__ = ["CorpusSplit", "single_label", "split_corpus"]
