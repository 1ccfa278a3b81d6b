"""Mutual-information feature selection.

For a term ``w`` and a class ``c`` the mutual information is

    I(w; c) = sum_{e_w} sum_{e_c} p(e_w, e_c) log2(p(e_w, e_c) / (p(e_w) p(e_c)))

where ``e_w`` says whether a document contains ``w`` and ``e_c`` whether
it belongs to ``c``. Probabilities are document counts over the number of
samples; empty cells contribute zero.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Iterable, Mapping, Sequence

import numpy as np
from scipy import sparse
from sklearn.feature_extraction import DictVectorizer

from ..types import DocClass, InvalidArgumentError, Sample

LOGGER = logging.getLogger(__name__)


class _PresenceTable:
    """Binary document-by-term matrix shared by every per-class computation."""

    def __init__(self, samples: Sequence[Sample], labels: Sequence[DocClass]) -> None:
        if len(samples) != len(labels):
            raise InvalidArgumentError(
                f"Got {len(samples)} sample(s) but {len(labels)} label(s)."
            )
        self.labels = [DocClass(label) for label in labels]
        self.n_samples = len(samples)
        if not samples:
            self.terms: list[str] = []
            self.presence = sparse.csr_matrix((0, 0), dtype=np.float64)
        else:
            vectorizer = DictVectorizer(dtype=np.float64, sparse=True, sort=True)
            counts = vectorizer.fit_transform(samples)
            self.terms = [str(term) for term in vectorizer.get_feature_names_out()]
            self.presence = (counts > 0).astype(np.float64).tocsr()
        self.document_frequency = np.asarray(self.presence.sum(axis=0)).ravel()

    def mutual_info(self, target: DocClass) -> np.ndarray:
        in_target = np.fromiter(
            (label is target for label in self.labels), dtype=np.float64, count=self.n_samples
        )
        total = float(self.n_samples)
        n_target = float(in_target.sum())
        n_other = total - n_target

        # Contingency cells: n_wc = term present and in class, and so on.
        n11 = self.presence.T @ in_target
        n10 = self.document_frequency - n11
        n01 = n_target - n11
        n00 = n_other - n10
        present = self.document_frequency
        absent = total - present

        return (
            _cell(n11, present, n_target, total)
            + _cell(n10, present, n_other, total)
            + _cell(n01, absent, n_target, total)
            + _cell(n00, absent, n_other, total)
        )


def _cell(joint: np.ndarray, row: np.ndarray, column: float, total: float) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        value = joint / total * np.log2(total * joint / (row * column))
    return np.where(joint > 0, value, 0.0)


def mutual_info(
    samples: Sequence[Sample], labels: Sequence[DocClass], target: DocClass
) -> dict[str, float]:
    """Return the mutual information between every term and ``target``."""

    table = _PresenceTable(samples, labels)
    if not table.terms:
        return {}
    scores = table.mutual_info(DocClass(target))
    return {term: float(score) for term, score in zip(table.terms, scores)}


def top_words_per_class(
    samples: Sequence[Sample],
    labels: Sequence[DocClass],
    classes: Iterable[DocClass],
    top_k: int,
) -> dict[DocClass, list[str]]:
    """Select the ``top_k`` most informative terms for each class.

    Terms are ranked by mutual information, highest first, with ties going to
    the lexicographically smaller term. Each returned list is sorted so it can
    be searched with :func:`bisect.bisect_left`.
    """

    table = _PresenceTable(samples, labels)
    vocabulary_size = len(table.terms)
    if top_k < 1 or top_k > vocabulary_size:
        raise InvalidArgumentError(
            f"top_k must be between 1 and the vocabulary size ({vocabulary_size}), got {top_k}."
        )

    terms = np.asarray(table.terms, dtype=object)
    selection: dict[DocClass, list[str]] = {}
    for doc_class in sorted({DocClass(cls) for cls in classes}, key=lambda cls: cls.ordinal):
        scores = table.mutual_info(doc_class)
        # Terms are already in ascending order, so a stable sort on -score
        # resolves ties lexicographically.
        ranked = np.argsort(-scores, kind="stable")[:top_k]
        selection[doc_class] = sorted(str(term) for term in terms[ranked])
        LOGGER.debug("Selected %d term(s) for class %s", len(selection[doc_class]), doc_class)
    return selection


def remove_unimportant_words(
    samples: Sequence[Sample],
    labels: Sequence[DocClass],
    selection: Mapping[DocClass, Sequence[str]],
) -> None:
    """Delete, in place, every term not selected for its sample's class.

    Selected term lists must be sorted. Samples whose class has no entry in
    ``selection`` are left untouched.
    """

    if len(samples) != len(labels):
        raise InvalidArgumentError(f"Got {len(samples)} sample(s) but {len(labels)} label(s).")

    removed = 0
    for sample, label in zip(samples, labels):
        selected = selection.get(DocClass(label))
        if selected is None:
            continue
        for term in [term for term in sample if not _contains(selected, term)]:
            del sample[term]
            removed += 1
    LOGGER.debug("Removed %d term occurrence key(s) outside the selection", removed)


def _contains(sorted_terms: Sequence[str], term: str) -> bool:
    index = bisect_left(sorted_terms, term)
    return index < len(sorted_terms) and sorted_terms[index] == term


__all__ = ["mutual_info", "remove_unimportant_words", "top_words_per_class"]
