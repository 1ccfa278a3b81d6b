"""Multinomial Naive Bayes over normalized term counts.

The model stores raw counts only: documents per class (the prior) and
occurrences of every term per class (the likelihood table). Laplace
smoothing is applied when scoring, so a loaded model can be re-smoothed
with a different ``alpha`` without refitting.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence

import numpy as np
from scipy import sparse

from ..types import DocClass, InvalidArgumentError, Sample, split_fields, split_lines

LOGGER = logging.getLogger(__name__)

DEFAULT_ALPHA = 1.0
CLASSES: tuple[DocClass, ...] = tuple(DocClass)


class NotFittedError(RuntimeError):
    """Raised when a classifier is used before it has been fitted."""


class ModelFormatError(ValueError):
    """Raised when a persisted model cannot be parsed."""


class MultinomialNaiveBayes:
    """Naive Bayes classifier with per-class count vectors indexed by ordinal."""

    name = "naive_bayes"

    def __init__(self, alpha: float = DEFAULT_ALPHA) -> None:
        self.alpha = alpha
        self._class_counts = np.zeros(len(CLASSES), dtype=np.int64)
        self._class_totals = np.zeros(len(CLASSES), dtype=np.int64)
        self._vocabulary: dict[str, int] = {}
        self._term_counts = np.zeros((0, len(CLASSES)), dtype=np.int64)
        self._trained = False

    @classmethod
    def from_counts(
        cls,
        class_counts: Mapping[DocClass, int],
        term_counts: Mapping[str, Mapping[DocClass, int]],
        *,
        alpha: float = DEFAULT_ALPHA,
    ) -> MultinomialNaiveBayes:
        """Build a fitted model from already aggregated counts."""

        model = cls(alpha=alpha)
        priors = np.zeros(len(CLASSES), dtype=np.int64)
        for doc_class, count in class_counts.items():
            priors[DocClass(doc_class).ordinal] = count
        model._install(priors, term_counts)
        return model

    @property
    def alpha(self) -> float:
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        alpha = float(value)
        if not alpha > 0:
            raise InvalidArgumentError(f"alpha must be positive, got {value!r}")
        self._alpha = alpha

    def is_trained(self) -> bool:
        return self._trained

    def fit(
        self, samples: Sequence[Sample], labels: Sequence[DocClass]
    ) -> MultinomialNaiveBayes:
        """Estimate prior and likelihood counts, replacing any previous fit."""

        if len(samples) != len(labels):
            raise InvalidArgumentError(
                f"Got {len(samples)} sample(s) but {len(labels)} label(s)."
            )

        priors = np.zeros(len(CLASSES), dtype=np.int64)
        megadocs: dict[DocClass, Counter[str]] = {}
        for sample, label in zip(samples, labels):
            doc_class = DocClass(label)
            priors[doc_class.ordinal] += 1
            megadoc = megadocs.setdefault(doc_class, Counter())
            for term, count in sample.items():
                if count:
                    megadoc[term] += count

        term_counts: dict[str, dict[DocClass, int]] = {}
        for doc_class, megadoc in megadocs.items():
            for term, count in megadoc.items():
                term_counts.setdefault(term, {})[doc_class] = count

        self._install(priors, term_counts)
        LOGGER.info(
            "Fitted Naive Bayes on %d sample(s), %d class(es), %d term(s)",
            len(samples),
            int(np.count_nonzero(priors)),
            self.vocabulary_size,
        )
        return self

    def predict(self, sample: Sample) -> DocClass:
        """Return the maximum a posteriori class of ``sample``."""

        return self.predict_many([sample])[0]

    def predict_many(self, samples: Sequence[Sample]) -> list[DocClass]:
        """Predict every sample, preserving input order."""

        if not samples:
            self._ensure_trained()
            return []
        scores = self._joint_log_likelihood(samples)
        # argmax keeps the first maximum, i.e. the lowest class ordinal.
        return [CLASSES[index] for index in np.argmax(scores, axis=1)]

    def log_posterior(self, sample: Sample) -> dict[DocClass, float]:
        """Return the unnormalised log posterior of every class seen in training."""

        scores = self._joint_log_likelihood([sample])[0]
        return {
            doc_class: float(scores[doc_class.ordinal])
            for doc_class in CLASSES
            if self._class_counts[doc_class.ordinal] > 0
        }

    def smoothed_probability(self, term: str, doc_class: DocClass) -> float:
        """Laplace-smoothed estimate of ``p(term | doc_class)``."""

        self._ensure_trained()
        column = DocClass(doc_class).ordinal
        row = self._vocabulary.get(term)
        occurrences = 0 if row is None else int(self._term_counts[row, column])
        denominator = self._class_totals[column] + self._alpha * self.vocabulary_size
        return (occurrences + self._alpha) / denominator

    @property
    def classes(self) -> list[DocClass]:
        """Classes with at least one training document, in ordinal order."""

        return [cls for cls in CLASSES if self._class_counts[cls.ordinal] > 0]

    @property
    def class_counts(self) -> dict[DocClass, int]:
        return {cls: int(self._class_counts[cls.ordinal]) for cls in self.classes}

    @property
    def class_totals(self) -> dict[DocClass, int]:
        return {cls: int(self._class_totals[cls.ordinal]) for cls in self.classes}

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary)

    @property
    def n_samples(self) -> int:
        return int(self._class_counts.sum())

    def term_counts(self, term: str) -> dict[DocClass, int]:
        """Occurrences of ``term`` per class; empty when the term is unknown."""

        row = self._vocabulary.get(term)
        if row is None:
            return {}
        counts = self._term_counts[row]
        return {cls: int(counts[cls.ordinal]) for cls in CLASSES if counts[cls.ordinal] > 0}

    def likelihood(self) -> dict[str, dict[DocClass, int]]:
        """Full likelihood table as nested mappings."""

        return {term: self.term_counts(term) for term in sorted(self._vocabulary)}

    def _install(
        self,
        priors: np.ndarray,
        term_counts: Mapping[str, Mapping[DocClass, int]],
    ) -> None:
        vocabulary = {term: row for row, term in enumerate(sorted(term_counts))}
        table = np.zeros((len(vocabulary), len(CLASSES)), dtype=np.int64)
        for term, per_class in term_counts.items():
            row = vocabulary[term]
            for doc_class, count in per_class.items():
                table[row, DocClass(doc_class).ordinal] = count

        self._class_counts = priors.astype(np.int64, copy=True)
        self._vocabulary = vocabulary
        self._term_counts = table
        self._class_totals = table.sum(axis=0, dtype=np.int64)
        self._trained = bool(self._class_counts.sum() > 0)

    def _ensure_trained(self) -> None:
        if not self._trained:
            raise NotFittedError("Classifier has not been fitted. Call fit() first.")

    def _joint_log_likelihood(self, samples: Sequence[Sample]) -> np.ndarray:
        self._ensure_trained()
        known, unseen = self._encode(samples)

        with np.errstate(divide="ignore"):
            log_prior = np.log(self._class_counts / self._class_counts.sum())
        scores = np.tile(log_prior, (len(samples), 1))
        if not self.vocabulary_size:
            # Empty vocabulary: terms carry no class evidence.
            return scores

        log_denominators = np.log(self._class_totals + self._alpha * self.vocabulary_size)
        log_likelihood = np.log(self._term_counts + self._alpha) - log_denominators
        log_unseen = np.log(self._alpha) - log_denominators
        return scores + known @ log_likelihood + np.outer(unseen, log_unseen)

    def _encode(self, samples: Sequence[Sample]) -> tuple[sparse.csr_matrix, np.ndarray]:
        indptr = [0]
        indices: list[int] = []
        data: list[float] = []
        unseen = np.zeros(len(samples), dtype=np.float64)
        for position, sample in enumerate(samples):
            for term, count in sample.items():
                row = self._vocabulary.get(term)
                if row is None:
                    unseen[position] += count
                else:
                    indices.append(row)
                    data.append(float(count))
            indptr.append(len(indices))
        matrix = sparse.csr_matrix(
            (
                np.asarray(data, dtype=np.float64),
                np.asarray(indices, dtype=np.int64),
                np.asarray(indptr, dtype=np.int64),
            ),
            shape=(len(samples), self.vocabulary_size),
        )
        return matrix, unseen


def serialize(model: MultinomialNaiveBayes) -> bytes:
    """Encode the model's counts as prior lines, a blank line, likelihood lines."""

    if not model.is_trained():
        raise NotFittedError("Cannot serialize an untrained classifier.")

    lines = [f"{cls.value} {count}" for cls, count in model.class_counts.items()]
    lines.append("")
    for term, per_class in model.likelihood().items():
        for cls, count in per_class.items():
            lines.append(f"{term} {cls.value} {count}")
    return ("\n".join(lines) + "\n").encode("utf-8")


def deserialize(data: bytes | str, *, alpha: float = DEFAULT_ALPHA) -> MultinomialNaiveBayes:
    """Rebuild a model from the output of :func:`serialize`."""

    text = data.decode("utf-8") if isinstance(data, bytes) else data
    class_counts: dict[DocClass, int] = {}
    term_counts: dict[str, dict[DocClass, int]] = {}
    in_prior = True

    for lineno, line in enumerate(split_lines(text), start=1):
        fields = split_fields(line)
        if in_prior:
            if not fields:
                in_prior = False
                continue
            if len(fields) != 2:
                raise ModelFormatError(f"line {lineno}: expected '<class> <count>'")
            doc_class = _parse_class(fields[0], lineno)
            if doc_class in class_counts:
                raise ModelFormatError(f"line {lineno}: duplicate prior for '{doc_class}'")
            class_counts[doc_class] = _parse_count(fields[1], lineno)
            continue

        if not fields:
            continue
        if len(fields) != 3:
            raise ModelFormatError(f"line {lineno}: expected '<term> <class> <count>'")
        term, raw_class, raw_count = fields
        doc_class = _parse_class(raw_class, lineno)
        per_class = term_counts.setdefault(term, {})
        if doc_class in per_class:
            raise ModelFormatError(
                f"line {lineno}: duplicate count for term '{term}' in class '{doc_class}'"
            )
        per_class[doc_class] = _parse_count(raw_count, lineno)

    if not any(class_counts.values()):
        raise ModelFormatError("model defines no class priors")
    return MultinomialNaiveBayes.from_counts(class_counts, term_counts, alpha=alpha)


def _parse_class(value: str, lineno: int) -> DocClass:
    try:
        return DocClass.parse(value)
    except ValueError as exc:
        raise ModelFormatError(f"line {lineno}: {exc}") from exc


def _parse_count(value: str, lineno: int) -> int:
    try:
        count = int(value)
    except ValueError as exc:
        raise ModelFormatError(f"line {lineno}: invalid count {value!r}") from exc
    if count < 0:
        raise ModelFormatError(f"line {lineno}: negative count {count}")
    return count


__all__ = [
    "CLASSES",
    "DEFAULT_ALPHA",
    "ModelFormatError",
    "MultinomialNaiveBayes",
    "NotFittedError",
    "deserialize",
    "serialize",
]
