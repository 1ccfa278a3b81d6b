"""Batch stages: dataset construction, training, and evaluation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .classifiers.base import Classifier
from .classifiers.feature_selection import remove_unimportant_words, top_words_per_class
from .classifiers.naive_bayes import DEFAULT_ALPHA, MultinomialNaiveBayes
from .corpus import single_label, split_corpus
from .dataset import Dataset
from .extractor.entities import convert_html_special_chars
from .extractor.normalizer import Normalizer, NormalizerStats
from .extractor.reuters import parse_file
from .metrics import MetricsReport, classification_report
from .types import DocClass, InvalidArgumentError, RawDocument

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetBuild:
    """Datasets produced from a corpus, with the normalizer's statistics."""

    train: Dataset
    test: Dataset
    stats: NormalizerStats
    skipped: int = 0


@dataclass(frozen=True)
class TrainingResult:
    """A fitted model and the per-class term selection used to train it."""

    model: MultinomialNaiveBayes
    selection: dict[DocClass, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Evaluation:
    """Predictions for a labelled dataset and the resulting metrics."""

    ids: list[int]
    y_true: list[DocClass]
    y_pred: list[DocClass]
    report: MetricsReport


def load_corpus(files: Iterable[Path]) -> list[RawDocument]:
    """Parse every corpus file, preserving file and document order."""

    documents: list[RawDocument] = []
    for path in files:
        documents.extend(parse_file(path))
    LOGGER.info("Parsed %d document(s)", len(documents))
    return documents


def construct_datasets(files: Iterable[Path], normalizer: Normalizer) -> DatasetBuild:
    """Parse, split, and normalize the corpus into training and test datasets.

    Training documents are normalized before test documents so the
    normalizer's statistics accumulate in a stable order.
    """

    split = split_corpus(load_corpus(files))
    train = _normalize_documents(split.train, normalizer)
    test = _normalize_documents(split.test, normalizer)
    LOGGER.info("Built %d training and %d test sample(s)", len(train), len(test))
    return DatasetBuild(train=train, test=test, stats=normalizer.stats(), skipped=split.skipped)


def _normalize_documents(documents: list[RawDocument], normalizer: Normalizer) -> Dataset:
    dataset = Dataset()
    for document in documents:
        label = single_label(document.classes)
        if label is None:
            continue
        text = convert_html_special_chars(document.text)
        dataset.add(document.doc_id, normalizer.get_doc_terms(text), label)
    return dataset


def train_model(
    dataset: Dataset,
    *,
    alpha: float = DEFAULT_ALPHA,
    num_features: int = 0,
) -> TrainingResult:
    """Fit a classifier, optionally restricted to the top terms of each class.

    The dataset itself is never modified: feature selection prunes copies.
    """

    if num_features < 0:
        raise InvalidArgumentError(f"num_features cannot be negative, got {num_features}")
    samples, labels = dataset.xy()
    selection: dict[DocClass, list[str]] = {}
    if num_features:
        samples = [dict(sample) for sample in samples]
        classes = sorted(set(labels), key=lambda cls: cls.ordinal)
        selection = top_words_per_class(samples, labels, classes, num_features)
        remove_unimportant_words(samples, labels, selection)
        LOGGER.info("Selected %d term(s) per class for %d class(es)", num_features, len(selection))

    model = MultinomialNaiveBayes(alpha=alpha).fit(samples, labels)
    return TrainingResult(model=model, selection=selection)


def evaluate(model: Classifier, dataset: Dataset) -> Evaluation:
    """Predict every document in ``dataset`` and score the predictions."""

    if not len(dataset):
        raise InvalidArgumentError("Cannot evaluate an empty dataset.")
    samples, y_true = dataset.xy()
    y_pred = model.predict_many(samples)
    report = classification_report(y_true, y_pred)
    LOGGER.info("Evaluated %d document(s), accuracy %.4f", len(y_true), report.accuracy)
    return Evaluation(ids=dataset.ids, y_true=y_true, y_pred=y_pred, report=report)


__all__ = [
    "DatasetBuild",
    "Evaluation",
    "TrainingResult",
    "construct_datasets",
    "evaluate",
    "load_corpus",
    "train_model",
]
