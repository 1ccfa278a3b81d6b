"""Precision, recall and F-scores over predicted document classes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, overload

from sklearn.metrics import accuracy_score, precision_recall_fscore_support

from .types import DocClass, InvalidArgumentError

Average = Literal["micro", "macro"]


@dataclass(frozen=True)
class Scores:
    """Precision, recall and F-beta for one class or one averaging scheme."""

    precision: float
    recall: float
    f_score: float


@dataclass(frozen=True)
class MetricsReport:
    """Aggregated evaluation results."""

    accuracy: float
    micro: Scores
    macro: Scores
    per_class: dict[DocClass, Scores]
    support: dict[DocClass, int]
    beta: float = 1.0


@overload
def precision(y_true: Sequence[DocClass], y_pred: Sequence[DocClass]) -> dict[DocClass, float]: ...
@overload
def precision(
    y_true: Sequence[DocClass], y_pred: Sequence[DocClass], average: Average
) -> float: ...
def precision(y_true, y_pred, average=None):
    """Precision per class, or micro/macro averaged."""

    return _metric(0, y_true, y_pred, average, 1.0)


@overload
def recall(y_true: Sequence[DocClass], y_pred: Sequence[DocClass]) -> dict[DocClass, float]: ...
@overload
def recall(y_true: Sequence[DocClass], y_pred: Sequence[DocClass], average: Average) -> float: ...
def recall(y_true, y_pred, average=None):
    """Recall per class, or micro/macro averaged."""

    return _metric(1, y_true, y_pred, average, 1.0)


def f_score(
    y_true: Sequence[DocClass],
    y_pred: Sequence[DocClass],
    average: Average | None = None,
    *,
    beta: float = 1.0,
) -> dict[DocClass, float] | float:
    """F-beta score per class, or micro/macro averaged."""

    if beta <= 0:
        raise InvalidArgumentError(f"beta must be positive, got {beta}")
    return _metric(2, y_true, y_pred, average, beta)


def classification_report(
    y_true: Sequence[DocClass], y_pred: Sequence[DocClass], *, beta: float = 1.0
) -> MetricsReport:
    """Compute every metric the command-line report prints."""

    labels = _labels(y_true, y_pred)
    true_values = _values(y_true)
    pred_values = _values(y_pred)
    label_values = _values(labels)

    averaged: dict[str, Scores] = {}
    for average in ("micro", "macro"):
        p, r, f, _ = precision_recall_fscore_support(
            true_values,
            pred_values,
            labels=label_values,
            average=average,
            beta=beta,
            zero_division=0,
        )
        averaged[average] = Scores(precision=float(p), recall=float(r), f_score=float(f))

    p, r, f, support = precision_recall_fscore_support(
        true_values,
        pred_values,
        labels=label_values,
        average=None,
        beta=beta,
        zero_division=0,
    )
    per_class = {
        label: Scores(precision=float(p[idx]), recall=float(r[idx]), f_score=float(f[idx]))
        for idx, label in enumerate(labels)
    }
    return MetricsReport(
        accuracy=float(accuracy_score(true_values, pred_values)),
        micro=averaged["micro"],
        macro=averaged["macro"],
        per_class=per_class,
        support={label: int(support[idx]) for idx, label in enumerate(labels)},
        beta=beta,
    )


def _metric(
    index: int,
    y_true: Sequence[DocClass],
    y_pred: Sequence[DocClass],
    average: Average | None,
    beta: float,
) -> dict[DocClass, float] | float:
    if average not in (None, "micro", "macro"):
        raise InvalidArgumentError(f"Unknown average: {average!r}")
    labels = _labels(y_true, y_pred)
    result = precision_recall_fscore_support(
        _values(y_true),
        _values(y_pred),
        labels=_values(labels),
        average=average,
        beta=beta,
        zero_division=0,
    )[index]
    if average is None:
        return {label: float(result[idx]) for idx, label in enumerate(labels)}
    return float(result)


def _labels(y_true: Sequence[DocClass], y_pred: Sequence[DocClass]) -> list[DocClass]:
    if len(y_true) != len(y_pred):
        raise InvalidArgumentError(
            f"y_true and y_pred must have the same length ({len(y_true)} != {len(y_pred)})"
        )
    if not y_true:
        raise InvalidArgumentError("At least one label is required.")
    observed = {DocClass(label) for label in [*y_true, *y_pred]}
    return sorted(observed, key=lambda label: label.ordinal)


def _values(labels: Sequence[DocClass]) -> list[str]:
    return [DocClass(label).value for label in labels]


__all__ = [
    "Average",
    "MetricsReport",
    "Scores",
    "classification_report",
    "f_score",
    "precision",
    "recall",
]
