"""Classifier protocol definitions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..types import DocClass, Sample


@runtime_checkable
class Classifier(Protocol):
    """Common interface of batch-trained document classifiers."""

    name: str

    def fit(self, samples: Sequence[Sample], labels: Sequence[DocClass]) -> Classifier:
        """Replace any previous state with a fit on the given samples."""

    def predict(self, sample: Sample) -> DocClass:
        """Return the predicted class of a single sample."""

    def predict_many(self, samples: Sequence[Sample]) -> list[DocClass]:
        """Return the predicted class of every sample, in order."""

    def is_trained(self) -> bool:
        """Return True once the classifier has been fitted."""


__all__ = ["Classifier"]
