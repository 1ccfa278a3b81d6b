"""Classifier implementations and feature selection."""

from .base import Classifier
from .feature_selection import mutual_info, remove_unimportant_words, top_words_per_class
from .naive_bayes import (
    ModelFormatError,
    MultinomialNaiveBayes,
    NotFittedError,
    deserialize,
    serialize,
)

__all__ = [
    "Classifier",
    "ModelFormatError",
    "MultinomialNaiveBayes",
    "NotFittedError",
    "deserialize",
    "mutual_info",
    "remove_unimportant_words",
    "serialize",
    "top_words_per_class",
]
