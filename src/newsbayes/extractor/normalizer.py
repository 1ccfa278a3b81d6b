"""Tokenization and term normalization for news articles.

A *token* is a maximal run of non-whitespace characters and may carry
punctuation. A *term* is what survives normalization:

1. punctuation scrub: ``" ' , < >`` are deleted anywhere in the token, then
   non-alphanumeric characters are stripped from both ends;
2. case folding;
3. stopword removal (the token becomes ``""`` and is dropped);
4. Porter stemming.

The normalizer also keeps cumulative frequency tables of raw tokens and
normalized terms for every document it has processed.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from nltk.stem.porter import PorterStemmer

from ..types import Sample, split_fields
from .stopwords import StopwordList, load_stopwords

TOP_TERM_COUNT = 20

_EDGE_PUNCTUATION_RE = re.compile(r"\A[^0-9A-Za-z]+|[^0-9A-Za-z]+\Z")
_SCRUB_TABLE = str.maketrans("", "", "\"',<>")


@dataclass(frozen=True)
class NormalizerStats:
    """Corpus statistics gathered while normalizing documents."""

    total_unnormalized_tokens: int = 0
    total_normalized_tokens: int = 0
    total_unnormalized_terms: int = 0
    total_normalized_terms: int = 0
    top_unnormalized_terms: list[tuple[str, int]] = field(default_factory=list)
    top_normalized_terms: list[tuple[str, int]] = field(default_factory=list)


def tokenize(text: str) -> list[str]:
    """Split ``text`` on ASCII whitespace, dropping empty spans."""

    return split_fields(text)


def remove_punctuation(token: str) -> str:
    """Return ``token`` with scrubbed characters and edge punctuation removed."""

    scrubbed = token.translate(_SCRUB_TABLE)
    return _EDGE_PUNCTUATION_RE.sub("", scrubbed)


class Normalizer:
    """Turns raw documents into term-count samples."""

    def __init__(
        self,
        stopwords: StopwordList | Path | str | None = None,
        *,
        stemmer: PorterStemmer | None = None,
    ) -> None:
        if isinstance(stopwords, StopwordList):
            self._stopwords = stopwords
        else:
            self._stopwords = load_stopwords(stopwords)
        self._stemmer = stemmer or PorterStemmer(mode=PorterStemmer.MARTIN_EXTENSIONS)
        self._unnormalized_terms: Counter[str] = Counter()
        self._normalized_terms: Counter[str] = Counter()
        self._unnormalized_tokens = 0
        self._normalized_tokens = 0

    @property
    def stopwords(self) -> StopwordList:
        return self._stopwords

    def tokenize(self, text: str) -> list[str]:
        tokens = tokenize(text)
        self._unnormalized_tokens += len(tokens)
        return tokens

    def remove_punctuation(self, token: str) -> str:
        return remove_punctuation(token)

    def is_stopword(self, word: str) -> bool:
        return word in self._stopwords

    def normalize(self, token: str) -> str:
        """Return the normalized term for ``token`` or ``""`` if it is dropped."""

        term = remove_punctuation(token).lower()
        if not term or term in self._stopwords:
            return ""
        return self._stemmer.stem(term)

    def normalize_all(self, tokens: Iterable[str]) -> list[str]:
        normalized = (self.normalize(token) for token in tokens)
        return [term for term in normalized if term]

    def get_doc_terms(self, doc: str) -> Sample:
        """Tokenize and normalize ``doc`` and count its terms."""

        tokens = self.tokenize(doc)
        self._unnormalized_terms.update(tokens)
        terms = self.normalize_all(tokens)
        self._normalized_terms.update(terms)
        self._normalized_tokens += len(terms)
        return dict(Counter(terms))

    def stats(self) -> NormalizerStats:
        return NormalizerStats(
            total_unnormalized_tokens=self._unnormalized_tokens,
            total_normalized_tokens=self._normalized_tokens,
            total_unnormalized_terms=len(self._unnormalized_terms),
            total_normalized_terms=len(self._normalized_terms),
            top_unnormalized_terms=self._unnormalized_terms.most_common(TOP_TERM_COUNT),
            top_normalized_terms=self._normalized_terms.most_common(TOP_TERM_COUNT),
        )


__all__ = [
    "Normalizer",
    "NormalizerStats",
    "TOP_TERM_COUNT",
    "remove_punctuation",
    "tokenize",
]
