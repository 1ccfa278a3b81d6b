"""Document parsing and text normalization utilities."""

from .entities import convert_html_special_chars
from .normalizer import Normalizer, NormalizerStats, remove_punctuation, tokenize
from .reuters import CorpusError, parse_file, parse_sgml
from .stopwords import StopwordError, StopwordList, load_stopwords

__all__ = [
    "CorpusError",
    "Normalizer",
    "NormalizerStats",
    "StopwordError",
    "StopwordList",
    "convert_html_special_chars",
    "load_stopwords",
    "parse_file",
    "parse_sgml",
    "remove_punctuation",
    "tokenize",
]
