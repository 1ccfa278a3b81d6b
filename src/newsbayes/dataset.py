"""Labelled bag-of-words datasets and their flat-text file format.

Every document is written as a ``<id> <class>`` header, one ``<term> <count>``
line per term in ascending term order, and a terminating blank line.
Documents appear in ascending id order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .types import DocClass, Sample, split_fields, split_lines


class DatasetFormatError(ValueError):
    """Raised when a dataset file cannot be parsed."""


@dataclass
class Dataset:
    """Samples and labels keyed by document id."""

    samples: dict[int, Sample] = field(default_factory=dict)
    labels: dict[int, DocClass] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.samples)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.samples

    def __iter__(self) -> Iterator[tuple[int, Sample, DocClass]]:
        for doc_id in self.ids:
            yield doc_id, self.samples[doc_id], self.labels[doc_id]

    @property
    def ids(self) -> list[int]:
        return sorted(self.samples)

    def add(self, doc_id: int, sample: Sample, label: DocClass) -> None:
        """Insert a document; ids must be unique."""

        if doc_id in self.samples:
            raise ValueError(f"Duplicate document id: {doc_id}")
        self.samples[doc_id] = sample
        self.labels[doc_id] = DocClass(label)

    def xy(self) -> tuple[list[Sample], list[DocClass]]:
        """Return parallel sample and label lists in ascending id order."""

        ids = self.ids
        return [self.samples[doc_id] for doc_id in ids], [self.labels[doc_id] for doc_id in ids]

    def class_counts(self) -> dict[DocClass, int]:
        counts: dict[DocClass, int] = {}
        for label in self.labels.values():
            counts[label] = counts.get(label, 0) + 1
        return {cls: counts[cls] for cls in sorted(counts, key=lambda cls: cls.ordinal)}


def serialize_dataset(dataset: Dataset) -> str:
    """Render ``dataset`` in the flat-text format."""

    return "".join(_render(dataset))


def _render(dataset: Dataset) -> Iterable[str]:
    for doc_id, sample, label in dataset:
        yield f"{doc_id} {label.value}\n"
        for term in sorted(sample):
            yield f"{term} {sample[term]}\n"
        yield "\n"


def deserialize_dataset(text: str) -> Dataset:
    """Parse the flat-text format; any malformed line fails the whole read."""

    dataset = Dataset()
    current: Sample | None = None

    for lineno, line in enumerate(split_lines(text), start=1):
        fields = split_fields(line)
        if not fields:
            current = None
            continue
        if len(fields) != 2:
            raise DatasetFormatError(f"line {lineno}: expected two fields, got {len(fields)}")

        if current is None:
            doc_id = _parse_int(fields[0], lineno, "document id")
            try:
                label = DocClass.parse(fields[1])
            except ValueError as exc:
                raise DatasetFormatError(f"line {lineno}: {exc}") from exc
            if doc_id in dataset:
                raise DatasetFormatError(f"line {lineno}: duplicate document id {doc_id}")
            current = {}
            dataset.add(doc_id, current, label)
            continue

        term, raw_count = fields
        if term in current:
            raise DatasetFormatError(f"line {lineno}: duplicate term {term!r}")
        count = _parse_int(raw_count, lineno, "count")
        if count < 1:
            raise DatasetFormatError(f"line {lineno}: count must be positive, got {count}")
        current[term] = count

    return dataset


def _parse_int(value: str, lineno: int, what: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise DatasetFormatError(f"line {lineno}: invalid {what} {value!r}") from exc


__all__ = ["Dataset", "DatasetFormatError", "deserialize_dataset", "serialize_dataset"]
