from __future__ import annotations

import pytest

from newsbayes.dataset import Dataset, DatasetFormatError, deserialize_dataset, serialize_dataset
from newsbayes.extractor.normalizer import Normalizer
from newsbayes.extractor.stopwords import StopwordList
from newsbayes.types import DocClass


def _dataset() -> Dataset:
    dataset = Dataset()
    dataset.add(20, {"oil": 3, "barrel": 1}, DocClass.CRUDE)
    dataset.add(3, {"profit": 2}, DocClass.EARN)
    dataset.add(7, {}, DocClass.MONEY_FX)
    return dataset


def test_serialize_orders_ids_and_terms() -> None:
    text = serialize_dataset(_dataset())

    assert text == (
        "3 earn\nprofit 2\n\n"
        "7 money-fx\n\n"
        "20 crude\nbarrel 1\noil 3\n\n"
    )


def test_round_trip_is_exact() -> None:
    dataset = _dataset()

    restored = deserialize_dataset(serialize_dataset(dataset))

    assert restored == dataset
    assert serialize_dataset(restored) == serialize_dataset(dataset)


def test_xy_is_in_ascending_id_order() -> None:
    samples, labels = _dataset().xy()

    assert labels == [DocClass.EARN, DocClass.MONEY_FX, DocClass.CRUDE]
    assert samples[0] == {"profit": 2}


def test_add_rejects_duplicate_ids() -> None:
    dataset = _dataset()

    with pytest.raises(ValueError, match="Duplicate"):
        dataset.add(3, {}, DocClass.ACQ)


def test_class_counts_in_ordinal_order() -> None:
    assert list(_dataset().class_counts().items()) == [
        (DocClass.EARN, 1),
        (DocClass.MONEY_FX, 1),
        (DocClass.CRUDE, 1),
    ]


def test_trailing_blank_line_is_optional() -> None:
    restored = deserialize_dataset("1 acq\nmerger 2")

    assert restored.samples == {1: {"merger": 2}}
    assert restored.labels == {1: DocClass.ACQ}


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("1 acq extra\n", "line 1"),
        ("x acq\n", "invalid document id"),
        ("1 cocoa\n", "Unknown document class"),
        ("1 acq\nmerger two\n", "line 2: invalid count"),
        ("1 acq\nmerger 0\n", "must be positive"),
        ("1 acq\nmerger 1\nmerger 2\n", "duplicate term"),
        ("1 acq\n\n1 earn\n", "line 3: duplicate document id"),
    ],
)
def test_malformed_input_names_the_line(text: str, message: str) -> None:
    with pytest.raises(DatasetFormatError, match=message):
        deserialize_dataset(text)


def test_terms_with_non_ascii_whitespace_round_trip() -> None:
    dataset = Dataset()
    dataset.add(1, {"oil\xa0pric": 2, "crude\x1eoil": 1, "rate\x85cut": 1}, DocClass.CRUDE)
    dataset.add(2, {"s\u2028p": 3, "s&p": 1}, DocClass.EARN)

    restored = deserialize_dataset(serialize_dataset(dataset))

    assert restored == dataset


def test_normalized_terms_round_trip() -> None:
    normalizer = Normalizer(StopwordList(["the"]))
    dataset = Dataset()
    dataset.add(5, normalizer.get_doc_terms("oil\xa0price rose\x1cfast the end"), DocClass.CRUDE)

    restored = deserialize_dataset(serialize_dataset(dataset))

    assert restored.samples[5] == dataset.samples[5]
    assert len(restored.samples[5]) == 3


def test_carriage_returns_are_field_separators() -> None:
    restored = deserialize_dataset("1 acq\r\nmerger 2\r\n\r\n")

    assert restored.samples == {1: {"merger": 2}}
