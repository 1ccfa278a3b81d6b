from __future__ import annotations

from pathlib import Path

import pytest

from newsbayes.classifiers.naive_bayes import MultinomialNaiveBayes, serialize
from newsbayes.dataset import Dataset
from newsbayes.store import Store, StoreError
from newsbayes.types import DocClass


def _dataset() -> Dataset:
    dataset = Dataset()
    dataset.add(2, {"oil": 2}, DocClass.CRUDE)
    dataset.add(1, {"profit": 1}, DocClass.EARN)
    return dataset


def test_default_layout(tmp_path: Path) -> None:
    store = Store(tmp_path / "state")

    assert store.root_dir.is_dir()
    assert store.train_set_path == tmp_path / "state" / "train.txt"
    assert store.test_set_path == tmp_path / "state" / "test.txt"
    assert store.model_path == tmp_path / "state" / "model.txt"


def test_dataset_roundtrip(tmp_path: Path) -> None:
    store = Store(tmp_path / "state")

    path = store.save_dataset(_dataset())

    assert path == store.train_set_path
    assert store.load_dataset() == _dataset()
    assert path.read_text(encoding="utf-8").startswith("1 earn\nprofit 1\n\n")


def test_model_roundtrip(tmp_path: Path) -> None:
    store = Store(tmp_path / "state")
    samples, labels = _dataset().xy()
    model = MultinomialNaiveBayes().fit(samples, labels)

    path = store.save_model(model, tmp_path / "custom" / "model.txt")
    restored = store.load_model(path, alpha=0.5)

    assert path.parent.is_dir()
    assert serialize(restored) == serialize(model)
    assert restored.alpha == 0.5


def test_atomic_write_leaves_no_temp_files(tmp_path: Path) -> None:
    store = Store(tmp_path / "state")

    store.save_dataset(_dataset())
    store.save_dataset(_dataset())

    assert sorted(p.name for p in store.root_dir.iterdir()) == ["train.txt"]


def test_missing_files_raise_store_error(tmp_path: Path) -> None:
    store = Store(tmp_path / "state")

    with pytest.raises(StoreError, match="Model file not found"):
        store.load_model()
    with pytest.raises(StoreError, match="Dataset file not found"):
        store.load_dataset(tmp_path / "missing.txt")
    with pytest.raises(FileNotFoundError):
        store.load_dataset()


def test_corpus_files_are_sorted(tmp_path: Path) -> None:
    corpus = tmp_path / "Dataset"
    corpus.mkdir()
    for name in ("reut2-001.sgm", "reut2-000.sgm", "README.txt"):
        (corpus / name).write_text("", encoding="utf-8")

    files = Store.corpus_files(corpus)

    assert [path.name for path in files] == ["reut2-000.sgm", "reut2-001.sgm"]


def test_corpus_files_require_sgm_files(tmp_path: Path) -> None:
    with pytest.raises(StoreError, match="not found"):
        Store.corpus_files(tmp_path / "missing")
    with pytest.raises(StoreError, match="No"):
        Store.corpus_files(tmp_path)
