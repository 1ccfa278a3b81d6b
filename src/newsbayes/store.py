"""Persistence helpers for datasets, models, and corpus files."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from pathlib import Path

from .classifiers.naive_bayes import DEFAULT_ALPHA, MultinomialNaiveBayes, deserialize, serialize
from .config import MODEL_NAME, TEST_SET_NAME, TRAIN_SET_NAME
from .dataset import Dataset, deserialize_dataset, serialize_dataset

LOGGER = logging.getLogger(__name__)
CORPUS_PATTERN = "*.sgm"


class StoreError(FileNotFoundError):
    """Raised when an expected artefact is missing on disk."""


class Store:
    """High-level helper responsible for the on-disk artefact layout."""

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir).expanduser()
        self.root_dir.mkdir(parents=True, exist_ok=True)

    @property
    def train_set_path(self) -> Path:
        return self.root_dir / TRAIN_SET_NAME

    @property
    def test_set_path(self) -> Path:
        return self.root_dir / TEST_SET_NAME

    @property
    def model_path(self) -> Path:
        return self.root_dir / MODEL_NAME

    def save_dataset(self, dataset: Dataset, path: Path | None = None) -> Path:
        """Write ``dataset`` atomically, defaulting to the training set location."""

        target = Path(path).expanduser() if path else self.train_set_path
        encoded = serialize_dataset(dataset).encode("utf-8")
        self._atomic_write(target, lambda tmp_path: tmp_path.write_bytes(encoded))
        LOGGER.info("Wrote %d document(s) to %s", len(dataset), target)
        return target

    def load_dataset(self, path: Path | None = None) -> Dataset:
        target = Path(path).expanduser() if path else self.train_set_path
        dataset = deserialize_dataset(self._read(target, "Dataset").decode("utf-8"))
        LOGGER.info("Loaded %d document(s) from %s", len(dataset), target)
        return dataset

    def save_model(self, model: MultinomialNaiveBayes, path: Path | None = None) -> Path:
        target = Path(path).expanduser() if path else self.model_path
        encoded = serialize(model)
        self._atomic_write(target, lambda tmp_path: tmp_path.write_bytes(encoded))
        LOGGER.info("Saved model (%d term(s)) to %s", model.vocabulary_size, target)
        return target

    def load_model(
        self, path: Path | None = None, *, alpha: float = DEFAULT_ALPHA
    ) -> MultinomialNaiveBayes:
        target = Path(path).expanduser() if path else self.model_path
        model = deserialize(self._read(target, "Model"), alpha=alpha)
        LOGGER.info("Loaded model (%d term(s)) from %s", model.vocabulary_size, target)
        return model

    @staticmethod
    def corpus_files(dataset_dir: Path) -> list[Path]:
        """Return the corpus ``.sgm`` files of ``dataset_dir`` in name order."""

        directory = Path(dataset_dir).expanduser()
        if not directory.is_dir():
            raise StoreError(f"Dataset directory not found: {directory}")
        files = sorted(path for path in directory.glob(CORPUS_PATTERN) if path.is_file())
        if not files:
            raise StoreError(f"No {CORPUS_PATTERN} files found in {directory}")
        return files

    def _read(self, path: Path, kind: str) -> bytes:
        if not path.is_file():
            raise StoreError(f"{kind} file not found: {path}")
        return path.read_bytes()

    def _atomic_write(self, target: Path, writer: Callable[[Path], object]) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp_name = f".{target.name}.{uuid.uuid4().hex}.tmp"
        tmp_path = target.with_name(tmp_name)
        try:
            writer(tmp_path)
            tmp_path.replace(target)
        finally:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)


__all__ = ["CORPUS_PATTERN", "Store", "StoreError"]
