from __future__ import annotations

import threading
from pathlib import Path

import pytest

from newsbayes.extractor import stopwords as stopwords_module
from newsbayes.extractor.stopwords import (
    StopwordError,
    StopwordList,
    default_stopwords_path,
    load_stopwords,
)


@pytest.fixture(autouse=True)
def _clear_cache():
    stopwords_module.clear_cache()
    yield
    stopwords_module.clear_cache()


def test_list_is_sorted_and_searchable() -> None:
    words = StopwordList(["the", "a", "of", "and"])

    assert list(words) == ["a", "and", "of", "the"]
    assert "the" in words
    assert "them" not in words
    assert 3 not in words


def test_from_file_strips_whitespace_and_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "stop.txt"
    path.write_text("  the \n\nand\n\tof\n", encoding="utf-8")

    words = StopwordList.from_file(path)

    assert len(words) == 3
    assert "of" in words


def test_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(StopwordError, match="not found"):
        StopwordList.from_file(tmp_path / "missing.txt")


def test_empty_file_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "empty.txt"
    path.write_text("\n\n", encoding="utf-8")

    with pytest.raises(StopwordError, match="empty"):
        StopwordList.from_file(path)


def test_packaged_list_contains_common_words() -> None:
    words = load_stopwords()

    assert default_stopwords_path().is_file()
    for word in ("the", "a", "and", "of", "said"):
        assert word in words
    for word in ("buy", "stock", "oil", "profit"):
        assert word not in words


def test_load_stopwords_caches_per_path(tmp_path: Path) -> None:
    path = tmp_path / "stop.txt"
    path.write_text("the\n", encoding="utf-8")

    first = load_stopwords(path)
    path.write_text("other\n", encoding="utf-8")
    second = load_stopwords(path)

    assert first is second
    assert "the" in second


def test_concurrent_first_use_shares_one_instance(tmp_path: Path) -> None:
    path = tmp_path / "stop.txt"
    path.write_text("the\nand\n", encoding="utf-8")
    results: list[StopwordList] = []
    lock = threading.Lock()

    def _load() -> None:
        loaded = load_stopwords(path)
        with lock:
            results.append(loaded)

    threads = [threading.Thread(target=_load) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(result is results[0] for result in results)
