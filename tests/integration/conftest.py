from __future__ import annotations

import shutil
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def corpus_dir() -> Path:
    root = Path(__file__).resolve().parents[1] / "fixtures" / "reuters"
    if not root.exists():
        pytest.skip("Reuters fixtures missing")
    return root


@pytest.fixture
def workspace(tmp_path: Path, corpus_dir: Path) -> Path:
    """Copy the fixture corpus and write a config pointing at it."""

    dataset_dir = tmp_path / "Dataset"
    shutil.copytree(corpus_dir, dataset_dir)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "\n".join(
            [
                f"root_dir: {tmp_path / 'state'}",
                f"dataset_dir: {dataset_dir}",
                "classifier:",
                "  alpha: 1.0",
                "  num_features: 0",
                "logging:",
                "  level: debug",
                "  debug_file: true",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return tmp_path


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests in this package as integration."""

    package_root = Path(__file__).resolve().parent
    integration_mark = pytest.mark.integration
    for item in items:
        try:
            path = Path(item.fspath).resolve()
        except OSError:
            continue
        if package_root in path.parents:
            item.add_marker(integration_mark)
