"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .classifiers.naive_bayes import DEFAULT_ALPHA
from .extractor.stopwords import default_stopwords_path

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NEWSBAYES_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/newsbayes/config.yaml")
DEFAULT_ROOT_DIR = Path("~/.local/lib/newsbayes")
DEFAULT_DATASET_DIR = Path("Dataset")
DEFAULT_LOG_LEVEL = "info"
TRAIN_SET_NAME = "train.txt"
TEST_SET_NAME = "test.txt"
MODEL_NAME = "model.txt"


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class ClassifierConfig:
    """Training parameters; ``num_features == 0`` disables feature selection."""

    alpha: float = DEFAULT_ALPHA
    num_features: int = 0


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    root_dir: Path
    dataset_dir: Path
    stopwords: Path
    train_set: Path
    test_set: Path
    model: Path
    classifier: ClassifierConfig
    logging: LoggingConfig


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicitly requested file (argument or environment variable) must
    exist. When the default location has no file, defaults are used.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s, using defaults", config_path)
        return _parse_config({})

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def resolved_config_path(explicit: Path | str | None = None) -> Path:
    """Return the config path that :func:`load_config` would read."""

    return _resolve_config_path(explicit)[0]


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    root_dir = _parse_path(raw.get("rootdir") or raw.get("root_dir"), "root_dir", DEFAULT_ROOT_DIR)
    return Config(
        root_dir=root_dir,
        dataset_dir=_parse_path(raw.get("dataset_dir"), "dataset_dir", DEFAULT_DATASET_DIR),
        stopwords=_parse_path(raw.get("stopwords"), "stopwords", default_stopwords_path()),
        train_set=_parse_path(raw.get("train_set"), "train_set", root_dir / TRAIN_SET_NAME),
        test_set=_parse_path(raw.get("test_set"), "test_set", root_dir / TEST_SET_NAME),
        model=_parse_path(raw.get("model"), "model", root_dir / MODEL_NAME),
        classifier=_parse_classifier(raw.get("classifier")),
        logging=_parse_logging(raw.get("logging")),
    )


def _parse_path(value: Any, field_name: str, default: Path) -> Path:
    if value is None:
        return default.expanduser()
    if isinstance(value, Path):
        return value.expanduser()
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{field_name} must be a non-empty string path.")
    return Path(value).expanduser()


def _parse_classifier(value: Any) -> ClassifierConfig:
    if value is None:
        return ClassifierConfig()
    if not isinstance(value, dict):
        raise ConfigError("classifier must be a mapping.")

    raw_alpha = value.get("alpha", DEFAULT_ALPHA)
    if isinstance(raw_alpha, bool):
        raise ConfigError("classifier.alpha must be a number.")
    try:
        alpha = float(raw_alpha)
    except (TypeError, ValueError) as exc:
        raise ConfigError("classifier.alpha must be a number.") from exc
    if not alpha > 0:
        raise ConfigError(f"classifier.alpha must be positive, got {raw_alpha}.")

    num_features = value.get("num_features", 0)
    if isinstance(num_features, bool) or not isinstance(num_features, int):
        raise ConfigError("classifier.num_features must be an integer.")
    if num_features < 0:
        raise ConfigError(f"classifier.num_features cannot be negative, got {num_features}.")
    return ClassifierConfig(alpha=alpha, num_features=num_features)


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


__all__ = [
    "ClassifierConfig",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "load_config",
    "resolved_config_path",
]
