"""newsbayes command-line interface."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .classifiers.naive_bayes import ModelFormatError, NotFittedError
from .config import Config, ConfigError, load_config, resolved_config_path
from .dataset import DatasetFormatError
from .extractor.normalizer import Normalizer, NormalizerStats
from .extractor.reuters import CorpusError
from .extractor.stopwords import StopwordError
from .logging import configure_logging
from .metrics import MetricsReport
from .pipeline import construct_datasets, evaluate, train_model
from .store import Store, StoreError
from .types import DocClass, InvalidArgumentError

app = typer.Typer(help="Reuters-21578 Naive Bayes text classification.")
LOGGER = logging.getLogger(__name__)

LABEL_WIDTH = 10
VALUE_WIDTH = 10
PRECISION = 4
RUNTIME_ERRORS = (
    CorpusError,
    DatasetFormatError,
    InvalidArgumentError,
    ModelFormatError,
    NotFittedError,
    StopwordError,
    StoreError,
)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None


@app.callback()
def _newsbayes(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to config (env NEWSBAYES_CONFIG or ~/.config/newsbayes/config.yaml).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved)


@app.command("construct-datasets")
def construct_datasets_command(
    ctx: typer.Context,
    dataset_dir: Annotated[
        Path | None,
        typer.Option("--dataset-dir", help="Directory holding the reut2-*.sgm files."),
    ] = None,
    train_set: Annotated[
        Path | None,
        typer.Option("--train-set", help="Output path of the training set."),
    ] = None,
    test_set: Annotated[
        Path | None,
        typer.Option("--test-set", help="Output path of the test set."),
    ] = None,
) -> None:
    """Parse the corpus and write the training and test datasets."""

    config, store = _load_environment(_state(ctx))
    try:
        files = store.corpus_files(dataset_dir or config.dataset_dir)
        normalizer = Normalizer(config.stopwords)
        build = construct_datasets(files, normalizer)
        train_path = store.save_dataset(build.train, train_set or config.train_set)
        test_path = store.save_dataset(build.test, test_set or config.test_set)
    except RUNTIME_ERRORS as exc:
        _runtime_failure(exc)

    typer.echo(f"Training set: {len(build.train)} document(s) -> {train_path}")
    typer.echo(f"Test set: {len(build.test)} document(s) -> {test_path}")
    typer.echo(f"Skipped: {build.skipped} document(s)")
    typer.echo("")
    _print_stats(build.stats)


@app.command()
def fit(
    ctx: typer.Context,
    train_set: Annotated[
        Path | None,
        typer.Argument(help="Training set (defaults to the configured train_set)."),
    ] = None,
    model: Annotated[
        Path | None,
        typer.Argument(help="Model output path (defaults to the configured model)."),
    ] = None,
    num_features: Annotated[
        int | None,
        typer.Option(
            "--num-features",
            min=0,
            help="Keep the N most informative terms per class (0 disables selection).",
        ),
    ] = None,
    alpha: Annotated[
        float | None,
        typer.Option("--alpha", help="Laplace smoothing parameter (> 0)."),
    ] = None,
) -> None:
    """Fit a Naive Bayes model on a training set."""

    config, store = _load_environment(_state(ctx))
    features = config.classifier.num_features if num_features is None else num_features
    smoothing = config.classifier.alpha if alpha is None else alpha
    try:
        dataset = store.load_dataset(train_set or config.train_set)
        result = train_model(dataset, alpha=smoothing, num_features=features)
        model_path = store.save_model(result.model, model or config.model)
    except RUNTIME_ERRORS as exc:
        _runtime_failure(exc)

    if result.selection:
        _print_selection(result.selection)
    typer.echo(
        f"Fitted {len(dataset)} document(s), {result.model.vocabulary_size} term(s) "
        f"-> {model_path}"
    )


@app.command()
def predict(
    ctx: typer.Context,
    test_set: Annotated[
        Path | None,
        typer.Argument(help="Test set (defaults to the configured test_set)."),
    ] = None,
    model: Annotated[
        Path | None,
        typer.Argument(help="Fitted model (defaults to the configured model)."),
    ] = None,
    alpha: Annotated[
        float | None,
        typer.Option("--alpha", help="Laplace smoothing parameter (> 0)."),
    ] = None,
) -> None:
    """Classify a test set and report precision, recall, and F1."""

    config, store = _load_environment(_state(ctx))
    smoothing = config.classifier.alpha if alpha is None else alpha
    try:
        classifier = store.load_model(model or config.model, alpha=smoothing)
        dataset = store.load_dataset(test_set or config.test_set)
        evaluation = evaluate(classifier, dataset)
    except RUNTIME_ERRORS as exc:
        _runtime_failure(exc)

    for doc_id, truth, guess in zip(evaluation.ids, evaluation.y_true, evaluation.y_pred):
        typer.echo(
            f"ID: {doc_id:>5} | Test: {truth.value:>{LABEL_WIDTH}} | "
            f"Pred: {guess.value:>{LABEL_WIDTH}}"
        )
    typer.echo("")
    _print_report(evaluation.report)


@app.command()
def version() -> None:
    """Print the installed version."""

    typer.echo(__version__)


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> tuple[Config, Store]:
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging, config.root_dir)
    except ConfigError as exc:
        _config_failure(exc)
    LOGGER.debug("Using configuration from %s", resolved_config_path(state.config_path))
    return config, Store(config.root_dir)


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _runtime_failure(exc: Exception) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1) from exc


def _heading(title: str) -> None:
    typer.echo(title)
    typer.echo("-" * len(title))


def _aligned(label: str, value: float, indent: int = 0) -> str:
    return f"{' ' * indent}{label:<{VALUE_WIDTH}}{value:>{VALUE_WIDTH}.{PRECISION}f}"


def _print_stats(stats: NormalizerStats) -> None:
    _heading("Tokenizer Stats")
    typer.echo(f"Unnormalized tokens: {stats.total_unnormalized_tokens}")
    typer.echo(f"Normalized tokens: {stats.total_normalized_tokens}")
    typer.echo(f"Unnormalized terms: {stats.total_unnormalized_terms}")
    typer.echo(f"Normalized terms: {stats.total_normalized_terms}")
    for title, terms in (
        ("Top unnormalized terms", stats.top_unnormalized_terms),
        ("Top normalized terms", stats.top_normalized_terms),
    ):
        typer.echo("")
        _heading(title)
        for term, count in terms:
            typer.echo(f"    {term:<20}{count:>10}")


def _print_selection(selection: Mapping[DocClass, list[str]]) -> None:
    for doc_class, words in selection.items():
        _heading(doc_class.value)
        for word in words:
            typer.echo(word)
        typer.echo("")


def _print_report(report: MetricsReport) -> None:
    for title, scores in (
        ("Micro Averaged Stats", report.micro),
        ("Macro Averaged Stats", report.macro),
    ):
        _heading(title)
        typer.echo(_aligned("Precision:", scores.precision))
        typer.echo(_aligned("Recall:", scores.recall))
        typer.echo(_aligned("F1 score:", scores.f_score))
        typer.echo("")

    _heading("Unaveraged Stats")
    for title, attribute in (
        ("Precision:", "precision"),
        ("Recall:", "recall"),
        ("F1-score:", "f_score"),
    ):
        typer.echo(title)
        for doc_class, scores in report.per_class.items():
            typer.echo(_aligned(f"{doc_class.value}:", getattr(scores, attribute), indent=4))
        typer.echo("")


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
