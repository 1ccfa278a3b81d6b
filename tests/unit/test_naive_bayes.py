from __future__ import annotations

import math

import pytest

from newsbayes.classifiers.base import Classifier
from newsbayes.classifiers.naive_bayes import (
    ModelFormatError,
    MultinomialNaiveBayes,
    NotFittedError,
    deserialize,
    serialize,
)
from newsbayes.types import DocClass, InvalidArgumentError

A = DocClass.EARN
B = DocClass.ACQ


@pytest.fixture
def fitted() -> MultinomialNaiveBayes:
    samples = [{"buy": 2, "stock": 1}, {"sell": 3}]
    return MultinomialNaiveBayes().fit(samples, [A, B])


def test_implements_classifier_protocol() -> None:
    assert isinstance(MultinomialNaiveBayes(), Classifier)


def test_fit_stores_raw_counts(fitted: MultinomialNaiveBayes) -> None:
    assert fitted.is_trained() is True
    assert fitted.class_counts == {A: 1, B: 1}
    assert fitted.class_totals == {A: 3, B: 3}
    assert fitted.vocabulary_size == 3
    assert fitted.n_samples == 2
    assert fitted.term_counts("buy") == {A: 2}
    assert fitted.term_counts("missing") == {}


def test_predict_prefers_class_with_evidence(fitted: MultinomialNaiveBayes) -> None:
    assert fitted.predict({"buy": 1}) is A
    assert fitted.predict({"sell": 1}) is B


def test_mixed_sample_regression_vector(fitted: MultinomialNaiveBayes) -> None:
    # A: 1/2 * 3/6 * 1/6 = 1/24, B: 1/2 * 1/6 * 4/6 = 1/18
    scores = fitted.log_posterior({"sell": 1, "buy": 1})

    assert scores[A] == pytest.approx(math.log(1 / 24))
    assert scores[B] == pytest.approx(math.log(1 / 18))
    assert fitted.predict({"sell": 1, "buy": 1}) is B


def test_unseen_terms_use_laplace_estimate(fitted: MultinomialNaiveBayes) -> None:
    probability = fitted.smoothed_probability("sell", A)

    assert probability > 0
    assert probability == pytest.approx(1.0 / (3 + 1.0 * 3))
    assert fitted.smoothed_probability("never-seen", B) == pytest.approx(1.0 / 6)


def test_alpha_changes_smoothing_without_refit(fitted: MultinomialNaiveBayes) -> None:
    fitted.alpha = 0.5

    assert fitted.smoothed_probability("sell", A) == pytest.approx(0.5 / (3 + 0.5 * 3))


def test_alpha_must_be_positive() -> None:
    with pytest.raises(InvalidArgumentError):
        MultinomialNaiveBayes(alpha=0)
    model = MultinomialNaiveBayes()
    with pytest.raises(InvalidArgumentError):
        model.alpha = -1.0


def test_ties_go_to_lowest_ordinal() -> None:
    model = MultinomialNaiveBayes().fit([{"x": 1}, {"x": 1}], [DocClass.CRUDE, DocClass.ACQ])

    assert model.predict({"x": 1}) is DocClass.ACQ
    assert model.predict({}) is DocClass.ACQ


def test_classes_without_documents_are_never_predicted(fitted: MultinomialNaiveBayes) -> None:
    scores = fitted.log_posterior({"buy": 1})

    assert set(scores) == {A, B}
    assert fitted.predict({"unknown": 10}) in {A, B}


def test_predict_many_matches_single_predictions(fitted: MultinomialNaiveBayes) -> None:
    samples = [{"sell": 1}, {"buy": 2}, {}, {"sell": 1, "buy": 1}, {"zzz": 4}]

    assert fitted.predict_many(samples) == [fitted.predict(sample) for sample in samples]
    assert fitted.predict_many([]) == []


def test_untrained_model_raises() -> None:
    model = MultinomialNaiveBayes()

    with pytest.raises(NotFittedError):
        model.predict({"buy": 1})
    with pytest.raises(NotFittedError):
        model.predict_many([])
    with pytest.raises(NotFittedError):
        serialize(model)


def test_fit_length_mismatch() -> None:
    with pytest.raises(InvalidArgumentError):
        MultinomialNaiveBayes().fit([{"a": 1}], [A, B])


def test_refit_replaces_previous_state(fitted: MultinomialNaiveBayes) -> None:
    fitted.fit([{"wheat": 1}], [DocClass.GRAIN])

    assert fitted.class_counts == {DocClass.GRAIN: 1}
    assert fitted.vocabulary_size == 1
    assert fitted.predict({"buy": 5}) is DocClass.GRAIN


def test_empty_vocabulary_falls_back_to_prior() -> None:
    model = MultinomialNaiveBayes().fit([{}, {}, {}], [B, A, A])

    assert model.vocabulary_size == 0
    assert model.predict({"anything": 3}) is A


def test_serialize_format(fitted: MultinomialNaiveBayes) -> None:
    assert serialize(fitted).decode("utf-8") == (
        "earn 1\nacq 1\n\nbuy earn 2\nsell acq 3\nstock earn 1\n"
    )


def test_round_trip_preserves_predictions(fitted: MultinomialNaiveBayes) -> None:
    samples = [{"buy": 2, "stock": 1}, {"sell": 3}, {"sell": 1, "buy": 1}]

    restored = deserialize(serialize(fitted))

    assert restored.predict_many(samples) == fitted.predict_many(samples)
    assert restored.likelihood() == fitted.likelihood()
    assert restored.class_counts == fitted.class_counts
    assert serialize(restored) == serialize(fitted)


def test_deserialize_applies_alpha(fitted: MultinomialNaiveBayes) -> None:
    restored = deserialize(serialize(fitted), alpha=2.0)

    assert restored.alpha == 2.0
    assert restored.smoothed_probability("sell", A) == pytest.approx(2.0 / (3 + 2.0 * 3))


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("earn\n", "line 1"),
        ("earn 1\nearn 2\n", "line 2: duplicate prior"),
        ("cocoa 1\n", "Unknown document class"),
        ("earn x\n", "invalid count"),
        ("earn -1\n", "negative count"),
        ("earn 1\n\nbuy earn\n", "line 3"),
        ("earn 1\n\nbuy earn 1\nbuy earn 2\n", "line 4: duplicate count"),
        ("\nbuy earn 1\n", "no class priors"),
    ],
)
def test_deserialize_rejects_malformed_models(text: str, message: str) -> None:
    with pytest.raises(ModelFormatError, match=message):
        deserialize(text)


def test_round_trip_keeps_terms_with_non_ascii_whitespace() -> None:
    samples = [{"oil\x1eprice": 1, "crude\xa0oil": 2}, {"wheat": 1, "grain\x85crop": 1}]
    model = MultinomialNaiveBayes().fit(samples, [DocClass.CRUDE, DocClass.GRAIN])

    restored = deserialize(serialize(model))

    assert restored.likelihood() == model.likelihood()
    assert restored.vocabulary_size == 4
    assert restored.predict_many(samples) == [DocClass.CRUDE, DocClass.GRAIN]
