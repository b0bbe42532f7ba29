"""
Tests for the repeated k-fold CV harness
"""

import numpy as np
import pandas as pd
import pytest

from wine_quality.cross_validation import evaluate, evaluate_spec, make_folds, repeated_folds
from wine_quality.evaluation import LabelPolicy
from wine_quality.exceptions import DataShapeError, DegenerateFoldError, PredictionShapeError
from wine_quality.models import constant_spec
from wine_quality.utils import make_rng


def _fit_nothing(train):
    return None


def _predict_truth(model, test):
    return test["quality"].to_numpy()


def _predict_six(model, test):
    return np.full(len(test), 6)


@pytest.mark.parametrize("k", [2, 3, 5, 10])
def test_folds_cover_every_record_once(wine_frame, k):
    folds = make_folds(wine_frame["quality"], k, make_rng(1))
    assert len(folds) == k
    assert all(len(f) > 0 for f in folds)
    merged = np.concatenate(folds)
    assert sorted(merged.tolist()) == list(range(len(wine_frame)))


def test_folds_fall_back_to_plain_kfold_when_labels_too_rare():
    labels = np.arange(6)  # every label appears once
    folds = make_folds(labels, 3, make_rng(1))
    assert sorted(np.concatenate(folds).tolist()) == list(range(6))
    assert [len(f) for f in folds] == [2, 2, 2]


def test_folds_are_stratified(wine_frame):
    folds = make_folds(wine_frame["quality"], 5, make_rng(10))
    for test_idx in folds:
        counts = wine_frame["quality"].iloc[test_idx].value_counts()
        assert set(counts.index) == {5, 6, 7}
        assert counts.min() == 10


def test_same_seed_same_folds(wine_frame):
    a = make_folds(wine_frame["quality"], 5, make_rng(100))
    b = make_folds(wine_frame["quality"], 5, make_rng(100))
    c = make_folds(wine_frame["quality"], 5, make_rng(1000))
    assert all(np.array_equal(x, y) for x, y in zip(a, b))
    assert not all(np.array_equal(x, y) for x, y in zip(a, c))


def test_repeated_folds_train_is_complement(wine_frame):
    seen = list(repeated_folds(wine_frame["quality"], [1, 10], 3))
    assert [(s, i) for s, i, _, _ in seen] == [(1, 0), (1, 1), (1, 2), (10, 0), (10, 1), (10, 2)]
    for _, _, train_idx, test_idx in seen:
        assert len(np.intersect1d(train_idx, test_idx)) == 0
        assert len(train_idx) + len(test_idx) == len(wine_frame)


def test_perfect_predictor(wine_frame):
    scores = evaluate(wine_frame, [1, 10, 100], 5, _fit_nothing, _predict_truth)
    assert scores.accuracy == 1.0
    assert scores.mae == 0.0
    assert scores.auc == pytest.approx(1.0)
    assert len(scores.folds) == 15
    assert scores.n_skipped == 0


def test_constant_predictor_mae(wine_frame):
    spec = constant_spec(6)
    scores = evaluate_spec(wine_frame, spec, seeds=[1, 10], k=5)
    expected = np.mean(np.abs(wine_frame["quality"] - 6))
    # equal-sized stratified folds: the mean of fold MAEs is the overall MAE
    assert scores.mae == pytest.approx(expected)
    assert scores.auc == pytest.approx(0.5)


def test_example_scenario(example_frame):
    acc, auc, mae = evaluate(example_frame, [1], 2, _fit_nothing, _predict_six)
    assert acc == pytest.approx(0.3)
    assert mae == pytest.approx(0.8)
    assert auc == pytest.approx(0.5)


def test_evaluate_is_deterministic(wine_frame):
    spec = constant_spec(6.4)
    first = evaluate_spec(wine_frame, spec, seeds=[1, 10, 100, 1000, 10000], k=5)
    second = evaluate_spec(wine_frame, spec, seeds=[1, 10, 100, 1000, 10000], k=5)
    assert tuple(first) == tuple(second)
    pd.testing.assert_frame_equal(first.fold_table(), second.fold_table())


def test_continuous_predictions_rounded_for_accuracy(wine_frame):
    def predict_near_truth(model, test):
        return test["quality"].to_numpy() + 0.3

    rounded = evaluate(wine_frame, [1], 5, _fit_nothing, predict_near_truth, LabelPolicy.CONTINUOUS_ROUNDED)
    exact = evaluate(wine_frame, [1], 5, _fit_nothing, predict_near_truth, LabelPolicy.DISCRETE_EXACT)
    assert rounded.accuracy == 1.0
    assert exact.accuracy == 0.0
    assert rounded.mae == pytest.approx(0.3)


def _lopsided_frame():
    # nine 5s and a single 6: with k=5 four test folds hold only 5s
    return pd.DataFrame({"x": np.arange(10, dtype=float), "quality": [5] * 9 + [6]})


def test_degenerate_fold_raises():
    with pytest.raises(DegenerateFoldError) as excinfo:
        evaluate(_lopsided_frame(), [1], 5, _fit_nothing, _predict_six)
    assert excinfo.value.seed == 1
    assert excinfo.value.fold is not None


def test_degenerate_fold_skip_policy():
    scores = evaluate(_lopsided_frame(), [1, 10], 5, _fit_nothing, _predict_six, on_degenerate="skip")
    assert scores.n_skipped == 8
    assert len(scores.folds) == 2


def test_all_folds_degenerate_raises_even_when_skipping():
    df = pd.DataFrame({"x": np.arange(8, dtype=float), "quality": [5] * 4 + [6] * 4})
    # k=4 with 4 records per label: stratified folds hold one 5 and one 6, never degenerate
    assert evaluate(df, [1], 4, _fit_nothing, _predict_six, on_degenerate="skip").n_skipped == 0
    lopsided = pd.DataFrame({"x": np.arange(6, dtype=float), "quality": [5] * 5 + [6]})
    with pytest.raises(DegenerateFoldError):
        # k=6: every test fold holds one record
        evaluate(lopsided, [1], 6, _fit_nothing, _predict_six, on_degenerate="skip")


def test_unknown_degenerate_policy(wine_frame):
    with pytest.raises(ValueError):
        evaluate(wine_frame, [1], 5, _fit_nothing, _predict_six, on_degenerate="ignore")


def test_single_label_dataset_rejected():
    df = pd.DataFrame({"x": np.arange(10, dtype=float), "quality": [6] * 10})
    with pytest.raises(DataShapeError, match="single distinct value"):
        evaluate(df, [1], 2, _fit_nothing, _predict_six)


def test_empty_dataset_rejected():
    df = pd.DataFrame({"x": pd.Series([], dtype=float), "quality": pd.Series([], dtype=int)})
    with pytest.raises(DataShapeError):
        evaluate(df, [1], 2, _fit_nothing, _predict_six)


@pytest.mark.parametrize("k", [0, 1, 2.5])
def test_invalid_k_rejected(wine_frame, k):
    with pytest.raises(DataShapeError):
        evaluate(wine_frame, [1], k, _fit_nothing, _predict_six)


def test_fewer_records_than_folds_rejected(example_frame):
    with pytest.raises(DataShapeError):
        evaluate(example_frame, [1], 11, _fit_nothing, _predict_six)


def test_empty_seeds_rejected(wine_frame):
    with pytest.raises(DataShapeError):
        evaluate(wine_frame, [], 5, _fit_nothing, _predict_six)


def test_wrong_prediction_count(wine_frame):
    def predict_short(model, test):
        return np.full(len(test) - 1, 6)

    with pytest.raises(PredictionShapeError):
        evaluate(wine_frame, [1], 5, _fit_nothing, predict_short)


def test_fit_sees_only_training_rows(wine_frame):
    sizes = []

    def fit(train):
        sizes.append(len(train))
        return None

    evaluate(wine_frame, [1], 5, fit, _predict_six)
    assert sizes == [120] * 5


def test_scores_keep_fold_details_through_replace(wine_frame):
    scores = evaluate_spec(wine_frame, constant_spec(6), seeds=[1], k=3)
    replaced = scores._replace(accuracy=0.0)
    assert replaced.accuracy == 0.0
    assert (replaced.auc, replaced.mae) == (scores.auc, scores.mae)
    assert replaced.folds == scores.folds
    assert replaced.n_skipped == scores.n_skipped
    assert len(replaced.fold_table()) == 3
    remade = type(scores)._make(scores, folds=scores.folds, n_skipped=1)
    assert tuple(remade) == tuple(scores)
    assert remade.n_skipped == 1
    with pytest.raises(ValueError):
        scores._replace(precision=1.0)
