"""
Repeated k-fold cross-validation harness.

Every model is scored the same way: for each seed a fresh label-aware partition
of the rows into k folds; for each fold fit on the other k-1 folds, predict the
held-out fold and record accuracy, multiclass AUC and MAE. The result is the
mean of each metric over len(seeds) * k folds.

A model is a pair of plain functions, fit(train_df) -> model and
predict_fn(model, test_df) -> predictions, plus a LabelPolicy saying whether its
outputs are rounded before accuracy is taken.
"""

from collections import namedtuple

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, StratifiedKFold

from wine_quality.config import CV_FOLDS, CV_SEEDS, TARGET_COLUMN
from wine_quality.data_loading import validate_dataset
from wine_quality.evaluation import LabelPolicy, score_fold
from wine_quality.exceptions import DataShapeError, DegenerateFoldError, PredictionShapeError
from wine_quality.utils import make_rng

DEGENERATE_POLICIES = ("raise", "skip")

_Means = namedtuple("_Means", ["accuracy", "auc", "mae"])


class CVScores(_Means):
    """Mean accuracy, AUC and MAE; unpacks as (accuracy, auc, mae)."""

    def __new__(cls, accuracy, auc, mae, folds=None, n_skipped=0):
        self = super().__new__(cls, accuracy, auc, mae)
        self.folds = list(folds or [])
        self.n_skipped = n_skipped
        return self

    @classmethod
    def _make(cls, iterable, folds=None, n_skipped=0):
        return cls(*iterable, folds=folds, n_skipped=n_skipped)

    def _replace(self, **kwargs):
        values = [kwargs.pop(name, getattr(self, name)) for name in self._fields]
        folds = kwargs.pop("folds", self.folds)
        n_skipped = kwargs.pop("n_skipped", self.n_skipped)
        if kwargs:
            raise ValueError(f"Got unexpected field names: {list(kwargs)!r}")
        return type(self)(*values, folds=folds, n_skipped=n_skipped)

    def fold_table(self):
        """Per-(seed, fold) metrics as a DataFrame."""
        return pd.DataFrame(self.folds, columns=["seed", "fold", "accuracy", "auc", "mae"])


def _check_k(k, n):
    if not isinstance(k, (int, np.integer)) or isinstance(k, bool) or k < 2:
        raise DataShapeError(f"k must be an integer >= 2, got {k!r}")
    if n < k:
        raise DataShapeError(f"Cannot split {n} records into k={k} non-empty folds")


def make_folds(labels, k, rng):
    """
    Partition positions 0..n-1 into k disjoint, non-empty test groups.

    Stratified on the labels when at least one label has k or more records,
    plain shuffled k-fold otherwise. `rng` is a numpy RandomState and is the only
    source of randomness.
    """
    labels = np.asarray(labels)
    n = len(labels)
    _check_k(k, n)
    _, counts = np.unique(labels, return_counts=True)
    if counts.max() >= k:
        splitter = StratifiedKFold(n_splits=k, shuffle=True, random_state=rng)
    else:
        splitter = KFold(n_splits=k, shuffle=True, random_state=rng)
    return [test_idx for _, test_idx in splitter.split(np.zeros((n, 1)), labels)]


def repeated_folds(labels, seeds, k):
    """Yield (seed, fold_index, train_idx, test_idx) for every seed and fold."""
    labels = np.asarray(labels)
    for seed in seeds:
        groups = make_folds(labels, k, make_rng(seed))
        for i, test_idx in enumerate(groups):
            train_idx = np.sort(np.concatenate([g for j, g in enumerate(groups) if j != i]))
            yield seed, i, train_idx, test_idx


def evaluate(dataset, seeds, k, fit, predict_fn, label_policy=LabelPolicy.CONTINUOUS_ROUNDED,
             on_degenerate="raise"):
    """
    Repeated k-fold CV of one (fit, predict_fn) pair.

    Args:
        dataset: DataFrame of numeric features plus the integer quality column
        seeds: ordered seeds; one fold assignment per seed
        k: folds per seed
        fit: train DataFrame -> fitted model
        predict_fn: (fitted model, test DataFrame) -> one prediction per test row
        label_policy: LabelPolicy for the accuracy comparison
        on_degenerate: "raise" aborts on a fold with a single distinct label;
            "skip" leaves that fold out of all three means and counts it

    Returns:
        CVScores(accuracy, auc, mae) with per-fold values in .folds
    """
    if on_degenerate not in DEGENERATE_POLICIES:
        raise ValueError(f"on_degenerate must be one of {DEGENERATE_POLICIES}, got {on_degenerate!r}")
    seeds = list(seeds)
    if not seeds:
        raise DataShapeError("At least one seed is required")
    validate_dataset(dataset, k=k)
    label_policy = LabelPolicy(label_policy)

    y = dataset[TARGET_COLUMN].to_numpy()
    folds = []
    n_skipped = 0
    for seed, i, train_idx, test_idx in repeated_folds(y, seeds, k):
        y_test = y[test_idx]
        if len(np.unique(y_test)) < 2:
            if on_degenerate == "raise":
                raise DegenerateFoldError(
                    f"Fold {i} of seed {seed} has a single distinct label; AUC is undefined",
                    seed=seed, fold=i, details={"label": np.unique(y_test).tolist()},
                )
            n_skipped += 1
            continue

        train = dataset.iloc[train_idx].reset_index(drop=True)
        test = dataset.iloc[test_idx].reset_index(drop=True)
        model = fit(train)
        y_pred = np.asarray(predict_fn(model, test)).ravel()
        if len(y_pred) != len(y_test):
            raise PredictionShapeError(
                f"predict_fn returned {len(y_pred)} predictions for {len(y_test)} test records",
                {"seed": seed, "fold": i},
            )
        scores = score_fold(y_test, y_pred, label_policy)
        folds.append({"seed": seed, "fold": i, **scores})

    if not folds:
        raise DegenerateFoldError("Every fold was degenerate; no metrics to average")

    return CVScores(
        accuracy=float(np.mean([f["accuracy"] for f in folds])),
        auc=float(np.mean([f["auc"] for f in folds])),
        mae=float(np.mean([f["mae"] for f in folds])),
        folds=folds,
        n_skipped=n_skipped,
    )


def evaluate_spec(dataset, spec, seeds=None, k=None, on_degenerate="raise"):
    """
    evaluate() for a models.ModelSpec; seeds and k default to config.
    The spec's diagnostics list is emptied first, so after the call it holds
    one entry per fold of this evaluation only.
    """
    seeds = CV_SEEDS if seeds is None else seeds
    k = CV_FOLDS if k is None else k
    del spec.diagnostics[:]
    return evaluate(dataset, seeds, k, spec.fit, spec.predict, spec.label_policy, on_degenerate)
