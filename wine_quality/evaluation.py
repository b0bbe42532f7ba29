"""
Evaluation utilities for Wine Quality project.
Per-fold metrics: accuracy (on rounded predictions for regression-style models),
multiclass AUC (Hand & Till pairwise average), and MAE (on raw predictions).
"""

from enum import Enum
from itertools import combinations

import numpy as np
from sklearn.metrics import mean_absolute_error as sk_mae, roc_auc_score

from wine_quality.exceptions import DegenerateFoldError


class LabelPolicy(Enum):
    """How predictions are turned into labels before accuracy is computed."""
    CONTINUOUS_ROUNDED = "continuous_rounded"  # regression output, rounded to nearest label
    DISCRETE_EXACT = "discrete_exact"  # classifier output, compared as is


def round_to_label(y_pred):
    """Round to nearest integer label, halves upward (6.5 -> 7)."""
    return np.floor(np.asarray(y_pred, dtype=float) + 0.5).astype(int)


def accuracy(y_true, y_pred, label_policy=LabelPolicy.CONTINUOUS_ROUNDED):
    y_true = np.asarray(y_true)
    label_policy = LabelPolicy(label_policy)
    if label_policy is LabelPolicy.CONTINUOUS_ROUNDED:
        y_pred = round_to_label(y_pred)
    else:
        y_pred = np.asarray(y_pred)
    return float(np.mean(y_true == y_pred))


def mean_absolute_error(y_true, y_pred):
    """MAE on the unrounded predictions."""
    return float(sk_mae(np.asarray(y_true, dtype=float), np.asarray(y_pred, dtype=float)))


def multiclass_auc(y_true, scores):
    """
    Multiclass AUC after Hand & Till (2001): for every pair of distinct true labels
    (a < b), the binary AUC of `scores` separating b from a on the records of those
    two labels; the mean over all pairs is returned.

    Raises DegenerateFoldError if y_true holds fewer than two distinct labels.
    """
    y_true = np.asarray(y_true)
    scores = np.asarray(scores, dtype=float)
    labels = np.unique(y_true)
    if len(labels) < 2:
        raise DegenerateFoldError(
            "AUC needs at least two distinct true labels",
            details={"labels": labels.tolist()},
        )
    pair_aucs = []
    for low, high in combinations(labels, 2):
        mask = (y_true == low) | (y_true == high)
        pair_aucs.append(roc_auc_score((y_true[mask] == high).astype(int), scores[mask]))
    return float(np.mean(pair_aucs))


def score_fold(y_true, y_pred, label_policy=LabelPolicy.CONTINUOUS_ROUNDED):
    """Return dict with accuracy, auc, mae for one held-out fold."""
    return {
        "accuracy": accuracy(y_true, y_pred, label_policy),
        "auc": multiclass_auc(y_true, y_pred),
        "mae": mean_absolute_error(y_true, y_pred),
    }

