"""
Model selection loops that re-run the CV harness once per candidate:
best-subset selection over OLS feature subsets, and the random-forest
feature-subsampling width sweep.
"""

from itertools import combinations

import numpy as np
from sklearn.linear_model import LinearRegression

from wine_quality.config import FOREST_N_ESTIMATORS, TARGET_COLUMN
from wine_quality.cross_validation import evaluate_spec
from wine_quality.data_loading import feature_columns, validate_dataset
from wine_quality.models import linear_regression_spec, random_forest_spec


def _rss(X, y):
    ols = LinearRegression().fit(X, y)
    resid = y - ols.predict(X)
    return float(np.dot(resid, resid))


def best_subsets_by_size(dataset, features=None):
    """
    Exhaustive search: for each size s in 1..p, the s-feature subset with the
    lowest OLS residual sum of squares on the whole dataset.
    Returns list of (size, features, rss); ties keep the first subset in
    combination order.
    """
    features = list(features) if features is not None else feature_columns(dataset)
    y = dataset[TARGET_COLUMN].to_numpy(dtype=float)
    out = []
    for size in range(1, len(features) + 1):
        best_subset, best_rss = None, np.inf
        for subset in combinations(features, size):
            rss = _rss(dataset[list(subset)].to_numpy(dtype=float), y)
            if rss < best_rss:
                best_subset, best_rss = list(subset), rss
        out.append((size, best_subset, best_rss))
    return out


def _pick_best(candidates, key):
    """Candidate with the strictly highest mean accuracy; the earliest wins ties."""
    best = None
    for cand in candidates:
        if best is None or cand["scores"].accuracy > best["scores"].accuracy:
            best = cand
    return best[key], best


def best_subset_selection(dataset, seeds=None, k=None, features=None, on_degenerate="raise"):
    """
    Best-subset selection scored by repeated k-fold CV.

    The best subset of each size is evaluated once as an OLS model; the size with
    the strictly highest mean accuracy is selected (ties go to the smaller size).

    Returns:
        dict with "sizes" (one entry per size: size, features, rss, scores),
        "best_size", "best_features" and "best_scores"
    """
    validate_dataset(dataset, k=k)
    sizes = []
    for size, subset, rss in best_subsets_by_size(dataset, features):
        spec = linear_regression_spec(features=subset, name=f"best_subset_{size}")
        scores = evaluate_spec(dataset, spec, seeds=seeds, k=k, on_degenerate=on_degenerate)
        sizes.append({"size": size, "features": subset, "rss": rss, "scores": scores})
    best_size, best = _pick_best(sizes, "size")
    return {
        "sizes": sizes,
        "best_size": best_size,
        "best_features": best["features"],
        "best_scores": best["scores"],
    }


def tune_forest_width(dataset, widths, seeds=None, k=None, n_estimators=FOREST_N_ESTIMATORS,
                      on_degenerate="raise"):
    """
    Evaluate the random forest at each feature-subsampling width.
    A width of None means all p features (bagging); widths outside 1..p are
    dropped and width == p is labelled bagging.
    Ties go to the smaller width.
    """
    p = len(feature_columns(dataset))
    widths = sorted({w for w in (p if w is None else int(w) for w in widths) if 1 <= w <= p})
    if not widths:
        raise ValueError(f"No forest width in 1..{p} to evaluate")
    results = []
    for width in widths:
        spec = random_forest_spec(width, n_estimators=n_estimators,
                                  name="bagging" if width == p else None)
        scores = evaluate_spec(dataset, spec, seeds=seeds, k=k, on_degenerate=on_degenerate)
        results.append({"width": width, "scores": scores})
    best_width, best = _pick_best(results, "width")
    return {"widths": results, "best_width": best_width, "best_scores": best["scores"]}
