"""
Model comparison for Wine Quality, red and white separately.
Every model: repeated 5-fold CV over 5 seeds; mean Accuracy, AUC, MAE.
Also best-subset selection (OLS) and the random-forest width sweep.
Writes everything printed to model_comparison_results.txt and a bar chart to outputs/.
"""

import argparse
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from wine_quality.config import (CV_FOLDS, CV_SEEDS, FOREST_N_ESTIMATORS, FOREST_WIDTHS, METRICS_NAMES, OUTPUT_DIR,
                                 RESULTS_PATH)
from wine_quality.cross_validation import evaluate_spec
from wine_quality.data_loading import feature_columns, load_wine, split_by_type, validate_dataset
from wine_quality.exceptions import DataShapeError, WineEvalError
from wine_quality.models import model_specs
from wine_quality.selection import best_subset_selection, tune_forest_width
from wine_quality.utils import TeeOutput, get_hardware_note

# Failures that mark one model as failed without stopping the report
# (e.g. QDA when a class covariance is singular on some training fold).
# DataShapeError is re-raised ahead of these: bad data stops the whole run.
MODEL_FAILURES = (WineEvalError, ValueError, np.linalg.LinAlgError)


def _format_scores(scores):
    return "Accuracy=%.4f, AUC=%.4f, MAE=%.4f" % (scores.accuracy, scores.auc, scores.mae)


def _summarize_diagnostics(diagnostics):
    """Mean and range of each numeric diagnostic recorded over the folds."""
    if not diagnostics:
        return None
    table = pd.DataFrame(diagnostics)
    parts = []
    for col in table.columns:
        parts.append("%s: mean=%.4g, min=%.4g, max=%.4g" % (col, table[col].mean(), table[col].min(), table[col].max()))
    return "; ".join(parts)


def _failed_row(wine_type, name, exc):
    print("FAILED (%s): %s" % (type(exc).__name__, exc))
    return {"wine_type": wine_type, "model": name, "accuracy": np.nan, "auc": np.nan, "mae": np.nan,
            "status": "failed: %s" % exc}


def run_model(wine_type, dataset, spec, seeds, k, on_degenerate="raise"):
    """Evaluate one spec; a failing model is reported, not raised."""
    print("\n--- %s | %s ---" % (wine_type, spec.name))
    try:
        scores = evaluate_spec(dataset, spec, seeds=seeds, k=k, on_degenerate=on_degenerate)
    except DataShapeError:
        raise
    except MODEL_FAILURES as exc:
        return _failed_row(wine_type, spec.name, exc)
    row = {"wine_type": wine_type, "model": spec.name, "accuracy": scores.accuracy, "auc": scores.auc,
           "mae": scores.mae, "status": "ok"}
    print("CV (%d seeds x %d folds): %s" % (len(seeds), k, _format_scores(scores)))
    if scores.n_skipped:
        print("Skipped degenerate folds: %d" % scores.n_skipped)
    diag = _summarize_diagnostics(spec.diagnostics)
    if diag:
        print("Per-fold tuning: " + diag)
    return row


def run_best_subset(wine_type, dataset, seeds, k, on_degenerate="raise"):
    print("\n--- %s | best_subset ---" % wine_type)
    try:
        result = best_subset_selection(dataset, seeds=seeds, k=k, on_degenerate=on_degenerate)
    except DataShapeError:
        raise
    except MODEL_FAILURES as exc:
        return _failed_row(wine_type, "best_subset", exc)
    for entry in result["sizes"]:
        print("  size=%2d: %s | %s" % (entry["size"], _format_scores(entry["scores"]), entry["features"]))
    best = result["best_scores"]
    print("Selected size: %d -> %s" % (result["best_size"], result["best_features"]))
    print("CV (%d seeds x %d folds): %s" % (len(seeds), k, _format_scores(best)))
    return {"wine_type": wine_type, "model": "best_subset", "accuracy": best.accuracy, "auc": best.auc,
            "mae": best.mae, "status": "ok (size=%d)" % result["best_size"]}


def run_forest_widths(wine_type, dataset, seeds, k, widths, n_estimators, on_degenerate="raise"):
    print("\n--- %s | random_forest width sweep ---" % wine_type)
    try:
        result = tune_forest_width(dataset, widths, seeds=seeds, k=k, n_estimators=n_estimators,
                                   on_degenerate=on_degenerate)
    except DataShapeError:
        raise
    except MODEL_FAILURES as exc:
        return _failed_row(wine_type, "random_forest_tuned", exc)
    for entry in result["widths"]:
        print("  max_features=%2d: %s" % (entry["width"], _format_scores(entry["scores"])))
    best = result["best_scores"]
    print("Selected width: %d | %s" % (result["best_width"], _format_scores(best)))
    return {"wine_type": wine_type, "model": "random_forest_tuned", "accuracy": best.accuracy,
            "auc": best.auc, "mae": best.mae, "status": "ok (max_features=%d)" % result["best_width"]}


def _plot(summary, output_dir, show=False):
    """Grouped bars: one panel per metric, models on x, red/white as hue."""
    ok = summary.dropna(subset=["accuracy"])
    if ok.empty:
        return None
    long = ok.melt(id_vars=["wine_type", "model"], value_vars=METRICS_NAMES,
                   var_name="metric", value_name="value")
    fig, axes = plt.subplots(3, 1, figsize=(12, 11))
    for ax, metric in zip(axes, METRICS_NAMES):
        sns.barplot(data=long[long["metric"] == metric], x="model", y="value", hue="wine_type", ax=ax)
        ax.set_ylabel(metric.upper() if metric != "accuracy" else "Accuracy")
        ax.set_xlabel("")
        ax.tick_params(axis="x", rotation=45)
        ax.grid(axis="y", alpha=0.3)
    axes[0].set_title("Repeated k-fold CV — mean metrics per model")
    plt.tight_layout()
    os.makedirs(output_dir, exist_ok=True)
    fig_path = os.path.join(output_dir, "model_comparison.png")
    fig.savefig(fig_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
    return fig_path


def run_all(path=None, output_path=None, seeds=None, k=None, n_estimators=None, forest_widths=None,
            on_degenerate="raise", save_figures=True, output_dir=None):
    """
    Full comparison on red and white wine.

    Returns:
        DataFrame with one row per (wine_type, model): accuracy, auc, mae, status
    """
    seeds = list(CV_SEEDS if seeds is None else seeds)
    k = CV_FOLDS if k is None else k
    forest_widths = FOREST_WIDTHS if forest_widths is None else forest_widths
    output_path = output_path or RESULTS_PATH
    output_dir = output_dir or OUTPUT_DIR

    datasets = split_by_type(load_wine(path=path))
    for dataset in datasets.values():
        validate_dataset(dataset, k=k)
    rows = []
    with TeeOutput(output_path):
        print("=" * 60)
        print("MODEL COMPARISON — Wine Quality (red / white)")
        print("CV = %d-fold, seeds=%s; metrics averaged over %d folds." % (k, seeds, k * len(seeds)))
        print("Hardware: " + get_hardware_note())
        print("=" * 60)
        for wine_type, dataset in datasets.items():
            p = len(feature_columns(dataset))
            print("\n" + "#" * 60)
            print("%s wine: %d records, %d features" % (wine_type.upper(), len(dataset), p))
            print("#" * 60)
            for spec in model_specs(p, n_estimators=n_estimators):
                rows.append(run_model(wine_type, dataset, spec, seeds, k, on_degenerate))
            rows.append(run_best_subset(wine_type, dataset, seeds, k, on_degenerate))
            rows.append(run_forest_widths(wine_type, dataset, seeds, k, forest_widths,
                                          n_estimators or FOREST_N_ESTIMATORS, on_degenerate))

        summary = pd.DataFrame(rows, columns=["wine_type", "model", "accuracy", "auc", "mae", "status"])
        print("\n" + "=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(summary.to_string(index=False, float_format=lambda v: "%.4f" % v))

    if save_figures:
        fig_path = _plot(summary, output_dir)
        if fig_path:
            print("Figure saved to:", fig_path)
    print("\nResults written to:", output_path)
    return summary


def main(argv=None):
    parser = argparse.ArgumentParser(description="Repeated k-fold CV comparison of models on wine quality.")
    parser.add_argument("--data", default=None, help="Path to wine CSV (default: config.DATA_PATH)")
    parser.add_argument("--output", default=None, help="Results text file (default: config.RESULTS_PATH)")
    parser.add_argument("--folds", type=int, default=CV_FOLDS)
    parser.add_argument("--seeds", type=int, nargs="+", default=CV_SEEDS)
    parser.add_argument("--n-estimators", type=int, default=None, help="Trees for forest/bagging/boosting")
    parser.add_argument("--skip-degenerate", action="store_true",
                        help="Leave single-label folds out of the means instead of failing the model")
    parser.add_argument("--no-figures", action="store_true")
    args = parser.parse_args(argv)
    run_all(
        path=args.data,
        output_path=args.output,
        seeds=args.seeds,
        k=args.folds,
        n_estimators=args.n_estimators,
        on_degenerate="skip" if args.skip_degenerate else "raise",
        save_figures=not args.no_figures,
    )


if __name__ == "__main__":
    main()
