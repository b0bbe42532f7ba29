"""
Wine Quality — repeated cross-validation model comparison: configuration.
Reproducibility: random seeds, paths, CV layout, and constants.
"""

import os

# ----- Reproducibility -----
RANDOM_SEED = 42
CV_SEEDS = [1, 10, 100, 1000, 10000]  # One fold assignment per seed

# ----- Paths -----
PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_PATH = os.path.join(PROJECT_DIR, "wine.csv")

# ----- Task -----
TARGET_COLUMN = "quality"  # Ordinal rating, observed 3-9
TYPE_COLUMN = "type"  # red / white discriminator
WINE_TYPES = ("red", "white")

# 'class' is a recoding of quality (perfect correlation) = data leakage
DROP_COLUMNS = ["class"]

# ----- Evaluation metrics (mean over seeds x folds) -----
METRICS_NAMES = ["accuracy", "auc", "mae"]

# ----- Cross-validation -----
CV_FOLDS = 5
INNER_CV_FOLDS = 5  # Nested CV for lasso/ridge penalty and PCR component count

# ----- Model settings -----
LASSO_ALPHAS = [10.0 ** (p / 10) for p in range(-40, 11)]  # 1e-4 .. 10, log-spaced
RIDGE_ALPHAS = [10.0 ** p for p in range(-4, 5)]
FOREST_N_ESTIMATORS = 500
FOREST_WIDTHS = [1, 2, 3, 4, 6, 8, None]  # max_features candidates; None = all p features (bagging)
BOOSTING_N_ESTIMATORS = 500
BOOSTING_LEARNING_RATE = 0.01
BOOSTING_MAX_DEPTH = 4
KNN_NEIGHBORS = 1

# ----- Outputs -----
OUTPUT_DIR = os.path.join(PROJECT_DIR, "outputs")
RESULTS_PATH = os.path.join(PROJECT_DIR, "model_comparison_results.txt")
