"""
Model zoo for the Wine Quality comparison.

Each model is a ModelSpec: a (fit, predict) closure pair over DataFrames plus the
LabelPolicy its outputs are scored under. Regression-style models
(OLS, lasso, ridge, PCR, boosting) predict a continuous quality and are rounded
for accuracy; classifiers (LDA, QDA, naive Bayes, tree, forest, bagging, 1-NN)
predict a label directly.

Lasso, ridge and PCR tune themselves by a nested CV inside every outer training
fold; the chosen penalty / component count is appended to spec.diagnostics.
"""

import math
from collections import namedtuple

import numpy as np
from sklearn.decomposition import PCA
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis, QuadraticDiscriminantAnalysis
from sklearn.ensemble import GradientBoostingRegressor, RandomForestClassifier
from sklearn.linear_model import LassoCV, LinearRegression, RidgeCV
from sklearn.model_selection import GridSearchCV, KFold
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline, make_pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.tree import DecisionTreeClassifier

from wine_quality.config import (BOOSTING_LEARNING_RATE, BOOSTING_MAX_DEPTH, BOOSTING_N_ESTIMATORS,
                                 FOREST_N_ESTIMATORS, INNER_CV_FOLDS, KNN_NEIGHBORS, LASSO_ALPHAS,
                                 RANDOM_SEED, RIDGE_ALPHAS, TARGET_COLUMN)
from wine_quality.data_loading import feature_columns
from wine_quality.evaluation import LabelPolicy

ModelSpec = namedtuple("ModelSpec", ["name", "fit", "predict", "label_policy", "diagnostics"])


def _xy(df, features=None):
    features = list(features) if features is not None else feature_columns(df)
    return df[features].to_numpy(dtype=float), df[TARGET_COLUMN].to_numpy()


def _inner_cv():
    return KFold(n_splits=INNER_CV_FOLDS, shuffle=True, random_state=RANDOM_SEED)


def sklearn_spec(name, make_estimator, label_policy, features=None, record=None):
    """
    Wrap a scikit-learn estimator factory as a ModelSpec.

    Args:
        name: model name used in reports
        make_estimator: zero-argument callable returning a fresh unfitted estimator
        label_policy: LabelPolicy of the estimator's predictions
        features: feature subset (defaults to every non-label column)
        record: optional callable(fitted estimator) -> dict appended to diagnostics
    """
    diagnostics = []

    def fit(train):
        X, y = _xy(train, features)
        estimator = make_estimator()
        estimator.fit(X, y)
        if record is not None:
            diagnostics.append(record(estimator))
        return estimator

    def predict(model, test):
        X, _ = _xy(test, features)
        return model.predict(X)

    return ModelSpec(name, fit, predict, LabelPolicy(label_policy), diagnostics)


# ----- Regression-style models (rounded for accuracy) -----

def linear_regression_spec(features=None, name="linear_regression"):
    return sklearn_spec(name, LinearRegression, LabelPolicy.CONTINUOUS_ROUNDED, features)


def lasso_spec(features=None):
    """L1 regression; penalty chosen per fold by inner CV over LASSO_ALPHAS."""
    return sklearn_spec(
        "lasso",
        lambda: make_pipeline(StandardScaler(), LassoCV(alphas=LASSO_ALPHAS, cv=_inner_cv(), max_iter=10000)),
        LabelPolicy.CONTINUOUS_ROUNDED,
        features,
        record=lambda est: {"alpha": float(est[-1].alpha_)},
    )


def ridge_spec(features=None):
    """L2 regression; penalty chosen per fold by inner CV over RIDGE_ALPHAS."""
    return sklearn_spec(
        "ridge",
        lambda: make_pipeline(StandardScaler(), RidgeCV(alphas=RIDGE_ALPHAS, cv=_inner_cv())),
        LabelPolicy.CONTINUOUS_ROUNDED,
        features,
        record=lambda est: {"alpha": float(est[-1].alpha_)},
    )


def _make_pcr(n_features):
    pipe = Pipeline([
        ("scale", StandardScaler()),
        ("pca", PCA()),
        ("ols", LinearRegression()),
    ])
    # Component count with the lowest inner-CV mean squared error
    grid = {"pca__n_components": list(range(1, n_features + 1))}
    return GridSearchCV(pipe, grid, cv=_inner_cv(), scoring="neg_mean_squared_error")


def pcr_spec(features=None):
    """Principal component regression; component count chosen per fold by inner CV."""
    diagnostics = []

    def fit(train):
        X, y = _xy(train, features)
        search = _make_pcr(X.shape[1])
        search.fit(X, y)
        diagnostics.append({
            "n_components": int(search.best_params_["pca__n_components"]),
            "cv_mse": float(-search.best_score_),
        })
        return search

    def predict(model, test):
        X, _ = _xy(test, features)
        return model.predict(X)

    return ModelSpec("pcr", fit, predict, LabelPolicy.CONTINUOUS_ROUNDED, diagnostics)


def boosting_spec(features=None, n_estimators=BOOSTING_N_ESTIMATORS):
    return sklearn_spec(
        "boosting",
        lambda: GradientBoostingRegressor(
            n_estimators=n_estimators,
            learning_rate=BOOSTING_LEARNING_RATE,
            max_depth=BOOSTING_MAX_DEPTH,
            random_state=RANDOM_SEED,
        ),
        LabelPolicy.CONTINUOUS_ROUNDED,
        features,
    )


# ----- Classifiers (labels compared exactly) -----

def lda_spec(features=None):
    return sklearn_spec("lda", LinearDiscriminantAnalysis, LabelPolicy.DISCRETE_EXACT, features)


def qda_spec(features=None):
    return sklearn_spec("qda", QuadraticDiscriminantAnalysis, LabelPolicy.DISCRETE_EXACT, features)


def naive_bayes_spec(features=None):
    return sklearn_spec("naive_bayes", GaussianNB, LabelPolicy.DISCRETE_EXACT, features)


def tree_spec(features=None):
    return sklearn_spec(
        "tree",
        lambda: DecisionTreeClassifier(criterion="gini", random_state=RANDOM_SEED),
        LabelPolicy.DISCRETE_EXACT,
        features,
    )


def random_forest_spec(max_features, features=None, n_estimators=FOREST_N_ESTIMATORS, name=None):
    """
    Random forest with `max_features` candidate features per split.
    max_features=None uses every feature at each split, i.e. bagging.
    """
    if name is None:
        name = "bagging" if max_features is None else f"random_forest_m{max_features}"
    return sklearn_spec(
        name,
        lambda: RandomForestClassifier(
            n_estimators=n_estimators,
            max_features=max_features,
            random_state=RANDOM_SEED,
        ),
        LabelPolicy.DISCRETE_EXACT,
        features,
    )


def bagging_spec(features=None, n_estimators=FOREST_N_ESTIMATORS):
    return random_forest_spec(None, features, n_estimators, name="bagging")


def knn_spec(features=None, n_neighbors=KNN_NEIGHBORS):
    """k-NN on standardized features (distances are scale-sensitive)."""
    return sklearn_spec(
        "knn" if n_neighbors == 1 else f"knn_k{n_neighbors}",
        lambda: make_pipeline(StandardScaler(), KNeighborsClassifier(n_neighbors=n_neighbors)),
        LabelPolicy.DISCRETE_EXACT,
        features,
    )


def default_forest_width(n_features):
    """floor(sqrt(p)), the usual classification-forest width."""
    return max(1, int(math.floor(math.sqrt(n_features))))


def model_specs(n_features, n_estimators=None):
    """
    Every model compared on one wine type, in report order.
    n_estimators overrides the forest/bagging/boosting ensemble sizes.
    """
    forest_trees = n_estimators or FOREST_N_ESTIMATORS
    boosting_trees = n_estimators or BOOSTING_N_ESTIMATORS
    return [
        majority_spec(),
        linear_regression_spec(),
        lda_spec(),
        qda_spec(),
        naive_bayes_spec(),
        lasso_spec(),
        ridge_spec(),
        pcr_spec(),
        tree_spec(),
        random_forest_spec(default_forest_width(n_features), n_estimators=forest_trees, name="random_forest"),
        bagging_spec(n_estimators=forest_trees),
        boosting_spec(n_estimators=boosting_trees),
        knn_spec(),
    ]


def constant_spec(value, label_policy=LabelPolicy.CONTINUOUS_ROUNDED):
    """Baseline that predicts `value` for every record."""
    def fit(train):
        return value

    def predict(model, test):
        return np.full(len(test), model, dtype=float)

    return ModelSpec(f"constant_{value}", fit, predict, LabelPolicy(label_policy), [])


def majority_spec():
    """Baseline that predicts the most frequent training label (smallest on ties)."""
    def fit(train):
        counts = train[TARGET_COLUMN].value_counts()
        return int(counts[counts == counts.max()].index.min())

    def predict(model, test):
        return np.full(len(test), model)

    return ModelSpec("majority", fit, predict, LabelPolicy.DISCRETE_EXACT, [])
