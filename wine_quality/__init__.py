"""
Wine Quality: repeated k-fold cross-validation comparison of statistical learning
methods on red and white wine.
"""

from wine_quality.cross_validation import CVScores, evaluate, evaluate_spec, make_folds
from wine_quality.evaluation import LabelPolicy
from wine_quality.exceptions import DataShapeError, DegenerateFoldError, PredictionShapeError, WineEvalError
from wine_quality.models import ModelSpec

__all__ = [
    "CVScores",
    "DataShapeError",
    "DegenerateFoldError",
    "LabelPolicy",
    "ModelSpec",
    "PredictionShapeError",
    "WineEvalError",
    "evaluate",
    "evaluate_spec",
    "make_folds",
]
