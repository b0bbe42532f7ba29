"""
Exception hierarchy for the cross-validation model comparison.
"""

from typing import Any, Dict, Optional


class WineEvalError(Exception):
    """Base exception for wine quality evaluation"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class DataShapeError(WineEvalError, ValueError):
    """Dataset rejected before evaluation (columns, size, labels, missing values)"""
    pass


class DegenerateFoldError(WineEvalError):
    """A test fold holds fewer than two distinct labels, so AUC is undefined"""

    def __init__(self, message: str, seed: Optional[int] = None, fold: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if seed is not None:
            details["seed"] = seed
        if fold is not None:
            details["fold"] = fold
        super().__init__(message, details)
        self.seed = seed
        self.fold = fold


class PredictionShapeError(WineEvalError):
    """predict_fn returned a different number of predictions than test records"""
    pass
