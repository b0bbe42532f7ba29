"""
Load Wine Quality dataset and split it by wine color.
Declare target and type columns; reject malformed frames before evaluation.
"""

import numpy as np
import pandas as pd

from wine_quality.config import DATA_PATH, DROP_COLUMNS, TARGET_COLUMN, TYPE_COLUMN, WINE_TYPES
from wine_quality.exceptions import DataShapeError


def load_wine(path=None, remove_duplicates=False):
    """
    Load wine.csv. Returns full DataFrame with leakage columns dropped.

    Args:
        path: Path to CSV file (defaults to config.DATA_PATH)
        remove_duplicates: If True, remove exact duplicate rows

    Returns:
        DataFrame with a type column, numeric features and the quality label
    """
    path = path or DATA_PATH
    df = pd.read_csv(path)
    df = df.drop(columns=DROP_COLUMNS, errors="ignore")

    missing = [c for c in (TARGET_COLUMN, TYPE_COLUMN) if c not in df.columns]
    if missing:
        raise DataShapeError("Wine file is missing required columns", {"missing": missing, "path": path})

    if remove_duplicates:
        initial_rows = len(df)
        df = df.drop_duplicates(keep='first')
        n_removed = initial_rows - len(df)
        if n_removed > 0:
            print(f"Removed {n_removed} duplicate row(s). Dataset: {initial_rows} -> {len(df)} rows.")

    return df


def split_by_type(df, types=WINE_TYPES):
    """Return {type: DataFrame} with the type column removed and a fresh index."""
    if TYPE_COLUMN not in df.columns:
        raise DataShapeError(f"Column '{TYPE_COLUMN}' not found; cannot split by wine type")
    labels = df[TYPE_COLUMN].astype(str).str.strip().str.lower()
    out = {}
    for wine_type in types:
        part = df[labels == wine_type].drop(columns=[TYPE_COLUMN]).reset_index(drop=True)
        if part.empty:
            raise DataShapeError(f"No rows of wine type '{wine_type}'",
                                 {"available": sorted(labels.unique().tolist())})
        out[wine_type] = part
    return out


def feature_columns(df):
    """Feature column names in frame order (everything but the label)."""
    return [c for c in df.columns if c != TARGET_COLUMN]


def validate_dataset(df, k=None):
    """
    Reject a dataset that cannot be cross-validated.
    Checks: non-empty, label column present and integral, at least one numeric
    feature, no missing values, at least two distinct labels, and (if k is given)
    at least k rows.
    """
    if df is None or len(df) == 0:
        raise DataShapeError("Dataset is empty")
    if TARGET_COLUMN not in df.columns:
        raise DataShapeError(f"Label column '{TARGET_COLUMN}' not found", {"columns": list(df.columns)})

    features = feature_columns(df)
    if not features:
        raise DataShapeError("Dataset has no feature columns")
    non_numeric = [c for c in features if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise DataShapeError("Feature columns must be numeric", {"non_numeric": non_numeric})

    n_missing = int(df.isna().sum().sum())
    if n_missing:
        raise DataShapeError("Dataset has missing values", {"n_missing": n_missing})

    y = df[TARGET_COLUMN].to_numpy()
    if not pd.api.types.is_numeric_dtype(df[TARGET_COLUMN]) or not np.all(np.equal(np.mod(y, 1), 0)):
        raise DataShapeError(f"Label column '{TARGET_COLUMN}' must hold integer values")

    labels = np.unique(y)
    if len(labels) < 2:
        raise DataShapeError("Label column has a single distinct value; AUC is undefined",
                             {"label": labels.tolist()})

    if k is not None and len(df) < k:
        raise DataShapeError(f"Dataset has {len(df)} rows, fewer than k={k} folds")
    return features
