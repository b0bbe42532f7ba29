"""
Pytest configuration and shared fixtures.
"""
import numpy as np
import pandas as pd
import pytest


def make_wine_frame(n_samples=150, n_features=4, seed=0, labels=(5, 6, 7)):
    """Synthetic wine-like frame: quality driven by the first feature plus noise."""
    rng = np.random.RandomState(seed)
    quality = np.resize(np.asarray(labels), n_samples)
    rng.shuffle(quality)
    X = rng.normal(size=(n_samples, n_features))
    X[:, 0] += 1.5 * (quality - np.mean(labels))
    df = pd.DataFrame(X, columns=[f"feature_{i}" for i in range(n_features)])
    df["quality"] = quality.astype(int)
    return df


@pytest.fixture
def wine_frame():
    return make_wine_frame()


@pytest.fixture
def example_frame():
    """Ten records, labels 5,5,5,6,6,6,7,7,7,8, one feature."""
    labels = [5, 5, 5, 6, 6, 6, 7, 7, 7, 8]
    return pd.DataFrame({"alcohol": np.linspace(9.0, 13.0, 10), "quality": labels})


@pytest.fixture
def wine_csv(tmp_path):
    """CSV with red and white rows, a leakage 'class' column and the quality label."""
    red = make_wine_frame(n_samples=60, seed=1)
    red.insert(0, "type", "red")
    white = make_wine_frame(n_samples=60, seed=2)
    white.insert(0, "type", "White")
    df = pd.concat([red, white], ignore_index=True)
    df["class"] = df["quality"]
    path = tmp_path / "wine.csv"
    df.to_csv(path, index=False)
    return path
