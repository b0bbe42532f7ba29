"""
Shared utilities: explicit random sources, stdout tee, small helpers.
"""

import platform
import sys

import numpy as np

from wine_quality.config import RANDOM_SEED


def make_rng(seed=None):
    """Return a seeded RandomState. Passed explicitly; global NumPy state is never touched."""
    return np.random.RandomState(RANDOM_SEED if seed is None else seed)


def get_hardware_note():
    """Return a brief hardware description for reproducibility."""
    cpu = platform.processor() or platform.machine() or "unknown"
    return f"{platform.system()} {platform.release()}, CPU: {cpu}"


class TeeOutput:
    """Context manager that writes to both stdout and a file."""
    def __init__(self, file_path):
        self.file_path = file_path
        self.file = None
        self.stdout = sys.stdout

    def __enter__(self):
        self.file = open(self.file_path, 'w', encoding='utf-8')
        sys.stdout = self
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        sys.stdout = self.stdout
        if self.file:
            self.file.close()

    def write(self, data):
        self.stdout.write(data)
        if self.file:
            self.file.write(data)

    def flush(self):
        self.stdout.flush()
        if self.file:
            self.file.flush()
