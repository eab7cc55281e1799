"""Utility functions for experiments."""
import random

import numpy as np


def set_random_seeds(seed: int):
    """Set random seeds for reproducibility.

    Args:
        seed: Random seed
    """
    random.seed(seed)
    np.random.seed(seed)


def make_rng(seed=None) -> np.random.Generator:
    """Return a numpy Generator; ``None`` (or a negative seed) draws fresh entropy."""
    if seed is None or seed < 0:
        return np.random.default_rng()
    return np.random.default_rng(seed)
