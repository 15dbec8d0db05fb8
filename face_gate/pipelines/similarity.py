"""
Similarity Pipeline

Cosine similarity between two validated descriptors.
"""

import math

import numpy as np


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    Compute cosine similarity between two descriptors.

    Both inputs must already be validated (128 finite values). Degenerate
    inputs are not errors: a zero-magnitude vector, or a ratio that is not
    finite, scores exactly 0.0. The result is clamped to [-1, 1].

    Args:
        a: First descriptor
        b: Second descriptor

    Returns:
        Similarity in [-1.0, 1.0]
    """
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        dot = float(np.dot(a, b))
        denom = float(np.linalg.norm(a)) * float(np.linalg.norm(b))

        if denom == 0.0 or not math.isfinite(denom):
            return 0.0

        ratio = dot / denom

    if not math.isfinite(ratio):
        return 0.0

    return max(-1.0, min(1.0, ratio))


__all__ = ["cosine_similarity"]
