"""Cosine similarity between embedding vectors."""

import math
from collections.abc import Sequence

# Keeps the denominator positive when either vector is all zeros.
_EPSILON = 1e-12


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of two equal-length vectors.

    The result lies in roughly [-1, 1]; a zero vector scores 0.0
    against anything.

    Raises:
        ValueError: If the vectors differ in length.
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")

    dot = na = nb = 0.0
    for x, y in zip(a, b):
        dot += x * y
        na += x * x
        nb += y * y
    return dot / (math.sqrt(na) * math.sqrt(nb) + _EPSILON)
