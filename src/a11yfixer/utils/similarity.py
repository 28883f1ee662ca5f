"""String similarity helpers used by selector recovery.

Pure functions with no DOM access so they can be unit tested in isolation.
"""

from __future__ import annotations

from typing import Iterable


def levenshtein_distance(a: str, b: str) -> int:
    """Return the edit distance (insert, delete, substitute) between two strings."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the shorter string in the inner loop.
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def string_similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1], case-insensitive and symmetric.

    ``1 - distance / max(len(a), len(b))``. Two empty strings are identical.
    """
    left = a.lower()
    right = b.lower()
    if left == right:
        return 1.0
    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(left, right) / longest


def overlap_ratio(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard overlap of two collections (0.0 when both are empty)."""
    left = set(a)
    right = set(b)
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)
