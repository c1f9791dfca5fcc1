"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/similarity.py
Edit-distance similarity between normalized names.
"""

from rapidfuzz.distance import Levenshtein


def similarity(a: str, b: str) -> float:
    """
    Similarity of two strings in [0, 1]: (len(longer) - distance) / len(longer).

    distance is the plain Levenshtein distance (insert, delete, substitute all
    cost 1), compared case-sensitively. An empty string is similar to nothing,
    including another empty string.
    """
    if not a or not b:
        return 0.0
    longer = max(len(a), len(b))
    distance = Levenshtein.distance(a, b)
    return (longer - distance) / longer


def max_possible_similarity(len_a: int, len_b: int) -> float:
    """
    Upper bound of similarity() for strings of the given lengths.
    The distance is at least the length difference, so the score is at most
    shorter / longer.
    """
    longer = max(len_a, len_b)
    if longer == 0 or min(len_a, len_b) == 0:
        return 0.0
    return min(len_a, len_b) / longer
