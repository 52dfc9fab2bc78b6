import math
import re
import unicodedata
from typing import Optional

from config import (
    CONTAINMENT_BOOST_FLOOR, CONTAINMENT_BOOST_LOWER, CONTAINMENT_BOOST_UPPER
)

_WHITESPACE = re.compile(r"\s+")


def _is_word_char(ch: str) -> bool:
    # Combining marks (Devanagari vowel signs, accents) are part of the word
    return ch.isalnum() or ch == "_" or unicodedata.category(ch).startswith("M")


def normalize(text: Optional[str]) -> str:
    """Lower-case, drop punctuation, collapse whitespace"""
    if text is None:
        return ""
    lowered = str(text).lower()
    cleaned = "".join(ch for ch in lowered if ch.isspace() or _is_word_char(ch))
    return _WHITESPACE.sub(" ", cleaned).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """
    Edit distance with unit-cost insertion, deletion and substitution.

    The table has len(b) + 1 rows and len(a) + 1 columns.
    """
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(b) + 1):
        matrix[i][0] = i
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = min(
                    matrix[i - 1][j - 1] + 1,  # substitution
                    matrix[i][j - 1] + 1,      # insertion
                    matrix[i - 1][j] + 1,      # deletion
                )

    return matrix[len(b)][len(a)]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def similarity(a: Optional[str], b: Optional[str]) -> int:
    """
    Similarity of two strings as an integer percentage (0-100).

    Both sides are normalized first. Two empty strings score 100 and a
    single empty side scores 0. Otherwise the score is derived from the
    Levenshtein distance relative to the longer string. When one string
    contains the other (an address with an extra apartment number, a name
    with a middle name) a score inside the boost window is raised to the
    boost floor.
    """
    norm_a = normalize(a)
    norm_b = normalize(b)

    if not norm_a and not norm_b:
        return 100
    if not norm_a or not norm_b:
        return 0
    if norm_a == norm_b:
        return 100

    distance = levenshtein_distance(norm_a, norm_b)
    max_length = max(len(norm_a), len(norm_b))
    # Very long strings one edit apart would otherwise round up to 100
    score = min(_round_half_up((1 - distance / max_length) * 100), 99)

    if CONTAINMENT_BOOST_LOWER < score < CONTAINMENT_BOOST_UPPER:
        if norm_a in norm_b or norm_b in norm_a:
            score = max(score, CONTAINMENT_BOOST_FLOOR)

    return score
