from typing import List, Optional, Sequence
import re

import numpy as np

PHRASE_BONUS = 10.0
TERM_WEIGHT = 2.0
# Denominator is BASE_NORMALISER + TERM_NORMALISER per query term
BASE_NORMALISER = 5.0
TERM_NORMALISER = 3.0
MIN_TERM_LENGTH = 3


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine of the angle between two vectors.

    Returns 0.0 for missing, empty, mismatched-length or zero-magnitude vectors.
    """
    if a is None or b is None or len(a) == 0 or len(a) != len(b):
        return 0.0
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    magnitude = float(np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
    if magnitude == 0.0 or not np.isfinite(magnitude):
        return 0.0
    return float(np.dot(vec_a, vec_b) / magnitude)


def query_terms(query: str) -> List[str]:
    """Lower-cased whitespace terms longer than two characters."""
    return [term for term in query.lower().split() if len(term) >= MIN_TERM_LENGTH]


def text_match_score(query: str, text: str) -> float:
    """
    Term-frequency score in [0, 1] for when no embeddings are available.

    Each query term earns TERM_WEIGHT per whole-word hit in the text, the full
    query phrase earns PHRASE_BONUS, and the sum is divided by
    BASE_NORMALISER + TERM_NORMALISER * number_of_terms.
    """
    lowered_query = query.lower().strip()
    if not lowered_query:
        return 0.0
    lowered_text = text.lower()
    terms = query_terms(lowered_query)

    score = 0.0
    if lowered_query in lowered_text:
        score += PHRASE_BONUS
    for term in terms:
        hits = len(re.findall(rf"\b{re.escape(term)}\b", lowered_text))
        score += hits * TERM_WEIGHT

    if score == 0.0:
        return 0.0
    return min(score / (BASE_NORMALISER + TERM_NORMALISER * len(terms)), 1.0)


def clamp_similarity(value: float) -> float:
    return max(0.0, min(1.0, value))
