"""Similarity primitives shared by the search strategies."""

import math

import jellyfish
import numpy as np
from rapidfuzz.distance import Levenshtein
from sklearn.metrics.pairwise import cosine_similarity

EARTH_RADIUS_KM = 6371.0

# (upper distance bound in km, bonus), checked in order
PROXIMITY_TIERS = (
    (10.0, 0.3),
    (50.0, 0.2),
    (100.0, 0.1),
)


def edit_distance(a: str, b: str) -> int:
    """Case-insensitive Levenshtein distance."""
    return Levenshtein.distance(a.lower(), b.lower())


def levenshtein_ratio(a: str, b: str) -> float:
    """
    Similarity derived from edit distance.

    Returns ``1 - distance / max(len(a), len(b))``, or 0.0 when either string
    is empty.
    """
    if not a or not b:
        return 0.0
    max_len = max(len(a), len(b))
    return 1.0 - (edit_distance(a, b) / max_len)


def phonetic_encoding(text: str) -> str:
    """Metaphone encoding of a (possibly multi-word) string."""
    if not text:
        return ""
    return jellyfish.metaphone(text)


def phonetic_match(a: str, b: str) -> bool:
    """True when both strings have the same non-empty phonetic encoding."""
    code_a = phonetic_encoding(a)
    if not code_a:
        return False
    return code_a == phonetic_encoding(b)


def cosine_scores(query_vector, document_vectors) -> np.ndarray:
    """
    Cosine similarity between one query vector and each document vector.

    Zero vectors score 0. Scores are clipped to [0, 1] to absorb floating
    point drift on identical vectors.
    """
    if document_vectors.shape[0] == 0:
        return np.zeros(0)
    scores = cosine_similarity(query_vector, document_vectors)[0]
    return np.clip(np.nan_to_num(scores), 0.0, 1.0)


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def proximity_bonus(distance_km: float) -> float:
    """Score bonus for a record at the given distance from the user."""
    for bound, bonus in PROXIMITY_TIERS:
        if distance_km < bound:
            return bonus
    return 0.0
