"""String similarity scoring for client names."""

from rapidfuzz.distance import Levenshtein

from ..utils.normalization import normalize_client_name

# Score given when one name is contained word-for-word in the other
CONTAINMENT_SCORE = 0.8


def levenshtein_ratio(a: str, b: str) -> float:
    """1 - edit distance / longer length, over already-normalized strings."""
    if a == b:
        return 1.0
    longest = max(len(a), len(b))
    return 1.0 - Levenshtein.distance(a, b) / longest


def similarity_score(a: str, b: str) -> float:
    """Similarity between two raw names in [0, 1].

    Both names are normalized first, so case, accents and legal suffixes
    never count against a match. Identical normalized names (including
    two empty ones) score exactly 1.0. The score is symmetric.
    """
    return levenshtein_ratio(normalize_client_name(a), normalize_client_name(b))


def contains_name(a: str, b: str) -> bool:
    """True when one normalized name is a whole-word run inside the other."""
    if not a or not b or a == b:
        return False
    return f" {a} " in f" {b} " or f" {b} " in f" {a} "


def name_score(a: str, b: str) -> float:
    """Similarity score with a floor for names that contain each other.

    "Cocatrel" against "Cocatrel Industria" has a poor edit-distance ratio
    but is obviously the same client, so containment lifts it to
    CONTAINMENT_SCORE. The plain score wins when it is higher.
    """
    left = normalize_client_name(a)
    right = normalize_client_name(b)
    score = levenshtein_ratio(left, right)
    if contains_name(left, right):
        return max(score, CONTAINMENT_SCORE)
    return score
