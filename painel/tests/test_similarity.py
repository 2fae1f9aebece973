"""Tests for name similarity scoring."""
import pytest

from ..matching.similarity import (
    CONTAINMENT_SCORE,
    contains_name,
    levenshtein_ratio,
    name_score,
    similarity_score
)

def test_levenshtein_ratio():
    assert levenshtein_ratio('SEARA', 'SEARA') == 1.0
    assert levenshtein_ratio('ABC', 'XYZ') == 0.0
    assert levenshtein_ratio('COCATREL', 'COCATROL') == pytest.approx(0.875)
    assert levenshtein_ratio('', '') == 1.0

def test_similarity_score_normalizes_first():
    """Case, accents and suffixes never count against a match."""
    assert similarity_score('Seara', 'SEARA LTDA') == 1.0
    assert similarity_score('Água Clara', 'agua clara me') == 1.0
    assert similarity_score('', '') == 1.0

def test_similarity_score_symmetric():
    pairs = [('Cocatrel', 'Cocatrel Industria'), ('Seara', 'Sera'), ('Agua Clara', 'Agua Klare')]
    for a, b in pairs:
        assert similarity_score(a, b) == similarity_score(b, a)
        assert 0.0 <= similarity_score(a, b) <= 1.0

def test_contains_name():
    """Containment only counts whole words."""
    assert contains_name('COCATREL', 'COCATREL INDUSTRIA')
    assert contains_name('COCATREL INDUSTRIA', 'COCATREL')
    assert not contains_name('SEARA', 'SEARAX ALIMENTOS')
    assert not contains_name('SEARA', 'SEARA')
    assert not contains_name('', 'SEARA')

def test_name_score():
    """Contained names are lifted to the containment floor."""
    assert similarity_score('Cocatrel', 'Cocatrel Industria') < 0.5
    assert name_score('Cocatrel', 'Cocatrel Industria') == CONTAINMENT_SCORE
    # A higher plain score wins over the floor
    assert name_score('Seara', 'SEARA LTDA') == 1.0
    assert name_score('Agua Clara', 'Agua Klare') == pytest.approx(0.8)
    assert name_score('Seara', 'Cocatrel') < 0.3
