"""Tests for the name matcher."""
import pytest

from ..matching.matcher import Matcher, MatchType, Target
from ..matching.similarity import similarity_score

def test_import_scenario(targets):
    """Spreadsheet names against the registered clients."""
    matcher = Matcher()
    seara, seara_ltda, cocatrel = matcher.match_all(['Seara', 'SEARA LTDA', 'Cocatrel'], targets)

    assert seara.match_type == MatchType.EXACT
    assert seara.matched_id == 'c-seara'
    assert seara.score == 1.0

    assert seara_ltda.match_type == MatchType.EXACT
    assert seara_ltda.matched_id == 'c-seara'

    assert cocatrel.match_type == MatchType.SUGGESTED
    assert cocatrel.best.target_id == 'c-cocatrel'
    assert cocatrel.best.score > 0.7
    assert not cocatrel.selected
    assert cocatrel.matched_id is None

def test_match_all_preserves_order(targets):
    names = ['Agua Clara', 'Unknown Company', 'Seara']
    results = Matcher().match_all(names, targets)
    assert [r.source_name for r in results] == names

def test_alias_checked_first(targets):
    """A stored alias wins over a better-looking name match."""
    aliases = {'SEARA': 'c-agua'}
    result = Matcher().match('Seara Ltda', targets, aliases)
    assert result.match_type == MatchType.EXACT
    assert result.via_alias
    assert result.matched_id == 'c-agua'

def test_alias_to_missing_target_is_ignored(targets):
    result = Matcher().match('Seara', targets, {'SEARA': 'gone'})
    assert result.matched_id == 'c-seara'
    assert not result.via_alias

def test_auto_accept_preselects(targets):
    """Scores at or above the auto-accept bar are pre-selected suggestions."""
    matcher = Matcher(auto_accept_score=0.75)
    result = matcher.match('Cocatrel', targets)
    assert result.match_type == MatchType.SUGGESTED
    assert result.selected
    assert result.matched_id == 'c-cocatrel'
    assert result.score == pytest.approx(0.8)

def test_no_match():
    result = Matcher().match('Xyz', [Target('1', 'Seara')])
    assert result.match_type == MatchType.NONE
    assert result.suggestions == []
    assert result.matched_id is None

def test_empty_name_is_none(targets):
    result = Matcher().match('   ', targets)
    assert result.match_type == MatchType.NONE

def test_suggestions_sorted_and_truncated():
    """Best first, ties in target order, at most max_suggestions."""
    targets = [Target(str(i), name) for i, name in enumerate(
        ['Seara A', 'Seara B', 'Seara C', 'Seara Alimentos', 'Seara', 'Searas']
    )]
    result = Matcher(max_suggestions=3).match('Searaa', targets)
    scores = [c.score for c in result.suggestions]
    assert len(scores) == 3
    assert scores == sorted(scores, reverse=True)

    ties = Matcher(max_suggestions=2).match('Seara X', targets[:3])
    assert [c.target_id for c in ties.suggestions] == ['0', '1']

def test_confirm_threshold(targets):
    """Below the confirm bar the result is none, with suggestions kept."""
    result = Matcher(confirm_threshold=0.85).match('Cocatrel', targets)
    assert result.match_type == MatchType.NONE
    assert result.suggestions

def test_custom_scorer(targets):
    """Without the containment floor "Cocatrel" is not worth suggesting."""
    result = Matcher(suggest_threshold=0.7, scorer=similarity_score).match('Cocatrel', targets)
    assert result.match_type == MatchType.NONE

def test_invalid_thresholds():
    with pytest.raises(ValueError):
        Matcher(auto_accept_score=0.5, suggest_threshold=0.6)
    with pytest.raises(ValueError):
        Matcher(auto_accept_score=1.5)
    with pytest.raises(ValueError):
        Matcher(max_suggestions=0)

def test_to_dict(targets):
    data = Matcher().match('Cocatrel', targets).to_dict()
    assert data['source_name'] == 'Cocatrel'
    assert data['match_type'] == 'suggested'
    assert data['suggestions'][0]['target_id'] == 'c-cocatrel'
