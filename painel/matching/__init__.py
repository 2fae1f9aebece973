"""Client name matching and reconciliation."""

from .similarity import similarity_score, name_score
from .matcher import Matcher, MatchCandidate, MatchResult, MatchType, Target
from .reconciliation import (
    ItemState,
    ReconciliationItem,
    ReconciliationSession,
    ResolvedImport,
    auto_resolve
)

__all__ = [
    'similarity_score',
    'name_score',
    'Matcher',
    'MatchCandidate',
    'MatchResult',
    'MatchType',
    'Target',
    'ItemState',
    'ReconciliationItem',
    'ReconciliationSession',
    'ResolvedImport',
    'auto_resolve'
]
