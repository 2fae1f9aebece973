"""Match imported client names against the clients already registered."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..utils.normalization import normalize_client_name
from .similarity import name_score


class MatchType(str, Enum):
    """Confidence bucket assigned to an imported name."""
    EXACT = 'exact'
    SUGGESTED = 'suggested'
    NONE = 'none'


@dataclass(frozen=True)
class Target:
    """A registered entity an imported name can be linked to."""
    id: str
    name: str


@dataclass
class MatchCandidate:
    """One scored pairing of an imported name with a target."""
    source_name: str
    target_id: str
    target_name: str
    score: float


@dataclass
class MatchResult:
    """Outcome of matching one imported name.

    `selected` means the match is accepted as it stands; `ignored` and
    `create_new` are set during reconciliation.
    """
    source_name: str
    match_type: MatchType
    matched_id: Optional[str] = None
    matched_name: Optional[str] = None
    score: float = 0.0
    suggestions: List[MatchCandidate] = field(default_factory=list)
    selected: bool = False
    ignored: bool = False
    create_new: bool = False
    via_alias: bool = False

    @property
    def best(self) -> Optional[MatchCandidate]:
        return self.suggestions[0] if self.suggestions else None

    def to_dict(self) -> Dict:
        return {
            'source_name': self.source_name,
            'match_type': self.match_type.value,
            'matched_id': self.matched_id,
            'matched_name': self.matched_name,
            'score': round(self.score, 3),
            'suggestions': [
                {'target_id': c.target_id, 'target_name': c.target_name, 'score': round(c.score, 3)}
                for c in self.suggestions
            ],
            'selected': self.selected,
            'ignored': self.ignored,
            'create_new': self.create_new
        }


Scorer = Callable[[str, str], float]


class Matcher:
    """Bucket imported names into exact / suggested / none.

    Thresholds seen in practice: 0.3 is "worth showing" for demand imports,
    0.5 for licenses, 0.7 for PDF reports; auto-accept sits between 0.6 and
    0.9 depending on how costly a wrong link is.
    """

    def __init__(
        self,
        auto_accept_score: float = 0.9,
        suggest_threshold: float = 0.3,
        max_suggestions: int = 5,
        confirm_threshold: Optional[float] = None,
        scorer: Scorer = name_score,
        debug: bool = False
    ):
        """Initialize matcher.

        Args:
            auto_accept_score: Best score at or above which the top suggestion
                is pre-selected
            suggest_threshold: Minimum score for a target to be suggested
            max_suggestions: Number of suggestions attached to each result
            confirm_threshold: Optional stricter bar; when the best candidate
                is below it the result is `none` (suggestions still attached)
            scorer: Function scoring two raw names in [0, 1]
            debug: Enable debug logging
        """
        if not 0.0 <= suggest_threshold <= auto_accept_score <= 1.0:
            raise ValueError("thresholds must satisfy 0 <= suggest_threshold <= auto_accept_score <= 1")
        if max_suggestions <= 0:
            raise ValueError("max_suggestions must be positive")

        self.auto_accept_score = auto_accept_score
        self.suggest_threshold = suggest_threshold
        self.max_suggestions = max_suggestions
        self.confirm_threshold = confirm_threshold
        self.scorer = scorer
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    def match(
        self,
        source_name: str,
        targets: Iterable[Target],
        aliases: Optional[Dict[str, str]] = None
    ) -> MatchResult:
        """Match a single imported name.

        Args:
            source_name: Name as it appears in the imported file
            targets: Registered entities
            aliases: Normalized alias -> target id map, checked first

        Returns:
            MatchResult; absence of a match is `none`, never an error
        """
        return self._match(source_name, self._prepare(targets), aliases or {})

    def match_all(
        self,
        source_names: Iterable[str],
        targets: Iterable[Target],
        aliases: Optional[Dict[str, str]] = None
    ) -> List[MatchResult]:
        """Match many names against the same targets, preserving input order."""
        prepared = self._prepare(targets)
        results = [self._match(name, prepared, aliases or {}) for name in source_names]

        if self.debug:
            counts = {t.value: 0 for t in MatchType}
            for result in results:
                counts[result.match_type.value] += 1
            self.logger.debug(f"Matched {len(results)} names: {counts}")

        return results

    def _prepare(self, targets: Iterable[Target]) -> List[Tuple[Target, str]]:
        return [(target, normalize_client_name(target.name)) for target in targets]

    def _match(
        self,
        source_name: str,
        prepared: Sequence[Tuple[Target, str]],
        aliases: Dict[str, str]
    ) -> MatchResult:
        normalized = normalize_client_name(source_name)
        if not normalized:
            return MatchResult(source_name=source_name, match_type=MatchType.NONE)

        alias_target = aliases.get(normalized)
        if alias_target is not None:
            for target, _ in prepared:
                if target.id == alias_target:
                    return self._exact(source_name, target, via_alias=True)

        for target, target_key in prepared:
            if target_key == normalized:
                return self._exact(source_name, target)

        candidates = []
        for target, _ in prepared:
            score = self.scorer(source_name, target.name)
            if score >= self.suggest_threshold:
                candidates.append(MatchCandidate(source_name, target.id, target.name, score))

        # sorted() is stable, so ties keep target order
        candidates = sorted(candidates, key=lambda c: c.score, reverse=True)[:self.max_suggestions]

        if not candidates:
            return MatchResult(source_name=source_name, match_type=MatchType.NONE)

        best = candidates[0]
        if best.score >= self.auto_accept_score:
            return MatchResult(
                source_name=source_name,
                match_type=MatchType.SUGGESTED,
                matched_id=best.target_id,
                matched_name=best.target_name,
                score=best.score,
                suggestions=candidates,
                selected=True
            )

        if self.confirm_threshold is not None and best.score < self.confirm_threshold:
            return MatchResult(
                source_name=source_name,
                match_type=MatchType.NONE,
                score=best.score,
                suggestions=candidates
            )

        return MatchResult(
            source_name=source_name,
            match_type=MatchType.SUGGESTED,
            score=best.score,
            suggestions=candidates
        )

    def _exact(self, source_name: str, target: Target, via_alias: bool = False) -> MatchResult:
        return MatchResult(
            source_name=source_name,
            match_type=MatchType.EXACT,
            matched_id=target.id,
            matched_name=target.name,
            score=1.0,
            suggestions=[MatchCandidate(source_name, target.id, target.name, 1.0)],
            selected=True,
            via_alias=via_alias
        )
