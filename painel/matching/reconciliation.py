"""Human-assisted resolution of match results.

A ReconciliationSession wraps the match results of one import file. Each
imported name starts as auto_matched, suggested or unmatched and is moved
by the operator to linked, create_new or ignored. Every choice can be
reset until confirm(), which freezes the session and hands the resolved
links to the bulk writers.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from ..exceptions import ReconciliationError
from ..utils.normalization import normalize_client_name
from .matcher import MatchResult, MatchType, Target


class ItemState(str, Enum):
    AUTO_MATCHED = 'auto_matched'
    SUGGESTED = 'suggested'
    UNMATCHED = 'unmatched'
    LINKED = 'linked'
    CREATE_NEW = 'create_new'
    IGNORED = 'ignored'


RESOLVED_STATES = frozenset({ItemState.AUTO_MATCHED, ItemState.LINKED, ItemState.CREATE_NEW})


@dataclass
class ReconciliationItem:
    """Reconciliation state of one imported name."""
    result: MatchResult
    initial_state: ItemState
    state: ItemState
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    remember_alias: bool = False

    @property
    def source_name(self) -> str:
        return self.result.source_name

    @property
    def resolved(self) -> bool:
        return self.state in RESOLVED_STATES


@dataclass
class ResolvedImport:
    """Frozen outcome of a reconciliation session."""
    links: Dict[str, Optional[str]] = field(default_factory=dict)
    excluded: Set[str] = field(default_factory=set)
    aliases: List[Tuple[str, str]] = field(default_factory=list)
    created: List[Target] = field(default_factory=list)

    def includes(self, source_name: str) -> bool:
        return source_name in self.links

    def client_for(self, source_name: str) -> Optional[str]:
        """Target id linked to an imported name, or None."""
        return self.links.get(source_name)


def initial_state(result: MatchResult) -> ItemState:
    if result.selected and result.matched_id:
        return ItemState.AUTO_MATCHED
    if result.match_type == MatchType.SUGGESTED:
        return ItemState.SUGGESTED
    return ItemState.UNMATCHED


class ReconciliationSession:
    """Sequential, single-operator reconciliation of one import run."""

    def __init__(
        self,
        results: Iterable[MatchResult],
        targets: Iterable[Target],
        create_target: Optional[Callable[[str], Target]] = None
    ):
        """Initialize session.

        Args:
            results: Match results, one per distinct imported name
            targets: Entities that can be linked to
            create_target: Inserts a new entity for a name and returns it;
                required for create_new()
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.targets: Dict[str, Target] = {target.id: target for target in targets}
        self.create_target = create_target
        self.closed = False
        self.created: List[Target] = []
        self._items: Dict[str, ReconciliationItem] = {}

        for result in results:
            state = initial_state(result)
            self._items[result.source_name] = ReconciliationItem(
                result=result,
                initial_state=state,
                state=state,
                target_id=result.matched_id if state == ItemState.AUTO_MATCHED else None,
                target_name=result.matched_name if state == ItemState.AUTO_MATCHED else None
            )

    @property
    def items(self) -> List[ReconciliationItem]:
        return list(self._items.values())

    def item(self, source_name: str) -> ReconciliationItem:
        try:
            return self._items[source_name]
        except KeyError:
            raise ReconciliationError(f"unknown imported name: {source_name}")

    def pending(self) -> List[ReconciliationItem]:
        """Items still waiting for an operator decision."""
        return [item for item in self._items.values()
                if item.state in (ItemState.SUGGESTED, ItemState.UNMATCHED)]

    def counts(self) -> Dict[str, int]:
        counter = Counter(item.state.value for item in self._items.values())
        return {state.value: counter.get(state.value, 0) for state in ItemState}

    def link(self, source_name: str, target_id: str, remember: bool = False) -> ReconciliationItem:
        """Link an imported name to an existing target.

        Args:
            source_name: Imported name
            target_id: Id of a known target
            remember: Store the imported name as an alias of the target so
                later imports match it exactly
        """
        self._check_open()
        item = self.item(source_name)
        target = self.targets.get(target_id)
        if target is None:
            raise ReconciliationError(f"unknown target: {target_id}")

        self._set(item, ItemState.LINKED, target)
        item.remember_alias = remember
        return item

    def accept(self, source_name: str) -> ReconciliationItem:
        """Link to the pre-selected match, or else the top suggestion."""
        self._check_open()
        item = self.item(source_name)
        target_id = item.result.matched_id or (item.result.best.target_id if item.result.best else None)
        if target_id is None:
            raise ReconciliationError(f"no suggestion to accept for {source_name}")
        return self.link(source_name, target_id)

    def create_new(self, source_name: str, name: Optional[str] = None) -> ReconciliationItem:
        """Insert a new target for the imported name and link to it.

        The insert happens immediately; reset() afterwards unlinks the item
        but the created entity stays.
        """
        self._check_open()
        item = self.item(source_name)
        if self.create_target is None:
            raise ReconciliationError("this session cannot create new entries")

        target = self.create_target(name or source_name)
        self.targets[target.id] = target
        self.created.append(target)
        self.logger.info(f"Created {target.name} for imported name {source_name}")

        self._set(item, ItemState.CREATE_NEW, target)
        item.result.create_new = True
        return item

    def ignore(self, source_name: str) -> ReconciliationItem:
        """Exclude every record of this name from the write."""
        self._check_open()
        item = self.item(source_name)
        self._set(item, ItemState.IGNORED, None)
        item.result.ignored = True
        return item

    def reset(self, source_name: str) -> ReconciliationItem:
        """Undo any operator choice, restoring the matcher's outcome."""
        self._check_open()
        item = self.item(source_name)
        result = item.result
        item.state = item.initial_state
        item.remember_alias = False
        result.ignored = False
        result.create_new = False
        if item.initial_state == ItemState.AUTO_MATCHED:
            item.target_id = result.matched_id
            item.target_name = result.matched_name
            result.selected = True
        else:
            item.target_id = None
            item.target_name = None
            result.selected = False
        return item

    def confirm(self, keep_unmatched: bool = False) -> ResolvedImport:
        """Freeze the session and return the resolved links.

        Args:
            keep_unmatched: Keep unresolved names with no client instead of
                excluding them; ignored names are always excluded

        Returns:
            ResolvedImport consumed by the bulk writers
        """
        self._check_open()
        self.closed = True

        resolved = ResolvedImport(created=list(self.created))
        for source_name, item in self._items.items():
            if item.resolved:
                resolved.links[source_name] = item.target_id
                if item.remember_alias and item.target_id:
                    resolved.aliases.append((normalize_client_name(source_name), item.target_id))
            elif item.state != ItemState.IGNORED and keep_unmatched:
                resolved.links[source_name] = None
            else:
                resolved.excluded.add(source_name)

        self.logger.info(
            f"Reconciliation confirmed: {len(resolved.links)} names kept, "
            f"{len(resolved.excluded)} excluded"
        )
        return resolved

    def _set(self, item: ReconciliationItem, state: ItemState, target: Optional[Target]) -> None:
        item.state = state
        item.target_id = target.id if target else None
        item.target_name = target.name if target else None
        item.result.selected = target is not None
        item.result.ignored = False
        item.result.create_new = False

    def _check_open(self) -> None:
        if self.closed:
            raise ReconciliationError("reconciliation already confirmed")


def auto_resolve(session: ReconciliationSession,
                 accept_suggestions: bool = False,
                 create_missing: bool = False) -> ReconciliationSession:
    """Apply the non-interactive policy to the pending items of a session.

    Suggestions are accepted when `accept_suggestions` is set; names left
    unmatched get a new entry when `create_missing` is set, reusing an entry
    created earlier in the session for the same normalized name. Everything
    else stays pending and is excluded on confirm().
    """
    created: Dict[str, str] = {}
    for item in session.pending():
        if item.state == ItemState.SUGGESTED:
            if accept_suggestions:
                session.accept(item.source_name)
        elif create_missing:
            key = normalize_client_name(item.source_name)
            if key in created:
                session.link(item.source_name, created[key])
            else:
                created[key] = session.create_new(item.source_name).target_id
    return session
