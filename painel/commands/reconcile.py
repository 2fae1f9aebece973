"""Interactive review of match results on the terminal."""

import logging
from typing import Dict, List

import click

from ..exceptions import ReconciliationError
from ..matching.reconciliation import ItemState, ReconciliationItem, ReconciliationSession

STATE_COLORS = {
    ItemState.AUTO_MATCHED: 'green',
    ItemState.LINKED: 'green',
    ItemState.CREATE_NEW: 'cyan',
    ItemState.SUGGESTED: 'yellow',
    ItemState.UNMATCHED: 'red',
    ItemState.IGNORED: 'white'
}

HELP = (
    "  <n>   link to suggestion n (add '+' to remember the spelling, e.g. 1+)\n"
    "  a     accept the top suggestion\n"
    "  c     create a new client with this name\n"
    "  i     ignore this company\n"
    "  s     search clients by name\n"
    "  l     leave pending (excluded from the import)"
)


class InteractiveReviewer:
    """Walk the operator through the pending items of a session."""

    def __init__(self, session: ReconciliationSession, record_counts: Dict[str, int]):
        self.session = session
        self.record_counts = record_counts
        self.logger = logging.getLogger(self.__class__.__name__)

    def show_overview(self) -> None:
        click.echo()
        for item in self.session.items:
            target = f" -> {item.target_name}" if item.target_name else ''
            count = self.record_counts.get(item.source_name, 0)
            click.secho(
                f"  [{item.state.value:>12}] {item.source_name} ({count} registros){target}",
                fg=STATE_COLORS[item.state]
            )
        counts = self.session.counts()
        click.echo(
            f"\n  {counts['auto_matched']} matched, {counts['linked']} linked, "
            f"{counts['create_new']} new, {counts['ignored']} ignored, "
            f"{counts['suggested'] + counts['unmatched']} pending"
        )

    def review(self) -> bool:
        """Resolve pending items, then ask for confirmation.

        Returns:
            True when the operator confirmed the import
        """
        for item in self.session.pending():
            self.review_item(item)

        while True:
            self.show_overview()
            action = click.prompt(
                "\n[c]onfirm import, [r]eset a company, [q]uit",
                type=click.Choice(['c', 'r', 'q']),
                default='c'
            )
            if action == 'c':
                return True
            if action == 'q':
                return False
            name = click.prompt("Company name as in the file")
            try:
                item = self.session.reset(name)
            except ReconciliationError as e:
                click.secho(str(e), fg='red')
                continue
            self.review_item(item)

    def review_item(self, item: ReconciliationItem) -> None:
        count = self.record_counts.get(item.source_name, 0)
        click.secho(f"\n{item.source_name} ({count} registros)", bold=True)
        suggestions = item.result.suggestions
        if suggestions:
            for number, candidate in enumerate(suggestions, start=1):
                click.echo(f"  {number}. {candidate.target_name} ({candidate.score:.0%})")
        else:
            click.echo("  no similar client found")

        while True:
            answer = click.prompt("Choice (? for help)", default='l').strip().lower()
            try:
                if self.apply(item, answer, suggestions):
                    return
            except ReconciliationError as e:
                click.secho(str(e), fg='red')

    def apply(self, item: ReconciliationItem, answer: str, suggestions: List) -> bool:
        """Apply one answer; returns False when the prompt should repeat."""
        if answer == '?':
            click.echo(HELP)
            return False
        if answer == 'l':
            return True
        if answer == 'a':
            self.session.accept(item.source_name)
            return True
        if answer == 'c':
            name = click.prompt("New client name", default=item.source_name)
            self.session.create_new(item.source_name, name)
            return True
        if answer == 'i':
            self.session.ignore(item.source_name)
            return True
        if answer == 's':
            return self.search(item)

        remember = answer.endswith('+')
        number = answer.rstrip('+')
        if number.isdigit() and 1 <= int(number) <= len(suggestions):
            candidate = suggestions[int(number) - 1]
            self.session.link(item.source_name, candidate.target_id, remember=remember)
            return True

        click.echo(HELP)
        return False

    def search(self, item: ReconciliationItem) -> bool:
        term = click.prompt("Search").strip().lower()
        found = [t for t in self.session.targets.values() if term in t.name.lower()][:10]
        if not found:
            click.echo("  nothing found")
            return False
        for number, target in enumerate(found, start=1):
            click.echo(f"  {number}. {target.name}")
        choice = click.prompt("Link to (0 to cancel)", type=click.IntRange(0, len(found)), default=0)
        if choice == 0:
            return False
        remember = click.confirm("Remember this spelling?", default=True)
        self.session.link(item.source_name, found[choice - 1].id, remember=remember)
        return True
