"""Spreadsheet import commands."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import click

from ..cli.base import FileInputCommand, command_error_handler
from ..cli.config import Config
from ..importer import ImportRun, SpreadsheetImporter
from ..matching.reconciliation import auto_resolve
from ..parsers.records import record_to_dict
from ..processors.base import DuplicatePolicy
from .reconcile import InteractiveReviewer

class ImportFileCommand(FileInputCommand):
    """Parse a workbook, reconcile its companies and write the records."""

    suffixes = ('.xlsx', '.xls', '.csv')
    
    def __init__(
        self,
        config: Config,
        kind: str,
        input_file: Path,
        output_file: Optional[Path] = None,
        policy: Optional[str] = None,
        interactive: Optional[bool] = None,
        accept_suggestions: bool = False,
        create_missing: bool = False,
        keep_unmatched: bool = False
    ):
        """Initialize command.
        
        Args:
            config: Application configuration
            kind: Workbook type, e.g. "demands"
            input_file: Path to the workbook
            output_file: Optional path to save the match results and stats as JSON
            policy: Duplicate policy, defaults to the configured one
            interactive: Review pending companies on the terminal
            accept_suggestions: Non-interactive: take the top suggestion
            create_missing: Non-interactive: create clients for unmatched companies
            keep_unmatched: Write records of unresolved companies without a client
        """
        super().__init__(config, input_file, output_file)
        self.kind = kind
        self.policy = DuplicatePolicy.parse(policy or config.duplicate_policy)
        self.interactive = config.interactive if interactive is None else interactive
        self.accept_suggestions = accept_suggestions
        self.create_missing = create_missing
        self.keep_unmatched = keep_unmatched
    
    @command_error_handler
    def execute(self) -> Optional[Dict[str, Any]]:
        """Execute the command.
        
        Returns:
            Write stats, or None when nothing was written
        """
        if not self.validate():
            raise click.Abort()

        importer = SpreadsheetImporter(
            self.session_manager,
            self.kind,
            matcher=self.build_matcher(),
            context=self.build_context(),
            debug=self.debug
        )
        run = importer.load(self.input_file)
        record_counts = {name: len(records) for name, records in run.groups.items()}
        reviewer = InteractiveReviewer(run.reconciliation, record_counts)

        if self.interactive:
            if not reviewer.review():
                click.secho("Import cancelled", fg='yellow')
                return None
        else:
            auto_resolve(run.reconciliation, self.accept_suggestions, self.create_missing)
            reviewer.show_overview()

        if self.config.dry_run:
            click.secho("Dry run: nothing written", fg='yellow')
            self.save_results(run, None)
            return None

        stats = importer.commit(run, self.policy, self.keep_unmatched)
        self.print_summary(stats)
        self.save_results(run, stats)
        return stats

    def print_summary(self, stats: Dict[str, Any]) -> None:
        click.echo()
        click.secho(f"Imported: {stats['imported']}", fg='green')
        click.echo(f"Updated:  {stats['updated']}")
        click.echo(f"Skipped:  {stats['skipped']}")
        if stats['excluded']:
            click.echo(f"Excluded: {stats['excluded']}")
        if stats['clients_created']:
            click.echo(f"New clients: {stats['clients_created']}")
        if stats['failed']:
            click.secho(f"Failed:   {stats['failed']}", fg='red')

    def save_results(self, run: ImportRun, stats: Optional[Dict[str, Any]]) -> None:
        if not self.output_file:
            return
        results = {
            'file': str(run.path),
            'kind': run.kind,
            'matches': [result.to_dict() for result in run.results],
            'records': [record_to_dict(record) for record in run.records],
            'stats': stats
        }
        with open(self.output_file, 'w') as f:
            json.dump(results, f, indent=2, ensure_ascii=False, default=str)
        self.logger.info(f"Results saved to {self.output_file}")

__all__ = ['ImportFileCommand']
