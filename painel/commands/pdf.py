"""Commands for monthly PDF report imports."""

from typing import Optional

import click

from ..cli.base import BaseCommand, FileInputCommand, command_error_handler
from ..cli.config import Config
from ..processors.pdf_import import PdfImportService

STATUS_COLORS = {
    'auto': 'green',
    'linked': 'green',
    'pending': 'yellow',
    'unmatched': 'red'
}

class PdfCommandMixin:
    """Builds the import service for PDF commands."""

    def build_service(self) -> PdfImportService:
        return PdfImportService(
            self.session_manager,
            context=self.build_context(),
            debug=self.debug
        )

    def show_detected(self, service: PdfImportService, import_id: str) -> None:
        for detected in service.detected_clients(import_id):
            click.secho(
                f"  {detected.id}  [{detected.match_status:>9}] {detected.raw_name}",
                fg=STATUS_COLORS.get(detected.match_status)
            )
            if detected.match_status == 'pending':
                for suggestion in detected.suggestions or []:
                    click.echo(
                        f"      {suggestion['client_id']}  {suggestion['client_name']} "
                        f"({suggestion['score']:.0%})"
                    )

class PdfImportCommand(PdfCommandMixin, FileInputCommand):
    """Register, parse and match a report."""

    suffixes = ('.pdf',)

    @command_error_handler
    def execute(self) -> str:
        if not self.validate():
            raise click.Abort()

        service = self.build_service()
        import_id, totals = service.import_file(self.input_file)
        click.secho(f"Import {import_id} ready", fg='green')
        click.echo(
            f"  {totals['detected']} clients: {totals['matched']} matched, "
            f"{totals['pending']} pending, {totals['unmatched']} unmatched"
        )
        self.show_detected(service, import_id)
        return import_id

class PdfListCommand(PdfCommandMixin, BaseCommand):
    """List recent report imports, or the clients of one import."""

    def __init__(self, config: Config, import_id: Optional[str] = None, limit: int = 20):
        super().__init__(config)
        self.import_id = import_id
        self.limit = limit

    @command_error_handler
    def execute(self) -> None:
        service = self.build_service()
        if self.import_id:
            self.show_detected(service, self.import_id)
            return

        imports = service.list_imports(self.limit)
        if not imports:
            click.echo("No PDF imports found")
            return
        for pdf_import in imports:
            click.echo(
                f"{pdf_import.id}  {pdf_import.created_at:%d/%m/%Y %H:%M}  "
                f"{pdf_import.status:<9} {pdf_import.period_label or '--/----'}  {pdf_import.filename}  "
                f"({pdf_import.total_matched or 0}/{pdf_import.total_clients_detected or 0} matched)"
            )

class PdfLinkCommand(PdfCommandMixin, BaseCommand):
    """Link a detected client to a dashboard client."""

    def __init__(self, config: Config, detected_id: str, client_id: str, create_alias: bool = False):
        super().__init__(config)
        self.detected_id = detected_id
        self.client_id = client_id
        self.create_alias = create_alias

    @command_error_handler
    def execute(self) -> None:
        self.build_service().link(self.detected_id, self.client_id, self.create_alias)
        click.secho("Linked", fg='green')

class PdfCompleteCommand(PdfCommandMixin, BaseCommand):
    """Attach the metrics of matched clients and close the import."""

    def __init__(self, config: Config, import_id: str, include_linked: bool = True):
        super().__init__(config)
        self.import_id = import_id
        self.include_linked = include_linked

    @command_error_handler
    def execute(self) -> int:
        count = self.build_service().complete(self.import_id, self.include_linked)
        click.secho(f"Imported metrics for {count} clients", fg='green')
        return count

class PdfDeleteCommand(PdfCommandMixin, BaseCommand):
    """Delete a report import with its detected clients and metrics."""

    def __init__(self, config: Config, import_id: str):
        super().__init__(config)
        self.import_id = import_id

    @command_error_handler
    def execute(self) -> None:
        self.build_service().delete(self.import_id)
        click.secho(f"Deleted import {self.import_id}", fg='green')

__all__ = [
    'PdfImportCommand',
    'PdfListCommand',
    'PdfLinkCommand',
    'PdfCompleteCommand',
    'PdfDeleteCommand'
]
