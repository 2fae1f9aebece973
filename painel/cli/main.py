"""
Core CLI implementation for the painel package.
"""

import click
from pathlib import Path
from typing import Optional

from .config import Config
from .logging import setup_logging, get_logger
from ..commands.imports import ImportFileCommand
from ..commands.pdf import (
    PdfCompleteCommand,
    PdfDeleteCommand,
    PdfImportCommand,
    PdfLinkCommand,
    PdfListCommand
)
from ..commands.tv import TVCommand
from ..commands.utils import InitDbCommand, MatchCommand, TestConnectionCommand
from ..importer import IMPORT_KINDS

IMPORT_HELP = {
    'demands': 'Import the demands workbook.',
    'licenses': 'Import the environmental licenses workbook.',
    'processes': 'Import the administrative processes workbook.',
    'notifications': 'Import the notifications workbook.',
    'notification-items': 'Import notification items and update client summaries.',
    'condicionantes': 'Import license conditions and update client summaries.'
}

@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.pass_context
def cli(ctx, debug: bool):
    """Client dashboard import and TV tool"""
    # Store debug flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    
    # Initialize config and store in context
    try:
        config = Config.from_env()
        ctx.obj['config'] = config
    except Exception as e:
        setup_logging(debug=debug)
        click.echo(f"Error initializing configuration: {str(e)}", err=True)
        ctx.exit(1)

    setup_logging(debug=debug, log_dir=config.log_dir, level=config.log_level)
    logger = get_logger('cli')
    if debug:
        logger.debug("Debug mode enabled")
        logger.debug(f"Using database: {config.database_url}")

@cli.command()
@click.pass_context
def test_connection(ctx):
    """Test database connectivity"""
    try:
        command = TestConnectionCommand(ctx.obj['config'])
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@cli.command()
@click.pass_context
def init_db(ctx):
    """Create the dashboard tables"""
    try:
        command = InitDbCommand(ctx.obj['config'])
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@cli.command()
@click.argument('name')
@click.pass_context
def match(ctx, name: str):
    """Show how NAME would match the existing clients"""
    try:
        command = MatchCommand(ctx.obj['config'], name)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@cli.group('import')
def import_group():
    """Spreadsheet import commands"""
    pass

def make_import_command(kind: str) -> click.Command:
    @click.command(kind, help=IMPORT_HELP[kind])
    @click.argument('file', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
    @click.option('--output', type=click.Path(file_okay=True, dir_okay=False, path_type=Path), help='Save match results and stats to file')
    @click.option('--duplicates', type=click.Choice(['skip', 'update', 'overwrite']), help='What to do with records that already exist')
    @click.option('--interactive/--no-interactive', default=None, help='Review pending companies on the terminal')
    @click.option('--accept-suggestions', is_flag=True, help='Without review, link companies to their best suggestion')
    @click.option('--create-missing', is_flag=True, help='Without review, create clients for unmatched companies')
    @click.option('--keep-unmatched', is_flag=True, help='Write records of unresolved companies without a client')
    @click.pass_context
    def command(
        ctx,
        file: Path,
        output: Optional[Path],
        duplicates: Optional[str],
        interactive: Optional[bool],
        accept_suggestions: bool,
        create_missing: bool,
        keep_unmatched: bool
    ):
        try:
            ImportFileCommand(
                ctx.obj['config'],
                kind,
                file,
                output_file=output,
                policy=duplicates,
                interactive=interactive,
                accept_suggestions=accept_suggestions,
                create_missing=create_missing,
                keep_unmatched=keep_unmatched
            ).execute()
        except click.Abort:
            raise
        except Exception as e:
            click.secho(f"Error: {str(e)}", fg='red')
            raise click.Abort()
    return command

for _kind in IMPORT_KINDS:
    import_group.add_command(make_import_command(_kind))

@cli.group()
def pdf():
    """Monthly PDF report commands"""
    pass

@pdf.command('import')
@click.argument('file', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.pass_context
def pdf_import(ctx, file: Path):
    """Register a report, parse it and match its clients"""
    try:
        command = PdfImportCommand(ctx.obj['config'], file)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@pdf.command('list')
@click.argument('import_id', required=False)
@click.option('--limit', type=int, default=20, help='Number of most recent imports to show')
@click.pass_context
def pdf_list(ctx, import_id: Optional[str], limit: int):
    """List imports, or the detected clients of IMPORT_ID"""
    try:
        command = PdfListCommand(ctx.obj['config'], import_id, limit)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@pdf.command('link')
@click.argument('detected_id')
@click.argument('client_id')
@click.option('--alias', is_flag=True, help='Remember this spelling for future imports')
@click.pass_context
def pdf_link(ctx, detected_id: str, client_id: str, alias: bool):
    """Link a detected client to a dashboard client"""
    try:
        command = PdfLinkCommand(ctx.obj['config'], detected_id, client_id, alias)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@pdf.command('complete')
@click.argument('import_id')
@click.option('--auto-only', is_flag=True, help='Leave out manually linked clients')
@click.pass_context
def pdf_complete(ctx, import_id: str, auto_only: bool):
    """Attach the metrics of matched clients and close the import"""
    try:
        command = PdfCompleteCommand(ctx.obj['config'], import_id, include_linked=not auto_only)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@pdf.command('delete')
@click.argument('import_id')
@click.confirmation_option(prompt='Delete this import and its metrics?')
@click.pass_context
def pdf_delete(ctx, import_id: str):
    """Delete a report import"""
    try:
        command = PdfDeleteCommand(ctx.obj['config'], import_id)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()

@cli.command()
@click.option('--cycles', type=int, help='Stop after this many scene changes')
@click.option('--start', type=int, default=0, help='Index of the first scene')
@click.pass_context
def tv(ctx, cycles: Optional[int], start: int):
    """Rotate the dashboard scenes on this terminal"""
    try:
        command = TVCommand(ctx.obj['config'], cycles, start)
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()
