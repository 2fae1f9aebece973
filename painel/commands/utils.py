"""
Utility commands for the painel CLI.
Provides helper commands for database setup, diagnostics and matching.
"""

import click
from sqlalchemy import text

from ..cli.base import BaseCommand, command_error_handler
from ..cli.config import Config
from ..db.lookups import load_aliases, load_targets

class TestConnectionCommand(BaseCommand):
    """Command to test database connectivity."""
    
    def __init__(self, config: Config):
        super().__init__(config)
    
    @command_error_handler
    def execute(self) -> None:
        """Execute the connection test."""
        self.logger.info("Testing database connection...")
        
        try:
            with self.session_manager as session:
                session.execute(text("SELECT 1")).scalar()
                
            click.secho(
                "Successfully connected to the database!",
                fg='green'
            )
            
        except Exception as e:
            self.logger.error(f"Connection failed: {str(e)}")
            raise click.Abort()

class InitDbCommand(BaseCommand):
    """Command to create the dashboard tables."""

    @command_error_handler
    def execute(self) -> None:
        self.session_manager.create_all()
        click.secho("Database tables created", fg='green')

class MatchCommand(BaseCommand):
    """Show how a company name would be matched against the clients."""

    def __init__(self, config: Config, name: str):
        super().__init__(config)
        self.name = name

    @command_error_handler
    def execute(self) -> None:
        with self.session_manager as session:
            targets = load_targets(session)
            aliases = load_aliases(session)

        result = self.build_matcher().match(self.name, targets, aliases)
        color = {'exact': 'green', 'suggested': 'yellow', 'none': 'red'}[result.match_type.value]
        click.secho(f"{result.source_name}: {result.match_type.value}", fg=color, bold=True)
        if result.via_alias:
            click.echo(f"  via alias -> {result.matched_name}")
        for candidate in result.suggestions:
            marker = '*' if candidate.target_id == result.matched_id else ' '
            click.echo(f" {marker} {candidate.target_name} ({candidate.score:.0%})")
        if not result.suggestions:
            click.echo("  no similar client found")

__all__ = ['TestConnectionCommand', 'InitDbCommand', 'MatchCommand']
