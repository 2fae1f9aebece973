"""
Base command infrastructure for the painel CLI.
Provides common functionality and utilities for all commands.
"""

import click
import functools
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

from .config import Config

from ..context import ImportContext
from ..db.session import SessionManager
from ..exceptions import ImportFileError
from ..matching.matcher import Matcher
from ..processors.error_tracker import ErrorTracker

class BaseCommand(ABC):
    """Base class for all CLI commands."""
    
    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()
        self._session_manager = None
        
        # Get debug status from click context
        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
        if self.debug:
            self.logger.debug(f"Debug mode enabled for {self.__class__.__name__}")
    
    @property
    def session_manager(self) -> SessionManager:
        """Get or create the session manager."""
        if self._session_manager is None:
            if self.debug:
                self.logger.debug(f"Creating new engine for {self.config.database_url}")
            self._session_manager = SessionManager(self.config.database_url)
        return self._session_manager

    def build_context(self) -> ImportContext:
        return ImportContext(user_name=self.config.user_name)

    def build_matcher(self) -> Matcher:
        return Matcher(
            auto_accept_score=self.config.auto_accept_score,
            suggest_threshold=self.config.suggest_threshold,
            max_suggestions=self.config.max_suggestions,
            debug=self.debug
        )
    
    @abstractmethod
    def execute(self) -> None:
        """Execute the command. Must be implemented by subclasses."""
        pass
    
    def validate(self) -> bool:
        """Validate command configuration and requirements.
        
        Returns:
            bool: True if validation passes, False otherwise
        """
        if self.debug:
            self.logger.debug("Validating command configuration")
        return self.config.validate()

class FileInputCommand(BaseCommand):
    """Base class for commands that read one input file."""

    # Accepted extensions, lower case; empty accepts anything
    suffixes: Tuple[str, ...] = ()
    
    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config)
        self.input_file = Path(input_file)
        self.output_file = output_file
    
    def validate(self) -> bool:
        """Validate the input file before anything is parsed.

        Raises:
            ImportFileError: If the file is missing or has an unsupported type
        """
        if not super().validate():
            return False

        if not self.input_file.is_file():
            raise ImportFileError(f"input file not found: {self.input_file}")

        if self.suffixes and self.input_file.suffix.lower() not in self.suffixes:
            raise ImportFileError(
                f"{self.input_file.name}: unsupported file type, expected {', '.join(self.suffixes)}"
            )

        if self.debug:
            self.logger.debug(f"Input file {self.input_file} ({self.input_file.stat().st_size} bytes)")
        return True

def command_error_handler(f):
    """Decorator to handle command execution errors consistently."""
    @functools.wraps(f)
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            if self.debug:
                self.logger.debug(f"Starting command execution: {f.__name__}")
            
            result = f(self, *args, **kwargs)
            
            if self.debug:
                self.logger.debug(f"Command completed in {time.time() - start:.3f}s")
            
            return result

        except (click.exceptions.Exit, click.Abort):
            raise
        except Exception as e:
            self.error_tracker.add_error(
                'COMMAND_EXECUTION_ERROR',
                f"Command failed: {str(e)}",
                {
                    'command': self.__class__.__name__,
                    'error': str(e)
                }
            )
            click.secho(f"Error: {str(e)}", fg='red', err=True)
            if self.debug:
                self.logger.debug(f"Command failed with error: {str(e)}", exc_info=True)
            raise click.Abort()
    return wrapper
