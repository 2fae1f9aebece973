"""
Logging configuration for the painel CLI.
Provides consistent logging setup across all commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

class DebugFormatter(logging.Formatter):
    """Formatter with timestamp and logger name, colored on a terminal."""
    
    def format(self, record: logging.LogRecord) -> str:
        message = f"[{record.created:.3f}] {record.levelname} {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        if sys.stderr.isatty():
            color = '\033[0;31m' if record.levelno >= logging.WARNING else '\033[0;36m'
            return f"{color}{message}\033[0m"
        return message

def setup_logging(debug: bool = False, log_dir: Optional[Path] = None, level: str = 'INFO') -> None:
    """Setup logging configuration.
    
    Args:
        debug: Enable debug logging, overriding level
        log_dir: Also write an import.log file in this directory
        level: Log level name used when debug is off
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))
    
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(DebugFormatter())
    root_logger.addHandler(console_handler)

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / 'import.log', encoding='utf-8')
        file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        root_logger.addHandler(file_handler)
    
    # Always keep SQLAlchemy logging at WARNING level
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)
    # pypdf is chatty about malformed objects in generated reports
    logging.getLogger('pypdf').setLevel(logging.ERROR)

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
