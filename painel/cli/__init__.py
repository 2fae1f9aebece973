"""
CLI module for the painel package.
Provides command-line interface functionality and utilities.
"""

from .base import BaseCommand
from .config import Config
from .logging import setup_logging, get_logger
from .main import cli

__all__ = ['BaseCommand', 'Config', 'setup_logging', 'get_logger', 'cli']
