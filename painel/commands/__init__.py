"""
Command implementations for the painel CLI.
Each submodule provides specific command functionality.
"""

from .imports import ImportFileCommand
from .pdf import (
    PdfCompleteCommand,
    PdfDeleteCommand,
    PdfImportCommand,
    PdfLinkCommand,
    PdfListCommand
)
from .tv import TVCommand
from .utils import InitDbCommand, MatchCommand, TestConnectionCommand

__all__ = [
    'ImportFileCommand',
    'PdfImportCommand',
    'PdfListCommand',
    'PdfLinkCommand',
    'PdfCompleteCommand',
    'PdfDeleteCommand',
    'TVCommand',
    'InitDbCommand',
    'MatchCommand',
    'TestConnectionCommand'
]
