"""Error types raised by the import pipeline."""


class ImportFileError(ValueError):
    """An input file could not be turned into records.

    Raised for unreadable workbooks, missing required columns and files
    that yield no valid rows. Nothing from the file is written.
    """


class NoValidRowsError(ImportFileError):
    """The file was readable but produced no usable rows."""

    def __init__(self, source: str = ''):
        message = "no valid rows found"
        if source:
            message = f"{message} in {source}"
        super().__init__(message)


class DuplicateFileError(ImportFileError):
    """A report with the same content hash was already imported."""

    def __init__(self, filename: str, imported_at=None):
        self.filename = filename
        self.imported_at = imported_at
        when = f" on {imported_at:%d/%m/%Y}" if imported_at else ""
        super().__init__(f"{filename} was already imported{when}")


class ReconciliationError(RuntimeError):
    """An invalid action was requested on a reconciliation session."""
