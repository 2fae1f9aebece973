"""Header-driven column detection for spreadsheets."""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..exceptions import ImportFileError
from .normalization import normalize_text

PREFERRED_SHEETS = ('data', 'dados')


def cell_text(value) -> str:
    """Stripped text of a cell; whole floats lose their ".0"."""
    if value is None:
        return ''
    if isinstance(value, float):
        if math.isnan(value):
            return ''
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def find_column(headers: Sequence, aliases: Sequence[str], contains: bool = False) -> int:
    """Find the index of the first header matching one of the aliases.

    Aliases are tried in order, so the first alias has priority over later
    ones even when a later alias appears earlier in the header row.

    Args:
        headers: Header row cells
        aliases: Acceptable header names for one logical field
        contains: Match when the alias appears anywhere in the header

    Returns:
        Column index, or -1 when no header matches
    """
    normalized = [normalize_text(header) for header in headers]
    for alias in aliases:
        wanted = normalize_text(alias)
        for index, header in enumerate(normalized):
            if not header:
                continue
            if header == wanted or (contains and wanted in header):
                return index
    return -1


@dataclass
class ColumnMap:
    """Resolved logical field -> column index mapping."""

    indexes: Dict[str, int] = field(default_factory=dict)

    def has(self, name: str) -> bool:
        return self.indexes.get(name, -1) >= 0

    def get(self, row: Sequence, name: str):
        """Return the cell for a logical field, or None when unmapped."""
        index = self.indexes.get(name, -1)
        if index < 0 or index >= len(row):
            return None
        return row[index]

    def text(self, row: Sequence, name: str) -> str:
        return cell_text(self.get(row, name))

    def optional(self, row: Sequence, name: str) -> Optional[str]:
        """Cell text, or None when empty."""
        return cell_text(self.get(row, name)) or None

    def require(self, *names: str) -> None:
        """Raise ImportFileError if any of the fields is unmapped."""
        missing = [name for name in names if not self.has(name)]
        if missing:
            raise ImportFileError(f"required column not found: {', '.join(missing)}")


def map_columns(headers: Sequence, aliases: Dict[str, List[str]], contains: bool = False) -> ColumnMap:
    """Resolve every logical field in an alias table against a header row."""
    return ColumnMap({
        name: find_column(headers, names, contains=contains)
        for name, names in aliases.items()
    })


def select_sheet(sheet_names: Sequence[str]) -> Optional[str]:
    """Pick the sheet named "data"/"dados", falling back to the first one."""
    for name in sheet_names:
        if normalize_text(name) in PREFERRED_SHEETS:
            return name
    return sheet_names[0] if sheet_names else None
