"""Read the relevant sheet of a workbook as a header row plus data rows."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Tuple, Union

import pandas as pd

from ..exceptions import ImportFileError, NoValidRowsError
from ..utils.columns import cell_text, select_sheet

logger = logging.getLogger(__name__)


@dataclass
class SheetRows:
    """Raw content of one sheet.

    `rows` excludes the header and fully blank lines; `row_numbers` holds
    the 1-based spreadsheet line of each row for error messages.
    """
    name: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    row_numbers: List[int] = field(default_factory=list)

    def __iter__(self):
        return iter(zip(self.row_numbers, self.rows))


def _load_frame(path: Path) -> Tuple[str, pd.DataFrame]:
    if path.suffix.lower() == '.csv':
        return path.stem, pd.read_csv(path, header=None, dtype=object)

    sheets = pd.read_excel(path, sheet_name=None, header=None, dtype=object)
    sheet_name = select_sheet(list(sheets))
    if sheet_name is None:
        raise ImportFileError(f"{path.name} has no sheets")
    return sheet_name, sheets[sheet_name]


def read_rows(path: Union[str, Path]) -> SheetRows:
    """Read a workbook (or CSV) into a SheetRows.

    The sheet named "data" or "dados" is preferred, otherwise the first
    sheet is used. The first line is the header row.

    Args:
        path: Path to an .xlsx, .xls or .csv file

    Returns:
        SheetRows with empty cells as None

    Raises:
        ImportFileError: If the file cannot be read or has no data rows
    """
    path = Path(path)
    try:
        sheet_name, frame = _load_frame(path)
    except ImportFileError:
        raise
    except Exception as e:
        raise ImportFileError(f"could not read {path.name}: {e}") from e

    if frame.empty:
        raise NoValidRowsError(path.name)

    frame = frame.astype(object).where(pd.notna(frame), None)
    values = frame.values.tolist()

    sheet = SheetRows(name=str(sheet_name), headers=[cell_text(h) for h in values[0]])
    for offset, row in enumerate(values[1:], start=2):
        if all(cell_text(cell) == '' for cell in row):
            continue
        sheet.rows.append(row)
        sheet.row_numbers.append(offset)

    logger.debug(f"Read {len(sheet.rows)} rows from sheet {sheet.name!r} of {path.name}")
    return sheet
