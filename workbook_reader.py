import re
import logging
from typing import Callable, List, Optional, Tuple, Any

import pandas as pd
from openpyxl.utils.cell import range_boundaries

logger = logging.getLogger(__name__)

SheetPredicate = Callable[[str], bool]


def sheet_name_matcher(pattern: str) -> SheetPredicate:
    """
    Build a predicate that accepts sheet names matching ``pattern``.

    Args:
        pattern: Regular expression the whole sheet name must match

    Returns:
        Callable taking a sheet name and returning True when it matches
    """
    regex = re.compile(pattern)
    return lambda sheet_name: regex.fullmatch(sheet_name) is not None


class WorkbookReader:
    """
    Read-only access to the worksheets of an Excel workbook.

    Wraps a ``pandas.ExcelFile`` so the workbook is opened once and every
    lookup and range read goes through the same handle. Use it as a
    context manager to release the file afterwards.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._excel_file: Optional[pd.ExcelFile] = None

    def __enter__(self) -> "WorkbookReader":
        logger.debug("Opening workbook", extra={"file_path": self.file_path})
        self._excel_file = pd.ExcelFile(self.file_path, engine="openpyxl")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._excel_file is not None:
            self._excel_file.close()
            self._excel_file = None

    @property
    def excel_file(self) -> pd.ExcelFile:
        if self._excel_file is None:
            raise RuntimeError("Workbook is not open; use WorkbookReader as a context manager")
        return self._excel_file

    @property
    def sheet_names(self) -> List[str]:
        return list(self.excel_file.sheet_names)

    def find_sheet(self, predicate: SheetPredicate) -> Optional[str]:
        """
        Return the first sheet name (in workbook order) accepted by ``predicate``.

        Args:
            predicate: Callable deciding whether a sheet name is the wanted one

        Returns:
            The matching sheet name, or None when no sheet matches
        """
        for sheet_name in self.sheet_names:
            if predicate(sheet_name):
                logger.info(f"Found worksheet '{sheet_name}'", extra={"file_path": self.file_path})
                return sheet_name

        logger.warning(
            "No worksheet matched",
            extra={"file_path": self.file_path, "sheet_names": self.sheet_names}
        )
        return None

    def read_range(self, sheet_name: str, cell_range: str) -> List[Tuple[Any, ...]]:
        """
        Read an A1-style cell block (e.g. ``"A19:O49"``) as raw row tuples.

        Every tuple is as wide as the requested block even when trailing
        columns are empty in the file. Blank cells come back as None.

        Args:
            sheet_name: Name of the worksheet to read
            cell_range: Block to read in A1 notation

        Returns:
            List of row tuples, top to bottom
        """
        min_col, min_row, max_col, max_row = range_boundaries(cell_range)
        columns = list(range(min_col - 1, max_col))

        logger.debug(
            "Reading cell range",
            extra={"file_path": self.file_path, "sheet_name": sheet_name, "cell_range": cell_range}
        )
        df = pd.read_excel(
            self.excel_file,
            sheet_name=sheet_name,
            header=None,
            skiprows=min_row - 1,
            nrows=max_row - min_row + 1,
        )

        # Narrow to the requested columns, padding any the sheet does not have
        df = df.reindex(columns=columns)
        df = df.astype(object).where(pd.notna(df), None)

        rows = list(df.itertuples(index=False, name=None))
        logger.info(
            f"Read {len(rows)} rows from '{sheet_name}'!{cell_range}",
            extra={"file_path": self.file_path, "sheet_name": sheet_name}
        )
        return rows
