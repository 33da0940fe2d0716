from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from openpyxl import load_workbook


def _worksheet(workbook, sheet_name: Optional[str]):
    if sheet_name is None:
        return workbook.worksheets[0]
    if sheet_name not in workbook.sheetnames:
        raise ValueError(f'Worksheet "{sheet_name}" not found')
    return workbook[sheet_name]


def read_excel(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Reads a worksheet whose first row holds column headers.

    Args:
        file_path: Path to the .xlsx file.
        sheet_name: Worksheet to read. Defaults to the first one.

    Returns:
        One dict per data row, keyed by header. Columns without a header are
        dropped; empty cells are left out of the row.

    Raises:
        ValueError: If the named worksheet does not exist.
    """
    workbook = load_workbook(file_path, read_only=True, data_only=True)
    try:
        rows = _worksheet(workbook, sheet_name).iter_rows(values_only=True)
        headers = [str(value) if value is not None else "" for value in next(rows, ())]
        data = []
        for row in rows:
            data.append({
                header: value
                for header, value in zip(headers, row)
                if header and value is not None
            })
        return data
    finally:
        workbook.close()


def read_excel_cell(file_path: Union[str, Path], sheet_name: str, cell_address: str) -> Any:
    """Returns the value of one cell, e.g. read_excel_cell(path, "Sheet1", "B2")."""
    workbook = load_workbook(file_path, data_only=True)
    return _worksheet(workbook, sheet_name)[cell_address].value


def get_excel_sheet_names(file_path: Union[str, Path]) -> List[str]:
    workbook = load_workbook(file_path, read_only=True)
    try:
        return list(workbook.sheetnames)
    finally:
        workbook.close()
