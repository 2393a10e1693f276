from __future__ import annotations

import csv
import io
from pathlib import Path

import pandas as pd

"""Grid readers: turn CSV text and spreadsheet files into a list of text rows.

The hierarchy parser only understands a Grid (list[list[str]]): every cell is
a string and blank cells are "". These readers produce that shape from

- CSV text (tokenized with the csv module, quoted cells may span lines)
- .csv files (same tokenizer, UTF-8 with optional BOM)
- .xlsx files (one sheet, read with pandas without a header row)

Row order and ragged row lengths are preserved.
"""

__all__ = [
    "GridReadError",
    "parse_csv_line",
    "parse_csv_text",
    "read_csv_file",
    "read_excel_grid",
    "read_grid",
]


class GridReadError(Exception):
    """Raised when an input file cannot be read into a grid."""


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line into trimmed cells.

    Double quotes delimit a field, "" inside quotes is a literal quote and a
    comma inside quotes is part of the cell.
    """
    row = next(csv.reader([line]), [])
    return [c.strip() for c in row] or [""]


def parse_csv_text(text: str) -> list[list[str]]:
    """Tokenize CSV text into a grid of trimmed cells.

    A quoted field may span lines (multi-line Description cells); blank lines
    become empty rows, which the parser ignores.
    """
    return [[c.strip() for c in row] for row in csv.reader(io.StringIO(text))]


def read_csv_file(path: Path) -> list[list[str]]:
    """Read a .csv file into a grid.

    Raises:
        GridReadError: If the file is missing or not valid UTF-8
    """
    try:
        # utf-8-sig: Excel 出力の BOM を除去
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise GridReadError(f"file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise GridReadError(f"cannot read {path.name}: {e}") from e
    try:
        return parse_csv_text(text)
    except csv.Error as e:
        raise GridReadError(f"malformed csv {path.name}: {e}") from e


def _cell_text(value: object) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        # pandas は整数列を float 化するため "2000.0" -> "2000"
        return str(int(value))
    return str(value)


def read_excel_grid(path: Path, sheet: str | None = None) -> list[list[str]]:
    """Read one sheet of an .xlsx workbook into a grid.

    Parameters
    ----------
    path: Excel ファイルパス
    sheet: シート名 (None なら先頭シート)

    Raises:
        GridReadError: If the workbook cannot be opened or the sheet is missing
    """
    if not path.exists():
        raise GridReadError(f"file not found: {path}")
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:
        raise GridReadError(f"cannot open workbook {path.name}: {e}") from e
    with xls:
        names = [str(n) for n in xls.sheet_names]
        if not names:
            raise GridReadError(f"workbook {path.name} has no sheets")
        if sheet is None:
            sheet_name = names[0]
        elif sheet in names:
            sheet_name = sheet
        else:
            raise GridReadError(f"sheet '{sheet}' not found in {path.name} (available: {names})")

        # ヘッダなしで生読み; "NA" 等を NaN 化しない
        df = xls.parse(sheet_name, header=None, dtype=object, keep_default_na=False, na_values=[])

    grid: list[list[str]] = []
    for raw in df.itertuples(index=False, name=None):
        row = [_cell_text(v) for v in raw]
        # pandas はシート幅に揃えるので末尾の空セルを落とす
        while row and row[-1] == "":
            row.pop()
        grid.append(row)
    return grid


def read_grid(path: Path, sheet: str | None = None) -> list[list[str]]:
    """Read a .csv or .xlsx file into a grid, chosen by extension.

    Raises:
        GridReadError: For unsupported extensions and unreadable files
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return read_csv_file(path)
    if suffix == ".xlsx":
        return read_excel_grid(path, sheet=sheet)
    raise GridReadError(f"unsupported input type: {path.name} (expected .csv or .xlsx)")
