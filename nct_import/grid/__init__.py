from .reader import GridReadError, parse_csv_line, parse_csv_text, read_csv_file, read_excel_grid, read_grid

__all__ = [
    "GridReadError",
    "parse_csv_line",
    "parse_csv_text",
    "read_csv_file",
    "read_excel_grid",
    "read_grid",
]
