from .client import SheetRef, SheetsClient, SheetsError, parse_sheet_url

__all__ = ["SheetRef", "SheetsClient", "SheetsError", "parse_sheet_url"]
