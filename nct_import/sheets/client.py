from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

"""Google Sheets values client.

Fetches one tab of a Google Sheet as a grid through the Sheets v4 REST API
with an API key:

1. GET /v4/spreadsheets/{id}?fields=sheets.properties  -> resolve gid to tab title
2. GET /v4/spreadsheets/{id}/values/{title}             -> rows of cell strings

Supported URL forms:
    https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit#gid={GID}
    https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit?gid={GID}
"""

__all__ = [
    "SheetsError",
    "SheetRef",
    "SheetsClient",
    "parse_sheet_url",
    "SHEETS_API_BASE",
]

logger = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 30.0

_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
_GID_RE = re.compile(r"[#?&]gid=(\d+)")


class SheetsError(Exception):
    """Raised when a sheet URL is invalid or the Sheets API call fails."""


@dataclass(frozen=True)
class SheetRef:
    spreadsheet_id: str
    gid: int = 0


def parse_sheet_url(url: str) -> SheetRef:
    """Extract spreadsheet id and tab gid from a Google Sheets URL.

    gid defaults to 0 (the first tab) when the URL carries none.

    Raises:
        SheetsError: If the URL has no /spreadsheets/d/<id> part
    """
    id_match = _ID_RE.search(url)
    if id_match is None:
        raise SheetsError(
            "Could not parse spreadsheet ID from URL. Use a standard Google Sheets URL."
        )
    gid_match = _GID_RE.search(url)
    gid = int(gid_match.group(1)) if gid_match else 0
    return SheetRef(spreadsheet_id=id_match.group(1), gid=gid)


def _api_error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return f"HTTP {response.status_code}"


class SheetsClient:
    """Thin requests-based client for the Sheets values API."""

    def __init__(
        self,
        api_key: str | None,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, url: str, params: dict[str, str]) -> requests.Response:
        if self.api_key:
            params = {**params, "key": self.api_key}
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise SheetsError(f"Sheets API request failed: {e}") from e

    def resolve_sheet_title(self, ref: SheetRef) -> str:
        """Return the title of the tab whose sheetId equals ref.gid.

        Falls back to the first tab when no tab matches.
        """
        url = f"{SHEETS_API_BASE}/{ref.spreadsheet_id}"
        response = self._get(url, {"fields": "sheets.properties"})
        if not response.ok:
            msg = _api_error_message(response)
            if "not enabled" in msg:
                raise SheetsError(
                    "Google Sheets API is not enabled for your API key. Enable the "
                    '"Google Sheets API" for the key\'s project in console.cloud.google.com.'
                )
            raise SheetsError(f"Sheets API error: {msg}")

        sheets: list[dict[str, Any]] = response.json().get("sheets") or []
        for sheet in sheets:
            props = sheet.get("properties") or {}
            if props.get("sheetId") == ref.gid and props.get("title"):
                return str(props["title"])
        if sheets and (sheets[0].get("properties") or {}).get("title"):
            logger.debug("gid %s not found, using first sheet", ref.gid)
            return str(sheets[0]["properties"]["title"])
        raise SheetsError("No sheets found in the spreadsheet.")

    def fetch_values(self, ref: SheetRef, title: str) -> list[list[str]]:
        """Fetch every value of a tab as a grid of strings."""
        url = f"{SHEETS_API_BASE}/{ref.spreadsheet_id}/values/{quote(title, safe='')}"
        response = self._get(url, {})
        if not response.ok:
            raise SheetsError(f"Failed to fetch sheet data: {_api_error_message(response)}")
        values = response.json().get("values") or []
        # API は末尾の空セルを省略するので行長は不揃い
        return [["" if v is None else str(v) for v in row] for row in values]

    def fetch_grid(self, url: str) -> list[list[str]]:
        """Resolve a Google Sheets URL and fetch its tab as a grid.

        Raises:
            SheetsError: On URL, transport or API errors
        """
        ref = parse_sheet_url(url)
        title = self.resolve_sheet_title(ref)
        logger.debug("fetching sheet '%s' from %s", title, ref.spreadsheet_id)
        return self.fetch_values(ref, title)
