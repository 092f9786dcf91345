from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import gspread
from google.oauth2.service_account import Credentials

import config

from .daily_stats import SHEET_HEADER, DailyStats, stat_row
from .logging_utils import debug, info

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
LAST_COL = "E"


@dataclass
class UpsertResult:
    updated: int = 0
    appended: int = 0
    header_written: bool = False


def _client(credentials_file: str = config.GOOGLE_CREDENTIALS_FILE):
    creds = Credentials.from_service_account_file(credentials_file, scopes=SCOPES)
    return gspread.authorize(creds)


def open_spreadsheet(sheet_id: str) -> gspread.Spreadsheet:
    return _client().open_by_key(sheet_id)


def open_ws(sheet_id: str, title: str, rows: int = 1000, cols: int = 26) -> gspread.Worksheet:
    ss = open_spreadsheet(sheet_id)
    try:
        ws = ss.worksheet(title)
    except gspread.WorksheetNotFound:
        info(f"Creating tab '{title}'")
        ws = ss.add_worksheet(title=title, rows=rows, cols=cols)
    return ws


def header_matches(row: Sequence[Any]) -> bool:
    return list(row) == SHEET_HEADER


def build_date_row_map(values: List[List[Any]]) -> Dict[str, int]:
    """Map the column-A value of every non-empty row to its 1-indexed row number."""

    mapping = {}
    for i, row in enumerate(values, start=1):
        if row and isinstance(row[0], str) and row[0]:
            mapping[row[0]] = i
    return mapping


def upsert_daily_rows(ws: gspread.Worksheet, dates: List[str], stats: DailyStats) -> UpsertResult:
    """Write one row per date: update rows whose date is already in column A,
    append the rest as one block after the existing data."""

    result = UpsertResult()
    header = ws.get(f"A1:{LAST_COL}1")
    if not header or not header_matches(header[0]):
        ws.update(range_name=f"A1:{LAST_COL}1", values=[SHEET_HEADER], value_input_option="RAW")
        result.header_written = True

    # read after any header write so row 1 never maps to a date
    existing = ws.get(f"A:{LAST_COL}")
    next_row = 2 if result.header_written else len(existing) + 1

    date_rows = build_date_row_map(existing)

    pending = []
    for day in dates:
        row = stat_row(day, stats.get(day, {}))
        if day in date_rows:
            n = date_rows[day]
            debug(f"updating row {n} for {day}")
            ws.update(range_name=f"A{n}:{LAST_COL}{n}", values=[row], value_input_option="RAW")
            result.updated += 1
        else:
            pending.append(row)

    if pending:
        ws.append_rows(pending, value_input_option="RAW", table_range=f"A{next_row}")
        result.appended = len(pending)

    info(f"[{ws.title}] Updated {result.updated} rows, appended {result.appended} rows.")
    return result
