"""Sync daily app install/uninstall counts from the Partner API to Google Sheets.

Usage::

    python event_sync.py <access-token> <app-id> <partner-id> [YYYY-MM-DD]

Events occurring on or after local midnight (GMT+7) of the given date, today
by default, are counted per local day and written to the tab named after the
app: existing date rows are updated in place, new dates are appended.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional

import gspread
import requests
from google.auth.exceptions import GoogleAuthError

from core import daily_stats, sheets
from core.day_window import day_window, parse_target_date
from core.logging_utils import error, info, ok, warn
from core.partners_api import PartnersAPIError, PartnersClient

import config


def _date_arg(text: str):
    try:
        return parse_target_date(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="event_sync",
        description="Count app relationship events per day and upsert them into Google Sheets.",
    )
    parser.add_argument("access_token", help="Partner API access token.")
    parser.add_argument("app_id", help="Partner API app id, e.g. gid://partners/App/123.")
    parser.add_argument("partner_id", help="Partner organization id.")
    parser.add_argument(
        "date",
        nargs="?",
        type=_date_arg,
        default=None,
        help="Start date YYYY-MM-DD in GMT+7 (default: today).",
    )
    return parser.parse_args(argv)


def run(
    args: argparse.Namespace,
    client: Optional[PartnersClient] = None,
    open_worksheet: Optional[Callable[[str, str], gspread.Worksheet]] = None,
) -> int:
    window = day_window(target=args.date)
    info(f"startOfDay: {window.start_iso()}, endOfDay: {window.end_iso()}")

    client = client or PartnersClient(args.access_token, args.partner_id)
    open_worksheet = open_worksheet or sheets.open_ws

    try:
        app_name = client.fetch_app_name(args.app_id)
    except PartnersAPIError as e:
        error(f"Unable to resolve app name for {args.app_id}: {e}")
        return 1
    info(f"App: {app_name}")

    fetched = client.fetch_events(args.app_id, window.start_iso())
    if not fetched.complete:
        warn(
            f"Partial data: event fetch stopped after {fetched.pages} page(s) "
            f"({fetched.error}); counts may be under-reported."
        )
    if fetched.skipped:
        warn(f"Skipped {fetched.skipped} event(s) with unrecognized data.")

    stats = daily_stats.build_daily_stats(fetched.events)
    dates = daily_stats.sorted_dates(stats)
    info(f"Counted {daily_stats.total_events(stats)} events over {len(dates)} day(s).")

    try:
        ws = open_worksheet(config.GOOGLE_SHEET_ID, app_name)
        result = sheets.upsert_daily_rows(ws, dates, stats)
    except (gspread.exceptions.GSpreadException, GoogleAuthError, requests.RequestException, OSError) as e:
        error(f"Failed to write to Google Sheets: {e}")
        return 1

    ok(
        f"{app_name}: {len(dates)} day(s) synced, {result.updated} updated, {result.appended} appended"
        + (", header written" if result.header_written else "")
    )
    print("Data written to Google Sheets successfully")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return run(parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
