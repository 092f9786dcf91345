from datetime import date, datetime, timezone

import gspread
import pytest

import event_sync
from core.app_events import AppEvent, EventType
from core.daily_stats import SHEET_HEADER
from core.partners_api import FetchResult, PartnersAPIError
from fakes import FakeWorksheet


class FakeClient:
    def __init__(self, events=(), name="Test App", complete=True, name_error=None):
        self.events = list(events)
        self.name = name
        self.complete = complete
        self.name_error = name_error
        self.fetch_calls = []

    def fetch_app_name(self, app_id):
        if self.name_error:
            raise self.name_error
        return self.name

    def fetch_events(self, app_id, occurred_at_min):
        self.fetch_calls.append((app_id, occurred_at_min))
        return FetchResult(
            events=list(self.events),
            pages=1,
            complete=self.complete,
            error=None if self.complete else "HTTP 502: bad gateway",
        )


EVENTS = [
    AppEvent(EventType.INSTALLED, datetime(2024, 5, 1, 17, 0, tzinfo=timezone.utc)),
    AppEvent(EventType.UNINSTALLED, datetime(2024, 5, 1, 18, 0, tzinfo=timezone.utc)),
    AppEvent(EventType.INSTALLED, datetime(2024, 5, 2, 1, 0, tzinfo=timezone.utc)),
]


def test_parse_args_with_date():
    args = event_sync.parse_args(["tok", "gid://partners/App/1", "42", "2024-05-01"])
    assert args.access_token == "tok"
    assert args.partner_id == "42"
    assert args.date == date(2024, 5, 1)


def test_parse_args_date_optional():
    assert event_sync.parse_args(["tok", "app", "42"]).date is None


def test_missing_arguments_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        event_sync.parse_args(["tok", "app"])
    assert exc.value.code == 2


def test_malformed_date_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        event_sync.parse_args(["tok", "app", "42", "05/01/2024"])
    assert exc.value.code == 2


def test_run_writes_rows(capsys):
    ws = FakeWorksheet()
    opened = []

    def open_worksheet(sheet_id, title):
        opened.append(title)
        return ws

    client = FakeClient(EVENTS)
    args = event_sync.parse_args(["tok", "app", "42", "2024-05-02"])
    assert event_sync.run(args, client=client, open_worksheet=open_worksheet) == 0
    assert client.fetch_calls == [("app", "2024-05-01T17:00:00Z")]
    assert opened == ["Test App"]
    assert ws.rows == [SHEET_HEADER, ["2024-05-02", 2, 0, 0, 1]]
    assert "successfully" in capsys.readouterr().out


def test_partial_fetch_still_writes_and_warns(caplog):
    ws = FakeWorksheet()
    client = FakeClient(EVENTS[:1], complete=False)
    args = event_sync.parse_args(["tok", "app", "42", "2024-05-02"])
    assert event_sync.run(args, client=client, open_worksheet=lambda *_: ws) == 0
    assert ws.rows[1] == ["2024-05-02", 1, 0, 0, 0]
    assert "Partial data" in caplog.text


def test_app_name_failure_is_fatal():
    client = FakeClient(name_error=PartnersAPIError("App gid://x not found"))

    def open_worksheet(*_):
        raise AssertionError("sheet should not be opened")

    args = event_sync.parse_args(["tok", "app", "42"])
    assert event_sync.run(args, client=client, open_worksheet=open_worksheet) == 1
    assert client.fetch_calls == []


def test_sheet_failure_is_fatal(capsys):
    def open_worksheet(*_):
        raise gspread.exceptions.GSpreadException("quota exceeded")

    args = event_sync.parse_args(["tok", "app", "42", "2024-05-02"])
    assert event_sync.run(args, client=FakeClient(EVENTS), open_worksheet=open_worksheet) == 1
    assert "successfully" not in capsys.readouterr().out


def test_missing_credentials_file_is_fatal():
    def open_worksheet(*_):
        raise FileNotFoundError("credentials.json")

    args = event_sync.parse_args(["tok", "app", "42", "2024-05-02"])
    assert event_sync.run(args, client=FakeClient(EVENTS), open_worksheet=open_worksheet) == 1


def test_summary_reports_upsert_counts(caplog):
    ws = FakeWorksheet([SHEET_HEADER, ["2024-05-02", 9, 9, 9, 9]])
    args = event_sync.parse_args(["tok", "app", "42", "2024-05-02"])
    assert event_sync.run(args, client=FakeClient(EVENTS), open_worksheet=lambda *_: ws) == 0
    assert "1 updated, 0 appended" in caplog.text
    assert "header written" not in caplog.text
