"""
Tests for the file and HTTP snapshot sources.
"""

import asyncio
import json
from pathlib import Path

import pytest
import requests

from freebusy.adapters import http_source
from freebusy.adapters.file_source import SAMPLE_SNAPSHOT_PATH, FileSnapshotSource
from freebusy.adapters.http_source import DISABLED_MESSAGE, UNAVAILABLE_MESSAGE, HttpSnapshotSource
from freebusy.domain.exceptions import SnapshotError

SAMPLE = json.loads(SAMPLE_SNAPSHOT_PATH.read_text(encoding="utf-8"))


class FakeResponse:
    """Just enough of requests.Response for the HTTP source."""

    def __init__(self, status_code: int, body=None, raw_text: str = None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.url = "http://localhost:8787/freebusy"
        self._body = body
        self._raw_text = raw_text

    def json(self):
        if self._raw_text is not None:
            raise ValueError(f"Expecting value: {self._raw_text!r}")
        return self._body


class TestFileSnapshotSource:
    """Tests for FileSnapshotSource."""

    def test_bundled_sample_is_default(self):
        snapshot = FileSnapshotSource().load()

        assert snapshot.owner_time_zone == "America/New_York"
        assert snapshot.window.start_date == "2025-12-29"

    def test_load_from_path(self, tmp_path: Path):
        snapshot_file = tmp_path / "snapshot.json"
        snapshot_file.write_text(json.dumps(SAMPLE), encoding="utf-8")

        snapshot = asyncio.run(FileSnapshotSource(snapshot_file).fetch_snapshot())

        assert snapshot.version == SAMPLE["version"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SnapshotError, match="not found"):
            FileSnapshotSource(tmp_path / "missing.json").load()

    def test_invalid_json(self, tmp_path: Path):
        snapshot_file = tmp_path / "snapshot.json"
        snapshot_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotError, match="Invalid JSON"):
            FileSnapshotSource(snapshot_file).load()

    def test_invalid_utf8(self, tmp_path: Path):
        snapshot_file = tmp_path / "snapshot.json"
        snapshot_file.write_bytes(b'{"version": "\xff"}')

        with pytest.raises(SnapshotError, match="not valid UTF-8"):
            FileSnapshotSource(snapshot_file).load()


class TestHttpSnapshotSource:
    """Tests for HttpSnapshotSource."""

    def test_successful_get(self, monkeypatch):
        calls = []

        def fake_get(url, headers, timeout):
            calls.append((url, headers, timeout))
            return FakeResponse(200, SAMPLE)

        monkeypatch.setattr(http_source.requests, "get", fake_get)

        snapshot = asyncio.run(HttpSnapshotSource("http://localhost:8787/freebusy", timeout=5).fetch_snapshot())

        assert snapshot.owner_time_zone == "America/New_York"
        assert calls == [("http://localhost:8787/freebusy", {"Accept": "application/json"}, 5)]

    def test_disabled_feed(self, monkeypatch):
        monkeypatch.setattr(http_source.requests, "get", lambda *a, **kw: FakeResponse(503, {"error": "disabled"}))

        with pytest.raises(SnapshotError) as exc_info:
            HttpSnapshotSource("http://localhost:8787/freebusy").get()

        assert str(exc_info.value) == DISABLED_MESSAGE

    def test_error_status(self, monkeypatch):
        monkeypatch.setattr(http_source.requests, "get", lambda *a, **kw: FakeResponse(500, raw_text="oops"))

        with pytest.raises(SnapshotError) as exc_info:
            HttpSnapshotSource("http://localhost:8787/freebusy").get()

        assert str(exc_info.value) == UNAVAILABLE_MESSAGE

    def test_rate_limited_is_unavailable(self, monkeypatch):
        monkeypatch.setattr(
            http_source.requests, "get", lambda *a, **kw: FakeResponse(429, {"error": "rate_limited"})
        )

        with pytest.raises(SnapshotError, match="problem getting availability"):
            HttpSnapshotSource("http://localhost:8787/freebusy").get()

    def test_invalid_json_body(self, monkeypatch):
        monkeypatch.setattr(http_source.requests, "get", lambda *a, **kw: FakeResponse(200, raw_text="<html>"))

        with pytest.raises(SnapshotError, match="not valid JSON"):
            HttpSnapshotSource("http://localhost:8787/freebusy").get()

    def test_connection_error(self, monkeypatch):
        def fake_get(*args, **kwargs):
            raise requests.exceptions.ConnectionError("connection refused")

        monkeypatch.setattr(http_source.requests, "get", fake_get)

        with pytest.raises(SnapshotError, match="connection refused"):
            HttpSnapshotSource("http://localhost:8787/freebusy").get()
