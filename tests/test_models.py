"""Tests for seance.core.models — SessionInfo helpers and export format."""

from datetime import datetime, timedelta, timezone

import pytest

from seance.core.models import ZERO_TIME, SessionInfo, format_rfc3339


def _info(**kw):
    fields = {"id": "d6d8475f-94a9-4a66-bfa6-d60126964427", "path": "/p", "file_path": "/x.jsonl"}
    fields.update(kw)
    return SessionInfo(**fields)


class TestShortId:
    def test_long_id_truncated(self):
        assert _info().short_id() == "d6d8475f"

    @pytest.mark.parametrize("sid", ["abc", "12345678", ""])
    def test_short_id_unchanged(self, sid):
        assert _info(id=sid).short_id() == sid


class TestFormatTime:
    def test_unknown(self):
        assert _info().format_time() == "unknown"

    def test_formatted(self):
        ts = datetime(2025, 12, 30, 15, 42, 59, tzinfo=timezone.utc)
        assert _info(start_time=ts).format_time() == "2025-12-30 15:42"


class TestRigFromPath:
    @pytest.mark.parametrize("path,rig", [
        ("/Users/stevey/gt/gastown/crew/joe", "gastown"),
        ("/Users/stevey/gt/beads/polecats/jade", "beads"),
        ("/Users/stevey/gt", ""),
        ("/Users/stevey/src/blog", ""),
    ])
    def test_rig(self, path, rig):
        assert _info(path=path).rig_from_path() == rig


class TestDisplayTopic:
    def test_topic_preferred(self):
        assert _info(topic="handoff", summary="Summary").display_topic() == "handoff"

    def test_summary_fallback(self):
        assert _info(summary="Summary").display_topic() == "Summary"

    def test_empty(self):
        assert _info().display_topic() == ""


class TestToDict:
    def test_field_names(self):
        assert list(_info().to_dict()) == [
            "id", "path", "role", "topic", "start_time", "summary", "is_gastown", "file_path",
        ]

    def test_values(self):
        ts = datetime(2025, 12, 30, 15, 42, tzinfo=timezone.utc)
        d = _info(role="witness", topic="handoff", start_time=ts, is_gastown=True).to_dict()
        assert d["start_time"] == "2025-12-30T15:42:00Z"
        assert d["role"] == "witness"
        assert d["is_gastown"] is True

    def test_unset_start_time(self):
        assert _info().to_dict()["start_time"] == ZERO_TIME


class TestFormatRfc3339:
    def test_offset_kept(self):
        ts = datetime(2025, 12, 30, 16, 42, tzinfo=timezone(timedelta(hours=1)))
        assert format_rfc3339(ts) == "2025-12-30T16:42:00+01:00"

    def test_fractional_utc(self):
        ts = datetime(2025, 12, 30, 15, 42, 0, 123000, tzinfo=timezone.utc)
        assert format_rfc3339(ts) == "2025-12-30T15:42:00.123Z"

    @pytest.mark.parametrize("micro,expected", [
        (0, "2025-12-30T15:42:00Z"),
        (500000, "2025-12-30T15:42:00.5Z"),
        (1, "2025-12-30T15:42:00.000001Z"),
    ])
    def test_trailing_zeros_trimmed(self, micro, expected):
        ts = datetime(2025, 12, 30, 15, 42, 0, micro, tzinfo=timezone.utc)
        assert format_rfc3339(ts) == expected

    def test_negative_offset(self):
        ts = datetime(2025, 12, 30, 10, 42, tzinfo=timezone(-timedelta(hours=5, minutes=30)))
        assert format_rfc3339(ts) == "2025-12-30T10:42:00-05:30"


class TestImmutability:
    def test_frozen(self):
        info = _info()
        with pytest.raises(AttributeError):
            info.role = "mayor"
