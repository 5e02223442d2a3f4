"""Tests for the Video model and YouTube API item parsing."""

import dataclasses
from datetime import datetime, timezone

import pytest

from factories import api_item, make_video
from yttui.youtube.models import (
    parse_duration,
    parse_rfc3339,
    parse_timestamp,
    video_from_api,
    videos_from_api,
)


class TestVideo:
    def test_canonical_url(self):
        assert make_video("dQw4w9WgXcQ").canonical_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_immutable(self):
        video = make_video("a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            video.title = "changed"


class TestParseTimestamp:
    def test_zulu(self):
        assert parse_timestamp("2024-01-15T10:00:00Z") == datetime(2024, 1, 15, 10, tzinfo=timezone.utc)

    def test_offset_converted_to_utc(self):
        dt = parse_timestamp("2024-01-15T12:00:00+02:00")
        assert dt == datetime(2024, 1, 15, 10, tzinfo=timezone.utc)
        assert dt.tzinfo == timezone.utc

    def test_naive_taken_as_utc(self):
        assert parse_timestamp("2024-01-15T10:00:00") == datetime(2024, 1, 15, 10, tzinfo=timezone.utc)

    def test_invalid(self):
        assert parse_timestamp("yesterday") is None

    def test_empty(self):
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None


class TestParseRfc3339:
    def test_zulu(self):
        assert parse_rfc3339("2024-06-01T00:00:00Z") == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_offset(self):
        assert parse_rfc3339("2024-06-01T02:00:00+02:00") == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_fractional_seconds(self):
        assert parse_rfc3339("2024-06-01T00:00:00.5Z") is not None

    def test_date_only_rejected(self):
        assert parse_rfc3339("2024-06-01") is None

    def test_missing_offset_rejected(self):
        assert parse_rfc3339("2024-06-01T00:00:00") is None

    def test_invalid_values(self):
        assert parse_rfc3339("2024-13-45T00:00:00Z") is None
        assert parse_rfc3339("") is None
        assert parse_rfc3339(None) is None


class TestParseDuration:
    def test_minutes_seconds(self):
        assert parse_duration("PT4M13S") == 253

    def test_hours(self):
        assert parse_duration("PT1H2M3S") == 3723

    def test_seconds_only(self):
        assert parse_duration("PT45S") == 45

    def test_days(self):
        assert parse_duration("P1DT1S") == 86401

    def test_zero(self):
        assert parse_duration("P0D") == 0

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration("four minutes")


class TestVideoFromApi:
    def test_full_item(self):
        video = video_from_api(api_item("abc123"))
        assert video.id == "abc123"
        assert video.title == "Title abc123"
        assert video.creator == "Some Channel"
        assert video.creator_id == "UC123"
        assert video.description == "desc"
        assert video.duration_seconds == 253
        assert video.view_count == 1500
        assert video.published_at == datetime(2024, 1, 15, 10, tzinfo=timezone.utc)
        assert video.thumbnail_url == "https://i.ytimg.com/high.jpg"
        assert video.canonical_url.endswith("v=abc123")

    def test_missing_statistics_and_duration(self):
        item = api_item("x")
        del item["statistics"]
        del item["contentDetails"]
        video = video_from_api(item)
        assert video.view_count == 0
        assert video.duration_seconds == 0

    def test_missing_id(self):
        with pytest.raises(ValueError, match="no id"):
            video_from_api(api_item(""))

    def test_bad_date(self):
        item = api_item("x")
        item["snippet"]["publishedAt"] = "not a date"
        with pytest.raises(ValueError, match="published date"):
            video_from_api(item)

    def test_bad_duration(self):
        item = api_item("x", contentDetails={"duration": "forever"})
        with pytest.raises(ValueError):
            video_from_api(item)


class TestVideosFromApi:
    def test_skips_bad_items(self):
        bad = api_item("bad", contentDetails={"duration": "??"})
        videos = videos_from_api([api_item("a"), bad, api_item("b")])
        assert [v.id for v in videos] == ["a", "b"]

    def test_empty(self):
        assert videos_from_api([]) == []
