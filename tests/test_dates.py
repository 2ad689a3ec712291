"""Tests for regwatch.ingestion.dates — date normalization."""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone

from regwatch.ingestion.dates import (
    combine_date_time,
    extract_labeled_date,
    find_date_in_text,
    parse_date,
    split_title_and_date,
)


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestParseDate:
    def test_iso(self):
        assert parse_date("2025-06-15T10:00:00Z") == _utc(2025, 6, 15, 10, 0)

    def test_iso_with_offset_converted_to_utc(self):
        assert parse_date("2025-06-15T12:00:00+02:00") == _utc(2025, 6, 15, 10, 0)

    def test_rfc2822(self):
        assert parse_date("Sun, 15 Jun 2025 10:00:00 GMT") == _utc(2025, 6, 15, 10, 0)

    def test_ordinal_day(self):
        assert parse_date("23rd December 2025") == _utc(2025, 12, 23)

    def test_label_prefix(self):
        assert parse_date("Published: 12 March 2024") == _utc(2024, 3, 12)

    def test_italian_month(self):
        assert parse_date("12 gennaio 2025") == _utc(2025, 1, 12)

    def test_spanish_month(self):
        assert parse_date("3 de marzo de 2025") == _utc(2025, 3, 3)
        assert parse_date("15 enero 2025") == _utc(2025, 1, 15)

    def test_numeric_day_first(self):
        assert parse_date("12/03/2024") == _utc(2024, 3, 12)

    def test_numeric_with_time(self):
        assert parse_date("12/03/2024 14:30") == _utc(2024, 3, 12, 14, 30)

    def test_struct_time(self):
        parsed = time.strptime("2025-06-15 10:00", "%Y-%m-%d %H:%M")
        assert parse_date(parsed) == _utc(2025, 6, 15, 10, 0)

    def test_naive_datetime_assumed_utc(self):
        assert parse_date(datetime(2025, 1, 2, 3, 4)) == _utc(2025, 1, 2, 3, 4)

    def test_date_object(self):
        assert parse_date(date(2025, 1, 2)) == _utc(2025, 1, 2)

    def test_aware_datetime_converted(self):
        cet = timezone(timedelta(hours=1))
        assert parse_date(datetime(2025, 1, 2, 10, 0, tzinfo=cet)) == _utc(2025, 1, 2, 9, 0)

    def test_unparseable_returns_none(self):
        assert parse_date("not a date") is None
        assert parse_date("") is None
        assert parse_date(None) is None
        assert parse_date(12345) is None

    def test_invalid_day_returns_none(self):
        assert parse_date("31/02/2024") is None

    def test_result_is_utc_aware(self):
        assert parse_date("12 March 2024").tzinfo == timezone.utc


class TestCombineDateTime:
    def test_joins_date_and_time(self):
        assert combine_date_time("12/03/2024", "09:15") == _utc(2024, 3, 12, 9, 15)

    def test_missing_time_keeps_date(self):
        assert combine_date_time("12/03/2024", None) == _utc(2024, 3, 12)

    def test_invalid_time_ignored(self):
        assert combine_date_time("12/03/2024", "25:99") == _utc(2024, 3, 12)

    def test_unparseable_date(self):
        assert combine_date_time("soon", "09:15") is None


class TestFindDateInText:
    def test_embedded_english_date(self):
        text = "Press release 5 June 2025 The FCA has fined a firm"
        assert find_date_in_text(text) == _utc(2025, 6, 5)

    def test_month_first(self):
        assert find_date_in_text("Updated June 5, 2025 by staff") == _utc(2025, 6, 5)

    def test_embedded_italian_date(self):
        assert find_date_in_text("Comunicato del 4 febbraio 2025 su Consob") == _utc(2025, 2, 4)

    def test_no_date(self):
        assert find_date_in_text("No dates here") is None


class TestExtractLabeledDate:
    def test_responses_by(self):
        text = "Consultation paper CP24/1. Responses by 12 March 2024. Read more."
        assert extract_labeled_date(text) == _utc(2024, 3, 12)

    def test_deadline(self):
        assert extract_labeled_date("Deadline: 01/04/2025") == _utc(2025, 4, 1)

    def test_no_label(self):
        assert extract_labeled_date("Nothing to see") is None


class TestSplitTitleAndDate:
    def test_trailing_date(self):
        title, published = split_title_and_date("Annual report 2024-25 12 March 2024")
        assert title == "Annual report 2024-25"
        assert published == _utc(2024, 3, 12)

    def test_leading_date_with_separator(self):
        title, published = split_title_and_date("12 March 2024 | Mutual evaluation of Spain")
        assert title == "Mutual evaluation of Spain"
        assert published == _utc(2024, 3, 12)

    def test_no_date(self):
        assert split_title_and_date("Plain title") == ("Plain title", None)
