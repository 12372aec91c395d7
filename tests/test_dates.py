from datetime import date, datetime

import pandas as pd

from cartola_recon.models.records import DateSentinel
from cartola_recon.normalization.dates import (
    BusinessDayCalendar,
    format_date,
    next_business_day,
    parse_date,
)


def test_parse_date_accepts_spreadsheet_values():
    assert parse_date(datetime(2024, 3, 1, 10, 30)) == date(2024, 3, 1)
    assert parse_date(pd.Timestamp("2024-03-01")) == date(2024, 3, 1)
    assert parse_date(date(2024, 3, 1)) == date(2024, 3, 1)
    assert parse_date("2024-03-01") == date(2024, 3, 1)
    assert parse_date("01/03/2024") == date(2024, 3, 1)
    assert parse_date("01/03/2024 10:15") == date(2024, 3, 1)


def test_parse_date_rejects_garbage():
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("no es fecha") is None
    assert parse_date("31/02/2024") is None
    assert parse_date(float("nan")) is None
    assert parse_date(pd.NaT) is None
    assert parse_date(DateSentinel.INVALID) is None
    assert parse_date(45000) is None
    assert parse_date("01/03/24") is None


def test_format_date():
    assert format_date(date(2024, 3, 1)) == "01/03/2024"
    assert format_date(datetime(2024, 3, 1, 8, 0)) == "01/03/2024"
    assert format_date(DateSentinel.INVALID) == "Fecha Inválida"
    assert format_date(DateSentinel.UNAVAILABLE) == "No Disponible"
    assert format_date(None) == ""


def test_calendar_sorts_and_drops_invalid_entries():
    cal = BusinessDayCalendar.from_values(
        ["05/01/2024", date(2024, 1, 2), "basura", None, "2024-01-03", date(2024, 1, 2)]
    )
    assert cal.days == (date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 5))
    assert len(cal) == 3
    assert list(cal) == [date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 5)]
    assert cal.first == date(2024, 1, 2)
    assert cal.last == date(2024, 1, 5)
    assert date(2024, 1, 3) in cal
    assert datetime(2024, 1, 3, 12, 0) in cal
    assert date(2024, 1, 4) not in cal
    assert "2024-01-03" not in cal


def test_next_business_day_skips_to_following_entry():
    cal = BusinessDayCalendar.from_values([date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 5)])
    assert next_business_day(date(2024, 1, 3), cal) == date(2024, 1, 5)
    assert next_business_day(date(2024, 1, 1), cal) == date(2024, 1, 2)
    # A non-business day still moves forward
    assert next_business_day(date(2024, 1, 4), cal) == date(2024, 1, 5)


def test_next_business_day_past_calendar_end():
    cal = BusinessDayCalendar.from_values([date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 5)])
    assert next_business_day(date(2024, 1, 5), cal) is DateSentinel.UNAVAILABLE
    assert next_business_day(date(2024, 1, 10), cal) is DateSentinel.UNAVAILABLE


def test_next_business_day_invalid_input():
    cal = BusinessDayCalendar.from_values([date(2024, 1, 2)])
    assert next_business_day(None, cal) is DateSentinel.INVALID
    assert next_business_day(DateSentinel.INVALID, cal) is DateSentinel.INVALID


def test_next_business_day_with_plain_unsorted_list():
    days = [date(2024, 1, 5), date(2024, 1, 2), date(2024, 1, 3)]
    assert next_business_day(date(2024, 1, 3), days) == date(2024, 1, 5)
    assert next_business_day(datetime(2024, 1, 2, 9, 0), days) == date(2024, 1, 3)
    assert next_business_day(date(2024, 1, 5), []) is DateSentinel.UNAVAILABLE


def test_next_business_day_with_datetime_entries():
    days = [datetime(2024, 1, 5, 0, 0), pd.Timestamp("2024-01-02"), datetime(2024, 1, 3, 18, 30)]
    assert next_business_day(date(2024, 1, 3), days) == date(2024, 1, 5)
    assert next_business_day(pd.Timestamp("2024-01-02"), days) == date(2024, 1, 3)
    assert next_business_day(date(2024, 1, 5), days) is DateSentinel.UNAVAILABLE
