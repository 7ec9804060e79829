from datetime import date, datetime, timedelta

import pytest

from rsm.domain.models import SaleRecord
from rsm.services.reporting_service import (
    compute_sales_delta,
    compute_sales_series,
    delta_windows,
    series_window_start,
)


def _rec(d: date, qty: float, hour: int = 10) -> SaleRecord:
    return SaleRecord(created_at=datetime(d.year, d.month, d.day, hour, 0).astimezone(), qty_kg=qty)


def test_sales_delta_is_exact_percentage():
    delta = compute_sales_delta(120, 100)
    assert delta is not None
    assert delta.value == 20.0
    assert delta.is_positive is True


def test_sales_delta_negative_when_sales_drop():
    delta = compute_sales_delta(75, 100)
    assert delta is not None
    assert delta.value == -25.0
    assert delta.is_positive is False


def test_sales_delta_flat_week_counts_as_positive():
    delta = compute_sales_delta(40, 40)
    assert delta.value == 0.0
    assert delta.is_positive is True


@pytest.mark.parametrize("current", [0, 10, 1000])
def test_sales_delta_is_none_without_previous_sales(current):
    assert compute_sales_delta(current, 0) is None


def test_series_has_thirty_zero_filled_days_ending_today():
    today = date(2024, 3, 31)
    series = compute_sales_series([], today)

    assert len(series) == 30
    assert series[0].day == date(2024, 3, 2)
    assert series[-1].day == today
    assert all(p.total_kg == 0 for p in series)
    assert [p.day for p in series] == sorted(p.day for p in series)


def test_series_buckets_by_local_calendar_day():
    today = date(2024, 3, 31)
    records = [
        _rec(date(2024, 3, 31), 10, hour=0),
        _rec(date(2024, 3, 31), 5, hour=23),
        _rec(date(2024, 3, 15), 7.5),
        _rec(date(2024, 3, 2), 2),
    ]
    series = {p.day: p.total_kg for p in compute_sales_series(records, today)}

    assert series[date(2024, 3, 31)] == 15
    assert series[date(2024, 3, 15)] == 7.5
    assert series[date(2024, 3, 2)] == 2
    assert series[date(2024, 3, 30)] == 0


def test_series_total_matches_records_in_range_and_skips_older_days():
    today = date(2024, 3, 31)
    records = [_rec(today - timedelta(days=i), 1.5 * i) for i in range(0, 31)]
    series = compute_sales_series(records, today)

    in_range = sum(r.qty_kg for r in records if r.created_at.date() > today - timedelta(days=30))
    assert sum(p.total_kg for p in series) == pytest.approx(in_range)
    assert all(p.total_kg >= 0 for p in series)


def test_series_labels_are_iso_dates():
    series = compute_sales_series([], date(2024, 1, 5))
    assert series[-1].label == "2024-01-05"
    assert series[0].label == "2023-12-07"


def test_delta_windows_cover_last_two_weeks():
    now = datetime(2024, 3, 31, 12, 0)
    (cur_start, cur_end), (prev_start, prev_end) = delta_windows(now)

    assert cur_start == datetime(2024, 3, 24, 12, 0)
    assert cur_end is None
    assert prev_start == datetime(2024, 3, 17, 12, 0)
    assert prev_end == cur_start
    assert series_window_start(now) == datetime(2024, 3, 1, 12, 0)
