from datetime import timedelta

from app.services.window import (
    can_safely_enter,
    days_remaining,
    days_used_in_window,
    is_compliant,
    is_in_window,
    window_bounds,
)
from tests.factories import consecutive_days, d


def test_window_is_180_days_inclusive():
    start, end = window_bounds(d("2025-07-01"))
    assert start == d("2025-01-03")
    assert end == d("2025-07-01")
    assert (end - start).days + 1 == 180


def test_window_bounds_in_leap_year():
    assert window_bounds(d("2024-07-01"))[0] == d("2024-01-04")


def test_window_bounds_respect_compliance_start():
    start, _ = window_bounds(d("2025-12-01"), compliance_start_date=d("2025-10-12"))
    assert start == d("2025-10-12")


def test_179_days_back_counts_180_does_not():
    ref = d("2025-07-01")
    assert days_used_in_window({ref - timedelta(days=179)}, ref) == 1
    assert days_used_in_window({ref - timedelta(days=180)}, ref) == 0
    assert is_in_window(d("2025-01-03"), ref)
    assert not is_in_window(d("2025-01-02"), ref)


def test_reference_date_itself_counts():
    ref = d("2025-07-01")
    assert days_used_in_window({ref}, ref) == 1
    assert not is_in_window(ref + timedelta(days=1), ref)


def test_future_presence_is_outside_window():
    ref = d("2025-07-01")
    presence = consecutive_days(ref + timedelta(days=1), 30)
    assert days_used_in_window(presence, ref) == 0


def test_large_presence_sets_count_the_same():
    ref = d("2026-01-10")
    presence = consecutive_days("2024-01-01", 900)
    assert days_used_in_window(presence, ref) == 180
    small = consecutive_days("2025-12-01", 10)
    assert days_used_in_window(small, ref) == 10


def test_empty_presence():
    ref = d("2025-07-01")
    assert days_used_in_window(frozenset(), ref) == 0
    assert days_remaining(frozenset(), ref) == 90
    assert is_compliant(frozenset(), ref)


def test_compliance_start_after_reference_counts_nothing():
    ref = d("2025-07-01")
    assert days_used_in_window({ref}, ref, compliance_start_date=d("2025-08-01")) == 0


def test_compliance_boundary_at_90_days():
    ref = d("2026-01-10")
    at_limit = consecutive_days("2025-07-15", 90)
    assert days_used_in_window(at_limit, ref) == 90
    assert days_remaining(at_limit, ref) == 0
    assert not is_compliant(at_limit, ref)
    assert not can_safely_enter(at_limit, ref)

    one_below = consecutive_days("2025-07-16", 89)
    assert is_compliant(one_below, ref)
    assert can_safely_enter(one_below, ref)


def test_days_remaining_goes_negative():
    ref = d("2026-01-10")
    assert days_remaining(consecutive_days("2025-09-01", 95), ref) == -5


def test_leaving_schengen_does_not_reset_the_count():
    # 60 days in, then 100 days out: the earlier 60 days are still inside the window
    ref = d("2026-03-01")
    presence = consecutive_days(ref - timedelta(days=159), 60)
    assert days_used_in_window(presence, ref) == 60
    # only the sliding boundary removes them
    assert days_used_in_window(presence, ref + timedelta(days=50)) == 30
