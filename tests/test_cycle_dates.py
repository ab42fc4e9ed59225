from datetime import date, timedelta

import pytest

from budget.cycle import cycle_boundary, cycle_bounds, iter_periods, next_month, previous_month
from budget.exceptions import ConfigurationError


def test_month_neighbours_wrap_the_year():
    assert previous_month(2024, 1) == (2023, 12)
    assert previous_month(2024, 7) == (2024, 6)
    assert next_month(2024, 12) == (2025, 1)
    assert next_month(2024, 2) == (2024, 3)


def test_boundary_already_on_weekday():
    # 2024-02-25 is a Sunday
    assert cycle_boundary(2024, 3, 25, 0) == date(2024, 2, 25)


def test_boundary_moves_forward_to_weekday():
    # 2024-03-25 is a Monday
    assert cycle_boundary(2024, 4, 25, 0) == date(2024, 3, 31)


def test_boundary_for_january_uses_previous_december():
    assert cycle_boundary(2024, 1, 25, 0) == date(2023, 12, 31)


def test_boundary_clamps_to_end_of_february():
    # 2024-02-29 is a Thursday, 2023-02-28 a Tuesday
    assert cycle_boundary(2024, 3, 31, 0) == date(2024, 3, 3)
    assert cycle_boundary(2023, 3, 31, 0) == date(2023, 3, 5)
    # Thursday requested, leap day already matches
    assert cycle_boundary(2024, 3, 31, 4) == date(2024, 2, 29)


def test_example_cycle_periods():
    start, end = cycle_bounds(2024, 3, 25, 0)
    assert (start, end) == (date(2024, 2, 25), date(2024, 3, 31))

    assert list(iter_periods(start, end)) == [
        (date(2024, 2, 25), date(2024, 3, 3), "Week 1"),
        (date(2024, 3, 3), date(2024, 3, 10), "Week 2"),
        (date(2024, 3, 10), date(2024, 3, 17), "Week 3"),
        (date(2024, 3, 17), date(2024, 3, 24), "Week 4"),
        (date(2024, 3, 24), date(2024, 3, 31), "Week 5"),
    ]


def test_last_period_is_truncated():
    periods = list(iter_periods(date(2024, 1, 1), date(2024, 1, 10)))
    assert periods == [
        (date(2024, 1, 1), date(2024, 1, 8), "Week 1"),
        (date(2024, 1, 8), date(2024, 1, 10), "Week 2"),
    ]


def test_empty_range_has_no_periods():
    assert list(iter_periods(date(2024, 1, 1), date(2024, 1, 1))) == []


@pytest.mark.parametrize("year", [2023, 2024])
@pytest.mark.parametrize("day_name", range(7))
@pytest.mark.parametrize("day_number", [1, 15, 25, 28, 29, 30, 31])
def test_periods_cover_every_cycle_exactly(year, day_name, day_number):
    for month in range(1, 13):
        start, end = cycle_bounds(year, month, day_number, day_name)
        assert start < end
        assert 21 < (end - start).days < 38
        assert (start.weekday() + 1) % 7 == day_name

        periods = list(iter_periods(start, end))
        assert periods[0][0] == start
        assert periods[-1][1] == end
        for (_, prev_end, _), (next_start, _, _) in zip(periods, periods[1:]):
            assert prev_end == next_start
        for period_start, period_end, _ in periods:
            assert period_start < period_end <= period_start + timedelta(days=7)

        # consecutive budget months butt up against each other
        following_start, _ = cycle_bounds(*next_month(year, month), day_number, day_name)
        assert following_start == end


@pytest.mark.parametrize("day_number, day_name", [(0, 0), (32, 0), (25, 7), (25, -1)])
def test_out_of_range_settings_are_rejected(day_number, day_name):
    with pytest.raises(ConfigurationError):
        cycle_bounds(2024, 3, day_number, day_name)
