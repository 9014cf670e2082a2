from datetime import datetime

from barberflow.plan_limits import get_appointment_limit, has_advanced_analytics, month_bounds


def test_month_bounds_roll_over_the_year():
    start, end = month_bounds(datetime(2030, 12, 31, 23, 59))

    assert start == datetime(2030, 12, 1)
    assert end == datetime(2031, 1, 1)


def test_unknown_plans_get_free_limits():
    assert get_appointment_limit("free") == 50
    assert get_appointment_limit(None) == 50
    assert get_appointment_limit("enterprise") == 50
    assert get_appointment_limit("Pro") is None
    assert has_advanced_analytics("business") is True
    assert has_advanced_analytics("free") is False
