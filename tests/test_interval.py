import pytest

from telemetry_api.interval import IntervalAdvisor


def test_interval_within_bounds():
    advisor = IntervalAdvisor()
    for _ in range(2000):
        seconds = advisor.next_poll_interval()
        assert isinstance(seconds, int)
        assert 4 <= seconds <= 60


def test_interval_covers_whole_range():
    advisor = IntervalAdvisor()
    seen = {advisor.next_poll_interval() for _ in range(5000)}
    assert seen == set(range(4, 61))


def test_fixed_range():
    assert IntervalAdvisor(10, 10).next_poll_interval() == 10


def test_inverted_range_rejected():
    with pytest.raises(ValueError):
        IntervalAdvisor(60, 4)
