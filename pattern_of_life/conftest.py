import pytest

from pattern_of_life.schemas.schemas import SignalPoint

BASE_LAT = 32.7840
BASE_LNG = -97.3810


@pytest.fixture
def make_point():
    """Factory for signal points around a fixed base location."""
    def _make(dlat=0.0, dlng=0.0, date="2024-03-04", time="08:00", day="MON", description=None, source=None):
        return SignalPoint(
            lat=BASE_LAT + dlat,
            lng=BASE_LNG + dlng,
            date=date,
            time=time,
            day=day,
            description=description,
            source=source,
        )
    return _make


@pytest.fixture
def monday_dataset(make_point):
    """Two Monday locations: one seen on two dates, one seen twice on a single date, plus a Tuesday ping."""
    return (
        make_point(0.0000, 0.0000, date="2024-03-04", time="08:00"),
        make_point(0.0100, 0.0150, date="2024-03-04", time="08:10"),
        make_point(0.0005, 0.0004, date="2024-03-04", time="10:05"),
        make_point(0.0101, 0.0152, date="2024-03-04", time="12:30"),
        make_point(0.0008, 0.0009, date="2024-03-11", time="07:55"),
        make_point(0.0500, 0.0500, date="2024-03-05", time="09:00", day="TUE"),
    )
