from typing import Sequence, Tuple, Union

from ..schemas.schemas import DayFilter, SignalPoint, ViewState


def parse_day(selector: Union[str, DayFilter]) -> DayFilter:
    if isinstance(selector, DayFilter):
        return selector
    try:
        return DayFilter(str(selector).strip().upper())
    except ValueError:
        raise ValueError(f"Invalid day selector {selector!r}. Use 'ALL' or one of MON..SUN.") from None


def filter_points(points: Sequence[SignalPoint], selector) -> Tuple[SignalPoint, ...]:
    """Return the points for one weekday, or all of them for ALL. Order is preserved."""
    day = parse_day(selector)
    if day is DayFilter.ALL:
        return tuple(points)
    return tuple(p for p in points if p.day == day.value)


def locked_dates(points: Sequence[SignalPoint], selector) -> Tuple[str, ...]:
    """Dates whose routes are shown as connected paths for this selector."""
    selected = filter_points(points, selector)
    return tuple(dict.fromkeys(p.date for p in selected))


def show_history(selector) -> bool:
    return parse_day(selector) is DayFilter.ALL


def view_state(points: Sequence[SignalPoint], selector) -> ViewState:
    return ViewState(
        locked_routes=list(locked_dates(points, selector)),
        show_history=show_history(selector),
    )


def points_for_date(points: Sequence[SignalPoint], date: str) -> Tuple[SignalPoint, ...]:
    """One date's route, sorted by clock time."""
    return tuple(sorted((p for p in points if p.date == date), key=lambda p: p.time))
