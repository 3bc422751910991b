import logging
from typing import List, Optional, Sequence

from ..config import AOI_RADIUS, GAP_THRESHOLD_MINUTES
from ..schemas.schemas import AOIType, AreaOfInterest, RiskLevel, SignalPoint

logger = logging.getLogger(__name__)


def clock_minutes(value: str) -> Optional[int]:
    """Minutes since midnight for "HH:MM", or None if it cannot be read."""
    parts = (value or "").split(":")
    try:
        return int(parts[0]) * 60 + int(parts[1])
    except (IndexError, ValueError):
        return None


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def sort_by_time(points: Sequence[SignalPoint]) -> List[SignalPoint]:
    # lexicographic on zero-padded HH:MM
    return sorted(points, key=lambda p: p.time)


def detect_gaps(day_points: Sequence[SignalPoint], threshold_minutes: int = GAP_THRESHOLD_MINUTES,
                radius: int = AOI_RADIUS) -> List[AreaOfInterest]:
    """
    Flag signal gaps in one day's timeline.

    Points are sorted by clock time and every adjacent pair further apart than
    `threshold_minutes` yields its own GAP, anchored where the signal was last
    seen. Consecutive gaps are reported separately. Times are assumed to fall on
    the same clock day; a pair with an unreadable time is skipped.
    """
    if len(day_points) < 2:
        return []

    ordered = sort_by_time(day_points)
    aois = []
    for i in range(len(ordered) - 1):
        p1, p2 = ordered[i], ordered[i + 1]
        start, end = clock_minutes(p1.time), clock_minutes(p2.time)
        if start is None or end is None:
            logger.warning(f"[✗] Skipping gap check for unreadable times {p1.time!r} -> {p2.time!r} on {p1.date}")
            continue

        diff = end - start
        if diff > threshold_minutes:
            aois.append(AreaOfInterest(
                id=f"gap-{i}",
                center=(p1.lat, p1.lng),
                radius=radius,
                label=f"Last seen: {p1.time}",
                type=AOIType.GAP,
                duration=format_duration(diff),
                points=(p1,),
                risk_level=RiskLevel.MEDIUM,
            ))

    logger.debug(f"Found {len(aois)} signal gaps across {len(ordered)} signals")
    return aois
