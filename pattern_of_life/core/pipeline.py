import logging
from typing import List, Sequence, Tuple

from ..config import CLUSTER_THRESHOLD, MAX_ROUTE_WAYPOINTS, TOP_CLUSTERS, ZONE_COLORS
from ..schemas.schemas import AnalysisView, AreaOfInterest, Cluster, DayFilter, SignalPoint
from .clustering import cluster_points
from .day_filter import filter_points, parse_day, points_for_date, view_state
from .gaps import detect_gaps
from .naming import finalize_cluster
from .scoring import rank_clusters

logger = logging.getLogger(__name__)


def build_clusters(points: Sequence[SignalPoint], selector=DayFilter.ALL, threshold: float = CLUSTER_THRESHOLD,
                   top_n: int = TOP_CLUSTERS, palette: Sequence[str] = ZONE_COLORS) -> List[Cluster]:
    """Ranked, named hotspots for the selected day. Recomputed from scratch on every call."""
    selected = filter_points(points, selector)
    if not selected:
        return []

    ranked = rank_clusters(cluster_points(selected, threshold), top_n)
    clusters = [finalize_cluster(scored, rank, palette) for rank, scored in enumerate(ranked)]
    logger.debug(f"Built {len(clusters)} clusters for {parse_day(selector).value} from {len(selected)} signals")
    return clusters


def build_aois(points: Sequence[SignalPoint], selector) -> List[AreaOfInterest]:
    # gaps only make sense on a single day's timeline
    day = parse_day(selector)
    if day is DayFilter.ALL:
        return []
    return detect_gaps(filter_points(points, day))


def analyze(points: Sequence[SignalPoint], selector=DayFilter.ALL) -> AnalysisView:
    day = parse_day(selector)
    return AnalysisView(
        day=day,
        clusters=build_clusters(points, day),
        aois=build_aois(points, day),
        view=view_state(points, day),
    )


def route_waypoints(points: Sequence[SignalPoint], date: str, limit: int = MAX_ROUTE_WAYPOINTS) -> Tuple[Tuple[float, float], ...]:
    """Time-sorted (lat, lng) waypoints to send to the routing service for one date."""
    day_route = points_for_date(points, date)
    if len(day_route) < 2:
        return ()
    return tuple((p.lat, p.lng) for p in day_route[:limit])
