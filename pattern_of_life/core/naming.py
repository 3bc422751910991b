from typing import Sequence

from ..config import (
    CLUSTER_ID_OFFSET,
    HIGH_RISK_SCORE,
    HOTSPOT_SCORE,
    MAX_PROBABILITY,
    NAMED_SECTORS,
    ZONE_COLORS,
)
from ..schemas.schemas import Cluster, SignalPoint
from .scoring import ScoredCluster


def zone_color(rank: int, palette: Sequence[str] = ZONE_COLORS) -> str:
    return palette[rank % len(palette)]


def sector_name(points: Sequence[SignalPoint], rank: int, named_sectors=NAMED_SECTORS) -> str:
    """Named sector if any member description mentions one, else Node A, Node B, ..."""
    for keyword, name in named_sectors:
        if any(keyword in (p.description or "") for p in points):
            return name
    return f"Node {chr(ord('A') + rank)}"


def is_hotspot(score: int, hotspot_score: int = HOTSPOT_SCORE) -> bool:
    return score > hotspot_score


def cluster_code(score: int, rank: int, hotspot_score: int = HOTSPOT_SCORE) -> str:
    prefix = "HOTSPOT" if is_hotspot(score, hotspot_score) else "NODE"
    return f"{prefix}-{rank + 1}"


def activity_type(score: int, hotspot_score: int = HOTSPOT_SCORE) -> str:
    return "High Activity" if is_hotspot(score, hotspot_score) else "Transient"


def risk_tier(score: int, high_risk_score: int = HIGH_RISK_SCORE) -> str:
    return "High" if score > high_risk_score else "Low"


def time_window(points: Sequence[SignalPoint]) -> str:
    # first and last in assignment order, not the earliest/latest clock time
    return f"{points[0].time} - {points[-1].time}"


def describe(unique_dates_count: int, count: int) -> str:
    return f"Detected on {unique_dates_count} unique dates with {count} total signals."


def finalize_cluster(scored: ScoredCluster, rank: int, palette: Sequence[str] = ZONE_COLORS,
                     hotspot_score: int = HOTSPOT_SCORE, high_risk_score: int = HIGH_RISK_SCORE) -> Cluster:
    builder = scored.builder
    return Cluster(
        id=rank + CLUSTER_ID_OFFSET,
        name=sector_name(builder.points, rank),
        code=cluster_code(scored.score, rank, hotspot_score),
        centroid=(builder.lat, builder.lng),
        type=activity_type(scored.score, hotspot_score),
        probability=min(MAX_PROBABILITY, scored.score),
        window=time_window(builder.points),
        description=describe(scored.unique_dates_count, builder.count),
        risk=risk_tier(scored.score, high_risk_score),
        color=zone_color(rank, palette),
        raw_points=builder.points,
        count=builder.count,
        unique_dates_count=scored.unique_dates_count,
        score=scored.score,
    )
