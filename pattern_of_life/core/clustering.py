import logging
from typing import List, NamedTuple, Sequence, Tuple

from ..config import CLUSTER_THRESHOLD
from ..schemas.schemas import SignalPoint

logger = logging.getLogger(__name__)


class ClusterBuilder(NamedTuple):
    """Open cluster during the greedy pass. Replaced, never mutated, on each absorb."""
    lat: float
    lng: float
    count: int
    points: Tuple[SignalPoint, ...]


def seed(point: SignalPoint) -> ClusterBuilder:
    return ClusterBuilder(point.lat, point.lng, 1, (point,))


def matches(builder: ClusterBuilder, point: SignalPoint, threshold: float = CLUSTER_THRESHOLD) -> bool:
    # axis-aligned box around the running centroid, not a radius
    return abs(builder.lat - point.lat) < threshold and abs(builder.lng - point.lng) < threshold


def absorb(builder: ClusterBuilder, point: SignalPoint) -> ClusterBuilder:
    count = builder.count
    return ClusterBuilder(
        lat=(builder.lat * count + point.lat) / (count + 1),
        lng=(builder.lng * count + point.lng) / (count + 1),
        count=count + 1,
        points=builder.points + (point,),
    )


def cluster_points(points: Sequence[SignalPoint], threshold: float = CLUSTER_THRESHOLD) -> List[ClusterBuilder]:
    """
    Greedy first-fit clustering in input order.

    Each point joins the first open cluster (in creation order) whose centroid
    lies inside the threshold box, otherwise it seeds a new one. The result
    depends on input order and is not the nearest-centroid partition.

    Returns:
        Open clusters in creation order. Every input point is in exactly one.
    """
    builders: List[ClusterBuilder] = []
    for point in points:
        for idx, builder in enumerate(builders):
            if matches(builder, point, threshold):
                builders[idx] = absorb(builder, point)
                break
        else:
            builders.append(seed(point))

    logger.debug(f"Clustered {len(points)} signals into {len(builders)} open clusters")
    return builders
