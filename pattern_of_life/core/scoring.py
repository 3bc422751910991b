from typing import List, NamedTuple, Sequence

from ..config import DATE_WEIGHT, SIGNAL_WEIGHT, TOP_CLUSTERS
from .clustering import ClusterBuilder


class ScoredCluster(NamedTuple):
    builder: ClusterBuilder
    unique_dates_count: int
    score: int


def score_cluster(builder: ClusterBuilder, date_weight: int = DATE_WEIGHT, signal_weight: int = SIGNAL_WEIGHT) -> ScoredCluster:
    """Recurrence across distinct dates counts more than raw signal volume."""
    unique_dates = len({p.date for p in builder.points})
    score = unique_dates * date_weight + builder.count * signal_weight
    return ScoredCluster(builder, unique_dates, score)


def rank_clusters(builders: Sequence[ClusterBuilder], top_n: int = TOP_CLUSTERS,
                  date_weight: int = DATE_WEIGHT, signal_weight: int = SIGNAL_WEIGHT) -> List[ScoredCluster]:
    scored = [score_cluster(b, date_weight, signal_weight) for b in builders]
    # sorted() is stable: equal scores keep creation order
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    return ranked[:top_n]
