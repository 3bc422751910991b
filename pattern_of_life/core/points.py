import logging
from typing import Iterable, Mapping, Optional, Tuple

import pandas as pd
from pymongo.collection import Collection

from ..schemas.schemas import SignalPoint

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["lat", "lng", "date", "time", "day"]
OPTIONAL_COLUMNS = ["description", "source"]


def _clean(value):
    # pandas hands back NaN for empty optional cells
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    return value


def points_from_records(records: Iterable[Mapping]) -> Tuple[SignalPoint, ...]:
    """Build the immutable point store from plain dicts, keeping their order."""
    points = []
    for record in records:
        missing = [col for col in REQUIRED_COLUMNS if _clean(record.get(col)) is None]
        if missing:
            raise ValueError(f"Signal record is missing required fields {missing}: {dict(record)}")
        points.append(SignalPoint(
            lat=float(record["lat"]),
            lng=float(record["lng"]),
            date=str(record["date"]),
            time=str(record["time"]),
            day=str(record["day"]).upper(),
            description=_clean(record.get("description")),
            source=_clean(record.get("source")),
        ))
    return tuple(points)


def load_points_csv(path) -> Tuple[SignalPoint, ...]:
    """Load a signal log exported as CSV."""
    df = pd.read_csv(path, dtype={"date": str, "time": str, "day": str})
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"CSV {path} is missing required columns: {missing}")

    columns = REQUIRED_COLUMNS + [col for col in OPTIONAL_COLUMNS if col in df.columns]
    points = points_from_records(df[columns].to_dict("records"))
    logger.debug(f"Loaded {len(points)} signals from {path}")
    return points


def load_points_from_collection(collection: Collection, query: Optional[dict] = None) -> Tuple[SignalPoint, ...]:
    """Read signals from a MongoDB collection, ordered by date then time."""
    cursor = collection.find(query or {}, {"_id": 0}).sort([("date", 1), ("time", 1)])
    points = points_from_records(list(cursor))
    logger.debug(f"Loaded {len(points)} signals from collection {collection.name}")
    return points
