import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import httpx

from ..config import MAX_ROUTE_WAYPOINTS, OSRM_URL, ROUTE_TIMEOUT_SECONDS
from ..core.day_filter import points_for_date
from ..schemas.schemas import RouteGeometry, SignalPoint

logger = logging.getLogger(__name__)


def straight_line(points: Sequence[SignalPoint]) -> List[Tuple[float, float]]:
    return [(p.lat, p.lng) for p in points]


def osrm_route_url(waypoints: Sequence[SignalPoint], base_url: str = OSRM_URL) -> str:
    # OSRM takes lng,lat pairs separated by semicolons
    coords = ";".join(f"{p.lng},{p.lat}" for p in waypoints)
    return f"{base_url}/route/v1/driving/{coords}"


async def fetch_route_geometry(date: str, points: Sequence[SignalPoint], client: Optional[httpx.AsyncClient] = None,
                               base_url: str = OSRM_URL, limit: int = MAX_ROUTE_WAYPOINTS) -> Optional[RouteGeometry]:
    """
    Road-following polyline for one date's signals.

    Only the first `limit` time-sorted points are routed. Any routing failure
    falls back to straight segments through all of the date's points.
    Returns None when the date has fewer than two points.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=ROUTE_TIMEOUT_SECONDS) as own_client:
            return await fetch_route_geometry(date, points, own_client, base_url, limit)

    day_route = points_for_date(points, date)
    if len(day_route) < 2:
        return None

    url = osrm_route_url(day_route[:limit], base_url)
    try:
        response = await client.get(url, params={"overview": "full", "geometries": "geojson"})
        response.raise_for_status()
        routes = response.json().get("routes") or []
        if routes:
            # GeoJSON is [lng, lat]
            coordinates = [(c[1], c[0]) for c in routes[0]["geometry"]["coordinates"]]
            logger.debug(f"[✓] Routed {len(day_route)} signals for {date} into {len(coordinates)} vertices")
            return RouteGeometry(date=date, coordinates=coordinates, routed=True)
        logger.error(f"[✗] Routing service returned no routes for {date}, using straight segments")
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"[✗] Routing failed for {date}: {e}")

    return RouteGeometry(date=date, coordinates=straight_line(day_route), routed=False)


async def fetch_routes(points: Sequence[SignalPoint], dates: Iterable[str],
                       client: Optional[httpx.AsyncClient] = None) -> Dict[str, RouteGeometry]:
    """Geometries for every locked date that has a drawable route."""
    if client is None:
        async with httpx.AsyncClient(timeout=ROUTE_TIMEOUT_SECONDS) as own_client:
            return await fetch_routes(points, dates, own_client)

    geometries = {}
    for date in dates:
        geometry = await fetch_route_geometry(date, points, client)
        if geometry is not None:
            geometries[date] = geometry
    return geometries
