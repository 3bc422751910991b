import logging
from typing import List, Optional, Sequence

from fastapi import FastAPI, HTTPException

from ..config import DATA_PATH, DEBUG_MODE
from ..core.day_filter import filter_points, locked_dates
from ..core.pipeline import analyze, build_aois, build_clusters
from ..core.points import load_points_csv, load_points_from_collection
from ..db.mongo import get_collection
from ..schemas.schemas import (
    AnalysisResult,
    AnalysisView,
    AreaOfInterest,
    Cluster,
    DayFilter,
    RouteGeometry,
    SignalPoint,
)
from ..services import narrative
from ..services.routing import fetch_route_geometry

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.DEBUG if DEBUG_MODE else logging.INFO)


def create_app(points: Sequence[SignalPoint], routing_client=None, narrative_client=None) -> FastAPI:
    """
    Host service over one immutable dataset.

    Every request recomputes clusters and AOIs for its `day`; nothing is cached
    between requests.
    """
    app = FastAPI(title="Pattern of Life")
    store = tuple(points)

    def find_cluster(cluster_id: int, day: DayFilter) -> Cluster:
        for cluster in build_clusters(store, day):
            if cluster.id == cluster_id:
                return cluster
        raise HTTPException(status_code=404, detail=f"Cluster {cluster_id} not found for {day.value}")

    def find_aoi(aoi_id: str, day: DayFilter) -> AreaOfInterest:
        for aoi in build_aois(store, day):
            if aoi.id == aoi_id:
                return aoi
        raise HTTPException(status_code=404, detail=f"AOI {aoi_id} not found for {day.value}")

    @app.get("/clusters", response_model=List[Cluster])
    def get_clusters(day: DayFilter = DayFilter.ALL):
        return build_clusters(store, day)

    @app.get("/aois", response_model=List[AreaOfInterest])
    def get_aois(day: DayFilter = DayFilter.ALL):
        return build_aois(store, day)

    @app.get("/view", response_model=AnalysisView)
    def get_view(day: DayFilter = DayFilter.ALL):
        return analyze(store, day)

    @app.get("/routes/{date}", response_model=RouteGeometry)
    async def get_route(date: str):
        geometry = await fetch_route_geometry(date, store, client=routing_client)
        if geometry is None:
            raise HTTPException(status_code=404, detail=f"No drawable route for {date}")
        return geometry

    @app.get("/routes", response_model=List[str])
    def get_locked_routes(day: DayFilter = DayFilter.ALL):
        return list(locked_dates(store, day))

    @app.post("/analysis/day", response_model=AnalysisResult)
    async def post_day_analysis(day: DayFilter):
        return await narrative.analyze_daily_pattern(day.value, filter_points(store, day), client=narrative_client)

    @app.get("/analysis/cluster/{cluster_id}")
    async def get_cluster_intel(cluster_id: int, day: DayFilter = DayFilter.ALL):
        cluster = find_cluster(cluster_id, day)
        return {"cluster_id": cluster.id, "intel": await narrative.intel_for_cluster(cluster, client=narrative_client)}

    @app.get("/analysis/aoi/{aoi_id}")
    async def get_aoi_analysis(aoi_id: str, day: DayFilter):
        aoi = find_aoi(aoi_id, day)
        return {"aoi_id": aoi.id, "analysis": await narrative.analyze_aoi(aoi, client=narrative_client)}

    @app.get("/analysis/location")
    async def get_location_analysis(lat: float, lng: float):
        return {"lat": lat, "lng": lng, "analysis": await narrative.analyze_location(lat, lng, client=narrative_client)}

    logger.info(f"[✓] Pattern of life service ready with {len(store)} signals")
    return app


def default_app(path: Optional[str] = None, mongo: bool = False) -> FastAPI:
    if mongo:
        return create_app(load_points_from_collection(get_collection()))
    return create_app(load_points_csv(path or DATA_PATH))
