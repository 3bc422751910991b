import asyncio

import httpx

from pattern_of_life.schemas.schemas import SignalPoint
from pattern_of_life.services.routing import fetch_route_geometry, fetch_routes, osrm_route_url


def run(coro):
    return asyncio.run(coro)


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def signal(lat, lng, time):
    return SignalPoint(lat=lat, lng=lng, date="2024-03-04", time=time, day="MON")


def test_osrm_url_uses_lng_lat_order():
    url = osrm_route_url([signal(32.784, -97.381, "08:00"), signal(32.785, -97.379, "08:10")], base_url="http://osrm")
    assert url == "http://osrm/route/v1/driving/-97.381,32.784;-97.379,32.785"


def test_routed_geometry_is_converted_to_lat_lng():
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(200, json={"routes": [{"geometry": {"coordinates": [[-97.381, 32.784], [-97.37, 32.79]]}}]})

    points = [signal(32.784, -97.381, "09:00"), signal(32.79, -97.37, "08:00")]

    async def go():
        async with mock_client(handler) as client:
            return await fetch_route_geometry("2024-03-04", points, client=client)

    geometry = run(go())

    assert geometry.routed is True
    assert geometry.coordinates == [(32.784, -97.381), (32.79, -97.37)]
    assert seen["url"].params["overview"] == "full"
    assert seen["url"].params["geometries"] == "geojson"
    # earliest point goes first
    assert "-97.37,32.79;-97.381,32.784" in str(seen["url"].path)


def test_only_first_25_waypoints_are_routed(make_point):
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        return httpx.Response(200, json={"routes": [{"geometry": {"coordinates": [[0, 0], [1, 1]]}}]})

    points = [make_point(dlat=0.001 * i, time=f"08:{i:02d}") for i in range(30)]

    async def go():
        async with mock_client(handler) as client:
            return await fetch_route_geometry("2024-03-04", points, client=client)

    run(go())
    assert seen["path"].rsplit("/", 1)[-1].count(";") == 24


def test_failure_falls_back_to_straight_segments(make_point):
    def handler(request):
        return httpx.Response(503)

    points = [make_point(dlat=0.001 * i, time=f"08:{i:02d}") for i in range(30)]

    async def go():
        async with mock_client(handler) as client:
            return await fetch_route_geometry("2024-03-04", points, client=client)

    geometry = run(go())

    assert geometry.routed is False
    # fallback keeps every point, not just the routed ones
    assert geometry.coordinates == [(p.lat, p.lng) for p in points]


def test_empty_routes_fall_back(make_point):
    def handler(request):
        return httpx.Response(200, json={"code": "NoRoute", "routes": []})

    points = [make_point(time="08:00"), make_point(0.01, 0.01, time="09:00")]

    async def go():
        async with mock_client(handler) as client:
            return await fetch_route_geometry("2024-03-04", points, client=client)

    assert run(go()).routed is False


def test_network_error_falls_back(make_point):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    points = [make_point(time="08:00"), make_point(0.01, 0.01, time="09:00")]

    async def go():
        async with mock_client(handler) as client:
            return await fetch_route_geometry("2024-03-04", points, client=client)

    assert run(go()).coordinates == [(points[0].lat, points[0].lng), (points[1].lat, points[1].lng)]


def test_fetch_routes_skips_single_point_dates(make_point):
    def handler(request):
        return httpx.Response(200, json={"routes": [{"geometry": {"coordinates": [[0, 0], [1, 1]]}}]})

    points = [
        make_point(time="08:00"),
        make_point(0.01, 0.01, time="09:00"),
        make_point(time="08:00", date="2024-03-11"),
    ]

    async def go():
        async with mock_client(handler) as client:
            return await fetch_routes(points, ["2024-03-04", "2024-03-11"], client=client)

    geometries = run(go())
    assert list(geometries) == ["2024-03-04"]
