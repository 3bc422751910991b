import argparse
import json
import logging

from .config import DATA_PATH, DEBUG_MODE
from .core.pipeline import analyze
from .core.points import load_points_csv, load_points_from_collection
from .db.mongo import get_collection
from .schemas.schemas import DayFilter


def format_report(view) -> str:
    lines = [f"=== {view.day.value} | {len(view.clusters)} clusters | {len(view.aois)} areas of interest ==="]
    for cluster in view.clusters:
        lat, lng = cluster.centroid
        lines.append(
            f"{cluster.code:<10} {cluster.name:<20} score={cluster.score:<4} risk={cluster.risk:<4} "
            f"({lat:.5f}, {lng:.5f}) window={cluster.window}"
        )
    for aoi in view.aois:
        lat, lng = aoi.center
        lines.append(f"{aoi.id:<10} {aoi.type.value:<5} {aoi.label} for {aoi.duration} at ({lat:.5f}, {lng:.5f})")
    lines.append(f"Locked routes: {', '.join(view.view.locked_routes) or '-'}")
    return "\n".join(lines)


def run(argv=None):
    parser = argparse.ArgumentParser(description="Rank recurring locations and signal gaps in a pattern-of-life log.")
    parser.add_argument("--data", default=DATA_PATH, help="CSV signal log (lat,lng,date,time,day[,description,source])")
    parser.add_argument("--mongo", action="store_true", help="Read signals from the configured MongoDB collection instead of --data")
    parser.add_argument("--day", default="ALL", choices=[d.value for d in DayFilter], help="Weekday filter")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if DEBUG_MODE else logging.INFO)

    points = load_points_from_collection(get_collection()) if args.mongo else load_points_csv(args.data)
    view = analyze(points, args.day)
    if args.json:
        print(json.dumps(view.model_dump(mode="json"), indent=2))
    else:
        print(format_report(view))
    return view


def main(argv=None):
    run(argv)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
