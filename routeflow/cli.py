import argparse
import asyncio
import json
import logging
import sys
import webbrowser
from typing import List, Optional

import aiohttp

from routeflow.ResultAggregator import AggregatedResponse, ResultAggregator
from routeflow.config import ProviderSettings, SamplingConfig
from routeflow.errors import InputError, InvalidCoordinateError, RouteFlowError
from routeflow.log import setup_logging
from routeflow.openweather import OpenWeatherClient
from routeflow.route_flow import check_request, marker_points, route_flow
from routeflow.route_map import save_route_map
from routeflow.route_source import decode_route, fetch_route
from routeflow.tomtom_flow import TomTomFlowClient
from routeflow.trajectory import trajectory
from routeflow.validation import parse_coord

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="routeflow",
                                description="Sample a route and enrich the samples with traffic or weather data.")
    p.add_argument("--source", required=True, help="lat,long of the route start")
    p.add_argument("--dest", default=None, help="lat,long of the route end")
    p.add_argument("--provider", choices=("tomtom", "openweather"), default="tomtom")
    p.add_argument("--disth", type=float, default=None,
                   help="distance between consecutive samples in meters (overrides the city policy)")
    p.add_argument("--polyline", default=None, help="encoded route polyline; fetched from OSRM when omitted")
    p.add_argument("--profile", default="driving", choices=("driving", "walking", "cycling"))
    p.add_argument("--repeat", type=int, default=None,
                   help="follow the road from --source with this many TomTom flow lookups instead of routing")
    p.add_argument("--map", dest="map_path", default=None, help="write an HTML map of the result")
    p.add_argument("--open", action="store_true", help="open the map in a browser")
    p.add_argument("--log-level", default=None)
    p.add_argument("--log-file", default=None)
    return p


def _write_map(args: argparse.Namespace, response: AggregatedResponse, route, markers=None) -> None:
    save_route_map(response, args.map_path, route=route, markers=markers)
    logger.info("map written to %s", args.map_path)
    if args.open:
        webbrowser.open(args.map_path)


async def run_trajectory(args: argparse.Namespace, settings: ProviderSettings) -> dict:
    source = parse_coord(args.source)
    async with aiohttp.ClientSession() as session:
        result = await trajectory(source, args.repeat, TomTomFlowClient(session, settings).fetch_flow)
    if args.map_path:
        _write_map(args, AggregatedResponse(), result.coords)
    return result.to_dict()


async def run(args: argparse.Namespace) -> dict:
    config = SamplingConfig.from_env()
    settings = ProviderSettings.from_env()
    if args.repeat is not None:
        return await run_trajectory(args, settings)
    if args.dest is None:
        raise InvalidCoordinateError("--dest is required unless --repeat is given")

    source, dest, threshold = check_request(parse_coord(args.source), parse_coord(args.dest),
                                            args.disth, config)
    if args.polyline:
        route = decode_route(args.polyline)
    else:
        route = await asyncio.to_thread(fetch_route, source, dest, args.profile, settings.osrm_base_url)

    async with aiohttp.ClientSession() as session:
        if args.provider == "openweather":
            enrich = OpenWeatherClient(session, settings).fetch_weather
            aggregator = ResultAggregator.for_weather()
        else:
            enrich = TomTomFlowClient(session, settings).fetch_flow
            aggregator = ResultAggregator()
        response = await route_flow(source, dest, enrich, config=config, route=route,
                                    distance_threshold=threshold, aggregator=aggregator)

    if args.map_path:
        markers = marker_points(route, args.disth) if args.disth else None
        _write_map(args, response, route, markers)
    return response.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file)
    try:
        result = asyncio.run(run(args))
    except InputError as exc:
        logger.error("Malformed query: %s", exc)
        return 2
    except RouteFlowError as exc:
        logger.error("Request failed: %s", exc)
        return 1
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
