from typing import Optional, Sequence

import folium

from routeflow.RoutePoint import LatLon, RoutePoint
from routeflow.ResultAggregator import AggregatedResponse
from routeflow.geo_math import route_length_m

LEVEL_COLORS = {
    "low": "green",
    "medium": "orange",
    "high": "red",
    None: "blue",
}


def build_route_map(response: AggregatedResponse,
                    route: Optional[Sequence[LatLon]] = None,
                    markers: Optional[Sequence[RoutePoint]] = None,
                    zoom_start: int = 12) -> folium.Map:
    points = [(e.coord.lat, e.coord.lon) for e in response.entries]
    if route:
        center = route[len(route) // 2]
    elif points:
        center = points[len(points) // 2]
    else:
        center = (0.0, 0.0)
    m = folium.Map(location=[center[0], center[1]], zoom_start=zoom_start)

    if route:
        folium.PolyLine([(p[0], p[1]) for p in route], color="blue", weight=5, opacity=0.8,
                        tooltip=f"Route, {route_length_m(route) / 1000:.1f} km").add_to(m)
        folium.Marker(route[0], tooltip="Start", icon=folium.Icon(color="green")).add_to(m)
        folium.Marker(route[-1], tooltip="End", icon=folium.Icon(color="red")).add_to(m)

    for p in markers or []:
        folium.Marker((p.lat, p.lon), tooltip=f"{p.cumulative_distance or 0:.0f} m").add_to(m)

    for e in response.entries:
        label = f"jam {e.jam_factor}" if e.jam_factor is not None else "sample"
        folium.CircleMarker(
            location=(e.coord.lat, e.coord.lon),
            radius=6,
            color=LEVEL_COLORS.get(e.congestion_level, "blue"),
            fill=True,
            fill_opacity=0.9,
            tooltip=label,
        ).add_to(m)
    return m


def save_route_map(response: AggregatedResponse, path: str,
                   route: Optional[Sequence[LatLon]] = None,
                   markers: Optional[Sequence[RoutePoint]] = None) -> str:
    build_route_map(response, route, markers).save(path)
    return path
