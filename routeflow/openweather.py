import logging
from typing import Any, Dict, Optional

import aiohttp

from routeflow.config import ProviderSettings
from routeflow.errors import ProviderError

logger = logging.getLogger(__name__)


def parse_weather(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not data:
        return {}
    out: Dict[str, Any] = {}
    coord = data.get("coord")
    if isinstance(coord, dict):
        out["coord"] = {"lat": coord.get("lat"), "lon": coord.get("lon")}
    main = data.get("main") or {}
    out["temp"] = main.get("temp")
    out["humidity"] = main.get("humidity")
    out["pressure"] = main.get("pressure")
    if data.get("wind"):
        out["wind"] = data["wind"]
    return out


class OpenWeatherClient:
    def __init__(self, session: aiohttp.ClientSession, settings: ProviderSettings):
        self.session = session
        self.url = settings.open_weather_url
        self.api_key = settings.open_weather_api_key
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_s)

    async def fetch_weather(self, point) -> Dict[str, Any]:
        params = {"lat": point.lat, "lon": point.lon, "appid": self.api_key or "", "units": "metric"}
        logger.debug("GET %s lat=%s lon=%s", self.url, point.lat, point.lon)
        async with self.session.get(self.url, params=params, timeout=self.timeout) as response:
            if response.status != 200:
                raise ProviderError(
                    f"Response from OpenWeather API has a non-200 status = {response.status}",
                    response.status)
            data = await response.json()
        return parse_weather(data)
