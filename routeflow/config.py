import logging
import os
from dataclasses import dataclass
from typing import Optional

from routeflow.errors import ConfigError

logger = logging.getLogger(__name__)

# sampling defaults (meters)
DISTANCE_THRESHOLD_INTRACITY = 250.0
DISTANCE_THRESHOLD_INTERCITY = 2000.0
MAX_CITY_DISTANCE = 50_000.0
MAX_ROUTE_DISTANCE = 400_000.0
DISTANCE_BIAS_RATIO = 0.1

# rate limiting towards the enrichment provider
CHUNK_SIZE = 50
CHUNK_PAUSE_S = 1.0

# upper bound of consecutive flow lookups in one trajectory request
MAX_TRAJECTORY_REPEAT = 20

# providers
OSRM_BASE_URL = "https://router.project-osrm.org"
TOMTOM_FLOW_URL = "https://api.tomtom.com/traffic/services/4/flowSegmentData/absolute/10/json"
OPEN_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
HTTP_TIMEOUT_S = 15.0


def _safe_float(value, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _safe_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass(frozen=True)
class SamplingConfig:
    intra_city_spacing_m: float = DISTANCE_THRESHOLD_INTRACITY
    inter_city_spacing_m: float = DISTANCE_THRESHOLD_INTERCITY
    max_city_distance_m: float = MAX_CITY_DISTANCE
    max_route_distance_m: float = MAX_ROUTE_DISTANCE
    bias_ratio: float = DISTANCE_BIAS_RATIO
    chunk_size: int = CHUNK_SIZE
    chunk_pause_s: float = CHUNK_PAUSE_S

    def validate(self) -> "SamplingConfig":
        if self.intra_city_spacing_m <= 0 or self.inter_city_spacing_m <= 0:
            raise ConfigError("sampling spacings must be positive")
        if self.max_city_distance_m < 0 or self.max_route_distance_m <= 0:
            raise ConfigError("distance cutoffs must be positive")
        if not 0.0 <= self.bias_ratio < 1.0:
            raise ConfigError(f"bias_ratio must be in [0, 1), got {self.bias_ratio}")
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.chunk_pause_s < 0:
            raise ConfigError(f"chunk_pause_s must be >= 0, got {self.chunk_pause_s}")
        return self

    @classmethod
    def from_env(cls) -> "SamplingConfig":
        cfg = cls(
            intra_city_spacing_m=_safe_float(
                os.getenv("ROUTEFLOW_INTRA_CITY_SPACING_M"), DISTANCE_THRESHOLD_INTRACITY),
            inter_city_spacing_m=_safe_float(
                os.getenv("ROUTEFLOW_INTER_CITY_SPACING_M"), DISTANCE_THRESHOLD_INTERCITY),
            max_city_distance_m=1000 * _safe_float(
                os.getenv("ROUTEFLOW_MAX_CITY_DISTANCE_KM"), MAX_CITY_DISTANCE / 1000),
            max_route_distance_m=1000 * _safe_float(
                os.getenv("ROUTEFLOW_MAX_ROUTE_DISTANCE_KM"), MAX_ROUTE_DISTANCE / 1000),
            bias_ratio=_safe_float(os.getenv("ROUTEFLOW_BIAS_RATIO"), DISTANCE_BIAS_RATIO),
            chunk_size=_safe_int(os.getenv("ROUTEFLOW_CHUNK_SIZE"), CHUNK_SIZE),
            chunk_pause_s=_safe_float(os.getenv("ROUTEFLOW_CHUNK_PAUSE_S"), CHUNK_PAUSE_S),
        ).validate()
        logger.info("intra-city spacing is set to %s meters", cfg.intra_city_spacing_m)
        logger.info("inter-city spacing is set to %s meters", cfg.inter_city_spacing_m)
        logger.info("max city distance is set to %s meters", cfg.max_city_distance_m)
        logger.info("max route distance is set to %s meters", cfg.max_route_distance_m)
        return cfg


@dataclass(frozen=True)
class ProviderSettings:
    osrm_base_url: str = OSRM_BASE_URL
    tomtom_flow_url: str = TOMTOM_FLOW_URL
    open_weather_url: str = OPEN_WEATHER_URL
    tomtom_api_key: Optional[str] = None
    open_weather_api_key: Optional[str] = None
    timeout_s: float = HTTP_TIMEOUT_S

    @classmethod
    def from_env(cls) -> "ProviderSettings":
        settings = cls(
            osrm_base_url=_env_str("OSRM_BASE_URL") or OSRM_BASE_URL,
            tomtom_flow_url=_env_str("TOMTOM_FLOW_URL") or TOMTOM_FLOW_URL,
            open_weather_url=_env_str("OPEN_WEATHER_URL") or OPEN_WEATHER_URL,
            tomtom_api_key=_env_str("TOMTOM_API_KEY"),
            open_weather_api_key=_env_str("OPEN_WEATHER_API_KEY"),
            timeout_s=max(1.0, _safe_float(os.getenv("ROUTEFLOW_HTTP_TIMEOUT_S"), HTTP_TIMEOUT_S)),
        )
        if settings.tomtom_api_key is None:
            logger.warning("TOMTOM_API_KEY environment variable is not set. Requests to TomTom API will fail.")
        if settings.open_weather_api_key is None:
            logger.warning("OPEN_WEATHER_API_KEY environment variable is not set. "
                           "Requests to OpenWeather API will fail.")
        return settings
