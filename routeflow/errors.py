class RouteFlowError(Exception):
    """Base class for every error raised by routeflow."""


class InputError(RouteFlowError):
    """The request itself is malformed. Reported to the caller, never retried."""


class InvalidCoordinateError(InputError):
    pass


class InvalidThresholdError(InputError):
    pass


class EmptyRouteError(InputError):
    pass


class InvalidRepeatError(InputError):
    pass


class RouteTooLongError(InputError):
    def __init__(self, distance_m: float, limit_m: float):
        super().__init__(
            f"Distance is too large ({distance_m:.0f} m >= {limit_m:.0f} m). "
            "Try requesting smaller portions of the route when needed."
        )
        self.distance_m = distance_m
        self.limit_m = limit_m


class ProviderError(RouteFlowError):
    """A single enrichment call failed. Isolated per point by the dispatcher."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class RouteSourceError(RouteFlowError):
    """The route provider did not return a usable route."""


class DispatchError(RouteFlowError):
    """The enrichment mechanism itself cannot be invoked. Fatal for the request."""


class ConfigError(RouteFlowError, ValueError):
    """A configuration value is out of range."""
