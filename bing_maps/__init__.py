from bing_maps.errors import BingMapsError, ResponseParseError
from bing_maps.integrations.bing import (
    BingMapsClient,
    build_query_args,
    build_route_url,
    call_service_api,
    encode_query_string,
)
from bing_maps.lifespan import bing_maps_client
from bing_maps.schemas.routes import (
    DrivingOptions,
    ErrorEnvelope,
    RouteRequest,
    TransitOptions,
    WalkingOptions,
)

__all__ = [
    "BingMapsClient",
    "BingMapsError",
    "DrivingOptions",
    "ErrorEnvelope",
    "ResponseParseError",
    "RouteRequest",
    "TransitOptions",
    "WalkingOptions",
    "bing_maps_client",
    "build_query_args",
    "build_route_url",
    "call_service_api",
    "encode_query_string",
]
