import inspect
import logging
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple, Union
from urllib.parse import quote

import httpx
from dynaconf import Dynaconf

from bing_maps.errors import ResponseParseError
from bing_maps.logging_config import correlation_scope
from bing_maps.schemas.routes import (
    DrivingOptions,
    ErrorEnvelope,
    RouteOptions,
    RouteRequest,
    TransitOptions,
    WalkingOptions,
)


SERVICE_URL = "http://dev.virtualearth.net/REST/v1"

# Characters encodeURIComponent leaves untouched, on top of letters and digits
_UNRESERVED = "-_.!~*'()"

RouteResult = Tuple[Optional[Exception], Any]
RouteCallback = Callable[[Optional[Exception], Any], Union[None, Awaitable[None]]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_travel_time(moment: datetime) -> str:
    """Format a datetime as an unpadded UTC "M/D/YYYY H:M:S" string"""
    moment = moment.astimezone(timezone.utc)
    return (
        f"{moment.month}/{moment.day}/{moment.year} "
        f"{moment.hour}:{moment.minute}:{moment.second}"
    )


def encode_query_string(args: Optional[Mapping[str, Any]]) -> str:
    """
    Convert a flat mapping into a query string ready to append to a URL.

    Values are percent-encoded the way encodeURIComponent does it, pairs are
    joined with "&" and the result is prefixed with "?". An empty or missing
    mapping yields an empty string.
    """
    if not args:
        return ""

    pairs = [f"{key}={quote(str(value), safe=_UNRESERVED)}" for key, value in args.items()]

    return "?" + "&".join(pairs)


def build_query_args(
    start_location: str, end_location: str, api_key: str, options: RouteOptions
) -> str:
    args = {
        "wp.0": start_location,
        "wp.1": end_location,
        "key": api_key,
    }
    args.update(options.query_params())

    return encode_query_string(args)


def build_route_url(base_url: str, resource_path: str, query_string: str) -> str:
    return base_url + "/" + resource_path + query_string


def _redact_key(url: str, api_key: str) -> str:
    if not api_key:
        return url
    return url.replace(quote(api_key, safe=_UNRESERVED), "***")


async def call_service_api(
    httpx_client: httpx.AsyncClient, url: str, logger: Logger
) -> RouteResult:
    """
    Perform one GET against the routing service and normalize the outcome.

    Returns:
        (None, parsed_json) when the service answers 200 with a JSON body,
        otherwise (error_or_None, ErrorEnvelope). Non-200 bodies are kept raw.
    """
    try:
        response = await httpx_client.get(url)
    except httpx.RequestError as e:
        # Transport failures, undecodable bodies and redirect loops alike
        logger.error(f"Routing request failed without a usable response: {e!r}")
        return e, ErrorEnvelope.from_response(None, None)

    if response.status_code != httpx.codes.OK:
        logger.warning(f"Routing service returned HTTP {response.status_code}")
        return None, ErrorEnvelope.from_response(response.status_code, response.text)

    try:
        body = response.json()
    except ValueError as e:
        logger.warning(f"Routing service returned a body that is not JSON: {e}")
        return (
            ResponseParseError(response.status_code, response.text, e),
            ErrorEnvelope.from_response(response.status_code, response.text),
        )

    logger.info(f"Routing service returned HTTP {response.status_code}")
    return None, body


class BingMapsClient:
    """Transit, walking and driving directions from the Bing Maps REST service."""

    def __init__(
        self,
        httpx_client: httpx.AsyncClient,
        api_key: str,
        system_logger: Optional[Logger] = None,
        base_url: str = SERVICE_URL,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.httpx_client = httpx_client
        self.api_key = api_key
        self.system_logger = system_logger or logging.getLogger(__name__)
        self.base_url = base_url.rstrip("/")
        self.clock = clock

    @staticmethod
    def create_httpx_client(timeout: float = 10.0) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    @classmethod
    def from_settings(
        cls,
        httpx_client: httpx.AsyncClient,
        settings: Dynaconf,
        system_logger: Optional[Logger] = None,
    ) -> "BingMapsClient":
        return cls(
            httpx_client,
            api_key=str(settings.get("bing_maps_api_key", "")),
            system_logger=system_logger,
            base_url=settings.bing_maps.api_url,
        )

    async def get_transit_route(
        self,
        start_location: str,
        end_location: str,
        callback: Optional[RouteCallback] = None,
        options: Optional[TransitOptions] = None,
    ) -> RouteResult:
        options = options or TransitOptions()
        if options.travel_time is None:
            options = options.model_copy(
                update={"travel_time": format_travel_time(self.clock())}
            )

        return await self._route(
            RouteRequest(start_location, end_location, "transit"), options, callback
        )

    async def get_walking_route(
        self,
        start_location: str,
        end_location: str,
        callback: Optional[RouteCallback] = None,
        options: Optional[WalkingOptions] = None,
    ) -> RouteResult:
        return await self._route(
            RouteRequest(start_location, end_location, "walking"),
            options or WalkingOptions(),
            callback,
        )

    async def get_driving_route(
        self,
        start_location: str,
        end_location: str,
        callback: Optional[RouteCallback] = None,
        options: Optional[DrivingOptions] = None,
    ) -> RouteResult:
        return await self._route(
            RouteRequest(start_location, end_location, "driving"),
            options or DrivingOptions(),
            callback,
        )

    def route_url(self, request: RouteRequest, options: RouteOptions) -> str:
        query_string = build_query_args(
            request.start_location, request.end_location, self.api_key, options
        )
        return build_route_url(self.base_url, request.resource_path, query_string)

    async def _route(
        self,
        request: RouteRequest,
        options: RouteOptions,
        callback: Optional[RouteCallback],
    ) -> RouteResult:
        with correlation_scope():
            url = self.route_url(request, options)
            self.system_logger.debug(
                f"Requesting {request.mode} route: {_redact_key(url, self.api_key)}"
            )

            err, result = await call_service_api(
                self.httpx_client, url, self.system_logger
            )

            if callback is not None:
                outcome = callback(err, result)
                if inspect.isawaitable(outcome):
                    await outcome

            return err, result
