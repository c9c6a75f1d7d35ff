from contextlib import asynccontextmanager
from logging import Logger
from typing import AsyncGenerator, Optional

from dynaconf import Dynaconf

from bing_maps.config import settings as default_settings
from bing_maps.integrations.bing import BingMapsClient


@asynccontextmanager
async def bing_maps_client(
    settings: Optional[Dynaconf] = None, logger: Optional[Logger] = None
) -> AsyncGenerator[BingMapsClient, None]:
    """Create a BingMapsClient from settings and close its httpx client on exit."""
    settings = settings or default_settings

    httpx_client = BingMapsClient.create_httpx_client(
        timeout=float(settings.bing_maps.timeout)
    )

    try:
        yield BingMapsClient.from_settings(httpx_client, settings, logger)
    finally:
        await httpx_client.aclose()
