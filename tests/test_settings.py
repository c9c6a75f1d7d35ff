import pytest
import httpx
from dynaconf import Dynaconf

from bing_maps.config import settings
from bing_maps.integrations.bing import SERVICE_URL, BingMapsClient
from bing_maps.lifespan import bing_maps_client
from bing_maps.schemas.routes import DrivingOptions, RouteRequest
from tests.utils import MockLogger


@pytest.fixture
def test_settings():
    return Dynaconf(
        bing_maps={"api_url": "http://maps.test/REST/v1/", "timeout": 2.5},
        bing_maps_api_key="settings-key",
    )


def test_packaged_defaults():
    assert settings.bing_maps.api_url == SERVICE_URL
    assert float(settings.bing_maps.timeout) == 10.0


@pytest.mark.asyncio
async def test_from_settings(test_settings):
    captured = []

    def mock_handler(request: httpx.Request):
        captured.append(request)
        return httpx.Response(200, json={"resourceSets": []})

    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_handler)) as httpx_client:
        client = BingMapsClient.from_settings(httpx_client, test_settings, MockLogger())
        await client.get_driving_route("a", "b")

    assert client.api_key == "settings-key"
    assert client.base_url == "http://maps.test/REST/v1"
    assert str(captured[0].url).startswith("http://maps.test/REST/v1/Routes/Driving?")
    assert captured[0].url.params["key"] == "settings-key"


@pytest.mark.asyncio
async def test_lifespan_closes_httpx_client(test_settings):
    async with bing_maps_client(test_settings, MockLogger()) as client:
        assert isinstance(client, BingMapsClient)
        assert client.api_key == "settings-key"
        assert client.httpx_client.timeout.read == 2.5
        assert not client.httpx_client.is_closed

    assert client.httpx_client.is_closed


@pytest.mark.asyncio
async def test_from_settings_casts_numeric_key_to_str():
    numeric_settings = Dynaconf(
        bing_maps={"api_url": SERVICE_URL, "timeout": 10.0},
        bing_maps_api_key=12345,
    )

    async with httpx.AsyncClient() as httpx_client:
        client = BingMapsClient.from_settings(httpx_client, numeric_settings, MockLogger())

    assert client.api_key == "12345"
    assert "key=12345" in client.route_url(
        RouteRequest("a", "b", "driving"), DrivingOptions()
    )
