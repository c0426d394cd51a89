"""Tests for the GSI reverse geocoder client."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from quickjump.geocoder import GeocoderError, GsiReverseGeocoder, parse_municipality_table
from quickjump.supersession import Cancelled, CancellationToken

GEOCODER_URL = "https://geocoder.test/LonLatToAddress"
TABLE_URL = "https://geocoder.test/muni.js"

MUNI_JS = """
GSI.MUNI_ARRAY["1100"] = '1,北海道,1100,札幌市';
GSI.MUNI_ARRAY["13101"] = '13,東京都,13101,千代田区';
"""


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def _geocoder(handler) -> GsiReverseGeocoder:  # type: ignore[no-untyped-def]
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GsiReverseGeocoder(client=client, endpoint=GEOCODER_URL, municipality_table_url=TABLE_URL)


def test_parse_municipality_table() -> None:
    table = parse_municipality_table(MUNI_JS)

    assert table["13101"] == ("東京都", "千代田区")
    assert table["1100"] == ("北海道", "札幌市")


@pytest.mark.anyio
async def test_lookup_resolves_municipality_names() -> None:
    requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("muni.js"):
            return httpx.Response(200, text=MUNI_JS)
        return httpx.Response(200, json={"results": {"muniCd": "13101", "lv01Nm": "丸の内一丁目"}})

    geocoder = _geocoder(_handler)

    address = await geocoder.lookup(139.7671, 35.6812, CancellationToken())
    again = await geocoder.lookup(139.7671, 35.6812, CancellationToken())

    assert address is not None
    assert address.prefecture == "東京都"
    assert address.municipality == "千代田区"
    assert address.local_name == "丸の内一丁目"
    assert address.label() == "東京都, 千代田区, 丸の内一丁目"
    assert again == address
    assert requests[0].url.params["lat"] == "35.6812"
    assert requests[0].url.params["lon"] == "139.7671"
    assert sum(1 for request in requests if request.url.path.endswith("muni.js")) == 1


@pytest.mark.anyio
async def test_lookup_normalizes_leading_zero_codes() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("muni.js"):
            return httpx.Response(200, text=MUNI_JS)
        return httpx.Response(200, json={"results": {"muniCd": "01100", "lv01Nm": "北一条西"}})

    address = await _geocoder(_handler).lookup(141.35, 43.06, CancellationToken())

    assert address is not None
    assert address.municipality == "札幌市"


@pytest.mark.anyio
async def test_lookup_returns_none_without_results() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    assert await _geocoder(_handler).lookup(150.0, 20.0, CancellationToken()) is None


@pytest.mark.anyio
async def test_lookup_keeps_code_when_table_unavailable() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("muni.js"):
            return httpx.Response(503)
        return httpx.Response(200, json={"results": {"muniCd": "13101", "lv01Nm": "丸の内一丁目"}})

    address = await _geocoder(_handler).lookup(139.7, 35.6, CancellationToken())

    assert address is not None
    assert address.prefecture is None
    assert address.municipality_code == "13101"


@pytest.mark.anyio
async def test_http_errors_propagate() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(httpx.HTTPStatusError):
        await _geocoder(_handler).lookup(139.7, 35.6, CancellationToken())


@pytest.mark.anyio
async def test_malformed_payload_raises_geocoder_error() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(GeocoderError):
        await _geocoder(_handler).lookup(139.7, 35.6, CancellationToken())


@pytest.mark.anyio
async def test_revoking_token_cancels_inflight_request() -> None:
    async def _handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    geocoder = _geocoder(_handler)
    token = CancellationToken()
    asyncio.get_running_loop().call_later(0.02, token.revoke)

    with pytest.raises(Cancelled):
        await geocoder.lookup(139.7, 35.6, token)
