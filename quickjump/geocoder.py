"""Reverse geocoding against the GSI (Geospatial Information Authority of Japan) API."""

from __future__ import annotations

import logging
import re
from typing import Mapping, Protocol

import httpx

from .models import Address
from .supersession import CancellationToken, guard

LOG = logging.getLogger(__name__)

DEFAULT_GEOCODER_URL = "https://mreversegeocoder.gsi.go.jp/reverse-geocoder/LonLatToAddress"
DEFAULT_MUNICIPALITY_TABLE_URL = "https://maps.gsi.go.jp/js/muni.js"

_MUNI_ENTRY = re.compile(
    r"""MUNI_ARRAY\[\s*["'](?P<key>\d+)["']\s*\]\s*=\s*["'](?P<value>[^"']*)["']"""
)


class GeocoderError(RuntimeError):
    """Raised when the geocoding service returns an unusable payload."""


class ReverseGeocoder(Protocol):
    """Interface implemented by reverse geocoders."""

    async def lookup(self, lng: float, lat: float, token: CancellationToken) -> Address | None: ...


MunicipalityTable = Mapping[str, tuple[str, str]]


def parse_municipality_table(source: str) -> dict[str, tuple[str, str]]:
    """Parse ``muni.js`` into ``{code: (prefecture, municipality)}``."""

    table: dict[str, tuple[str, str]] = {}
    for match in _MUNI_ENTRY.finditer(source):
        fields = match.group("value").split(",")
        if len(fields) < 4:
            continue
        _, prefecture, _, municipality = fields[:4]
        table[_normalize_code(match.group("key"))] = (prefecture.strip(), municipality.strip())
    return table


class GsiReverseGeocoder:
    """Resolves coordinates to a prefecture / municipality / local area name."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        endpoint: str = DEFAULT_GEOCODER_URL,
        municipality_table_url: str | None = DEFAULT_MUNICIPALITY_TABLE_URL,
        municipality_table: MunicipalityTable | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._endpoint = endpoint
        self._table_url = municipality_table_url
        self._table: MunicipalityTable | None = municipality_table
        self._timeout = timeout

    async def lookup(self, lng: float, lat: float, token: CancellationToken) -> Address | None:
        """Return the address at ``(lng, lat)`` or ``None`` when nothing matches."""

        client = self._ensure_client()
        response = await guard(
            client.get(self._endpoint, params={"lat": lat, "lon": lng}),
            token,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            raise GeocoderError(f"Invalid geocoder response: {exc}") from exc
        results = payload.get("results") if isinstance(payload, dict) else None
        if not results:
            return None
        if not isinstance(results, dict):
            raise GeocoderError("Unexpected geocoder payload shape.")
        code = _normalize_code(str(results.get("muniCd", "")))
        local_name = str(results.get("lv01Nm", "")).strip()
        if local_name == "－":
            local_name = ""
        table = await self._municipality_table(token)
        prefecture, municipality = table.get(code, (None, None))
        return Address(
            municipality_code=code,
            local_name=local_name,
            prefecture=prefecture,
            municipality=municipality,
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _municipality_table(self, token: CancellationToken) -> MunicipalityTable:
        if self._table is not None:
            return self._table
        if not self._table_url:
            self._table = {}
            return self._table
        client = self._ensure_client()
        try:
            response = await guard(client.get(self._table_url), token)
            response.raise_for_status()
        except httpx.HTTPError:
            LOG.warning("Municipality table unavailable", extra={"url": self._table_url})
            return {}
        self._table = parse_municipality_table(response.text)
        LOG.debug("Loaded municipality table", extra={"entries": len(self._table)})
        return self._table

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client


def _normalize_code(code: str) -> str:
    stripped = code.strip().lstrip("0")
    return stripped or code.strip()


__all__ = [
    "DEFAULT_GEOCODER_URL",
    "DEFAULT_MUNICIPALITY_TABLE_URL",
    "GeocoderError",
    "GsiReverseGeocoder",
    "MunicipalityTable",
    "ReverseGeocoder",
    "parse_municipality_table",
]
