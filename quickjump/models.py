"""Shared dataclasses used across the map, geocoder, and terminal modules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LatLng:
    """Geographic coordinate in decimal degrees."""

    lat: float
    lng: float

    def label(self) -> str:
        return f"{self.lat}, {self.lng}"


@dataclass(frozen=True, slots=True)
class Address:
    """Structured result of a reverse-geocode lookup."""

    municipality_code: str
    local_name: str
    prefecture: str | None = None
    municipality: str | None = None

    def label(self) -> str:
        parts = [self.prefecture, self.municipality, self.local_name]
        return ", ".join(part for part in parts if part)


__all__ = ["Address", "LatLng"]
