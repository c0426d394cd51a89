"""Minimal free-text coordinate recognition for the search bar."""

from __future__ import annotations

import re

from .models import LatLng

_COORDINATE = re.compile(
    r"(?P<lat>-?\d+(?:\.\d*)?)(?:\s+|\s*,\s*)(?P<lng>-?\d+(?:\.\d*)?)"
)


def search_coordinate(text: str) -> LatLng | None:
    """Return the first ``lat, lng`` pair found in ``text``, if any."""

    match = _COORDINATE.search(text)
    if match is None:
        return None
    return LatLng(lat=float(match.group("lat")), lng=float(match.group("lng")))


__all__ = ["search_coordinate"]
