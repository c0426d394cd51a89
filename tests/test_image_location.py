"""Tests for EXIF GPS extraction and thumbnails."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from quickjump.image_location import (
    GPS_LATITUDE,
    GPS_LATITUDE_REF,
    GPS_LONGITUDE,
    GPS_LONGITUDE_REF,
    ImageLocationError,
    UnsupportedImageError,
    coordinate_from_gps,
    coordinate_of_image,
    image_thumbnail_url,
    read_coordinate,
)
from quickjump.models import LatLng
from quickjump.supersession import Cancelled, CancellationToken


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def test_coordinate_from_gps_converts_dms() -> None:
    gps = {
        GPS_LATITUDE_REF: "N",
        GPS_LATITUDE: (35.0, 40.0, 52.45),
        GPS_LONGITUDE_REF: "E",
        GPS_LONGITUDE: (139.0, 46.0, 1.65),
    }

    coordinate = coordinate_from_gps(gps)

    assert coordinate.lat == pytest.approx(35.681236, abs=1e-5)
    assert coordinate.lng == pytest.approx(139.767125, abs=1e-5)


def test_coordinate_from_gps_applies_hemisphere_refs() -> None:
    gps = {
        GPS_LATITUDE_REF: b"S\x00",
        GPS_LATITUDE: (33.0, 52.0, 0.0),
        GPS_LONGITUDE_REF: "W",
        GPS_LONGITUDE: (70.0, 30.0, 0.0),
    }

    assert coordinate_from_gps(gps) == LatLng(-33.8666667, -70.5)


def test_coordinate_from_gps_requires_both_axes() -> None:
    with pytest.raises(ImageLocationError):
        coordinate_from_gps({GPS_LATITUDE: (1.0, 0.0, 0.0)})


def test_image_without_exif_has_no_location(tmp_path: Path) -> None:
    path = tmp_path / "plain.png"
    Image.new("RGB", (8, 8), color=(0, 128, 0)).save(path)

    with pytest.raises(ImageLocationError):
        read_coordinate(path)


def test_non_image_file_is_unsupported(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    with pytest.raises(UnsupportedImageError):
        read_coordinate(path)


def test_missing_file_is_a_location_error(tmp_path: Path) -> None:
    with pytest.raises(ImageLocationError):
        read_coordinate(tmp_path / "missing.jpg")


@pytest.mark.anyio
async def test_thumbnail_is_a_small_png_data_url(tmp_path: Path) -> None:
    path = tmp_path / "big.png"
    Image.new("RGB", (200, 100), color=(255, 0, 0)).save(path)

    url = await image_thumbnail_url(path, CancellationToken(), size=48)

    assert url.startswith("data:image/png;base64,")
    payload = base64.b64decode(url.split(",", 1)[1])
    with Image.open(BytesIO(payload)) as thumb:
        assert max(thumb.size) <= 48


@pytest.mark.anyio
async def test_revoked_token_skips_image_read(tmp_path: Path) -> None:
    token = CancellationToken()
    token.revoke()

    with pytest.raises(Cancelled):
        await coordinate_of_image(tmp_path / "any.jpg", token)
