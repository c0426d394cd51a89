"""EXIF GPS extraction and popup thumbnails for dropped image files."""

from __future__ import annotations

import asyncio
import base64
from io import BytesIO
from pathlib import Path
from typing import Mapping, Sequence

from PIL import Image, UnidentifiedImageError

from .models import LatLng
from .supersession import CancellationToken, guard

GPS_IFD = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


class ImageLocationError(RuntimeError):
    """Raised when an image does not carry a readable GPS position."""


class UnsupportedImageError(ImageLocationError):
    """Raised when Pillow cannot identify the image format."""


async def coordinate_of_image(path: Path, token: CancellationToken) -> LatLng:
    """Read the EXIF GPS position of ``path`` in a worker thread."""

    return await guard(asyncio.to_thread(read_coordinate, path), token)


async def image_thumbnail_url(path: Path, token: CancellationToken, *, size: int = 48) -> str:
    """Return a PNG ``data:`` URL no larger than ``size`` x ``size``."""

    return await guard(asyncio.to_thread(render_thumbnail, path, size), token)


def read_coordinate(path: Path) -> LatLng:
    image = _open(path)
    with image:
        gps = image.getexif().get_ifd(GPS_IFD)
    if not gps:
        raise ImageLocationError(f"No GPS data in {path.name}")
    return coordinate_from_gps(gps)


def coordinate_from_gps(gps: Mapping[int, object]) -> LatLng:
    """Convert an EXIF GPS IFD mapping into decimal degrees."""

    try:
        lat = _to_degrees(gps[GPS_LATITUDE])  # type: ignore[arg-type]
        lng = _to_degrees(gps[GPS_LONGITUDE])  # type: ignore[arg-type]
    except (KeyError, TypeError, ValueError, ZeroDivisionError) as exc:
        raise ImageLocationError(f"Incomplete GPS data: {exc}") from exc
    if _ref(gps.get(GPS_LATITUDE_REF)) == "S":
        lat = -lat
    if _ref(gps.get(GPS_LONGITUDE_REF)) == "W":
        lng = -lng
    return LatLng(lat=round(lat, 7), lng=round(lng, 7))


def render_thumbnail(path: Path, size: int) -> str:
    image = _open(path)
    with image:
        image.thumbnail((size, size))
        buffered = BytesIO()
        image.convert("RGBA").save(buffered, format="PNG")
    encoded = base64.b64encode(buffered.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def _open(path: Path) -> Image.Image:
    try:
        return Image.open(path)
    except UnidentifiedImageError as exc:
        raise UnsupportedImageError(f"Unsupported image format: {path.name}") from exc
    except OSError as exc:
        raise ImageLocationError(f"Cannot read {path.name}: {exc}") from exc


def _to_degrees(value: Sequence[object]) -> float:
    parts = [float(part) for part in value]  # type: ignore[arg-type]
    degrees, minutes, seconds = (parts + [0.0, 0.0, 0.0])[:3]
    return degrees + minutes / 60 + seconds / 3600


def _ref(value: object) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    return str(value or "").strip("\x00 ").upper()


__all__ = [
    "ImageLocationError",
    "UnsupportedImageError",
    "coordinate_from_gps",
    "coordinate_of_image",
    "image_thumbnail_url",
    "read_coordinate",
    "render_thumbnail",
]
