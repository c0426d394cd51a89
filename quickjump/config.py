"""App configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

from .geocoder import DEFAULT_GEOCODER_URL, DEFAULT_MUNICIPALITY_TABLE_URL

CONFIG_FILE = Path.home() / ".config" / "quickjump" / "config.toml"

_FLOAT_FIELDS = (
    "input_wait_interval",
    "enter_wait_interval",
    "location_update_wait_interval",
    "toast_evict_delay",
    "request_timeout",
    "pan_step",
)
_INT_FIELDS = ("toast_max_count", "thumbnail_size")
_STR_FIELDS = ("theme", "geocoder_url", "municipality_table_url")


class ViewState(BaseModel):
    """Persisted map viewport."""

    lat: float = 35.681236
    lng: float = 139.767125
    zoom: int = 15


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    theme: str = "dark"
    input_wait_interval: float = Field(default=3.0, ge=0)
    enter_wait_interval: float = Field(default=0.1, ge=0)
    location_update_wait_interval: float = Field(default=3.0, ge=0)
    toast_evict_delay: float = Field(default=5.0, ge=0)
    toast_max_count: int = Field(default=5, ge=0)
    geocoder_url: str = DEFAULT_GEOCODER_URL
    municipality_table_url: str = DEFAULT_MUNICIPALITY_TABLE_URL
    request_timeout: float = Field(default=10.0, gt=0)
    thumbnail_size: int = Field(default=48, gt=0)
    pan_step: float = Field(default=0.01, gt=0)
    initial_view: ViewState = Field(default_factory=ViewState)

    def with_view(self, **updates: object) -> AppConfig:
        """Return a copy with viewport changes applied."""

        view = self.initial_view.model_copy(update=updates)
        return self.model_copy(update={"initial_view": view})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    view = data.pop("initial_view", None)
    try:
        return AppConfig(
            **data,
            initial_view=view if isinstance(view, ViewState) else ViewState(),
        )
    except ValueError:
        return AppConfig()


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [f'theme = "{config.theme}"']
    for name in _FLOAT_FIELDS:
        lines.append(f"{name} = {float(getattr(config, name))}")
    for name in _INT_FIELDS:
        lines.append(f"{name} = {int(getattr(config, name))}")
    lines.append(f'geocoder_url = "{config.geocoder_url}"')
    lines.append(f'municipality_table_url = "{config.municipality_table_url}"')
    lines.append("")
    lines.append("[initial_view]")
    lines.append(f"lat = {config.initial_view.lat}")
    lines.append(f"lng = {config.initial_view.lng}")
    lines.append(f"zoom = {config.initial_view.zoom}")
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if not isinstance(raw, dict):
        return data
    for name in _STR_FIELDS:
        value = raw.get(name)
        if isinstance(value, str):
            data[name] = value
    for name in _FLOAT_FIELDS:
        value = raw.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            data[name] = float(value)
    for name in _INT_FIELDS:
        value = raw.get(name)
        if isinstance(value, int) and not isinstance(value, bool):
            data[name] = value
    view = raw.get("initial_view")
    if isinstance(view, dict):
        state: dict[str, object] = {}
        for key in ("lat", "lng"):
            value = view.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                state[key] = float(value)
        zoom = view.get("zoom")
        if isinstance(zoom, int) and not isinstance(zoom, bool):
            state["zoom"] = zoom
        data["initial_view"] = ViewState(**state)
    return data


__all__ = ["CONFIG_FILE", "AppConfig", "ViewState", "load_config", "save_config"]
