from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import logging
from pathlib import Path
import tomllib
from typing import Any, Mapping

from .colors import is_valid_color

LOGGER = logging.getLogger(__name__)

CONFIG_TABLE = "transformtoy"


@dataclass(frozen=True)
class ToyConfig:
    """Rendering and playback settings for one toy canvas."""

    canvas_size: int = 600
    canvas_scale: float = 4.0
    play_step_size: float = 0.02
    animation_duration_ms: float = 1000.0
    step_duration_ms: float = 1000.0
    # backward playback runs right to left (param mirrored as N - param)
    reverse_right_to_left: bool = False
    default_fill: str = "black"
    default_stroke: str = "black"
    show_origin_frame: bool = True
    show_current_frame: bool = True
    forward_start_frame_color: str = "#000000"
    forward_current_frame_color: str = "#7F0000"
    backward_start_frame_color: str = "#a84aff"
    backward_current_frame_color: str = "#0080ff"


DEFAULT_CONFIG = ToyConfig()

_COLOR_KEYS = (
    "default_fill",
    "default_stroke",
    "forward_start_frame_color",
    "forward_current_frame_color",
    "backward_start_frame_color",
    "backward_current_frame_color",
)
_BOOL_KEYS = ("reverse_right_to_left", "show_origin_frame", "show_current_frame")
_POSITIVE_KEYS = ("canvas_scale", "play_step_size", "animation_duration_ms", "step_duration_ms")


def validate_config(overrides: Mapping[str, Any] | None = None, base: ToyConfig = DEFAULT_CONFIG) -> ToyConfig:
    """Validate and merge overrides against `base`."""

    raw: dict[str, Any] = asdict(base)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown config key: {key}")
            raw[key] = value

    size = raw["canvas_size"]
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError("Config `canvas_size` must be a positive integer")

    for key in _POSITIVE_KEYS:
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or float(value) <= 0:
            raise ValueError(f"Config `{key}` must be a positive number")

    for key in _BOOL_KEYS:
        if not isinstance(raw[key], bool):
            raise ValueError(f"Config `{key}` must be a boolean")

    for key in _COLOR_KEYS:
        if not is_valid_color(raw[key]):
            raise ValueError(f"Config `{key}` must be a color string")

    values = {f.name: raw[f.name] for f in fields(ToyConfig)}
    for key in _POSITIVE_KEYS:
        values[key] = float(values[key])
    return ToyConfig(**values)


def load_config(path: str | Path) -> ToyConfig:
    """Load a TOML config file; settings may sit at top level or under `[transformtoy]`."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get(CONFIG_TABLE, raw)
    if not isinstance(table, dict):
        raise ValueError(f"`{CONFIG_TABLE}` must be a table")
    config = validate_config(table)
    LOGGER.debug("loaded config from %s", config_path)
    return config
