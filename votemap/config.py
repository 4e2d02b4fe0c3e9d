"""Configuration helpers for map viewer settings."""
from __future__ import annotations

from configparser import ConfigParser, Error
from dataclasses import dataclass, field
import logging
from pathlib import Path
import sys
from typing import Dict, Optional

from votemap.common import constants
from votemap.geometry.boxes import Box
from votemap.labels.placement import PlacementPolicy

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "votemap.ini"
_VIEW_SECTION = "view"
_LABELS_SECTION = "labels"
_DATA_SECTION = "data"
_PRESETS_SECTION = "presets"


@dataclass(frozen=True)
class PresetLocation:
    key: str
    name: str
    box: Box


def _default_presets() -> Dict[str, PresetLocation]:
    return {
        key: PresetLocation(key, name, Box.from_rect(x, y, width, height))
        for key, (name, x, y, width, height) in constants.DEFAULT_PRESETS.items()
    }


@dataclass(frozen=True)
class ViewerSettings:
    min_scale: float = constants.MIN_SCALE
    max_scale: float = constants.MAX_SCALE
    max_scroll: float = constants.MAX_SCROLL
    scroll_duration_ms: float = constants.SCROLL_DURATION_MS
    jump_duration_ms: float = constants.JUMP_DURATION_MS
    jump_leg_duration_ms: float = constants.JUMP_LEG_DURATION_MS
    label_text_height: int = constants.LABEL_TEXT_HEIGHT
    label_grid_resolution: int = constants.LABEL_GRID_RESOLUTION
    label_policy: PlacementPolicy = PlacementPolicy.CONTINUE
    labels_path: Optional[Path] = None
    vertices_path: Optional[Path] = None
    presets: Dict[str, PresetLocation] = field(default_factory=_default_presets)

    def preset_boxes(self) -> Dict[str, Box]:
        return {key: preset.box for key, preset in self.presets.items()}

    def home_box(self) -> Box | None:
        """Box shown when the viewer opens: the first preset."""
        for preset in self.presets.values():
            return preset.box
        return None


def _config_dir(main_script_path: Optional[Path]) -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    if main_script_path is not None:
        return main_script_path.resolve().parent
    main_module = sys.modules.get("__main__")
    if main_module and getattr(main_module, "__file__", None):
        return Path(main_module.__file__).resolve().parent
    return Path.cwd()


def config_path(main_script_path: Optional[Path]) -> Path:
    return _config_dir(main_script_path) / CONFIG_FILENAME


def _get_float(parser: ConfigParser, section: str, key: str, default: float) -> float:
    try:
        return parser.getfloat(section, key, fallback=default)
    except ValueError:
        logger.warning("Ignoring invalid %s.%s in config", section, key)
        return default


def _get_int(parser: ConfigParser, section: str, key: str, default: int) -> int:
    try:
        return parser.getint(section, key, fallback=default)
    except ValueError:
        logger.warning("Ignoring invalid %s.%s in config", section, key)
        return default


def _get_duration(parser: ConfigParser, key: str, default: float) -> float:
    value = _get_float(parser, _VIEW_SECTION, key, default)
    if value <= 0:
        logger.warning("Ignoring non-positive %s.%s in config", _VIEW_SECTION, key)
        return default
    return value


def _get_path(parser: ConfigParser, key: str, base_dir: Path) -> Optional[Path]:
    value = parser.get(_DATA_SECTION, key, fallback=None)
    if not value:
        return None
    candidate = Path(value)
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate


def parse_preset(key: str, value: str) -> PresetLocation:
    """Parse ``"Name: x, y, width, height"``."""
    name, sep, numbers = value.partition(":")
    if not sep:
        raise ValueError(f"Preset {key!r} is missing a name")
    parts = [part.strip() for part in numbers.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Preset {key!r} needs x, y, width, height")
    x, y, width, height = (float(part) for part in parts)
    if width <= 0 or height <= 0:
        raise ValueError(f"Preset {key!r} has an empty box")
    return PresetLocation(key, name.strip(), Box.from_rect(x, y, width, height))


def _load_presets(parser: ConfigParser) -> Dict[str, PresetLocation]:
    if not parser.has_section(_PRESETS_SECTION):
        return _default_presets()
    presets: Dict[str, PresetLocation] = {}
    for key, value in parser.items(_PRESETS_SECTION):
        try:
            presets[key] = parse_preset(key, value)
        except ValueError as exc:
            logger.warning("Skipping preset: %s", exc)
    return presets


def _load_policy(parser: ConfigParser) -> PlacementPolicy:
    value = parser.get(_LABELS_SECTION, "policy", fallback=PlacementPolicy.CONTINUE.value)
    try:
        return PlacementPolicy(value.strip().lower())
    except ValueError:
        logger.warning("Unknown label policy %r, using continue", value)
        return PlacementPolicy.CONTINUE


def load_settings(main_script_path: Optional[Path]) -> ViewerSettings:
    ini_path = config_path(main_script_path)
    if not ini_path.exists():
        return ViewerSettings()
    return load_settings_file(ini_path)


def load_settings_file(ini_path: Path) -> ViewerSettings:
    parser = ConfigParser()
    parser.optionxform = str
    try:
        with ini_path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
    except (OSError, Error) as exc:
        logger.warning("Could not read %s: %s", ini_path, exc)
        return ViewerSettings()

    defaults = ViewerSettings()
    min_scale = _get_float(parser, _VIEW_SECTION, "min_scale", defaults.min_scale)
    max_scale = _get_float(parser, _VIEW_SECTION, "max_scale", defaults.max_scale)
    if not 0 < min_scale < max_scale:
        logger.warning("Invalid scale range [%s, %s] in config", min_scale, max_scale)
        min_scale, max_scale = defaults.min_scale, defaults.max_scale
    max_scroll = _get_float(parser, _VIEW_SECTION, "max_scroll", defaults.max_scroll)
    if max_scroll <= 0:
        max_scroll = defaults.max_scroll

    base_dir = ini_path.resolve().parent
    return ViewerSettings(
        min_scale=min_scale,
        max_scale=max_scale,
        max_scroll=max_scroll,
        scroll_duration_ms=_get_duration(
            parser, "scroll_duration_ms", defaults.scroll_duration_ms
        ),
        jump_duration_ms=_get_duration(
            parser, "jump_duration_ms", defaults.jump_duration_ms
        ),
        jump_leg_duration_ms=_get_duration(
            parser, "jump_leg_duration_ms", defaults.jump_leg_duration_ms
        ),
        label_text_height=max(
            1, _get_int(parser, _LABELS_SECTION, "text_height", defaults.label_text_height)
        ),
        label_grid_resolution=max(
            1,
            _get_int(
                parser, _LABELS_SECTION, "grid_resolution", defaults.label_grid_resolution
            ),
        ),
        label_policy=_load_policy(parser),
        labels_path=_get_path(parser, "labels", base_dir),
        vertices_path=_get_path(parser, "vertices", base_dir),
        presets=_load_presets(parser),
    )
