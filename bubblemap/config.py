"""Physics and gesture settings for BubbleMap."""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)


def get_data_dir() -> Path:
    """Get the application data directory."""
    data_dir = Path.home() / ".local" / "share" / "bubblemap"
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "exports").mkdir(exist_ok=True)
    return data_dir


def get_config_dir() -> Path:
    """Get the application config directory."""
    config_dir = Path.home() / ".config" / "bubblemap"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_settings_path() -> Path:
    """Get the settings file path."""
    return get_config_dir() / "settings.json"


@dataclass
class PhysicsSettings:
    """Tunable constants for the simulation and the long-press gesture."""
    friction: float = 0.98
    min_speed: float = 0.01
    spring_strength: float = 0.03
    rest_length: float = 120.0
    boundary_damping: float = 0.7
    collision_damping: float = 0.8
    margin: float = 5.0
    node_radius: float = 30.0
    spawn_distance: float = 100.0
    spawn_padding: float = 100.0
    long_press_ms: int = 500

    def __post_init__(self):
        # JSON may hand back 500.0; GLib timers only take whole milliseconds
        self.long_press_ms = int(self.long_press_ms)
        if not 0 < self.friction <= 1:
            raise ValueError(f"friction must be in (0, 1], got {self.friction}")
        if self.min_speed < 0:
            raise ValueError(f"min_speed must be >= 0, got {self.min_speed}")
        if self.node_radius <= 0:
            raise ValueError(f"node_radius must be positive, got {self.node_radius}")
        if self.rest_length < 0:
            raise ValueError(f"rest_length must be >= 0, got {self.rest_length}")
        if self.margin < 0 or self.spawn_padding < 0 or self.spawn_distance < 0:
            raise ValueError("margin, spawn_padding and spawn_distance must be >= 0")
        if self.long_press_ms <= 0:
            raise ValueError(f"long_press_ms must be positive, got {self.long_press_ms}")

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: Optional[str]) -> "PhysicsSettings":
        if not data:
            return cls()
        try:
            d = json.loads(data)
            # Filter to only known fields to handle schema evolution
            known = {f.name for f in cls.__dataclass_fields__.values()}
            return cls(**{k: v for k, v in d.items() if k in known})
        except (json.JSONDecodeError, TypeError, AttributeError):
            return cls()


def load_settings(path: Optional[Path] = None) -> PhysicsSettings:
    """Load settings from disk, falling back to defaults if the file is missing.

    Out-of-range values still raise ValueError so a bad config is noticed
    instead of silently producing odd motion.
    """
    path = Path(path) if path else get_settings_path()
    if not path.exists():
        return PhysicsSettings()
    return PhysicsSettings.from_json(path.read_text(encoding="utf-8"))


def save_settings(settings: PhysicsSettings, path: Optional[Path] = None) -> Path:
    path = Path(path) if path else get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.to_json(), encoding="utf-8")
    return path


def load_settings_or_defaults(path: Optional[Path] = None) -> Tuple[PhysicsSettings, Optional[str]]:
    """Load settings for the desktop app, which must start even with a bad file.

    Returns the settings and an error message when the file was rejected.
    """
    try:
        return load_settings(path), None
    except ValueError as exc:
        logger.error("Ignoring invalid settings file: %s", exc)
        return PhysicsSettings(), f"Invalid settings, using defaults: {exc}"
