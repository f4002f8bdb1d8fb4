"""Autonomous Pac-Man steering simulation."""

from .config import CLASSIC, PRESETS, TERMINAL, ConfigError, SimulationConfig, Theme, get_preset
from .vector import Vec2
from .world import Snapshot, World

__version__ = "1.0.0"

__all__ = [
    "CLASSIC", "TERMINAL", "PRESETS", "ConfigError", "SimulationConfig", "Theme",
    "get_preset", "Vec2", "Snapshot", "World",
]
