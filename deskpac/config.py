"""
Simulation tunables and the two built-in presets.

Every number the engine uses lives on `SimulationConfig`; the visual skin
lives on `Theme`. The "classic" preset is the round arcade look with floating
score popups, "terminal" is the pixelated green-screen look that reports
events as log lines and bounces off the screen edges.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Dict, Tuple

Color = Tuple[int, int, int]


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


class BoundaryPolicy(Enum):
    REPEL = "repel"    # constant inward push inside the margin
    BOUNCE = "bounce"  # steering axis forced inward inside the margin


class EffectStyle(Enum):
    POPUP = "popup"
    LOG = "log"


# ---------------------------------------------------------------------------
# THEMES
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Theme:
    name: str
    pacman: Color
    dot: Color
    power_dot: Color
    ghosts: Tuple[Color, ...]
    frightened: Color
    frightened_flash: Color
    eyes: Color = (255, 255, 255)
    pupils: Color = (0, 0, 255)
    background: Color = (0, 0, 0)
    score_text: Color = (0, 255, 255)
    power_text: Color = (255, 255, 255)
    dot_text: Color = (255, 184, 174)
    hurt_text: Color = (255, 0, 0)
    log_text: Color = (0, 255, 65)
    font_size: int = 16
    pixelated: bool = False
    pixel_size: int = 4
    scanlines: bool = False


CLASSIC_THEME = Theme(
    name="classic",
    pacman=(255, 255, 0),
    dot=(255, 184, 174),
    power_dot=(255, 215, 0),
    ghosts=((255, 0, 0), (255, 184, 255), (0, 255, 255), (255, 184, 82)),
    frightened=(0, 0, 255),
    frightened_flash=(255, 255, 255),
)

TERMINAL_THEME = Theme(
    name="terminal",
    pacman=(0, 255, 65),
    dot=(0, 170, 40),
    power_dot=(180, 255, 180),
    ghosts=((255, 60, 60), (255, 120, 255), (60, 220, 255), (255, 170, 60)),
    frightened=(0, 90, 255),
    frightened_flash=(230, 255, 230),
    score_text=(0, 255, 65),
    power_text=(180, 255, 180),
    hurt_text=(255, 60, 60),
    font_size=14,
    pixelated=True,
    scanlines=True,
)

GHOST_NAMES = ("BLINKY", "PINKY", "INKY", "CLYDE")


# ---------------------------------------------------------------------------
# SIMULATION CONFIG
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationConfig:
    # Speeds (units per second)
    pac_speed: float = 200.0
    pac_hunt_speed: float = 220.0
    ghost_speed: float = 160.0
    ghost_flee_speed: float = 100.0
    ghost_speed_variance: float = 20.0

    # Steering
    pac_steer_limit: float = 10.0
    ghost_steer_limit: float = 5.0
    boundary_margin: float = 50.0
    pac_boundary_force: float = 200.0
    ghost_boundary_force: float = 100.0
    boundary_policy: BoundaryPolicy = BoundaryPolicy.REPEL
    threat_radius: float = 150.0
    flee_multiplier: float = 3.0
    separation_radius: float = 50.0
    separation_force: float = 50.0

    # Dots
    dot_count: int = 20
    power_dot_chance: float = 0.05
    power_dot_bonus: float = 500.0
    dot_radius: float = 4.0
    power_dot_radius: float = 8.0
    spawn_padding: float = 50.0
    min_spawn_extent: float = 100.0

    # Power mode
    power_duration: float = 8.0
    power_flash_window: float = 2.0
    flash_period: float = 0.2
    hunt_ghosts: bool = True
    combo_points: int = 200

    # Actors
    pacman_radius: float = 20.0
    ghost_radius: float = 20.0
    ghost_count: int = 4
    ghost_corner_inset: float = 50.0
    respawn_delay: float = 5.0
    mouth_speed: float = 10.0

    # Effects
    effect_style: EffectStyle = EffectStyle.POPUP
    dot_popup_chance: float = 0.3
    popup_life: float = 1.0
    popup_rise_speed: float = 50.0
    particle_count: int = 6
    particle_speed: float = 200.0
    particle_life: float = 0.5
    log_life: float = 3.0
    log_rise_speed: float = 20.0
    log_line_height: float = 18.0
    max_log_lines: int = 8

    # Loop
    max_dt: float = 0.1

    theme: Theme = field(default=CLASSIC_THEME)

    _NON_NEGATIVE = (
        "pac_speed", "pac_hunt_speed", "ghost_speed", "ghost_flee_speed",
        "ghost_speed_variance", "pac_steer_limit", "ghost_steer_limit",
        "boundary_margin", "pac_boundary_force", "ghost_boundary_force",
        "threat_radius", "flee_multiplier", "separation_radius",
        "separation_force", "dot_count", "power_dot_bonus", "dot_radius",
        "power_dot_radius", "spawn_padding", "min_spawn_extent",
        "power_duration", "power_flash_window", "combo_points",
        "pacman_radius", "ghost_radius", "ghost_count", "ghost_corner_inset",
        "respawn_delay", "mouth_speed", "popup_life", "popup_rise_speed",
        "particle_count", "particle_speed", "particle_life", "log_life",
        "log_rise_speed", "log_line_height", "max_log_lines",
    )
    _PROBABILITIES = ("power_dot_chance", "dot_popup_chance")

    def __post_init__(self):
        for name in self._NON_NEGATIVE:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)!r}")
        for name in self._PROBABILITIES:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value!r}")
        if self.max_dt <= 0:
            raise ConfigError(f"max_dt must be > 0, got {self.max_dt!r}")
        if self.flash_period <= 0:
            raise ConfigError(f"flash_period must be > 0, got {self.flash_period!r}")
        if self.ghost_count > len(self.theme.ghosts):
            raise ConfigError(
                f"theme {self.theme.name!r} has {len(self.theme.ghosts)} ghost colors, "
                f"ghost_count is {self.ghost_count}")

    def with_overrides(self, **overrides) -> SimulationConfig:
        """Copy with some fields replaced; unknown names raise ConfigError."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"unknown config field(s): {', '.join(unknown)}")
        return replace(self, **overrides)


CLASSIC = SimulationConfig()

TERMINAL = SimulationConfig(
    power_duration=6.0,
    power_dot_bonus=1000.0,
    boundary_policy=BoundaryPolicy.BOUNCE,
    hunt_ghosts=False,
    effect_style=EffectStyle.LOG,
    dot_popup_chance=0.0,
    theme=TERMINAL_THEME,
)

PRESETS: Dict[str, SimulationConfig] = {
    "classic": CLASSIC,
    "terminal": TERMINAL,
}


def get_preset(name: str) -> SimulationConfig:
    try:
        return PRESETS[name]
    except KeyError:
        raise ConfigError(f"unknown preset {name!r} (choose from {', '.join(PRESETS)})") from None
