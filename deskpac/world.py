"""
The simulation loop.

`World` owns every entity, the viewport and the simulation clock. A frame
driver calls `tick` with a monotonic timestamp once per refresh and reads
`snapshot()` afterwards; nothing here touches a drawing API.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import collisions
from .config import CLASSIC, EffectStyle, GHOST_NAMES, SimulationConfig, Theme
from .entities import Dot, Ghost, LogLine, Pacman, Particle, Popup
from .timers import TimerQueue
from .vector import Vec2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs for one frame, taken after the update settled."""
    width: float
    height: float
    clock: float
    theme: Theme
    pacman: Pacman
    ghosts: Tuple[Ghost, ...]
    dots: Tuple[Dot, ...]
    particles: Tuple[Particle, ...]
    popups: Tuple[Popup, ...]
    log_lines: Tuple[LogLine, ...]
    hunting: bool
    power_timer: float
    frightened_flash: bool


class World:
    def __init__(self, config: SimulationConfig = CLASSIC, width: float = 0, height: float = 0,
                 seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng if rng is not None else random.Random(seed)
        self.timers = TimerQueue()
        self.width = 0
        self.height = 0
        self._clear()
        self.resize(width, height)

    def _clear(self):
        self.clock = 0.0
        self.last_time: Optional[float] = None
        self.pacman: Optional[Pacman] = None
        self.ghosts: List[Ghost] = []
        self.dots: List[Dot] = []
        self.particles: List[Particle] = []
        self.popups: List[Popup] = []
        self.log_lines: List[LogLine] = []
        self.timers.clear()

    # --- Viewport & lifecycle ---

    @property
    def initialized(self) -> bool:
        return self.pacman is not None

    @property
    def has_valid_size(self) -> bool:
        return self.width > 0 and self.height > 0

    def resize(self, width, height):
        """Record a new viewport; the first usable size builds the world."""
        self.width = width or 0
        self.height = height or 0
        logger.info("Viewport %sx%s", self.width, self.height)
        if not self.initialized and self.has_valid_size:
            self.init_world()

    def init_world(self):
        config = self.config
        theme = config.theme
        w, h = self.width, self.height
        logger.info("World init %sx%s (%s)", w, h, theme.name)
        self.last_time = None

        self.pacman = Pacman(w / 2, h / 2, theme.pacman, config.pacman_radius)

        inset = config.ghost_corner_inset
        for i in range(config.ghost_count):
            x = inset if i % 2 == 0 else w - inset
            y = inset if i < 2 else h - inset
            variance = self.rng.random() * config.ghost_speed_variance
            name = GHOST_NAMES[i] if i < len(GHOST_NAMES) else f"GHOST{i}"
            self.ghosts.append(Ghost(name, x, y, theme.ghosts[i], config.ghost_radius, variance))

        for _ in range(config.dot_count):
            self.spawn_dot()

        if config.effect_style is EffectStyle.LOG:
            self.spawn_log(f"> DESKPAC ONLINE {w:g}x{h:g}", theme.log_text)

    def reset(self):
        """Throw the current world away and build a fresh one."""
        logger.info("World reset")
        self._clear()
        if self.has_valid_size:
            self.init_world()

    # --- Spawning ---

    def _spawn_extent(self, extent: float) -> float:
        padding = self.config.spawn_padding
        return max(extent - padding * 2, self.config.min_spawn_extent)

    def spawn_dot(self) -> Dot:
        config = self.config
        is_power = self.rng.random() < config.power_dot_chance
        x = self.rng.random() * self._spawn_extent(self.width) + config.spawn_padding
        y = self.rng.random() * self._spawn_extent(self.height) + config.spawn_padding
        dot = Dot(Vec2(x, y), is_power, config.power_dot_radius if is_power else config.dot_radius)
        self.dots.append(dot)
        return dot

    def random_point(self) -> Vec2:
        return Vec2(self.rng.uniform(0, self.width), self.rng.uniform(0, self.height))

    def spawn_popup(self, pos: Vec2, text: str, color) -> Popup:
        popup = Popup(pos.copy(), text, color, self.config.popup_life, self.config.popup_rise_speed)
        self.popups.append(popup)
        return popup

    def spawn_log(self, text: str, color) -> LogLine:
        config = self.config
        if len(self.log_lines) >= config.max_log_lines:
            self.log_lines.pop(0)
        line = LogLine(text, self.height - 40, color, config.log_life, config.log_rise_speed)
        self.log_lines.append(line)

        # New lines enter at the bottom and push older ones up so none overlap
        above = line.y
        for older in reversed(self.log_lines[:-1]):
            older.y = min(older.y, above - config.log_line_height)
            above = older.y
        logger.debug("log: %s", text)
        return line

    def spawn_particles(self, pos: Vec2, color):
        config = self.config
        for _ in range(config.particle_count):
            vel = Vec2((self.rng.random() - 0.5) * config.particle_speed,
                       (self.rng.random() - 0.5) * config.particle_speed)
            self.particles.append(Particle(pos.copy(), vel, color, config.particle_life))

    def schedule_respawn(self, ghost: Ghost):
        self.timers.schedule(self.clock + self.config.respawn_delay, lambda: self._respawn(ghost))

    def _respawn(self, ghost: Ghost):
        ghost.respawn(self.random_point())
        logger.debug("%s respawned at %s", ghost.name, ghost.pos)
        if self.config.effect_style is EffectStyle.LOG:
            self.spawn_log(f"> RESPAWN {ghost.name}", self.config.theme.log_text)

    # --- Power state ---

    @property
    def hunting(self) -> bool:
        return self.pacman is not None and self.pacman.hunting

    @property
    def frightened_flash(self) -> bool:
        """True on the "white" half of the near-expiry blink."""
        if not self.hunting or self.pacman.power_timer >= self.config.power_flash_window:
            return False
        return int(self.clock / self.config.flash_period) % 2 == 0

    # --- Loop ---

    def tick(self, timestamp: float) -> bool:
        """
        Advance by the time since the previous tick, in seconds.

        The step is clamped to `max_dt` so a long stall never becomes one
        huge integration step. Returns False while the world is waiting for a
        usable viewport or for its first timestamp.
        """
        if not self.initialized:
            return False
        if self.last_time is None:
            self.last_time = timestamp
            return False

        dt = min(max(timestamp - self.last_time, 0.0), self.config.max_dt)
        self.last_time = timestamp
        self.step(dt)
        return True

    def step(self, dt: float):
        if not self.initialized:
            return
        self.clock += dt
        self.timers.poll(self.clock)
        self.pacman.tick_power(dt)

        if len(self.dots) < self.config.dot_count:
            self.spawn_dot()

        # Pac-Man first so ghosts chase this frame's position
        try:
            self.pacman.update(dt, self)
            collisions.resolve(self)
        except Exception:
            logger.exception("Pac-Man update failed")

        for ghost in self.ghosts:
            try:
                ghost.update(dt, self)
            except Exception:
                logger.exception("%s update failed", ghost.name)

        self._age_effects(dt)

    def _age_effects(self, dt: float):
        for effects in (self.particles, self.popups, self.log_lines):
            for effect in effects:
                effect.update(dt)
            effects[:] = [e for e in effects if e.alive]

    def snapshot(self) -> Optional[Snapshot]:
        if not self.initialized:
            return None
        return Snapshot(
            width=self.width,
            height=self.height,
            clock=self.clock,
            theme=self.config.theme,
            pacman=self.pacman,
            ghosts=tuple(self.ghosts),
            dots=tuple(self.dots),
            particles=tuple(self.particles),
            popups=tuple(self.popups),
            log_lines=tuple(self.log_lines),
            hunting=self.hunting,
            power_timer=self.pacman.power_timer,
            frightened_flash=self.frightened_flash,
        )
