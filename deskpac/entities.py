"""
Agents, collectibles and transient effects.

Agents read the world (viewport, config, other agents) and write only their
own state; anything that changes a collection is left to the collision
resolver and the world loop.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from . import steering
from .vector import Vec2

if TYPE_CHECKING:
    from .config import SimulationConfig
    from .world import World

Color = Tuple[int, int, int]


# ---------------------------------------------------------------------------
# COLLECTIBLES & EFFECTS
# ---------------------------------------------------------------------------

@dataclass
class Dot:
    pos: Vec2
    is_power: bool = False
    radius: float = 4.0


@dataclass
class Particle:
    pos: Vec2
    vel: Vec2
    color: Color
    life: float = 0.5

    @property
    def alive(self) -> bool:
        return self.life > 0

    def update(self, dt: float):
        self.pos = self.pos + self.vel * dt
        self.life -= dt


@dataclass
class Popup:
    """Floating label such as a score or "OUCH!"."""
    pos: Vec2
    text: str
    color: Color
    life: float = 1.0
    rise_speed: float = 50.0

    @property
    def alive(self) -> bool:
        return self.life > 0

    def update(self, dt: float):
        self.pos = Vec2(self.pos.x, self.pos.y - self.rise_speed * dt)
        self.life -= dt


@dataclass
class LogLine:
    """Terminal-style message; same lifetime contract as Popup."""
    text: str
    y: float
    color: Color
    life: float = 3.0
    rise_speed: float = 20.0

    @property
    def alive(self) -> bool:
        return self.life > 0

    def update(self, dt: float):
        self.y -= self.rise_speed * dt
        self.life -= dt


# ---------------------------------------------------------------------------
# ACTORS
# ---------------------------------------------------------------------------

class Actor:
    def __init__(self, x: float, y: float, color: Color, radius: float):
        self.pos = Vec2(x, y)
        self.vel = Vec2(0.0, 0.0)
        self.color = color
        self.radius = radius
        self.last_force = Vec2(0.0, 0.0)

    def touches(self, other) -> bool:
        return self.pos.dist(other.pos) < self.radius + other.radius

    def _move(self, world: World, force: Vec2, policy, margin: float, strength: float,
              force_limit: float, max_speed: float, dt: float):
        force = steering.apply_boundary(policy, force, self.pos, world.width, world.height,
                                        margin, strength)
        step = steering.integrate(self.pos, self.vel, force, force_limit, max_speed, dt)
        self.pos, self.vel, self.last_force = step


class Pacman(Actor):
    def __init__(self, x: float, y: float, color: Color, radius: float = 20.0):
        super().__init__(x, y, color, radius)
        self.angle = 0.0
        self.mouth_phase = 0.0
        self.combo = 0
        self.power_timer = 0.0

    # --- Power mode ---

    @property
    def hunting(self) -> bool:
        return self.power_timer > 0

    def activate_power(self, duration: float):
        self.power_timer = duration
        self.combo = 0

    def tick_power(self, dt: float):
        if self.power_timer > 0:
            self.power_timer = max(0.0, self.power_timer - dt)

    def max_speed(self, config: SimulationConfig) -> float:
        return config.pac_hunt_speed if self.hunting else config.pac_speed

    @property
    def mouth_open(self) -> float:
        """Half-angle of the mouth wedge in radians."""
        return abs(math.sin(self.mouth_phase)) * 0.25 * math.pi

    # --- AI ---

    def choose_target(self, world: World) -> Optional[Vec2]:
        """Nearest living ghost while hunting, otherwise the best-scoring dot."""
        config = world.config
        if self.hunting and config.hunt_ghosts:
            living = [g for g in world.ghosts if not g.dead]
            if living:
                return min(living, key=lambda g: self.pos.dist(g.pos)).pos

        best = None
        best_score = float('inf')
        for dot in world.dots:
            score = self.pos.dist(dot.pos) - (config.power_dot_bonus if dot.is_power else 0)
            if score < best_score:
                best_score = score
                best = dot
        return best.pos if best else None

    def steer(self, world: World) -> Vec2:
        config = world.config
        force = Vec2(0.0, 0.0)

        target = self.choose_target(world)
        if target is not None:
            force = force + steering.seek(self.pos, self.vel, target, self.max_speed(config))

        if not self.hunting:
            evade = config.pac_speed * config.flee_multiplier
            for ghost in world.ghosts:
                if not ghost.dead and self.pos.dist(ghost.pos) < config.threat_radius:
                    force = force + steering.repel(self.pos, ghost.pos, evade)
        return force

    def update(self, dt: float, world: World):
        config = world.config
        self._move(world, self.steer(world), config.boundary_policy, config.boundary_margin,
                   config.pac_boundary_force, config.pac_steer_limit, self.max_speed(config), dt)

        # Keep the last heading when nearly stopped
        if abs(self.vel.x) > 0.1 or abs(self.vel.y) > 0.1:
            self.angle = math.atan2(self.vel.y, self.vel.x)
        self.mouth_phase += dt * config.mouth_speed

    def relocate(self, pos: Vec2):
        self.pos = pos


class Ghost(Actor):
    def __init__(self, name: str, x: float, y: float, color: Color,
                 radius: float = 20.0, speed_variance: float = 0.0):
        super().__init__(x, y, color, radius)
        self.name = name
        self.dead = False
        self.speed_variance = speed_variance
        self.anim_phase = 0.0

    def max_speed(self, config: SimulationConfig, hunted: bool) -> float:
        if hunted:
            return config.ghost_flee_speed
        return config.ghost_speed + self.speed_variance

    def steer(self, world: World) -> Vec2:
        config = world.config
        pacman = world.pacman
        hunted = pacman.hunting

        if hunted:
            force = steering.flee(self.pos, self.vel, pacman.pos, config.ghost_flee_speed)
        else:
            force = steering.seek(self.pos, self.vel, pacman.pos, self.max_speed(config, False))

        for other in world.ghosts:
            if other is self or other.dead:
                continue
            if self.pos.dist(other.pos) < config.separation_radius:
                force = force + steering.repel(self.pos, other.pos, config.separation_force)
        return force

    def update(self, dt: float, world: World):
        if self.dead:
            return
        config = world.config
        self._move(world, self.steer(world), config.boundary_policy, config.boundary_margin,
                   config.ghost_boundary_force, config.ghost_steer_limit,
                   self.max_speed(config, world.pacman.hunting), dt)
        self.anim_phase += dt

    def die(self):
        self.dead = True
        self.vel = Vec2(0.0, 0.0)

    def respawn(self, pos: Vec2):
        self.dead = False
        self.vel = Vec2(0.0, 0.0)
        self.pos = pos
