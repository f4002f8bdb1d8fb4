"""Pac-Man vs. dot and Pac-Man vs. ghost resolution, run right after Pac-Man moves."""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from .config import EffectStyle
from .vector import Vec2

if TYPE_CHECKING:
    from .entities import Ghost
    from .world import World

logger = logging.getLogger(__name__)

# Score popups sit just above Pac-Man
_POPUP_OFFSET = Vec2(0.0, 20.0)


def eat_dots(world: World) -> int:
    """Remove every dot Pac-Man overlaps. Returns how many were eaten."""
    pacman = world.pacman
    config = world.config
    theme = config.theme
    eaten = 0

    for i in range(len(world.dots) - 1, -1, -1):
        dot = world.dots[i]
        if not pacman.touches(dot):
            continue
        del world.dots[i]
        eaten += 1

        if dot.is_power:
            pacman.activate_power(config.power_duration)
            logger.debug("Power up at %s for %.1fs", pacman.pos, config.power_duration)
            if config.effect_style is EffectStyle.LOG:
                world.spawn_log(f"> POWER_UP.EXE ({config.power_duration:g}s)", theme.power_text)
            else:
                world.spawn_popup(pacman.pos, "POWER UP!", theme.power_text)
        elif world.rng.random() < config.dot_popup_chance:
            world.spawn_popup(pacman.pos, "10", theme.dot_text)
    return eaten


def _eat_ghost(world: World, ghost: Ghost):
    pacman = world.pacman
    config = world.config
    theme = config.theme

    ghost.die()
    pacman.combo += 1
    points = config.combo_points * pacman.combo
    logger.debug("%s eaten (combo %d, %d pts)", ghost.name, pacman.combo, points)

    if config.effect_style is EffectStyle.LOG:
        world.spawn_log(f"> KILL {ghost.name} +{points}", theme.score_text)
    else:
        world.spawn_popup(pacman.pos - _POPUP_OFFSET, f"{points}", theme.score_text)
    world.spawn_particles(ghost.pos, ghost.color)
    world.schedule_respawn(ghost)


def _penalty(world: World):
    pacman = world.pacman
    config = world.config
    theme = config.theme

    if config.effect_style is EffectStyle.LOG:
        world.spawn_log("> ERR: PACMAN HIT, RELOCATING", theme.hurt_text)
    else:
        world.spawn_popup(pacman.pos, "OUCH!", theme.hurt_text)
    pacman.relocate(world.random_point())
    logger.debug("Pac-Man hit, relocated to %s", pacman.pos)


def resolve_ghosts(world: World) -> int:
    """Apply ghost contacts. Returns the number of ghosts eliminated."""
    pacman = world.pacman
    eliminated = 0
    for ghost in world.ghosts:
        if ghost.dead or not pacman.touches(ghost):
            continue
        if pacman.hunting:
            _eat_ghost(world, ghost)
            eliminated += 1
        else:
            _penalty(world)
    return eliminated


def resolve(world: World):
    eat_dots(world)
    resolve_ghosts(world)
