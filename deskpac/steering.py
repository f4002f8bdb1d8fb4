"""
Steering behaviours.

Each behaviour returns a force; an agent sums the forces it wants, then
`integrate` applies the two-stage clamp: the summed force is limited to the
agent's steer limit, added to the velocity, the velocity is limited to the
agent's max speed, and only then is the position advanced by `vel * dt`.
"""

from __future__ import annotations
from typing import NamedTuple

from .config import BoundaryPolicy
from .vector import Vec2


class Step(NamedTuple):
    pos: Vec2
    vel: Vec2
    force: Vec2


def seek(pos: Vec2, vel: Vec2, target: Vec2, speed: float) -> Vec2:
    """Force that turns `vel` toward `target` at `speed`."""
    desired = (target - pos).normalize() * speed
    return desired - vel


def flee(pos: Vec2, vel: Vec2, threat: Vec2, speed: float) -> Vec2:
    """Force that turns `vel` directly away from `threat` at `speed`."""
    desired = (pos - threat).normalize() * speed
    return desired - vel


def repel(pos: Vec2, threat: Vec2, strength: float) -> Vec2:
    """Pure push away from `threat`, independent of the current velocity."""
    return (pos - threat).normalize() * strength


def boundary_force(pos: Vec2, width: float, height: float, margin: float, strength: float) -> Vec2:
    """Constant inward push on each axis where `pos` is inside the margin."""
    force = Vec2(0.0, 0.0)
    if pos.x < margin:
        force.x += strength
    if pos.x > width - margin:
        force.x -= strength
    if pos.y < margin:
        force.y += strength
    if pos.y > height - margin:
        force.y -= strength
    return force


def _bounce_axis(component: float, value: float, extent: float, margin: float, strength: float) -> float:
    inward = max(abs(component), strength)
    if value < margin:
        return inward
    if value > extent - margin:
        return -inward
    return component


def bounce(steering: Vec2, pos: Vec2, width: float, height: float, margin: float, strength: float) -> Vec2:
    """Force the steering axis inward near an edge instead of adding a push."""
    return Vec2(
        _bounce_axis(steering.x, pos.x, width, margin, strength),
        _bounce_axis(steering.y, pos.y, height, margin, strength),
    )


def apply_boundary(policy: BoundaryPolicy, steering: Vec2, pos: Vec2,
                   width: float, height: float, margin: float, strength: float) -> Vec2:
    if policy is BoundaryPolicy.BOUNCE:
        return bounce(steering, pos, width, height, margin, strength)
    return steering + boundary_force(pos, width, height, margin, strength)


def integrate(pos: Vec2, vel: Vec2, steering: Vec2, force_limit: float,
              max_speed: float, dt: float) -> Step:
    force = steering.limit(force_limit)
    new_vel = (vel + force).limit(max_speed)
    new_pos = pos + new_vel * dt
    return Step(new_pos, new_vel, force)
