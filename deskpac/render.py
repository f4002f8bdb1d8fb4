"""
pygame renderer for world snapshots.

Round shapes for the classic theme, chunky pixel blocks plus scanlines for
the terminal theme. The renderer only reads a `Snapshot`.
"""

from __future__ import annotations
import math
from typing import Optional

import pygame

from .config import Theme
from .entities import Ghost, Pacman
from .world import Snapshot

PELLET_MOUTH = (255, 184, 174)


class Renderer:
    def __init__(self, surface: pygame.Surface, theme: Theme):
        self.surface = surface
        self.theme = theme
        self._font: Optional[pygame.font.Font] = None
        self._scanlines: Optional[pygame.Surface] = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, self.theme.font_size + 4)
        return self._font

    def set_surface(self, surface: pygame.Surface):
        """Called after a resize hands us a new display surface."""
        self.surface = surface
        self._scanlines = None

    # --- DRAWING ---

    def draw(self, snap: Snapshot):
        self.surface.fill(self.theme.background)
        for dot in snap.dots:
            self.draw_dot(dot, snap.clock)
        for p in snap.particles:
            self.draw_particle(p)
        self.draw_pacman(snap.pacman)
        for ghost in snap.ghosts:
            if not ghost.dead:
                self.draw_ghost(ghost, snap.hunting, snap.frightened_flash)
        for popup in snap.popups:
            self.draw_text(popup.text, popup.pos.x, popup.pos.y, popup.color)
        for line in snap.log_lines:
            self.draw_text(line.text, 12, line.y, line.color, alpha=min(1.0, line.life))
        if self.theme.scanlines:
            self.draw_scanlines()

    def _disc(self, color, x: float, y: float, r: float):
        if self.theme.pixelated:
            size = self.theme.pixel_size
            ri = int(r // size)
            for gy in range(-ri, ri + 1):
                for gx in range(-ri, ri + 1):
                    if gx * gx + gy * gy <= ri * ri:
                        pygame.draw.rect(self.surface, color,
                                         (int(x) + gx * size, int(y) + gy * size, size, size))
        else:
            pygame.draw.circle(self.surface, color, (int(x), int(y)), max(1, int(r)))

    def draw_dot(self, dot, clock: float):
        color = self.theme.power_dot if dot.is_power else self.theme.dot
        if dot.is_power and int(clock / 0.2) % 2 == 0:
            # Power dots blink at half brightness
            color = tuple(c // 2 for c in color)
        self._disc(color, dot.pos.x, dot.pos.y, dot.radius)

    def draw_particle(self, p):
        alpha = max(0, min(255, int(p.life * 2 * 255)))
        layer = pygame.Surface((6, 6), pygame.SRCALPHA)
        pygame.draw.circle(layer, (*p.color, alpha), (3, 3), 3)
        self.surface.blit(layer, (int(p.pos.x) - 3, int(p.pos.y) - 3))

    def draw_pacman(self, pacman: Pacman):
        """Draw Pac-Man with the mouth wedge cut along its heading"""
        x, y = pacman.pos.x, pacman.pos.y
        r = pacman.radius
        self._disc(pacman.color, x, y, r)

        mouth = pacman.mouth_open
        if mouth <= 0:
            return
        # Screen y grows downward, so the heading angle is used as-is
        pts = [(x, y)]
        for a in (pacman.angle - mouth, pacman.angle + mouth):
            pts.append((x + math.cos(a) * (r + 2), y + math.sin(a) * (r + 2)))
        pygame.draw.polygon(self.surface, self.theme.background, pts)

    def draw_ghost(self, ghost: Ghost, frightened: bool, flash: bool):
        """Draw a ghost body (dome + wavy skirt) and its eyes"""
        x, y = int(ghost.pos.x), int(ghost.pos.y)
        r = int(ghost.radius)

        if frightened:
            color = self.theme.frightened_flash if flash else self.theme.frightened
        else:
            color = ghost.color

        if self.theme.pixelated:
            self._disc(color, x, y - 2, r)
            size = self.theme.pixel_size
            pygame.draw.rect(self.surface, color, (x - r, y - 2, r * 2, r - size))
        else:
            pygame.draw.circle(self.surface, color, (x, y - 2), r)
            pygame.draw.rect(self.surface, color, (x - r, y - 2, r * 2, r - 5))

        wiggle = math.sin(ghost.anim_phase * 10) * 3
        wave_pts = [
            (x - r, y - 2),
            (x + r, y - 2),
            (x + r, y + r - 5 + wiggle),
            (x + r // 2, y + r + wiggle),
            (x - r // 2, y + r - 5 - wiggle),
            (x - r, y + r + wiggle),
        ]
        pygame.draw.polygon(self.surface, color, wave_pts)

        self._draw_ghost_eyes(x, y, ghost, frightened)

    def _draw_ghost_eyes(self, x: int, y: int, ghost: Ghost, frightened: bool):
        pygame.draw.circle(self.surface, self.theme.eyes, (x - 7, y - 5), 5)
        pygame.draw.circle(self.surface, self.theme.eyes, (x + 7, y - 5), 5)

        if frightened:
            # Wobbly frightened mouth instead of pupils
            pts = [(x - 10, y + 10), (x - 5, y + 5), (x, y + 10), (x + 5, y + 5), (x + 10, y + 10)]
            pygame.draw.lines(self.surface, PELLET_MOUTH, False, pts, 2)
            return

        # Pupils look along the velocity
        dx = 2 if ghost.vel.x > 0 else -2
        dy = 2 if ghost.vel.y > 0 else -2
        pygame.draw.circle(self.surface, self.theme.pupils, (x - 7 + dx, y - 5 + dy), 2)
        pygame.draw.circle(self.surface, self.theme.pupils, (x + 7 + dx, y - 5 + dy), 2)

    def draw_text(self, text: str, x: float, y: float, color, alpha: float = 1.0):
        img = self.font.render(text, True, color)
        if alpha < 1.0:
            img.set_alpha(max(0, int(alpha * 255)))
        self.surface.blit(img, (int(x), int(y)))

    def draw_scanlines(self):
        size = self.surface.get_size()
        if self._scanlines is None or self._scanlines.get_size() != size:
            overlay = pygame.Surface(size, pygame.SRCALPHA)
            for sy in range(0, size[1], 3):
                pygame.draw.line(overlay, (0, 0, 0, 70), (0, sy), (size[0], sy))
            self._scanlines = overlay
        self.surface.blit(self._scanlines, (0, 0))
