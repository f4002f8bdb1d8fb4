"""
DESKPAC
=======
Autonomous Pac-Man screen toy:
- Steering-behaviour AI, nobody at the controls
- Power dots turn the hunt around for a few seconds
- Ghosts come back 5 seconds after being eaten
- "classic" and "terminal" looks

Keys: R reloads the world, ESC quits.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional, Tuple

import pygame

from .config import PRESETS, ConfigError, SimulationConfig, get_preset
from .render import Renderer
from .world import World

logger = logging.getLogger(__name__)

FPS = 60
DEFAULT_SIZE = (1024, 640)


def parse_size(text: str) -> Tuple[int, int]:
    try:
        w, h = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}") from None
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {text!r}")
    return w, h


class App:
    def __init__(self, config: SimulationConfig, size: Tuple[int, int] = DEFAULT_SIZE,
                 fps: int = FPS, seed: Optional[int] = None):
        pygame.init()
        self.screen = pygame.display.set_mode(size, pygame.RESIZABLE)
        pygame.display.set_caption(f"DESKPAC - {config.theme.name}")
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.running = True

        self.world = World(config, seed=seed)
        self.world.resize(*self.screen.get_size())
        self.renderer = Renderer(self.screen, config.theme)

    def handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self.running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    self.running = False
                elif e.key == pygame.K_r:
                    self.world.reset()
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.get_surface()
                self.renderer.set_surface(self.screen)
                self.world.resize(e.w, e.h)

    def frame(self):
        self.handle_events()
        try:
            self.world.tick(pygame.time.get_ticks() / 1000.0)
        except Exception:
            logger.exception("Update failed")

        snap = self.world.snapshot()
        if snap is None:
            return
        try:
            self.renderer.draw(snap)
        except Exception:
            logger.exception("Draw failed")
        pygame.display.flip()

    def run(self):
        """Main loop"""
        logger.info("Running at %d FPS", self.fps)
        while self.running:
            self.clock.tick(self.fps)
            self.frame()
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="deskpac", description="Autonomous Pac-Man screen toy.")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="classic",
                        help="look and tuning preset (default: classic)")
    parser.add_argument("--size", type=parse_size, default=DEFAULT_SIZE,
                        help="initial window size as WIDTHxHEIGHT")
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--seed", type=int, default=None, help="seed the world RNG")
    parser.add_argument("--dots", type=int, default=None, help="override the dot population")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = get_preset(args.preset)
        if args.dots is not None:
            config = config.with_overrides(dot_count=args.dots)
    except ConfigError as e:
        parser.error(str(e))

    App(config, args.size, args.fps, args.seed).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
