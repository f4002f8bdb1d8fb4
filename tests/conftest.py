import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from deskpac.config import CLASSIC, TERMINAL
from deskpac.world import World


@pytest.fixture
def world():
    return World(CLASSIC, 800, 600, seed=7)


@pytest.fixture
def terminal_world():
    return World(TERMINAL, 800, 600, seed=7)


@pytest.fixture
def empty_world():
    """Classic world with no dots, no ghosts and no dot replenishment."""
    w = World(CLASSIC.with_overrides(dot_count=0), 800, 600, seed=3)
    w.ghosts.clear()
    return w
