import logging

import pytest

from deskpac import collisions, steering
from deskpac.config import CLASSIC, TERMINAL
from deskpac.entities import Dot, Ghost
from deskpac.vector import Vec2
from deskpac.world import World


def test_init_populates_world(world):
    assert world.initialized
    assert world.pacman.pos == Vec2(400, 300)
    assert len(world.dots) == CLASSIC.dot_count
    assert [g.name for g in world.ghosts] == ["BLINKY", "PINKY", "INKY", "CLYDE"]
    assert [g.pos for g in world.ghosts] == [
        Vec2(50, 50), Vec2(750, 50), Vec2(50, 550), Vec2(750, 550)]
    for g in world.ghosts:
        assert 0 <= g.speed_variance < CLASSIC.ghost_speed_variance


def test_zero_viewport_defers_init():
    w = World(CLASSIC, 0, 0, seed=1)
    assert not w.initialized
    assert w.snapshot() is None
    assert w.tick(1.0) is False
    w.step(0.1)
    assert w.clock == 0.0

    w.resize(None, 600)
    assert not w.initialized

    w.resize(800, 600)
    assert w.initialized
    assert len(w.dots) == CLASSIC.dot_count


def test_dot_spawn_range_is_clamped_for_tiny_viewports():
    w = World(CLASSIC, 10, 10, seed=5)
    for dot in w.dots:
        assert 50 <= dot.pos.x <= 150
        assert 50 <= dot.pos.y <= 150


def test_dots_spawn_inside_padding(world):
    for _ in range(50):
        dot = world.spawn_dot()
        assert 50 <= dot.pos.x <= 750
        assert 50 <= dot.pos.y <= 550


def test_first_tick_only_records_time(world):
    assert world.tick(10.0) is False
    assert world.clock == 0.0
    assert world.tick(10.05) is True
    assert world.clock == pytest.approx(0.05)


def test_long_gap_is_clamped(world):
    world.tick(0.0)
    world.tick(5.0)
    assert world.clock == pytest.approx(0.1)


def test_backwards_timestamp_is_a_zero_step(world):
    world.tick(3.0)
    world.tick(2.0)
    assert world.clock == 0.0


def test_one_dot_replenished_per_frame(world):
    world.ghosts.clear()
    world.pacman.pos = Vec2(-1000, -1000)
    del world.dots[:5]
    world.step(0.01)
    assert len(world.dots) == CLASSIC.dot_count - 4
    world.step(0.01)
    assert len(world.dots) == CLASSIC.dot_count - 3


def test_dots_never_exceed_target(world):
    for _ in range(200):
        world.step(0.05)
        assert len(world.dots) <= CLASSIC.dot_count


def test_power_timer_counts_down_by_dt():
    w = World(CLASSIC.with_overrides(power_dot_chance=0.0), 800, 600, seed=2)
    w.ghosts.clear()
    w.pacman.activate_power(1.0)
    previous = w.pacman.power_timer
    while w.pacman.power_timer > 0:
        w.step(0.1)
        assert w.pacman.power_timer == pytest.approx(max(0.0, previous - 0.1))
        assert w.hunting == (w.pacman.power_timer > 0)
        previous = w.pacman.power_timer
    assert not w.hunting
    assert w.pacman.power_timer == 0.0


def test_speed_and_force_limits_hold_every_frame():
    w = World(CLASSIC.with_overrides(power_dot_chance=0.3), 800, 600, seed=42)
    cfg = w.config
    for _ in range(1500):
        w.step(1 / 60)
        pac = w.pacman
        assert pac.vel.mag() <= pac.max_speed(cfg) + 1e-9
        assert pac.last_force.mag() <= cfg.pac_steer_limit + 1e-9
        for g in w.ghosts:
            assert g.vel.mag() <= g.max_speed(cfg, w.hunting) + 1e-9
            assert g.last_force.mag() <= cfg.ghost_steer_limit + 1e-9


def test_limits_hold_with_bounce_policy():
    w = World(TERMINAL.with_overrides(power_dot_chance=0.3), 640, 480, seed=9)
    cfg = w.config
    for _ in range(1000):
        w.step(1 / 60)
        assert w.pacman.vel.mag() <= w.pacman.max_speed(cfg) + 1e-9
        for g in w.ghosts:
            assert g.vel.mag() <= g.max_speed(cfg, w.hunting) + 1e-9


def test_boundary_pushes_pacman_back_in(empty_world):
    w = empty_world
    w.pacman.pos = Vec2(10, 300)
    frames = 0
    while w.pacman.pos.x < 50:
        w.step(0.1)
        assert w.pacman.last_force.x > 0
        frames += 1
        assert frames < 100
    assert w.pacman.vel.x > 0


def test_ghost_respawns_after_delay(empty_world, monkeypatch):
    w = empty_world
    w.pacman.pos = Vec2(400, 300)
    w.pacman.activate_power(8.0)
    w.step(0.1)
    ghost_pos = Vec2(w.pacman.pos.x + 10, w.pacman.pos.y)

    ghost = Ghost("BLINKY", ghost_pos.x, ghost_pos.y, (255, 0, 0))
    w.ghosts.append(ghost)
    collisions.resolve_ghosts(w)
    killed_at = w.clock
    assert ghost.dead

    # Keep Pac-Man from eating the ghost again the moment it returns
    w.pacman.power_timer = 0.0
    monkeypatch.setattr(w, "random_point", lambda: Vec2(700, 100))

    while w.clock < killed_at + 5.0 - 1e-6:
        assert ghost.dead
        assert ghost.pos == ghost_pos
        w.step(0.1)

    if ghost.dead:
        # Float drift can push the due time past this frame by a hair
        w.step(0.1)
    assert not ghost.dead
    assert w.clock >= killed_at + 5.0 - 1e-6
    assert ghost.pos.dist(Vec2(700, 100)) < 20


def test_update_fault_is_isolated(world, monkeypatch, caplog):
    def broken(dt, w):
        raise RuntimeError("bad ghost")

    monkeypatch.setattr(world.ghosts[0], "update", broken)
    before = world.ghosts[1].pos.copy()
    with caplog.at_level(logging.ERROR, logger="deskpac.world"):
        world.step(0.1)
    assert "BLINKY update failed" in caplog.text
    assert world.ghosts[1].pos != before
    assert world.clock == pytest.approx(0.1)


def test_pacman_fault_does_not_stop_ghosts(world, monkeypatch, caplog):
    def broken(dt, w):
        raise ValueError("bad pacman")

    monkeypatch.setattr(world.pacman, "update", broken)
    before = world.ghosts[0].pos.copy()
    with caplog.at_level(logging.ERROR, logger="deskpac.world"):
        world.step(0.1)
    assert "Pac-Man update failed" in caplog.text
    assert world.ghosts[0].pos != before


def test_effects_are_aged_and_culled(empty_world):
    w = empty_world
    w.spawn_popup(Vec2(100, 100), "200", (0, 255, 255))
    w.spawn_particles(Vec2(50, 50), (255, 0, 0))
    w.spawn_log("> hello", (0, 255, 65))

    w.step(0.1)
    assert w.popups[0].pos.y == pytest.approx(95)
    assert len(w.particles) == CLASSIC.particle_count

    for _ in range(5):
        w.step(0.1)
    assert w.particles == []
    for _ in range(5):
        w.step(0.1)
    assert w.popups == []
    assert len(w.log_lines) == 1

    for _ in range(20):
        w.step(0.1)
    assert w.log_lines == []


def test_log_lines_are_capped_and_stacked(terminal_world):
    w = terminal_world
    w.log_lines.clear()
    first = w.spawn_log("> one", (0, 255, 65))
    second = w.spawn_log("> two", (0, 255, 65))
    assert first.y == second.y - TERMINAL.log_line_height
    for i in range(20):
        w.spawn_log(f"> {i}", (0, 255, 65))
    assert len(w.log_lines) == TERMINAL.max_log_lines
    assert w.log_lines[-1].text == "> 19"


def test_terminal_world_announces_itself(terminal_world):
    assert terminal_world.log_lines[0].text == "> DESKPAC ONLINE 800x600"


def test_frightened_flash(world):
    assert not world.frightened_flash
    world.pacman.activate_power(8.0)
    assert not world.frightened_flash

    world.pacman.power_timer = 1.5
    world.clock = 0.1
    assert world.frightened_flash
    world.clock = 0.3
    assert not world.frightened_flash


def test_snapshot(world):
    world.step(0.05)
    snap = world.snapshot()
    assert snap.width == 800 and snap.height == 600
    assert snap.clock == pytest.approx(0.05)
    assert snap.pacman is world.pacman
    assert len(snap.ghosts) == 4
    assert isinstance(snap.dots, tuple)
    assert snap.theme is CLASSIC.theme
    assert snap.hunting == world.hunting

    world.dots.clear()
    assert len(snap.dots) > 0


def test_reset_rebuilds_world(world):
    for _ in range(30):
        world.step(0.1)
    world.pacman.activate_power(8.0)
    world.timers.schedule(world.clock + 1, lambda: None)

    world.reset()
    assert world.clock == 0.0
    assert world.pacman.pos == Vec2(400, 300)
    assert not world.hunting
    assert len(world.timers) == 0
    assert len(world.dots) == CLASSIC.dot_count


def test_resize_keeps_existing_world(world):
    pacman = world.pacman
    world.resize(1024, 768)
    assert world.pacman is pacman
    assert (world.width, world.height) == (1024, 768)

    # A transient zero size must not break a running world
    world.resize(0, 0)
    for _ in range(10):
        world.step(0.1)
    assert world.initialized


def test_seeded_worlds_match():
    a = World(CLASSIC, 800, 600, seed=123)
    b = World(CLASSIC, 800, 600, seed=123)
    for _ in range(100):
        a.step(1 / 60)
        b.step(1 / 60)
    assert a.pacman.pos == b.pacman.pos
    assert [d.pos for d in a.dots] == [d.pos for d in b.dots]


def test_ghosts_chase_pacmans_position_after_his_move(empty_world):
    w = empty_world
    w.pacman.pos = Vec2(400, 300)
    w.pacman.vel = Vec2(0, CLASSIC.pac_speed)
    w.dots.append(Dot(Vec2(400, 500), False, CLASSIC.dot_radius))
    ghost = Ghost("BLINKY", 100, 300, (255, 0, 0))
    w.ghosts.append(ghost)

    w.step(0.1)

    assert w.pacman.pos == Vec2(400, 320)
    toward_new = steering.seek(Vec2(100, 300), Vec2(0, 0), w.pacman.pos, CLASSIC.ghost_speed)
    assert ghost.last_force == toward_new.limit(CLASSIC.ghost_steer_limit)
    assert ghost.last_force.y > 0.3


def test_pacman_updates_before_ghosts(world, monkeypatch):
    order = []
    pacman_update = type(world.pacman).update
    ghost_update = Ghost.update

    def record_pacman(self, dt, w):
        order.append("pacman")
        pacman_update(self, dt, w)

    def record_ghost(self, dt, w):
        order.append(self.name)
        ghost_update(self, dt, w)

    monkeypatch.setattr(type(world.pacman), "update", record_pacman)
    monkeypatch.setattr(Ghost, "update", record_ghost)
    world.step(0.016)
    assert order == ["pacman"] + [g.name for g in world.ghosts]


def test_first_tick_after_deferred_init_only_records_time():
    w = World(CLASSIC, 0, 0, seed=1)
    assert not w.tick(1.0)
    w.resize(800, 600)
    assert not w.tick(1.05)
    assert w.clock == 0.0
    assert w.tick(1.1)
    assert w.clock == pytest.approx(0.05)


def test_reset_forgets_last_timestamp(world):
    world.tick(1.0)
    world.tick(1.02)
    world.reset()
    assert not world.tick(9.0)
    assert world.clock == 0.0


def test_log_lines_never_overlap_after_rising(terminal_world):
    w = terminal_world
    h = TERMINAL.log_line_height
    for i in range(30):
        w.spawn_log(f"> {i}", (0, 255, 65))
        for line in w.log_lines:
            line.update(0.5)
        ys = [line.y for line in w.log_lines]
        assert len(w.log_lines) <= TERMINAL.max_log_lines
        # Newest at the bottom, each older line at least one line height above
        for upper, lower in zip(ys, ys[1:]):
            assert lower - upper >= h - 1e-9
    assert w.log_lines[-1].text == "> 29"


def test_new_log_line_enters_at_bottom(terminal_world):
    w = terminal_world
    for line in w.log_lines:
        line.update(2.0)
    line = w.spawn_log("> late", (0, 255, 65))
    assert line.y == 600 - 40


def test_random_point_stays_in_viewport(world):
    for _ in range(500):
        p = world.random_point()
        assert 0 <= p.x <= world.width
        assert 0 <= p.y <= world.height


def test_respawn_lands_in_viewport(empty_world):
    w = empty_world
    for i in range(20):
        ghost = Ghost(f"G{i}", 400, 300, (255, 0, 0))
        ghost.die()
        w._respawn(ghost)
        assert not ghost.dead
        assert 0 <= ghost.pos.x <= w.width
        assert 0 <= ghost.pos.y <= w.height
