import os
import random

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from runnerx.config import (
    ELEVATED_THRESHOLD,
    GROUND_TILE_WIDTH,
    INITIAL_SPEED,
    MAX_OBSTACLE_DISTANCE,
    MIN_OBSTACLE_DISTANCE,
    PLAYER_HEIGHT,
    SPEED_STEP,
    ConfigurationError,
)
from runnerx.engine import Engine, GameCallbacks, RunState
from runnerx.entities import Obstacle, ObstacleKind
from runnerx.loop import FrameScheduler
from runnerx.renderer import cloud_positions


class Recorder:
    def __init__(self) -> None:
        self.scores: list[int] = []
        self.game_overs: list[int] = []

    def on_score_update(self, score: int) -> None:
        self.scores.append(score)

    def on_game_over(self, final_score: int) -> None:
        self.game_overs.append(final_score)


class ScriptedRng:
    """Returns queued thresholds from uniform(); always picks the ground kind."""

    def __init__(self, thresholds: list[float]) -> None:
        self.thresholds = list(thresholds)
        self.uniform_calls = 0

    def uniform(self, a: float, b: float) -> float:
        self.uniform_calls += 1
        return self.thresholds.pop(0)

    def random(self) -> float:
        return 0.0


def setup_module(module: object) -> None:
    pygame.init()


def teardown_module(module: object) -> None:
    pygame.quit()


def make_engine(height: int = 200, seed: int = 1, rng: object = None) -> tuple[Engine, Recorder]:
    rec = Recorder()
    engine = Engine(
        pygame.Surface((800, height)),
        rec,
        scheduler=FrameScheduler(),
        rng=rng if rng is not None else random.Random(seed),
    )
    return engine, rec


def test_ground_geometry_from_surface_height() -> None:
    """Ground line and resting eye derive from surface height."""
    for h in (200, 300):
        engine, _ = make_engine(height=h)
        assert engine.ground_y == h - 20
        assert engine.player.y == engine.ground_y - PLAYER_HEIGHT
        assert engine.state is RunState.STOPPED


@pytest.mark.parametrize("size", [(0, 200), (800, 0), (800, 50)])
def test_bad_surface_fails_fast(size: tuple[int, int]) -> None:
    """Unusable surface sizes are rejected at construction."""
    with pytest.raises(ConfigurationError):
        Engine(pygame.Surface(size), Recorder())


def test_callbacks_adapter() -> None:
    scores: list[int] = []
    overs: list[int] = []
    engine = Engine(pygame.Surface((800, 200)), GameCallbacks(scores.append, overs.append))
    engine.reset()
    assert scores == [0]
    assert overs == []


def test_thousand_ticks_without_obstacles(monkeypatch: pytest.MonkeyPatch) -> None:
    """Uninterrupted 1000-tick run: score, speed and score events."""
    engine, rec = make_engine()
    monkeypatch.setattr(engine, "maybe_spawn_obstacle", lambda: None)
    engine.reset()
    engine.start()
    engine.scheduler.advance(1000)
    assert engine.ticks == 1000
    assert engine.score == 100
    # Ramp fires on raw ticks 100, 200, ... 1000 (ten steps, not five), as the
    # original engine does; do not gate it on the displayed score
    assert engine.speed == INITIAL_SPEED + 10 * SPEED_STEP
    assert rec.scores[0] == 0  # from reset()
    assert rec.scores[1:] == [n // 10 for n in range(1, 1001)]
    assert rec.game_overs == []
    assert engine.is_running


def test_speed_steps_exactly_at_hundreds(monkeypatch: pytest.MonkeyPatch) -> None:
    """Speed moves only on multiples of 100 ticks."""
    engine, _ = make_engine()
    monkeypatch.setattr(engine, "maybe_spawn_obstacle", lambda: None)
    engine.start()
    prev = engine.speed
    for _ in range(450):
        engine.scheduler.run_frame()
        delta = engine.speed - prev
        if engine.ticks % 100 == 0:
            assert delta == SPEED_STEP
        else:
            assert delta == 0
        prev = engine.speed


def test_player_never_below_ground_during_play() -> None:
    """Eye never sinks through the ground across many runs."""
    engine, rec = make_engine(seed=7)
    engine.start()
    for i in range(3000):
        if i % 23 == 0:
            engine.jump()
        engine.scheduler.run_frame()
        p = engine.player
        assert p.y <= p.rest_y
        if not p.airborne:
            assert p.velocity_y == 0 and p.y == p.rest_y
        if not engine.is_running:
            engine.reset()
            engine.start()


def test_jump_noop_when_airborne() -> None:
    """Jumping mid-air leaves velocity untouched."""
    engine, _ = make_engine()
    engine.jump()
    engine.start()
    engine.scheduler.run_frame()
    vy, airborne = engine.player.velocity_y, engine.player.airborne
    engine.jump()
    assert engine.player.velocity_y == vy
    assert engine.player.airborne is airborne is True


def test_start_is_idempotent_and_stop_cancels() -> None:
    """Double start queues one frame; stop cancels it."""
    engine, _ = make_engine()
    engine.start()
    engine.start()
    assert engine.scheduler.pending == 1
    engine.scheduler.advance(3)
    assert engine.ticks == 3
    engine.stop()
    engine.stop()
    assert engine.scheduler.pending == 0
    engine.scheduler.advance(3)
    assert engine.ticks == 3
    assert engine.state is RunState.STOPPED


def test_scroll_offset_wraps_within_tile() -> None:
    engine, _ = make_engine()
    engine.start()
    seen = []
    for _ in range(40):
        engine.scheduler.run_frame()
        if not engine.is_running:
            break
        assert -GROUND_TILE_WIDTH < engine.ground_offset <= 0
        seen.append(engine.ground_offset)
    # 6 px per tick: -6 ... -48, then the 9th step wraps to 0
    assert seen[:9] == [-6.0, -12.0, -18.0, -24.0, -30.0, -36.0, -42.0, -48.0, 0.0]


def test_first_obstacle_spawns_at_right_edge() -> None:
    engine, _ = make_engine()
    engine.start()
    engine.scheduler.run_frame()
    assert len(engine.obstacles) == 1
    # Spawned at x = width, then advanced once
    assert engine.obstacles[0].x == 800 - INITIAL_SPEED


def test_spawn_threshold_rerolled_every_tick() -> None:
    """Spawn threshold is drawn fresh on every check."""
    rng = ScriptedRng([350.0, 250.0])
    engine, _ = make_engine(rng=rng)
    engine.obstacles = [Obstacle.spawn(ObstacleKind.GROUND, 500, engine.ground_y)]
    engine.start()
    engine.scheduler.run_frame()
    # gap 300 vs threshold 350: nothing new
    assert len(engine.obstacles) == 1
    engine.scheduler.run_frame()
    # gap 306 vs a fresh threshold of 250: spawn
    assert len(engine.obstacles) == 2
    assert rng.uniform_calls == 2


def test_spawn_gaps_within_bounds(monkeypatch: pytest.MonkeyPatch) -> None:
    """Spawn gaps stay within the configured distances."""
    engine, _ = make_engine(seed=11)
    monkeypatch.setattr(engine, "detect_collision", lambda: None)
    gaps: list[float] = []
    spawn = engine.spawn_obstacle

    def recording_spawn() -> Obstacle:
        if engine.obstacles:
            gaps.append(engine.width - engine.obstacles[-1].x)
            assert gaps[-1] <= MAX_OBSTACLE_DISTANCE + engine.speed
        return spawn()

    monkeypatch.setattr(engine, "spawn_obstacle", recording_spawn)
    engine.start()
    engine.scheduler.advance(3000)
    assert len(gaps) > 50
    assert all(g > MIN_OBSTACLE_DISTANCE for g in gaps)


def test_obstacle_kind_mix() -> None:
    engine, _ = make_engine(seed=3)
    kinds = [engine.spawn_obstacle().kind for _ in range(2000)]
    elevated = kinds.count(ObstacleKind.ELEVATED) / len(kinds)
    assert abs(elevated - (1 - ELEVATED_THRESHOLD)) < 0.05


def test_offscreen_obstacles_retired(monkeypatch: pytest.MonkeyPatch) -> None:
    """Obstacles leaving the field are dropped the same tick."""
    engine, _ = make_engine()
    monkeypatch.setattr(engine, "maybe_spawn_obstacle", lambda: None)
    gone = Obstacle.spawn(ObstacleKind.GROUND, -20 + INITIAL_SPEED, engine.ground_y)
    kept = Obstacle.spawn(ObstacleKind.GROUND, -19 + INITIAL_SPEED, engine.ground_y)
    far = Obstacle.spawn(ObstacleKind.ELEVATED, 700, engine.ground_y)
    engine.obstacles = [gone, kept, far]
    engine.start()
    engine.scheduler.run_frame()
    assert engine.obstacles == [kept, far]
    engine.scheduler.run_frame()
    assert engine.obstacles == [far]


def test_collision_inset_boundary_horizontal() -> None:
    """Touching the inset hitbox is safe; one unit in ends the run."""
    # Inset hitbox spans x 55..85 while resting
    engine, rec = make_engine()
    engine.obstacles = [Obstacle.spawn(ObstacleKind.GROUND, 85 + INITIAL_SPEED, engine.ground_y)]
    engine.start()
    engine.scheduler.run_frame()
    assert rec.game_overs == []
    assert engine.is_running

    engine.reset()
    engine.obstacles = [Obstacle.spawn(ObstacleKind.GROUND, 84 + INITIAL_SPEED, engine.ground_y)]
    engine.start()
    engine.scheduler.run_frame()
    assert rec.game_overs == [0]
    assert engine.state is RunState.STOPPED


def test_collision_inset_boundary_vertical() -> None:
    """Vertical edge contact does not collide."""
    engine, _ = make_engine()
    top = engine.player.hitbox[1]
    engine.obstacles = [Obstacle(60, top - 20, 20, 20, ObstacleKind.ELEVATED)]
    assert engine.detect_collision() is None
    engine.obstacles = [Obstacle(60, top - 19, 20, 20, ObstacleKind.ELEVATED)]
    assert engine.detect_collision() is engine.obstacles[0]


def test_game_over_fires_once_and_silences_scores(monkeypatch: pytest.MonkeyPatch) -> None:
    """Game over fires once and stops score events."""
    engine, rec = make_engine()
    monkeypatch.setattr(engine, "maybe_spawn_obstacle", lambda: None)
    engine.start()
    engine.scheduler.advance(250)
    assert engine.is_running
    engine.obstacles.append(Obstacle.spawn(ObstacleKind.GROUND, 70, engine.ground_y))
    engine.scheduler.run_frame()
    assert rec.game_overs == [25]
    assert rec.scores[-1] == 25
    count = len(rec.scores)
    engine.scheduler.advance(20)
    assert len(rec.scores) == count
    assert rec.game_overs == [25]
    assert engine.scheduler.pending == 0


def test_restart_inside_game_over_keeps_one_frame_pending() -> None:
    """A listener that restarts on game over still gets one tick per refresh."""
    engine, rec = make_engine()

    class Restarter(Recorder):
        def on_game_over(self, final_score: int) -> None:
            super().on_game_over(final_score)
            engine.reset()
            engine.start()

    engine.listener = Restarter()
    engine.obstacles = [Obstacle.spawn(ObstacleKind.GROUND, 70, engine.ground_y)]
    engine.start()
    engine.scheduler.run_frame()
    assert engine.listener.game_overs == [0]
    assert engine.is_running
    assert engine.ticks == 0
    assert engine.scheduler.pending == 1
    engine.scheduler.run_frame()
    assert engine.ticks == 1
    engine.stop()
    assert engine.scheduler.pending == 0
    engine.scheduler.advance(3)
    assert engine.ticks == 1


def test_stop_inside_score_update_skips_rest_of_tick() -> None:
    """Stopping from the score callback ends the tick before collisions run."""
    engine, _ = make_engine()

    class Stopper(Recorder):
        def on_score_update(self, score: int) -> None:
            super().on_score_update(score)
            engine.stop()

    engine.listener = Stopper()
    engine.obstacles = [Obstacle.spawn(ObstacleKind.GROUND, 70, engine.ground_y)]
    engine.start()
    engine.scheduler.run_frame()
    assert engine.listener.game_overs == []
    assert engine.obstacles[0].x == 70
    assert engine.state is RunState.STOPPED
    assert engine.scheduler.pending == 0


def test_reset_from_any_state() -> None:
    """Reset restores defaults from running and stopped states."""
    engine, rec = make_engine(seed=5)
    engine.jump()
    engine.start()
    engine.scheduler.advance(120)
    for _ in range(2):  # once from running, once from stopped
        before = len(rec.scores)
        engine.reset()
        assert rec.scores[before:] == [0]
        assert engine.score == 0
        assert engine.speed == INITIAL_SPEED
        assert engine.obstacles == []
        assert engine.ground_offset == 0.0
        assert engine.player.y == engine.player.rest_y
        assert not engine.player.airborne
        assert engine.state is RunState.STOPPED
        assert engine.scheduler.pending == 0


def test_render_does_not_mutate_state() -> None:
    """Rendering leaves simulation state alone."""
    engine, _ = make_engine(seed=9)
    engine.jump()
    engine.start()
    engine.scheduler.advance(40)

    def snapshot() -> tuple:
        p = engine.player
        return (
            engine.ticks,
            engine.speed,
            engine.ground_offset,
            engine.state,
            (p.y, p.velocity_y, p.airborne),
            [o.box for o in engine.obstacles],
        )

    before = snapshot()
    engine.render()
    engine.render()
    assert snapshot() == before


def test_clouds_depend_only_on_ticks() -> None:
    assert cloud_positions(0, 800) == [(100, 30), (300, 50), (600, 25)]
    assert cloud_positions(1234, 800) == cloud_positions(1234, 800)
    # By tick 3000 the first cloud has drifted past the cull line
    visible = cloud_positions(3000, 800)
    assert len(visible) == 2
    assert all(x > -100 for x, _ in visible)
