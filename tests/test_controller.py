import numpy as np
import pytest

from falling_blocks.game import (
    Action,
    ConfigurationError,
    GameConfig,
    GameController,
    GamePhase,
    ManualFrameScheduler,
    PlacementPhase,
    TetrominoType,
    is_valid_position,
)
from falling_blocks.game.events import (
    EVENT_GAME_OVER,
    EVENT_LEVEL_CHANGED,
    EVENT_LINES_CHANGED,
    EVENT_PIECE_LOCKED,
    EVENT_SCORE_CHANGED,
)
from tests.helpers import drop_until_locked, fill_row, make_controller

I = int(TetrominoType.I)


def record(game, name):
    seen = []
    game.events.subscribe(name, lambda sender, **kw: seen.append(kw))
    return seen


def test_invalid_board_dimensions_fail_at_construction():
    with pytest.raises(ConfigurationError):
        GameController(GameConfig(width=0))
    with pytest.raises(ConfigurationError):
        GameConfig(height=-3)


def test_commands_ignored_before_start():
    game = make_controller()
    assert game.phase is GamePhase.IDLE
    assert not game.move_left()
    assert not game.soft_drop()
    assert not game.tick(5000)
    assert not game.pause()


def test_start_spawns_centered_at_row_zero():
    game = make_controller()
    game.start()
    snap = game.snapshot()
    assert snap.current_piece.kind is TetrominoType.I
    assert snap.position == (3, 0)
    assert snap.next_piece is not None
    assert (snap.score, snap.lines, snap.level) == (0, 0, 1)
    assert snap.drop_interval == 800
    assert not snap.paused and not snap.game_over
    assert game.state.placement is PlacementPhase.FALLING


def test_i_piece_falls_to_floor_and_locks():
    game = make_controller()
    frames = ManualFrameScheduler()
    game.attach(frames)
    game.start()
    locks = record(game, EVENT_PIECE_LOCKED)

    for _ in range(19):
        frames.advance(800)
    assert game.snapshot().position == (3, 19)
    assert not locks

    frames.advance(800)
    assert locks == [{"kind": TetrominoType.I, "x": 3, "y": 19}]
    grid = game.snapshot().grid
    assert grid[19, 3:7].tolist() == [I] * 4
    assert int(np.count_nonzero(grid)) == 4
    assert game.snapshot().position == (3, 0)


def test_move_and_walls():
    game = make_controller()
    game.start()
    assert game.move_left()
    assert game.snapshot().position == (2, 0)
    for _ in range(5):
        game.move_left()
    assert game.snapshot().position == (0, 0)
    assert not game.move_left()
    for _ in range(10):
        game.move_right()
    assert game.snapshot().position == (6, 0)
    assert not game.move_right()


def test_move_blocked_by_filled_cell():
    game = make_controller()
    game.start()
    game.state.grid.set_cell(7, 0, 3)
    assert not game.move_right()
    assert game.snapshot().position == (3, 0)


def test_rotation_rejected_without_kick():
    game = make_controller()
    game.start()
    game.state.grid.set_cell(3, 2, 3)
    before = game.state.current_piece
    assert not game.rotate_cw()
    assert game.state.current_piece is before
    assert game.snapshot().position == (3, 0)


def test_rotation_at_right_wall_is_rejected():
    game = make_controller(kinds=(TetrominoType.I,))
    game.start()
    assert game.rotate_cw()
    for _ in range(10):
        game.move_right()
    assert game.snapshot().position == (9, 0)
    # horizontal I would poke through the right wall
    assert not game.rotate_cw()
    assert game.state.current_piece.width == 1


def test_completing_bottom_row_with_flat_i_clears_it():
    game = make_controller()
    game.start()
    fill_row(game, 19, skip=range(3, 7))
    game.state.grid.set_cell(0, 18, 5)
    scores = record(game, EVENT_SCORE_CHANGED)
    lines = record(game, EVENT_LINES_CHANGED)

    drop_until_locked(game)

    snap = game.snapshot()
    assert snap.lines == 1
    assert snap.score == 40 * 1
    assert scores == [{"score": 40, "delta": 40}]
    assert lines == [{"lines": 1, "delta": 1}]
    # the block from row 18 moved down, the rest of row 19 is empty again
    assert snap.grid[19].tolist() == [5] + [0] * 9
    assert not snap.grid[:19].any()


def test_single_gap_filled_by_vertical_i():
    game = make_controller()
    game.start()
    fill_row(game, 19, skip=[9])
    assert game.rotate_cw()
    for _ in range(6):
        assert game.move_right()
    assert game.snapshot().position == (9, 0)

    drops = drop_until_locked(game)

    assert drops == 17
    snap = game.snapshot()
    assert snap.lines == 1
    assert snap.score == 40
    # rows above shifted down by one
    assert snap.grid[19].tolist() == [0] * 9 + [I]
    assert snap.grid[17:19, 9].tolist() == [I, I]
    assert not snap.grid[:17].any()


def test_score_uses_level_before_level_up():
    game = make_controller()
    game.start()
    game.state.lines = 9
    levels = record(game, EVENT_LEVEL_CHANGED)
    fill_row(game, 19, skip=range(3, 7))

    drop_until_locked(game)

    snap = game.snapshot()
    assert snap.score == 40
    assert snap.lines == 10
    assert snap.level == 2
    assert snap.drop_interval == 730
    assert game.dropper.interval == 730
    assert levels == [{"level": 2, "drop_interval": 730}]


def test_score_multiplied_by_current_level():
    game = make_controller()
    game.start()
    game.state.level = 3
    game.state.lines = 20
    fill_row(game, 19, skip=range(3, 7))
    drop_until_locked(game)
    assert game.snapshot().score == 120


def test_hard_drop_scores_distance_and_locks():
    game = make_controller()
    game.start()
    locks = record(game, EVENT_PIECE_LOCKED)
    assert game.hard_drop()
    assert locks == [{"kind": TetrominoType.I, "x": 3, "y": 19}]
    assert game.snapshot().score == 19 * 2


def test_pause_freezes_gravity_and_commands():
    game = make_controller()
    game.start()
    game.tick(500)
    assert game.pause()
    assert game.snapshot().paused
    assert not game.tick(10_000)
    assert not game.move_left()
    assert not game.soft_drop()
    assert game.snapshot().position == (3, 0)

    assert game.resume()
    assert not game.resume()
    # paused time and the earlier 500 are not carried over
    assert not game.tick(799)
    assert game.tick(1)
    assert game.snapshot().position == (3, 1)


def test_commands_apply_before_gravity_in_a_frame():
    game = make_controller()
    frames = ManualFrameScheduler()
    game.attach(frames)
    game.start()
    game.state.grid.set_cell(3, 1, 4)
    locks = record(game, EVENT_PIECE_LOCKED)

    game.submit(Action.RIGHT)
    frames.advance(800)

    assert not locks
    assert game.snapshot().position == (4, 1)


def test_step_dispatch():
    game = make_controller()
    game.start()
    assert game.step(Action.LEFT)
    assert game.step(Action.ROTATE_CW)
    assert not game.step(Action.NONE)
    assert game.step(Action.SOFT_DROP)
    assert game.snapshot().position == (2, 1)


def test_blocked_spawn_ends_game():
    game = make_controller(kinds=(TetrominoType.O,))
    game.start()
    assert game.snapshot().position == (4, 0)
    game.state.grid.set_cell(4, 2, 3)
    overs = record(game, EVENT_GAME_OVER)

    game.soft_drop()

    snap = game.snapshot()
    assert snap.game_over
    assert game.state.placement is PlacementPhase.GAME_OVER
    assert overs == [{"score": 0, "lines": 0, "level": 1}]
    assert not game.move_left()
    assert not game.rotate_cw()
    assert not game.hard_drop()
    assert not game.tick(10_000)
    assert not game.pause()

    game.start()
    snap = game.snapshot()
    assert not snap.game_over
    assert not snap.grid.any()
    assert snap.score == 0


def test_start_resets_everything_mid_game():
    game = make_controller()
    game.start()
    game.hard_drop()
    game.pause()
    game.start()
    snap = game.snapshot()
    assert not snap.paused
    assert snap.score == 0
    assert not snap.grid.any()
    assert game.tick(800)


def test_start_with_seed_is_reproducible():
    game = GameController()
    game.start(seed=5)
    first = [game.snapshot().current_piece.kind, game.snapshot().next_piece.kind]
    game.start(seed=5)
    assert [game.snapshot().current_piece.kind, game.snapshot().next_piece.kind] == first


def test_snapshot_is_read_only_copy():
    game = make_controller()
    game.start()
    snap = game.snapshot()
    with pytest.raises(ValueError):
        snap.grid[0, 0] = 1
    game.hard_drop()
    assert not snap.grid.any()


def test_get_state_overlays_falling_piece():
    game = make_controller()
    game.start()
    state = game.get_state()
    assert state[0, 3:7].tolist() == [-I] * 4
    assert not game.state.grid.grid.any()


def test_detach_stops_frames():
    game = make_controller()
    frames = ManualFrameScheduler()
    game.attach(frames)
    game.start()
    game.detach()
    assert not frames.running
    frames.advance(800)
    assert game.snapshot().position == (3, 0)


def test_notifications_see_settled_state_after_lock():
    game = make_controller()
    game.start()
    fill_row(game, 19, skip=range(3, 7))
    seen = []

    def on_score(sender, **kw):
        snap = sender.snapshot()
        seen.append((kw["score"], snap.lines, snap.position, sender.state.placement))

    game.events.subscribe(EVENT_SCORE_CHANGED, on_score)
    drop_until_locked(game)

    assert seen == [(40, 1, (3, 0), PlacementPhase.FALLING)]


def test_game_over_notification_after_spawn_settles():
    game = make_controller(kinds=(TetrominoType.O,))
    game.start()
    game.state.grid.set_cell(4, 2, 3)
    phases = []
    game.events.subscribe(EVENT_GAME_OVER, lambda sender, **kw: phases.append(sender.snapshot().game_over))
    game.soft_drop()
    assert phases == [True]


def test_raising_subscriber_leaves_consistent_state():
    game = make_controller()
    game.start()

    def boom(sender, **kw):
        raise RuntimeError("subscriber failed")

    game.events.subscribe(EVENT_PIECE_LOCKED, boom)
    with pytest.raises(RuntimeError):
        game.hard_drop()

    s = game.state
    assert s.phase is GamePhase.PLAYING
    assert s.placement is PlacementPhase.FALLING
    assert (s.current_x, s.current_y) == (3, 0)
    assert is_valid_position(s.grid, s.current_piece, s.current_x, s.current_y)
    assert s.grid.grid[19, 3:7].tolist() == [I] * 4
