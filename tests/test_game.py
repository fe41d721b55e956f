import pytest

from gridsnake.config import (
    LEADERBOARD_KEY, SETTINGS_KEY,
    STATE_MENU, STATE_PLAYING, STATE_PAUSED, STATE_OVER,
)
from gridsnake.game import GameStateMachine
from gridsnake.model import Collision, Direction, FoodItem
from gridsnake.placement import FoodCategory
from gridsnake.storage import MemoryStorage

FAR_AWAY = (0, 0)
# clockwise loop around a 3x3 block; never touches a length-4 snake
LOOP = [Direction.RIGHT, Direction.RIGHT, Direction.DOWN, Direction.DOWN,
        Direction.LEFT, Direction.LEFT, Direction.UP, Direction.UP]


def recurring_handles(timers):
    return [h for h in timers.pending() if h.recurring]


def park_food(game):
    game.engine.food = FoodItem(FAR_AWAY, FoodCategory.NORMAL)


def circle_until(game, timers, t_end):
    """Steer around LOOP tick by tick, keeping food out of the way."""
    while timers.pending() and timers.pending()[0].deadline <= t_end:
        game.request_direction(LOOP[game.ticks % len(LOOP)])
        timers.advance(timers.pending()[0].deadline)
        assert game.state == STATE_PLAYING
        park_food(game)
    timers.advance(t_end)


def test_initial_state(game):
    assert game.state == STATE_MENU
    assert game.engine is None
    assert game.settings.difficulty == "normal"


def test_start_begins_run(game, storage, timers, audio):
    game.start()
    assert game.state == STATE_PLAYING
    assert game.scheduler.running
    assert game.scheduler.interval == 120
    assert list(game.engine.snake) == [(12, 12), (11, 12), (10, 12)]
    assert game.engine.food is not None
    assert storage.load(SETTINGS_KEY) == {
        "difficulty": "normal", "obstacleMode": False, "soundEnabled": True,
    }
    assert audio.calls == ["start_music"]


def test_start_outside_menu_is_ignored(game):
    game.start()
    engine = game.engine
    game.start()
    assert game.engine is engine


def test_tick_advances_the_snake(game, timers):
    game.start()
    park_food(game)
    timers.advance(119)
    assert game.engine.head == (12, 12)
    timers.advance(120)
    assert game.engine.head == (13, 12)
    assert game.board.head == (13, 12)


def test_difficulty_sets_base_interval(game):
    game.set_difficulty("hard")
    game.start()
    assert game.scheduler.interval == 70


def test_settings_only_change_between_runs(game):
    game.start()
    game.set_difficulty("easy")
    game.set_obstacle_mode(True)
    assert game.settings.difficulty == "normal"
    assert game.settings.obstacle_mode is False
    with pytest.raises(ValueError):
        game.set_difficulty("impossible")


def test_obstacle_mode_places_obstacles(game):
    game.toggle_obstacle_mode()
    game.start()
    assert 12 <= len(game.engine.obstacles) <= 15


def test_pause_and_resume(game, timers, audio):
    game.start()
    park_food(game)
    game.pause()
    assert game.state == STATE_PAUSED
    assert not game.scheduler.running
    timers.advance(1000)
    assert game.engine.head == (12, 12)
    assert game.request_direction(Direction.UP) is False

    game.resume()
    assert game.state == STATE_PLAYING
    assert game.scheduler.running
    timers.advance(1120)
    assert game.engine.head == (13, 12)
    assert audio.calls == ["start_music", "stop_music", "start_music"]


def test_invalid_transitions_are_no_ops(game):
    game.pause()
    game.resume()
    game.restart()
    game.play_again()
    game.return_to_menu()
    assert game.state == STATE_MENU
    game.start()
    game.resume()
    game.play_again()
    assert game.state == STATE_PLAYING


def test_toggle_pause(game):
    game.start()
    game.toggle_pause()
    assert game.state == STATE_PAUSED
    game.toggle_pause()
    assert game.state == STATE_PLAYING


def test_restart_replaces_engine(game, timers):
    game.start()
    first = game.engine
    park_food(game)
    timers.advance(360)
    game.pause()
    game.restart()
    assert game.state == STATE_PLAYING
    assert game.engine is not first
    assert game.engine.score == 0
    assert list(game.engine.snake) == [(12, 12), (11, 12), (10, 12)]
    assert len(recurring_handles(timers)) == 1


def test_return_to_menu_stops_everything(game, timers):
    game.start()
    game.return_to_menu()
    assert game.state == STATE_MENU
    assert game.engine is None
    assert not game.scheduler.running
    assert recurring_handles(timers) == []


def test_never_more_than_one_tick_source(game, timers):
    game.start()
    for action in (game.pause, game.resume, game.restart, game.pause,
                   game.resume, game.resume, game.restart):
        action()
        assert len(recurring_handles(timers)) <= 1


def test_wall_collision_ends_run_and_records(game, storage, timers, audio):
    game.start()
    timers.advance(60_000)
    assert game.state == STATE_OVER
    assert game.collision is Collision.WALL
    assert game.engine.head == (24, 12)
    assert not game.scheduler.running
    assert game.new_record is True
    assert audio.calls[-2:] == ["stop_music", "game_over"]

    entries = game.leaderboard.list()
    assert len(entries) == 1
    assert entries[0].score == game.score
    assert entries[0].difficulty == "normal"
    assert entries[0].date == "2026-10-17"
    assert storage.load(LEADERBOARD_KEY)[0]["score"] == game.score


def test_second_lower_run_is_not_a_record(game, timers):
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.BONUS)
    timers.advance(timers.now + 60_000)
    assert game.new_record is True

    game.play_again()
    park_food(game)
    game.engine.placer.max_attempts = 0
    timers.advance(timers.now + 60_000)
    assert game.state == STATE_OVER
    assert game.score == 0
    assert game.new_record is False
    assert [e.score for e in game.leaderboard.list()][-1] == 0


def test_eating_plays_sounds(game, timers, audio):
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.NORMAL)
    timers.advance(120)
    game.engine.food = FoodItem((14, 12), FoodCategory.SLOW)
    timers.advance(240)
    assert audio.calls == ["start_music", "eat", "special"]


def test_muted_run_makes_no_sound(storage, timers, audio):
    storage.save(SETTINGS_KEY, {"difficulty": "easy", "obstacleMode": False, "soundEnabled": False})
    game = GameStateMachine(storage, timers=timers, audio=audio)
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.NORMAL)
    timers.advance(60_000)
    assert game.state == STATE_OVER
    assert "start_music" not in audio.calls
    assert "eat" not in audio.calls
    assert "game_over" not in audio.calls


def test_toggle_sound_while_playing(game, audio):
    game.start()
    assert game.toggle_sound() is False
    assert audio.calls[-1] == "stop_music"
    assert game.toggle_sound() is True
    assert audio.calls[-1] == "start_music"


def test_speed_food_scenario(game, timers):
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.SPEED)
    timers.advance(120)
    park_food(game)
    assert game.score == 20
    assert game.scheduler.interval == 84
    assert game.engine.effect.expires_at == 5120

    circle_until(game, timers, 5119)
    assert game.scheduler.interval == 84
    circle_until(game, timers, 5120)
    assert game.engine.effect is None
    assert game.scheduler.interval == 120
    assert game.scheduler.running
    assert len(recurring_handles(timers)) == 1


def test_effect_expiring_while_paused_does_not_restart_ticks(game, timers):
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.SLOW)
    timers.advance(120)
    park_food(game)
    assert game.scheduler.interval == 168

    game.pause()
    timers.advance(10_000)
    assert game.engine.effect is None
    assert game.engine.interval == 120
    assert not game.scheduler.running
    assert recurring_handles(timers) == []

    game.resume()
    assert game.scheduler.interval == 120


def test_resume_uses_effective_interval(game, timers):
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.SPEED)
    timers.advance(120)
    game.pause()
    game.resume()
    assert game.scheduler.interval == 84


def test_restart_cancels_pending_effect(game, timers):
    game.start()
    game.engine.food = FoodItem((13, 12), FoodCategory.SPEED)
    timers.advance(120)
    assert game.engine.effect is not None
    game.restart()
    assert [h for h in timers.pending() if not h.recurring] == []
    assert game.scheduler.interval == 120
    assert game.engine.effect is None


def test_settings_saved_on_start_and_reloaded():
    storage = MemoryStorage()
    game = GameStateMachine(storage)
    game.set_difficulty("easy")
    game.set_obstacle_mode(True)
    game.set_sound_enabled(False)
    game.start()
    game.return_to_menu()
    again = GameStateMachine(storage)
    assert again.settings.difficulty == "easy"
    assert again.settings.obstacle_mode is True
    assert again.settings.sound_enabled is False
