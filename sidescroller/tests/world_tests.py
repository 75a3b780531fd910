# sidescroller/tests/world_tests.py
"""
Game orchestrator: lifecycle, tick order, scoring, camera, HUD and input.

Usage (from repo root):
  python -m sidescroller.tests.world_tests
  pytest sidescroller/tests/world_tests.py
"""
from __future__ import annotations
from typing import Iterable, Tuple

from sidescroller.game.config import (
    ENEMY_DEFEAT_BONUS, ENEMY_DEFEAT_FRAMES, LEVEL_WIDTH, WIDTH, PLAYER_JUMP_POWER,
)
from sidescroller.game.draw import DrawCommand
from sidescroller.game.level import Level, Platform, Enemy, Collectible
from sidescroller.game.player import Player
from sidescroller.game.world import Game, GameState, Key, FixedTicker, camera_offset


def make_level(player: Tuple[float, float] = (100.0, 510.0),
               platforms: Iterable[tuple] = ((0, 550, 2400, 50),),
               enemies: Iterable[tuple] = (),
               collectibles: Iterable[tuple] = ()):
    """Level factory over a flat floor; every call builds fresh entities."""
    platforms, enemies, collectibles = list(platforms), list(enemies), list(collectibles)

    def factory() -> Level:
        return Level(
            player=Player(x=player[0], y=player[1]),
            platforms=[Platform(*p) for p in platforms],
            enemies=[Enemy(*e) for e in enemies],
            collectibles=[Collectible(*c) for c in collectibles],
        )
    return factory


def running(factory=None) -> Game:
    game = Game(level_factory=factory or make_level())
    game.start()
    return game


# ---------------- Lifecycle ----------------

def test_state_machine():
    game = Game(level_factory=make_level())
    assert game.state is GameState.IDLE
    assert game.update() == [] and game.frame == 0, "idle games do not tick"

    game.start()
    assert game.state is GameState.RUNNING and game.scheduled
    game.start()
    assert game.state is GameState.RUNNING

    game.pause()
    assert game.state is GameState.PAUSED
    y = game.player.y
    game.update()
    assert game.player.y == y, "paused games do not tick"
    game.toggle_pause()
    assert game.state is GameState.RUNNING

    game.stop()
    assert not game.scheduled and game.state is GameState.RUNNING, "stop keeps state"


def test_run_loop_honours_stop_and_max_frames():
    game = Game(level_factory=make_level())
    assert game.run(FixedTicker(), max_frames=10) == 10
    assert game.frame == 10

    game = Game(level_factory=make_level())
    seen = []

    def on_frame(g: Game) -> None:
        seen.append(g.frame)
        if g.frame == 3:
            g.stop()

    assert game.run(FixedTicker(), on_frame=on_frame) == 3
    assert seen == [1, 2, 3]


def test_reset_rebuilds_and_keeps_high_score():
    game = running(make_level(collectibles=[(110, 520, "coin")]))
    game.update()
    assert game.score == 10
    game.player.y = 700
    game.update()
    assert game.state is GameState.GAME_OVER
    assert game.high_score == 10

    old_player = game.player
    game.press(Key.RESET)
    assert game.state is GameState.RUNNING
    assert game.score == 0 and game.high_score == 10
    assert game.player is not old_player
    assert len(game.collectibles) == 1 and not game.collectibles[0].collected


def test_player_resolves_against_platforms_before_they_move():
    # the platform covers the player's right edge now, and slides clear of it this tick
    game = running(make_level(player=(170.0, 460.0),
                              platforms=[(200, 500, 100, 20, True, 100, 20)]))
    plat = game.platforms[0]
    game.update()
    assert game.player.on_ground and game.player.y == 460, "landed on the pre-move platform"
    assert plat.x == 220, "platform advanced after the player"
    game.update()
    assert not game.player.on_ground, "next tick sees the moved platform"


def test_enemies_move_after_the_player():
    # the enemy touches the player only once it has walked; the hit waits a tick
    game = running(make_level(enemies=[(141, 515, 0, 2400)]))
    enemy = game.enemies[0]
    enemy.direction = -1
    game.update()
    assert enemy.x == 139 and game.player.health == 5
    game.update()
    assert game.player.health == 4


# ---------------- Pickups & scoring ----------------

def test_heart_heals_without_score():
    game = running(make_level(collectibles=[(110, 520, "heart")]))
    game.player.health = 3
    events = game.update()
    assert game.player.health == 4
    assert game.score == 0
    assert [e.kind for e in events] == ["pickup"]


def test_double_jump_charm_unlocks_and_scores():
    game = running(make_level(collectibles=[(110, 520, "doublejump")]))
    game.update()
    assert game.player.has_double_jump
    assert game.score == 100
    assert game.hud().hint == "Double Jump Unlocked!"


def test_collectible_counts_once():
    game = running(make_level(collectibles=[(110, 520, "coin"), (110, 520, "star")]))
    game.update()
    assert game.score == 60
    for _ in range(30):
        game.update()
    assert game.score == 60
    assert game.collectibles == []


def test_enemy_defeat_bonus_paid_once():
    game = running(make_level(player=(100.0, 460.0), enemies=[(100, 505, 0, 400)]))
    enemy = game.enemies[0]
    game.player.vy = 5.0
    events = game.update()
    assert enemy.defeated
    assert game.score == ENEMY_DEFEAT_BONUS
    assert "enemy_defeated" in [e.kind for e in events]

    for _ in range(ENEMY_DEFEAT_FRAMES * 2):
        game.update()
    assert game.score == ENEMY_DEFEAT_BONUS
    assert not enemy.active
    assert enemy not in game.enemies
    assert game.player.health == game.player.max_health


def test_invincibility_blocks_repeat_hits():
    game = running(make_level(enemies=[(110, 515, 0, 2400)]))
    game.update()
    assert game.player.health == 4
    for _ in range(30):
        game.update()
    assert game.player.health == 4


# ---------------- Terminal states ----------------

def test_crossing_goal_wins_on_that_tick():
    game = running(make_level(player=(2240.0, 510.0)))
    game.press(Key.RIGHT)
    game.update()
    assert game.player.x == 2246 and game.state is GameState.RUNNING
    events = game.update()
    assert game.player.x == 2252
    assert game.state is GameState.GAME_WON
    assert events[-1].kind == "game_won"

    game = running(make_level(player=(2260.0, 510.0)))
    assert game.state is GameState.RUNNING
    game.update()
    assert game.state is GameState.GAME_WON


def test_fall_ends_the_game():
    game = running()
    game.player.y = 700
    events = game.update()
    assert game.player.health == 0 and not game.player.active
    assert game.state is GameState.GAME_OVER
    assert [e.kind for e in events] == ["fell", "game_over"]
    frame = game.frame
    game.update()
    assert game.frame == frame, "terminal states do not tick"


def test_hit_and_fall_in_one_tick_are_separate_events():
    game = running(make_level(player=(100.0, 601.0), platforms=[], enemies=[(100, 610, 0, 400)]))
    events = game.update()
    assert [(e.kind, e.value) for e in events] == [("damage", 1), ("fell", 4), ("game_over", 0)]


def test_damage_to_zero_is_game_over():
    game = running(make_level(enemies=[(110, 515, 0, 2400)]))
    game.player.health = 1
    game.update()
    assert game.state is GameState.GAME_OVER
    hud = game.hud()
    assert hud.health == 0 and not hud.new_high_score


def test_new_high_score_flag():
    game = running(make_level(player=(2260.0, 510.0), collectibles=[(2270, 520, "coin")]))
    game.update()
    hud = game.hud()
    assert hud.state is GameState.GAME_WON
    assert hud.high_score == 10 and hud.new_high_score


# ---------------- Camera & HUD ----------------

def test_camera_is_clamped():
    assert camera_offset(100, LEVEL_WIDTH, WIDTH) == 0.0
    assert camera_offset(2300, LEVEL_WIDTH, WIDTH) == LEVEL_WIDTH - WIDTH
    assert abs(camera_offset(1200, LEVEL_WIDTH, WIDTH) - (1200 - WIDTH / 3)) < 1e-9

    game = running(make_level(player=(2300.0, 510.0)))
    game.goal_x = 5000
    game.update()
    assert game.camera_x == LEVEL_WIDTH - WIDTH


def test_hud_progress_and_health():
    game = running(make_level(player=(1210.0, 510.0)))
    hud = game.hud()
    assert hud.progress == 50
    assert (hud.health, hud.max_health) == (5, 5)
    assert hud.hint == "Jump on enemies to defeat them!"


def test_draw_commands_do_not_mutate():
    game = Game()
    game.start()
    for _ in range(20):
        game.update()
    before = (game.player.x, game.player.y, game.frame, game.score,
              [(e.x, e.y) for e in game.enemies], [c.rotation for c in game.collectibles])
    cmds = game.draw_commands()
    game.hud()
    after = (game.player.x, game.player.y, game.frame, game.score,
             [(e.x, e.y) for e in game.enemies], [c.rotation for c in game.collectibles])
    assert before == after
    assert cmds and all(isinstance(c, DrawCommand) for c in cmds)


# ---------------- Input ----------------

def test_left_wins_over_right_and_release_stops():
    game = running()
    game.press(Key.LEFT)
    game.press(Key.RIGHT)
    game.update()
    assert game.player.vx == -game.player.speed
    game.release(Key.LEFT)
    game.update()
    assert game.player.vx == game.player.speed
    game.release(Key.RIGHT)
    game.update()
    assert game.player.vx == 0.0


def test_jump_is_edge_triggered():
    game = running()
    game.player.has_double_jump = True
    game.update()                       # land, charge refilled
    game.press(Key.JUMP)
    assert game.player.vy == -PLAYER_JUMP_POWER, "jump applies on key-down"
    game.update()
    game.press(Key.JUMP)                # auto-repeat while held
    assert game.player.double_jump_available, "held key must not re-fire"
    game.release(Key.JUMP)
    assert game.player.double_jump_available, "key-up never fires"
    game.press(Key.JUMP)
    assert not game.player.double_jump_available


def test_jump_ignored_while_paused():
    game = running()
    game.update()
    game.press(Key.PAUSE)
    assert game.state is GameState.PAUSED
    game.press(Key.JUMP)
    assert game.player.vy == 0.0
    game.release(Key.PAUSE)
    game.press(Key.PAUSE)
    assert game.state is GameState.RUNNING


def main():
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 All game tests passed")


if __name__ == "__main__":
    main()
