# sidescroller/tests/player_tests.py
"""
Player physics, damage and jump rules.

Usage (from repo root):
  python -m sidescroller.tests.player_tests
  pytest sidescroller/tests/player_tests.py
"""
from __future__ import annotations

from sidescroller.game.config import INVINCIBLE_FRAMES, PLAYER_JUMP_POWER, STOMP_BOUNCE
from sidescroller.game.level import Platform, Enemy
from sidescroller.game.player import Player


def ground() -> Platform:
    return Platform(0, 550, 400, 50)


# ---------------- Platform collisions ----------------

def test_lands_on_platform_after_one_tick():
    p = Player(x=100, y=510, vy=0.0)
    p.update([ground()], [])
    assert p.y == 550 - p.height
    assert p.vy == 0.0
    assert p.on_ground
    assert p.double_jump_available, "landing refills the air-jump charge"


def test_hits_ceiling_when_rising():
    ceiling = Platform(0, 100, 400, 20)
    p = Player(x=100, y=121, vy=-5.0)
    p.update([ceiling], [])
    assert p.y == 120
    assert p.vy == 0.0
    assert not p.on_ground


def test_walls_stop_horizontal_motion():
    wall = Platform(100, 450, 50, 100)

    p = Player(x=55, y=500)
    p.move_right()
    p.update([wall], [])
    assert p.x == wall.x - p.width and p.vx == 0.0

    p = Player(x=154, y=500)
    p.move_left()
    p.update([wall], [])
    assert p.x == wall.x + wall.width and p.vx == 0.0


def test_movement_commands_persist():
    p = Player(x=100, y=510)
    p.move_right()
    p.update([ground()], [])
    p.update([ground()], [])
    assert p.x == 100 + 2 * p.speed
    p.stop()
    p.update([ground()], [])
    assert p.x == 100 + 2 * p.speed


# ---------------- Bounds ----------------

def test_clamped_to_level_edges():
    p = Player(x=-5, y=510)
    p.vx = -3
    p.update([ground()], [])
    assert p.x == 0 and p.vx == 0.0

    p = Player(x=2390, y=200, level_width=2400)
    p.update([], [])
    assert p.x == 2400 - p.width


def test_fall_below_death_line_kills():
    p = Player(x=100, y=650)
    p.update([], [])
    assert p.health == 0
    assert not p.active


# ---------------- Damage ----------------

def test_side_contact_damages_once_per_window():
    enemy = Enemy(120, 515, 0, 2400)
    p = Player(x=100, y=510)
    p.update([ground()], [enemy])
    assert p.health == p.max_health - 1
    assert p.invincible and p.invincible_timer == INVINCIBLE_FRAMES - 1

    for _ in range(20):
        p.update([ground()], [enemy])
    assert p.health == p.max_health - 1, "no extra damage while invincible"


def test_invincibility_wears_off():
    p = Player(x=100, y=510)
    assert p.take_damage()
    for _ in range(INVINCIBLE_FRAMES):
        p.update([ground()], [])
    assert not p.invincible and p.invincible_timer == 0
    assert p.take_damage()
    assert p.health == p.max_health - 2


def test_health_never_leaves_range():
    p = Player(x=100, y=510)
    for _ in range(p.max_health + 3):
        p.invincible = False
        p.take_damage()
        assert 0 <= p.health <= p.max_health
    assert p.health == 0 and not p.active

    q = Player(x=100, y=510, health=3)
    q.heal(1)
    assert q.health == 4
    q.heal(10)
    assert q.health == q.max_health


def test_stomp_defeats_enemy_and_bounces():
    enemy = Enemy(100, 505, 0, 400)
    p = Player(x=100, y=460, vy=5.0)
    p.update([], [enemy])
    assert enemy.defeated
    assert p.vy == -STOMP_BOUNCE
    assert p.health == p.max_health


def test_spinning_enemy_still_hurts_from_the_side():
    enemy = Enemy(110, 515, 0, 400)
    enemy.defeat()
    p = Player(x=100, y=510)
    assert p.update([ground()], [enemy]) == 1
    assert p.health == p.max_health - 1
    assert enemy.defeat_timer == 0, "a repeat defeat() must not restart the spin"


def test_update_reports_enemy_damage_only():
    p = Player(x=100, y=510)
    assert p.update([ground()], []) == 0

    enemy = Enemy(100, 610, 0, 400)
    p = Player(x=100, y=601)
    assert p.update([], [enemy]) == 1, "the fatal fall is not counted as a hit"
    assert p.health == 0 and not p.active


def test_flicker_hides_player_on_alternate_windows():
    p = Player(x=100, y=510)
    assert p.render(0.0)
    p.invincible, p.invincible_timer = True, 90   # 90 // 5 = 18, even -> hidden
    assert p.render(0.0) == []
    p.invincible_timer = 85                        # 17, odd -> drawn
    assert p.render(0.0)


# ---------------- Jumping ----------------

def test_single_jump_only_without_charm():
    p = Player(x=100, y=510)
    p.update([ground()], [])
    assert p.jump()
    assert p.vy == -PLAYER_JUMP_POWER and not p.on_ground
    assert not p.jump(), "no air jump before the charm"


def test_double_jump_consumed_once_per_landing():
    p = Player(x=100, y=510, has_double_jump=True)
    p.update([ground()], [])
    assert p.on_ground and p.double_jump_available

    assert p.jump()
    assert p.double_jump_available, "ground jump keeps the charge"
    assert p.jump()
    assert not p.double_jump_available
    assert not p.jump(), "only one air jump per grounded cycle"

    for _ in range(200):
        p.update([ground()], [])
        if p.on_ground:
            break
    assert p.on_ground
    assert p.double_jump_available, "charge refilled on landing"


def main():
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 All player tests passed")


if __name__ == "__main__":
    main()
