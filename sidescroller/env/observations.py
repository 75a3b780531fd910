# sidescroller/env/observations.py
"""
Vector observation for the platformer Gymnasium env.

Layout (33 float32 values, all in [-1, 1]):
  [0:9]   player: x, y, vx, vy, on_ground, has_double_jump, double_jump_available, health, invincible
  [9:21]  3 nearest live enemies   x (present, dx, dy, direction)
  [21:30] 3 nearest collectibles   x (present, dx, dy)
  [30:33] floor probes ahead of the player (clearance below the feet, 1 = nothing)
Missing enemies / collectibles are zero blocks.
"""
from __future__ import annotations
from typing import List, Sequence, Tuple
import numpy as np

from ..game.config import WIDTH, HEIGHT

N_ENEMIES = 3
N_COLLECTIBLES = 3
PROBE_OFFSETS: Tuple[int, int, int] = (60, 120, 240)  # px ahead of the player's centre
PLAYER_FEATURES = 9
OBS_SIZE = PLAYER_FEATURES + 4 * N_ENEMIES + 3 * N_COLLECTIBLES + len(PROBE_OFFSETS)


def _clip(v: float, lo: float = -1.0, hi: float = 1.0) -> float:
    return lo if v < lo else (hi if v > hi else v)


def _nearest(player, entities: Sequence, k: int) -> List:
    px, py = player.center_x, player.center_y
    ranked = sorted(entities, key=lambda e: (e.center_x - px) ** 2 + (e.center_y - py) ** 2)
    return ranked[:k]


def floor_clearance(player, platforms: Sequence, x: float) -> float:
    """Normalised gap between the player's feet and the highest platform top under x."""
    feet = player.y + player.height
    best = None
    for plat in platforms:
        if plat.x <= x < plat.x + plat.width and plat.y >= feet - 1.0:
            gap = plat.y - feet
            if best is None or gap < best:
                best = gap
    if best is None:
        return 1.0
    return _clip(best / HEIGHT, 0.0, 1.0)


def build_observation(game) -> np.ndarray:
    p = game.player
    obs: List[float] = [
        _clip(p.x / game.level_width, 0.0, 1.0),
        _clip(p.y / HEIGHT),
        _clip(p.vx / max(1e-6, p.speed)),
        _clip(p.vy / max(1e-6, 2 * p.jump_power)),
        float(p.on_ground),
        float(p.has_double_jump),
        float(p.double_jump_available),
        _clip(p.health / max(1, p.max_health), 0.0, 1.0),
        float(p.invincible),
    ]

    live = [e for e in game.enemies if e.active and not e.defeated]
    nearest_enemies = _nearest(p, live, N_ENEMIES)
    for i in range(N_ENEMIES):
        if i < len(nearest_enemies):
            e = nearest_enemies[i]
            obs += [1.0,
                    _clip((e.center_x - p.center_x) / WIDTH),
                    _clip((e.center_y - p.center_y) / HEIGHT),
                    float(e.direction)]
        else:
            obs += [0.0, 0.0, 0.0, 0.0]

    items = [c for c in game.collectibles if c.active and not c.collected]
    nearest_items = _nearest(p, items, N_COLLECTIBLES)
    for i in range(N_COLLECTIBLES):
        if i < len(nearest_items):
            c = nearest_items[i]
            obs += [1.0,
                    _clip((c.center_x - p.center_x) / WIDTH),
                    _clip((c.center_y - p.center_y) / HEIGHT)]
        else:
            obs += [0.0, 0.0, 0.0]

    for dx in PROBE_OFFSETS:
        obs.append(floor_clearance(p, game.platforms, p.center_x + dx))

    return np.asarray(obs, dtype=np.float32)
