# sidescroller/game/level.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from .config import (
    PLAYER_START,
    ENEMY_W, ENEMY_H, ENEMY_SPEED, ENEMY_GRAVITY, ENEMY_DEFEAT_FRAMES, ENEMY_DEFEAT_SPIN,
    LAND_TOLERANCE,
    COLLECTIBLE_SIZE, COLLECTIBLE_SPIN, COLLECTIBLE_BOB,
    COIN_VALUE, STAR_VALUE, HEART_VALUE, DOUBLE_JUMP_VALUE,
    COLOR_OUTLINE, COLOR_ENEMY, COLOR_ENEMY_DEFEATED,
    COLOR_PLAT, COLOR_PLAT_LINE, COLOR_PLAT_TOP,
    COLOR_PLAT_MOVING, COLOR_PLAT_MOVING_LINE, COLOR_PLAT_MOVING_TOP,
    COLOR_COIN, COLOR_COIN_SHINE, COLOR_COIN_RIM, COLOR_STAR, COLOR_STAR_RIM,
    COLOR_HEART, COLOR_DOUBLE_JUMP, COLOR_WHITE,
)
from .draw import DrawCommand, rect, circle, polygon, line, arc, rotate_points
from .entity import Entity
from .player import Player


@dataclass
class Platform(Entity):
    """Standing surface. Moving platforms ping-pong between start_x and start_x + move_range."""
    x: float
    y: float
    width: float
    height: float
    moving: bool = False
    move_range: float = 0.0
    move_speed: float = 0.0
    color: Tuple[int, int, int] = COLOR_PLAT
    active: bool = True
    direction: int = 1
    start_x: float = field(init=False)

    def __post_init__(self):
        self.start_x = float(self.x)

    def update(self) -> None:
        if not self.moving:
            return
        self.x += self.move_speed * self.direction
        if self.x >= self.start_x + self.move_range:
            self.x = self.start_x + self.move_range
            self.direction = -1
        elif self.x <= self.start_x:
            self.x = self.start_x
            self.direction = 1

    def render(self, camera_x: float) -> List[DrawCommand]:
        sx = self.x - camera_x
        if self.moving:
            fill, stripe, top = COLOR_PLAT_MOVING, COLOR_PLAT_MOVING_LINE, COLOR_PLAT_MOVING_TOP
        else:
            fill, stripe, top = self.color, COLOR_PLAT_LINE, COLOR_PLAT_TOP
        cmds = [rect(fill, sx, self.y, self.width, self.height)]
        i = 0
        while i < self.width:
            cmds.append(line(stripe, (sx + i, self.y), (sx + i, self.y + self.height), 2))
            i += 20
        cmds.append(line(top, (sx, self.y), (sx + self.width, self.y), 3))
        return cmds


@dataclass
class Enemy(Entity):
    """
    Patrolling walker. The right edge is bounded by patrol_end, so x stays in
    [patrol_start, patrol_end - width]. Walls are ignored; only platform tops stop it.
    """
    x: float
    y: float
    patrol_start: float
    patrol_end: float
    width: float = ENEMY_W
    height: float = ENEMY_H
    color: Tuple[int, int, int] = COLOR_ENEMY
    active: bool = True
    speed: float = ENEMY_SPEED
    gravity: float = ENEMY_GRAVITY
    vy: float = 0.0
    direction: int = 1
    defeated: bool = False
    defeat_timer: int = 0
    score_given: bool = False   # owned by the Game: defeat bonus already paid

    def update(self, platforms: List[Platform]) -> None:
        if self.defeated:
            self.defeat_timer += 1
            if self.defeat_timer >= ENEMY_DEFEAT_FRAMES:
                self.active = False
            return

        self.vy += self.gravity
        self.x += self.speed * self.direction
        self.y += self.vy

        self._land_on_platforms(platforms)

        if self.x <= self.patrol_start:
            self.x = self.patrol_start
            self.direction = 1
        elif self.x + self.width >= self.patrol_end:
            self.x = self.patrol_end - self.width
            self.direction = -1

    def _land_on_platforms(self, platforms: List[Platform]) -> None:
        for plat in platforms:
            if not self.collides_with(plat):
                continue
            if self.vy > 0 and self.y + self.height - self.vy <= plat.y + LAND_TOLERANCE:
                self.y = plat.y - self.height
                self.vy = 0.0

    def defeat(self) -> bool:
        """Enter the defeated state. Returns False if it already was."""
        if self.defeated:
            return False
        self.defeated = True
        self.color = COLOR_ENEMY_DEFEATED
        return True

    def render(self, camera_x: float) -> List[DrawCommand]:
        if not self.active:
            return []
        sx = self.x - camera_x
        if self.defeated:
            return [rect(self.color, sx, self.y, self.width, self.height,
                         rotation=self.defeat_timer * ENEMY_DEFEAT_SPIN)]
        y = self.y
        return [
            rect(self.color, sx, y, self.width, self.height),
            rect(COLOR_OUTLINE, sx + 8, y + 10, 6, 6),
            rect(COLOR_OUTLINE, sx + 21, y + 10, 6, 6),
            line(COLOR_OUTLINE, (sx + 8, y + 8), (sx + 14, y + 10), 2),
            line(COLOR_OUTLINE, (sx + 27, y + 8), (sx + 21, y + 10), 2),
            arc(COLOR_OUTLINE, sx + 17.5, y + 28, 8, 0.0, math.pi),  # frown
        ]


class CollectibleKind(str, Enum):
    COIN = "coin"
    STAR = "star"
    HEART = "heart"
    DOUBLE_JUMP = "doublejump"


# kind -> (points, color)
COLLECTIBLE_TABLE: Dict[CollectibleKind, Tuple[int, Tuple[int, int, int]]] = {
    CollectibleKind.COIN: (COIN_VALUE, COLOR_COIN),
    CollectibleKind.STAR: (STAR_VALUE, COLOR_STAR),
    CollectibleKind.HEART: (HEART_VALUE, COLOR_HEART),
    CollectibleKind.DOUBLE_JUMP: (DOUBLE_JUMP_VALUE, COLOR_DOUBLE_JUMP),
}


@dataclass(frozen=True)
class Pickup:
    kind: CollectibleKind
    value: int


def _bezier(p0, p1, p2, p3, n: int = 8):
    pts = []
    for i in range(n + 1):
        t = i / n
        u = 1 - t
        pts.append((
            u**3 * p0[0] + 3 * u*u*t * p1[0] + 3 * u*t*t * p2[0] + t**3 * p3[0],
            u**3 * p0[1] + 3 * u*u*t * p1[1] + 3 * u*t*t * p2[1] + t**3 * p3[1],
        ))
    return pts


_STAR_POINTS = tuple(
    (math.cos(i * 4 * math.pi / 5 - math.pi / 2) * 12,
     math.sin(i * 4 * math.pi / 5 - math.pi / 2) * 12)
    for i in range(5)
)
_HEART_POINTS = tuple(
    _bezier((0, 5), (-10, -5), (-10, -10), (0, -15))
    + _bezier((0, -15), (10, -10), (10, -5), (0, 5))[1:]
)
_ARROW_SEGMENTS = (((0, -6), (-5, 0)), ((0, -6), (5, 0)), ((0, 2), (-5, 8)), ((0, 2), (5, 8)))


@dataclass
class Collectible(Entity):
    """Spinning, bobbing pickup. `kind` must be a CollectibleKind (or its string value)."""
    x: float
    y: float
    kind: CollectibleKind = CollectibleKind.COIN
    width: float = COLLECTIBLE_SIZE
    height: float = COLLECTIBLE_SIZE
    active: bool = True
    collected: bool = False
    rotation: float = 0.0
    value: int = field(init=False)
    color: Tuple[int, int, int] = field(init=False)

    def __post_init__(self):
        self.kind = CollectibleKind(self.kind)  # ValueError on unknown kinds
        self.value, self.color = COLLECTIBLE_TABLE[self.kind]

    @property
    def bob(self) -> float:
        return math.sin(self.rotation * 2) * COLLECTIBLE_BOB

    def update(self) -> None:
        if not self.collected:
            self.rotation += COLLECTIBLE_SPIN

    def collect(self) -> Pickup:
        self.collected = True
        self.active = False
        return Pickup(self.kind, self.value)

    def render(self, camera_x: float) -> List[DrawCommand]:
        if self.collected or not self.active:
            return []
        cx = self.x - camera_x + self.width / 2
        cy = self.y + self.bob + self.height / 2
        rot = self.rotation

        if self.kind is CollectibleKind.COIN:
            (shx, shy), = rotate_points(((-3, -3),), rot, cx, cy)
            return [
                circle(self.color, cx, cy, 12),
                circle(COLOR_COIN_SHINE, shx, shy, 4),
                circle(COLOR_COIN_RIM, cx, cy, 12, width=2),
            ]
        if self.kind is CollectibleKind.STAR:
            pts = rotate_points(_STAR_POINTS, rot, cx, cy)
            return [polygon(self.color, pts), polygon(COLOR_STAR_RIM, pts, width=2)]
        if self.kind is CollectibleKind.HEART:
            return [polygon(self.color, rotate_points(_HEART_POINTS, rot, cx, cy))]
        cmds = [circle(self.color, cx, cy, 12)]
        for a, b in _ARROW_SEGMENTS:
            pa, pb = rotate_points((a, b), rot, cx, cy)
            cmds.append(line(COLOR_WHITE, pa, pb, 3))
        return cmds


@dataclass
class Level:
    player: Player
    platforms: List[Platform]
    enemies: List[Enemy]
    collectibles: List[Collectible]


def _default_platforms() -> List[Platform]:
    ground = [Platform(x, 550, 400, 50) for x in (0, 500, 1000, 1500, 2000)]
    low = [Platform(x, y, w, 20) for x, y, w in (
        (150, 450, 200), (450, 400, 150), (700, 450, 180), (1000, 420, 200),
        (1300, 450, 150), (1600, 400, 200), (1900, 450, 180), (2150, 420, 200),
    )]
    mid = [Platform(x, y, w, 20) for x, y, w in (
        (100, 300, 150), (350, 280, 120), (600, 300, 160), (900, 250, 180),
        (1200, 300, 150), (1500, 280, 140), (1800, 300, 160), (2100, 250, 150),
    )]
    high = [Platform(x, y, w, 20) for x, y, w in (
        (200, 150, 120), (500, 180, 140), (800, 150, 120), (1100, 130, 150),
        (1400, 150, 130), (1700, 180, 140), (2000, 150, 120),
    )]
    moving = [
        Platform(400, 350, 100, 15, moving=True, move_range=100, move_speed=2),
        Platform(1000, 200, 100, 15, moving=True, move_range=150, move_speed=2),
        Platform(1600, 250, 100, 15, moving=True, move_range=120, move_speed=2),
    ]
    goal = [Platform(2200, 100, 200, 30)]
    return ground + low + mid + high + moving + goal


def _default_enemies() -> List[Enemy]:
    spots = (
        # ground
        (200, 510, 0, 380), (550, 510, 500, 880), (1050, 510, 1000, 1380),
        (1550, 510, 1500, 1880), (2050, 510, 2000, 2380),
        # low platforms
        (160, 410, 150, 330), (460, 360, 450, 580), (1010, 380, 1000, 1180),
        (1610, 360, 1600, 1780),
        # mid platforms
        (110, 260, 100, 230), (910, 210, 900, 1060), (1510, 240, 1500, 1620),
    )
    return [Enemy(x, y, a, b) for x, y, a, b in spots]


def _default_collectibles() -> List[Collectible]:
    items = [Collectible(200 + i * 70, 500 - (i % 3) * 150, CollectibleKind.COIN) for i in range(30)]
    for x, y in ((230, 110), (680, 260), (1130, 90), (1730, 140), (2030, 110)):
        items.append(Collectible(x, y, CollectibleKind.STAR))
    for x, y in ((400, 360), (1000, 210), (1800, 310)):
        items.append(Collectible(x, y, CollectibleKind.HEART))
    items.append(Collectible(800, 110, CollectibleKind.DOUBLE_JUMP))
    items.append(Collectible(2280, 50, CollectibleKind.STAR))  # goal star
    return items


def build_default_level() -> Level:
    """Fresh entities for the single built-in level."""
    x, y = PLAYER_START
    return Level(
        player=Player(x=x, y=y),
        platforms=_default_platforms(),
        enemies=_default_enemies(),
        collectibles=_default_collectibles(),
    )
