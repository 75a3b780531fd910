# sidescroller/game/player.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple

from .config import (
    PLAYER_W, PLAYER_H, PLAYER_SPEED, PLAYER_JUMP_POWER, PLAYER_GRAVITY,
    PLAYER_MAX_HEALTH, INVINCIBLE_FRAMES, STOMP_BOUNCE, FLICKER_FRAMES,
    LAND_TOLERANCE, STOMP_TOLERANCE, LEVEL_WIDTH, DEATH_Y,
    COLOR_PLAYER, COLOR_OUTLINE, COLOR_GOLD,
)
from .draw import DrawCommand, rect, circle, arc
from .entity import Entity

if TYPE_CHECKING:
    from .level import Enemy, Platform


@dataclass
class Player(Entity):
    """
    The only input-driven entity.
    - move_left/move_right/stop set vx; it persists until the next command
    - jump works from the ground, or once mid-air after the double-jump charm
    - a hit costs 1 health and grants INVINCIBLE_FRAMES of immunity
    - a defeated enemy still collides while it spins, until it turns inactive
    """
    x: float
    y: float
    width: float = PLAYER_W
    height: float = PLAYER_H
    color: Tuple[int, int, int] = COLOR_PLAYER
    active: bool = True
    vx: float = 0.0
    vy: float = 0.0
    speed: float = PLAYER_SPEED
    jump_power: float = PLAYER_JUMP_POWER
    gravity: float = PLAYER_GRAVITY
    on_ground: bool = False
    health: int = PLAYER_MAX_HEALTH
    max_health: int = PLAYER_MAX_HEALTH
    invincible: bool = False
    invincible_timer: int = 0
    has_double_jump: bool = False
    double_jump_available: bool = False
    level_width: float = LEVEL_WIDTH
    death_y: float = DEATH_Y

    def update(self, platforms: List["Platform"], enemies: List["Enemy"]) -> int:
        """Advance one tick. Returns the health lost to enemy contact."""
        self.vy += self.gravity
        self.x += self.vx
        self.y += self.vy

        was_on_ground = self.on_ground
        self.on_ground = False
        self.resolve_platform_collisions(platforms)

        # refill the one-shot air jump on the landing tick only
        if self.on_ground and not was_on_ground:
            self.double_jump_available = True

        health_before_hits = self.health
        self.resolve_enemy_collisions(enemies)
        hit = health_before_hits - self.health
        self.constrain_to_bounds()

        if self.invincible:
            self.invincible_timer -= 1
            if self.invincible_timer <= 0:
                self.invincible_timer = 0
                self.invincible = False
        return hit

    def resolve_platform_collisions(self, platforms: List["Platform"]) -> None:
        """
        Infer the contact side from the displacement of this tick:
        top, then ceiling, then right-moving wall, then left-moving wall.
        This is not swept collision; a fast enough body can tunnel.
        """
        for plat in platforms:
            if not self.collides_with(plat):
                continue
            if self.vy > 0 and self.bottom - self.vy <= plat.y + LAND_TOLERANCE:
                self.y = plat.y - self.height
                self.vy = 0.0
                self.on_ground = True
            elif self.vy < 0 and self.y - self.vy >= plat.y + plat.height:
                self.y = plat.y + plat.height
                self.vy = 0.0
            elif self.vx > 0:
                self.x = plat.x - self.width
                self.vx = 0.0
            elif self.vx < 0:
                self.x = plat.x + plat.width
                self.vx = 0.0

    def resolve_enemy_collisions(self, enemies: List["Enemy"]) -> None:
        if self.invincible:
            return
        for enemy in enemies:
            if not self.collides_with(enemy):
                continue
            if self.vy > 0 and self.bottom - self.vy <= enemy.y + STOMP_TOLERANCE:
                enemy.defeat()
                self.vy = -STOMP_BOUNCE
            else:
                self.take_damage()

    def constrain_to_bounds(self) -> None:
        if self.x < 0:
            self.x = 0.0
            self.vx = 0.0
        if self.x + self.width > self.level_width:
            self.x = self.level_width - self.width
            self.vx = 0.0
        if self.y > self.death_y:
            self.health = 0
            self.active = False

    def take_damage(self) -> bool:
        """Returns True if the hit landed."""
        if self.invincible:
            return False
        self.health = max(0, self.health - 1)
        self.invincible = True
        self.invincible_timer = INVINCIBLE_FRAMES
        if self.health <= 0:
            self.active = False
        return True

    def heal(self, amount: int) -> None:
        self.health = min(self.max_health, self.health + amount)

    def jump(self) -> bool:
        if self.on_ground:
            self.vy = -self.jump_power
            self.on_ground = False
            return True
        if self.has_double_jump and self.double_jump_available:
            self.vy = -self.jump_power
            self.double_jump_available = False
            return True
        return False

    def move_left(self) -> None:
        self.vx = -self.speed

    def move_right(self) -> None:
        self.vx = self.speed

    def stop(self) -> None:
        self.vx = 0.0

    @property
    def flicker_hidden(self) -> bool:
        return self.invincible and (self.invincible_timer // FLICKER_FRAMES) % 2 == 0

    def render(self, camera_x: float) -> List[DrawCommand]:
        if not self.active or self.flicker_hidden:
            return []
        sx = self.x - camera_x
        y = self.y
        cmds = [
            rect(self.color, sx, y, self.width, self.height),
            rect(COLOR_OUTLINE, sx + 10, y + 10, 8, 8),
            rect(COLOR_OUTLINE, sx + 22, y + 10, 8, 8),
            arc(COLOR_OUTLINE, sx + 20, y + 20, 10, math.pi, 2 * math.pi),  # smile
        ]
        if self.has_double_jump and self.double_jump_available:
            cmds.append(circle(COLOR_GOLD, sx + 20, y - 10, 5))
        return cmds
