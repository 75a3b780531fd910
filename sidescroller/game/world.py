# sidescroller/game/world.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Set

from .config import (
    WIDTH, FPS, LEVEL_WIDTH, GOAL_X, CAMERA_LEAD, CLOUD_PARALLAX,
    ENEMY_DEFEAT_BONUS, HEART_HEAL, COLOR_CLOUD,
)
from .draw import DrawCommand, circle
from .level import Level, Pickup, CollectibleKind, build_default_level

logger = logging.getLogger(__name__)


class GameState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    GAME_WON = "game_won"


class Key(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    JUMP = "jump"
    RESET = "reset"
    PAUSE = "pause"


EDGE_KEYS = (Key.JUMP, Key.RESET, Key.PAUSE)


@dataclass(frozen=True)
class GameEvent:
    """Something that happened during a tick: pickup, enemy_defeated, damage, fell, game_over, game_won."""
    kind: str
    value: int = 0
    detail: str = ""


@dataclass(frozen=True)
class Hud:
    score: int
    high_score: int
    health: int
    max_health: int
    progress: int
    hint: str
    double_jump_unlocked: bool
    state: GameState
    new_high_score: bool


class TickSource(Protocol):
    def wait(self) -> float:
        """Block until the next frame is due; return elapsed milliseconds."""
        ...


class FixedTicker:
    """Headless tick source: every wait() is exactly one frame, no sleeping."""

    def __init__(self, fps: int = FPS):
        self.fps = fps
        self.ticks = 0

    def wait(self) -> float:
        self.ticks += 1
        return 1000.0 / self.fps


def camera_offset(player_x: float, level_width: float, viewport_width: float) -> float:
    target = player_x - viewport_width * CAMERA_LEAD
    return max(0.0, min(target, level_width - viewport_width))


class Game:
    """
    Owns the player and every entity list, plus score and lifecycle.

    IDLE -> RUNNING <-> PAUSED, and RUNNING -> GAME_OVER | GAME_WON.
    reset() rebuilds the level from the factory; high_score survives it.
    update() is the fixed-timestep tick; draw_commands() and hud() only read.
    """

    def __init__(self,
                 level_factory: Callable[[], Level] = build_default_level,
                 level_width: float = LEVEL_WIDTH,
                 viewport_width: float = WIDTH,
                 goal_x: float = GOAL_X):
        self.level_factory = level_factory
        self.level_width = level_width
        self.viewport_width = viewport_width
        self.goal_x = goal_x

        self.score = 0
        self.high_score = 0
        self.keys: Set[Key] = set()
        self.scheduled = False
        self.frame = 0
        self.init_level()

    # -------------------- Lifecycle --------------------

    def init_level(self) -> None:
        level = self.level_factory()
        self.player = level.player
        self.player.level_width = self.level_width
        self.platforms = level.platforms
        self.enemies = level.enemies
        self.collectibles = level.collectibles
        self.camera_x = 0.0
        self.frame = 0
        self.state = GameState.IDLE

    def start(self) -> None:
        if self.scheduled:
            return
        self.scheduled = True
        if self.state is GameState.IDLE:
            self.state = GameState.RUNNING
        logger.info("game started (state=%s)", self.state.value)

    def stop(self) -> None:
        if self.scheduled:
            logger.info("game stopped at frame %d", self.frame)
        self.scheduled = False

    def reset(self) -> None:
        self.stop()
        self.score = 0
        self.init_level()
        logger.info("level reset (high score %d)", self.high_score)
        self.start()

    def pause(self) -> None:
        if self.state is GameState.RUNNING:
            self.state = GameState.PAUSED
            logger.info("paused")

    def resume(self) -> None:
        if self.state is GameState.PAUSED:
            self.state = GameState.RUNNING
            logger.info("resumed")

    def toggle_pause(self) -> None:
        if self.state is GameState.PAUSED:
            self.resume()
        else:
            self.pause()

    @property
    def is_over(self) -> bool:
        return self.state in (GameState.GAME_OVER, GameState.GAME_WON)

    # -------------------- Input --------------------

    def press(self, key: Key) -> None:
        """Key-down. Held keys do not re-fire their edge action."""
        key = Key(key)
        repeat = key in self.keys
        self.keys.add(key)
        if repeat or key not in EDGE_KEYS:
            return
        if key is Key.JUMP:
            if self.state is GameState.RUNNING:
                self.player.jump()
        elif key is Key.RESET:
            self.reset()
        elif key is Key.PAUSE:
            self.toggle_pause()

    def release(self, key: Key) -> None:
        self.keys.discard(Key(key))

    def _apply_input(self) -> None:
        if Key.LEFT in self.keys:
            self.player.move_left()
        elif Key.RIGHT in self.keys:
            self.player.move_right()
        else:
            self.player.stop()

    # -------------------- Tick --------------------

    def update(self) -> List[GameEvent]:
        if self.state is not GameState.RUNNING:
            return []
        events: List[GameEvent] = []
        player = self.player

        self._apply_input()

        # platforms move after the player resolved against them: one frame of lag
        health_before = player.health
        hit = player.update(self.platforms, self.enemies)
        if hit:
            events.append(GameEvent("damage", hit))
        fall_loss = health_before - hit - player.health
        if fall_loss:
            events.append(GameEvent("fell", fall_loss))

        for plat in self.platforms:
            plat.update()
        for enemy in self.enemies:
            enemy.update(self.platforms)

        for item in self.collectibles:
            item.update()
            if not item.collected and player.collides_with(item):
                pickup = item.collect()
                self._apply_pickup(pickup)
                events.append(GameEvent("pickup", pickup.value, pickup.kind.value))

        for enemy in self.enemies:
            if enemy.defeated and not enemy.score_given:
                enemy.score_given = True
                self.score += ENEMY_DEFEAT_BONUS
                events.append(GameEvent("enemy_defeated", ENEMY_DEFEAT_BONUS))

        self._prune()
        self.camera_x = camera_offset(player.x, self.level_width, self.viewport_width)

        if not player.active:
            self._finish(GameState.GAME_OVER)
            events.append(GameEvent("game_over", self.score))
        elif player.x > self.goal_x:
            self._finish(GameState.GAME_WON)
            events.append(GameEvent("game_won", self.score))

        self.frame += 1
        for ev in events:
            logger.debug("frame %d: %s value=%d %s", self.frame, ev.kind, ev.value, ev.detail)
        return events

    def _apply_pickup(self, pickup: Pickup) -> None:
        if pickup.kind is CollectibleKind.HEART:
            self.player.heal(HEART_HEAL)
        elif pickup.kind is CollectibleKind.DOUBLE_JUMP:
            self.player.has_double_jump = True
            self.score += pickup.value
        else:
            self.score += pickup.value

    def _prune(self) -> None:
        # finished entities are dropped once nothing is owed for them
        self.enemies = [e for e in self.enemies if e.active or not e.score_given]
        self.collectibles = [c for c in self.collectibles if not c.collected]

    def _finish(self, state: GameState) -> None:
        self.state = state
        if self.score > self.high_score:
            self.high_score = self.score
        logger.info("%s at frame %d: score=%d high=%d",
                    state.value, self.frame, self.score, self.high_score)

    # -------------------- Loop --------------------

    def run(self, ticker: TickSource,
            on_frame: Optional[Callable[["Game"], None]] = None,
            max_frames: Optional[int] = None) -> int:
        """
        Cooperative frame loop. The scheduled flag is checked before every
        frame, so stop() from on_frame ends the loop after the current one.
        Returns the number of frames run.
        """
        self.start()
        frames = 0
        while self.scheduled:
            if max_frames is not None and frames >= max_frames:
                break
            ticker.wait()
            self.update()
            if on_frame is not None:
                on_frame(self)
            frames += 1
        return frames

    # -------------------- Read-only views --------------------

    @property
    def progress(self) -> int:
        return int(math.floor(self.player.x / self.level_width * 100))

    def hud(self) -> Hud:
        unlocked = self.player.has_double_jump
        hint = "Double Jump Unlocked!" if unlocked else "Jump on enemies to defeat them!"
        if self.state is GameState.GAME_WON:
            new_high = self.score == self.high_score
        else:
            new_high = self.state is GameState.GAME_OVER and self.score == self.high_score and self.score > 0
        return Hud(
            score=self.score,
            high_score=self.high_score,
            health=self.player.health,
            max_health=self.player.max_health,
            progress=self.progress,
            hint=hint,
            double_jump_unlocked=unlocked,
            state=self.state,
            new_high_score=new_high,
        )

    def cloud_commands(self) -> List[DrawCommand]:
        shift = self.camera_x * CLOUD_PARALLAX
        cmds = []
        for i in range(10):
            x = (i * 300 - shift) % (self.viewport_width + 200)
            y = 50 + (i % 3) * 80
            cmds += [
                circle(COLOR_CLOUD, x, y, 30),
                circle(COLOR_CLOUD, x + 25, y, 35),
                circle(COLOR_CLOUD, x + 50, y, 30),
            ]
        return cmds

    def draw_commands(self) -> List[DrawCommand]:
        cam = self.camera_x
        cmds = self.cloud_commands()
        for plat in self.platforms:
            cmds += plat.render(cam)
        for item in self.collectibles:
            cmds += item.render(cam)
        for enemy in self.enemies:
            cmds += enemy.render(cam)
        if self.player.active:
            cmds += self.player.render(cam)
        return cmds
