# experiments/replay.py
"""
Watch a recorded PlatformerEnv episode.

The level is fixed and the env is deterministic, so replaying the saved action
ids with the same frame_skip reproduces the run exactly.

  python -m experiments.replay --policy heuristic --seed 105
  python -m experiments.replay --trace experiments/runs/traces/random/112_actions.npy --slow

frame_skip comes from --frame-skip, else from the trace's meta file, else 4.

Keys:  SPACE pause/resume   N step once while paused   R restart   ESC quit
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pygame

from sidescroller.env.platformer_env import PlatformerEnv, ACTION_NAMES

DEFAULT_OUT_DIR = Path("experiments/runs")
DEFAULT_FRAME_SKIP = 4


def read_meta(actions_path: Path) -> Dict[str, str]:
    """<seed>_meta.txt sits next to <seed>_actions.npy; missing file -> {}."""
    meta_path = actions_path.with_name(actions_path.name.replace("_actions.npy", "_meta.txt"))
    if not meta_path.exists():
        return {}
    pairs = (ln.split("=", 1) for ln in meta_path.read_text(encoding="utf-8").splitlines() if "=" in ln)
    return {k.strip(): v.strip() for k, v in pairs}


def load_actions(trace_path: Path) -> np.ndarray:
    if not trace_path.exists():
        raise FileNotFoundError(f"Trace not found: {trace_path}")
    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected a 1D action array, got shape {actions.shape}")
    if actions.size and (actions.min() < 0 or actions.max() >= len(ACTION_NAMES)):
        raise ValueError(f"Action ids must be in [0, {len(ACTION_NAMES) - 1}]")
    return actions.astype(np.int64)


class ReplaySession:
    """Steps the env through a fixed action list, one decision per display frame."""

    def __init__(self, actions: np.ndarray, seed: int, frame_skip: int, slow: bool = False):
        self.actions = actions
        self.seed = seed
        self.env = PlatformerEnv(render_mode="human", frame_skip=frame_skip, time_limit_seconds=None)
        self.display_fps = 15 if slow else 60
        self.clock = pygame.time.Clock()
        self.font: Optional[pygame.font.Font] = None
        self.paused = False
        self.step_once = False
        self.quit = False
        self.restart()

    def restart(self) -> None:
        self.env.reset(seed=self.seed)
        self.cursor = 0
        self.ret = 0.0
        self.last_action: Optional[int] = None
        self.done = False

    def handle_input(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.quit = True
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key == pygame.K_n:
                    self.step_once = self.paused
                elif event.key == pygame.K_r:
                    self.restart()

    def advance(self) -> None:
        if self.done or self.cursor >= len(self.actions):
            self.done = True
            self.env.render()
            return
        self.last_action = int(self.actions[self.cursor])
        _, reward, term, trunc, _ = self.env.step(self.last_action)
        self.ret += reward
        self.cursor += 1
        self.done = term or trunc

    def draw_overlay(self) -> None:
        surf = pygame.display.get_surface()
        game = self.env.game
        if surf is None or game is None:
            return
        if self.font is None:
            self.font = pygame.font.SysFont("jetbrainsmono", 16)
        p = game.player
        act = ACTION_NAMES[self.last_action] if self.last_action is not None else "-"
        lines: List[str] = [
            f"step {self.cursor}/{len(self.actions)}  action={act}  return={self.ret:+.2f}",
            f"x={p.x:7.1f} y={p.y:6.1f} vx={p.vx:+.1f} vy={p.vy:+.1f}",
            f"hp={p.health}/{p.max_health} ground={int(p.on_ground)} "
            f"dj={int(p.has_double_jump)}{int(p.double_jump_available)} {game.state.value}",
        ]
        if self.paused:
            lines.append("PAUSED  (N = step, SPACE = resume)")

        width, height = 380, 8 + 20 * len(lines)
        x0 = surf.get_width() - width - 12
        panel = pygame.Surface((width, height), pygame.SRCALPHA)
        panel.fill((10, 20, 35, 170))
        surf.blit(panel, (x0, 12))
        for i, text in enumerate(lines):
            surf.blit(self.font.render(text, True, (210, 230, 255)), (x0 + 8, 16 + 20 * i))
        pygame.display.flip()

    def loop(self) -> None:
        try:
            while not self.quit:
                self.handle_input()
                if self.paused and not self.step_once:
                    self.env.render()
                else:
                    self.step_once = False
                    self.advance()
                self.draw_overlay()
                self.clock.tick(self.display_fps)
        finally:
            self.env.close()


def main():
    ap = argparse.ArgumentParser(description="Replay a recorded PlatformerEnv episode.")
    ap.add_argument("--seed", type=int, help="Episode seed (locates the trace unless --trace is given)")
    ap.add_argument("--policy", type=str, default="random", help="Trace subfolder: random / heuristic / ...")
    ap.add_argument("--trace", type=str, default="", help="Explicit path to a *_actions.npy file")
    ap.add_argument("--out-dir", type=str, default=str(DEFAULT_OUT_DIR))
    ap.add_argument("--frame-skip", type=int, default=None)
    ap.add_argument("--slow", action="store_true", help="Show ~15 decisions per second")
    args = ap.parse_args()

    if args.trace:
        trace_path = Path(args.trace)
        if args.seed is None:
            head = trace_path.stem.split("_")[0]
            args.seed = int(head) if head.isdigit() else 0
    elif args.seed is None:
        raise SystemExit("Please provide --seed or --trace")
    else:
        trace_path = Path(args.out_dir) / "traces" / args.policy / f"{args.seed}_actions.npy"

    actions = load_actions(trace_path)
    meta = read_meta(trace_path)
    frame_skip = args.frame_skip
    if frame_skip is None:
        frame_skip = int(meta["frame_skip"]) if meta.get("frame_skip", "").isdigit() else DEFAULT_FRAME_SKIP

    print(f"Replaying {trace_path} (seed={args.seed}, {len(actions)} steps, frame_skip={frame_skip})")
    if "final_state" in meta:
        print(f"Recorded outcome: {meta['final_state']} with score {meta.get('score', '?')}")
    print("Keys: SPACE pause | N step | R restart | ESC quit")

    ReplaySession(actions, args.seed, frame_skip, slow=args.slow).loop()


if __name__ == "__main__":
    main()
