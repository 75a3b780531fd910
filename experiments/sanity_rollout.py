# experiments/sanity_rollout.py
"""
Baseline rollouts for PlatformerEnv.

Two reference policies are played over a list of seeds:
  random     uniform over the 6 actions (RNG seeded from the episode seed)
  heuristic  run right, hop over enemies, gaps and walls

Each episode appends one row to <out-dir>/episodes.csv. With --save-traces the
action ids go to <out-dir>/traces/<policy>/<seed>_actions.npy, next to a
key=value <seed>_meta.txt that experiments.replay reads back.

  python -m experiments.sanity_rollout --policies both --save-traces
  python -m experiments.sanity_rollout --policies heuristic --seeds 7,8,9 --save-obs --save-traces
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/rollouts
"""

from __future__ import annotations
import argparse
import csv
from collections import defaultdict
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from sidescroller.env.platformer_env import PlatformerEnv, ACTIONS
from sidescroller.env.observations import PLAYER_FEATURES, N_ENEMIES, N_COLLECTIBLES
from sidescroller.game.config import FPS

Policy = Callable[[np.ndarray], int]

RIGHT, RIGHT_JUMP = 2, 5
ENEMY_BLOCK = PLAYER_FEATURES                                    # nearest enemy: present, dx, dy, dir
NEAR_PROBE = PLAYER_FEATURES + 4 * N_ENEMIES + 3 * N_COLLECTIBLES  # floor probe 60 px ahead
DEFAULT_SEEDS = tuple(range(101, 121))


def make_random_policy(seed: int) -> Policy:
    rng = np.random.RandomState(10_000 + seed)
    return lambda _obs: int(rng.randint(0, len(ACTIONS)))


def make_heuristic_policy(_seed: int) -> Policy:
    def act(obs: np.ndarray) -> int:
        if obs[4] != 1.0:          # airborne: keep holding right
            return RIGHT
        present, dx, dy = obs[ENEMY_BLOCK:ENEMY_BLOCK + 3]
        enemy_close = present == 1.0 and 0.0 < dx < 0.15 and abs(dy) < 0.08
        no_floor = obs[NEAR_PROBE] >= 0.999
        stalled = obs[2] == 0.0
        return RIGHT_JUMP if (enemy_close or no_floor or stalled) else RIGHT
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": make_random_policy,
    "heuristic": make_heuristic_policy,
}


@dataclass
class EpisodeResult:
    policy: str
    seed: int
    frame_skip: int
    decisions: int = 0
    ret: float = 0.0
    score: int = 0
    progress: int = 0
    final_state: str = ""
    terminated: bool = False
    truncated: bool = False
    enemies_defeated: int = 0
    pickups: int = 0
    actions: List[int] = field(default_factory=list, repr=False)
    observations: List[np.ndarray] = field(default_factory=list, repr=False)

    def row(self) -> Dict[str, object]:
        d = asdict(self)
        d.pop("actions")
        d.pop("observations")
        d["ret"] = round(self.ret, 3)
        d["terminated"] = int(self.terminated)
        d["truncated"] = int(self.truncated)
        return d


def play_episode(policy_name: str, seed: int, frame_skip: int,
                 max_steps: int, keep_obs: bool = False) -> EpisodeResult:
    policy = POLICIES[policy_name](seed)
    res = EpisodeResult(policy=policy_name, seed=seed, frame_skip=frame_skip)
    env = PlatformerEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        if keep_obs:
            res.observations.append(obs.copy())
        for _ in range(max_steps):
            action = policy(obs)
            obs, reward, res.terminated, res.truncated, info = env.step(action)
            res.actions.append(action)
            res.ret += reward
            res.enemies_defeated += info["events"].count("enemy_defeated")
            res.pickups += info["events"].count("pickup")
            if keep_obs:
                res.observations.append(obs.copy())
            if res.terminated or res.truncated:
                break
    finally:
        env.close()

    res.decisions = len(res.actions)
    res.score, res.progress, res.final_state = info["score"], info["progress"], info["state"]
    return res


def save_trace(res: EpisodeResult, out_dir: Path, max_steps: int) -> Path:
    trace_dir = out_dir / "traces" / res.policy
    trace_dir.mkdir(parents=True, exist_ok=True)
    np.save(trace_dir / f"{res.seed}_actions.npy", np.asarray(res.actions, dtype=np.int8))
    if res.observations:
        np.save(trace_dir / f"{res.seed}_obs.npy", np.stack(res.observations).astype(np.float32))
    meta = {"seed": res.seed, "frame_skip": res.frame_skip, "policy": res.policy,
            "max_steps": max_steps, "final_state": res.final_state, "score": res.score}
    (trace_dir / f"{res.seed}_meta.txt").write_text(
        "\n".join(f"{k}={v}" for k, v in meta.items()), encoding="utf-8")
    return trace_dir


def append_rows(csv_path: Path, rows: List[Dict[str, object]]) -> None:
    if not rows:
        return
    new_file = not csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        if new_file:
            w.writeheader()
        w.writerows(rows)


def summarize(results: List[EpisodeResult]) -> None:
    by_policy: Dict[str, List[EpisodeResult]] = defaultdict(list)
    for r in results:
        by_policy[r.policy].append(r)
    for name, rs in by_policy.items():
        wins = sum(r.final_state == "game_won" for r in rs)
        print(f"  {name:<10} episodes={len(rs):3d}  wins={wins:3d}  "
              f"mean_score={np.mean([r.score for r in rs]):7.1f}  "
              f"mean_progress={np.mean([r.progress for r in rs]):5.1f}%  "
              f"mean_return={np.mean([r.ret for r in rs]):7.2f}")


def parse_seeds(text: str) -> List[int]:
    seeds = [int(s) for s in text.split(",") if s.strip()]
    return seeds or list(DEFAULT_SEEDS)


def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Baseline rollouts for PlatformerEnv")
    ap.add_argument("--policies", choices=["random", "heuristic", "both"], default="both")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds (default 101..120)")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Cap on decision steps; the env time limit may end episodes first")
    ap.add_argument("--out-dir", type=str, default="experiments/runs")
    ap.add_argument("--save-traces", action="store_true", help="Write action traces for replay")
    ap.add_argument("--save-obs", action="store_true", help="Also write per-step observations")
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    seeds = parse_seeds(args.seeds)
    names = list(POLICIES) if args.policies == "both" else [args.policies]
    csv_path = out_dir / "episodes.csv"

    print(f"{len(names)} policies x {len(seeds)} seeds, frame_skip={args.frame_skip} "
          f"({FPS / args.frame_skip:.1f} decisions/s) -> {csv_path}")

    results: List[EpisodeResult] = []
    for name in names:
        for seed in seeds:
            res = play_episode(name, seed, args.frame_skip, args.steps, keep_obs=args.save_obs)
            results.append(res)
            if args.save_traces:
                save_trace(res, out_dir, args.steps)
            print(f"[{name}] seed={seed} steps={res.decisions} score={res.score} "
                  f"progress={res.progress}% state={res.final_state} defeated={res.enemies_defeated}")

    append_rows(csv_path, [r.row() for r in results])
    print("Summary:")
    summarize(results)
    print("✓ Rollouts complete")


if __name__ == "__main__":
    main()
