# /experiments/sanity_rollout.py
"""
Sanity rollouts for RunnerEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Saves per-episode action traces for debugging

Usage examples (from repo root):
  # Run both policies over 20 default seeds, frame_skip=4, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Only heuristic, custom seeds:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333

  # Quick random-only smoke with fewer steps:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple

import numpy as np

from cat_runner.env.runner_env import RunnerEnv
from cat_runner.game.config import WIDTH, SPAWN_OFFSET_X, BASE_SPEED, MAX_SPEED


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, jump_prob: float = 0.1):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.rand() < jump_prob)
    return act

def tiny_heuristic_policy_init(base_trigger_px: float = 70.0, per_speed_px: float = 9.0):
    """
    Very small rule: when grounded, jump once the next obstacle is closer than
    a trigger distance that grows with the scroll speed.
    """
    def act(obs: np.ndarray) -> int:
        grounded, speed_n, dx_n = obs[2], obs[3], obs[4]
        if grounded < 0.5 or dx_n >= 1.0:
            return 0
        speed = BASE_SPEED + float(speed_n) * (MAX_SPEED - BASE_SPEED)
        gap_px = float(dx_n) * (WIDTH + SPAWN_OFFSET_X)
        return 1 if gap_px <= base_trigger_px + per_speed_px * speed else 0
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int,
                    save_traces: bool,
                    out_dir: Path) -> Tuple[int, float, int, int, bool, bool]:
    """
    Returns: (ep_len, ret_sum, score, jumps, terminated, truncated)
    Also writes traces to disk if requested.
    """
    env = RunnerEnv(frame_skip=frame_skip)

    if policy_name == "random":
        action_seed = 10_000 + seed
        policy = random_policy_init(action_seed)
    elif policy_name == "heuristic":
        action_seed = -1
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError("Unknown policy")

    actions: List[int] = []
    ret_sum = 0.0
    ep_len = 0
    term = trunc = False

    try:
        obs, info = env.reset(seed=seed)
        for t in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))

            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
        score = int(info.get("score", 0))
        jumps = int(info.get("jumps", 0))
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / policy_name
        ensure_dir(trace_dir)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        meta_lines = [
            f"seed={seed}",
            f"frame_skip={frame_skip}",
            f"policy={policy_name}",
            f"action_rng_seed={action_seed}",
            f"steps_limit={steps_limit}",
        ]
        (trace_dir / f"{seed}_meta.txt").write_text("\n".join(meta_lines), encoding="utf-8")

    return ep_len, ret_sum, score, jumps, bool(term), bool(trunc)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim frames per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true",
                    help="Save action traces for debugging")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "policy_name", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "score", "jumps",
        "terminated", "truncated",
    ]

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds (frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv} and traces under {out_dir}/traces/")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, jumps, terminated, truncated = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                save_traces=args.save_traces,
                out_dir=out_dir
            )
            row = [
                "RunnerEnv", policy_name, seed, args.frame_skip,
                ep_len, f"{ret_sum:.1f}", score, jumps,
                int(terminated), int(truncated),
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  "
                  f"jumps={jumps}  ret={ret_sum:.1f}  term={terminated} trunc={truncated}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
