# src/snake_rl/run.py
from __future__ import annotations
import argparse
import csv
import os
from typing import Tuple

from snake_rl.env import SnakeEnv
from snake_rl.policies import policy_random, policy_greedy, policy_eps_greedy

POLICIES = ("random", "greedy", "eps-greedy")


# --------------------------
# Episode loop
# --------------------------
def run_episode(env: SnakeEnv, policy: str, epsilon: float, max_steps: int = 10_000) -> Tuple[int, float, int, int]:
    """
    Run a single episode with a scripted autopilot:
    - random
    - greedy
    - eps-greedy

    Returns:
        steps: number of steps taken
        total: total return (sum of rewards)
        score: final game score
        level: final game level
    """
    obs = env.reset()
    total = 0.0
    steps = 0
    info = {}

    while True:
        if policy == "random":
            a = policy_random(obs, env)
        elif policy == "greedy":
            a = policy_greedy(obs, env)
        elif policy in ("eps-greedy", "epsilon-greedy"):
            a = policy_eps_greedy(obs, env, epsilon)
        else:
            raise ValueError(f"Unknown policy: {policy}")

        obs, r, done, info = env.step(a)
        total += r
        steps += 1

        if done or steps >= max_steps:
            break

    return steps, total, info.get("score", 0), info.get("level", 1)


def run_episodes(env: SnakeEnv, policy: str, episodes: int, epsilon: float, out_csv: str) -> list:
    """Play `episodes` games and write one CSV row per game."""
    print(f"Running {episodes} episode(s) with policy={policy} ε={epsilon}")
    print("ep,steps,return,score,level")

    rows = [("ep", "steps", "return", "score", "level")]
    for ep in range(1, episodes + 1):
        steps, ret, score, level = run_episode(env, policy, epsilon)
        if env.render_enabled:
            env.render()
        print(f"{ep},{steps},{ret:.3f},{score},{level}")
        rows.append((ep, steps, float(f"{ret:.6f}"), score, level))

    with open(out_csv, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(rows)

    print(f"\nSaved results → {out_csv}")
    return rows


# --------------------------
# Main
# --------------------------
def main(argv=None):
    parser = argparse.ArgumentParser(description="Play-test the snake core with scripted autopilots.")
    parser.add_argument("--episodes", type=int, default=50)
    parser.add_argument(
        "--policy",
        type=str,
        default="greedy",
        choices=POLICIES,
        help="Which autopilot to run",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        default=0.1,
        help="epsilon for eps-greedy",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="seed for the game and the policies",
    )
    parser.add_argument(
        "--outdir",
        type=str,
        default="data/runs",
        help="CSV results will be saved here",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Show each finished episode in a pygame window.",
    )

    args = parser.parse_args(argv)

    os.makedirs(args.outdir, exist_ok=True)
    out_csv = os.path.join(args.outdir, f"autopilot_{args.policy}.csv")

    env = SnakeEnv(seed_value=args.seed, render_enabled=args.render)
    try:
        return run_episodes(env, args.policy, args.episodes, args.epsilon, out_csv)
    finally:
        env.close()


if __name__ == "__main__":
    main()
