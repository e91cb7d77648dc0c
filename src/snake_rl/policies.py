# src/snake_rl/policies.py
"""
Scripted autopilots for play-testing the core without a human.

All three read only the observation vector (see env._obs) plus the env's
action count and grid size, so they can be swapped for a learned policy.
"""
import numpy as np # type: ignore

from snake_arcade.config import UP, DOWN, LEFT, RIGHT
from snake_rl.env import ACTIONS, _left_of, _right_of

DIRECTION_TO_ACTION = {d: a for a, d in ACTIONS.items()}


def decode_obs(obs: np.ndarray):
    """[hx_n, hy_n, fx_n, fy_n, dx, dy, danger_ahead, danger_left, danger_right]"""
    hx_n, hy_n, fx_n, fy_n, dx, dy, dan_f, dan_l, dan_r = obs.tolist()
    return hx_n, hy_n, fx_n, fy_n, int(dx), int(dy), bool(dan_f), bool(dan_l), bool(dan_r)


def moves_toward(hx: int, hy: int, fx: int, fy: int):
    """
    All four directions, the ones that shrink the Manhattan distance to
    (fx, fy) first. Collisions are the caller's problem.
    """
    prefs = []
    if fx != hx:
        prefs.append(LEFT if fx < hx else RIGHT)
    if fy != hy:
        prefs.append(UP if fy < hy else DOWN)
    return prefs + [d for d in (UP, DOWN, LEFT, RIGHT) if d not in prefs]


def policy_random(obs: np.ndarray, env, epsilon: float = 0.0) -> int:
    """
    Uniform over the actions the game would accept: the 180° turn is left
    out since the core drops it anyway. Dies fast, which makes it a decent fuzzer.
    """
    dx, dy = int(obs[4]), int(obs[5])
    back = DIRECTION_TO_ACTION.get((-dx, -dy)) if (dx, dy) != (0, 0) else None
    choices = [a for a in range(env.action_space_n) if a != back]
    return int(choices[np.random.randint(len(choices))])


def policy_greedy(obs: np.ndarray, env, epsilon: float = 0.0) -> int:
    """
    Chase the food, skipping any turn the danger flags mark as fatal.
    Falls back to any safe turn, then to a random one when boxed in.
    """
    hx_n, hy_n, fx_n, fy_n, dx, dy, dan_f, dan_l, dan_r = decode_obs(obs)

    scale = env.config.tile_count - 1
    head = (int(round(hx_n * scale)), int(round(hy_n * scale)))
    food = (int(round(fx_n * scale)), int(round(fy_n * scale)))
    prefs = [DIRECTION_TO_ACTION[d] for d in moves_toward(*head, *food)]

    # Standing still: no body behind us yet
    if (dx, dy) == (0, 0):
        return prefs[0]

    forward = (dx, dy)
    safe = {
        DIRECTION_TO_ACTION[forward]: not dan_f,
        DIRECTION_TO_ACTION[_left_of(forward)]: not dan_l,
        DIRECTION_TO_ACTION[_right_of(forward)]: not dan_r,
    }
    for a in prefs:
        if safe.get(a, False):
            return a
    return int(np.random.randint(env.action_space_n))


def policy_eps_greedy(obs: np.ndarray, env, epsilon: float = 0.1) -> int:
    """Greedy, except for a random action with probability epsilon."""
    if np.random.rand() < epsilon:
        return policy_random(obs, env)
    return policy_greedy(obs, env)
