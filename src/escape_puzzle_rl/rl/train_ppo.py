from __future__ import annotations

import argparse
import os

import gymnasium as gym

# Ensure envs are registered
import escape_puzzle_rl.env  # noqa: F401
from escape_puzzle_rl.env.wrappers import ResampleInvalidActionWrapper


def make_env(level: int, seed: int | None = None, resample: bool = True) -> gym.Env:
    env = gym.make("PieceEscape-v0", level=level)
    # Resample masked-out actions for vanilla PPO; also forwards action_masks
    if resample:
        env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--level", type=int, default=1)
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_escape.zip")
    p.add_argument("--n_envs", type=int, default=4)
    return p


def main() -> None:
    args = build_parser().parse_args()

    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    if args.algo == "maskable":
        # sb3-contrib MaskablePPO
        from sb3_contrib import MaskablePPO
        from sb3_contrib.common.wrappers import ActionMasker

        def mask_fn(env):
            return env.unwrapped.action_masks()

        def make_env_idx(i: int):
            def thunk():
                e = make_env(args.level, resample=False)
                e = ActionMasker(e, mask_fn)
                return e
            return thunk

        vec_env = VecMonitor(SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)]))
        model = MaskablePPO(
            policy="MultiInputPolicy",
            env=vec_env,
            verbose=1,
            tensorboard_log=args.logdir,
        )
    else:
        # Vanilla PPO with resampling wrapper
        from stable_baselines3 import PPO

        def make_env_idx(i: int):
            def thunk():
                return make_env(args.level)
            return thunk

        vec_env = VecMonitor(SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)]))
        model = PPO(
            policy="MultiInputPolicy",
            env=vec_env,
            verbose=1,
            tensorboard_log=args.logdir,
        )

    os.makedirs(os.path.dirname(args.save_path) or ".", exist_ok=True)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)


if __name__ == "__main__":  # pragma: no cover
    main()
