from __future__ import annotations

import argparse

import pygame

from escape_puzzle_rl.game import GameState
from escape_puzzle_rl.rl.train_ppo import make_env
from escape_puzzle_rl.visualization.renderer import Renderer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--level", type=int, default=1)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=4)
    return p


def main() -> None:
    args = build_parser().parse_args()
    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    env = make_env(args.level, resample=(args.algo == "ppo"))
    model = Algo.load(args.model, device="auto")
    game = env.unwrapped.game
    renderer = Renderer()

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(env.unwrapped.frame))
        pygame.display.set_caption("Escape Puzzle - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        wins = losses = 0
        for _ in range(args.steps):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            if args.algo == "maskable":
                action, _ = model.predict(obs, deterministic=True, action_masks=env.unwrapped.action_masks())
            else:
                action, _ = model.predict(obs, deterministic=True)

            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += float(reward)
            renderer.draw(screen, game)
            if terminated or truncated:
                wins += game.state is GameState.WON
                losses += game.state is GameState.LOST
                obs, info = env.reset()
            clock.tick(args.fps)
        print(f"total reward {total_reward:.1f}  won {wins}  lost {losses}")
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
