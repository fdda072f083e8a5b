from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import pygame

from escape_puzzle_rl.game import EscapeGame, GameState, LevelProgress, SessionConfig, Tool
from escape_puzzle_rl.game.grid import round_cell
from .renderer import Renderer


ANIMATION_MS = 300
TICK_MS = 1000
TOAST_MS = 1500
DEFAULT_PROGRESS = Path.home() / ".escape_puzzle_rl" / "level.txt"


def _piece_at(game: EscapeGame, cell) -> Optional[str]:
    for piece in game.active:
        if any(round_cell(x, y) == cell for x, y in piece.cells):
            return piece.id
    return None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--progress", type=str, default=str(DEFAULT_PROGRESS))
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true")
    return p


def run(progress_path: str = str(DEFAULT_PROGRESS), seed: Optional[int] = None) -> None:
    game = EscapeGame(SessionConfig(random_seed=seed), progress=LevelProgress(progress_path))
    renderer = Renderer()

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(game.grid_size))
        pygame.display.set_caption("Escape Puzzle - Human Play")
        clock = pygame.time.Clock()

        def open_level(started: bool) -> None:
            nonlocal screen
            if started:
                screen = pygame.display.set_mode(renderer.window_size(game.grid_size))
                if game.message:
                    show(game.message)

        toast: Optional[str] = None
        toast_until = 0
        settle_at = 0
        last_tick = pygame.time.get_ticks()

        def show(msg: Optional[str]) -> None:
            nonlocal toast, toast_until
            toast = msg
            toast_until = pygame.time.get_ticks() + TOAST_MS

        running = True
        while running:
            now = pygame.time.get_ticks()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        if game.state is GameState.START_MENU:
                            running = False
                        else:
                            game.go_home()
                    elif event.key in (pygame.K_RETURN, pygame.K_n):
                        if game.state is GameState.WON:
                            open_level(game.next_level())
                        elif game.state is GameState.START_MENU:
                            open_level(game.start_level())
                    elif event.key == pygame.K_r:
                        open_level(game.restart_level())
                    elif event.key == pygame.K_p:
                        if game.paused:
                            game.resume()
                        else:
                            game.pause()
                    elif event.key == pygame.K_s and game.shuffle():
                        show("Shuffled!")
                    elif event.key == pygame.K_f and game.flip():
                        show("All pieces flipped!")
                    elif event.key == pygame.K_x:
                        game.toggle_remove_tool()
                    elif event.key == pygame.K_h:
                        game.poll_hint(force=True)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    piece_id = _piece_at(game, renderer.cell_at(*event.pos))
                    if piece_id is not None:
                        was_removing = game.tool is Tool.REMOVE
                        result = game.tap(piece_id)
                        if result is not None:
                            settle_at = now + ANIMATION_MS
                        elif was_removing:
                            show("Removed!")

            if settle_at and now >= settle_at:
                game.settle()
                settle_at = 0
            if now - last_tick >= TICK_MS:
                game.tick()
                last_tick = now
            game.poll_hint()
            if toast and now >= toast_until:
                toast = None

            renderer.draw(screen, game, toast)
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    run(args.progress, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
