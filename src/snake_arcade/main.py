# main.py
import logging
import os

import pygame # type: ignore

from .config import WIDTH, HEIGHT, Config
from .game import (
    Status, new_game_state, push_intent, restart_game, take_snapshot, toggle_pause, update_game,
)
from .render import draw_game, draw_game_over

HIGH_SCORE_FILE = os.path.join(os.path.expanduser("~"), ".snake_arcade_highscore")

KEYS = {
    pygame.K_UP: "up", pygame.K_w: "up",
    pygame.K_DOWN: "down", pygame.K_s: "down",
    pygame.K_LEFT: "left", pygame.K_a: "left",
    pygame.K_RIGHT: "right", pygame.K_d: "right",
}


def load_high_score(path: str = HIGH_SCORE_FILE) -> int:
    try:
        with open(path) as f:
            return int(f.read().strip() or 0)
    except (OSError, ValueError):
        return 0

def save_high_score(score: int, path: str = HIGH_SCORE_FILE) -> None:
    with open(path, "w") as f:
        f.write(str(score))


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    pygame.init()
    font = pygame.font.SysFont(None, 24)
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Snake Arcade")
    clock = pygame.time.Clock()

    state = new_game_state(Config(seed=None), high_score=load_high_score())
    saved_high = state.high_score
    running = True

    while running:
        # 1) input
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in KEYS:
                    push_intent(state, KEYS[event.key])
                elif event.key == pygame.K_p:
                    toggle_pause(state)
                elif event.key == pygame.K_r and state.status in (Status.GAME_OVER, Status.RUNNING, Status.PAUSED):
                    state = restart_game(state)
                elif event.key == pygame.K_ESCAPE:
                    running = False

        # 2) update
        update_game(state, clock.get_time())
        if state.high_score > saved_high:
            save_high_score(state.high_score)
            saved_high = state.high_score

        # 3) render
        snap = take_snapshot(state)
        draw_game(screen, font, snap)
        if snap.status == Status.GAME_OVER:
            draw_game_over(screen, font, snap)
        pygame.display.flip()
        clock.tick(60)  # high FPS; movement gated by the step accumulator

    pygame.quit()

if __name__ == "__main__":
    main()
