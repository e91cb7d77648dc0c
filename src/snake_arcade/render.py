# render.py
from typing import Tuple

import pygame # type: ignore

from .config import (
    WIDTH, HEIGHT, CELL_SIZE, HUD_HEIGHT, TILE_COUNT,
    BG, GRID, GREEN, HEAD, GOLD, RED, OBSTACLE, MOVING, PORTAL_COLORS, ZONE, TEXT,
    POWERUP_COLORS,
)
from .game import Snapshot, Status

# ---------- Helpers ----------
def draw_cell(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int], inset: int = 0) -> None:
    rect = pygame.Rect(gx * CELL_SIZE + inset, HUD_HEIGHT + gy * CELL_SIZE + inset,
                       CELL_SIZE - 2 * inset, CELL_SIZE - 2 * inset)
    pygame.draw.rect(screen, color, rect)

def draw_disc(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int]) -> None:
    center = (gx * CELL_SIZE + CELL_SIZE // 2, HUD_HEIGHT + gy * CELL_SIZE + CELL_SIZE // 2)
    pygame.draw.circle(screen, color, center, CELL_SIZE // 2 - 2)

def fade(color: Tuple[int, int, int], alpha: float) -> Tuple[int, int, int]:
    """Blend a color toward the background; alpha 0 is invisible."""
    return tuple(int(b + (c - b) * alpha) for c, b in zip(color, BG))

# ---------- Draw ----------
def draw_game(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    screen.fill(BG)
    for i in range(TILE_COUNT + 1):
        pygame.draw.line(screen, GRID, (i * CELL_SIZE, HUD_HEIGHT), (i * CELL_SIZE, HEIGHT))
        pygame.draw.line(screen, GRID, (0, HUD_HEIGHT + i * CELL_SIZE), (WIDTH, HUD_HEIGHT + i * CELL_SIZE))

    # shrinking zone: shade everything outside the playable square
    inset = snap.zone_inset
    for x in range(TILE_COUNT):
        for y in range(TILE_COUNT):
            if not (inset <= x < TILE_COUNT - inset and inset <= y < TILE_COUNT - inset):
                draw_cell(screen, x, y, ZONE)

    for x, y in snap.obstacles:
        draw_cell(screen, x, y, OBSTACLE, inset=1)
    for x, y in snap.moving_walls:
        draw_cell(screen, x, y, MOVING, inset=1)

    for index, (a, b) in enumerate(snap.portals):
        color = fade(PORTAL_COLORS[index % len(PORTAL_COLORS)], snap.portal_alpha)
        draw_disc(screen, a[0], a[1], color)
        draw_disc(screen, b[0], b[1], color)

    if snap.food is not None:
        draw_disc(screen, snap.food[0], snap.food[1], RED)
    if snap.bonus is not None:
        draw_disc(screen, snap.bonus[0], snap.bonus[1], GOLD)
    for (x, y), kind in snap.powerup_items:
        draw_cell(screen, x, y, POWERUP_COLORS.get(kind, TEXT), inset=5)

    # snake, tail first so the head is drawn on top
    for i in range(len(snap.snake) - 1, -1, -1):
        x, y = snap.snake[i]
        if snap.protected:
            color = GOLD
        else:
            color = HEAD if i == 0 else GREEN
        draw_cell(screen, x, y, color, inset=1)

    # HUD
    hud = f"Score: {snap.score}   Level: {snap.level}   Best: {snap.high_score}"
    if snap.combo_multiplier > 1:
        hud += f"   x{snap.combo_multiplier}"
    if snap.active_powerups:
        hud += "   " + " ".join(f"{kind}:{ms / 1000:.1f}s" for kind, ms in snap.active_powerups)
    screen.blit(font.render(hud, True, TEXT), (8, 6))

    if snap.status == Status.PAUSED:
        draw_banner(screen, font, "PAUSED", "Press P to resume")
    elif snap.status == Status.IDLE:
        draw_banner(screen, font, "SNAKE ARCADE", "Press an arrow key to start")

def draw_banner(screen: pygame.Surface, font: pygame.font.Font, title: str, sub: str) -> None:
    t = font.render(title, True, (240, 240, 250))
    s = font.render(sub, True, TEXT)
    screen.blit(t, t.get_rect(center=(WIDTH // 2, HEIGHT // 2 - 16)))
    screen.blit(s, s.get_rect(center=(WIDTH // 2, HEIGHT // 2 + 16)))

def draw_game_over(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    # Dim with translucent overlay
    overlay = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 140))  # RGBA
    screen.blit(overlay, (0, 0))

    lines = [
        ("GAME OVER", (240, 240, 250)),
        ("Press R to restart", TEXT),
        (f"Score: {snap.score}   Level: {snap.level}", TEXT),
        (f"High score: {snap.high_score}", GOLD if snap.score >= snap.high_score > 0 else TEXT),
    ]
    for i, (text, color) in enumerate(lines):
        surf = font.render(text, True, color)
        screen.blit(surf, surf.get_rect(center=(WIDTH // 2, HEIGHT // 2 - 16 + i * 28)))
