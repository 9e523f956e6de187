"""
Bath Demo - tick-bath Pygame driver

Keep the bather comfortable: hold the temperature inside the highlighted
zone while interferences try to throw you off. Drawn with primitives only.
"""
from __future__ import annotations

import logging
import sys

import pygame

from tick_bath import BathConfig, BathGame, GameState, GameStatus, InterferenceKind
from tick_bath import labels
from tick_bath.rules import ZONE_COUNT, zone_bounds

WIDTH, HEIGHT = 724, 584
FPS = 60
TPS = 60
TITLE = "Bath Demo - tick-bath"
BG_COLOR = (16, 24, 36)
HUD_COLOR = (210, 215, 230)
BAR_X, BAR_Y, BAR_W, BAR_H = 40, 80, 40, 400
BANNER_SECONDS = 2.5

ITEM_COLORS = {
    "rubber_duck": (250, 210, 60),
    "fish": (90, 170, 240),
    "comb": (220, 160, 220),
    "grime_goblin": (90, 200, 90),
    "alarm_clock": (230, 80, 70),
}


def _draw_thermometer(screen: pygame.Surface, state: GameState) -> None:
    """Temperature bar with the target zone band and the displayed reading."""
    pygame.draw.rect(screen, (50, 55, 70), (BAR_X, BAR_Y, BAR_W, BAR_H))
    low, high = zone_bounds(state.target_zone)
    zone_top = BAR_Y + int(BAR_H * (1.0 - high))
    zone_h = int(BAR_H * (high - low))
    pygame.draw.rect(screen, (60, 140, 80), (BAR_X, zone_top, BAR_W, zone_h))
    for i in range(1, ZONE_COUNT):
        y = BAR_Y + BAR_H * i // ZONE_COUNT
        pygame.draw.line(screen, (90, 95, 110), (BAR_X, y), (BAR_X + BAR_W, y))

    shown = min(1.0, max(0.0, state.current_temperature + state.temperature_offset))
    y = BAR_Y + int(BAR_H * (1.0 - shown))
    color = (240, 220, 80) if state.temperature_offset else (240, 90, 60)
    pygame.draw.rect(screen, color, (BAR_X - 6, y - 2, BAR_W + 12, 4))


def _draw_comfort(screen: pygame.Surface, font: pygame.font.Font, state: GameState) -> None:
    x, y, w, h = 120, 40, 300, 14
    pygame.draw.rect(screen, (60, 60, 60), (x, y, w, h))
    c = state.current_comfort
    bar_color = (50, 200, 90) if c > 0.4 else (220, 200, 50) if c > 0.2 else (220, 60, 50)
    pygame.draw.rect(screen, bar_color, (x, y, int(w * c), h))
    text = font.render(labels.comfort_description(c), True, HUD_COLOR)
    screen.blit(text, (x + w + 10, y - 2))


def _draw_effects(screen: pygame.Surface, game: BathGame, state: GameState) -> None:
    cfg = game.config
    if state.has_active(InterferenceKind.FALLING_ITEMS) or state.falling_objects:
        band = (0, int(cfg.catch_band_top), WIDTH, int(cfg.catch_band_bottom - cfg.catch_band_top))
        pygame.draw.rect(screen, (40, 60, 60), band, 1)
    for obj in state.falling_objects:
        color = ITEM_COLORS.get(obj.kind.value, (200, 200, 200))
        pygame.draw.rect(screen, color, (int(obj.x), int(obj.y), 28, 28))

    for puff in state.wind_field:
        shade = int(140 + 100 * puff.opacity)
        pygame.draw.ellipse(screen, (shade, shade, 255), (int(puff.x), int(puff.y), 120, 30), 2)

    for bubble in state.bubble_field:
        overlay = pygame.Surface((int(bubble.size), int(bubble.size)), pygame.SRCALPHA)
        r = int(bubble.size / 2)
        pygame.draw.circle(overlay, (200, 230, 255, int(200 * bubble.opacity)), (r, r), r)
        screen.blit(overlay, (int(bubble.x) - r, int(bubble.y) - r))


def _draw_hud(
    screen: pygame.Surface,
    font: pygame.font.Font,
    game: BathGame,
    state: GameState,
    banner: str,
) -> None:
    status = state.game_status
    lines = [
        f"Time: {labels.format_time(state.game_timer)}   Level: {state.difficulty_level}"
        f"   Events: {len(state.interference_events)}   [{status.value.upper()}]",
        "Left/Right=Temp  Space=Center  P=Pause  R=Reset  Esc=Quit",
    ]
    remaining = labels.remaining_success_time(state, game.config)
    if remaining is not None:
        lines.append(f"Hold full comfort: {remaining}s")
    for i, line in enumerate(lines):
        surf = font.render(line, True, HUD_COLOR)
        screen.blit(surf, (120, HEIGHT - 70 + i * 20))

    if banner:
        surf = font.render(banner, True, (255, 240, 160))
        screen.blit(surf, (WIDTH // 2 - surf.get_width() // 2, 8))
    if status is GameStatus.READY:
        surf = font.render("Press any arrow or Space to start", True, HUD_COLOR)
        screen.blit(surf, (WIDTH // 2 - surf.get_width() // 2, HEIGHT // 2))
    elif status.is_terminal:
        score = labels.endurance_duration(state.game_timer)
        text = "You win!" if status is GameStatus.SUCCESS else f"Bath over - lasted {score}s"
        surf = font.render(text + "  (R to retry)", True, HUD_COLOR)
        screen.blit(surf, (WIDTH // 2 - surf.get_width() // 2, HEIGHT // 2))


def main() -> None:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    banner = {"text": "", "ttl": 0.0}

    def on_start(_state: GameState, kind: InterferenceKind) -> None:
        content = labels.interference_content(kind)
        banner["text"] = f"{content.title} {content.description}"
        banner["ttl"] = BANNER_SECONDS

    game = BathGame(BathConfig(), on_interference_start=on_start)
    state = game.create_initial_state()

    tick_acc = 0.0
    tick_interval = 1.0 / TPS
    running = True

    while running:
        dt = pg_clock.tick(FPS) / 1000.0

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_LEFT:
                    state = game.press_left(state)
                elif event.key == pygame.K_RIGHT:
                    state = game.press_right(state)
                elif event.key == pygame.K_SPACE:
                    state = game.press_center(state)
                elif event.key == pygame.K_p:
                    if state.game_status is GameStatus.PAUSED:
                        state = game.resume_game(state)
                    else:
                        state = game.pause_game(state)
                elif event.key == pygame.K_r:
                    state = game.reset_game()
                    tick_acc = 0.0
                    banner["ttl"] = 0.0

        # --- Update (tick accumulator) ---
        if state.game_status is GameStatus.PLAYING:
            tick_acc += dt
            while tick_acc >= tick_interval:
                state = game.advance(state, tick_interval)
                tick_acc -= tick_interval
            banner["ttl"] = max(0.0, banner["ttl"] - dt)

        # --- Draw ---
        screen.fill(BG_COLOR)
        _draw_effects(screen, game, state)
        _draw_thermometer(screen, state)
        _draw_comfort(screen, font, state)
        _draw_hud(screen, font, game, state, banner["text"] if banner["ttl"] > 0 else "")
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
