"""Pygame front-end for the Wheel Checkers radial board."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

try:
    import pygame
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise SystemExit(
        "Pygame is required for the graphical client. Install it with 'pip install pygame'."
    ) from exc

from ..ai import Difficulty
from ..config import Settings, SettingsError
from ..game.board import SIDE_A, SIDE_B, Jump, opponent
from ..session import MODE_AI, MODE_LOCAL, AiTicket, GameSession
from ..topology import CENTER, RING_PREFIXES, RING_SIZE, NodeId, all_edges


# ---------------------------------------------------------------------------
# Board layout
# ---------------------------------------------------------------------------

BOARD_SIZE = 700
BOARD_ORIGIN = (280, 20)
RING_RADII = {"O": 0.45, "MO": 0.355, "MI": 0.255, "I": 0.16}


def _node_coords() -> Dict[NodeId, Tuple[int, int]]:
    cx = BOARD_ORIGIN[0] + BOARD_SIZE / 2
    cy = BOARD_ORIGIN[1] + BOARD_SIZE / 2
    coords: Dict[NodeId, Tuple[int, int]] = {CENTER: (round(cx), round(cy))}
    for prefix in RING_PREFIXES:
        radius = BOARD_SIZE * RING_RADII[prefix]
        for i in range(RING_SIZE):
            # Index 0 sits at twelve o'clock
            angle = 2 * math.pi * i / RING_SIZE - math.pi / 2
            coords[f"{prefix}{i}"] = (round(cx + radius * math.cos(angle)), round(cy + radius * math.sin(angle)))
    return coords


NODE_COORDS = _node_coords()


# ---------------------------------------------------------------------------
# Rendering configuration
# ---------------------------------------------------------------------------

WINDOW_WIDTH = 1020
WINDOW_HEIGHT = 760
FPS = 30

BOARD_BG = (243, 243, 243)
LINE_COLOR = (120, 144, 156)
PIECE_COLORS = {SIDE_A: (211, 47, 47), SIDE_B: (30, 136, 229)}
PIECE_OUTLINE = (38, 50, 56)
KING_MARK = (255, 214, 0)
EMPTY_NODE_FILL = (207, 216, 220)
SELECTION_COLOR = (255, 152, 0)
HIGHLIGHT_MOVE = (129, 199, 132, 140)
HIGHLIGHT_CAPTURE = (239, 83, 80, 160)
TEXT_COLOR = (33, 33, 33)

PIECE_RADIUS = 16
BASE_RADIUS = 6
SIDE_NAMES = {SIDE_A: "Red (A)", SIDE_B: "Blue (B)"}


@dataclass
class Button:
    label: str
    rect: pygame.Rect

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, hovered: bool) -> None:
        base_color = (76, 175, 80) if self.label.startswith("Level") else (33, 150, 243)
        color = tuple(min(c + 40, 255) for c in base_color) if hovered else base_color
        pygame.draw.rect(surface, color, self.rect, border_radius=6)
        pygame.draw.rect(surface, (13, 71, 161), self.rect, width=2, border_radius=6)
        text_surf = font.render(self.label, True, (255, 255, 255))
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def contains(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


class WheelCheckersPygameApp:
    def __init__(self, settings: Settings, mode: str = MODE_AI) -> None:
        pygame.init()
        pygame.display.set_caption("Wheel Checkers")
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.clock = pygame.time.Clock()

        self.font_small = pygame.font.Font(None, 24)
        self.font_medium = pygame.font.Font(None, 32)

        self.session = GameSession(settings, mode=mode)
        self.buttons = [
            Button("New Game", pygame.Rect(40, WINDOW_HEIGHT - 70, 140, 45)),
            Button("Undo", pygame.Rect(200, WINDOW_HEIGHT - 70, 100, 45)),
            Button(self._level_label(), pygame.Rect(320, WINDOW_HEIGHT - 70, 140, 45)),
            Button("Switch Side", pygame.Rect(480, WINDOW_HEIGHT - 70, 160, 45)),
        ]
        self.pending_ai: Optional[AiTicket] = None

    # ------------------------------------------------------------------
    # Game flow helpers
    # ------------------------------------------------------------------
    def _level_label(self) -> str:
        return f"Level: {self.session.settings.difficulty.value}"

    def reset(self) -> None:
        self.session.reset()
        self.pending_ai = None

    def cycle_difficulty(self) -> None:
        levels = list(Difficulty)
        current = levels.index(self.session.settings.difficulty)
        settings = self.session.settings.override(difficulty=levels[(current + 1) % len(levels)])
        self.session.configure(settings)
        self.pending_ai = None
        self.buttons[2].label = self._level_label()

    def toggle_side(self) -> None:
        settings = self.session.settings
        self.session.configure(settings.override(ai_side=opponent(settings.ai_side)))
        self.pending_ai = None

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------
    def handle_click(self, pos: Tuple[int, int]) -> None:
        for button in self.buttons:
            if button.contains(pos):
                self._handle_button(button)
                return

        clicked = self._node_at(pos)
        if clicked is None:
            if self.session.state.must_continue_from is None:
                self.session.selected = None
            return
        self.session.tap(clicked)

    def _handle_button(self, button: Button) -> None:
        if button.label.startswith("New"):
            self.reset()
        elif button.label.startswith("Undo"):
            self.session.undo()
            self.pending_ai = None
        elif button.label.startswith("Level"):
            self.cycle_difficulty()
        elif button.label.startswith("Switch"):
            self.toggle_side()

    # ------------------------------------------------------------------
    # AI turn and clock
    # ------------------------------------------------------------------
    def update(self) -> None:
        self.session.tick()

        if not self.session.is_ai_turn():
            self.pending_ai = None
            return

        if self.pending_ai is None:
            # Search runs synchronously; the ticket keeps the thinking window
            self.pending_ai = self.session.request_ai_move()
            return

        if not self.session.ready(self.pending_ai):
            return
        ticket, self.pending_ai = self.pending_ai, None
        self.session.deliver(ticket)

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def draw(self) -> None:
        self.screen.fill((250, 250, 250))
        board_rect = pygame.Rect(*BOARD_ORIGIN, BOARD_SIZE, BOARD_SIZE)
        pygame.draw.rect(self.screen, BOARD_BG, board_rect, border_radius=12)

        self._draw_edges()
        self._draw_nodes()
        self._draw_pieces()
        self._draw_highlights()
        self._draw_ui()

    def _draw_edges(self) -> None:
        for a, b in all_edges():
            pygame.draw.line(self.screen, LINE_COLOR, NODE_COORDS[a], NODE_COORDS[b], 3)

    def _draw_nodes(self) -> None:
        for node, (x, y) in NODE_COORDS.items():
            pygame.draw.circle(self.screen, EMPTY_NODE_FILL, (x, y), BASE_RADIUS)
            pygame.draw.circle(self.screen, (84, 110, 122), (x, y), BASE_RADIUS, 1)

    def _draw_pieces(self) -> None:
        for node, piece in self.session.state.board.items():
            x, y = NODE_COORDS[node]
            pygame.draw.circle(self.screen, PIECE_COLORS[piece.owner], (x, y), PIECE_RADIUS)
            pygame.draw.circle(self.screen, PIECE_OUTLINE, (x, y), PIECE_RADIUS, 3)
            if piece.king:
                pygame.draw.circle(self.screen, KING_MARK, (x, y), PIECE_RADIUS // 2)

        selected = self.session.selected
        if selected is not None:
            x, y = NODE_COORDS[selected]
            pygame.draw.circle(self.screen, SELECTION_COLOR, (x, y), PIECE_RADIUS + 5, width=3)

    def _draw_highlights(self) -> None:
        for move in self.session.highlighted():
            x, y = NODE_COORDS[move.target]
            surf = pygame.Surface((PIECE_RADIUS * 3, PIECE_RADIUS * 3), pygame.SRCALPHA)
            color = HIGHLIGHT_CAPTURE if isinstance(move, Jump) else HIGHLIGHT_MOVE
            pygame.draw.circle(surf, color, (PIECE_RADIUS * 1.5, PIECE_RADIUS * 1.5), PIECE_RADIUS - 2)
            self.screen.blit(surf, (x - PIECE_RADIUS * 1.5, y - PIECE_RADIUS * 1.5))

    def _draw_ui(self) -> None:
        mouse_pos = pygame.mouse.get_pos()
        for button in self.buttons:
            button.draw(self.screen, self.font_small, button.contains(mouse_pos))

        session = self.session
        state = session.state
        if session.mode == MODE_AI:
            turn_text = "AI (thinking...)" if session.is_ai_turn() else "You"
            status_lines = [f"You are playing as {SIDE_NAMES[session.human_side]}", f"Turn: {turn_text}"]
        else:
            status_lines = ["Local two-player game", f"Turn: {SIDE_NAMES[state.turn]}"]
        status_lines.append(f"Timer: {math.ceil(session.turn_clock.remaining())}s")

        for idx, line in enumerate(status_lines):
            text = self.font_medium.render(line, True, TEXT_COLOR)
            self.screen.blit(text, (40, 40 + idx * 32))

        message = session.message
        if session.game_over:
            side = session.winner
            message = "Game over" if side is None else f"{SIDE_NAMES[side]} wins!"
        if message:
            msg = self.font_small.render(message, True, (94, 53, 177))
            self.screen.blit(msg, (40, 150))

        counts = self.font_small.render(
            f"Pieces - A: {state.remaining(SIDE_A)}  |  B: {state.remaining(SIDE_B)}", True, TEXT_COLOR
        )
        self.screen.blit(counts, (40, 190))

    # ------------------------------------------------------------------
    # Utility helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _node_at(pos: Tuple[int, int]) -> Optional[NodeId]:
        mx, my = pos
        for node, (x, y) in NODE_COORDS.items():
            if (mx - x) ** 2 + (my - y) ** 2 <= (PIECE_RADIUS + 4) ** 2:
                return node
        return None

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)

            self.update()
            self.draw()
            pygame.display.flip()
            self.clock.tick(FPS)

        pygame.quit()


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Wheel Checkers graphical client")
    parser.add_argument("--mode", choices=[MODE_AI, MODE_LOCAL], default=MODE_AI)
    parser.add_argument("--difficulty", choices=[level.value for level in Difficulty])
    parser.add_argument("--timer", type=int, help="seconds per turn")
    parser.add_argument("--ai-side", choices=[SIDE_A, SIDE_B])
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        settings = Settings.from_env().override(
            difficulty=args.difficulty, timer_duration_seconds=args.timer, ai_side=args.ai_side
        )
    except SettingsError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return 2

    WheelCheckersPygameApp(settings, mode=args.mode).run()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
