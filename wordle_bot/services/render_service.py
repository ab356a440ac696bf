"""
Render Service

Turns game state into a board image (PNG, drawn with Pillow) and provides
the plain-text board used whenever an image cannot be produced.
"""

import io
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..config.game_settings import KEYBOARD_LAYOUT, RENDER_WARN_SECONDS
from ..models.game import Game, GameOutcome, LetterFeedback, LetterStatus
from ..utils.game_logger import game_logger
from .evaluator import aggregate_letter_status, evaluate_guess

FEEDBACK_GLYPHS = {
    LetterStatus.CORRECT: '🟩',
    LetterStatus.PRESENT: '🟨',
    LetterStatus.ABSENT: '⬜',
}

KEY_GLYPHS = {
    LetterStatus.CORRECT: '🟩',
    LetterStatus.PRESENT: '🟨',
    LetterStatus.ABSENT: '⬛',
    LetterStatus.UNKNOWN: '⬜',
}

TILE_COLORS = {
    LetterStatus.CORRECT: '#6aaa64',
    LetterStatus.PRESENT: '#c9b458',
    LetterStatus.ABSENT: '#787c7e',
}

KEY_COLORS = {
    LetterStatus.CORRECT: '#6aaa64',
    LetterStatus.PRESENT: '#c9b458',
    LetterStatus.ABSENT: '#787c7e',
    LetterStatus.UNKNOWN: '#d3d6da',
}

BACKGROUND = '#f8f8f8'
EMPTY_TILE = '#ffffff'
EMPTY_BORDER = '#d3d6da'
DARK_TEXT = '#1a1a1b'
LIGHT_TEXT = '#ffffff'

BOX_SIZE = 60
GAP = 8
PADDING = 40
KEY_WIDTH = 36
KEY_HEIGHT = 42
KEY_GAP = 5
KEY_ROW_GAP = 8
KEYBOARD_HEIGHT = 3 * KEY_HEIGHT + 2 * KEY_ROW_GAP


@dataclass
class BoardSnapshot:
    """Everything the renderer needs, detached from the engine."""
    letter_count: int
    max_attempts: int
    rows: List[List[LetterFeedback]] = field(default_factory=list)
    letter_status: Dict[str, LetterStatus] = field(default_factory=dict)
    outcome: GameOutcome = GameOutcome.PLAYING

    @property
    def attempts(self) -> int:
        return len(self.rows)

    @property
    def remaining_attempts(self) -> int:
        return self.max_attempts - self.attempts


def build_snapshot(game: Game) -> BoardSnapshot:
    return BoardSnapshot(
        letter_count=game.letter_count,
        max_attempts=game.max_attempts,
        rows=[evaluate_guess(guess, game.target_word) for guess in game.guesses],
        letter_status=aggregate_letter_status(game.guesses, game.target_word),
        outcome=game.outcome,
    )


def format_feedback(feedback: List[LetterFeedback]) -> str:
    return ''.join(FEEDBACK_GLYPHS.get(item.status, '⬜') for item in feedback)


def format_board(snapshot: BoardSnapshot) -> str:
    """One line per guess: glyphs followed by the guessed word."""
    lines = []
    for row in snapshot.rows:
        word = ''.join(item.letter for item in row).upper()
        lines.append(f"{format_feedback(row)} {word}")
    return '\n'.join(lines)


def keyboard_hint(letter_status: Dict[str, LetterStatus]) -> str:
    lines = ['⌨️ Keyboard:']
    for indent, row in zip(('', '  ', '    '), KEYBOARD_LAYOUT):
        keys = '  '.join(
            f"{KEY_GLYPHS[letter_status.get(letter.lower(), LetterStatus.UNKNOWN)]}{letter}"
            for letter in row
        )
        lines.append(indent + keys)
    return '\n'.join(lines)


def _load_font(size: int):
    try:
        return ImageFont.truetype('DejaVuSans-Bold.ttf', size)
    except OSError:
        return ImageFont.load_default()


class BoardRenderer:
    """
    Draws the board and keyboard to a PNG.

    One canvas per group is cached and redrawn in place while the board size
    stays the same; the engine clears it when the group's game is retired.
    """

    def __init__(self, enabled: bool = True, warn_after: float = RENDER_WARN_SECONDS):
        self.enabled = enabled
        self.warn_after = warn_after
        self.canvas_cache: Dict[str, Image.Image] = {}
        self._cache_lock = threading.Lock()
        self._draw_lock = threading.Lock()
        self.tile_font = _load_font(32)
        self.key_font = _load_font(18)

    @staticmethod
    def canvas_size(snapshot: BoardSnapshot) -> Tuple[int, int]:
        board_width = snapshot.letter_count * BOX_SIZE + (snapshot.letter_count - 1) * GAP + 2 * PADDING
        widest_row = max(len(row) for row in KEYBOARD_LAYOUT)
        keyboard_width = widest_row * KEY_WIDTH + (widest_row - 1) * KEY_GAP + 2 * PADDING
        height = (snapshot.max_attempts * BOX_SIZE + (snapshot.max_attempts - 1) * GAP
                  + 2 * PADDING + KEYBOARD_HEIGHT + 15)
        return max(board_width, keyboard_width), height

    def _canvas_for(self, group_id: str, size: Tuple[int, int]) -> Image.Image:
        with self._cache_lock:
            canvas = self.canvas_cache.get(group_id)
            if canvas is None or canvas.size != size:
                canvas = Image.new('RGB', size, BACKGROUND)
                self.canvas_cache[group_id] = canvas
            return canvas

    def render(self, group_id: str, snapshot: BoardSnapshot) -> Optional[bytes]:
        """
        Render the board as PNG bytes.

        Returns:
            PNG bytes, or None when rendering is disabled or fails
        """
        if not self.enabled:
            return None

        start = time.perf_counter()
        try:
            size = self.canvas_size(snapshot)
            canvas = self._canvas_for(group_id, size)
            with self._draw_lock:
                draw = ImageDraw.Draw(canvas)
                draw.rectangle((0, 0, size[0], size[1]), fill=BACKGROUND)

                self._draw_board(draw, size[0], snapshot)
                keyboard_top = PADDING + snapshot.max_attempts * (BOX_SIZE + GAP) - GAP + 15
                self._draw_keyboard(draw, size[0], keyboard_top, snapshot.letter_status)

                buffer = io.BytesIO()
                canvas.save(buffer, format='PNG')
            return buffer.getvalue()
        except Exception as e:
            game_logger.logger.error(f"Render error [group:{group_id}]: {e}")
            return None
        finally:
            elapsed = time.perf_counter() - start
            if elapsed > self.warn_after:
                game_logger.logger.warning(
                    f"Render performance warning [group:{group_id}] took {elapsed * 1000:.0f}ms")

    def _draw_centered(self, draw: ImageDraw.ImageDraw, box, text: str, font, fill: str) -> None:
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = box[0] + (box[2] - box[0] - (right - left)) / 2 - left
        y = box[1] + (box[3] - box[1] - (bottom - top)) / 2 - top
        draw.text((x, y), text, fill=fill, font=font)

    def _draw_board(self, draw: ImageDraw.ImageDraw, width: int, snapshot: BoardSnapshot) -> None:
        board_width = snapshot.letter_count * BOX_SIZE + (snapshot.letter_count - 1) * GAP
        start_x = (width - board_width) // 2
        for row in range(snapshot.max_attempts):
            for col in range(snapshot.letter_count):
                x = start_x + col * (BOX_SIZE + GAP)
                y = PADDING + row * (BOX_SIZE + GAP)
                box = (x, y, x + BOX_SIZE, y + BOX_SIZE)
                if row < len(snapshot.rows):
                    item = snapshot.rows[row][col]
                    color = TILE_COLORS[item.status]
                    draw.rounded_rectangle(box, radius=4, fill=color)
                    self._draw_centered(draw, box, item.letter.upper(), self.tile_font, LIGHT_TEXT)
                else:
                    draw.rounded_rectangle(box, radius=4, fill=EMPTY_TILE, outline=EMPTY_BORDER, width=2)

    def _draw_keyboard(self, draw: ImageDraw.ImageDraw, width: int, top: int,
                       letter_status: Dict[str, LetterStatus]) -> None:
        for row_index, row in enumerate(KEYBOARD_LAYOUT):
            row_width = len(row) * KEY_WIDTH + (len(row) - 1) * KEY_GAP
            start_x = (width - row_width) // 2
            y = top + row_index * (KEY_HEIGHT + KEY_ROW_GAP)
            for col_index, letter in enumerate(row):
                status = letter_status.get(letter.lower(), LetterStatus.UNKNOWN)
                x = start_x + col_index * (KEY_WIDTH + KEY_GAP)
                box = (x, y, x + KEY_WIDTH, y + KEY_HEIGHT)
                draw.rounded_rectangle(box, radius=6, fill=KEY_COLORS[status])
                text_color = DARK_TEXT if status == LetterStatus.UNKNOWN else LIGHT_TEXT
                self._draw_centered(draw, box, letter, self.key_font, text_color)

    def clear_cache(self, group_id: str) -> None:
        with self._cache_lock:
            self.canvas_cache.pop(group_id, None)
