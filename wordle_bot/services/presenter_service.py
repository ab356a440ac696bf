"""
Presenter Service

Composes chat replies from engine results: a board image when one can be
rendered, otherwise the textual board and keyboard hint.
"""

from typing import List, Optional

from ..config.game_settings import BANK_DESCRIPTIONS, BANK_NAMES
from ..models.chat import Reply
from ..models.game import GameResult, ResultStatus
from .render_service import BoardRenderer, build_snapshot, format_board, format_feedback, keyboard_hint

LEGEND = '🟩 right letter, right spot\n🟨 right letter, wrong spot\n⬜ letter not in the word'


class ChatPresenter:
    """Turns GameResults into lists of reply segments."""

    def __init__(self, renderer: Optional[BoardRenderer] = None):
        self.renderer = renderer or BoardRenderer(enabled=False)

    def present(self, group_id: str, result: GameResult, sender_name: Optional[str] = None) -> List[Reply]:
        if not result.success:
            return [Reply.text_segment(result.message)]

        handler = {
            ResultStatus.STARTED: self._present_start,
            ResultStatus.GUESS_ACCEPTED: self._present_progress,
            ResultStatus.WON: self._present_win,
            ResultStatus.LOST: self._present_loss,
            ResultStatus.ABANDONED: self._present_abandon,
            ResultStatus.BANK_TOGGLED: self._present_bank,
        }.get(result.status)
        if handler is None:
            return [Reply.text_segment(result.message)]
        return handler(group_id, result, sender_name)

    def _board(self, group_id: str, result: GameResult) -> List[Reply]:
        """Image of the board, or the same board as text if rendering fails."""
        snapshot = build_snapshot(result.game)
        image = self.renderer.render(group_id, snapshot)
        if image:
            return [Reply.image_segment(image)]

        parts = []
        board = format_board(snapshot)
        if board:
            parts.append(board)
        parts.append(keyboard_hint(snapshot.letter_status))
        return [Reply.text_segment('\n'.join(parts))]

    @staticmethod
    def _with_definition(text: str, definition: str) -> str:
        if definition:
            return f"{text}\n[Definition]: {definition}"
        return text

    def _present_start(self, group_id, result, sender_name):
        game = result.game
        bank_name = BANK_NAMES.get(result.bank, result.bank)
        header = f"🎮 Wordle started!\nWord bank: {bank_name}"
        image = self.renderer.render(group_id, build_snapshot(game))
        if image:
            return [Reply.text_segment(header), Reply.image_segment(image)]
        return [Reply.text_segment(
            f"{header}\nGuess a {game.letter_count}-letter word. You have {game.max_attempts} attempts.\n"
            f"Prefix guesses with # or !, e.g. #apple or !apple\n{LEGEND}"
        )]

    def _present_progress(self, group_id, result, sender_name):
        game = result.game
        replies = [Reply.text_segment(
            f"{format_feedback(result.feedback)}\nYou have {game.remaining_attempts} attempts left.")]
        return replies + self._board(group_id, result)

    def _present_win(self, group_id, result, sender_name):
        game = result.game
        who = sender_name or 'Someone'
        text = self._with_definition(
            f"🎉 Congratulations, {who} got it!\nThe answer is {game.target_word}", result.definition)
        text += f"\nSolved in {game.attempts} guesses. Nice work, play again!"
        return [Reply.text_segment(text)] + self._board(group_id, result)

    def _present_loss(self, group_id, result, sender_name):
        game = result.game
        text = self._with_definition(
            f"😔 Out of guesses. The answer was {game.target_word}", result.definition)
        text += "\nDon't give up, try another round!"
        return [Reply.text_segment(text)] + self._board(group_id, result)

    def _present_abandon(self, group_id, result, sender_name):
        text = self._with_definition(
            f"Game over\n[Word]: {result.game.target_word}", result.definition)
        return [Reply.text_segment(text)]

    def _present_bank(self, group_id, result, sender_name):
        return [Reply.text_segment(
            f"Word bank switched: {BANK_NAMES[result.previous_bank]} -> {BANK_NAMES[result.bank]}\n"
            f"Current bank:\n- {BANK_DESCRIPTIONS[result.bank]}"
        )]
