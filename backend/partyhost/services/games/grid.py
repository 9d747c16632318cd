import logging
from typing import Any, Optional, Sequence

from partyhost.models import GameType, GridData, RoomSettings, User
from .base import GameEngine


logger = logging.getLogger(__name__)

DRAW = 'draw'
SYMBOLS = ('X', 'O')


def _line_winner(cells: Sequence[Optional[str]]) -> Optional[str]:
    first = cells[0]
    if first and all(cell == first for cell in cells):
        return first
    return None


def check_winner(board: Sequence[Optional[str]], size: int) -> Optional[str]:
    """Evaluate a square grid board.

    Returns the symbol of the first complete line found (rows, then columns,
    then the main diagonal, then the anti-diagonal), ``DRAW`` when the board
    is full with no line, and ``None`` otherwise.
    """
    size = int(size)
    for start in range(0, size * size, size):
        winner = _line_winner(board[start:start + size])
        if winner:
            return winner
    for col in range(size):
        winner = _line_winner([board[col + row * size] for row in range(size)])
        if winner:
            return winner
    winner = _line_winner([board[i * (size + 1)] for i in range(size)])
    if winner:
        return winner
    winner = _line_winner([board[(i + 1) * (size - 1)] for i in range(size)])
    if winner:
        return winner
    if all(cell is not None for cell in board):
        return DRAW
    return None


class GridGameEngine(GameEngine):
    game_type = GameType.GRID
    data_class = GridData

    @classmethod
    def initial_data(cls, settings: RoomSettings) -> GridData:
        return GridData(size=settings.grid_size)

    def _board_payload(self):
        return {'board': list(self.data.board), 'turn': self.data.turn}

    def catch_up(self, user: User) -> None:
        self.broadcaster.to_user(user.id, 'grid_init', {'size': self.data.size})
        self.broadcaster.to_user(user.id, 'grid_update', self._board_payload())

    def reset_progress(self) -> None:
        self.data.reset()

    def begin_match(self) -> None:
        self._announce_new_game()

    def _announce_new_game(self) -> None:
        self.broadcaster.to_room(self.session.code, 'grid_update', self._board_payload())
        self.broadcaster.system_message(self.session.code, 'New Game Started!')

    def move(self, connection_id: str, move: Any) -> None:
        data = self.data
        if self.room.find_user(connection_id) is None:
            return
        if data.outcome is not None:
            logger.debug(f"[grid-ignore] room={self.session.code} board awaiting reset")
            return
        if isinstance(move, str) and move.isdigit():
            move = int(move)
        if isinstance(move, bool) or not isinstance(move, int):
            return
        if not 0 <= move < len(data.board) or data.board[move] is not None:
            return

        data.board[move] = data.turn
        outcome = check_winner(data.board, data.size)
        if outcome is None:
            data.turn = SYMBOLS[1] if data.turn == SYMBOLS[0] else SYMBOLS[0]
        self.broadcaster.to_room(self.session.code, 'grid_update', self._board_payload())
        if outcome is None:
            return

        data.outcome = outcome
        if outcome == DRAW:
            self.broadcaster.system_message(self.session.code, "It's a Draw!")
        else:
            self.broadcaster.system_message(self.session.code, f"{outcome} Wins!")
        logger.info(f"[grid-over] room={self.session.code} outcome={outcome}")

        delay = float(self.session.config.get('GRID_RESET_DELAY_SEC', 3))
        self.session.scheduler.call_later(self.session.code, delay, self._make_reset(data.serial))

    def _make_reset(self, expected_serial: int):
        def _reset():
            if not self.session.is_alive() or self.data.serial != expected_serial:
                return
            self.data.reset()
            logger.info(f"[grid-reset] room={self.session.code}")
            self._announce_new_game()
        return _reset
