import logging
from typing import Any, Optional

import chess

from partyhost.models import GameType, RoomSettings, StrategyData, User
from .base import GameEngine


logger = logging.getLogger(__name__)


def _parse_move(board: chess.Board, move: Any) -> Optional[chess.Move]:
    """Turn a client move into a legal ``chess.Move`` for ``board``.

    Accepts SAN (``"Nf3"``), UCI (``"g1f3"``) or an object with ``from``,
    ``to`` and optional ``promotion`` keys. Returns None when the move is
    malformed or illegal.
    """
    if isinstance(move, dict):
        uci = f"{move.get('from') or ''}{move.get('to') or ''}{move.get('promotion') or ''}".lower()
        try:
            candidate = chess.Move.from_uci(uci)
        except ValueError:
            return None
        return candidate if board.is_legal(candidate) else None

    if not isinstance(move, str):
        return None
    text = move.strip()
    try:
        candidate = board.parse_san(text)
    except ValueError:
        try:
            candidate = chess.Move.from_uci(text)
        except ValueError:
            return None
        if not board.is_legal(candidate):
            return None
    # parse_san accepts null moves ("--"), which are never legal here
    return candidate if candidate else None


def apply_move(position: str, move: Any) -> Optional[chess.Board]:
    """Validate ``move`` against ``position`` (FEN) and return the resulting board."""
    try:
        board = chess.Board(position)
    except ValueError:
        return None
    parsed = _parse_move(board, move)
    if parsed is None:
        return None
    board.push(parsed)
    return board


def describe_outcome(board: chess.Board) -> Optional[str]:
    outcome = board.outcome()
    if outcome is None:
        return None
    if outcome.winner is None:
        reason = outcome.termination.name.lower().replace('_', ' ')
        return f"Draw by {reason}!"
    side = 'White' if outcome.winner == chess.WHITE else 'Black'
    return f"Checkmate! {side} wins!"


class StrategyGameRelay(GameEngine):
    game_type = GameType.STRATEGY
    data_class = StrategyData

    @classmethod
    def initial_data(cls, settings: RoomSettings) -> StrategyData:
        return StrategyData(position=chess.STARTING_FEN)

    def catch_up(self, user: User) -> None:
        self.broadcaster.to_user(user.id, 'strategy_move', {'fen': self.data.position})

    def reset_progress(self) -> None:
        self.data.position = chess.STARTING_FEN

    def begin_match(self) -> None:
        self.broadcaster.to_room(self.session.code, 'strategy_move', {'fen': self.data.position})

    def move(self, connection_id: str, move: Any) -> None:
        if self.room.find_user(connection_id) is None:
            return
        board = apply_move(self.data.position, move)
        if board is None:
            logger.debug(f"[strategy-reject] room={self.session.code} move={move!r}")
            return
        self.data.position = board.fen()
        self.broadcaster.to_room(self.session.code, 'strategy_move', move)
        result = describe_outcome(board)
        if result:
            logger.info(f"[strategy-over] room={self.session.code} result={result}")
            self.broadcaster.system_message(self.session.code, result)
