from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Union
import random

from partyhost.errors import InvalidGameType


class GameType(str, Enum):
    SCRIBBLE = 'scribble'
    GRID = 'grid'
    STRATEGY = 'strategy'

    @classmethod
    def parse(cls, value: Any) -> 'GameType':
        """Resolve a client-supplied game type, accepting the legacy names."""
        name = str(value or '').strip().lower()
        name = _GAME_TYPE_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise InvalidGameType(value) from None


_GAME_TYPE_ALIASES = {
    'tictactoe': 'grid',
    'chess': 'strategy',
}


class RoomState(str, Enum):
    LOBBY = 'LOBBY'
    PLAYING = 'PLAYING'


class ScribblePhase(str, Enum):
    IDLE = 'IDLE'
    SELECTING_WORD = 'SELECTING_WORD'
    ROUND_ACTIVE = 'ROUND_ACTIVE'
    ROUND_ENDED = 'ROUND_ENDED'
    MATCH_OVER = 'MATCH_OVER'


def _bounded_int(value: Any, default: int, maximum: int) -> int:
    """Parse a positive int; junk falls back to ``default``, large values are capped."""
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if parsed < 1:
        return default
    return min(parsed, maximum)


@dataclass(frozen=True)
class RoomSettings:
    rounds: int = 3
    round_time: int = 60
    grid_size: int = 3

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]], config: Optional[Mapping[str, Any]] = None) -> 'RoomSettings':
        """Build settings from a ``create_room`` payload.

        Missing, non-numeric or non-positive values fall back to the
        configured defaults; values above the configured maximums are
        capped, since the grid allocates ``size * size`` cells.
        """
        if not isinstance(payload, Mapping):
            payload = {}
        config = config or {}
        return cls(
            rounds=_bounded_int(
                payload.get('rounds'),
                int(config.get('DEFAULT_ROUNDS', 3)),
                int(config.get('MAX_ROUNDS', 20)),
            ),
            round_time=_bounded_int(
                payload.get('time', payload.get('roundTime')),
                int(config.get('DEFAULT_ROUND_TIME_SEC', 60)),
                int(config.get('MAX_ROUND_TIME_SEC', 600)),
            ),
            grid_size=_bounded_int(
                payload.get('tttGrid', payload.get('gridSize')),
                int(config.get('DEFAULT_GRID_SIZE', 3)),
                int(config.get('MAX_GRID_SIZE', 10)),
            ),
        )

    def to_dict(self):
        return {
            'rounds': self.rounds,
            'time': self.round_time,
            'gridSize': self.grid_size,
        }


@dataclass
class User:
    id: str
    username: str
    avatar: Any = None
    score: int = 0

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'avatar': self.avatar,
            'score': self.score,
        }


@dataclass
class ScribbleData:
    max_rounds: int
    current_round: int = 1
    drawer_index: int = 0
    current_drawer_id: Optional[str] = None
    current_word: Optional[str] = None
    guessed_user_ids: Set[str] = field(default_factory=set)
    word_choices: List[str] = field(default_factory=list)
    phase: ScribblePhase = ScribblePhase.IDLE
    # Bumped on every turn so stale delayed callbacks can detect they are late
    turn_serial: int = 0
    timer: Any = field(default=None, repr=False, compare=False)


@dataclass
class GridData:
    size: int
    board: List[Optional[str]] = field(default_factory=list)
    turn: str = 'X'
    # Set while a finished board waits for its delayed reset
    outcome: Optional[str] = None
    serial: int = 0

    def __post_init__(self):
        if not self.board:
            self.board = [None] * (self.size * self.size)

    def reset(self) -> None:
        self.board = [None] * (self.size * self.size)
        self.turn = 'X'
        self.outcome = None
        self.serial += 1


@dataclass
class StrategyData:
    position: str


GameData = Union[ScribbleData, GridData, StrategyData]


@dataclass
class Room:
    code: str
    name: str
    admin_id: Optional[str]
    game_type: GameType
    settings: RoomSettings
    game_data: GameData
    users: List[User] = field(default_factory=list)
    state: RoomState = RoomState.LOBBY

    def find_user(self, user_id: str) -> Optional[User]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def index_of(self, user_id: str) -> int:
        for idx, user in enumerate(self.users):
            if user.id == user_id:
                return idx
        return -1

    @property
    def drawer_id(self) -> Optional[str]:
        if isinstance(self.game_data, ScribbleData):
            return self.game_data.current_drawer_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'roomCode': self.code,
            'roomName': self.name,
            'users': [u.to_dict() for u in self.users],
            'adminId': self.admin_id,
            'gameType': self.game_type.value,
            'state': self.state.value,
            'settings': self.settings.to_dict(),
            'drawerId': self.drawer_id,
        }

    def summary(self) -> Dict[str, Any]:
        return {
            'roomCode': self.code,
            'roomName': self.name,
            'gameType': self.game_type.value,
            'state': self.state.value,
            'players': len(self.users),
        }


def generate_room_code() -> str:
    """Generate a short, human-typeable numeric room code."""
    return str(random.randint(1000, 9999))
