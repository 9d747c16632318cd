from typing import Any

from partyhost.models import GameData, GameType, RoomSettings, User


class GameEngine:
    """State machine for one room's game.

    Subclasses operate only on their own ``GameData`` variant. Hooks a game
    does not need are no-ops here, which is how unsupported events for a
    game type end up silently ignored.
    """

    game_type: GameType
    data_class: type

    def __init__(self, session):
        self.session = session
        if not isinstance(session.room.game_data, self.data_class):
            raise TypeError(
                f"{type(self).__name__} requires {self.data_class.__name__}, "
                f"got {type(session.room.game_data).__name__}"
            )

    @classmethod
    def initial_data(cls, settings: RoomSettings) -> GameData:
        raise NotImplementedError

    @property
    def room(self):
        return self.session.room

    @property
    def data(self):
        return self.session.room.game_data

    @property
    def broadcaster(self):
        return self.session.broadcaster

    def catch_up(self, user: User) -> None:
        """Send a joining user whatever they need to render the current position."""

    def reset_progress(self) -> None:
        """Clear scores and match state; runs before the room view is broadcast."""

    def begin_match(self) -> None:
        pass

    def handle_chat(self, user: User, message: str) -> bool:
        """Return True when the message was consumed and must not be echoed as chat."""
        return False

    def on_leave(self, user: User, index: int) -> None:
        pass

    def choose_word(self, connection_id: str, word: Any) -> None:
        pass

    def move(self, connection_id: str, move: Any) -> None:
        pass
