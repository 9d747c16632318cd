"""Room registry and per-room sessions.

The registry is the single owner of live rooms. It is created by the app
factory and handed to the Socket.IO handlers and HTTP routes; nothing here
is module-level state.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional

from partyhost.errors import RoomCodeExhausted, RoomNotFound
from partyhost.models import GameType, Room, RoomSettings, RoomState, User, generate_room_code
from .games import ENGINES
from .games.words import DEFAULT_WORDS, Vocabulary


logger = logging.getLogger(__name__)


class RoomSession:
    """One room: membership, admin pointer and its game engine."""

    def __init__(self, room: Room, registry: 'RoomRegistry'):
        self.room = room
        self.registry = registry
        self.engine = ENGINES[room.game_type](self)

    @property
    def code(self) -> str:
        return self.room.code

    @property
    def broadcaster(self):
        return self.registry.broadcaster

    @property
    def scheduler(self):
        return self.registry.scheduler

    @property
    def vocabulary(self) -> Vocabulary:
        return self.registry.vocabulary

    @property
    def config(self) -> Mapping[str, Any]:
        return self.registry.config

    def is_alive(self) -> bool:
        return self.registry.get_room(self.code) is self

    def broadcast_view(self) -> None:
        self.broadcaster.to_room(self.code, 'update_room', self.room.to_dict())

    # ---- membership ----

    def join(self, connection_id: str, username: str, avatar: Any = None) -> User:
        user = self.room.find_user(connection_id)
        if user is not None:
            # Same connection joining twice: just resync it
            self.engine.catch_up(user)
            self.broadcast_view()
            return user

        user = User(id=connection_id, username=username or 'Anonymous', avatar=avatar)
        self.room.users.append(user)
        logger.info(f"[room-join] room={self.code} user={connection_id} members={len(self.room.users)}")
        self.engine.catch_up(user)
        self.broadcast_view()
        self.broadcaster.system_message(self.code, f"{user.username} joined the room!")
        return user

    def leave(self, connection_id: str) -> Optional[User]:
        index = self.room.index_of(connection_id)
        if index < 0:
            return None
        user = self.room.users.pop(index)
        logger.info(f"[room-leave] room={self.code} user={connection_id} members={len(self.room.users)}")
        self.broadcaster.system_message(self.code, f"{user.username} left the room.")

        if not self.room.users:
            self.registry.remove_room(self.code)
            return user

        if self.room.admin_id == connection_id:
            self.assign_next_admin()
        self.engine.on_leave(user, index)
        self.broadcast_view()
        return user

    def assign_next_admin(self) -> None:
        """Hand admin to the earliest-joined remaining member."""
        if not self.room.users:
            return
        successor = self.room.users[0]
        self.room.admin_id = successor.id
        logger.info(f"[admin] room={self.code} admin={successor.id}")
        self.broadcast_view()
        self.broadcaster.system_message(self.code, f"{successor.username} is now the Admin.")

    # ---- game events ----

    def start_game(self, requester_id: str) -> bool:
        if requester_id != self.room.admin_id:
            logger.debug(f"[start-ignore] room={self.code} requester={requester_id} is not admin")
            return False
        self.room.state = RoomState.PLAYING
        # Clients must see zeroed scores in the view that announces the match
        self.engine.reset_progress()
        self.broadcast_view()
        self.engine.begin_match()
        return True

    def chat(self, connection_id: str, message: Any) -> None:
        user = self.room.find_user(connection_id)
        if user is None or message is None:
            return
        if self.engine.handle_chat(user, message):
            return
        self.broadcaster.to_room(self.code, 'receive_message', {'username': user.username, 'message': message})

    def choose_word(self, connection_id: str, word: Any) -> None:
        self.engine.choose_word(connection_id, word)

    def move(self, connection_id: str, move: Any) -> None:
        self.engine.move(connection_id, move)

    def relay_drawing(self, connection_id: str, payload: Any) -> None:
        if self.room.find_user(connection_id) is None:
            return
        self.broadcaster.to_room_except(self.code, connection_id, 'draw_data', payload)


class RoomRegistry:
    """Process-wide map of room code to RoomSession.

    ``lock`` serialises inbound events and scheduled callbacks, so each one
    runs to completion before the next touches room state.
    """

    def __init__(self, broadcaster, scheduler, vocabulary: Optional[Vocabulary] = None,
                 config: Optional[Mapping[str, Any]] = None, lock=None):
        self.broadcaster = broadcaster
        self.scheduler = scheduler
        self.vocabulary = vocabulary or Vocabulary(DEFAULT_WORDS)
        self.config = config if config is not None else {}
        self.lock = lock or threading.RLock()
        self._rooms: Dict[str, RoomSession] = {}

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, code):
        return code in self._rooms

    def rooms(self) -> List[RoomSession]:
        return list(self._rooms.values())

    def create_room(self, name: str, creator_id: str, game_type: GameType,
                    settings: Optional[RoomSettings] = None) -> str:
        settings = settings or RoomSettings.from_payload(None, self.config)
        code = self._unused_code()
        room = Room(
            code=code,
            name=name or f"Room {code}",
            admin_id=creator_id,
            game_type=game_type,
            settings=settings,
            game_data=ENGINES[game_type].initial_data(settings),
        )
        self._rooms[code] = RoomSession(room, self)
        logger.info(f"[room-create] room={code} type={game_type.value} admin={creator_id}")
        return code

    def _unused_code(self) -> str:
        attempts = int(self.config.get('ROOM_CODE_MAX_ATTEMPTS', 50))
        for _ in range(attempts):
            code = generate_room_code()
            if code not in self._rooms:
                return code
            logger.warning(f"[room-create] code collision on {code}, regenerating")
        raise RoomCodeExhausted(attempts)

    def get_room(self, code: Optional[str]) -> Optional[RoomSession]:
        if code is None:
            return None
        return self._rooms.get(str(code))

    def require(self, code: Optional[str]) -> RoomSession:
        session = self.get_room(code)
        if session is None:
            raise RoomNotFound(code)
        return session

    def remove_room(self, code: str) -> None:
        session = self._rooms.pop(code, None)
        self.scheduler.cancel_room(code)
        if session is not None:
            logger.info(f"[room-remove] room={code}")

    def sessions_for(self, connection_id: str) -> Iterable[RoomSession]:
        return [s for s in self._rooms.values() if s.room.find_user(connection_id) is not None]

    def handle_disconnect(self, connection_id: str) -> None:
        for session in self.sessions_for(connection_id):
            session.leave(connection_id)
        # Rooms whose creator left before ever joining
        for session in list(self._rooms.values()):
            room = session.room
            if room.admin_id != connection_id:
                continue
            if room.users:
                session.assign_next_admin()
            else:
                self.remove_room(room.code)
