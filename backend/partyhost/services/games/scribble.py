import logging
import re
from typing import Any

from partyhost.models import GameType, RoomSettings, RoomState, ScribbleData, ScribblePhase, User
from .base import GameEngine
from .scheduler import RoundTimer
from .scoring import award_correct_guess, leaderboard, reset_scores


logger = logging.getLogger(__name__)

_LETTER = re.compile(r'[^\W\d_]')


def mask_word(word: str) -> str:
    """Hide every letter behind ``"_ "``; spaces, digits and punctuation stay visible."""
    return _LETTER.sub('_ ', word)


def _normalize(text: str) -> str:
    return text.strip().lower()


class ScribbleEngine(GameEngine):
    """Drawing-and-guessing rounds.

    Each round every member draws once, in membership order. A turn goes
    SELECTING_WORD -> ROUND_ACTIVE -> ROUND_ENDED, then ``advance`` picks the
    next drawer, rolls into the next round, or ends the match.
    """

    game_type = GameType.SCRIBBLE
    data_class = ScribbleData

    @classmethod
    def initial_data(cls, settings: RoomSettings) -> ScribbleData:
        return ScribbleData(max_rounds=settings.rounds)

    @property
    def code(self) -> str:
        return self.session.code

    def catch_up(self, user: User) -> None:
        data = self.data
        if self.room.state is not RoomState.PLAYING or data.current_drawer_id is None:
            return
        drawer = self.room.find_user(data.current_drawer_id)
        if data.phase is ScribblePhase.SELECTING_WORD and drawer is not None:
            self.broadcaster.to_user(user.id, 'scribble_turn_waiting', self._waiting_payload(drawer))
        elif data.phase is ScribblePhase.ROUND_ACTIVE and data.current_word:
            timer = data.timer
            self.broadcaster.to_user(user.id, 'scribble_round_start', {
                'drawerId': data.current_drawer_id,
                'maskedWord': mask_word(data.current_word),
                'time': timer.remaining if timer is not None else self.room.settings.round_time,
            })

    def _waiting_payload(self, drawer: User):
        return {
            'drawer': drawer.username,
            'drawerId': drawer.id,
            'round': self.data.current_round,
            'total': self.data.max_rounds,
        }

    # ---- match flow ----

    def reset_progress(self) -> None:
        data = self.data
        self._cancel_timer()
        data.max_rounds = self.room.settings.rounds
        data.current_round = 1
        data.drawer_index = 0
        data.current_drawer_id = None
        data.current_word = None
        data.guessed_user_ids.clear()
        data.phase = ScribblePhase.IDLE
        reset_scores(self.room.users)

    def begin_match(self) -> None:
        self.advance()

    def advance(self) -> None:
        data = self.data
        users = self.room.users
        while data.current_round <= data.max_rounds:
            if data.drawer_index < len(users):
                self._start_turn(users[data.drawer_index])
                return
            # Everyone has drawn this round
            data.current_round += 1
            data.drawer_index = 0
        self._finish_match()

    def _start_turn(self, drawer: User) -> None:
        data = self.data
        data.turn_serial += 1
        data.phase = ScribblePhase.SELECTING_WORD
        data.current_drawer_id = drawer.id
        data.current_word = None
        data.guessed_user_ids.clear()
        data.word_choices = self.session.vocabulary.pick(int(self.session.config.get('WORD_CHOICES', 3)))
        logger.info(
            f"[turn-start] room={self.code} round={data.current_round}/{data.max_rounds} drawer={drawer.id}"
        )
        self.broadcaster.to_room(self.code, 'scribble_turn_waiting', self._waiting_payload(drawer))
        self.broadcaster.to_user(drawer.id, 'scribble_choose_word', list(data.word_choices))

    def _finish_match(self) -> None:
        data = self.data
        self._cancel_timer()
        data.phase = ScribblePhase.MATCH_OVER
        data.current_drawer_id = None
        data.current_word = None
        data.guessed_user_ids.clear()
        board = leaderboard(self.room.users)
        logger.info(f"[match-over] room={self.code} rounds={data.max_rounds}")
        self.broadcaster.to_room(self.code, 'scribble_game_over', board)
        self.room.state = RoomState.LOBBY
        self.session.broadcast_view()

    # ---- turn flow ----

    def choose_word(self, connection_id: str, word: Any) -> None:
        data = self.data
        if self.room.state is not RoomState.PLAYING or data.phase is not ScribblePhase.SELECTING_WORD:
            return
        if connection_id != data.current_drawer_id:
            return
        if not isinstance(word, str) or not word.strip():
            return

        data.current_word = word.strip()
        data.guessed_user_ids.clear()
        data.phase = ScribblePhase.ROUND_ACTIVE
        round_time = self.room.settings.round_time
        self.broadcaster.to_room(self.code, 'scribble_round_start', {
            'drawerId': connection_id,
            'maskedWord': mask_word(data.current_word),
            'time': round_time,
        })
        self._start_timer(round_time)

    def _start_timer(self, seconds: int) -> None:
        self._cancel_timer()
        serial = self.data.turn_serial
        timer = RoundTimer(
            self.session.scheduler,
            self.code,
            seconds,
            on_tick=self._on_tick,
            on_expire=lambda: self._on_expire(serial),
        )
        self.data.timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        timer = self.data.timer
        if timer is not None:
            timer.cancel()
            self.data.timer = None

    def _on_tick(self, remaining: int) -> None:
        self.broadcaster.to_room(self.code, 'timer_update', remaining)

    def _on_expire(self, serial: int) -> None:
        data = self.data
        if not self.session.is_alive() or data.turn_serial != serial or data.phase is not ScribblePhase.ROUND_ACTIVE:
            return
        self._end_turn(f"⏰ Time's up! The word was '{data.current_word}'")
        data.drawer_index += 1
        self.advance()

    def _end_turn(self, reveal: str) -> None:
        self._cancel_timer()
        self.data.phase = ScribblePhase.ROUND_ENDED
        logger.info(f"[turn-end] room={self.code} round={self.data.current_round} drawer={self.data.current_drawer_id}")
        self.broadcaster.system_message(self.code, reveal)

    def _end_turn_early(self) -> None:
        """Everyone has guessed: reveal now, move on after a short pause."""
        data = self.data
        self._end_turn(f"Everyone guessed it! The word was '{data.current_word}'")
        data.drawer_index += 1
        delay = float(self.session.config.get('GUESS_REVEAL_DELAY_SEC', 3))
        self.session.scheduler.call_later(self.code, delay, self._make_advance(data.turn_serial))

    def _make_advance(self, expected_serial: int):
        def _advance():
            data = self.data
            if not self.session.is_alive() or self.room.state is not RoomState.PLAYING:
                return
            if data.turn_serial != expected_serial or data.phase is not ScribblePhase.ROUND_ENDED:
                return
            self.advance()
        return _advance

    def _everyone_guessed(self) -> bool:
        data = self.data
        return bool(data.guessed_user_ids) and len(data.guessed_user_ids) >= len(self.room.users) - 1

    # ---- guesses ----

    def handle_chat(self, user: User, message: str) -> bool:
        data = self.data
        if self.room.state is not RoomState.PLAYING or data.phase is not ScribblePhase.ROUND_ACTIVE:
            return False
        if not data.current_word or not isinstance(message, str):
            return False
        if _normalize(message) != _normalize(data.current_word):
            return False
        if user.id == data.current_drawer_id or user.id in data.guessed_user_ids:
            # Not relayed as chat, unlike other non-scoring messages: it would leak the word
            return True

        data.guessed_user_ids.add(user.id)
        award_correct_guess(user, self.room.find_user(data.current_drawer_id))
        self.broadcaster.system_message(self.code, f"🎉 {user.username} guessed the word!")
        self.session.broadcast_view()
        if self._everyone_guessed():
            self._end_turn_early()
        return True

    # ---- membership changes ----

    def on_leave(self, user: User, index: int) -> None:
        data = self.data
        if self.room.state is not RoomState.PLAYING:
            return
        data.guessed_user_ids.discard(user.id)

        drawing = data.phase in (ScribblePhase.SELECTING_WORD, ScribblePhase.ROUND_ACTIVE)
        if index < data.drawer_index:
            # Keep pointing at the same drawer after the list shifted left
            data.drawer_index -= 1
        elif user.id == data.current_drawer_id and drawing:
            if data.phase is ScribblePhase.ROUND_ACTIVE:
                self._end_turn(f"{user.username} left while drawing. The word was '{data.current_word}'")
            else:
                self._end_turn(f"{user.username} left before choosing a word.")
            # The next member has slid into this drawer_index slot
            self.advance()
            return

        if data.phase is ScribblePhase.ROUND_ACTIVE and self._everyone_guessed():
            self._end_turn_early()
