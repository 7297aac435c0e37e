"""Session lifecycle and word submission.

A session moves waiting -> active -> completed and never back. The engine
holds no state of its own: everything lives in the injected store, whose
atomic operations (conditional status updates, unique finds, relative score
increments) make the engine safe to call from many request handlers at once.

Time is cooperative. The engine computes the remaining time and offers an
idempotent ``expire_if_due``; callers polling the state (or the expiry
scheduler) are the ones that invoke it.
"""

import logging
import math
import random
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from .codes import generate_session_code, normalize_code
from .errors import (
    GameEnded,
    GameNotActive,
    InvalidCoordinates,
    InvalidPlayerName,
    InvalidSessionCode,
    InvalidWord,
    PlayerNotFound,
    SessionCodeConflict,
    SessionCodeExhausted,
    SessionFull,
    SessionNotFound,
)
from .extractor import extract_word, in_bounds
from .grid import GridCoordinate, GridGenerator
from .records import (
    ACTIVE,
    COMPLETED,
    WAITING,
    GameState,
    PlayerRecord,
    SessionRecord,
)
from .rules import (
    MAX_PLAYERS,
    PLACEMENT_MAX_ATTEMPTS,
    POINTS_PER_WORD,
    color_for,
    get_difficulty,
)
from .store import SessionStore
from .vocabulary import Vocabulary


logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
SESSION_CODE_MAX_ATTEMPTS = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coordinate(value) -> GridCoordinate:
    if isinstance(value, GridCoordinate):
        return value
    if isinstance(value, dict):
        return GridCoordinate.from_dict(value)
    row, col = value
    return GridCoordinate(int(row), int(col))


class GameEngine:
    def __init__(
        self,
        store: SessionStore,
        vocabulary: Optional[Vocabulary] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_players: int = MAX_PLAYERS,
        points_per_word: int = POINTS_PER_WORD,
        grid_size: Optional[int] = None,
        placement_attempts: int = PLACEMENT_MAX_ATTEMPTS,
        code_attempts: int = SESSION_CODE_MAX_ATTEMPTS,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.vocabulary = vocabulary or Vocabulary(rng=self.rng)
        self.clock = clock or utcnow
        self.max_players = max_players
        self.points_per_word = points_per_word
        self.grid_size = grid_size
        self.code_attempts = code_attempts
        self.grid_generator = GridGenerator(
            self.vocabulary,
            max_attempts=placement_attempts,
            rng=self.rng,
        )

    def now(self) -> datetime:
        return self.clock()

    def _require_session(self, session_id: int) -> SessionRecord:
        session = self.store.get_session(session_id)
        if not session:
            raise SessionNotFound()
        return session

    # ---- lifecycle ----

    def create_session(self, difficulty: Optional[str] = None) -> SessionRecord:
        level = get_difficulty(difficulty)
        size = self.grid_size or level.grid_size
        board = self.grid_generator.generate(level.word_count, size)

        for attempt in range(1, self.code_attempts + 1):
            code = generate_session_code(rng=self.rng)
            try:
                session = self.store.add_session(
                    code=code,
                    difficulty=level.name,
                    duration_seconds=level.duration_seconds,
                    max_players=self.max_players,
                    board=board,
                    created_at=self.now(),
                )
            except SessionCodeConflict:
                logger.info(f"[code-retry] code={code} taken attempt={attempt}")
                continue
            logger.info(
                f"[create] session={session.id} code={session.code} difficulty={level.name} "
                f"words={len(board.placed_words)}/{level.word_count} grid={size}x{size}"
            )
            return session
        raise SessionCodeExhausted()

    def get_session_by_code(self, code: str) -> GameState:
        if not isinstance(code, str):
            raise InvalidSessionCode()
        session = self.store.get_session_by_code(normalize_code(code))
        if not session:
            raise SessionNotFound()
        return self.get_state(session.id)

    def join_session(self, code: str, player_name: str) -> Tuple[PlayerRecord, SessionRecord]:
        if not isinstance(player_name, str):
            raise InvalidPlayerName()
        if not isinstance(code, str):
            raise InvalidSessionCode()
        name = player_name.strip()
        if not name or len(name) > MAX_NAME_LENGTH:
            raise InvalidPlayerName()
        session = self.store.get_session_by_code(normalize_code(code))
        if not session:
            raise SessionNotFound()

        def admit(current: SessionRecord, player_count: int) -> str:
            if current.status == COMPLETED:
                raise GameEnded()
            if player_count >= current.max_players:
                raise SessionFull()
            return color_for(player_count)

        player = self.store.add_player(session.id, name, self.now(), admit)
        logger.info(f"[join] session={session.id} player={player.id} name={player.name} color={player.color}")
        return player, session

    def start_game(self, session_id: int) -> SessionRecord:
        """Move a waiting session to active. Starting an active session is a no-op."""
        self._require_session(session_id)
        if self.store.transition(session_id, [WAITING], ACTIVE, start_time=self.now()):
            session = self._require_session(session_id)
            logger.info(f"[start] session={session_id} start_time={session.start_time.isoformat()}")
            return session
        session = self._require_session(session_id)
        if session.status == COMPLETED:
            raise GameEnded()
        return session

    def end_game(self, session_id: int) -> SessionRecord:
        self._require_session(session_id)
        if self.store.transition(session_id, [WAITING, ACTIVE], COMPLETED, end_time=self.now()):
            logger.info(f"[end] session={session_id}")
        return self._require_session(session_id)

    # ---- time ----

    def time_remaining(self, session: SessionRecord, now: Optional[datetime] = None) -> int:
        if session.status == COMPLETED:
            return 0
        if session.status == WAITING or session.start_time is None:
            return session.duration_seconds
        now = now or self.now()
        elapsed = math.floor((now - session.start_time).total_seconds())
        return max(0, session.duration_seconds - elapsed)

    def expire_if_due(self, session_id: int) -> bool:
        """End an active session whose time has run out. True if this call ended it."""
        session = self._require_session(session_id)
        if session.status != ACTIVE or self.time_remaining(session) > 0:
            return False
        ended = self.store.transition(session_id, [ACTIVE], COMPLETED, end_time=self.now())
        if ended:
            logger.info(f"[expire] session={session_id} duration={session.duration_seconds}s")
        return ended

    # ---- play ----

    def _match_placed_word(self, session: SessionRecord, letters: str) -> Optional[str]:
        # Selections may run end -> start; the reversed string then names the word
        for candidate in (letters, letters[::-1]):
            if candidate and session.placed_word(candidate):
                return candidate
        return None

    def submit_word(self, session_id: int, player_id: int, start, end) -> Tuple[PlayerRecord, str]:
        session = self._require_session(session_id)
        player = self.store.get_player(player_id)
        if not player or player.session_id != session.id:
            raise PlayerNotFound()

        try:
            start, end = _coordinate(start), _coordinate(end)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidCoordinates('Coordinates must be row/col integers') from exc
        if not (in_bounds(session.grid, start) and in_bounds(session.grid, end)):
            raise InvalidCoordinates()

        if session.status == WAITING:
            raise GameNotActive()
        if session.status == COMPLETED:
            raise GameEnded()
        if self.time_remaining(session) <= 0:
            self.expire_if_due(session.id)
            raise GameEnded()

        letters = extract_word(session.grid, start, end)
        word = self._match_placed_word(session, letters)
        if word is None:
            raise InvalidWord()

        found, player = self.store.record_find(
            session.id, player.id, word, start, end, self.points_per_word, self.now()
        )
        logger.info(f"[find] session={session.id} player={player.id} word={found.word} score={player.score}")
        return player, found.word

    # ---- reads ----

    def get_state(self, session_id: int) -> GameState:
        session = self._require_session(session_id)
        players = sorted(self.store.list_players(session_id), key=lambda p: (-p.score, p.id))
        found_words = self.store.list_found_words(session_id)
        return GameState(session=session, players=players, found_words=found_words)
