"""Session storage behind the game engine.

The engine only talks to a ``SessionStore``. Two implementations ship:

- ``SqlSessionStore`` backed by Flask-SQLAlchemy. At-most-one find per word
  is enforced by the ``(session_id, word)`` unique constraint, scores are
  bumped with ``score = score + :points`` and status changes are
  conditional updates.
- ``MemorySessionStore`` keeping everything in dicts, one lock per session.
  Used in tests and for single-process demos.
"""

import functools
import itertools
import json
import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError

from .errors import (
    GameEnded,
    GameNotActive,
    SessionCodeConflict,
    SessionNotFound,
    StoreUnavailable,
    WordAlreadyFound,
)
from .grid import GridCoordinate, WordSearchGrid
from .records import ACTIVE, WAITING, FoundWordRecord, PlayerRecord, SessionRecord


logger = logging.getLogger(__name__)

# (session, current player count) -> colour for the new player; raises to refuse
Admission = Callable[[SessionRecord, int], str]


class SessionStore:
    def add_session(
        self,
        code: str,
        difficulty: str,
        duration_seconds: int,
        max_players: int,
        board: WordSearchGrid,
        created_at: datetime,
    ) -> SessionRecord:
        """Persist a new waiting session; raise SessionCodeConflict if ``code`` is taken."""
        raise NotImplementedError

    def get_session(self, session_id: int) -> Optional[SessionRecord]:
        raise NotImplementedError

    def get_session_by_code(self, code: str) -> Optional[SessionRecord]:
        raise NotImplementedError

    def add_player(self, session_id: int, name: str, joined_at: datetime, admit: Admission) -> PlayerRecord:
        """Add a player while holding the session exclusively.

        ``admit`` sees the session and its current player count, and either
        returns the colour to assign or raises to refuse the join.
        """
        raise NotImplementedError

    def get_player(self, player_id: int) -> Optional[PlayerRecord]:
        raise NotImplementedError

    def list_players(self, session_id: int) -> List[PlayerRecord]:
        raise NotImplementedError

    def transition(self, session_id: int, from_statuses: Iterable[str], to_status: str, **values) -> bool:
        """Compare-and-set the status. Returns False when the current status is not in ``from_statuses``."""
        raise NotImplementedError

    def record_find(
        self,
        session_id: int,
        player_id: int,
        word: str,
        start: GridCoordinate,
        end: GridCoordinate,
        points: int,
        found_at: datetime,
    ) -> Tuple[FoundWordRecord, PlayerRecord]:
        """Insert the find and add ``points`` to the finder as one unit.

        Raises WordAlreadyFound if the word already has a find in the session,
        and GameNotActive / GameEnded unless the session is active at the
        moment of the insert.
        """
        raise NotImplementedError

    def list_found_words(self, session_id: int) -> List[FoundWordRecord]:
        raise NotImplementedError


def _require_active(status: str) -> None:
    if status == WAITING:
        raise GameNotActive()
    if status != ACTIVE:
        raise GameEnded()


def _guarded(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except OperationalError as exc:
            self.db.session.rollback()
            logger.error(f"[store-unavailable] op={method.__name__} error={exc}")
            raise StoreUnavailable() from exc
    return wrapper


class SqlSessionStore(SessionStore):
    def __init__(self, database=None):
        from lexlock import db
        self.db = database or db

    @_guarded
    def add_session(self, code, difficulty, duration_seconds, max_players, board, created_at):
        from lexlock.models import GameSession
        row = GameSession(
            session_code=code,
            grid_data=json.dumps(board.grid),
            words_data=json.dumps([w.to_dict() for w in board.placed_words]),
            difficulty=difficulty,
            duration=duration_seconds,
            status=WAITING,
            max_players=max_players,
            created_at=created_at,
        )
        self.db.session.add(row)
        try:
            self.db.session.commit()
        except IntegrityError as exc:
            self.db.session.rollback()
            raise SessionCodeConflict(code) from exc
        return row.to_record()

    @_guarded
    def get_session(self, session_id):
        from lexlock.models import GameSession
        row = GameSession.query.filter_by(id=session_id).first()
        return row.to_record() if row else None

    @_guarded
    def get_session_by_code(self, code):
        from lexlock.models import GameSession
        row = GameSession.query.filter_by(session_code=code).first()
        return row.to_record() if row else None

    @_guarded
    def add_player(self, session_id, name, joined_at, admit):
        from lexlock.models import GameSession, Player
        try:
            # Row lock serialises concurrent joins (no-op on sqlite)
            session = GameSession.query.filter_by(id=session_id).with_for_update().first()
            if not session:
                raise SessionNotFound()
            count = Player.query.filter_by(session_id=session_id).count()
            color = admit(session.to_record(), count)
            player = Player(session_id=session_id, name=name, color=color, score=0, joined_at=joined_at)
            self.db.session.add(player)
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            raise
        return player.to_record()

    @_guarded
    def get_player(self, player_id):
        from lexlock.models import Player
        row = Player.query.filter_by(id=player_id).first()
        return row.to_record() if row else None

    @_guarded
    def list_players(self, session_id):
        from lexlock.models import Player
        rows = Player.query.filter_by(session_id=session_id).order_by(Player.joined_at, Player.id).all()
        return [r.to_record() for r in rows]

    @_guarded
    def transition(self, session_id, from_statuses, to_status, **values):
        from lexlock.models import GameSession
        result = self.db.session.execute(
            update(GameSession)
            .where(GameSession.id == session_id, GameSession.status.in_(list(from_statuses)))
            .values(status=to_status, **values)
        )
        self.db.session.commit()
        return result.rowcount == 1

    @_guarded
    def record_find(self, session_id, player_id, word, start, end, points, found_at):
        from lexlock.models import FoundWord, GameSession, Player
        try:
            # Holding the session row keeps end_game/expiry out until the find commits
            session = GameSession.query.filter_by(id=session_id).with_for_update().first()
            if not session:
                raise SessionNotFound()
            _require_active(session.status)
        except Exception:
            self.db.session.rollback()
            raise
        found = FoundWord(
            session_id=session_id,
            player_id=player_id,
            word=word,
            start_row=start.row,
            start_col=start.col,
            end_row=end.row,
            end_col=end.col,
            found_at=found_at,
        )
        self.db.session.add(found)
        try:
            self.db.session.flush()
        except IntegrityError as exc:
            self.db.session.rollback()
            raise WordAlreadyFound() from exc
        try:
            self.db.session.execute(
                update(Player).where(Player.id == player_id).values(score=Player.score + points)
            )
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            raise
        player = Player.query.filter_by(id=player_id).first()
        return found.to_record(), player.to_record()

    @_guarded
    def list_found_words(self, session_id):
        from lexlock.models import FoundWord
        rows = FoundWord.query.filter_by(session_id=session_id).order_by(FoundWord.found_at, FoundWord.id).all()
        return [r.to_record() for r in rows]


class MemorySessionStore(SessionStore):
    def __init__(self):
        self._registry_lock = threading.Lock()
        self._session_locks: Dict[int, threading.Lock] = {}
        self._sessions: Dict[int, SessionRecord] = {}
        self._codes: Dict[str, int] = {}
        self._players: Dict[int, PlayerRecord] = {}
        self._found: Dict[int, List[FoundWordRecord]] = {}
        self._session_ids = itertools.count(1)
        self._player_ids = itertools.count(1)
        self._found_ids = itertools.count(1)

    def _lock_for(self, session_id: int) -> threading.Lock:
        with self._registry_lock:
            if session_id not in self._sessions:
                raise SessionNotFound()
            return self._session_locks[session_id]

    def add_session(self, code, difficulty, duration_seconds, max_players, board, created_at):
        with self._registry_lock:
            if code in self._codes:
                raise SessionCodeConflict(code)
            record = SessionRecord(
                id=next(self._session_ids),
                code=code,
                status=WAITING,
                difficulty=difficulty,
                duration_seconds=duration_seconds,
                max_players=max_players,
                grid=[list(row) for row in board.grid],
                placed_words=list(board.placed_words),
                created_at=created_at,
            )
            self._sessions[record.id] = record
            self._codes[code] = record.id
            self._session_locks[record.id] = threading.Lock()
            self._found[record.id] = []
            return replace(record)

    def get_session(self, session_id):
        record = self._sessions.get(session_id)
        return replace(record) if record else None

    def get_session_by_code(self, code):
        session_id = self._codes.get(code)
        return self.get_session(session_id) if session_id is not None else None

    def add_player(self, session_id, name, joined_at, admit):
        with self._lock_for(session_id):
            session = self._sessions[session_id]
            count = sum(1 for p in list(self._players.values()) if p.session_id == session_id)
            color = admit(replace(session), count)
            player = PlayerRecord(
                id=next(self._player_ids),
                session_id=session_id,
                name=name,
                color=color,
                score=0,
                joined_at=joined_at,
            )
            self._players[player.id] = player
            return replace(player)

    def get_player(self, player_id):
        player = self._players.get(player_id)
        return replace(player) if player else None

    def list_players(self, session_id):
        return [replace(p) for p in list(self._players.values()) if p.session_id == session_id]

    def transition(self, session_id, from_statuses, to_status, **values):
        with self._lock_for(session_id):
            session = self._sessions[session_id]
            if session.status not in set(from_statuses):
                return False
            self._sessions[session_id] = replace(session, status=to_status, **values)
            return True

    def record_find(self, session_id, player_id, word, start, end, points, found_at):
        with self._lock_for(session_id):
            _require_active(self._sessions[session_id].status)
            finds = self._found[session_id]
            if any(f.word == word for f in finds):
                raise WordAlreadyFound()
            found = FoundWordRecord(
                id=next(self._found_ids),
                session_id=session_id,
                player_id=player_id,
                word=word,
                start=start,
                end=end,
                found_at=found_at,
            )
            finds.append(found)
            player = self._players[player_id]
            player.score += points
            return replace(found), replace(player)

    def list_found_words(self, session_id):
        return [replace(f) for f in self._found.get(session_id, [])]
