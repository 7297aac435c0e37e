from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .grid import GridCoordinate, PlacedWord


WAITING = 'waiting'
ACTIVE = 'active'
COMPLETED = 'completed'
STATUSES = (WAITING, ACTIVE, COMPLETED)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # sqlite hands back naive datetimes
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class SessionRecord:
    id: int
    code: str
    status: str
    difficulty: str
    duration_seconds: int
    max_players: int
    grid: List[List[str]]
    placed_words: List[PlacedWord]
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def grid_size(self) -> int:
        return len(self.grid)

    def placed_word(self, word: str) -> Optional[PlacedWord]:
        for placed in self.placed_words:
            if placed.word == word:
                return placed
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'session_code': self.code,
            'status': self.status,
            'difficulty': self.difficulty,
            'duration_seconds': self.duration_seconds,
            'max_players': self.max_players,
            'grid': self.grid,
            'words': [w.to_dict() for w in self.placed_words],
            'start_time': _iso(self.start_time),
            'end_time': _iso(self.end_time),
            'created_at': _iso(self.created_at),
        }


@dataclass
class PlayerRecord:
    id: int
    session_id: int
    name: str
    color: str
    score: int = 0
    joined_at: Optional[datetime] = None

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'name': self.name,
            'color': self.color,
            'score': self.score,
            'joined_at': _iso(self.joined_at),
        }


@dataclass
class FoundWordRecord:
    id: int
    session_id: int
    player_id: int
    word: str
    start: GridCoordinate
    end: GridCoordinate
    found_at: Optional[datetime] = None

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'player_id': self.player_id,
            'word': self.word,
            'start': self.start.to_dict(),
            'end': self.end.to_dict(),
            'found_at': _iso(self.found_at),
        }


@dataclass
class GameState:
    session: SessionRecord
    players: List[PlayerRecord] = field(default_factory=list)
    found_words: List[FoundWordRecord] = field(default_factory=list)

    def to_dict(self):
        return {
            'session': self.session.to_dict(),
            'players': [p.to_dict() for p in self.players],
            'found_words': [f.to_dict() for f in self.found_words],
        }
