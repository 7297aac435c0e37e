from lexlock import db
from lexlock.services.games.grid import GridCoordinate, PlacedWord
from lexlock.services.games.records import (
    FoundWordRecord,
    PlayerRecord,
    SessionRecord,
    as_utc,
)
from datetime import datetime, timezone
import json


def utcnow():
    return datetime.now(timezone.utc)


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    session_code = db.Column(db.String(8), unique=True, nullable=False, index=True)
    grid_data = db.Column(db.Text, nullable=False)  # JSON-encoded list of rows
    words_data = db.Column(db.Text, nullable=False)  # JSON-encoded placed words
    difficulty = db.Column(db.String(16), nullable=False, default='medium')
    duration = db.Column(db.Integer, nullable=False, default=90)  # seconds
    status = db.Column(db.String(16), nullable=False, default='waiting')  # waiting, active, completed
    max_players = db.Column(db.Integer, nullable=False, default=8)
    start_time = db.Column(db.DateTime(timezone=True), nullable=True)
    end_time = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    players = db.relationship('Player', back_populates='session', cascade='all, delete-orphan')
    found_words = db.relationship('FoundWord', back_populates='session', cascade='all, delete-orphan')

    def to_record(self) -> SessionRecord:
        return SessionRecord(
            id=self.id,
            code=self.session_code,
            status=self.status,
            difficulty=self.difficulty,
            duration_seconds=self.duration,
            max_players=self.max_players,
            grid=json.loads(self.grid_data),
            placed_words=[PlacedWord.from_dict(w) for w in json.loads(self.words_data)],
            start_time=as_utc(self.start_time),
            end_time=as_utc(self.end_time),
            created_at=as_utc(self.created_at),
        )


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    color = db.Column(db.String(20), nullable=False)  # hex colour code
    score = db.Column(db.Integer, nullable=False, default=0)
    joined_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    session = db.relationship('GameSession', back_populates='players')

    def to_record(self) -> PlayerRecord:
        return PlayerRecord(
            id=self.id,
            session_id=self.session_id,
            name=self.name,
            color=self.color,
            score=self.score,
            joined_at=as_utc(self.joined_at),
        )


class FoundWord(db.Model):
    __tablename__ = 'found_word'
    __table_args__ = (
        # First finder wins: a word can only be claimed once per session
        db.UniqueConstraint('session_id', 'word', name='uq_found_word_session_word'),
    )
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    word = db.Column(db.String(50), nullable=False)
    start_row = db.Column(db.Integer, nullable=False)
    start_col = db.Column(db.Integer, nullable=False)
    end_row = db.Column(db.Integer, nullable=False)
    end_col = db.Column(db.Integer, nullable=False)
    found_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    session = db.relationship('GameSession', back_populates='found_words')
    player = db.relationship('Player')

    def to_record(self) -> FoundWordRecord:
        return FoundWordRecord(
            id=self.id,
            session_id=self.session_id,
            player_id=self.player_id,
            word=self.word,
            start=GridCoordinate(self.start_row, self.start_col),
            end=GridCoordinate(self.end_row, self.end_col),
            found_at=as_utc(self.found_at),
        )
