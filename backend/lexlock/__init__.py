from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


class GameServices:
    """Per-app game engine and polling view, stored in ``app.extensions``."""

    def __init__(self, engine, orchestrator):
        self.engine = engine
        self.orchestrator = orchestrator


def build_game_services(flask_app) -> GameServices:
    from lexlock.services.games.engine import GameEngine
    from lexlock.services.games.orchestrator import GameOrchestrator
    from lexlock.services.games.store import MemorySessionStore, SqlSessionStore

    cfg = flask_app.config
    store_kind = (cfg.get('SESSION_STORE') or 'sql').lower()
    if store_kind == 'memory':
        store = MemorySessionStore()
    elif store_kind == 'sql':
        store = SqlSessionStore(db)
    else:
        raise ValueError(f"Unknown SESSION_STORE: {store_kind}")

    engine = GameEngine(
        store,
        max_players=int(cfg.get('MAX_PLAYERS', 8)),
        points_per_word=int(cfg.get('POINTS_PER_WORD', 10)),
        grid_size=int(cfg.get('GRID_SIZE', 12)),
        placement_attempts=int(cfg.get('PLACEMENT_MAX_ATTEMPTS', 100)),
        code_attempts=int(cfg.get('SESSION_CODE_MAX_ATTEMPTS', 10)),
    )
    orchestrator = GameOrchestrator(engine, poll_interval=float(cfg.get('POLL_INTERVAL_SEC', 1.0)))
    flask_app.logger.info(f"[services] store={store_kind} max_players={engine.max_players}")
    return GameServices(engine, orchestrator)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Ensure models are registered on the metadata before migrations/create_all
    import lexlock.models  # noqa: F401

    flask_app.extensions['lexlock'] = build_game_services(flask_app)

    from lexlock.main import main
    flask_app.register_blueprint(main)

    from lexlock.api.sessions import sessions
    # Mount session routes under /api to match frontend API client
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from lexlock.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
