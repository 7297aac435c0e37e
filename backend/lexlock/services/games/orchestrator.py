from .engine import GameEngine


DEFAULT_POLL_INTERVAL_SEC = 1.0


class GameOrchestrator:
    """Merged session view for polling clients.

    Every poll gives the engine a chance to close an expired session, so
    the first client to poll after the deadline ends the game for everyone.
    """

    def __init__(self, engine: GameEngine, poll_interval: float = DEFAULT_POLL_INTERVAL_SEC):
        self.engine = engine
        self.poll_interval = poll_interval

    def poll(self, session_id: int) -> dict:
        self.engine.expire_if_due(session_id)
        state = self.engine.get_state(session_id)
        payload = state.to_dict()
        payload['time_remaining'] = self.engine.time_remaining(state.session)
        payload['poll_interval'] = self.poll_interval
        return payload
