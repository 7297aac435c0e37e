import time
from typing import Set

from lexlock import socketio
from .records import ACTIVE


_scheduled_sessions: Set[int] = set()


def emit_state_update(session_id: int) -> None:
    socketio.emit('state_update', {'session_id': session_id}, to=f"session:{session_id}", namespace='/ws')


def schedule_expiry(app, session_id: int) -> None:
    """Schedule the end of an active session at its deadline.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Ensures a single timer per session
    - Fires ``expire_if_due``, so a game already ended by a poll or by the
      host is left alone
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    with app.app_context():
        engine = app.extensions['lexlock'].engine
        session = engine.store.get_session(session_id)
        if not session or session.status != ACTIVE:
            return

        if session_id in _scheduled_sessions:
            app.logger.info(f"[timer-skip] session={session_id} already scheduled")
            return
        _scheduled_sessions.add(session_id)

        delay = engine.time_remaining(session)
        app.logger.info(f"[timer-set] session={session_id} duration={session.duration_seconds}s delay={delay}s")

    def _worker(sid: int, delay: int):
        hb = int(app.config.get('TIMER_HEARTBEAT_SEC', 0) or 0)
        if hb > 0:
            slept = 0
            while slept < delay:
                step = min(hb, delay - slept)
                time.sleep(step)
                slept += step
                app.logger.info(f"[timer-heartbeat] session={sid} remaining={max(0, delay - slept)}s")
        else:
            time.sleep(delay)
        with app.app_context():
            _scheduled_sessions.discard(sid)
            engine = app.extensions['lexlock'].engine
            ended = engine.expire_if_due(sid)
            app.logger.info(f"[timer-fire] session={sid} ended={ended}")
            if ended:
                emit_state_update(sid)

    if app.config.get('TESTING'):
        _worker(session_id, delay)
    else:
        socketio.start_background_task(_worker, session_id, delay)
