from flask import Blueprint, jsonify, request, current_app
from lexlock.services.games.errors import GameError
from lexlock.services.games.scheduler import emit_state_update, schedule_expiry


sessions = Blueprint('sessions', __name__)


def _engine():
    return current_app.extensions['lexlock'].engine


def _orchestrator():
    return current_app.extensions['lexlock'].orchestrator


@sessions.errorhandler(GameError)
def handle_game_error(exc: GameError):
    current_app.logger.info(f"[rejected] {request.method} {request.path} kind={exc.kind} error={exc.message}")
    return jsonify(exc.to_dict()), exc.status_code


@sessions.route('/create', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    session = _engine().create_session(data.get('difficulty'))
    return jsonify({
        'session_id': session.id,
        'session_code': session.code,
        'grid': session.grid,
        'words': [w.to_dict() for w in session.placed_words],
        'difficulty': session.difficulty,
        'duration_seconds': session.duration_seconds,
    }), 201


@sessions.route('/code/<string:session_code>', methods=['GET'])
def get_session(session_code):
    state = _engine().get_session_by_code(session_code)
    return jsonify(state.to_dict())


@sessions.route('/join', methods=['POST'])
def join_session():
    data = request.get_json(silent=True) or {}
    session_code = data.get('session_code')
    player_name = data.get('player_name')
    if not all([session_code, player_name]):
        return jsonify({'error': 'Session code and player name are required', 'code': 'invalid_input'}), 400

    player, session = _engine().join_session(session_code, player_name)
    emit_state_update(session.id)
    return jsonify({'player': player.to_dict(), 'session_id': session.id}), 201


@sessions.route('/<int:session_id>/start', methods=['POST'])
def start_game(session_id):
    session = _engine().start_game(session_id)
    emit_state_update(session.id)
    schedule_expiry(current_app._get_current_object(), session.id)
    return jsonify({'success': True, 'status': session.status})


@sessions.route('/<int:session_id>/words', methods=['POST'])
def submit_word(session_id):
    data = request.get_json(silent=True) or {}
    player_id = data.get('player_id')
    start = data.get('start')
    end = data.get('end')
    if player_id is None or start is None or end is None:
        return jsonify({'error': 'Player ID, start and end are required', 'code': 'invalid_input'}), 400
    try:
        player_id = int(player_id)
    except (TypeError, ValueError):
        return jsonify({'error': 'Player ID must be an integer', 'code': 'invalid_input'}), 400

    player, word = _engine().submit_word(session_id, player_id, start, end)
    emit_state_update(session_id)
    return jsonify({'success': True, 'player': player.to_dict(), 'word': word})


@sessions.route('/<int:session_id>/state', methods=['GET'])
def get_game_state(session_id):
    return jsonify(_orchestrator().poll(session_id))


@sessions.route('/<int:session_id>/end', methods=['POST'])
def end_game(session_id):
    session = _engine().end_game(session_id)
    emit_state_update(session.id)
    return jsonify({'success': True, 'status': session.status})
