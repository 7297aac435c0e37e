from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from lexlock import db

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Lexicon Lock game server!'})

@main.route('/health')
def health():
    if (current_app.config.get('SESSION_STORE') or 'sql').lower() != 'sql':
        return jsonify({'status': 'ok', 'store': 'memory'})
    try:
        db.session.execute(text('SELECT 1'))
    except OperationalError as exc:
        db.session.rollback()
        current_app.logger.error(f"[health] database unreachable: {exc}")
        return jsonify({'status': 'unavailable', 'error': 'Database unreachable'}), 503
    return jsonify({'status': 'ok', 'store': 'sql'})
