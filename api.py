"""
Flask REST API for TabCalc
Drives calculator sessions over JSON and exposes calculation history
"""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
import keypad
from calculator import Calculator
from database import Database
from history_manager import HistoryManager

logger = logging.getLogger(__name__)


@dataclass
class CalculatorSession:
    id: str
    calculator: Calculator
    lock: threading.Lock = field(default_factory=threading.Lock)
    updated_at: datetime = field(default_factory=datetime.utcnow)


class SessionStore:
    """Calculator sessions by id, dropped after ttl_hours without use"""

    def __init__(self, history_manager=None, ttl_hours=config.SESSION_TTL_HOURS):
        self.history_manager = history_manager
        self._sessions = {}
        self._lock = threading.Lock()
        self._ttl = timedelta(hours=ttl_hours)

    def create(self):
        self.cleanup_expired()
        on_calculation = self.history_manager.record if self.history_manager else None
        session = CalculatorSession(uuid.uuid4().hex, Calculator(on_calculation))
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Created calculator session %s", session.id)
        return session

    def get(self, session_id):
        """Return a live session and mark it used, or None"""
        self.cleanup_expired()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.updated_at = datetime.utcnow()
            return session

    def delete(self, session_id):
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def cleanup_expired(self):
        now = datetime.utcnow()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if now - s.updated_at > self._ttl]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("Dropped %d expired calculator sessions", len(expired))
        return len(expired)

    def __len__(self):
        with self._lock:
            return len(self._sessions)


def serialize_state(state):
    """JSON view of an engine state for a presentation layer"""
    return {
        'display': state.display,
        'first_operand': state.first_operand,
        'operator': state.operator.value if state.operator else None,
        'awaiting_operand': state.awaiting_operand,
        'memory': state.memory,
        'memory_indicator': keypad.memory_indicator(state),
        'phase': state.phase.value,
        'enabled_keys': keypad.enabled_keys(state),
    }


def create_app(db=None, session_ttl_hours=config.SESSION_TTL_HOURS):
    """Build the Flask app; uses the configured database unless one is given"""
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    db = db if db is not None else Database()
    history_manager = HistoryManager(db)
    sessions = SessionStore(history_manager, ttl_hours=session_ttl_hours)

    app.config['SESSIONS'] = sessions
    app.config['HISTORY_MANAGER'] = history_manager

    def session_not_found(session_id):
        return jsonify({'success': False, 'error': f'Unknown session: {session_id}'}), 404

    @app.route('/health')
    def health():
        return jsonify({
            'status': 'online',
            'name': config.APP_NAME,
            'version': config.VERSION,
            'sessions': len(sessions),
        })

    @app.route('/api/sessions', methods=['POST'])
    def create_session():
        """Start a new calculator session"""
        try:
            session = sessions.create()
            return jsonify({
                'success': True,
                'data': {'id': session.id, 'state': serialize_state(session.calculator.state)}
            }), 201
        except Exception as e:
            logger.error("Failed to create session: %s", e, exc_info=True)
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/sessions/<session_id>')
    def get_session(session_id):
        """Get the current state of a session"""
        session = sessions.get(session_id)
        if session is None:
            return session_not_found(session_id)
        with session.lock:
            state = session.calculator.state
        return jsonify({'success': True, 'data': serialize_state(state)})

    @app.route('/api/sessions/<session_id>', methods=['DELETE'])
    def delete_session(session_id):
        """End a session"""
        if not sessions.delete(session_id):
            return session_not_found(session_id)
        return jsonify({'success': True})

    @app.route('/api/sessions/<session_id>/press', methods=['POST'])
    def press_key(session_id):
        """Press one key on a session's keypad"""
        session = sessions.get(session_id)
        if session is None:
            return session_not_found(session_id)

        data = request.get_json(silent=True) or {}
        key = data.get('key')
        if key not in keypad.ALL_KEYS:
            return jsonify({'success': False, 'error': f'Unknown key: {key!r}'}), 400

        calculator = session.calculator
        try:
            with session.lock:
                if not keypad.is_enabled(key, calculator.state):
                    return jsonify({
                        'success': False,
                        'error': f'Key {key!r} is disabled while the display shows {config.ERROR_TEXT}'
                    }), 409
                keypad.press(calculator, key)
                state = calculator.state
            return jsonify({'success': True, 'data': serialize_state(state)})
        except Exception as e:
            logger.error("Key press %r failed: %s", key, e, exc_info=True)
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/calculations')
    def get_calculations():
        """Get calculation history"""
        try:
            limit = int(request.args.get('limit', 50))
            calculations = history_manager.get_calculation_history(limit)

            formatted = []
            for c in calculations:
                formatted.append({
                    'expression': c[0],
                    'result': c[1],
                    'timestamp': c[2]
                })

            return jsonify({
                'success': True,
                'data': formatted,
                'count': len(formatted)
            })
        except ValueError:
            return jsonify({'success': False, 'error': 'limit must be an integer'}), 400
        except Exception as e:
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/calculations', methods=['DELETE'])
    def clear_calculations():
        """Clear calculation history"""
        try:
            history_manager.clear_calculation_history()
            return jsonify({'success': True})
        except Exception as e:
            return jsonify({'success': False, 'error': str(e)}), 500

    return app


if __name__ == '__main__':
    logging.basicConfig(level=config.LOG_LEVEL)
    app = create_app()

    print("\n" + "="*60)
    print(f"{config.APP_NAME} API Server")
    print("="*60)
    print(f"Server starting on http://{config.WEB_HOST}:{config.WEB_PORT}")
    print(f"Access from this device: http://localhost:{config.WEB_PORT}")
    if config.WEB_HOST == '0.0.0.0':
        print(f"Access from network: http://<your-ip>:{config.WEB_PORT}")
    print("="*60 + "\n")

    app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False, threaded=True)
