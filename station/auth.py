"""
Staff registration, login and logout.

The browser holds only a signed cookie with an opaque token; who the token
belongs to lives in the server-side SessionStore.
"""
import logging
from functools import wraps

from flask import Blueprint, g, jsonify, request, session

from shared.constants import SESSION_TOKEN_KEY
from shared.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)


def request_data() -> dict:
    """JSON body if there is one, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def require_login(sessions):
    """Decorator factory: reject the request unless the cookie maps to a live session."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            current = sessions.get(session.get(SESSION_TOKEN_KEY))
            if current is None:
                raise AuthError("Unauthorized. Please log in.")
            g.user = current
            return view(*args, **kwargs)
        return wrapped
    return decorator


def create_auth_blueprint(ctx) -> Blueprint:
    bp = Blueprint('auth', __name__, url_prefix='/api')
    login_required = require_login(ctx.sessions)

    @bp.route('/register', methods=['POST'])
    def register():
        data = request_data()
        email = (data.get('email') or '').strip()
        password = data.get('password') or ''
        if not email or not password:
            raise ValidationError("Email and password are required.")

        ctx.db.create_user(email, ctx.passwords.hash(password))
        logger.info("[Register] New staff account: %s", email)
        return jsonify({"message": "User registered successfully."}), 201

    @bp.route('/login', methods=['POST'])
    def login():
        data = request_data()
        email = (data.get('email') or '').strip()
        password = data.get('password') or ''

        user = ctx.db.get_user_by_email(email) if email else None
        if user is None or not ctx.passwords.verify(password, user.password_hash):
            logger.info("[Login Failed] %s", email or "<no email>")
            raise AuthError("Invalid credentials.")

        # Regenerate: never carry a previous session token over a login
        ctx.sessions.destroy(session.get(SESSION_TOKEN_KEY))
        session.clear()
        fresh = ctx.sessions.create(user.id, user.email)
        session.permanent = True
        session[SESSION_TOKEN_KEY] = fresh.token

        logger.info("[Login Success] Session regenerated and saved for user: %s", user.email)
        return jsonify({"message": "Login successful."}), 200

    @bp.route('/logout', methods=['POST'])
    def logout():
        token = session.get(SESSION_TOKEN_KEY)
        current = ctx.sessions.get(token)
        ctx.sessions.destroy(token)
        session.clear()
        logger.info("[Logout Success] Session destroyed for user: %s",
                    current.user_email if current else "<anonymous>")
        return jsonify({"message": "Logout successful."}), 200

    @bp.route('/users', methods=['GET'])
    @login_required
    def list_users():
        return jsonify([user.to_public_dict() for user in ctx.db.list_users()])

    return bp
