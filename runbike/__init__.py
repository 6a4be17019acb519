"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, g, session

from .core.constants import (
    DEFAULT_GUEST_OTP_TTL,
    DEFAULT_SESSION_TTL,
    SESSION_COOKIE_KEY,
)
from .core.session import Session
from .extensions import csrf


def _init_firebase(app):
    """Initialize the Firebase Admin SDK from the first credentials found."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # Then a local credentials file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    project_id = json.load(f).get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    if not cred:
        cred = credentials.ApplicationDefault()
        project_id = os.environ.get("FIREBASE_PROJECT_ID")

    if firebase_admin._apps:
        app.logger.info("Firebase app already initialized.")
        return

    options = {"projectId": project_id} if project_id else None
    firebase_admin.initialize_app(cred, options)


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        TEAM_ID=os.environ.get("TEAM_ID") or "default",
        ADMIN_PASSWORD=os.environ.get("ADMIN_PASSWORD"),
        SESSION_TTL=int(os.environ.get("SESSION_TTL") or DEFAULT_SESSION_TTL),
        GUEST_OTP_TTL=int(os.environ.get("GUEST_OTP_TTL") or DEFAULT_GUEST_OTP_TTL),
        TIMEZONE_OFFSET_HOURS=float(os.environ.get("TIMEZONE_OFFSET_HOURS") or 8),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import dashboard as dashboard_bp

    app.register_blueprint(dashboard_bp.bp)

    from . import training as training_bp

    app.register_blueprint(training_bp.bp)

    from . import races as races_bp

    app.register_blueprint(races_bp.bp)

    from . import people as people_bp

    app.register_blueprint(people_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_auth_session():
        """Decode the session cookie into g.auth_session, dropping stale ones."""
        g.auth_session = None
        data = session.get(SESSION_COOKIE_KEY)
        if data is None:
            return
        current = Session.from_cookie(data)
        if current is None or current.is_expired():
            session.pop(SESSION_COOKIE_KEY, None)
            app.logger.info("Cleared an expired or malformed session.")
            return
        g.auth_session = current

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    return app
