"""Routes for the auth blueprint."""

from firebase_admin import firestore
from flask import current_app, g, jsonify, session

from runbike.core.constants import (
    ROLE_ADMIN,
    ROLE_GUEST,
    ROLE_MEMBER,
    SESSION_COOKIE_KEY,
)
from runbike.core.session import Session
from runbike.utils import team_id, validate_form

from . import bp
from .decorators import login_required
from .forms import AdminLoginForm, GuestCodeForm, MemberLoginForm
from .services import AuthService


def _start_session(role, person_id=None):
    """Store a new session in the cookie and return it as JSON."""
    new_session = Session.start(role, current_app.config["SESSION_TTL"], person_id)
    session[SESSION_COOKIE_KEY] = new_session.to_cookie()
    g.auth_session = new_session
    current_app.logger.info(f"Started {role} session for team {team_id()}.")
    return jsonify({"status": "success", "session": new_session.to_cookie()})


@bp.route("/login", methods=["POST"])
def login():
    """Sign in as the team admin."""
    form = AdminLoginForm()
    validate_form(form)
    AuthService.check_admin_password(
        current_app.config.get("ADMIN_PASSWORD"), form.password.data
    )
    return _start_session(ROLE_ADMIN)


@bp.route("/member-login", methods=["POST"])
def member_login():
    """Sign in as a team member."""
    form = MemberLoginForm()
    validate_form(form)
    db = firestore.client()
    AuthService.verify_member(db, team_id(), form.person_id.data, form.password.data)
    return _start_session(ROLE_MEMBER, form.person_id.data)


@bp.route("/otp", methods=["POST"])
@login_required(admin_required=True)
def generate_otp():
    """Issue a one-time guest code."""
    db = firestore.client()
    code = AuthService.generate_guest_code(
        db, team_id(), current_app.config["GUEST_OTP_TTL"]
    )
    return jsonify({"status": "success", "otp": code})


@bp.route("/otp/verify", methods=["POST"])
def verify_otp():
    """Redeem a guest code for a guest session."""
    form = GuestCodeForm()
    validate_form(form)
    db = firestore.client()
    AuthService.verify_guest_code(db, team_id(), form.code.data)
    return _start_session(ROLE_GUEST)


@bp.route("/logout", methods=["POST"])
def logout():
    """End the current session."""
    session.pop(SESSION_COOKIE_KEY, None)
    g.auth_session = None
    return jsonify({"status": "success"})


@bp.route("/session", methods=["GET"])
def current():
    """Describe the session attached to this request, if any."""
    active = g.get("auth_session")
    return jsonify({"session": active.to_cookie() if active else None})
