"""Utility functions for the application."""

from __future__ import annotations

import datetime
from typing import Optional

from flask import current_app, g
from flask_wtf import FlaskForm

from runbike.core.session import Session, require_session

from .errors import ValidationError


def team_id() -> str:
    """The team this deployment serves."""
    return current_app.config["TEAM_ID"]


def team_today() -> datetime.date:
    """Today's date in the team's local time, the reference for race status."""
    offset = datetime.timedelta(hours=current_app.config["TIMEZONE_OFFSET_HOURS"])
    return datetime.datetime.now(datetime.timezone(offset)).date()


def current_session() -> Session:
    """The live session of this request; raises AuthError when missing."""
    return require_session(g.get("auth_session"))


def parse_date_arg(raw: Optional[str], name: str) -> Optional[datetime.date]:
    """Parse an optional 'YYYY-MM-DD' query argument."""
    if not raw:
        return None
    try:
        return datetime.date.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid date for '{name}': {raw}") from e


def validate_form(form: FlaskForm) -> None:
    """Raise ValidationError with the form's messages when it does not validate."""
    if form.validate_on_submit():
        return
    messages = [
        f"{getattr(form, name).label.text}: {error}"
        for name, errors in form.errors.items()
        for error in errors
    ]
    raise ValidationError("; ".join(messages) or "Invalid submission.")


__all__ = [
    "current_session",
    "parse_date_arg",
    "team_id",
    "team_today",
    "validate_form",
]
