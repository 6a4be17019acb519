"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Regexp

from runbike.core.constants import OTP_DIGITS


class AdminLoginForm(FlaskForm):
    """Form for signing in with the team admin password."""

    password = PasswordField("Admin Password", validators=[DataRequired()])


class MemberLoginForm(FlaskForm):
    """Form for a team member signing in."""

    person_id = StringField("Member", validators=[DataRequired()])
    password = PasswordField("Password", validators=[DataRequired()])


class GuestCodeForm(FlaskForm):
    """Form for redeeming a one-time guest code."""

    code = StringField(
        "Code",
        validators=[
            DataRequired(),
            Regexp(rf"^\d{{{OTP_DIGITS}}}$", message="Enter the six digit code."),
        ],
    )
