"""Forms for the training blueprint."""

import math

from flask_wtf import FlaskForm
from wtforms import DateField, FloatField, StringField, ValidationError
from wtforms.validators import DataRequired, InputRequired, Optional


def _positive(form, field):
    if field.data is None:
        return
    if not math.isfinite(field.data) or field.data <= 0:
        raise ValidationError("Times must be finite and greater than zero.")


class TrainingAttemptForm(FlaskForm):
    """Form for recording one timed attempt."""

    person_id = StringField("Member", validators=[DataRequired()])
    type_name = StringField("Training Type", validators=[DataRequired()])
    date = DateField("Date", validators=[DataRequired()])
    value = FloatField("Time", validators=[InputRequired(), _positive])


class TrainingValueForm(FlaskForm):
    """Form for correcting an attempt's time, and optionally its date."""

    value = FloatField("Time", validators=[InputRequired(), _positive])
    date = DateField("Date", validators=[Optional()])
