"""Forms for the people blueprint."""

from flask_wtf import FlaskForm
from wtforms import BooleanField, DateField, PasswordField, StringField
from wtforms.validators import DataRequired, Length, Optional


class PersonForm(FlaskForm):
    """Form for adding or editing a team member."""

    name = StringField("Name", validators=[DataRequired(), Length(min=1, max=50)])
    birthday = DateField("Birthday", validators=[Optional()])
    small_image = StringField("Avatar", validators=[Optional(), Length(max=2048)])
    large_image = StringField("Photo", validators=[Optional(), Length(max=2048)])
    motto = StringField("Motto", validators=[Optional(), Length(max=200)])
    password = PasswordField("Password", validators=[Optional(), Length(min=4)])


class HiddenForm(FlaskForm):
    """Form for retiring or restoring a team member."""

    hidden = BooleanField("Retired")


class TrainingTypeForm(FlaskForm):
    """Form for adding or editing a training drill."""

    name = StringField("Name", validators=[DataRequired(), Length(max=50)])
    is_default = BooleanField("Default")


class RaceSeriesForm(FlaskForm):
    """Form for adding or renaming a race series."""

    name = StringField("Name", validators=[DataRequired(), Length(max=80)])
