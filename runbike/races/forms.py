"""Forms for the races blueprint."""

from flask_wtf import FlaskForm
from wtforms import DateField, FloatField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from runbike.core.constants import FRAME_MAX_SCALE, FRAME_MIN_SCALE
from runbike.core.framing import ImageFrame


class FramedImageForm(FlaskForm):
    """Image link plus the zoom and pan chosen in the cropper."""

    image = StringField("Picture", validators=[Optional(), Length(max=2048)])
    image_zoom = FloatField(
        "Zoom",
        validators=[Optional(), NumberRange(min=FRAME_MIN_SCALE, max=FRAME_MAX_SCALE)],
    )
    image_x = FloatField(
        "Horizontal offset",
        validators=[Optional(), NumberRange(min=0, max=100)],
    )
    image_y = FloatField(
        "Vertical offset",
        validators=[Optional(), NumberRange(min=0, max=100)],
    )

    def framed_image(self):
        """The stored form of the picture, or '' when none was given."""
        # A link that already carries framing keeps it unless overridden.
        frame = ImageFrame.decode(self.image.data)
        return ImageFrame(
            ref=frame.ref,
            scale=_or_default(self.image_zoom.data, frame.scale),
            offset_x=_or_default(self.image_x.data, frame.offset_x),
            offset_y=_or_default(self.image_y.data, frame.offset_y),
        ).encode()


def _or_default(value, default):
    return default if value is None else value


class RaceEntryForm(FramedImageForm):
    """Form for joining a race or editing an entry."""

    person_id = StringField("Member", validators=[DataRequired()])
    result = StringField("Result", validators=[Optional(), Length(max=64)])
    note = TextAreaField("Note", validators=[Optional(), Length(max=500)])


class WithdrawForm(FlaskForm):
    """Form for leaving a race."""

    person_id = StringField("Member", validators=[DataRequired()])


class RaceEventForm(FramedImageForm):
    """Form for creating a race event."""

    date = DateField("Date", validators=[DataRequired()])
    name = StringField("Name", validators=[DataRequired(), Length(max=120)])
    series_id = StringField("Series", validators=[DataRequired()])
    address = StringField("Address", validators=[Optional(), Length(max=255)])
