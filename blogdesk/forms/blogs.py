from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, Length

from blogdesk.schemas.blogs import TITLE_MAX_LENGTH


def _strip(value):
    # Trim like BlogPayload does
    return value.strip() if isinstance(value, str) else value


class BlogForm(FlaskForm):
    title = StringField(
        'Title',
        validators=[
            DataRequired(message='The title field is required.'),
            Length(
                max=TITLE_MAX_LENGTH,
                message=f'The title field must not be greater than {TITLE_MAX_LENGTH} characters.',
            ),
        ],
        filters=[_strip],
        render_kw={'maxlength': TITLE_MAX_LENGTH, 'autocomplete': 'off'},
    )
    content = TextAreaField(
        'Content',
        validators=[DataRequired(message='The content field is required.')],
        filters=[_strip],
        render_kw={'rows': 6},
    )
    submit = SubmitField('Save')


class DeleteBlogForm(FlaskForm):
    submit = SubmitField('Delete')
