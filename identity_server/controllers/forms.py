"""Provides forms for login, registration, etc."""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, HiddenField
from wtforms.validators import DataRequired, Email, EqualTo, Length


class LoginForm(FlaskForm):
    """Log in form."""

    username = StringField('Username or e-mail', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember_me = BooleanField('Remember me?')


class RegistrationForm(FlaskForm):
    """Create a new account."""

    username = StringField('Username',
                           validators=[DataRequired(), Length(max=256)])
    email = StringField('Email',
                        validators=[DataRequired(), Email(), Length(max=256)])
    password = PasswordField('Password',
                             validators=[DataRequired(), Length(max=100)])
    confirm_password = PasswordField(
        'Confirm password',
        validators=[DataRequired(),
                    EqualTo('password', message='Passwords must match.')]
    )


class ForgotPasswordForm(FlaskForm):
    """Ask for a password reset link."""

    email = StringField('Email', validators=[DataRequired(), Email()])


class ResetPasswordForm(FlaskForm):
    """Choose a new password with a reset token."""

    user_id = HiddenField('User', validators=[DataRequired()])
    code = HiddenField('Code', validators=[DataRequired()])
    password = PasswordField('Password',
                             validators=[DataRequired(), Length(max=100)])
    confirm_password = PasswordField(
        'Confirm password',
        validators=[DataRequired(),
                    EqualTo('password', message='Passwords must match.')]
    )
