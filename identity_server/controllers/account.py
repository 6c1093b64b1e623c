"""
Controllers for the identity area.

Users register with a user name, e-mail address and password. New accounts
are unconfirmed: the user is sent a link that confirms their e-mail address,
and (with ``REQUIRE_CONFIRMED_ACCOUNT``) cannot sign in until they follow it.

Each controller returns the data for the template, a status code, and
response headers. Redirects are 303 (See Other) with a ``Location`` header.
"""

import logging
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

from flask import current_app, session, url_for
from flask_login import login_user, logout_user
from werkzeug.datastructures import MultiDict

from .. import domain
from ..auth import SessionUser
from ..context import current_context
from ..redirect import safe_return_url
from ..services.datastore import NoSuchUser
from ..services.email import NullEmailSender
from ..services.identity import RegistrationFailed, InvalidToken
from .forms import LoginForm, RegistrationForm, ForgotPasswordForm, \
    ResetPasswordForm

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]

REGISTERED_USER_KEY = 'registered_user_id'
"""Session key naming the account this browser just registered."""


def _see_other(location: str, data: Optional[dict] = None) -> ResponseData:
    return data or {}, HTTPStatus.SEE_OTHER, {'Location': location}


def register(method: str, form_data: MultiDict,
             return_url: Optional[str]) -> ResponseData:
    """Handle requests for the registration view."""
    return_url = safe_return_url(return_url or '/')
    if method == 'GET':
        return {'form': RegistrationForm(), 'return_url': return_url}, \
            HTTPStatus.OK, {}

    logger.debug('Registration form submitted')
    form = RegistrationForm(form_data)
    data: Dict[str, Any] = {'form': form, 'return_url': return_url}
    if not form.validate():
        logger.debug('Registration form not valid')
        return data, HTTPStatus.BAD_REQUEST, {}

    identity = current_context().identity
    try:
        user = identity.create_user(form.username.data, form.email.data,
                                    form.password.data)
    except RegistrationFailed as e:
        logger.debug('Registration failed: %s', e)
        data.update({'error': str(e)})
        return data, HTTPStatus.BAD_REQUEST, {}

    identity.send_confirmation_email(user, _confirmation_url(user,
                                                             return_url))
    session[REGISTERED_USER_KEY] = user.user_id
    if identity.options.require_confirmed_account:
        return _see_other(url_for('identity.register_confirmation',
                                  email=user.email, returnUrl=return_url))
    login_user(SessionUser(user))
    return _see_other(return_url)


def register_confirmation(email: Optional[str],
                          return_url: Optional[str]) -> ResponseData:
    """Tell the user to check their e-mail."""
    if not email:
        return _see_other(url_for('ui.index'))
    context = current_context()
    try:
        user = context.identity.find_user(email)
    except NoSuchUser:
        return {'error': f'Unable to load user with email {email}.'}, \
            HTTPStatus.NOT_FOUND, {}

    data: Dict[str, Any] = {'email': email}
    # Nothing is delivered, so show the link to whoever just registered.
    if current_app.config.get('DISPLAY_CONFIRM_ACCOUNT_LINK') \
            and isinstance(context.email_sender, NullEmailSender) \
            and session.get(REGISTERED_USER_KEY) == user.user_id:
        data['confirmation_url'] = _confirmation_url(
            user, safe_return_url(return_url or '/')
        )
    return data, HTTPStatus.OK, {}


def confirm_email(user_id: Optional[str],
                  code: Optional[str]) -> ResponseData:
    """Confirm the e-mail address of a user following their link."""
    if not user_id or not code:
        return _see_other(url_for('ui.index'))
    try:
        current_context().identity.confirm_email(user_id, code)
    except NoSuchUser:
        return {'error': f"Unable to load user with ID '{user_id}'."}, \
            HTTPStatus.NOT_FOUND, {}
    except InvalidToken as e:
        logger.debug('Could not confirm e-mail for %s: %s', user_id, e)
        return {'status_message': 'Error confirming your email.'}, \
            HTTPStatus.BAD_REQUEST, {}
    return {'status_message': 'Thank you for confirming your email.'}, \
        HTTPStatus.OK, {}


def login(method: str, form_data: MultiDict,
          return_url: Optional[str]) -> ResponseData:
    """
    Provide the login form.

    Parameters
    ----------
    method : str
    form_data : MultiDict
        Should include `username` and `password` data.
    return_url : str or None
        Page to which the user should be redirected upon login.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 303 (See Other) if all goes well.
    dict
        Headers to add to the response.

    """
    return_url = safe_return_url(return_url or '/')
    if method == 'GET':
        logger.debug('Request for login form')
        return {'form': LoginForm(), 'return_url': return_url}, \
            HTTPStatus.OK, {}

    logger.debug('Login form submitted')
    form = LoginForm(form_data)
    data: Dict[str, Any] = {'form': form, 'return_url': return_url}
    if not form.validate():
        logger.debug('Form data is not valid')
        return data, HTTPStatus.BAD_REQUEST, {}

    result = current_context().identity.password_sign_in(
        form.username.data, form.password.data
    )
    if result.succeeded and result.user is not None:
        login_user(SessionUser(result.user), remember=form.remember_me.data)
        return _see_other(return_url)
    if result.is_not_allowed:
        data.update({'error': 'You must confirm your email before you can'
                              ' log in.'})
    elif result.is_locked_out:
        data.update({'error': 'This account has been locked out, please try'
                              ' again later.'})
    else:
        data.update({'error': 'Invalid login attempt.'})
    return data, HTTPStatus.BAD_REQUEST, {}


def logout(return_url: Optional[str]) -> ResponseData:
    """End the user's session."""
    logout_user()
    logger.debug('User logged out')
    return _see_other(safe_return_url(return_url or '/'))


def forgot_password(method: str, form_data: MultiDict) -> ResponseData:
    """Send a password reset link, if the account exists and is confirmed."""
    if method == 'GET':
        return {'form': ForgotPasswordForm()}, HTTPStatus.OK, {}

    form = ForgotPasswordForm(form_data)
    if not form.validate():
        return {'form': form}, HTTPStatus.BAD_REQUEST, {}

    identity = current_context().identity
    confirmation = url_for('identity.forgot_password_confirmation')
    try:
        user = identity.find_user(form.email.data)
    except NoSuchUser:
        # Don't reveal that the user does not exist.
        return _see_other(confirmation)
    if not user.email_confirmed:
        return _see_other(confirmation)

    code = identity.generate_password_reset_token(user)
    callback_url = _public_url('identity.reset_password', userId=user.user_id,
                               code=code)
    identity.send_password_reset_email(user, callback_url)
    return _see_other(confirmation)


def reset_password(method: str, form_data: MultiDict,
                   user_id: Optional[str],
                   code: Optional[str]) -> ResponseData:
    """Choose a new password using the link from a reset message."""
    if method == 'GET':
        if not user_id or not code:
            return {'error': 'A code must be supplied for password reset.'}, \
                HTTPStatus.BAD_REQUEST, {}
        form = ResetPasswordForm(user_id=user_id, code=code)
        return {'form': form}, HTTPStatus.OK, {}

    form = ResetPasswordForm(form_data)
    data: Dict[str, Any] = {'form': form}
    if not form.validate():
        return data, HTTPStatus.BAD_REQUEST, {}

    confirmation = url_for('identity.reset_password_confirmation')
    try:
        current_context().identity.reset_password(
            form.user_id.data, form.code.data, form.password.data
        )
    except NoSuchUser:
        # Don't reveal that the user does not exist.
        return _see_other(confirmation)
    except (InvalidToken, RegistrationFailed) as e:
        data.update({'error': str(e)})
        return data, HTTPStatus.BAD_REQUEST, {}
    return _see_other(confirmation)


def _confirmation_url(user: domain.User, return_url: str) -> str:
    code = current_context().identity.generate_email_confirmation_token(user)
    return _public_url('identity.confirm_email', userId=user.user_id,
                       code=code, returnUrl=return_url)


def _public_url(endpoint: str, **values: Any) -> str:
    """Absolute URL on the configured public host, whatever the request's."""
    config = current_app.config
    path = url_for(endpoint, **values)
    return f'{config["PREFERRED_URL_SCHEME"]}://{config["BASE_SERVER"]}{path}'
