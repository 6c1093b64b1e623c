"""Provides Flask integration for the identity area."""

import logging

from flask import Blueprint, render_template, request, make_response, \
    redirect, Response
from flask_login import login_required, current_user

from ..controllers import account

logger = logging.getLogger(__name__)
blueprint = Blueprint('identity', __name__, url_prefix='/Identity/Account')


def _respond(template: str, data: dict, code: int, headers: dict) -> Response:
    if 'Location' in headers:
        return make_response(redirect(headers['Location'], code=code))
    return make_response(render_template(template, **data), code, headers)


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.route('/Register', methods=['GET', 'POST'])
def register() -> Response:
    """Interface for creating new accounts."""
    data, code, headers = account.register(request.method, request.form,
                                           request.args.get('returnUrl'))
    return _respond('identity/register.html', data, code, headers)


@blueprint.route('/RegisterConfirmation', methods=['GET'])
def register_confirmation() -> Response:
    data, code, headers = account.register_confirmation(
        request.args.get('email'), request.args.get('returnUrl')
    )
    return _respond('identity/register_confirmation.html', data, code,
                    headers)


@blueprint.route('/ConfirmEmail', methods=['GET'])
def confirm_email() -> Response:
    data, code, headers = account.confirm_email(request.args.get('userId'),
                                                request.args.get('code'))
    return _respond('identity/confirm_email.html', data, code, headers)


@blueprint.route('/Login', methods=['GET', 'POST'])
def login() -> Response:
    """User can log in with username or e-mail, and password."""
    return_url = request.args.get('returnUrl')
    logger.debug('Request to log in, then redirect to %s', return_url)
    data, code, headers = account.login(request.method, request.form,
                                        return_url)
    return _respond('identity/login.html', data, code, headers)


@blueprint.route('/Logout', methods=['POST'])
def logout() -> Response:
    data, code, headers = account.logout(request.args.get('returnUrl'))
    return _respond('identity/login.html', data, code, headers)


@blueprint.route('/ForgotPassword', methods=['GET', 'POST'])
def forgot_password() -> Response:
    data, code, headers = account.forgot_password(request.method,
                                                  request.form)
    return _respond('identity/forgot_password.html', data, code, headers)


@blueprint.route('/ForgotPasswordConfirmation', methods=['GET'])
def forgot_password_confirmation() -> Response:
    return make_response(
        render_template('identity/forgot_password_confirmation.html')
    )


@blueprint.route('/ResetPassword', methods=['GET', 'POST'])
def reset_password() -> Response:
    data, code, headers = account.reset_password(request.method,
                                                 request.form,
                                                 request.args.get('userId'),
                                                 request.args.get('code'))
    return _respond('identity/reset_password.html', data, code, headers)


@blueprint.route('/ResetPasswordConfirmation', methods=['GET'])
def reset_password_confirmation() -> Response:
    return make_response(
        render_template('identity/reset_password_confirmation.html')
    )


@blueprint.route('/Manage', methods=['GET'])
@login_required
def manage() -> Response:
    """Account overview for the signed-in user."""
    return make_response(
        render_template('identity/manage.html', user=current_user.user)
    )
