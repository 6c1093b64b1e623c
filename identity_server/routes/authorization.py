"""Consent prompt shown to signed-in users on behalf of client applications."""

from flask import Blueprint, render_template, request, make_response, \
    Response
from flask_login import login_required

from ..controllers import authorization

blueprint = Blueprint('authorization', __name__, url_prefix='/connect')


@blueprint.route('/authorize', methods=['GET'])
@login_required
def authorize() -> Response:
    """Ask the signed-in user to authorize a client application."""
    data, code, headers = authorization.authorize(request.args)
    return make_response(
        render_template('authorization/authorize.html', **data), code, headers
    )
