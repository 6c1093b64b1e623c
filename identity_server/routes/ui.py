"""Application pages outside the identity area."""

from http import HTTPStatus

from flask import Blueprint, render_template, make_response, jsonify, \
    Response

from ..services import datastore

blueprint = Blueprint('ui', __name__, url_prefix='')


@blueprint.route('/', methods=['GET'])
def index() -> Response:
    return make_response(render_template('index.html'))


@blueprint.route('/healthz', methods=['GET'])
def health() -> Response:
    """Report whether the user store is reachable."""
    if datastore.is_available():
        return make_response(jsonify(status='ok'), HTTPStatus.OK)
    return make_response(jsonify(status='unavailable'),
                         HTTPStatus.SERVICE_UNAVAILABLE)
