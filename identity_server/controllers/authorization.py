"""Controllers for the client authorization (consent) prompt."""

import logging
from http import HTTPStatus
from typing import Tuple

from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import BadRequest

from ..domain import AuthorizeViewModel

logger = logging.getLogger(__name__)

ResponseData = Tuple[dict, int, dict]


def authorize(params: MultiDict) -> ResponseData:
    """Describe the access a client application is asking for."""
    client_id = params.get('client_id')
    if not client_id:
        raise BadRequest('client_id is required')
    model = AuthorizeViewModel(
        application_name=params.get('application_name') or client_id,
        scope=params.get('scope', '')
    )
    logger.debug('Consent requested by %s for %s', model.application_name,
                 model.scope)
    return {'model': model}, HTTPStatus.OK, {}
