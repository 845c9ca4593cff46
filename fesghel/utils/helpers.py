"""Helpers shared by the lambda handlers

Functions:
    base_url(event) -> str
        Public base URL the API is served from
    get_short_url(key, event) -> str
        Public short URL of a key
    guarantee_500_response(handler) -> Callable
        Decorator: turn any escaped exception into a 500 response

Example:
    >>> event = {'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod'}}
    >>> get_short_url('Gh71Wa', event)
    'https://abc123.execute-api.us-east-1.amazonaws.com/Prod/Gh71Wa'
    >>> get_short_url('Gh71Wa', {'requestContext': {'domainName': 'fesghel.example', 'stage': 'Prod'}})
    'https://fesghel.example/Gh71Wa'
"""

import json
import logging
import functools
from collections.abc import Callable

from fesghel.types import LambdaEvent, LambdaContext, LambdaResponse
from fesghel.utils.runtime import running_locally


logger = logging.getLogger(__name__)

UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

# `sam local start-api` and direct invocations carry no domain
LOCAL_BASE_URL = 'http://localhost:3000'

# Default API Gateway domains look like <api id>.execute-api.<region>.amazonaws.com
EXECUTE_API_MARKER = '.execute-api.'


def base_url(event: LambdaEvent) -> str:
    """Public base URL of the API serving `event`

    Default execute-api domains need the stage in the path; custom domains map
    the stage through a base path mapping, so it is left out.
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName')
    if not domain:
        return LOCAL_BASE_URL

    if EXECUTE_API_MARKER in domain:
        return f"https://{domain}/{request_context.get('stage', '')}".rstrip('/')
    return f'https://{domain}'


def get_short_url(key: str, event: LambdaEvent) -> str:
    return f'{base_url(event)}/{key}'


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with HTTP 500 when a lambda handler raises

    Expected failures (bad config, data store outages, ...) are mapped to
    responses by the handlers themselves; this is the net for everything else.
    When running locally the exception is re-raised instead.

    Example:
        >>> @guarantee_500_response
        ... def lambda_handler(event, context):
        ...     raise RuntimeError('boom')
        >>> lambda_handler({}, None)['statusCode']
        500
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'handler': handler.__module__, 'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            body = {'message': 'Internal Server Error', 'error_code': UNKNOWN_INTERNAL_SERVER_ERROR}
            return {'statusCode': 500, 'body': json.dumps(body)}

    return wrapper
