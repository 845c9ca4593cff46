import asyncio
import logging
from typing import Any

from fesghel.models import ShortURLModel
from fesghel.dao import ShortURLBaseDAO, build_short_url_dao
from fesghel.dao.exceptions import DataStoreError
from fesghel.exceptions import ConfigurationError
from fesghel.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from fesghel.utils import metrics
from fesghel.lambdas.responses import response_307, response_400, response_404, response_500
from fesghel.lambdas.redirect_url.constants import (
    MISSING_KEY,
    SHORT_URL_NOT_FOUND,
    DATA_STORE_ERROR,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


async def fetch(dao: ShortURLBaseDAO, key: str) -> ShortURLModel | None:
    async with dao:
        return await dao.fetch(key)


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract key from request path
    - Step 2: Fetch short URL record from database
    - Step 3: Redirect client to target URL

    HTTP responses:
        307: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing key in path parameters
        404: Not found
            message: no short URL with this key
        500: Internal server error
            message: server experienced an internal error (including data store outages)

    Args:
        event (dict):
            API Gateway event payload containing the key path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'key': 'Gh71TC'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        307
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config()
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load configuration for redirect URL function. Responding with 500.')
        return response_500()

    # 1- Extract key from request's path
    key = (event.get('pathParameters') or {}).get('key')
    if not key:
        logger.info('Missing "key" in path. Responding with 400.', extra={'event': MISSING_KEY})
        return response_400(message="missing 'key' in path", error_code=MISSING_KEY)
    logger.debug('Client requested short URL %s.', get_short_url(key, event))

    # 2- Get short URL record from database
    short_url_dao = build_short_url_dao(app_config, prefix=app_prefix())
    try:
        short_url = asyncio.run(fetch(short_url_dao, key))
    except DataStoreError:
        metrics.inc_error(metrics.DATABASE)
        logger.exception(
            'Data store failure while fetching short URL. Responding with 500.',
            extra={'key': key, 'event': DATA_STORE_ERROR},
        )
        return response_500(error_code=DATA_STORE_ERROR)

    if short_url is None:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'key': key, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(key, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 307.',
        extra={'key': key, 'event': REDIRECT_SUCCESS},
    )
    return response_307(location=short_url.url)
