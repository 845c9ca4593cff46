import re
import json
import asyncio
import logging
from typing import Any
from urllib.parse import urlparse

from fesghel.models import ShortURLModel
from fesghel.dao import ShortURLBaseDAO, build_short_url_dao
from fesghel.dao.exceptions import ShortURLAlreadyExistsError, DataStoreError
from fesghel.exceptions import ConfigurationError
from fesghel.utils import random_key, load_config, get_short_url, app_prefix, guarantee_500_response
from fesghel.utils import metrics
from fesghel.utils.constants import MAX_KEY_ATTEMPTS, GENERATED_KEY_NAME, KEY_NAME_PATTERN
from fesghel.lambdas.responses import response_200, response_400, response_409, response_500
from fesghel.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    INVALID_URL,
    INVALID_NAME,
    KEY_ALREADY_EXISTS,
    KEY_SPACE_EXHAUSTED,
    KEY_COLLISION,
    DATA_STORE_ERROR,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)

KEY_NAME_RE = re.compile(KEY_NAME_PATTERN)


def is_valid_url(url: Any) -> bool:
    if not isinstance(url, str):
        return False
    components = urlparse(url)
    return components.scheme in {'http', 'https'} and bool(components.netloc)


async def store_with_random_key(dao: ShortURLBaseDAO, url: str, attempts: int = MAX_KEY_ATTEMPTS) -> ShortURLModel:
    """Store `url` under a freshly generated key, regenerating on collision

    Raises:
        ShortURLAlreadyExistsError:
            If every one of the `attempts` generated keys collided.
        DataStoreError:
            On any other data store failure (not retried).
    """
    for attempt in range(1, attempts + 1):
        short_url = ShortURLModel(url=url, key=random_key())
        try:
            await dao.store(short_url)
        except ShortURLAlreadyExistsError:
            metrics.inc_error(metrics.DUPLICATE_KEY)
            logger.info(
                'Generated key already exists.',
                extra={'key': short_url.key, 'attempt': attempt, 'event': KEY_COLLISION},
            )
            if attempt == attempts:
                raise
        else:
            return short_url


async def shorten(dao: ShortURLBaseDAO, url: str, name: str) -> ShortURLModel:
    async with dao:
        await dao.initialize()
        if name == GENERATED_KEY_NAME:
            return await store_with_random_key(dao, url)

        short_url = ShortURLModel(url=url, key=name)
        await dao.store(short_url)
        return short_url


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract target URL and optional key name from request body
    - Step 2: Use the requested name as key, or generate a random key
    - Step 3: Store the key and target URL mapping in database (via DAO),
              regenerating generated keys on collision
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            url: original url (provided in request)
            key: the short URL key
            short_url: the full short url
        400: Bad client request
            message: indicate cause of bad request (invalid JSON, invalid url or name)
        409: Conflict
            message: the requested name is already taken
        500: Internal server error
            message: indicate the server experienced an internal error

    Args:
        event (Dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
            Body: {"url": "<target url>", "name": "<optional key>"}
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        Dict[str, Any]:
            JSON-serializable response following API Gateway Lambda Proxy
            output format.

    Example:
        >>> event = {'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['key']
        'Gh71Wa'
    """
    # 0- Get application's config
    try:
        app_config = load_config()
    except (FileNotFoundError, ConfigurationError):
        logger.exception('Failed to load configuration for shorten URL function. Responding with 500.')
        return response_500()

    # 1- Extract target URL and key name from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        request_body = None
    if not isinstance(request_body, dict):
        metrics.inc_error(metrics.VALIDATION)
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    url = request_body.get('url')
    if not is_valid_url(url):
        metrics.inc_error(metrics.VALIDATION)
        logger.info('Missing or invalid target URL. Responding with 400.', extra={'event': INVALID_URL})
        return response_400(message="missing or invalid 'url' in JSON body", error_code=INVALID_URL)

    name = request_body.get('name') or GENERATED_KEY_NAME
    if name != GENERATED_KEY_NAME and not (isinstance(name, str) and KEY_NAME_RE.fullmatch(name)):
        metrics.inc_error(metrics.VALIDATION)
        logger.info('Invalid key name. Responding with 400.', extra={'event': INVALID_NAME})
        return response_400(message="invalid 'name' in JSON body", error_code=INVALID_NAME)

    # 2-3- Store the mapping under the requested or a generated key
    short_url_dao = build_short_url_dao(app_config, prefix=app_prefix())
    try:
        short_url = asyncio.run(shorten(short_url_dao, url, name))
    except ShortURLAlreadyExistsError as e:
        if name != GENERATED_KEY_NAME:
            metrics.inc_error(metrics.DUPLICATE_KEY)
            logger.info('Requested key already exists. Responding with 409.', extra={'key': e.key, 'event': KEY_ALREADY_EXISTS})
            return response_409(message=f"key '{e.key}' already exists", error_code=KEY_ALREADY_EXISTS)
        logger.error(
            'Every generated key collided. Responding with 500.',
            extra={'attempts': MAX_KEY_ATTEMPTS, 'event': KEY_SPACE_EXHAUSTED},
        )
        return response_500(error_code=KEY_SPACE_EXHAUSTED)
    except DataStoreError:
        metrics.inc_error(metrics.DATABASE)
        logger.exception('Data store failure while storing short URL. Responding with 500.', extra={'event': DATA_STORE_ERROR})
        return response_500(error_code=DATA_STORE_ERROR)

    # 4- Return successful response to user
    metrics.inc_urls_created()
    short_url_string = get_short_url(short_url.key, event)
    logger.info('Shortened URL. Responding with 200.', extra={'key': short_url.key, 'event': SHORTEN_SUCCESS})
    return response_200(
        {
            'message': f'Successfully shortened {url} to {short_url_string}',
            'url': url,
            'key': short_url.key,
            'short_url': short_url_string,
        }
    )
