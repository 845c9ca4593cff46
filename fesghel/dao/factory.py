"""Build the short URL DAO of the configured data store backend.

Example:
    >>> from fesghel.utils import load_config, app_prefix
    >>> dao = build_short_url_dao({'mongo': {'address': 'mongodb://127.0.0.1:27017', 'name': 'fesghel'}})
    >>> type(dao).__name__
    'ShortURLMongoDAO'
"""

from fesghel.dao.base import ShortURLBaseDAO
from fesghel.dao.mongo import ShortURLMongoDAO
from fesghel.dao.redis import ShortURLRedisDAO
from fesghel.exceptions import BadConfigurationError
from fesghel.types import LambdaConfiguration


def build_short_url_dao(app_config: LambdaConfiguration, prefix: str | None = None) -> ShortURLBaseDAO:
    """Construct (but don't initialize) the DAO for the active backend

    Args:
        app_config (dict):
            Output of `load_config()`: a single `{backend: {...}}` section.
        prefix (str | None):
            Key namespace, used by the Redis backend only.

    Raises:
        BadConfigurationError:
            If the configuration doesn't name exactly one supported backend.
    """
    if len(app_config) != 1:
        raise BadConfigurationError(f'Expected exactly one data store backend (given: {sorted(app_config)}).')

    [(backend, backend_config)] = app_config.items()
    params = {f'{backend}_{k}': v for k, v in (backend_config or {}).items()}

    if backend == 'mongo':
        return ShortURLMongoDAO(**params)
    elif backend == 'redis':
        return ShortURLRedisDAO(**params, prefix=prefix)
    else:
        raise BadConfigurationError(f'Unsupported data store backend: {backend!r}.')
