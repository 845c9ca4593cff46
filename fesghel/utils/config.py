"""Utility functions for application configuration management.

Configuration lives in a YAML file per application environment (`APP_ENV`):

    config/
    ├── local.yml
    └── dev.yml

The file selects the active data store backend and holds the connection
parameters of every supported backend:

    active_backend: mongo
    backends:
      mongo:
        address: mongodb://127.0.0.1:27017
        name: fesghel
      redis:
        host: 127.0.0.1
        port: 6379
        db: 0

Any value can be overridden through environment variables:

    FESGHEL_ACTIVE_BACKEND=redis
    FESGHEL_MONGO_ADDRESS=mongodb://mongo.internal:27017
    FESGHEL_REDIS_PORT=6380

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    config_path() -> Path
        Return the path of the configuration file to load.

    load_config() -> dict
        Load the active backend's configuration as `{backend: {...}}`.

Example:
    Typical usage inside a Lambda handler:

        >>> from fesghel.utils.config import load_config
        >>> config = load_config()
        >>> config['mongo']['address']
        'mongodb://127.0.0.1:27017'
"""

import os
import logging
from pathlib import Path

import yaml

from fesghel.exceptions import BadConfigurationError
from fesghel.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    PROJECT_ROOT_ENV,
    CONFIG_FILE_ENV,
    CONFIG_ENV_PREFIX,
    ACTIVE_BACKEND_ENV,
)


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = frozenset({'mongo', 'redis'})


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(APP_NAME_ENV)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Reads PROJECT_ROOT, falls back to the repository root relative to this file.
    """
    default = Path(__file__).resolve().parents[2]
    return Path(os.environ.get(PROJECT_ROOT_ENV, default))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'fesghel'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'fesghel:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def config_path() -> Path:
    """Return the configuration file path

    `FESGHEL_CONFIG_FILE` wins; otherwise `<project root>/config/<app env>.yml`.
    """
    explicit = os.environ.get(CONFIG_FILE_ENV)
    if explicit:
        return Path(explicit)
    return project_root() / 'config' / f'{app_env()}.yml'


def _apply_environment_overrides(config: dict) -> dict:
    """Overlay FESGHEL_ACTIVE_BACKEND and FESGHEL_<BACKEND>_<FIELD> variables"""
    active_backend = os.environ.get(ACTIVE_BACKEND_ENV)
    if active_backend:
        config['active_backend'] = active_backend.lower()

    backends = config.get('backends')
    if not isinstance(backends, dict):
        backends = config['backends'] = {}
    for backend in SUPPORTED_BACKENDS:
        prefix = f'{CONFIG_ENV_PREFIX}_{backend.upper()}_'
        for name, value in os.environ.items():
            if name.startswith(prefix) and len(name) > len(prefix):
                field = name[len(prefix) :].lower()
                backends.setdefault(backend, {})[field] = value
    return config


def load_config() -> dict:
    """Load configuration of the active data store backend

    Returns:
        dict: `{<active backend>: {<connection parameters>}}`, e.g.
              `{'mongo': {'address': 'mongodb://127.0.0.1:27017', 'name': 'fesghel'}}`

    Raises:
        FileNotFoundError:
            If the configuration file does not exist.
        BadConfigurationError:
            If the document is malformed or names an unsupported backend.
    """
    path = config_path()
    logger.debug('Loading configuration file.', extra={'path': str(path)})

    with open(path, encoding='utf-8') as f:
        try:
            document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e

    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping.')

    config = _apply_environment_overrides(document)

    backend = config.get('active_backend')
    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f'Unsupported data store backend: {backend!r}.')

    backend_config = config['backends'].get(backend)
    if not isinstance(backend_config, dict):
        raise BadConfigurationError(f"Missing configuration for data store backend '{backend}'.")

    logger.debug('Loaded configuration.', extra={'path': str(path), 'backend': backend})
    return {backend: backend_config}
