from fesghel.utils.config import app_env, app_name, project_root, app_prefix, config_path, load_config
from fesghel.utils.helpers import base_url, get_short_url, guarantee_500_response
from fesghel.utils.shortener import random_key
from fesghel.utils.logging import initialize_logging


__all__ = [
    'random_key',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'config_path',
    'load_config',
    'base_url',
    'get_short_url',
    'guarantee_500_response',
    'initialize_logging',
]
