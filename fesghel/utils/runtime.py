"""Detect where the lambda code is running."""

import os

from fesghel.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV


def running_locally() -> bool:
    """True under `sam local` (AWS_SAM_LOCAL=true) or when APP_ENV is 'local'

    Local runs let unexpected exceptions escape the handlers, so they show up
    in the terminal and in pytest output instead of a bare 500.
    """
    if os.getenv(AWS_SAM_LOCAL_ENV) == 'true':
        return True
    return os.getenv(APP_ENV_ENV, '').strip().lower() == 'local'
