"""Short key generation utility

This module provides a helper function for generating random, fixed-length
Base62 keys for short URLs.

Functions:
    random_key(length=KEY_LENGTH, rng=None):
        Generate a random alphanumeric key suitable for use as a URL slug.

Example:
    >>> import random
    >>> from fesghel.utils import random_key
    >>> len(random_key())
    6
    >>> random_key(rng=random.Random(42)) == random_key(rng=random.Random(42))
    True
"""

import random
import string

from fesghel.utils.constants import KEY_LENGTH


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

_rng = random.Random()


def random_key(length: int = KEY_LENGTH, rng: random.Random | None = None) -> str:
    """Generate a random, fixed-length Base62 key.

    Every character is drawn independently and uniformly from the Base62
    alphabet [a-zA-Z0-9], giving BASE**length possible keys (~5.6e10 for 6).

    Args:
        length (int, optional):
            Number of characters in the key. Defaults to KEY_LENGTH (6).

        rng (random.Random, optional):
            Random source to draw from. Defaults to a module-wide instance.
            Pass a seeded instance for reproducible keys.

    Returns:
        str: A random alphanumeric key of exactly `length` characters.

    NOTE:
        - The generator does not check for existing keys. Collisions are
          detected by the data store when the key is stored.
        - The output is not meant to be unguessable (this is not a token).
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    if rng is None:
        rng = _rng
    return ''.join(rng.choices(ALPHABET, k=length))
