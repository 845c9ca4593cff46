"""Unit tests for the random_key function in shortener.py.

This test suite verifies the correctness, consistency, and robustness
of the random_key() helper function that generates random, fixed-length
Base62 keys.

Test coverage includes:

1. Basic functionality
   - Ensures the function returns a string of the expected length.

2. Output format
   - All characters in the key must belong to the Base62 alphabet
     (letters and digits only).

3. Randomness sanity
   - Consecutive keys differ; every alphabet character eventually appears.

4. Reproducibility
   - A seeded random source produces a stable sequence of keys.

5. Error handling
   - Ensures invalid lengths raise appropriate exceptions.
"""

import random
import string

import pytest

from fesghel.utils import random_key
from fesghel.utils.shortener import ALPHABET, BASE


# -------------------------------
# 1. Basic functionality
# -------------------------------

def test_random_key_returns_six_characters_by_default():
    result = random_key()
    assert isinstance(result, str)
    assert len(result) == 6


@pytest.mark.parametrize('length', [1, 6, 8, 64])
def test_random_key_respects_length(length):
    assert len(random_key(length)) == length


# -------------------------------
# 2. Output format
# -------------------------------

def test_alphabet_is_base62():
    assert BASE == 62
    assert set(ALPHABET) == set(string.ascii_letters + string.digits)


def test_random_key_characters_are_base62():
    """Ensure every generated character comes from [a-zA-Z0-9]."""
    allowed = set(ALPHABET)
    for _ in range(1000):
        assert set(random_key()) <= allowed


# -------------------------------
# 3. Randomness sanity
# -------------------------------

def test_consecutive_keys_differ():
    """With 62**6 possible keys, consecutive duplicates are practically impossible."""
    keys = [random_key() for _ in range(10_000)]
    assert all(a != b for a, b in zip(keys, keys[1:]))


def test_all_alphabet_characters_appear():
    seen = set()
    for _ in range(2_000):
        seen.update(random_key())
    assert seen == set(ALPHABET)


# -------------------------------
# 4. Reproducibility
# -------------------------------

def test_seeded_rng_is_deterministic():
    first = [random_key(rng=random.Random(1234)) for _ in range(3)]
    rng_a, rng_b = random.Random(1234), random.Random(1234)

    assert [random_key(rng=rng_a) for _ in range(5)] == [random_key(rng=rng_b) for _ in range(5)]
    assert len(set(first)) == 1


# -------------------------------
# 5. Error handling
# -------------------------------

@pytest.mark.parametrize('length', [0, -1, -100])
def test_non_positive_length_raises_value_error(length):
    with pytest.raises(ValueError):
        random_key(length)


@pytest.mark.parametrize('length', [None, 6.0, '6', True])
def test_non_integer_length_raises_type_error(length):
    with pytest.raises(TypeError):
        random_key(length)
