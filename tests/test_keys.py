"""Tests for key generation strategies."""

import uuid

import pytest

from pastr.keys import BASE36_ALPHABET, base36_key, get_generator, uuid_key


def test_uuid_key_is_canonical_uuid():
    key = uuid_key()
    assert str(uuid.UUID(key)) == key


def test_base36_key_is_compact():
    for _ in range(200):
        key = base36_key()
        assert 1 <= len(key) <= 7
        assert set(key) <= set(BASE36_ALPHABET)
        assert int(key, 36) < 2 ** 32


def test_keys_vary():
    assert len({uuid_key() for _ in range(50)}) == 50


def test_get_generator():
    assert get_generator("uuid") is uuid_key
    assert get_generator("base36") is base36_key


def test_get_generator_unknown_strategy():
    with pytest.raises(ValueError, match="Unknown key strategy"):
        get_generator("sha1")
