"""Unit tests for API key generation."""
import pytest

from hiscore.domain.api_key import (
    KEY_ALPHABET,
    generate_key,
    generate_key_pair,
    generate_unique_key,
)
from hiscore.domain.errors import KeyGenerationExhausted


def scripted(*keys):
    """Generator that hands out the given keys in order."""
    it = iter(keys)
    return lambda length: next(it)


class TestGenerateKey:
    def test_length(self):
        assert len(generate_key(31)) == 31
        assert len(generate_key(20)) == 20

    def test_alphanumeric_only(self):
        key = generate_key(200)
        assert set(key) <= set(KEY_ALPHABET)

    def test_keys_differ(self):
        assert len({generate_key(20) for _ in range(50)}) == 50


class TestGenerateUniqueKey:
    def test_skips_collisions(self):
        key = generate_unique_key({"aaa", "bbb"}, 3, generator=scripted("aaa", "bbb", "ccc"))
        assert key == "ccc"

    def test_exhaustion_raises(self):
        with pytest.raises(KeyGenerationExhausted):
            generate_unique_key({"aaa"}, 3, max_attempts=5, generator=lambda n: "aaa")

    def test_accepts_any_iterable(self):
        key = generate_unique_key(iter(["aaa"]), 3, generator=scripted("aaa", "bbb"))
        assert key == "bbb"

    def test_rejects_bad_length(self):
        with pytest.raises(ValueError):
            generate_unique_key(set(), 0)

    def test_rejects_bad_max_attempts(self):
        with pytest.raises(ValueError):
            generate_unique_key(set(), 5, max_attempts=0)


class TestGenerateKeyPair:
    def test_lengths(self):
        private_key, public_key = generate_key_pair([], [], 31, 20)
        assert len(private_key) == 31
        assert len(public_key) == 20

    def test_public_never_equals_private(self):
        gen = scripted("same", "same", "other")
        private_key, public_key = generate_key_pair([], [], 4, 4, generator=gen)
        assert private_key == "same"
        assert public_key == "other"

    def test_checks_both_namespaces(self):
        gen = scripted("pub1", "prv1", "fresh", "pub1", "prv1", "fresh2")
        private_key, public_key = generate_key_pair(["prv1"], ["pub1"], 4, 4, generator=gen)
        assert private_key == "fresh"
        assert public_key == "fresh2"

    def test_many_pairs_are_all_distinct(self):
        privates, publics = [], []
        for _ in range(200):
            p, q = generate_key_pair(privates, publics, 31, 20)
            privates.append(p)
            publics.append(q)
        assert len(set(privates)) == 200
        assert len(set(publics)) == 200
        assert not set(privates) & set(publics)
