"""Opaque API key generation with collision checks."""
import secrets
import string
from typing import Callable, Iterable

from hiscore.domain.errors import KeyGenerationExhausted

KEY_ALPHABET = string.ascii_letters + string.digits
DEFAULT_MAX_ATTEMPTS = 1000
MAX_KEY_LENGTH = 64


def generate_key(length: int) -> str:
    """Cryptographically random alphanumeric token."""
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))


def generate_unique_key(
    existing_keys: Iterable[str],
    length: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: Callable[[int], str] = generate_key,
) -> str:
    """Return a key of ``length`` chars that is not in ``existing_keys``.

    Collisions are regenerated. Running out of attempts means the key set is
    effectively full or corrupt, so it raises instead of looping forever.
    """
    if length < 1:
        raise ValueError(f"Key length must be positive, got {length}.")
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}.")

    taken = existing_keys if isinstance(existing_keys, (set, frozenset)) else set(existing_keys)
    for _ in range(max_attempts):
        candidate = generator(length)
        if candidate not in taken:
            return candidate
    raise KeyGenerationExhausted(
        f"No unique {length}-char key after {max_attempts} attempts."
    )


def generate_key_pair(
    existing_private: Iterable[str],
    existing_public: Iterable[str],
    private_length: int,
    public_length: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: Callable[[int], str] = generate_key,
) -> tuple[str, str]:
    """Generate a (private, public) pair for a new leaderboard.

    Each key is checked against its own namespace and the other one, and the
    public key never equals the private key it is paired with.
    """
    private_keys = set(existing_private)
    public_keys = set(existing_public)

    private_key = generate_unique_key(
        private_keys | public_keys, private_length, max_attempts, generator
    )
    public_key = generate_unique_key(
        private_keys | public_keys | {private_key}, public_length, max_attempts, generator
    )
    return private_key, public_key
