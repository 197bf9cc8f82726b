"""Password hashing utilities using bcrypt.

Uses passlib with bcrypt for secure password hashing.
"""

from functools import lru_cache

from passlib.context import CryptContext

# bcrypt work factor
DEFAULT_ROUNDS = 12


@lru_cache(maxsize=4)
def _pwd_context(rounds: int) -> CryptContext:
    """Password hashing context using bcrypt at the given work factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: The plaintext password to verify.
        hashed_password: The bcrypt hash to verify against.

    Returns:
        True if the password matches, False otherwise (including malformed hashes).
    """
    try:
        return _pwd_context(DEFAULT_ROUNDS).verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Generate a bcrypt hash of a password.

    Args:
        password: The plaintext password to hash.
        rounds: bcrypt work factor (log2 of the iteration count).

    Returns:
        The bcrypt hash of the password.
    """
    return _pwd_context(rounds).hash(password)
