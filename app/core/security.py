"""Password hashing and credential input validation."""

import re

import bcrypt

# Bcrypt cost (rounds); overridable via the BCRYPT_ROUNDS setting.
BCRYPT_ROUNDS = 10

PASSWORD_MIN_LEN = 6
EMAIL_MAX_LEN = 255

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def is_valid_email(email: str) -> bool:
    """Loose address shape check: something@something.tld, no whitespace."""
    return len(email) <= EMAIL_MAX_LEN and EMAIL_PATTERN.match(email) is not None
