from __future__ import annotations

import bcrypt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

_argon2_hasher = PasswordHasher()

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_password_hash(value: str) -> bool:
    return value.startswith("$argon2") or value.startswith(_BCRYPT_PREFIXES)


def hash_password(password: str, scheme: str = "argon2") -> str:
    if not password:
        raise ValueError("Password must not be empty")

    if scheme == "argon2":
        return _argon2_hasher.hash(password)
    if scheme == "bcrypt":
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
    raise ValueError(f"Unsupported scheme: {scheme}")


def verify_password(password: str, stored: str) -> bool:
    """Check ``password`` against a stored credential.

    Stored values that are not argon2/bcrypt hashes are legacy cleartext
    credentials and are compared exactly.
    """
    if stored.startswith("$argon2"):
        try:
            return _argon2_hasher.verify(stored, password)
        except (VerifyMismatchError, InvalidHashError):
            return False
    if stored.startswith(_BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False
    return password == stored
