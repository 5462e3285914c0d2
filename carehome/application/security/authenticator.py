from __future__ import annotations

from typing import Protocol

from carehome.domain.models.staff import Staff
from carehome.infrastructure.security.password_hash import hash_password, is_password_hash, verify_password


class Authenticator(Protocol):
    def verify(self, staff: Staff, password: str) -> bool: ...

    def prepare(self, password: str) -> str:
        """Turn a new password into the credential value stored on the staff record."""
        ...


class PlaintextAuthenticator:
    """Exact-match comparison of cleartext credentials."""

    def verify(self, staff: Staff, password: str) -> bool:
        return staff.password == password

    def prepare(self, password: str) -> str:
        return password


class HashedAuthenticator:
    def __init__(self, scheme: str = "argon2") -> None:
        self.scheme = scheme

    def verify(self, staff: Staff, password: str) -> bool:
        return verify_password(password, staff.password)

    def prepare(self, password: str) -> str:
        if is_password_hash(password):
            return password
        return hash_password(password, scheme=self.scheme)


def build_authenticator(scheme: str) -> Authenticator:
    if scheme == "plaintext":
        return PlaintextAuthenticator()
    return HashedAuthenticator(scheme=scheme)
