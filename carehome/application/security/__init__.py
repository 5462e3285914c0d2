from carehome.application.security.authenticator import (
    Authenticator,
    HashedAuthenticator,
    PlaintextAuthenticator,
    build_authenticator,
)
from carehome.application.security.role_matrix import (
    Capability,
    can_add_staff,
    can_discharge,
    can_manage_shifts,
    has_capability,
)

__all__ = [
    "Authenticator",
    "Capability",
    "HashedAuthenticator",
    "PlaintextAuthenticator",
    "build_authenticator",
    "can_add_staff",
    "can_discharge",
    "can_manage_shifts",
    "has_capability",
]
