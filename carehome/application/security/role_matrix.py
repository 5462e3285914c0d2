from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

from carehome.domain.constants import StaffRole

Capability = Literal[
    "check_patient",
    "add_prescription",
    "administer_medication",
    "move_patient",
    "add_patient",
    "add_staff",
    "discharge_patient",
    "manage_shifts",
]


@dataclass(frozen=True)
class RoleCapabilities:
    allowed: frozenset[str]
    denied: frozenset[str]
    # Applies to actions in neither set.
    default: bool


_ROLE_CAPABILITIES: Final[dict[StaffRole, RoleCapabilities]] = {
    StaffRole.DOCTOR: RoleCapabilities(
        allowed=frozenset({"check_patient", "add_prescription"}),
        denied=frozenset(
            {"administer_medication", "move_patient", "add_patient", "add_staff", "discharge_patient"}
        ),
        default=False,
    ),
    StaffRole.NURSE: RoleCapabilities(
        allowed=frozenset({"check_patient", "administer_medication", "move_patient"}),
        denied=frozenset({"add_prescription", "add_patient", "add_staff", "discharge_patient"}),
        default=False,
    ),
    StaffRole.MANAGER: RoleCapabilities(
        allowed=frozenset({"add_staff", "add_patient", "discharge_patient", "move_patient", "manage_shifts"}),
        denied=frozenset({"add_prescription", "administer_medication"}),
        default=True,
    ),
}


def has_capability(role: StaffRole | str, action: str) -> bool:
    table = _ROLE_CAPABILITIES[StaffRole(role)]
    action = action.lower()
    if action in table.denied:
        return False
    if action in table.allowed:
        return True
    return table.default


def can_manage_shifts(role: StaffRole | str) -> bool:
    return has_capability(role, "manage_shifts")


def can_add_staff(role: StaffRole | str) -> bool:
    return has_capability(role, "add_staff")


def can_discharge(role: StaffRole | str) -> bool:
    return has_capability(role, "discharge_patient")
