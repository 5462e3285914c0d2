from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from carehome.domain.constants import StaffRole
from carehome.domain.models.staff import Staff
from carehome.domain.rules.validation import format_name, is_valid_email, is_valid_id, is_valid_phone


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class StaffCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    staff_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = ""
    phone: str = ""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: StaffRole
    qualification: str = ""

    @field_validator("staff_id")
    @classmethod
    def _validate_staff_id(cls, v: str) -> str:
        if not is_valid_id(v):
            raise ValueError("Staff id must be 3-10 letters or digits")
        return v.upper()

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, v: str) -> str:
        return format_name(v)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        if v and not is_valid_email(v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, v: str) -> str:
        if v and not is_valid_phone(v):
            raise ValueError("Phone must be 10-15 digits")
        return v

    def to_staff(self) -> Staff:
        return Staff(
            staff_id=self.staff_id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            username=self.username,
            password=self.password,
            role=self.role,
            qualification=self.qualification,
        )


class SessionContext(BaseModel):
    staff_id: str
    username: str
    role: StaffRole
    on_duty: bool
    today_shifts: list[str] = Field(default_factory=list)
