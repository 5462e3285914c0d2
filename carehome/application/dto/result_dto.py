from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from carehome.application.errors import CareHomeError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CommandResult(Generic[T]):
    ok: bool
    value: T | None = None
    error: CareHomeError | None = None

    @classmethod
    def success(cls, value: T | None = None) -> CommandResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: CareHomeError) -> CommandResult[T]:
        return cls(ok=False, error=error)

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def details(self) -> dict[str, Any]:
        return self.error.details() if self.error is not None else {}
