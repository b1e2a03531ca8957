"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Failures are values, never exceptions escaping the service boundary.
The CLI and any future front end consume this type.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Failure kinds a caller can receive."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    NAME_TAKEN = "NAME_TAKEN"
    ALREADY_ON_TEAM = "ALREADY_ON_TEAM"
    NOT_ON_TEAM = "NOT_ON_TEAM"
    NO_DATA = "NO_DATA"
    TRANSIENT_FAILURE = "TRANSIENT_FAILURE"

    @property
    def retryable(self) -> bool:
        """Only transient backing-store failures are worth retrying as-is."""
        return self is ErrorCode.TRANSIENT_FAILURE


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        return bool(self.detail.get("retryable", False))


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"log_grade"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(cls, op: str, data: dict[str, Any] | None = None) -> ServiceResult:
        return cls(ok=True, op=op, data=data or {})

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        """Build a failed result; ``detail["retryable"]`` follows *code*."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(
                code=code.value,
                message=message,
                detail={**detail, "retryable": code.retryable},
            ),
        )
