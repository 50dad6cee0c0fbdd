"""User-facing error state."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from culturaviva.contracts.enums import NavigationErrorCode, RecoveryAction


class ServiceError(BaseModel):
    """Structured, dismissible error shown to the user.

    Always carries at least one ``RecoveryAction`` so the UI never
    presents a dead end.
    """

    code: NavigationErrorCode = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    actions: list[RecoveryAction] = Field(..., min_length=1)
    details: dict[str, str | int | float | bool | None] | None = None
    dismissible: bool = True
    raised_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
