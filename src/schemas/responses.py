"""Response envelopes: the uniform action result and the structured error body."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from src.exceptions import AppException

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """Uniform outcome of a service operation.

    ``{"success": true, "data": ...}`` or ``{"success": false, "error": "..."}``.
    ``status_code`` follows the failure kind for the HTTP layer and is never
    serialized.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    status_code: int = Field(default=200, exclude=True)

    @classmethod
    def ok(cls, data: T | None = None) -> ActionResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, exc: AppException) -> ActionResult[T]:
        return cls(success=False, error=exc.message, status_code=exc.status_code)

    def to_body(self) -> dict[str, Any]:
        body = self.model_dump(mode="json")
        if body["data"] is None:
            body.pop("data")
        if body["error"] is None:
            body.pop("error")
        return body


class ErrorDetail(BaseModel):
    """A single field-level or contextual error detail."""

    field: str | None = None
    message: str


class ErrorContext(BaseModel):
    """Diagnostic context attached to failures raised outside the services."""

    code: str
    details: list[ErrorDetail] = []
    request_id: str = Field(alias="requestId")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Failure envelope produced by the application exception handlers."""

    success: bool = False
    error: str
    detail: ErrorContext
