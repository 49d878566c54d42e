"""Uniform result of a state manager operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from core.exceptions import AppException, ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """``success`` with ``data``, or failure with ``error``. Never raised."""

    success: bool
    data: T | None = None
    error: AppException | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: AppException) -> "OperationResult[T]":
        return cls(success=False, error=error)

    @property
    def error_code(self) -> ErrorCode | None:
        return self.error.error_code if self.error else None

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error else None
