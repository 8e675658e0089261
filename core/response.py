# core/response.py

"""
Structured results returned by `LedgerStore` operations, the reconciler, and the snapshot store.

Nothing in the engine raises for an expected failure. A missing id, a rejected field value, a malformed
import, or a failed disk write all come back as a failed `Response` whose `error` names the category.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    # the referenced course, graded item, or trash record is not live
    NOT_FOUND = "NOT_FOUND"

    # a record is missing a field it cannot be built without
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # wrong type, unknown field, or unparseable structure
    INVALID_INPUT = "INVALID_INPUT"

    # out of bounds or incorrectly formatted value
    INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"

    # import payload without a course object or a graded items list
    MALFORMED_IMPORT = "MALFORMED_IMPORT"

    # the snapshot collaborator could not write
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class Response:
    """
    Outcome of one engine operation.

    Attributes:
        success (bool): Whether the operation did what was asked.
        detail (str | None): Human-readable explanation.
        error (ErrorCode | str | None): Failure category, None on success.
        status_code (int | None): HTTP-style code: 200, 400, or 404 for a missing id.
        data (dict): Operation-specific payload. Store operations always include "ledger".
    """

    def __init__(
        self,
        success: bool,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = None,
        data: dict | None = None,
    ):
        self._success = success
        self._detail = detail
        self._error = error
        self._status_code = status_code
        self._data = dict(data) if data else {}

    # === properties ===

    @property
    def success(self) -> bool:
        return self._success

    @property
    def detail(self) -> str | None:
        return self._detail

    @property
    def error(self) -> ErrorCode | str | None:
        return self._error

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def data(self) -> dict:
        return self._data

    @property
    def ledger(self) -> Any:
        """The ledger current after the operation, if the operation reports one."""
        return self._data.get("ledger")

    @property
    def record(self) -> Any:
        """The record created, updated, found, or trashed, if any."""
        return self._data.get("record")

    # === constructors ===

    @classmethod
    def succeed(
        cls,
        detail: str | None = None,
        status_code: int | None = 200,
        data: dict | None = None,
    ) -> Response:
        return cls(True, detail=detail, status_code=status_code, data=data)

    @classmethod
    def fail(
        cls,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = 400,
        data: dict | None = None,
    ) -> Response:
        return cls(False, detail=detail, error=error, status_code=status_code, data=data)

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Response({self._success}, {self._error}, {self._detail!r})"

    def __str__(self) -> str:
        if self._success:
            return f"Success: {self._detail or ''}"

        error = self._error.value if isinstance(self._error, ErrorCode) else self._error or ""
        return f"Error: {error}: {self._detail}" if self._detail else f"Error: {error}"
