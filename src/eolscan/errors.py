from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pydantic


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    HTTP_ERROR = "HTTP_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class EolScanError(Exception):
    """Base class for every expected failure raised by the catalog client.

    The analyzer catches these at the per-product boundary and records them
    in the report; single-fetch callers receive them unchanged.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ApiError(EolScanError):
    """Network or HTTP status failure, including exhausted rate-limit retries."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        code: ErrorCode | None = None,
        product: str | None = None,
        release: str | None = None,
    ) -> None:
        if code is None:
            code = ErrorCode.NOT_FOUND if status_code == 404 else ErrorCode.HTTP_ERROR
        super().__init__(code, message)
        self.status_code = status_code
        self.product = product
        self.release = release

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status_code"] = self.status_code
        if self.product is not None:
            data["product"] = self.product
        if self.release is not None:
            data["release"] = self.release
        return data


class ValidationError(EolScanError):
    """The response payload did not match the shape expected for its endpoint."""

    def __init__(self, message: str, cause: pydantic.ValidationError | None = None) -> None:
        if cause is not None:
            details = ", ".join(
                f"[{'.'.join(str(loc) for loc in err['loc'])}] {err['msg']}"
                for err in cause.errors()
            )
            message = f"{message}: {details}"
        super().__init__(ErrorCode.VALIDATION_FAILED, message)
        self.cause = cause
