from __future__ import annotations


class ApiError(Exception):
    def __init__(
        self,
        *,
        code: str,
        message: str,
        error_class: str,
        retryable: bool,
        http_status: int,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.error_class = error_class
        self.retryable = retryable
        self.http_status = http_status


class ValidationError(ApiError):
    def __init__(self, message: str, *, code: str = "REQ_VALIDATION_FAILED") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="validation",
            retryable=False,
            http_status=400,
        )


class UnauthorizedError(ApiError):
    def __init__(self, message: str, *, code: str = "AUTH_UNAUTHORIZED") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="security_sensitive",
            retryable=False,
            http_status=401,
        )


class NotFoundError(ApiError):
    def __init__(self, message: str, *, code: str = "REQ_NOT_FOUND") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="validation",
            retryable=False,
            http_status=404,
        )


class ConflictError(ApiError):
    def __init__(self, message: str, *, code: str = "REQ_CONFLICT") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="business_rule",
            retryable=False,
            http_status=409,
        )


class UpstreamError(ApiError):
    def __init__(self, message: str, *, code: str = "PAYMENT_UPSTREAM_ERROR") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="transient",
            retryable=True,
            http_status=502,
        )


class StorageError(ApiError):
    def __init__(self, message: str, *, code: str = "STORAGE_WRITE_FAILED") -> None:
        super().__init__(
            code=code,
            message=message,
            error_class="persistence",
            retryable=False,
            http_status=500,
        )
