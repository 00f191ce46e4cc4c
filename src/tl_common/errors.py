"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Transfer
  9xxx: System

Every error also carries a ``kind``: the stable, machine-readable category
clients switch on (INVALID_REQUEST, NOT_FOUND, INSUFFICIENT_FUNDS, CONFLICT,
TIMEOUT, STORAGE_ERROR, ...).
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        kind: str = "INTERNAL",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.kind = kind
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409, "CONFLICT")


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401, "UNAUTHORIZED")


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            400,
            "INSUFFICIENT_FUNDS",
        )


class AccountNotFoundError(AppError):
    def __init__(self, detail: str = "some user was not found") -> None:
        super().__init__(2002, detail, 404, "NOT_FOUND")


# --- 3xxx: Transfer ---

class InvalidTransferError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, detail, 400, "INVALID_REQUEST")


class TransferConflictError(AppError):
    def __init__(self, attempts: int) -> None:
        super().__init__(
            3002,
            f"Transfer aborted by concurrent updates after {attempts} attempts",
            409,
            "CONFLICT",
        )


class TransferTimeoutError(AppError):
    def __init__(self, detail: str = "Transfer timed out before commit") -> None:
        super().__init__(3003, detail, 409, "TIMEOUT")


class TransferForbiddenError(AppError):
    def __init__(self) -> None:
        super().__init__(
            3004, "Transfers can only be made from your own account", 403, "FORBIDDEN"
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429, "RATE_LIMITED")


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class StorageError(AppError):
    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(9003, detail, 500, "STORAGE_ERROR")


class InvalidRequestError(AppError):
    def __init__(self, detail: str = "Invalid request") -> None:
        super().__init__(9004, detail, 400, "INVALID_REQUEST")
