"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Product
  9xxx: System

Backing-store failures (SQLAlchemy errors) are NOT wrapped here; they
propagate to the caller unchanged.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


# --- 1xxx: Product ---

class InvalidProductError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid product: {detail}")


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail)
