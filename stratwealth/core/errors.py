"""
Application error hierarchy.
Services raise these; the global handler in main turns them into JSON responses.
"""
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base business error carrying the HTTP status it maps to."""

    status_code: int = 400

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class ValidationError(AppError):
    status_code = 400


class InsufficientFundsError(AppError):
    status_code = 400

    def __init__(self, detail: str = "Insufficient funds to complete this transaction"):
        super().__init__(detail)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        suffix = f" with ID {resource_id}" if resource_id else ""
        super().__init__(f"{resource}{suffix} not found")


class ConflictError(AppError):
    status_code = 409


class UnauthorizedError(AppError):
    status_code = 401

    def __init__(self, detail: str = "You must be logged in to access this resource"):
        super().__init__(detail)


class ForbiddenError(AppError):
    status_code = 403

    def __init__(self, detail: str = "You don't have permission to access this resource"):
        super().__init__(detail)


class KycRequiredError(ForbiddenError):
    def __init__(self, detail: str = "KYC verification required to complete this action"):
        super().__init__(detail)

    def to_payload(self) -> Dict[str, Any]:
        return {"detail": self.detail, "requires_kyc": True}
