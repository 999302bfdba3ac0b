"""
Service Errors

Error taxonomy shared by every module. Services raise these; the handlers
registered in ``main`` translate them into JSON responses of the form
``{"error": <code>, "message": <text>}``.
"""

from fastapi import status


class ServiceError(Exception):
    """Base exception for service-layer errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.headers = headers
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error_code, "message": self.message}


class UnauthenticatedError(ServiceError):
    """Missing, malformed or expired credential."""

    def __init__(self, message: str = "Unauthorized access."):
        super().__init__(
            message=message,
            error_code="UNAUTHENTICATED",
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(ServiceError):
    """Authenticated principal lacks the required role or ownership."""

    def __init__(self, message: str = "Forbidden access."):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class NotFoundError(ServiceError):
    """Requested entity does not exist."""

    entity = "Resource"

    def __init__(self, identifier: object | None = None):
        message = (
            f"{self.entity} {identifier} not found" if identifier else f"{self.entity} not found"
        )
        super().__init__(
            message=message,
            error_code=f"{self.entity.upper()}_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class InvalidRequestError(ServiceError):
    """Missing or invalid fields."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class ConflictError(ServiceError):
    """Write would violate a uniqueness or state invariant."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_409_CONFLICT,
        )


class PaymentGatewayError(ServiceError):
    """The payment provider call failed."""

    def __init__(self, message: str = "Payment provider request failed. Please try again."):
        super().__init__(
            message=message,
            error_code="PAYMENT_GATEWAY_ERROR",
            status_code=status.HTTP_502_BAD_GATEWAY,
        )


class InternalStoreError(ServiceError):
    """Unexpected database failure."""

    def __init__(self, message: str = "An internal error occurred."):
        super().__init__(
            message=message,
            error_code="INTERNAL_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


__all__ = [
    "ServiceError",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "InvalidRequestError",
    "ConflictError",
    "PaymentGatewayError",
    "InternalStoreError",
]
