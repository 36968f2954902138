"""Domain-specific exceptions"""

from typing import List, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Required input is missing or malformed"""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class NotAuthenticatedError(DomainException):
    """No active session for a protected operation"""

    pass


class AuthProviderError(DomainException):
    """Auth provider rejected the request or is unavailable"""

    def __init__(self, message: str, unavailable: bool = False):
        super().__init__(message)
        self.unavailable = unavailable


class RoutingAPIError(DomainException):
    """Geocoding/routing provider returned an error or is unavailable"""

    pass


class RouteNotFoundError(DomainException):
    """No drivable route between the selected points"""

    pass


class RecordNotFoundError(DomainException):
    """Record does not exist or belongs to another user"""

    pass
