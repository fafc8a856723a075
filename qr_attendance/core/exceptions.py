from typing import Any, Optional


class ProvisioningError(Exception):
    """Base error for account provisioning; rendered as 400 {error, details}."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}


class MissingField(ProvisioningError):
    """A required field was absent or empty. Raised before any side effect."""


class AuthError(ProvisioningError):
    """The auth directory rejected an account creation or deletion."""


class StoreError(ProvisioningError):
    """The profile store rejected a write."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details)
        # Set when the compensating delete after this failure also failed
        self.compensation_error: Optional[AuthError] = None
