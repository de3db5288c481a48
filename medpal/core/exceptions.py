"""Error taxonomy shared by the auth and notification services.

Delivery problems are deliberately absent here: a failed or unconfigured
channel is reported as a ``DeliveryResult`` value, never raised.
"""

from typing import Any, Dict, Optional


class MedPalError(Exception):
    """Base class for all errors raised by the MedPal core."""

    default_message = "MedPal error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(MedPalError):
    """Required input is missing or malformed. Surfaced to the caller verbatim."""

    default_message = "Invalid request"


class DuplicateUserError(MedPalError):
    default_message = "User already exists with this email"


class InvalidCredentialsError(MedPalError):
    """Login failed. Never says whether the email or the password was wrong."""

    default_message = "Invalid email or password"


class StoreError(MedPalError):
    """The external user store failed; raised by store implementations."""

    default_message = "User store unavailable"
