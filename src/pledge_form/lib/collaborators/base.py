"""Interfaces for the external services the form core talks to.

The form core never persists anything itself.  It consults a phone-number
existence check for advisory duplicate warnings and hands a validated
submission to a registration store on submit.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from pledge_form.schemas.submission import PartialSubmission


class TransportError(Exception):
    """Raised when a backend call fails at the transport or service level.

    Distinguishes network failures, timeouts and server errors from an
    answered request (which yields a result, possibly unsuccessful).

    Args:
        service: Name of the failing collaborator.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the backend.
    """

    def __init__(self, service: str, message: str, status_code: int | None = None) -> None:
        self.service = service
        self.message = message
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class ConflictError(Exception):
    """A submission rejected by the backend (duplicate phone, bad format, ...).

    Args:
        message: Backend-provided reason.
        duplicate_phone: Whether the rejection is a phone-number conflict.
    """

    def __init__(self, message: str, *, duplicate_phone: bool = False) -> None:
        self.message = message
        self.duplicate_phone = duplicate_phone
        super().__init__(message)


@dataclass
class PersistenceResult:
    """Outcome of a create or update call.

    Attributes:
        success: Whether the backend accepted the submission.
        data: Stored record returned by the backend on success.
        error: Backend-provided reason on rejection.
    """

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None

    def raise_for_conflict(self) -> None:
        """Raise ``ConflictError`` if the backend rejected the submission."""
        if self.success:
            return
        message = self.error or "The registration could not be saved"
        raise ConflictError(message, duplicate_phone=is_duplicate_phone_error(message))


# Markers the backend uses when rejecting an already-registered phone number
_DUPLICATE_PHONE_MARKERS = (("เบอร์โทรศัพท์", "ถูกใช้แล้ว"), ("phone", "already"))


def is_duplicate_phone_error(message: str) -> bool:
    """Recognize a backend rejection caused by an already-used phone number."""
    lowered = message.lower()
    return any(all(marker in lowered for marker in markers) for markers in _DUPLICATE_PHONE_MARKERS)


class PhoneChecker(Protocol):
    """Remote lookup of whether a phone number is already registered."""

    async def exists(self, phone: str, exclude_id: int | None = None) -> bool:
        """Check whether ``phone`` belongs to another registration.

        Args:
            phone: Ten-digit phone number.
            exclude_id: Registration to ignore (the one being edited).

        Returns:
            True if another registration uses the number.

        Raises:
            TransportError: On transport or service errors.
        """
        ...


class RegistrationStore(Protocol):
    """Persistence of submitted registrations."""

    async def create(self, submission: PartialSubmission) -> PersistenceResult:
        """Store a new registration.

        Raises:
            TransportError: On transport or service errors.
        """
        ...

    async def update(self, registration_id: int, submission: PartialSubmission) -> PersistenceResult:
        """Replace an existing registration.

        Raises:
            TransportError: On transport or service errors.
        """
        ...
