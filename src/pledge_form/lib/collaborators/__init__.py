"""External collaborators: phone-number check and registration store.

Public API:
    - PhoneChecker / RegistrationStore: Collaborator protocols
    - PersistenceResult: Create/update outcome
    - TransportError / ConflictError: Failure taxonomy
    - HttpPhoneChecker / HttpRegistrationStore: httpx-backed adapters
"""

from pledge_form.lib.collaborators.base import (
    ConflictError,
    PersistenceResult,
    PhoneChecker,
    RegistrationStore,
    TransportError,
    is_duplicate_phone_error,
)
from pledge_form.lib.collaborators.http import HttpPhoneChecker, HttpRegistrationStore

__all__ = [
    "ConflictError",
    "HttpPhoneChecker",
    "HttpRegistrationStore",
    "PersistenceResult",
    "PhoneChecker",
    "RegistrationStore",
    "TransportError",
    "is_duplicate_phone_error",
]
