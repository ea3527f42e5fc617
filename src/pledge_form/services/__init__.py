"""Form services: sessions, step navigation and submission.

Public API:
    - FormSession: One in-progress registration and its location search
    - FormStepMachine: Validation-gated step navigation and submit
    - SubmitStatus / SubmitOutcome / NavigationResult: Navigation and submit results
    - open_form / create_resolver / create_backend: Settings-driven wiring
"""

from pledge_form.services.form_service import FormBackend, create_backend, create_resolver, open_form
from pledge_form.services.form_session import FormSession, SessionEndedError
from pledge_form.services.step_machine import (
    FormStepMachine,
    NavigationResult,
    SubmitOutcome,
    SubmitStatus,
)

__all__ = [
    "FormBackend",
    "FormSession",
    "FormStepMachine",
    "NavigationResult",
    "SessionEndedError",
    "SubmitOutcome",
    "SubmitStatus",
    "create_backend",
    "create_resolver",
    "open_form",
]
