"""Step navigation and submission for a form session."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pledge_form.lib.collaborators.base import ConflictError, RegistrationStore, TransportError
from pledge_form.lib.validation.steps import FieldErrorSet, StepDescriptor
from pledge_form.services.form_session import FormSession

INCOMPLETE_MESSAGE = "Please complete all required fields"
DUPLICATE_PHONE_MESSAGE = "This phone number is already registered. Please use a different number"
TRANSPORT_ERROR_MESSAGE = "Could not reach the server. Please try again"


class SubmitStatus(StrEnum):
    """Outcome of a submit attempt."""

    SUCCESS = "success"
    INCOMPLETE = "incomplete"
    NOT_AT_FINAL_STEP = "not_at_final_step"
    CONFLICT = "conflict"
    TRANSPORT_ERROR = "transport_error"
    IGNORED = "ignored"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class NavigationResult:
    """Result of ``next``, ``prev`` or ``go_to``.

    Attributes:
        moved: Whether the current step changed.
        step: Current step after the call.
        errors: Errors blocking a forward move.
        message: Aggregate user-facing message when blocked.
    """

    moved: bool
    step: int
    errors: FieldErrorSet = field(default_factory=dict)
    message: str | None = None

    @property
    def incomplete(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of ``submit``.

    Attributes:
        status: What happened.
        message: One user-facing message for failures.
        data: Stored record returned by the backend on success.
        errors: Field errors of the first failing step (``INCOMPLETE`` only).
        failed_step: Ordinal of that step.
    """

    status: SubmitStatus
    message: str | None = None
    data: dict[str, Any] | None = None
    errors: FieldErrorSet = field(default_factory=dict)
    failed_step: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == SubmitStatus.SUCCESS


class FormStepMachine:
    """Gates movement through the form's steps on validation.

    Args:
        session: The session whose submission is being filled in.
        store: Registration store used on submit.
    """

    def __init__(self, session: FormSession, store: RegistrationStore) -> None:
        self.session = session
        self._store = store
        self._validator = session.validator
        self._step = 1
        self._submitting = False

    @property
    def step(self) -> int:
        return self._step

    @property
    def total_steps(self) -> int:
        return self._validator.total_steps

    @property
    def descriptor(self) -> StepDescriptor:
        return self._validator.steps[self._step - 1]

    @property
    def is_final_step(self) -> bool:
        return self._step == self.total_steps

    @property
    def submitting(self) -> bool:
        return self._submitting

    def next(self) -> NavigationResult:
        """Advance one step if the current step validates."""
        errors = self.session.validate(self._step)
        if errors:
            return NavigationResult(moved=False, step=self._step, errors=errors, message=INCOMPLETE_MESSAGE)

        previous = self._step
        self._step = min(self._step + 1, self.total_steps)
        return NavigationResult(moved=self._step != previous, step=self._step)

    def prev(self) -> NavigationResult:
        """Go back one step. Never validates."""
        previous = self._step
        self._step = max(self._step - 1, 1)
        return NavigationResult(moved=self._step != previous, step=self._step)

    def go_to(self, step: int) -> NavigationResult:
        """Jump to ``step`` from the step indicator.

        Backward jumps always succeed.  A forward jump succeeds only when
        every step before the target validates; otherwise the machine moves
        to the first failing step and reports its errors.

        Raises:
            ValueError: If ``step`` is outside ``1..total_steps``.
        """
        if not 1 <= step <= self.total_steps:
            msg = f"Step must be between 1 and {self.total_steps}, got {step}"
            raise ValueError(msg)

        if step <= self._step:
            previous = self._step
            self._step = step
            return NavigationResult(moved=step != previous, step=step)

        failure = self._validator.first_invalid_step(self.session.submission, self.session.policy, through=step - 1)
        if failure is not None:
            failed_step, _ = failure
            previous = self._step
            self._step = failed_step
            errors = self.session.validate(failed_step)
            return NavigationResult(
                moved=self._step != previous, step=self._step, errors=errors, message=INCOMPLETE_MESSAGE
            )

        previous = self._step
        self._step = step
        return NavigationResult(moved=step != previous, step=step)

    async def submit(self) -> SubmitOutcome:
        """Validate every step and hand the submission to the store.

        Only one submit may be in flight; a second call while pending is
        ignored without touching the store.  A result that arrives after the
        session ended is discarded.
        """
        if self._submitting:
            return SubmitOutcome(SubmitStatus.IGNORED)
        if not self.session.active:
            return SubmitOutcome(SubmitStatus.DISCARDED)
        if not self.is_final_step:
            return SubmitOutcome(SubmitStatus.NOT_AT_FINAL_STEP, message=INCOMPLETE_MESSAGE)

        session = self.session
        failure = self._validator.first_invalid_step(session.submission, session.policy)
        if failure is not None:
            failed_step, errors = failure
            session.validate(failed_step)
            return SubmitOutcome(
                SubmitStatus.INCOMPLETE, message=INCOMPLETE_MESSAGE, errors=errors, failed_step=failed_step
            )

        snapshot = session.submission.model_copy()
        log = session.log
        self._submitting = True
        try:
            if snapshot.id is not None:
                log.info("Updating registration {}", snapshot.id)
                result = await self._store.update(snapshot.id, snapshot)
            else:
                log.info("Creating registration")
                result = await self._store.create(snapshot)
            result.raise_for_conflict()
        except ConflictError as e:
            if not session.active:
                return SubmitOutcome(SubmitStatus.DISCARDED)
            log.info("Submission rejected (duplicate phone: {})", e.duplicate_phone)
            if e.duplicate_phone:
                session.phone_duplicate = True
                return SubmitOutcome(SubmitStatus.CONFLICT, message=DUPLICATE_PHONE_MESSAGE)
            return SubmitOutcome(SubmitStatus.CONFLICT, message=e.message)
        except TransportError as e:
            if not session.active:
                return SubmitOutcome(SubmitStatus.DISCARDED)
            log.warning("Submission failed: {}", e)
            return SubmitOutcome(SubmitStatus.TRANSPORT_ERROR, message=TRANSPORT_ERROR_MESSAGE)
        finally:
            self._submitting = False

        if not session.active:
            log.info("Discarding submit result for ended session")
            return SubmitOutcome(SubmitStatus.DISCARDED)

        session.end()
        return SubmitOutcome(SubmitStatus.SUCCESS, data=result.data)
