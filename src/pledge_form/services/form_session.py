"""Form session: the embedding UI's handle on one in-progress registration.

A session owns exactly one ``PartialSubmission`` from start (empty, or
hydrated from an existing record for edits) until it ends, either after a
successful submit or when the user abandons the form.  It routes field
changes, debounces location searches, mediates location ownership through
the ``ManualOverrideGate`` and keeps the current ``FieldErrorSet``.
"""

import uuid
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pledge_form.core.logging import redact_phone, session_logger
from pledge_form.core.scheduler import AsyncioScheduler, Debouncer, Scheduler
from pledge_form.lib.collaborators.base import PhoneChecker, TransportError
from pledge_form.lib.locations.gate import ManualOverrideGate
from pledge_form.lib.locations.resolver import DEFAULT_LIMIT, LocationResolver
from pledge_form.lib.locations.types import (
    LOCATION_FIELDS,
    SEARCH_ONLY_FIELDS,
    CanonicalLocation,
    LocationMode,
    LocationRecord,
)
from pledge_form.lib.validation.rules import is_valid_phone, parse_signer_count, sanitize_phone
from pledge_form.lib.validation.steps import FieldErrorSet, FormPolicy, StepValidator
from pledge_form.schemas.submission import PartialSubmission

if TYPE_CHECKING:
    from loguru import Logger

DEFAULT_SEARCH_DELAY = 0.3

_READ_ONLY_FIELDS = {"id", *SEARCH_ONLY_FIELDS}


class SessionEndedError(RuntimeError):
    """Raised when a mutation is attempted on a session that has ended."""


class FormSession:
    """One user's pass through the registration form.

    Args:
        resolver: Location resolver over the shared reference index.
        submission: Existing submission to edit; a fresh one is created when omitted.
        policy: Variant policy; derived from the submission (create/edit) when omitted.
        validator: Step validator; the default five-step form when omitted.
        phone_checker: Optional remote duplicate-phone lookup.
        scheduler: Scheduler used to debounce searches.
        search_delay: Debounce quiet period in seconds.
        search_limit: Maximum number of candidates per search.
        on_search_results: Called with each completed search's candidates.
        on_location_resolved: Called after a selection has been applied.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        *,
        submission: PartialSubmission | None = None,
        policy: FormPolicy | None = None,
        validator: StepValidator | None = None,
        phone_checker: PhoneChecker | None = None,
        scheduler: Scheduler | None = None,
        search_delay: float = DEFAULT_SEARCH_DELAY,
        search_limit: int = DEFAULT_LIMIT,
        on_search_results: Callable[[list[LocationRecord]], None] | None = None,
        on_location_resolved: Callable[[CanonicalLocation], None] | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex[:12]
        self.submission = submission if submission is not None else PartialSubmission()
        self.policy = policy or FormPolicy.for_submission(self.submission)
        self.validator = validator or StepValidator()

        self._resolver = resolver
        self._phone_checker = phone_checker
        self._search_limit = search_limit
        self._debouncer = Debouncer(scheduler or AsyncioScheduler(), search_delay)
        self._on_search_results = on_search_results
        self._on_location_listener = on_location_resolved
        self._log = session_logger(self.id)

        self._errors: FieldErrorSet = {}
        self._active = True
        self.search_results: list[LocationRecord] = []
        self.phone_duplicate: bool | None = None

        self.gate = ManualOverrideGate(self.submission, resolver, on_location_resolved=self.on_location_resolved)
        mode = self.gate.hydrate()
        self._log.info("Form session started ({}, location {})", "edit" if self.submission.is_edit else "create", mode)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def errors(self) -> Mapping[str, str]:
        """Current field errors (read-only view)."""
        return MappingProxyType(self._errors)

    @property
    def log(self) -> "Logger":
        """Logger bound to this session's id."""
        return self._log

    @property
    def location_mode(self) -> LocationMode:
        return self.gate.mode

    @property
    def search_pending(self) -> bool:
        """Whether a debounced search is waiting to run."""
        return self._debouncer.pending

    def end(self) -> None:
        """End the session; later async results are discarded."""
        if not self._active:
            return
        self._active = False
        self._debouncer.cancel()
        self.search_results = []
        self._log.info("Form session ended")

    # ------------------------------------------------------------------
    # Field changes and validation
    # ------------------------------------------------------------------

    def on_change(self, field: str, value: Any) -> None:
        """Apply a single field mutation coming from the UI.

        Location fields are only writable in manual entry mode; phone and
        signer inputs are sanitized the way their inputs are on screen.  The
        error set is left as is until the next ``validate``.

        Args:
            field: Submission field name.
            value: New raw value.

        Raises:
            SessionEndedError: If the session has ended.
            KeyError: If ``field`` is not an editable submission field.
            LocationModeError: If a location field is typed outside manual mode.
        """
        self._ensure_active()
        if field not in PartialSubmission.model_fields or field in _READ_ONLY_FIELDS:
            raise KeyError(field)

        if field in LOCATION_FIELDS:
            self.gate.manual_input(field, value)
        elif field == "phone_number":
            phone = sanitize_phone(str(value or ""), current=self.submission.phone_number)
            if phone != self.submission.phone_number:
                self.phone_duplicate = None
            self.submission.phone_number = phone
        elif field == "number_of_signers":
            self.submission.number_of_signers = parse_signer_count(value)
        else:
            setattr(self.submission, field, value)

    def on_location_resolved(self, location: CanonicalLocation) -> None:
        """Drop errors on the fields a selection just filled, then notify the listener."""
        filled = set(LOCATION_FIELDS)
        self._errors = {k: v for k, v in self._errors.items() if k not in filled}
        if self._on_location_listener is not None:
            self._on_location_listener(location)

    def validate(self, step: int) -> FieldErrorSet:
        """Recompute and store the error set for ``step``.

        Returns:
            A copy of the new error set; empty when the step passes.
        """
        errors = self.validator.validate(step, self.submission, self.policy)
        self._errors = errors
        return dict(errors)

    # ------------------------------------------------------------------
    # Location search and ownership
    # ------------------------------------------------------------------

    def search_input(self, query: str) -> None:
        """Handle a keystroke in the location search box.

        A blank query clears the candidates at once; anything else is
        searched after the debounce delay, replacing any search still waiting.
        """
        self._ensure_active()
        if not query or not query.strip():
            self._debouncer.cancel()
            self._set_results([])
            return
        self._debouncer.call(lambda: self._run_search(query))

    def select_location(self, record: LocationRecord) -> CanonicalLocation:
        """Apply a search candidate to the submission."""
        self._ensure_active()
        self._debouncer.cancel()
        self.search_results = []
        return self.gate.select(record)

    def clear_location(self) -> None:
        """Erase the location fields and return to searching."""
        self._ensure_active()
        self.gate.clear()

    def enable_manual_entry(self) -> None:
        """Switch to typing the location by hand (no record may be selected)."""
        self._ensure_active()
        self.gate.enable_manual()
        self._debouncer.cancel()
        self.search_results = []

    def manual_location_input(self, field: str, value: str) -> None:
        """Type one location field in manual mode."""
        self.on_change(field, value)

    def _run_search(self, query: str) -> None:
        if not self._active:
            return
        self._set_results(self._resolver.search(query, self._search_limit))

    def _set_results(self, results: list[LocationRecord]) -> None:
        self.search_results = results
        if self._on_search_results is not None:
            self._on_search_results(results)

    # ------------------------------------------------------------------
    # Advisory duplicate-phone check
    # ------------------------------------------------------------------

    async def check_phone(self) -> bool | None:
        """Ask the remote check whether the typed phone is already registered.

        The answer is advisory only.  It is discarded when the session ended
        or the phone number changed while the check was in flight.

        Returns:
            True/False when the check answered for the current number, else None.
        """
        phone = self.submission.phone_number
        if self._phone_checker is None or not is_valid_phone(phone):
            self.phone_duplicate = None
            return None

        try:
            exists = await self._phone_checker.exists(phone, exclude_id=self.submission.id)
        except TransportError as e:
            self._log.warning("Duplicate-phone check failed for {}: {}", redact_phone(phone), e.message)
            exists = None

        if not self._active or self.submission.phone_number != phone:
            self._log.debug("Discarding stale duplicate-phone result for {}", redact_phone(phone))
            return None

        self.phone_duplicate = exists
        return exists

    def _ensure_active(self) -> None:
        if not self._active:
            msg = f"Form session {self.id} has ended"
            raise SessionEndedError(msg)
