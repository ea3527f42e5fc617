"""Wiring of form sessions from application settings.

Builds the shared location resolver and backend adapters once, then opens
one ``FormSession`` plus ``FormStepMachine`` per user visit (empty for a new
registration, hydrated for an edit).
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from pledge_form.core.config import Settings
from pledge_form.core.scheduler import Scheduler
from pledge_form.lib.collaborators.http import HttpPhoneChecker, HttpRegistrationStore
from pledge_form.lib.locations.loader import load_location_index
from pledge_form.lib.locations.resolver import LocationResolver
from pledge_form.schemas.submission import PartialSubmission
from pledge_form.services.form_session import FormSession
from pledge_form.services.step_machine import FormStepMachine


@dataclass
class FormBackend:
    """HTTP collaborators shared by every session of a process."""

    phone_checker: HttpPhoneChecker
    store: HttpRegistrationStore

    async def aclose(self) -> None:
        await self.phone_checker.close()
        await self.store.close()


def create_resolver(settings: Settings) -> LocationResolver:
    """Load the reference table named by the settings and wrap it in a resolver."""
    index = load_location_index(settings.location_data_path)
    return LocationResolver(index)


def create_backend(settings: Settings) -> FormBackend:
    """Create the httpx-backed phone checker and registration store."""
    logger.info("Registration backend at {}", settings.backend_base_url)
    return FormBackend(
        phone_checker=HttpPhoneChecker(settings.backend_base_url, timeout=settings.backend_timeout),
        store=HttpRegistrationStore(settings.backend_base_url, timeout=settings.backend_timeout),
    )


def open_form(
    settings: Settings,
    resolver: LocationResolver,
    backend: FormBackend,
    *,
    record: dict[str, Any] | None = None,
    scheduler: Scheduler | None = None,
    **listeners: Any,
) -> tuple[FormSession, FormStepMachine]:
    """Open a form for a new registration or for editing ``record``.

    Args:
        settings: Application settings (search limit and debounce delay).
        resolver: Shared location resolver.
        backend: Shared backend collaborators.
        record: Stored registration (backend camelCase keys) to edit.
        scheduler: Scheduler for search debouncing; the running event loop by default.
        **listeners: ``on_search_results`` / ``on_location_resolved`` callbacks.

    Returns:
        The session and its step machine.
    """
    submission = PartialSubmission.from_record(record) if record is not None else PartialSubmission()
    session = FormSession(
        resolver,
        submission=submission,
        phone_checker=backend.phone_checker,
        scheduler=scheduler,
        search_delay=settings.search_debounce_seconds,
        search_limit=settings.search_limit,
        **listeners,
    )
    return session, FormStepMachine(session, backend.store)
