"""Search-versus-manual ownership of a submission's location fields.

The gate keeps a single ``LocationMode`` so the location sub-object is owned
by exactly one pathway at a time:

    SEARCHING --select()--> LOCATION_SELECTED --clear()--> SEARCHING
    SEARCHING --enable_manual()--> MANUAL_ENTRY --clear()--> SEARCHING
    MANUAL_ENTRY --select()--> LOCATION_SELECTED   (manual values overwritten)

Switching pathway always clears what the other pathway wrote.
"""

import re
from collections.abc import Callable

from loguru import logger

from pledge_form.lib.locations.resolver import LocationResolver
from pledge_form.lib.locations.types import (
    LOCATION_FIELDS,
    SEARCH_ONLY_FIELDS,
    CanonicalLocation,
    LocationMode,
    LocationRecord,
)
from pledge_form.schemas.submission import PartialSubmission

ZIPCODE_LENGTH = 5

_NON_DIGIT = re.compile(r"\D")


class LocationModeError(RuntimeError):
    """Raised when a location operation is not allowed in the current mode."""

    def __init__(self, mode: LocationMode, operation: str) -> None:
        self.mode = mode
        self.operation = operation
        super().__init__(f"{operation} is not allowed while in {mode.value}")


def sanitize_zipcode(value: str) -> str:
    """Keep digits only, capped at five characters."""
    return _NON_DIGIT.sub("", value or "")[:ZIPCODE_LENGTH]


class ManualOverrideGate:
    """Mediates how location values reach a ``PartialSubmission``.

    Args:
        submission: The session's submission; mutated in place.
        resolver: Resolver used to canonicalize selected records.
        on_location_resolved: Called with the full ``CanonicalLocation`` on
            every selection, even when the values did not change.
    """

    def __init__(
        self,
        submission: PartialSubmission,
        resolver: LocationResolver,
        on_location_resolved: Callable[[CanonicalLocation], None] | None = None,
    ) -> None:
        self._submission = submission
        self._resolver = resolver
        self._on_location_resolved = on_location_resolved
        self._mode = LocationMode.SEARCHING
        self._selected: CanonicalLocation | None = None

    @property
    def mode(self) -> LocationMode:
        return self._mode

    @property
    def selected(self) -> CanonicalLocation | None:
        """The canonical location currently owning the fields, if any."""
        return self._selected

    def hydrate(self) -> LocationMode:
        """Derive the starting mode from values already on the submission.

        An edited registration with a complete location is treated as a
        prior selection, so the user has to clear it before typing a
        different one.  An incomplete stored location opens in manual entry
        with its values kept, so the missing parts can be typed in.

        Returns:
            The resulting mode.
        """
        sub = self._submission
        values = [getattr(sub, name) for name in LOCATION_FIELDS]
        self._selected = None
        if all(values):
            self._selected = CanonicalLocation(
                district=sub.district,
                amphoe=sub.amphoe,
                province=sub.province,
                zipcode=sub.zipcode,
                region_type=sub.region_type,
            )
            self._mode = LocationMode.LOCATION_SELECTED
        elif any(values):
            self._mode = LocationMode.MANUAL_ENTRY
        else:
            self._mode = LocationMode.SEARCHING
        return self._mode

    def select(self, record: LocationRecord) -> CanonicalLocation:
        """Cascade a chosen record into the submission.

        Every location field is overwritten, including any values typed in
        manual mode.

        Args:
            record: Record picked from search results.

        Returns:
            The canonical location that was applied.
        """
        canonical = self._resolver.resolve(record)
        previous = self._mode
        self._write(canonical.as_fields())
        self._selected = canonical
        self._mode = LocationMode.LOCATION_SELECTED
        logger.debug("Location selected ({} -> {}): {}", previous.value, self._mode.value, canonical.label)

        if self._on_location_resolved is not None:
            self._on_location_resolved(canonical)
        return canonical

    def clear(self) -> None:
        """Erase all location fields and return to searching."""
        self._write(dict.fromkeys(LOCATION_FIELDS + SEARCH_ONLY_FIELDS, ""))
        self._selected = None
        self._mode = LocationMode.SEARCHING

    def enable_manual(self) -> None:
        """Switch to free typing of the location fields.

        Raises:
            LocationModeError: Unless currently searching with nothing selected.
        """
        if self._mode is not LocationMode.SEARCHING:
            raise LocationModeError(self._mode, "enable_manual")
        self._write(dict.fromkeys(LOCATION_FIELDS + SEARCH_ONLY_FIELDS, ""))
        self._mode = LocationMode.MANUAL_ENTRY

    def manual_input(self, field: str, value: str) -> str:
        """Write one typed location field straight to the submission.

        Args:
            field: One of ``district``, ``amphoe``, ``province``, ``zipcode``.
            value: Raw typed value.

        Returns:
            The value actually stored (zipcode is sanitized).

        Raises:
            LocationModeError: If not in manual mode.
            KeyError: If ``field`` is not a location field.
        """
        if self._mode is not LocationMode.MANUAL_ENTRY:
            raise LocationModeError(self._mode, "manual_input")
        if field not in LOCATION_FIELDS:
            raise KeyError(field)

        stored = sanitize_zipcode(value) if field == "zipcode" else value
        setattr(self._submission, field, stored)
        return stored

    def _write(self, values: dict[str, str]) -> None:
        for name, value in values.items():
            setattr(self._submission, name, value)
