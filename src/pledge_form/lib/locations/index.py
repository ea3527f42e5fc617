"""Immutable in-memory index over the administrative-division table."""

from collections.abc import Iterable

from loguru import logger

from pledge_form.lib.locations.types import LocationRecord


class IndexAlreadyBuiltError(RuntimeError):
    """Raised when ``LocationIndex.build`` is called on an index that already holds records."""


class LocationIndex:
    """Read-only reference set of ``LocationRecord`` entries.

    The index is built exactly once, either by passing records to the
    constructor or by a single later call to ``build()``.  Records keep the
    order of the source table; lower-cased search keys are computed at build
    time so lookups do not re-normalize every record.

    Args:
        records: Optional records to build the index from immediately.
    """

    def __init__(self, records: Iterable[LocationRecord] | None = None) -> None:
        self._records: tuple[LocationRecord, ...] = ()
        self._keys: tuple[tuple[str, str, str], ...] = ()
        self._built = False
        if records is not None:
            self.build(records)

    def build(self, records: Iterable[LocationRecord]) -> None:
        """Populate the index.

        Args:
            records: Records in source-table order.

        Raises:
            IndexAlreadyBuiltError: If the index was already built.
        """
        if self._built:
            msg = "LocationIndex has already been built"
            raise IndexAlreadyBuiltError(msg)

        self._records = tuple(records)
        self._keys = tuple((r.district.lower(), r.amphoe.lower(), r.province.lower()) for r in self._records)
        self._built = True
        logger.debug("Location index built with {} records", len(self._records))

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def records(self) -> tuple[LocationRecord, ...]:
        return self._records

    @property
    def search_keys(self) -> tuple[tuple[str, str, str], ...]:
        """Lower-cased ``(district, amphoe, province)`` per record, aligned with ``records``."""
        return self._keys

    def __len__(self) -> int:
        return len(self._records)
