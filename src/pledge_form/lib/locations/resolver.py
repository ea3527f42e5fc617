"""Substring search and canonical resolution over a ``LocationIndex``.

Matching is deliberately unranked: a record matches when the query is a
case-insensitive substring of its district, amphoe or province name, and
matches are returned in table order.
"""

from loguru import logger

from pledge_form.lib.locations.index import LocationIndex
from pledge_form.lib.locations.types import CanonicalLocation, LocationRecord

DEFAULT_LIMIT = 10


def normalize_zipcode(value: int | str | None) -> str:
    """Render a stored postal code as a digit string (empty when missing)."""
    if value is None:
        return ""
    return str(value).strip()


class LocationResolver:
    """Search and resolve administrative divisions.

    Args:
        index: Reference index to read from.
    """

    def __init__(self, index: LocationIndex) -> None:
        self._index = index

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[LocationRecord]:
        """Return up to ``limit`` records whose names contain ``query``.

        Args:
            query: Free-text query typed by the user.
            limit: Maximum number of records to return.

        Returns:
            Matching records in index order.  Empty for a blank query, a
            non-positive limit, an unbuilt index, or no matches.
        """
        needle = (query or "").strip().lower()
        if not needle or limit <= 0:
            return []
        if not self._index.is_built:
            logger.debug("Location search on an unbuilt index")
            return []

        try:
            results: list[LocationRecord] = []
            for record, keys in zip(self._index.records, self._index.search_keys, strict=True):
                if any(needle in key for key in keys):
                    results.append(record)
                    if len(results) >= limit:
                        break
            return results
        except Exception:
            logger.exception("Location search failed")
            return []

    @staticmethod
    def resolve(record: LocationRecord) -> CanonicalLocation:
        """Produce the canonical location for a selected record.

        Args:
            record: Record chosen from search results.

        Returns:
            CanonicalLocation with the stored names verbatim and the postal
            code as a string.
        """
        return CanonicalLocation(
            district=record.district,
            amphoe=record.amphoe,
            province=record.province,
            zipcode=normalize_zipcode(record.zipcode),
            region_type=record.region_type,
        )
