"""Locations library: administrative-division lookup and location ownership.

Public API:
    - LocationRecord / CanonicalLocation: Table entry and resolved location
    - LocationMode: SEARCHING | LOCATION_SELECTED | MANUAL_ENTRY
    - LocationIndex: Immutable, build-once reference index
    - load_location_index / load_location_records: Reference table loading
    - LocationResolver: Unranked substring search and canonical resolution
    - ManualOverrideGate: Search-versus-manual ownership of location fields
"""

from pledge_form.lib.locations.gate import LocationModeError, ManualOverrideGate, sanitize_zipcode
from pledge_form.lib.locations.index import IndexAlreadyBuiltError, LocationIndex
from pledge_form.lib.locations.loader import (
    load_location_index,
    load_location_records,
    parse_location_record,
    parse_location_table,
)
from pledge_form.lib.locations.resolver import DEFAULT_LIMIT, LocationResolver, normalize_zipcode
from pledge_form.lib.locations.types import (
    LOCATION_FIELDS,
    CanonicalLocation,
    LocationMode,
    LocationRecord,
)

__all__ = [
    "DEFAULT_LIMIT",
    "LOCATION_FIELDS",
    "CanonicalLocation",
    "IndexAlreadyBuiltError",
    "LocationIndex",
    "LocationMode",
    "LocationModeError",
    "LocationRecord",
    "LocationResolver",
    "ManualOverrideGate",
    "load_location_index",
    "load_location_records",
    "normalize_zipcode",
    "parse_location_record",
    "parse_location_table",
    "sanitize_zipcode",
]
