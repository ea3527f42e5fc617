"""Load the administrative-division reference table.

Reads a JSON array of tambon entries and returns validated
:class:`LocationRecord` instances, or a built :class:`LocationIndex`.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

from loguru import logger

from pledge_form.lib.locations.index import LocationIndex
from pledge_form.lib.locations.types import LocationRecord

_BUNDLED_PACKAGE = "pledge_form.data"
_BUNDLED_FILE = "locations.json"


def _parse_code(value: Any) -> int | None:
    """Normalize a division code; the source table uses ``false`` for missing codes."""
    if value is None or isinstance(value, bool):
        return None
    return int(value)


def _parse_zipcode(value: Any) -> int | str | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        msg = f"zipcode must be a number or string, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, int | str):
        return value
    msg = f"zipcode must be a number or string, got {type(value).__name__}"
    raise ValueError(msg)


def parse_location_record(raw: dict[str, Any]) -> LocationRecord:
    """Convert one raw table entry into a ``LocationRecord``.

    Args:
        raw: Mapping with ``district``, ``amphoe``, ``province`` and optionally
            ``zipcode``, ``type``, ``district_code``, ``amphoe_code``, ``province_code``.

    Returns:
        The parsed record.

    Raises:
        KeyError: If a required name field is missing.
        ValueError: If a field has the wrong shape.
    """
    return LocationRecord(
        district=str(raw["district"]).strip(),
        amphoe=str(raw["amphoe"]).strip(),
        province=str(raw["province"]).strip(),
        zipcode=_parse_zipcode(raw.get("zipcode")),
        region_type=str(raw.get("type") or ""),
        district_code=_parse_code(raw.get("district_code")),
        amphoe_code=_parse_code(raw.get("amphoe_code")),
        province_code=_parse_code(raw.get("province_code")),
    )


def parse_location_table(data: Any) -> list[LocationRecord]:
    """Parse a decoded JSON table into records, preserving order.

    Args:
        data: Decoded JSON; must be a list of objects.

    Returns:
        Records in table order.

    Raises:
        ValueError: If the table is not a list or an entry is invalid.
    """
    if not isinstance(data, list):
        msg = "Location table must be a JSON array"
        raise ValueError(msg)

    records: list[LocationRecord] = []
    for i, raw in enumerate(data):
        if not isinstance(raw, dict):
            msg = f"Invalid location entry at index {i}: expected an object"
            raise ValueError(msg)
        try:
            records.append(parse_location_record(raw))
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Invalid location entry at index {i}: {exc}"
            raise ValueError(msg) from exc
    return records


def load_location_records(path: str | Path | None = None) -> list[LocationRecord]:
    """Read the reference table from ``path`` or from the bundled sample table.

    Args:
        path: JSON file to read.  ``None`` selects the table shipped with the package.

    Returns:
        Records in table order.
    """
    if path is None:
        text = resources.files(_BUNDLED_PACKAGE).joinpath(_BUNDLED_FILE).read_text(encoding="utf-8")
        source = f"bundled:{_BUNDLED_FILE}"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    records = parse_location_table(json.loads(text))
    logger.info("Loaded {} location records from {}", len(records), source)
    return records


def load_location_index(path: str | Path | None = None) -> LocationIndex:
    """Build a fresh ``LocationIndex`` from the reference table.

    Args:
        path: JSON file to read; ``None`` selects the bundled sample table.

    Returns:
        A built index.
    """
    return LocationIndex(load_location_records(path))
