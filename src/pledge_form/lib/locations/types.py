"""Data types for the locations library.

Defines the immutable administrative-division record held by the index and
the canonical location produced when a record is selected.
"""

from dataclasses import dataclass
from enum import StrEnum


class LocationMode(StrEnum):
    """Which pathway currently owns the location fields of a submission."""

    SEARCHING = "searching"
    LOCATION_SELECTED = "location_selected"
    MANUAL_ENTRY = "manual_entry"


# Submission fields filled by a location selection, in display order
LOCATION_FIELDS: tuple[str, ...] = ("district", "amphoe", "province", "zipcode")

# Fields only a search selection can populate
SEARCH_ONLY_FIELDS: tuple[str, ...] = ("region_type",)


@dataclass(frozen=True)
class LocationRecord:
    """A single tambon entry from the administrative-division table.

    Attributes:
        district: Tambon (sub-district) name.
        amphoe: Amphoe (district) name.
        province: Province name.
        zipcode: Postal code as stored in the source table (int or str).
        region_type: Region label (e.g. ``ภาคกลาง``).
        district_code: Tambon code, if the source table has one.
        amphoe_code: Amphoe code, if the source table has one.
        province_code: Province code, if the source table has one.
    """

    district: str
    amphoe: str
    province: str
    zipcode: int | str | None = None
    region_type: str = ""
    district_code: int | None = None
    amphoe_code: int | None = None
    province_code: int | None = None

    def __post_init__(self) -> None:
        if not self.district or not self.amphoe or not self.province:
            msg = "district, amphoe and province must not be empty"
            raise ValueError(msg)


@dataclass(frozen=True)
class CanonicalLocation:
    """The authoritative location tuple produced by resolving a record."""

    district: str
    amphoe: str
    province: str
    zipcode: str
    region_type: str = ""

    @property
    def label(self) -> str:
        """Thai display label, e.g. ``ตำบลสีลม อำเภอบางรัก จังหวัดกรุงเทพมหานคร 10500``."""
        label = f"ตำบล{self.district} อำเภอ{self.amphoe} จังหวัด{self.province}"
        return f"{label} {self.zipcode}" if self.zipcode else label

    def as_fields(self) -> dict[str, str]:
        """Return the submission field values this location writes."""
        return {
            "district": self.district,
            "amphoe": self.amphoe,
            "province": self.province,
            "zipcode": self.zipcode,
            "region_type": self.region_type,
        }
