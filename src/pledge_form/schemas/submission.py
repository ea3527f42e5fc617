"""Pydantic v2 schemas for the in-progress form submission."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Organization choices offered on the identity step
ORGANIZATION_OPTIONS: tuple[str, ...] = (
    "ข้าราชการ",
    "ข้าราชการเกษียณ",
    "ค้าขาย/งานบริการ",
    "ธ.ก.ส",
    "นักเรียน/นักศึกษา",
    "บริษัท",
    "ประกอบธุรกิจส่วนตัว",
    "พนักงานบริษัท",
    "รัฐวิสาหกิจ",
    "รับจ้างทั่วไป",
    "ลูกจ้างหน่วยราชการ",
    "ว่างงาน",
    "อ.ส.ม.",
    "อาชีพอิสระ",
    "อาชีพอื่นๆ",
    "เกษตรกร",
    "โรงงานอุตสาหกรรม",
    "NGO",
)

# Choice that switches the identity step to free-text organization entry
OTHER_ORGANIZATION = "อื่นๆ"

# Fields that never travel to the backend as-is
_LOCAL_ONLY_FIELDS = {"id", "organization_choice", "organization_other"}


class PartialSubmission(BaseModel):
    """In-progress aggregate of every step's fields for one form session.

    A submission with an ``id`` is an edit of an existing registration.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: int | None = None

    # Step 1: identity
    first_name: str = ""
    last_name: str = ""
    organization_choice: str = ""
    organization_other: str = ""

    # Step 2: address
    address_line1: str = ""
    district: str = ""
    amphoe: str = ""
    province: str = ""
    zipcode: str = ""
    region_type: str = Field(default="", alias="type")

    # Step 3: contact
    phone_number: str = ""
    number_of_signers: int | None = None

    # Step 4: attachments (file names or stored URLs)
    image1: str | None = None
    image2: str | None = None

    @property
    def is_edit(self) -> bool:
        return self.id is not None

    @property
    def organization_name(self) -> str:
        """Effective organization: the free text when "other" is chosen, else the choice."""
        if self.organization_choice == OTHER_ORGANIZATION:
            return self.organization_other.strip()
        return self.organization_choice

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PartialSubmission":
        """Hydrate a submission from an existing backend record (edit flow).

        The backend stores a single ``organizationName``; values outside
        ``ORGANIZATION_OPTIONS`` come back as the "other" choice with free text.

        Args:
            record: Backend record using camelCase keys.

        Returns:
            A submission carrying the record's id.
        """
        data = {k: v for k, v in record.items() if k in _HYDRATABLE_KEYS and v is not None}
        if data.get("zipcode") is not None:
            data["zipcode"] = str(data["zipcode"])
        organization = (record.get("organizationName") or "").strip()
        if organization in ORGANIZATION_OPTIONS:
            data["organization_choice"] = organization
        elif organization:
            data["organization_choice"] = OTHER_ORGANIZATION
            data["organization_other"] = organization
        return cls.model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the backend: camelCase keys and a single ``organizationName``."""
        payload = self.model_dump(by_alias=True, exclude=_LOCAL_ONLY_FIELDS)
        payload["organizationName"] = self.organization_name
        for key in ("firstName", "lastName", "addressLine1", "district", "amphoe", "province", "zipcode"):
            payload[key] = payload[key].strip()
        return payload


_HYDRATABLE_KEYS = {
    field.alias or name for name, field in PartialSubmission.model_fields.items() if name not in _LOCAL_ONLY_FIELDS
} | {"id"}
