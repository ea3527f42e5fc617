"""Unit tests for the submission schema."""

import pytest
from pydantic import ValidationError

from pledge_form.schemas.submission import OTHER_ORGANIZATION, PartialSubmission


class TestPartialSubmission:
    """Tests for PartialSubmission defaults and helpers."""

    def test_defaults(self) -> None:
        submission = PartialSubmission()
        assert submission.id is None
        assert submission.is_edit is False
        assert submission.zipcode == ""
        assert submission.number_of_signers is None

    def test_populate_by_alias_or_name(self) -> None:
        assert PartialSubmission(firstName="สมชาย").first_name == "สมชาย"
        assert PartialSubmission(type="ภาคกลาง").region_type == "ภาคกลาง"
        assert PartialSubmission(region_type="ภาคเหนือ").region_type == "ภาคเหนือ"

    def test_assignment_is_validated(self) -> None:
        submission = PartialSubmission()
        with pytest.raises(ValidationError):
            submission.number_of_signers = "many"  # type: ignore[assignment]

    def test_organization_name(self) -> None:
        assert PartialSubmission(organization_choice="เกษตรกร").organization_name == "เกษตรกร"
        other = PartialSubmission(organization_choice=OTHER_ORGANIZATION, organization_other=" ชมรมผู้สูงอายุ ")
        assert other.organization_name == "ชมรมผู้สูงอายุ"


class TestPayload:
    """Tests for serialization to the backend."""

    def test_camel_case_payload(self, complete_submission: PartialSubmission) -> None:
        payload = complete_submission.to_payload()
        assert payload["firstName"] == "สมชาย"
        assert payload["addressLine1"] == "99/1 ถนนสีลม"
        assert payload["phoneNumber"] == "0812345678"
        assert payload["numberOfSigners"] == 25
        assert payload["type"] == "ภาคกลาง"
        assert payload["organizationName"] == "เกษตรกร"

    def test_local_fields_excluded(self, complete_submission: PartialSubmission) -> None:
        payload = complete_submission.to_payload()
        assert "id" not in payload
        assert "organizationChoice" not in payload
        assert "organizationOther" not in payload

    def test_strings_trimmed(self, complete_submission: PartialSubmission) -> None:
        complete_submission.first_name = "  สมชาย "
        complete_submission.zipcode = " 10500"
        payload = complete_submission.to_payload()
        assert payload["firstName"] == "สมชาย"
        assert payload["zipcode"] == "10500"


class TestFromRecord:
    """Tests for hydrating an edit from a stored record."""

    def test_known_organization(self) -> None:
        submission = PartialSubmission.from_record(
            {
                "id": 12,
                "firstName": "สมหญิง",
                "lastName": "รักดี",
                "organizationName": "ข้าราชการ",
                "district": "คลองเตย",
                "amphoe": "คลองเตย",
                "province": "กรุงเทพมหานคร",
                "zipcode": 10110,
                "phoneNumber": "0898765432",
                "numberOfSigners": 40,
                "createdAt": "2025-01-01T00:00:00Z",
            }
        )
        assert submission.id == 12
        assert submission.is_edit is True
        assert submission.organization_choice == "ข้าราชการ"
        assert submission.zipcode == "10110"
        assert submission.number_of_signers == 40

    def test_unknown_organization_becomes_other(self) -> None:
        submission = PartialSubmission.from_record({"id": 3, "organizationName": "ชมรมจักรยาน"})
        assert submission.organization_choice == OTHER_ORGANIZATION
        assert submission.organization_other == "ชมรมจักรยาน"
        assert submission.organization_name == "ชมรมจักรยาน"

    def test_null_values_skipped(self) -> None:
        submission = PartialSubmission.from_record({"id": 3, "image1": None, "addressLine1": None})
        assert submission.image1 is None
        assert submission.address_line1 == ""
