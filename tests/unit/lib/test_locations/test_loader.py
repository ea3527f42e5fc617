"""Unit tests for the reference-table loader."""

import json
from pathlib import Path

import pytest

from pledge_form.lib.locations.loader import (
    load_location_index,
    load_location_records,
    parse_location_record,
    parse_location_table,
)


class TestParseLocationRecord:
    """Tests for single-entry parsing."""

    def test_full_entry(self) -> None:
        record = parse_location_record(
            {
                "district": "สีลม",
                "amphoe": "บางรัก",
                "province": "กรุงเทพมหานคร",
                "zipcode": 10500,
                "type": "ภาคกลาง",
                "district_code": 100402,
                "amphoe_code": 1004,
                "province_code": 10,
            }
        )
        assert record.district == "สีลม"
        assert record.zipcode == 10500
        assert record.region_type == "ภาคกลาง"
        assert record.district_code == 100402

    def test_false_codes_become_none(self) -> None:
        """Missing codes in the source table are stored as ``false``."""
        record = parse_location_record(
            {"district": "สีลม", "amphoe": "บางรัก", "province": "กรุงเทพมหานคร", "district_code": False}
        )
        assert record.district_code is None
        assert record.amphoe_code is None

    def test_names_are_stripped(self) -> None:
        record = parse_location_record({"district": " สีลม ", "amphoe": "บางรัก", "province": "กรุงเทพมหานคร"})
        assert record.district == "สีลม"

    def test_string_zipcode_kept(self) -> None:
        record = parse_location_record(
            {"district": "สีลม", "amphoe": "บางรัก", "province": "กรุงเทพมหานคร", "zipcode": "10500"}
        )
        assert record.zipcode == "10500"

    def test_missing_name_raises(self) -> None:
        with pytest.raises(KeyError):
            parse_location_record({"district": "สีลม", "province": "กรุงเทพมหานคร"})

    def test_boolean_zipcode_rejected(self) -> None:
        with pytest.raises(ValueError, match="zipcode"):
            parse_location_record({"district": "สีลม", "amphoe": "บางรัก", "province": "กรุงเทพมหานคร", "zipcode": True})


class TestParseLocationTable:
    """Tests for whole-table parsing."""

    def test_not_a_list(self) -> None:
        with pytest.raises(ValueError, match="JSON array"):
            parse_location_table({"district": "สีลม"})

    def test_bad_entry_reports_index(self) -> None:
        data = [
            {"district": "สีลม", "amphoe": "บางรัก", "province": "กรุงเทพมหานคร"},
            {"district": "", "amphoe": "บางรัก", "province": "กรุงเทพมหานคร"},
        ]
        with pytest.raises(ValueError, match="index 1"):
            parse_location_table(data)

    def test_non_object_entry(self) -> None:
        with pytest.raises(ValueError, match="index 0"):
            parse_location_table(["สีลม"])


class TestLoadLocationRecords:
    """Tests for file and bundled-table loading."""

    def test_load_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "locations.json"
        path.write_text(
            json.dumps(
                [
                    {"district": "คลองเตย", "amphoe": "คลองเตย", "province": "กรุงเทพมหานคร", "zipcode": 10110},
                    {"district": "คลองตัน", "amphoe": "คลองเตย", "province": "กรุงเทพมหานคร", "zipcode": 10110},
                ],
                ensure_ascii=False,
            ),
            encoding="utf-8",
        )
        records = load_location_records(path)
        assert [r.district for r in records] == ["คลองเตย", "คลองตัน"]

    def test_load_bundled_table(self) -> None:
        records = load_location_records()
        assert len(records) > 0
        assert any(r.district == "สีลม" and r.zipcode == 10500 for r in records)

    def test_load_index_is_built(self) -> None:
        index = load_location_index()
        assert index.is_built is True
        assert len(index) > 0

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_location_records(tmp_path / "missing.json")
