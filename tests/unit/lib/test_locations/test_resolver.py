"""Unit tests for location search and resolution."""

from unittest.mock import patch

import pytest

from pledge_form.lib.locations.index import LocationIndex
from pledge_form.lib.locations.resolver import LocationResolver, normalize_zipcode
from pledge_form.lib.locations.types import CanonicalLocation, LocationRecord


class TestSearch:
    """Tests for unranked substring search."""

    def test_empty_query_returns_nothing(self, resolver: LocationResolver) -> None:
        assert resolver.search("") == []

    def test_whitespace_query_returns_nothing(self, resolver: LocationResolver) -> None:
        assert resolver.search("   ") == []

    def test_bang_rak_matches_are_bounded_and_relevant(self, resolver: LocationResolver) -> None:
        """Every match contains the query in one of its names."""
        results = resolver.search("บางรัก")
        assert 0 < len(results) <= 10
        for record in results:
            assert "บางรัก" in (record.district + record.amphoe + record.province)
        assert len(results) == 5

    @pytest.mark.parametrize("limit", [1, 3, 7])
    def test_limit_bounds_results(self, resolver: LocationResolver, limit: int) -> None:
        results = resolver.search("กรุงเทพ", limit=limit)
        assert len(results) == limit

    def test_first_matches_in_table_order(self, resolver: LocationResolver, sample_records: list[LocationRecord]) -> None:
        results = resolver.search("กรุงเทพ", limit=3)
        assert results == sample_records[:3]

    def test_non_positive_limit(self, resolver: LocationResolver) -> None:
        assert resolver.search("บางรัก", limit=0) == []

    def test_matches_amphoe_and_province(self, resolver: LocationResolver) -> None:
        assert {r.district for r in resolver.search("คลองเตย")} == {"คลองเตย", "คลองตัน", "พระโขนง"}
        assert {r.district for r in resolver.search("เชียงใหม่")} == {"ศรีภูมิ", "หายยา"}

    def test_query_is_trimmed(self, resolver: LocationResolver) -> None:
        assert resolver.search("  สีลม ") == resolver.search("สีลม")

    def test_case_insensitive(self) -> None:
        index = LocationIndex([LocationRecord(district="Silom", amphoe="Bang Rak", province="Bangkok")])
        assert len(LocationResolver(index).search("SILOM")) == 1

    def test_no_match(self, resolver: LocationResolver) -> None:
        assert resolver.search("ภูเก็ต") == []

    def test_unbuilt_index(self) -> None:
        assert LocationResolver(LocationIndex()).search("สีลม") == []

    def test_zipcode_is_not_searched(self, resolver: LocationResolver) -> None:
        assert resolver.search("10500") == []

    def test_internal_failure_yields_empty(self, resolver: LocationResolver, location_index: LocationIndex) -> None:
        """A failure while scanning is logged and reported as no results."""
        with patch.object(LocationIndex, "search_keys", property(lambda self: ())):
            assert resolver.search("สีลม") == []


class TestResolve:
    """Tests for canonical resolution."""

    def test_preserves_names_and_stringifies_zipcode(self, resolver: LocationResolver, silom: LocationRecord) -> None:
        canonical = resolver.resolve(silom)
        assert canonical == CanonicalLocation(
            district="สีลม", amphoe="บางรัก", province="กรุงเทพมหานคร", zipcode="10500", region_type="ภาคกลาง"
        )
        assert isinstance(canonical.zipcode, str)

    def test_missing_zipcode(self, resolver: LocationResolver) -> None:
        record = LocationRecord(district="สีลม", amphoe="บางรัก", province="กรุงเทพมหานคร")
        assert resolver.resolve(record).zipcode == ""

    def test_label(self, resolver: LocationResolver, silom: LocationRecord) -> None:
        assert resolver.resolve(silom).label == "ตำบลสีลม อำเภอบางรัก จังหวัดกรุงเทพมหานคร 10500"


class TestNormalizeZipcode:
    def test_values(self) -> None:
        assert normalize_zipcode(10110) == "10110"
        assert normalize_zipcode(" 10110 ") == "10110"
        assert normalize_zipcode(None) == ""
