"""Unit tests for region record normalization.

Pure function tests - no mocks needed.
"""

from src.core.region import (
    Region,
    dedupe_regions,
    find_region,
    parse_province,
    parse_provinces,
    parse_ward,
    parse_wards,
)


class TestParseProvince:
    """Tests for parse_province() function."""

    def test_canonical_fields(self):
        """Uses code and name directly when present."""
        result = parse_province({"code": "01", "name": "Hà Nội"})
        assert result == Region(code="01", name="Hà Nội")

    def test_alternate_code_key(self):
        """Falls back to 'mahc' for the code."""
        result = parse_province({"mahc": 79, "tentinh": "TP. Hồ Chí Minh"})
        assert result.code == "79"
        assert result.name == "TP. Hồ Chí Minh"

    def test_alternate_name_keys_in_priority_order(self):
        """'ten' wins over 'tentinh'."""
        result = parse_province({"code": "31", "ten": "Hải Phòng", "tentinh": "Other"})
        assert result.name == "Hải Phòng"

    def test_empty_name_falls_through(self):
        """Blank values are skipped in favor of the next key."""
        result = parse_province({"code": "48", "name": "  ", "ten": "Đà Nẵng"})
        assert result.name == "Đà Nẵng"

    def test_missing_name_uses_code_as_label(self):
        """A record without any name keeps its code as label."""
        result = parse_province({"code": "01"})
        assert result == Region(code="01", name="01")

    def test_missing_code_is_dropped(self):
        """A record without a usable code returns None."""
        assert parse_province({"name": "Hà Nội"}) is None
        assert parse_province({"code": "", "name": "Hà Nội"}) is None

    def test_province_has_no_parent(self):
        """Provinces are top-level regions."""
        result = parse_province({"code": "01", "name": "Hà Nội"})
        assert result.parent_code is None
        assert result.is_ward is False


class TestParseWard:
    """Tests for parse_ward() function."""

    def test_canonical_fields(self):
        """Uses code and name directly when present."""
        result = parse_ward({"code": "0105", "name": "Phường Đông Anh"}, "01")
        assert result == Region(code="0105", name="Phường Đông Anh", parent_code="01")
        assert result.is_ward is True

    def test_alternate_code_key(self):
        """Falls back to 'ma' for the code."""
        result = parse_ward({"ma": "0106", "name": "Xã Mỹ Đức"}, "01")
        assert result.code == "0106"

    def test_synthesizes_name_from_unit_and_type(self):
        """Builds 'tenhc (loai)' when there is no name."""
        result = parse_ward({"ma": "0107", "tenhc": "Trung Hòa", "loai": "Phường"}, "01")
        assert result.name == "Trung Hòa (Phường)"

    def test_synthesizes_name_without_type(self):
        """Uses tenhc alone when loai is missing."""
        result = parse_ward({"ma": "0108", "tenhc": "Cầu Giấy"}, "01")
        assert result.name == "Cầu Giấy"

    def test_name_wins_over_sub_fields(self):
        """An explicit name is used as-is."""
        result = parse_ward({"ma": "0109", "name": "Given", "tenhc": "Other"}, "01")
        assert result.name == "Given"

    def test_missing_code_is_dropped(self):
        """A record without a usable code returns None."""
        assert parse_ward({"tenhc": "Cầu Giấy"}, "01") is None


class TestParseProvinces:
    """Tests for parse_provinces() function."""

    def test_bare_list_payload(self):
        """Accepts a bare list of records."""
        payload = [{"code": "01", "name": "Hà Nội"}, {"mahc": "79", "ten": "HCM"}]
        result = parse_provinces(payload)
        assert [p.code for p in result] == ["01", "79"]

    def test_wrapped_payload(self):
        """Accepts records wrapped under 'data'."""
        payload = {"data": [{"code": "01", "name": "Hà Nội"}]}
        assert parse_provinces(payload) == [Region(code="01", name="Hà Nội")]

    def test_deduplicates_by_code_keeping_first(self):
        """Repeated codes keep the first record, in source order."""
        payload = [
            {"code": "79", "name": "First"},
            {"code": "01", "name": "Hà Nội"},
            {"code": "79", "name": "Second"},
        ]
        result = parse_provinces(payload)
        assert [(p.code, p.name) for p in result] == [("79", "First"), ("01", "Hà Nội")]

    def test_skips_records_without_code(self):
        """Records with no code are dropped, others kept."""
        payload = [{"name": "No code"}, {"code": "01", "name": "Hà Nội"}, "junk"]
        assert [p.code for p in parse_provinces(payload)] == ["01"]

    def test_unexpected_payload_returns_empty(self):
        """Unrecognized structures yield an empty list."""
        assert parse_provinces(None) == []
        assert parse_provinces({"error": "oops"}) == []
        assert parse_provinces("not json") == []


class TestParseWards:
    """Tests for parse_wards() function."""

    def test_scopes_wards_to_province(self):
        """Every ward carries the requested province code."""
        payload = {"data": [{"ma": "0105", "tenhc": "Đông Anh", "loai": "Phường"}]}
        result = parse_wards(payload, "01")
        assert result == [Region(code="0105", name="Đông Anh (Phường)", parent_code="01")]

    def test_deduplicates(self):
        """Repeated ward codes are removed."""
        payload = [{"ma": "0105", "name": "A"}, {"ma": "0105", "name": "B"}]
        assert len(parse_wards(payload, "01")) == 1


class TestDedupeAndFind:
    """Tests for dedupe_regions() and find_region()."""

    def test_dedupe_preserves_order(self):
        regions = [Region("b", "B"), Region("a", "A"), Region("b", "B2")]
        assert dedupe_regions(regions) == [Region("b", "B"), Region("a", "A")]

    def test_find_region_by_code(self):
        regions = [Region("01", "Hà Nội"), Region("79", "HCM")]
        assert find_region(regions, "79") == Region("79", "HCM")

    def test_find_region_missing_or_empty_code(self):
        regions = [Region("01", "Hà Nội")]
        assert find_region(regions, "02") is None
        assert find_region(regions, None) is None
        assert find_region(regions, "") is None
