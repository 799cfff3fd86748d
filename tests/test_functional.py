"""
Functional Tests - Test record parsers, extension decoding, reader, and
converters working together.
"""

import json
from dataclasses import dataclass

import pytest

from igc import converters
from igc.errors import (
    InvalidSyntax,
    NonASCIICharacters,
    OutOfRange,
    ParseError,
    UnsupportedRecordType,
)
from igc.extension import Extendable, Extension, decode_extensions, get_extension
from igc.reader import IGCReader, ParsedLine
from igc.records import (
    RECORD_TYPES,
    DRecord,
    GpsQualifier,
    KRecord,
    is_supported,
    parse_record,
)
from igc.time import Time


# =============================================================================
# D record
# =============================================================================

class TestDRecord:

    def test_parse(self):
        rec = DRecord.parse("D1ABCD")
        assert rec == DRecord(qualifier=GpsQualifier.GPS, station_id="ABCD")

    def test_parse_dgps(self):
        rec = DRecord.parse("D20331")
        assert rec.qualifier is GpsQualifier.DGPS
        assert rec.station_id == "0331"

    def test_format(self):
        rec = DRecord(qualifier=GpsQualifier.GPS, station_id="ABCD")
        assert rec.format() == "D1ABCD"
        assert str(rec) == "D1ABCD"

    def test_roundtrip_all_qualifiers(self):
        for code in ("1", "2"):
            for station in ("ABCD", "0000", "zz99", "    "):
                line = f"D{code}{station}"
                rec = DRecord.parse(line)
                assert str(rec) == line
                assert DRecord.parse(str(rec)) == rec

    def test_invalid_qualifier(self):
        with pytest.raises(InvalidSyntax):
            DRecord.parse("D9ABCD")

    def test_short_line(self):
        with pytest.raises(InvalidSyntax):
            DRecord.parse("D1ABC")

    def test_long_line(self):
        with pytest.raises(InvalidSyntax):
            DRecord.parse("D1ABCDE")

    def test_trailing_newline_is_not_stripped(self):
        with pytest.raises(InvalidSyntax):
            DRecord.parse("D1ABCD\n")

    def test_wrong_tag(self):
        with pytest.raises(InvalidSyntax):
            DRecord.parse("K1ABCD")

    def test_empty(self):
        with pytest.raises(InvalidSyntax):
            DRecord.parse("")

    def test_length_counts_bytes(self):
        # 6 characters, 7 bytes
        with pytest.raises(InvalidSyntax):
            DRecord.parse("D1ÄBCD")

    def test_not_extendable(self):
        assert not isinstance(DRecord.parse("D1ABCD"), Extendable)


# =============================================================================
# K record
# =============================================================================

class TestKRecord:

    def test_parse(self):
        rec = KRecord.parse("K095214FooTheBar")
        assert rec == KRecord(time=Time.from_hms(9, 52, 14), extension_string="FooTheBar")

    def test_format(self):
        rec = KRecord(time=Time.from_hms(9, 52, 14), extension_string="FooTheBar")
        assert str(rec) == "K095214FooTheBar"
        assert rec.format() == "K095214FooTheBar"

    def test_roundtrip(self):
        for line in ("K095214FooTheBar", "K000000X", "K23595900350045"):
            assert str(KRecord.parse(line)) == line

    def test_base_length(self):
        assert KRecord.BASE_LENGTH == 7

    def test_is_extendable(self):
        assert isinstance(KRecord.parse("K095214FooTheBar"), Extendable)

    def test_minimum_length(self):
        rec = KRecord.parse("K095214X")
        assert rec.extension_string == "X"

    @pytest.mark.parametrize("line", ["K", "K09", "K095214"])
    def test_too_short(self, line):
        with pytest.raises(InvalidSyntax):
            KRecord.parse(line)

    def test_wrong_tag(self):
        with pytest.raises(InvalidSyntax):
            KRecord.parse("B095214FooTheBar")

    def test_empty(self):
        with pytest.raises(InvalidSyntax):
            KRecord.parse("")

    def test_non_ascii_extension(self):
        with pytest.raises(NonASCIICharacters):
            KRecord.parse("K095214FooéBar")

    def test_invalid_char_boundary(self):
        # 4 characters but 10 bytes: rejected before any slicing
        with pytest.raises(NonASCIICharacters):
            KRecord.parse("Kቲበ᧞")

    def test_time_errors_propagate(self):
        with pytest.raises(OutOfRange):
            KRecord.parse("K250000FooTheBar")
        with pytest.raises(InvalidSyntax):
            KRecord.parse("K09x214FooTheBar")

    def test_extension_string_kept_verbatim(self):
        rec = KRecord.parse("K095214  spaced  ")
        assert rec.extension_string == "  spaced  "


# =============================================================================
# Extension decoding
# =============================================================================

@dataclass(frozen=True)
class _WideRecord(Extendable):
    """A second extendable kind with a different base length (B-like, 35 bytes)."""
    BASE_LENGTH = 35
    extension_string: str


class TestExtensionDecoding:

    @pytest.fixture
    def record(self):
        return KRecord(time=Time.from_hms(9, 52, 14), extension_string="FooTheBar")

    def test_three_fields(self, record):
        assert record.get_extension(Extension(8, 10, "One")) == "Foo"
        assert record.get_extension(Extension(11, 13, "Two")) == "The"
        assert record.get_extension(Extension(14, 16, "Th3")) == "Bar"

    def test_free_function_matches_method(self, record):
        ext = Extension(11, 13)
        assert get_extension(record, ext) == record.get_extension(ext)

    def test_whole_extension(self, record):
        assert get_extension(record, Extension(8, 16)) == "FooTheBar"

    def test_overlapping_descriptors(self, record):
        assert get_extension(record, Extension(9, 12)) == "ooTh"
        assert get_extension(record, Extension(10, 10)) == "o"

    def test_past_the_end(self, record):
        with pytest.raises(OutOfRange):
            get_extension(record, Extension(14, 17))

    def test_wholly_past_the_end(self, record):
        with pytest.raises(OutOfRange):
            get_extension(record, Extension(30, 40))

    def test_inside_base_record(self, record):
        with pytest.raises(OutOfRange):
            get_extension(record, Extension(2, 7))
        with pytest.raises(OutOfRange):
            get_extension(record, Extension(7, 9))

    def test_hand_built_non_ascii_record(self):
        rec = KRecord(time=Time.from_hms(0, 0, 0), extension_string="éé")
        with pytest.raises(NonASCIICharacters):
            get_extension(rec, Extension(8, 8))

    def test_mnemonic_does_not_affect_value(self, record):
        assert get_extension(record, Extension(8, 10, "ENL")) == get_extension(
            record, Extension(8, 10, "FXA")
        )

    def test_record_is_unchanged(self, record):
        before = str(record)
        get_extension(record, Extension(8, 10))
        assert str(record) == before

    def test_other_base_length(self):
        rec = _WideRecord(extension_string="0450123")
        assert get_extension(rec, Extension(36, 38, "FXA")) == "045"
        assert rec.get_extension(Extension(39, 42, "SIU")) == "0123"
        with pytest.raises(OutOfRange):
            get_extension(rec, Extension(35, 37))

    def test_decode_extensions(self, record):
        exts = [Extension(14, 16, "C"), Extension(8, 10, "A"), Extension(11, 13, "B")]
        decoded = decode_extensions(record, exts)
        assert decoded == [(exts[0], "Bar"), (exts[1], "Foo"), (exts[2], "The")]

    def test_decode_extensions_empty(self, record):
        assert decode_extensions(record, []) == []

    def test_decode_extensions_propagates_first_error(self, record):
        with pytest.raises(OutOfRange):
            decode_extensions(record, [Extension(8, 10), Extension(15, 20)])


# =============================================================================
# Dispatch
# =============================================================================

class TestDispatch:

    def test_record_types(self):
        assert RECORD_TYPES == {"D": DRecord, "K": KRecord}

    def test_parse_d(self):
        assert isinstance(parse_record("D1ABCD"), DRecord)

    def test_parse_k(self):
        assert isinstance(parse_record("K095214FooTheBar"), KRecord)

    def test_empty(self):
        with pytest.raises(InvalidSyntax):
            parse_record("")

    def test_unsupported(self):
        with pytest.raises(UnsupportedRecordType):
            parse_record("B1101355206343N00006198WA0058700558")

    def test_lowercase_tag_is_unsupported(self):
        with pytest.raises(UnsupportedRecordType):
            parse_record("d1ABCD")

    def test_is_supported(self):
        assert is_supported("D1ABCD")
        assert is_supported("K")
        assert not is_supported("")
        assert not is_supported("HFDTE150709")


# =============================================================================
# Reader
# =============================================================================

SAMPLE = (
    b"AXXXABC FLIGHT:1\r\n"
    b"HFDTE150709\r\n"
    b"J010812HDT\r\n"
    b"D20331\r\n"
    b"B1101355206343N00006198WA0058700558\r\n"
    b"K110135090\r\n"
    b"\r\n"
    b"K11013X090\r\n"
    b"D9ABCD\r\n"
)


class TestReader:

    def test_parse_sample(self):
        lines = IGCReader.parse(SAMPLE)
        assert [line.line_no for line in lines] == [1, 2, 3, 4, 5, 6, 8, 9]

    def test_supported_and_unsupported(self):
        lines = IGCReader.parse(SAMPLE)
        by_no = {line.line_no: line for line in lines}
        assert not by_no[1].supported
        assert not by_no[5].supported
        assert by_no[4].supported and by_no[4].ok
        assert isinstance(by_no[4].record, DRecord)
        assert isinstance(by_no[6].record, KRecord)
        assert by_no[6].record.get_extension(Extension(8, 10, "HDT")) == "090"

    def test_errors_are_kept(self):
        lines = IGCReader.parse(SAMPLE)
        by_no = {line.line_no: line for line in lines}
        assert isinstance(by_no[8].error, InvalidSyntax)
        assert by_no[8].record is None
        assert isinstance(by_no[9].error, InvalidSyntax)

    def test_line_endings(self):
        lf = IGCReader.parse(b"D1ABCD\nD20331\n")
        cr = IGCReader.parse(b"D1ABCD\rD20331\r")
        crlf = IGCReader.parse(b"D1ABCD\r\nD20331\r\n")
        assert [l.raw for l in lf] == [l.raw for l in cr] == [l.raw for l in crlf]

    def test_invalid_utf8(self):
        lines = IGCReader.parse(b"K095214Foo\xffBar\n")
        assert isinstance(lines[0].error, NonASCIICharacters)

    def test_size_limit(self):
        with pytest.raises(ValueError):
            IGCReader.parse(b"D1ABCD\n" * 10, max_size=20)

    def test_read_file(self, tmp_path):
        path = tmp_path / "flight.igc"
        path.write_bytes(SAMPLE)
        read = IGCReader.read(path)
        parsed = IGCReader.parse(SAMPLE)
        assert [(l.line_no, l.raw, l.record) for l in read] == [
            (l.line_no, l.raw, l.record) for l in parsed
        ]

    def test_read_file_too_large(self, tmp_path):
        path = tmp_path / "flight.igc"
        path.write_bytes(SAMPLE)
        with pytest.raises(ValueError):
            IGCReader.read(path, max_size=10)

    def test_is_igc(self, tmp_path):
        good = tmp_path / "good.igc"
        good.write_bytes(SAMPLE)
        bad = tmp_path / "bad.igc"
        bad.write_bytes(b"HFDTE150709\r\n")
        assert IGCReader.is_igc(good)
        assert not IGCReader.is_igc(bad)
        assert not IGCReader.is_igc_bytes(b"")

    def test_parsed_line_tag(self):
        assert ParsedLine(line_no=1, raw="D1ABCD").tag == "D"


# =============================================================================
# Converters
# =============================================================================

class TestConverters:

    def test_d_to_dict(self):
        assert converters.to_dict(DRecord.parse("D1ABCD")) == {
            "type": "D",
            "qualifier": "gps",
            "station_id": "ABCD",
        }

    def test_k_to_dict(self):
        assert converters.to_dict(KRecord.parse("K095214FooTheBar")) == {
            "type": "K",
            "time": {"hours": 9, "minutes": 52, "seconds": 14},
            "extension_string": "FooTheBar",
        }

    def test_k_to_dict_with_extensions(self):
        data = converters.to_dict(
            KRecord.parse("K095214FooTheBar"),
            [Extension(8, 10, "FXA"), Extension(14, 16, "ENL")],
        )
        assert data["extensions"] == [
            {"mnemonic": "FXA", "start_byte": 8, "end_byte": 10, "value": "Foo"},
            {"mnemonic": "ENL", "start_byte": 14, "end_byte": 16, "value": "Bar"},
        ]

    def test_d_ignores_extensions(self):
        data = converters.to_dict(DRecord.parse("D1ABCD"), [Extension(8, 10)])
        assert "extensions" not in data

    def test_to_dict_propagates_decode_errors(self):
        with pytest.raises(OutOfRange):
            converters.to_dict(KRecord.parse("K095214Foo"), [Extension(8, 12)])

    def test_to_dict_non_strict_annotates_decode_errors(self):
        data = converters.to_dict(
            KRecord.parse("K095214Foo"),
            [Extension(8, 10, "FXA"), Extension(8, 12, "ENL")],
            strict=False,
        )
        good, bad = data["extensions"]
        assert good["value"] == "Foo"
        assert "value" not in bad
        assert bad["error"].startswith("OutOfRange:")

    def test_to_json_non_strict_still_loads(self):
        records = [parse_record("K095214Foo"), parse_record("K095215FooBar")]
        text = converters.to_json(records, [Extension(11, 13, "SIU")], strict=False)
        assert "error" in json.loads(text)[0]["extensions"][0]
        assert converters.from_json(text) == records

    def test_json_roundtrip(self):
        records = [parse_record("D20331"), parse_record("K095214FooTheBar")]
        text = converters.to_json(records, [Extension(8, 10, "FXA")])
        assert json.loads(text)[1]["extensions"][0]["value"] == "Foo"
        assert converters.from_json(text) == records

    def test_from_json_not_a_list(self):
        with pytest.raises(ValueError):
            converters.from_json('{"type": "D"}')

    @pytest.mark.parametrize("data", [
        [],
        "D1ABCD",
        {"type": "X"},
        {"type": "D", "qualifier": "gps"},
        {"type": "D", "qualifier": "rtk", "station_id": "ABCD"},
        {"type": "K", "time": "095214", "extension_string": "Foo"},
        {"type": "K", "time": {"hours": 9, "minutes": 52}, "extension_string": "Foo"},
        {"type": "K", "time": {"hours": True, "minutes": 52, "seconds": 1}, "extension_string": "Foo"},
        {"type": "K", "time": {"hours": 9, "minutes": 52, "seconds": 14}},
    ])
    def test_from_dict_bad_structure(self, data):
        with pytest.raises(ValueError):
            converters.from_dict(data)

    def test_from_dict_applies_record_rules(self):
        with pytest.raises(InvalidSyntax):
            converters.from_dict({"type": "D", "qualifier": "gps", "station_id": "ABC"})
        with pytest.raises(InvalidSyntax):
            converters.from_dict({
                "type": "K",
                "time": {"hours": 9, "minutes": 52, "seconds": 14},
                "extension_string": "",
            })
        with pytest.raises(OutOfRange):
            converters.from_dict({
                "type": "K",
                "time": {"hours": 9, "minutes": 61, "seconds": 14},
                "extension_string": "Foo",
            })
        with pytest.raises(NonASCIICharacters):
            converters.from_dict({
                "type": "K",
                "time": {"hours": 9, "minutes": 52, "seconds": 14},
                "extension_string": "Foé",
            })

    def test_errors_are_value_errors(self):
        # Callers catching ValueError see record errors too
        with pytest.raises(ParseError):
            converters.from_dict({"type": "D", "qualifier": "gps", "station_id": "ABC"})
