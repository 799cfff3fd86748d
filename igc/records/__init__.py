"""
IGC record parsers, keyed by their one-letter tag.

Each record class parses exactly one line (no newline) and formats back to
it. Unknown tags are the caller's business: ``parse_record`` raises
UnsupportedRecordType so a file reader can skip them.
"""

from __future__ import annotations

from typing import Union

from igc.errors import InvalidSyntax, UnsupportedRecordType
from igc.records.d_record import DRecord, GpsQualifier
from igc.records.k_record import KRecord

Record = Union[DRecord, KRecord]

RECORD_TYPES: dict[str, type] = {
    DRecord.TAG: DRecord,
    KRecord.TAG: KRecord,
}


def is_supported(line: str) -> bool:
    """True if a parser is registered for the line's tag."""
    return bool(line) and line[0] in RECORD_TYPES


def parse_record(line: str) -> Record:
    """Parse any supported record, dispatching on the first character."""
    if not line:
        raise InvalidSyntax("Empty line")
    record_type = RECORD_TYPES.get(line[0])
    if record_type is None:
        raise UnsupportedRecordType(f"No parser for record type {line[0]!r}")
    return record_type.parse(line)


__all__ = [
    "DRecord",
    "GpsQualifier",
    "KRecord",
    "Record",
    "RECORD_TYPES",
    "is_supported",
    "parse_record",
]
