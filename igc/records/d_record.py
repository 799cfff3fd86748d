"""D record - Differential GPS. Fixed length, no extension string."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from igc.errors import InvalidSyntax
from igc.layout import D_RECORD, D_RECORD_LENGTH, QUALIFIER_CODES, byte_length


class GpsQualifier(Enum):
    GPS = "gps"
    DGPS = "dgps"


# Bidirectional code table, built from the layout so both ways stay in sync
_CODE_TO_QUALIFIER = {code: GpsQualifier(name) for code, name in QUALIFIER_CODES.items()}
_QUALIFIER_TO_CODE = {q: code for code, q in _CODE_TO_QUALIFIER.items()}


@dataclass(frozen=True)
class DRecord:
    """Indicates that differential GPS is in use, and from which station.

    Usage:
        rec = DRecord.parse("D20331")
        rec.qualifier   # GpsQualifier.DGPS
        rec.station_id  # "0331"
        str(rec)        # "D20331"
    """

    TAG = D_RECORD

    qualifier: GpsQualifier
    station_id: str

    @classmethod
    def parse(cls, line: str) -> DRecord:
        if byte_length(line) != D_RECORD_LENGTH:
            raise InvalidSyntax(
                f"D record must be {D_RECORD_LENGTH} bytes, got {byte_length(line)}"
            )
        if line[0] != D_RECORD:
            raise InvalidSyntax(f"Not a D record: {line!r}")

        qualifier = _CODE_TO_QUALIFIER.get(line[1])
        if qualifier is None:
            raise InvalidSyntax(f"Invalid GPS qualifier code: {line[1]!r}")

        return cls(qualifier=qualifier, station_id=line[2:6])

    def format(self) -> str:
        return f"{D_RECORD}{_QUALIFIER_TO_CODE[self.qualifier]}{self.station_id}"

    def __str__(self) -> str:
        return self.format()
