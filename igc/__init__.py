"""
IGC - Flight recorder record parsing.

Strict, line-at-a-time parsing and formatting of IGC records, with on-demand
decoding of the extension strings that K (and similar) records carry.
"""

__version__ = "0.1.0"

from igc.errors import (
    ParseError,
    InvalidSyntax,
    OutOfRange,
    NonASCIICharacters,
    UnsupportedRecordType,
)
from igc.time import Time
from igc.extension import Extension, Extendable, get_extension, decode_extensions
from igc.records import DRecord, GpsQualifier, KRecord, parse_record
