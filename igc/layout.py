"""
IGC Record Layout
=================

Line layout (one record per line, no trailing newline):

    D<q><ssss>                   <- Differential GPS record, exactly 6 bytes
      q     qualifier code       1 = GPS, 2 = DGPS
      ssss  station id           opaque, taken verbatim

    K<HHMMSS><extension...>      <- Extension data record, at least 8 bytes
      HHMMSS  UTC time           zero-padded
      ...     extension string   carved up by descriptors from a J record

Design Decisions:
    - Lengths are byte lengths of the UTF-8 encoding, not character counts
    - Extension descriptors use 1-based inclusive byte positions counted from
      the start of the line (the tag is byte 1)
    - Extendable records must be pure 7-bit ASCII so that byte positions and
      string indices coincide
"""

# Record tags
D_RECORD = "D"
K_RECORD = "K"
MANUFACTURER_RECORD = "A"  # First line of every IGC file

# Fixed lengths (bytes, tag included)
D_RECORD_LENGTH = 6
K_RECORD_BASE_LENGTH = 7
TIME_LENGTH = 6

# Qualifier code table for the D record
QUALIFIER_CODES = {
    "1": "gps",
    "2": "dgps",
}

ASCII_DIGITS = frozenset("0123456789")

# Safety limits (reader only, the record parsers take any length)
MAX_FILE_SIZE = 50 * 1024 * 1024


def byte_length(text: str) -> int:
    """Length of ``text`` in bytes, counting lone surrogates as 3 bytes.

    ``surrogatepass`` keeps this total over every Python string, so a
    malformed line reaches the length check instead of blowing up here.
    """
    return len(text.encode("utf-8", "surrogatepass"))


def is_ascii(text: str) -> bool:
    """True if every character is 7-bit ASCII (byte and index offsets agree)."""
    return text.isascii()


def is_digits(text: str) -> bool:
    """True if ``text`` is non-empty and made only of ASCII digits.

    ``str.isdigit`` is not enough: it accepts characters like '²' and '٣'.
    """
    return bool(text) and all(c in ASCII_DIGITS for c in text)
