"""Errors raised while parsing IGC records and decoding extensions."""


class ParseError(ValueError):
    """Base error for this package. Catch this to handle any bad line."""


class InvalidSyntax(ParseError):
    """Structural violation: wrong length, bad field character, bad tag."""


class OutOfRange(ParseError):
    """Well-formed value outside its legal range (time fields, byte ranges)."""


class NonASCIICharacters(ParseError):
    """Line holds characters outside 7-bit ASCII, so byte slicing is unsafe."""


class UnsupportedRecordType(ParseError):
    """No parser is registered for the line's tag."""
