"""
IGC Extensions - Byte-range descriptors and the extendable record capability.

Several record kinds (K here, B and others in the wider format) end in an
extension string whose layout is declared elsewhere in the file, by an I or J
record listing ``(start_byte, end_byte, mnemonic)`` triples. Those positions
are 1-based, inclusive, and counted from the start of the whole line:

    K095214FooTheBar
    1234567890123456
           ^^^          FXA  8..10  -> "Foo"
              ^^^       SIU 11..13  -> "The"
                 ^^^    ENL 14..16  -> "Bar"

Decoding a descriptor translates it into the extension string by subtracting
the record's base length, then converts the inclusive range to a slice:

    extension_string[start - BASE_LENGTH - 1 : end - BASE_LENGTH]

Records never store descriptors. Callers keep the declared list and resolve
values on demand, in any order, from any thread; decoding never mutates the
record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable

from igc.errors import NonASCIICharacters, OutOfRange
from igc.layout import is_ascii


@dataclass(frozen=True)
class Extension:
    """One declared extension field: 1-based inclusive byte range + label.

    The mnemonic (e.g. ``FXA``, ``ENL``) is informational only.
    """

    start_byte: int
    end_byte: int
    mnemonic: str = ""

    def __post_init__(self) -> None:
        if self.start_byte < 1:
            raise OutOfRange(f"Extension start byte must be >= 1, got {self.start_byte}")
        if self.end_byte < self.start_byte:
            raise OutOfRange(
                f"Extension end byte {self.end_byte} is before start byte {self.start_byte}"
            )

    @property
    def length(self) -> int:
        return self.end_byte - self.start_byte + 1

    def __str__(self) -> str:
        return f"{self.mnemonic or '?'}[{self.start_byte}..{self.end_byte}]"


class Extendable:
    """Capability shared by records that end in an extension string.

    Subclasses set ``BASE_LENGTH`` (mandatory bytes before the extension
    string, tag included) and expose the raw, unparsed tail as
    ``extension_string``.
    """

    BASE_LENGTH: ClassVar[int]
    extension_string: str

    def get_extension(self, extension: Extension) -> str:
        """Return the substring ``extension`` points at. See get_extension()."""
        return get_extension(self, extension)


def get_extension(record: Extendable, extension: Extension) -> str:
    """Decode one extension field out of an extendable record.

    Raises:
        OutOfRange: the range starts inside the mandatory fields or runs past
            the end of the extension string.
        NonASCIICharacters: the extension string has multi-byte characters,
            so byte positions cannot be mapped onto it.
    """
    base = record.BASE_LENGTH
    tail = record.extension_string

    if extension.start_byte <= base:
        raise OutOfRange(
            f"{extension} starts inside the {base}-byte base record"
        )
    if not is_ascii(tail):
        raise NonASCIICharacters("Extension string contains non-ASCII characters")

    start = extension.start_byte - base - 1
    end = extension.end_byte - base
    if end > len(tail):
        raise OutOfRange(
            f"{extension} runs past the extension string "
            f"(line ends at byte {base + len(tail)})"
        )
    return tail[start:end]


def decode_extensions(
    record: Extendable, extensions: Iterable[Extension]
) -> list[tuple[Extension, str]]:
    """Decode every descriptor in order. The first failure propagates."""
    return [(ext, get_extension(record, ext)) for ext in extensions]
