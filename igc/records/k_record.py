"""K record - Extension data. A timestamp plus whatever the J record declares."""

from __future__ import annotations

from dataclasses import dataclass

from igc.errors import InvalidSyntax, NonASCIICharacters
from igc.extension import Extendable
from igc.layout import K_RECORD, K_RECORD_BASE_LENGTH, byte_length, is_ascii
from igc.time import Time


@dataclass(frozen=True)
class KRecord(Extendable):
    """
    An extension data record.

    Carries only a timestamp by default. Everything after byte 7 is kept as
    an opaque extension string and decoded on demand:

        rec = KRecord.parse("K095214FooTheBar")
        rec.get_extension(Extension(8, 10, "FXA"))   # "Foo"
    """

    TAG = K_RECORD
    BASE_LENGTH = K_RECORD_BASE_LENGTH

    time: Time
    extension_string: str

    @classmethod
    def parse(cls, line: str) -> KRecord:
        if not line.startswith(K_RECORD):
            raise InvalidSyntax(f"Not a K record: {line[:8]!r}")
        if byte_length(line) <= K_RECORD_BASE_LENGTH:
            raise InvalidSyntax(
                f"K record must be longer than {K_RECORD_BASE_LENGTH} bytes, "
                f"got {byte_length(line)}"
            )
        # Must precede any slicing: extension offsets are byte positions
        if not is_ascii(line):
            raise NonASCIICharacters("K record contains non-ASCII characters")

        return cls(
            time=Time.parse(line[1:K_RECORD_BASE_LENGTH]),
            extension_string=line[K_RECORD_BASE_LENGTH:],
        )

    def format(self) -> str:
        return f"{K_RECORD}{self.time}{self.extension_string}"

    def __str__(self) -> str:
        return self.format()
