"""
IGC Reader - Split a flight log into lines and run each through its parser.

The record parsers know nothing about files. This module is the thin caller
that does: it reads bytes, normalises line endings, and keeps one
ParsedLine per non-blank line, with either the parsed record or the error
that line produced. Bad lines never abort the read.

Safety features:
  - File size limit (prevents OOM from huge or hostile files)
  - Undecodable bytes are replaced, which the K parser then rejects as
    non-ASCII rather than slicing through them
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from igc.errors import ParseError, UnsupportedRecordType
from igc.layout import MANUFACTURER_RECORD, MAX_FILE_SIZE
from igc.records import Record, parse_record


@dataclass(frozen=True)
class ParsedLine:
    """One line of a file and the outcome of parsing it."""
    line_no: int            # 1-based
    raw: str
    record: Record | None = None
    error: ParseError | None = None

    @property
    def supported(self) -> bool:
        """False for record types this package has no parser for."""
        return self.record is not None or self.error is not None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def tag(self) -> str:
        return self.raw[:1]


class IGCReader:
    """
    Whole-file IGC reader.

    Usage:
        lines = IGCReader.read("flight.igc")
        for line in lines:
            if not line.ok:
                print(line.line_no, line.error)
    """

    @staticmethod
    def is_igc(path: str | Path) -> bool:
        """Fast check: IGC files open with an A (manufacturer) record."""
        with open(path, "rb") as f:
            head = f.read(1)
        return IGCReader.is_igc_bytes(head)

    @staticmethod
    def is_igc_bytes(data: bytes) -> bool:
        return data[:1] == MANUFACTURER_RECORD.encode("ascii")

    @classmethod
    def read(cls, path: str | Path, max_size: int = MAX_FILE_SIZE) -> list[ParsedLine]:
        """Read and parse an IGC file."""
        path = Path(path)
        file_size = path.stat().st_size
        if file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        return cls.parse(path.read_bytes())

    @classmethod
    def parse(cls, data: bytes, max_size: int = MAX_FILE_SIZE) -> list[ParsedLine]:
        """Parse raw file bytes into ParsedLines (blank lines are skipped)."""
        if len(data) > max_size:
            raise ValueError(
                f"Input size {len(data)} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        text = data.decode("utf-8", errors="replace")
        # Normalize CRLF/CR to LF; IGC files are CRLF on disk
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return cls.parse_lines(text.split("\n"))

    @staticmethod
    def parse_lines(lines: list[str]) -> list[ParsedLine]:
        """Parse already-split lines. Line numbers count blank lines too."""
        parsed: list[ParsedLine] = []
        for line_no, line in enumerate(lines, start=1):
            if not line:
                continue
            try:
                record = parse_record(line)
            except UnsupportedRecordType:
                parsed.append(ParsedLine(line_no=line_no, raw=line))
            except ParseError as e:
                parsed.append(ParsedLine(line_no=line_no, raw=line, error=e))
            else:
                parsed.append(ParsedLine(line_no=line_no, raw=line, record=record))
        return parsed
