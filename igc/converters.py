"""
IGC Converters - Parsed records to/from plain dicts and JSON.

    DRecord -> {"type": "D", "qualifier": "gps", "station_id": "ABCD"}
    KRecord -> {"type": "K",
                "time": {"hours": 9, "minutes": 52, "seconds": 14},
                "extension_string": "FooTheBar"}

Passing extension descriptors to to_dict() adds the decoded values:

    "extensions": [{"mnemonic": "FXA", "start_byte": 8, "end_byte": 10, "value": "Foo"}]

With strict=False a descriptor that does not fit the record is annotated
instead of raising:

    {"mnemonic": "ENL", "start_byte": 14, "end_byte": 16,
     "error": "OutOfRange: ..."}

Decoded values are output only; from_dict() ignores them and rebuilds the
record from its raw fields.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

from igc.errors import ParseError
from igc.extension import Extendable, Extension, get_extension
from igc.records import DRecord, GpsQualifier, KRecord, Record
from igc.time import Time


def to_dict(
    record: Record,
    extensions: Sequence[Extension] = (),
    strict: bool = True,
) -> dict[str, Any]:
    """Convert a parsed record to a JSON-ready dict.

    In strict mode a descriptor that cannot be decoded raises its ParseError;
    otherwise the entry carries an "error" string in place of "value".
    """
    if isinstance(record, DRecord):
        data: dict[str, Any] = {
            "type": DRecord.TAG,
            "qualifier": record.qualifier.value,
            "station_id": record.station_id,
        }
    elif isinstance(record, KRecord):
        data = {
            "type": KRecord.TAG,
            "time": {
                "hours": record.time.hours,
                "minutes": record.time.minutes,
                "seconds": record.time.seconds,
            },
            "extension_string": record.extension_string,
        }
    else:
        raise TypeError(f"Unsupported record: {type(record).__name__}")

    if extensions and isinstance(record, Extendable):
        data["extensions"] = [_extension_entry(record, ext, strict) for ext in extensions]
    return data


def from_dict(data: Any) -> Record:
    """Rebuild a record from to_dict() output.

    Validates the structure to avoid type confusion: ValueError for shape
    problems, the usual ParseError subclasses for bad field values.
    """
    if not isinstance(data, dict):
        raise ValueError("Invalid record: expected a JSON object")

    kind = data.get("type")
    if kind == DRecord.TAG:
        qualifier = _require_str(data, "qualifier")
        station_id = _require_str(data, "station_id")
        try:
            q = GpsQualifier(qualifier)
        except ValueError:
            raise ValueError(f"Invalid record: unknown qualifier {qualifier!r}") from None
        # Round-trip through the parser so length rules apply
        return DRecord.parse(str(DRecord(qualifier=q, station_id=station_id)))

    if kind == KRecord.TAG:
        time = data.get("time")
        if not isinstance(time, dict):
            raise ValueError("Invalid record: 'time' must be a JSON object")
        parts = []
        for key in ("hours", "minutes", "seconds"):
            val = time.get(key)
            # bool is an int subclass; reject it explicitly
            if not isinstance(val, int) or isinstance(val, bool):
                raise ValueError(f"Invalid record: time.{key} must be an integer")
            parts.append(val)
        extension_string = _require_str(data, "extension_string")
        line = f"{KRecord.TAG}{Time.from_hms(*parts)}{extension_string}"
        return KRecord.parse(line)

    raise ValueError(f"Invalid record: unknown type {kind!r}")


def to_json(
    records: Iterable[Record],
    extensions: Sequence[Extension] = (),
    indent: int = 2,
    strict: bool = True,
) -> str:
    """Convert records to a JSON array string."""
    return json.dumps(
        [to_dict(r, extensions, strict) for r in records],
        indent=indent,
        ensure_ascii=False,
    )


def from_json(json_str: str) -> list[Record]:
    """Parse a JSON array produced by to_json()."""
    data = json.loads(json_str)
    if not isinstance(data, list):
        raise ValueError("Invalid IGC JSON: expected a JSON array at top level")
    return [from_dict(item) for item in data]


def _require_str(data: dict, key: str) -> str:
    val = data.get(key)
    if not isinstance(val, str):
        raise ValueError(f"Invalid record: {key!r} must be a string")
    return val


def _extension_entry(record: Extendable, ext: Extension, strict: bool) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "mnemonic": ext.mnemonic,
        "start_byte": ext.start_byte,
        "end_byte": ext.end_byte,
    }
    try:
        entry["value"] = get_extension(record, ext)
    except ParseError as e:
        if strict:
            raise
        entry["error"] = f"{type(e).__name__}: {e}"
    return entry
