"""
IGC CLI - Command-line interface for IGC flight recorder records.

Commands:
  igc parse    - Parse one record line and show its fields
  igc extract  - Decode a single extension byte range from a record line
  igc validate - Check every supported line of an .igc file
  igc convert  - Convert an .igc file to JSON, or JSON back to record lines
  igc view     - Browse an .igc file in a TUI

Extension descriptors are written START:END[:MNEMONIC], 1-based and
inclusive, counted from the start of the line. When -e is not given, the
IGC_EXTENSIONS environment variable (comma separated) supplies defaults.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path


def _parse_descriptor(text: str):
    """Parse ``START:END[:MNEMONIC]`` into an Extension."""
    from igc.extension import Extension

    parts = text.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Bad extension descriptor {text!r} (expected START:END[:MNEMONIC])")
    try:
        start, end = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Bad extension descriptor {text!r}: byte positions must be integers") from None
    mnemonic = parts[2] if len(parts) == 3 else ""
    return Extension(start_byte=start, end_byte=end, mnemonic=mnemonic)


def _descriptors(args: argparse.Namespace) -> list:
    """Descriptors from -e flags, else from IGC_EXTENSIONS."""
    specs = getattr(args, "extension", None) or []
    if not specs:
        env = os.environ.get("IGC_EXTENSIONS", "")
        specs = [s for s in env.split(",") if s.strip()]
    return [_parse_descriptor(s) for s in specs]


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse a single record line."""
    from igc.converters import to_dict
    from igc.extension import Extendable, decode_extensions
    from igc.records import DRecord, parse_record

    try:
        descriptors = _descriptors(args)
        record = parse_record(args.line)
        if descriptors and not isinstance(record, Extendable):
            print(f"Warning: {record.TAG} records carry no extension string, ignoring extension descriptors", file=sys.stderr)
        if args.json:
            print(json.dumps(to_dict(record, descriptors), indent=2))
            return
        decoded = decode_extensions(record, descriptors) if isinstance(record, Extendable) else []
    except ValueError as e:
        _fail(str(e))

    print(f"TYPE: {record.TAG}")
    if isinstance(record, DRecord):
        print(f"  qualifier:  {record.qualifier.value}")
        print(f"  station_id: {record.station_id}")
    else:
        t = record.time
        print(f"  time:       {t.hours:02d}:{t.minutes:02d}:{t.seconds:02d}")
        print(f"  extension:  {record.extension_string}")
    if decoded:
        print()
        print("EXTENSIONS:")
        for ext, value in decoded:
            print(f"  {ext.mnemonic or '?':8s}  {ext.start_byte:>3d}..{ext.end_byte:<3d}  {value}")


def cmd_extract(args: argparse.Namespace) -> None:
    """Decode one byte range from an extendable record."""
    from igc.extension import Extendable, Extension, get_extension
    from igc.records import parse_record

    try:
        record = parse_record(args.line)
        if not isinstance(record, Extendable):
            _fail(f"{record.TAG} records carry no extension string")
        value = get_extension(record, Extension(args.start, args.end))
    except ValueError as e:
        _fail(str(e))
    print(value)


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate every supported line of an .igc file."""
    from igc.reader import IGCReader

    path = args.path
    if not Path(path).is_file():
        _fail(f"File not found: {path}")

    try:
        lines = IGCReader.read(path)
    except ValueError as e:
        print(f"FAIL: {e}")
        sys.exit(1)

    checked = [line for line in lines if line.supported]
    failures = [line for line in checked if not line.ok]
    for line in failures:
        print(f"  line {line.line_no}: {type(line.error).__name__}: {line.error}")

    if failures:
        print(f"FAIL: {path}: {len(failures)} of {len(checked)} records invalid")
        sys.exit(1)
    print(f"OK: {path}: {len(checked)} records valid ({len(lines) - len(checked)} lines not checked)")


def cmd_convert(args: argparse.Namespace) -> None:
    """Convert an .igc file to JSON, or JSON back to record lines."""
    from igc.converters import from_json, to_dict
    from igc.reader import IGCReader

    input_path = Path(args.input)
    if not input_path.is_file():
        _fail(f"File not found: {args.input}")
    if args.output and ".." in Path(args.output).parts:
        _fail("Output path must not contain '..' (path traversal)")

    try:
        if args.direction == "to":
            lines = IGCReader.read(input_path)
            records = [line.record for line in lines if line.record is not None]
            skipped = sum(1 for line in lines if not line.ok)
            if skipped:
                print(f"Warning: skipped {skipped} invalid records", file=sys.stderr)
            descriptors = _descriptors(args)
            data = [to_dict(r, descriptors, strict=False) for r in records]
            undecoded = sum(
                1 for d in data for e in d.get("extensions", []) if "error" in e
            )
            if undecoded:
                print(f"Warning: {undecoded} extension values could not be decoded", file=sys.stderr)
            result = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        else:
            records = from_json(input_path.read_text(encoding="utf-8"))
            result = "".join(f"{r}\r\n" for r in records)
    except ValueError as e:
        _fail(str(e))

    if args.output:
        Path(args.output).write_bytes(result.encode("utf-8"))
        print(f"Converted {args.input} -> {args.output} ({len(records)} records)")
    else:
        print(result, end="")


def cmd_view(args: argparse.Namespace) -> None:
    """Browse an .igc file in the TUI viewer."""
    try:
        descriptors = _descriptors(args)
    except ValueError as e:
        _fail(str(e))

    try:
        from igc.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install \"igc-records[tui]\"",
            file=sys.stderr,
        )
        sys.exit(1)
    run_viewer(args.path, descriptors)


def _add_extension_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-e", "--extension", action="append", metavar="START:END[:MNEMONIC]",
        help="Extension descriptor (repeatable; default from IGC_EXTENSIONS)",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="igc",
        description="IGC flight recorder record parser.",
    )
    from igc import __version__
    parser.add_argument("--version", action="version", version=f"igc {__version__}")
    sub = parser.add_subparsers(dest="command")

    # parse
    p_parse = sub.add_parser("parse", help="Parse one record line")
    p_parse.add_argument("line", help="Record line, e.g. K095214FooTheBar")
    p_parse.add_argument("--json", action="store_true", help="Print as JSON")
    _add_extension_flag(p_parse)

    # extract
    p_extract = sub.add_parser("extract", help="Decode one extension byte range")
    p_extract.add_argument("line", help="Extendable record line")
    p_extract.add_argument("start", type=int, help="Start byte (1-based, inclusive)")
    p_extract.add_argument("end", type=int, help="End byte (1-based, inclusive)")

    # validate
    p_validate = sub.add_parser("validate", help="Validate an .igc file")
    p_validate.add_argument("path", help="Path to .igc file")

    # convert
    p_convert = sub.add_parser("convert", help="Convert to/from JSON")
    p_convert.add_argument("direction", choices=["to", "from"], help="Conversion direction")
    p_convert.add_argument("format", choices=["json"], help="Other format")
    p_convert.add_argument("input", help="Input file path")
    p_convert.add_argument("-o", "--output", help="Output file path")
    _add_extension_flag(p_convert)

    # view
    p_view = sub.add_parser("view", help="Browse an .igc file (TUI)")
    p_view.add_argument("path", help="Path to .igc file")
    _add_extension_flag(p_view)

    args = parser.parse_args(argv)

    if not args.command:
        print("IGC - flight recorder record parser\n")
        print("Usage:")
        print("  igc parse D1ABCD")
        print("  igc parse K095214FooTheBar -e 8:10:FXA -e 11:13:SIU")
        print("  igc extract K095214FooTheBar 14 16")
        print("  igc validate flight.igc")
        print("  igc convert to json flight.igc -o flight.json")
        print("  igc convert from json flight.json -o records.igc")
        print("  igc view flight.igc")
        print()
        print("Run 'igc <command> --help' for details on any command.")
        sys.exit(0)

    commands = {
        "parse": cmd_parse,
        "extract": cmd_extract,
        "validate": cmd_validate,
        "convert": cmd_convert,
        "view": cmd_view,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
