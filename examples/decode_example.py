"""Decode the extension fields of a small IGC file to see how descriptors work."""

import sys
sys.path.insert(0, str(__import__("pathlib").Path(__file__).parent.parent))

from igc.extension import Extension, decode_extensions
from igc.reader import IGCReader
from igc.records import DRecord, KRecord

FLIGHT = b"""AXXXABC FLIGHT:1\r
HFDTE150709\r
J030810FXA1113SIU1416ENL\r
D20331\r
B1101355206343N00006198WA0058700558\r
K110135045012003\r
K110235046013000\r
K116035047013001\r
"""

# Normally read from the J record; written out by hand here.
DECLARED = [
    Extension(8, 10, "FXA"),
    Extension(11, 13, "SIU"),
    Extension(14, 16, "ENL"),
]

for line in IGCReader.parse(FLIGHT):
    if not line.supported:
        continue
    if not line.ok:
        print(f"{line.line_no:>3d}  {line.raw:<20s}  {type(line.error).__name__}: {line.error}")
        continue
    record = line.record
    if isinstance(record, DRecord):
        print(f"{line.line_no:>3d}  {line.raw:<20s}  {record.qualifier.value} station {record.station_id}")
    elif isinstance(record, KRecord):
        fields = ", ".join(f"{ext.mnemonic}={value}" for ext, value in decode_extensions(record, DECLARED))
        print(f"{line.line_no:>3d}  {line.raw:<20s}  {record.time}  {fields}")
