"""
TUI Tests - Detail panel text and filter bar of the viewer. Skipped without textual.
"""

import asyncio

import pytest

pytest.importorskip("textual")

from igc.extension import Extension
from igc.reader import IGCReader
from igc.tui.viewer import IGCViewerApp
from igc.tui.widgets import LineList, RecordPanel, describe


LINES = {l.line_no: l for l in IGCReader.parse(
    b"AXXXABC\r\nD20331\r\nK095214FooTheBar\r\nK250000Foo\r\n"
)}


class TestDescribe:

    def test_d_record(self):
        text = describe(LINES[2], [])
        assert "qualifier:  dgps" in text
        assert "station_id: 0331" in text

    def test_k_record_with_extensions(self):
        text = describe(LINES[3], [Extension(8, 10, "FXA"), Extension(14, 20, "ENL")])
        assert "time:       09:52:14" in text
        assert "FXA" in text and "Foo" in text
        # A bad descriptor is shown inline instead of breaking the panel
        assert "<OutOfRange:" in text

    def test_error_line(self):
        assert "OutOfRange:" in describe(LINES[4], [])

    def test_unsupported_line(self):
        assert "No parser for 'A' records" in describe(LINES[1], [])


class TestViewerApp:

    def test_create(self, tmp_path):
        path = tmp_path / "flight.igc"
        path.write_bytes(b"AXXXABC\r\nD20331\r\n")
        app = IGCViewerApp(path, [Extension(8, 10, "FXA")])
        assert app.TITLE == "IGC Viewer"

    def test_filter_by_tag_and_close(self, tmp_path):
        path = tmp_path / "flight.igc"
        path.write_bytes(
            b"AXXXABC\r\nD20331\r\nK095214FooTheBar\r\nB110135\r\nK095215FooTheBaz\r\n"
        )

        async def run():
            app = IGCViewerApp(path)
            async with app.run_test() as pilot:
                await pilot.press("slash")
                await pilot.press("K")
                await pilot.pause()
                lines = app.query_one("#lines", LineList)
                assert [l.line_no for l in lines.lines] == [3, 5]
                assert len(lines) == 2
                assert app.query_one("#record", RecordPanel).current_line == 3

                await pilot.press("escape")
                await pilot.pause()
                await pilot.pause()
                lines = app.query_one("#lines", LineList)
                assert len(lines.lines) == 5
                assert len(lines) == 5

        asyncio.run(run())
