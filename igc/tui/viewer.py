"""IGC TUI Viewer - Main Textual app with 3-panel layout."""

from __future__ import annotations

import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Input

from igc.extension import Extension
from igc.reader import IGCReader, ParsedLine
from igc.tui.widgets import LineList, RecordPanel, SummaryPanel


class IGCViewerApp(App):
    """TUI viewer for .igc files. Lines on the left, parsed record on the right."""

    TITLE = "IGC Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    #filter-bar {
        dock: bottom;
        display: none;
        height: 3;
        padding: 0 1;
    }
    #filter-bar.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("slash", "toggle_filter", "Filter", show=True),
        Binding("escape", "close_filter", "Close filter", show=False),
        Binding("j", "next_line", "Next", show=True),
        Binding("k", "prev_line", "Prev", show=True),
    ]

    def __init__(
        self,
        igc_path: str | Path,
        extensions: list[Extension] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._igc_path = Path(igc_path)
        self._extensions = list(extensions or [])
        self._all_lines: list[ParsedLine] = []

    def compose(self) -> ComposeResult:
        self._all_lines = IGCReader.read(self._igc_path)
        self.title = f"IGC Viewer - {self._igc_path.name}"

        yield Header()

        with Horizontal(id="main-area"):
            yield SummaryPanel(
                file_name=self._igc_path.name,
                lines=self._all_lines,
                extensions=self._extensions,
                id="summary",
            )
            yield LineList(lines=self._all_lines, id="lines")
            yield RecordPanel(extensions=self._extensions, id="record")

        yield Input(placeholder="Filter by record tag or text... (Escape to close)", id="filter-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._all_lines:
            self.query_one("#record", RecordPanel).show_line(self._all_lines[0])
            self.query_one("#lines", LineList).focus()

    def on_line_list_line_selected(self, event: LineList.LineSelected) -> None:
        self.query_one("#record", RecordPanel).show_line(event.line)

    def action_next_line(self) -> None:
        self.query_one("#lines", LineList).action_cursor_down()

    def action_prev_line(self) -> None:
        self.query_one("#lines", LineList).action_cursor_up()

    async def action_toggle_filter(self) -> None:
        bar = self.query_one("#filter-bar", Input)
        bar.toggle_class("visible")
        if bar.has_class("visible"):
            bar.focus()
        else:
            await self.action_close_filter()

    async def action_close_filter(self) -> None:
        bar = self.query_one("#filter-bar", Input)
        bar.remove_class("visible")
        bar.value = ""
        await self._update_line_list(self._all_lines)
        self.query_one("#lines", LineList).focus()

    async def on_input_changed(self, event: Input.Changed) -> None:
        """Filter lines as the user types. A single letter matches the tag."""
        if event.input.id != "filter-bar":
            return
        query = event.value.strip()
        if not query:
            await self._update_line_list(self._all_lines)
            return
        if len(query) == 1:
            matches = [line for line in self._all_lines if line.tag == query.upper()]
        else:
            matches = [line for line in self._all_lines if query.lower() in line.raw.lower()]
        await self._update_line_list(matches)

    async def _update_line_list(self, lines: list[ParsedLine]) -> None:
        await self.query_one("#lines", LineList).set_lines(lines)
        if lines:
            self.query_one("#record", RecordPanel).show_line(lines[0])


def run_viewer(path: str | Path, extensions: list[Extension] | None = None) -> None:
    """Launch the IGC TUI viewer."""
    path = Path(path)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    if not IGCReader.is_igc(path):
        print(f"Error: Not an IGC file: {path}", file=sys.stderr)
        sys.exit(1)

    app = IGCViewerApp(path, extensions)
    app.run()
