"""IGC TUI Widgets - Custom panels for the IGC viewer."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Label, ListItem, ListView, Static

from igc.errors import ParseError
from igc.extension import Extendable, Extension, get_extension
from igc.reader import ParsedLine
from igc.records import DRecord, KRecord


class SummaryPanel(Static):
    """Sidebar panel with per-file counts and the active extension descriptors."""

    DEFAULT_CSS = """
    SummaryPanel {
        width: 32;
        border: solid $accent;
        padding: 1;
        overflow-y: auto;
    }
    SummaryPanel .summary-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    SummaryPanel .summary-key {
        color: $text-muted;
    }
    SummaryPanel .status-valid {
        color: $success;
        text-style: bold;
    }
    SummaryPanel .status-invalid {
        color: $error;
        text-style: bold;
    }
    """

    def __init__(
        self,
        file_name: str,
        lines: list[ParsedLine],
        extensions: list[Extension],
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._file_name = file_name
        self._lines = lines
        self._extensions = extensions

    def compose(self) -> ComposeResult:
        yield Label(self._file_name, classes="summary-title")

        checked = [line for line in self._lines if line.supported]
        failures = sum(1 for line in checked if not line.ok)
        if failures:
            yield Label(f"Invalid: {failures} of {len(checked)}", classes="status-invalid")
        else:
            yield Label(f"Valid: {len(checked)} records", classes="status-valid")
        yield Label(f"Not checked: {len(self._lines) - len(checked)}", classes="summary-key")

        yield Label("")  # spacer

        yield Label("Extensions:", classes="summary-key")
        if not self._extensions:
            yield Label("  (none, use -e)")
        for ext in self._extensions:
            yield Label(f"  {ext.mnemonic or '?'} {ext.start_byte}..{ext.end_byte}")


class LineList(ListView):
    """List of the file's lines. Supports keyboard navigation."""

    DEFAULT_CSS = """
    LineList {
        width: 40;
        border: solid $accent;
    }
    LineList > ListItem {
        padding: 0 1;
    }
    LineList > ListItem.--highlight {
        background: $accent;
    }
    LineList > ListItem.invalid {
        color: $error;
    }
    """

    class LineSelected(Message):
        """Fired when a line is selected."""

        def __init__(self, line: ParsedLine, list_index: int) -> None:
            self.line = line
            self.list_index = list_index
            super().__init__()

    def __init__(self, lines: list[ParsedLine], **kwargs) -> None:
        self._lines = lines
        super().__init__(**kwargs)

    @property
    def lines(self) -> list[ParsedLine]:
        return self._lines

    def compose(self) -> ComposeResult:
        for line in self._lines:
            yield _line_item(line)

    async def set_lines(self, lines: list[ParsedLine]) -> None:
        """Replace the listed lines in place and highlight the first one."""
        self._lines = lines
        await self.clear()
        await self.extend(_line_item(line) for line in lines)
        self.index = 0 if lines else None

    def _post_selected(self) -> None:
        idx = self.index or 0
        if 0 <= idx < len(self._lines):
            self.post_message(self.LineSelected(self._lines[idx], idx))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        self._post_selected()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        self._post_selected()


def _line_item(line: ParsedLine) -> ListItem:
    label = line.raw if len(line.raw) <= 32 else line.raw[:31] + "~"
    classes = "" if line.ok else "invalid"
    return ListItem(Label(f"{line.line_no:>5d} {label}"), classes=classes)


class RecordPanel(Static):
    """Detail view: parsed fields, the parse error, or decoded extensions."""

    DEFAULT_CSS = """
    RecordPanel {
        border: solid $accent;
        padding: 1;
        overflow: auto;
    }
    RecordPanel .record-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    RecordPanel .record-body {
        color: $text;
    }
    """

    current_line = reactive(0)

    def __init__(self, extensions: list[Extension], **kwargs) -> None:
        super().__init__(**kwargs)
        self._extensions = extensions
        self._title_widget: Label | None = None
        self._body_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._title_widget = Label("Select a line", classes="record-title")
        self._body_widget = Static("", classes="record-body")
        yield self._title_widget
        yield self._body_widget

    def show_line(self, line: ParsedLine) -> None:
        self.current_line = line.line_no
        if self._title_widget:
            self._title_widget.update(f"--- line {line.line_no} ({line.tag}) ---")
        if self._body_widget:
            self._body_widget.update(describe(line, self._extensions))
        self.scroll_home()


def describe(line: ParsedLine, extensions: list[Extension]) -> str:
    """Plain-text description of a parsed line for the detail panel."""
    out = [line.raw, ""]
    if line.error is not None:
        out.append(f"{type(line.error).__name__}: {line.error}")
        return "\n".join(out)
    record = line.record
    if record is None:
        out.append(f"No parser for {line.tag!r} records")
        return "\n".join(out)

    if isinstance(record, DRecord):
        out.append(f"qualifier:  {record.qualifier.value}")
        out.append(f"station_id: {record.station_id}")
    elif isinstance(record, KRecord):
        t = record.time
        out.append(f"time:       {t.hours:02d}:{t.minutes:02d}:{t.seconds:02d}")
        out.append(f"extension:  {record.extension_string}")

    if isinstance(record, Extendable) and extensions:
        out.append("")
        for ext in extensions:
            try:
                value = get_extension(record, ext)
            except ParseError as e:
                value = f"<{type(e).__name__}: {e}>"
            out.append(f"{ext.mnemonic or '?':8s} {ext.start_byte:>3d}..{ext.end_byte:<3d} {value}")
    return "\n".join(out)
