"""Flight Deck - a TUI for watching documents extract and stream."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.message import Message
from textual.widgets import (
    Button,
    DataTable,
    DirectoryTree,
    Footer,
    Header,
    Input,
    Label,
    Log,
    ProgressBar,
    Rule,
    Static,
)

from officereader.config import ReaderSettings, get_settings
from officereader.models import CacheStats
from officereader.reader import DocumentReader
from officereader.utils import is_supported


@dataclass
class StreamStats:
    """Statistics tracked while a document streams."""

    total_chars: int = 0
    total_pages: int = 0
    position: int = 0
    chunks: int = 0
    progress: float = 0.0
    backend: str = ""
    current_file: str = ""
    status: str = "idle"
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def elapsed(self) -> str:
        if not self.start_time:
            return "00:00"
        end = self.end_time or datetime.now()
        minutes, seconds = divmod(int((end - self.start_time).total_seconds()), 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def rate(self) -> str:
        if not self.start_time or self.position == 0:
            return "-- chars/s"
        end = self.end_time or datetime.now()
        elapsed = (end - self.start_time).total_seconds()
        if elapsed == 0:
            return "-- chars/s"
        return f"{self.position / elapsed:,.0f} chars/s"

    def copy(self) -> "StreamStats":
        return replace(self)


class StatsPanel(Static):
    """Streaming and cache statistics."""

    def compose(self) -> ComposeResult:
        yield Static(id="stats-content")

    def on_mount(self) -> None:
        self.update_display(StreamStats(), CacheStats(entry_count=0, total_bytes=0))

    def update_display(self, stats: StreamStats, cache: CacheStats) -> None:
        content = self.query_one("#stats-content", Static)
        status_color = {
            "idle": "dim",
            "extracting": "yellow",
            "streaming": "green",
            "complete": "cyan",
            "error": "red",
        }.get(stats.status, "white")

        content.update(f"""[b]STATUS[/b]  [{status_color}]{stats.status.upper()}[/]

[b]TIME[/b]    {stats.elapsed}  {stats.rate}

[b]DOCUMENT[/b]
  Backend     [blue]{stats.backend or '--'}[/]
  Pages       [cyan]{stats.total_pages:,}[/]
  Characters  [cyan]{stats.total_chars:,}[/]

[b]STREAM[/b]
  Position    [green]{stats.position:,}[/]
  Chunks      [magenta]{stats.chunks:,}[/]
  Progress    [yellow]{stats.progress:.1f}%[/]

[b]CACHE[/b]
  Entries     [cyan]{cache.entry_count:,}[/]
  Memory      [cyan]{cache.total_bytes / 1024:.1f} KB[/]
  Hits/Misses [green]{cache.hits}[/]/[yellow]{cache.misses}[/]""")


class CurrentFileDisplay(Static):
    """Display for the document being streamed."""

    def compose(self) -> ComposeResult:
        yield Static("[dim]Waiting for a document...[/]", id="current-file-content")

    def update_file(self, file: str) -> None:
        content = self.query_one("#current-file-content", Static)
        if file:
            display = file if len(file) < 50 else "..." + file[-47:]
            content.update(f"[bold cyan]>[/] {display}")
        else:
            content.update("[dim]Waiting for a document...[/]")


class ChunkLogTable(DataTable):
    """Live chunk log as a table."""

    def on_mount(self) -> None:
        self.add_columns("#", "Range", "Chars", "Progress", "Preview")
        self.cursor_type = "row"

    def add_chunk(self, number: int, start: int, end: int, progress: float, preview: str) -> None:
        preview = " ".join(preview.split())
        if len(preview) > 40:
            preview = preview[:37] + "..."
        self.add_row(
            str(number),
            f"{start:,}-{end:,}",
            f"[magenta]{end - start:,}[/]",
            f"{progress:.1f}%",
            f"[dim]{preview}[/]",
        )
        self.scroll_end()


class FlightDeck(App):
    """The Office Reader Flight Deck - streaming console."""

    # Messages for thread-safe communication
    class StatsUpdated(Message):
        def __init__(self, stats: StreamStats) -> None:
            self.stats = stats
            super().__init__()

    class LogMessage(Message):
        def __init__(self, message: str) -> None:
            self.message = message
            super().__init__()

    class ChunkStreamed(Message):
        def __init__(self, number: int, start: int, end: int, progress: float, preview: str) -> None:
            self.number = number
            self.start = start
            self.end = end
            self.progress = progress
            self.preview = preview
            super().__init__()

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        background: $primary-darken-3;
        color: $text;
    }

    Footer {
        background: $primary-darken-3;
    }

    #main-container {
        layout: horizontal;
        height: 100%;
    }

    #left-panel {
        width: 35;
        background: $surface-darken-1;
        border-right: solid $primary-darken-2;
        padding: 1;
    }

    #center-panel {
        width: 1fr;
        padding: 1;
    }

    #right-panel {
        width: 30;
        background: $surface-darken-1;
        border-left: solid $primary-darken-2;
        padding: 1;
    }

    StatsPanel {
        height: auto;
        padding: 1;
        background: $surface-darken-2;
        border: round $primary;
        margin-bottom: 1;
    }

    CurrentFileDisplay {
        height: 3;
        padding: 1;
        background: $boost;
        border: round $secondary;
        margin-bottom: 1;
    }

    #source-input-container {
        height: auto;
        margin-bottom: 1;
    }

    #source-input, #chunk-size-input {
        margin-bottom: 1;
    }

    #action-buttons {
        layout: horizontal;
        height: 3;
        margin-bottom: 1;
    }

    #action-buttons Button {
        margin-right: 1;
    }

    ChunkLogTable {
        height: 100%;
        border: round $primary-darken-1;
    }

    #progress-container {
        height: 3;
        margin-bottom: 1;
    }

    #progress-bar {
        width: 100%;
    }

    #log-panel {
        height: 12;
        border: round $primary-darken-2;
        background: $surface-darken-2;
    }

    .section-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    DirectoryTree {
        height: 100%;
        border: round $primary-darken-1;
        background: $surface-darken-2;
    }
    """

    BINDINGS = [
        Binding("s", "stream", "Stream", show=True),
        Binding("c", "clear", "Clear", show=True),
        Binding("x", "clear_cache", "Clear cache", show=True),
        Binding("q", "quit", "Quit", show=True),
        Binding("d", "toggle_dark", "Toggle Dark Mode"),
    ]

    TITLE = "Office Reader Flight Deck"
    SUB_TITLE = "Streaming Console"

    def __init__(self, settings: ReaderSettings | None = None) -> None:
        super().__init__()
        self.settings = settings or get_settings()
        self.reader = DocumentReader(settings=self.settings)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main-container"):
            # Left panel - Stats & Controls
            with Vertical(id="left-panel"):
                yield Label("MISSION CONTROL", classes="section-title")
                yield StatsPanel()
                yield CurrentFileDisplay()
                yield Rule()
                with Container(id="source-input-container"):
                    yield Label("Document Path")
                    yield Input(
                        placeholder="Enter .pdf/.xlsx/.docx/.pptx path...",
                        id="source-input",
                    )
                    yield Label("Chunk Size")
                    yield Input(
                        value=str(self.settings.default_chunk_size),
                        type="integer",
                        id="chunk-size-input",
                    )
                with Horizontal(id="action-buttons"):
                    yield Button("STREAM", id="stream-btn", variant="success")
                    yield Button("Clear", id="clear-btn", variant="warning")

            # Center panel - Chunk log
            with Vertical(id="center-panel"):
                yield Label("CHUNK LOG", classes="section-title")
                with Container(id="progress-container"):
                    yield ProgressBar(id="progress-bar", total=100, show_eta=False)
                yield ChunkLogTable(id="chunk-log")
                yield Rule()
                yield Label("SYSTEM LOG", classes="section-title")
                yield Log(id="log-panel", highlight=True, auto_scroll=True)

            # Right panel - Directory browser
            with Vertical(id="right-panel"):
                yield Label("FILE BROWSER", classes="section-title")
                yield DirectoryTree(self.settings.project_root or Path.cwd(), id="dir-tree")

        yield Footer()

    def on_mount(self) -> None:
        self._log("Flight Deck initialized")
        self._log("Pick a document and press STREAM to begin")

    def _log(self, message: str) -> None:
        """Add a message to the system log."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.query_one("#log-panel", Log).write_line(f"[{timestamp}] {message}")

    # Message handlers for thread-safe updates
    def on_flight_deck_stats_updated(self, event: StatsUpdated) -> None:
        stats = event.stats
        self.query_one(StatsPanel).update_display(stats, self.reader.cache_stats())
        self.query_one(CurrentFileDisplay).update_file(stats.current_file)
        self.query_one("#progress-bar", ProgressBar).update(progress=stats.progress)

    def on_flight_deck_log_message(self, event: LogMessage) -> None:
        self._log(event.message)

    def on_flight_deck_chunk_streamed(self, event: ChunkStreamed) -> None:
        self.query_one("#chunk-log", ChunkLogTable).add_chunk(
            event.number, event.start, event.end, event.progress, event.preview
        )

    def on_directory_tree_file_selected(
        self, event: DirectoryTree.FileSelected
    ) -> None:
        self.query_one("#source-input", Input).value = str(event.path)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "stream-btn":
            self.action_stream()
        elif event.button.id == "clear-btn":
            self.action_clear()

    def action_toggle_dark(self) -> None:
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"

    def action_clear(self) -> None:
        """Clear the logs and reset stats."""
        self.query_one(StatsPanel).update_display(StreamStats(), self.reader.cache_stats())
        self.query_one(CurrentFileDisplay).update_file("")
        self.query_one("#chunk-log", ChunkLogTable).clear()
        self.query_one("#log-panel", Log).clear()
        self.query_one("#progress-bar", ProgressBar).update(progress=0)
        self._log("Cleared - ready for new run")

    def action_clear_cache(self) -> None:
        self.reader.clear_cache()
        self._log("Extraction cache cleared")

    def action_stream(self) -> None:
        """Start streaming the selected document."""
        source = self.query_one("#source-input", Input).value.strip()
        if not source:
            self._log("[red]ERROR: No document path specified[/]")
            return
        if not is_supported(source):
            self._log(f"[red]ERROR: Unsupported document type: {Path(source).suffix or '(none)'}[/]")
            return
        raw_size = self.query_one("#chunk-size-input", Input).value.strip()
        chunk_size = int(raw_size) if raw_size else self.settings.default_chunk_size
        self.query_one("#chunk-log", ChunkLogTable).clear()
        self.run_stream(source, chunk_size)

    @work(exclusive=True, thread=True)
    def run_stream(self, source: str, chunk_size: int) -> None:
        """Extract (or reuse the cache) and stream in a background thread."""
        stats = StreamStats(current_file=source, status="extracting", start_time=datetime.now())
        self.post_message(self.StatsUpdated(stats.copy()))
        self.post_message(self.LogMessage(f"Opening {source}"))

        probe = self.reader.probe(source)
        if probe.error is not None:
            stats.status = "error"
            stats.end_time = datetime.now()
            self.post_message(self.StatsUpdated(stats.copy()))
            self.post_message(self.LogMessage(f"[red]ERROR ({probe.error_kind}): {probe.error}[/]"))
            return

        stats.backend = probe.backend or ""
        stats.total_chars = probe.total_length or 0
        stats.total_pages = probe.total_pages or 0
        stats.status = "streaming"
        self.post_message(self.StatsUpdated(stats.copy()))
        self.post_message(
            self.LogMessage(
                f"Extracted via {stats.backend}: {stats.total_chars:,} chars, "
                f"{stats.total_pages} pages"
            )
        )

        for record in self.reader.iter_stream(source, chunk_size=chunk_size):
            if record.error is not None:
                stats.status = "error"
                stats.end_time = datetime.now()
                self.post_message(self.StatsUpdated(stats.copy()))
                self.post_message(
                    self.LogMessage(f"[red]ERROR ({record.error_kind}): {record.error}[/]")
                )
                return
            start = stats.position
            stats.position = record.current_position
            stats.progress = record.progress
            stats.chunks += 1
            self.post_message(self.StatsUpdated(stats.copy()))
            self.post_message(
                self.ChunkStreamed(stats.chunks, start, stats.position, record.progress, record.chunk)
            )

        stats.status = "complete"
        stats.end_time = datetime.now()
        self.post_message(self.StatsUpdated(stats.copy()))
        self.post_message(
            self.LogMessage(
                f"[cyan]COMPLETE: {stats.chunks} chunks, {stats.position:,} chars[/]"
            )
        )


def main(settings: ReaderSettings | None = None) -> None:
    """Run the Flight Deck TUI."""
    app = FlightDeck(settings)
    app.run()


if __name__ == "__main__":
    main()
