# ui.py
from typing import List, Optional

from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import (Button, DataTable, Input, Label, Markdown, RichLog,
                             Static)

from models import ResultRecord

class SearchControls(Static):
    """Widget for the search input and button."""
    class SearchRequested(Message):
        def __init__(self, query: str) -> None:
            self.query = query
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("Search the iTunes Store:")
        yield Input(placeholder="e.g., Daft Punk", id="search-input")
        yield Button("Search", id="search-button", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.post_search_message()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.post_search_message()

    def post_search_message(self) -> None:
        # An empty term is still a valid search against the endpoint.
        self.post_message(self.SearchRequested(self.query_one(Input).value))


class DetailsPane(Static):
    """Widget to display details of the highlighted media item."""
    def on_mount(self) -> None:
        self.update_details(None)

    def update_details(self, result: Optional[ResultRecord]) -> None:
        if result:
            artwork = f"`{result.artwork_url}`" if result.artwork_url else "*none*"
            preview = f"`{result.preview_url}`" if result.preview_url else "*none*"
            content = (f"## {result.title}\n\n- **Artist**: {result.artist}\n"
                       f"- **Kind**: {result.media_kind}\n- **Artwork**: {artwork}\n"
                       f"- **Preview**: {preview}")
        else:
            content = "## Details\n\n*Select an item to see its details.*"
        self.query_one(Markdown).update(content)

    def compose(self) -> ComposeResult:
        yield Markdown()


class ResultsDisplay(DataTable):
    """Widget for the main results table."""
    class RowSelected(Message):
        def __init__(self, key: str) -> None:
            self.key = key
            super().__init__()

    class RowHighlighted(Message):
        def __init__(self, key: Optional[str]) -> None:
            self.key = key
            super().__init__()

    def on_mount(self) -> None:
        self.add_columns("Title", "Artist", "Kind")
        self.cursor_type = "row"

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value is not None:
            self.post_message(self.RowSelected(event.row_key.value))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self.post_message(self.RowHighlighted(event.row_key.value))

    def update_results(self, results: List[ResultRecord]) -> None:
        self.clear()
        for r in results:
            self.add_row(r.title, r.artist, r.media_kind, key=r.identity)
        if results:
            self.focus()


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)
