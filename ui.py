# ui.py
from typing import Optional, Sequence

from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import (Button, DataTable, Input, Label, Markdown, RichLog,
                             Static)

from models import DisplayState, SearchResult

LOADING_ROW_KEY = "loading"
EMPTY_ROW_KEY = "empty"

class SearchControls(Static):
    """Widget for the search input and button."""
    class SearchRequested(Message):
        def __init__(self, query: str) -> None:
            self.query = query
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("Search the iTunes Store:")
        yield Input(id="search-input", placeholder="Artist, song, album...")
        yield Button("Search", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.post_search_message()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.post_search_message()

    def post_search_message(self) -> None:
        query = self.query_one(Input).value
        if query.strip():
            self.post_message(self.SearchRequested(query))


class DetailsPane(Static):
    """Widget to display details of the highlighted result."""
    def on_mount(self) -> None:
        self.update_details(None)

    def update_details(self, result: Optional[SearchResult]) -> None:
        if result:
            preview = f"`{result.preview_url}`" if result.preview_url else "*No preview*"
            content = (
                f"## {result.display_name}\n\n"
                f"- **Artist**: {result.artist or 'Unknown'}\n"
                f"- **Type**: {result.type_label}\n"
                f"- **Album**: {result.collection_name or 'N/A'}\n"
                f"- **Artwork**: `{result.image_small_url}`\n"
                f"- **Preview**: {preview}"
            )
        else:
            content = "## Details\n\n*Select a result to see its details. Press Enter to play its preview.*"
        self.query_one(Markdown).update(content)

    def compose(self) -> ComposeResult:
        yield Markdown()


class ResultsDisplay(DataTable):
    """Widget for the main results table."""
    class RowSelected(Message):
        def __init__(self, index: int) -> None:
            self.index = index
            super().__init__()

    class RowHighlighted(Message):
        def __init__(self, index: Optional[int]) -> None:
            self.index = index
            super().__init__()

    def on_mount(self) -> None:
        self.add_columns("Name", "Artist")
        self.cursor_type = "row"

    @staticmethod
    def _index(key: Optional[str]) -> Optional[int]:
        return int(key) if key and key.isdigit() else None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        index = self._index(event.row_key.value)
        if index is not None:
            self.post_message(self.RowSelected(index))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self.post_message(self.RowHighlighted(self._index(event.row_key.value)))

    def update_results(self, state: DisplayState, results: Sequence[SearchResult]) -> None:
        self.clear()
        if state is DisplayState.LOADING:
            self.add_row("Loading...", "", key=LOADING_ROW_KEY)
            return
        if state is DisplayState.LOADED_EMPTY:
            self.add_row("(Nothing found)", "", key=EMPTY_ROW_KEY)
            return
        for i, r in enumerate(results):
            self.add_row(r.display_name, r.artist_line, key=str(i))
        if results:
            self.focus()


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)
