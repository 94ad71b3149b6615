# main.py
import asyncio
import logging
from typing import List

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.logging import TextualHandler
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input

from config import Config
from controller import SearchController, SearchListener
from errors import FetchError, SuperTunesError
from models import AppState, DisplayState, SearchResult
from services import ItunesFetcher, PreviewPlayer
from ui import DetailsPane, LogPane, ResultsDisplay, SearchControls

STORE_ERROR_MESSAGE = "There was an error accessing the iTunes Store. Please try again."

class AppListener(SearchListener):
    """Forwards controller callbacks into the Textual app."""
    def __init__(self, app: "SuperTunesApp") -> None:
        self.app = app

    def on_state_changed(self, state: DisplayState) -> None:
        self.app.app_state = AppState(display_state=state, results=tuple(self.app.controller.results))

    def on_results_ready(self, results: List[SearchResult]) -> None:
        log = self.app.query_one(LogPane)
        if results:
            log.add_message(f"🎶 Found {len(results)} results.")

    def on_error(self, error: SuperTunesError) -> None:
        log = self.app.query_one(LogPane)
        log.add_message(f"[red]❌ Whoops... {STORE_ERROR_MESSAGE}[/red]")
        log.add_message(f"[dim]{error}[/dim]")

    def on_preview_requested(self, url: str) -> None:
        self.app.play_preview(url)


class SuperTunesApp(App):
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("s", "stop_preview", "Stop Preview"),
    ]
    CSS_PATH = "supertunes.tcss"

    app_state = reactive(AppState(), always_update=True)

    def __init__(self, fetcher: ItunesFetcher, preview_player: PreviewPlayer, config: Config):
        super().__init__()
        self.fetcher = fetcher
        self.preview_player = preview_player
        self.config = config
        self.controller = SearchController(listener=AppListener(self), fetcher=fetcher, config=config)

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main-container"):
            with Horizontal(id="app-grid"):
                with Vertical(id="left-pane"):
                    yield SearchControls()
                    yield ResultsDisplay(id="results-table")
                with Vertical(id="right-pane"):
                    yield DetailsPane(id="details-pane")
            yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        log = self.query_one(LogPane)
        self.query_one(Input).focus()
        if self.preview_player.is_available:
            log.add_message(f"[green]✅ {self.config.PREVIEW_COMMAND} found.[/green]")
        else:
            log.add_message(f"[yellow]⚠️ '{self.config.PREVIEW_COMMAND}' not found, previews are disabled.[/yellow]")

    def watch_app_state(self, old_state: AppState, new_state: AppState) -> None:
        if (old_state.display_state, old_state.results) != (new_state.display_state, new_state.results):
            self.query_one(ResultsDisplay).update_results(new_state.display_state, new_state.results)
        self.query_one(DetailsPane).update_details(new_state.selected_result)

    def play_preview(self, url: str) -> None:
        log = self.query_one(LogPane)
        success, message = self.preview_player.play(url)
        if success:
            log.add_message(f"[green]▶️ {message}[/green]")
        else:
            log.add_message(f"[red]❌ {message}[/red]")

    def action_stop_preview(self) -> None:
        self.preview_player.stop()

    def on_search_controls_search_requested(self, message: SearchControls.SearchRequested) -> None:
        self.query_one(LogPane).add_message(f"🔎 Searching for '{message.query}'...")
        self.workers.cancel_group(self, "search_worker")
        self.run_worker(self.perform_search(message.query), group="search_worker", exclusive=True)

    def on_results_display_row_selected(self, message: ResultsDisplay.RowSelected) -> None:
        if self.controller.select(message.index) is None and self.controller.state is DisplayState.LOADED:
            self.query_one(LogPane).add_message("[yellow]⚠️ No preview available for this result.[/yellow]")

    def on_results_display_row_highlighted(self, message: ResultsDisplay.RowHighlighted) -> None:
        results = self.app_state.results
        selected = results[message.index] if message.index is not None and message.index < len(results) else None
        self.app_state = AppState(
            display_state=self.app_state.display_state, results=results, selected_result=selected)

    async def perform_search(self, query: str) -> None:
        pending = self.controller.start_search(query)
        if pending is None:
            return
        try:
            payload = await asyncio.to_thread(self.fetcher.fetch, pending.request)
        except FetchError as e:
            self.controller.fail_search(pending.generation, e)
            return
        self.controller.complete_search(pending.generation, payload)
        if self.controller.state is DisplayState.LOADED_EMPTY:
            self.query_one(LogPane).add_message(f"🤷 Nothing found for '{query}'.")


def main() -> None:
    app_config = Config()
    logging.basicConfig(level=app_config.LOG_LEVEL, handlers=[TextualHandler()])
    fetcher = ItunesFetcher(timeout=app_config.REQUEST_TIMEOUT)
    preview_player = PreviewPlayer(app_config.PREVIEW_COMMAND, app_config.PREVIEW_ARGS)

    app = SuperTunesApp(fetcher, preview_player, app_config)

    try:
        app.run()
    finally:
        preview_player.stop()
        fetcher.close()


if __name__ == "__main__":
    main()
