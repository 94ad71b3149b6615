# controller.py
import logging
from typing import List, Optional

from config import Config
from errors import DecodeError, EncodingError, FetchError, SuperTunesError
from models import DisplayState, PendingSearch, SearchResult
from services import ItunesFetcher, build_search_request, decode_and_dedup, sort_results

logger = logging.getLogger(__name__)


class SearchListener:
    """Presentation callbacks. Override the ones you need."""
    def on_state_changed(self, state: DisplayState) -> None:
        pass

    def on_results_ready(self, results: List[SearchResult]) -> None:
        pass

    def on_error(self, error: SuperTunesError) -> None:
        pass

    def on_preview_requested(self, url: str) -> None:
        pass


class SearchController:
    """Owns the current results and display state.

    Each search is tagged with a generation id and completions carrying an
    older id are dropped.
    """
    def __init__(self, listener: Optional[SearchListener] = None,
                 fetcher: Optional[ItunesFetcher] = None, config: Optional[Config] = None):
        self.listener = listener or SearchListener()
        self.fetcher = fetcher
        self.config = config or Config()
        self._state = DisplayState.IDLE
        self._results: List[SearchResult] = []
        self._generation = 0

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def results(self) -> List[SearchResult]:
        return list(self._results)

    @property
    def generation(self) -> int:
        return self._generation

    def _set_state(self, state: DisplayState) -> None:
        if state is self._state:
            return
        logger.debug("Display state %s -> %s", self._state.name, state.name)
        self._state = state
        self.listener.on_state_changed(state)

    def _is_current(self, generation: int) -> bool:
        if generation != self._generation or self._state is not DisplayState.LOADING:
            logger.info("Discarding stale search completion (generation %d, current %d).",
                        generation, self._generation)
            return False
        return True

    def _report(self, error: SuperTunesError) -> None:
        logger.warning("Search failed (%s): %s", error.kind.value, error)
        self._results = []
        self._set_state(DisplayState.IDLE)
        self.listener.on_error(error)

    def start_search(self, search_text: str) -> Optional[PendingSearch]:
        """Begins a new search, superseding any search still in flight.

        Returns None for blank text or when the text cannot be encoded.
        """
        if not search_text or not search_text.strip():
            return None
        try:
            request = build_search_request(search_text, self.config)
        except EncodingError as e:
            # Invalidate whatever is still in flight.
            self._generation += 1
            self._report(e)
            return None
        self._generation += 1
        self._results = []
        self._set_state(DisplayState.LOADING)
        return PendingSearch(generation=self._generation, request=request)

    def complete_search(self, generation: int, payload: bytes) -> bool:
        """Applies a fetched response body. Returns False if it was discarded."""
        if not self._is_current(generation):
            return False
        try:
            results = sort_results(decode_and_dedup(payload))
        except DecodeError as e:
            self._report(e)
            return True
        self._results = results
        self.listener.on_results_ready(list(results))
        self._set_state(DisplayState.LOADED if results else DisplayState.LOADED_EMPTY)
        return True

    def fail_search(self, generation: int, error: SuperTunesError) -> bool:
        if not self._is_current(generation):
            return False
        self._report(error)
        return True

    def search(self, search_text: str) -> DisplayState:
        """Runs a whole search synchronously with the configured fetcher."""
        if self.fetcher is None:
            raise RuntimeError("SearchController.search() needs a fetcher.")
        pending = self.start_search(search_text)
        if pending is None:
            return self._state
        try:
            payload = self.fetcher.fetch(pending.request)
        except FetchError as e:
            self.fail_search(pending.generation, e)
            return self._state
        self.complete_search(pending.generation, payload)
        return self._state

    def select(self, index: int) -> Optional[str]:
        """Requests preview playback for a result. Returns the preview URL, if any."""
        if self._state is not DisplayState.LOADED or not 0 <= index < len(self._results):
            return None
        preview_url = self._results[index].preview_url
        if not preview_url:
            return None
        self.listener.on_preview_requested(preview_url)
        return preview_url
