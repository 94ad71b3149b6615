# services.py
import logging
import re
import shutil
import subprocess
import unicodedata
from typing import Iterable, List, Optional, Tuple
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from config import Config
from errors import DecodeError, EncodingError, FetchError
from models import SearchRequest, SearchResult
from schemas import StoreResponse

logger = logging.getLogger(__name__)

_DIGIT_RUN = re.compile(r"(\d+)")


def build_search_request(search_text: str, config: Optional[Config] = None) -> SearchRequest:
    """Turns user-typed text into a store search request.

    Raises EncodingError when the text is empty or cannot be percent-encoded.
    """
    config = config or Config()
    if not search_text:
        raise EncodingError("Search text is empty.")
    try:
        encoded = quote(search_text, safe="")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Search text cannot be encoded: {e}") from e
    return SearchRequest(
        endpoint=config.SEARCH_ENDPOINT,
        term=search_text,
        encoded_term=encoded,
        limit=config.SEARCH_RESULT_LIMIT,
    )


def dedup_results(results: Iterable[SearchResult]) -> List[SearchResult]:
    """Keeps the first result per (artist, type, track name), preserving order."""
    seen = set()
    unique_results = []
    for result in results:
        if result.dedup_key in seen:
            continue
        seen.add(result.dedup_key)
        unique_results.append(result)
    return unique_results


def decode_and_dedup(payload: bytes) -> List[SearchResult]:
    """Parses a search response body and drops duplicate results.

    Any schema violation fails the whole response with DecodeError.
    """
    try:
        response = StoreResponse.model_validate_json(payload)
    except ValidationError as e:
        raise DecodeError(f"Malformed search response: {e.error_count()} error(s).") from e
    results = [item.to_result() for item in response.results]
    unique_results = dedup_results(results)
    logger.debug("Decoded %d results, %d after dedup.", len(results), len(unique_results))
    return unique_results


def natural_key(text: str) -> Tuple:
    """Sort key approximating natural-language ordering.

    Case and accents are ignored and digit runs compare by value, so
    "Track 2" sorts before "track 10".
    """
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    parts = _DIGIT_RUN.split(folded)
    # split() with a capture group alternates text and digits, text first.
    return tuple(int(part) if i % 2 else part for i, part in enumerate(parts))


def sort_results(results: Iterable[SearchResult]) -> List[SearchResult]:
    return sorted(results, key=lambda r: natural_key(r.display_name))


class ItunesFetcher:
    """Issues store search requests over HTTP."""
    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = Config.REQUEST_TIMEOUT):
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    def fetch(self, request: SearchRequest) -> bytes:
        """Returns the raw response body, raising FetchError on any failure."""
        logger.info("Searching store for %r", request.term)
        try:
            response = self.client.get(request.url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(f"Store request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(f"Store returned status {status}.", status_code=status) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Could not reach the store: {e}") from e
        return response.content

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "ItunesFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PreviewPlayer:
    """Hands preview URLs to an external audio player command."""
    def __init__(self, command: str, args: Iterable[str] = ()):
        self.command_name = command
        self.command_path = shutil.which(command)
        self.args = tuple(args)
        self._process: Optional[subprocess.Popen] = None

    @property
    def is_available(self) -> bool:
        return self.command_path is not None

    def play(self, url: str) -> Tuple[bool, str]:
        """Starts playing a preview, replacing any preview already playing."""
        if not self.is_available: return False, f"Command '{self.command_name}' not found."
        self.stop()
        try:
            self._process = subprocess.Popen(
                [self.command_path, *self.args, url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            return False, f"Could not start '{self.command_name}': {e}"
        return True, "Playing preview."

    def stop(self) -> None:
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()
            try:
                self._process.wait(timeout=2)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()
        self._process = None
