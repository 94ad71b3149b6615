# models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

TYPE_LABELS = {
    "album": "Album",
    "audiobook": "Audio Book",
    "book": "Book",
    "ebook": "E-Book",
    "feature-movie": "Movie",
    "music-video": "Music Video",
    "podcast": "Podcast",
    "software": "App",
    "song": "Song",
    "tv-episode": "TV Episode",
}

class DisplayState(Enum):
    """What the result list should currently show."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOADED_EMPTY = "loaded_empty"

class ErrorKind(Enum):
    ENCODING = "encoding"
    FETCH = "fetch"
    DECODE = "decode"

@dataclass(frozen=True)
class SearchResult:
    """A single media item returned by the store."""
    artist: str
    type: str
    image_small_url: str
    track_name: Optional[str] = None
    collection_name: Optional[str] = None
    preview_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.track_name or self.collection_name or self.artist

    @property
    def dedup_key(self) -> Tuple[str, str, Optional[str]]:
        return (self.artist, self.type, self.track_name)

    @property
    def type_label(self) -> str:
        return TYPE_LABELS.get(self.type, self.type)

    @property
    def artist_line(self) -> str:
        if not self.artist:
            return "Unknown"
        return f"{self.artist} ({self.type_label})"

@dataclass(frozen=True)
class SearchRequest:
    """Everything needed to issue one store search."""
    endpoint: str
    term: str
    encoded_term: str
    limit: int = 200

    @property
    def url(self) -> str:
        return f"{self.endpoint}?term={self.encoded_term}&limit={self.limit}"

@dataclass(frozen=True)
class PendingSearch:
    """A search that has been started and is waiting for its response."""
    generation: int
    request: SearchRequest

@dataclass(frozen=True)
class AppState:
    """A single object to hold the entire application state."""
    display_state: DisplayState = DisplayState.IDLE
    results: Tuple[SearchResult, ...] = field(default_factory=tuple)
    selected_result: Optional[SearchResult] = None
