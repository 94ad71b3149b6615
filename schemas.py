# schemas.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models import SearchResult

class StoreItem(BaseModel):
    """One entry of a search response.

    Only the fields the app reads are declared. Validation is strict about
    them so a malformed payload fails as a whole.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    artist_name: str = Field(alias="artistName")
    artwork_url_60: str = Field(alias="artworkUrl60")
    kind: Optional[str] = None
    wrapper_type: Optional[str] = Field(default=None, alias="wrapperType")
    track_name: Optional[str] = Field(default=None, alias="trackName")
    collection_name: Optional[str] = Field(default=None, alias="collectionName")
    preview_url: Optional[str] = Field(default=None, alias="previewUrl")

    @model_validator(mode="after")
    def require_media_type(self) -> "StoreItem":
        if not (self.kind or self.wrapper_type):
            raise ValueError("item has neither 'kind' nor 'wrapperType'")
        return self

    @property
    def media_type(self) -> str:
        if self.kind:
            return self.kind
        # Albums come back as a "collection" wrapper without a kind.
        return "album" if self.wrapper_type == "collection" else self.wrapper_type

    def to_result(self) -> SearchResult:
        return SearchResult(
            artist=self.artist_name,
            type=self.media_type,
            image_small_url=self.artwork_url_60,
            track_name=self.track_name,
            collection_name=self.collection_name,
            preview_url=self.preview_url,
        )

class StoreResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # resultCount is not declared; the length of `results` is what counts.
    results: List[StoreItem]
