# config.py
from dataclasses import dataclass
from typing import Tuple

@dataclass
class Config:
    """Holds all application configuration."""
    SEARCH_ENDPOINT: str = "https://itunes.apple.com/search"
    SEARCH_RESULT_LIMIT: int = 200
    REQUEST_TIMEOUT: float = 15.0
    PREVIEW_COMMAND: str = "ffplay"
    PREVIEW_ARGS: Tuple[str, ...] = ("-nodisp", "-autoexit", "-loglevel", "quiet")
    LOG_LEVEL: str = "INFO"
