# config.py
from dataclasses import dataclass

@dataclass
class Config:
    """Holds all application configuration."""
    SEARCH_ENDPOINT: str = "https://itunes.apple.com/search"
    MEDIA_KIND: str = "all"
    REQUEST_TIMEOUT: float = 10.0
    CLI_RESULT_LIMIT: int = 10
