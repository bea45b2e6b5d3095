# models.py
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_MEDIA = "Unknown Media"


@dataclass
class ResultRecord:
    """A single media hit, with sentinel defaults already substituted."""
    title: str
    artist: str
    media_kind: str
    artwork_url: Optional[str]
    preview_url: Optional[str]
    identity: str


class SearchStatus(Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    NETWORK_FAILURE = "network_failure"
    DECODE_FAILURE = "decode_failure"
    ABORTED = "aborted"


@dataclass
class SearchOutcome:
    """The tagged result of one search invocation."""
    query: str
    status: SearchStatus
    results: List[ResultRecord] = field(default_factory=list)
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (SearchStatus.SUCCESS, SearchStatus.EMPTY)


@dataclass
class AppState:
    """A single object to hold the entire application state."""
    results: List[ResultRecord] = field(default_factory=list)
    selected_result: Optional[ResultRecord] = None
    last_status: Optional[SearchStatus] = None

    def with_outcome(self, outcome: SearchOutcome) -> "AppState":
        """Returns the state after a completed search.

        Aborted searches never reached the network, so the current results
        stay on screen. Everything else replaces them wholesale.
        """
        if outcome.status is SearchStatus.ABORTED:
            return AppState(results=self.results, selected_result=self.selected_result,
                            last_status=outcome.status)
        return AppState(results=list(outcome.results), selected_result=None,
                        last_status=outcome.status)

    def find(self, identity: Optional[str]) -> Optional[ResultRecord]:
        return next((r for r in self.results if r.identity == identity), None)


class SearchSequencer:
    """Hands out increasing tickets so only the latest search may land."""
    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def begin(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest
