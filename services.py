# services.py
import hashlib
import json
import logging
from typing import List, Optional
from urllib.parse import quote, urlencode, urlsplit

import httpx

from config import Config
from models import (UNKNOWN_ARTIST, UNKNOWN_MEDIA, UNKNOWN_TITLE, ResultRecord,
                    SearchOutcome, SearchStatus)

logger = logging.getLogger(__name__)

OPTIONAL_TEXT_FIELDS = ("trackName", "artistName", "kind", "artworkUrl100", "previewUrl")


class SearchError(Exception):
    """Base class for failures while building, sending or reading a search."""


class InvalidSearchTerm(SearchError):
    """The term cannot be represented in a request URL."""


class SearchRequestError(SearchError):
    """The request never produced a usable (2xx) response."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SearchDecodeError(SearchError):
    """The response body does not match the expected schema."""


def parse_url(value: Optional[str]) -> Optional[str]:
    """Returns `value` if it is an absolute http(s) URL, otherwise None."""
    if not value or any(ch.isspace() for ch in value):
        return None
    try:
        parts = urlsplit(value)
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    return value


def record_identity(item: dict, title: str, artist: str, media_kind: str,
                    artwork_url: Optional[str], preview_url: Optional[str]) -> str:
    """Builds a list key that stays the same across fetches of the same item."""
    track_id = item.get("trackId")
    if isinstance(track_id, (int, str)) and not isinstance(track_id, bool) and str(track_id):
        return f"track:{track_id}"
    fields = [title, artist, media_kind, artwork_url or "", preview_url or ""]
    digest = hashlib.sha1("\x1f".join(fields).encode("utf-8"))
    return f"hash:{digest.hexdigest()}"


def _text_or_default(item: dict, key: str, default: str) -> str:
    value = item.get(key)
    return default if value is None else value


def parse_item(item: dict) -> ResultRecord:
    """Parses a single raw API item into our ResultRecord data model."""
    for key in OPTIONAL_TEXT_FIELDS:
        value = item.get(key)
        if value is not None and not isinstance(value, str):
            raise SearchDecodeError(f"'{key}' must be a string, got {type(value).__name__}")

    title = _text_or_default(item, "trackName", UNKNOWN_TITLE)
    artist = _text_or_default(item, "artistName", UNKNOWN_ARTIST)
    media_kind = _text_or_default(item, "kind", UNKNOWN_MEDIA)
    artwork_url = parse_url(item.get("artworkUrl100"))
    preview_url = parse_url(item.get("previewUrl"))
    return ResultRecord(
        title=title,
        artist=artist,
        media_kind=media_kind,
        artwork_url=artwork_url,
        preview_url=preview_url,
        identity=record_identity(item, title, artist, media_kind, artwork_url, preview_url),
    )


def decode_response(raw: bytes) -> List[ResultRecord]:
    """Decodes a search response body into records, in server order."""
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise SearchDecodeError(f"Response is not valid JSON: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise SearchDecodeError("Response has no 'results' array.")

    records = []
    seen: dict[str, int] = {}
    for index, item in enumerate(payload["results"]):
        if not isinstance(item, dict):
            raise SearchDecodeError(f"Result #{index} is not an object.")
        record = parse_item(item)
        # Row keys must be unique; repeats get an occurrence suffix in server order.
        seen[record.identity] = seen.get(record.identity, 0) + 1
        if seen[record.identity] > 1:
            record.identity = f"{record.identity}#{seen[record.identity]}"
        records.append(record)
    return records


class ITunesSearchService:
    """A service to handle interactions with the iTunes Search API."""

    def __init__(self, config: Config, client: Optional[httpx.Client] = None):
        self.config = config
        self._client = client or httpx.Client(timeout=config.REQUEST_TIMEOUT)

    def __enter__(self) -> "ITunesSearchService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def build_url(self, term: str) -> str:
        """Builds the request URL, percent-encoding the term for the query string."""
        params = {"term": term, "media": self.config.MEDIA_KIND}
        try:
            query = urlencode(params, quote_via=quote, safe="")
        except UnicodeEncodeError as e:
            raise InvalidSearchTerm(f"Search term cannot be encoded: {e.reason}") from e
        return f"{self.config.SEARCH_ENDPOINT}?{query}"

    def fetch(self, url: str) -> bytes:
        """Sends exactly one GET and returns the body of a 2xx response."""
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise SearchRequestError(f"Request failed: {e}") from e
        if not response.is_success:
            raise SearchRequestError(f"Server answered HTTP {response.status_code}.",
                                     status_code=response.status_code)
        return response.content

    def search(self, term: str) -> SearchOutcome:
        """Performs the search and returns a tagged outcome; never raises SearchError."""
        try:
            url = self.build_url(term)
        except InvalidSearchTerm as e:
            logger.warning("Search aborted before sending: %s", e)
            return SearchOutcome(query=term, status=SearchStatus.ABORTED, detail=str(e))

        logger.debug("Fetching %s", url)
        try:
            records = decode_response(self.fetch(url))
        except SearchRequestError as e:
            logger.warning("Search for %r failed: %s", term, e)
            return SearchOutcome(query=term, status=SearchStatus.NETWORK_FAILURE, detail=str(e))
        except SearchDecodeError as e:
            logger.warning("Search for %r returned an unreadable body: %s", term, e)
            return SearchOutcome(query=term, status=SearchStatus.DECODE_FAILURE, detail=str(e))

        if not records:
            return SearchOutcome(query=term, status=SearchStatus.EMPTY)
        return SearchOutcome(query=term, status=SearchStatus.SUCCESS, results=records)
