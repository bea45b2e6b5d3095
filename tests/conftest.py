"""Shared fixtures: a search service wired to an in-process HTTP transport."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from config import Config
from services import ITunesSearchService

Handler = Callable[[httpx.Request], httpx.Response]


def _item(track_id: int, title: str, artist: str) -> dict:
    return {
        "wrapperType": "track",
        "trackId": track_id,
        "trackName": title,
        "artistName": artist,
        "kind": "song",
        "artworkUrl100": f"https://is1-ssl.mzstatic.com/image/{track_id}/100x100bb.jpg",
        "previewUrl": f"https://audio-ssl.itunes.apple.com/preview/{track_id}.m4a",
    }


@pytest.fixture
def sample_payload() -> dict:
    return {
        "resultCount": 2,
        "results": [
            _item(1, "Better Together", "Jack Johnson"),
            _item(2, "Banana Pancakes", "Jack Johnson"),
        ],
    }


@pytest.fixture
def make_service() -> Callable[[Handler], ITunesSearchService]:
    services: list[ITunesSearchService] = []

    def factory(handler: Handler) -> ITunesSearchService:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        service = ITunesSearchService(Config(), client=client)
        services.append(service)
        return service

    yield factory
    for service in services:
        service.close()
