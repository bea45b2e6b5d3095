"""Tests for application state transitions and search sequencing."""

from __future__ import annotations

from models import AppState, ResultRecord, SearchOutcome, SearchSequencer, SearchStatus
from services import decode_response


def _record(identity: str, title: str = "Song") -> ResultRecord:
    return ResultRecord(title=title, artist="Artist", media_kind="song",
                        artwork_url=None, preview_url=None, identity=identity)


def test_outcome_replaces_results_wholesale():
    state = AppState(results=[_record("track:1")], selected_result=_record("track:1"))
    outcome = SearchOutcome(query="new", status=SearchStatus.SUCCESS,
                            results=[_record("track:2"), _record("track:3")])

    new_state = state.with_outcome(outcome)

    assert [r.identity for r in new_state.results] == ["track:2", "track:3"]
    assert new_state.selected_result is None
    assert new_state.last_status is SearchStatus.SUCCESS


def test_failure_clears_results():
    state = AppState(results=[_record("track:1")])
    new_state = state.with_outcome(SearchOutcome(query="x", status=SearchStatus.NETWORK_FAILURE))

    assert new_state.results == []
    assert new_state.last_status is SearchStatus.NETWORK_FAILURE


def test_aborted_search_keeps_results():
    kept = [_record("track:1")]
    state = AppState(results=kept, selected_result=kept[0])
    new_state = state.with_outcome(SearchOutcome(query="\ud800", status=SearchStatus.ABORTED))

    assert new_state.results == kept
    assert new_state.selected_result == kept[0]
    assert new_state.last_status is SearchStatus.ABORTED


def test_every_decoded_record_is_kept_in_server_order():
    body = (b'{"results":[{"artworkUrl100":"https://x/a.jpg"},'
            b'{"artworkUrl100":"https://x/b.jpg"},{"kind":"podcast"}]}')
    records = decode_response(body)

    new_state = AppState().with_outcome(
        SearchOutcome(query="x", status=SearchStatus.SUCCESS, results=records))

    assert len(new_state.results) == 3
    assert [r.artwork_url for r in new_state.results] == [
        "https://x/a.jpg", "https://x/b.jpg", None]
    assert new_state.results[2].media_kind == "podcast"
    assert len({r.identity for r in new_state.results}) == 3


def test_find_by_identity():
    state = AppState(results=[_record("track:1"), _record("track:2", "Two")])
    assert state.find("track:2").title == "Two"
    assert state.find("track:9") is None
    assert state.find(None) is None


def test_sequencer_only_latest_ticket_is_current():
    sequencer = SearchSequencer()
    first = sequencer.begin()
    second = sequencer.begin()

    assert second > first
    assert sequencer.latest == second
    assert not sequencer.is_current(first)
    assert sequencer.is_current(second)
