"""Tests for the one-shot command line search."""

from __future__ import annotations

import httpx

import find_itunes


def test_prints_results(make_service, sample_payload, capsys):
    service = make_service(lambda request: httpx.Response(200, json=sample_payload))

    exit_code = find_itunes.main(["jack johnson"], service=service)

    out = capsys.readouterr().out
    assert exit_code == 0
    assert 'Searching the iTunes Store for "jack johnson"' in out
    assert "--- Result 1 ---" in out
    assert "Title: Better Together" in out
    assert "Preview: https://audio-ssl.itunes.apple.com/preview/2.m4a" in out


def test_limits_displayed_results(make_service, sample_payload, capsys):
    service = make_service(lambda request: httpx.Response(200, json=sample_payload))

    find_itunes.main(["jack johnson", "-n", "1"], service=service)

    out = capsys.readouterr().out
    assert "--- Result 1 ---" in out
    assert "--- Result 2 ---" not in out


def test_reports_no_results(make_service, capsys):
    service = make_service(lambda request: httpx.Response(200, json={"results": []}))

    exit_code = find_itunes.main(["zzzzqqq"], service=service)

    assert exit_code == 0
    assert "No media found" in capsys.readouterr().out


def test_failure_goes_to_stderr(make_service, capsys):
    service = make_service(lambda request: httpx.Response(500, text="<html></html>"))

    exit_code = find_itunes.main(["jack johnson"], service=service)

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "Search failed (network_failure)" in captured.err
    assert "Result 1" not in captured.out
