"""Shared helpers for building iTunes Search API payloads."""

from __future__ import annotations

import json

import pytest


def make_item(artist="Artist", kind="song", track="Track", **extra):
    item = {
        "wrapperType": "track",
        "kind": kind,
        "artistName": artist,
        "artworkUrl60": f"https://is1.mzstatic.com/{artist}/60x60bb.jpg",
        "previewUrl": f"https://audio.itunes.apple.com/{artist}/{track}.m4a",
    }
    if track is not None:
        item["trackName"] = track
    item.update(extra)
    return item


def make_payload(items, result_count=None) -> bytes:
    body = {
        "resultCount": len(items) if result_count is None else result_count,
        "results": items,
    }
    return json.dumps(body).encode("utf-8")


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def item_factory():
    return make_item
