"""Shared test fixtures for the eolscan test suite."""

from __future__ import annotations

import pytest

from eolscan.cache import ResponseCache
from eolscan.classifier import ReleaseClassifier
from eolscan.models.release import Release


class FakeClock:
    """Monotonic clock stand-in, advanced manually in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(60, clock=clock)


@pytest.fixture()
def classifier() -> ReleaseClassifier:
    return ReleaseClassifier(eol_threshold_days=90, staleness_threshold_days=365)


@pytest.fixture()
def python_releases() -> list[dict]:
    """Raw v1 payloads for three python cycles, as served by the API."""
    return [
        {
            "name": "3.12",
            "releaseDate": "2023-10-02",
            "isLts": False,
            "eolFrom": "2028-10-31",
            "isEol": False,
            "latest": {"name": "3.12.4", "date": "2025-06-06"},
            "link": "https://www.python.org/downloads/release/python-3124/",
        },
        {
            "name": "3.8",
            "releaseDate": "2019-10-14",
            "isLts": False,
            "eolFrom": "2024-10-07",
            "isEol": True,
            "latest": {"name": "3.8.20", "date": "2024-09-06"},
        },
        {
            "name": "2.7",
            "releaseDate": "2010-07-03",
            "eolFrom": "2020-01-01",
            "isEol": True,
            "latest": {"name": "2.7.18", "date": "2020-04-20"},
        },
    ]


@pytest.fixture()
def releases(python_releases: list[dict]) -> list[Release]:
    return [Release.model_validate(payload) for payload in python_releases]
