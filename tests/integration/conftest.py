"""Integration test fixtures.

Serves a small endoflife.date catalog through respx so the whole pipeline
(settings → client → analyzer → report) runs against real httpx traffic.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest
import respx

if TYPE_CHECKING:
    from collections.abc import Iterator

BASE = "https://endoflife.date/api/v1"


def envelope(result: object) -> dict:
    return {"schema_version": "1.2.0", "generated_at": "2025-06-15T00:00:00Z", "result": result}


CATALOG: dict[str, list[dict]] = {
    "python": [
        {
            "name": "3.13",
            "releaseDate": "2024-10-07",
            "eolFrom": "2099-10-31",
            "isEol": False,
            "latest": {"name": "3.13.5", "date": "2099-01-01"},
        },
        {
            "name": "2.7",
            "releaseDate": "2010-07-03",
            "eolFrom": "2020-01-01",
            "isEol": True,
            "latest": {"name": "2.7.18", "date": "2020-04-20"},
        },
    ],
    "nodejs": [
        {
            "name": "22",
            "releaseDate": "2024-04-24",
            "isLts": True,
            "ltsFrom": "2024-10-29",
            "eolFrom": "2099-04-30",
            "latest": {"name": "22.3.0", "date": "2099-01-01"},
        },
    ],
}


@pytest.fixture()
def catalog_api() -> Iterator[respx.MockRouter]:
    """Mock the catalog endpoints; unknown products answer 404."""
    with respx.mock(assert_all_called=False) as router:
        router.get(f"{BASE}/products").mock(
            return_value=httpx.Response(200, json=envelope([{"name": n} for n in CATALOG]))
        )
        router.get(f"{BASE}/categories/lang").mock(
            return_value=httpx.Response(200, json=envelope([{"name": "python"}]))
        )
        for name, releases in CATALOG.items():
            router.get(f"{BASE}/products/{name}").mock(
                return_value=httpx.Response(
                    200, json=envelope({"name": name, "releases": releases})
                )
            )
        router.get(url__startswith=f"{BASE}/products/").mock(
            return_value=httpx.Response(404, text="Not Found")
        )
        yield router


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("EOLSCAN__"):
            monkeypatch.delenv(key)
