"""Catalog payload models.

Lifecycle fields arrive as either an ISO date string or a boolean. They are
resolved once here, at the boundary, into ``date | bool | None`` so that the
classifier never has to re-inspect raw JSON types:

- ``date`` : the condition starts (or started) on that day
- ``True`` : the condition holds, no date known
- ``False``: the condition does not apply
- ``None`` : absent or unparseable
"""

from __future__ import annotations

import datetime as dt
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

_TRUE_STRINGS = frozenset({"true", "yes"})
_FALSE_STRINGS = frozenset({"false", "no", ""})

# Pre-v1 catalog keys, still served by some mirrors
_LEGACY_KEYS = {
    "cycle": "name",
    "eol": "eolFrom",
    "lts": "ltsFrom",
    "support": "eoasFrom",
    "extendedSupport": "eoesFrom",
}


def parse_date(value: Any) -> date | None:
    """Parse an ISO date or datetime string down to its calendar day."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _date_or_flag(value: Any) -> date | bool | None:
    if value is None or isinstance(value, bool | date):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        return parse_date(value)
    return None


def _flag(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _FALSE_STRINGS:
            return False
        # Any other non-empty string (usually a date) asserts the flag
        return True
    return bool(value)


class _CatalogModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LatestRelease(_CatalogModel):
    """Newest patch release within a release cycle."""

    name: str
    date: dt.date | None = None
    link: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int | float) else v

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> dt.date | None:
        return parse_date(v)


class Release(_CatalogModel):
    """One release cycle of a product. Immutable once fetched."""

    name: str
    codename: str | None = None
    label: str | None = None
    release_date: date | None = None

    eol_from: date | bool | None = None
    is_eol: bool | None = None
    discontinued: date | bool | None = None
    eoas_from: date | bool | None = None
    is_eoas: bool | None = None
    eoes_from: date | bool | None = None
    is_eoes: bool | None = None
    lts_from: date | bool | None = None
    is_lts: bool | None = None
    is_maintained: bool | None = None

    latest: LatestRelease | None = None
    link: str | None = None

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not any(key in data for key in _LEGACY_KEYS):
            return data
        upgraded = dict(data)
        for old, new in _LEGACY_KEYS.items():
            if old in upgraded and new not in upgraded:
                upgraded[new] = upgraded.pop(old)
        latest = upgraded.get("latest")
        if isinstance(latest, str | int | float):
            upgraded["latest"] = {
                "name": str(latest),
                "date": upgraded.get("latestReleaseDate"),
            }
        return upgraded

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int | float) else v

    @field_validator("release_date", mode="before")
    @classmethod
    def coerce_release_date(cls, v: Any) -> date | None:
        return parse_date(v)

    @field_validator("eol_from", "discontinued", "eoas_from", "eoes_from", mode="before")
    @classmethod
    def coerce_date_or_flag(cls, v: Any) -> date | bool | None:
        return _date_or_flag(v)

    @field_validator("lts_from", mode="before")
    @classmethod
    def coerce_lts(cls, v: Any) -> date | bool | None:
        resolved = _date_or_flag(v)
        if resolved is None and isinstance(v, str) and v.strip():
            return True
        return resolved

    @field_validator("is_eol", "is_eoas", "is_eoes", "is_lts", "is_maintained", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool | None:
        return _flag(v)


class ProductSummary(_CatalogModel):
    """Entry in the product listing endpoints."""

    name: str
    aliases: list[str] = []
    label: str | None = None
    category: str | None = None
    tags: list[str] = []
    uri: str | None = None


class ProductIdentifier(_CatalogModel):
    type: str
    id: str


class FullProduct(_CatalogModel):
    """Product detail including every release cycle."""

    name: str
    aliases: list[str] = []
    label: str | None = None
    category: str | None = None
    tags: list[str] = []
    version_command: str | None = None
    identifiers: list[ProductIdentifier] = []
    links: dict[str, str | None] = {}
    releases: list[Release]


class IdentifierItem(_CatalogModel):
    """Mapping of an external identifier (purl, cpe) to a catalog product."""

    identifier: str
    product: str

    @field_validator("product", mode="before")
    @classmethod
    def product_name(cls, v: Any) -> Any:
        # The live API nests the product as {"name": ..., "uri": ...}
        return v.get("name") if isinstance(v, dict) else v


class NamedLink(_CatalogModel):
    """Category, tag or identifier-type entry as returned by the listing endpoints."""

    name: str
    uri: str | None = None
