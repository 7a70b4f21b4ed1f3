"""Unit tests for the catalog payload models."""

from __future__ import annotations

from datetime import date

import pydantic
import pytest

from eolscan.models.release import FullProduct, IdentifierItem, Release, parse_date


class TestParseDate:
    def test_iso_date(self) -> None:
        assert parse_date("2024-10-07") == date(2024, 10, 7)

    def test_iso_datetime_truncated_to_day(self) -> None:
        assert parse_date("2024-10-07T23:59:59Z") == date(2024, 10, 7)

    def test_garbage(self) -> None:
        assert parse_date("soon") is None

    def test_non_string(self) -> None:
        assert parse_date(42) is None


class TestReleaseDateOrFlag:
    def test_eol_date_string(self) -> None:
        release = Release.model_validate({"name": "3.8", "eolFrom": "2024-10-07"})
        assert release.eol_from == date(2024, 10, 7)

    def test_eol_boolean(self) -> None:
        release = Release.model_validate({"name": "3.8", "eolFrom": True})
        assert release.eol_from is True

    def test_eol_absent(self) -> None:
        release = Release.model_validate({"name": "3.8"})
        assert release.eol_from is None

    def test_eol_unparseable_string_is_absent(self) -> None:
        release = Release.model_validate({"name": "3.8", "eolFrom": "someday"})
        assert release.eol_from is None

    def test_discontinued_numeric_flag(self) -> None:
        release = Release.model_validate({"name": "x", "discontinued": 1})
        assert release.discontinued is True

    def test_lts_non_date_string_still_means_lts(self) -> None:
        release = Release.model_validate({"name": "x", "ltsFrom": "tbd"})
        assert release.lts_from is True

    def test_is_flag_string_values(self) -> None:
        release = Release.model_validate({"name": "x", "isEol": "false", "isLts": "2021-01-01"})
        assert release.is_eol is False
        assert release.is_lts is True

    def test_numeric_name_coerced(self) -> None:
        release = Release.model_validate({"name": 20})
        assert release.name == "20"

    def test_latest_numeric_name_and_date(self) -> None:
        release = Release.model_validate(
            {"name": "20", "latest": {"name": 20.1, "date": "2025-01-02"}}
        )
        assert release.latest is not None
        assert release.latest.name == "20.1"
        assert release.latest.date == date(2025, 1, 2)

    def test_snake_case_population(self) -> None:
        release = Release(name="1", eol_from=date(2030, 1, 1))
        assert release.eol_from == date(2030, 1, 1)

    def test_release_is_frozen(self) -> None:
        release = Release.model_validate({"name": "3.8"})
        with pytest.raises(pydantic.ValidationError):
            release.name = "3.9"  # type: ignore[misc]

    def test_missing_name_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Release.model_validate({"eolFrom": "2024-10-07"})


class TestLegacyShape:
    def test_pre_v1_keys_upgraded(self) -> None:
        release = Release.model_validate(
            {
                "cycle": "2.7",
                "releaseDate": "2010-07-03",
                "eol": "2020-01-01",
                "latest": "2.7.18",
                "latestReleaseDate": "2020-04-20",
                "lts": False,
            }
        )
        assert release.name == "2.7"
        assert release.eol_from == date(2020, 1, 1)
        assert release.lts_from is False
        assert release.latest is not None
        assert release.latest.name == "2.7.18"
        assert release.latest.date == date(2020, 4, 20)

    def test_v1_key_wins_over_legacy(self) -> None:
        release = Release.model_validate({"name": "1", "eol": True, "eolFrom": "2020-01-01"})
        assert release.eol_from == date(2020, 1, 1)


class TestFullProduct:
    def test_parses_nested_releases(self) -> None:
        product = FullProduct.model_validate(
            {
                "name": "python",
                "category": "lang",
                "identifiers": [{"type": "purl", "id": "pkg:generic/python"}],
                "links": {"html": "https://endoflife.date/python", "releasePolicy": None},
                "releases": [{"name": "3.12", "eolFrom": "2028-10-31"}],
            }
        )
        assert product.releases[0].name == "3.12"
        assert product.identifiers[0].type == "purl"

    def test_releases_required(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            FullProduct.model_validate({"name": "python"})


class TestIdentifierItem:
    def test_flat_product(self) -> None:
        item = IdentifierItem.model_validate({"identifier": "cpe:/a:python", "product": "python"})
        assert item.product == "python"

    def test_nested_product(self) -> None:
        item = IdentifierItem.model_validate(
            {
                "identifier": "pkg:npm/express",
                "product": {
                    "name": "express",
                    "uri": "https://endoflife.date/api/v1/products/express",
                },
            }
        )
        assert item.product == "express"
