from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from eolscan.models.release import Release


class EolStatus(StrEnum):
    ACTIVE = "active"
    APPROACHING_EOL = "approaching_eol"
    END_OF_LIFE = "end_of_life"
    UNKNOWN = "unknown"


class _ReportModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ClassifiedRelease(_ReportModel):
    """Classification of a single release. Derived once, never mutated."""

    product: str
    release: str
    status: EolStatus
    eol_date: str | None = None  # YYYY-MM-DD
    days_until_eol: int | None = None
    release_date: str | None = None
    latest_version: str | None = None
    is_lts: bool = False
    lts_date: str | None = None
    link: str | None = None
    discontinued_date: str | None = None
    is_discontinued: bool = False
    extended_support_date: str | None = None
    has_extended_support: bool = False
    latest_release_date: str | None = None
    days_since_latest_release: int | None = None
    raw_data: Release


class ProductError(_ReportModel):
    """A product whose analysis failed and was left out of the report."""

    product: str
    message: str
    code: str | None = None
    status_code: int | None = None


class MatrixIncludeItem(_ReportModel):
    version: str
    release: str
    is_lts: bool
    eol_date: str | None
    status: EolStatus
    release_date: str | None


class MatrixOutput(_ReportModel):
    versions: list[str]


class MatrixIncludeOutput(_ReportModel):
    include: list[MatrixIncludeItem]


class Report(_ReportModel):
    """Aggregated result of one analyzer run. Read-only for consumers."""

    eol_detected: bool
    approaching_eol: bool
    stale_detected: bool
    discontinued_detected: bool
    total_products_checked: int
    total_releases_checked: int
    products: list[ClassifiedRelease]
    eol_products: list[ClassifiedRelease]
    approaching_eol_products: list[ClassifiedRelease]
    stale_products: list[ClassifiedRelease]
    discontinued_products: list[ClassifiedRelease]
    extended_support_products: list[ClassifiedRelease]
    latest_versions: dict[str, str]
    summary: str
    errors: list[ProductError] = []
    matrix: MatrixOutput | None = None
    matrix_include: MatrixIncludeOutput | None = None
