from __future__ import annotations

from eolscan.models.release import (
    FullProduct,
    IdentifierItem,
    LatestRelease,
    NamedLink,
    ProductIdentifier,
    ProductSummary,
    Release,
)
from eolscan.models.report import (
    ClassifiedRelease,
    EolStatus,
    MatrixIncludeItem,
    MatrixIncludeOutput,
    MatrixOutput,
    ProductError,
    Report,
)

__all__ = [
    # catalog
    "Release",
    "LatestRelease",
    "ProductSummary",
    "ProductIdentifier",
    "FullProduct",
    "IdentifierItem",
    "NamedLink",
    # report
    "EolStatus",
    "ClassifiedRelease",
    "ProductError",
    "MatrixIncludeItem",
    "MatrixOutput",
    "MatrixIncludeOutput",
    "Report",
]
