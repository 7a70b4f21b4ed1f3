"""Report aggregation.

Turns the flat list of classified releases into the Report consumed by the
formatting and notification layers. Partitions are independent flags, so a
single release can appear in several of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eolscan.models.report import (
    EolStatus,
    MatrixIncludeItem,
    MatrixIncludeOutput,
    MatrixOutput,
    Report,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from eolscan.classifier import ReleaseClassifier
    from eolscan.config import AnalysisSettings
    from eolscan.models.report import ClassifiedRelease, ProductError

_SUPPORTED = frozenset({EolStatus.ACTIVE, EolStatus.APPROACHING_EOL})


def _latest_rank(result: ClassifiedRelease, stale: bool) -> int:
    if result.status not in _SUPPORTED:
        return 0
    return 1 if stale else 2


def collect_latest_versions(
    results: list[ClassifiedRelease],
    is_stale: Callable[[ClassifiedRelease], bool] | None = None,
) -> dict[str, str]:
    """Pick one latest-version string per product.

    Releases rank as supported and fresh, then supported but stale, then
    ended or unknown. A release replaces the current pick only when it ranks
    strictly higher, so among equals the first one seen wins.
    """
    chosen: dict[str, tuple[str, int]] = {}
    for result in results:
        if not result.latest_version:
            continue
        rank = _latest_rank(result, is_stale(result) if is_stale is not None else False)
        current = chosen.get(result.product)
        if current is None or rank > current[1]:
            chosen[result.product] = (result.latest_version, rank)
    return {product: version for product, (version, _) in chosen.items()}


def _matrix_candidates(
    results: list[ClassifiedRelease],
    *,
    exclude_eol: bool,
    exclude_approaching_eol: bool,
) -> list[ClassifiedRelease]:
    candidates = results
    if exclude_eol:
        candidates = [r for r in candidates if r.status != EolStatus.END_OF_LIFE]
    if exclude_approaching_eol:
        candidates = [r for r in candidates if r.status != EolStatus.APPROACHING_EOL]
    return candidates


def build_matrix(
    results: list[ClassifiedRelease],
    *,
    exclude_eol: bool = False,
    exclude_approaching_eol: bool = False,
) -> tuple[MatrixOutput, MatrixIncludeOutput]:
    """Build the CI job-matrix views: plain release names and per-release metadata."""
    candidates = _matrix_candidates(
        results, exclude_eol=exclude_eol, exclude_approaching_eol=exclude_approaching_eol
    )
    matrix = MatrixOutput(versions=[r.release for r in candidates])
    include = MatrixIncludeOutput(
        include=[
            MatrixIncludeItem(
                version=r.release,
                release=r.release,
                is_lts=r.is_lts,
                eol_date=r.eol_date,
                status=r.status,
                release_date=r.release_date,
            )
            for r in candidates
        ]
    )
    return matrix, include


def generate_summary(
    results: list[ClassifiedRelease],
    eol: list[ClassifiedRelease],
    approaching: list[ClassifiedRelease],
    stale: list[ClassifiedRelease],
    discontinued: list[ClassifiedRelease],
) -> str:
    """Plain-text digest for logs and step summaries."""
    lines = [
        "EndOfLife Analysis Summary",
        "==========================",
        f"Total Products Checked: {len({r.product for r in results})}",
        f"Total Releases Checked: {len(results)}",
        "",
    ]

    if eol:
        lines.append(f"End-of-Life Detected ({len(eol)}):")
        lines.extend(f"  - {r.product} {r.release} (EOL: {r.eol_date or 'n/a'})" for r in eol)
        lines.append("")

    if approaching:
        lines.append(f"Approaching EOL ({len(approaching)}):")
        lines.extend(
            f"  - {r.product} {r.release} ({r.days_until_eol} days until EOL: {r.eol_date})"
            for r in approaching
        )
        lines.append("")

    if stale:
        lines.append(f"Stale Releases ({len(stale)}):")
        lines.extend(
            f"  - {r.product} {r.release} "
            f"(last release {r.days_since_latest_release} days ago: {r.latest_version})"
            for r in stale
        )
        lines.append("")

    if discontinued:
        lines.append(f"Discontinued ({len(discontinued)}):")
        lines.extend(
            f"  - {r.product} {r.release} (discontinued: {r.discontinued_date or 'yes'})"
            for r in discontinued
        )
        lines.append("")

    if not eol and not approaching:
        lines.append("All tracked versions are actively supported.")

    return "\n".join(lines).rstrip()


def build_report(
    results: list[ClassifiedRelease],
    errors: list[ProductError],
    classifier: ReleaseClassifier,
    options: AnalysisSettings,
) -> Report:
    eol = [r for r in results if r.status == EolStatus.END_OF_LIFE]
    approaching = [r for r in results if r.status == EolStatus.APPROACHING_EOL]
    stale = [r for r in results if classifier.is_stale(r)]
    discontinued = [r for r in results if r.is_discontinued]
    extended = [r for r in results if r.has_extended_support]

    matrix = matrix_include = None
    if options.output_matrix:
        matrix, matrix_include = build_matrix(
            results,
            exclude_eol=options.exclude_eol_from_matrix,
            exclude_approaching_eol=options.exclude_approaching_eol_from_matrix,
        )

    return Report(
        eol_detected=bool(eol),
        approaching_eol=bool(approaching),
        stale_detected=bool(stale),
        discontinued_detected=bool(discontinued),
        total_products_checked=len({r.product for r in results}),
        total_releases_checked=len(results),
        products=results,
        eol_products=eol,
        approaching_eol_products=approaching,
        stale_products=stale,
        discontinued_products=discontinued,
        extended_support_products=extended,
        latest_versions=collect_latest_versions(results, classifier.is_stale),
        summary=generate_summary(results, eol, approaching, stale, discontinued),
        errors=errors,
        matrix=matrix,
        matrix_include=matrix_include,
    )
