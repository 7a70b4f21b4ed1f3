"""Multi-product analysis pipeline.

Each requested product is one unit of work: fetch its releases, select,
filter, sort, cap, classify. Units run concurrently under a semaphore so at
most ``concurrency`` products are talking to the API at once. A failing unit
is recorded and skipped; it never aborts the other units.

Results are appended to a shared list without locking. All units run on one
event loop, and appends happen between await points.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import TYPE_CHECKING

import structlog

from eolscan.classifier import ReleaseClassifier, today_utc
from eolscan.config import AnalysisSettings
from eolscan.errors import ApiError, EolScanError
from eolscan.models.report import ProductError
from eolscan.report import build_report
from eolscan.versions import clean_version

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from eolscan.models.release import Release
    from eolscan.models.report import ClassifiedRelease, Report
    from eolscan.protocols import ReleaseSourceProtocol

log = structlog.get_logger()


def filter_by_release_date(
    releases: Iterable[Release],
    min_date: date | None,
    max_date: date | None,
) -> list[Release]:
    """Keep releases inside the inclusive range.

    Once either bound is set, releases without a release date are dropped.
    """
    if min_date is None and max_date is None:
        return list(releases)

    kept: list[Release] = []
    for release in releases:
        if release.release_date is None:
            continue
        if min_date is not None and release.release_date < min_date:
            continue
        if max_date is not None and release.release_date > max_date:
            continue
        kept.append(release)
    return kept


def sort_releases(releases: Iterable[Release], order: str) -> list[Release]:
    """Sort by release date; undated releases count as the earliest."""
    return sorted(
        releases,
        key=lambda release: release.release_date or date.min,
        reverse=order == "newest-first",
    )


class EolAnalyzer:
    """Drives the fetch → select → filter → classify pipeline for many products."""

    def __init__(
        self,
        client: ReleaseSourceProtocol,
        options: AnalysisSettings | None = None,
    ) -> None:
        self._client = client
        self._options = options or AnalysisSettings()

    async def analyze_many(
        self,
        products: Sequence[str],
        explicit_versions: Mapping[str, Sequence[str]] | None = None,
        options: AnalysisSettings | None = None,
        *,
        today: date | None = None,
    ) -> Report:
        """Analyze every product and aggregate the results into one Report.

        Never raises for a single product's failure: failures are collected
        into ``Report.errors`` and logged together once all units finish.
        """
        options = options or self._options
        explicit_versions = explicit_versions or {}
        today = today or today_utc()
        classifier = ReleaseClassifier(
            options.eol_threshold_days,
            options.staleness_threshold_days,
        )
        semaphore = asyncio.Semaphore(options.concurrency)

        results: list[ClassifiedRelease] = []
        errors: list[ProductError] = []

        async def run_unit(product: str) -> None:
            async with semaphore:
                try:
                    classified = await self.analyze_product(
                        product,
                        explicit_versions.get(product),
                        options,
                        classifier=classifier,
                        today=today,
                    )
                except EolScanError as exc:
                    errors.append(
                        ProductError(
                            product=product,
                            message=exc.message,
                            code=exc.code,
                            status_code=exc.status_code if isinstance(exc, ApiError) else None,
                        )
                    )
                    return
                except Exception as exc:
                    log.error("product_analysis_unexpected_error", product=product, exc_info=True)
                    errors.append(ProductError(product=product, message=str(exc)))
                    return
            results.extend(classified)

        unique_products = list(dict.fromkeys(products))
        log.info(
            "analysis_started",
            products=len(unique_products),
            concurrency=options.concurrency,
        )
        await asyncio.gather(*(run_unit(product) for product in unique_products))

        if errors:
            log.warning(
                "analysis_product_errors",
                count=len(errors),
                errors=[{"product": e.product, "message": e.message} for e in errors],
            )

        report = build_report(results, errors, classifier, options)
        log.info(
            "analysis_complete",
            products_checked=report.total_products_checked,
            releases_checked=report.total_releases_checked,
            eol=len(report.eol_products),
            approaching_eol=len(report.approaching_eol_products),
            failed=len(errors),
        )
        return report

    async def analyze_product(
        self,
        product: str,
        requested_versions: Sequence[str] | None = None,
        options: AnalysisSettings | None = None,
        *,
        classifier: ReleaseClassifier | None = None,
        today: date | None = None,
    ) -> list[ClassifiedRelease]:
        """Run the pipeline for one product. Client errors propagate."""
        options = options or self._options
        classifier = classifier or ReleaseClassifier(
            options.eol_threshold_days,
            options.staleness_threshold_days,
        )
        today = today or today_utc()

        releases = await self._client.get_product_releases(product)
        if not releases:
            log.info("product_no_releases", product=product)
            return []

        if requested_versions:
            releases = await self._select_releases(product, releases, requested_versions, options)

        releases = filter_by_release_date(
            releases, options.min_release_date, options.max_release_date
        )
        releases = sort_releases(releases, options.version_sort_order)
        if options.max_versions is not None:
            releases = releases[: options.max_versions]

        classified = [classifier.classify(product, release, today=today) for release in releases]

        if not options.include_discontinued:
            kept = [c for c in classified if not c.is_discontinued]
            if len(kept) != len(classified):
                log.debug(
                    "discontinued_releases_dropped",
                    product=product,
                    dropped=len(classified) - len(kept),
                )
            classified = kept

        log.debug("product_analyzed", product=product, releases=len(classified))
        return classified

    async def _select_releases(
        self,
        product: str,
        releases: list[Release],
        requested_versions: Sequence[str],
        options: AnalysisSettings,
    ) -> list[Release]:
        """Keep the requested releases, resolving unlisted ones through the client."""
        wanted = {clean_version(version): version for version in requested_versions}
        selected = [release for release in releases if clean_version(release.name) in wanted]
        found = {clean_version(release.name) for release in selected}

        missing = [version for key, version in wanted.items() if key not in found]
        if missing and options.semantic_fallback:
            for version in missing[:]:
                release = await self._client.get_release_with_fallback(product, version, True)
                if release is None:
                    continue
                missing.remove(version)
                key = clean_version(release.name)
                if key not in found:
                    found.add(key)
                    selected.append(release)

        if missing:
            log.warning(
                "requested_releases_not_found",
                product=product,
                requested=list(requested_versions),
                missing=missing,
            )
        return selected
