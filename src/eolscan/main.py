"""Command entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Build the shared HTTP client, cache and catalog client
- Resolve the product list and run the analyzer
- Emit the JSON report on stdout and an exit code for the pipeline step

Exit codes: 0 clean, 1 a fail-on policy tripped, 2 invalid configuration,
3 the catalog could not be read outside the per-product units.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import pydantic
import structlog

from eolscan import __version__
from eolscan.analyzer import EolAnalyzer
from eolscan.cache import ResponseCache
from eolscan.client import EndOfLifeClient, build_http_client
from eolscan.config import Settings
from eolscan.errors import EolScanError

if TYPE_CHECKING:
    from eolscan.config import AnalysisSettings, ProductSettings
    from eolscan.models.report import Report

log = structlog.get_logger()

EXIT_OK = 0
EXIT_POLICY_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_RUNTIME_ERROR = 3


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout is reserved for the JSON report
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


async def resolve_products(client: EndOfLifeClient, products: ProductSettings) -> list[str]:
    """Expand ``["all"]`` and apply the category / tag filters."""
    names = list(products.names)
    if len(names) == 1 and names[0].strip().lower() == "all":
        names = await client.get_all_products()
        log.info("products_expanded", source="all", count=len(names))

    if products.filter_by_category:
        category_products = await client.get_products_by_category(products.filter_by_category)
        in_category = [p.name for p in category_products]
        names = [n for n in names if n in in_category] if names else in_category
        log.info("products_filtered", category=products.filter_by_category, count=len(names))

    if products.filter_by_tag:
        tagged = [p.name for p in await client.get_products_by_tag(products.filter_by_tag)]
        names = [n for n in names if n in tagged] if names else tagged
        log.info("products_filtered", tag=products.filter_by_tag, count=len(names))

    return names


async def run(settings: Settings) -> Report:
    """Execute one scan with the given settings and return the report."""
    http_client = build_http_client(settings.api)
    cache = ResponseCache(settings.api.cache_ttl_seconds)
    client = EndOfLifeClient(http_client, base_url=settings.api.base_url, cache=cache)

    try:
        products = await resolve_products(client, settings.products)
        if not products:
            log.warning("no_products_requested")

        analyzer = EolAnalyzer(client, settings.analysis)
        report = await analyzer.analyze_many(products, settings.products.releases)
    finally:
        await http_client.aclose()

    stats = client.get_cache_stats()
    log.debug("cache_stats", size=stats.size, keys=stats.keys)
    log.info("analysis_summary", summary=report.summary)
    return report


def exit_code(report: Report, analysis: AnalysisSettings) -> int:
    """Map the configured fail-on flags onto a process exit code."""
    if analysis.fail_on_eol and report.eol_detected:
        log.error("policy_failed", reason="eol", count=len(report.eol_products))
        return EXIT_POLICY_FAILURE
    if analysis.fail_on_approaching_eol and report.approaching_eol:
        log.error(
            "policy_failed",
            reason="approaching_eol",
            count=len(report.approaching_eol_products),
        )
        return EXIT_POLICY_FAILURE
    if analysis.fail_on_stale and report.stale_detected:
        log.error("policy_failed", reason="stale", count=len(report.stale_products))
        return EXIT_POLICY_FAILURE
    return EXIT_OK


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    try:
        settings = Settings()
    except pydantic.ValidationError as exc:
        print(f"eolscan: invalid configuration: {exc}", file=sys.stderr)
        raise SystemExit(EXIT_CONFIG_ERROR) from exc

    _setup_logging(settings)
    log.info("scan_starting", version=__version__, base_url=settings.api.base_url)

    try:
        report = asyncio.run(run(settings))
    except EolScanError as exc:
        log.error("scan_failed", **exc.to_dict())
        raise SystemExit(EXIT_RUNTIME_ERROR) from exc

    sys.stdout.write(report.model_dump_json(by_alias=True, indent=2) + "\n")
    raise SystemExit(exit_code(report, settings.analysis))


if __name__ == "__main__":
    main()
