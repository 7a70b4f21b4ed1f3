"""endoflife.date catalog client.

All network I/O goes through a single EndOfLifeClient instance. The client
receives an httpx.AsyncClient via constructor injection; the caller owns the
transport lifecycle. Every request is keyed by its fully-resolved URL and
served from the response cache when a fresh entry exists.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import httpx
import pydantic
import structlog
from pydantic import TypeAdapter

from eolscan.cache import ResponseCache
from eolscan.config import DEFAULT_API_URL
from eolscan.errors import ApiError, ErrorCode, ValidationError
from eolscan.models.release import (
    FullProduct,
    IdentifierItem,
    NamedLink,
    ProductSummary,
    Release,
)
from eolscan.versions import (
    clean_version,
    is_semantic_version,
    parse_semantic_version,
    semantic_fallbacks,
)

if TYPE_CHECKING:
    from eolscan.cache import CacheStats
    from eolscan.config import ApiSettings
    from eolscan.protocols import CacheProtocol

log = structlog.get_logger()

T = TypeVar("T")

MAX_RATE_LIMIT_RETRIES = 3

_NAMES = TypeAdapter(list[str | NamedLink])
_SUMMARIES = TypeAdapter(list[ProductSummary])
_FULL_PRODUCTS = TypeAdapter(list[FullProduct])
_FULL_PRODUCT = TypeAdapter(FullProduct)
_RELEASE = TypeAdapter(Release)
_IDENTIFIERS = TypeAdapter(list[IdentifierItem])


def build_http_client(settings: ApiSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once per run."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def backoff_delay(attempt: int) -> float:
    """Seconds to wait before retry ``attempt`` (0-based): 1, 2, 4, ..."""
    return float(2**attempt)


def _names(items: list[str | NamedLink]) -> list[str]:
    return [item if isinstance(item, str) else item.name for item in items]


def unwrap_envelope(payload: Any) -> Any:
    """Return ``payload["result"]`` for v1 envelopes, the payload itself otherwise."""
    if isinstance(payload, dict) and "result" in payload and "schema_version" in payload:
        return payload["result"]
    return payload


class EndOfLifeClient:
    """Cached, rate-limit-aware reader for the endoflife.date v1 API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str = DEFAULT_API_URL,
        cache: CacheProtocol | None = None,
        cache_ttl_seconds: float = 3600,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._cache = cache if cache is not None else ResponseCache(cache_ttl_seconds)

    def _url(self, *segments: str) -> str:
        # Release names such as "releng/14.0" must stay one path segment
        return "/".join([self._base_url, *(quote(segment, safe="") for segment in segments)])

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    async def _request(self, url: str, adapter: TypeAdapter[T]) -> T:
        cached = self._cache.get(url)
        if cached is not None:
            log.debug("cache_hit", url=url)
            return cached

        response = await self._get_with_retry(url)

        if response.status_code != 200:
            raise ApiError(
                f"HTTP {response.status_code} {response.reason_phrase} fetching {url}",
                response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(
                f"Invalid JSON in response from {url}",
                response.status_code,
                code=ErrorCode.INVALID_RESPONSE,
            ) from exc

        try:
            validated = adapter.validate_python(unwrap_envelope(payload))
        except pydantic.ValidationError as exc:
            raise ValidationError(f"API response validation failed for {url}", exc) from exc

        self._cache.set(url, validated)
        log.debug("fetch_complete", url=url, status_code=response.status_code)
        return validated

    async def _get_with_retry(self, url: str) -> httpx.Response:
        """GET ``url``, retrying 429 responses with exponential backoff."""
        attempt = 0
        while True:
            try:
                response = await self._client.get(url)
            except httpx.HTTPError as exc:
                raise ApiError(
                    f"Network error fetching {url}: {exc}",
                    code=ErrorCode.NETWORK_ERROR,
                ) from exc

            if response.status_code != 429:
                return response

            if attempt >= MAX_RATE_LIMIT_RETRIES:
                raise ApiError(
                    f"Rate limit exceeded fetching {url} after {MAX_RATE_LIMIT_RETRIES} retries",
                    429,
                    code=ErrorCode.RATE_LIMITED,
                )

            delay = backoff_delay(attempt)
            log.warning("rate_limited_retry", url=url, attempt=attempt + 1, delay_seconds=delay)
            await asyncio.sleep(delay)
            attempt += 1

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def get_products(self) -> list[ProductSummary]:
        return await self._request(self._url("products"), _SUMMARIES)

    async def get_all_products(self) -> list[str]:
        """Names of every product in the catalog."""
        return [product.name for product in await self.get_products()]

    async def get_products_full_data(self) -> list[FullProduct]:
        return await self._request(self._url("products", "full"), _FULL_PRODUCTS)

    async def get_product(self, product: str) -> FullProduct:
        try:
            return await self._request(self._url("products", product), _FULL_PRODUCT)
        except ApiError as exc:
            exc.product = product
            raise

    async def get_product_releases(self, product: str) -> list[Release]:
        """All release cycles of ``product``, in catalog order."""
        return list((await self.get_product(product)).releases)

    async def get_product_release(self, product: str, release: str) -> Release:
        url = self._url("products", product, "releases", release)
        try:
            return await self._request(url, _RELEASE)
        except ApiError as exc:
            exc.product = product
            exc.release = release
            raise

    async def get_latest_release(self, product: str) -> Release:
        url = self._url("products", product, "releases", "latest")
        try:
            return await self._request(url, _RELEASE)
        except ApiError as exc:
            exc.product = product
            exc.release = "latest"
            raise

    async def get_release_with_fallback(
        self,
        product: str,
        version: str,
        enable_fallback: bool,
    ) -> Release | None:
        """Look up ``version``, then progressively less specific candidates.

        Only "not found" answers move on to the next candidate; any other
        failure propagates. Returns ``None`` once the candidates run out.
        """
        candidates = semantic_fallbacks(version) if enable_fallback else [clean_version(version)]
        if not is_semantic_version(version):
            components = parse_semantic_version(version)
            log.debug(
                "version_not_semantic",
                product=product,
                version=version,
                major=components.major if components is not None else None,
            )

        for candidate in candidates:
            try:
                release = await self.get_product_release(product, candidate)
            except ApiError as exc:
                if not exc.is_not_found:
                    raise
                log.debug("release_candidate_not_found", product=product, candidate=candidate)
                continue

            log.info("release_matched", product=product, version=version, release=candidate)
            return release

        return None

    # ------------------------------------------------------------------
    # Categories, tags, identifiers
    # ------------------------------------------------------------------

    async def get_categories(self) -> list[str]:
        return _names(await self._request(self._url("categories"), _NAMES))

    async def get_products_by_category(self, category: str) -> list[ProductSummary]:
        return await self._request(self._url("categories", category), _SUMMARIES)

    async def get_tags(self) -> list[str]:
        return _names(await self._request(self._url("tags"), _NAMES))

    async def get_products_by_tag(self, tag: str) -> list[ProductSummary]:
        return await self._request(self._url("tags", tag), _SUMMARIES)

    async def get_identifier_types(self) -> list[str]:
        return _names(await self._request(self._url("identifiers"), _NAMES))

    async def get_identifiers_by_type(self, identifier_type: str) -> list[IdentifierItem]:
        return await self._request(self._url("identifiers", identifier_type), _IDENTIFIERS)

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_stats(self) -> CacheStats:
        return self._cache.stats()
