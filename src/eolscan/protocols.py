"""Protocol interfaces for swappable components.

The analyzer references these protocols, not the concrete implementations.
This allows:
- Tests to drive the pipeline with lightweight in-memory release sources
- Alternative cache backends to be swapped without changing the client
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from eolscan.cache import CacheStats
    from eolscan.models.release import Release


class CacheProtocol(Protocol):
    """Interface for the response cache consulted before every fetch."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self) -> None: ...

    def stats(self) -> CacheStats: ...


class ReleaseSourceProtocol(Protocol):
    """Interface the analyzer needs from the catalog client."""

    async def get_product_releases(self, product: str) -> list[Release]: ...

    async def get_release_with_fallback(
        self, product: str, version: str, enable_fallback: bool
    ) -> Release | None: ...
