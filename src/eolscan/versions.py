"""Version string helpers.

Pure functions without I/O or any knowledge of the catalog API. The fallback
candidates are only a search order; the API decides which of them exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LEADING_V_RE = re.compile(r"^v", re.IGNORECASE)
_SEMVER_RE = re.compile(r"^\d+(\.\d+){0,2}$")
_LEADING_DIGITS_RE = re.compile(r"^\d+")


@dataclass(frozen=True)
class VersionComponents:
    major: int
    minor: int | None = None
    patch: int | None = None


def clean_version(version: str) -> str:
    """Strip surrounding whitespace and a leading ``v``: ``" V1.2 "`` → ``"1.2"``."""
    return _LEADING_V_RE.sub("", version.strip())


def semantic_fallbacks(version: str) -> list[str]:
    """Return lookup candidates from most to least specific.

    ``"v1.2.3"`` → ``["1.2.3", "1.2", "1"]``. A single-segment version yields
    itself only. Non-numeric segments are kept as-is.
    """
    cleaned = clean_version(version)
    parts = cleaned.split(".")
    candidates = [cleaned]
    for end in range(len(parts) - 1, 0, -1):
        candidates.append(".".join(parts[:end]))
    return candidates


def is_semantic_version(version: str) -> bool:
    """True for one to three dot-separated numeric segments after cleaning."""
    return _SEMVER_RE.match(clean_version(version)) is not None


def _leading_int(segment: str) -> int | None:
    match = _LEADING_DIGITS_RE.match(segment)
    return int(match.group()) if match else None


def parse_semantic_version(version: str) -> VersionComponents | None:
    """Split a version into numeric components.

    Each segment contributes its leading digits (``"3-rc1"`` → 3). Returns
    ``None`` when the major segment has none; later segments without digits
    are left unset.
    """
    parts = clean_version(version).split(".")
    major = _leading_int(parts[0])
    if major is None:
        return None
    minor = _leading_int(parts[1]) if len(parts) > 1 else None
    patch = _leading_int(parts[2]) if len(parts) > 2 else None
    return VersionComponents(major=major, minor=minor, patch=patch)
