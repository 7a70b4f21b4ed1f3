"""Release lifecycle classification.

Pure business logic: receives a Release and thresholds, returns a new
ClassifiedRelease. No knowledge of the client, the cache, or I/O. The source
Release is never modified.

Day counts are whole calendar days against ``today`` in UTC. Near midnight
a date may land one day either side of what a local-time reader expects.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from eolscan.models.report import ClassifiedRelease, EolStatus

if TYPE_CHECKING:
    from eolscan.models.release import Release


def today_utc() -> date:
    return datetime.now(UTC).date()


def format_date(value: date | bool | None) -> str | None:
    """Render a resolved lifecycle value as ``YYYY-MM-DD``; flags render as ``None``."""
    if isinstance(value, date):
        return value.isoformat()
    return None


def _as_date(value: date | bool | None) -> date | None:
    return value if isinstance(value, date) else None


def days_until(target: date | None, today: date) -> int | None:
    return (target - today).days if target is not None else None


def days_since(target: date | None, today: date) -> int | None:
    return (today - target).days if target is not None else None


def determine_status(release: Release, eol_threshold_days: int, today: date) -> EolStatus:
    """Derive the end-of-life status, in precedence order.

    1. A parsed EOL date decides: past → END_OF_LIFE, within the threshold
       (inclusive) → APPROACHING_EOL, otherwise ACTIVE.
    2. Without a date, ``eolFrom: true`` means supported with no end date
       (ACTIVE) while ``isEol: true`` means EOL has already happened.
    3. Anything else is UNKNOWN.
    """
    eol_date = _as_date(release.eol_from)

    if eol_date is None:
        if release.eol_from is True:
            return EolStatus.ACTIVE
        if release.is_eol is True:
            return EolStatus.END_OF_LIFE
        return EolStatus.UNKNOWN

    remaining = (eol_date - today).days
    if remaining < 0:
        return EolStatus.END_OF_LIFE
    if remaining <= eol_threshold_days:
        return EolStatus.APPROACHING_EOL
    return EolStatus.ACTIVE


def is_discontinued(release: Release, today: date) -> bool:
    """A discontinuation date only counts once it is no longer in the future."""
    if release.discontinued is True:
        return True
    discontinued_on = _as_date(release.discontinued)
    return discontinued_on is not None and discontinued_on <= today


def has_extended_support(release: Release) -> bool:
    # Capability flag: a date anywhere on the calendar is enough
    if release.eoas_from is True or release.is_eoas is True:
        return True
    return _as_date(release.eoas_from) is not None


def is_lts(release: Release) -> bool:
    if release.is_lts is True:
        return True
    return release.lts_from is True or _as_date(release.lts_from) is not None


class ReleaseClassifier:
    """Applies the configured thresholds to individual releases."""

    def __init__(self, eol_threshold_days: int, staleness_threshold_days: int) -> None:
        self.eol_threshold_days = eol_threshold_days
        self.staleness_threshold_days = staleness_threshold_days

    def classify(
        self,
        product: str,
        release: Release,
        *,
        today: date | None = None,
    ) -> ClassifiedRelease:
        today = today or today_utc()
        eol_date = _as_date(release.eol_from)
        latest_date = release.latest.date if release.latest is not None else None

        return ClassifiedRelease(
            product=product,
            release=release.name,
            status=determine_status(release, self.eol_threshold_days, today),
            eol_date=format_date(eol_date),
            days_until_eol=days_until(eol_date, today),
            release_date=format_date(release.release_date),
            latest_version=release.latest.name if release.latest is not None else None,
            is_lts=is_lts(release),
            lts_date=format_date(release.lts_from),
            link=release.link,
            discontinued_date=format_date(release.discontinued),
            is_discontinued=is_discontinued(release, today),
            extended_support_date=format_date(release.eoas_from),
            has_extended_support=has_extended_support(release),
            latest_release_date=format_date(latest_date),
            days_since_latest_release=days_since(latest_date, today),
            raw_data=release,
        )

    def is_stale(self, classified: ClassifiedRelease) -> bool:
        """Stale when the newest patch shipped longer ago than the threshold."""
        days = classified.days_since_latest_release
        return days is not None and days > self.staleness_threshold_days
