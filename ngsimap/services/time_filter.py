"""Sliding time window over feature observation timestamps."""

from __future__ import annotations

from ngsimap.contracts.feature import FeatureCollection
from ngsimap.contracts.time_window import TimeWindow


def filter_by_window(
    features: FeatureCollection, window: TimeWindow | None = None
) -> FeatureCollection:
    """Keep features observed inside ``window`` (inclusive).

    Features without an observation time are always kept. Without a window
    the input collection is returned as is.
    """
    if window is None:
        return features
    start, end = min(window.start, window.end), max(window.start, window.end)
    kept = tuple(
        f for f in features.features
        if f.observed_at is None or start <= f.observed_at <= end
    )
    return FeatureCollection(features=kept)


def observed_range(features: FeatureCollection) -> TimeWindow | None:
    """Span of observation times in the collection, for the timeline slider."""
    stamps = [f.observed_at for f in features.features if f.observed_at is not None]
    if not stamps:
        return None
    return TimeWindow(start=min(stamps), end=max(stamps))
