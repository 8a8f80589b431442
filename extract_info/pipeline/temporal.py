"""Merges fragmentary date/time mentions into coherent date-time values."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from extract_info.schemas.models import (
    DateInfo,
    DateTimeMention,
    TemporalFragment,
    TemporalKind,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_YEAR = 1900

# Time-only values are anchored to the minimal calendar date.
SENTINEL_DATE = datetime.min

COMPLETE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
)
DATE_FORMATS = ("%Y-%m-%d",)
TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def _try_parse(value: str, formats: Tuple[str, ...]) -> Optional[datetime]:
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


class TemporalMergeEngine:
    """Classifies, pairs and validates date/time mentions."""

    def __init__(self, min_year: int = DEFAULT_MIN_YEAR):
        """
        Initialize engine.

        Args:
            min_year: Results with a year below this are rejected as implausible
        """
        self.min_year = min_year

    @staticmethod
    def classify(mention: DateTimeMention, order: int) -> Optional[TemporalFragment]:
        """
        Classify a mention by the components its resolved value carries.

        Returns None when the value is missing or not a recognized format.
        """
        value = (mention.resolved_value or "").strip()
        if not value:
            return None

        parsed = _try_parse(value, COMPLETE_FORMATS)
        if parsed:
            return TemporalFragment(
                kind=TemporalKind.COMPLETE,
                year=parsed.year,
                month=parsed.month,
                day=parsed.day,
                hour=parsed.hour,
                minute=parsed.minute,
                order=order,
            )

        parsed = _try_parse(value, DATE_FORMATS)
        if parsed:
            return TemporalFragment(
                kind=TemporalKind.DATE_ONLY,
                year=parsed.year,
                month=parsed.month,
                day=parsed.day,
                order=order,
            )

        parsed = _try_parse(value, TIME_FORMATS)
        if parsed:
            return TemporalFragment(
                kind=TemporalKind.TIME_ONLY,
                hour=parsed.hour,
                minute=parsed.minute,
                order=order,
            )

        return None

    def merge(self, mentions: List[DateTimeMention]) -> Tuple[List[DateInfo], bool]:
        """
        Merge date/time mentions into DateInfo results.

        Output order: complete mentions, then date/time pairs (FIFO), then
        unmatched leftovers in their original relative order.

        Args:
            mentions: Date/time mentions in appearance order

        Returns:
            (dates, date_rejected)
        """
        fragments: List[TemporalFragment] = []
        for order, mention in enumerate(mentions):
            fragment = self.classify(mention, order)
            if fragment is None:
                logger.warning(
                    f"Dropping unresolvable {mention.type} mention "
                    f"(value={mention.resolved_value!r})"
                )
                continue
            fragments.append(fragment)

        completes = [f for f in fragments if f.kind == TemporalKind.COMPLETE]
        date_queue = [f for f in fragments if f.kind == TemporalKind.DATE_ONLY]
        time_queue = [f for f in fragments if f.kind == TemporalKind.TIME_ONLY]

        results: List[DateInfo] = [self._to_date_info(f) for f in completes]

        pair_count = min(len(date_queue), len(time_queue))
        for idx in range(pair_count):
            results.append(self._pair(date_queue[idx], time_queue[idx]))

        leftovers = date_queue[pair_count:] + time_queue[pair_count:]
        leftovers.sort(key=lambda f: f.order)
        results.extend(self._to_date_info(f) for f in leftovers)

        results = [self._check_plausible(d) for d in results]

        date_rejected = not (len(results) == 1 and not results[0].is_rejected)
        if date_rejected:
            logger.warning(
                f"Date rejected: {len(results)} result(s), "
                f"{sum(1 for d in results if d.is_rejected)} implausible"
            )

        return results, date_rejected

    @staticmethod
    def _to_date_info(fragment: TemporalFragment) -> DateInfo:
        if fragment.kind == TemporalKind.TIME_ONLY:
            value = SENTINEL_DATE.replace(hour=fragment.hour, minute=fragment.minute)
        else:
            value = datetime(
                fragment.year,
                fragment.month,
                fragment.day,
                fragment.hour,
                fragment.minute,
            )
        return DateInfo.from_datetime(value)

    @staticmethod
    def _pair(date_fragment: TemporalFragment, time_fragment: TemporalFragment) -> DateInfo:
        return DateInfo.from_datetime(
            datetime(
                date_fragment.year,
                date_fragment.month,
                date_fragment.day,
                time_fragment.hour,
                time_fragment.minute,
            )
        )

    def _check_plausible(self, date_info: DateInfo) -> DateInfo:
        if date_info.year < self.min_year:
            logger.warning(
                f"Extracted date rejected! ('{date_info.full_date}' is before year {self.min_year})"
            )
            return DateInfo.rejected()
        return date_info
