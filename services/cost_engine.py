"""
Cost aggregation for subscription periods.

Periods are clipped to a reporting window, merged into non-overlapping
segments (the most expensive concurrent plan wins a merged span) and billed
per touched calendar month.

Example:
    Jan 1 - Mar 1 at 100 and Feb 1 - Apr 1 at 150, window Jan 1 - Apr 1
    After merge: [Jan 1 - Apr 1 at 150]
    Total: 4 months * 150 = 600
"""
from dataclasses import dataclass
from datetime import date, timedelta
from functools import reduce
from typing import Iterable, Optional, Tuple


# Back-to-back plans (old one ending the day before the new one starts)
# are billed as one continuous run.
ADJACENCY_TOLERANCE = timedelta(days=1)


@dataclass(frozen=True)
class Period:
    price: int
    start: date
    end: Optional[date] = None

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class Window:
    filter_start: date
    filter_end: date

    @classmethod
    def unbounded_until(cls, filter_end: date) -> "Window":
        return cls(filter_start=date.min, filter_end=filter_end)


@dataclass(frozen=True)
class MergedSegment:
    price: int
    start: date
    end: date

    @property
    def months(self) -> int:
        return months_between(self.start, self.end)

    @property
    def cost(self) -> int:
        return self.price * self.months


def clip_period(period: Period, window: Window) -> MergedSegment:
    """
    Intersect a period with the window bounds.

    An open-ended period ends at ``window.filter_end``. The result may be
    degenerate (end before start) when the period lies outside the window.
    """
    end = period.end if period.end is not None else window.filter_end
    return MergedSegment(
        price=period.price,
        start=max(period.start, window.filter_start),
        end=min(end, window.filter_end),
    )


def _touches(segment: MergedSegment, start: date) -> bool:
    return start - segment.end <= ADJACENCY_TOLERANCE


def _absorb(
    merged: Tuple[MergedSegment, ...], clipped: MergedSegment
) -> Tuple[MergedSegment, ...]:
    if not merged:
        return (clipped,)

    running = merged[-1]
    if _touches(running, clipped.start):
        extended = MergedSegment(
            price=max(running.price, clipped.price),
            start=running.start,
            end=max(running.end, clipped.end),
        )
        return merged[:-1] + (extended,)

    return merged + (clipped,)


def merge_periods(
    periods: Iterable[Period], window: Window
) -> Tuple[MergedSegment, ...]:
    """
    Clip, sort and merge periods into non-overlapping billed segments.

    A clipped period starting no later than one day after the running
    segment's end is folded into it: the end extends to the later of the two
    and the price becomes the higher of the two. Equal starts keep input order.

    Args:
        periods: raw subscription periods, already filtered by user/service
        window: reporting bounds

    Returns:
        Segments sorted by start
    """
    clipped = sorted(
        (clip_period(period, window) for period in periods),
        key=lambda segment: segment.start,
    )
    return reduce(_absorb, clipped, ())


def months_between(start: date, end: date) -> int:
    """
    Count calendar months touched by the inclusive range [start, end].

    The final partial month counts only if ``end.day`` reached ``start.day``.
    Returns 0 when ``end`` is before ``start``.
    """
    if end < start:
        return 0

    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months + 1


def sum_cost(periods: Iterable[Period], window: Window) -> int:
    return sum(segment.cost for segment in merge_periods(periods, window))
