from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List


def local_today() -> date:
    """Return the local calendar date."""
    return date.today()


def day_offsets(dates: Iterable[date], today: date) -> List[int]:
    """Convert calendar dates into archive day offsets.

    Parameters
    ----------
    dates
        Requested calendar days, in the order results are wanted.
    today
        Reference day. Passed in rather than read from the clock so every
        offset in a batch is computed against the same day.

    Returns
    -------
    list[int]
        ``(today - d).days`` for each requested day. Past days give positive
        offsets, ``today`` gives 0 and future days give negative offsets.
    """
    return [(today - d).days for d in dates]


def dates_for_offsets(offsets: Iterable[int], today: date) -> List[date]:
    """Inverse of :func:`day_offsets`."""
    return [today - timedelta(days=int(i)) for i in offsets]


def parse_date(text: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string; raises ValueError otherwise."""
    return date.fromisoformat(text.strip())
