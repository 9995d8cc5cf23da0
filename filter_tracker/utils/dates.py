from datetime import date, timedelta
from typing import Iterator, List


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive.
    Yields nothing when end is before start."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def days_between(start: date, end: date) -> List[date]:
    return list(iter_days(start, end))


def group_contiguous(days: List[date]) -> List[List[date]]:
    """Split days into runs of consecutive dates (input order not required)."""
    runs: List[List[date]] = []
    for day in sorted(set(days)):
        if runs and day - runs[-1][-1] == timedelta(days=1):
            runs[-1].append(day)
        else:
            runs.append([day])
    return runs
