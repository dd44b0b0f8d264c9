"""Time-window partitioning of an export date range."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from loguru import logger

from oci_client.merge import concat_data
from settings import SLICE_SECONDS

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

WindowFn = Callable[[str, str], Awaitable[dict | None]]


@dataclass(frozen=True)
class TimeWindow:
    """Half-open UTC interval [start, end)."""

    start: datetime
    end: datetime
    index: int = 0

    @property
    def start_str(self) -> str:
        return self.start.strftime(TIMESTAMP_FORMAT)

    @property
    def end_str(self) -> str:
        return self.end.strftime(TIMESTAMP_FORMAT)


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def plan_windows(start: date, end: date, slice_seconds: int = SLICE_SECONDS) -> list[TimeWindow]:
    """Split [start, end) into consecutive windows of at most slice_seconds.

    Dates are taken as UTC midnights. The last window is clamped to end, and
    start == end still yields one (empty) window.
    """
    if slice_seconds <= 0:
        raise ValueError(f"slice_seconds must be positive, got {slice_seconds}")
    if start > end:
        raise ValueError(f"start {start} is after end {end}")

    step = timedelta(seconds=slice_seconds)
    range_end = _midnight(end)
    current = _midnight(start)
    windows: list[TimeWindow] = []

    while True:
        window_end = min(current + step, range_end)
        windows.append(TimeWindow(start=current, end=window_end, index=len(windows)))
        current = window_end
        if current >= range_end:
            break

    return windows


async def run_over_range(
    start: date,
    end: date,
    slice_seconds: int,
    per_window: WindowFn,
) -> dict | None:
    """Await per_window(start_str, end_str) for every window and merge the results."""
    windows = plan_windows(start, end, slice_seconds)
    logger.info("{} -> {}: {} window(s) of {}s", start, end, len(windows), slice_seconds)

    merged = None
    for window in windows:
        logger.info("Window {}/{}: {} -> {}", window.index + 1, len(windows), window.start_str, window.end_str)
        out = await per_window(window.start_str, window.end_str)
        merged = concat_data(merged, out)
    return merged
