# stdlib
from datetime import datetime
from typing import Dict, List
# thirdpartylib
import numpy as np
# projectlib
from battery_trends.models.trends import SegmentedSeries, Trend
from battery_trends.utils.typing import Point, Run


def reconstruct(segmented: SegmentedSeries) -> List[Point]:
    """
    Rebuild the segmented series from its runs.

    Boundary points appear in two runs; both copies must agree.

    Raises
    ------
    ValueError
        If two runs disagree on the capacity at a shared timestamp.
    """
    points: Dict[datetime, int] = {}
    for _, run in segmented.chronological():
        for ts, capacity in run:
            if ts in points and points[ts] != capacity:
                msg = (
                    f"Runs disagree at {ts}: {points[ts]} vs {capacity}."
                )
                raise ValueError(msg)
            points[ts] = capacity
    return [(ts, points[ts]) for ts in sorted(points)]


def is_monotonic(run: Run, trend: Trend) -> bool:
    """
    Check a run against its trend.

    Increasing runs must be non-decreasing and decreasing runs
    non-increasing. A flat run may only change on its final point, where
    it hands over to the next run.
    """
    if len(run) < 2:
        return True
    diffs = np.diff(np.array([c for _, c in run], dtype=np.int64))
    match trend:
        case Trend.INCREASING:
            return bool(np.all(diffs >= 0))
        case Trend.DECREASING:
            return bool(np.all(diffs <= 0))
        case _:
            return bool(np.all(diffs[:-1] == 0))


def shares_boundaries(segmented: SegmentedSeries) -> bool:
    """True if every run starts on the last point of the run before it."""
    ordered = [run for _, run in segmented.chronological()]
    return all(
        earlier[-1] == later[0]
        for earlier, later in zip(ordered, ordered[1:])
    )


def overlap_count(segmented: SegmentedSeries) -> int:
    """Number of point copies beyond one per unique timestamp."""
    total = sum(len(run) for _, run in segmented.chronological())
    return total - len(reconstruct(segmented))


def validate(segmented: SegmentedSeries) -> None:
    """
    Assert the structural invariants of a segmentation.

    Raises
    ------
    ValueError
        On the first violated invariant.
    """
    for trend in Trend:
        for run in segmented.runs(trend):
            if not is_monotonic(run, trend):
                raise ValueError(f"{trend.value} run is not monotonic: {run}")
    if not shares_boundaries(segmented):
        raise ValueError("Adjacent runs do not share their boundary point.")
    n_runs = sum(len(segmented.runs(t)) for t in Trend)
    if overlap_count(segmented) != n_runs - 1:
        msg = (
            f"Expected {n_runs - 1} shared boundary points, found "
            f"{overlap_count(segmented)}."
        )
        raise ValueError(msg)
