# stdlib
import warnings
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional
# projectlib
from battery_trends.data.records import Sample
from battery_trends.utils.exceptions import (
    EmptyWindowError,
    MissingSampleWarning
)
from battery_trends.utils.logging import Logger
from battery_trends.utils.typing import Point, Polyline, Run


class Trend(str, Enum):
    """Capacity trend of a run of samples."""
    NONE = 'none'
    INCREASING = 'increasing'
    DECREASING = 'decreasing'


class Placement(str, Enum):
    """
    Where the current point goes when a transition fires.

    EXTEND
        Append to the open run of the current trend.
    FORK
        Append to the open run, then open a run of the next trend
        seeded with the point just appended.
    SEED
        Open a run of the next trend seeded with the previous point,
        then append the current point.
    """
    EXTEND = 'extend'
    FORK = 'fork'
    SEED = 'seed'


class Step(NamedTuple):
    trend: Trend
    placement: Placement


def transition(trend: Trend, previous: int, current: int) -> Step:
    """
    Classify `current` against `previous` given the running `trend`.

    Once a run has left ``Trend.NONE`` it never returns to it: equal
    capacities extend whichever monotonic run is open.

    Examples
    --------
    >>> transition(Trend.NONE, 50, 60)
    Step(trend=<Trend.INCREASING: 'increasing'>, placement=<Placement.FORK: 'fork'>)
    >>> transition(Trend.INCREASING, 60, 60).placement
    <Placement.EXTEND: 'extend'>
    """
    match trend:
        case Trend.NONE:
            if current < previous:
                return Step(Trend.DECREASING, Placement.FORK)
            if current > previous:
                return Step(Trend.INCREASING, Placement.FORK)
            return Step(Trend.NONE, Placement.EXTEND)
        case Trend.INCREASING:
            if current >= previous:
                return Step(Trend.INCREASING, Placement.EXTEND)
            return Step(Trend.DECREASING, Placement.SEED)
        case Trend.DECREASING:
            if current <= previous:
                return Step(Trend.DECREASING, Placement.EXTEND)
            return Step(Trend.INCREASING, Placement.SEED)
        case _:
            raise ValueError(f"Unknown trend {trend!r}")


class SegmentedSeries(NamedTuple):
    """
    Runs of a series grouped by trend.

    Each list holds runs in chronological order; each run is an ordered
    list of ``(timestamp, capacity)`` points. Adjacent runs of different
    trends share their boundary point.
    """
    increasing: List[Run]
    decreasing: List[Run]
    none: List[Run]
    skipped: List[datetime]

    def runs(self, trend: Trend) -> List[Run]:
        match trend:
            case Trend.INCREASING:
                return self.increasing
            case Trend.DECREASING:
                return self.decreasing
            case _:
                return self.none

    def chronological(self) -> List[tuple[Trend, Run]]:
        """All runs tagged with their trend, ordered by first point."""
        tagged = [
            (trend, run) for trend in Trend for run in self.runs(trend)
        ]
        # A forked run starts on the last point of the run it left
        return sorted(tagged, key=lambda tr: (tr[1][0][0], tr[1][-1][0]))

    @staticmethod
    def to_polylines(runs: List[Run]) -> List[Polyline]:
        """Convert runs into ``(timestamps, capacities)`` pairs."""
        return [
            ([ts for ts, _ in run], [c for _, c in run]) for run in runs
        ]


class _Accumulator(object):
    """Fold state threaded through `TrendSegmenter.segment`."""

    def __init__(self, seed: Point) -> None:
        self.trend = Trend.NONE
        self.previous = seed
        self.runs: Dict[Trend, List[Run]] = {t: [] for t in Trend}
        self.runs[Trend.NONE].append([seed])

    def open_run(self) -> Run:
        return self.runs[self.trend][-1]

    def seed_run(self, trend: Trend, prior: Run, n: int = 1) -> Run:
        """Open a run of `trend` starting with the last `n` points of
        `prior`."""
        run = list(prior[-n:])
        self.runs[trend].append(run)
        return run

    def push(self, point: Point) -> None:
        step = transition(self.trend, self.previous[1], point[1])
        current = self.open_run()
        match step.placement:
            case Placement.EXTEND:
                current.append(point)
            case Placement.FORK:
                current.append(point)
                self.seed_run(step.trend, current)
            case Placement.SEED:
                self.seed_run(step.trend, current).append(point)
        self.trend = step.trend
        self.previous = point


class TrendSegmenter(object):
    """
    Split a capacity series into increasing, decreasing and flat runs.

    The series is walked in timestamp order. The first usable sample
    seeds a flat (``Trend.NONE``) run; every later sample is placed
    according to `transition`. Whenever a new run starts, it begins on
    the last point of the run it leaves, so that drawing each run as an
    independent line still yields a connected chart.

    Parameters
    ----------
    logger : Logger, optional
        Receives run counts at verbosity 1 and skipped points at 2.
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.log = logger if logger is not None else Logger()

    def segment(
            self,
            series: Iterable[Sample],
            cutover: Optional[datetime] = None
        ) -> SegmentedSeries:
        """
        Segment `series` into trend runs.

        Parameters
        ----------
        series : Iterable[Sample]
            Samples in any order; they are sorted by timestamp first.
        cutover : datetime, optional
            Samples at or after this instant belong to the predicted
            tail and are ignored here.

        Returns
        -------
        SegmentedSeries
            Runs per trend plus the timestamps skipped for lacking a
            capacity.

        Raises
        ------
        EmptyWindowError
            If no sample with a capacity lies before `cutover`.
        """
        ordered = sorted(series, key=lambda s: s.timestamp)
        if not ordered:
            raise EmptyWindowError(
                "No samples left to segment; consider widening the window."
            )

        acc: Optional[_Accumulator] = None
        skipped: List[datetime] = []
        for sample in ordered:
            if cutover is not None and sample.timestamp >= cutover:
                break
            point = sample.point
            if point is None:
                skipped.append(sample.timestamp)
                self.log(f"no capacity at {sample.timestamp}, skipped", 2)
                warnings.warn(
                    f"No capacity at {sample.timestamp.isoformat()}; "
                    "point skipped.",
                    MissingSampleWarning,
                    stacklevel=2
                )
                continue
            if acc is None:
                acc = _Accumulator(point)
            else:
                acc.push(point)

        if acc is None:
            msg = (
                f"None of the {len(ordered)} samples has a capacity before "
                f"the cutover {cutover}."
            )
            raise EmptyWindowError(msg)

        out = SegmentedSeries(
            increasing=acc.runs[Trend.INCREASING],
            decreasing=acc.runs[Trend.DECREASING],
            none=acc.runs[Trend.NONE],
            skipped=skipped,
        )
        self.log(
            f"segmented {len(ordered)} samples into "
            f"{len(out.increasing)} increasing, "
            f"{len(out.decreasing)} decreasing and "
            f"{len(out.none)} flat runs",
            1
        )
        return out
