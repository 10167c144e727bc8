# stdlib
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple
# thirdpartylib
import numpy as np
import pandas as pd
from scipy.interpolate import Akima1DInterpolator
# projectlib
from battery_trends.data.records import Sample
from battery_trends.data.schemas import ChargeState
from battery_trends.utils.exceptions import InterpolationDomainError
from battery_trends.utils.logging import Logger

# Cadence of the resampled series
STEP = timedelta(minutes=1)

type Spline = Callable[[np.ndarray], np.ndarray]


class ResampledSeries(NamedTuple):
    """
    Output of `Resampler.resample`.

    ``original`` keeps the knots the spline was fitted through (used for
    point markers); ``resampled`` is the fixed-cadence series.
    """
    original: List[Sample]
    resampled: List[Sample]


class Resampler(object):
    """
    Resample an irregular capacity series onto a fixed cadence.

    A modified Akima spline is fitted through the observed samples and
    evaluated at every `step` from the first sample up to the last
    sample or `now`, whichever is earlier. Modified Akima does not
    overshoot on flat stretches; values are additionally clamped into
    the range of their bounding knots so that no interpolated capacity
    ever leaves the local ``[min, max]``.
    """

    def __init__(
            self,
            step: timedelta = STEP,
            logger: Optional[Logger] = None
        ) -> None:
        if step <= timedelta(0):
            raise ValueError(f"Resampling step must be positive, got {step}.")
        self.step = step
        self.log = logger if logger is not None else Logger()

    def _knots(
            self,
            series: Iterable[Sample]
        ) -> Tuple[List[Sample], np.ndarray, np.ndarray]:
        """
        Return usable samples and their ``(unix_seconds, capacity)``
        coordinates, sorted and deduplicated by timestamp.
        """
        by_ts: Dict[datetime, Sample] = {
            s.timestamp: s for s in series if s.capacity is not None
        }
        knots = [by_ts[ts] for ts in sorted(by_ts)]
        if len(knots) < 2:
            msg = (
                "Resampling needs at least 2 distinct samples with a "
                f"capacity, got {len(knots)}."
            )
            raise InterpolationDomainError(msg)
        x = np.array([s.timestamp.timestamp() for s in knots], dtype=float)
        y = np.array([s.capacity for s in knots], dtype=float)
        return knots, x, y

    def fit(self, x: np.ndarray, y: np.ndarray) -> Spline:
        """
        Fit the shape-preserving interpolant through the knots.

        With exactly two knots the spline reduces to the straight
        segment between them.
        """
        if x.size == 2:
            return lambda grid: np.interp(grid, x, y)
        return Akima1DInterpolator(x, y, method="makima")

    def _bound(
            self,
            x: np.ndarray,
            y: np.ndarray,
            grid: np.ndarray,
            values: np.ndarray
        ) -> np.ndarray:
        """Clamp each value into the range of its bounding knots."""
        idx = np.searchsorted(x, grid, side="right") - 1
        idx = np.clip(idx, 0, x.size - 2)
        lo = np.minimum(y[idx], y[idx + 1])
        hi = np.maximum(y[idx], y[idx + 1])
        return np.clip(values, lo, hi)

    def grid(self, start: datetime, stop: datetime) -> List[datetime]:
        """Timestamps from `start` to `stop` inclusive, every step."""
        if stop < start:
            return []
        # pandas refuses mixed tzinfo objects, even when both are UTC
        if start.tzinfo is not None and stop.tzinfo is not None:
            start = start.astimezone(timezone.utc)
            stop = stop.astimezone(timezone.utc)
        index = pd.date_range(start=start, end=stop, freq=self.step)
        return [ts.to_pydatetime() for ts in index]

    def resample(
            self,
            series: Iterable[Sample],
            now: Optional[datetime] = None
        ) -> ResampledSeries:
        """
        Resample `series` at a fixed cadence.

        Parameters
        ----------
        series : Iterable[Sample]
            Observed samples. Samples without capacity are not used as
            knots.
        now : datetime, optional
            Resampling stops at ``min(last_sample, now)``. Defaults to
            the last sample.

        Returns
        -------
        ResampledSeries
            The knots and the resampled series. Each resampled sample
            carries the state of an original sample at exactly the same
            timestamp, else ``ChargeState.UNKNOWN``.

        Raises
        ------
        InterpolationDomainError
            If fewer than 2 distinct samples carry a capacity.
        """
        samples = list(series)
        knots, x, y = self._knots(samples)
        stop = knots[-1].timestamp
        if now is not None and now < stop:
            stop = now
        timestamps = self.grid(knots[0].timestamp, stop)
        if not timestamps:
            self.log("resampling window is empty, nothing to evaluate", 1)
            return ResampledSeries(knots, [])

        spline = self.fit(x, y)
        grid = np.array([ts.timestamp() for ts in timestamps], dtype=float)
        values = self._bound(x, y, grid, spline(grid))
        capacities = np.rint(values).astype(np.int64)

        # Capacity-less samples still carry a state for their timestamp
        states = {s.timestamp: s.state for s in samples}
        resampled = [
            Sample(ts, int(c), states.get(ts, ChargeState.UNKNOWN))
            for ts, c in zip(timestamps, capacities)
        ]
        self.log(
            f"resampled {len(knots)} samples into {len(resampled)} points "
            f"at {self.step} cadence",
            1
        )
        return ResampledSeries(knots, resampled)
