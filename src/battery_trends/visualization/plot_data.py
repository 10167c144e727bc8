# stdlib
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, NamedTuple, Optional
# thirdpartylib
import polars as pl
# projectlib
from battery_trends.data.records import RecordStore, Sample
from battery_trends.evaluation.checks import validate as validate_runs
from battery_trends.models.prediction import PredictionSplitter
from battery_trends.models.trends import SegmentedSeries, TrendSegmenter
from battery_trends.preprocessing.interpolation import STEP, Resampler
from battery_trends.preprocessing.window import Window
from battery_trends.utils.exceptions import EmptyStoreError, EmptyWindowError
from battery_trends.utils.logging import Logger
from battery_trends.utils.typing import Point, Polyline, Verbosity

RUNS_SCHEMA = {
    "trend": pl.Utf8,
    "start": pl.Datetime("us", "UTC"),
    "end": pl.Datetime("us", "UTC"),
    "points": pl.Int64,
    "start_capacity": pl.Int64,
    "end_capacity": pl.Int64,
}


class PlotData(NamedTuple):
    """
    Render-ready battery history.

    Attributes
    ----------
    charging, discharging, unknown : list[Polyline]
        Trend runs as ``(timestamps, capacities)`` pairs, chronological
        within each group.
    raw : list[Point]
        Observed, un-resampled points for point markers.
    predicted : list[Point]
        The predicted tail as a single polyline, possibly empty.
    window : Window
        The window the data was cut with.
    segmented : SegmentedSeries
        The underlying segmentation.
    """
    charging: List[Polyline]
    discharging: List[Polyline]
    unknown: List[Polyline]
    raw: List[Point]
    predicted: List[Point]
    window: Window
    segmented: SegmentedSeries


def prepare_plot_data(
        store: RecordStore,
        *,
        lookback_days: Optional[int] = None,
        lookahead_days: Optional[int] = None,
        show_prediction: bool = False,
        resample: bool = False,
        predicted: Optional[Iterable[Sample]] = None,
        now: Optional[datetime] = None,
        step: timedelta = STEP,
        validate: bool = False,
        verbose: Verbosity = 0,
        logger: Optional[Logger] = None
    ) -> PlotData:
    """
    Turn a record store into trend-segmented polylines.

    The stages run in order: the prediction splitter decides whether
    predicted samples are merged, the window is resolved and applied,
    the observed prefix before `now` is optionally resampled, and the
    result is segmented into charging, discharging and unknown runs.

    Parameters
    ----------
    store : RecordStore
        Observed samples.
    lookback_days, lookahead_days : int, optional
        Window bounds in days before the latest timestamp.
    show_prediction : bool, default False
        Render `predicted` as a tail after the observed runs.
    resample : bool, default False
        Resample the observed prefix at `step` before segmenting.
    predicted : Iterable[Sample], optional
        Externally supplied predictions.
    now : datetime, optional
        Cutover between history and prediction. Defaults to the current
        UTC time.
    step : timedelta, default one minute
        Resampling cadence.
    validate : bool, default False
        Check run invariants on the segmentation before returning.
    verbose : Verbosity, default 0
        Verbosity of the default logger.
    logger : Logger, optional
        Logger to use instead of a default one.

    Returns
    -------
    PlotData

    Raises
    ------
    EmptyStoreError
        If `store` is empty.
    EmptyWindowError
        If the window or cutover leaves nothing to segment.
    InterpolationDomainError
        If resampling is requested with fewer than 2 observed samples.
    """
    log = logger if logger is not None else Logger(verbose=verbose)
    if len(store) == 0:
        raise EmptyStoreError("Cannot plot an empty battery history.")
    if now is None:
        now = datetime.now(timezone.utc)
    predicted = list(predicted) if predicted is not None else None

    splitter = PredictionSplitter(now, show_prediction, lookahead_days)
    source = splitter.prepare(store, predicted)
    window = Window.resolve(
        source, lookback_days, lookahead_days, show_prediction
    )
    filtered = window.apply(source)
    log(
        f"window ({window.start}, {window.end}) kept {len(filtered)} of "
        f"{len(source)} samples; prediction mode {splitter.mode}",
        1
    )
    if len(filtered) == 0:
        msg = (
            f"No samples within {lookback_days} day(s) before "
            f"{window.anchor}; consider widening the window."
        )
        raise EmptyWindowError(msg)

    observed = splitter.observed(filtered.ordered_samples())
    if not observed:
        msg = (
            f"All {len(filtered)} windowed samples lie at or after the "
            f"cutover {now}; nothing observed to plot."
        )
        raise EmptyWindowError(msg)
    raw = [p for p in (s.point for s in observed) if p is not None]
    series = observed
    if resample:
        resampler = Resampler(step, logger=log.child("resample"))
        series = resampler.resample(observed, now).resampled

    segmenter = TrendSegmenter(logger=log.child("segment"))
    segmented = segmenter.segment(series, cutover=now)
    if validate:
        validate_runs(segmented)

    tail = splitter.tail(filtered.ordered_samples(), predicted)
    log(f"predicted tail holds {len(tail)} points", 1)

    return PlotData(
        charging=SegmentedSeries.to_polylines(segmented.increasing),
        discharging=SegmentedSeries.to_polylines(segmented.decreasing),
        unknown=SegmentedSeries.to_polylines(segmented.none),
        raw=raw,
        predicted=tail,
        window=window,
        segmented=segmented,
    )


def runs_frame(plot_data: PlotData) -> pl.DataFrame:
    """
    Tabulate the runs of `plot_data`, one row per run.

    Columns are ``trend``, ``start``, ``end``, ``points``,
    ``start_capacity`` and ``end_capacity``, ordered by ``start``.
    """
    rows = [
        {
            "trend": trend.value,
            "start": run[0][0],
            "end": run[-1][0],
            "points": len(run),
            "start_capacity": run[0][1],
            "end_capacity": run[-1][1],
        }
        for trend, run in plot_data.segmented.chronological()
    ]
    return pl.DataFrame(rows, schema=RUNS_SCHEMA)
