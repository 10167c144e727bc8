# stdlib
from datetime import datetime
from typing import Iterable, List, Optional
# projectlib
from battery_trends.data.records import RecordStore, Sample
from battery_trends.utils.typing import Point, PredictionMode


class PredictionSplitter(object):
    """
    Separate observed history from the predicted future at `cutover`.

    The mode is derived from the window options:

    - ``"discard"``: predictions are not shown at all.
    - ``"merge"``: the window's upper bound is exactly the anchor
      (``lookahead_days == 0``), so predictions are merged into the
      observed store before windowing and whatever survives at or after
      the cutover becomes the tail.
    - ``"tail"``: predictions bypass the window and are appended as an
      un-segmented tail.

    In every mode only samples strictly before the cutover are handed to
    the trend segmenter.

    Parameters
    ----------
    cutover : datetime
        The current instant separating history from prediction.
    show_prediction : bool
        Whether predicted samples are rendered.
    lookahead_days : int, optional
        Upper window bound in days before the anchor.
    """

    def __init__(
            self,
            cutover: datetime,
            show_prediction: bool = False,
            lookahead_days: Optional[int] = None
        ) -> None:
        self.cutover = cutover
        self.show_prediction = show_prediction
        self.lookahead_days = lookahead_days

    @property
    def mode(self) -> PredictionMode:
        if not self.show_prediction:
            return "discard"
        if self.lookahead_days == 0:
            return "merge"
        return "tail"

    def prepare(
            self,
            store: RecordStore,
            predicted: Optional[Iterable[Sample]] = None
        ) -> RecordStore:
        """
        Return the store the window should be applied to.

        In ``"merge"`` mode this is `store` merged with `predicted`,
        observed samples winning on equal timestamps; otherwise it is
        `store` unchanged.
        """
        if self.mode == "merge" and predicted is not None:
            return store.merged(predicted)
        return store

    def observed(self, series: Iterable[Sample]) -> List[Sample]:
        """Samples strictly before the cutover, in timestamp order."""
        return sorted(
            (s for s in series if s.timestamp < self.cutover),
            key=lambda s: s.timestamp
        )

    def future(self, series: Iterable[Sample]) -> List[Sample]:
        """Samples at or after the cutover, in timestamp order."""
        return sorted(
            (s for s in series if s.timestamp >= self.cutover),
            key=lambda s: s.timestamp
        )

    def tail(
            self,
            filtered: Iterable[Sample],
            predicted: Optional[Iterable[Sample]] = None
        ) -> List[Point]:
        """
        Build the predicted tail as a single polyline.

        Parameters
        ----------
        filtered : Iterable[Sample]
            Samples of the windowed store.
        predicted : Iterable[Sample], optional
            Externally supplied predictions.
        """
        match self.mode:
            case "merge":
                source = self.future(filtered)
            case "tail":
                source = self.future(predicted or [])
            case _:
                return []
        return [p for p in (s.point for s in source) if p is not None]
