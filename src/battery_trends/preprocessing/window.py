# stdlib
from datetime import datetime, timedelta
from typing import NamedTuple, Optional
# projectlib
from battery_trends.data.records import RecordStore, Sample


class Window(NamedTuple):
    """
    A date-range window resolved against a record store.

    Bounds are expressed in whole days relative to `anchor`, the latest
    timestamp of the store the window was resolved against. Because the
    anchor is fixed at resolution time, applying the same window again
    to its own output is a no-op.

    Attributes
    ----------
    anchor : datetime
        Latest timestamp of the store at resolution time.
    lookback_days : int, optional
        Keep samples strictly newer than ``anchor - lookback_days``.
        None disables the lower bound.
    lookahead_days : int, optional
        Keep samples strictly older than ``anchor - lookahead_days``.
        None disables the upper bound.
    show_prediction : bool
        Whether predicted samples past the cutover are to be shown.
    """
    anchor: datetime
    lookback_days: Optional[int] = None
    lookahead_days: Optional[int] = None
    show_prediction: bool = False

    @classmethod
    def resolve(
            cls,
            store: RecordStore,
            lookback_days: Optional[int] = None,
            lookahead_days: Optional[int] = None,
            show_prediction: bool = False
        ) -> "Window":
        """
        Anchor a window at ``store.max_timestamp()``.

        Raises
        ------
        EmptyStoreError
            If `store` holds no samples.
        """
        return cls(
            anchor=store.max_timestamp(),
            lookback_days=lookback_days,
            lookahead_days=lookahead_days,
            show_prediction=show_prediction,
        )

    @property
    def shows_future(self) -> bool:
        """True when the upper bound sits exactly at the anchor and
        predicted samples are requested."""
        return self.show_prediction and self.lookahead_days == 0

    @property
    def start(self) -> Optional[datetime]:
        """Exclusive lower bound, or None when unbounded."""
        if self.lookback_days is None:
            return None
        days = self.lookback_days
        # One extra day shows the run-up to the cutover
        if self.shows_future:
            days += 1
        return self.anchor - timedelta(days=days)

    @property
    def end(self) -> Optional[datetime]:
        """Exclusive upper bound, or None when unbounded or skipped."""
        if self.lookahead_days is None or self.shows_future:
            return None
        return self.anchor - timedelta(days=self.lookahead_days)

    def contains(self, sample: Sample) -> bool:
        start, end = self.start, self.end
        if start is not None and not sample.timestamp > start:
            return False
        if end is not None and not sample.timestamp < end:
            return False
        return True

    def apply(self, store: RecordStore) -> RecordStore:
        """Return a new store with the samples inside the window."""
        return store.filter(self.contains)


def apply_window(
        store: RecordStore,
        lookback_days: Optional[int] = None,
        lookahead_days: Optional[int] = None,
        show_prediction: bool = False
    ) -> RecordStore:
    """Resolve a window against `store` and apply it in one step."""
    window = Window.resolve(
        store, lookback_days, lookahead_days, show_prediction
    )
    return window.apply(store)
