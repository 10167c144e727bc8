# stdlib
from collections.abc import Mapping
from datetime import datetime
from typing import Callable, Dict, Iterable, Iterator, NamedTuple, Optional
# projectlib
from battery_trends.data.schemas import ChargeState
from battery_trends.utils.exceptions import EmptyStoreError
from battery_trends.utils.typing import Capacity, Point


class Sample(NamedTuple):
    """A single capacity observation keyed by its timestamp."""
    timestamp: datetime
    capacity: Capacity
    state: ChargeState = ChargeState.UNKNOWN

    @property
    def point(self) -> Optional[Point]:
        """The ``(timestamp, capacity)`` chart point, if capacity is known."""
        if self.capacity is None:
            return None
        return self.timestamp, self.capacity


class RecordStore(Mapping[datetime, Sample]):
    """
    Timestamp-keyed collection of battery samples.

    The store deduplicates by timestamp with last-write-wins semantics
    and always iterates in ascending timestamp order, regardless of the
    order samples were inserted in. Downstream stages never mutate a
    store; windowing and merging return new instances.

    Parameters
    ----------
    samples : Iterable[Sample], optional
        Initial samples, inserted in order.
    """

    def __init__(self, samples: Optional[Iterable[Sample]] = None) -> None:
        self._records: Dict[datetime, Sample] = {}
        if samples is not None:
            for sample in samples:
                self.insert(sample)

    @classmethod
    def from_samples(cls, samples: Iterable[Sample]) -> "RecordStore":
        return cls(samples)

    def insert(self, sample: Sample) -> None:
        """
        Add `sample`, replacing any sample with the same timestamp.

        Raises
        ------
        ValueError
            If the sample's timestamp is naive.
        """
        if sample.timestamp.tzinfo is None:
            msg = (
                f"Sample timestamp {sample.timestamp} is naive; battery "
                "history timestamps must be timezone-aware (UTC)."
            )
            raise ValueError(msg)
        self._records[sample.timestamp] = sample

    def max_timestamp(self) -> datetime:
        """
        Return the latest timestamp in the store.

        Raises
        ------
        EmptyStoreError
            If the store holds no samples.
        """
        if not self._records:
            raise EmptyStoreError("The record store holds no samples.")
        return max(self._records)

    def ordered_samples(self) -> Iterator[Sample]:
        """
        Yield samples in ascending timestamp order.

        The ordering is recomputed on every call so that samples
        inserted between calls are included.
        """
        for timestamp in sorted(self._records):
            yield self._records[timestamp]

    def filter(self, predicate: Callable[[Sample], bool]) -> "RecordStore":
        """Return a new store with the samples satisfying `predicate`."""
        return RecordStore(s for s in self.ordered_samples() if predicate(s))

    def merged(self, other: Iterable[Sample]) -> "RecordStore":
        """
        Return a new store holding this store's samples and `other`'s.

        Samples already present here win over `other` on equal
        timestamps.
        """
        out = RecordStore(other)
        for sample in self.ordered_samples():
            out.insert(sample)
        return out

    def __getitem__(self, key: datetime) -> Sample:
        return self._records[key]

    def __iter__(self) -> Iterator[datetime]:
        return iter(sorted(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RecordStore(n={len(self)})"
