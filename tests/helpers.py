from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from battery_trends.data.records import Sample
from battery_trends.data.schemas import ChargeState

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    """Timestamp `minutes` after T0."""
    return T0 + timedelta(minutes=minutes)


def series(
        capacities: Sequence[Optional[int]],
        spacing: timedelta = timedelta(minutes=10),
        start: datetime = T0
    ) -> List[Sample]:
    """Evenly spaced samples with the given capacities."""
    return [
        Sample(start + i * spacing, c, ChargeState.UNKNOWN)
        for i, c in enumerate(capacities)
    ]
