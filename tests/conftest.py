from datetime import timedelta
from typing import List

import pytest

from battery_trends.data.records import RecordStore, Sample

from helpers import T0, series


@pytest.fixture
def scenario_a() -> List[Sample]:
    return series([50, 60, 55, 55, 70])


@pytest.fixture
def daily_store() -> RecordStore:
    """One sample every 6 hours over four days, ending at T0 + 4 days."""
    samples = [
        Sample(T0 + timedelta(hours=6 * i), 40 + (i % 5) * 10)
        for i in range(17)
    ]
    return RecordStore(samples)
