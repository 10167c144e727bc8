"""
Prediction splitter tests

- Mode selection from show_prediction / lookahead_days
- Merging of predictions only for a zero lookahead
- Tail construction per mode
"""

import pytest

from battery_trends.data.records import RecordStore, Sample
from battery_trends.models.prediction import PredictionSplitter

from helpers import at


@pytest.mark.parametrize(
    "show, lookahead, mode",
    [
        (False, 0, "discard"),
        (False, None, "discard"),
        (True, 0, "merge"),
        (True, 1, "tail"),
        (True, None, "tail"),
    ],
)
def test_mode(show, lookahead, mode):
    assert PredictionSplitter(at(0), show, lookahead).mode == mode


def test_prepare_merges_only_in_merge_mode():
    store = RecordStore([Sample(at(0), 50)])
    predicted = [Sample(at(10), 60)]

    merged = PredictionSplitter(at(5), True, 0).prepare(store, predicted)
    untouched = PredictionSplitter(at(5), True, 2).prepare(store, predicted)

    assert list(merged) == [at(0), at(10)]
    assert untouched is store


def test_observed_is_strictly_before_cutover():
    samples = [Sample(at(i), i) for i in range(5)]
    splitter = PredictionSplitter(at(2))

    assert [s.capacity for s in splitter.observed(samples)] == [0, 1]
    assert [s.capacity for s in splitter.future(samples)] == [2, 3, 4]


def test_tail_in_merge_mode_uses_windowed_samples():
    filtered = [Sample(at(i), 10 * i) for i in range(4)]
    splitter = PredictionSplitter(at(2), True, 0)

    assert splitter.tail(filtered, [Sample(at(9), 1)]) == [
        (at(2), 20), (at(3), 30)
    ]


def test_tail_in_tail_mode_uses_predictions_after_cutover():
    predicted = [Sample(at(1), 5), Sample(at(4), 7), Sample(at(3), 6)]
    splitter = PredictionSplitter(at(2), True, None)

    assert splitter.tail([], predicted) == [(at(3), 6), (at(4), 7)]


def test_tail_discarded_without_prediction():
    splitter = PredictionSplitter(at(0), False, 0)
    assert splitter.tail([Sample(at(1), 1)], [Sample(at(2), 2)]) == []
