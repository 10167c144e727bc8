"""
Trend segmenter tests

- Transition table of the classification state machine
- Exact grouping for a mixed rise / fall / flat / rise series
- Structural invariants: reconstruction, monotonicity, shared boundaries
- Skipping of capacity-less samples and of samples past the cutover
"""

import random
import warnings

import pytest

from battery_trends.data.records import Sample
from battery_trends.evaluation.checks import (
    is_monotonic,
    reconstruct,
    shares_boundaries,
    validate,
)
from battery_trends.models.trends import (
    Placement,
    SegmentedSeries,
    Step,
    Trend,
    TrendSegmenter,
    transition,
)
from battery_trends.utils.exceptions import (
    EmptyWindowError,
    MissingSampleWarning,
)

from helpers import at, series


@pytest.mark.parametrize(
    "trend, previous, current, expected",
    [
        (Trend.NONE, 60, 50, Step(Trend.DECREASING, Placement.FORK)),
        (Trend.NONE, 50, 50, Step(Trend.NONE, Placement.EXTEND)),
        (Trend.NONE, 50, 60, Step(Trend.INCREASING, Placement.FORK)),
        (Trend.INCREASING, 50, 60, Step(Trend.INCREASING, Placement.EXTEND)),
        (Trend.INCREASING, 50, 50, Step(Trend.INCREASING, Placement.EXTEND)),
        (Trend.INCREASING, 60, 50, Step(Trend.DECREASING, Placement.SEED)),
        (Trend.DECREASING, 60, 50, Step(Trend.DECREASING, Placement.EXTEND)),
        (Trend.DECREASING, 50, 50, Step(Trend.DECREASING, Placement.EXTEND)),
        (Trend.DECREASING, 50, 60, Step(Trend.INCREASING, Placement.SEED)),
    ],
)
def test_transition_table(trend, previous, current, expected):
    assert transition(trend, previous, current) == expected


def test_mixed_series_grouping(scenario_a):
    t = [s.timestamp for s in scenario_a]
    out = TrendSegmenter().segment(scenario_a)

    assert out.none == [[(t[0], 50), (t[1], 60)]]
    assert out.increasing == [[(t[1], 60)], [(t[3], 55), (t[4], 70)]]
    assert out.decreasing == [[(t[1], 60), (t[2], 55), (t[3], 55)]]
    assert out.skipped == []


def test_unsorted_input_is_sorted_first(scenario_a):
    shuffled = list(reversed(scenario_a))
    assert TrendSegmenter().segment(shuffled) == TrendSegmenter().segment(
        scenario_a
    )


def test_flat_prefix_stays_in_first_run():
    samples = series([40, 40, 40, 35, 30])
    t = [s.timestamp for s in samples]
    out = TrendSegmenter().segment(samples)

    assert out.none == [[(t[0], 40), (t[1], 40), (t[2], 40), (t[3], 35)]]
    assert out.decreasing == [[(t[3], 35), (t[4], 30)]]
    assert out.increasing == []


def test_single_sample_is_one_flat_run():
    out = TrendSegmenter().segment(series([80]))

    assert out.none == [[(at(0), 80)]]
    assert out.increasing == [] and out.decreasing == []


def test_empty_series_fails():
    with pytest.raises(EmptyWindowError):
        TrendSegmenter().segment([])


def test_missing_capacity_is_skipped_without_changing_state():
    samples = series([50, 60, None, 55])
    t = [s.timestamp for s in samples]
    with pytest.warns(MissingSampleWarning):
        out = TrendSegmenter().segment(samples)

    assert out.skipped == [t[2]]
    # The decreasing run starts at the last usable point, not the gap
    assert out.decreasing == [[(t[1], 60), (t[3], 55)]]


def test_all_missing_capacity_fails():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MissingSampleWarning)
        with pytest.raises(EmptyWindowError):
            TrendSegmenter().segment(series([None, None]))


def test_cutover_excludes_samples_at_and_after_it():
    samples = series([50, 60, 70, 20, 10])
    out = TrendSegmenter().segment(samples, cutover=samples[3].timestamp)

    assert reconstruct(out) == [s.point for s in samples[:3]]
    assert out.decreasing == []


def test_cutover_before_first_sample_fails():
    samples = series([50, 60])
    with pytest.raises(EmptyWindowError):
        TrendSegmenter().segment(samples, cutover=at(-1))


def test_to_polylines_splits_columns(scenario_a):
    out = TrendSegmenter().segment(scenario_a)
    polylines = SegmentedSeries.to_polylines(out.decreasing)

    assert polylines == [
        ([s.timestamp for s in scenario_a[1:4]], [60, 55, 55])
    ]


@pytest.mark.parametrize("seed", range(10))
def test_invariants_on_random_walks(seed):
    rng = random.Random(seed)
    capacities = [50]
    for _ in range(60):
        capacities.append(capacities[-1] + rng.choice([-3, -1, 0, 0, 1, 4]))
    samples = series(capacities)
    out = TrendSegmenter().segment(samples)

    assert reconstruct(out) == [s.point for s in samples]
    assert shares_boundaries(out)
    for trend in Trend:
        assert all(is_monotonic(run, trend) for run in out.runs(trend))
    validate(out)


def test_validate_rejects_broken_boundary(scenario_a):
    out = TrendSegmenter().segment(scenario_a)
    out.decreasing[0].pop(0)

    with pytest.raises(ValueError):
        validate(out)
