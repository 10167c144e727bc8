class BatteryTrendsError(ValueError):
    """Base class for structural failures of the trend pipeline."""


class EmptySeriesError(BatteryTrendsError):
    """A stage was asked to operate on a series with no samples."""


class EmptyStoreError(EmptySeriesError):
    """The record store holds no samples at all."""


class EmptyWindowError(EmptySeriesError):
    """
    Windowing (or the prediction cutover) removed every sample.

    Callers may relax the window bounds and retry.
    """


class InterpolationDomainError(BatteryTrendsError):
    """Resampling needs at least two distinct samples."""


class MissingSampleWarning(UserWarning):
    """
    A timestamp in a derived series has no backing capacity.

    The point is skipped and processing continues.
    """
