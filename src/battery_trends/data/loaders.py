# stdlib
from typing import Optional
# thirdpartylib
import polars as pl
# projectlib
from battery_trends.data.records import RecordStore, Sample
from battery_trends.data.schemas import COLUMNS, ChargeState, Column
from battery_trends.utils.logging import Logger
from battery_trends.utils.paths import validate_address
from battery_trends.utils.typing import Address


def scan_history(source: Address) -> pl.LazyFrame:
    """
    Lazily scan a battery history CSV into typed columns.

    ``date_time`` is read as unix seconds and converted to a UTC
    datetime; ``state`` is kept as a string for enum conversion.
    """
    path = validate_address(source, extension=".csv")
    lf = pl.scan_csv(path, has_header=True)
    schema = lf.collect_schema()
    missing = [c.value for c in COLUMNS if c.value not in schema]
    if missing:
        msg = (
            f"{path} is missing required column(s) {missing}; expected "
            f"headers {[c.value for c in COLUMNS]}."
        )
        raise ValueError(msg)

    return lf.select(
        pl.from_epoch(
            pl.col(Column.DATE_TIME.value).cast(pl.Int64), time_unit="s"
        )
        .dt.replace_time_zone("UTC")
        .alias(Column.DATE_TIME.value),
        pl.col(Column.CAPACITY.value).cast(pl.Int64),
        pl.col(Column.STATE.value).cast(pl.Utf8),
    )


def to_store(df: pl.DataFrame) -> RecordStore:
    """Build a record store from a frame produced by `scan_history`."""
    rows = df.select(
        Column.DATE_TIME.value, Column.CAPACITY.value, Column.STATE.value
    ).iter_rows()
    # Row order is file order, so later duplicates replace earlier ones
    return RecordStore.from_samples(
        Sample(date_time, capacity, ChargeState(state))
        for date_time, capacity, state in rows
    )


def read_history_csv(
        source: Address,
        logger: Optional[Logger] = None
    ) -> RecordStore:
    """
    Read a battery history export into a `RecordStore`.

    Parameters
    ----------
    source : Address
        CSV with headers ``date_time`` (unix seconds), ``capacity`` and
        ``state`` (``Charging``, ``Discharging`` or ``Unknown``).
    logger : Logger, optional
        Receives a row count at verbosity 1.

    Returns
    -------
    RecordStore
        Samples keyed by timestamp; on duplicate timestamps the last row
        in the file wins.
    """
    df = scan_history(source).collect()
    store = to_store(df)
    if logger is not None:
        logger(
            f"read {df.height} rows ({len(store)} unique timestamps) "
            f"from {source}",
            1
        )
    return store


def read_predicted_csv(
        source: Address,
        logger: Optional[Logger] = None
    ) -> RecordStore:
    """Read externally produced predictions, same layout as history."""
    return read_history_csv(source, logger)
