# stdlib
import argparse
from pathlib import Path
from typing import Optional
# projectlib
from battery_trends.config.env import Settings, parse_days
from battery_trends.data.loaders import read_history_csv, read_predicted_csv
from battery_trends.utils.logging import Logger
from battery_trends.visualization.plot_data import (
    prepare_plot_data,
    runs_frame
)

def parse_args(settings: Settings) -> argparse.Namespace:
    """Parse input arguments, defaulting to environment settings."""
    parser = argparse.ArgumentParser(
        description="Summarize charging and discharging runs of a battery "
                    "history export",
    )
    parser.add_argument(
        "history",
        type=Path,
        nargs="?",
        default=settings.history_csv,
        help="Battery history CSV (date_time, capacity, state)",
    )
    parser.add_argument(
        "--predicted",
        type=Path,
        default=None,
        help="CSV of predicted samples in the same layout",
    )
    parser.add_argument(
        "--lookback-days",
        type=parse_days,
        default=settings.lookback_days,
        help="Days before the latest sample to keep ('none' = all)",
    )
    parser.add_argument(
        "--lookahead-days",
        type=parse_days,
        default=settings.lookahead_days,
        help="Days before the latest sample to stop at ('none' = no bound)",
    )
    parser.add_argument(
        "--show-prediction",
        action="store_true",
        default=settings.show_prediction,
        help="Render predicted samples as a tail",
    )
    parser.add_argument(
        "--resample",
        action="store_true",
        default=settings.resample,
        help="Resample at one-minute cadence before segmenting",
    )
    parser.add_argument(
        "--verbosity",
        type=int,
        default=0,
        choices=(0, 1, 2),
        help=(
            "Verbosity level: "
            "0 = silent, "
            "1 = info, "
            "2 = debug"
        ),
    )

    return parser.parse_args()

def main(settings: Optional[Settings] = None) -> None:
    settings = settings if settings is not None else Settings.from_env()
    args = parse_args(settings)
    if args.history is None:
        raise SystemExit(
            "No history CSV given; pass a path or set BATTERY_HISTORY_CSV."
        )
    log = Logger(verbose=args.verbosity, name="summarize")
    store = read_history_csv(args.history, log)
    predicted = None
    if args.predicted is not None:
        predicted = read_predicted_csv(args.predicted, log).values()
    data = prepare_plot_data(
        store,
        lookback_days=args.lookback_days,
        lookahead_days=args.lookahead_days,
        show_prediction=args.show_prediction,
        resample=args.resample,
        predicted=predicted,
        logger=log,
    )
    print(runs_frame(data))
    print(
        f"{len(data.charging)} charging, {len(data.discharging)} "
        f"discharging, {len(data.unknown)} unknown run(s); "
        f"{len(data.raw)} observed and {len(data.predicted)} predicted "
        "point(s)"
    )

if __name__=="__main__":
    main()
