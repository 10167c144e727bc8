# stdlib
import os
from pathlib import Path
from typing import NamedTuple, Optional
# thirdpartylib
from dotenv import load_dotenv

# Sentinel spellings for "no bound" in day-valued variables
_UNBOUNDED = ("", "none", "null", "off")
_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def fetch_var(name: str, default: Optional[str] = None) -> str:
    """Fetch an environment variable, falling back to `default`."""
    try:
        return os.environ[name].strip()
    except KeyError as e:
        if default is None:
            raise RuntimeError(
                f"Environment variable '{name}' is not set. "
                "Create a .env file or define the variable."
            ) from e
        return default


def parse_days(value: str) -> Optional[int]:
    """Parse a day count, where an empty or ``none`` value is unbounded."""
    if value.strip().lower() in _UNBOUNDED:
        return None
    days = int(value)
    if days < 0:
        raise ValueError(f"Day counts must be non-negative, got {days}.")
    return days


def parse_flag(value: str) -> bool:
    """Parse a boolean environment flag."""
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean flag.")


class Settings(NamedTuple):
    """Default window and rendering options for a plotting run."""
    lookback_days: Optional[int] = 1
    lookahead_days: Optional[int] = 0
    show_prediction: bool = False
    resample: bool = False
    history_csv: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment and ``.env``."""
        history = fetch_var("BATTERY_HISTORY_CSV", "")
        return cls(
            lookback_days=parse_days(fetch_var("BATTERY_LOOKBACK_DAYS", "1")),
            lookahead_days=parse_days(
                fetch_var("BATTERY_LOOKAHEAD_DAYS", "0")
            ),
            show_prediction=parse_flag(
                fetch_var("BATTERY_SHOW_PREDICTION", "false")
            ),
            resample=parse_flag(fetch_var("BATTERY_RESAMPLE", "false")),
            history_csv=Path(history) if history else None,
        )


# Load env variables
load_dotenv()
