from enum import Enum

class Column(str, Enum):
    """
    Column identifiers of a battery history export.

    Note:
        ``DATE_TIME`` holds unix seconds (UTC).
    """
    DATE_TIME = 'date_time'
    CAPACITY = 'capacity'
    STATE = 'state'

class ChargeState(str, Enum):
    """Charge state reported by the device alongside each sample."""
    CHARGING = 'Charging'
    DISCHARGING = 'Discharging'
    UNKNOWN = 'Unknown'

# Columns every history export must provide
COLUMNS = (Column.DATE_TIME, Column.CAPACITY, Column.STATE)
