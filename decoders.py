import datetime
import logging
import re

from config import TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)

# --- Sentinels ---
NOT_AVAILABLE = "Not Available"
CONVERSION_ERROR = "Conversion Error"
NOT_FOUND = "Not Found"

# CIM datetime: yyyymmddHHMMSS.mmmmmm followed by the UTC offset in minutes
CIM_DATETIME_PATTERN = re.compile(r"^(\d{14})\.(\d{6})([+-])(\d{3})$")

GIB = 1024 ** 3


def _match_cim_datetime(value):
    if not isinstance(value, str):
        return None
    return CIM_DATETIME_PATTERN.match(value.strip())


def _to_datetime(digits):
    return datetime.datetime(int(digits[0:4]), int(digits[4:6]), int(digits[6:8]),
                             int(digits[8:10]), int(digits[10:12]), int(digits[12:14]))


def decode_cim_datetime(value):
    """
    Converts a packed WMI datetime such as '20240115093012.500000+060'
    into 'YYYY-MM-DD HH:MM:SS'.

    Returns NOT_AVAILABLE when the value does not have the packed shape and
    CONVERSION_ERROR when it has the shape but is not a real date.
    """
    match = _match_cim_datetime(value)
    if not match:
        return NOT_AVAILABLE
    try:
        parsed = _to_datetime(match.group(1))
    except ValueError as e:
        logger.warning(f"CIM datetime conversion Failed for '{value}': {e}")
        return CONVERSION_ERROR
    return parsed.strftime(TIMESTAMP_FORMAT)


def parse_cim_datetime(value):
    """ Same validation as decode_cim_datetime, but returns a datetime or None. """
    match = _match_cim_datetime(value)
    if not match:
        return None
    try:
        return _to_datetime(match.group(1))
    except ValueError:
        return None


def decode_epoch(value):
    """ Registry InstallDate (seconds since 1970) to 'YYYY-MM-DD HH:MM:SS'. """
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    try:
        return datetime.datetime.fromtimestamp(seconds).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError) as e:
        logger.warning(f"Epoch conversion Failed for '{value}': {e}")
        return CONVERSION_ERROR


def decode_char_array(value):
    """ WmiMonitorID arrays (tuples of character codes) to text, trailing NULs removed. """
    if not isinstance(value, (list, tuple)) or not value:
        return NOT_FOUND
    if not all(isinstance(code, int) and not isinstance(code, bool) for code in value):
        return NOT_FOUND
    try:
        text = bytes(value).decode("ascii", errors="replace")
    except ValueError:
        return NOT_FOUND
    text = text.rstrip("\x00").strip()
    return text if text else NOT_FOUND


def format_gb(num_bytes):
    """ 17179869184 -> '16 GB'. Rounded to two decimals, trailing zeros dropped. """
    try:
        value = round(int(num_bytes) / GIB, 2)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} GB"


def format_uptime(last_boot, now=None):
    """ Elapsed time since a CIM last-boot timestamp, as 'Xd Yh Zm'. """
    booted = parse_cim_datetime(last_boot)
    if booted is None:
        return NOT_AVAILABLE
    now = now or datetime.datetime.now()
    elapsed = now - booted
    if elapsed.total_seconds() < 0:
        return NOT_AVAILABLE
    days = elapsed.days
    hours, remainder = divmod(elapsed.seconds, 3600)
    minutes = remainder // 60
    return f"{days}d {hours}h {minutes}m"


def value_or_default(value, default=NOT_AVAILABLE):
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return value
