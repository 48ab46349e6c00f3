"""
Dashboard Header.

Today's date in English ("October 19"), optionally followed by the Nepali
(Bikram Sambat) month and day in Devanagari ("कार्तिक २"), and the share
of the day that has passed.
"""

from datetime import date, datetime

import nepali_datetime

from notorica.core.logging import get_logger
from notorica.schemas.dashboard import DashboardHeader

logger = get_logger(__name__)

NEPALI_MONTHS = (
    "बैशाख", "जेठ", "असार", "श्रावण", "भाद्र", "आश्विन",
    "कार्तिक", "मंसिर", "पुष", "माघ", "फाल्गुन", "चैत्र",
)
NEPALI_DIGITS = "०१२३४५६७८९"

MINUTES_PER_DAY = 24 * 60


def to_nepali_numeral(number: int) -> str:
    return "".join(NEPALI_DIGITS[int(digit)] for digit in str(number))


def format_english_date(moment: datetime) -> str:
    return f"{moment.strftime('%B')} {moment.day}"


def format_nepali_date(day: date) -> str:
    """Nepali month and day for a Gregorian date; empty string if out of range."""
    try:
        bs_date = nepali_datetime.date.from_datetime_date(day)
    except (ValueError, OverflowError) as e:
        logger.warning("Nepali date conversion failed", extra={"date": day.isoformat(), "error": str(e)})
        return ""
    return f"{NEPALI_MONTHS[bs_date.month - 1]} {to_nepali_numeral(bs_date.day)}"


def day_progress(moment: datetime) -> float:
    """Percent of the day elapsed, minute resolution."""
    minutes_passed = moment.hour * 60 + moment.minute
    return minutes_passed / MINUTES_PER_DAY * 100


def build_header(is_nepali_date: bool, now: datetime | None = None) -> DashboardHeader:
    current = now if now is not None else datetime.now()
    return DashboardHeader(
        date_label=format_english_date(current),
        nepali_label=format_nepali_date(current.date()) if is_nepali_date else "",
        day_progress=day_progress(current),
    )
