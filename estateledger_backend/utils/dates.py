from datetime import date, datetime

import nepali_datetime

from estateledger_backend.errors import ValidationFailed

BS_FORMAT = "%Y-%m-%d"


def to_bs(value=None) -> str:
    """Format a Gregorian date (default: today) as a Bikram Sambat YYYY-MM-DD string."""
    if value is None:
        value = date.today()
    elif isinstance(value, datetime):
        value = value.date()
    return nepali_datetime.date.from_datetime_date(value).strftime(BS_FORMAT)


def today_stamp():
    """(now, today-in-BS) pair used when a bill is created or marked paid."""
    now = datetime.utcnow()
    return now, to_bs(now.date())


def parse_iso_date(value, field="date"):
    """Parse 'YYYY-MM-DD' (or a full ISO timestamp) into a datetime; None passes through."""
    if value in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationFailed(f"Invalid {field}: expected YYYY-MM-DD")
