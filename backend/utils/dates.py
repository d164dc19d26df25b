from datetime import date, datetime
from typing import Optional, Tuple, Union

import config
from exceptions import InvalidDateRangeError

DateLike = Union[date, datetime, str]


def today() -> date:
    """Current calendar date in the configured business timezone."""
    return datetime.now(config.APP_TIMEZONE).date()


def parse_date(value: DateLike, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10]) if len(text) > 10 and text[10] in "T " else date.fromisoformat(text)
        except ValueError:
            pass
    raise InvalidDateRangeError(f"Invalid {field}: {value!r}. Expected YYYY-MM-DD.")


def parse_date_range(start: Optional[DateLike], end: Optional[DateLike]) -> Tuple[Optional[date], Optional[date]]:
    start_date = parse_date(start, "start date") if start is not None else None
    end_date = parse_date(end, "end date") if end is not None else None
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError(f"Start date {start_date} is after end date {end_date}.")
    return start_date, end_date
