import datetime
import logging
import re
import typing

from hr_metrics.common import ALL

logger = logging.getLogger(__name__)

EPOCH = datetime.date(1970, 1, 1)

MONTHS = {
    'Jan': 1, 'Feb': 2, 'Mar': 3, 'Apr': 4, 'May': 5, 'Jun': 6,
    'Jul': 7, 'Aug': 8, 'Sep': 9, 'Oct': 10, 'Nov': 11, 'Dec': 12
}

_MONTH_DAY = re.compile(r'([A-Za-z]+)\s+(\d+)')
_YEAR = re.compile(r'\((\d{4})\)')


def parse_week_start(label, today: datetime.date = None) -> datetime.date:
    """Start date of a label like "Mar 10 – Mar 15 (2025)".

    The year falls back to the current one when the label has none.
    Anything that does not parse maps to the epoch so it sorts first.
    """
    if not isinstance(label, str):
        return EPOCH
    match = _MONTH_DAY.search(label)
    if not match or match.group(1) not in MONTHS:
        logger.debug('unparseable week range label: %r', label)
        return EPOCH
    year_match = _YEAR.search(label)
    year = int(year_match.group(1)) if year_match else (today or datetime.date.today()).year
    try:
        return datetime.date(year, MONTHS[match.group(1)], int(match.group(2)))
    except ValueError:
        logger.debug('invalid date in week range label: %r', label)
        return EPOCH


def compare_week_ranges(a, b, today: datetime.date = None) -> int:
    return (parse_week_start(a, today) - parse_week_start(b, today)).days


def sort_week_ranges(labels: typing.Iterable, today: datetime.date = None) -> typing.List[str]:
    distinct = list(dict.fromkeys(label for label in labels if label is not None))
    return sorted(distinct, key=lambda label: parse_week_start(label, today))


def validate_week_selection(start_week, end_week, today: datetime.date = None) -> bool:
    if start_week == ALL or end_week == ALL:
        return True
    return compare_week_ranges(start_week, end_week, today) <= 0


def within_week_range(label, start_week=ALL, end_week=ALL, today: datetime.date = None) -> bool:
    if start_week != ALL and compare_week_ranges(label, start_week, today) < 0:
        return False
    if end_week != ALL and compare_week_ranges(label, end_week, today) > 0:
        return False
    return True


def describe_week_selection(start_week, end_week) -> typing.Optional[str]:
    if start_week == ALL and end_week == ALL:
        return None
    if start_week == ALL:
        return f'Up to {end_week}'
    if end_week == ALL:
        return f'From {start_week} onwards'
    return f'{start_week} to {end_week}'
