"""
Date Encoder
============

Turns publication dates into ``<month>``/``<day>``/``<year>`` blocks.

No partial-date inference is attempted: seasons, quarters and month names
are rejected rather than guessed.
"""

from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Union
import logging
import re

from lxml import etree

from deposit_core.exceptions import InvalidValueError
from deposit_core.models import DateLike, PublicationDate
from deposit_core.xml.builder import element

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "online"
MEDIA_TYPES = ("online", "print", "other")

_PARTIAL_DATE_RE = re.compile(r"^([0-9]{4})(?:-([0-9]{1,2}))?(?:-([0-9]{1,2}))?$")
_ASCII_DIGITS_RE = re.compile(r"[0-9]+")


def _padded(value: Union[int, str, None], width: int, message: str) -> Optional[str]:
    if value is None or value == "":
        return None
    text = str(value).strip()
    if len(text) > width:
        raise InvalidValueError(message)
    return text.rjust(width, "0")


def _in_range(text: str, low: int, high: int) -> bool:
    if not _ASCII_DIGITS_RE.fullmatch(text):
        return False
    return low <= int(text) <= high


def to_publication_date(value: DateLike) -> PublicationDate:
    """
    Normalize any accepted date shape to a PublicationDate.

    ``datetime`` values are decomposed using their UTC components (naive
    datetimes are taken to be UTC already); plain ``date`` values are used
    as-is.
    """
    if isinstance(value, PublicationDate):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return PublicationDate(year=value.year, month=value.month, day=value.day)
    if isinstance(value, date):
        return PublicationDate(year=value.year, month=value.month, day=value.day)
    if isinstance(value, Mapping):
        return PublicationDate.from_dict(value)
    raise InvalidValueError(f"Unsupported date value: {value!r}")


def parse_date(value: Any) -> Optional[PublicationDate]:
    """
    Parse a frontmatter date into a PublicationDate.

    ``YYYY``, ``YYYY-MM`` and ``YYYY-MM-DD`` keep exactly the precision given;
    anything else is read as an ISO 8601 datetime.

    Args:
        value: Date string, date/datetime object, or None

    Returns:
        PublicationDate, or None when no date was given

    Raises:
        InvalidValueError: If the string cannot be parsed
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        return to_publication_date(value)
    text = value.strip()
    match = _PARTIAL_DATE_RE.match(text)
    if match:
        year, month, day = match.groups()
        return PublicationDate(year=year, month=month, day=day)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidValueError(f"Unable to parse date: {value!r}") from None
    return to_publication_date(parsed)


def date_xml(tag: str, value: Optional[DateLike]) -> Optional[etree._Element]:
    """
    Encode a date under the given element name.

    Args:
        tag: Element name, e.g. ``publication_date`` or ``posted_date``
        value: Date to encode; None means "no date"

    Returns:
        Date element, or None when no date was supplied

    Raises:
        InvalidValueError: If a component is out of range, too wide or not
            a plain decimal
    """
    if value is None:
        return None
    pub = to_publication_date(value)

    month = _padded(pub.month, 2, "date.month must be a 2 digit string")
    day = _padded(pub.day, 2, "date.day must be a 2 digit string")
    year = "" if pub.year is None else str(pub.year).strip()
    if len(year) != 4 or not _ASCII_DIGITS_RE.fullmatch(year):
        raise InvalidValueError("date.year must be a 4 digit string")
    if day is not None and not _in_range(day, 1, 31):
        raise InvalidValueError('date.day must be a 2 digit string between "01" and "31"')
    if month is not None and not _in_range(month, 1, 12):
        raise InvalidValueError('date.month must be a 2 digit string between "01" and "12"')

    media_type = pub.media_type or DEFAULT_MEDIA_TYPE
    if media_type not in MEDIA_TYPES:
        raise InvalidValueError(
            f"date.media_type must be one of {', '.join(MEDIA_TYPES)}, not {media_type!r}"
        )

    return element(tag, {"media_type": media_type}, [
        element("month", month) if month else None,
        element("day", day) if day else None,
        element("year", year),
    ])


def publication_date_xml(value: Optional[DateLike]) -> Optional[etree._Element]:
    """Encode a ``publication_date`` block (None when no date is given)."""
    return date_xml("publication_date", value)
