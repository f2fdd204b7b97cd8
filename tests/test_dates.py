"""
Date Encoder Tests

Run with: pytest tests/test_dates.py -v
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from deposit_core.encoders.dates import date_xml, parse_date, publication_date_xml
from deposit_core.exceptions import InvalidValueError
from deposit_core.models import PublicationDate
from deposit_core.xml import to_xml


class TestPublicationDate:
    """Tests for publication_date_xml()."""

    def test_full_date(self):
        """Month and day are zero-padded and emitted before the year."""
        xml = to_xml(publication_date_xml({"year": 2023, "month": 12, "day": 5}))
        assert xml == (
            '<publication_date media_type="online">'
            '<month>12</month><day>05</day><year>2023</year>'
            '</publication_date>'
        )

    def test_year_only(self):
        """A bare year produces a single year child."""
        xml = to_xml(publication_date_xml(PublicationDate(year="2021")))
        assert xml == '<publication_date media_type="online"><year>2021</year></publication_date>'

    def test_plain_date(self):
        """datetime.date values are accepted."""
        node = publication_date_xml(date(2023, 1, 2))
        assert [child.text for child in node] == ["01", "02", "2023"]

    def test_aware_datetime_uses_utc(self):
        """Timezone-aware datetimes are decomposed in UTC."""
        value = datetime(2023, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
        node = publication_date_xml(value)
        assert [child.text for child in node] == ["01", "01", "2024"]

    def test_media_type(self):
        """An explicit media type is carried through."""
        node = publication_date_xml(PublicationDate(year=2020, media_type="print"))
        assert node.get("media_type") == "print"

    def test_no_date(self):
        """None means no element."""
        assert publication_date_xml(None) is None

    def test_custom_tag(self):
        """date_xml uses the given element name."""
        assert date_xml("posted_date", {"year": 2022}).tag == "posted_date"


class TestDateErrors:
    """Invalid date components are rejected."""

    @pytest.mark.parametrize("value", [
        {"year": "23"},
        {"year": 2023, "day": 32},
        {"year": 2023, "day": 0},
        {"year": 2023, "month": 13},
        {"year": 2023, "month": "Nov"},
        {"year": 2023, "month": "No"},
        {"month": 1},
        {"year": 2023, "month": "١٢"},
        {"year": "２０２３"},
    ])
    def test_invalid_components(self, value):
        """Out-of-range, too wide or non-ASCII-decimal components raise."""
        with pytest.raises(InvalidValueError):
            publication_date_xml(value)

    def test_unknown_media_type(self):
        """Only online, print and other are accepted."""
        with pytest.raises(InvalidValueError):
            publication_date_xml(PublicationDate(year=2020, media_type="web"))


class TestParseDate:
    """Tests for parse_date()."""

    def test_partial_dates_keep_precision(self):
        """YYYY and YYYY-MM do not gain a day."""
        assert parse_date("2023") == PublicationDate(year="2023")
        assert parse_date("2023-04") == PublicationDate(year="2023", month="04")

    def test_full_date(self):
        """YYYY-MM-DD keeps all three parts."""
        assert parse_date("2023-12-05") == PublicationDate(year="2023", month="12", day="05")

    def test_iso_datetime(self):
        """ISO datetimes with a Z suffix are read as UTC."""
        assert parse_date("2023-12-05T10:00:00Z") == PublicationDate(year=2023, month=12, day=5)

    def test_empty(self):
        """No value gives no date."""
        assert parse_date(None) is None
        assert parse_date("") is None

    def test_unparseable(self):
        """Free text is rejected."""
        with pytest.raises(InvalidValueError):
            parse_date("spring 2023")
