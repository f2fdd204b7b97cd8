"""
Funding Encoder Tests

Run with: pytest tests/test_funding.py -v
"""

import logging

import pytest

from deposit_core.encoders.funding import fundref_from_funding, fundref_xml
from deposit_core.exceptions import InvalidValueError
from deposit_core.frontmatter import Affiliation, Award, Funding
from deposit_core.models import Fundref, FundingSource
from deposit_core.xml import FR_NS, child_elements

NSF_DOI_URL = "https://doi.org/10.13039/100000001"


@pytest.fixture
def funders():
    return [Affiliation(id="nsf", name="National Science Foundation",
                        doi="10.13039/100000001")]


class TestResolveFunding:
    """Tests for fundref_from_funding()."""

    def test_award_resolved(self, funders):
        """Award sources are looked up in the affiliation table."""
        funding = Funding(awards=[Award(id="123", sources=["nsf"])])
        assert fundref_from_funding(funding, funders) == [
            Fundref(sources=[FundingSource("National Science Foundation", [NSF_DOI_URL])],
                    award_numbers=["123"])
        ]

    def test_award_without_source_is_excluded(self, funders, caplog):
        """An award without a source is dropped with a warning."""
        funding = Funding(awards=[Award(id="999")])
        with caplog.at_level(logging.WARNING, logger="deposit_core.encoders.funding"):
            result = fundref_from_funding(funding, funders)
        assert result is None
        assert "Excluding award 999" in caplog.text

    def test_unknown_source_excluded_others_kept(self, funders):
        """Only the unresolvable award is excluded."""
        funding = [Funding(awards=[Award(id="1", sources=["nih"]),
                                   Award(id="2", sources=["nsf"])])]
        result = fundref_from_funding(funding, funders)
        assert len(result) == 1
        assert result[0].award_numbers == ["2"]

    def test_strict_raises(self, funders):
        """strict=True turns exclusion into an error."""
        funding = Funding(awards=[Award(id="999")])
        with pytest.raises(InvalidValueError, match="must have a source"):
            fundref_from_funding(funding, funders, strict=True)

    def test_no_funding(self):
        """No funding statements gives None."""
        assert fundref_from_funding(None) is None
        assert fundref_from_funding([Funding(statement="Thanks")]) is None


class TestFundrefXml:
    """Tests for fundref_xml()."""

    def test_structure(self):
        """A fundgroup holds funder names, then award numbers."""
        program = fundref_xml([
            Fundref(sources=[FundingSource("National Science Foundation", [NSF_DOI_URL])],
                    award_numbers=["123"])
        ])
        assert program.tag == f"{{{FR_NS}}}program"
        assert program.get("name") == "fundref"

        group = program[0]
        assert group.get("name") == "fundgroup"
        funder, award = child_elements(group)
        assert funder.get("name") == "funder_name"
        assert funder.text == "National Science Foundation"
        assert funder[0].get("name") == "funder_identifier"
        assert funder[0].text == NSF_DOI_URL
        assert award.get("name") == "award_number"
        assert award.text == "123"

    def test_one_group_per_award(self):
        """Each record becomes its own fundgroup."""
        program = fundref_xml([Fundref(sources=[FundingSource("A")]),
                               Fundref(sources=[FundingSource("B")])])
        assert [group[0].text for group in program] == ["A", "B"]

    def test_empty_sources_raise(self):
        """A record with no sources is an error."""
        with pytest.raises(InvalidValueError):
            fundref_xml([Fundref(award_numbers=["1"])])

    def test_nothing_to_encode(self):
        """No records, no element."""
        assert fundref_xml(None) is None
        assert fundref_xml([]) is None
