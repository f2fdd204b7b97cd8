"""
Document Encoder Tests

Covers the shared blocks and the preprint, journal, conference and dataset
encoders.

Run with: pytest tests/test_encoders.py -v
"""

import pytest
from lxml import etree

from deposit_core.config.schemas import get_schema_version
from deposit_core.encoders import (
    abstract_xml,
    citation_list_xml,
    conference_paper_xml,
    conference_xml,
    database_xml,
    dataset_xml,
    doi_data_xml,
    journal_article_xml,
    journal_issue_xml,
    journal_metadata_xml,
    journal_xml,
    license_xml,
    pages_xml,
    preprint_xml,
    proceedings_xml,
    titles_xml,
)
from deposit_core.exceptions import InvalidValueError, MissingFieldError
from deposit_core.models import (
    ConferenceEvent,
    ConferenceOptions,
    ConferencePaper,
    DatabaseOptions,
    DatasetDates,
    DatasetMetadata,
    DoiData,
    JournalArticle,
    JournalIssue,
    JournalMetadata,
    Pages,
    Preprint,
    Proceedings,
    ProceedingsSeries,
    Relation,
)
from deposit_core.xml import AI_NS, JATS_NS, REL_NS, child_elements, find_first, local_name, to_xml


def names(node):
    return [local_name(child) for child in child_elements(node)]


@pytest.fixture
def proceedings():
    return Proceedings(title="Proceedings of the Python in Science Conference",
                       publisher="SciPy",
                       publication_date={"year": 2022})


@pytest.fixture
def series():
    return ProceedingsSeries(title="Proceedings of the Python in Science Conference",
                             issn="2575-9752",
                             doi_data=DoiData(doi="10.25080/issn.2575-9752"))


class TestSharedBlocks:
    """Tests for doi_data, citations, license, pages, titles and abstract."""

    def test_doi_data(self):
        """doi, resource and a text-mining collection, in that order."""
        node = doi_data_xml(DoiData(doi="10.62329/ABCD1234",
                                    resource="https://example.org/a",
                                    pdf="https://example.org/a.pdf"))
        assert names(node) == ["doi", "resource", "collection"]
        collection = find_first(node, "collection")
        assert collection.get("property") == "text-mining"
        item_resource = find_first(collection, "resource")
        assert item_resource.get("mime_type") == "application/pdf"
        assert item_resource.text == "https://example.org/a.pdf"

    def test_doi_data_requires_doi(self):
        """A doi_data block without a DOI is an error."""
        with pytest.raises(MissingFieldError) as excinfo:
            doi_data_xml(DoiData(resource="https://example.org"))
        assert excinfo.value.field == "doi"

    def test_citation_list(self):
        """Citation DOIs are normalized."""
        node = citation_list_xml({"ref1": "https://doi.org/10.5281/zenodo.1234"})
        citation = find_first(node, "citation")
        assert citation.get("key") == "ref1"
        assert find_first(citation, "doi").text == "10.5281/zenodo.1234"
        assert citation_list_xml({}) is None

    def test_license(self):
        """A license URL becomes a free-to-read access indicators program."""
        node = license_xml("https://creativecommons.org/licenses/by/4.0/")
        assert node.tag == f"{{{AI_NS}}}program"
        assert names(node) == ["free_to_read", "license_ref"]
        assert node[1].get("applies_to") == "vor"
        assert license_xml(None) is None

    def test_pages(self):
        """A page range has a first and last page."""
        assert to_xml(pages_xml(Pages("1", "6"))) == \
            "<pages><first_page>1</first_page><last_page>6</last_page></pages>"

    def test_titles_requires_title(self):
        """titles_xml without a title raises."""
        with pytest.raises(MissingFieldError) as excinfo:
            titles_xml(None)
        assert excinfo.value.field == "title"

    def test_abstract_from_text(self):
        """Plain text is wrapped in a JATS paragraph."""
        node = abstract_xml("Hello")
        assert node.tag == f"{{{JATS_NS}}}abstract"
        assert node[0].tag == f"{{{JATS_NS}}}p"
        assert node[0].text == "Hello"

    def test_abstract_from_markup(self):
        """Unqualified markup is moved into the JATS namespace."""
        node = abstract_xml(etree.fromstring("<p>a <italic>b</italic> c</p>"))
        paragraph = node[0]
        assert paragraph.tag == f"{{{JATS_NS}}}p"
        assert paragraph[0].tag == f"{{{JATS_NS}}}italic"
        assert paragraph[0].tail == " c"

    def test_abstract_element_is_copied(self):
        """A ready jats:abstract is returned as a copy."""
        ready = abstract_xml("Hello")
        node = abstract_xml(ready)
        assert node is not ready
        assert to_xml(node) == to_xml(ready)


class TestPreprint:
    """Tests for preprint_xml()."""

    def make(self, **kwargs):
        values = dict(title="A Preprint", date={"year": 2023, "month": 1, "day": 2},
                      doi_data=DoiData(doi="10.62329/ABCD1234"))
        values.update(kwargs)
        return Preprint(**values)

    @pytest.mark.parametrize("missing, field", [
        ({"title": None}, "title"),
        ({"date": None}, "date"),
        ({"doi_data": None}, "doi"),
        ({"doi_data": DoiData()}, "doi"),
    ])
    def test_required_fields(self, missing, field):
        """Missing required fields raise with the field name."""
        with pytest.raises(MissingFieldError) as excinfo:
            preprint_xml(self.make(**missing))
        assert excinfo.value.field == field

    def test_child_order(self):
        """Children appear in schema order."""
        node = preprint_xml(self.make(
            abstract="Text",
            license="https://creativecommons.org/licenses/by/4.0/",
            citations={"a": "10.5281/zenodo.1"},
        ))
        assert node.get("type") == "preprint"
        assert names(node) == ["titles", "posted_date", "abstract", "program",
                               "doi_data", "citation_list"]

    def test_encoding_twice_keeps_first_output(self):
        """Caller-supplied elements are not moved out of earlier output."""
        contributors = etree.fromstring(
            '<contributors><person_name sequence="first" contributor_role="author">'
            '<surname>Doe</surname></person_name></contributors>')
        preprint = self.make(contributors=contributors, abstract=abstract_xml("Abs"))
        first = preprint_xml(preprint)
        before = to_xml(first)
        second = preprint_xml(preprint)
        assert to_xml(first) == before
        assert to_xml(second) == before
        assert names(first)[0] == "contributors"


class TestJournal:
    """Tests for the journal encoders."""

    def article(self, **kwargs):
        values = dict(title="An Article", doi_data=DoiData(doi="10.36903/ABCD1234"),
                      publication_dates=[{"year": 2023}])
        values.update(kwargs)
        return JournalArticle(**values)

    def test_article(self):
        """A journal article lists titles, dates, pages and doi_data."""
        node = journal_article_xml(self.article(pages=Pages("3")))
        assert node.get("publication_type") == "full_text"
        assert names(node) == ["titles", "publication_date", "pages", "doi_data"]

    def test_article_requires_date(self):
        """A journal article needs a publication date."""
        with pytest.raises(MissingFieldError) as excinfo:
            journal_article_xml(self.article(publication_dates=[]))
        assert excinfo.value.field == "date"

    def test_metadata(self):
        """journal_metadata carries the title and electronic ISSN."""
        node = journal_metadata_xml(JournalMetadata(title="Physiome", abbrev_title="Phys",
                                                    issn="2624-8212"))
        assert names(node) == ["full_title", "abbrev_title", "issn"]
        assert find_first(node, "issn").get("media_type") == "electronic"

    def test_metadata_requires_title(self):
        """journal_metadata without a title raises."""
        with pytest.raises(MissingFieldError):
            journal_metadata_xml(JournalMetadata())

    def test_issue(self):
        """Issues carry a volume wrapper and an issue number."""
        node = journal_issue_xml(JournalIssue(volume=4, issue="2",
                                              publication_dates=[{"year": 2023}]))
        assert names(node) == ["publication_date", "journal_volume", "issue"]
        assert find_first(node, "volume").text == "4"

    def test_issue_requires_date(self):
        """An issue without a publication date raises."""
        with pytest.raises(MissingFieldError):
            journal_issue_xml(JournalIssue(volume="1"))

    def test_journal_container(self):
        """Metadata comes before the articles."""
        node = journal_xml(JournalMetadata(title="Physiome"),
                           articles=[self.article(), self.article(title="Second")])
        assert names(node) == ["journal_metadata", "journal_article", "journal_article"]


class TestConference:
    """Tests for the conference encoders."""

    def test_paper_requires_title(self):
        """A paper without a title raises."""
        with pytest.raises(MissingFieldError) as excinfo:
            conference_paper_xml(ConferencePaper(doi_data=DoiData(doi="10.25080/x-1")))
        assert excinfo.value.field == "title"

    def test_proceedings_without_series(self, proceedings):
        """Stand-alone proceedings are an archive volume."""
        node = proceedings_xml(proceedings)
        assert local_name(node) == "proceedings_metadata"
        assert find_first(node, "noisbn").get("reason") == "archive_volume"

    def test_proceedings_series(self, proceedings, series):
        """A series wraps the proceedings with series metadata first."""
        proceedings.series = series
        node = proceedings_xml(proceedings, get_schema_version("5.3.1"))
        assert local_name(node) == "proceedings_series_metadata"
        assert names(node)[0] == "series_metadata"
        assert find_first(node, "issn").text == "2575-9752"
        assert find_first(node, "noisbn").get("reason") == "simple_series"

    def test_series_needs_newer_schema(self, proceedings, series):
        """Older schemas cannot express a proceedings series."""
        proceedings.series = series
        with pytest.raises(InvalidValueError):
            proceedings_xml(proceedings, get_schema_version("4.4.2"))

    def test_proceedings_requires_publisher(self, proceedings):
        """The publisher is required."""
        proceedings.publisher = None
        with pytest.raises(MissingFieldError) as excinfo:
            proceedings_xml(proceedings)
        assert excinfo.value.field == "proceedings.publisher"

    def test_conference(self, proceedings):
        """Event, proceedings and papers, in order."""
        event = ConferenceEvent(name="Python in Science Conference", acronym="SciPy",
                                number="21st", location="Austin, Texas")
        paper = ConferencePaper(title="A Paper", doi_data=DoiData(doi="10.25080/x-1"),
                                pages=Pages("1", "6"))
        node = conference_xml(ConferenceOptions(event=event, proceedings=proceedings,
                                                papers=[paper]))
        assert names(node) == ["event_metadata", "proceedings_metadata", "conference_paper"]
        assert names(node[0]) == ["conference_name", "conference_acronym",
                                  "conference_number", "conference_location"]

    def test_encoded_paper_reused(self, proceedings):
        """An encoded paper can go into two conference blocks."""
        event = ConferenceEvent(name="Python in Science Conference")
        paper = conference_paper_xml(ConferencePaper(title="A Paper",
                                                     doi_data=DoiData(doi="10.25080/x-1")))
        options = ConferenceOptions(event=event, proceedings=proceedings, papers=[paper])
        first = conference_xml(options)
        before = to_xml(first)
        second = conference_xml(options)
        assert to_xml(first) == before
        assert names(second)[-1] == "conference_paper"

    def test_event_requires_name(self, proceedings):
        """The event name is required."""
        with pytest.raises(MissingFieldError):
            conference_xml(ConferenceOptions(event=ConferenceEvent(), proceedings=proceedings))


class TestDataset:
    """Tests for the dataset encoders."""

    def dataset(self, **kwargs):
        values = dict(title="Measurements", doi_data=DoiData(doi="10.62329/DATA0001"))
        values.update(kwargs)
        return DatasetMetadata(**values)

    def test_dataset(self):
        """Dates, description and relations are encoded in order."""
        node = dataset_xml(self.dataset(
            date=DatasetDates(created={"year": 2023}),
            description="Raw data",
            relations=[Relation(relationship="isPartOf", id="10.62329/ABCD1234")],
        ))
        assert node.get("dataset_type") == "other"
        assert names(node) == ["titles", "database_date", "description", "program", "doi_data"]
        relation = find_first(node, "inter_work_relation")
        assert relation.tag == f"{{{REL_NS}}}inter_work_relation"
        assert relation.get("relationship-type") == "isPartOf"
        assert relation.get("identifier-type") == "doi"
        assert relation.text == "10.62329/ABCD1234"

    def test_dataset_requires_doi(self):
        """A dataset without a DOI raises."""
        with pytest.raises(MissingFieldError) as excinfo:
            dataset_xml(self.dataset(doi_data=None))
        assert excinfo.value.field == "doi"

    def test_unknown_dataset_type(self):
        """Dataset types are restricted."""
        with pytest.raises(InvalidValueError):
            dataset_xml(self.dataset(type="spreadsheet"))

    def test_database(self):
        """The database metadata precedes its datasets."""
        node = database_xml(DatabaseOptions(title="Archive", datasets=[self.dataset()]))
        assert names(node) == ["database_metadata", "dataset"]
        assert node[0].get("language") == "en"
