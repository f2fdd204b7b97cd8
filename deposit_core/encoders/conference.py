"""
Conference Encoders
===================

``conference_paper`` blocks and the ``conference`` container with its
event and proceedings (or proceedings series) metadata.
"""

from typing import Optional, Union
import logging

from lxml import etree

from deposit_core.config.schemas import SchemaVersion, get_schema_version
from deposit_core.encoders.dates import publication_date_xml
from deposit_core.encoders.doi import (
    abstract_xml, citation_list_xml, doi_data_xml, license_xml, pages_xml, titles_xml,
)
from deposit_core.encoders.funding import fundref_xml
from deposit_core.exceptions import InvalidValueError, MissingFieldError
from deposit_core.models import (
    ConferenceEvent, ConferenceOptions, ConferencePaper, Proceedings, ProceedingsSeries,
)
from deposit_core.xml.builder import element

logger = logging.getLogger(__name__)

NOISBN_ARCHIVE_VOLUME = "archive_volume"
NOISBN_SIMPLE_SERIES = "simple_series"


def paper_or_element(value: Union[ConferencePaper, etree._Element]) -> etree._Element:
    """Encode a record, passing already encoded elements through."""
    if isinstance(value, ConferencePaper):
        return conference_paper_xml(value)
    return value


def conference_paper_xml(paper: ConferencePaper) -> etree._Element:
    """
    Create ``conference_paper``.

    Required fields: title, doi_data.doi

    Optional fields: contributors, subtitle, abstract, publication_dates,
    pages, funding, license, citations

    Raises:
        MissingFieldError: If a required field is absent
    """
    if not paper.title:
        raise MissingFieldError("title")
    if paper.doi_data is None or not paper.doi_data.doi:
        raise MissingFieldError("doi")

    logger.debug(f"Encoding conference paper {paper.doi_data.doi}")
    return element("conference_paper", {"publication_type": "full_text"}, [
        paper.contributors,
        titles_xml(paper.title, paper.subtitle),
        abstract_xml(paper.abstract),
        [publication_date_xml(d) for d in paper.publication_dates or []],
        pages_xml(paper.pages),
        fundref_xml(paper.funding),
        license_xml(paper.license),
        doi_data_xml(paper.doi_data),
        citation_list_xml(paper.citations),
    ])


def event_metadata_xml(event: ConferenceEvent) -> etree._Element:
    """Create ``event_metadata``; the event name is required."""
    if not event.name:
        raise MissingFieldError("event.name")
    return element("event_metadata", [
        element("conference_name", event.name),
        element("conference_acronym", event.acronym) if event.acronym else None,
        element("conference_number", str(event.number)) if event.number is not None else None,
        element("conference_location", event.location) if event.location else None,
        element("conference_date", event.date) if event.date else None,
    ])


def _publisher_xml(proceedings: Proceedings) -> etree._Element:
    return element("publisher", [
        element("publisher_name", proceedings.publisher),
        element("publisher_place", proceedings.publisher_place)
        if proceedings.publisher_place else None,
    ])


def series_metadata_xml(series: ProceedingsSeries) -> etree._Element:
    """
    Create ``series_metadata``.

    Raises:
        MissingFieldError: If the series title or ISSN is absent
    """
    if not series.title:
        raise MissingFieldError("series.title")
    if not series.issn:
        raise MissingFieldError("series.issn")
    has_doi = series.doi_data is not None and bool(series.doi_data.doi)
    return element("series_metadata", [
        element("titles", [
            element("title", series.title),
            element("original_language_title", series.original_language_title)
            if series.original_language_title else None,
        ]),
        element("issn", series.issn),
        element("series_number", series.series_number) if series.series_number else None,
        doi_data_xml(series.doi_data) if has_doi else None,
    ])


def proceedings_xml(proceedings: Proceedings,
                    schema: Optional[SchemaVersion] = None) -> etree._Element:
    """
    Create ``proceedings_metadata``, or ``proceedings_series_metadata`` when
    the proceedings belong to a series.

    Required fields: title, publisher, publication_date; for a series also
    series.title and series.issn

    Raises:
        MissingFieldError: If a required field is absent
        InvalidValueError: If a series is given for a schema without series
            support
    """
    schema = schema or get_schema_version()
    if not proceedings.title:
        raise MissingFieldError("proceedings.title")
    if not proceedings.publisher:
        raise MissingFieldError("proceedings.publisher")
    publication_date = publication_date_xml(proceedings.publication_date)
    if publication_date is None:
        raise MissingFieldError("proceedings.publication_date")

    series = proceedings.series
    if series is not None and not schema.supports_series:
        raise InvalidValueError(
            f"Schema {schema.version} does not support proceedings series metadata")

    has_doi = proceedings.doi_data is not None and bool(proceedings.doi_data.doi)
    body = [
        element("proceedings_title", proceedings.title),
        element("proceedings_subject", proceedings.subject) if proceedings.subject else None,
        _publisher_xml(proceedings),
        publication_date,
        element("noisbn", {"reason": NOISBN_SIMPLE_SERIES if series is not None
                           else NOISBN_ARCHIVE_VOLUME}),
        doi_data_xml(proceedings.doi_data) if has_doi else None,
    ]
    if series is None:
        return element("proceedings_metadata", body)
    return element("proceedings_series_metadata", [series_metadata_xml(series), body])


def conference_xml(options: ConferenceOptions,
                   schema: Optional[SchemaVersion] = None) -> etree._Element:
    """
    Create a ``conference`` block.

    ``options.papers`` may hold ConferencePaper records or already encoded
    ``conference_paper`` elements.
    """
    papers = [paper_or_element(paper) for paper in options.papers]
    logger.debug(f"Encoding conference {options.event.name} with {len(papers)} paper(s)")
    return element("conference", [
        options.contributors,
        event_metadata_xml(options.event),
        proceedings_xml(options.proceedings, schema),
        papers,
    ])
