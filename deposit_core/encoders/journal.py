"""
Journal Encoders
================

``journal_metadata``, ``journal_issue`` and ``journal_article`` blocks, and
the ``journal`` container that holds them.
"""

from typing import List, Optional, Sequence
import logging

from lxml import etree

from deposit_core.encoders.dates import publication_date_xml
from deposit_core.encoders.doi import (
    abstract_xml, citation_list_xml, doi_data_xml, license_xml, pages_xml, titles_xml,
)
from deposit_core.encoders.funding import fundref_xml
from deposit_core.exceptions import MissingFieldError
from deposit_core.models import DateLike, JournalArticle, JournalIssue, JournalMetadata
from deposit_core.xml.builder import element

logger = logging.getLogger(__name__)


def _publication_dates(dates: Optional[Sequence[DateLike]]) -> List[etree._Element]:
    return [node for node in (publication_date_xml(d) for d in dates or [])
            if node is not None]


def journal_metadata_xml(metadata: JournalMetadata) -> etree._Element:
    """
    Create ``journal_metadata``.

    Required fields: title
    Optional fields: abbrev_title, issn, doi_data

    Raises:
        MissingFieldError: If there is no title
    """
    if not metadata.title:
        raise MissingFieldError("title")
    has_doi = metadata.doi_data is not None and bool(metadata.doi_data.doi)
    return element("journal_metadata", [
        element("full_title", metadata.title),
        element("abbrev_title", metadata.abbrev_title) if metadata.abbrev_title else None,
        element("issn", {"media_type": "electronic"}, metadata.issn) if metadata.issn else None,
        doi_data_xml(metadata.doi_data) if has_doi else None,
    ])


def journal_issue_xml(issue: JournalIssue) -> etree._Element:
    """
    Create ``journal_issue``.

    Required fields: publication_dates (at least one)
    Optional fields: contributors, title, subtitle, volume, issue, doi_data

    Raises:
        MissingFieldError: If there is no publication date
    """
    dates = _publication_dates(issue.publication_dates)
    if not dates:
        raise MissingFieldError("date")
    has_doi = issue.doi_data is not None and bool(issue.doi_data.doi)
    return element("journal_issue", [
        issue.contributors,
        titles_xml(issue.title, issue.subtitle) if issue.title else None,
        dates,
        element("journal_volume", [element("volume", str(issue.volume))])
        if issue.volume else None,
        element("issue", str(issue.issue)) if issue.issue else None,
        doi_data_xml(issue.doi_data) if has_doi else None,
    ])


def journal_article_xml(article: JournalArticle) -> etree._Element:
    """
    Create ``journal_article``.

    Required fields: title, doi_data.doi, publication_dates (at least one)

    Optional fields: contributors, subtitle, abstract, pages, funding,
    license, citations

    Raises:
        MissingFieldError: If a required field is absent
    """
    if not article.title:
        raise MissingFieldError("title")
    if article.doi_data is None or not article.doi_data.doi:
        raise MissingFieldError("doi")
    dates = _publication_dates(article.publication_dates)
    if not dates:
        raise MissingFieldError("date")

    logger.debug(f"Encoding journal article {article.doi_data.doi}")
    return element("journal_article", {"publication_type": "full_text"}, [
        titles_xml(article.title, article.subtitle),
        article.contributors,
        abstract_xml(article.abstract),
        dates,
        pages_xml(article.pages),
        fundref_xml(article.funding),
        license_xml(article.license),
        doi_data_xml(article.doi_data),
        citation_list_xml(article.citations),
    ])


def journal_xml(metadata: JournalMetadata,
                issue: Optional[JournalIssue] = None,
                articles: Optional[Sequence[JournalArticle]] = None) -> etree._Element:
    """
    Create a ``journal`` block from metadata, an optional issue and articles.

    Example:
        body = journal_xml(JournalMetadata(title="Physiome"),
                           articles=[journal_article_from_frontmatter(fm)])
    """
    return element("journal", [
        journal_metadata_xml(metadata),
        journal_issue_xml(issue) if issue is not None else None,
        [journal_article_xml(article) for article in articles or []],
    ])
