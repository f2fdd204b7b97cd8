"""
Frontmatter Adapters
====================

Build encoder option records from a Frontmatter record.

Each ``*_from_frontmatter`` function extracts the fields one document type
needs, normalizes the DOI, resolves the landing page and keeps only a
Creative Commons license. The returned records are passed to the matching
encoder (``preprint_xml``, ``journal_xml`` ...).
"""

from typing import Any, Dict, Mapping, Optional, Sequence
import logging

from deposit_core.config.schemas import SchemaVersion
from deposit_core.config.settings import ResourceConfig
from deposit_core.encoders.contributors import contributors_xml
from deposit_core.encoders.dates import parse_date
from deposit_core.encoders.funding import fundref_from_funding
from deposit_core.exceptions import ConflictingValueError, MissingFieldError
from deposit_core.frontmatter import Biblio, Frontmatter, Licenses
from deposit_core.identifiers import normalize_doi
from deposit_core.models import (
    ConferencePaper, DatasetDates, DatasetMetadata, DoiData, JournalArticle,
    JournalMetadata, Pages, Preprint, Relation, Titles,
)

logger = logging.getLogger(__name__)


def license_url(licenses: Optional[Licenses]) -> Optional[str]:
    """
    URL of the content license, only when it is a Creative Commons license.
    """
    if licenses is None or licenses.content is None:
        return None
    content = licenses.content
    if not content.cc:
        if content.id or content.url:
            logger.debug(f"Skipping non Creative Commons license {content.id or content.url}")
        return None
    return content.url


def doi_data_for(doi: Optional[str],
                 resources: Optional[ResourceConfig] = None) -> Optional[DoiData]:
    """DoiData for a raw DOI, with the landing page under the resource base URL."""
    normalized = normalize_doi(doi)
    if not normalized:
        return None
    resources = resources or ResourceConfig()
    return DoiData(doi=normalized, resource=resources.resource_for(normalized))


def citations_from_references(references: Optional[Mapping[str, Any]]
                              ) -> Optional[Dict[str, str]]:
    """
    Build a citation key -> DOI mapping from bibliography entries.

    Values may be DOI strings or mappings with a ``doi`` key. Entries
    without a DOI are dropped with a warning.

    Returns:
        Mapping of key to normalized DOI, or None when nothing remains
    """
    if not references:
        return None
    citations: Dict[str, str] = {}
    for key, value in references.items():
        raw = value.get('doi') if isinstance(value, Mapping) else value
        doi = normalize_doi(raw)
        if doi is None:
            logger.warning(f"Citation {key} has no DOI and is not included in the deposit")
            continue
        citations[key] = doi
    return citations or None


def pages_from_biblio(biblio: Optional[Biblio]) -> Optional[Pages]:
    """Page range from biblio info; None without a first page."""
    if biblio is None or not biblio.first_page:
        return None
    return Pages(first_page=str(biblio.first_page),
                 last_page=str(biblio.last_page) if biblio.last_page else None)


def contributors_from_frontmatter(frontmatter: Frontmatter,
                                  schema: Optional[SchemaVersion] = None):
    """Authors of a frontmatter record as a ``contributors`` element (or None)."""
    return contributors_xml(frontmatter.authors, frontmatter.affiliation_table(),
                            schema=schema)


def preprint_from_frontmatter(frontmatter: Frontmatter,
                              citations: Optional[Mapping[str, str]] = None,
                              abstract: Any = None,
                              schema: Optional[SchemaVersion] = None,
                              resources: Optional[ResourceConfig] = None,
                              strict_funding: bool = False) -> Preprint:
    """
    Preprint options from frontmatter.

    Args:
        frontmatter: Source metadata
        citations: Citation key -> DOI mapping
        abstract: Pre-rendered abstract (element, string or list)
        schema: Schema version for contributor encoding
        resources: Landing page settings
        strict_funding: Raise on unresolvable awards instead of skipping
    """
    return Preprint(
        title=frontmatter.title,
        subtitle=frontmatter.subtitle,
        contributors=contributors_from_frontmatter(frontmatter, schema),
        abstract=abstract,
        doi_data=doi_data_for(frontmatter.doi, resources),
        citations=citations_from_references(citations),
        license=license_url(frontmatter.license),
        date=parse_date(frontmatter.date),
        funding=fundref_from_funding(frontmatter.funding, frontmatter.affiliations,
                                     strict=strict_funding),
    )


def journal_article_from_frontmatter(frontmatter: Frontmatter,
                                     citations: Optional[Mapping[str, str]] = None,
                                     abstract: Any = None,
                                     schema: Optional[SchemaVersion] = None,
                                     resources: Optional[ResourceConfig] = None,
                                     strict_funding: bool = False) -> JournalArticle:
    """Journal article options from frontmatter; arguments as for preprints."""
    date = parse_date(frontmatter.date)
    return JournalArticle(
        title=frontmatter.title,
        subtitle=frontmatter.subtitle,
        contributors=contributors_from_frontmatter(frontmatter, schema),
        abstract=abstract,
        doi_data=doi_data_for(frontmatter.doi, resources),
        citations=citations_from_references(citations),
        pages=pages_from_biblio(frontmatter.biblio),
        funding=fundref_from_funding(frontmatter.funding, frontmatter.affiliations,
                                     strict=strict_funding),
        license=license_url(frontmatter.license),
        publication_dates=[date] if date is not None else None,
    )


def conference_paper_from_frontmatter(frontmatter: Frontmatter,
                                      citations: Optional[Mapping[str, str]] = None,
                                      abstract: Any = None,
                                      schema: Optional[SchemaVersion] = None,
                                      resources: Optional[ResourceConfig] = None,
                                      strict_funding: bool = False) -> ConferencePaper:
    """Conference paper options from frontmatter; arguments as for preprints."""
    date = parse_date(frontmatter.date)
    return ConferencePaper(
        title=frontmatter.title,
        subtitle=frontmatter.subtitle,
        contributors=contributors_from_frontmatter(frontmatter, schema),
        abstract=abstract,
        doi_data=doi_data_for(frontmatter.doi, resources),
        citations=citations_from_references(citations),
        pages=pages_from_biblio(frontmatter.biblio),
        funding=fundref_from_funding(frontmatter.funding, frontmatter.affiliations,
                                     strict=strict_funding),
        license=license_url(frontmatter.license),
        publication_dates=[date] if date is not None else None,
    )


def dataset_from_frontmatter(frontmatter: Frontmatter,
                             citations: Optional[Mapping[str, str]] = None,
                             description: Any = None,
                             schema: Optional[SchemaVersion] = None,
                             resources: Optional[ResourceConfig] = None) -> DatasetMetadata:
    """
    Dataset options from frontmatter.

    A venue DOI becomes an ``isPartOf`` relation.

    Raises:
        MissingFieldError: If there is no title
    """
    if not frontmatter.title:
        raise MissingFieldError("title")
    date = parse_date(frontmatter.date)
    venue_doi = normalize_doi(frontmatter.venue.doi) if frontmatter.venue else None
    return DatasetMetadata(
        title=Titles(title=frontmatter.title, subtitle=frontmatter.subtitle),
        contributors=contributors_from_frontmatter(frontmatter, schema),
        date=DatasetDates(created=date) if date is not None else None,
        description=description,
        doi_data=doi_data_for(frontmatter.doi, resources),
        relations=[Relation(relationship="isPartOf", id=venue_doi)] if venue_doi else None,
        citations=citations_from_references(citations),
    )


def _merge(field_name: str, current: Optional[str], value: Optional[str]) -> Optional[str]:
    if not value:
        return current
    if current and current != value:
        raise ConflictingValueError(field_name, current, value)
    return value


def journal_metadata_from_frontmatters(frontmatters: Sequence[Frontmatter],
                                       resources: Optional[ResourceConfig] = None
                                       ) -> JournalMetadata:
    """
    Merge the venue declared by several articles into one JournalMetadata.

    Raises:
        ConflictingValueError: If two articles declare different values
        MissingFieldError: If no article declares a venue title
    """
    title = short_title = issn = doi = url = None
    for frontmatter in frontmatters:
        venue = frontmatter.venue
        if venue is None:
            continue
        title = _merge("venue.title", title, venue.title)
        short_title = _merge("venue.short_title", short_title, venue.short_title)
        issn = _merge("venue.issn", issn, venue.issn)
        doi = _merge("venue.doi", doi, normalize_doi(venue.doi))
        url = _merge("venue.url", url, venue.url)
    if not title:
        raise MissingFieldError("venue.title")

    doi_data = doi_data_for(doi, resources)
    if doi_data is not None and url:
        doi_data.resource = url
    logger.debug(f"Merged journal metadata for {title} from {len(frontmatters)} article(s)")
    return JournalMetadata(title=title, abbrev_title=short_title, issn=issn,
                           doi_data=doi_data)
