"""
Deposit Records
===============

Option records consumed by the encoders. Contributor, abstract and other
pre-built blocks are carried as lxml elements so a record can be assembled
from any source before encoding.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass
class PublicationDate:
    """
    A year with optional month and day.

    Components may be ints or decimal strings; they are validated and
    zero-padded by the date encoder, not here.
    """
    year: Union[int, str, None] = None
    month: Union[int, str, None] = None
    day: Union[int, str, None] = None
    media_type: Optional[str] = None  # online | print | other

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PublicationDate':
        """Create from a mapping with year/month/day/media_type keys."""
        return cls(
            year=data.get('year'),
            month=data.get('month'),
            day=data.get('day'),
            media_type=data.get('media_type'),
        )


# A date as accepted by the date encoder
DateLike = Union[PublicationDate, date, Mapping[str, Any]]


@dataclass
class DoiData:
    """DOI plus landing page and optional machine-readable variants."""
    doi: Optional[str] = None
    resource: Optional[str] = None
    xml: Optional[str] = None
    pdf: Optional[str] = None
    zip: Optional[str] = None


@dataclass
class Pages:
    """Page range of a work."""
    first_page: str
    last_page: Optional[str] = None
    other_pages: Optional[str] = None


@dataclass
class Titles:
    """Title block with optional subtitle and original-language variants."""
    title: Optional[str] = None
    subtitle: Optional[str] = None
    original_language_title: Optional[str] = None
    original_language_subtitle: Optional[str] = None


@dataclass
class FundingSource:
    """A funder name with its external identifiers."""
    name: str
    identifiers: List[str] = field(default_factory=list)


@dataclass
class Fundref:
    """One award: its funding sources and award numbers."""
    sources: List[FundingSource] = field(default_factory=list)
    award_numbers: List[str] = field(default_factory=list)


@dataclass
class Preprint:
    """Posted content. Required: title, date, doi_data.doi."""
    title: Optional[str] = None
    subtitle: Optional[str] = None
    contributors: Any = None
    abstract: Any = None
    doi_data: Optional[DoiData] = None
    citations: Optional[Dict[str, str]] = None
    license: Optional[str] = None
    date: Optional[DateLike] = None
    funding: Optional[List[Fundref]] = None
    type: str = "preprint"


@dataclass
class JournalMetadata:
    """Journal-level metadata. Required: title."""
    title: Optional[str] = None
    abbrev_title: Optional[str] = None
    issn: Optional[str] = None
    doi_data: Optional[DoiData] = None


@dataclass
class JournalIssue:
    """Issue-level metadata. Required: at least one publication date."""
    contributors: Any = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    doi_data: Optional[DoiData] = None
    publication_dates: Optional[List[DateLike]] = None


@dataclass
class JournalArticle:
    """Journal article. Required: title, doi_data.doi, publication_dates."""
    title: Optional[str] = None
    subtitle: Optional[str] = None
    contributors: Any = None
    abstract: Any = None
    doi_data: Optional[DoiData] = None
    citations: Optional[Dict[str, str]] = None
    pages: Optional[Pages] = None
    funding: Optional[List[Fundref]] = None
    license: Optional[str] = None
    publication_dates: Optional[List[DateLike]] = None


@dataclass
class ConferencePaper:
    """Conference paper. Required: title, doi_data.doi."""
    title: Optional[str] = None
    subtitle: Optional[str] = None
    contributors: Any = None
    abstract: Any = None
    doi_data: Optional[DoiData] = None
    citations: Optional[Dict[str, str]] = None
    pages: Optional[Pages] = None
    funding: Optional[List[Fundref]] = None
    license: Optional[str] = None
    publication_dates: Optional[List[DateLike]] = None


@dataclass
class ConferenceEvent:
    """The conference event itself. Required: name."""
    name: Optional[str] = None
    acronym: Optional[str] = None
    number: Union[int, str, None] = None
    location: Optional[str] = None
    date: Optional[str] = None


@dataclass
class ProceedingsSeries:
    """Series the proceedings belong to. Required: title, issn."""
    title: Optional[str] = None
    issn: Optional[str] = None
    original_language_title: Optional[str] = None
    series_number: Optional[str] = None
    doi_data: Optional[DoiData] = None


@dataclass
class Proceedings:
    """Proceedings volume. Required: title, publisher, publication_date."""
    title: Optional[str] = None
    publisher: Optional[str] = None
    publisher_place: Optional[str] = None
    subject: Optional[str] = None
    publication_date: Optional[DateLike] = None
    doi_data: Optional[DoiData] = None
    series: Optional[ProceedingsSeries] = None


@dataclass
class ConferenceOptions:
    """A conference block: event, proceedings and already-encoded papers."""
    event: ConferenceEvent
    proceedings: Proceedings
    contributors: Any = None
    papers: List[Any] = field(default_factory=list)


@dataclass
class DatasetDates:
    """Creation, publication and update dates of a dataset."""
    created: Optional[DateLike] = None
    published: Optional[DateLike] = None
    updated: Optional[DateLike] = None


@dataclass
class Relation:
    """A typed relation from a dataset to another identifier."""
    relationship: str
    id: str
    id_type: str = "doi"
    kind: str = "inter"  # inter | intra


@dataclass
class DatasetMetadata:
    """A dataset record. Required: title, doi_data.doi."""
    title: Union[str, Titles, None] = None
    contributors: Any = None
    date: Optional[DatasetDates] = None
    description: Any = None
    doi_data: Optional[DoiData] = None
    relations: Optional[List[Relation]] = None
    citations: Optional[Dict[str, str]] = None
    type: str = "other"  # record | collection | crossmark_policy | other


@dataclass
class DatabaseOptions:
    """A database holding datasets. Required: title."""
    title: Union[str, Titles, None] = None
    contributors: Any = None
    description: Optional[str] = None
    date: Optional[DatasetDates] = None
    doi_data: Optional[DoiData] = None
    datasets: List[Any] = field(default_factory=list)
    language: str = "en"


@dataclass
class Depositor:
    """Name and email of the depositing account."""
    name: str
    email: str


@dataclass
class BatchOptions:
    """Envelope fields of a deposit batch."""
    id: str
    depositor: Depositor
    timestamp: Optional[int] = None  # Seconds since epoch; defaults to now
    registrant: Optional[str] = None  # Defaults to "Crossref"
