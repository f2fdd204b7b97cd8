"""
Deposit Reader
==============

Best-effort decoding of a deposit document back into read-only records.

Elements are matched by local name, so any schema version (and any default
namespace) decodes the same way. Nothing here raises on bad input: a
missing node yields an empty string or None, and malformed XML yields an
empty head and no entries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple, Union
import logging

from lxml import etree

from deposit_core.xml.utils import (
    child_elements, find_all, find_first, local_name, text_content,
)

logger = logging.getLogger(__name__)

CONTAINER_TYPES = ("conference", "journal", "database")
WORK_TYPES = ("conference_paper", "journal_article", "posted_content", "dataset")


@dataclass(frozen=True)
class DecodedDepositor:
    name: str = ""
    email: str = ""


@dataclass(frozen=True)
class BatchHead:
    """Header fields of a batch; ``timestamp`` is a UTC datetime."""
    id: str = ""
    timestamp: Optional[datetime] = None
    depositor: DecodedDepositor = field(default_factory=DecodedDepositor)
    registrant: str = ""


@dataclass(frozen=True)
class DecodedAuthor:
    name: str


@dataclass(frozen=True)
class DecodedWork:
    """A paper, article, preprint or dataset."""
    type: str
    title: str
    authors: Tuple[DecodedAuthor, ...]
    doi: Optional[str]
    year: str
    pages: Optional[Tuple[str, str]]


@dataclass(frozen=True)
class DecodedEvent:
    """Conference event metadata."""
    type: str
    name: str
    acronym: str
    location: str
    date: str
    number: str


@dataclass(frozen=True)
class DecodedSeries:
    """Proceedings series metadata."""
    type: str
    title: str
    original_language_title: str
    issn: str
    publisher: str
    doi: str
    resource: str


@dataclass(frozen=True)
class OpaqueEntry:
    """An entry of a type the reader does not decode, kept as serialized XML."""
    type: str
    xml: str


Entry = Union[DecodedWork, DecodedEvent, DecodedSeries, OpaqueEntry]


def _text(root, name: str) -> str:
    return text_content(find_first(root, name))


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(int(value.strip()), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Unreadable batch timestamp: {value!r}")
        return None


class DoiBatchReader:
    """
    Read a serialized deposit batch.

    Example:
        reader = DoiBatchReader(path.read_text())
        head = reader.get_head()
        for entry in reader.get_entries():
            print(entry.type)
    """

    def __init__(self, xml: Union[str, bytes]):
        """
        Parse the document.

        Args:
            xml: Serialized deposit XML
        """
        self._root: Optional[etree._Element] = None
        data = xml.encode("utf-8") if isinstance(xml, str) else xml
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            self._root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            logger.warning(f"Could not parse deposit XML: {e}")

    @property
    def root(self) -> Optional[etree._Element]:
        """Parsed root element, or None when the input was malformed."""
        return self._root

    def get_head(self) -> BatchHead:
        """Decode the ``head`` block."""
        head = find_first(self._root, "head")
        if head is None:
            return BatchHead()
        timestamp_node = find_first(head, "timestamp")
        return BatchHead(
            id=_text(head, "doi_batch_id"),
            timestamp=_parse_timestamp(text_content(timestamp_node))
            if timestamp_node is not None else None,
            depositor=DecodedDepositor(
                name=_text(head, "depositor_name"),
                email=_text(head, "email_address"),
            ),
            registrant=_text(head, "registrant"),
        )

    def get_work(self, entry: etree._Element) -> DecodedWork:
        """Decode a paper, article, preprint or dataset entry."""
        doi_node = find_first(find_first(entry, "doi_data"), "doi")
        if doi_node is None:
            doi_node = find_first(entry, "doi")
        authors = tuple(
            DecodedAuthor(name=" ".join(
                part for part in (_text(person, "given_name"), _text(person, "surname")) if part
            ))
            for person in find_all(find_first(entry, "contributors"), "person_name")
        )
        pages = None
        if find_first(entry, "pages") is not None:
            pages = (_text(entry, "first_page"), _text(entry, "last_page"))
        return DecodedWork(
            type=local_name(entry),
            title=_text(entry, "title"),
            authors=authors,
            doi=text_content(doi_node) if doi_node is not None else None,
            year=_text(entry, "year"),
            pages=pages,
        )

    def get_event_metadata(self, entry: etree._Element) -> DecodedEvent:
        """Decode an ``event_metadata`` entry."""
        return DecodedEvent(
            type=local_name(entry),
            name=_text(entry, "conference_name"),
            acronym=_text(entry, "conference_acronym"),
            location=_text(entry, "conference_location"),
            date=_text(entry, "conference_date"),
            number=_text(entry, "conference_number"),
        )

    def get_proceedings_series_metadata(self, entry: etree._Element) -> DecodedSeries:
        """Decode a ``proceedings_series_metadata`` entry."""
        return DecodedSeries(
            type=local_name(entry),
            title=_text(entry, "title"),
            original_language_title=_text(entry, "original_language_title"),
            issn=_text(entry, "issn"),
            publisher=_text(entry, "publisher_name"),
            doi=_text(entry, "doi"),
            resource=_text(entry, "resource"),
        )

    def _container(self) -> Optional[etree._Element]:
        body = find_first(self._root, "body")
        if body is None:
            return None
        children = child_elements(body)
        if children and local_name(children[0]) in CONTAINER_TYPES:
            return children[0]
        return body

    def get_entries(self) -> List[Entry]:
        """
        Decode every entry of the body container.

        Returns:
            Records in document order; unknown entry types become OpaqueEntry
        """
        entries: List[Entry] = []
        for entry in child_elements(self._container()):
            name = local_name(entry)
            if name in WORK_TYPES:
                entries.append(self.get_work(entry))
            elif name == "event_metadata":
                entries.append(self.get_event_metadata(entry))
            elif name == "proceedings_series_metadata":
                entries.append(self.get_proceedings_series_metadata(entry))
            else:
                xml = etree.tostring(entry, encoding="unicode", with_tail=False)
                entries.append(OpaqueEntry(type=name, xml=xml))
        logger.debug(f"Decoded {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")
        return entries
