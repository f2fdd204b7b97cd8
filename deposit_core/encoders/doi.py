"""
Shared Blocks
=============

Blocks every document type is assembled from: the DOI resource, citation
list, license (access indicators), page range, titles and JATS abstract.
"""

from copy import deepcopy
from typing import Iterable, Mapping, Optional, Union
import logging

from lxml import etree

from deposit_core.exceptions import MissingFieldError
from deposit_core.identifiers import normalize_doi
from deposit_core.models import DoiData, Pages, Titles
from deposit_core.xml.builder import element, resolve_name
from deposit_core.xml.utils import local_name

logger = logging.getLogger(__name__)

CONTENT_VERSION = "vor"

# Variant attribute on DoiData -> mime type of the collection item
RESOURCE_MIME_TYPES = (
    ("xml", "text/xml"),
    ("pdf", "application/pdf"),
    ("zip", "application/zip"),
)


def doi_data_xml(doi_data: Optional[DoiData]) -> etree._Element:
    """
    Encode a ``doi_data`` block.

    Emits ``doi``, then ``resource`` (when a landing page is given), then a
    text-mining ``collection`` with one typed item per variant link.

    Raises:
        MissingFieldError: If there is no DOI
    """
    if doi_data is None or not doi_data.doi:
        raise MissingFieldError("doi")

    items = []
    for attr, mime_type in RESOURCE_MIME_TYPES:
        url = getattr(doi_data, attr)
        if url:
            items.append(element("item", [
                element("resource", {"mime_type": mime_type,
                                     "content_version": CONTENT_VERSION}, url),
            ]))

    return element("doi_data", [
        element("doi", doi_data.doi),
        element("resource", {"content_version": CONTENT_VERSION}, doi_data.resource)
        if doi_data.resource else None,
        element("collection", {"property": "text-mining"}, items) if items else None,
    ])


def citation_list_xml(citations: Optional[Mapping[str, str]]) -> Optional[etree._Element]:
    """
    Encode a ``citation_list`` from a citation key -> DOI mapping.

    DOIs are normalized; a value that does not look like a DOI is written
    unchanged. Returns None for an empty mapping.
    """
    if not citations:
        return None
    return element("citation_list", [
        element("citation", {"key": key}, [
            element("doi", normalize_doi(value) or value),
        ])
        for key, value in citations.items()
    ])


def license_xml(license_url: Optional[str]) -> Optional[etree._Element]:
    """Encode the access-indicators program for a license URL."""
    if not license_url:
        return None
    return element("ai:program", {"name": "AccessIndicators"}, [
        element("ai:free_to_read"),
        element("ai:license_ref", {"applies_to": CONTENT_VERSION}, license_url),
    ])


def pages_xml(pages: Optional[Pages]) -> Optional[etree._Element]:
    """Encode a ``pages`` block; None without a first page."""
    if pages is None or not pages.first_page:
        return None
    return element("pages", [
        element("first_page", str(pages.first_page)),
        element("last_page", str(pages.last_page)) if pages.last_page else None,
        element("other_pages", str(pages.other_pages)) if pages.other_pages else None,
    ])


def titles_xml(title: Union[str, Titles, None],
               subtitle: Optional[str] = None) -> etree._Element:
    """
    Encode a ``titles`` block.

    Raises:
        MissingFieldError: If there is no title
    """
    titles = title if isinstance(title, Titles) else Titles(title=title, subtitle=subtitle)
    if not titles.title:
        raise MissingFieldError("title")
    return element("titles", [
        element("title", titles.title),
        element("subtitle", titles.subtitle) if titles.subtitle else None,
        element("original_language_title", titles.original_language_title)
        if titles.original_language_title else None,
        element("original_language_subtitle", titles.original_language_subtitle)
        if titles.original_language_subtitle else None,
    ])


def _to_jats(node: etree._Element) -> etree._Element:
    jats = element(f"jats:{local_name(node)}")
    for key, value in node.attrib.items():
        jats.set(key, value)
    jats.text = node.text
    for child in node:
        if isinstance(child.tag, str):
            converted = _to_jats(child)
            converted.tail = child.tail
            jats.append(converted)
        elif child.tail:
            # Comments and processing instructions are dropped, their tail kept
            if len(jats):
                jats[-1].tail = (jats[-1].tail or "") + child.tail
            else:
                jats.text = (jats.text or "") + child.tail
    return jats


def abstract_xml(content: Union[str, etree._Element, Iterable[Union[str, etree._Element]], None]
                 ) -> Optional[etree._Element]:
    """
    Wrap abstract content in a ``jats:abstract`` element.

    Strings become ``jats:p`` paragraphs; elements (JATS markup rendered
    without a namespace, e.g. ``<p>``, ``<italic>``) are moved into the JATS
    namespace recursively. An element that already is a ``jats:abstract`` is
    returned as a copy.
    """
    if content is None:
        return None
    if isinstance(content, etree._Element):
        if content.tag == resolve_name("jats:abstract")[0]:
            return deepcopy(content)
        content = [content]
    elif isinstance(content, str):
        content = [content]

    children = []
    for part in content:
        if isinstance(part, str):
            if part.strip():
                children.append(element("jats:p", part.strip()))
        elif isinstance(part.tag, str):
            children.append(_to_jats(part))
    if not children:
        return None
    return element("jats:abstract", children)
