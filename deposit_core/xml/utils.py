"""
XML Utility Functions
=====================

Namespace-agnostic lookup and text helpers. Deposit documents come in more
than one schema version (and so more than one default namespace), so lookups
here always compare local names.
"""

from typing import Any, Iterator, List, Optional
import logging

from lxml import etree

logger = logging.getLogger(__name__)


def local_name(element: Any) -> str:
    """
    Extract local name from element tag, stripping any namespace prefix.

    Args:
        element: XML element

    Returns:
        Local tag name without namespace

    Example:
        >>> elem = etree.Element("{http://www.crossref.org/schema/5.3.1}doi")
        >>> local_name(elem)
        'doi'
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def child_elements(element: Any) -> List[Any]:
    """Return the element children of ``element``, skipping comments and PIs."""
    if element is None:
        return []
    return [child for child in element if isinstance(child.tag, str)]


def iter_descendants(root: Any, name: str) -> Iterator[Any]:
    """
    Iterate over descendants of ``root`` with a given local name.

    The root itself is not considered.
    """
    if root is None:
        return
    for elem in root.iterdescendants():
        if local_name(elem) == name:
            yield elem


def find_first(root: Any, name: str) -> Optional[Any]:
    """
    Find the first descendant (document order) with a given local name.

    Args:
        root: Element to search below
        name: Local name to find

    Returns:
        Matching element, or None
    """
    return next(iter_descendants(root, name), None)


def find_all(root: Any, name: str) -> List[Any]:
    """Find all descendants with a given local name."""
    return list(iter_descendants(root, name))


def text_content(element: Any) -> str:
    """
    Concatenate all text nodes below an element, joined by a single space.

    A missing element yields an empty string.
    """
    if element is None:
        return ""
    return " ".join(element.itertext())


def qualify_tree(root: Any, namespace: str) -> None:
    """
    Move every unqualified element below ``root`` into ``namespace``.

    Elements that already carry a namespace (``ai:``, ``jats:`` ...) are left
    untouched.

    Args:
        root: Root of the subtree (included)
        namespace: Target namespace URI
    """
    for elem in root.iter(etree.Element):
        tag = elem.tag
        if isinstance(tag, str) and not tag.startswith("{"):
            elem.tag = f"{{{namespace}}}{tag}"
