"""
Tree Builder
============

Minimal constructor for lxml elements used by every encoder.

``element()`` accepts ``None`` (or ``False`` / ``""``) placeholders in its
children list and drops them before attaching, so encoders can write
conditional children inline:

    element("pages", [
        element("first_page", "1"),
        element("last_page", last) if last else None,
    ])

Prefixed names (``ai:program``, ``jats:p``) are resolved through the fixed
``NAMESPACES`` table; unprefixed names are created without a namespace and
qualified later by the batch assembler.
"""

from copy import deepcopy
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple, Union
import logging

from lxml import etree

logger = logging.getLogger(__name__)

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
JATS_NS = "http://www.ncbi.nlm.nih.gov/JATS1"
AI_NS = "http://www.crossref.org/AccessIndicators.xsd"
FR_NS = "http://www.crossref.org/fundref.xsd"
MML_NS = "http://www.w3.org/1998/Math/MathML"
XLINK_NS = "http://www.w3.org/1999/xlink"
REL_NS = "http://www.crossref.org/relations.xsd"

NAMESPACES: Mapping[str, str] = MappingProxyType({
    "xsi": XSI_NS,
    "jats": JATS_NS,
    "ai": AI_NS,
    "fr": FR_NS,
    "mml": MML_NS,
    "xlink": XLINK_NS,
    "rel": REL_NS,
})

Children = Union[None, str, Iterable[Any]]


def resolve_name(name: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Resolve a possibly prefixed name to Clark notation.

    Args:
        name: Tag or attribute name, e.g. ``"ai:program"`` or ``"doi"``

    Returns:
        Tuple of (qualified name, prefix, namespace URI); prefix and URI are
        None for unprefixed names and names already in Clark notation

    Raises:
        ValueError: If the prefix is not in ``NAMESPACES``
    """
    if ":" not in name or name.startswith("{"):
        return name, None, None
    prefix, local = name.split(":", 1)
    uri = NAMESPACES.get(prefix)
    if uri is None:
        raise ValueError(f"Unknown namespace prefix '{prefix}' in '{name}'")
    return f"{{{uri}}}{local}", prefix, uri


def _is_placeholder(child: Any) -> bool:
    return child is None or child is False or (isinstance(child, str) and not child)


def _iter_children(children: Iterable[Any]):
    for child in children:
        if isinstance(child, (list, tuple)):
            yield from _iter_children(child)
        elif not _is_placeholder(child):
            yield child


def _append_text(node: etree._Element, value: str) -> None:
    if len(node):
        last = node[-1]
        last.tail = (last.tail or "") + value
    else:
        node.text = (node.text or "") + value


def element(name: str,
            attributes: Union[Mapping[str, Any], Children] = None,
            children: Children = None) -> etree._Element:
    """
    Create an element with attributes and children.

    ``attributes`` may be omitted: ``element("title", "Some title")`` and
    ``element("titles", [child])`` both work.

    Args:
        name: Element name, optionally prefixed
        attributes: Attribute mapping; entries with a None value are skipped
        children: A string (single text child) or an ordered list of elements,
            strings and placeholders

    Returns:
        New lxml Element
    """
    if children is None and attributes is not None and not isinstance(attributes, Mapping):
        children, attributes = attributes, None

    tag, prefix, uri = resolve_name(name)
    nsmap = {prefix: uri} if prefix else {}

    attrib = {}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        attr_name, attr_prefix, attr_uri = resolve_name(key)
        if attr_prefix:
            nsmap[attr_prefix] = attr_uri
        attrib[attr_name] = str(value)

    node = etree.Element(tag, attrib=attrib, nsmap=nsmap or None)

    if children is None:
        return node
    if isinstance(children, str):
        node.text = children
        return node

    for child in _iter_children(children):
        if isinstance(child, str):
            _append_text(node, child)
        elif isinstance(child, etree._Element):
            # lxml moves elements on append, so attached ones are copied
            node.append(deepcopy(child) if child.getparent() is not None else child)
        else:
            raise TypeError(f"Unsupported child for <{name}>: {type(child).__name__}")
    return node


def to_xml(node: etree._Element, pretty: bool = False,
           xml_declaration: bool = False) -> str:
    """
    Serialize an element to text.

    Args:
        node: Element to serialize
        pretty: Indent the output
        xml_declaration: Prepend an ``<?xml ...?>`` declaration

    Returns:
        XML string
    """
    if xml_declaration:
        data = etree.tostring(node, encoding="UTF-8", xml_declaration=True,
                              pretty_print=pretty)
        return data.decode("utf-8")
    return etree.tostring(node, encoding="unicode", pretty_print=pretty)
