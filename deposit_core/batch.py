"""
Batch Assembler
===============

Wraps encoded document blocks in a ``doi_batch`` envelope.

The root carries the namespace declarations, ``version`` and
``xsi:schemaLocation`` of the selected schema version. Body fragments are
deep-copied and moved into the schema's default namespace, so the caller's
fragments are never modified and assembling the same inputs twice gives the
same text.

Usage:
    batch = DoiBatch(BatchOptions(id="batch-1", timestamp=1659353793,
                                  depositor=Depositor("Curvenote", "doi@curvenote.com")),
                     preprint_xml(preprint))
    xml = batch.to_xml()
"""

from copy import deepcopy
from typing import Optional, Sequence, Union
import logging
import time

from lxml import etree

from deposit_core.config.schemas import SchemaVersion, get_schema_version
from deposit_core.config.settings import DEFAULT_REGISTRANT
from deposit_core.models import BatchOptions
from deposit_core.xml.builder import XSI_NS, to_xml
from deposit_core.xml.utils import find_first, qualify_tree

logger = logging.getLogger(__name__)

Body = Union[etree._Element, Sequence[etree._Element], None]


class DoiBatch:
    """
    A deposit batch: envelope, header and body.

    Attributes:
        options: Envelope fields
        schema: Schema version the batch is written for
        tree: Root ``doi_batch`` element
    """

    def __init__(self, options: BatchOptions, body: Body = None,
                 schema_version: Union[str, SchemaVersion, None] = None):
        """
        Assemble the batch.

        Args:
            options: Batch id, depositor and optional timestamp/registrant
            body: One element or a list of elements for the body
            schema_version: Version string or SchemaVersion (default 5.3.1)

        Raises:
            ValueError: If the schema version is not supported
        """
        if isinstance(schema_version, SchemaVersion):
            self.schema = schema_version
        else:
            self.schema = get_schema_version(schema_version)
        self.options = options
        self.timestamp = options.timestamp if options.timestamp is not None else int(time.time())
        self.registrant = options.registrant or DEFAULT_REGISTRANT
        self.tree = self._build(body)

    def _qname(self, local: str) -> str:
        return f"{{{self.schema.namespace}}}{local}"

    def _build(self, body: Body) -> etree._Element:
        schema = self.schema
        root = etree.Element(self._qname("doi_batch"), nsmap=schema.nsmap)
        root.set("version", schema.version)
        root.set(f"{{{XSI_NS}}}schemaLocation", schema.schema_location)

        head = etree.SubElement(root, self._qname("head"))
        etree.SubElement(head, self._qname("doi_batch_id")).text = str(self.options.id)
        etree.SubElement(head, self._qname("timestamp")).text = str(int(self.timestamp))
        depositor = etree.SubElement(head, self._qname("depositor"))
        etree.SubElement(depositor, self._qname("depositor_name")).text = self.options.depositor.name
        etree.SubElement(depositor, self._qname("email_address")).text = self.options.depositor.email
        etree.SubElement(head, self._qname("registrant")).text = self.registrant

        body_element = etree.SubElement(root, self._qname("body"))
        if body is None:
            fragments = []
        elif isinstance(body, etree._Element):
            fragments = [body]
        else:
            fragments = list(body)
        for fragment in fragments:
            body_element.append(deepcopy(fragment))
        # Qualify after attaching so the root's default namespace is reused
        qualify_tree(body_element, schema.namespace)
        etree.cleanup_namespaces(root, keep_ns_prefixes=list(schema.prefixes))

        logger.debug(f"Assembled batch {self.options.id} (schema {schema.version}, "
                     f"{len(fragments)} body fragment(s))")
        return root

    @property
    def body(self) -> Optional[etree._Element]:
        """The ``body`` element of the batch."""
        return find_first(self.tree, "body")

    def to_xml(self, pretty: bool = False, xml_declaration: bool = False) -> str:
        """Serialize the batch."""
        return to_xml(self.tree, pretty=pretty, xml_declaration=xml_declaration)
