"""
Schema Versions
===============

Everything that differs between supported Crossref schema versions lives in
this table: the default namespace, the extra namespace declarations on the
root element, the ``xsi:schemaLocation`` value and the structural deltas the
encoders need to know about.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from deposit_core.xml.builder import NAMESPACES

DEFAULT_SCHEMA_VERSION = "5.3.1"


@dataclass(frozen=True)
class SchemaVersion:
    """
    Fixed description of one deposit schema version.

    Attributes:
        version: Version string written to ``doi_batch/@version``
        namespace: Default namespace of the deposit document
        schema_location: Value of ``xsi:schemaLocation``
        prefixes: Extra namespace prefixes declared on the root
        xsd_filename: Name of the XSD file in a local schema cache
        supports_series: Whether ``proceedings_series_metadata`` exists
        structured_affiliations: Whether contributors use
            ``affiliations/institution`` instead of plain ``affiliation``
    """
    version: str
    namespace: str
    schema_location: str
    prefixes: Tuple[str, ...]
    xsd_filename: str
    supports_series: bool = False
    structured_affiliations: bool = False

    @property
    def nsmap(self) -> dict:
        """Namespace map for the root element (default namespace under None)."""
        nsmap = {None: self.namespace}
        for prefix in self.prefixes:
            nsmap[prefix] = NAMESPACES[prefix]
        return nsmap


SCHEMA_VERSIONS: Mapping[str, SchemaVersion] = MappingProxyType({
    "4.4.2": SchemaVersion(
        version="4.4.2",
        namespace="http://www.crossref.org/schema/4.4.2",
        schema_location=(
            "http://www.crossref.org/schema/4.4.2 "
            "http://www.crossref.org/schemas/crossref4.4.2.xsd"
        ),
        prefixes=("xsi", "jats", "ai"),
        xsd_filename="crossref4.4.2.xsd",
    ),
    "5.3.1": SchemaVersion(
        version="5.3.1",
        namespace="http://www.crossref.org/schema/5.3.1",
        schema_location=(
            "http://www.crossref.org/schema/5.3.1 "
            "https://www.crossref.org/schemas/crossref5.3.1.xsd"
        ),
        prefixes=("xsi", "jats", "ai", "mml", "fr"),
        xsd_filename="crossref5.3.1.xsd",
        supports_series=True,
        structured_affiliations=True,
    ),
})


def get_schema_version(version: Optional[str] = None) -> SchemaVersion:
    """
    Look up a supported schema version.

    Args:
        version: Version string; None selects ``DEFAULT_SCHEMA_VERSION``

    Returns:
        SchemaVersion entry

    Raises:
        ValueError: If the version is not supported
    """
    key = version or DEFAULT_SCHEMA_VERSION
    try:
        return SCHEMA_VERSIONS[key]
    except KeyError:
        supported = ", ".join(sorted(SCHEMA_VERSIONS))
        raise ValueError(
            f"Unsupported schema version: {key} (supported: {supported})"
        ) from None
