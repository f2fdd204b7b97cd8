"""
Contributor Encoder
===================

Builds ``contributors`` blocks from people and an affiliation table.

Sequence rule: the first person is always ``first``; after that ``first``
continues only through an unbroken run of people flagged as equal
contributors. Everyone else is ``additional``.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Union
import logging

from lxml import etree

from deposit_core.config.schemas import SchemaVersion, get_schema_version
from deposit_core.exceptions import InvalidValueError
from deposit_core.frontmatter import Affiliation, Contributor
from deposit_core.identifiers import institution_id_url, orcid_url
from deposit_core.xml.builder import element

logger = logging.getLogger(__name__)

SEQUENCE_FIRST = "first"
SEQUENCE_ADDITIONAL = "additional"

CONTRIBUTOR_ROLES = (
    "author",
    "editor",
    "chair",
    "reviewer",
    "review-assistant",
    "stats-reviewer",
    "reviewer-external",
    "reader",
    "translator",
)

INSTITUTION_ID_SCHEMES = ("ror", "isni", "wikidata")

AffiliationTable = Union[Mapping[str, Affiliation], Sequence[Affiliation], None]


def _as_table(affiliations: AffiliationTable) -> Dict[str, Affiliation]:
    if affiliations is None:
        return {}
    if isinstance(affiliations, Mapping):
        return dict(affiliations)
    return {aff.id: aff for aff in affiliations}


def assign_sequences(people: Sequence[Contributor]) -> List[str]:
    """
    Compute the ``sequence`` attribute for each person, in order.

    Example:
        >>> a, b, c = (Contributor(equal_contributor=True),
        ...            Contributor(equal_contributor=True), Contributor())
        >>> assign_sequences([a, b, c])
        ['first', 'first', 'additional']
    """
    sequences: List[str] = []
    still_first = True
    for index, person in enumerate(people):
        if index > 0:
            still_first = still_first and bool(person.equal_contributor)
        sequences.append(SEQUENCE_FIRST if still_first else SEQUENCE_ADDITIONAL)
    return sequences


def resolve_affiliations(person: Contributor,
                         affiliations: AffiliationTable) -> List[Affiliation]:
    """
    Look up a person's affiliation ids.

    Raises:
        InvalidValueError: If an id is not in the table
    """
    table = _as_table(affiliations)
    resolved = []
    for ref in person.affiliations:
        aff = table.get(ref)
        if aff is None:
            raise InvalidValueError(f'unable to find affiliation for id "{ref}"')
        resolved.append(aff)
    return resolved


def institution_xml(aff: Affiliation) -> Optional[etree._Element]:
    """
    Encode one ``institution``; None when it has neither a name nor an id.
    """
    ids = [
        element("institution_id", {"type": scheme},
                institution_id_url(scheme, getattr(aff, scheme)))
        for scheme in INSTITUTION_ID_SCHEMES
        if getattr(aff, scheme)
    ]
    name = aff.display_name
    if not name and not ids:
        logger.debug(f"Skipping affiliation {aff.id}: no name or identifier")
        return None
    return element("institution", [
        element("institution_name", name) if name else None,
        ids,
        element("institution_acronym", aff.acronym) if aff.acronym else None,
        element("institution_place", aff.place) if aff.place else None,
        element("institution_department", aff.department) if aff.department else None,
    ])


def affiliations_xml(affiliations: Sequence[Affiliation],
                     schema: SchemaVersion) -> List[etree._Element]:
    """
    Encode a person's affiliations for the given schema version.

    Newer schemas get one ``affiliations`` block of ``institution`` entries;
    older ones get one plain ``affiliation`` per entry.
    """
    if schema.structured_affiliations:
        institutions = [inst for inst in (institution_xml(a) for a in affiliations)
                        if inst is not None]
        return [element("affiliations", institutions)] if institutions else []
    return [element("affiliation", a.display_name) for a in affiliations if a.display_name]


def contributor_xml(person: Contributor,
                    sequence: str,
                    contributor_role: str = "author",
                    affiliations: Sequence[Affiliation] = (),
                    schema: Optional[SchemaVersion] = None) -> etree._Element:
    """
    Encode one ``person_name``.

    Args:
        person: The contributor
        sequence: ``first`` or ``additional``
        contributor_role: One of ``CONTRIBUTOR_ROLES``
        affiliations: The person's resolved affiliations
        schema: Schema version (default version when None)

    Returns:
        person_name element

    Raises:
        InvalidValueError: On an unknown role or sequence
    """
    if contributor_role not in CONTRIBUTOR_ROLES:
        raise InvalidValueError(f"Unknown contributor role: {contributor_role}")
    if sequence not in (SEQUENCE_FIRST, SEQUENCE_ADDITIONAL):
        raise InvalidValueError(f"Unknown contributor sequence: {sequence}")
    schema = schema or get_schema_version()

    name = person.name
    surname = name.family or name.literal
    if not surname:
        raise InvalidValueError("Contributor must have a name")

    return element("person_name", {"sequence": sequence,
                                   "contributor_role": contributor_role}, [
        element("given_name", name.given) if name.given else None,
        element("surname", surname),
        affiliations_xml(affiliations, schema),
        element("ORCID", orcid_url(person.orcid)) if person.orcid else None,
        element("alt-name", [element("string-name", name.literal)]) if name.literal else None,
    ])


def contributors_xml(people: Sequence[Contributor],
                     affiliations: AffiliationTable = None,
                     contributor_role: str = "author",
                     schema: Optional[SchemaVersion] = None) -> Optional[etree._Element]:
    """
    Encode a ``contributors`` block.

    Args:
        people: Ordered contributors
        affiliations: Affiliation table (list or id mapping)
        contributor_role: Role applied to every person
        schema: Schema version

    Returns:
        contributors element, or None when there are no people
    """
    if not people:
        return None
    table = _as_table(affiliations)
    sequences = assign_sequences(people)
    return element("contributors", [
        contributor_xml(person, sequence, contributor_role,
                        resolve_affiliations(person, table), schema)
        for person, sequence in zip(people, sequences)
    ])


def editors_xml(editor_ids: Sequence[str],
                contributors: Sequence[Contributor],
                affiliations: AffiliationTable = None,
                schema: Optional[SchemaVersion] = None) -> Optional[etree._Element]:
    """
    Encode an editor-only ``contributors`` block.

    Editor ids are resolved against the ``id`` of each entry in
    ``contributors``.

    Raises:
        InvalidValueError: If an editor id is not found
    """
    if not editor_ids:
        return None
    by_id = {person.id: person for person in contributors if person.id}
    editors = []
    for editor_id in editor_ids:
        person = by_id.get(editor_id)
        if person is None:
            raise InvalidValueError(f'unable to find contributor for editor id "{editor_id}"')
        editors.append(person)
    return contributors_xml(editors, affiliations, contributor_role="editor", schema=schema)
