"""
Funding Encoder
===============

Resolves frontmatter awards against the affiliation table and encodes them
as a FundRef ``fr:program``.

An award that has no source, references an unknown affiliation, or whose
source has no name is excluded with a warning. Pass ``strict=True`` to
raise InvalidValueError instead.
"""

from typing import Iterable, List, Mapping, Optional, Sequence, Union
import logging

from lxml import etree

from deposit_core.exceptions import InvalidValueError
from deposit_core.frontmatter import Affiliation, Award, Funding
from deposit_core.identifiers import funder_doi_url, institution_id_url
from deposit_core.models import Fundref, FundingSource
from deposit_core.xml.builder import element

logger = logging.getLogger(__name__)


def _funding_source(source_id: str, table: Mapping[str, Affiliation]) -> FundingSource:
    affiliation = table.get(source_id)
    if affiliation is None:
        raise InvalidValueError(f'unable to find affiliation for id "{source_id}"')
    name = affiliation.display_name
    if not name:
        raise InvalidValueError(
            f'all award sources must have a name; no name for id "{source_id}"')
    identifiers = []
    if affiliation.doi:
        identifiers.append(funder_doi_url(affiliation.doi))
    if affiliation.ror:
        identifiers.append(institution_id_url("ror", affiliation.ror))
    return FundingSource(name=name, identifiers=identifiers)


def fundref_from_award(award: Award, table: Mapping[str, Affiliation]) -> Fundref:
    """
    Resolve one award.

    Raises:
        InvalidValueError: If the award cannot be resolved
    """
    if not award.sources:
        raise InvalidValueError("all awards must have a source")
    sources = [_funding_source(source_id, table) for source_id in award.sources]
    return Fundref(sources=sources, award_numbers=[award.id] if award.id else [])


def fundref_from_funding(funding: Union[Funding, Iterable[Funding], None],
                         affiliations: Union[Mapping[str, Affiliation],
                                             Sequence[Affiliation], None] = None,
                         strict: bool = False) -> Optional[List[Fundref]]:
    """
    Resolve all awards of one or more funding statements.

    Args:
        funding: Funding statement(s) from the frontmatter
        affiliations: Affiliation table the award sources point into
        strict: Raise on an unresolvable award instead of excluding it

    Returns:
        List of Fundref records, or None when there is no funding

    Raises:
        InvalidValueError: Only with ``strict=True``
    """
    if funding is None:
        return None
    if isinstance(funding, Funding):
        funding = [funding]
    if isinstance(affiliations, Mapping):
        table = dict(affiliations)
    else:
        table = {aff.id: aff for aff in affiliations or []}

    awards = [award for entry in funding for award in entry.awards]
    if not awards:
        return None

    fundrefs: List[Fundref] = []
    for award in awards:
        try:
            fundrefs.append(fundref_from_award(award, table))
        except InvalidValueError as e:
            if strict:
                raise
            logger.warning(f"Excluding award {award.id or '(no id)'}: {e}")
    logger.debug(f"Resolved {len(fundrefs)} of {len(awards)} award(s)")
    return fundrefs or None


def fundref_xml(fundrefs: Optional[Sequence[Fundref]]) -> Optional[etree._Element]:
    """
    Encode a ``fr:program`` with one ``fundgroup`` assertion per award.

    Each group lists ``funder_name`` assertions (the name as text followed
    by nested ``funder_identifier`` assertions), then ``award_number``
    assertions.

    Raises:
        InvalidValueError: If a record has no sources
    """
    if not fundrefs:
        return None
    groups = []
    for fundref in fundrefs:
        if not fundref.sources:
            raise InvalidValueError("Fundref entry must have at least one source")
        groups.append(element("fr:assertion", {"name": "fundgroup"}, [
            [
                element("fr:assertion", {"name": "funder_name"}, [
                    source.name,
                    [element("fr:assertion", {"name": "funder_identifier"}, identifier)
                     for identifier in source.identifiers],
                ])
                for source in fundref.sources
            ],
            [element("fr:assertion", {"name": "award_number"}, number)
             for number in fundref.award_numbers],
        ]))
    return element("fr:program", {"name": "fundref"}, groups)
