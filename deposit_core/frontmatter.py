"""
Frontmatter Records
===================

The external metadata record the adapters read from: title, people,
affiliations, license, DOI, dates, bibliographic and venue info, funding.

Records are normally built from a plain mapping (a YAML or JSON document)
with ``Frontmatter.from_dict``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union
import logging
import re

logger = logging.getLogger(__name__)

_CC_ID_RE = re.compile(r"^CC-(BY(?:-NC)?(?:-ND|-SA)?)-(\d\.\d)$", re.IGNORECASE)
_CC0_ID_RE = re.compile(r"^CC0-(\d\.\d)$", re.IGNORECASE)


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class Name:
    """A person's name in literal and parsed form."""
    literal: str = ""
    given: Optional[str] = None
    family: Optional[str] = None

    @classmethod
    def parse(cls, literal: str) -> 'Name':
        """
        Split a display name into given and family parts.

        ``"Family, Given"`` is split on the comma; otherwise the last token is
        the family name. The literal keeps the name as written.
        """
        literal = " ".join(literal.split())
        if "," in literal:
            family, given = [part.strip() for part in literal.split(",", 1)]
            return cls(literal=literal, given=given or None, family=family)
        parts = literal.rsplit(" ", 1)
        if len(parts) == 1:
            return cls(literal=literal, family=literal)
        return cls(literal=literal, given=parts[0], family=parts[1])

    @classmethod
    def from_value(cls, value: Union[str, Mapping[str, Any], None]) -> 'Name':
        """Create from a display string or a mapping with literal/given/family."""
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls.parse(value)
        given = value.get('given')
        family = value.get('family')
        literal = value.get('literal') or " ".join(p for p in (given, family) if p)
        if not family and literal:
            parsed = cls.parse(literal)
            return cls(literal=literal, given=given or parsed.given, family=parsed.family)
        return cls(literal=literal, given=given, family=family)


@dataclass
class Affiliation:
    """An institution a contributor belongs to, or a funder."""
    id: str
    name: Optional[str] = None
    institution: Optional[str] = None
    department: Optional[str] = None
    acronym: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    ror: Optional[str] = None
    isni: Optional[str] = None
    wikidata: Optional[str] = None
    doi: Optional[str] = None  # Funder registry DOI

    @property
    def display_name(self) -> Optional[str]:
        """Name to print: the affiliation name, else the institution name."""
        return self.name or self.institution

    @property
    def place(self) -> Optional[str]:
        """City, state and country joined with commas."""
        parts = [p for p in (self.city, self.state, self.country) if p]
        return ", ".join(parts) if parts else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Affiliation':
        """Create from dictionary; ``id`` falls back to the name."""
        known = {k: _as_str(data.get(k)) for k in (
            'name', 'institution', 'department', 'acronym', 'city', 'state',
            'country', 'ror', 'isni', 'wikidata', 'doi')}
        affiliation_id = _as_str(data.get('id')) or known['name'] or known['institution']
        if not affiliation_id:
            raise ValueError("Affiliation needs an id, name or institution")
        return cls(id=affiliation_id, **known)


@dataclass
class Contributor:
    """A person credited on a work."""
    name: Name = field(default_factory=Name)
    id: Optional[str] = None
    affiliations: List[str] = field(default_factory=list)  # Affiliation ids
    orcid: Optional[str] = None
    email: Optional[str] = None
    equal_contributor: bool = False
    corresponding: bool = False

    @classmethod
    def from_value(cls, value: Union[str, Mapping[str, Any]],
                   affiliations: Optional[List[Affiliation]] = None) -> 'Contributor':
        """
        Create from a display name or a mapping.

        Inline affiliation mappings are appended to ``affiliations`` (when
        given) and referenced by id.
        """
        if isinstance(value, str):
            return cls(name=Name.parse(value))

        refs: List[str] = []
        for aff in value.get('affiliations') or []:
            if isinstance(aff, Mapping):
                record = Affiliation.from_dict(aff)
                if affiliations is not None and all(a.id != record.id for a in affiliations):
                    affiliations.append(record)
                refs.append(record.id)
            else:
                refs.append(str(aff))

        return cls(
            name=Name.from_value(value.get('name')),
            id=_as_str(value.get('id')),
            affiliations=refs,
            orcid=_as_str(value.get('orcid')),
            email=_as_str(value.get('email')),
            equal_contributor=bool(value.get('equal_contributor', False)),
            corresponding=bool(value.get('corresponding', False)),
        )


def creative_commons_url(license_id: str) -> Optional[str]:
    """Canonical URL for a Creative Commons SPDX id, or None."""
    match = _CC_ID_RE.match(license_id)
    if match:
        return f"https://creativecommons.org/licenses/{match.group(1).lower()}/{match.group(2)}/"
    match = _CC0_ID_RE.match(license_id)
    if match:
        return f"https://creativecommons.org/publicdomain/zero/{match.group(1)}/"
    return None


@dataclass
class License:
    """A license descriptor."""
    id: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None
    cc: bool = False

    @classmethod
    def from_value(cls, value: Union[str, Mapping[str, Any], None]) -> Optional['License']:
        """Create from an SPDX id string or a mapping."""
        if value is None:
            return None
        if isinstance(value, str):
            url = creative_commons_url(value)
            return cls(id=value, url=url, cc=url is not None)
        license_id = _as_str(value.get('id'))
        url = _as_str(value.get('url'))
        cc = value.get('CC', value.get('cc'))
        if cc is None:
            cc = bool(license_id and creative_commons_url(license_id)) or bool(
                url and "creativecommons.org" in url)
        if not url and license_id:
            url = creative_commons_url(license_id)
        return cls(id=license_id, url=url, name=_as_str(value.get('name')), cc=bool(cc))


@dataclass
class Licenses:
    """Content and code licenses."""
    content: Optional[License] = None
    code: Optional[License] = None

    @classmethod
    def from_value(cls, value: Any) -> Optional['Licenses']:
        """A bare license applies to content; a mapping may split content/code."""
        if value is None:
            return None
        if isinstance(value, Mapping) and ('content' in value or 'code' in value):
            return cls(content=License.from_value(value.get('content')),
                       code=License.from_value(value.get('code')))
        return cls(content=License.from_value(value))


@dataclass
class Biblio:
    """Volume, issue and page information."""
    volume: Optional[str] = None
    issue: Optional[str] = None
    first_page: Optional[str] = None
    last_page: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Biblio':
        """Create from dictionary; numbers are kept as strings."""
        return cls(**{k: _as_str(data.get(k)) for k in
                      ('volume', 'issue', 'first_page', 'last_page')})


@dataclass
class Venue:
    """The journal or conference a work appears in."""
    title: Optional[str] = None
    short_title: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    issn: Optional[str] = None

    @classmethod
    def from_value(cls, value: Union[str, Mapping[str, Any], None]) -> Optional['Venue']:
        """Create from a title string or a mapping."""
        if value is None:
            return None
        if isinstance(value, str):
            return cls(title=value)
        return cls(**{k: _as_str(value.get(k)) for k in
                      ('title', 'short_title', 'doi', 'url', 'issn')})


@dataclass
class Award:
    """A grant: its number and the affiliation ids that fund it."""
    id: Optional[str] = None
    name: Optional[str] = None
    sources: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Award':
        """Create from dictionary; a single ``source`` is accepted."""
        sources = data.get('sources')
        if sources is None and data.get('source') is not None:
            sources = [data['source']]
        return cls(id=_as_str(data.get('id')), name=_as_str(data.get('name')),
                   sources=[str(s) for s in sources or []])


@dataclass
class Funding:
    """A funding statement with its awards."""
    statement: Optional[str] = None
    awards: List[Award] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Funding':
        """Create from dictionary."""
        return cls(statement=_as_str(data.get('statement')),
                   awards=[Award.from_dict(a) for a in data.get('awards') or []])


@dataclass
class Frontmatter:
    """
    Document metadata as supplied by the content collaborator.

    Example:
        fm = Frontmatter.from_dict(yaml.safe_load(path.read_text()))
        fm.authors[0].name.literal
    """
    title: Optional[str] = None
    subtitle: Optional[str] = None
    authors: List[Contributor] = field(default_factory=list)
    editors: List[str] = field(default_factory=list)  # Ids into contributors
    contributors: List[Contributor] = field(default_factory=list)
    affiliations: List[Affiliation] = field(default_factory=list)
    license: Optional[Licenses] = None
    doi: Optional[str] = None
    date: Optional[str] = None
    biblio: Optional[Biblio] = None
    venue: Optional[Venue] = None
    funding: List[Funding] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Frontmatter':
        """Create from dictionary (e.g. a parsed YAML metadata file)."""
        affiliations = [Affiliation.from_dict(a) for a in data.get('affiliations') or []]
        authors = [Contributor.from_value(a, affiliations) for a in data.get('authors') or []]
        contributors = [Contributor.from_value(c, affiliations)
                        for c in data.get('contributors') or []]

        editors = data.get('editors') or []
        if isinstance(editors, str):
            editors = [editors]

        funding = data.get('funding') or []
        if isinstance(funding, Mapping):
            funding = [funding]

        biblio = data.get('biblio')
        date = data.get('date')

        return cls(
            title=_as_str(data.get('title')),
            subtitle=_as_str(data.get('subtitle')),
            authors=authors,
            editors=[str(e) for e in editors],
            contributors=contributors,
            affiliations=affiliations,
            license=Licenses.from_value(data.get('license')),
            doi=_as_str(data.get('doi')),
            date=_as_str(date),
            biblio=Biblio.from_dict(biblio) if biblio else None,
            venue=Venue.from_value(data.get('venue')),
            funding=[Funding.from_dict(f) for f in funding],
            keywords=[str(k) for k in data.get('keywords') or []],
        )

    def affiliation_table(self) -> Dict[str, Affiliation]:
        """Affiliations keyed by id."""
        return {aff.id: aff for aff in self.affiliations}
