"""
Identifier Helpers
==================

DOI normalization, persistent-identifier URL normalization and DOI
generation for registrant prefixes.
"""

import re
import secrets
from typing import List, Mapping, Optional
from urllib.parse import unquote
import logging

from deposit_core.config.prefixes import DOI_PREFIXES, DEFAULT_PREFIX_KEY

logger = logging.getLogger(__name__)

_DOI_RE = re.compile(r"(10\.\d{4,9}/\S+)")

# Letters that look like digits were dropped: 0 not O/Q, 1 not I/L, 2 not Z, 5 not S, 8 not B
DOI_SUFFIX_ALPHA = "ACDEFGHJKMNPRTUVWXY"
DOI_SUFFIX_DIGITS = "0123456789"

ORCID_BASE_URL = "https://orcid.org/"
INSTITUTION_ID_BASE_URLS = {
    "ror": "https://ror.org/",
    "isni": "https://isni.org/isni/",
    "wikidata": "https://www.wikidata.org/wiki/",
}


def normalize_doi(value: Optional[str]) -> Optional[str]:
    """
    Reduce a DOI, DOI URL or ``doi:`` string to the bare DOI.

    Args:
        value: Raw DOI in any common notation

    Returns:
        Bare DOI (e.g. ``10.25080/abcd-1234``), or None if no DOI is found

    Example:
        >>> normalize_doi("https://doi.org/10.5281/zenodo.1234")
        '10.5281/zenodo.1234'
    """
    if not value:
        return None
    text = unquote(str(value).strip())
    for prefix in ("https://doi.org/", "http://doi.org/",
                   "https://dx.doi.org/", "http://dx.doi.org/"):
        if text.lower().startswith(prefix):
            text = text[len(prefix):]
            break
    if text.lower().startswith("doi:"):
        text = text[4:].strip()
    match = _DOI_RE.search(text)
    if not match:
        return None
    return match.group(1)


def is_url(value: str) -> bool:
    """Whether a string already is an absolute http(s) URL."""
    return value.startswith("http://") or value.startswith("https://")


def orcid_url(orcid: str) -> str:
    """Absolute ORCID URL for a bare ORCID iD (URLs pass through)."""
    orcid = orcid.strip()
    if is_url(orcid):
        return orcid
    return f"{ORCID_BASE_URL}{orcid}"


def institution_id_url(scheme: str, identifier: str) -> str:
    """
    Absolute URL for an institutional identifier.

    Args:
        scheme: ``ror``, ``isni`` or ``wikidata``
        identifier: Bare identifier or URL

    Returns:
        URL form of the identifier

    Raises:
        ValueError: If the scheme is unknown
    """
    identifier = identifier.strip()
    if is_url(identifier):
        return identifier
    base = INSTITUTION_ID_BASE_URLS.get(scheme)
    if base is None:
        raise ValueError(f"Unknown institution identifier scheme: {scheme}")
    if scheme == "isni":
        identifier = identifier.replace(" ", "")
    return f"{base}{identifier}"


def funder_doi_url(doi: str) -> str:
    """Funder identifiers are written as resolvable DOI URLs."""
    doi = doi.strip()
    if is_url(doi):
        return doi
    return f"https://doi.org/{normalize_doi(doi) or doi}"


def resolve_prefix(prefix: Optional[str] = None,
                   prefixes: Mapping[str, str] = DOI_PREFIXES) -> str:
    """
    Resolve a short organization key to its DOI prefix.

    Values that are not keys of ``prefixes`` are treated as literal prefixes.
    """
    key = prefix or DEFAULT_PREFIX_KEY
    return prefixes.get(key, key)


def generate_doi(prefix: Optional[str] = None,
                 prefixes: Mapping[str, str] = DOI_PREFIXES) -> str:
    """
    Generate a new random DOI under a registrant prefix.

    Args:
        prefix: Short organization key (``scipy``) or literal prefix (``10.25080``)
        prefixes: Prefix lookup table

    Returns:
        DOI such as ``10.62329/FXKT4821``
    """
    letters = "".join(secrets.choice(DOI_SUFFIX_ALPHA) for _ in range(4))
    digits = "".join(secrets.choice(DOI_SUFFIX_DIGITS) for _ in range(4))
    return f"{resolve_prefix(prefix, prefixes)}/{letters}{digits}"


def generate_dois(count: int, prefix: Optional[str] = None,
                  prefixes: Mapping[str, str] = DOI_PREFIXES) -> List[str]:
    """Generate ``count`` distinct DOIs under one prefix."""
    dois: List[str] = []
    while len(dois) < count:
        doi = generate_doi(prefix, prefixes)
        if doi not in dois:
            dois.append(doi)
    logger.debug(f"Generated {len(dois)} DOI(s) under {resolve_prefix(prefix, prefixes)}")
    return dois
