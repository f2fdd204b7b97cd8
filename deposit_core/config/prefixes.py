"""
Registrant DOI prefixes, keyed by short organization name.
"""

from types import MappingProxyType
from typing import Mapping

DEFAULT_PREFIX_KEY = "curvenote"

DOI_PREFIXES: Mapping[str, str] = MappingProxyType({
    "curvenote": "10.62329",
    "msa": "10.69761",
    "scipy": "10.25080",
    "physiome": "10.36903",
})
