"""
Encoders
========

Turn option records into deposit XML fragments.

Components:
- dates: publication/posted dates
- doi: doi_data, citation list, license, pages, titles, abstract
- contributors: contributor blocks with sequence and affiliations
- funding: FundRef program
- preprint, journal, conference, dataset: document-type blocks
"""

from deposit_core.encoders.dates import (
    date_xml,
    parse_date,
    publication_date_xml,
)

from deposit_core.encoders.doi import (
    abstract_xml,
    citation_list_xml,
    doi_data_xml,
    license_xml,
    pages_xml,
    titles_xml,
)

from deposit_core.encoders.contributors import (
    assign_sequences,
    contributor_xml,
    contributors_xml,
    editors_xml,
)

from deposit_core.encoders.funding import (
    fundref_from_funding,
    fundref_xml,
)

from deposit_core.encoders.preprint import preprint_xml

from deposit_core.encoders.journal import (
    journal_article_xml,
    journal_issue_xml,
    journal_metadata_xml,
    journal_xml,
)

from deposit_core.encoders.conference import (
    conference_paper_xml,
    conference_xml,
    event_metadata_xml,
    proceedings_xml,
)

from deposit_core.encoders.dataset import (
    database_xml,
    dataset_xml,
)

__all__ = [
    # Scalars
    "date_xml",
    "parse_date",
    "publication_date_xml",
    "abstract_xml",
    "citation_list_xml",
    "doi_data_xml",
    "license_xml",
    "pages_xml",
    "titles_xml",
    # People and funding
    "assign_sequences",
    "contributor_xml",
    "contributors_xml",
    "editors_xml",
    "fundref_from_funding",
    "fundref_xml",
    # Document types
    "preprint_xml",
    "journal_article_xml",
    "journal_issue_xml",
    "journal_metadata_xml",
    "journal_xml",
    "conference_paper_xml",
    "conference_xml",
    "event_metadata_xml",
    "proceedings_xml",
    "database_xml",
    "dataset_xml",
]
