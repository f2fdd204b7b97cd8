"""
Deposit Core Library
====================

Encode bibliographic metadata as Crossref deposit XML and decode deposits
back into read-only records:

- Tree building and namespace handling on top of lxml
- Date, DOI, contributor and funding encoders
- Preprint, journal, conference and dataset encoders
- Batch envelope assembly for schema 4.4.2 and 5.3.1
- Best-effort decoding of deposit documents
- XSD validation against a local schema cache

Architecture
------------

    deposit_core/
    ├── xml/           - Element builder and local-name lookup helpers
    ├── config/        - Settings, schema-version table, DOI prefixes
    ├── encoders/      - Metadata -> XML fragments, per document type
    ├── adapters/      - Frontmatter -> encoder option records
    ├── validation/    - XSD and xmllint validators
    ├── batch.py       - doi_batch envelope
    └── reader.py      - Deposit decoding

Usage
-----

    from deposit_core import (
        BatchOptions, Depositor, DoiBatch, DoiBatchReader, Frontmatter,
        preprint_from_frontmatter, preprint_xml,
    )

    fm = Frontmatter.from_dict(yaml.safe_load(path.read_text()))
    body = preprint_xml(preprint_from_frontmatter(fm))
    batch = DoiBatch(BatchOptions(id="batch-1",
                                  depositor=Depositor("Curvenote", "doi@curvenote.com")),
                     body)
    xml = batch.to_xml()

    reader = DoiBatchReader(xml)
    reader.get_head().id        # "batch-1"
    reader.get_entries()[0]     # DecodedWork(type="posted_content", ...)

"""

__version__ = "1.0.0"
__author__ = "Curvenote"

from deposit_core.exceptions import (
    DepositError,
    MissingFieldError,
    InvalidValueError,
    ConflictingValueError,
)

from deposit_core.models import (
    BatchOptions,
    ConferenceEvent,
    ConferenceOptions,
    ConferencePaper,
    DatabaseOptions,
    DatasetDates,
    DatasetMetadata,
    Depositor,
    DoiData,
    Fundref,
    FundingSource,
    JournalArticle,
    JournalIssue,
    JournalMetadata,
    Pages,
    Preprint,
    Proceedings,
    ProceedingsSeries,
    PublicationDate,
    Relation,
    Titles,
)

from deposit_core.frontmatter import Frontmatter

from deposit_core.encoders import (
    conference_paper_xml,
    conference_xml,
    contributors_xml,
    database_xml,
    dataset_xml,
    fundref_xml,
    journal_article_xml,
    journal_xml,
    preprint_xml,
    publication_date_xml,
)

from deposit_core.adapters import (
    conference_paper_from_frontmatter,
    dataset_from_frontmatter,
    journal_article_from_frontmatter,
    journal_metadata_from_frontmatters,
    preprint_from_frontmatter,
)

from deposit_core.batch import DoiBatch

from deposit_core.reader import (
    BatchHead,
    DecodedEvent,
    DecodedSeries,
    DecodedWork,
    DoiBatchReader,
    OpaqueEntry,
)

from deposit_core.identifiers import generate_doi, normalize_doi

__all__ = [
    # Version
    "__version__",
    # Errors
    "DepositError",
    "MissingFieldError",
    "InvalidValueError",
    "ConflictingValueError",
    # Records
    "BatchOptions",
    "ConferenceEvent",
    "ConferenceOptions",
    "ConferencePaper",
    "DatabaseOptions",
    "DatasetDates",
    "DatasetMetadata",
    "Depositor",
    "DoiData",
    "Fundref",
    "FundingSource",
    "JournalArticle",
    "JournalIssue",
    "JournalMetadata",
    "Pages",
    "Preprint",
    "Proceedings",
    "ProceedingsSeries",
    "PublicationDate",
    "Relation",
    "Titles",
    "Frontmatter",
    # Encoders
    "conference_paper_xml",
    "conference_xml",
    "contributors_xml",
    "database_xml",
    "dataset_xml",
    "fundref_xml",
    "journal_article_xml",
    "journal_xml",
    "preprint_xml",
    "publication_date_xml",
    # Adapters
    "conference_paper_from_frontmatter",
    "dataset_from_frontmatter",
    "journal_article_from_frontmatter",
    "journal_metadata_from_frontmatters",
    "preprint_from_frontmatter",
    # Batch and reader
    "DoiBatch",
    "BatchHead",
    "DecodedEvent",
    "DecodedSeries",
    "DecodedWork",
    "DoiBatchReader",
    "OpaqueEntry",
    # Identifiers
    "generate_doi",
    "normalize_doi",
]
