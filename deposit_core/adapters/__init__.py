"""
Frontmatter Adapters
====================

Convert frontmatter records into encoder option records.
"""

from deposit_core.adapters.frontmatter import (
    citations_from_references,
    conference_paper_from_frontmatter,
    contributors_from_frontmatter,
    dataset_from_frontmatter,
    doi_data_for,
    journal_article_from_frontmatter,
    journal_metadata_from_frontmatters,
    license_url,
    preprint_from_frontmatter,
)

__all__ = [
    "citations_from_references",
    "conference_paper_from_frontmatter",
    "contributors_from_frontmatter",
    "dataset_from_frontmatter",
    "doi_data_for",
    "journal_article_from_frontmatter",
    "journal_metadata_from_frontmatters",
    "license_url",
    "preprint_from_frontmatter",
]
