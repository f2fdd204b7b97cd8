"""
Dataset Encoders
================

``dataset`` records and the ``database`` container that holds them.
"""

from typing import Iterable, Optional, Sequence, Union
import logging

from lxml import etree

from deposit_core.encoders.dates import date_xml
from deposit_core.encoders.doi import citation_list_xml, doi_data_xml, titles_xml
from deposit_core.exceptions import InvalidValueError, MissingFieldError
from deposit_core.models import DatabaseOptions, DatasetDates, DatasetMetadata, Relation
from deposit_core.xml.builder import element
from deposit_core.xml.utils import text_content

logger = logging.getLogger(__name__)

DATASET_TYPES = ("record", "collection", "crossmark_policy", "other")
RELATION_KINDS = ("inter", "intra")


def database_date_xml(dates: Optional[DatasetDates]) -> Optional[etree._Element]:
    """Encode creation, publication and update dates; None when all are absent."""
    if dates is None:
        return None
    children = [
        date_xml("creation_date", dates.created),
        date_xml("publication_date", dates.published),
        date_xml("update_date", dates.updated),
    ]
    if all(child is None for child in children):
        return None
    return element("database_date", children)


def relations_xml(relations: Optional[Sequence[Relation]]) -> Optional[etree._Element]:
    """
    Encode a ``rel:program`` of related items.

    Raises:
        InvalidValueError: On an unknown relation kind
    """
    if not relations:
        return None
    items = []
    for relation in relations:
        if relation.kind not in RELATION_KINDS:
            raise InvalidValueError(f"Unknown relation kind: {relation.kind}")
        items.append(element("rel:related_item", [
            element(f"rel:{relation.kind}_work_relation",
                    {"relationship-type": relation.relationship,
                     "identifier-type": relation.id_type},
                    relation.id),
        ]))
    return element("rel:program", {"name": "relations"}, items)


def _description_text(description: Union[str, etree._Element, Iterable, None]) -> Optional[str]:
    # Rich abstracts are flattened; description is plain text
    if description is None:
        return None
    if isinstance(description, str):
        return description.strip() or None
    if isinstance(description, etree._Element):
        return text_content(description).strip() or None
    text = " ".join(part if isinstance(part, str) else text_content(part)
                    for part in description)
    return text.strip() or None


def dataset_xml(dataset: DatasetMetadata) -> etree._Element:
    """
    Create a ``dataset``.

    Required fields: title, doi_data.doi

    Optional fields: contributors, date, description, relations, citations

    Raises:
        MissingFieldError: If a required field is absent
        InvalidValueError: On an unknown dataset type
    """
    if not dataset.title:
        raise MissingFieldError("title")
    if dataset.doi_data is None or not dataset.doi_data.doi:
        raise MissingFieldError("doi")
    dataset_type = dataset.type or "other"
    if dataset_type not in DATASET_TYPES:
        raise InvalidValueError(f"Unknown dataset type: {dataset_type}")

    description = _description_text(dataset.description)
    logger.debug(f"Encoding dataset {dataset.doi_data.doi}")
    return element("dataset", {"dataset_type": dataset_type}, [
        dataset.contributors,
        titles_xml(dataset.title),
        database_date_xml(dataset.date),
        element("description", description) if description else None,
        relations_xml(dataset.relations),
        doi_data_xml(dataset.doi_data),
        citation_list_xml(dataset.citations),
    ])


def database_xml(database: DatabaseOptions) -> etree._Element:
    """
    Create a ``database`` with its metadata and datasets.

    ``database.datasets`` may hold DatasetMetadata records or already
    encoded ``dataset`` elements.

    Raises:
        MissingFieldError: If there is no title
    """
    if not database.title:
        raise MissingFieldError("title")
    has_doi = database.doi_data is not None and bool(database.doi_data.doi)
    datasets = [dataset_xml(d) if isinstance(d, DatasetMetadata) else d
                for d in database.datasets]
    return element("database", [
        element("database_metadata", {"language": database.language}, [
            database.contributors,
            titles_xml(database.title),
            element("description", database.description) if database.description else None,
            database_date_xml(database.date),
            doi_data_xml(database.doi_data) if has_doi else None,
        ]),
        datasets,
    ])
