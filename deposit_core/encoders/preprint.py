"""Posted content (preprint) encoder."""

import logging

from lxml import etree

from deposit_core.encoders.dates import date_xml
from deposit_core.encoders.doi import (
    abstract_xml, citation_list_xml, doi_data_xml, license_xml, titles_xml,
)
from deposit_core.encoders.funding import fundref_xml
from deposit_core.exceptions import MissingFieldError
from deposit_core.models import Preprint
from deposit_core.xml.builder import element

logger = logging.getLogger(__name__)


def preprint_xml(preprint: Preprint) -> etree._Element:
    """
    Create a ``posted_content`` element.

    Required fields: title, date, doi_data.doi

    Optional fields: contributors, subtitle, abstract, funding, license,
    citations

    Raises:
        MissingFieldError: If a required field is absent
    """
    if not preprint.title:
        raise MissingFieldError("title")
    posted_date = date_xml("posted_date", preprint.date)
    if posted_date is None:
        raise MissingFieldError("date")
    if preprint.doi_data is None or not preprint.doi_data.doi:
        raise MissingFieldError("doi")

    logger.debug(f"Encoding posted content {preprint.doi_data.doi}")
    return element("posted_content", {"type": preprint.type or "preprint"}, [
        preprint.contributors,
        titles_xml(preprint.title, preprint.subtitle),
        posted_date,
        abstract_xml(preprint.abstract),
        fundref_xml(preprint.funding),
        license_xml(preprint.license),
        doi_data_xml(preprint.doi_data),
        citation_list_xml(preprint.citations),
    ])
