#!/usr/bin/env python3
"""
Deposit Command Line

Generate DOIs, build deposit batches from metadata files, read deposits
back and validate them against a cached Crossref schema.

Usage:
    crossref-deposit generate [prefix] [--count N]
    crossref-deposit deposit <metadata.yml> [...] --type preprint|journal|conference|dataset
    crossref-deposit read <deposit.xml>
    crossref-deposit validate <deposit.xml> [--schema-version 4.4.2] [--xmllint]

Examples:
    # Three new DOIs under the SciPy prefix
    crossref-deposit generate scipy --count 3

    # Journal deposit for two articles, written to a file
    crossref-deposit deposit a.yml b.yml --type journal -o deposit.xml

    # Decode a deposit to JSON
    crossref-deposit read deposit.xml
"""

import argparse
import dataclasses
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from deposit_core.adapters.frontmatter import (
    conference_paper_from_frontmatter,
    dataset_from_frontmatter,
    doi_data_for,
    journal_article_from_frontmatter,
    journal_metadata_from_frontmatters,
    preprint_from_frontmatter,
)
from deposit_core.batch import DoiBatch
from deposit_core.config.schemas import SCHEMA_VERSIONS, get_schema_version
from deposit_core.config.settings import (
    DepositConfig, ResourceConfig, get_default_config, load_config,
)
from deposit_core.encoders.conference import conference_xml
from deposit_core.encoders.dates import parse_date
from deposit_core.encoders.dataset import database_xml
from deposit_core.encoders.journal import journal_xml
from deposit_core.encoders.preprint import preprint_xml
from deposit_core.exceptions import DepositError
from deposit_core.frontmatter import Frontmatter
from deposit_core.identifiers import generate_dois
from deposit_core.models import (
    BatchOptions, ConferenceEvent, ConferenceOptions, DatabaseOptions, Depositor,
    JournalMetadata, Proceedings, ProceedingsSeries,
)
from deposit_core.reader import DoiBatchReader
from deposit_core.validation import SchemaCache, XmllintValidator, XSDValidator

logger = logging.getLogger(__name__)

DEPOSIT_TYPES = ("preprint", "journal", "conference", "dataset")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def load_metadata(path: Path) -> Dict[str, Any]:
    """
    Read a metadata file (YAML or JSON) into a mapping.

    Raises:
        ValueError: If the format is unsupported or the file is not a mapping
    """
    suffix = path.suffix.lower()
    with open(path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported metadata format: {suffix}")
    if not isinstance(data, Mapping):
        raise ValueError(f"Metadata file must contain a mapping: {path}")
    return dict(data)


def abstract_paragraphs(data: Mapping[str, Any]) -> Optional[List[str]]:
    """Plain-text abstract from metadata, split into paragraphs on blank lines."""
    abstract = data.get('abstract')
    if not abstract:
        return None
    paragraphs = [" ".join(p.split()) for p in str(abstract).split("\n\n")]
    return [p for p in paragraphs if p] or None


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _date_value(value: Any):
    # A bare year in YAML arrives as an int
    return parse_date(str(value) if isinstance(value, int) else value)


def conference_options(data: Mapping[str, Any],
                       resources: Optional[ResourceConfig] = None) -> ConferenceOptions:
    """
    Event and proceedings from a ``conference`` metadata section.

    Raises:
        ValueError: If the section is missing
    """
    section = data.get('conference')
    if not isinstance(section, Mapping):
        raise ValueError("Conference deposits need a 'conference' section "
                         "with 'event' and 'proceedings'")
    event = section.get('event') or {}
    proceedings = section.get('proceedings') or {}
    series = proceedings.get('series')
    return ConferenceOptions(
        event=ConferenceEvent(
            name=event.get('name'),
            acronym=event.get('acronym'),
            number=event.get('number'),
            location=event.get('location'),
            date=event.get('date'),
        ),
        proceedings=Proceedings(
            title=proceedings.get('title'),
            publisher=proceedings.get('publisher'),
            publisher_place=proceedings.get('publisher_place'),
            subject=proceedings.get('subject'),
            publication_date=_date_value(proceedings.get('publication_date')),
            doi_data=doi_data_for(proceedings.get('doi'), resources),
            series=ProceedingsSeries(
                title=series.get('title'),
                issn=series.get('issn'),
                original_language_title=series.get('original_language_title'),
                series_number=_as_text(series.get('series_number')),
                doi_data=doi_data_for(series.get('doi'), resources),
            ) if series else None,
        ),
    )


def build_body(deposit_type: str, documents: List[Dict[str, Any]],
               config: DepositConfig, args: argparse.Namespace):
    """Encode the body fragments for a deposit."""
    schema = get_schema_version(config.schema.version)
    resources = config.resources
    frontmatters = [Frontmatter.from_dict(data) for data in documents]

    def options(data):
        return dict(citations=data.get('citations'), schema=schema, resources=resources)

    if deposit_type == "preprint":
        return [
            preprint_xml(preprint_from_frontmatter(
                fm, abstract=abstract_paragraphs(data),
                strict_funding=args.strict_funding, **options(data)))
            for fm, data in zip(frontmatters, documents)
        ]

    if deposit_type == "journal":
        articles = [
            journal_article_from_frontmatter(
                fm, abstract=abstract_paragraphs(data),
                strict_funding=args.strict_funding, **options(data))
            for fm, data in zip(frontmatters, documents)
        ]
        if args.journal_title:
            metadata = JournalMetadata(
                title=args.journal_title,
                abbrev_title=args.journal_abbr,
                doi_data=doi_data_for(args.journal_doi, resources),
            )
        else:
            metadata = journal_metadata_from_frontmatters(frontmatters, resources)
        return journal_xml(metadata, articles=articles)

    if deposit_type == "conference":
        conference = conference_options(documents[0], resources)
        conference.papers = [
            conference_paper_from_frontmatter(
                fm, abstract=abstract_paragraphs(data),
                strict_funding=args.strict_funding, **options(data))
            for fm, data in zip(frontmatters, documents)
        ]
        return conference_xml(conference, schema)

    datasets = [
        dataset_from_frontmatter(fm, description=abstract_paragraphs(data), **options(data))
        for fm, data in zip(frontmatters, documents)
    ]
    venue = frontmatters[0].venue
    return database_xml(DatabaseOptions(
        title=(venue.title if venue and venue.title else frontmatters[0].title),
        doi_data=doi_data_for(venue.doi, resources) if venue else None,
        datasets=datasets,
    ))


def cmd_generate(args: argparse.Namespace, config: DepositConfig) -> int:
    for doi in generate_dois(args.count, args.prefix):
        print(doi)
    return 0


def cmd_deposit(args: argparse.Namespace, config: DepositConfig) -> int:
    if args.type != "journal" and (args.journal_title or args.journal_abbr or args.journal_doi):
        print("ERROR: journal title/abbreviation/doi are only used for deposit type "
              "\"journal\"", file=sys.stderr)
        return 2

    documents = []
    for path in args.metadata:
        if not path.exists():
            print(f"ERROR: Metadata file not found: {path}", file=sys.stderr)
            return 2
        documents.append(load_metadata(path))

    body = build_body(args.type, documents, config, args)
    depositor = Depositor(name=args.name or config.depositor.name,
                          email=args.email or config.depositor.email)
    batch = DoiBatch(
        BatchOptions(id=args.id or str(uuid.uuid4()), depositor=depositor,
                     registrant=args.registrant or config.registrant),
        body,
        schema_version=config.schema.version,
    )
    xml = batch.to_xml(pretty=args.pretty, xml_declaration=True)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(xml, encoding='utf-8')
        logger.info(f"Wrote {args.type} deposit to {args.output}")
    else:
        sys.stdout.write(xml)
    return 0


def _jsonable(record: Any) -> Any:
    return dataclasses.asdict(record) if dataclasses.is_dataclass(record) else record


def cmd_read(args: argparse.Namespace, config: DepositConfig) -> int:
    if not args.file.exists():
        print(f"ERROR: File not found: {args.file}", file=sys.stderr)
        return 2
    reader = DoiBatchReader(args.file.read_bytes())
    if reader.root is None:
        print(f"ERROR: Could not parse {args.file}", file=sys.stderr)
        return 1
    data = {
        'head': _jsonable(reader.get_head()),
        'entries': [_jsonable(entry) for entry in reader.get_entries()],
    }
    print(json.dumps(data, indent=2, default=str))
    return 0


def cmd_validate(args: argparse.Namespace, config: DepositConfig) -> int:
    if not args.file.exists():
        print(f"ERROR: File not found: {args.file}", file=sys.stderr)
        return 2
    version = config.schema.version
    cache = SchemaCache(args.cache_dir or config.schema.cache_dir)
    try:
        xsd_path = cache.get(version)
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.xmllint or config.validation.use_xmllint:
        validator = XmllintValidator(xsd_path, config.validation.xmllint_path, version)
        if not validator.is_available():
            print("ERROR: XML validation with xmllint requires the xmllint binary\n"
                  "  mac:    brew install libxml2\n"
                  "  debian: apt install libxml2-utils", file=sys.stderr)
            return 2
    else:
        validator = XSDValidator(xsd_path, version)

    logger.info(f"Validating against: {xsd_path.name}")
    result = validator.validate_file(args.file)
    print(result.summary())
    return 0 if result.is_valid else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crossref-deposit",
        description="Build, read and validate Crossref deposit XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate scipy --count 3
  %(prog)s deposit paper.yml --type preprint -o deposit.xml
  %(prog)s read deposit.xml
  %(prog)s validate deposit.xml --schema-version 4.4.2
        """
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Configuration file (YAML or JSON)"
    )
    parser.add_argument(
        "--schema-version",
        choices=sorted(SCHEMA_VERSIONS),
        default=None,
        help="Deposit schema version (default: from config, else 5.3.1)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from config, else INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate new DOIs")
    generate.add_argument("prefix", nargs="?", default=None,
                          help="Organization key (curvenote, msa, scipy, physiome) or prefix")
    generate.add_argument("-n", "--count", type=int, default=1, help="Number of DOIs")
    generate.set_defaults(func=cmd_generate)

    deposit = subparsers.add_parser("deposit", help="Build a deposit batch from metadata files")
    deposit.add_argument("metadata", type=Path, nargs="+",
                         help="Metadata files (YAML or JSON), one per work")
    deposit.add_argument("-t", "--type", choices=DEPOSIT_TYPES, default="preprint",
                         help="Deposit type (default: preprint)")
    deposit.add_argument("--id", default=None, help="Batch id (default: random UUID)")
    deposit.add_argument("--name", default=None, help="Depositor name")
    deposit.add_argument("--email", default=None, help="Depositor email")
    deposit.add_argument("--registrant", default=None, help="Registrant")
    deposit.add_argument("--journal-title", default=None, help="Journal title")
    deposit.add_argument("--journal-abbr", default=None, help="Journal abbreviation")
    deposit.add_argument("--journal-doi", default=None, help="Journal DOI")
    deposit.add_argument("--strict-funding", action="store_true",
                         help="Fail on unresolvable funding awards instead of skipping them")
    deposit.add_argument("--pretty", action="store_true", help="Indent the output")
    deposit.add_argument("-o", "--output", type=Path, default=None,
                         help="Output file (default: stdout)")
    deposit.set_defaults(func=cmd_deposit)

    read = subparsers.add_parser("read", help="Decode a deposit to JSON")
    read.add_argument("file", type=Path, help="Deposit XML file")
    read.set_defaults(func=cmd_read)

    validate = subparsers.add_parser("validate", help="Validate a deposit against the XSD")
    validate.add_argument("file", type=Path, help="Deposit XML file")
    validate.add_argument("--cache-dir", type=Path, default=None,
                          help="Directory holding crossref<version>.xsd")
    validate.add_argument("--xmllint", action="store_true",
                          help="Validate with the xmllint binary instead of lxml")
    validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else get_default_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    if args.schema_version:
        config.schema.version = args.schema_version
    if args.log_level:
        config.log_level = args.log_level
    setup_logging(config.log_level)

    try:
        return args.func(args, config)
    except (DepositError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
