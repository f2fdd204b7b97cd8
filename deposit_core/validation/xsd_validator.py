"""
XSD Validators
==============

Validation of deposit documents against a locally cached Crossref schema.

Schemas are not downloaded here. ``SchemaCache`` only locates
``crossref<version>.xsd`` (and the schemas it imports, which must sit next
to it) in a cache directory that is populated separately.
"""

import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Union
import logging

from lxml import etree

from deposit_core.config.schemas import SchemaVersion, get_schema_version
from deposit_core.validation.base import (
    SYNTAX_ERROR,
    VALIDATOR_ERROR,
    BaseValidator,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# xmllint chatter that is not a validation failure
XMLLINT_NOISE = ("skipping import of schema",)

_XMLLINT_ERROR_RE = re.compile(r"^(?P<file>.*?):(?P<line>\d+): (?P<message>.*)$")


class SchemaCache:
    """
    Locates cached XSD files by schema version.

    Example:
        cache = SchemaCache(Path("schemas"))
        xsd = cache.get("5.3.1")   # schemas/crossref5.3.1.xsd
    """

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)

    def path_for(self, version: Union[str, SchemaVersion, None] = None) -> Path:
        """Expected location of the XSD for a schema version."""
        schema = version if isinstance(version, SchemaVersion) else get_schema_version(version)
        return self.cache_dir / schema.xsd_filename

    def has(self, version: Union[str, SchemaVersion, None] = None) -> bool:
        """Whether the XSD for a schema version is cached."""
        return self.path_for(version).exists()

    def get(self, version: Union[str, SchemaVersion, None] = None) -> Path:
        """
        Path of the cached XSD.

        Raises:
            FileNotFoundError: If the schema is not in the cache
        """
        path = self.path_for(version)
        if not path.exists():
            raise FileNotFoundError(
                f"Schema file not found: {path}. Place the Crossref schema files "
                f"in {self.cache_dir} before validating."
            )
        return path


class XSDValidator(BaseValidator):
    """
    In-process validation with ``lxml.etree.XMLSchema``.

    Example:
        validator = XSDValidator(SchemaCache("schemas").get("5.3.1"))
        result = validator.validate_element(batch.tree)
        if not result.is_valid:
            print(result.summary())
    """

    def __init__(self, xsd_path: Path, schema_version: Optional[str] = None):
        """
        Load the schema.

        Args:
            xsd_path: Path to the top-level XSD file
            schema_version: Version label for reports

        Raises:
            FileNotFoundError: If the XSD file doesn't exist
            etree.XMLSchemaParseError: If the XSD cannot be loaded
        """
        if not xsd_path.exists():
            raise FileNotFoundError(f"XSD file not found: {xsd_path}")
        self._xsd_path = xsd_path
        self._schema_version = schema_version
        self._schema = etree.XMLSchema(etree.parse(str(xsd_path)))
        logger.debug(f"Loaded schema {xsd_path}")

    @property
    def schema_type(self) -> str:
        return "XSD"

    @property
    def schema_path(self) -> Path:
        return self._xsd_path

    def _validate_tree(self, tree, source: str) -> ValidationResult:
        result = ValidationResult(schema_version=self._schema_version)
        if not self._schema.validate(tree):
            for error in self._schema.error_log:
                result.add_issue(
                    source=source,
                    message=str(error.message),
                    line=error.line,
                    column=error.column,
                )
        return result

    def _parse_and_validate(self, parse, source: str) -> ValidationResult:
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            tree = parse(parser)
        except etree.XMLSyntaxError as e:
            result = ValidationResult(schema_version=self._schema_version)
            result.add_issue(
                source=source,
                message=str(e),
                kind=SYNTAX_ERROR,
                line=e.lineno,
            )
            return result
        return self._validate_tree(tree, source)

    def validate_file(self, file_path: Path, **kwargs) -> ValidationResult:
        """Validate a deposit file against the schema."""
        return self._parse_and_validate(
            lambda parser: etree.parse(str(file_path), parser), file_path.name)

    def validate_string(self, xml_string: str, source: str = "string") -> ValidationResult:
        """Validate serialized deposit XML against the schema."""
        return self._parse_and_validate(
            lambda parser: etree.fromstring(xml_string.encode("utf-8"), parser), source)

    def validate_element(self, element, source: str = "element") -> ValidationResult:
        """Validate an element (e.g. ``DoiBatch.tree``) without serializing it."""
        return self._validate_tree(element, source)


class XmllintValidator(BaseValidator):
    """
    Validation through the external ``xmllint`` binary.

    Example:
        validator = XmllintValidator(cache.get("4.4.2"))
        if validator.is_available():
            result = validator.validate_file(Path("deposit.xml"))
    """

    def __init__(self, xsd_path: Path, xmllint_path: str = "xmllint",
                 schema_version: Optional[str] = None):
        self._xsd_path = xsd_path
        self._xmllint_path = xmllint_path
        self._schema_version = schema_version

    @property
    def schema_type(self) -> str:
        return "XSD (xmllint)"

    @property
    def schema_path(self) -> Path:
        return self._xsd_path

    def is_available(self) -> bool:
        """Whether the xmllint binary can be found."""
        return shutil.which(self._xmllint_path) is not None

    def _parse_output(self, output: str, source: str, returncode: int) -> ValidationResult:
        result = ValidationResult(schema_version=self._schema_version)
        messages: List[str] = []
        for raw in output.splitlines():
            line = raw.strip()
            if not line:
                continue
            lower = line.lower()
            if any(noise in lower for noise in XMLLINT_NOISE) or lower.endswith(" validates"):
                logger.debug(line)
                continue
            messages.append(line)

        for message in messages:
            match = _XMLLINT_ERROR_RE.match(message)
            if match:
                result.add_issue(source=source, message=match.group("message"),
                                 line=int(match.group("line")))
            elif "fails to validate" not in message.lower():
                result.add_issue(source=source, message=message)

        if returncode != 0 and result.is_valid:
            result.add_issue(source=source,
                             message=f"xmllint exited with status {returncode}",
                             kind=VALIDATOR_ERROR)
        return result

    def validate_file(self, file_path: Path, **kwargs) -> ValidationResult:
        """
        Run ``xmllint --noout --schema`` on a deposit file.

        Raises:
            FileNotFoundError: If xmllint is not installed
        """
        if not self.is_available():
            raise FileNotFoundError(
                f"{self._xmllint_path} not found. Install libxml2-utils "
                f"(debian) or libxml2 (mac) to validate with xmllint."
            )
        cmd = [self._xmllint_path, "--noout", "--schema", str(self._xsd_path), str(file_path)]
        logger.debug(f"Running: {' '.join(cmd)}")
        completed = subprocess.run(cmd, capture_output=True, text=True)
        return self._parse_output(completed.stderr, file_path.name, completed.returncode)

    def validate_string(self, xml_string: str, source: str = "string") -> ValidationResult:
        """Write the XML to a temporary file and validate it."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "deposit.xml"
            path.write_text(xml_string, encoding="utf-8")
            result = self.validate_file(path)
        result.relabel(source)
        return result
