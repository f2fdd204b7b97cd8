"""
Validation Results and Validator Interface
==========================================

A deposit is checked against the XSD of its schema version. Validators
report findings as ``ValidationIssue`` records collected in a
``ValidationResult``.
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from lxml import etree

logger = logging.getLogger(__name__)

SCHEMA_ERROR = "Schema Error"
SYNTAX_ERROR = "XML Syntax Error"
VALIDATOR_ERROR = "Validator Error"

SUMMARY_LIMIT = 10


@dataclass
class ValidationIssue:
    """One finding reported by a validator."""
    source: str
    message: str
    kind: str = SCHEMA_ERROR
    line: Optional[int] = None
    column: Optional[int] = None
    severity: str = "Error"  # Error | Warning

    @property
    def location(self) -> str:
        """``source:line`` (or just the source without a line number)."""
        return f"{self.source}:{self.line}" if self.line else self.source


@dataclass
class ValidationResult:
    """
    Outcome of validating one deposit.

    Attributes:
        issues: Findings in the order they were reported
        schema_version: Deposit schema version validated against
    """
    issues: List[ValidationIssue] = field(default_factory=list)
    schema_version: Optional[str] = None

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "Error"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "Warning"]

    @property
    def is_valid(self) -> bool:
        """A deposit is valid when nothing of severity Error was reported."""
        return not self.errors

    def add_issue(self, source: str, message: str, kind: str = SCHEMA_ERROR,
                  line: Optional[int] = None, column: Optional[int] = None,
                  severity: str = "Error") -> ValidationIssue:
        """Record a finding and return it."""
        issue = ValidationIssue(source=source, message=message, kind=kind,
                                line=line, column=column, severity=severity)
        self.issues.append(issue)
        logger.debug(f"{severity} in {issue.location}: {message}")
        return issue

    def relabel(self, source: str) -> None:
        """Attribute every finding to ``source`` (e.g. after validating a temp file)."""
        for issue in self.issues:
            issue.source = source

    def count_by_kind(self) -> Dict[str, int]:
        """Number of findings per kind."""
        return dict(Counter(issue.kind for issue in self.issues))

    def summary(self) -> str:
        """Human-readable report, listing at most ten findings."""
        target = f" against schema {self.schema_version}" if self.schema_version else ""
        if self.is_valid:
            return f"Validation PASSED{target} - No errors found"

        lines = [f"Validation FAILED{target} - {len(self.errors)} error(s), "
                 f"{len(self.warnings)} warning(s)"]
        lines.extend(f"  {issue.location}: {issue.message}"
                     for issue in self.issues[:SUMMARY_LIMIT])
        if len(self.issues) > SUMMARY_LIMIT:
            lines.append(f"  ... {len(self.issues) - SUMMARY_LIMIT} more")
        return "\n".join(lines)


class BaseValidator(ABC):
    """
    Interface of deposit validators.

    ``validate_file`` is required. ``validate_string`` is optional, and
    ``validate_element`` serializes the tree and hands it to
    ``validate_string`` unless a subclass can do better.
    """

    @property
    @abstractmethod
    def schema_type(self) -> str:
        """Kind of schema checked, e.g. ``XSD``."""

    @property
    @abstractmethod
    def schema_path(self) -> Path:
        """Location of the schema file."""

    @abstractmethod
    def validate_file(self, file_path: Path, **kwargs) -> ValidationResult:
        """Validate a deposit file on disk."""

    def validate_string(self, xml_string: str, source: str = "string") -> ValidationResult:
        raise NotImplementedError(f"{type(self).__name__} cannot validate strings")

    def validate_element(self, element: Any, source: str = "element") -> ValidationResult:
        """Validate an lxml element, e.g. ``DoiBatch.tree``."""
        return self.validate_string(etree.tostring(element, encoding="unicode"), source)
