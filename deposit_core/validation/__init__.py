"""
Validation Framework
====================

Checks finished deposit documents against a locally cached Crossref
schema.

Components:
- BaseValidator: Abstract base class for all validators
- ValidationIssue: One finding, with its source location
- ValidationResult: Findings collected from one validation run
- SchemaCache: Locates cached XSD files by schema version
- XSDValidator: In-process validation with lxml
- XmllintValidator: Validation through the xmllint binary
"""

from deposit_core.validation.base import (
    BaseValidator,
    ValidationIssue,
    ValidationResult,
)

from deposit_core.validation.xsd_validator import (
    SchemaCache,
    XSDValidator,
    XmllintValidator,
)

__all__ = [
    # Base classes
    "BaseValidator",
    "ValidationIssue",
    "ValidationResult",
    # XSD validation
    "SchemaCache",
    "XSDValidator",
    "XmllintValidator",
]
