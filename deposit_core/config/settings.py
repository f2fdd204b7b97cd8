"""
Configuration Settings
======================

Configuration dataclasses for building and validating deposits.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any
import json
import logging

import yaml

from deposit_core.config.schemas import DEFAULT_SCHEMA_VERSION, get_schema_version

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_BASE_URL = "https://doi.curvenote.com/"
DEFAULT_REGISTRANT = "Crossref"


@dataclass
class DepositorConfig:
    """Agent account submitting the batch."""

    name: str = "Curvenote"
    email: str = "doi@curvenote.com"


@dataclass
class SchemaConfig:
    """Schema version and local XSD cache."""

    version: str = DEFAULT_SCHEMA_VERSION
    cache_dir: str = "schemas"  # Holds crossref<version>.xsd, populated externally


@dataclass
class ResourceConfig:
    """Landing page resolution for DOIs."""

    resource_base_url: str = DEFAULT_RESOURCE_BASE_URL

    def resource_for(self, doi: str) -> str:
        """Landing page URL for a DOI."""
        return f"{self.resource_base_url}{doi}"


@dataclass
class ValidationConfig:
    """External validator settings."""

    use_xmllint: bool = False
    xmllint_path: str = "xmllint"


@dataclass
class DepositConfig:
    """
    Complete deposit configuration.

    Example:
        config = DepositConfig()
        config.schema.version = "4.4.2"
        config.depositor.email = "doi@example.org"
        save_config(config, Path("deposit.yml"))
    """

    depositor: DepositorConfig = field(default_factory=DepositorConfig)
    schema: SchemaConfig = field(default_factory=SchemaConfig)
    resources: ResourceConfig = field(default_factory=ResourceConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    registrant: str = DEFAULT_REGISTRANT
    log_level: str = "INFO"

    # Custom extensions
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'depositor': asdict(self.depositor),
            'schema': asdict(self.schema),
            'resources': asdict(self.resources),
            'validation': asdict(self.validation),
            'registrant': self.registrant,
            'log_level': self.log_level,
            'custom': self.custom,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DepositConfig':
        """
        Create from dictionary.

        Raises:
            ValueError: If the configured schema version is not supported
        """
        config = cls()

        if 'depositor' in data:
            config.depositor = DepositorConfig(**data['depositor'])
        if 'schema' in data:
            config.schema = SchemaConfig(**data['schema'])
        if 'resources' in data:
            config.resources = ResourceConfig(**data['resources'])
        if 'validation' in data:
            config.validation = ValidationConfig(**data['validation'])

        if 'registrant' in data:
            config.registrant = data['registrant']
        if 'log_level' in data:
            config.log_level = data['log_level']
        if 'custom' in data:
            config.custom = data['custom']

        get_schema_version(config.schema.version)
        return config


# Config file suffix -> serialization format
CONFIG_FORMATS = {".yml": "yaml", ".yaml": "yaml", ".json": "json"}


def _config_format(config_path: Path) -> str:
    fmt = CONFIG_FORMATS.get(config_path.suffix.lower())
    if fmt is None:
        supported = ", ".join(sorted(CONFIG_FORMATS))
        raise ValueError(
            f"Deposit config {config_path} must be one of {supported}, "
            f"not '{config_path.suffix}'"
        )
    return fmt


def load_config(config_path: Path) -> DepositConfig:
    """
    Read deposit settings (depositor, schema version, landing pages,
    validator) from a YAML or JSON file.

    Sections left out of the file keep their defaults. The schema version is
    checked on load, so a batch is never assembled for a version the schema
    table does not know.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported, the file is not a mapping,
            a section has unknown keys or the schema version is unsupported;
            the message names the file
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Deposit config not found: {config_path}")

    fmt = _config_format(config_path)
    with open(config_path, 'r', encoding='utf-8') as f:
        data = (yaml.safe_load(f) if fmt == "yaml" else json.load(f)) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Deposit config {config_path} must be a mapping of sections")
    try:
        config = DepositConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Deposit config {config_path}: {e}") from e

    logger.info(f"Loaded deposit config from {config_path} "
                f"(schema {config.schema.version}, depositor {config.depositor.email})")
    return config


def save_config(config: DepositConfig, config_path: Path) -> None:
    """
    Write deposit settings as YAML or JSON, chosen by the file suffix.

    Raises:
        ValueError: If the suffix is not a supported config format
    """
    fmt = _config_format(config_path)
    data = config.to_dict()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        if fmt == "yaml":
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info(f"Saved deposit config to {config_path}")


def get_default_config() -> DepositConfig:
    """Settings used when no config file is given: Curvenote depositor, schema 5.3.1."""
    return DepositConfig()
