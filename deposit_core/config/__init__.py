"""
Configuration Management
========================

Settings, supported schema versions and registrant DOI prefixes.
"""

from deposit_core.config.settings import (
    DepositConfig,
    DepositorConfig,
    SchemaConfig,
    ResourceConfig,
    ValidationConfig,
    DEFAULT_REGISTRANT,
    DEFAULT_RESOURCE_BASE_URL,
    load_config,
    save_config,
    get_default_config,
)

from deposit_core.config.schemas import (
    SchemaVersion,
    SCHEMA_VERSIONS,
    DEFAULT_SCHEMA_VERSION,
    get_schema_version,
)

from deposit_core.config.prefixes import (
    DOI_PREFIXES,
    DEFAULT_PREFIX_KEY,
)

__all__ = [
    "DepositConfig",
    "DepositorConfig",
    "SchemaConfig",
    "ResourceConfig",
    "ValidationConfig",
    "DEFAULT_REGISTRANT",
    "DEFAULT_RESOURCE_BASE_URL",
    "load_config",
    "save_config",
    "get_default_config",
    "SchemaVersion",
    "SCHEMA_VERSIONS",
    "DEFAULT_SCHEMA_VERSION",
    "get_schema_version",
    "DOI_PREFIXES",
    "DEFAULT_PREFIX_KEY",
]
