"""
Configuration and Identifier Tests

Run with: pytest tests/test_config.py -v
"""

import re

import pytest

from deposit_core.config import (
    DepositConfig,
    get_default_config,
    get_schema_version,
    load_config,
    save_config,
)
from deposit_core.identifiers import (
    funder_doi_url,
    generate_doi,
    generate_dois,
    institution_id_url,
    normalize_doi,
    orcid_url,
    resolve_prefix,
)

SUFFIX_RE = r"[ACDEFGHJKMNPRTUVWXY]{4}\d{4}"


class TestDepositConfig:
    """Tests for configuration loading and saving."""

    def test_defaults(self):
        """The default configuration targets the newest schema."""
        config = get_default_config()
        assert config.schema.version == "5.3.1"
        assert config.registrant == "Crossref"
        assert config.resources.resource_for("10.62329/ABCD1234") == \
            "https://doi.curvenote.com/10.62329/ABCD1234"

    @pytest.mark.parametrize("filename", ["deposit.yml", "deposit.yaml", "deposit.json"])
    def test_round_trip(self, tmp_path, filename):
        """Saved configuration loads back unchanged."""
        config = DepositConfig()
        config.schema.version = "4.4.2"
        config.depositor.email = "doi@example.org"
        config.custom = {"team": "journals"}
        path = tmp_path / filename

        save_config(config, path)
        loaded = load_config(path)

        assert loaded.to_dict() == config.to_dict()

    def test_partial_file(self, tmp_path):
        """Missing sections keep their defaults."""
        path = tmp_path / "deposit.yml"
        path.write_text("registrant: Example\n", encoding="utf-8")
        config = load_config(path)
        assert config.registrant == "Example"
        assert config.depositor.name == "Curvenote"

    def test_unsupported_schema_version(self):
        """An unknown schema version is rejected when loading."""
        with pytest.raises(ValueError, match="Unsupported schema version"):
            DepositConfig.from_dict({"schema": {"version": "9.9"}})

    def test_missing_file(self, tmp_path):
        """Loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yml")

    def test_unsupported_format(self, tmp_path):
        """Only YAML and JSON files are read."""
        path = tmp_path / "deposit.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_file_with_unsupported_schema_version(self, tmp_path):
        """The failing file and schema version are both reported."""
        path = tmp_path / "deposit.yml"
        path.write_text("schema:\n  version: '9.9'\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported schema version") as excinfo:
            load_config(path)
        assert "deposit.yml" in str(excinfo.value)
        assert "9.9" in str(excinfo.value)

    def test_unknown_section_key(self, tmp_path):
        """Unknown keys in a section are a config error."""
        path = tmp_path / "deposit.json"
        path.write_text('{"depositor": {"phone": "555"}}', encoding="utf-8")
        with pytest.raises(ValueError, match="deposit.json"):
            load_config(path)

    def test_non_mapping_file(self, tmp_path):
        """A config file must hold a mapping."""
        path = tmp_path / "deposit.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)


class TestSchemaVersions:
    """Tests for the schema version table."""

    def test_lookup(self):
        """Both supported versions are available."""
        assert get_schema_version("4.4.2").supports_series is False
        assert get_schema_version("5.3.1").supports_series is True
        assert get_schema_version().version == "5.3.1"

    def test_nsmap(self):
        """Only the newer schema declares fr and mml."""
        old = get_schema_version("4.4.2").nsmap
        new = get_schema_version("5.3.1").nsmap
        assert old[None] == "http://www.crossref.org/schema/4.4.2"
        assert "fr" not in old and "mml" not in old
        assert "fr" in new and "mml" in new


class TestIdentifiers:
    """Tests for DOI and identifier helpers."""

    @pytest.mark.parametrize("value", [
        "10.5281/zenodo.1234",
        "https://doi.org/10.5281/zenodo.1234",
        "http://dx.doi.org/10.5281/zenodo.1234",
        "doi:10.5281/zenodo.1234",
        " 10.5281%2Fzenodo.1234 ",
    ])
    def test_normalize_doi(self, value):
        """Common DOI notations reduce to the bare DOI."""
        assert normalize_doi(value) == "10.5281/zenodo.1234"

    def test_normalize_non_doi(self):
        """Strings without a DOI give None."""
        assert normalize_doi("not a doi") is None
        assert normalize_doi(None) is None

    def test_generate_doi_shape(self):
        """Generated DOIs use the default prefix and an unambiguous suffix."""
        assert re.match(rf"^10\.62329/{SUFFIX_RE}$", generate_doi())

    def test_generate_doi_named_prefix(self):
        """Organization keys resolve to their registered prefix."""
        assert re.match(rf"^10\.25080/{SUFFIX_RE}$", generate_doi("scipy"))

    def test_literal_prefix(self):
        """Unknown keys are used as literal prefixes."""
        assert resolve_prefix("10.1234") == "10.1234"

    def test_generate_many(self):
        """generate_dois returns distinct values."""
        dois = generate_dois(5, "msa")
        assert len(set(dois)) == 5
        assert all(doi.startswith("10.69761/") for doi in dois)

    def test_identifier_urls(self):
        """Bare identifiers become URLs and URLs pass through."""
        assert orcid_url("0000-0002-1825-0097") == "https://orcid.org/0000-0002-1825-0097"
        assert orcid_url("https://orcid.org/x") == "https://orcid.org/x"
        assert institution_id_url("ror", "042nb2s44") == "https://ror.org/042nb2s44"
        assert institution_id_url("isni", "0000 0001 2341 2786") == \
            "https://isni.org/isni/0000000123412786"
        assert funder_doi_url("10.13039/100000001") == "https://doi.org/10.13039/100000001"

    def test_unknown_identifier_scheme(self):
        """Unknown institution schemes raise."""
        with pytest.raises(ValueError):
            institution_id_url("grid", "grid.1")
