"""Tests for the lookup tables and their YAML override."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from naming_tables import LookupTables, load_tables

EXAMPLE_TABLES = Path(__file__).parent.parent / "config" / "naming-tables.example.yml"


class TestBuiltins:
    def test_defaults(self):
        t = LookupTables()
        assert t.datacenters["den"] == "Denver Data Centre"
        assert t.domain_suffixes["tz"] == "TestDMZ"
        assert t.roles["aerp"] == "Acumentica ERP"
        assert t.default_datacenter == "Legacy Data Centre"
        assert t.base_domain is None

    def test_tables_are_read_only(self):
        t = LookupTables()
        with pytest.raises(TypeError):
            t.roles["new"] = "New Role"

    def test_keys_lowercased(self):
        t = LookupTables(roles={"OCR": "OCR Server"})
        assert t.roles == {"ocr": "OCR Server"}


class TestOverrides:
    def test_merge_over_builtins(self):
        t = LookupTables.from_mapping({"roles": {"BKP": "Backup Server"}, "base_domain": "corp.example.com"})
        assert t.roles["bkp"] == "Backup Server"
        assert t.roles["sql"] == "SQL Server"
        assert t.base_domain == "corp.example.com"

    def test_override_replaces_builtin(self):
        t = LookupTables.from_mapping({"datacenters": {"den": "Denver DC2"}})
        assert t.datacenters["den"] == "Denver DC2"

    def test_from_yaml_example(self):
        t = LookupTables.from_yaml(EXAMPLE_TABLES)
        assert t.datacenters["sea"] == "Seattle Data Centre"
        assert t.environments["wyn"] == "Wayne Enterprises"
        assert t.base_domain == "example.com"

    def test_from_yaml_rejects_list(self, tmp_path: Path):
        path = tmp_path / "tables.yml"
        path.write_text("- den\n- cin\n")
        with pytest.raises(ValueError):
            LookupTables.from_yaml(path)

    def test_load_tables_missing_file(self, tmp_path: Path):
        assert load_tables(tmp_path / "missing.yml") == LookupTables()

    def test_load_tables_bad_file_falls_back(self, tmp_path: Path):
        path = tmp_path / "tables.yml"
        path.write_text("roles: [not, a, mapping]\n")
        assert load_tables(path).roles["sql"] == "SQL Server"

    def test_load_tables_none(self):
        assert load_tables(None).datacenters["cin"] == "Cincinnati Data Centre"
