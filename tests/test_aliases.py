"""
Tests for alias tables and alias map loaders.
"""

import json

import pytest

from attrlimit.aliases import DictAliasMapLoader, FileAliasMapLoader, NameAliasTable
from attrlimit.errors import ConfigurationError


OID2NAME = {
    "urn:oid:2.5.4.3": "cn",
    "urn:oid:0.9.2342.19200300.100.1.3": "mail",
    "urn:oid:1.3.6.1.4.1.5923.1.1.1.9": ["eduPersonScopedAffiliation", "affiliation"],
}


class TestNameAliasTable:
    """Test alias table lookups and merging"""

    def test_resolve(self):
        table = NameAliasTable(OID2NAME)
        assert table.resolve("urn:oid:2.5.4.3") == ("cn",)
        assert table.resolve("urn:oid:1.3.6.1.4.1.5923.1.1.1.9") == (
            "eduPersonScopedAffiliation", "affiliation"
        )
        assert table.resolve("cn") == ()

    def test_table_is_read_only(self):
        table = NameAliasTable(OID2NAME)
        with pytest.raises(TypeError):
            table["x"] = "y"

    def test_merge_overwrites_without_duplicate_mode(self):
        table = NameAliasTable({"a": "x", "b": "y"})
        merged = table.merged({"a": "z"})

        assert merged["a"] == "z"
        assert merged["b"] == "y"
        assert table["a"] == "x"

    def test_merge_concatenates_in_duplicate_mode(self):
        table = NameAliasTable({"a": "x", "b": ["y1"]}, duplicate=True)
        merged = table.merged({"a": "z", "b": ["y2", "y3"], "c": "w"})

        assert merged["a"] == ("x", "z")
        assert merged["b"] == ("y1", "y2", "y3")
        assert merged["c"] == "w"
        assert merged.duplicate

    def test_malformed_mapping_rejected(self):
        with pytest.raises(ConfigurationError):
            NameAliasTable({"a": 1})
        with pytest.raises(ConfigurationError):
            NameAliasTable(["a"])

    def test_load_merges_maps_in_order(self):
        loader = DictAliasMapLoader({"first": {"a": "x"}, "second": {"a": "y", "b": "z"}})
        table = NameAliasTable.load(loader, ["first", "second"])
        assert dict(table) == {"a": "y", "b": "z"}


class TestLoaders:
    """Test alias map loaders"""

    def test_dict_loader_missing_map(self):
        with pytest.raises(ConfigurationError, match="oid2name"):
            DictAliasMapLoader().load("oid2name")

    def test_file_loader_yaml(self, tmp_path):
        (tmp_path / "oid2name.yaml").write_text(
            "urn:oid:2.5.4.3: cn\n"
            "urn:oid:1.3.6.1.4.1.5923.1.1.1.9:\n"
            "  - eduPersonScopedAffiliation\n"
            "  - affiliation\n"
        )
        table = NameAliasTable.load(FileAliasMapLoader(str(tmp_path)))
        assert table.resolve("urn:oid:2.5.4.3") == ("cn",)
        assert len(table.resolve("urn:oid:1.3.6.1.4.1.5923.1.1.1.9")) == 2

    def test_file_loader_json(self, tmp_path):
        (tmp_path / "oid2name.json").write_text(json.dumps(OID2NAME))
        data = FileAliasMapLoader(str(tmp_path)).load("oid2name")
        assert data["urn:oid:2.5.4.3"] == "cn"

    def test_file_loader_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Could not find attributemap file"):
            FileAliasMapLoader(str(tmp_path)).load("oid2name")

    def test_file_loader_not_a_mapping(self, tmp_path):
        (tmp_path / "oid2name.yaml").write_text("- cn\n- mail\n")
        with pytest.raises(ConfigurationError, match="didn't define an attribute map"):
            FileAliasMapLoader(str(tmp_path)).load("oid2name")

    def test_file_loader_unparsable(self, tmp_path):
        (tmp_path / "oid2name.json").write_text("{not json")
        with pytest.raises(ConfigurationError):
            FileAliasMapLoader(str(tmp_path)).load("oid2name")
