"""Unit tests for the in-memory stops table."""

import pytest

from src.trace_bc.shared.domain.errors import ConfigError
from src.trace_bc.stop_table.tabular_store import (
    TabularStore,
    detect_delimiter,
    infer_column_type,
)


class TestBuild:
    """Tests for TabularStore.build."""

    def test_row_count_and_lookup(self, store):
        """Rows are counted and resolvable by the first column."""
        assert store.row_count() == 3
        assert store.row("S1") == {"id": "S1", "lon": 2.29, "lat": 48.85, "name": "Eiffel"}
        assert store.row("S2")["name"] == "Louvre"

    def test_two_rows(self):
        store = TabularStore.build("id,lon,lat,name\nS1,2.29,48.85,Eiffel\nS2,2.35,48.86,Louvre")
        assert store.row_count() == 2
        assert store.row("S1")["lon"] == 2.29

    def test_unknown_identifier(self, store):
        assert store.row("NOPE") is None

    def test_semicolon_tooling_layout(self, stops_tooling):
        """The `;` layout of the routing tooling is detected."""
        store = TabularStore.build(stops_tooling)
        assert store.delimiter == ";"
        assert store.id_column == "StopOffset"
        assert store.row_count() == 5
        assert store.row(42)["Stopname"] == "Hotel de Ville"
        assert store.row("42")["StopLng"] == 2.3522

    def test_explicit_id_column(self, stops_csv):
        store = TabularStore.build(stops_csv, id_column="name")
        assert store.row("Opera")["id"] == "S3"

    def test_unknown_id_column(self, stops_csv):
        with pytest.raises(ConfigError):
            TabularStore.build(stops_csv, id_column="stop_id")

    def test_duplicate_header(self):
        """Duplicate column names fail the whole build."""
        with pytest.raises(ConfigError, match="Duplicate"):
            TabularStore.build("id,lon,lon\nS1,1,2")

    def test_empty_header_name(self):
        with pytest.raises(ConfigError):
            TabularStore.build("id,,lat\nS1,1,2")

    def test_empty_text(self):
        with pytest.raises(ConfigError):
            TabularStore.build("\n\n")

    def test_header_only(self):
        """A header without rows builds an empty table."""
        store = TabularStore.build("id,lon,lat")
        assert store.row_count() == 0
        assert store.column("lon") == ()

    def test_wrong_field_count_rows_skipped(self):
        """Malformed rows are skipped and counted, the rest still loads."""
        text = "id,lon,lat\nS1,1,2\nS2,3\nS3,5,6,7\nS4,7,8\n"
        store = TabularStore.build(text)
        assert store.row_count() == 2
        assert store.skipped_rows == 2
        assert [w.line_number for w in store.warnings] == [3, 4]
        assert store.row("S2") is None
        assert store.row("S4")["lat"] == 8

    def test_empty_cells_permitted(self):
        store = TabularStore.build("id,lon,lat,name\nS1,1.5,2.5,\n")
        assert store.row("S1")["name"] == ""

    def test_duplicate_identifier_keeps_first(self):
        store = TabularStore.build("id,name\nS1,first\nS1,second\n")
        assert store.row_count() == 2
        assert store.row("S1")["name"] == "first"
        assert "duplicate identifier" in store.warnings[0].reason

    def test_padded_and_plain_ids_are_distinct_rows(self):
        """`042` and `42` in one table are two rows, not a duplicate."""
        store = TabularStore.build("id,name\nS1,x\n042,padded\n42,plain\n")
        assert store.warnings == []
        assert store.row("042")["name"] == "padded"
        assert store.row("42")["name"] == "plain"
        assert store.row(42)["name"] == "plain"

    def test_padded_query_matches_plain_id(self):
        store = TabularStore.build("id,name\nS1,x\n42,plain\n")
        assert store.row("042")["name"] == "plain"
        assert store.row(" +42 ")["name"] == "plain"

    def test_plain_query_matches_padded_id(self):
        store = TabularStore.build("id,name\nS1,x\n042,padded\n")
        assert store.row("42")["name"] == "padded"
        assert store.row(42)["name"] == "padded"

    def test_quoted_fields(self):
        store = TabularStore.build('id,name\nS1,"Gare du Nord, Paris"\n')
        assert store.row("S1")["name"] == "Gare du Nord, Paris"

    def test_bom_and_leading_blank_lines(self):
        store = TabularStore.build("\ufeff\n\nid;name\n1;a\n")
        assert store.column_names == ["id", "name"]


class TestColumns:
    """Tests for typed column access."""

    def test_column_types(self, stops_tooling):
        store = TabularStore.build(stops_tooling)
        assert store.column_type("StopOffset") is int
        assert store.column_type("StopLat") is float
        assert store.column_type("Stopname") is str

    def test_column_values_in_row_order(self, store):
        assert store.column("name") == ("Eiffel", "Louvre", "Opera")

    def test_unknown_column(self, store):
        with pytest.raises(KeyError):
            store.column("missing")

    def test_no_aliasing(self, store):
        """Mutating returned rows never affects the store."""
        row = store.row("S1")
        row["name"] = "changed"
        names = store.column_names
        names.append("extra")
        assert store.row("S1")["name"] == "Eiffel"
        assert store.column_names == ["id", "lon", "lat", "name"]

    def test_rows_iteration(self, store):
        assert [r["id"] for r in store.rows()] == ["S1", "S2", "S3"]


class TestHelpers:

    @pytest.mark.parametrize("header,expected", [
        ("a;b;c", ";"),
        ("a,b,c", ","),
        ("a\tb\tc", "\t"),
        ("single", ";"),
    ])
    def test_detect_delimiter(self, header, expected):
        assert detect_delimiter(header) == expected

    def test_infer_column_type(self):
        assert infer_column_type(["1", "-2", ""]) is int
        assert infer_column_type(["1.5", "2"]) is float
        assert infer_column_type(["1.5", "x"]) is str
        assert infer_column_type(["nan"]) is str
        assert infer_column_type(["", ""]) is str
