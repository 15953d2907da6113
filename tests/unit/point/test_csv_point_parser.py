"""Unit tests for the CSV point parser (map-drop mode)."""

import pytest

from src.trace_bc.point.domain.entities.point_record import PointRecord
from src.trace_bc.point.infrastructure.services.csv_point_parser import (
    PointParser,
    parse_points,
    parse_coordinate,
    resolve_label_transform,
)
from src.trace_bc.shared.domain.errors import ConfigError


class TestParsePoints:
    """Tests for parse_points."""

    def test_valid_lines(self):
        """Each valid line should give one point with exact coordinates."""
        points = parse_points("2.2945,48.8584,Eiffel\n-0.1276,51.5072,London\n")
        assert len(points) == 2
        assert points[0].longitude == 2.2945
        assert points[0].latitude == 48.8584
        assert points[1].longitude == -0.1276

    def test_default_transform_reverses_label(self):
        """The default label transform reverses the text."""
        points = parse_points("1.0,2.0,abc")
        assert points[0].label == "cba"

    def test_label_keeps_commas(self):
        """The label is free text: further commas belong to it."""
        points = parse_points("1,2,Paris, France", label_transform="identity")
        assert points[0].label == "Paris, France"

    def test_blank_lines_skipped(self):
        """Blank lines are ignored without warnings."""
        parser = PointParser("identity")
        points = parser.parse("\n1,2,a\n\n   \n3,4,b\n")
        assert [p.label for p in points] == ["a", "b"]
        assert parser.warnings == []

    def test_non_numeric_lines_do_not_change_valid_count(self):
        """Adding invalid lines leaves the valid-record count unchanged."""
        valid = "1,2,a\n3,4,b\n"
        noisy = valid + "lon,lat,text\nabc,4,c\n5,xyz,d\nnan,1,e\n1,inf,f\n"
        assert len(parse_points(noisy)) == len(parse_points(valid)) == 2

    def test_invalid_lines_recorded(self):
        """Skipped lines are recorded with their line number."""
        parser = PointParser()
        parser.parse("lon,lat,text\n1,2,a\n3,4\n")
        assert [w.line_number for w in parser.warnings] == [1, 3]

    def test_order_preserved(self):
        """Output order matches input line order."""
        points = parse_points("3,3,c\n1,1,a\n2,2,b", label_transform="identity")
        assert [p.label for p in points] == ["c", "a", "b"]

    def test_no_data(self):
        """No valid line gives an empty list, not an error."""
        assert parse_points("") == []
        assert parse_points("header,only,line") == []

    def test_deterministic(self):
        """Same input gives the same output."""
        text = "1.5,2.5,hello\n3,4,world"
        assert parse_points(text) == parse_points(text)

    def test_point_is_immutable(self):
        """PointRecord is frozen."""
        point = PointRecord(1.0, 2.0, "x")
        with pytest.raises(AttributeError):
            point.label = "y"


class TestLabelTransforms:
    """Tests for the label transform hook."""

    def test_named_transforms(self):
        assert resolve_label_transform("upper")("abc") == "ABC"
        assert resolve_label_transform("strip")("  a ") == "a"
        assert resolve_label_transform("IDENTITY")("abc") == "abc"

    def test_callable_transform(self):
        """A callable can be used directly."""
        points = parse_points("1,2,abc", label_transform=lambda s: f"<{s}>")
        assert points[0].label == "<abc>"

    def test_unknown_transform(self):
        with pytest.raises(ConfigError):
            resolve_label_transform("rot13")


class TestParseCoordinate:

    @pytest.mark.parametrize("value,expected", [
        ("2.5", 2.5),
        (" -3 ", -3.0),
        ("1e2", 100.0),
    ])
    def test_valid(self, value, expected):
        assert parse_coordinate(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "nan", "inf", "-inf"])
    def test_invalid(self, value):
        assert parse_coordinate(value) is None
