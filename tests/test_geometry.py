# -*- coding: utf-8 -*-
"""Tests for geometry utilities."""

import copy
import logging
import math

import pytest

from lvtracker_lib.geometry import close_ring
from lvtracker_lib.geometry import copy_feature
from lvtracker_lib.geometry import extract_coordinates
from lvtracker_lib.geometry import extract_rings
from lvtracker_lib.geometry import geodesic_distance
from lvtracker_lib.geometry import line_center
from lvtracker_lib.geometry import line_to_polygon
from lvtracker_lib.geometry import make_geometry
from lvtracker_lib.geometry import multi_line_to_polygon
from lvtracker_lib.geometry import nearest_point_on_line
from lvtracker_lib.geometry import point_in_ring
from lvtracker_lib.geometry import segment_bearing
from tests.conftest import TABLE_OUTLINE
from tests.conftest import line_feature

SQUARE = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]


class TestPointInRing:
    """Tests for point_in_ring function."""

    @pytest.mark.parametrize(
        ("point", "expected"),
        [
            ((1.0, 1.0), True),
            ((0.1, 1.9), True),
            ((3.0, 1.0), False),
            ((-1.0, 1.0), False),
            ((1.0, 5.0), False),
        ],
    )
    def test_square(self, point, expected):
        """Test containment in an open square."""
        assert point_in_ring(point, SQUARE) is expected

    def test_closed_ring(self):
        """Test that closing the ring does not change the answer."""
        assert point_in_ring((1.0, 1.0), close_ring(SQUARE))

    def test_concave(self):
        """Test the notch of a U-shaped ring."""
        ring = [(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]
        assert point_in_ring((0.5, 2.0), ring)
        assert not point_in_ring((1.5, 2.0), ring)

    def test_too_few_vertices(self):
        """Test that rings with fewer than 3 vertices contain nothing."""
        assert not point_in_ring((0.5, 0.0), [(0.0, 0.0), (1.0, 0.0)])

    @pytest.mark.parametrize(
        "point",
        [(0.5, 0.0), (1.0, 0.5), (0.5, 1.0), (0.0, 0.5), (0.0, 0.0), (1.0, 1.0)],
    )
    def test_boundary_is_deterministic(self, point):
        """Test that points on the boundary always get the same answer."""
        ring = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0)]
        first = point_in_ring(point, ring)
        assert isinstance(first, bool)
        assert all(point_in_ring(point, ring) is first for _ in range(5))

    def test_horizontal_edge_at_point_latitude(self):
        """Test a ray running along a horizontal edge."""
        ring = [(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)]
        assert point_in_ring((0.5, 1.0), ring)
        assert not point_in_ring((3.0, 1.0), ring)
        assert point_in_ring((1.5, 1.0), ring) is point_in_ring((1.5, 1.0), ring)


class TestExtractRings:
    """Tests for extract_rings function."""

    def test_polygon(self):
        """Test a polygon with a hole."""
        geometry = {
            "type": "Polygon",
            "coordinates": [
                [[0, 0], [4, 0], [4, 4], [0, 0]],
                [[1, 1], [2, 1], [2, 2], [1, 1]],
            ],
        }
        rings = extract_rings(geometry)
        assert len(rings) == 2
        assert rings[1][0] == (1.0, 1.0)

    def test_multi_polygon(self):
        """Test that member polygons are flattened."""
        geometry = {
            "type": "MultiPolygon",
            "coordinates": [
                [[[0, 0], [1, 0], [1, 1], [0, 0]]],
                [[[5, 5], [6, 5], [6, 6], [5, 5]]],
            ],
        }
        assert len(extract_rings(geometry)) == 2

    def test_lines(self):
        """Test LineString and MultiLineString paths."""
        line = {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}
        assert extract_rings(line) == [[(0.0, 0.0), (1.0, 1.0)]]

        multi = {"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], []]}
        assert extract_rings(multi) == [[(0.0, 0.0), (1.0, 1.0)], []]

    @pytest.mark.parametrize(
        "geometry",
        [None, {}, {"type": "Point", "coordinates": [0, 0]}, {"type": "Unknown"}],
    )
    def test_no_rings(self, geometry):
        """Test geometries without rings."""
        assert extract_rings(geometry) == []

    def test_unreadable_positions(self):
        """Test that malformed positions are dropped."""
        line = {"type": "LineString", "coordinates": [[0, 0], "x", [1], [2, 2]]}
        assert extract_rings(line) == [[(0.0, 0.0), (2.0, 2.0)]]


class TestCloseRing:
    """Tests for close_ring function."""

    def test_open(self):
        """Test that an open ring gets its first vertex appended."""
        closed = close_ring(SQUARE)
        assert len(closed) == 5
        assert closed[-1] == closed[0]

    def test_idempotent(self):
        """Test closing twice."""
        assert close_ring(close_ring(SQUARE)) == close_ring(SQUARE)

    def test_within_epsilon(self):
        """Test that a near-identical last vertex counts as closed."""
        ring = [*SQUARE, (1e-13, 0.0)]
        assert close_ring(ring) == ring

    def test_empty(self):
        assert close_ring([]) == []


class TestLineToPolygon:
    """Tests for line outline conversion."""

    def test_line(self):
        """Test closing a LineString outline."""
        feature = line_feature(TABLE_OUTLINE, name="T1")
        polygon = line_to_polygon(feature)

        assert polygon["geometry"]["type"] == "Polygon"
        ring = polygon["geometry"]["coordinates"][0]
        assert len(ring) == 5
        assert ring[0] == ring[-1] == pytest.approx([10.0001, 45.0001])
        assert polygon["properties"] == {"name": "T1"}

    def test_round_trip(self):
        """Test that the polygon ring is exactly the closed input line."""
        coords = [
            [10.123456789012, 45.1],
            [10.2, 45.187654321098],
            [10.3, 45.3],
        ]
        polygon = line_to_polygon(line_feature(coords))

        assert extract_rings(polygon["geometry"]) == [
            [
                (10.123456789012, 45.1),
                (10.2, 45.187654321098),
                (10.3, 45.3),
                (10.123456789012, 45.1),
            ]
        ]
        assert extract_rings(polygon["geometry"]) == [
            close_ring(extract_rings(line_feature(coords)["geometry"])[0])
        ]

    def test_input_unchanged(self):
        """Test that the source feature is not modified."""
        feature = line_feature(TABLE_OUTLINE, name="T1")
        before = copy.deepcopy(feature)
        line_to_polygon(feature)
        assert feature == before

    @pytest.mark.parametrize(
        "coords",
        [
            [],
            [[0, 0], [1, 1]],
            [[0, 0], [1, 1], [0, 0]],
        ],
    )
    def test_degenerate(self, coords):
        """Test lines with fewer than 3 distinct vertices."""
        assert line_to_polygon(line_feature(coords)) is None

    def test_multi_line(self):
        """Test that degenerate member lines are dropped."""
        feature = {
            "type": "Feature",
            "geometry": {
                "type": "MultiLineString",
                "coordinates": [TABLE_OUTLINE, [[0, 0], [1, 1]]],
            },
            "properties": {},
        }
        polygon = multi_line_to_polygon(feature)
        assert polygon["geometry"]["type"] == "MultiPolygon"
        assert len(polygon["geometry"]["coordinates"]) == 1
        assert len(polygon["geometry"]["coordinates"][0][0]) == 5

    def test_multi_line_all_degenerate(self):
        """Test a MultiLineString without any usable member."""
        feature = {
            "type": "Feature",
            "geometry": {"type": "MultiLineString", "coordinates": [[[0, 0]]]},
            "properties": {},
        }
        assert multi_line_to_polygon(feature) is None


class TestGeoJSONHelpers:
    """Tests for geometry construction helpers."""

    def test_positions_kept(self):
        """Test that positions are stored without rounding."""
        point = make_geometry("Point", [10.123456789012, 45.0])
        assert point["coordinates"] == [10.123456789012, 45.0]
        assert point["type"] == "Point"

    def test_copy_feature_positions_untouched(self):
        """Test that a kept geometry is copied verbatim."""
        feature = {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [
                    [["11.0", "46.0"], [11.123456789, 46.0, None], [11.1, 46.1]]
                ],
            },
            "properties": {},
        }
        copied = copy_feature(feature)

        assert copied["geometry"] == feature["geometry"]
        assert copied["geometry"]["coordinates"] is not (
            feature["geometry"]["coordinates"]
        )

    def test_copy_feature_unknown_geometry(self):
        """Test that unknown geometry types are kept as they are."""
        feature = {
            "type": "Feature",
            "geometry": {"type": "Circle", "center": [0, 0]},
            "properties": {"name": "c"},
        }
        assert copy_feature(feature)["geometry"] == feature["geometry"]

    def test_copy_feature(self):
        """Test that copies do not share properties."""
        feature = line_feature(TABLE_OUTLINE, name="T1")
        copied = copy_feature(feature)
        copied["properties"]["name"] = "T2"
        assert feature["properties"]["name"] == "T1"

    @pytest.mark.parametrize(
        ("position", "expected"),
        [
            ([1, 2], (1.0, 2.0)),
            ([1, 2, 3], (1.0, 2.0)),
            (["1.5", "2"], (1.5, 2.0)),
            ([1], None),
            (["a", "b"], None),
            (None, None),
        ],
    )
    def test_extract_coordinates(self, position, expected):
        """Test reading positions."""
        assert extract_coordinates(position) == expected


class TestNearestPointOnLine:
    """Tests for nearest_point_on_line function."""

    def test_projection(self):
        """Test projecting onto the interior of a segment."""
        line = line_feature([[0.0, 0.0], [1.0, 0.0]])
        result = nearest_point_on_line(line, (0.5, 0.001))

        assert result.segment_index == 0
        assert result.location == pytest.approx((0.5, 0.0))
        assert result.distance_meters == pytest.approx(110.57, rel=1e-3)

    def test_segment_index(self):
        """Test that the closest segment is reported."""
        line = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]]
        result = nearest_point_on_line(line, (1.001, 0.5))
        assert result.segment_index == 1

    def test_endpoint_clamp(self):
        """Test a point beyond the end of the line."""
        result = nearest_point_on_line([[0.0, 0.0], [1.0, 0.0]], (2.0, 0.0))
        assert result.location == pytest.approx((1.0, 0.0))
        assert result.distance_meters == pytest.approx(
            geodesic_distance((1.0, 0.0), (2.0, 0.0))
        )

    def test_tie_keeps_first(self):
        """Test that equal distances keep the first segment."""
        line = [[0.0, 0.0], [1.0, 0.0], [5.0, 5.0], [0.0, 0.0], [1.0, 0.0]]
        result = nearest_point_on_line(line, (0.5, -0.1))
        assert result.segment_index == 0

    def test_geometry_input(self):
        """Test passing a bare geometry."""
        geometry = {"type": "LineString", "coordinates": [[0, 0], [0, 1]]}
        assert nearest_point_on_line(geometry, (0.0, 0.5)).distance_meters == (
            pytest.approx(0.0, abs=1e-6)
        )

    def test_single_vertex(self):
        """Test a line with one vertex."""
        result = nearest_point_on_line([[0.0, 0.0]], (0.0, 1.0))
        assert result.segment_index == 0
        assert result.location == (0.0, 0.0)
        assert result.distance_meters > 0

    def test_empty(self):
        """Test an empty line."""
        result = nearest_point_on_line([], (0.0, 0.0))
        assert math.isinf(result.distance_meters)
        assert result.location is None


class TestSegmentBearing:
    """Tests for segment_bearing function."""

    def test_cardinal(self):
        """Test bearings along the axes."""
        line = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]
        assert segment_bearing(line, 0) == pytest.approx(90.0)
        assert segment_bearing(line, 1) == pytest.approx(0.0, abs=1e-6)
        assert abs(segment_bearing(line, 2)) == pytest.approx(90.0, abs=0.05)
        assert segment_bearing(line, 2) < 0

    def test_clamped_index(self):
        """Test that out of range indices use the nearest segment."""
        line = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]]
        assert segment_bearing(line, 99) == segment_bearing(line, 1)
        assert segment_bearing(line, -3) == segment_bearing(line, 0)

    @pytest.mark.parametrize("coords", [[], [[0.0, 0.0]]])
    def test_short_line(self, coords):
        """Test lines without any segment."""
        assert segment_bearing(coords, 0) == 0.0


class TestLineCenter:
    """Tests for line_center function."""

    def test_closed_ring(self):
        """Test that closed rings use the center of mass."""
        ring = [[0, 0], [4, 0], [4, 1], [1, 1], [1, 4], [0, 4], [0, 0]]
        center = line_center(ring)
        # L-shape, bounding-box midpoint would be (2, 2)
        assert center == pytest.approx((9.5 / 7, 9.5 / 7))

    def test_open_line(self):
        """Test that open lines use the bounding-box midpoint."""
        assert line_center([[0, 0], [4, 2]]) == pytest.approx((2.0, 1.0))

    def test_degenerate_ring(self, caplog):
        """Test the fallback for a closed ring without area."""
        with caplog.at_level(logging.WARNING):
            center = line_center([[0, 0], [1, 1], [2, 2], [0, 0]])
        assert center == pytest.approx((1.0, 1.0))
        assert "Failed to compute polygon center" in caplog.text

    def test_empty(self):
        assert line_center([]) is None
