from __future__ import annotations

import math

import pytest

import dxfread
from dxfread.geometry import GeoPoint
from dxfread.hatch import Hatch, HatchStructure
from dxfread.parse import EntityBuilder
from dxfread.spec import default_registry
from tests._dxf_helpers import document, entity, reader_for, section


def _hatch(*groups: tuple[object, object], solid_fill: str = "1") -> str:
    return document(
        section(
            "ENTITIES",
            *entity(
                "HATCH",
                (5, "1A"),
                (100, "AcDbEntity"),
                (8, "FILL"),
                (62, "1"),
                (100, "AcDbHatch"),
                (10, "0.0"),
                (20, "0.0"),
                (30, "5.0"),
                (210, "0.0"),
                (220, "0.0"),
                (230, "1.0"),
                (2, "SOLID"),
                (70, solid_fill),
                (71, "1"),
                *groups,
            ),
        )
    )


def _polyline_path(points: list[tuple[float, float, float]], closed: str = "1", flags: str = "7"):
    groups: list[tuple[object, object]] = [(92, flags), (72, "1"), (73, closed), (93, str(len(points)))]
    for x, y, bulge in points:
        groups.extend([(10, x), (20, y)])
        if bulge:
            groups.append((42, bulge))
    groups.append((97, "0"))
    return groups


_PATTERN = [(75, "1"), (76, "1"), (98, "1"), (10, "2.0"), (20, "2.0")]


def _read_hatch(text: str) -> Hatch:
    doc = dxfread.read_string(text)
    (hatch,) = doc.entities_of_type(Hatch)
    return hatch


@pytest.mark.parametrize(("flag", "expected"), [("1", True), ("0", False), ("2", True), ("17", True)])
def test_solid_fill_flag_is_non_zero_test(flag: str, expected: bool) -> None:
    hatch = _read_hatch(_hatch(solid_fill=flag))

    assert hatch.has_solid_fill is expected


def test_hatch_common_attributes_and_elevation() -> None:
    hatch = _read_hatch(
        _hatch((91, "1"), *_polyline_path([(0, 0, 0), (4, 0, 0), (4, 3, 0), (0, 3, 0)]), *_PATTERN)
    )

    assert hatch.handle == "1A"
    assert hatch.layer == "FILL"
    assert hatch.color == 1
    assert hatch.pattern_name == "SOLID"
    assert hatch.associative is True
    # the seed point after code 98 does not overwrite the elevation point
    assert hatch.elevation_point == GeoPoint(0.0, 0.0, 5.0)
    assert hatch.hatch_style == 1
    assert hatch.pattern_type == 1


def test_polyline_boundary_area() -> None:
    hatch = _read_hatch(
        _hatch((91, "1"), *_polyline_path([(0, 0, 0), (4, 0, 0), (4, 3, 0), (0, 3, 0)]), *_PATTERN)
    )

    assert hatch.boundary is not None
    assert hatch.boundary.closed
    assert len(hatch.boundary) == 4
    assert hatch.area == pytest.approx(12.0)
    assert hatch.boundary.length == pytest.approx(14.0)


def test_polyline_boundary_with_bulges() -> None:
    hatch = _read_hatch(
        _hatch((91, "1"), *_polyline_path([(0, 0, 1.0), (2, 0, 1.0)]), *_PATTERN)
    )

    assert hatch.boundary is not None
    assert hatch.boundary.bulges == [1.0, 1.0]
    assert hatch.area == pytest.approx(math.pi)


def test_edge_boundary_with_lines_and_counter_clockwise_arc() -> None:
    edges = [
        (92, "1"),
        (93, "4"),
        (72, "1"), (10, "0"), (20, "0"), (11, "4"), (21, "0"),
        (72, "1"), (10, "4"), (20, "0"), (11, "4"), (21, "2"),
        (72, "2"), (10, "2"), (20, "2"), (40, "2"), (50, "0"), (51, "180"), (73, "1"),
        (72, "1"), (10, "0"), (20, "2"), (11, "0"), (21, "0"),
        (97, "0"),
    ]

    hatch = _read_hatch(_hatch((91, "1"), *edges, *_PATTERN))

    boundary = hatch.boundary
    assert boundary is not None
    assert len(boundary) == 4
    assert boundary.closed
    arc = boundary[2]
    assert arc.bulge.value == pytest.approx(1.0)
    assert arc.point0.x == pytest.approx(4.0)
    assert arc.point1.x == pytest.approx(0.0)
    assert hatch.area == pytest.approx(8.0 + 2.0 * math.pi)


def test_edge_boundary_with_clockwise_arc() -> None:
    edges = [
        (92, "1"),
        (93, "4"),
        (72, "1"), (10, "0"), (20, "0"), (11, "0"), (21, "2"),
        (72, "2"), (10, "2"), (20, "2"), (40, "2"), (50, "180"), (51, "0"), (73, "0"),
        (72, "1"), (10, "4"), (20, "2"), (11, "4"), (21, "0"),
        (72, "1"), (10, "4"), (20, "0"), (11, "0"), (21, "0"),
        (97, "0"),
    ]

    hatch = _read_hatch(_hatch((91, "1"), *edges, *_PATTERN))

    boundary = hatch.boundary
    assert boundary is not None
    arc = boundary[1]
    assert arc.bulge.value == pytest.approx(-1.0)
    assert arc.point0.x == pytest.approx(0.0)
    assert arc.point1.x == pytest.approx(4.0)
    assert boundary.signed_area < 0
    assert hatch.area == pytest.approx(8.0 + 2.0 * math.pi)


def test_outer_and_inner_boundaries() -> None:
    hatch = _read_hatch(
        _hatch(
            (91, "2"),
            *_polyline_path([(0, 0, 0), (10, 0, 0), (10, 10, 0), (0, 10, 0)], flags="3"),
            *_polyline_path([(2, 2, 0), (4, 2, 0), (4, 4, 0), (2, 4, 0)], flags="2"),
            *_PATTERN,
        )
    )

    assert len(hatch.boundaries) == 2
    assert hatch.area == pytest.approx(100.0)
    assert hatch.boundaries[1].area == pytest.approx(4.0)


def test_ellipse_edge_paths_are_left_out() -> None:
    edges = [
        (92, "1"),
        (93, "1"),
        (72, "3"),
        (10, "0"), (20, "0"), (11, "2"), (21, "0"), (40, "0.5"), (50, "0"), (51, "360"), (73, "1"),
        (97, "0"),
    ]

    hatch = _read_hatch(_hatch((91, "1"), *edges, *_PATTERN))

    assert hatch.boundaries == ()
    assert hatch.boundary is None
    assert hatch.area == 0.0


def test_pattern_definition_fields() -> None:
    pattern = [
        (75, "0"),
        (76, "1"),
        (52, "45.0"),
        (41, "2.5"),
        (77, "0"),
        (78, "1"),
        (53, "45.0"), (43, "0.0"), (44, "0.0"), (45, "-0.0884"), (46, "0.0884"), (79, "0"),
        (98, "0"),
    ]

    hatch = _read_hatch(_hatch((91, "0"), *pattern, solid_fill="0"))

    assert hatch.pattern_angle == pytest.approx(45.0)
    assert hatch.pattern_scale == pytest.approx(2.5)
    assert hatch.has_solid_fill is False
    assert hatch.boundaries == ()


def test_non_numeric_flag_fails_the_parse() -> None:
    with pytest.raises(dxfread.ConversionError):
        dxfread.read_string(_hatch(solid_fill="yes"))


@pytest.mark.parametrize("ccw", ["1", "0"])
def test_full_circle_arc_edge(ccw: str) -> None:
    edges = [
        (92, "1"),
        (93, "1"),
        (72, "2"), (10, "5"), (20, "5"), (40, "2"), (50, "0"), (51, "360"), (73, ccw),
        (97, "0"),
    ]

    hatch = _read_hatch(_hatch((91, "1"), *edges, *_PATTERN))

    boundary = hatch.boundary
    assert boundary is not None
    assert len(boundary) == 2
    assert boundary.closed
    assert all(segment.radius == pytest.approx(2.0) for segment in boundary)
    assert boundary.length == pytest.approx(4.0 * math.pi)
    assert hatch.area == pytest.approx(4.0 * math.pi)


def test_edge_boundary_ending_on_arc_is_closed() -> None:
    edges = [
        (92, "1"),
        (93, "2"),
        (72, "1"), (10, "-1"), (20, "0"), (11, "1"), (21, "0"),
        (72, "2"), (10, "0"), (20, "0"), (40, "1"), (50, "0"), (51, "180"), (73, "1"),
        (97, "0"),
    ]

    hatch = _read_hatch(_hatch((91, "1"), *edges, *_PATTERN))

    boundary = hatch.boundary
    assert boundary is not None
    assert boundary.closed
    assert len(boundary.vertices) == 2
    assert hatch.area == pytest.approx(math.pi / 2.0)


def test_boundary_paths_keep_declared_counts() -> None:
    structure = HatchStructure()
    groups = [
        (91, "2"),
        *_polyline_path([(0, 0, 0), (4, 0, 0), (4, 3, 0)]),
        (92, "1"),
        (93, "1"),
        (72, "1"), (10, "0"), (20, "0"), (11, "1"), (21, "0"),
    ]
    EntityBuilder().parse_entity(
        structure, reader_for([*groups, (0, "ENDSEC")]), default_registry().get_spec("HATCH")
    )

    assert [path.declared_count for path in structure.paths] == [3, 1]
