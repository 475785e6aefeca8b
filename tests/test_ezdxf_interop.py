from __future__ import annotations

import math
from pathlib import Path

import pytest

import dxfread
from dxfread.entity import Arc, Line, LwPolyline
from dxfread.hatch import Hatch
from tests._dxf_helpers import dxf_entities_of_type, group_float


def _write_sample(path: Path) -> None:
    ezdxf = pytest.importorskip("ezdxf")

    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    msp.add_line((1, 1), (4, 5), dxfattribs={"layer": "WALLS", "color": 3})
    msp.add_arc(center=(0, 0), radius=2, start_angle=0, end_angle=90)
    msp.add_lwpolyline([(0, 0), (4, 0), (4, 3), (0, 3)], close=True)
    msp.add_circle(center=(5, 5), radius=1)

    solid = msp.add_hatch(color=2, dxfattribs={"layer": "FILL"})
    solid.paths.add_polyline_path([(0, 0), (4, 0), (4, 3), (0, 3)], is_closed=True)

    patterned = msp.add_hatch()
    patterned.set_pattern_fill("ANSI31", scale=0.5)
    edge_path = patterned.paths.add_edge_path()
    edge_path.add_line((0, 0), (4, 0))
    edge_path.add_line((4, 0), (4, 2))
    edge_path.add_arc((2, 2), radius=2, start_angle=0, end_angle=180, ccw=True)
    edge_path.add_line((0, 2), (0, 0))

    doc.saveas(str(path))


def test_reads_ezdxf_document(tmp_path: Path) -> None:
    path = tmp_path / "sample.dxf"
    _write_sample(path)

    doc = dxfread.read(str(path))

    assert doc.version == "AC1024"
    assert [e.dxftype for e in doc] == ["LINE", "ARC", "LWPOLYLINE", "HATCH", "HATCH"]
    assert len(dxf_entities_of_type(path, "CIRCLE")) == 1


def test_ezdxf_line_arc_and_lwpolyline(tmp_path: Path) -> None:
    path = tmp_path / "sample.dxf"
    _write_sample(path)

    doc = dxfread.read(str(path))

    (line,) = doc.entities_of_type(Line)
    assert line.layer == "WALLS"
    assert line.color == 3
    assert line.length == pytest.approx(5.0)
    (raw_line,) = dxf_entities_of_type(path, "LINE")
    assert line.end.x == pytest.approx(group_float(raw_line, "11"))

    (arc,) = doc.entities_of_type(Arc)
    assert arc.length == pytest.approx(math.pi)

    (polyline,) = doc.entities_of_type(LwPolyline)
    assert polyline.closed is True
    assert polyline.area == pytest.approx(12.0)


def test_ezdxf_hatches(tmp_path: Path) -> None:
    path = tmp_path / "sample.dxf"
    _write_sample(path)

    doc = dxfread.read(str(path))

    solid, patterned = doc.entities_of_type(Hatch)
    assert solid.has_solid_fill is True
    assert solid.pattern_name == "SOLID"
    assert solid.layer == "FILL"
    assert solid.color == 2
    assert solid.area == pytest.approx(12.0)

    assert patterned.has_solid_fill is False
    assert patterned.pattern_name == "ANSI31"
    assert patterned.pattern_scale == pytest.approx(0.5)
    assert patterned.boundary is not None
    assert len(patterned.boundary) == 4
    assert patterned.area == pytest.approx(8.0 + 2.0 * math.pi)
