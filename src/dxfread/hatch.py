from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar

from .entity import Entity, EntityStructure, coerce_value
from .geometry import GeoLine, GeoPoint, GeoPolyline

logger = logging.getLogger(__name__)

PATH_POLYLINE = 2
EDGE_LINE = 1
EDGE_ARC = 2

_ELEVATION = "elevation"
_BOUNDARY = "boundary"
_DONE = "done"


@dataclass(frozen=True)
class Hatch(Entity):
    """Filled area bounded by one or more boundary paths.

    ``boundaries`` holds one polyline per boundary path that could be
    reconstructed; paths made of ellipse or spline edges are left out.
    ``area`` is the area of the first (outermost) path.
    """

    dxftype: ClassVar[str] = "HATCH"

    elevation_point: GeoPoint = GeoPoint(0.0, 0.0)
    pattern_name: str = ""
    has_solid_fill: bool = False
    associative: bool = False
    hatch_style: int = 0
    pattern_type: int = 1
    pattern_angle: float = 0.0
    pattern_scale: float = 1.0
    boundaries: tuple[GeoPolyline, ...] = ()

    @property
    def boundary(self) -> GeoPolyline | None:
        return self.boundaries[0] if self.boundaries else None

    @property
    def area(self) -> float:
        boundary = self.boundary
        return 0.0 if boundary is None else boundary.area


@dataclass
class _Edge:
    edge_type: int
    x: float = 0.0
    y: float = 0.0
    end_x: float = 0.0
    end_y: float = 0.0
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 0.0
    ccw: bool = True

    def to_segments(self) -> tuple[GeoLine, ...] | None:
        if self.edge_type == EDGE_LINE:
            return (GeoLine(GeoPoint(self.x, self.y), GeoPoint(self.end_x, self.end_y)),)
        if self.edge_type != EDGE_ARC:
            return None
        sweep = (self.end_angle - self.start_angle) % 360.0 or 360.0
        start = self.start_angle
        if not self.ccw:
            # clockwise arcs are stored with mirrored angles
            start = -start
            sweep = -sweep
        start_rad = math.radians(start)
        return GeoLine.arc_segments(
            GeoPoint(self.x, self.y), start_rad, start_rad + math.radians(sweep), self.radius
        )


@dataclass
class _BoundaryPath:
    flags: int
    closed: bool = True
    declared_count: int = 0
    xs: list[float] = field(default_factory=list)
    ys: list[float] = field(default_factory=list)
    bulges: list[float] = field(default_factory=list)
    edges: list[_Edge] = field(default_factory=list)

    @property
    def is_polyline(self) -> bool:
        return bool(self.flags & PATH_POLYLINE)

    def to_polyline(self) -> GeoPolyline | None:
        collected = len(self.xs) if self.is_polyline else len(self.edges)
        if collected != self.declared_count:
            logger.debug(
                "hatch boundary path declares %d items, found %d", self.declared_count, collected
            )
        if self.is_polyline:
            return GeoPolyline(self.xs, self.ys, self.bulges, self.closed)
        segments: list[GeoLine] = []
        for edge in self.edges:
            edge_segments = edge.to_segments()
            if edge_segments is None:
                logger.debug("skipping hatch boundary path with edge type %d", edge.edge_type)
                return None
            segments.extend(edge_segments)
        if not segments:
            return None
        return GeoPolyline.from_segments(segments)


@dataclass
class HatchStructure(EntityStructure):
    dxftype: ClassVar[str] = "HATCH"
    FIELD_TYPES: ClassVar[dict[str, type]] = {
        **EntityStructure.FIELD_TYPES,
        "elevation_z": float,
        "pattern_name": str,
        "associative_flag": bool,
        "pattern_angle": float,
        "pattern_scale": float,
    }

    elevation_x: float = 0.0
    elevation_y: float = 0.0
    elevation_z: float = 0.0
    pattern_name: str = ""
    solid_fill_flag: bool = False
    associative_flag: bool = False
    boundary_path_count: int = 0
    hatch_style: int = 0
    pattern_type: int = 1
    pattern_angle: float = 0.0
    pattern_scale: float = 1.0
    seed_count: int = 0
    paths: list[_BoundaryPath] = field(default_factory=list)
    _state: str = field(default=_ELEVATION, init=False, repr=False)
    _edge: _Edge | None = field(default=None, init=False, repr=False)

    @property
    def _path(self) -> _BoundaryPath | None:
        if self._state != _BOUNDARY or not self.paths:
            return None
        return self.paths[-1]

    def _set_solid_fill_flag(self, value: Any) -> None:
        # any non-zero flag means solid fill
        self.solid_fill_flag = coerce_value("solid_fill_flag", value, bool)

    def _set_x(self, value: Any) -> None:
        x = coerce_value("elevation_x", value, float)
        path = self._path
        if self._state == _ELEVATION:
            self.elevation_x = x
        elif path is not None and path.is_polyline:
            path.xs.append(x)
            path.bulges.append(0.0)
        elif self._edge is not None:
            self._edge.x = x

    def _set_y(self, value: Any) -> None:
        y = coerce_value("elevation_y", value, float)
        path = self._path
        if self._state == _ELEVATION:
            self.elevation_y = y
        elif path is not None and path.is_polyline:
            path.ys.append(y)
        elif self._edge is not None:
            self._edge.y = y

    def _start_boundary(self, value: Any) -> None:
        self.boundary_path_count = coerce_value("boundary_path_count", value, int)
        self._state = _BOUNDARY

    def _start_path(self, value: Any) -> None:
        flags = coerce_value("path_type_flag", value, int)
        if self._state == _ELEVATION:
            self._state = _BOUNDARY
        if self._state != _BOUNDARY:
            return
        self._finish_edge()
        self.paths.append(_BoundaryPath(flags=flags))

    def _set_edge_type(self, value: Any) -> None:
        edge_type = coerce_value("edge_type", value, int)
        path = self._path
        if path is None or path.is_polyline:
            # polyline paths use 72 as the has-bulge flag; bulges arrive as 42 either way
            return
        self._finish_edge()
        self._edge = _Edge(edge_type=edge_type)

    def _set_closed_flag(self, value: Any) -> None:
        flag = coerce_value("closed_flag", value, bool)
        path = self._path
        if path is None:
            return
        if path.is_polyline:
            path.closed = flag
        elif self._edge is not None:
            self._edge.ccw = flag

    def _set_edge_count(self, value: Any) -> None:
        count = coerce_value("edge_count", value, int)
        path = self._path
        if path is not None:
            # vertex count for polyline paths, edge count otherwise
            path.declared_count = count

    def _set_bulge(self, value: Any) -> None:
        bulge = coerce_value("bulge", value, float)
        path = self._path
        if path is not None and path.is_polyline and path.bulges:
            path.bulges[-1] = bulge

    def _edge_setter(name: str) -> Callable[[Any, Any], None]:
        def setter(self: "HatchStructure", value: Any) -> None:
            number = coerce_value(name, value, float)
            if self._path is not None and self._edge is not None:
                setattr(self._edge, name, number)

        return setter

    def _end_boundary(name: str) -> Callable[[Any, Any], None]:
        def setter(self: "HatchStructure", value: Any) -> None:
            setattr(self, name, coerce_value(name, value, int))
            self._finish_edge()
            self._state = _DONE

        return setter

    CUSTOM_SETTERS: ClassVar[dict[str, Callable[[Any, Any], None]]] = {
        "elevation_x": _set_x,
        "elevation_y": _set_y,
        "solid_fill_flag": _set_solid_fill_flag,
        "boundary_path_count": _start_boundary,
        "path_type_flag": _start_path,
        "edge_type": _set_edge_type,
        "closed_flag": _set_closed_flag,
        "edge_count": _set_edge_count,
        "bulge": _set_bulge,
        "end_x": _edge_setter("end_x"),
        "end_y": _edge_setter("end_y"),
        "radius": _edge_setter("radius"),
        "start_angle": _edge_setter("start_angle"),
        "end_angle": _edge_setter("end_angle"),
        "hatch_style": _end_boundary("hatch_style"),
        "pattern_type": _end_boundary("pattern_type"),
        "seed_count": _end_boundary("seed_count"),
    }
    del _edge_setter, _end_boundary

    def _finish_edge(self) -> None:
        if self._edge is not None and self.paths:
            self.paths[-1].edges.append(self._edge)
        self._edge = None

    def to_entity(self) -> Hatch:
        self._finish_edge()
        boundaries = []
        for path in self.paths:
            polyline = path.to_polyline()
            if polyline is not None:
                boundaries.append(polyline)
        return Hatch(
            **self.common_attributes(),
            elevation_point=GeoPoint(self.elevation_x, self.elevation_y, self.elevation_z),
            pattern_name=self.pattern_name,
            has_solid_fill=self.solid_fill_flag,
            associative=self.associative_flag,
            hatch_style=self.hatch_style,
            pattern_type=self.pattern_type,
            pattern_angle=self.pattern_angle,
            pattern_scale=self.pattern_scale,
            boundaries=tuple(boundaries),
        )
