from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar

from .errors import ConversionError, SetFieldError
from .geometry import GeoLine, GeoPoint, GeoPolyline

BYLAYER = 256
_LWPOLYLINE_CLOSED = 1


def coerce_value(name: str, value: Any, kind: type) -> Any:
    try:
        if kind is str:
            return value if isinstance(value, str) else str(value)
        if kind is float:
            if isinstance(value, str):
                return float(value.strip())
            return float(value)
        if kind is int:
            return _coerce_int(value)
        if kind is bool:
            return _coerce_int(value) != 0
    except (TypeError, ValueError):
        raise ConversionError(name, value, kind) from None
    raise SetFieldError(f"field {name!r} has unsupported type {kind!r}")


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        return int(value)
    return int(str(value).strip())


@dataclass(frozen=True)
class Entity:
    dxftype: ClassVar[str] = "ENTITY"

    handle: str | None = None
    layer: str = "0"
    line_type: str = "BYLAYER"
    line_type_scale: float = 1.0
    color: int = BYLAYER
    line_weight: int = -1


@dataclass
class EntityStructure:
    """Mutable field bag filled from tagged pairs, one field per group code.

    ``FIELD_TYPES`` lists the settable fields and the type each raw value is
    converted to. ``CUSTOM_SETTERS`` takes precedence for fields whose value
    is not a plain conversion.
    """

    dxftype: ClassVar[str] = "ENTITY"
    FIELD_TYPES: ClassVar[dict[str, type]] = {
        "handle": str,
        "layer": str,
        "line_type": str,
        "line_type_scale": float,
        "color": int,
        "line_weight": int,
    }
    CUSTOM_SETTERS: ClassVar[dict[str, Callable[[Any, Any], None]]] = {}

    handle: str | None = None
    layer: str = "0"
    line_type: str = "BYLAYER"
    line_type_scale: float = 1.0
    color: int = BYLAYER
    line_weight: int = -1

    @classmethod
    def settable_fields(cls) -> set[str]:
        return set(cls.FIELD_TYPES) | set(cls.CUSTOM_SETTERS)

    def set_field(self, name: str, value: Any) -> None:
        setter = self.CUSTOM_SETTERS.get(name)
        if setter is not None:
            setter(self, value)
            return
        kind = self.FIELD_TYPES.get(name)
        if kind is None:
            raise SetFieldError(f"{self.dxftype} has no field {name!r}")
        setattr(self, name, coerce_value(name, value, kind))

    def common_attributes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(Entity)}

    def to_entity(self) -> Entity:
        raise NotImplementedError


@dataclass(frozen=True)
class Line(Entity):
    dxftype: ClassVar[str] = "LINE"

    start: GeoPoint = GeoPoint(0.0, 0.0)
    end: GeoPoint = GeoPoint(0.0, 0.0)
    thickness: float = 0.0

    @property
    def segment(self) -> GeoLine:
        return GeoLine(self.start, self.end)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


@dataclass
class LineStructure(EntityStructure):
    dxftype: ClassVar[str] = "LINE"
    FIELD_TYPES: ClassVar[dict[str, type]] = {
        **EntityStructure.FIELD_TYPES,
        "thickness": float,
        "start_x": float,
        "start_y": float,
        "start_z": float,
        "end_x": float,
        "end_y": float,
        "end_z": float,
    }

    thickness: float = 0.0
    start_x: float = 0.0
    start_y: float = 0.0
    start_z: float = 0.0
    end_x: float = 0.0
    end_y: float = 0.0
    end_z: float = 0.0

    def to_entity(self) -> Line:
        return Line(
            **self.common_attributes(),
            start=GeoPoint(self.start_x, self.start_y, self.start_z),
            end=GeoPoint(self.end_x, self.end_y, self.end_z),
            thickness=self.thickness,
        )


@dataclass(frozen=True)
class Arc(Entity):
    dxftype: ClassVar[str] = "ARC"

    center: GeoPoint = GeoPoint(0.0, 0.0)
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 0.0
    thickness: float = 0.0

    @property
    def sweep(self) -> float:
        # degrees, counter-clockwise; equal angles are a full turn
        sweep = (self.end_angle - self.start_angle) % 360.0
        return 360.0 if sweep == 0 else sweep

    @property
    def length(self) -> float:
        return self.radius * math.radians(self.sweep)

    @property
    def segments(self) -> tuple[GeoLine, ...]:
        start = math.radians(self.start_angle)
        return GeoLine.arc_segments(
            self.center, start, start + math.radians(self.sweep), self.radius
        )


@dataclass
class ArcStructure(EntityStructure):
    dxftype: ClassVar[str] = "ARC"
    FIELD_TYPES: ClassVar[dict[str, type]] = {
        **EntityStructure.FIELD_TYPES,
        "thickness": float,
        "center_x": float,
        "center_y": float,
        "center_z": float,
        "radius": float,
        "start_angle": float,
        "end_angle": float,
    }

    thickness: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0
    center_z: float = 0.0
    radius: float = 0.0
    start_angle: float = 0.0
    end_angle: float = 0.0

    def to_entity(self) -> Arc:
        return Arc(
            **self.common_attributes(),
            center=GeoPoint(self.center_x, self.center_y, self.center_z),
            radius=self.radius,
            start_angle=self.start_angle,
            end_angle=self.end_angle,
            thickness=self.thickness,
        )


@dataclass(frozen=True)
class LwPolyline(Entity):
    dxftype: ClassVar[str] = "LWPOLYLINE"

    elevation: float = 0.0
    closed: bool = False
    const_width: float = 0.0
    polyline: GeoPolyline | None = None

    @property
    def length(self) -> float:
        return 0.0 if self.polyline is None else self.polyline.length

    @property
    def area(self) -> float:
        return 0.0 if self.polyline is None else self.polyline.area


@dataclass
class LwPolylineStructure(EntityStructure):
    dxftype: ClassVar[str] = "LWPOLYLINE"
    FIELD_TYPES: ClassVar[dict[str, type]] = {
        **EntityStructure.FIELD_TYPES,
        "vertex_count": int,
        "flags": int,
        "const_width": float,
        "elevation": float,
    }

    vertex_count: int = 0
    flags: int = 0
    const_width: float = 0.0
    elevation: float = 0.0
    xs: list[float] = field(default_factory=list)
    ys: list[float] = field(default_factory=list)
    bulges: list[float] = field(default_factory=list)

    def _add_vertex_x(self, value: Any) -> None:
        self.xs.append(coerce_value("vertex_x", value, float))
        self.bulges.append(0.0)

    def _set_vertex_y(self, value: Any) -> None:
        y = coerce_value("vertex_y", value, float)
        if len(self.ys) < len(self.xs):
            self.ys.append(y)
        else:
            # y without a preceding x; keep the lists aligned
            self.xs.append(0.0)
            self.ys.append(y)
            self.bulges.append(0.0)

    def _set_bulge(self, value: Any) -> None:
        bulge = coerce_value("bulge", value, float)
        if self.bulges:
            self.bulges[-1] = bulge

    CUSTOM_SETTERS: ClassVar[dict[str, Callable[[Any, Any], None]]] = {
        "vertex_x": _add_vertex_x,
        "vertex_y": _set_vertex_y,
        "bulge": _set_bulge,
    }

    def to_entity(self) -> LwPolyline:
        closed = bool(self.flags & _LWPOLYLINE_CLOSED)
        polyline = None
        if len(self.xs) >= 2:
            polyline = GeoPolyline(self.xs, self.ys, self.bulges, closed)
        return LwPolyline(
            **self.common_attributes(),
            elevation=self.elevation,
            closed=closed,
            const_width=self.const_width,
            polyline=polyline,
        )


def structure_types() -> dict[str, type[EntityStructure]]:
    from .hatch import HatchStructure

    classes = (LineStructure, ArcStructure, LwPolylineStructure, HatchStructure)
    return {cls.dxftype: cls for cls in classes}
