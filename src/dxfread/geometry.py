from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from .errors import StructuralError

_BULGE_EPS = 1e-12
_POINT_EPS = 1e-9
_FULL_TURN = 2.0 * math.pi - 1e-9


def trapezoid_area(x0: float, y0: float, x1: float, y1: float) -> float:
    return (x1 - x0) * (y0 + y1) / 2.0


def circle_segment_area(radius: float, angle: float) -> float:
    return radius * radius * (angle - math.sin(angle)) / 2.0


@dataclass(frozen=True)
class GeoPoint:
    x: float
    y: float
    z: float = 0.0

    def distance_to(self, other: "GeoPoint") -> float:
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


@dataclass(frozen=True)
class Bulge:
    """Arc shape of a segment: ``tan(included_angle / 4)``, signed.

    Zero is a straight segment, a positive value runs counter-clockwise from
    the first point to the second and a negative value clockwise. Radius and
    angle are always derived from the bulge and the segment endpoints.
    """

    value: float = 0.0

    @classmethod
    def from_angle(cls, angle: float) -> "Bulge":
        return cls(math.tan(angle / 4.0))

    @property
    def is_straight(self) -> bool:
        return self.value == 0

    @property
    def direction(self) -> int:
        if self.value > 0:
            return 1
        if self.value < 0:
            return -1
        return 0

    @property
    def angle(self) -> float:
        return 4.0 * math.atan(abs(self.value))

    def radius(self, p0: GeoPoint, p1: GeoPoint) -> float:
        if self.is_straight:
            return math.inf
        return p0.distance_to(p1) / 2.0 / math.sin(self.angle / 2.0)


@dataclass(frozen=True)
class GeoLine:
    """One straight or circular segment from ``point0`` to ``point1``."""

    point0: GeoPoint
    point1: GeoPoint
    bulge: Bulge = Bulge(0.0)

    @classmethod
    def from_arc(
        cls, center: GeoPoint, start_angle: float, end_angle: float, radius: float
    ) -> "GeoLine":
        # angles in radians; a negative sweep is a clockwise arc
        return cls(
            GeoPoint(
                center.x + radius * math.cos(start_angle),
                center.y + radius * math.sin(start_angle),
                center.z,
            ),
            GeoPoint(
                center.x + radius * math.cos(end_angle),
                center.y + radius * math.sin(end_angle),
                center.z,
            ),
            Bulge.from_angle(end_angle - start_angle),
        )

    @classmethod
    def arc_segments(
        cls, center: GeoPoint, start_angle: float, end_angle: float, radius: float
    ) -> tuple["GeoLine", ...]:
        """Segments of an arc in radians; a full turn becomes two half circles."""
        sweep = end_angle - start_angle
        if abs(sweep) < _FULL_TURN:
            return (cls.from_arc(center, start_angle, end_angle, radius),)
        middle = start_angle + math.copysign(math.pi, sweep)
        end = start_angle + math.copysign(2.0 * math.pi, sweep)
        return (
            cls.from_arc(center, start_angle, middle, radius),
            cls.from_arc(center, middle, end, radius),
        )

    @property
    def has_bulge(self) -> bool:
        return abs(self.bulge.value) > _BULGE_EPS

    @property
    def radius(self) -> float:
        return self.bulge.radius(self.point0, self.point1)

    @property
    def angle(self) -> float:
        if self.bulge.is_straight:
            return math.pi
        return self.bulge.angle

    @property
    def length(self) -> float:
        if self.bulge.is_straight:
            return self.point0.distance_to(self.point1)
        return self.radius * self.bulge.angle

    @property
    def chord_area(self) -> float:
        return trapezoid_area(self.point0.x, self.point0.y, self.point1.x, self.point1.y)

    @property
    def arc_area(self) -> float:
        if self.bulge.is_straight:
            return 0.0
        segment = abs(circle_segment_area(self.radius, self.bulge.angle))
        return self.bulge.direction * segment

    @property
    def area(self) -> float:
        if self.bulge.is_straight:
            return self.chord_area
        return abs(circle_segment_area(self.radius, self.bulge.angle))

    @property
    def center(self) -> GeoPoint | None:
        if self.bulge.is_straight:
            return None
        p0, p1 = self.point0, self.point1
        mx, my = (p0.x + p1.x) / 2.0, (p0.y + p1.y) / 2.0
        chord = math.hypot(p1.x - p0.x, p1.y - p0.y)
        if chord == 0:
            return GeoPoint(mx, my, p0.z)
        # signed distance from the chord midpoint to the centre, left of travel
        # for counter-clockwise arcs
        offset = chord / 2.0 * (1.0 - self.bulge.value**2) / (2.0 * self.bulge.value)
        nx, ny = -(p1.y - p0.y) / chord, (p1.x - p0.x) / chord
        return GeoPoint(mx + nx * offset, my + ny * offset, p0.z)

    def reversed(self) -> "GeoLine":
        return GeoLine(self.point1, self.point0, Bulge(-self.bulge.value))

    def __str__(self) -> str:
        p0, p1 = self.point0, self.point1
        return f"P0({p0.x}, {p0.y}, {p0.z}), P1({p1.x}, {p1.y}, {p1.z})"


class GeoPolyline(Sequence[GeoLine]):
    """Ordered chain of segments, built from parallel vertex and bulge lists.

    ``bulges[i]`` shapes the segment leaving vertex ``i``. A closed polyline
    gets one more segment from the last vertex back to the first, shaped by
    the last bulge.

    ``signed_area`` is positive for counter-clockwise vertex order. Each arc
    segment adds its circular segment area when its bulge is positive and
    subtracts it when negative, so an arc bulging away from the interior of
    a counter-clockwise outline grows the area.
    """

    def __init__(
        self,
        x: Sequence[float],
        y: Sequence[float],
        bulges: Sequence[float] | None = None,
        closed: bool = False,
    ) -> None:
        if bulges is None:
            bulges = [0.0] * len(x)
        if len(x) != len(y) or len(x) != len(bulges):
            raise StructuralError(
                f"polyline lists differ in length: x={len(x)} y={len(y)} bulges={len(bulges)}"
            )
        if len(x) < 2:
            raise StructuralError("a polyline needs at least two vertices")

        segments = [
            GeoLine(GeoPoint(x[i], y[i]), GeoPoint(x[i + 1], y[i + 1]), Bulge(bulges[i]))
            for i in range(len(x) - 1)
        ]
        if closed:
            segments.append(
                GeoLine(GeoPoint(x[-1], y[-1]), GeoPoint(x[0], y[0]), Bulge(bulges[-1]))
            )
        self._segments = tuple(segments)
        self.closed = bool(closed)

    @classmethod
    def from_segments(cls, segments: Iterable[GeoLine]) -> "GeoPolyline":
        items = tuple(segments)
        if not items:
            raise StructuralError("a polyline needs at least one segment")
        polyline = cls.__new__(cls)
        polyline._segments = items
        polyline.closed = _touches(items[-1].point1, items[0].point0)
        return polyline

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index):
        return self._segments[index]

    def __iter__(self) -> Iterator[GeoLine]:
        return iter(self._segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeoPolyline):
            return NotImplemented
        return self.closed == other.closed and self._segments == other._segments

    def __hash__(self) -> int:
        return hash((self._segments, self.closed))

    def __repr__(self) -> str:
        return f"GeoPolyline(segments={len(self._segments)}, closed={self.closed})"

    @property
    def segments(self) -> tuple[GeoLine, ...]:
        return self._segments

    @property
    def vertices(self) -> list[GeoPoint]:
        points = [segment.point0 for segment in self._segments]
        if not self.closed:
            points.append(self._segments[-1].point1)
        return points

    @property
    def bulges(self) -> list[float]:
        values = [segment.bulge.value for segment in self._segments]
        if not self.closed:
            values.append(0.0)
        return values

    @property
    def length(self) -> float:
        return sum(segment.length for segment in self._segments)

    @property
    def signed_area(self) -> float:
        total = 0.0
        for segment in self._segments:
            total -= segment.chord_area
            if segment.has_bulge:
                total += segment.arc_area
        return total

    @property
    def area(self) -> float:
        return abs(self.signed_area)


def _touches(a: GeoPoint, b: GeoPoint) -> bool:
    # endpoints computed from cos/sin differ by float noise
    return math.isclose(a.x, b.x, abs_tol=_POINT_EPS) and math.isclose(
        a.y, b.y, abs_tol=_POINT_EPS
    )
