from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigurationError, ConversionError

COMMON_SPEC_NAME = "COMMON"

COMMON_CONSTANTS = {
    "section_start_code": "0",
    "section_start_string": "SECTION",
    "section_end_string": "ENDSEC",
    "section_name_code": "2",
    "header_string": "HEADER",
    "entities_string": "ENTITIES",
    "eof_string": "EOF",
    "header_variable_code": "9",
    "entity_end_code": "0",
}

COMMON_FIELDS = {
    "handle": "5",
    "line_type": "6",
    "layer": "8",
    "line_type_scale": "48",
    "color": "62",
    "line_weight": "370",
}

ENTITY_SPECS: dict[str, dict[str, str]] = {
    "LINE": {
        "thickness": "39",
        "start_x": "10",
        "start_y": "20",
        "start_z": "30",
        "end_x": "11",
        "end_y": "21",
        "end_z": "31",
    },
    "ARC": {
        "thickness": "39",
        "center_x": "10",
        "center_y": "20",
        "center_z": "30",
        "radius": "40",
        "start_angle": "50",
        "end_angle": "51",
    },
    "LWPOLYLINE": {
        "vertex_count": "90",
        "flags": "70",
        "const_width": "43",
        "elevation": "38",
        "vertex_x": "10",
        "vertex_y": "20",
        "bulge": "42",
    },
    "HATCH": {
        "elevation_x": "10",
        "elevation_y": "20",
        "elevation_z": "30",
        "pattern_name": "2",
        "solid_fill_flag": "70",
        "associative_flag": "71",
        "boundary_path_count": "91",
        "path_type_flag": "92",
        "edge_type": "72",
        "closed_flag": "73",
        "edge_count": "93",
        "bulge": "42",
        "end_x": "11",
        "end_y": "21",
        "radius": "40",
        "start_angle": "50",
        "end_angle": "51",
        "hatch_style": "75",
        "pattern_type": "76",
        "pattern_angle": "52",
        "pattern_scale": "41",
        "seed_count": "98",
    },
}

_FLOAT_RANGES = ((10, 59), (110, 149), (210, 239), (460, 469), (1010, 1059))
_INT_RANGES = (
    (60, 99),
    (160, 179),
    (270, 289),
    (370, 389),
    (400, 409),
    (420, 459),
    (1060, 1071),
)
_BOOL_RANGES = ((290, 299),)


def value_type(code: str) -> type:
    try:
        number = int(code)
    except ValueError:
        raise ConversionError("group_code", code, int) from None
    if any(low <= number <= high for low, high in _FLOAT_RANGES):
        return float
    if any(low <= number <= high for low, high in _INT_RANGES):
        return int
    if any(low <= number <= high for low, high in _BOOL_RANGES):
        return bool
    return str


@dataclass(frozen=True)
class EntitySpec:
    name: str
    fields: Mapping[str, str]
    constants: Mapping[str, str]
    _by_code: Mapping[str, str]

    def field_for(self, code: str) -> str | None:
        return self._by_code.get(code)

    def code_for(self, field: str) -> str:
        try:
            return self.fields[field]
        except KeyError:
            raise ConfigurationError(f"{self.name} spec has no field {field!r}") from None

    def constant(self, key: str) -> str:
        try:
            return self.constants[key]
        except KeyError:
            raise ConfigurationError(f"{self.name} spec has no constant {key!r}") from None


def build_spec(
    name: str, fields: Mapping[str, str], constants: Mapping[str, str] | None = None
) -> EntitySpec:
    by_code: dict[str, str] = {}
    for field, code in fields.items():
        code = str(code).strip()
        if code in by_code:
            raise ConfigurationError(
                f"{name} spec maps both {by_code[code]!r} and {field!r} to group code {code}"
            )
        by_code[code] = field
    return EntitySpec(
        name=name,
        fields=MappingProxyType({field: code for code, field in by_code.items()}),
        constants=MappingProxyType(dict(constants or {})),
        _by_code=MappingProxyType(by_code),
    )


@dataclass(frozen=True)
class SpecRegistry:
    common: EntitySpec
    specs: Mapping[str, EntitySpec]

    def __contains__(self, name: object) -> bool:
        return name in self.specs

    @property
    def entity_types(self) -> tuple[str, ...]:
        return tuple(self.specs)

    def get_spec(self, name: str) -> EntitySpec:
        if name == COMMON_SPEC_NAME:
            return self.common
        try:
            return self.specs[name]
        except KeyError:
            raise ConfigurationError(f"unknown spec: {name!r}") from None


def load_registry(
    common_fields: Mapping[str, str],
    entity_specs: Mapping[str, Mapping[str, str]],
    constants: Mapping[str, str] | None = None,
) -> SpecRegistry:
    common = build_spec(
        COMMON_SPEC_NAME,
        common_fields,
        COMMON_CONSTANTS if constants is None else constants,
    )
    specs = {name: build_spec(name, fields) for name, fields in entity_specs.items()}
    return SpecRegistry(common=common, specs=MappingProxyType(specs))


@lru_cache(maxsize=None)
def default_registry() -> SpecRegistry:
    return load_registry(COMMON_FIELDS, ENTITY_SPECS)
