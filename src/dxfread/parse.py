from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .entity import Entity, EntityStructure, structure_types
from .errors import ConfigurationError, StructuralError
from .reader import TaggedPair, TaggedReader
from .spec import EntitySpec, SpecRegistry, default_registry, value_type

if TYPE_CHECKING:
    from .document import Document

logger = logging.getLogger(__name__)


class EntityBuilder:
    """Fills entity structures from the tagged pairs of one entity.

    Each pair is offered to the common spec first and to the type spec only
    when the common spec does not claim its group code. Codes claimed by
    neither are dropped.
    """

    def __init__(self, registry: SpecRegistry | None = None) -> None:
        self.registry = default_registry() if registry is None else registry
        self.common = self.registry.common
        self.end_code = self.common.constant("entity_end_code")
        self.structures = {
            name: cls for name, cls in structure_types().items() if name in self.registry
        }
        _check_structures(self.registry, self.structures)

    def parse_entity(
        self, structure: EntityStructure, reader: TaggedReader, type_spec: EntitySpec
    ) -> EntityStructure:
        while True:
            if reader.at_end():
                raise StructuralError(
                    f"{type_spec.name} entity not terminated at line {reader.line_number}"
                )
            pair = reader.next_pair()
            if pair.code == self.end_code:
                reader.push_back(pair)
                return structure
            name = self.common.field_for(pair.code)
            if name is None:
                name = type_spec.field_for(pair.code)
            if name is not None:
                structure.set_field(name, pair.value)

    def build(self, dxftype: str, reader: TaggedReader) -> Entity:
        structure = self.structures[dxftype]()
        self.parse_entity(structure, reader, self.registry.get_spec(dxftype))
        return structure.to_entity()


def _check_structures(
    registry: SpecRegistry, structures: dict[str, type[EntityStructure]]
) -> None:
    for name in registry.entity_types:
        cls = structures.get(name)
        if cls is None:
            raise ConfigurationError(f"no entity structure registered for {name!r}")
        settable = cls.settable_fields()
        missing = [
            field
            for field in (*registry.common.fields, *registry.get_spec(name).fields)
            if field not in settable
        ]
        if missing:
            raise ConfigurationError(f"{cls.__name__} cannot set fields: {', '.join(missing)}")


class _SectionParser:
    section: str = ""

    def __init__(self, registry: SpecRegistry | None = None) -> None:
        self.registry = default_registry() if registry is None else registry
        common = self.registry.common
        self.start_code = common.constant("section_start_code")
        self.end_string = common.constant("section_end_string")

    def _next(self, reader: TaggedReader) -> TaggedPair:
        if reader.at_end():
            raise StructuralError(f"{self.section} section is missing ENDSEC")
        return reader.next_pair()

    def _is_end(self, pair: TaggedPair) -> bool:
        return pair.code == self.start_code and pair.value == self.end_string


class HeaderParser(_SectionParser):
    section = "HEADER"

    def __init__(self, registry: SpecRegistry | None = None) -> None:
        super().__init__(registry)
        self.variable_code = self.registry.common.constant("header_variable_code")

    def parse(self, reader: TaggedReader) -> dict[str, Any]:
        header: dict[str, Any] = {}
        name: str | None = None
        values: list[Any] = []
        while True:
            pair = self._next(reader)
            if self._is_end(pair):
                break
            if pair.code == self.variable_code:
                if name is not None:
                    header[name] = _header_value(values)
                name, values = pair.value, []
            elif name is not None:
                values.append(_typed_value(pair))
        if name is not None:
            header[name] = _header_value(values)
        return header


def _typed_value(pair: TaggedPair) -> Any:
    kind = value_type(pair.code)
    if kind is str:
        return pair.value
    try:
        if kind is bool:
            return int(pair.value) != 0
        if kind is int:
            return int(pair.value)
        return float(pair.value)
    except ValueError:
        # header values are informational; keep what the file says
        return pair.value


def _header_value(values: list[Any]) -> Any:
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return tuple(values)


class EntitySectionParser(_SectionParser):
    section = "ENTITIES"

    def __init__(
        self, registry: SpecRegistry | None = None, builder: EntityBuilder | None = None
    ) -> None:
        super().__init__(registry)
        self.builder = EntityBuilder(self.registry) if builder is None else builder

    def parse(self, reader: TaggedReader) -> list[Entity]:
        entities: list[Entity] = []
        while True:
            pair = self._next(reader)
            if self._is_end(pair):
                return entities
            if pair.code != self.start_code:
                continue
            dxftype = pair.value
            if dxftype in self.builder.structures:
                entities.append(self.builder.build(dxftype, reader))
            else:
                logger.debug("skipping unsupported entity %s at line %d", dxftype, reader.line_number)
                self._skip_entity(reader)

    def _skip_entity(self, reader: TaggedReader) -> None:
        while True:
            pair = self._next(reader)
            if pair.code == self.start_code:
                reader.push_back(pair)
                return


class SectionParser:
    """Walks the top level of a DXF stream and dispatches known sections."""

    def __init__(self, registry: SpecRegistry | None = None) -> None:
        self.registry = default_registry() if registry is None else registry
        common = self.registry.common
        self.start_code = common.constant("section_start_code")
        self.start_string = common.constant("section_start_string")
        self.eof_string = common.constant("eof_string")
        self.header_string = common.constant("header_string")
        self.entities_string = common.constant("entities_string")
        self.header_parser = HeaderParser(self.registry)
        self.entity_parser = EntitySectionParser(self.registry)

    def parse(self, reader: TaggedReader, path: str | None = None) -> "Document":
        from .document import Document

        header: dict[str, Any] = {}
        entities: list[Entity] = []
        carried: TaggedPair | None = None
        while carried is not None or not reader.at_end():
            first = carried if carried is not None else reader.next_pair()
            carried = None
            if self._is_eof(first):
                break
            if reader.at_end():
                break
            second = reader.next_pair()
            if not self._is_section_start(first):
                if self._is_section_start(second) or self._is_eof(second):
                    carried = second
                continue
            name = second.value
            if name == self.header_string:
                header = self.header_parser.parse(reader)
            elif name == self.entities_string:
                entities = self.entity_parser.parse(reader)
            else:
                logger.debug("skipping section %s", name)
        return Document(header=header, entities=tuple(entities), path=path)

    def _is_section_start(self, pair: TaggedPair) -> bool:
        return pair.code == self.start_code and pair.value == self.start_string

    def _is_eof(self, pair: TaggedPair) -> bool:
        return pair.code == self.start_code and pair.value == self.eof_string
