from __future__ import annotations

import fnmatch
import io
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, TextIO, TypeVar

from .entity import Entity
from .parse import SectionParser
from .reader import TaggedReader
from .spec import SpecRegistry

E = TypeVar("E", bound=Entity)


def read(
    path: str,
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    registry: SpecRegistry | None = None,
) -> "Document":
    with open(path, encoding=encoding, errors=errors) as stream:
        return read_stream(stream, registry=registry, path=str(path))


def read_stream(
    stream: TextIO, *, registry: SpecRegistry | None = None, path: str | None = None
) -> "Document":
    return SectionParser(registry).parse(TaggedReader(stream), path=path)


def read_string(text: str, *, registry: SpecRegistry | None = None) -> "Document":
    return read_stream(io.StringIO(text), registry=registry)


@dataclass(frozen=True)
class Document:
    header: Mapping[str, Any] = field(default_factory=dict)
    entities: tuple[Entity, ...] = ()
    path: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "header", MappingProxyType(dict(self.header)))
        object.__setattr__(self, "entities", tuple(self.entities))

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    @property
    def version(self) -> str | None:
        return self.header.get("$ACADVER")

    def entities_of_type(self, entity_type: type[E]) -> list[E]:
        return [entity for entity in self.entities if isinstance(entity, entity_type)]

    def query(self, types: str | Iterable[str] | None = None) -> Iterator[Entity]:
        patterns = _normalize_types(types)
        for entity in self.entities:
            if patterns is None or any(
                fnmatch.fnmatchcase(entity.dxftype, pattern) for pattern in patterns
            ):
                yield entity


def _normalize_types(types: str | Iterable[str] | None) -> list[str] | None:
    if types is None:
        return None
    if isinstance(types, str):
        tokens = re.split(r"[,\s]+", types.strip())
    else:
        tokens = list(types)

    normalized = [token.strip().upper() for token in tokens if token and token.strip()]
    if not normalized or any(token in {"*", "ALL"} for token in normalized):
        return None
    return normalized
