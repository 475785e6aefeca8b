from .document import Document, read, read_stream, read_string
from .entity import Arc, Entity, Line, LwPolyline
from .errors import ConfigurationError, ConversionError, DxfError, SetFieldError, StructuralError
from .geometry import Bulge, GeoLine, GeoPoint, GeoPolyline
from .hatch import Hatch
from .reader import TaggedPair, TaggedReader
from .spec import SpecRegistry, default_registry, load_registry

__all__ = [
    "read",
    "read_stream",
    "read_string",
    "Document",
    "Entity",
    "Line",
    "Arc",
    "LwPolyline",
    "Hatch",
    "GeoPoint",
    "Bulge",
    "GeoLine",
    "GeoPolyline",
    "TaggedPair",
    "TaggedReader",
    "SpecRegistry",
    "default_registry",
    "load_registry",
    "DxfError",
    "StructuralError",
    "SetFieldError",
    "ConversionError",
    "ConfigurationError",
]
